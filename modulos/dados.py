# Módulo: dados.py
import csv
import io
import logging
import re
import zipfile
from pathlib import Path

import pandas as pd

from modulos.config import (
    EXTENSOES_VALIDAS,
    MAPA_CAMPOS_OS,
    CAMPOS_OBRIGATORIOS_OS,
    ALTERNATIVAS_OS,
    MAPA_CAMPOS_VENDAS,
    CAMPOS_OBRIGATORIOS_VENDAS,
    ALTERNATIVAS_VENDAS,
    MAPA_CAMPOS_PAGAMENTOS,
    CAMPOS_OBRIGATORIOS_PAGAMENTOS,
    ALTERNATIVAS_PAGAMENTOS,
    ABA_VENDAS_PERMANENCIA,
    ABA_VENDAS_META,
    ABA_METAS,
    ABAS_OBRIGATORIAS_METAS,
    CATEGORIAS_META,
    TODOS_SUBTIPOS_VALIDOS,
    SUBTIPOS_VALIDOS,
    SUBTIPOS_CORRETIVA,
    STATUS_VALIDOS,
    STATUS_CANCELADA,
    MOTIVOS_EXCLUIDOS,
    CATEGORIA_NAO_IDENTIFICADA,
    METAS_TEMPO_ATENDIMENTO,
    META_TEMPO_PADRAO,
)
from modulos.tratamento import (
    converter_data,
    normalizar_passo,
    normalizar_cidade,
    normalizar_bairro,
    padronizar_categoria_servico,
    texto,
    contem_algum,
    norm_key,
)
from modulos.feriados import ajustar_tempo_atendimento

logger = logging.getLogger(__name__)


class ErroImportacao(Exception):
    """Erro estrutural de importação (arquivo, aba ou colunas). Nada é importado."""


# ==============================================================================
# LEITURA DE ARQUIVOS
# ==============================================================================
def _nome_arquivo(arquivo):
    # UploadedFile do Streamlit expõe .name; caminhos viram Path
    return getattr(arquivo, 'name', None) or str(arquivo)


def _ler_csv(arquivo):
    if hasattr(arquivo, 'getvalue'):
        raw = arquivo.getvalue().decode('utf-8', errors='ignore')
    else:
        raw = Path(arquivo).read_text(encoding='utf-8', errors='ignore')

    linhas = raw.splitlines()
    if not linhas:
        raise ErroImportacao("Nenhum dado encontrado no arquivo")
    try:
        sep = csv.Sniffer().sniff(linhas[0] + "\n", delimiters=[",", ";"]).delimiter
    except csv.Error:
        sep = ";" if ";" in linhas[0] else ","
    return pd.read_csv(io.StringIO(raw), sep=sep, dtype=str, keep_default_na=False)


def ler_planilha(arquivo, sheet_name=0):
    """Lê .xlsx/.xls/.csv e devolve um DataFrame com cabeçalhos sem espaços nas pontas."""
    nome = _nome_arquivo(arquivo)
    extensao = Path(nome).suffix.lower()
    if extensao not in EXTENSOES_VALIDAS:
        raise ErroImportacao(f"Formato de arquivo inválido ({extensao or 'sem extensão'}). Use .xlsx, .xls ou .csv")

    try:
        if extensao == '.csv':
            df = _ler_csv(arquivo)
        else:
            df = pd.read_excel(arquivo, sheet_name=sheet_name)
    except FileNotFoundError as e:
        raise ErroImportacao(f"Arquivo '{nome}' não encontrado") from e
    except (ValueError, zipfile.BadZipFile, OSError) as e:
        # Aba inexistente, arquivo corrompido ou formato não reconhecido
        raise ErroImportacao(f"Erro ao ler '{nome}': {e}") from e

    if df.empty:
        raise ErroImportacao("Nenhum dado encontrado no arquivo")

    df.columns = [str(c).strip() for c in df.columns]
    logger.info("Lido '%s': %d registros, colunas=%s", nome, len(df), list(df.columns))
    return df


def validar_colunas(df, obrigatorias, alternativas=None):
    """
    Renomeia cabeçalhos alternativos para o nome canônico e confere as colunas obrigatórias.
    Levanta ErroImportacao com TODAS as colunas ausentes.
    """
    df = df.copy()
    renomear = {}
    for canonica, opcoes in (alternativas or {}).items():
        if canonica in df.columns:
            continue
        for opcao in opcoes:
            if opcao in df.columns and opcao not in renomear:
                renomear[opcao] = canonica
                break
    if renomear:
        df = df.rename(columns=renomear)

    ausentes = [col for col in obrigatorias if col not in df.columns]
    if ausentes:
        raise ErroImportacao(f"Campos obrigatórios ausentes na planilha: {', '.join(ausentes)}")
    return df


def _mapear_colunas(df, mapa):
    """Renomeia para as colunas internas e cria as opcionais ausentes vazias."""
    df = df.rename(columns={k: v for k, v in mapa.items() if k in df.columns})
    for coluna in mapa.values():
        if coluna not in df.columns:
            df[coluna] = ''
    return df[list(dict.fromkeys(mapa.values()))].copy()


def _converter_codigo(valor):
    # Excel devolve códigos numéricos como float (123.0)
    s = texto(valor)
    return s[:-2] if re.fullmatch(r'\d+\.0', s) else s


def _converter_valor(valor):
    """Converte '1.234,56', '1234.56' ou 'R$ 99,90' em float; inválidos viram 0."""
    if isinstance(valor, (int, float)) and not pd.isna(valor):
        return float(valor)
    s = re.sub(r'[^0-9,.\-]', '', texto(valor))
    if not s:
        return 0.0
    if ',' in s:
        s = s.replace('.', '').replace(',', '.')
    try:
        return float(s)
    except ValueError:
        logger.warning("Valor numérico inválido: %r (considerado 0)", valor)
        return 0.0


# ==============================================================================
# MATERIAIS (coluna "Materiais": "NOME:QTD; NOME:QTD")
# ==============================================================================
def parse_materiais(valor, codigo_os=''):
    if isinstance(valor, list):
        return [dict(m) for m in valor]
    s = texto(valor)
    if not s:
        return []

    materiais = []
    for item in s.split(';'):
        item = item.strip()
        if not item:
            continue
        nome, sep, qtd = item.rpartition(':')
        if not sep:
            nome, qtd = item, '1'
        try:
            quantidade = float(qtd.strip().replace(',', '.'))
        except ValueError:
            logger.warning("OS %s: quantidade inválida para material %r", codigo_os, item)
            continue
        if quantidade.is_integer():
            quantidade = int(quantidade)
        materiais.append({'nome': nome.strip(), 'quantidade': quantidade})
    return materiais


# ==============================================================================
# ORDENS DE SERVIÇO
# ==============================================================================
def _calcular_tempo(row):
    """Tempo de atendimento ajustado, meta e flag de inclusão nas métricas de uma OS."""
    if row['status'] == STATUS_CANCELADA:
        # OS cancelada só participa da análise de reabertura
        return pd.Series({'tempo_atendimento': None, 'atingiu_meta': False, 'include_in_metrics': False})

    is_subtipo_metricas = contem_algum(row['subtipo_servico'], SUBTIPOS_VALIDOS)
    if pd.isna(row['data_criacao']) or pd.isna(row['data_finalizacao']) or not is_subtipo_metricas:
        return pd.Series({'tempo_atendimento': None, 'atingiu_meta': False, 'include_in_metrics': is_subtipo_metricas})

    categoria = row['categoria_servico']
    horas_brutas = (row['data_finalizacao'] - row['data_criacao']).total_seconds() / 3600
    horas = ajustar_tempo_atendimento(horas_brutas, row['data_criacao'], row['data_finalizacao'], categoria)
    meta = METAS_TEMPO_ATENDIMENTO.get(categoria, META_TEMPO_PADRAO)

    return pd.Series({
        'tempo_atendimento': round(horas, 2),
        'atingiu_meta': horas <= meta,
        'include_in_metrics': categoria != CATEGORIA_NAO_IDENTIFICADA,
    })


def _ordem_valida(row):
    """Filtro de importação das ordens de serviço."""
    if row['status'] == STATUS_CANCELADA:
        return row['subtipo_servico'] in SUBTIPOS_CORRETIVA and pd.notna(row['data_criacao'])
    if pd.isna(row['data_finalizacao']):
        return False
    return (
        contem_algum(row['subtipo_servico'], TODOS_SUBTIPOS_VALIDOS)
        and contem_algum(row['status'], STATUS_VALIDOS)
        and not contem_algum(row['motivo'], MOTIVOS_EXCLUIDOS)
    )


def preparar_ordens_servico(df_bruto):
    """
    Valida, mapeia e enriquece a planilha de ordens de serviço.

    Returns:
        pd.DataFrame: uma linha por (codigo_os, codigo_item), com datas convertidas,
        categoria padronizada, tempo de atendimento e lista de materiais.
    """
    df = df_bruto.copy()
    df.columns = [str(c).strip() for c in df.columns]

    # "Finalização" só é dispensável quando todas as OS são canceladas
    tem_finalizacao = 'Finalização' in df.columns or any(a in df.columns for a in ALTERNATIVAS_OS['Finalização'])
    if not tem_finalizacao and 'Status' in df.columns and (df['Status'].map(texto) == STATUS_CANCELADA).all():
        logger.info("Todas as ordens são canceladas: campo 'Finalização' não é obrigatório")
        df['Finalização'] = ''

    df = validar_colunas(df, CAMPOS_OBRIGATORIOS_OS, ALTERNATIVAS_OS)
    df = _mapear_colunas(df, MAPA_CAMPOS_OS)
    total_lido = len(df)

    colunas_texto = [c for c in df.columns if c not in ('data_criacao', 'data_finalizacao', 'materiais')]
    for col in colunas_texto:
        df[col] = df[col].map(texto)
    df['codigo_os'] = df['codigo_os'].map(_converter_codigo)
    df['codigo_item'] = df['codigo_item'].map(_converter_codigo)
    df['codigo_cliente'] = df['codigo_cliente'].map(_converter_codigo)

    # 1. Datas (registro com data ilegível é descartado com aviso)
    criacao_bruta = df['data_criacao']
    finalizacao_bruta = df['data_finalizacao']
    df['data_criacao'] = pd.to_datetime(criacao_bruta.map(converter_data))
    df['data_finalizacao'] = pd.to_datetime(finalizacao_bruta.map(converter_data))

    for idx in df.index[df['data_criacao'].isna()]:
        logger.warning("OS %s descartada: data de criação inválida (%r)", df.at[idx, 'codigo_os'], criacao_bruta.at[idx])
    invalida_fin = df['data_finalizacao'].isna() & finalizacao_bruta.map(texto).ne('')
    for idx in df.index[invalida_fin]:
        logger.warning("OS %s: data de finalização inválida (%r)", df.at[idx, 'codigo_os'], finalizacao_bruta.at[idx])
    df = df[df['data_criacao'].notna()].copy()

    # 2. Corretivas canceladas sem finalização usam a data de criação
    sem_fin = (
        (df['status'] == STATUS_CANCELADA)
        & df['subtipo_servico'].isin(SUBTIPOS_CORRETIVA)
        & df['data_finalizacao'].isna()
    )
    df.loc[sem_fin, 'data_finalizacao'] = df.loc[sem_fin, 'data_criacao']

    # 3. Filtros de importação
    if not df.empty:
        df = df[df.apply(_ordem_valida, axis=1)].copy()

    # 4. Enriquecimento
    df['materiais'] = pd.Series(
        [parse_materiais(m, c) for m, c in zip(df['materiais'], df['codigo_os'])], index=df.index, dtype=object
    )
    df['categoria_servico'] = df['subtipo_servico'].map(padronizar_categoria_servico)
    df['cidade'] = df['cidade'].map(normalizar_cidade)
    df['bairro'] = df['bairro'].map(normalizar_bairro)
    if df.empty:
        for col in ['tempo_atendimento', 'atingiu_meta', 'include_in_metrics']:
            df[col] = pd.Series(dtype=object)
    else:
        df[['tempo_atendimento', 'atingiu_meta', 'include_in_metrics']] = df.apply(_calcular_tempo, axis=1)

    # 5. Duplicidade por (codigo_os, codigo_item)
    antes = len(df)
    df = df.drop_duplicates(subset=['codigo_os', 'codigo_item'], keep='first').reset_index(drop=True)
    if len(df) < antes:
        logger.warning("%d linhas duplicadas (codigo_os, codigo_item) ignoradas", antes - len(df))

    logger.info("Importadas %d ordens de serviço válidas de um total de %d", len(df), total_lido)
    return df


# ==============================================================================
# VENDAS E PAGAMENTOS
# ==============================================================================
def preparar_vendas(df_bruto, data_referencia=None):
    """Valida e converte a planilha de vendas. Calcula dias corridos desde a habilitação."""
    df = validar_colunas(df_bruto, CAMPOS_OBRIGATORIOS_VENDAS, ALTERNATIVAS_VENDAS)
    df = _mapear_colunas(df, MAPA_CAMPOS_VENDAS)

    for col in df.columns:
        if col not in ('valor', 'data_habilitacao'):
            df[col] = df[col].map(texto)
    df['numero_proposta'] = df['numero_proposta'].map(_converter_codigo)
    df['id_vendedor'] = df['id_vendedor'].map(_converter_codigo)
    df['valor'] = df['valor'].map(_converter_valor)

    bruta = df['data_habilitacao']
    df['data_habilitacao'] = bruta.map(converter_data)
    for idx in df.index[df['data_habilitacao'].isna()]:
        logger.warning("Venda %s descartada: data de habilitação inválida (%r)", df.at[idx, 'numero_proposta'], bruta.at[idx])
    df = df[df['data_habilitacao'].notna()].copy()
    df['data_habilitacao'] = pd.to_datetime(df['data_habilitacao'])

    hoje = pd.Timestamp(data_referencia) if data_referencia is not None else pd.Timestamp.now()
    df['dias_corridos'] = (hoje.normalize() - df['data_habilitacao'].dt.normalize()).dt.days.abs()

    antes = len(df)
    df = df.drop_duplicates(subset=['numero_proposta'], keep='first').reset_index(drop=True)
    if len(df) < antes:
        logger.warning("%d propostas duplicadas ignoradas", antes - len(df))
    logger.info("Importadas %d vendas", len(df))
    return df


def preparar_pagamentos(df_bruto, data_importacao=None):
    """Valida e converte a planilha de primeiro pagamento (passo de cobrança e status do pacote)."""
    df = validar_colunas(df_bruto, CAMPOS_OBRIGATORIOS_PAGAMENTOS, ALTERNATIVAS_PAGAMENTOS)
    df = _mapear_colunas(df, MAPA_CAMPOS_PAGAMENTOS)

    for col in df.columns:
        df[col] = df[col].map(texto)
    df['proposta'] = df['proposta'].map(_converter_codigo)
    df['passo'] = df['passo'].map(normalizar_passo)
    df['status_pacote'] = df['status_pacote'].str.upper()
    df['data_importacao'] = pd.Timestamp(data_importacao) if data_importacao is not None else pd.Timestamp.now()

    sem_proposta = df['proposta'] == ''
    if sem_proposta.any():
        logger.warning("%d pagamentos sem número de proposta descartados", int(sem_proposta.sum()))
    df = df[~sem_proposta].drop_duplicates(subset=['proposta'], keep='last').reset_index(drop=True)
    logger.info("Importados %d pagamentos", len(df))
    return df


# ==============================================================================
# METAS (planilha com as abas VENDAS PERMANENCIA, VENDAS META e METAS)
# ==============================================================================
def preparar_tabela_metas(df_bruto):
    df = df_bruto.copy()
    df.columns = [norm_key(c).replace(' ', '_') for c in df.columns]
    ausentes = [c for c in ['mes', 'ano'] if c not in df.columns]
    if ausentes:
        raise ErroImportacao(f"Aba '{ABA_METAS}' sem as colunas: {', '.join(ausentes)}")

    for col in ['mes', 'ano'] + CATEGORIAS_META + ['total']:
        if col not in df.columns:
            df[col] = 0
        df[col] = pd.to_numeric(df[col], errors='coerce').fillna(0)
    df['mes'] = df['mes'].astype(int)
    df['ano'] = df['ano'].astype(int)

    # Total ausente ou zerado = soma das categorias
    sem_total = df['total'] <= 0
    df.loc[sem_total, 'total'] = df.loc[sem_total, CATEGORIAS_META].sum(axis=1)

    invalidas = ~df['mes'].between(1, 12)
    if invalidas.any():
        logger.warning("%d linhas de meta com mês inválido descartadas", int(invalidas.sum()))
    return df.loc[~invalidas, ['mes', 'ano'] + CATEGORIAS_META + ['total']].reset_index(drop=True)


def preparar_vendas_meta(df_bruto):
    from modulos.metas import mapear_categoria_meta

    df = validar_colunas(
        df_bruto,
        ['Número da proposta', 'Valor', 'Data da venda'],
        {'Número da proposta': ALTERNATIVAS_VENDAS['Número da proposta'], 'Data da venda': ['Data venda', 'Data']},
    )
    saida = pd.DataFrame({
        'numero_proposta': df['Número da proposta'].map(_converter_codigo),
        'valor': df['Valor'].map(_converter_valor),
        'data_venda': df['Data da venda'].map(converter_data),
        'vendedor': df.get('Vendedor', pd.Series('', index=df.index)).map(texto),
        'produto': df.get('Produto', pd.Series('', index=df.index)).map(texto),
        'categoria': df.get('Categoria', pd.Series('', index=df.index)).map(texto),
    })
    saida['categoria'] = [mapear_categoria_meta(c, p) for c, p in zip(saida['categoria'], saida['produto'])]

    invalidas = saida['data_venda'].isna()
    for proposta in saida.loc[invalidas, 'numero_proposta']:
        logger.warning("Venda meta %s descartada: data da venda inválida", proposta)
    saida = saida[~invalidas].copy()
    saida['data_venda'] = pd.to_datetime(saida['data_venda'])
    saida['mes'] = saida['data_venda'].dt.month
    saida['ano'] = saida['data_venda'].dt.year
    return saida.drop_duplicates(subset=['numero_proposta'], keep='first').reset_index(drop=True)


def preparar_metas(arquivo, data_referencia=None):
    """
    Importa a planilha de metas. As três abas são obrigatórias; se faltar alguma
    nada é importado.

    Returns:
        dict: {'vendas_permanencia', 'vendas_meta', 'metas'} -> DataFrames
    """
    nome = _nome_arquivo(arquivo)
    if Path(nome).suffix.lower() not in ('.xlsx', '.xls'):
        raise ErroImportacao("A importação de metas exige uma planilha Excel (.xlsx ou .xls)")

    try:
        abas = pd.read_excel(arquivo, sheet_name=None)
    except FileNotFoundError as e:
        raise ErroImportacao(f"Arquivo '{nome}' não encontrado") from e
    except (ValueError, zipfile.BadZipFile, OSError) as e:
        raise ErroImportacao(f"Erro ao ler '{nome}': {e}") from e

    abas = {str(k).strip().upper(): v for k, v in abas.items()}
    ausentes = [aba for aba in ABAS_OBRIGATORIAS_METAS if aba not in abas]
    if ausentes:
        raise ErroImportacao(f"Abas obrigatórias ausentes: {', '.join(ausentes)}")

    for aba in ABAS_OBRIGATORIAS_METAS:
        abas[aba].columns = [str(c).strip() for c in abas[aba].columns]

    resultado = {
        'vendas_permanencia': preparar_vendas(abas[ABA_VENDAS_PERMANENCIA], data_referencia),
        'vendas_meta': preparar_vendas_meta(abas[ABA_VENDAS_META]),
        'metas': preparar_tabela_metas(abas[ABA_METAS]),
    }
    logger.info(
        "Metas importadas: %d vendas permanência, %d vendas meta, %d metas",
        len(resultado['vendas_permanencia']), len(resultado['vendas_meta']), len(resultado['metas']),
    )
    return resultado


# ==============================================================================
# MESCLAGEM COM OS DADOS JÁ CARREGADOS (append x substituição)
# ==============================================================================
def _mesclar_por_chave(df_atual, df_novo, chave, descricao, append):
    if not append or df_atual is None or df_atual.empty:
        return df_novo.reset_index(drop=True)
    existentes = set(df_atual[chave])
    novos = df_novo[~df_novo[chave].isin(existentes)]
    logger.info(
        "Adicionadas %d novas %s (%d duplicadas ignoradas)",
        len(novos), descricao, len(df_novo) - len(novos),
    )
    return pd.concat([df_atual, novos], ignore_index=True)


def mesclar_ordens(df_atual, df_novo, append=True):
    return _mesclar_por_chave(df_atual, df_novo, 'codigo_os', 'ordens de serviço', append)


def mesclar_vendas(df_atual, df_novo, append=True):
    return _mesclar_por_chave(df_atual, df_novo, 'numero_proposta', 'vendas', append)


def mesclar_pagamentos(df_atual, df_novo, append=True):
    """Mantém, por proposta, o registro com a data de importação mais recente (empate: o existente)."""
    if not append or df_atual is None or df_atual.empty:
        return df_novo.reset_index(drop=True)
    combinado = pd.concat([df_novo, df_atual], ignore_index=True)
    combinado = combinado.sort_values('data_importacao', kind='stable')
    resultado = combinado.drop_duplicates(subset=['proposta'], keep='last')
    logger.info("Processados %d pagamentos. Resultado final: %d registros", len(df_novo), len(resultado))
    return resultado.sort_index().reset_index(drop=True)
