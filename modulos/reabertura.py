# Módulo: reabertura.py
import logging

import numpy as np
import pandas as pd

from modulos.config import (
    SUBTIPOS_VALIDOS,
    SUBTIPOS_ORIGINAIS_REABERTURA,
    SUBTIPOS_CORRETIVA,
    STATUS_VALIDOS,
    STATUS_CANCELADA,
    ACAO_CLIENTE_CANCELOU,
    TIPO_ASSISTENCIA,
)
from modulos.tratamento import (
    converter_data,
    contem_algum,
    padronizar_categoria_servico,
    obter_segmento,
    texto,
)

logger = logging.getLogger(__name__)

COLUNAS_PARES = [
    'codigo_os_original', 'codigo_os_reabertura', 'codigo_cliente',
    'subtipo_original', 'subtipo_reabertura', 'tecnico_original', 'tecnico_reabertura',
    'data_finalizacao_original', 'data_criacao_reabertura', 'tempo_entre_horas', 'dias_entre',
    'categoria_original', 'categoria_reabertura', 'motivo_reabertura', 'cidade', 'bairro',
]


def _coluna(df, nome):
    return df[nome] if nome in df.columns else pd.Series('', index=df.index)


def _preparar_candidatas(df_ordens):
    """Ordens elegíveis ao casamento, com datas convertidas e segmento (TV/FIBRA)."""
    df = df_ordens.copy()
    for col in ['codigo_os', 'codigo_cliente', 'subtipo_servico', 'tipo_servico', 'status',
                'acao_tomada', 'nome_tecnico', 'motivo', 'cidade', 'bairro']:
        df[col] = _coluna(df, col).map(texto)

    cancelada_corretiva = (df['status'] == STATUS_CANCELADA) & df['subtipo_servico'].isin(SUBTIPOS_CORRETIVA)
    if 'include_in_metrics' in df.columns:
        df = df[df['include_in_metrics'].fillna(False).astype(bool) | cancelada_corretiva].copy()

    df = df[df['codigo_cliente'] != ''].copy()
    if df.empty:
        return df

    # 1. Datas (linhas com criação ilegível ficam fora do casamento)
    criacao = _coluna(df, 'data_criacao').map(converter_data)
    finalizacao = _coluna(df, 'data_finalizacao').map(converter_data)
    invalidas = criacao.isna()
    for idx in df.index[invalidas]:
        logger.warning("OS %s fora da análise de reabertura: data de criação inválida", df.at[idx, 'codigo_os'])

    # Cancelada sem finalização: vale a criação
    sem_fin = finalizacao.isna() & (df['status'] == STATUS_CANCELADA)
    finalizacao[sem_fin] = criacao[sem_fin]

    df['_criacao'] = pd.to_datetime(criacao)
    df['_finalizacao'] = pd.to_datetime(finalizacao)
    df = df[~invalidas].copy()

    # 2. Categoria padronizada e segmento
    if 'categoria_servico' not in df.columns:
        df['categoria_servico'] = df['subtipo_servico'].map(padronizar_categoria_servico)
    df['_segmento'] = df['categoria_servico'].map(obter_segmento)
    return df


def _pode_ser_original(ordem):
    if pd.isna(ordem['_finalizacao']):
        return False
    finalizada = contem_algum(ordem['status'], STATUS_VALIDOS) or ordem['status'] == STATUS_CANCELADA
    return (
        finalizada
        and contem_algum(ordem['subtipo_servico'], SUBTIPOS_ORIGINAIS_REABERTURA)
        and ACAO_CLIENTE_CANCELOU not in ordem['acao_tomada']
    )


def dentro_da_janela(data_finalizacao, data_criacao):
    """
    Janela de reabertura: criada depois da finalização da original, no mesmo mês
    dela, ou no dia 1 do mês seguinte quando a original fechou no último dia do mês.
    """
    if data_criacao <= data_finalizacao:
        return False
    if (data_criacao.year, data_criacao.month) == (data_finalizacao.year, data_finalizacao.month):
        return True
    if not data_finalizacao.is_month_end:
        return False
    primeiro_dia_seguinte = (data_finalizacao + pd.offsets.MonthBegin(1)).normalize()
    return data_criacao.normalize() == primeiro_dia_seguinte


def _montar_par(original, reabertura):
    horas = (reabertura['_criacao'] - original['_finalizacao']).total_seconds() / 3600
    tempo_entre_horas = round(horas, 1)
    return {
        'codigo_os_original': original['codigo_os'],
        'codigo_os_reabertura': reabertura['codigo_os'],
        'codigo_cliente': original['codigo_cliente'],
        'subtipo_original': original['subtipo_servico'],
        'subtipo_reabertura': reabertura['subtipo_servico'],
        'tecnico_original': original['nome_tecnico'],
        'tecnico_reabertura': reabertura['nome_tecnico'],
        'data_finalizacao_original': original['_finalizacao'],
        'data_criacao_reabertura': reabertura['_criacao'],
        'tempo_entre_horas': tempo_entre_horas,
        'dias_entre': int(np.floor(tempo_entre_horas / 24)),
        'categoria_original': original['categoria_servico'],
        'categoria_reabertura': reabertura['categoria_servico'],
        'motivo_reabertura': reabertura['motivo'],
        'cidade': reabertura['cidade'],
        'bairro': reabertura['bairro'],
    }


# ==============================================================================
# CASAMENTO ORIGINAL -> REABERTURA
# ==============================================================================
def obter_pares_reabertura(df_ordens, mes=None, ano=None, tipo_original=None):
    """
    Identifica os pares (OS original, OS de reabertura) por cliente e segmento.

    Cada OS é original de no máximo um par (vale o primeiro casamento) e uma
    reabertura é consumida ao casar, mas ainda pode ser original de um par
    seguinte. Ordens com data ilegível ficam de fora com aviso no log.

    Args:
        df_ordens (pd.DataFrame): ordens preparadas por dados.preparar_ordens_servico.
        mes, ano (int, opcional): filtram pela data de criação da reabertura.
        tipo_original (str ou lista, opcional): filtra pelo subtipo da OS original.

    Returns:
        pd.DataFrame: um par por linha (COLUNAS_PARES), reaberturas mais recentes primeiro.
    """
    if df_ordens is None or df_ordens.empty:
        return pd.DataFrame(columns=COLUNAS_PARES)

    df = _preparar_candidatas(df_ordens)
    if df.empty:
        return pd.DataFrame(columns=COLUNAS_PARES)

    pares = []
    for (codigo_cliente, segmento), grupo in df.groupby(['codigo_cliente', '_segmento'], sort=False):
        if not segmento or len(grupo) < 2:
            continue
        ordens = grupo.sort_values(['_criacao', 'codigo_os'], kind='stable').to_dict('records')
        usadas_como_original = set()
        consumidas = set()

        for i, original in enumerate(ordens):
            if original['codigo_os'] in usadas_como_original or not _pode_ser_original(original):
                continue
            for candidata in ordens[i + 1:]:
                if (candidata['codigo_os'] in consumidas
                        or candidata['codigo_os'] == original['codigo_os']
                        or TIPO_ASSISTENCIA not in candidata['tipo_servico']):
                    continue
                if dentro_da_janela(original['_finalizacao'], candidata['_criacao']):
                    pares.append(_montar_par(original, candidata))
                    usadas_como_original.add(original['codigo_os'])
                    consumidas.add(candidata['codigo_os'])
                    break

    df_pares = pd.DataFrame(pares, columns=COLUNAS_PARES)
    logger.info("Reaberturas identificadas: %d pares em %d ordens candidatas", len(df_pares), len(df))

    # Filtros opcionais
    if not df_pares.empty:
        criacao = pd.to_datetime(df_pares['data_criacao_reabertura'])
        filtro = pd.Series(True, index=df_pares.index)
        if mes is not None:
            filtro &= criacao.dt.month == int(mes)
        if ano is not None:
            filtro &= criacao.dt.year == int(ano)
        if tipo_original:
            tipos = [tipo_original] if isinstance(tipo_original, str) else list(tipo_original)
            filtro &= df_pares['subtipo_original'].isin(tipos)
        df_pares = df_pares[filtro]

    return df_pares.sort_values('data_criacao_reabertura', ascending=False, kind='stable').reset_index(drop=True)


# ==============================================================================
# MÉTRICAS DO PAINEL DE REABERTURAS
# ==============================================================================
def _contagem(df_pares, coluna, rotulo):
    if df_pares.empty:
        return pd.DataFrame(columns=[rotulo, 'Reaberturas'])
    contagem = df_pares[coluna].replace('', 'Não informado').value_counts().reset_index()
    contagem.columns = [rotulo, 'Reaberturas']
    return contagem


def calcular_metricas_reabertura(df_ordens, df_pares=None):
    """
    Números do painel de reaberturas.

    A taxa geral é pares / OS elegíveis (em métricas, não canceladas, subtipo
    analisado) * 100. A taxa por subtipo usa as OS originais daquele subtipo.
    """
    if df_pares is None:
        df_pares = obter_pares_reabertura(df_ordens)

    base = df_ordens.copy() if df_ordens is not None else pd.DataFrame()
    if base.empty:
        total_base = 0
    else:
        elegivel = base['include_in_metrics'].fillna(False).astype(bool) if 'include_in_metrics' in base.columns \
            else pd.Series(True, index=base.index)
        base = base[
            elegivel
            & ~base['status'].map(texto).str.contains(STATUS_CANCELADA)
            & base['subtipo_servico'].map(lambda s: contem_algum(s, SUBTIPOS_VALIDOS))
        ]
        total_base = len(base)

    total_reaberturas = len(df_pares)
    taxa = round(total_reaberturas / total_base * 100, 2) if total_base > 0 else 0.0
    tempo_medio = float(df_pares['tempo_entre_horas'].mean()) if total_reaberturas else 0.0

    por_tecnico = _contagem(df_pares, 'tecnico_original', 'Técnico')
    por_tecnico_tv = _contagem(df_pares[df_pares['categoria_original'].map(obter_segmento) == 'TV'],
                               'tecnico_original', 'Técnico')
    por_tecnico_fibra = _contagem(df_pares[df_pares['categoria_original'].map(obter_segmento) == 'FIBRA'],
                                  'tecnico_original', 'Técnico')

    # Taxa por subtipo original: reaberturas / OS daquele subtipo
    por_subtipo_original = _contagem(df_pares, 'subtipo_original', 'Subtipo')
    if not por_subtipo_original.empty:
        volume = base['subtipo_servico'].value_counts() if total_base else pd.Series(dtype=int)
        por_subtipo_original['Total OS'] = por_subtipo_original['Subtipo'].map(volume).fillna(0).astype(int)
        denominador = por_subtipo_original['Total OS'].where(por_subtipo_original['Total OS'] > 0, 1)
        por_subtipo_original['Taxa (%)'] = (por_subtipo_original['Reaberturas'] / denominador * 100).round(2)

    logger.info("Métricas de reabertura: %d reaberturas / %d OS (%.2f%%)", total_reaberturas, total_base, taxa)
    return {
        'total_reaberturas': total_reaberturas,
        'total_ordens': total_base,
        'taxa_reabertura': taxa,
        'tempo_medio_horas': round(tempo_medio, 1),
        'por_tecnico': por_tecnico,
        'por_tecnico_tv': por_tecnico_tv,
        'por_tecnico_fibra': por_tecnico_fibra,
        'por_subtipo_reabertura': _contagem(df_pares, 'subtipo_reabertura', 'Subtipo'),
        'por_subtipo_original': por_subtipo_original,
        'por_cidade': _contagem(df_pares, 'cidade', 'Cidade'),
        'por_bairro': _contagem(df_pares, 'bairro', 'Bairro'),
        'por_motivo': _contagem(df_pares, 'motivo_reabertura', 'Motivo'),
    }
