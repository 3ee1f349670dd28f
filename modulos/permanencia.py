# Módulo: permanencia.py
import logging

import numpy as np
import pandas as pd

from modulos.config import (
    MESES_PERMANENCIA,
    DIAS_VENCIMENTO_INCLUSAO,
    FAMILIA_POS,
    FAMILIA_FIBRA,
    ADIMPLENTE,
    INADIMPLENTE,
    CANCELADO,
    CLASSIFICACOES,
    JANELA_OPORTUNIDADE,
    PASSOS_OURO,
    PASSOS_BRONZE,
    NOMES_MESES,
)
from modulos.tratamento import converter_data, normalizar_passo, texto

logger = logging.getLogger(__name__)

OURO = 'ouro'
BRONZE = 'bronze'


# ==============================================================================
# REGRAS DE CLASSIFICAÇÃO
# ==============================================================================
def classificar_pagamento(status_pacote, passo, data_passo_cobranca):
    """
    Situação do cliente a partir do primeiro pagamento (primeira regra que casar):

    1. status C -> cancelado
    2. status S -> inadimplente
    3. status N sem data de passo de cobrança -> adimplente
    4. passo 0 ou 1 -> adimplente
    5. status NC (ou I, inclusão) -> adimplente
    6. demais -> inadimplente
    """
    status = texto(status_pacote).upper()
    passo = normalizar_passo(passo)

    if status == 'C':
        return CANCELADO
    if status == 'S':
        return INADIMPLENTE
    if status == 'N' and not texto(data_passo_cobranca):
        return ADIMPLENTE
    if passo in ('0', '1'):
        return ADIMPLENTE
    if status in ('NC', 'I'):
        return ADIMPLENTE
    return INADIMPLENTE


def calcular_periodo_permanencia(data_habilitacao):
    """(mês, ano) em que a venda é avaliada: habilitação + 4 meses. Data inválida -> (None, None)."""
    data = converter_data(data_habilitacao)
    if data is None:
        return None, None
    # DateOffset fixa no último dia do mês quando o dia não existe (31/10 -> 28/02)
    alvo = data + pd.DateOffset(months=MESES_PERMANENCIA)
    return alvo.month, alvo.year


def obter_familia(agrupamento_produto, produto_principal=''):
    """Família do produto (POS ou BL-DGO) pelo agrupamento ou pelo produto principal."""
    agrupamento = texto(agrupamento_produto)
    produto = texto(produto_principal)
    if FAMILIA_POS in agrupamento or FAMILIA_POS in produto:
        return FAMILIA_POS
    if FAMILIA_FIBRA in agrupamento or FAMILIA_FIBRA in produto:
        return FAMILIA_FIBRA
    return ''


def _familias(df_vendas):
    produto = df_vendas['produto_principal'] if 'produto_principal' in df_vendas.columns \
        else pd.Series('', index=df_vendas.index)
    return pd.Series(
        [obter_familia(a, p) for a, p in zip(df_vendas['agrupamento_produto'], produto)],
        index=df_vendas.index,
    )


def classificar_oportunidade(familia, classificacao, dias_desde_habilitacao, passo):
    """ouro: POS inadimplente entre 91 e 120 dias no passo 2 ou 3. bronze: idem no passo 4."""
    if familia != FAMILIA_POS or classificacao != INADIMPLENTE:
        return None
    if dias_desde_habilitacao is None or pd.isna(dias_desde_habilitacao):
        return None
    inicio, fim = JANELA_OPORTUNIDADE
    if not inicio <= dias_desde_habilitacao <= fim:
        return None
    passo = normalizar_passo(passo)
    if passo in PASSOS_OURO:
        return OURO
    if passo in PASSOS_BRONZE:
        return BRONZE
    return None


# ==============================================================================
# INCLUSÕES (BL-DGO SEM PRIMEIRO PAGAMENTO)
# ==============================================================================
def gerar_inclusoes(df_vendas, df_pagamentos):
    """Registros de pagamento sintéticos para vendas BL-DGO sem pagamento: passo 0, status I."""
    colunas = ['proposta', 'passo', 'data_passo_cobranca', 'vencimento_fatura', 'status_pacote']
    if df_vendas is None or df_vendas.empty:
        return pd.DataFrame(columns=colunas)

    vendas = df_vendas.copy()
    com_pagamento = set(df_pagamentos['proposta']) if df_pagamentos is not None and not df_pagamentos.empty else set()
    vendas = vendas[(_familias(vendas) == FAMILIA_FIBRA) & ~vendas['numero_proposta'].isin(com_pagamento)]

    inclusoes = []
    for proposta, habilitacao in zip(vendas['numero_proposta'], vendas['data_habilitacao']):
        data = converter_data(habilitacao)
        if data is None:
            logger.warning("Inclusão %s ignorada: data de habilitação inválida", proposta)
            continue
        inclusoes.append({
            'proposta': proposta,
            'passo': '0',
            'data_passo_cobranca': '',
            'vencimento_fatura': data + pd.Timedelta(days=DIAS_VENCIMENTO_INCLUSAO),
            'status_pacote': 'I',
        })

    if inclusoes:
        logger.info("Geradas %d inclusões BL-DGO sem pagamento", len(inclusoes))
    return pd.DataFrame(inclusoes, columns=colunas)


# ==============================================================================
# CLASSIFICAÇÃO DAS VENDAS
# ==============================================================================
def classificar_vendas(df_vendas, df_pagamentos, data_referencia=None):
    """
    Casa cada venda com o primeiro pagamento (pela proposta) e acrescenta:
    familia, passo, status_pacote, classificacao, mes_permanencia, ano_permanencia,
    dias_desde_habilitacao e oportunidade.

    BL-DGO sem pagamento vira inclusão (adimplente); as demais vendas sem
    pagamento ficam com classificacao None.
    """
    colunas_saida = ['familia', 'passo', 'status_pacote', 'classificacao', 'mes_permanencia',
                     'ano_permanencia', 'dias_desde_habilitacao', 'oportunidade']
    if df_vendas is None or df_vendas.empty:
        return pd.DataFrame(columns=list(getattr(df_vendas, 'columns', [])) + colunas_saida)

    df = df_vendas.copy()
    df['familia'] = _familias(df)

    pagamentos = df_pagamentos.copy() if df_pagamentos is not None else pd.DataFrame()
    if pagamentos.empty:
        pagamentos = pd.DataFrame(columns=['proposta', 'passo', 'data_passo_cobranca', 'status_pacote'])
    inclusoes = gerar_inclusoes(df, pagamentos)
    pagamentos = pd.concat([pagamentos, inclusoes], ignore_index=True).drop_duplicates('proposta', keep='first')
    pagamentos = pagamentos.set_index('proposta')

    casados = df['numero_proposta'].isin(pagamentos.index)
    for col in ['passo', 'status_pacote', 'data_passo_cobranca']:
        origem = pagamentos[col] if col in pagamentos.columns else pd.Series('', index=pagamentos.index)
        df[col] = df['numero_proposta'].map(origem).map(texto)

    # dtype object mantém None para vendas sem pagamento (não vira NaN)
    df['classificacao'] = pd.Series([
        classificar_pagamento(s, p, d) if casado else None
        for casado, s, p, d in zip(casados, df['status_pacote'], df['passo'], df['data_passo_cobranca'])
    ], index=df.index, dtype=object)
    df['passo'] = df['passo'].map(normalizar_passo)

    periodos = [calcular_periodo_permanencia(d) for d in df['data_habilitacao']]
    df['mes_permanencia'] = [p[0] for p in periodos]
    df['ano_permanencia'] = [p[1] for p in periodos]

    hoje = pd.Timestamp(data_referencia) if data_referencia is not None else pd.Timestamp.now()
    habilitacao = pd.to_datetime(df['data_habilitacao'].map(converter_data))
    df['dias_desde_habilitacao'] = (hoje.normalize() - habilitacao.dt.normalize()).dt.days

    df['oportunidade'] = pd.Series([
        classificar_oportunidade(f, c, d, p)
        for f, c, d, p in zip(df['familia'], df['classificacao'], df['dias_desde_habilitacao'], df['passo'])
    ], index=df.index, dtype=object)

    logger.info(
        "Vendas classificadas: %d (%d sem pagamento, %d inclusões)",
        len(df), int((~casados).sum()), len(inclusoes),
    )
    return df


# ==============================================================================
# MÉTRICAS
# ==============================================================================
def calcular_metricas_permanencia(df_classificado):
    """Contagem e percentual de adimplentes, inadimplentes e cancelados (só vendas classificadas)."""
    resultado = {'total': 0}
    for classe in CLASSIFICACOES:
        resultado[classe] = 0
        resultado[f'pct_{classe}'] = 0.0
    if df_classificado is None or df_classificado.empty:
        return resultado

    classificadas = df_classificado[df_classificado['classificacao'].isin(CLASSIFICACOES)]
    total = len(classificadas)
    resultado['total'] = total
    contagem = classificadas['classificacao'].value_counts()
    for classe in CLASSIFICACOES:
        qtd = int(contagem.get(classe, 0))
        resultado[classe] = qtd
        resultado[f'pct_{classe}'] = qtd / total * 100 if total > 0 else 0.0
    return resultado


def calcular_tendencia_permanencia(df_classificado):
    """% de adimplência por mês/ano de permanência, em ordem cronológica."""
    colunas = ['ano_permanencia', 'mes_permanencia', 'Período', 'Total', 'Adimplentes', '% Adimplência']
    if df_classificado is None or df_classificado.empty:
        return pd.DataFrame(columns=colunas)

    df = df_classificado[
        df_classificado['classificacao'].isin(CLASSIFICACOES) & df_classificado['mes_permanencia'].notna()
    ].copy()
    if df.empty:
        return pd.DataFrame(columns=colunas)

    df['_adimplente'] = (df['classificacao'] == ADIMPLENTE).astype(int)
    tendencia = (
        df.groupby(['ano_permanencia', 'mes_permanencia'])
        .agg(Total=('classificacao', 'size'), Adimplentes=('_adimplente', 'sum'))
        .reset_index()
        .sort_values(['ano_permanencia', 'mes_permanencia'])
    )
    tendencia['ano_permanencia'] = tendencia['ano_permanencia'].astype(int)
    tendencia['mes_permanencia'] = tendencia['mes_permanencia'].astype(int)
    tendencia['Período'] = [f"{NOMES_MESES[m]}/{a}" for a, m in zip(tendencia['ano_permanencia'], tendencia['mes_permanencia'])]
    tendencia['% Adimplência'] = (tendencia['Adimplentes'] / tendencia['Total'] * 100).round(2)
    return tendencia[colunas].reset_index(drop=True)


def calcular_permanencia_por_tipo(df_classificado):
    """Percentuais de permanência por família de produto (POS, BL-DGO, Outros)."""
    if df_classificado is None or df_classificado.empty:
        return pd.DataFrame(columns=['Família', 'Total'] + CLASSIFICACOES)

    df = df_classificado.copy()
    df['Família'] = df['familia'].replace('', 'Outros')
    linhas = []
    for familia, grupo in df.groupby('Família', sort=True):
        metricas = calcular_metricas_permanencia(grupo)
        linha = {'Família': familia, 'Total': metricas['total']}
        for classe in CLASSIFICACOES:
            linha[classe] = metricas[classe]
            linha[f'% {classe}'] = round(metricas[f'pct_{classe}'], 2)
        linhas.append(linha)
    return pd.DataFrame(linhas)


def calcular_metricas_vendedor(df_vendas, df_pagamentos, data_referencia=None):
    """
    Desempenho por vendedor: propostas, vendas (habilitada/finalizada), taxa de
    conversão e situação de permanência das vendas.
    """
    colunas = ['id_vendedor', 'total_propostas', 'total_vendas', 'taxa_conversao'] + \
        CLASSIFICACOES + [f'pct_{c}' for c in CLASSIFICACOES]
    if df_vendas is None or df_vendas.empty:
        return pd.DataFrame(columns=colunas)

    df = classificar_vendas(df_vendas, df_pagamentos, data_referencia)
    status = df['status_proposta'].map(texto).str.lower()
    df['_venda'] = (status.str.contains('habilitad') | status.str.contains('finalizad')).astype(int)
    for classe in CLASSIFICACOES:
        df[f'_{classe}'] = (df['classificacao'] == classe).astype(int)

    agregado = df.groupby('id_vendedor').agg(
        total_propostas=('numero_proposta', 'size'),
        total_vendas=('_venda', 'sum'),
        **{classe: (f'_{classe}', 'sum') for classe in CLASSIFICACOES},
    ).reset_index()

    agregado['taxa_conversao'] = np.where(
        agregado['total_propostas'] > 0,
        agregado['total_vendas'] / agregado['total_propostas'] * 100,
        0.0,
    ).round(2)
    classificadas = agregado[CLASSIFICACOES].sum(axis=1)
    for classe in CLASSIFICACOES:
        agregado[f'pct_{classe}'] = np.where(
            classificadas > 0, agregado[classe] / classificadas.where(classificadas > 0, 1) * 100, 0.0
        ).round(2)

    return agregado[colunas].sort_values('total_vendas', ascending=False).reset_index(drop=True)
