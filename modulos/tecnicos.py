# Módulo: tecnicos.py
import logging

import numpy as np
import pandas as pd

from modulos.config import SUBTIPOS_TABELA_TECNICOS
from modulos.tratamento import texto

logger = logging.getLogger(__name__)

COLUNAS_RANKING = [
    'Posição', 'Técnico', 'OS em Métricas', 'Na Meta', '% na Meta',
    'Tempo Médio (h)', 'Reaberturas', 'Taxa Reabertura (%)',
]


# ==============================================================================
# RANKING DE TÉCNICOS (TEMPO DE ATENDIMENTO x REABERTURA)
# ==============================================================================
def calcular_ranking_tecnicos(df_ordens, df_pares):
    """
    Ranking por técnico: % de OS dentro da meta (maior primeiro) e, no empate,
    taxa de reabertura (menor primeiro). Reaberturas contam para o técnico da
    OS original. Empates completos dividem a posição (rank 'min').
    """
    if df_ordens is None or df_ordens.empty or 'include_in_metrics' not in df_ordens.columns:
        return pd.DataFrame(columns=COLUNAS_RANKING)

    df = df_ordens[df_ordens['include_in_metrics'].fillna(False).astype(bool)].copy()
    df['nome_tecnico'] = df['nome_tecnico'].map(texto)
    df = df[df['nome_tecnico'] != '']
    if df.empty:
        return pd.DataFrame(columns=COLUNAS_RANKING)

    df['atingiu_meta'] = df['atingiu_meta'].fillna(False).astype(bool)
    df['tempo_atendimento'] = pd.to_numeric(df['tempo_atendimento'], errors='coerce')

    ranking = df.groupby('nome_tecnico').agg(**{
        'OS em Métricas': ('atingiu_meta', 'size'),
        'Na Meta': ('atingiu_meta', 'sum'),
        'Tempo Médio (h)': ('tempo_atendimento', 'mean'),
    }).reset_index().rename(columns={'nome_tecnico': 'Técnico'})

    reaberturas = df_pares['tecnico_original'].value_counts() if df_pares is not None and not df_pares.empty \
        else pd.Series(dtype=int)
    ranking['Reaberturas'] = ranking['Técnico'].map(reaberturas).fillna(0).astype(int)
    ranking['Na Meta'] = ranking['Na Meta'].astype(int)
    ranking['% na Meta'] = (ranking['Na Meta'] / ranking['OS em Métricas'] * 100).round(2)
    ranking['Taxa Reabertura (%)'] = np.where(
        ranking['OS em Métricas'] > 0, ranking['Reaberturas'] / ranking['OS em Métricas'] * 100, 0.0
    ).round(2)
    ranking['Tempo Médio (h)'] = ranking['Tempo Médio (h)'].round(2)

    ranking = ranking.sort_values(
        ['% na Meta', 'Taxa Reabertura (%)', 'Técnico'], ascending=[False, True, True]
    ).reset_index(drop=True)
    # Grupos numerados na ordem do ranking; empate completo = mesma posição
    grupos = ranking.groupby(['% na Meta', 'Taxa Reabertura (%)'], sort=False).ngroup()
    ranking['Posição'] = grupos.rank(method='min').astype(int)

    logger.info("Ranking calculado para %d técnicos", len(ranking))
    return ranking[COLUNAS_RANKING]


def contar_servicos_por_tecnico(df_ordens, subtipos=None):
    """Quantidade de OS por técnico x subtipo de serviço (uma linha por técnico, com Total)."""
    subtipos = subtipos or SUBTIPOS_TABELA_TECNICOS
    if df_ordens is None or df_ordens.empty:
        return pd.DataFrame(columns=['Técnico'] + subtipos + ['Total'])

    df = df_ordens[df_ordens['subtipo_servico'].isin(subtipos)].copy()
    df['Técnico'] = df['nome_tecnico'].map(texto).replace('', 'Não informado')
    tabela = pd.crosstab(df['Técnico'], df['subtipo_servico'])
    tabela = tabela.reindex(columns=subtipos, fill_value=0)
    tabela['Total'] = tabela.sum(axis=1)
    tabela = tabela.sort_values('Total', ascending=False).reset_index()
    tabela.columns.name = None
    return tabela
