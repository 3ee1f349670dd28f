# Módulo: tempo_atendimento.py
import logging

import pandas as pd

from modulos.config import CATEGORIA_NAO_IDENTIFICADA, METAS_TEMPO_ATENDIMENTO, META_TEMPO_PADRAO

logger = logging.getLogger(__name__)

COLUNAS_CATEGORIA = ['Categoria', 'Total', 'Na Meta', '% na Meta', 'Tempo Médio (h)', 'Meta (h)']


def _ordens_em_metricas(df_ordens):
    if df_ordens is None or df_ordens.empty or 'include_in_metrics' not in df_ordens.columns:
        return pd.DataFrame(columns=['categoria_servico', 'tempo_atendimento', 'atingiu_meta'])
    return df_ordens[df_ordens['include_in_metrics'].fillna(False).astype(bool)].copy()


def calcular_metricas_tempo(df_ordens):
    """
    Métricas de tempo de atendimento sobre as OS incluídas nas métricas.

    Returns:
        dict: total_ordens, dentro_meta, pct_dentro_meta, tempo_medio e
        por_categoria (DataFrame, sem a categoria não identificada).
    """
    df = _ordens_em_metricas(df_ordens)
    total = len(df)
    if total == 0:
        return {
            'total_ordens': 0, 'dentro_meta': 0, 'pct_dentro_meta': 0.0, 'tempo_medio': 0.0,
            'por_categoria': pd.DataFrame(columns=COLUNAS_CATEGORIA),
        }

    df['atingiu_meta'] = df['atingiu_meta'].fillna(False).astype(bool)
    df['tempo_atendimento'] = pd.to_numeric(df['tempo_atendimento'], errors='coerce')
    dentro_meta = int(df['atingiu_meta'].sum())
    tempo_medio = df['tempo_atendimento'].mean()

    por_categoria = (
        df[df['categoria_servico'] != CATEGORIA_NAO_IDENTIFICADA]
        .groupby('categoria_servico')
        .agg(**{
            'Total': ('atingiu_meta', 'size'),
            'Na Meta': ('atingiu_meta', 'sum'),
            'Tempo Médio (h)': ('tempo_atendimento', 'mean'),
        })
        .reset_index()
        .rename(columns={'categoria_servico': 'Categoria'})
    )
    por_categoria['Na Meta'] = por_categoria['Na Meta'].astype(int)
    por_categoria['% na Meta'] = (por_categoria['Na Meta'] / por_categoria['Total'] * 100).round(2)
    por_categoria['Tempo Médio (h)'] = por_categoria['Tempo Médio (h)'].round(2)
    por_categoria['Meta (h)'] = por_categoria['Categoria'].map(METAS_TEMPO_ATENDIMENTO).fillna(META_TEMPO_PADRAO)

    logger.info("Tempo de atendimento: %d de %d OS dentro da meta", dentro_meta, total)
    return {
        'total_ordens': total,
        'dentro_meta': dentro_meta,
        'pct_dentro_meta': round(dentro_meta / total * 100, 2),
        'tempo_medio': round(float(tempo_medio), 2) if pd.notna(tempo_medio) else 0.0,
        'por_categoria': por_categoria[COLUNAS_CATEGORIA],
    }
