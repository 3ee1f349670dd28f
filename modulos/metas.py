# Módulo: metas.py
import calendar
import logging

import pandas as pd

from modulos.config import CATEGORIAS_META, NOMES_CATEGORIAS_META
from modulos.tratamento import norm_key

logger = logging.getLogger(__name__)

# Palavras-chave (texto normalizado) -> categoria de meta; a primeira que casar vale
PALAVRAS_CATEGORIA = [
    ('seguro', None),  # resolvido em mapear_categoria_meta (POS x Fibra)
    ('sky+', 'sky_mais'),
    ('sky mais', 'sky_mais'),
    ('bl-dgo', 'fibra'),
    ('fibra', 'fibra'),
    ('nova parabolica', 'nova_parabolica'),
    ('flex', 'flex_conforto'),
    ('conforto', 'flex_conforto'),
    ('pos', 'pos_pago'),
]


def mapear_categoria_meta(categoria, produto=''):
    """Categoria de meta (pos_pago, fibra, ...) a partir da categoria ou do produto. '' se não reconhecida."""
    categoria_norm = norm_key(categoria).replace(' ', '_')
    if categoria_norm in CATEGORIAS_META:
        return categoria_norm

    completo = f'{norm_key(categoria)} {norm_key(produto)}'
    for valor in (norm_key(categoria), norm_key(produto)):
        if not valor:
            continue
        for chave, destino in PALAVRAS_CATEGORIA:
            if chave not in valor:
                continue
            if destino is None:
                return 'seguros_fibra' if ('fibra' in completo or 'bl-dgo' in completo) else 'seguros_pos'
            return destino
    return ''


# ==============================================================================
# ACOMPANHAMENTO DE METAS DO MÊS
# ==============================================================================
def _status_meta(percentual, projecao, meta_total):
    if percentual >= 110:
        return 'superado'
    if percentual >= 100:
        return 'atingido'
    if meta_total > 0 and projecao >= meta_total:
        return 'em_dia'
    return 'atrasado'


def calcular_metricas_metas(df_metas, df_vendas_meta, mes, ano, hoje=None):
    """
    Meta x realizado por categoria no mês/ano e o resumo do mês
    (dias restantes, médias diárias, projeção linear e status).

    Returns:
        tuple: (pd.DataFrame por categoria, dict resumo)
    """
    colunas = ['Categoria', 'categoria', 'Meta', 'Realizado', '% Atingido']
    hoje = pd.Timestamp(hoje) if hoje is not None else pd.Timestamp.now()

    meta_mes = pd.DataFrame()
    if df_metas is not None and not df_metas.empty:
        meta_mes = df_metas[(df_metas['mes'] == int(mes)) & (df_metas['ano'] == int(ano))]
    if meta_mes.empty:
        logger.warning("Nenhuma meta cadastrada para %02d/%d", int(mes), int(ano))
        meta_linha = {c: 0 for c in CATEGORIAS_META + ['total']}
    else:
        meta_linha = meta_mes.iloc[0].to_dict()

    vendas_mes = pd.DataFrame(columns=['categoria'])
    if df_vendas_meta is not None and not df_vendas_meta.empty:
        vendas_mes = df_vendas_meta[(df_vendas_meta['mes'] == int(mes)) & (df_vendas_meta['ano'] == int(ano))]
    realizado = vendas_mes['categoria'].value_counts()

    linhas = []
    for categoria in CATEGORIAS_META:
        meta = float(meta_linha.get(categoria, 0) or 0)
        feito = int(realizado.get(categoria, 0))
        linhas.append({
            'Categoria': NOMES_CATEGORIAS_META[categoria],
            'categoria': categoria,
            'Meta': meta,
            'Realizado': feito,
            '% Atingido': round(feito / meta * 100, 2) if meta > 0 else 0.0,
        })
    df_categorias = pd.DataFrame(linhas, columns=colunas)

    # Resumo do mês
    meta_total = float(meta_linha.get('total', 0) or 0)
    total_vendas = len(vendas_mes)
    dias_mes = calendar.monthrange(int(ano), int(mes))[1]
    if (hoje.year, hoje.month) == (int(ano), int(mes)):
        dias_passados = hoje.day
    elif (hoje.year, hoje.month) > (int(ano), int(mes)):
        dias_passados = dias_mes
    else:
        dias_passados = 0
    dias_restantes = dias_mes - dias_passados

    media_atual = total_vendas / dias_passados if dias_passados > 0 else 0.0
    faltam = max(meta_total - total_vendas, 0)
    media_necessaria = faltam / dias_restantes if dias_restantes > 0 else 0.0
    projecao = media_atual * dias_mes if dias_passados > 0 else float(total_vendas)
    percentual = total_vendas / meta_total * 100 if meta_total > 0 else 0.0

    resumo = {
        'meta_total': meta_total,
        'total_vendas': total_vendas,
        'percentual_atingido': round(percentual, 2),
        'dias_mes': dias_mes,
        'dias_restantes': dias_restantes,
        'media_diaria_atual': round(media_atual, 2),
        'media_diaria_necessaria': round(media_necessaria, 2),
        'projecao': round(projecao, 2),
        'status': _status_meta(percentual, projecao, meta_total),
    }
    logger.info("Metas %02d/%d: %d de %.0f (%s)", int(mes), int(ano), total_vendas, meta_total, resumo['status'])
    return df_categorias, resumo
