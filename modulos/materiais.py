# Módulo: materiais.py
import logging

import pandas as pd

from modulos.config import (
    SUBTIPO_PRINCIPAL,
    SUBTIPO_OPCIONAL,
    MATERIAIS_PADRAO,
    MATERIAIS_ANTENA,
    MATERIAIS_LNBF,
    TIPOS_OTIMIZACAO,
    MOTIVO_INDIVIDUAL,
    MOTIVO_REINSTALACAO,
)
from modulos.tratamento import texto

logger = logging.getLogger(__name__)


def _lista_materiais(valor):
    return [dict(m) for m in valor] if isinstance(valor, list) else []


# ==============================================================================
# CONSOLIDAÇÃO DE MATERIAIS (PONTO PRINCIPAL + SISTEMA OPCIONAL)
# ==============================================================================
def consolidar_materiais(df_ordens):
    """
    Une os materiais das linhas que compartilham o mesmo codigo_os.

    A linha "Sistema Opcional" cede à linha "Ponto Principal" todo material que
    o principal ainda não lista (sem somar quantidades: vale a do principal) e
    fica com a lista vazia para não contar em dobro. Grupos sem os dois subtipos
    ficam intactos.
    """
    df = df_ordens.copy()
    if df.empty:
        return df
    # Cópias das listas: a entrada nunca é alterada
    origem = df['materiais'] if 'materiais' in df.columns else pd.Series(None, index=df.index, dtype=object)
    listas = {idx: _lista_materiais(m) for idx, m in origem.items()}

    for codigo_os, grupo in df.groupby('codigo_os', sort=False):
        if len(grupo) == 1:
            continue

        subtipos = grupo['subtipo_servico'].map(texto)
        # "Ponto Principal BL" também é ponto principal; a primeira linha de cada tipo vale
        idx_principal = subtipos.index[subtipos.str.startswith(SUBTIPO_PRINCIPAL)]
        idx_opcional = subtipos.index[subtipos == SUBTIPO_OPCIONAL]
        if len(idx_principal) == 0 or len(idx_opcional) == 0:
            logger.warning(
                "OS %s com %d linhas sem par Ponto Principal/Sistema Opcional: materiais não consolidados",
                codigo_os, len(grupo),
            )
            continue

        principal = idx_principal[0]
        opcional = idx_opcional[0]
        nomes_principal = {m['nome'] for m in listas[principal]}

        for material in listas[opcional]:
            if material['nome'] not in nomes_principal:
                listas[principal].append(dict(material))
                nomes_principal.add(material['nome'])
        listas[opcional] = []

    df['materiais'] = pd.Series([listas[idx] for idx in df.index], index=df.index, dtype=object)
    return df


def deduplicar_ordens(df_ordens):
    """Uma linha por codigo_os, depois da consolidação (prioriza Ponto Principal/Instalação)."""
    df = consolidar_materiais(df_ordens)
    if df.empty:
        return df
    df['_prioridade'] = (~df['tipo_servico'].isin(TIPOS_OTIMIZACAO)).astype(int)
    df = df.sort_values(['codigo_os', '_prioridade'], kind='stable')
    return df.drop_duplicates(subset=['codigo_os'], keep='first').drop(columns=['_prioridade'])


# ==============================================================================
# OTIMIZAÇÃO (ECONOMIA DE ANTENAS E LNBFs)
# ==============================================================================
def _quantidade(materiais, nomes):
    return sum(m['quantidade'] for m in materiais if m['nome'] in nomes)


def calcular_otimizacao(df_ordens):
    """Conta instalações sem antena e sem LNBF (economia) sobre as OS aplicáveis."""
    df = deduplicar_ordens(df_ordens)
    vazio = {
        'volume_os': 0, 'economia_antena': 0, 'economia_lnbs': 0,
        'volume_consumo_antena': 0, 'volume_consumo_lnbs': 0,
        'percentual_economia_antena': 0.0, 'percentual_economia_lnbs': 0.0,
    }
    if df.empty:
        return vazio

    aplicaveis = df[
        (df['tipo_servico'].isin(TIPOS_OTIMIZACAO) & (df['motivo'] == MOTIVO_INDIVIDUAL))
        | (df['motivo'] == MOTIVO_REINSTALACAO)
    ]
    volume = len(aplicaveis)
    if volume == 0:
        return vazio

    sem_materiais = int(aplicaveis['materiais'].map(len).eq(0).sum())
    economia_antena = int(aplicaveis['materiais'].map(lambda m: _quantidade(m, MATERIAIS_ANTENA) == 0).sum())
    economia_lnbs = int(aplicaveis['materiais'].map(lambda m: _quantidade(m, MATERIAIS_LNBF) == 0).sum())
    logger.info(
        "Otimização: %d aplicáveis, %d sem materiais, economia antena=%d lnbs=%d",
        volume, sem_materiais, economia_antena, economia_lnbs,
    )

    return {
        'volume_os': volume,
        'economia_antena': economia_antena,
        'economia_lnbs': economia_lnbs,
        'volume_consumo_antena': volume - economia_antena,
        'volume_consumo_lnbs': volume - economia_lnbs,
        'percentual_economia_antena': economia_antena / volume * 100,
        'percentual_economia_lnbs': economia_lnbs / volume * 100,
    }


def resumo_materiais(df_ordens):
    """Total de cada material nas OS consolidadas; os materiais padrão aparecem mesmo zerados."""
    df = consolidar_materiais(df_ordens)
    totais = {nome: 0 for nome in MATERIAIS_PADRAO}
    if not df.empty:
        for materiais in df['materiais']:
            for m in materiais:
                totais[m['nome']] = totais.get(m['nome'], 0) + m['quantidade']

    resumo = pd.DataFrame({'Material': list(totais.keys()), 'Quantidade': list(totais.values())})
    resumo['Padrão'] = resumo['Material'].isin(MATERIAIS_PADRAO)
    return resumo.sort_values(['Padrão', 'Quantidade'], ascending=[False, False]).reset_index(drop=True)
