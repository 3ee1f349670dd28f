# Módulo: bonificacao.py
import logging

import pandas as pd

logger = logging.getLogger(__name__)

# ==============================================================================
# TABELAS DE BONIFICAÇÃO - SERVIÇOS (TA x REABERTURA)
# ==============================================================================
# Cada linha: (TA mínimo da faixa, [(reabertura abaixo de, bônus %), ...]).
# Abaixo do menor TA não há bônus; reabertura acima do último limite paga 0.
TABELA_AT_TV = [
    (75, [(3.5, 60), (7, 50), (10.5, 40)]),
    (60, [(3.5, 50), (7, 40), (10.5, 30)]),
    (45, [(3.5, 40), (7, 30), (10.5, 20)]),
    (30, [(3.5, 30), (7, 20), (10.5, 10)]),
]

TABELA_AT_FIBRA = [
    (85, [(8, 60), (12, 50), (16, 40)]),
    (70, [(8, 50), (12, 40), (16, 30)]),
    (55, [(8, 40), (12, 30), (16, 20)]),
    (40, [(8, 30), (12, 20), (16, 10)]),
]

# Ponto Principal: valor fixo (R$) com TA mínimo e reabertura máxima (inclusive)
REGRA_PP_TV = {'ta_minimo': 75, 'reabertura_maxima': 2, 'valor': 20.0}
REGRA_PP_FIBRA = {'ta_minimo': 75, 'reabertura_maxima': 5, 'valor': 40.0}

# Card -> (categoria de tempo, subtipo original da reabertura, regra)
CARDS_SERVICO = [
    ('Assistência Técnica TV', 'Assistência Técnica TV', 'Corretiva', TABELA_AT_TV),
    ('Assistência Técnica FIBRA', 'Assistência Técnica FIBRA', 'Corretiva BL', TABELA_AT_FIBRA),
    ('Ponto Principal TV', 'Ponto Principal TV', 'Ponto Principal', REGRA_PP_TV),
    ('Ponto Principal FIBRA', 'Ponto Principal FIBRA', 'Ponto Principal BL', REGRA_PP_FIBRA),
]

# ==============================================================================
# TABELAS DE BONIFICAÇÃO - VENDAS POS
# ==============================================================================
# (adimplência abaixo de, valor de face %)
TABELA_VALOR_FACE = [(20, 20), (30, 40), (45, 70), (55, 110), (70, 120)]
VALOR_FACE_MAXIMO = 140

FAIXAS_VOLUME_META = {
    '0-99.99': 0,
    '100-109.99': 10,
    '110-119.99': 15,
    '120-129.99': 20,
    '130+': 30,
}
BONUS_META_FIXO = 10
FAIXA_BONUS_FIXO = (45, 55)


def bonus_tabela(tabela, percentual_ta, taxa_reabertura):
    """Bônus (%) de uma tabela TA x reabertura. 0 quando não elegível."""
    for ta_minimo, faixas_reabertura in tabela:
        if percentual_ta >= ta_minimo:
            for limite, bonus in faixas_reabertura:
                if taxa_reabertura < limite:
                    return bonus
            return 0
    return 0


def bonus_ponto_principal(regra, percentual_ta, taxa_reabertura):
    if percentual_ta >= regra['ta_minimo'] and taxa_reabertura <= regra['reabertura_maxima']:
        return regra['valor']
    return 0.0


def _percentual_ta(metricas_tempo, categoria):
    por_categoria = (metricas_tempo or {}).get('por_categoria')
    if por_categoria is None or por_categoria.empty:
        return 0.0
    linha = por_categoria[por_categoria['Categoria'] == categoria]
    return float(linha['% na Meta'].iloc[0]) if not linha.empty else 0.0


def _taxa_reabertura(metricas_reabertura, subtipo):
    por_subtipo = (metricas_reabertura or {}).get('por_subtipo_original')
    if por_subtipo is None or por_subtipo.empty:
        return 0.0
    linha = por_subtipo[por_subtipo['Subtipo'] == subtipo]
    return float(linha['Taxa (%)'].iloc[0]) if not linha.empty else 0.0


def calcular_bonificacoes_servico(metricas_tempo, metricas_reabertura):
    """
    Um card por combinação TA x reabertura.

    O TA vem de tempo_atendimento.calcular_metricas_tempo (% na meta por
    categoria) e a reabertura de reabertura.calcular_metricas_reabertura
    (taxa por subtipo da OS original).
    """
    linhas = []
    for card, categoria, subtipo, regra in CARDS_SERVICO:
        ta = _percentual_ta(metricas_tempo, categoria)
        reabertura = _taxa_reabertura(metricas_reabertura, subtipo)
        if isinstance(regra, dict):
            valor = bonus_ponto_principal(regra, ta, reabertura)
            resultado = f"R$ {valor:.2f}".replace('.', ',') if valor > 0 else 'Não Elegível'
            tipo = 'valor'
        else:
            valor = bonus_tabela(regra, ta, reabertura)
            resultado = f"{valor}% bonificação" if valor > 0 else 'Não Elegível'
            tipo = 'percentual'
        linhas.append({
            'Card': card,
            'Subtipo Reabertura': subtipo,
            'TA (%)': round(ta, 2),
            'Reabertura (%)': round(reabertura, 2),
            'Tipo': tipo,
            'Bonificação': valor,
            'Resultado': resultado,
            'Elegível': valor > 0,
        })
    return pd.DataFrame(linhas)


# ==============================================================================
# BONIFICAÇÃO DE VENDAS POS
# ==============================================================================
def calcular_valor_face(percentual_adimplencia):
    for limite, valor in TABELA_VALOR_FACE:
        if percentual_adimplencia < limite:
            return valor
    return VALOR_FACE_MAXIMO


def faixa_volume_meta(percentual_meta):
    """Faixa de volume (% da meta POS atingida) usada na tabela progressiva."""
    if percentual_meta < 100:
        return '0-99.99'
    if percentual_meta < 110:
        return '100-109.99'
    if percentual_meta < 120:
        return '110-119.99'
    if percentual_meta < 130:
        return '120-129.99'
    return '130+'


def calcular_bonus_meta_pos(percentual_adimplencia, bateu_meta, faixa_volume):
    """
    Bônus meta POS (%): só com a meta batida. Adimplência de 45% a 54,99% paga
    10% fixo; a partir de 55% vale a tabela progressiva por faixa de volume.
    """
    if not bateu_meta:
        return 0
    inicio, fim = FAIXA_BONUS_FIXO
    if inicio <= percentual_adimplencia < fim:
        return BONUS_META_FIXO
    if percentual_adimplencia >= fim:
        return FAIXAS_VOLUME_META.get(faixa_volume, 0)
    return 0


def calcular_bonificacao_pos(valor_base, percentual_adimplencia, bateu_meta, faixa_volume):
    """Valor final POS: base ajustada pelo valor de face e depois pelo bônus meta."""
    valor_face = calcular_valor_face(percentual_adimplencia)
    bonus_meta_pct = calcular_bonus_meta_pos(percentual_adimplencia, bateu_meta, faixa_volume)
    if not valor_base:
        return {
            'valor_base': 0.0, 'valor_face': valor_face, 'bonus_meta_pct': bonus_meta_pct,
            'bonus_permanencia': 0.0, 'valor_com_permanencia': 0.0, 'bonus_meta': 0.0, 'valor_final': 0.0,
        }

    bonus_permanencia = valor_base * (valor_face - 100) / 100
    valor_com_permanencia = valor_base + bonus_permanencia
    bonus_meta = valor_com_permanencia * bonus_meta_pct / 100
    logger.debug(
        "Bonificação POS: base=%.2f face=%d%% meta=%d%% final=%.2f",
        valor_base, valor_face, bonus_meta_pct, valor_com_permanencia + bonus_meta,
    )
    return {
        'valor_base': float(valor_base),
        'valor_face': valor_face,
        'bonus_meta_pct': bonus_meta_pct,
        'bonus_permanencia': bonus_permanencia,
        'valor_com_permanencia': valor_com_permanencia,
        'bonus_meta': bonus_meta,
        'valor_final': valor_com_permanencia + bonus_meta,
    }
