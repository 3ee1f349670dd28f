import pandas as pd
import pytest

from modulos.bonificacao import (
    REGRA_PP_FIBRA,
    REGRA_PP_TV,
    TABELA_AT_FIBRA,
    TABELA_AT_TV,
    bonus_ponto_principal,
    bonus_tabela,
    calcular_bonificacao_pos,
    calcular_bonificacoes_servico,
    calcular_bonus_meta_pos,
    calcular_valor_face,
    faixa_volume_meta,
)


@pytest.mark.parametrize('ta, reabertura, esperado', [
    (29.99, 0, 0),
    (30, 3.49, 30),
    (30, 3.5, 20),
    (44.9, 10.49, 10),
    (45, 0, 40),
    (59.9, 7, 20),
    (60, 6.9, 40),
    (74.9, 10.5, 0),
    (75, 3.4, 60),
    (100, 10.4, 40),
])
def test_tabela_assistencia_tv(ta, reabertura, esperado):
    assert bonus_tabela(TABELA_AT_TV, ta, reabertura) == esperado


@pytest.mark.parametrize('ta, reabertura, esperado', [
    (39.9, 0, 0),
    (40, 7.9, 30),
    (54.9, 15.9, 10),
    (55, 12, 20),
    (70, 8, 40),
    (84.9, 16, 0),
    (85, 7.99, 60),
    (90, 11.99, 50),
])
def test_tabela_assistencia_fibra(ta, reabertura, esperado):
    assert bonus_tabela(TABELA_AT_FIBRA, ta, reabertura) == esperado


def test_ponto_principal():
    assert bonus_ponto_principal(REGRA_PP_TV, 75, 2) == 20.0
    assert bonus_ponto_principal(REGRA_PP_TV, 75, 2.01) == 0.0
    assert bonus_ponto_principal(REGRA_PP_TV, 74.99, 0) == 0.0
    assert bonus_ponto_principal(REGRA_PP_FIBRA, 80, 5) == 40.0
    assert bonus_ponto_principal(REGRA_PP_FIBRA, 80, 5.5) == 0.0


@pytest.mark.parametrize('adimplencia, esperado', [
    (0, 20), (19.99, 20), (20, 40), (29.99, 40), (30, 70),
    (44.99, 70), (45, 110), (54.99, 110), (55, 120), (69.99, 120), (70, 140), (100, 140),
])
def test_valor_de_face(adimplencia, esperado):
    assert calcular_valor_face(adimplencia) == esperado


def test_bonus_meta_pos():
    assert calcular_bonus_meta_pos(80, False, '130+') == 0
    assert calcular_bonus_meta_pos(44.99, True, '130+') == 0
    assert calcular_bonus_meta_pos(45, True, '0-99.99') == 10
    assert calcular_bonus_meta_pos(54.99, True, '130+') == 10
    assert calcular_bonus_meta_pos(55, True, '0-99.99') == 0
    assert calcular_bonus_meta_pos(55, True, '100-109.99') == 10
    assert calcular_bonus_meta_pos(60, True, '110-119.99') == 15
    assert calcular_bonus_meta_pos(60, True, '120-129.99') == 20
    assert calcular_bonus_meta_pos(60, True, '130+') == 30


def test_faixa_volume_meta():
    assert faixa_volume_meta(99.99) == '0-99.99'
    assert faixa_volume_meta(100) == '100-109.99'
    assert faixa_volume_meta(119.5) == '110-119.99'
    assert faixa_volume_meta(129.99) == '120-129.99'
    assert faixa_volume_meta(150) == '130+'


def test_bonificacao_pos_valor_final():
    resultado = calcular_bonificacao_pos(1000, 60, True, '130+')

    assert resultado['valor_face'] == 120
    assert resultado['bonus_permanencia'] == 200
    assert resultado['valor_com_permanencia'] == 1200
    assert resultado['bonus_meta'] == 360
    assert resultado['valor_final'] == 1560


def test_bonificacao_pos_sem_valor_base():
    resultado = calcular_bonificacao_pos(0, 60, True, '130+')
    assert resultado['valor_final'] == 0.0
    assert resultado['bonus_meta_pct'] == 30


def test_cards_de_servico():
    metricas_tempo = {'por_categoria': pd.DataFrame({
        'Categoria': ['Assistência Técnica TV', 'Assistência Técnica FIBRA', 'Ponto Principal TV'],
        '% na Meta': [80.0, 35.0, 90.0],
    })}
    metricas_reabertura = {'por_subtipo_original': pd.DataFrame({
        'Subtipo': ['Corretiva', 'Corretiva BL', 'Ponto Principal'],
        'Reaberturas': [1, 1, 1],
        'Taxa (%)': [5.0, 9.0, 1.5],
    })}

    cards = calcular_bonificacoes_servico(metricas_tempo, metricas_reabertura).set_index('Card')

    assert cards.loc['Assistência Técnica TV', 'Bonificação'] == 50
    assert cards.loc['Assistência Técnica FIBRA', 'Bonificação'] == 0
    assert cards.loc['Ponto Principal TV', 'Bonificação'] == 20.0
    assert cards.loc['Ponto Principal TV', 'Resultado'] == 'R$ 20,00'
    # Sem dados de tempo: não elegível
    assert not cards.loc['Ponto Principal FIBRA', 'Elegível']
    assert cards.loc['Ponto Principal FIBRA', 'Resultado'] == 'Não Elegível'


def test_cards_sem_metricas():
    cards = calcular_bonificacoes_servico({}, {})
    assert len(cards) == 4
    assert not cards['Elegível'].any()
