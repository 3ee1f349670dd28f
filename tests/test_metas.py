import pandas as pd
import pytest

from modulos.metas import calcular_metricas_metas, mapear_categoria_meta


@pytest.mark.parametrize('categoria, produto, esperado', [
    ('pos_pago', '', 'pos_pago'),
    ('Pós-Pago', '', 'pos_pago'),
    ('', 'SKY Fibra 500 Mega', 'fibra'),
    ('', 'Combo BL-DGO', 'fibra'),
    ('Seguro', 'Seguro Residencial Fibra', 'seguros_fibra'),
    ('Seguros POS', '', 'seguros_pos'),
    ('SKY+', '', 'sky_mais'),
    ('Flex', '', 'flex_conforto'),
    ('Nova Parabólica', '', 'nova_parabolica'),
    ('Outro', 'Acessório', ''),
])
def test_mapear_categoria_meta(categoria, produto, esperado):
    assert mapear_categoria_meta(categoria, produto) == esperado


def _metas():
    return pd.DataFrame([{
        'mes': 3, 'ano': 2025, 'pos_pago': 60, 'flex_conforto': 0, 'nova_parabolica': 0,
        'fibra': 40, 'seguros_pos': 0, 'seguros_fibra': 0, 'sky_mais': 0, 'total': 100,
    }])


def _vendas(qtd_pos, qtd_fibra=0, mes=3, ano=2025):
    categorias = ['pos_pago'] * qtd_pos + ['fibra'] * qtd_fibra
    return pd.DataFrame({'categoria': categorias, 'mes': [mes] * len(categorias), 'ano': [ano] * len(categorias)})


def test_metas_atrasado_no_meio_do_mes():
    categorias, resumo = calcular_metricas_metas(_metas(), _vendas(20, 10), 3, 2025, hoje='2025-03-15')

    assert resumo['total_vendas'] == 30
    assert resumo['dias_mes'] == 31
    assert resumo['dias_restantes'] == 16
    assert resumo['media_diaria_atual'] == 2.0
    assert resumo['media_diaria_necessaria'] == 4.38
    assert resumo['projecao'] == 62.0
    assert resumo['status'] == 'atrasado'

    por_categoria = categorias.set_index('categoria')
    assert por_categoria.loc['pos_pago', 'Realizado'] == 20
    assert por_categoria.loc['pos_pago', '% Atingido'] == 33.33
    assert por_categoria.loc['fibra', '% Atingido'] == 25.0
    assert por_categoria.loc['sky_mais', '% Atingido'] == 0.0


def test_metas_em_dia_pela_projecao():
    _, resumo = calcular_metricas_metas(_metas(), _vendas(60), 3, 2025, hoje='2025-03-15')
    assert resumo['status'] == 'em_dia'


@pytest.mark.parametrize('vendas, esperado', [(100, 'atingido'), (109, 'atingido'), (110, 'superado')])
def test_metas_atingido_e_superado(vendas, esperado):
    _, resumo = calcular_metricas_metas(_metas(), _vendas(vendas), 3, 2025, hoje='2025-03-31')
    assert resumo['status'] == esperado


def test_mes_encerrado_nao_tem_dias_restantes():
    _, resumo = calcular_metricas_metas(_metas(), _vendas(50), 3, 2025, hoje='2025-05-02')

    assert resumo['dias_restantes'] == 0
    assert resumo['projecao'] == 50.0
    assert resumo['status'] == 'atrasado'


def test_vendas_de_outro_mes_nao_contam():
    _, resumo = calcular_metricas_metas(_metas(), _vendas(10, mes=2), 3, 2025, hoje='2025-03-10')
    assert resumo['total_vendas'] == 0


def test_sem_meta_cadastrada(caplog):
    with caplog.at_level('WARNING'):
        categorias, resumo = calcular_metricas_metas(pd.DataFrame(), pd.DataFrame(), 7, 2025, hoje='2025-07-10')

    assert resumo['meta_total'] == 0
    assert resumo['status'] == 'atrasado'
    assert (categorias['Meta'] == 0).all()
    assert 'Nenhuma meta cadastrada' in caplog.text
