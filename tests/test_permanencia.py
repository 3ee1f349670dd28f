import pandas as pd
import pytest

from modulos.permanencia import (
    calcular_metricas_permanencia,
    calcular_metricas_vendedor,
    calcular_periodo_permanencia,
    calcular_permanencia_por_tipo,
    calcular_tendencia_permanencia,
    classificar_oportunidade,
    classificar_pagamento,
    classificar_vendas,
    gerar_inclusoes,
)


def _venda(proposta, agrupamento, habilitacao, vendedor='V1', status='Habilitada', produto=''):
    return {
        'numero_proposta': proposta,
        'id_vendedor': vendedor,
        'agrupamento_produto': agrupamento,
        'produto_principal': produto,
        'status_proposta': status,
        'data_habilitacao': pd.Timestamp(habilitacao),
        'nome_proprietario': 'Cliente',
        'telefone_celular': '',
    }


def _pagamento(proposta, status, passo, data_passo=''):
    return {
        'proposta': proposta,
        'passo': passo,
        'data_passo_cobranca': data_passo,
        'vencimento_fatura': '',
        'status_pacote': status,
    }


@pytest.mark.parametrize('status, passo, data_passo, esperado', [
    ('C', '0', '', 'cancelado'),
    ('C', '3', '10/03/2025', 'cancelado'),
    ('S', '0', '', 'inadimplente'),
    ('S', '1', '', 'inadimplente'),
    ('N', '5', '', 'adimplente'),
    ('N', '5', '10/03/2025', 'inadimplente'),
    ('N', '1', '10/03/2025', 'adimplente'),
    ('X', '0', '', 'adimplente'),
    ('NC', '4', '10/03/2025', 'adimplente'),
    ('I', '', '', 'adimplente'),
    ('', '2', '10/03/2025', 'inadimplente'),
])
def test_precedencia_da_classificacao(status, passo, data_passo, esperado):
    assert classificar_pagamento(status, passo, data_passo) == esperado


def test_passo_numerico_e_normalizado():
    assert classificar_pagamento('X', 1.0, '') == 'adimplente'
    assert classificar_pagamento('X', '1.0', '') == 'adimplente'
    assert classificar_pagamento('x', 2, '01/01/2025') == 'inadimplente'


def test_periodo_permanencia_atravessa_o_ano():
    assert calcular_periodo_permanencia(pd.Timestamp('2024-11-15')) == (3, 2025)
    assert calcular_periodo_permanencia('15/11/2024') == (3, 2025)
    assert calcular_periodo_permanencia('2025-02-10') == (6, 2025)


def test_periodo_permanencia_data_invalida():
    assert calcular_periodo_permanencia('') == (None, None)
    assert calcular_periodo_permanencia(None) == (None, None)
    assert calcular_periodo_permanencia('31/02/xx') == (None, None)


def test_periodo_permanencia_fim_de_mes():
    # 31/10 + 4 meses cai no último dia de fevereiro
    assert calcular_periodo_permanencia('2024-10-31') == (2, 2025)


def test_exemplo_oportunidade_ouro():
    vendas = pd.DataFrame([_venda('P1', 'POS', '2025-02-10')])
    pagamentos = pd.DataFrame([_pagamento('P1', 'S', '3')])

    resultado = classificar_vendas(vendas, pagamentos, data_referencia='2025-05-20')
    venda = resultado.iloc[0]

    assert venda['dias_desde_habilitacao'] == 99
    assert venda['classificacao'] == 'inadimplente'
    assert venda['oportunidade'] == 'ouro'
    assert (venda['mes_permanencia'], venda['ano_permanencia']) == (6, 2025)


def test_oportunidade_bronze_e_fora_da_janela():
    assert classificar_oportunidade('POS', 'inadimplente', 120, '4') == 'bronze'
    assert classificar_oportunidade('POS', 'inadimplente', 91, '2') == 'ouro'
    assert classificar_oportunidade('POS', 'inadimplente', 90, '2') is None
    assert classificar_oportunidade('POS', 'inadimplente', 121, '3') is None
    assert classificar_oportunidade('POS', 'adimplente', 100, '3') is None
    assert classificar_oportunidade('BL-DGO', 'inadimplente', 100, '3') is None
    assert classificar_oportunidade('POS', 'inadimplente', 100, '5') is None


def test_bl_dgo_sem_pagamento_vira_inclusao_adimplente():
    vendas = pd.DataFrame([
        _venda('F1', 'BL-DGO', '2025-01-10'),
        _venda('P2', 'POS', '2025-01-10'),
    ])
    pagamentos = pd.DataFrame(columns=['proposta', 'passo', 'data_passo_cobranca', 'vencimento_fatura', 'status_pacote'])

    resultado = classificar_vendas(vendas, pagamentos, data_referencia='2025-03-01').set_index('numero_proposta')

    assert resultado.loc['F1', 'classificacao'] == 'adimplente'
    assert resultado.loc['F1', 'passo'] == '0'
    assert resultado.loc['F1', 'status_pacote'] == 'I'
    # POS sem pagamento fica sem classificação (None, não NaN)
    assert resultado['classificacao'].dtype == object
    assert resultado.loc['P2', 'classificacao'] is None
    assert resultado['oportunidade'].dtype == object
    assert resultado.loc['P2', 'oportunidade'] is None


def test_gerar_inclusoes_vencimento_30_dias():
    vendas = pd.DataFrame([
        _venda('F1', 'BL-DGO', '2025-01-10'),
        _venda('F2', 'Outros', '2025-01-12', produto='Combo BL-DGO 500'),
        _venda('F3', 'BL-DGO', '2025-01-15'),
    ])
    pagamentos = pd.DataFrame([_pagamento('F3', 'N', '1')])

    inclusoes = gerar_inclusoes(vendas, pagamentos).set_index('proposta')

    assert list(inclusoes.index) == ['F1', 'F2']
    assert inclusoes.loc['F1', 'vencimento_fatura'] == pd.Timestamp('2025-02-09')
    assert (inclusoes['passo'] == '0').all()
    assert (inclusoes['status_pacote'] == 'I').all()


def test_metricas_e_tendencia():
    vendas = pd.DataFrame([
        _venda('P1', 'POS', '2024-11-05'),
        _venda('P2', 'POS', '2024-11-20'),
        _venda('P3', 'POS', '2024-12-01'),
        _venda('P4', 'POS', '2024-12-02'),
    ])
    pagamentos = pd.DataFrame([
        _pagamento('P1', 'N', '0'),
        _pagamento('P2', 'S', '3'),
        _pagamento('P3', 'C', '0'),
        _pagamento('P4', 'NC', '2', '05/01/2025'),
    ])
    classificado = classificar_vendas(vendas, pagamentos, data_referencia='2025-04-01')

    metricas = calcular_metricas_permanencia(classificado)
    assert metricas['total'] == 4
    assert metricas['adimplente'] == 2
    assert metricas['inadimplente'] == 1
    assert metricas['cancelado'] == 1
    assert metricas['pct_adimplente'] == 50.0

    tendencia = calcular_tendencia_permanencia(classificado)
    assert list(tendencia['Período']) == ['Mar/2025', 'Abr/2025']
    assert list(tendencia['% Adimplência']) == [50.0, 50.0]


def test_permanencia_por_tipo():
    vendas = pd.DataFrame([
        _venda('P1', 'POS', '2025-01-05'),
        _venda('F1', 'BL-DGO', '2025-01-05'),
        _venda('O1', 'PRE', '2025-01-05'),
    ])
    pagamentos = pd.DataFrame([_pagamento('P1', 'S', '3'), _pagamento('O1', 'N', '0')])
    classificado = classificar_vendas(vendas, pagamentos, data_referencia='2025-03-01')

    por_tipo = calcular_permanencia_por_tipo(classificado).set_index('Família')

    assert por_tipo.loc['POS', '% inadimplente'] == 100.0
    assert por_tipo.loc['BL-DGO', '% adimplente'] == 100.0
    assert por_tipo.loc['Outros', 'Total'] == 1


def test_metricas_vendedor():
    vendas = pd.DataFrame([
        _venda('P1', 'POS', '2025-01-05', vendedor='V1'),
        _venda('P2', 'POS', '2025-01-05', vendedor='V1', status='Em análise'),
        _venda('P3', 'POS', '2025-01-05', vendedor='V2', status='Finalizada'),
    ])
    pagamentos = pd.DataFrame([_pagamento('P1', 'N', '0'), _pagamento('P3', 'S', '3')])

    metricas = calcular_metricas_vendedor(vendas, pagamentos, data_referencia='2025-03-01').set_index('id_vendedor')

    assert metricas.loc['V1', 'total_propostas'] == 2
    assert metricas.loc['V1', 'total_vendas'] == 1
    assert metricas.loc['V1', 'taxa_conversao'] == 50.0
    assert metricas.loc['V1', 'pct_adimplente'] == 100.0
    assert metricas.loc['V2', 'inadimplente'] == 1
    assert metricas.loc['V2', 'pct_inadimplente'] == 100.0


def test_classificar_vendas_vazio():
    resultado = classificar_vendas(pd.DataFrame(), pd.DataFrame())
    assert resultado.empty
    assert 'classificacao' in resultado.columns
