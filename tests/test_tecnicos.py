import pandas as pd

from modulos.config import SUBTIPOS_TABELA_TECNICOS
from modulos.tecnicos import calcular_ranking_tecnicos, contar_servicos_por_tecnico


def test_ranking_empates_dividem_posicao(ordem, montar_ordens):
    df = montar_ordens(
        ordem('1', 'Corretiva', '2025-03-01', '2025-03-02', tecnico='Ana', tempo=10.0),
        ordem('2', 'Corretiva', '2025-03-01', '2025-03-02', tecnico='Ana', tempo=20.0),
        ordem('3', 'Corretiva', '2025-03-01', '2025-03-02', tecnico='Bruno', atingiu_meta=False),
        ordem('4', 'Corretiva', '2025-03-01', '2025-03-02', tecnico='Bruno'),
        ordem('5', 'Corretiva', '2025-03-01', '2025-03-02', tecnico='Carla'),
        ordem('6', 'Corretiva', '2025-03-01', '2025-03-02', tecnico='Carla'),
        ordem('7', 'Corretiva', '2025-03-01', '2025-03-02', tecnico='Davi'),
        ordem('8', 'Sistema Opcional', '2025-03-01', '2025-03-02', tecnico='Davi', include=False),
    )
    pares = pd.DataFrame({'tecnico_original': ['Davi']})

    ranking = calcular_ranking_tecnicos(df, pares)

    assert list(ranking['Técnico']) == ['Ana', 'Carla', 'Davi', 'Bruno']
    assert list(ranking['Posição']) == [1, 1, 3, 4]

    por_tecnico = ranking.set_index('Técnico')
    assert por_tecnico.loc['Ana', 'Tempo Médio (h)'] == 15.0
    assert por_tecnico.loc['Davi', 'OS em Métricas'] == 1
    assert por_tecnico.loc['Davi', 'Taxa Reabertura (%)'] == 100.0
    assert por_tecnico.loc['Bruno', '% na Meta'] == 50.0


def test_ranking_sem_ordens():
    ranking = calcular_ranking_tecnicos(pd.DataFrame(), pd.DataFrame())
    assert ranking.empty
    assert 'Posição' in ranking.columns


def test_contagem_de_servicos_por_tecnico(ordem, montar_ordens):
    df = montar_ordens(
        ordem('1', 'Corretiva', '2025-03-01', '2025-03-02', tecnico='Ana'),
        ordem('2', 'Corretiva', '2025-03-01', '2025-03-02', tecnico='Ana'),
        ordem('3', 'Ponto Principal', '2025-03-01', '2025-03-02', tecnico='Ana'),
        ordem('4', 'Preventiva', '2025-03-01', '2025-03-02', tecnico=''),
        ordem('5', 'Outro Tipo', '2025-03-01', '2025-03-02', tecnico='Ana'),
    )

    tabela = contar_servicos_por_tecnico(df)

    assert list(tabela.columns) == ['Técnico'] + SUBTIPOS_TABELA_TECNICOS + ['Total']
    assert list(tabela['Técnico']) == ['Ana', 'Não informado']

    ana = tabela.set_index('Técnico').loc['Ana']
    assert ana['Corretiva'] == 2
    assert ana['Ponto Principal'] == 1
    assert ana['Preventiva'] == 0
    assert ana['Total'] == 3
