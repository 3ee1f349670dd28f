from datetime import date

import pandas as pd

from modulos.feriados import ajustar_tempo_atendimento, calcular_pascoa, feriados_moveis, is_feriado
from modulos.tempo_atendimento import calcular_metricas_tempo


def test_pascoa_e_feriados_moveis():
    assert calcular_pascoa(2024) == date(2024, 3, 31)
    assert calcular_pascoa(2025) == date(2025, 4, 20)

    moveis = feriados_moveis(2025)
    assert date(2025, 3, 3) in moveis   # segunda de carnaval
    assert date(2025, 3, 4) in moveis   # terça de carnaval
    assert date(2025, 4, 18) in moveis  # sexta-feira santa
    assert date(2025, 6, 19) in moveis  # corpus christi


def test_feriados_fixos():
    assert is_feriado(date(2025, 12, 25))
    assert is_feriado(pd.Timestamp('2025-11-15 10:00'))
    assert not is_feriado(date(2025, 3, 11))


def test_ajuste_desconta_domingo_inteiro():
    criacao = pd.Timestamp('2025-03-08 10:00')   # sábado
    finalizacao = pd.Timestamp('2025-03-10 10:00')  # segunda
    horas = (finalizacao - criacao).total_seconds() / 3600

    assert ajustar_tempo_atendimento(horas, criacao, finalizacao, 'Assistência Técnica TV') == 24.0


def test_ajuste_desconta_parte_do_dia_de_criacao_e_finalizacao():
    criacao = pd.Timestamp('2025-03-09 18:00')      # domingo
    finalizacao = pd.Timestamp('2025-03-11 10:00')  # terça
    horas = (finalizacao - criacao).total_seconds() / 3600

    # 6h restantes do domingo
    assert ajustar_tempo_atendimento(horas, criacao, finalizacao, 'Ponto Principal TV') == horas - 6


def test_assistencia_fibra_usa_horas_corridas():
    criacao = pd.Timestamp('2025-03-08 10:00')
    finalizacao = pd.Timestamp('2025-03-10 10:00')

    assert ajustar_tempo_atendimento(48.0, criacao, finalizacao, 'Assistência Técnica FIBRA') == 48.0


def test_ajuste_com_data_invalida_mantem_tempo(caplog):
    with caplog.at_level('WARNING'):
        assert ajustar_tempo_atendimento(12.0, None, pd.Timestamp('2025-03-10'), 'Ponto Principal TV') == 12.0
    assert 'Datas inválidas' in caplog.text


def test_metricas_tempo_por_categoria(ordem, montar_ordens):
    df = montar_ordens(
        ordem('1', 'Corretiva', '2025-03-10', '2025-03-11', tempo=20.0, atingiu_meta=True),
        ordem('2', 'Corretiva', '2025-03-10', '2025-03-12', tempo=40.0, atingiu_meta=False),
        ordem('3', 'Ponto Principal', '2025-03-10', '2025-03-11', tempo=30.0, atingiu_meta=True, tipo='Instalação'),
        ordem('4', 'Sistema Opcional', '2025-03-10', '2025-03-11', tempo=None, atingiu_meta=False, include=False),
    )

    metricas = calcular_metricas_tempo(df)

    assert metricas['total_ordens'] == 3
    assert metricas['dentro_meta'] == 2
    assert metricas['pct_dentro_meta'] == 66.67
    assert metricas['tempo_medio'] == 30.0

    por_categoria = metricas['por_categoria'].set_index('Categoria')
    assert por_categoria.loc['Assistência Técnica TV', 'Total'] == 2
    assert por_categoria.loc['Assistência Técnica TV', '% na Meta'] == 50.0
    assert por_categoria.loc['Assistência Técnica TV', 'Meta (h)'] == 34
    assert por_categoria.loc['Ponto Principal TV', '% na Meta'] == 100.0


def test_metricas_tempo_vazio():
    metricas = calcular_metricas_tempo(pd.DataFrame())
    assert metricas['total_ordens'] == 0
    assert metricas['por_categoria'].empty
