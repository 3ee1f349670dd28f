from datetime import datetime, timezone

import numpy as np
import pandas as pd
import pytest

from modulos.tratamento import converter_data, normalizar_passo


@pytest.mark.parametrize('valor, esperado', [
    ('10/03/2025', pd.Timestamp('2025-03-10')),
    ('10/03/2025 08:30', pd.Timestamp('2025-03-10 08:30')),
    ('01/12/2024 23:59:59', pd.Timestamp('2024-12-01 23:59:59')),
    ('2025-03-10', pd.Timestamp('2025-03-10')),
    ('2025-03-10T08:30:00', pd.Timestamp('2025-03-10 08:30')),
    ('2025-03-01 08:00:00.123', pd.Timestamp('2025-03-01 08:00:00.123')),
    ('2025-03-01T08:00:00.123456Z', pd.Timestamp('2025-03-01 08:00:00.123456')),
    # Horário com fuso é levado para UTC e o fuso é removido
    ('2025-03-01T08:00:00-03:00', pd.Timestamp('2025-03-01 11:00')),
])
def test_converter_data_formatos_aceitos(valor, esperado):
    assert converter_data(valor) == esperado


def test_converter_data_objetos_de_data():
    assert converter_data(pd.Timestamp('2025-03-10 08:00')) == pd.Timestamp('2025-03-10 08:00')
    assert converter_data(datetime(2025, 3, 10, 8, tzinfo=timezone.utc)) == pd.Timestamp('2025-03-10 08:00')
    assert converter_data(np.datetime64('2025-03-10T08:00')) == pd.Timestamp('2025-03-10 08:00')
    assert converter_data(pd.Timestamp('2025-03-10 08:00', tz='America/Sao_Paulo')).tzinfo is None


@pytest.mark.parametrize('valor', [None, '', '   ', 'ontem', '99/99/2025', '31/02/xx', float('nan'), pd.NaT, 45000])
def test_converter_data_invalida_devolve_none(valor):
    assert converter_data(valor) is None


def test_normalizar_passo():
    assert normalizar_passo(1.0) == '1'
    assert normalizar_passo('2,0') == '2'
    assert normalizar_passo(None) == ''
    assert normalizar_passo('X') == 'X'
