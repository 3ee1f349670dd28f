# Módulo: feriados.py
import logging
from datetime import date, timedelta

import pandas as pd

logger = logging.getLogger(__name__)

# Feriados nacionais fixos (mês, dia)
FERIADOS_FIXOS = [
    (1, 1),    # Ano Novo
    (4, 21),   # Tiradentes
    (5, 1),    # Dia do Trabalho
    (9, 7),    # Independência
    (10, 12),  # Nossa Senhora Aparecida
    (11, 2),   # Finados
    (11, 15),  # Proclamação da República
    (12, 25),  # Natal
]


def calcular_pascoa(ano):
    """Domingo de Páscoa pelo algoritmo de Meeus/Jones/Butcher."""
    a = ano % 19
    b = ano // 100
    c = ano % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    mes = (h + l - 7 * m + 114) // 31
    dia = ((h + l - 7 * m + 114) % 31) + 1
    return date(ano, mes, dia)


def feriados_moveis(ano):
    pascoa = calcular_pascoa(ano)
    return {
        pascoa - timedelta(days=48),  # Segunda de Carnaval
        pascoa - timedelta(days=47),  # Terça de Carnaval
        pascoa - timedelta(days=2),   # Sexta-feira Santa
        pascoa,
        pascoa + timedelta(days=60),  # Corpus Christi
    }


def is_feriado(dia):
    if isinstance(dia, pd.Timestamp):
        dia = dia.date()
    return (dia.month, dia.day) in FERIADOS_FIXOS or dia in feriados_moveis(dia.year)


def is_domingo(dia):
    return dia.weekday() == 6


def is_folga(dia):
    return is_domingo(dia) or is_feriado(dia)


# ==============================================================================
# AJUSTE DO TEMPO DE ATENDIMENTO (DESCONTA DOMINGOS E FERIADOS)
# ==============================================================================
def ajustar_tempo_atendimento(tempo_horas, data_criacao, data_finalizacao, categoria):
    """
    Desconta do tempo de atendimento as horas caídas em domingos e feriados.

    - Dias inteiros entre criação e finalização: 24h cada.
    - Dia da criação em folga: horas restantes do dia.
    - Dia da finalização em folga: horas desde a meia-noite.
    Assistência Técnica FIBRA é medida em horas corridas (sem ajuste).
    """
    if data_criacao is None or data_finalizacao is None or pd.isna(data_criacao) or pd.isna(data_finalizacao):
        logger.warning("Datas inválidas no ajuste de tempo: criação=%s finalização=%s", data_criacao, data_finalizacao)
        return tempo_horas
    if data_finalizacao < data_criacao:
        logger.warning("Finalização anterior à criação: criação=%s finalização=%s", data_criacao, data_finalizacao)
        return tempo_horas
    if categoria == 'Assistência Técnica FIBRA':
        return tempo_horas

    horas_descontar = 0.0
    mesmo_dia = data_criacao.date() == data_finalizacao.date()

    # 1. Dias completos entre os dois extremos
    dia_atual = data_criacao.date() + timedelta(days=1)
    while dia_atual < data_finalizacao.date():
        if is_folga(dia_atual):
            horas_descontar += 24
        dia_atual += timedelta(days=1)

    if not mesmo_dia:
        # 2. Restante do dia de criação
        if is_folga(data_criacao.date()):
            horas_descontar += 24 - data_criacao.hour - data_criacao.minute / 60
        # 3. Início do dia de finalização
        if is_folga(data_finalizacao.date()):
            horas_descontar += data_finalizacao.hour + data_finalizacao.minute / 60

    if horas_descontar > 0:
        logger.debug("Ajuste de folga (%s): %.2fh descontadas de %.2fh", categoria, horas_descontar, tempo_horas)

    return max(0.0, tempo_horas - horas_descontar)
