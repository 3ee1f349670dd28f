# Módulo: tratamento.py
import logging
import re
import unicodedata

import pandas as pd

from modulos.config import MAPA_CIDADES, MAPA_BAIRROS, CATEGORIA_NAO_IDENTIFICADA

logger = logging.getLogger(__name__)

# Datas ISO (AAAA-MM-...) vindas de exportações; o resto é tratado como DD/MM/AAAA
PADRAO_ISO = re.compile(r'^\d{4}-\d{2}')

# ==============================================================================
# FUNÇÕES DE UTILIDADE E FORMATAÇÃO
# ==============================================================================
def formatar_milhar_br(valor):
    """Formata um número para o padrão brasileiro (separador de milhar ponto, sem casas decimais)."""
    if isinstance(valor, (int, float)):
        return f"{valor:,.0f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return str(valor)


def formatar_moeda_br(valor):
    """Formata um valor monetário como R$ 1.234,56."""
    try:
        valor = float(valor)
    except (TypeError, ValueError):
        valor = 0.0
    return "R$ " + f"{valor:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def formatar_percentual(valor, casas=2):
    """Formata um percentual já multiplicado por 100 (ex.: 12.5 -> '12,50%')."""
    if valor is None or pd.isna(valor):
        return '-'
    return f"{valor:.{casas}f}%".replace(".", ",")


def norm_key(x) -> str:
    """Normaliza texto p/ chave: lowercase, sem acento, sem espaços duplos."""
    if x is None or (not isinstance(x, str) and pd.isna(x)):
        return ""
    s = str(x).strip().lower()
    s = unicodedata.normalize("NFKD", s)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    return " ".join(s.split())


def texto(valor) -> str:
    """Converte células vazias/NaN em string vazia e remove espaços das pontas."""
    if valor is None:
        return ''
    if not isinstance(valor, str) and pd.isna(valor):
        return ''
    return str(valor).strip()


def contem_algum(valor, termos) -> bool:
    valor = texto(valor)
    return any(termo in valor for termo in termos)


# ==============================================================================
# CONVERSÃO DEFENSIVA DE DATAS E PASSOS
# ==============================================================================
def converter_data(valor):
    """
    Converte uma célula de data em pd.Timestamp sem fuso.

    Aceita Timestamp/datetime, DD/MM/AAAA (com ou sem hora) e ISO 8601
    (com fração de segundo e fuso). Retorna None quando a célula está vazia
    ou não pode ser interpretada; quem chama decide se registra aviso e
    descarta o registro.
    """
    if valor is None:
        return None
    if not isinstance(valor, str) and pd.isna(valor):
        return None
    # Números soltos (ex.: serial do Excel) não são datas válidas no painel
    if pd.api.types.is_number(valor):
        return None

    if isinstance(valor, str):
        s = valor.strip()
        if not s:
            return None
        if PADRAO_ISO.match(s):
            ts = pd.to_datetime(s, format='ISO8601', errors='coerce')
        else:
            ts = pd.to_datetime(s, dayfirst=True, errors='coerce')
    else:
        ts = pd.to_datetime(valor, errors='coerce')

    if pd.isna(ts):
        return None
    # Comparações do painel são sempre entre datas sem fuso
    return ts.tz_convert(None) if ts.tzinfo is not None else ts


def normalizar_passo(passo) -> str:
    """Normaliza o passo de cobrança: 1, 1.0 e '1' viram '1'. Vazio vira ''."""
    s = texto(passo)
    if not s:
        return ''
    try:
        return str(int(float(s.replace(',', '.'))))
    except ValueError:
        return s


# ==============================================================================
# NORMALIZAÇÃO DE NOMES E CATEGORIAS
# ==============================================================================
def normalizar_cidade(cidade):
    return MAPA_CIDADES.get(texto(cidade).lower(), cidade)


def normalizar_bairro(bairro):
    return MAPA_BAIRROS.get(texto(bairro).lower(), bairro)


def padronizar_categoria_servico(subtipo_servico) -> str:
    """
    Padroniza o subtipo de serviço em uma das quatro categorias do painel:
    Ponto Principal TV/FIBRA e Assistência Técnica TV/FIBRA.
    """
    tipo = texto(subtipo_servico).lower()

    if 'ponto principal' in tipo and ('bl' in tipo or 'fibra' in tipo):
        return 'Ponto Principal FIBRA'
    if 'ponto principal' in tipo:
        return 'Ponto Principal TV'
    if ('corretiva bl' in tipo or 'prestação de serviço bl' in tipo
            or 'preventiva bl' in tipo or 'fibra' in tipo):
        return 'Assistência Técnica FIBRA'
    if ('corretiva' in tipo and 'bl' not in tipo) or ('prestação de serviço' in tipo and 'bl' not in tipo):
        return 'Assistência Técnica TV'
    return CATEGORIA_NAO_IDENTIFICADA


def obter_segmento(categoria) -> str:
    """Segmento (TV ou FIBRA) de uma categoria padronizada; vazio se não identificada."""
    categoria = texto(categoria)
    if categoria.endswith('FIBRA'):
        return 'FIBRA'
    if categoria.endswith('TV'):
        return 'TV'
    return ''
