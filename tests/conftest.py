import pandas as pd
import pytest

from modulos.tratamento import padronizar_categoria_servico


def _ts(valor):
    return pd.Timestamp(valor) if valor else None


def fazer_ordem(codigo_os, subtipo, criacao, finalizacao, cliente='C1', tipo='Assistência Técnica',
                status='Finalizada', acao='', tecnico='Carlos', motivo='Sem sinal', cidade='Nova Iguaçu',
                bairro='Centro', include=True, materiais=None, codigo_item=None, atingiu_meta=True, tempo=10.0):
    return {
        'codigo_os': codigo_os,
        'codigo_item': codigo_item or f'{codigo_os}-1',
        'nome_tecnico': tecnico,
        'tipo_servico': tipo,
        'subtipo_servico': subtipo,
        'motivo': motivo,
        'codigo_cliente': cliente,
        'status': status,
        'data_criacao': _ts(criacao),
        'data_finalizacao': _ts(finalizacao),
        'cidade': cidade,
        'bairro': bairro,
        'acao_tomada': acao,
        'materiais': materiais if materiais is not None else [],
        'categoria_servico': padronizar_categoria_servico(subtipo),
        'tempo_atendimento': tempo,
        'atingiu_meta': atingiu_meta,
        'include_in_metrics': include,
    }


@pytest.fixture
def ordem():
    return fazer_ordem


@pytest.fixture
def montar_ordens():
    def _montar(*ordens):
        return pd.DataFrame(list(ordens))
    return _montar
