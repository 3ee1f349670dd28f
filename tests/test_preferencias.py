import json

from modulos.preferencias import PREFERENCIAS_PADRAO, Preferencias


def test_sem_arquivo_usa_padrao(tmp_path):
    prefs = Preferencias(tmp_path / 'prefs.json').carregar()

    assert prefs.dados == PREFERENCIAS_PADRAO
    assert prefs.obter('filtros.mes') is None
    assert prefs.obter('filtros.inexistente', 'x') == 'x'


def test_salvar_e_carregar(tmp_path):
    caminho = tmp_path / 'config' / 'prefs.json'
    prefs = Preferencias(caminho)
    prefs.definir('filtros.mes', 3)
    prefs.definir('colunas.reaberturas.bairro', True)
    prefs.salvar()

    recarregado = Preferencias(caminho).carregar()

    assert recarregado.obter('filtros.mes') == 3
    assert recarregado.obter('colunas.reaberturas.bairro') is True
    # Padrões não alterados continuam presentes
    assert recarregado.obter('colunas.reaberturas.dias_entre') is False
    # Alterar a instância não mexe no padrão do módulo
    assert PREFERENCIAS_PADRAO['filtros']['mes'] is None


def test_arquivo_parcial_e_mesclado_com_padrao(tmp_path):
    caminho = tmp_path / 'prefs.json'
    caminho.write_text(json.dumps({'filtros': {'cidade': 'Nova Iguaçu'}}), encoding='utf-8')

    prefs = Preferencias(caminho).carregar()

    assert prefs.obter('filtros.cidade') == 'Nova Iguaçu'
    assert prefs.obter('filtros.ano') is None
    assert prefs.obter('colunas.reaberturas.cidade') is True


def test_arquivo_corrompido_volta_ao_padrao(tmp_path, caplog):
    caminho = tmp_path / 'prefs.json'
    caminho.write_text('{"filtros": ', encoding='utf-8')

    with caplog.at_level('WARNING'):
        prefs = Preferencias(caminho).carregar()

    assert prefs.dados == PREFERENCIAS_PADRAO
    assert 'ilegíveis' in caplog.text


def test_conteudo_fora_do_formato(tmp_path, caplog):
    caminho = tmp_path / 'prefs.json'
    caminho.write_text('[1, 2, 3]', encoding='utf-8')

    with caplog.at_level('WARNING'):
        prefs = Preferencias(caminho).carregar()

    assert prefs.dados == PREFERENCIAS_PADRAO
    assert 'fora do formato' in caplog.text


def test_colunas_visiveis(tmp_path):
    prefs = Preferencias(tmp_path / 'prefs.json')
    prefs.definir('colunas.reaberturas.cidade', False)

    visiveis = prefs.colunas_visiveis('reaberturas', ['codigo_os_original', 'cidade', 'dias_entre', 'nova_coluna'])

    assert visiveis == ['codigo_os_original', 'nova_coluna']
