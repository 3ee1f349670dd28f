# Módulo: preferencias.py
import copy
import json
import logging
from pathlib import Path

from modulos.config import ARQUIVO_PREFERENCIAS

logger = logging.getLogger(__name__)

PREFERENCIAS_PADRAO = {
    # tabela -> {coluna: visível}
    'colunas': {
        'reaberturas': {
            'codigo_os_original': True,
            'codigo_os_reabertura': True,
            'codigo_cliente': True,
            'subtipo_original': True,
            'subtipo_reabertura': True,
            'tecnico_original': True,
            'tecnico_reabertura': False,
            'data_finalizacao_original': True,
            'data_criacao_reabertura': True,
            'tempo_entre_horas': True,
            'dias_entre': False,
            'motivo_reabertura': True,
            'cidade': True,
            'bairro': False,
        },
    },
    'filtros': {
        'mes': None,
        'ano': None,
        'tecnico': None,
        'cidade': None,
    },
}


class Preferencias:
    """
    Preferências de exibição persistidas em JSON (colunas visíveis e filtros padrão).

    Chaves aninhadas usam ponto: obter('filtros.mes'), definir('colunas.reaberturas.bairro', True).
    """

    def __init__(self, caminho=None):
        self.caminho = Path(caminho or ARQUIVO_PREFERENCIAS)
        self.dados = copy.deepcopy(PREFERENCIAS_PADRAO)

    def carregar(self):
        if not self.caminho.exists():
            return self
        try:
            conteudo = json.loads(self.caminho.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Preferências em '%s' ilegíveis (%s): usando o padrão", self.caminho, e)
            self.dados = copy.deepcopy(PREFERENCIAS_PADRAO)
            return self
        if not isinstance(conteudo, dict):
            logger.warning("Preferências em '%s' fora do formato esperado: usando o padrão", self.caminho)
            self.dados = copy.deepcopy(PREFERENCIAS_PADRAO)
            return self
        self.dados = _mesclar(copy.deepcopy(PREFERENCIAS_PADRAO), conteudo)
        return self

    def salvar(self):
        self.caminho.parent.mkdir(parents=True, exist_ok=True)
        self.caminho.write_text(json.dumps(self.dados, ensure_ascii=False, indent=2), encoding='utf-8')
        logger.debug("Preferências salvas em '%s'", self.caminho)

    def obter(self, chave, padrao=None):
        atual = self.dados
        for parte in chave.split('.'):
            if not isinstance(atual, dict) or parte not in atual:
                return padrao
            atual = atual[parte]
        return atual

    def definir(self, chave, valor):
        partes = chave.split('.')
        atual = self.dados
        for parte in partes[:-1]:
            if not isinstance(atual.get(parte), dict):
                atual[parte] = {}
            atual = atual[parte]
        atual[partes[-1]] = valor

    def colunas_visiveis(self, tabela, colunas):
        """Colunas de `colunas` marcadas como visíveis (sem preferência = visível)."""
        visibilidade = self.obter(f'colunas.{tabela}', {}) or {}
        return [c for c in colunas if visibilidade.get(c, True)]


def _mesclar(base, novo):
    for chave, valor in novo.items():
        if isinstance(valor, dict) and isinstance(base.get(chave), dict):
            base[chave] = _mesclar(base[chave], valor)
        else:
            base[chave] = valor
    return base
