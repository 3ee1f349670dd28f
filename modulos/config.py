# Módulo: config.py
import logging
import os

# ==============================================================================
# 📌 PASSO 1: LOGGING E PREFERÊNCIAS
# ==============================================================================
# Nível de log lido do ambiente (DEBUG, INFO, WARNING...)
NIVEL_LOG = os.environ.get('PAINEL_LOG_LEVEL', 'INFO')
# Arquivo JSON com as preferências de exibição (colunas visíveis, filtros padrão)
ARQUIVO_PREFERENCIAS = os.environ.get('PAINEL_PREFERENCIAS', 'preferencias.json')


def configurar_logging(nivel=None):
    """Configura o logging raiz do painel (chamado uma vez pelo app.py)."""
    logging.basicConfig(
        level=getattr(logging, str(nivel or NIVEL_LOG).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


# ==============================================================================
# 📌 PASSO 2: MAPEAMENTO DE COLUNAS DAS PLANILHAS
# ==============================================================================
EXTENSOES_VALIDAS = ['.xlsx', '.xls', '.csv']

# Ordens de serviço (cabeçalho da planilha -> coluna interna)
MAPA_CAMPOS_OS = {
    'Código OS': 'codigo_os',
    'ID Técnico': 'id_tecnico',
    'Técnico': 'nome_tecnico',
    'SGL': 'sigla_tecnico',
    'Tipo de serviço': 'tipo_servico',
    'Sub-Tipo de serviço': 'subtipo_servico',
    'Motivo': 'motivo',
    'Código Cliente': 'codigo_cliente',
    'Cliente': 'nome_cliente',
    'Status': 'status',
    'Criação': 'data_criacao',
    'Finalização': 'data_finalizacao',
    'Info: ponto_de_ref': 'info_ponto_de_referencia',
    'Info: info_endereco_completo': 'info_endereco_completo',
    'Bairro': 'bairro',
    'Cidade': 'cidade',
    'Tel. Cel': 'telefone_celular',
    'Código Item (não permita duplicacao)': 'codigo_item',
    'Ação Tomada': 'acao_tomada',
    'Materiais': 'materiais',
}

CAMPOS_OBRIGATORIOS_OS = [
    'Código OS', 'ID Técnico', 'Técnico', 'SGL', 'Tipo de serviço',
    'Sub-Tipo de serviço', 'Motivo', 'Código Cliente', 'Cliente',
    'Status', 'Criação', 'Finalização',
]

# Cabeçalhos alternativos conhecidos (inclui o typo comum "FInalização")
ALTERNATIVAS_OS = {
    'Finalização': ['FInalização', 'Finalizacao', 'Data Finalização'],
    'Criação': ['Criacao', 'Data Criação'],
}

MAPA_CAMPOS_VENDAS = {
    'Número da proposta': 'numero_proposta',
    'ID do vendedor': 'id_vendedor',
    'Nome proprietário': 'nome_proprietario',
    'CPF': 'cpf',
    'Nome fantasia': 'nome_fantasia',
    'Agrupamento do produto': 'agrupamento_produto',
    'Produto principal': 'produto_principal',
    'Valor': 'valor',
    'Status da proposta': 'status_proposta',
    'Data de habilitação': 'data_habilitacao',
    'Telefone celular': 'telefone_celular',
    'Produtos secundários': 'produtos_secundarios',
    'Forma de pagamento': 'forma_pagamento',
    'Cidade': 'cidade',
    'Bairro': 'bairro',
}

CAMPOS_OBRIGATORIOS_VENDAS = [
    'Número da proposta', 'ID do vendedor', 'Agrupamento do produto',
    'Produto principal', 'Valor', 'Status da proposta', 'Data de habilitação',
]

ALTERNATIVAS_VENDAS = {
    'Número da proposta': ['Numero da proposta', 'Proposta', 'N° Proposta', 'Num Proposta'],
    'ID do vendedor': ['Id do vendedor', 'ID Vendedor', 'Vendedor ID', 'Código Vendedor'],
    'Nome proprietário': ['Nome proprietario', 'Proprietário', 'Proprietario'],
    'Agrupamento do produto': ['Agrupamento produto', 'Grupo Produto', 'Tipo Produto'],
    'Produto principal': ['Produto Principal', 'Produto', 'Nome Produto'],
    'Valor': ['Valor Produto', 'Preço', 'Preco', 'Valor Total'],
    'Status da proposta': ['Status proposta', 'Situação', 'Situacao'],
    'Data de habilitação': ['Data habilitação', 'Data de habilitacao', 'Data habilitacao',
                            'Data da Habilitação', 'Data Ativação', 'Data Ativacao'],
}

MAPA_CAMPOS_PAGAMENTOS = {
    'Proposta': 'proposta',
    'Passo': 'passo',
    'Data passo cobrança': 'data_passo_cobranca',
    'Vencimento fatura': 'vencimento_fatura',
    'Status pacote': 'status_pacote',
}

CAMPOS_OBRIGATORIOS_PAGAMENTOS = ['Proposta', 'Passo', 'Status pacote']

ALTERNATIVAS_PAGAMENTOS = {
    'Proposta': ['Número da proposta', 'N° Proposta'],
    'Passo': ['Etapa', 'Passo Cobrança'],
    'Data passo cobrança': ['Data Passo Cobranca', 'Data cobrança'],
    'Vencimento fatura': ['Vencimento', 'Vencimento Fatura'],
    'Status pacote': ['Status Pacote', 'Status do Pacote', 'Status'],
}

# Importação de metas: as três abas são obrigatórias
ABA_VENDAS_PERMANENCIA = 'VENDAS PERMANENCIA'
ABA_VENDAS_META = 'VENDAS META'
ABA_METAS = 'METAS'
ABAS_OBRIGATORIAS_METAS = [ABA_VENDAS_PERMANENCIA, ABA_VENDAS_META, ABA_METAS]

CATEGORIAS_META = [
    'pos_pago', 'flex_conforto', 'nova_parabolica', 'fibra',
    'seguros_pos', 'seguros_fibra', 'sky_mais',
]

NOMES_CATEGORIAS_META = {
    'pos_pago': 'POS Pago',
    'flex_conforto': 'Flex/Conforto',
    'nova_parabolica': 'Nova Parabólica',
    'fibra': 'Fibra',
    'seguros_pos': 'Seguros POS',
    'seguros_fibra': 'Seguros Fibra',
    'sky_mais': 'SKY+',
}

# ==============================================================================
# 📌 PASSO 3: REGRAS DE ORDENS DE SERVIÇO
# ==============================================================================
# Subtipos analisados nas métricas de tempo e reabertura
SUBTIPOS_VALIDOS = [
    'Ponto Principal', 'Ponto Principal BL', 'Corretiva', 'Corretiva BL',
    'Preventiva BL', 'Prestação de Serviço', 'Prestação de Serviço BL',
]
# Subtipos aceitos na importação (inclui os que só entram na contagem)
TODOS_SUBTIPOS_VALIDOS = SUBTIPOS_VALIDOS + ['Preventiva', 'Sistema Opcional']

# Subtipos que podem ser OS original de uma reabertura
SUBTIPOS_ORIGINAIS_REABERTURA = ['Ponto Principal', 'Ponto Principal BL', 'Corretiva', 'Corretiva BL']
SUBTIPOS_CORRETIVA = ['Corretiva', 'Corretiva BL']

STATUS_VALIDOS = ['Finalizada', 'Finalizado', 'Executada', 'Executado']
STATUS_CANCELADA = 'Cancelada'

MOTIVOS_EXCLUIDOS = ['Ant Governo', 'Nova Parabólica']

ACAO_CLIENTE_CANCELOU = 'Cliente Cancelou via SAC'
TIPO_ASSISTENCIA = 'Assistência Técnica'

SUBTIPO_PRINCIPAL = 'Ponto Principal'
SUBTIPO_OPCIONAL = 'Sistema Opcional'

CATEGORIA_NAO_IDENTIFICADA = 'Categoria não identificada'

# Meta de tempo de atendimento (horas) por categoria padronizada
METAS_TEMPO_ATENDIMENTO = {
    'Ponto Principal TV': 48,
    'Ponto Principal FIBRA': 48,
    'Assistência Técnica FIBRA': 24,
    'Assistência Técnica TV': 34,
}
META_TEMPO_PADRAO = 48

MAPA_CIDADES = {
    'nova iguacu': 'Nova Iguaçu',
    'nova iguaçu': 'Nova Iguaçu',
    'sao joao de meriti': 'São João de Meriti',
    'são joao de meriti': 'São João de Meriti',
    'sao joão de meriti': 'São João de Meriti',
    'são joão de meriti': 'São João de Meriti',
    'rio de janeiro': 'Rio de Janeiro',
    'nilopolis': 'Nilópolis',
    'nilópolis': 'Nilópolis',
    'belford roxo': 'Belford Roxo',
    'duque de caxias': 'Duque de Caxias',
    'mesquita': 'Mesquita',
    'queimados': 'Queimados',
    'itaguai': 'Itaguaí',
    'itaguaí': 'Itaguaí',
    'seropedica': 'Seropédica',
    'seropédica': 'Seropédica',
}

MAPA_BAIRROS = {
    'centro': 'Centro',
    'miguel couto': 'Miguel Couto',
    'comendador soares': 'Comendador Soares',
    'austin': 'Austin',
    'cabucu': 'Cabuçu',
    'cabuçu': 'Cabuçu',
}

# Subtipos exibidos na tabela de serviços por técnico
SUBTIPOS_TABELA_TECNICOS = [
    'Corretiva', 'Corretiva BL', 'Ponto Principal', 'Ponto Principal BL',
    'Prestação de Serviço', 'Prestação de Serviço BL', 'Preventiva',
    'Preventiva BL', 'Sistema Opcional', 'Cancelamento Voluntário',
    'Kit TVRO', 'Substituição',
]

# ==============================================================================
# 📌 PASSO 4: MATERIAIS
# ==============================================================================
MATERIAIS_PADRAO = [
    'ANTENA 150 CM C/ KIT FIXACAO',
    'ANTENA 75 CM',
    'ANTENA 90CM C/ KIT FIXACAO',
    'ANTENA DE 60 CM C/ KIT FIXACAO',
    'CABO COAXIAL RGC06 BOBINA 100METROS',
    'CONECTOR F série-59 COMPRESSÃO',
    'LNBF SIMPLES ANTENA 45/60/90 CM',
    'LNBF DUPLO ANTENA 45/60/90 CM',
]
MATERIAIS_ANTENA = MATERIAIS_PADRAO[:4]
MATERIAIS_LNBF = ['LNBF SIMPLES ANTENA 45/60/90 CM', 'LNBF DUPLO ANTENA 45/60/90 CM']

TIPOS_OTIMIZACAO = ['Ponto Principal', 'Instalação']
MOTIVO_INDIVIDUAL = 'Individual'
MOTIVO_REINSTALACAO = 'Reinstalacao Novo Endereco'

# ==============================================================================
# 📌 PASSO 5: PERMANÊNCIA
# ==============================================================================
MESES_PERMANENCIA = 4
DIAS_VENCIMENTO_INCLUSAO = 30

FAMILIA_POS = 'POS'
FAMILIA_FIBRA = 'BL-DGO'

ADIMPLENTE = 'adimplente'
INADIMPLENTE = 'inadimplente'
CANCELADO = 'cancelado'
CLASSIFICACOES = [ADIMPLENTE, INADIMPLENTE, CANCELADO]

# Janela (dias desde a habilitação) e passos das oportunidades de recuperação
JANELA_OPORTUNIDADE = (91, 120)
PASSOS_OURO = ['2', '3']
PASSOS_BRONZE = ['4']

NOMES_MESES = {
    1: 'Jan', 2: 'Fev', 3: 'Mar', 4: 'Abr', 5: 'Mai', 6: 'Jun',
    7: 'Jul', 8: 'Ago', 9: 'Set', 10: 'Out', 11: 'Nov', 12: 'Dez',
}
