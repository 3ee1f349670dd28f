# Importa as bibliotecas necessárias
import logging
from datetime import date

import pandas as pd
import streamlit as st
import plotly.express as px

# ==============================================================================
# IMPORTS DOS MÓDULOS
# ==============================================================================

# Módulo 1: Constantes e logging
from modulos.config import (
    configurar_logging,
    NOMES_MESES,
    SUBTIPOS_ORIGINAIS_REABERTURA,
    CLASSIFICACOES,
    ADIMPLENTE,
    FAMILIA_POS,
)

# Módulo 2: Formatação
from modulos.tratamento import formatar_milhar_br, formatar_moeda_br, formatar_percentual

# Módulo 3: Importação e mesclagem das planilhas
from modulos.dados import (
    ErroImportacao,
    ler_planilha,
    preparar_ordens_servico,
    preparar_vendas,
    preparar_pagamentos,
    preparar_metas,
    mesclar_ordens,
    mesclar_vendas,
    mesclar_pagamentos,
)

# Módulo 4: Tempo de atendimento e otimização de materiais
from modulos.tempo_atendimento import calcular_metricas_tempo
from modulos.materiais import calcular_otimizacao, resumo_materiais

# Módulo 5: Reaberturas
from modulos.reabertura import obter_pares_reabertura, calcular_metricas_reabertura, COLUNAS_PARES

# Módulo 6: Permanência e vendedores
from modulos.permanencia import (
    classificar_vendas,
    gerar_inclusoes,
    calcular_metricas_permanencia,
    calcular_tendencia_permanencia,
    calcular_permanencia_por_tipo,
    calcular_metricas_vendedor,
    OURO,
    BRONZE,
)

# Módulo 7: Metas, técnicos e bonificações
from modulos.metas import calcular_metricas_metas
from modulos.tecnicos import calcular_ranking_tecnicos, contar_servicos_por_tecnico
from modulos.bonificacao import (
    calcular_bonificacoes_servico,
    calcular_bonificacao_pos,
    faixa_volume_meta,
    FAIXAS_VOLUME_META,
)

# Módulo 8: Preferências de exibição
from modulos.preferencias import Preferencias

configurar_logging()
logger = logging.getLogger(__name__)

# ==============================================================================
# CONFIGURAÇÃO E ESTADO INICIAL
# ==============================================================================
st.set_page_config(layout="wide")
st.title("📊 Painel de Gestão de Serviços e Vendas")

for chave in ['ordens', 'vendas', 'pagamentos']:
    if chave not in st.session_state:
        st.session_state[chave] = pd.DataFrame()
if 'metas' not in st.session_state:
    st.session_state['metas'] = {}
if 'preferencias' not in st.session_state:
    st.session_state['preferencias'] = Preferencias().carregar()

preferencias = st.session_state['preferencias']


# --- Cálculos em cache (recalculados só quando os dados ou filtros mudam) ---
@st.cache_data
def _pares_reabertura(df_ordens, mes, ano, tipo_original):
    return obter_pares_reabertura(df_ordens, mes=mes, ano=ano, tipo_original=tipo_original)


@st.cache_data
def _vendas_classificadas(df_vendas, df_pagamentos, data_referencia):
    return classificar_vendas(df_vendas, df_pagamentos, data_referencia)


def _filtrar_ordens(df, mes, ano, tecnico, cidade, por_mes=True):
    """Aplica os filtros da barra lateral (mês/ano pela data de finalização)."""
    if df.empty:
        return df
    df = df.copy()
    if por_mes and mes and ano:
        finalizacao = pd.to_datetime(df['data_finalizacao'])
        df = df[(finalizacao.dt.month == mes) & (finalizacao.dt.year == ano)]
    if tecnico:
        df = df[df['nome_tecnico'] == tecnico]
    if cidade:
        df = df[df['cidade'] == cidade]
    return df


def _sem_dados(mensagem):
    st.info(f"ℹ️ {mensagem} Use a aba **Importação** para carregar as planilhas.")


df_ordens = st.session_state['ordens']
df_vendas = st.session_state['vendas']
df_pagamentos = st.session_state['pagamentos']
dados_metas = st.session_state['metas']

# ==============================================================================
# BARRA LATERAL (FILTROS)
# ==============================================================================
st.sidebar.header("Filtros Interativos")

hoje = date.today()
anos_disponiveis = [hoje.year]
if not df_ordens.empty:
    anos_disponiveis = sorted(set(pd.to_datetime(df_ordens['data_finalizacao']).dt.year.dropna().astype(int)) | {hoje.year})

mes_padrao = preferencias.obter('filtros.mes') or hoje.month
ano_padrao = preferencias.obter('filtros.ano') or hoje.year
mes_sel = st.sidebar.selectbox(
    "Mês:", options=list(NOMES_MESES.keys()), format_func=lambda m: NOMES_MESES[m],
    index=list(NOMES_MESES.keys()).index(mes_padrao) if mes_padrao in NOMES_MESES else hoje.month - 1,
)
ano_sel = st.sidebar.selectbox(
    "Ano:", options=anos_disponiveis,
    index=anos_disponiveis.index(ano_padrao) if ano_padrao in anos_disponiveis else len(anos_disponiveis) - 1,
)

tecnicos_disponiveis = sorted(df_ordens['nome_tecnico'].dropna().unique()) if not df_ordens.empty else []
cidades_disponiveis = sorted(df_ordens['cidade'].dropna().unique()) if not df_ordens.empty else []
tecnico_sel = st.sidebar.selectbox("Técnico:", options=[None] + tecnicos_disponiveis,
                                   format_func=lambda t: t or "Todos")
cidade_sel = st.sidebar.selectbox("Cidade:", options=[None] + cidades_disponiveis,
                                  format_func=lambda c: c or "Todas")

if st.sidebar.button("Salvar filtros como padrão"):
    preferencias.definir('filtros.mes', mes_sel)
    preferencias.definir('filtros.ano', ano_sel)
    preferencias.salvar()
    st.sidebar.success("Filtros padrão salvos.")

df_ordens_mes = _filtrar_ordens(df_ordens, mes_sel, ano_sel, tecnico_sel, cidade_sel)
# Reaberturas casam sobre o histórico inteiro; o técnico filtra os pares depois
df_ordens_periodo = _filtrar_ordens(df_ordens, mes_sel, ano_sel, None, cidade_sel, por_mes=False)


def _pares_do_periodo(tipo_original=None):
    pares = _pares_reabertura(df_ordens_periodo, mes_sel, ano_sel, tipo_original)
    if tecnico_sel and not pares.empty:
        pares = pares[pares['tecnico_original'] == tecnico_sel]
    return pares


(
    aba_tempo, aba_reaberturas, aba_permanencia, aba_metas, aba_tecnicos,
    aba_vendedor, aba_indicadores, aba_pagamentos, aba_importacao,
) = st.tabs([
    "Tempo", "Reaberturas", "Permanência", "Metas", "Técnicos",
    "Vendedor", "Indicadores", "Pagamentos", "Importação",
])

# =======================================================================
# ABA 1. TEMPO DE ATENDIMENTO E OTIMIZAÇÃO
# =======================================================================
with aba_tempo:
    if df_ordens.empty:
        _sem_dados("Nenhuma ordem de serviço carregada.")
    else:
        metricas_tempo = calcular_metricas_tempo(df_ordens_mes)

        st.subheader("Métricas Chave (Tempo de Atendimento)")
        col1, col2, col3 = st.columns(3)
        col1.metric("OS em Métricas", formatar_milhar_br(metricas_tempo['total_ordens']))
        col2.metric("Dentro da Meta", formatar_percentual(metricas_tempo['pct_dentro_meta']),
                    f"{metricas_tempo['dentro_meta']} OS")
        col3.metric("Tempo Médio", f"{metricas_tempo['tempo_medio']:.2f} h".replace('.', ','))

        por_categoria = metricas_tempo['por_categoria']
        if not por_categoria.empty:
            fig_categoria = px.bar(
                por_categoria, x='Categoria', y='% na Meta', color='Categoria',
                text='% na Meta', title='% de OS Dentro da Meta por Categoria', height=400,
            )
            fig_categoria.update_traces(texttemplate='%{text:.2f}%')
            fig_categoria.update_layout(showlegend=False, yaxis_title="% na Meta", xaxis_title="Categoria")
            st.plotly_chart(fig_categoria, use_container_width=True)
            st.dataframe(por_categoria, use_container_width=True, hide_index=True)

        st.markdown("---")
        st.subheader("Otimização de Materiais (Antenas e LNBFs)")
        otimizacao = calcular_otimizacao(df_ordens_mes)
        col1, col2, col3 = st.columns(3)
        col1.metric("OS Aplicáveis", formatar_milhar_br(otimizacao['volume_os']))
        col2.metric("Economia de Antenas", formatar_milhar_br(otimizacao['economia_antena']),
                    formatar_percentual(otimizacao['percentual_economia_antena']))
        col3.metric("Economia de LNBFs", formatar_milhar_br(otimizacao['economia_lnbs']),
                    formatar_percentual(otimizacao['percentual_economia_lnbs']))

        with st.expander("Materiais utilizados no período"):
            st.dataframe(resumo_materiais(df_ordens_mes), use_container_width=True, hide_index=True)

# =======================================================================
# ABA 2. REABERTURAS
# =======================================================================
with aba_reaberturas:
    if df_ordens.empty:
        _sem_dados("Nenhuma ordem de serviço carregada.")
    else:
        tipo_original_sel = st.selectbox(
            "Tipo da OS Original:", options=[None] + SUBTIPOS_ORIGINAIS_REABERTURA,
            format_func=lambda t: t or "Todos",
        )
        df_pares = _pares_do_periodo(tipo_original_sel)
        metricas_reabertura = calcular_metricas_reabertura(df_ordens_mes, df_pares)

        col1, col2, col3 = st.columns(3)
        col1.metric("Reaberturas", formatar_milhar_br(metricas_reabertura['total_reaberturas']))
        col2.metric("Taxa de Reabertura", formatar_percentual(metricas_reabertura['taxa_reabertura']),
                    f"{metricas_reabertura['total_ordens']} OS no período", delta_color="off")
        col3.metric("Tempo Médio até a Reabertura", f"{metricas_reabertura['tempo_medio_horas']:.1f} h".replace('.', ','))

        col_a, col_b = st.columns(2)
        with col_a:
            st.markdown("**Por Tipo da OS Original**")
            st.dataframe(metricas_reabertura['por_subtipo_original'], use_container_width=True, hide_index=True)
            st.markdown("**Por Técnico (OS Original)**")
            st.dataframe(metricas_reabertura['por_tecnico'], use_container_width=True, hide_index=True)
        with col_b:
            st.markdown("**Por Motivo da Reabertura**")
            st.dataframe(metricas_reabertura['por_motivo'], use_container_width=True, hide_index=True)
            st.markdown("**Por Cidade**")
            st.dataframe(metricas_reabertura['por_cidade'], use_container_width=True, hide_index=True)

        if not metricas_reabertura['por_bairro'].empty:
            fig_bairro = px.bar(
                metricas_reabertura['por_bairro'].head(15), x='Bairro', y='Reaberturas',
                text='Reaberturas', title='Reaberturas por Bairro (Top 15)', height=400,
            )
            st.plotly_chart(fig_bairro, use_container_width=True)

        st.markdown("---")
        st.subheader("Pares de Reabertura")
        colunas_sel = st.multiselect(
            "Colunas visíveis:", options=COLUNAS_PARES,
            default=preferencias.colunas_visiveis('reaberturas', COLUNAS_PARES),
        )
        if st.button("Salvar colunas"):
            for coluna in COLUNAS_PARES:
                preferencias.definir(f'colunas.reaberturas.{coluna}', coluna in colunas_sel)
            preferencias.salvar()
            st.success("Preferência de colunas salva.")
        st.dataframe(df_pares[colunas_sel], use_container_width=True, hide_index=True)

# =======================================================================
# ABA 3. PERMANÊNCIA
# =======================================================================
df_classificado = pd.DataFrame()
if not df_vendas.empty:
    df_classificado = _vendas_classificadas(df_vendas, df_pagamentos, pd.Timestamp(hoje))

with aba_permanencia:
    if df_classificado.empty:
        _sem_dados("Nenhuma venda carregada.")
    else:
        df_perm_mes = df_classificado[
            (df_classificado['mes_permanencia'] == mes_sel) & (df_classificado['ano_permanencia'] == ano_sel)
        ]
        st.subheader(f"Permanência de {NOMES_MESES[mes_sel]}/{ano_sel} (habilitação + 4 meses)")
        metricas_perm = calcular_metricas_permanencia(df_perm_mes)
        colunas_kpi = st.columns(len(CLASSIFICACOES) + 1)
        colunas_kpi[0].metric("Vendas Classificadas", formatar_milhar_br(metricas_perm['total']))
        for coluna_kpi, classe in zip(colunas_kpi[1:], CLASSIFICACOES):
            coluna_kpi.metric(classe.capitalize(), formatar_milhar_br(metricas_perm[classe]),
                              formatar_percentual(metricas_perm[f'pct_{classe}']), delta_color="off")

        st.markdown("**Por Tipo de Serviço**")
        st.dataframe(calcular_permanencia_por_tipo(df_perm_mes), use_container_width=True, hide_index=True)

        tendencia = calcular_tendencia_permanencia(df_classificado)
        if not tendencia.empty:
            fig_tendencia = px.line(
                tendencia, x='Período', y='% Adimplência', markers=True,
                title='Tendência de Adimplência por Mês de Permanência',
            )
            fig_tendencia.update_layout(yaxis_title="% Adimplência", xaxis_title="Mês de Permanência")
            st.plotly_chart(fig_tendencia, use_container_width=True)

        st.markdown("---")
        st.subheader("Oportunidades de Recuperação (POS, 91 a 120 dias)")
        colunas_oportunidade = [
            'numero_proposta', 'id_vendedor', 'nome_proprietario', 'telefone_celular',
            'data_habilitacao', 'dias_desde_habilitacao', 'passo', 'status_pacote',
        ]
        col_ouro, col_bronze = st.columns(2)
        with col_ouro:
            ouro = df_classificado[df_classificado['oportunidade'] == OURO]
            st.markdown(f"🥇 **Ouro (passo 2 ou 3): {len(ouro)}**")
            st.dataframe(ouro[colunas_oportunidade], use_container_width=True, hide_index=True)
        with col_bronze:
            bronze = df_classificado[df_classificado['oportunidade'] == BRONZE]
            st.markdown(f"🥉 **Bronze (passo 4): {len(bronze)}**")
            st.dataframe(bronze[colunas_oportunidade], use_container_width=True, hide_index=True)

# =======================================================================
# ABA 4. METAS
# =======================================================================
resumo_metas = None
with aba_metas:
    if not dados_metas:
        _sem_dados("Nenhuma planilha de metas carregada.")
    else:
        df_meta_categorias, resumo_metas = calcular_metricas_metas(
            dados_metas['metas'], dados_metas['vendas_meta'], mes_sel, ano_sel, hoje=pd.Timestamp(hoje),
        )
        status_icones = {'superado': '🏆', 'atingido': '✅', 'em_dia': '🟢', 'atrasado': '🔴'}
        st.subheader(f"Metas de {NOMES_MESES[mes_sel]}/{ano_sel} "
                     f"{status_icones[resumo_metas['status']]} {resumo_metas['status'].replace('_', ' ').title()}")

        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Meta Total", formatar_milhar_br(resumo_metas['meta_total']))
        col2.metric("Vendas", formatar_milhar_br(resumo_metas['total_vendas']),
                    formatar_percentual(resumo_metas['percentual_atingido']))
        col3.metric("Projeção", formatar_milhar_br(resumo_metas['projecao']))
        col4.metric("Dias Restantes", resumo_metas['dias_restantes'])

        col1, col2 = st.columns(2)
        col1.metric("Média Diária Atual", f"{resumo_metas['media_diaria_atual']:.2f}".replace('.', ','))
        col2.metric("Média Diária Necessária", f"{resumo_metas['media_diaria_necessaria']:.2f}".replace('.', ','))

        fig_metas = px.bar(
            df_meta_categorias, x='Categoria', y=['Meta', 'Realizado'], barmode='group',
            title='Meta x Realizado por Categoria', height=400,
        )
        st.plotly_chart(fig_metas, use_container_width=True)
        st.dataframe(df_meta_categorias.drop(columns=['categoria']), use_container_width=True, hide_index=True)

# =======================================================================
# ABA 5. TÉCNICOS
# =======================================================================
with aba_tecnicos:
    if df_ordens.empty:
        _sem_dados("Nenhuma ordem de serviço carregada.")
    else:
        df_pares_mes = _pares_do_periodo()
        st.subheader("Ranking de Técnicos (Tempo de Atendimento x Reabertura)")
        st.dataframe(calcular_ranking_tecnicos(df_ordens_mes, df_pares_mes), use_container_width=True, hide_index=True)

        st.markdown("---")
        st.subheader("Serviços por Técnico e Subtipo")
        st.dataframe(contar_servicos_por_tecnico(df_ordens_mes), use_container_width=True, hide_index=True)

# =======================================================================
# ABA 6. VENDEDOR
# =======================================================================
with aba_vendedor:
    if df_vendas.empty:
        _sem_dados("Nenhuma venda carregada.")
    else:
        metricas_vendedor = calcular_metricas_vendedor(df_vendas, df_pagamentos, pd.Timestamp(hoje))
        st.subheader("Desempenho por Vendedor")
        st.dataframe(metricas_vendedor, use_container_width=True, hide_index=True)

        if not metricas_vendedor.empty:
            fig_vendedor = px.bar(
                metricas_vendedor.head(20), x='id_vendedor', y=[f'pct_{c}' for c in CLASSIFICACOES],
                title='Situação de Permanência por Vendedor (Top 20 em vendas)', height=450,
            )
            fig_vendedor.update_layout(xaxis_title="Vendedor", yaxis_title="%")
            st.plotly_chart(fig_vendedor, use_container_width=True)

# =======================================================================
# ABA 7. INDICADORES (BONIFICAÇÕES)
# =======================================================================
with aba_indicadores:
    if df_ordens.empty:
        _sem_dados("Nenhuma ordem de serviço carregada.")
    else:
        st.subheader("Faixas de Desempenho e Bonificações - Serviços")
        df_pares_bonus = _pares_do_periodo()
        cards = calcular_bonificacoes_servico(
            calcular_metricas_tempo(df_ordens_mes),
            calcular_metricas_reabertura(df_ordens_mes, df_pares_bonus),
        )
        for coluna_card, (_, card) in zip(st.columns(len(cards)), cards.iterrows()):
            with coluna_card:
                st.markdown(f"**{card['Card']}**")
                st.caption(f"TA: {card['TA (%)']:.2f}% | Reabertura ({card['Subtipo Reabertura']}): "
                           f"{card['Reabertura (%)']:.2f}%")
                if card['Elegível']:
                    st.success(card['Resultado'])
                else:
                    st.error(card['Resultado'])

    st.markdown("---")
    st.subheader("Faixas de Desempenho e Bonificações - Vendas POS")
    if df_classificado.empty:
        _sem_dados("Nenhuma venda carregada.")
    else:
        pos_mes = df_classificado[
            (df_classificado['familia'] == FAMILIA_POS)
            & (df_classificado['mes_permanencia'] == mes_sel)
            & (df_classificado['ano_permanencia'] == ano_sel)
        ]
        adimplencia_pos = calcular_metricas_permanencia(pos_mes)[f'pct_{ADIMPLENTE}']

        col1, col2, col3 = st.columns(3)
        valor_base = col1.number_input("Valor base POS (R$):", min_value=0.0, value=0.0, step=50.0)
        bateu_meta = col2.radio("Bateu a meta POS?", options=["Sim", "Não"], horizontal=True) == "Sim"
        faixa_sugerida = '0-99.99'
        if resumo_metas:
            faixa_sugerida = faixa_volume_meta(resumo_metas['percentual_atingido'])
        faixas = list(FAIXAS_VOLUME_META.keys())
        faixa = col3.selectbox("Faixa de volume da meta:", options=faixas, index=faixas.index(faixa_sugerida))

        bonus_pos = calcular_bonificacao_pos(valor_base, adimplencia_pos, bateu_meta, faixa)
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Adimplência POS", formatar_percentual(adimplencia_pos))
        col2.metric("Valor de Face", f"{bonus_pos['valor_face']}%")
        col3.metric("Bônus Meta", f"{bonus_pos['bonus_meta_pct']}%")
        col4.metric("Valor Final", formatar_moeda_br(bonus_pos['valor_final']))

# =======================================================================
# ABA 8. PAGAMENTOS
# =======================================================================
with aba_pagamentos:
    if df_pagamentos.empty and df_vendas.empty:
        _sem_dados("Nenhum pagamento carregado.")
    else:
        st.subheader("Primeiros Pagamentos")
        busca = st.text_input("Buscar proposta:")
        df_exibir_pagamentos = df_pagamentos
        if busca and not df_pagamentos.empty:
            df_exibir_pagamentos = df_pagamentos[df_pagamentos['proposta'].str.contains(busca.strip(), regex=False)]
        st.dataframe(df_exibir_pagamentos, use_container_width=True, hide_index=True)

        inclusoes = gerar_inclusoes(df_vendas, df_pagamentos)
        with st.expander(f"Inclusões BL-DGO sem pagamento ({len(inclusoes)})"):
            st.dataframe(inclusoes, use_container_width=True, hide_index=True)

# =======================================================================
# ABA 9. IMPORTAÇÃO
# =======================================================================
with aba_importacao:
    st.subheader("Importação de Planilhas")
    modo = st.radio(
        "Modo de importação:", options=["Adicionar aos dados existentes", "Substituir dados existentes"],
        horizontal=True,
    )
    append = modo.startswith("Adicionar")

    col_os, col_vendas = st.columns(2)
    with col_os:
        arquivo_os = st.file_uploader("Ordens de serviço (.xlsx, .xls, .csv)", type=['xlsx', 'xls', 'csv'], key='up_os')
        if arquivo_os is not None and st.button("Importar ordens de serviço"):
            try:
                novas = preparar_ordens_servico(ler_planilha(arquivo_os))
            except ErroImportacao as e:
                logger.error("Importação de ordens falhou: %s", e)
                st.error(f"❌ {e}")
            else:
                st.session_state['ordens'] = mesclar_ordens(df_ordens, novas, append)
                st.success(f"✅ {len(novas)} ordens de serviço processadas.")
                st.rerun()

    with col_vendas:
        arquivo_vendas = st.file_uploader("Vendas (.xlsx, .xls, .csv)", type=['xlsx', 'xls', 'csv'], key='up_vendas')
        if arquivo_vendas is not None and st.button("Importar vendas"):
            try:
                novas = preparar_vendas(ler_planilha(arquivo_vendas))
            except ErroImportacao as e:
                logger.error("Importação de vendas falhou: %s", e)
                st.error(f"❌ {e}")
            else:
                st.session_state['vendas'] = mesclar_vendas(df_vendas, novas, append)
                st.success(f"✅ {len(novas)} vendas processadas.")
                st.rerun()

    col_pag, col_metas = st.columns(2)
    with col_pag:
        arquivo_pag = st.file_uploader("Primeiro pagamento (.xlsx, .xls, .csv)", type=['xlsx', 'xls', 'csv'], key='up_pag')
        if arquivo_pag is not None and st.button("Importar pagamentos"):
            try:
                novos = preparar_pagamentos(ler_planilha(arquivo_pag))
            except ErroImportacao as e:
                logger.error("Importação de pagamentos falhou: %s", e)
                st.error(f"❌ {e}")
            else:
                st.session_state['pagamentos'] = mesclar_pagamentos(df_pagamentos, novos, append)
                st.success(f"✅ {len(novos)} pagamentos processados.")
                st.rerun()

    with col_metas:
        arquivo_metas = st.file_uploader("Metas (abas VENDAS PERMANENCIA, VENDAS META e METAS)",
                                         type=['xlsx', 'xls'], key='up_metas')
        if arquivo_metas is not None and st.button("Importar metas"):
            try:
                dados_importados = preparar_metas(arquivo_metas)
            except ErroImportacao as e:
                logger.error("Importação de metas falhou: %s", e)
                st.error(f"❌ {e}")
            else:
                st.session_state['metas'] = dados_importados
                # A aba VENDAS PERMANENCIA alimenta a base de vendas
                st.session_state['vendas'] = mesclar_vendas(df_vendas, dados_importados['vendas_permanencia'])
                st.success("✅ Metas importadas.")
                st.rerun()

    st.markdown("---")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Ordens de Serviço", formatar_milhar_br(len(df_ordens)))
    col2.metric("Vendas", formatar_milhar_br(len(df_vendas)))
    col3.metric("Pagamentos", formatar_milhar_br(len(df_pagamentos)))
    col4.metric("Metas", formatar_milhar_br(len(dados_metas.get('metas', pd.DataFrame()))))
