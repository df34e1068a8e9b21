import math
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

import streamlit as st

from advisor import AdvisorError, AdvisorUnavailableError, FinancialAdvisor
from business_store import adicionar_transacao, carregar_dados_negocio, listar_transacoes, salvar_dados_negocio
from cashflow import distribuicao_despesas, resumir_fluxo_caixa
from demo_config import (
    DEMO_USER_ID,
    PADRAO_FORMULARIO,
    demo_example_business,
    demo_transactions,
    resolve_demo_mode,
    resolve_storage_targets,
)
from dto import CATEGORIAS_TRANSACAO, TIPO_DESPESA, TIPO_RECEITA, TIPOS_ATIVIDADE, BusinessInput, RegimeResult
from formatters import formatar_percentual, formatar_reais, nome_arquivo_seguro
from pdf_exporter import salvar_relatorio_pdf
from regime_comparator import linhas_comparativo, melhor_regime
from regime_utils import REGIME_DISPLAY_PRESUMIDO, REGIME_DISPLAY_REAL, REGIME_DISPLAY_SIMPLES
from ruleset_loader import DEFAULT_RULESET_ID, get_tax_parameters
from tax_engine import TaxSimulator

TEMAS_CONSULTOR = [
    "Simples Nacional e a guia DAS",
    "Lucro Presumido para prestadores de serviço",
    "Lucro Real e créditos de PIS/COFINS",
    "Pró-labore e distribuição de lucros",
    "Fluxo de caixa e capital de giro",
]


def _tabela_comparativo(resultados: Sequence[RegimeResult]) -> List[Dict[str, Any]]:
    tabela: List[Dict[str, Any]] = []
    for row in linhas_comparativo(resultados):
        tabela.append(
            {
                "Regime": row["regime"],
                "Imposto total": formatar_reais(row["imposto_total"]),
                "Alíquota efetiva": formatar_percentual(row["aliquota_efetiva"]),
                "Deduções": formatar_reais(row["deducoes"]),
                "Economia vs. mais caro": formatar_reais(row["economia_vs_pior"]),
                "Mais econômico": "✔" if row["mais_economico"] else "",
            }
        )
    return tabela


def _dados_grafico(resultados: Sequence[RegimeResult]) -> Dict[str, List[Any]]:
    return {
        "Regime": [r.regime for r in resultados],
        "Imposto total (R$)": [
            round(r.imposto_total, 2) if math.isfinite(r.imposto_total) else 0.0 for r in resultados
        ],
    }


def _renderizar_regime(r: RegimeResult) -> None:
    st.markdown(f"#### {r.regime}")
    c1, c2, c3 = st.columns(3)
    c1.metric("Imposto total", formatar_reais(r.imposto_total))
    c2.metric("Alíquota efetiva", formatar_percentual(r.aliquota_efetiva))
    c3.metric("Deduções", formatar_reais(r.deducoes))
    b = r.breakdown
    st.dataframe(
        [
            {"Tributo": "PIS", "Valor (R$)": formatar_reais(b.pis)},
            {"Tributo": "COFINS", "Valor (R$)": formatar_reais(b.cofins)},
            {"Tributo": "IRPJ", "Valor (R$)": formatar_reais(b.irpj)},
            {"Tributo": "CSLL", "Valor (R$)": formatar_reais(b.csll)},
            {"Tributo": "ISS", "Valor (R$)": formatar_reais(b.iss)},
        ],
        hide_index=True,
        width="stretch",
    )
    for d in r.detalhes:
        st.caption(f"• {d}")


def _advisor() -> Optional[FinancialAdvisor]:
    try:
        return FinancialAdvisor()
    except AdvisorUnavailableError as exc:
        st.info(str(exc))
        return None


st.set_page_config(page_title="TaxFlow", layout="wide")
st.title("TaxFlow")
st.caption("Fluxo de caixa e comparativo de regimes tributários para pequenos negócios.")

if "negocio" not in st.session_state:
    st.session_state["negocio"] = None
if "alertas" not in st.session_state:
    st.session_state["alertas"] = []
if "conselho" not in st.session_state:
    st.session_state["conselho"] = ""

try:
    simulator = TaxSimulator(get_tax_parameters(DEFAULT_RULESET_ID))
except (FileNotFoundError, ValueError) as exc:
    st.error(f"Falha ao carregar parametros tributarios: {exc}")
    st.stop()

with st.sidebar:
    st.header("Configuracoes")
    demo_toggle = st.toggle(
        "Modo DEMO",
        value=resolve_demo_mode(toggle_enabled=False),
    )
    demo_mode = resolve_demo_mode(toggle_enabled=demo_toggle)
    storage_targets = resolve_storage_targets(demo_mode)

    user_id = st.text_input("Usuário", value=DEMO_USER_ID if demo_mode else "").strip()
    if st.session_state.get("negocio_user") != user_id:
        st.session_state["negocio"] = None
        st.session_state["negocio_user"] = user_id

    if demo_mode:
        st.caption("DEMO ativa: dados e exportacoes sao isolados em pastas *_demo.")
        for rotulo, chave in (
            ("Exemplo - padrão", "padrao"),
            ("Exemplo - pequeno prestador", "pequeno"),
            ("Exemplo - margem baixa", "margem_baixa"),
        ):
            if st.button(rotulo, use_container_width=True, key=f"demo_{chave}"):
                st.session_state["negocio"] = demo_example_business(chave)
                st.rerun()

    carregado: Optional[BusinessInput] = st.session_state["negocio"]
    if carregado is None and user_id:
        carregado = carregar_dados_negocio(user_id, pasta=storage_targets["store_pasta"])
    base = carregado or PADRAO_FORMULARIO

    st.markdown("---")
    st.subheader("Dados do negócio")
    receita_mensal = st.number_input("Receita mensal (R$)", min_value=0.0, value=base.receita_mensal, step=1000.0)
    despesas_mensais = st.number_input("Despesas operacionais (R$)", min_value=0.0, value=base.despesas_mensais, step=500.0)
    custo_funcionarios = st.number_input("Folha de pagamento (R$)", min_value=0.0, value=base.custo_funcionarios, step=500.0)
    aluguel_maquinas = st.number_input("Aluguel de máquinas (R$)", min_value=0.0, value=base.aluguel_maquinas, step=100.0)
    consumiveis = st.number_input("Consumíveis (R$)", min_value=0.0, value=base.consumiveis, step=100.0)
    tipo_atividade = st.selectbox(
        "Tipo de atividade",
        list(TIPOS_ATIVIDADE),
        index=list(TIPOS_ATIVIDADE).index(base.tipo_atividade) if base.tipo_atividade in TIPOS_ATIVIDADE else 0,
    )
    aliquota_iss = st.number_input(
        "Alíquota ISS (%)", min_value=0.0, max_value=100.0, value=base.aliquota_iss, step=0.5
    )

inp = BusinessInput(
    receita_mensal=float(receita_mensal),
    despesas_mensais=float(despesas_mensais),
    custo_funcionarios=float(custo_funcionarios),
    aluguel_maquinas=float(aluguel_maquinas),
    consumiveis=float(consumiveis),
    tipo_atividade=tipo_atividade,
    aliquota_iss=float(aliquota_iss),
)
resultados = simulator.simulate(inp)

if user_id and inp != carregado:
    salvar_dados_negocio(user_id, inp, pasta=storage_targets["store_pasta"])
    st.session_state["negocio"] = inp

if demo_mode:
    st.warning("DEMO: não insira dados sensíveis.")
if inp.receita_mensal <= 0:
    st.warning("Informe a receita mensal (> 0) para calcular alíquotas efetivas.")

tab_dash, tab_sim, tab_caixa, tab_consultor, tab_alertas = st.tabs(
    ["Dashboard", "Simulador", "Fluxo de caixa", "Consultor", "Alertas"]
)

with tab_dash:
    melhor = melhor_regime(resultados)
    if melhor is not None:
        st.success(f"Regime mais econômico: **{melhor.regime}** ({formatar_reais(melhor.imposto_total)}/mês)")
    st.bar_chart(_dados_grafico(resultados), x="Regime", y="Imposto total (R$)")
    st.dataframe(_tabela_comparativo(resultados), hide_index=True, width="stretch")

    if st.button("Exportar PDF"):
        caminho = salvar_relatorio_pdf(
            inp,
            resultados,
            nome_base=nome_arquivo_seguro(user_id or "empresa"),
            pasta=storage_targets["outputs_pdf_pasta"],
        )
        st.info(f"PDF salvo: {caminho}")

with tab_sim:
    for r in resultados:
        _renderizar_regime(r)
        st.markdown("---")
    st.caption("Simples Nacional: a partilha exibida é uma distribuição aproximada do DAS.")

with tab_caixa:
    if not user_id:
        st.info("Informe o usuário na barra lateral para registrar transações.")
    else:
        with st.form("nova_transacao", clear_on_submit=True):
            c1, c2 = st.columns(2)
            with c1:
                descricao = st.text_input("Descrição")
                valor = st.number_input("Valor (R$)", min_value=0.0, step=10.0)
                data_tr = st.date_input("Data", value=date.today())
            with c2:
                tipo_label = st.selectbox("Tipo", ["Receita (+)", "Despesa (-)"], index=1)
                categoria = st.selectbox("Categoria", list(CATEGORIAS_TRANSACAO), index=len(CATEGORIAS_TRANSACAO) - 1)
            enviado = st.form_submit_button("Adicionar transação")

        if enviado:
            try:
                adicionar_transacao(
                    user_id,
                    descricao=descricao,
                    valor=valor,
                    tipo=TIPO_RECEITA if tipo_label.startswith("Receita") else TIPO_DESPESA,
                    data=data_tr.isoformat(),
                    categoria=categoria,
                    pasta=storage_targets["store_pasta"],
                )
                st.success("Transação registrada.")
            except ValueError as exc:
                st.error(str(exc))

        if demo_mode and st.button("Carregar transações de exemplo"):
            for item in demo_transactions():
                adicionar_transacao(user_id, pasta=storage_targets["store_pasta"], **item)
            st.rerun()

        transacoes = listar_transacoes(user_id, limit=200, pasta=storage_targets["store_pasta"])
        resumo = resumir_fluxo_caixa(transacoes)
        m1, m2, m3 = st.columns(3)
        m1.metric("Receitas", formatar_reais(resumo.total_receitas))
        m2.metric("Despesas", formatar_reais(resumo.total_despesas))
        m3.metric("Saldo", formatar_reais(resumo.saldo))

        distribuicao = distribuicao_despesas(transacoes)
        if distribuicao:
            st.markdown("#### Distribuição de gastos")
            c_graf, c_tab = st.columns(2)
            with c_graf:
                st.bar_chart(
                    {
                        "Categoria": [item.categoria for item in distribuicao],
                        "Valor (R$)": [round(item.valor, 2) for item in distribuicao],
                    },
                    x="Categoria",
                    y="Valor (R$)",
                )
            with c_tab:
                st.dataframe(
                    [
                        {
                            "Categoria": item.categoria,
                            "Valor": formatar_reais(item.valor),
                            "Participação": formatar_percentual(item.percentual, casas=1),
                            "Saldo da categoria": formatar_reais(resumo.por_categoria.get(item.categoria, 0.0)),
                        }
                        for item in distribuicao
                    ],
                    hide_index=True,
                    width="stretch",
                )

        if transacoes:
            st.dataframe(
                [
                    {
                        "Data": t.data,
                        "Descrição": t.descricao,
                        "Categoria": t.categoria,
                        "Valor": ("+ " if t.tipo == TIPO_RECEITA else "- ") + formatar_reais(t.valor),
                    }
                    for t in transacoes
                ],
                hide_index=True,
                width="stretch",
            )
        else:
            st.caption("Nenhuma transação registrada.")

with tab_consultor:
    tema = st.selectbox("Tema", TEMAS_CONSULTOR)
    if st.button("Pedir explicação"):
        advisor = _advisor()
        if advisor is not None:
            with st.spinner("Consultando..."):
                try:
                    st.session_state["conselho"] = advisor.conselho_financeiro(tema)
                except AdvisorError as exc:
                    st.session_state["conselho"] = ""
                    st.error(f"Erro ao obter conselhos. Tente novamente. ({exc})")
    if st.session_state["conselho"]:
        st.markdown(st.session_state["conselho"])

with tab_alertas:
    regimes_lista = [REGIME_DISPLAY_SIMPLES, REGIME_DISPLAY_PRESUMIDO, REGIME_DISPLAY_REAL]
    regime_alertas = st.selectbox("Regime considerado", regimes_lista, index=1)
    if st.button("Gerar alertas"):
        if not user_id:
            st.info("Informe o usuário para analisar as transações.")
        else:
            advisor = _advisor()
            if advisor is not None:
                transacoes = listar_transacoes(user_id, limit=100, pasta=storage_targets["store_pasta"])
                try:
                    st.session_state["alertas"] = advisor.alertas_tributarios(transacoes, regime_alertas)
                except AdvisorError as exc:
                    st.session_state["alertas"] = []
                    st.error(str(exc))

    alertas = st.session_state["alertas"]
    if not alertas:
        st.caption("Nenhum alerta no momento.")
    for alerta in alertas:
        texto = f"**{alerta.titulo}**\n\n{alerta.descricao}"
        if alerta.tipo == "warning":
            st.warning(texto)
        elif alerta.tipo == "success":
            st.success(texto)
        else:
            st.info(texto)
