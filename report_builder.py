from typing import List, Sequence

from dto import BusinessInput, RegimeResult
from formatters import formatar_percentual, formatar_reais
from regime_comparator import melhor_regime

TITULO_RELATORIO = "Relatório de Planejamento Tributário"


def linhas_dados_negocio(inp: BusinessInput) -> List[List[str]]:
    return [
        ["Receita Mensal", formatar_reais(inp.receita_mensal)],
        ["Despesas Operacionais", formatar_reais(inp.despesas_mensais)],
        ["Folha de Pagamento", formatar_reais(inp.custo_funcionarios)],
        ["Aluguel de Máquinas", formatar_reais(inp.aluguel_maquinas)],
        ["Consumíveis", formatar_reais(inp.consumiveis)],
        ["Alíquota ISS", formatar_percentual(inp.aliquota_iss)],
    ]


def linhas_regimes(resultados: Sequence[RegimeResult]) -> List[List[str]]:
    return [
        [r.regime, formatar_reais(r.imposto_total), formatar_percentual(r.aliquota_efetiva)]
        for r in resultados
    ]


def texto_recomendacao(resultados: Sequence[RegimeResult]) -> str:
    melhor = melhor_regime(resultados)
    if melhor is None:
        return "Recomendação indisponível: informe uma receita mensal maior que zero."
    return f"Recomendação: O regime mais econômico é o {melhor.regime}."


def montar_relatorio_simulacao(inp: BusinessInput, resultados: Sequence[RegimeResult]) -> str:
    linhas = []
    linhas.append("==============================================")
    linhas.append(f"   {TITULO_RELATORIO.upper()}")
    linhas.append("==============================================")
    linhas.append("=== DADOS DO NEGÓCIO ===")
    for campo, valor in linhas_dados_negocio(inp):
        linhas.append(f"{campo}: {valor}")
    linhas.append("")

    linhas.append("=== COMPARATIVO DE REGIMES ===")
    for r in resultados:
        b = r.breakdown
        linhas.append("")
        linhas.append(f"--- {r.regime} ---")
        linhas.append(f"Imposto total: {formatar_reais(r.imposto_total)}")
        linhas.append(f"Alíquota efetiva: {formatar_percentual(r.aliquota_efetiva)}")
        linhas.append(f"Deduções consideradas: {formatar_reais(r.deducoes)}")
        linhas.append(
            f"PIS {formatar_reais(b.pis)} | COFINS {formatar_reais(b.cofins)} | IRPJ {formatar_reais(b.irpj)} | "
            f"CSLL {formatar_reais(b.csll)} | ISS {formatar_reais(b.iss)}"
        )
        linhas.extend(f"- {d}" for d in r.detalhes)

    linhas.append("")
    linhas.append(texto_recomendacao(resultados))
    linhas.append("")
    linhas.append("Observação: Simulação simplificada, não substitui análise contábil.")
    linhas.append("==============================================")
    return "\n".join(linhas)
