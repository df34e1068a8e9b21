from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from dto import TIPO_RECEITA, Transaction


@dataclass(frozen=True)
class CashFlowSummary:
    total_receitas: float
    total_despesas: float
    saldo: float
    quantidade: int
    por_categoria: Dict[str, float] = field(default_factory=dict)  # liquido com sinal


def resumir_fluxo_caixa(transacoes: Iterable[Transaction]) -> CashFlowSummary:
    receitas = 0.0
    despesas = 0.0
    quantidade = 0
    por_categoria: Dict[str, float] = {}

    for t in transacoes:
        quantidade += 1
        if t.tipo == TIPO_RECEITA:
            receitas += t.valor
        else:
            despesas += t.valor
        por_categoria[t.categoria] = por_categoria.get(t.categoria, 0.0) + t.valor_com_sinal

    return CashFlowSummary(
        total_receitas=receitas,
        total_despesas=despesas,
        saldo=receitas - despesas,
        quantidade=quantidade,
        por_categoria=por_categoria,
    )


@dataclass(frozen=True)
class CategoriaDespesa:
    categoria: str
    valor: float
    percentual: float  # participacao no total de despesas (0-100)


def distribuicao_despesas(transacoes: Iterable[Transaction]) -> List[CategoriaDespesa]:
    """Despesas agrupadas por categoria, maior valor primeiro; so receitas -> lista vazia."""
    totais: Dict[str, float] = {}
    for t in transacoes:
        if t.tipo == TIPO_RECEITA:
            continue
        totais[t.categoria] = totais.get(t.categoria, 0.0) + t.valor

    total = sum(totais.values())
    if total <= 0:
        return []
    itens = [CategoriaDespesa(c, v, v / total * 100.0) for c, v in totais.items()]
    return sorted(itens, key=lambda item: item.valor, reverse=True)
