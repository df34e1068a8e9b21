from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence

from dto import RegimeResult


def _finito(valor: float) -> bool:
    return isinstance(valor, (int, float)) and math.isfinite(valor)


def melhor_regime(resultados: Sequence[RegimeResult]) -> Optional[RegimeResult]:
    """
    Regime com menor imposto total. Empate mantem a ordem original;
    totais nao finitos (receita zero) nunca vencem.
    """
    candidatos = [r for r in resultados if _finito(r.imposto_total)]
    if not candidatos:
        return None
    return min(candidatos, key=lambda r: r.imposto_total)


def linhas_comparativo(resultados: Sequence[RegimeResult]) -> List[Dict[str, Any]]:
    """Linhas para tabela/grafico: economia medida contra o regime mais caro."""
    totais = [r.imposto_total for r in resultados if _finito(r.imposto_total)]
    pior = max(totais) if totais else None
    melhor = melhor_regime(resultados)

    rows: List[Dict[str, Any]] = []
    for r in resultados:
        economia = (pior - r.imposto_total) if pior is not None and _finito(r.imposto_total) else None
        rows.append(
            {
                "regime_code": r.regime_code,
                "regime": r.regime,
                "imposto_total": r.imposto_total,
                "aliquota_efetiva": r.aliquota_efetiva,
                "deducoes": r.deducoes,
                "economia_vs_pior": economia,
                "mais_economico": melhor is not None and r.regime_code == melhor.regime_code,
            }
        )
    return rows
