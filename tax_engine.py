from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

from dto import BusinessInput, RegimeResult, TaxBreakdown
from regime_utils import (
    REGIME_CODE_PRESUMIDO,
    REGIME_CODE_REAL,
    REGIME_CODE_SIMPLES,
    REGIME_CODES,
    display_by_code,
)
from regimes import dividir, imposto_lucro_presumido, imposto_lucro_real, imposto_simples_nacional
from tax_params import DEFAULT_PARAMETERS, TaxParameters

CalculoRegime = Callable[[BusinessInput, TaxParameters], Tuple[float, float, TaxBreakdown, Dict[str, Any]]]

DETALHES_SIMPLES = (
    "Imposto unificado em guia única (DAS)",
    "Inclui IRPJ, CSLL, PIS, COFINS, ISS e CPP",
    "Cálculo baseado no faturamento bruto anual",
)
DETALHES_PRESUMIDO = (
    "PIS (0.65%) e COFINS (3.00%) cumulativos",
    "IRPJ e CSLL sobre lucro presumido (32%)",
    "ISS calculado sobre faturamento (com deduções se aplicável)",
)
DETALHES_REAL = (
    "PIS e COFINS não-cumulativos com créditos",
    "IRPJ e CSLL sobre lucro contábil real",
    "Ideal para empresas com margens baixas ou altos custos dedutíveis",
)


class TaxSimulator:
    """
    Simulador puro: BusinessInput -> [Simples Nacional, Lucro Presumido, Lucro Real].
    Sem I/O e sem estado mutavel; pode ser chamado a cada alteracao de input.
    Receita zero gera aliquota_efetiva nan/inf: quem exibe deve tratar.
    """

    _CALCULOS: Dict[str, Tuple[CalculoRegime, Tuple[str, ...]]] = {
        REGIME_CODE_SIMPLES: (imposto_simples_nacional, DETALHES_SIMPLES),
        REGIME_CODE_PRESUMIDO: (imposto_lucro_presumido, DETALHES_PRESUMIDO),
        REGIME_CODE_REAL: (imposto_lucro_real, DETALHES_REAL),
    }

    def __init__(self, parametros: Optional[TaxParameters] = None) -> None:
        self.parametros = parametros or DEFAULT_PARAMETERS

    def _resultado_regime(self, inp: BusinessInput, regime_code: str) -> RegimeResult:
        calcular, detalhes = self._CALCULOS[regime_code]
        imposto, deducoes, breakdown, memoria = calcular(inp, self.parametros)
        memoria = dict(memoria)
        memoria["ruleset_id"] = self.parametros.ruleset_id
        return RegimeResult(
            regime=display_by_code(regime_code),
            regime_code=regime_code,
            imposto_total=imposto,
            aliquota_efetiva=dividir(imposto, inp.receita_mensal) * 100.0,
            deducoes=deducoes,
            detalhes=detalhes,
            breakdown=breakdown,
            memoria_calculo=memoria,
        )

    def simulate(self, inp: BusinessInput) -> List[RegimeResult]:
        return [self._resultado_regime(inp, code) for code in REGIME_CODES]


def simulate_taxes(inp: BusinessInput, parametros: Optional[TaxParameters] = None) -> List[RegimeResult]:
    return TaxSimulator(parametros).simulate(inp)
