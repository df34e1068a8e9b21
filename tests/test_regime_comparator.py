import math
import unittest

from dto import BusinessInput, RegimeResult, TaxBreakdown
from regime_comparator import linhas_comparativo, melhor_regime
from regime_utils import canonicalize_regime
from tax_engine import simulate_taxes


def _resultado(code: str, total: float) -> RegimeResult:
    return RegimeResult(
        regime=code.title(),
        regime_code=code,
        imposto_total=total,
        aliquota_efetiva=0.0,
        deducoes=0.0,
        detalhes=(),
        breakdown=TaxBreakdown(0.0, 0.0, 0.0, 0.0, 0.0, total),
    )


class RegimeComparatorTests(unittest.TestCase):
    def test_melhor_regime_exemplo(self) -> None:
        resultados = simulate_taxes(
            BusinessInput(
                receita_mensal=50000.0,
                despesas_mensais=15000.0,
                custo_funcionarios=10000.0,
                aluguel_maquinas=2000.0,
                consumiveis=1500.0,
                aliquota_iss=5.0,
            )
        )
        melhor = melhor_regime(resultados)
        self.assertIsNotNone(melhor)
        self.assertEqual(melhor.regime_code, "SIMPLES")

    def test_empate_mantem_primeiro(self) -> None:
        resultados = [_resultado("SIMPLES", 100.0), _resultado("PRESUMIDO", 100.0), _resultado("REAL", 200.0)]
        self.assertEqual(melhor_regime(resultados).regime_code, "SIMPLES")

    def test_total_nao_finito_nao_vence(self) -> None:
        resultados = [_resultado("SIMPLES", math.nan), _resultado("PRESUMIDO", 50.0), _resultado("REAL", 40.0)]
        self.assertEqual(melhor_regime(resultados).regime_code, "REAL")
        self.assertIsNone(melhor_regime([_resultado("SIMPLES", math.nan)]))

    def test_linhas_comparativo_economia_vs_pior(self) -> None:
        resultados = [_resultado("SIMPLES", 5280.0), _resultado("PRESUMIDO", 8090.0), _resultado("REAL", 12111.25)]
        rows = linhas_comparativo(resultados)

        self.assertEqual([r["regime_code"] for r in rows], ["SIMPLES", "PRESUMIDO", "REAL"])
        self.assertAlmostEqual(rows[0]["economia_vs_pior"], 6831.25, places=2)
        self.assertAlmostEqual(rows[2]["economia_vs_pior"], 0.0, places=2)
        self.assertEqual([r["mais_economico"] for r in rows], [True, False, False])

    def test_linhas_comparativo_com_nan(self) -> None:
        rows = linhas_comparativo([_resultado("SIMPLES", math.nan), _resultado("PRESUMIDO", 0.0)])
        self.assertIsNone(rows[0]["economia_vs_pior"])
        self.assertTrue(rows[1]["mais_economico"])


class CanonicalizeRegimeTests(unittest.TestCase):
    def test_rotulos_livres(self) -> None:
        self.assertEqual(canonicalize_regime("Lucro Presumido")["regime_code"], "PRESUMIDO")
        self.assertEqual(canonicalize_regime("lucro real")["regime_display"], "Lucro Real")
        self.assertEqual(canonicalize_regime("REAL")["regime_code"], "REAL")
        self.assertEqual(canonicalize_regime("qualquer coisa")["regime_code"], "SIMPLES")

    def test_regime_code_tem_precedencia(self) -> None:
        self.assertEqual(canonicalize_regime("Simples", regime_code="real")["regime_code"], "REAL")


if __name__ == "__main__":
    unittest.main()
