import math
import os
import tempfile
import unittest

from dto import BusinessInput
from formatters import formatar_percentual, formatar_reais, nome_arquivo_seguro
from pdf_exporter import salvar_relatorio_pdf
from report_builder import linhas_dados_negocio, montar_relatorio_simulacao, texto_recomendacao
from tax_engine import simulate_taxes


def _exemplo() -> BusinessInput:
    return BusinessInput(
        receita_mensal=50000.0,
        despesas_mensais=15000.0,
        custo_funcionarios=10000.0,
        aluguel_maquinas=2000.0,
        consumiveis=1500.0,
        aliquota_iss=5.0,
    )


class FormattersTests(unittest.TestCase):
    def test_formatar_reais(self) -> None:
        self.assertEqual(formatar_reais(1234.56), "R$ 1.234,56")
        self.assertEqual(formatar_reais(12111.25), "R$ 12.111,25")
        self.assertEqual(formatar_reais(0), "R$ 0,00")
        self.assertEqual(formatar_reais(math.nan), "N/D")
        self.assertEqual(formatar_reais(None), "N/D")

    def test_formatar_percentual(self) -> None:
        self.assertEqual(formatar_percentual(10.56), "10,56%")
        self.assertEqual(formatar_percentual(0.1056, ja_percentual=False), "10,56%")
        self.assertEqual(formatar_percentual(24.2225, casas=1), "24,2%")
        self.assertEqual(formatar_percentual(math.inf), "N/D")

    def test_nome_arquivo_seguro(self) -> None:
        self.assertEqual(nome_arquivo_seguro("Maria & Filhos Ltda."), "relatorio_Maria__Filhos_Ltda")
        self.assertEqual(nome_arquivo_seguro(""), "relatorio_empresa")


class RelatorioTextoTests(unittest.TestCase):
    def test_dados_do_negocio(self) -> None:
        linhas = dict(linhas_dados_negocio(_exemplo()))
        self.assertEqual(linhas["Receita Mensal"], "R$ 50.000,00")
        self.assertEqual(linhas["Folha de Pagamento"], "R$ 10.000,00")
        self.assertEqual(linhas["Alíquota ISS"], "5,00%")

    def test_relatorio_completo(self) -> None:
        texto = montar_relatorio_simulacao(_exemplo(), simulate_taxes(_exemplo()))

        self.assertIn("=== DADOS DO NEGÓCIO ===", texto)
        self.assertIn("=== COMPARATIVO DE REGIMES ===", texto)
        self.assertIn("--- Lucro Presumido ---", texto)
        self.assertIn("Imposto total: R$ 8.090,00", texto)
        self.assertIn("Alíquota efetiva: 24,22%", texto)
        self.assertIn("Recomendação: O regime mais econômico é o Simples Nacional.", texto)

    def test_recomendacao_indisponivel_com_receita_zero(self) -> None:
        resultados = simulate_taxes(BusinessInput(receita_mensal=0.0))
        # Presumido e Real ficam em 0,00; Simples em nan
        self.assertIn("Lucro Presumido", texto_recomendacao(resultados))
        self.assertIn(
            "Recomendação indisponível",
            texto_recomendacao([r for r in resultados if r.regime_code == "SIMPLES"]),
        )


class PdfExporterTests(unittest.TestCase):
    def test_salvar_relatorio_pdf(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            pasta = os.path.join(tmp, "pdfs")
            caminho = salvar_relatorio_pdf(_exemplo(), simulate_taxes(_exemplo()), nome_base="relatorio_teste", pasta=pasta)

            self.assertTrue(os.path.isfile(caminho))
            self.assertTrue(os.path.basename(caminho).startswith("relatorio_teste_"))
            self.assertTrue(caminho.endswith(".pdf"))
            with open(caminho, "rb") as f:
                self.assertEqual(f.read(4), b"%PDF")


if __name__ == "__main__":
    unittest.main()
