import unittest

from input_utils import (
    normalizar_categoria,
    parse_valor,
    validar_aliquota_iss,
    validar_data,
    validar_tipo_transacao,
    validar_valor_nao_negativo,
)


class ParseValorTests(unittest.TestCase):
    def test_formatos_aceitos(self) -> None:
        self.assertEqual(parse_valor("1234.56"), 1234.56)
        self.assertEqual(parse_valor("1.234,56"), 1234.56)
        self.assertEqual(parse_valor("R$ 1.234,56"), 1234.56)
        self.assertEqual(parse_valor("1234,5"), 1234.5)
        self.assertEqual(parse_valor(""), 0.0)
        self.assertEqual(parse_valor(None), 0.0)
        self.assertEqual(parse_valor(42), 42.0)

    def test_invalidos(self) -> None:
        for texto in ("abc", "nan", "inf", "1,2,3"):
            with self.subTest(texto=texto):
                with self.assertRaises(ValueError):
                    parse_valor(texto)


class ValidacoesTests(unittest.TestCase):
    def test_aliquota_iss(self) -> None:
        self.assertEqual(validar_aliquota_iss("5%"), 5.0)
        self.assertEqual(validar_aliquota_iss("2,5"), 2.5)
        self.assertEqual(validar_aliquota_iss(0), 0.0)
        self.assertEqual(validar_aliquota_iss(100), 100.0)
        for invalido in (-1, 100.5, "150"):
            with self.subTest(valor=invalido):
                with self.assertRaises(ValueError):
                    validar_aliquota_iss(invalido)

    def test_valor_nao_negativo(self) -> None:
        self.assertEqual(validar_valor_nao_negativo("0", "Consumíveis"), 0.0)
        with self.assertRaises(ValueError) as ctx:
            validar_valor_nao_negativo("-10", "Consumíveis")
        self.assertIn("Consumíveis", str(ctx.exception))

    def test_data(self) -> None:
        self.assertEqual(validar_data(" 2026-02-28 "), "2026-02-28")
        for invalida in ("2026-02-30", "28/02/2026", "", None):
            with self.subTest(data=invalida):
                with self.assertRaises(ValueError):
                    validar_data(invalida)

    def test_tipo_transacao(self) -> None:
        self.assertEqual(validar_tipo_transacao("Income"), "receita")
        self.assertEqual(validar_tipo_transacao("saída"), "despesa")
        self.assertEqual(validar_tipo_transacao("+"), "receita")
        with self.assertRaises(ValueError):
            validar_tipo_transacao("transferencia")

    def test_categoria(self) -> None:
        self.assertEqual(normalizar_categoria("Marketing"), "Marketing")
        self.assertEqual(normalizar_categoria("equipamentos"), "Equipamento")
        self.assertEqual(normalizar_categoria("Viagem"), "Outros")
        self.assertEqual(normalizar_categoria(None), "Outros")


if __name__ == "__main__":
    unittest.main()
