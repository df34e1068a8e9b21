import json
import os
import tempfile
import unittest
from datetime import date
from unittest.mock import patch

import business_store
from business_store import (
    ARQUIVO_NEGOCIO,
    ARQUIVO_TRANSACOES,
    DATA_DIR_ENV_VAR,
    adicionar_transacao,
    carregar_dados_negocio,
    listar_transacoes,
    salvar_dados_negocio,
)
from dto import BusinessInput


class DadosNegocioStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.pasta = self._tmp.name

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_salvar_e_carregar(self) -> None:
        inp = BusinessInput(receita_mensal=50000.0, despesas_mensais=15000.0, aliquota_iss=5.0)
        caminho = salvar_dados_negocio("user-1", inp, pasta=self.pasta)

        self.assertEqual(caminho, os.path.join(self.pasta, ARQUIVO_NEGOCIO))
        self.assertEqual(carregar_dados_negocio("user-1", pasta=self.pasta), inp)

    def test_upsert_por_usuario(self) -> None:
        salvar_dados_negocio("a", BusinessInput(receita_mensal=1000.0), pasta=self.pasta)
        salvar_dados_negocio("b", BusinessInput(receita_mensal=2000.0), pasta=self.pasta)
        salvar_dados_negocio("a", BusinessInput(receita_mensal=3000.0), pasta=self.pasta)

        self.assertEqual(carregar_dados_negocio("a", pasta=self.pasta).receita_mensal, 3000.0)
        self.assertEqual(carregar_dados_negocio("b", pasta=self.pasta).receita_mensal, 2000.0)
        with open(os.path.join(self.pasta, ARQUIVO_NEGOCIO), "r", encoding="utf-8") as f:
            payload = json.load(f)
        self.assertEqual(sorted(payload.keys()), ["a", "b"])
        self.assertIn("updated_at", payload["a"])

    def test_usuario_sem_dados(self) -> None:
        self.assertIsNone(carregar_dados_negocio("ninguem", pasta=self.pasta))

    def test_registro_legado_camel_case(self) -> None:
        with open(os.path.join(self.pasta, ARQUIVO_NEGOCIO), "w", encoding="utf-8") as f:
            json.dump({"u": {"monthlyRevenue": 8000, "issRate": 2, "activityType": "commerce"}}, f)

        inp = carregar_dados_negocio("u", pasta=self.pasta)
        self.assertEqual(inp.receita_mensal, 8000.0)
        self.assertEqual(inp.aliquota_iss, 2.0)
        self.assertEqual(inp.tipo_atividade, "comercio")
        self.assertEqual(inp.consumiveis, 0.0)

    def test_arquivo_corrompido_tratado_como_vazio(self) -> None:
        with open(os.path.join(self.pasta, ARQUIVO_NEGOCIO), "w", encoding="utf-8") as f:
            f.write("{nao e json")
        with self.assertLogs("business_store", level="WARNING"):
            self.assertIsNone(carregar_dados_negocio("u", pasta=self.pasta))

    def test_user_id_obrigatorio(self) -> None:
        with self.assertRaises(ValueError):
            salvar_dados_negocio("  ", BusinessInput(receita_mensal=1.0), pasta=self.pasta)

    def test_aliquota_iss_fora_da_faixa_nao_e_gravada(self) -> None:
        for aliquota in (-1.0, 100.5):
            with self.subTest(aliquota=aliquota):
                with self.assertRaises(ValueError):
                    salvar_dados_negocio("u", BusinessInput(receita_mensal=1.0, aliquota_iss=aliquota), pasta=self.pasta)
        self.assertFalse(os.path.exists(os.path.join(self.pasta, ARQUIVO_NEGOCIO)))
        salvar_dados_negocio("u", BusinessInput(receita_mensal=1.0, aliquota_iss=100.0), pasta=self.pasta)
        self.assertEqual(carregar_dados_negocio("u", pasta=self.pasta).aliquota_iss, 100.0)

    def test_pasta_relativa_usa_variavel_de_ambiente(self) -> None:
        with patch.dict(os.environ, {DATA_DIR_ENV_VAR: self.pasta}):
            caminho = salvar_dados_negocio("u", BusinessInput(receita_mensal=1.0), pasta="data")
        self.assertEqual(caminho, os.path.join(self.pasta, "data", ARQUIVO_NEGOCIO))
        self.assertTrue(os.path.isfile(caminho))

    def test_pasta_relativa_usa_diretorio_de_trabalho(self) -> None:
        env = {k: v for k, v in os.environ.items() if k != DATA_DIR_ENV_VAR}
        with patch.dict(os.environ, env, clear=True), patch.object(
            business_store.os, "getcwd", return_value=self.pasta
        ):
            caminho = salvar_dados_negocio("u", BusinessInput(receita_mensal=1.0), pasta="data_demo")
            self.assertIsNotNone(carregar_dados_negocio("u", pasta="data_demo"))
        self.assertEqual(caminho, os.path.join(self.pasta, "data_demo", ARQUIVO_NEGOCIO))
        self.assertNotIn(os.path.dirname(os.path.abspath(business_store.__file__)), caminho)


class TransacoesStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.pasta = self._tmp.name

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_adicionar_normaliza_campos(self) -> None:
        t = adicionar_transacao(
            "u", descricao="  Serviço  ", valor="1.234,50", tipo="income", data="2026-03-01", categoria="serviços",
            pasta=self.pasta,
        )
        self.assertEqual(len(t.id), 32)
        self.assertEqual(t.descricao, "Serviço")
        self.assertAlmostEqual(t.valor, 1234.5)
        self.assertEqual(t.tipo, "receita")
        self.assertEqual(t.categoria, "Servicos")

    def test_data_padrao_e_hoje(self) -> None:
        t = adicionar_transacao("u", descricao="x", valor=10, tipo="despesa", pasta=self.pasta)
        self.assertEqual(t.data, date.today().isoformat())
        self.assertEqual(t.categoria, "Outros")

    def test_listar_mais_recentes_primeiro(self) -> None:
        primeira = adicionar_transacao("u", "a", 10, "despesa", data="2026-01-10", pasta=self.pasta)
        adicionar_transacao("u", "b", 20, "receita", data="2026-02-01", pasta=self.pasta)
        segunda = adicionar_transacao("u", "c", 30, "despesa", data="2026-01-10", pasta=self.pasta)
        adicionar_transacao("outro", "d", 40, "receita", data="2026-05-01", pasta=self.pasta)

        transacoes = listar_transacoes("u", pasta=self.pasta)
        self.assertEqual([t.descricao for t in transacoes], ["b", "c", "a"])
        self.assertEqual(transacoes[1].id, segunda.id)
        self.assertEqual(transacoes[2].id, primeira.id)
        self.assertEqual(len(listar_transacoes("u", limit=2, pasta=self.pasta)), 2)

    def test_linha_corrompida_ignorada(self) -> None:
        adicionar_transacao("u", "a", 10, "despesa", data="2026-01-10", pasta=self.pasta)
        with open(os.path.join(self.pasta, ARQUIVO_TRANSACOES), "a", encoding="utf-8") as f:
            f.write("{quebrada\n")
        adicionar_transacao("u", "b", 10, "receita", data="2026-01-11", pasta=self.pasta)

        with self.assertLogs("business_store", level="WARNING"):
            transacoes = listar_transacoes("u", pasta=self.pasta)
        self.assertEqual([t.descricao for t in transacoes], ["b", "a"])

    def test_sem_arquivo_lista_vazia(self) -> None:
        self.assertEqual(listar_transacoes("u", pasta=self.pasta), [])

    def test_validacoes(self) -> None:
        casos = [
            dict(descricao="x", valor=0, tipo="despesa"),
            dict(descricao="x", valor=-5, tipo="despesa"),
            dict(descricao="x", valor="abc", tipo="despesa"),
            dict(descricao="x", valor=10, tipo="transferencia"),
            dict(descricao="x", valor=10, tipo="despesa", data="2026-02-30"),
            dict(descricao="x", valor=10, tipo="despesa", data="01/02/2026"),
            dict(descricao="   ", valor=10, tipo="despesa"),
        ]
        for kwargs in casos:
            with self.subTest(**{k: str(v) for k, v in kwargs.items()}):
                with self.assertRaises(ValueError):
                    adicionar_transacao("u", pasta=self.pasta, **kwargs)
        self.assertFalse(os.path.exists(os.path.join(self.pasta, ARQUIVO_TRANSACOES)))


if __name__ == "__main__":
    unittest.main()
