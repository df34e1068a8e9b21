import unittest
from pathlib import Path

RAIZ = Path(__file__).resolve().parent.parent


class AppTextosTests(unittest.TestCase):
    def test_textos_da_interface_sem_travessao(self) -> None:
        for nome in ("app.py", "main.py", "run_demo.py"):
            with self.subTest(arquivo=nome):
                texto = (RAIZ / nome).read_text(encoding="utf-8")
                self.assertNotIn("—", texto)

    def test_aviso_do_modo_demo(self) -> None:
        texto = (RAIZ / "app.py").read_text(encoding="utf-8")
        self.assertIn('st.warning("DEMO: não insira dados sensíveis.")', texto)


if __name__ == "__main__":
    unittest.main()
