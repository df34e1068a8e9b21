import logging
import os
from datetime import datetime
from typing import List, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from dto import BusinessInput, RegimeResult
from report_builder import TITULO_RELATORIO, linhas_dados_negocio, linhas_regimes, texto_recomendacao

logger = logging.getLogger(__name__)

MARGEM_X = 40
LINHA_ALTURA = 16
MARGEM_INFERIOR = 60


def salvar_relatorio_pdf(
    inp: BusinessInput,
    resultados: Sequence[RegimeResult],
    nome_base: str = "relatorio",
    pasta: str = "outputs_pdfs",
) -> str:
    os.makedirs(pasta, exist_ok=True)

    agora = datetime.now()
    nome = f"{nome_base}_{agora.strftime('%Y-%m-%d_%H-%M-%S')}.pdf"
    caminho = os.path.join(pasta, nome)

    c = canvas.Canvas(caminho, pagesize=A4)
    width, height = A4
    y = height - 50

    def quebra_se_preciso(y_pos: float) -> float:
        if y_pos < MARGEM_INFERIOR:
            c.showPage()
            return height - 50
        return y_pos

    def tabela(cabecalho: List[str], linhas: List[List[str]], colunas_x: List[float], y_pos: float) -> float:
        c.setFont("Helvetica-Bold", 10)
        for texto, x in zip(cabecalho, colunas_x):
            c.drawString(x, y_pos, texto)
        y_pos -= 4
        c.line(MARGEM_X, y_pos, width - MARGEM_X, y_pos)
        y_pos -= LINHA_ALTURA - 4
        c.setFont("Helvetica", 10)
        for linha in linhas:
            y_pos = quebra_se_preciso(y_pos)
            for texto, x in zip(linha, colunas_x):
                c.drawString(x, y_pos, texto)
            y_pos -= LINHA_ALTURA
        return y_pos

    c.setFont("Helvetica-Bold", 18)
    c.drawString(MARGEM_X, y, TITULO_RELATORIO)
    y -= 20
    c.setFont("Helvetica", 10)
    c.drawString(MARGEM_X, y, f"Gerado em: {agora.strftime('%d/%m/%Y')}")
    y -= 30

    c.setFont("Helvetica-Bold", 13)
    c.drawString(MARGEM_X, y, "Dados do Negócio")
    y -= 20
    y = tabela(["Campo", "Valor"], linhas_dados_negocio(inp), [MARGEM_X, MARGEM_X + 220], y)
    y -= 20

    y = quebra_se_preciso(y)
    c.setFont("Helvetica-Bold", 13)
    c.drawString(MARGEM_X, y, "Comparativo de Regimes")
    y -= 20
    y = tabela(
        ["Regime", "Imposto Total", "Alíquota Efetiva"],
        linhas_regimes(resultados),
        [MARGEM_X, MARGEM_X + 180, MARGEM_X + 340],
        y,
    )
    y -= 20

    y = quebra_se_preciso(y)
    c.setFont("Helvetica-Bold", 12)
    c.setFillColorRGB(16 / 255, 185 / 255, 129 / 255)
    c.drawString(MARGEM_X, y, texto_recomendacao(resultados))
    c.setFillColorRGB(0, 0, 0)

    c.save()
    logger.info("relatorio PDF gerado: %s", caminho)
    return caminho
