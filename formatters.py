import math
import re
from typing import Any

NAO_DISPONIVEL = "N/D"


def _numero_finito(valor: Any):
    try:
        numero = float(valor)
    except (TypeError, ValueError):
        return None
    return numero if math.isfinite(numero) else None


def _separadores_br(texto: str) -> str:
    # troca separadores estilo US -> BR
    return texto.replace(",", "X").replace(".", ",").replace("X", ".")


def formatar_reais(valor: Any) -> str:
    """Formato PT-BR (ex.: R$ 1.234,56); nan/inf viram N/D."""
    numero = _numero_finito(valor)
    if numero is None:
        return NAO_DISPONIVEL
    return f"R$ {_separadores_br(f'{numero:,.2f}')}"


def formatar_percentual(valor: Any, casas: int = 2, ja_percentual: bool = True) -> str:
    """Formata percentual em pt-BR (ex.: 10,56%)."""
    numero = _numero_finito(valor)
    if numero is None:
        return NAO_DISPONIVEL
    if not ja_percentual:
        numero *= 100.0
    return f"{_separadores_br(f'{numero:,.{casas}f}')}%"


def nome_arquivo_seguro(nome: str) -> str:
    """Gera base de nome de arquivo sem caracteres especiais."""
    nome_limpo = re.sub(r"[^a-zA-Z0-9_ -]", "", nome or "")
    nome_limpo = nome_limpo.strip().replace(" ", "_")
    return f"relatorio_{nome_limpo or 'empresa'}"
