import math
import re
from datetime import date
from typing import Any, Optional

from dto import CATEGORIA_PADRAO, CATEGORIAS_TRANSACAO, TIPO_DESPESA, TIPO_RECEITA

ALIQUOTA_ISS_MIN = 0.0
ALIQUOTA_ISS_MAX = 100.0

_RE_DATA = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_ALIASES_TIPO = {
    "receita": TIPO_RECEITA,
    "income": TIPO_RECEITA,
    "entrada": TIPO_RECEITA,
    "+": TIPO_RECEITA,
    "despesa": TIPO_DESPESA,
    "expense": TIPO_DESPESA,
    "saida": TIPO_DESPESA,
    "saída": TIPO_DESPESA,
    "-": TIPO_DESPESA,
}

_ALIASES_CATEGORIA = {
    "serviços": "Servicos",
    "servicos": "Servicos",
    "equipamento": "Equipamento",
    "equipamentos": "Equipamento",
    "insumos": "Insumos",
    "insumo": "Insumos",
    "marketing": "Marketing",
    "outros": "Outros",
}


def parse_valor(texto: Any) -> float:
    """
    Aceita:
      - 1234.56
      - 1.234,56
      - R$ 1.234,56
      - 1234,5
    Retorna float; texto vazio vira 0.0.
    """
    if isinstance(texto, (int, float)) and not isinstance(texto, bool):
        return float(texto)
    t = str(texto or "").strip().replace("R$", "").replace(" ", "")
    if t == "":
        return 0.0
    if "," in t:
        t = t.replace(".", "").replace(",", ".")
    try:
        v = float(t)
    except ValueError:
        raise ValueError(f"Valor inválido: '{texto}'. Exemplos: 1234,56 | 1.234,56 | 1234.56") from None
    if not math.isfinite(v):
        raise ValueError(f"Valor inválido: '{texto}'.")
    return v


def validar_aliquota_iss(valor: Any) -> float:
    """Aliquota de ISS em percentual (5 = 5%), restrita a 0..100."""
    v = parse_valor(str(valor).replace("%", "")) if isinstance(valor, str) else parse_valor(valor)
    if not (ALIQUOTA_ISS_MIN <= v <= ALIQUOTA_ISS_MAX):
        raise ValueError("Alíquota de ISS deve estar entre 0 e 100 (%).")
    return v


def validar_valor_nao_negativo(valor: Any, campo: str) -> float:
    v = parse_valor(valor)
    if v < 0:
        raise ValueError(f"{campo} não pode ser negativo.")
    return v


def validar_data(texto: Optional[str]) -> str:
    """Valida data ISO (YYYY-MM-DD) e retorna normalizada."""
    t = (texto or "").strip()
    if not _RE_DATA.match(t):
        raise ValueError("Data inválida. Use formato YYYY-MM-DD.")
    try:
        return date.fromisoformat(t).isoformat()
    except ValueError:
        raise ValueError("Data inválida. Use formato YYYY-MM-DD.") from None


def validar_valor_transacao(valor: Any) -> float:
    v = parse_valor(valor)
    if v <= 0:
        raise ValueError("Valor da transação deve ser maior que zero.")
    return v


def validar_tipo_transacao(tipo: Any) -> str:
    t = _ALIASES_TIPO.get(str(tipo or "").strip().lower())
    if t is None:
        raise ValueError("Tipo de transação inválido. Use 'receita' ou 'despesa'.")
    return t


def normalizar_categoria(categoria: Optional[str]) -> str:
    c = (categoria or "").strip()
    if c in CATEGORIAS_TRANSACAO:
        return c
    return _ALIASES_CATEGORIA.get(c.lower(), CATEGORIA_PADRAO)
