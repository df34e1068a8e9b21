from __future__ import annotations

from typing import Any, Dict, Optional

REGIME_CODE_SIMPLES = "SIMPLES"
REGIME_CODE_PRESUMIDO = "PRESUMIDO"
REGIME_CODE_REAL = "REAL"

REGIME_DISPLAY_SIMPLES = "Simples Nacional"
REGIME_DISPLAY_PRESUMIDO = "Lucro Presumido"
REGIME_DISPLAY_REAL = "Lucro Real"

# ordem fixa de saida do simulador
REGIME_CODES = (REGIME_CODE_SIMPLES, REGIME_CODE_PRESUMIDO, REGIME_CODE_REAL)

_DISPLAY_BY_CODE = {
    REGIME_CODE_SIMPLES: REGIME_DISPLAY_SIMPLES,
    REGIME_CODE_PRESUMIDO: REGIME_DISPLAY_PRESUMIDO,
    REGIME_CODE_REAL: REGIME_DISPLAY_REAL,
}


def _normalize_text(value: Any) -> str:
    return str(value or "").strip()


def display_by_code(code: str) -> str:
    return _DISPLAY_BY_CODE.get(_normalize_text(code).upper(), REGIME_DISPLAY_SIMPLES)


def canonicalize_regime(regime: Any, regime_code: Optional[str] = None) -> Dict[str, str]:
    """
    Canonicaliza rotulos livres de regime (UI, CLI, alertas):
    - regime_code: SIMPLES|PRESUMIDO|REAL
    - regime_display: rotulo unico de UI/relatorio
    Rotulo desconhecido cai em Simples Nacional.
    """
    code = _normalize_text(regime_code).upper()
    if code in _DISPLAY_BY_CODE:
        return {"regime_code": code, "regime_display": _DISPLAY_BY_CODE[code]}

    raw_l = _normalize_text(regime).lower()
    if raw_l.upper() in _DISPLAY_BY_CODE:
        code = raw_l.upper()
    elif "presumido" in raw_l:
        code = REGIME_CODE_PRESUMIDO
    elif "real" in raw_l:
        code = REGIME_CODE_REAL
    else:
        code = REGIME_CODE_SIMPLES
    return {"regime_code": code, "regime_display": _DISPLAY_BY_CODE[code]}
