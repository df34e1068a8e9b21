from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

TRIBUTOS_BREAKDOWN = ("pis", "cofins", "irpj", "csll", "iss")


@dataclass(frozen=True)
class SimplesBracket:
    limite_superior: Optional[float]  # None = faixa aberta
    aliquota_nominal: float
    parcela_deduzir: float


@dataclass(frozen=True)
class TaxParameters:
    """
    Aliquotas e limites usados pelo simulador.
    Valores decimais (0.15 = 15%), exceto aliquota de ISS que vem do input em percentual.
    """

    faixas_simples: Tuple[SimplesBracket, ...]
    partilha_simples: Dict[str, float] = field(default_factory=dict)
    percentual_presuncao: float = 0.32
    pis_cumulativo: float = 0.0065
    cofins_cumulativo: float = 0.03
    irpj: float = 0.15
    adicional_irpj: float = 0.10
    limite_adicional_irpj: float = 20000.0
    csll: float = 0.09
    pis_cofins_nao_cumulativo: float = 0.0925
    participacao_pis_nao_cumulativo: float = 0.17
    participacao_cofins_nao_cumulativo: float = 0.83
    ruleset_id: str = "embutido"


# Anexo III (servicos), RBT12 anualizado a partir da receita mensal.
FAIXAS_ANEXO_III: Tuple[SimplesBracket, ...] = (
    SimplesBracket(180000.0, 0.06, 0.0),
    SimplesBracket(360000.0, 0.112, 9360.0),
    SimplesBracket(720000.0, 0.135, 17640.0),
    SimplesBracket(1800000.0, 0.16, 35640.0),
    SimplesBracket(3600000.0, 0.21, 125640.0),
    SimplesBracket(None, 0.33, 648000.0),
)

# Distribuicao aproximada do DAS exibida na UI. Soma 80% do total.
PARTILHA_SIMPLES_PADRAO: Dict[str, float] = {
    "pis": 0.12,
    "cofins": 0.18,
    "irpj": 0.15,
    "csll": 0.15,
    "iss": 0.20,
}

DEFAULT_PARAMETERS = TaxParameters(
    faixas_simples=FAIXAS_ANEXO_III,
    partilha_simples=dict(PARTILHA_SIMPLES_PADRAO),
)
