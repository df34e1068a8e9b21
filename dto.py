from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple

ATIVIDADE_SERVICO = "servico"
ATIVIDADE_COMERCIO = "comercio"
TIPOS_ATIVIDADE = (ATIVIDADE_SERVICO, ATIVIDADE_COMERCIO)

TIPO_RECEITA = "receita"
TIPO_DESPESA = "despesa"
TIPOS_TRANSACAO = (TIPO_RECEITA, TIPO_DESPESA)

CATEGORIAS_TRANSACAO = ("Servicos", "Equipamento", "Insumos", "Marketing", "Outros")
CATEGORIA_PADRAO = "Outros"

TIPOS_ALERTA = ("warning", "info", "success")

# chaves dos registros antigos do backend (camelCase) -> campos atuais
_ALIASES_NEGOCIO = {
    "monthlyRevenue": "receita_mensal",
    "monthlyExpenses": "despesas_mensais",
    "employeeCosts": "custo_funcionarios",
    "machineRental": "aluguel_maquinas",
    "consumables": "consumiveis",
    "activityType": "tipo_atividade",
    "issRate": "aliquota_iss",
}
_ALIASES_ATIVIDADE = {
    "service": ATIVIDADE_SERVICO,
    "servico": ATIVIDADE_SERVICO,
    "serviço": ATIVIDADE_SERVICO,
    "commerce": ATIVIDADE_COMERCIO,
    "comercio": ATIVIDADE_COMERCIO,
    "comércio": ATIVIDADE_COMERCIO,
}
_CAMPOS_NUMERICOS = (
    "receita_mensal",
    "despesas_mensais",
    "custo_funcionarios",
    "aluguel_maquinas",
    "consumiveis",
    "aliquota_iss",
)


def _to_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def normalizar_tipo_atividade(valor: Any) -> str:
    return _ALIASES_ATIVIDADE.get(str(valor or "").strip().lower(), ATIVIDADE_SERVICO)


@dataclass(frozen=True)
class BusinessInput:
    receita_mensal: float
    despesas_mensais: float = 0.0
    custo_funcionarios: float = 0.0  # folha; nao altera formulas alem do total de despesas do Lucro Real
    aluguel_maquinas: float = 0.0
    consumiveis: float = 0.0
    tipo_atividade: str = ATIVIDADE_SERVICO  # servico | comercio (reservado)
    aliquota_iss: float = 0.0  # percentual (ex: 5 = 5%)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "BusinessInput":
        """Aceita chaves atuais e camelCase do backend antigo; chaves desconhecidas sao ignoradas."""
        dados: Dict[str, Any] = {}
        for key, value in (payload or {}).items():
            campo = _ALIASES_NEGOCIO.get(key, key)
            dados[campo] = value

        kwargs: Dict[str, Any] = {campo: _to_float(dados.get(campo)) for campo in _CAMPOS_NUMERICOS}
        kwargs["tipo_atividade"] = normalizar_tipo_atividade(dados.get("tipo_atividade"))
        return cls(**kwargs)


@dataclass(frozen=True)
class TaxBreakdown:
    pis: float
    cofins: float
    irpj: float
    csll: float
    iss: float
    total: float

    def soma_tributos(self) -> float:
        return self.pis + self.cofins + self.irpj + self.csll + self.iss


@dataclass(frozen=True)
class RegimeResult:
    regime: str
    regime_code: str
    imposto_total: float
    aliquota_efetiva: float  # percentual sobre receita mensal
    deducoes: float
    detalhes: Tuple[str, ...]
    breakdown: TaxBreakdown
    memoria_calculo: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["detalhes"] = list(self.detalhes)
        return payload


@dataclass(frozen=True)
class Transaction:
    id: str
    user_id: str
    data: str  # YYYY-MM-DD
    descricao: str
    valor: float
    tipo: str  # receita | despesa
    categoria: str = CATEGORIA_PADRAO

    @property
    def valor_com_sinal(self) -> float:
        return self.valor if self.tipo == TIPO_RECEITA else -self.valor

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Transaction":
        tipo = str(payload.get("tipo") or payload.get("type") or "").strip().lower()
        if tipo == "income":
            tipo = TIPO_RECEITA
        elif tipo == "expense":
            tipo = TIPO_DESPESA
        return cls(
            id=str(payload.get("id", "")),
            user_id=str(payload.get("user_id", "")),
            data=str(payload.get("data") or payload.get("date") or ""),
            descricao=str(payload.get("descricao") or payload.get("description") or ""),
            valor=_to_float(payload.get("valor", payload.get("amount"))),
            tipo=tipo,
            categoria=str(payload.get("categoria") or payload.get("category") or CATEGORIA_PADRAO),
        )


@dataclass(frozen=True)
class TaxAlert:
    titulo: str
    descricao: str
    tipo: str = "info"  # warning | info | success

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> Optional["TaxAlert"]:
        if not isinstance(payload, dict):
            return None
        titulo = str(payload.get("title") or payload.get("titulo") or "").strip()
        descricao = str(payload.get("description") or payload.get("descricao") or "").strip()
        if not titulo and not descricao:
            return None
        tipo = str(payload.get("type") or payload.get("tipo") or "info").strip().lower()
        if tipo not in TIPOS_ALERTA:
            tipo = "info"
        return cls(titulo=titulo, descricao=descricao, tipo=tipo)

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.titulo, "description": self.descricao, "type": self.tipo}
