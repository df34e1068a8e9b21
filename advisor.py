from __future__ import annotations

import json
import logging
import os
from typing import Any, List, Optional, Sequence

from google import genai
from google.genai import types

from dto import TaxAlert, Transaction
from regime_utils import canonicalize_regime

API_KEY_ENV_VAR = "GEMINI_API_KEY"
MODEL_ENV_VAR = "TAXFLOW_AI_MODEL"
DEFAULT_MODEL = "gemini-2.5-flash"

SYSTEM_INSTRUCTION = (
    "Você é um consultor financeiro e tributário especializado em pequenos negócios no Brasil. "
    "Forneça explicações simples, educativas e acionáveis. Use markdown para formatar a resposta."
)

logger = logging.getLogger(__name__)


class AdvisorError(RuntimeError):
    pass


class AdvisorUnavailableError(AdvisorError):
    pass


def prompt_conselho(tema: str) -> str:
    return f"Explique sobre {tema.strip()} para um empreendedor iniciante no Brasil."


def prompt_alertas(transacoes: Sequence[Transaction], regime: str) -> str:
    regime_display = canonicalize_regime(regime)["regime_display"]
    payload = json.dumps([t.to_dict() for t in transacoes], ensure_ascii=False)
    return (
        f"Com base nessas transações: {payload} e no regime tributário {regime_display}, "
        "identifique oportunidades de dedução fiscal (especialmente para Lucro Presumido como aluguel "
        "de máquinas e consumíveis) e alertas de vencimento. Retorne um JSON com uma lista de alertas, "
        "cada um com 'title', 'description' e 'type' (warning, info, success)."
    )


def parse_alertas(texto: Optional[str]) -> List[TaxAlert]:
    """Converte a resposta JSON em alertas; resposta malformada vira lista vazia."""
    try:
        payload = json.loads(texto or "[]")
    except json.JSONDecodeError:
        logger.warning("resposta de alertas nao e JSON valido; ignorando")
        return []

    # alguns modelos embrulham a lista em {"alertas": [...]}
    if isinstance(payload, dict):
        payload = payload.get("alerts", payload.get("alertas"))
    if not isinstance(payload, list):
        logger.warning("resposta de alertas sem lista; ignorando")
        return []

    alertas: List[TaxAlert] = []
    for item in payload:
        alerta = TaxAlert.from_dict(item)
        if alerta is not None:
            alertas.append(alerta)
    return alertas


class FinancialAdvisor:
    """
    Cliente do servico generativo (Gemini) para conselhos e alertas.
    Opcional: o simulador nao depende deste modulo.
    """

    def __init__(self, client: Any = None, model: Optional[str] = None, api_key: Optional[str] = None) -> None:
        self.model = model or os.getenv(MODEL_ENV_VAR) or DEFAULT_MODEL
        if client is None:
            key = api_key or os.getenv(API_KEY_ENV_VAR)
            if not key:
                raise AdvisorUnavailableError(
                    f"Chave '{API_KEY_ENV_VAR}' não configurada; consultor indisponível."
                )
            client = genai.Client(api_key=key)
        self.client = client

    def _generate(self, contents: str, config: types.GenerateContentConfig) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except Exception as exc:  # noqa: BLE001
            logger.error("falha ao chamar o modelo %s: %s", self.model, exc)
            raise AdvisorError(f"Erro ao consultar o serviço de IA: {exc}") from exc
        return response.text or ""

    def conselho_financeiro(self, tema: str) -> str:
        if not (tema or "").strip():
            raise ValueError("Informe um tema para o consultor.")
        config = types.GenerateContentConfig(system_instruction=SYSTEM_INSTRUCTION)
        return self._generate(prompt_conselho(tema), config)

    def alertas_tributarios(self, transacoes: Sequence[Transaction], regime: str) -> List[TaxAlert]:
        config = types.GenerateContentConfig(response_mime_type="application/json")
        texto = self._generate(prompt_alertas(transacoes, regime), config)
        return parse_alertas(texto)
