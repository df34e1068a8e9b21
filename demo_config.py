from __future__ import annotations

import os
from typing import Dict, List

from dto import ATIVIDADE_COMERCIO, ATIVIDADE_SERVICO, TIPO_DESPESA, TIPO_RECEITA, BusinessInput

DEMO_ENV_VAR = "TAXFLOW_DEMO"
DEMO_USER_ID = "demo"


def _is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def resolve_demo_mode(toggle_enabled: bool = False) -> bool:
    """
    Resolve o modo DEMO por OR entre variavel de ambiente e toggle da UI.
    """
    return _is_truthy(os.getenv(DEMO_ENV_VAR)) or bool(toggle_enabled)


def resolve_storage_targets(demo_mode: bool) -> Dict[str, str]:
    """
    Retorna destinos de persistencia para dados do negocio, transacoes e PDFs.
    """
    if demo_mode:
        return {
            "store_pasta": "data_demo",
            "outputs_pdf_pasta": "outputs_demo_pdfs",
        }
    return {
        "store_pasta": "data",
        "outputs_pdf_pasta": "outputs_pdfs",
    }


# valores iniciais do formulario do dashboard
PADRAO_FORMULARIO = BusinessInput(
    receita_mensal=50000.0,
    despesas_mensais=15000.0,
    custo_funcionarios=10000.0,
    aluguel_maquinas=2000.0,
    consumiveis=1500.0,
    tipo_atividade=ATIVIDADE_SERVICO,
    aliquota_iss=5.0,
)


def demo_example_business(example_key: str) -> BusinessInput:
    """
    Exemplos para pre-preenchimento da UI via session_state.
    """
    key = (example_key or "").strip().lower()

    if key == "padrao":
        return PADRAO_FORMULARIO

    if key == "pequeno":
        return BusinessInput(
            receita_mensal=12000.0,
            despesas_mensais=3000.0,
            custo_funcionarios=0.0,
            aluguel_maquinas=500.0,
            consumiveis=800.0,
            tipo_atividade=ATIVIDADE_SERVICO,
            aliquota_iss=2.0,
        )

    if key == "margem_baixa":
        return BusinessInput(
            receita_mensal=400000.0,
            despesas_mensais=220000.0,
            custo_funcionarios=120000.0,
            aluguel_maquinas=25000.0,
            consumiveis=30000.0,
            tipo_atividade=ATIVIDADE_COMERCIO,
            aliquota_iss=3.0,
        )

    raise ValueError(f"Exemplo DEMO desconhecido: {example_key}")


def demo_transactions() -> List[Dict[str, object]]:
    return [
        {"descricao": "Serviço de manutenção", "valor": 8500.0, "tipo": TIPO_RECEITA, "categoria": "Servicos"},
        {"descricao": "Aluguel de compressor", "valor": 1200.0, "tipo": TIPO_DESPESA, "categoria": "Equipamento"},
        {"descricao": "Compra de insumos", "valor": 950.0, "tipo": TIPO_DESPESA, "categoria": "Insumos"},
        {"descricao": "Anúncios online", "valor": 400.0, "tipo": TIPO_DESPESA, "categoria": "Marketing"},
    ]
