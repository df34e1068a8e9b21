import json
import logging
import os
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from dto import BusinessInput, Transaction
from input_utils import (
    normalizar_categoria,
    validar_aliquota_iss,
    validar_data,
    validar_tipo_transacao,
    validar_valor_transacao,
)

DATA_DIR_ENV_VAR = "TAXFLOW_DATA_DIR"
ARQUIVO_NEGOCIO = "business_data.json"
ARQUIVO_TRANSACOES = "transactions.jsonl"

logger = logging.getLogger(__name__)


def _store_root() -> str:
    """Raiz das pastas relativas: TAXFLOW_DATA_DIR ou diretorio de trabalho."""
    override = os.getenv(DATA_DIR_ENV_VAR)
    if override and override.strip():
        return override.strip()
    return os.getcwd()


def _store_path(pasta: str, arquivo: str) -> str:
    if os.path.isabs(pasta):
        return os.path.join(pasta, arquivo)
    return os.path.join(_store_root(), pasta, arquivo)


def _normalizar_user_id(user_id: str) -> str:
    valor = str(user_id or "").strip()
    if not valor:
        raise ValueError("user_id é obrigatório.")
    return valor


def _ler_negocios(caminho: str) -> Dict[str, Any]:
    if not os.path.exists(caminho):
        return {}
    try:
        with open(caminho, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError:
        logger.warning("arquivo de dados do negocio corrompido, ignorando: %s", caminho)
        return {}
    return payload if isinstance(payload, dict) else {}


def salvar_dados_negocio(
    user_id: str,
    inp: BusinessInput,
    pasta: str = "data",
    arquivo: str = ARQUIVO_NEGOCIO,
) -> str:
    """Upsert dos dados do negocio por usuario (um registro por user_id)."""
    uid = _normalizar_user_id(user_id)
    validar_aliquota_iss(inp.aliquota_iss)
    caminho = _store_path(pasta, arquivo)
    os.makedirs(os.path.dirname(caminho), exist_ok=True)

    negocios = _ler_negocios(caminho)
    negocios[uid] = {
        **inp.to_dict(),
        "updated_at": datetime.now().isoformat(timespec="seconds"),
    }

    tmp = caminho + ".tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(negocios, f, ensure_ascii=False, indent=2)
    os.replace(tmp, caminho)

    logger.debug("dados do negocio salvos para user_id=%s", uid)
    return caminho


def carregar_dados_negocio(
    user_id: str,
    pasta: str = "data",
    arquivo: str = ARQUIVO_NEGOCIO,
) -> Optional[BusinessInput]:
    uid = _normalizar_user_id(user_id)
    registro = _ler_negocios(_store_path(pasta, arquivo)).get(uid)
    if not isinstance(registro, dict):
        return None
    return BusinessInput.from_dict(registro)


def adicionar_transacao(
    user_id: str,
    descricao: str,
    valor: Any,
    tipo: str,
    data: Optional[str] = None,
    categoria: Optional[str] = None,
    pasta: str = "data",
    arquivo: str = ARQUIVO_TRANSACOES,
) -> Transaction:
    uid = _normalizar_user_id(user_id)
    descricao_limpa = (descricao or "").strip()
    if not descricao_limpa:
        raise ValueError("Descrição da transação é obrigatória.")

    transacao = Transaction(
        id=uuid.uuid4().hex,
        user_id=uid,
        data=validar_data(data) if data else datetime.now().date().isoformat(),
        descricao=descricao_limpa,
        valor=validar_valor_transacao(valor),
        tipo=validar_tipo_transacao(tipo),
        categoria=normalizar_categoria(categoria),
    )

    caminho = _store_path(pasta, arquivo)
    os.makedirs(os.path.dirname(caminho), exist_ok=True)
    with open(caminho, "a", encoding="utf-8") as f:
        f.write(json.dumps(transacao.to_dict(), ensure_ascii=False) + "\n")

    logger.debug("transacao %s registrada para user_id=%s", transacao.id, uid)
    return transacao


def listar_transacoes(
    user_id: str,
    limit: Optional[int] = None,
    pasta: str = "data",
    arquivo: str = ARQUIVO_TRANSACOES,
) -> List[Transaction]:
    """Transacoes do usuario, mais recentes primeiro (por data, depois ordem de gravacao)."""
    uid = _normalizar_user_id(user_id)
    caminho = _store_path(pasta, arquivo)
    if not os.path.exists(caminho):
        return []

    with open(caminho, "r", encoding="utf-8") as f:
        linhas = [l.strip() for l in f.readlines() if l.strip()]

    transacoes: List[Transaction] = []
    for linha in linhas:
        try:
            payload = json.loads(linha)
        except json.JSONDecodeError:
            logger.warning("linha corrompida ignorada em %s", caminho)
            continue
        if not isinstance(payload, dict) or str(payload.get("user_id", "")) != uid:
            continue
        transacoes.append(Transaction.from_dict(payload))

    transacoes.reverse()  # mais recentes primeiro em caso de empate na data
    transacoes.sort(key=lambda t: t.data, reverse=True)
    if limit is not None:
        transacoes = transacoes[:limit]
    return transacoes
