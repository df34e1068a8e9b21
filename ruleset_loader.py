import json
import logging
import os
import site
import sys
from copy import deepcopy
from typing import Any, Dict, List, Tuple

from tax_params import TRIBUTOS_BREAKDOWN, SimplesBracket, TaxParameters

DEFAULT_RULESET_ID = "BR_TAXFLOW_2026_V1"
RULESETS_DIR_ENV_VAR = "TAXFLOW_RULESETS_DIR"

logger = logging.getLogger(__name__)

_CACHE: Dict[Tuple[str, str], Dict[str, Any]] = {}

# destino dos rulesets em instalacao nao editavel ([tool.setuptools.data-files])
INSTALLED_RULESETS_SUBDIR = os.path.join("share", "taxflow", "rulesets")


def _runtime_base_dir() -> str:
    """
    Resolve diretorio base para modo normal e executavel PyInstaller.
    """
    if getattr(sys, "frozen", False):
        meipass = getattr(sys, "_MEIPASS", None)
        if isinstance(meipass, str) and meipass.strip():
            return meipass
        return os.path.dirname(sys.executable)
    return os.path.dirname(os.path.abspath(__file__))


def _candidate_rulesets_dirs() -> List[str]:
    candidatos = [os.path.join(_runtime_base_dir(), "rulesets")]
    if not getattr(sys, "frozen", False):
        candidatos.append(os.path.join(sys.prefix, INSTALLED_RULESETS_SUBDIR))
        candidatos.append(os.path.join(site.getuserbase(), INSTALLED_RULESETS_SUBDIR))
    return candidatos


def _rulesets_dir() -> str:
    override = os.getenv(RULESETS_DIR_ENV_VAR)
    if override and override.strip():
        return override.strip()
    candidatos = _candidate_rulesets_dirs()
    for pasta in candidatos:
        if os.path.isdir(pasta):
            return pasta
    return candidatos[0]


def _ruleset_dir(ruleset_id: str) -> str:
    return os.path.join(_rulesets_dir(), ruleset_id)


def clear_cache() -> None:
    _CACHE.clear()


def _load_json(ruleset_id: str, filename: str) -> Dict[str, Any]:
    key = (_ruleset_dir(ruleset_id), filename)
    if key in _CACHE:
        return deepcopy(_CACHE[key])

    ruleset_path = _ruleset_dir(ruleset_id)
    if not os.path.isdir(ruleset_path):
        raise FileNotFoundError(f"Ruleset '{ruleset_id}' não encontrado em {ruleset_path}.")

    file_path = os.path.join(ruleset_path, filename)
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"Arquivo '{filename}' não encontrado para ruleset '{ruleset_id}'.")

    with open(file_path, "r", encoding="utf-8-sig") as f:
        payload = json.load(f)

    if not isinstance(payload, dict):
        raise ValueError(f"Arquivo '{filename}' do ruleset '{ruleset_id}' deve conter objeto JSON.")

    logger.debug("ruleset carregado: %s/%s", ruleset_id, filename)
    _CACHE[key] = payload
    return deepcopy(payload)


def load_ruleset(ruleset_id: str) -> Dict[str, Any]:
    return _load_json(ruleset_id, "metadata.json")


def get_simples_tables(ruleset_id: str) -> Dict[str, Any]:
    return _load_json(ruleset_id, "simples_tables.json")


def get_presumido_params(ruleset_id: str) -> Dict[str, Any]:
    return _load_json(ruleset_id, "presumido_params.json")


def get_real_params(ruleset_id: str) -> Dict[str, Any]:
    return _load_json(ruleset_id, "real_params.json")


def _ruleset_error(
    ruleset_id: str,
    arquivo: str,
    chave: str,
    regime: str,
    impacto: str,
    detalhe: str = "",
) -> ValueError:
    msg = (
        f"ruleset_id={ruleset_id} | arquivo={arquivo} | chave={chave} | "
        f"regime={regime} | impacto={impacto}"
    )
    if detalhe:
        msg += f" | detalhe={detalhe}"
    return ValueError(msg)


def _required_number(
    payload: Dict[str, Any],
    key: str,
    *,
    ruleset_id: str,
    arquivo: str,
    regime: str,
    impacto: str,
) -> float:
    if key not in payload:
        raise _ruleset_error(ruleset_id, arquivo, key, regime, impacto, "chave ausente")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _ruleset_error(ruleset_id, arquivo, key, regime, impacto, "valor nao numerico")
    return float(value)


def _faixas_simples(tabelas: Dict[str, Any], ruleset_id: str) -> Tuple[SimplesBracket, ...]:
    arquivo = "simples_tables.json"
    regime = "Simples Nacional"
    impacto = "Nao e possivel calcular DAS"

    faixas_raw = tabelas.get("faixas")
    if not isinstance(faixas_raw, list) or not faixas_raw:
        raise _ruleset_error(ruleset_id, arquivo, "faixas", regime, impacto, "tabela de faixas invalida")

    faixas: List[SimplesBracket] = []
    for idx, faixa in enumerate(faixas_raw):
        chave = f"faixas[{idx}]"
        if not isinstance(faixa, dict):
            raise _ruleset_error(ruleset_id, arquivo, chave, regime, impacto, "faixa deve ser objeto")
        limite = faixa.get("limite_superior")
        if limite is not None and (isinstance(limite, bool) or not isinstance(limite, (int, float))):
            raise _ruleset_error(ruleset_id, arquivo, f"{chave}.limite_superior", regime, impacto, "valor nao numerico")
        aliq = _required_number(
            faixa, "aliquota_nominal", ruleset_id=ruleset_id, arquivo=arquivo, regime=regime, impacto=impacto
        )
        pd = _required_number(
            faixa, "parcela_deduzir", ruleset_id=ruleset_id, arquivo=arquivo, regime=regime, impacto=impacto
        )
        faixas.append(SimplesBracket(float(limite) if limite is not None else None, aliq, pd))

    limites = [f.limite_superior for f in faixas if f.limite_superior is not None]
    if limites != sorted(limites):
        raise _ruleset_error(ruleset_id, arquivo, "faixas", regime, impacto, "limites fora de ordem crescente")
    if any(f.limite_superior is None for f in faixas[:-1]):
        raise _ruleset_error(ruleset_id, arquivo, "faixas", regime, impacto, "faixa aberta deve ser a ultima")
    return tuple(faixas)


def _partilha_simples(tabelas: Dict[str, Any], ruleset_id: str) -> Dict[str, float]:
    arquivo = "simples_tables.json"
    regime = "Simples Nacional"
    impacto = "Nao e possivel exibir partilha do DAS"

    raw = tabelas.get("partilha_exibicao")
    if not isinstance(raw, dict):
        raise _ruleset_error(ruleset_id, arquivo, "partilha_exibicao", regime, impacto, "objeto ausente/invalido")

    partilha: Dict[str, float] = {}
    for tributo in TRIBUTOS_BREAKDOWN:
        valor = _required_number(raw, tributo, ruleset_id=ruleset_id, arquivo=arquivo, regime=regime, impacto=impacto)
        if valor < 0:
            raise _ruleset_error(
                ruleset_id, arquivo, f"partilha_exibicao.{tributo}", regime, impacto, "percentual negativo"
            )
        partilha[tributo] = valor
    return partilha


def get_tax_parameters(ruleset_id: str = DEFAULT_RULESET_ID) -> TaxParameters:
    """Monta TaxParameters a partir dos arquivos do ruleset, falhando cedo em chave ausente/invalida."""
    tabelas = get_simples_tables(ruleset_id)
    presumido = get_presumido_params(ruleset_id)
    real = get_real_params(ruleset_id)

    def _presumido(key: str, impacto: str) -> float:
        return _required_number(
            presumido, key, ruleset_id=ruleset_id, arquivo="presumido_params.json", regime="Lucro Presumido", impacto=impacto
        )

    def _real(key: str, impacto: str) -> float:
        return _required_number(
            real, key, ruleset_id=ruleset_id, arquivo="real_params.json", regime="Lucro Real", impacto=impacto
        )

    return TaxParameters(
        faixas_simples=_faixas_simples(tabelas, ruleset_id),
        partilha_simples=_partilha_simples(tabelas, ruleset_id),
        percentual_presuncao=_presumido("percentual_presuncao", "Nao e possivel definir base presumida"),
        pis_cumulativo=_presumido("pis", "Nao e possivel calcular PIS"),
        cofins_cumulativo=_presumido("cofins", "Nao e possivel calcular COFINS"),
        irpj=_presumido("irpj", "Nao e possivel calcular IRPJ"),
        adicional_irpj=_presumido("adicional_irpj", "Nao e possivel calcular adicional de IRPJ"),
        limite_adicional_irpj=_presumido("limite_adicional_irpj_mensal", "Nao e possivel calcular adicional de IRPJ"),
        csll=_presumido("csll", "Nao e possivel calcular CSLL"),
        pis_cofins_nao_cumulativo=_real("pis_cofins_nao_cumulativo", "Nao e possivel calcular PIS/COFINS nao cumulativo"),
        participacao_pis_nao_cumulativo=_real("participacao_pis", "Nao e possivel exibir PIS/COFINS separados"),
        participacao_cofins_nao_cumulativo=_real("participacao_cofins", "Nao e possivel exibir PIS/COFINS separados"),
        ruleset_id=ruleset_id,
    )
