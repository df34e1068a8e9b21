from __future__ import annotations

import math
from typing import Any, Dict, Sequence, Tuple

from dto import BusinessInput, TaxBreakdown
from tax_params import SimplesBracket, TaxParameters

MESES_ANO = 12


def dividir(numerador: float, denominador: float) -> float:
    """Divisao com semantica IEEE: x/0 -> +-inf, 0/0 -> nan (sem ZeroDivisionError)."""
    if denominador == 0:
        if numerador == 0 or math.isnan(numerador):
            return math.nan
        return math.copysign(math.inf, numerador) * math.copysign(1.0, denominador)
    return numerador / denominador


def escolher_faixa_simples(faixas: Sequence[SimplesBracket], receita_anual: float) -> Tuple[SimplesBracket, int]:
    """Primeira faixa com limite_superior >= receita anual (limite inclusivo); senao a ultima."""
    if not faixas:
        raise ValueError("Tabela do Simples vazia.")
    for idx, faixa in enumerate(faixas, start=1):
        if faixa.limite_superior is None or receita_anual <= faixa.limite_superior:
            return faixa, idx
    return faixas[-1], len(faixas)


def aliquota_efetiva_simples(receita_anual: float, aliq_nom: float, pd: float) -> float:
    """Calcula aliquota efetiva do Simples: (RBT12*AliqNom - PD) / RBT12."""
    return dividir((receita_anual * aliq_nom) - pd, receita_anual)


def imposto_simples_nacional(
    inp: BusinessInput, params: TaxParameters
) -> Tuple[float, float, TaxBreakdown, Dict[str, Any]]:
    """
    Retorna (imposto, deducoes, breakdown, memoria).
    O breakdown e uma partilha fixa do DAS para exibicao, nao tributos calculados.
    """
    receita_anual = inp.receita_mensal * MESES_ANO
    faixa, idx = escolher_faixa_simples(params.faixas_simples, receita_anual)
    aliq_efetiva = aliquota_efetiva_simples(receita_anual, faixa.aliquota_nominal, faixa.parcela_deduzir)
    imposto = inp.receita_mensal * aliq_efetiva

    partilha = params.partilha_simples
    breakdown = TaxBreakdown(
        pis=imposto * partilha.get("pis", 0.0),
        cofins=imposto * partilha.get("cofins", 0.0),
        irpj=imposto * partilha.get("irpj", 0.0),
        csll=imposto * partilha.get("csll", 0.0),
        iss=imposto * partilha.get("iss", 0.0),
        total=imposto,
    )
    memoria = {
        "receita_anual": receita_anual,
        "faixa": idx,
        "limite_faixa": faixa.limite_superior,
        "aliquota_nominal": faixa.aliquota_nominal,
        "parcela_deduzir": faixa.parcela_deduzir,
        "aliquota_efetiva_anual": aliq_efetiva,
        "partilha_percentuais": dict(partilha),
    }
    return imposto, 0.0, breakdown, memoria


def imposto_lucro_presumido(
    inp: BusinessInput, params: TaxParameters
) -> Tuple[float, float, TaxBreakdown, Dict[str, Any]]:
    receita = inp.receita_mensal
    lucro_presumido = receita * params.percentual_presuncao

    pis = receita * params.pis_cumulativo
    cofins = receita * params.cofins_cumulativo

    excedente_adicional = max(0.0, lucro_presumido - params.limite_adicional_irpj)
    adicional = excedente_adicional * params.adicional_irpj
    irpj = lucro_presumido * params.irpj + adicional
    csll = lucro_presumido * params.csll

    # consumiveis deduzidos da base do ISS (premissa municipal)
    base_iss = max(0.0, receita - inp.consumiveis)
    iss = base_iss * (inp.aliquota_iss / 100.0)

    imposto = pis + cofins + irpj + csll + iss
    breakdown = TaxBreakdown(pis=pis, cofins=cofins, irpj=irpj, csll=csll, iss=iss, total=imposto)
    memoria = {
        "percentual_presuncao": params.percentual_presuncao,
        "lucro_presumido": lucro_presumido,
        "limite_adicional_irpj": params.limite_adicional_irpj,
        "adicional_irpj": adicional,
        "base_iss": base_iss,
    }
    return imposto, inp.consumiveis, breakdown, memoria


def imposto_lucro_real(
    inp: BusinessInput, params: TaxParameters
) -> Tuple[float, float, TaxBreakdown, Dict[str, Any]]:
    receita = inp.receita_mensal
    despesas_totais = inp.despesas_mensais + inp.custo_funcionarios + inp.aluguel_maquinas + inp.consumiveis
    lucro_real = receita - despesas_totais

    aliquota_pis_cofins = params.pis_cofins_nao_cumulativo
    debito_pis_cofins = receita * aliquota_pis_cofins
    credito_pis_cofins = (inp.aluguel_maquinas + inp.consumiveis) * aliquota_pis_cofins
    # credito excedente nao e restituido nem transportado
    pis_cofins_liquido = max(0.0, debito_pis_cofins - credito_pis_cofins)

    adicional = max(0.0, lucro_real - params.limite_adicional_irpj) * params.adicional_irpj
    irpj = max(0.0, lucro_real * params.irpj + adicional)
    csll = max(0.0, lucro_real * params.csll)
    iss = receita * (inp.aliquota_iss / 100.0)

    imposto = pis_cofins_liquido + irpj + csll + iss
    breakdown = TaxBreakdown(
        pis=pis_cofins_liquido * params.participacao_pis_nao_cumulativo,
        cofins=pis_cofins_liquido * params.participacao_cofins_nao_cumulativo,
        irpj=irpj,
        csll=csll,
        iss=iss,
        total=imposto,
    )
    memoria = {
        "despesas_totais": despesas_totais,
        "lucro_real": lucro_real,
        "debito_pis_cofins": debito_pis_cofins,
        "credito_pis_cofins": credito_pis_cofins,
        "credito_limitado_ao_debito": credito_pis_cofins > debito_pis_cofins,
        "pis_cofins_liquido": pis_cofins_liquido,
        "adicional_irpj": adicional,
    }
    return imposto, despesas_totais, breakdown, memoria
