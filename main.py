from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from business_store import adicionar_transacao, carregar_dados_negocio, listar_transacoes, salvar_dados_negocio
from cashflow import distribuicao_despesas, resumir_fluxo_caixa
from demo_config import resolve_demo_mode, resolve_storage_targets
from dto import TIPOS_ATIVIDADE, BusinessInput
from formatters import formatar_percentual, formatar_reais, nome_arquivo_seguro
from input_utils import validar_aliquota_iss, validar_valor_nao_negativo
from pdf_exporter import salvar_relatorio_pdf
from report_builder import montar_relatorio_simulacao
from ruleset_loader import DEFAULT_RULESET_ID, get_tax_parameters
from tax_engine import TaxSimulator

logger = logging.getLogger("taxflow")


def _input_from_args(args: argparse.Namespace) -> BusinessInput:
    base: Optional[BusinessInput] = None
    if args.user:
        base = carregar_dados_negocio(args.user, pasta=args.store_pasta)

    def _campo(nome: str, rotulo: str) -> float:
        valor = getattr(args, nome)
        if valor is None:
            return getattr(base, nome) if base is not None else 0.0
        return validar_valor_nao_negativo(valor, rotulo)

    aliquota_iss = args.aliquota_iss if args.aliquota_iss is not None else (base.aliquota_iss if base else 0.0)
    return BusinessInput(
        receita_mensal=_campo("receita_mensal", "Receita mensal"),
        despesas_mensais=_campo("despesas_mensais", "Despesas mensais"),
        custo_funcionarios=_campo("custo_funcionarios", "Custo com funcionários"),
        aluguel_maquinas=_campo("aluguel_maquinas", "Aluguel de máquinas"),
        consumiveis=_campo("consumiveis", "Consumíveis"),
        tipo_atividade=args.tipo_atividade or (base.tipo_atividade if base else TIPOS_ATIVIDADE[0]),
        aliquota_iss=validar_aliquota_iss(aliquota_iss),
    )


def cmd_simular(args: argparse.Namespace) -> int:
    inp = _input_from_args(args)
    simulator = TaxSimulator(get_tax_parameters(args.ruleset_id))
    resultados = simulator.simulate(inp)

    if args.json:
        print(json.dumps([r.to_dict() for r in resultados], ensure_ascii=False, indent=2))
    else:
        print(montar_relatorio_simulacao(inp, resultados))

    if args.user and args.salvar:
        caminho = salvar_dados_negocio(args.user, inp, pasta=args.store_pasta)
        print(f"Dados do negócio salvos: {caminho}")
    if args.pdf:
        caminho = salvar_relatorio_pdf(
            inp,
            resultados,
            nome_base=nome_arquivo_seguro(args.user or "empresa"),
            pasta=args.pdf_pasta,
        )
        print(f"PDF salvo: {caminho}")
    return 0


def cmd_transacao(args: argparse.Namespace) -> int:
    transacao = adicionar_transacao(
        args.user,
        descricao=args.descricao,
        valor=args.valor,
        tipo=args.tipo,
        data=args.data,
        categoria=args.categoria,
        pasta=args.store_pasta,
    )
    print(f"Transação registrada: {transacao.id} ({transacao.data} {transacao.tipo} {formatar_reais(transacao.valor)})")
    return 0


def cmd_fluxo(args: argparse.Namespace) -> int:
    transacoes = listar_transacoes(args.user, limit=args.limit, pasta=args.store_pasta)
    resumo = resumir_fluxo_caixa(transacoes)
    for t in transacoes:
        sinal = "+" if t.valor_com_sinal >= 0 else "-"
        print(f"{t.data} | {t.categoria:<12} | {sinal} {formatar_reais(t.valor)} | {t.descricao}")
    print("")
    print(f"Receitas: {formatar_reais(resumo.total_receitas)}")
    print(f"Despesas: {formatar_reais(resumo.total_despesas)}")
    print(f"Saldo: {formatar_reais(resumo.saldo)}")
    distribuicao = distribuicao_despesas(transacoes)
    if distribuicao:
        print("")
        print("Distribuição de gastos:")
        for item in distribuicao:
            print(f"  {item.categoria:<12} {formatar_reais(item.valor):>14}  {formatar_percentual(item.percentual, casas=1)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulador de regimes tributários para pequenos negócios.")
    parser.add_argument("--demo", action="store_true", help="Usa pastas isoladas do modo DEMO.")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="comando", required=True)

    p_sim = sub.add_parser("simular", help="Compara Simples Nacional, Lucro Presumido e Lucro Real.")
    p_sim.add_argument("--receita-mensal", dest="receita_mensal")
    p_sim.add_argument("--despesas-mensais", dest="despesas_mensais")
    p_sim.add_argument("--custo-funcionarios", dest="custo_funcionarios")
    p_sim.add_argument("--aluguel-maquinas", dest="aluguel_maquinas")
    p_sim.add_argument("--consumiveis")
    p_sim.add_argument("--tipo-atividade", dest="tipo_atividade", choices=TIPOS_ATIVIDADE)
    p_sim.add_argument("--aliquota-iss", dest="aliquota_iss", help="Percentual (ex: 5 ou 2,5)")
    p_sim.add_argument("--user", help="Usa/salva os dados do negócio deste usuário.")
    p_sim.add_argument("--salvar", action="store_true", help="Salva os dados informados para --user.")
    p_sim.add_argument("--ruleset-id", dest="ruleset_id", default=DEFAULT_RULESET_ID)
    p_sim.add_argument("--json", action="store_true")
    p_sim.add_argument("--pdf", action="store_true")
    p_sim.set_defaults(func=cmd_simular)

    p_tr = sub.add_parser("transacao", help="Registra uma transação de caixa.")
    p_tr.add_argument("--user", required=True)
    p_tr.add_argument("--descricao", required=True)
    p_tr.add_argument("--valor", required=True)
    p_tr.add_argument("--tipo", required=True, help="receita | despesa")
    p_tr.add_argument("--data", help="YYYY-MM-DD (padrão: hoje)")
    p_tr.add_argument("--categoria")
    p_tr.set_defaults(func=cmd_transacao)

    p_fl = sub.add_parser("fluxo", help="Lista transações e resumo do fluxo de caixa.")
    p_fl.add_argument("--user", required=True)
    p_fl.add_argument("--limit", type=int, default=None)
    p_fl.set_defaults(func=cmd_fluxo)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    targets = resolve_storage_targets(resolve_demo_mode(toggle_enabled=args.demo))
    args.store_pasta = targets["store_pasta"]
    args.pdf_pasta = targets["outputs_pdf_pasta"]

    try:
        return args.func(args)
    except (ValueError, FileNotFoundError) as exc:
        logger.debug("comando %s falhou", args.comando, exc_info=True)
        print(f"Erro: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
