"""Operator CLI for deploying and exercising the flash loan contract."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from deployment.config import DeploymentSettings, get_settings
from deployment.deploy import ContractDeployer, build_fee_policy, deploy_flashloan
from flash_receiver.strategies import Strategy, failing_strategy, noop_strategy, spend_strategy
from flashloan_controller.orchestrator import StateTransitionError
from harness.impersonation import HarnessError, ImpersonationHarness
from ledger.errors import FlashloanError
from ledger.ledger import Ledger

STRATEGIES = ("noop", "spend-all", "fail")
STRATEGY_SINK = "strategy-sink"


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="flashloan-operator")
    parser.add_argument("--log-level", default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    deploy_parser = subparsers.add_parser("deploy")
    deploy_parser.add_argument("--deployer")
    _add_fee_args(deploy_parser)
    deploy_parser.set_defaults(func=_deploy)

    run_parser = subparsers.add_parser("run")
    run_parser.add_argument("--asset")
    run_parser.add_argument("--amount", type=int)
    run_parser.add_argument("--fund", type=int)
    run_parser.add_argument("--pool-liquidity", type=int)
    run_parser.add_argument("--whale-balance", type=int)
    run_parser.add_argument("--strategy", choices=STRATEGIES, default="noop")
    run_parser.add_argument("--initiator", default="accounts[0]")
    run_parser.add_argument("--json", action="store_true")
    _add_fee_args(run_parser)
    run_parser.set_defaults(func=_run)

    fee_parser = subparsers.add_parser("fee")
    fee_parser.add_argument("--amount", type=int, required=True)
    _add_fee_args(fee_parser)
    fee_parser.set_defaults(func=_fee)

    args = parser.parse_args(argv)
    settings = _settings_from_args(args)
    _configure_logging(settings.log_level)

    try:
        return args.func(args, settings)
    except FlashloanError as exc:
        print(f"ERROR: {exc.kind.value}: {exc}", file=sys.stderr)
        for event in exc.events:
            print(f"{event.message} {event.value}", file=sys.stderr)
        return 2
    except (HarnessError, StateTransitionError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2


def _deploy(args: argparse.Namespace, settings: DeploymentSettings) -> int:
    deployment = deploy_flashloan(Ledger(), settings, deployer=ContractDeployer())
    print(json.dumps(deployment.to_dict(), indent=2))
    return 0


def _run(args: argparse.Namespace, settings: DeploymentSettings) -> int:
    ledger = Ledger()
    harness = ImpersonationHarness(ledger)
    deployment = deploy_flashloan(ledger, settings, deployer=ContractDeployer())
    orchestrator = deployment.orchestrator
    orchestrator.receiver.set_strategy(_build_strategy(args.strategy, ledger, deployment.address))
    asset = settings.asset

    harness.seed(settings.whale_account, asset, settings.whale_balance)
    harness.seed(settings.pool_account, asset, settings.pool_liquidity)
    harness.impersonate(settings.whale_account)

    harness.require_balance(
        settings.whale_account,
        asset,
        settings.fund_amount,
        "Whale balance has to be higher than FUND AMOUNT",
    )
    harness.transfer(settings.whale_account, deployment.address, asset, settings.fund_amount)
    pool_balance = harness.require_balance(
        settings.pool_account,
        asset,
        settings.borrow_amount,
        "Pool balance has to be higher than BORROW AMOUNT",
    )

    result = orchestrator.initiate_flashloan(
        asset, settings.borrow_amount, initiator=args.initiator
    )
    if orchestrator.user != deployment.address:
        raise HarnessError("user has to be set to the address of the flash loan contract")

    if args.json:
        payload = result.to_dict()
        payload["address"] = deployment.address
        payload["user"] = orchestrator.user
        print(json.dumps(payload, indent=2))
        return 0

    print(f"contract address is: {deployment.address}")
    print(f"pool balance is: {pool_balance}")
    for event in result.events:
        print(f"{event.message} {event.value}")
    print(f"user: {orchestrator.user}")
    return 0


def _fee(args: argparse.Namespace, settings: DeploymentSettings) -> int:
    policy = build_fee_policy(settings)
    print(policy.fee_for(args.amount))
    return 0


def _add_fee_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--fee", type=int)
    parser.add_argument("--fee-bps", type=int)


def _settings_from_args(args: argparse.Namespace) -> DeploymentSettings:
    settings = get_settings()
    overrides = {
        "deployer": getattr(args, "deployer", None),
        "asset": getattr(args, "asset", None),
        "borrow_amount": getattr(args, "amount", None) if args.command == "run" else None,
        "fund_amount": getattr(args, "fund", None),
        "pool_liquidity": getattr(args, "pool_liquidity", None),
        "whale_balance": getattr(args, "whale_balance", None),
        "fee_constant": getattr(args, "fee", None),
        "fee_bps": getattr(args, "fee_bps", None),
        "log_level": args.log_level.upper() if args.log_level else None,
    }
    # an explicit --fee wins over a proportional fee configured in the environment
    if overrides["fee_constant"] is not None and overrides["fee_bps"] is None:
        settings = replace(settings, fee_bps=None)
    return replace(settings, **{key: value for key, value in overrides.items() if value is not None})


def _build_strategy(name: str, ledger: Ledger, address: str) -> Strategy:
    if name == "spend-all":
        return spend_strategy(ledger, address, STRATEGY_SINK)
    if name == "fail":
        return failing_strategy("Strategy aborted by operator.")
    return noop_strategy


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    raise SystemExit(main())
