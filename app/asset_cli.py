# app/asset_cli.py
from __future__ import annotations

import argparse
import json
import sys
from typing import Any, List, Optional

from core.client import AssetClient
from infra.config import ClientRunConfig
from infra.config_loader import load_client_config
from infra.exchange.context import CallContext
from infra.exchange.errors import AssetClientError
from infra.logging_setup import get_logger, init_logging


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Binance asset endpoints (signed).")
    ap.add_argument("--config", default=None, help="YAML/JSON client config. Defaults to mainnet settings.")
    ap.add_argument("--timeout", type=float, default=None, help="Overall deadline for the call, in seconds.")

    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("asset-detail", help="Deposit/withdraw policy per asset.")
    p.add_argument("--asset", default=None)

    p = sub.add_parser("all-coins", help="Coin balances and network configuration.")
    p.add_argument("--asset", default=None, help="Keep only this coin in the output.")

    p = sub.add_parser("user-asset", help="Per-asset balance breakdown.")
    p.add_argument("--asset", default=None)
    p.add_argument("--btc-valuation", action="store_true")

    p = sub.add_parser("convert", help="Convert BUSD <-> stablecoin.")
    p.add_argument("--client-tran-id", required=True)
    p.add_argument("--asset", required=True)
    p.add_argument("--amount", type=int, required=True)
    p.add_argument("--target-asset", required=True)
    p.add_argument("--account-type", default=None)

    return ap


def run_command(client: AssetClient, args: argparse.Namespace, ctx: CallContext) -> Any:
    """
    Execute the selected subcommand and return a JSON-ready value (wire key names).
    """
    if args.command == "asset-detail":
        svc = client.new_get_asset_detail_service()
        if args.asset:
            svc.asset(args.asset)
        return {k: v.to_wire() for k, v in svc.do(ctx).items()}

    if args.command == "all-coins":
        svc = client.new_get_all_coins_info_service()
        if args.asset:
            svc.asset(args.asset)
        return [c.to_wire() for c in svc.do(ctx)]

    if args.command == "user-asset":
        svc = client.new_get_user_asset_service()
        if args.asset:
            svc.asset(args.asset)
        svc.need_btc_valuation(args.btc_valuation)
        return [r.to_wire() for r in svc.do(ctx)]

    if args.command == "convert":
        svc = client.new_convert_transfer_service(
            client_tran_id=args.client_tran_id,
            asset=args.asset,
            amount=args.amount,
            target_asset=args.target_asset,
            account_type=args.account_type,
        )
        return svc.do(ctx).to_wire()

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        cfg = load_client_config(args.config) if args.config else ClientRunConfig()
    except (FileNotFoundError, ValueError) as e:
        init_logging()
        get_logger("asset").error("Cannot load config %s: %s", args.config, e)
        return 1

    init_logging(
        run_name=cfg.logging.name,
        level_name=cfg.logging.level,
        log_dir=cfg.logging.log_dir,
        to_console=cfg.logging.to_console,
        to_file=cfg.logging.to_file,
    )
    logger = get_logger(cfg.logging.name)
    logger.info("=== asset cli: %s (profile=%s) ===", args.command, cfg.name)

    try:
        # one deadline covers the clock sync and the call itself
        ctx = CallContext(timeout=args.timeout)
        client = AssetClient.from_config(cfg.api, ctx=ctx)
        result = run_command(client, args, ctx)
    except (AssetClientError, RuntimeError, ValueError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1

    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
