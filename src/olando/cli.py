"""Olando CLI — command-line interface for the issuance engine.

Usage:
    olando decode --commitment 0000000065538a000000000065538a00
    olando cap --deployment-time 1700000000 --now 1731536000
    olando state --commitment HEX --token-amount 2000000000 --invest 100000 --pools pools.json
    olando price --token <category> [--at 1731536000]
    olando metadata --token <category> [--nft-commitment HEX] [--network chipnet]
    olando check-config
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional

import httpx
from dotenv import load_dotenv

from olando.cache.fetch import CachedFetcher
from olando.cache.stores import JsonFileStore, MemoryStore
from olando.contract.commitment import decode_commitment_hex
from olando.contract.state import StateRequest, compute_state, emission_time
from olando.emission.curve import emission_cap
from olando.errors import OlandoError
from olando.metadata import fetch_token_metadata
from olando.policy.params import DeploymentConfig
from olando.prices import (
    fetch_active_pools,
    fetch_current_token_price,
    fetch_historic_token_price,
)
from olando.quotes.cauldron import ConstantProductQuoter, PoolSnapshot, parse_active_pools
from olando.quotes.sizing import QuoteSizer


ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG = ROOT / "config"
DEFAULT_CACHE_FILE = ROOT / "data" / "cache.json"

logger = logging.getLogger("olando.cli")


def _load_config(args: argparse.Namespace) -> DeploymentConfig:
    return DeploymentConfig.from_config_dir(args.config)


def _now(args: argparse.Namespace) -> int:
    return args.now if args.now is not None else int(time.time())


def _initial_supply(args: argparse.Namespace, config: DeploymentConfig) -> int:
    if args.initial_supply is not None:
        return args.initial_supply
    return config.initial_supply


def cmd_decode(args: argparse.Namespace) -> int:
    commitment = decode_commitment_hex(args.commitment)
    print(json.dumps({
        "deployment_time": commitment.deployment_time,
        "last_interaction_time": commitment.last_interaction_time,
    }, indent=2))
    return 0


def cmd_cap(args: argparse.Namespace) -> int:
    config = _load_config(args)
    initial_supply = _initial_supply(args, config)
    now = _now(args)
    evaluated_at = emission_time(args.deployment_time, now)
    cap = emission_cap(initial_supply, args.deployment_time, evaluated_at)
    print(json.dumps({
        "initial_supply": initial_supply,
        "evaluated_at": evaluated_at,
        "current_emission_cap": cap,
    }, indent=2))
    return 0


async def _load_pools(
    args: argparse.Namespace,
    config: DeploymentConfig,
    token_id: str,
) -> list[PoolSnapshot]:
    if args.pools is not None:
        return parse_active_pools(json.loads(args.pools.read_text(encoding="utf-8")))
    async with httpx.AsyncClient(timeout=30.0) as client:
        fetcher = CachedFetcher(client)
        return await fetch_active_pools(
            fetcher, token_id, MemoryStore(),
            indexer=config.cauldron_indexer,
            duration_ms=config.quote_cache_duration_ms,
        )


def cmd_state(args: argparse.Namespace) -> int:
    config = _load_config(args)
    token_id = args.token or config.category

    async def run() -> dict:
        pools = await _load_pools(args, config, token_id)
        logger.debug("Loaded %d pools for %s", len(pools), token_id)
        sizer = QuoteSizer(ConstantProductQuoter(), token_id, pools)
        request = StateRequest(
            issuance_utxo_commitment=bytes.fromhex(args.commitment),
            issuance_utxo_token_amount=args.token_amount,
            initial_supply=_initial_supply(args, config),
            invest_amount_bch=args.invest,
            now_seconds=_now(args),
        )
        state = await compute_state(request, sizer)
        return state.to_dict()

    print(json.dumps(asyncio.run(run()), indent=2))
    return 0


def cmd_price(args: argparse.Namespace) -> int:
    config = _load_config(args)
    token_id = args.token or config.category

    async def run():
        async with httpx.AsyncClient(timeout=30.0) as client:
            fetcher = CachedFetcher(client)
            if args.at is None:
                return await fetch_current_token_price(
                    fetcher, token_id, MemoryStore(),
                    indexer=config.cauldron_indexer,
                    duration_ms=config.quote_cache_duration_ms,
                )
            return await fetch_historic_token_price(
                fetcher, token_id, args.at, JsonFileStore(args.cache_file),
                indexer=config.cauldron_indexer,
            )

    print(json.dumps({"token_id": token_id, "price": asyncio.run(run())}, indent=2))
    return 0


def cmd_metadata(args: argparse.Namespace) -> int:
    config = _load_config(args)
    token_id = args.token or config.category
    indexer = config.bcmr_indexer(args.network)

    async def run():
        async with httpx.AsyncClient(timeout=30.0) as client:
            return await fetch_token_metadata(
                CachedFetcher(client), token_id, JsonFileStore(args.cache_file),
                indexer=indexer,
                duration_ms=config.metadata_cache_duration_ms,
                nft_commitment=args.nft_commitment,
            )

    metadata = asyncio.run(run())
    if metadata is None:
        print(f"No registry metadata for {token_id} on {args.network}", file=sys.stderr)
        return 1
    print(json.dumps(metadata, indent=2))
    return 0


def cmd_check_config(args: argparse.Namespace) -> int:
    """Run deployment config invariant checks."""
    tools_dir = ROOT / "tools"
    sys.path.insert(0, str(tools_dir))
    from check_invariants import check
    return check(args.config)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="olando",
        description="Olando issuance engine CLI",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help="Path to config directory (default: config/)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    # decode
    p_dec = sub.add_parser("decode", help="Decode an issuance commitment")
    p_dec.add_argument("--commitment", required=True, help="Commitment hex")

    # cap
    p_cap = sub.add_parser("cap", help="Evaluate the emission cap")
    p_cap.add_argument("--deployment-time", type=int, required=True, help="Unix seconds")
    p_cap.add_argument("--now", type=int, help="Unix seconds (default: now)")
    p_cap.add_argument("--initial-supply", type=int, help="Default: from config")

    # state
    p_state = sub.add_parser("state", help="Compute the issuance contract state")
    p_state.add_argument("--commitment", required=True, help="Issuance UTXO commitment hex")
    p_state.add_argument("--token-amount", type=int, required=True,
                         help="Tokens remaining in the issuance UTXO")
    p_state.add_argument("--invest", type=int, default=0, help="Investment in satoshis")
    p_state.add_argument("--pools", type=Path,
                         help="Active pools JSON (default: fetch from indexer)")
    p_state.add_argument("--token", help="Token category (default: from config)")
    p_state.add_argument("--now", type=int, help="Unix seconds (default: now)")
    p_state.add_argument("--initial-supply", type=int, help="Default: from config")

    # price
    p_price = sub.add_parser("price", help="Query the indexer token price")
    p_price.add_argument("--token", help="Token category (default: from config)")
    p_price.add_argument("--at", type=int, help="Historic price at unix seconds")
    p_price.add_argument("--cache-file", type=Path, default=DEFAULT_CACHE_FILE,
                         help="Durable cache file for historic prices")

    # metadata
    p_meta = sub.add_parser("metadata", help="Query BCMR token metadata")
    p_meta.add_argument("--token", help="Token category (default: from config)")
    p_meta.add_argument("--nft-commitment", help="NFT commitment hex ('' for none)")
    p_meta.add_argument("--network", choices=("mainnet", "chipnet"), default="mainnet")
    p_meta.add_argument("--cache-file", type=Path, default=DEFAULT_CACHE_FILE,
                        help="Durable cache file for registry metadata")

    # check-config
    sub.add_parser("check-config", help="Run deployment config invariant checks")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv(ROOT / ".env")
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "decode": cmd_decode,
        "cap": cmd_cap,
        "state": cmd_state,
        "price": cmd_price,
        "metadata": cmd_metadata,
        "check-config": cmd_check_config,
    }

    handler = commands.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    try:
        return handler(args)
    except (OlandoError, ValueError, httpx.HTTPError) as exc:
        print(f"Failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
