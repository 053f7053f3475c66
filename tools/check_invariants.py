#!/usr/bin/env python3
"""Olando deployment config invariant checks."""

import json
import re
from pathlib import Path
from typing import Optional


ROOT = Path(__file__).resolve().parents[1]
CONFIG_DIR = ROOT / "config"

HEX64 = re.compile(r"^[0-9a-f]{64}$")
COMPRESSED_PUBKEY = re.compile(r"^0[23][0-9a-f]{64}$")
ADMIN_KEY_COUNT = 3


def load_json(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def check_url(value: object, label: str, errors: list[str]) -> None:
    if not isinstance(value, str) or not value.startswith("https://"):
        errors.append(f"{label} must be an https URL, got {value!r}")


def check(config_dir: Optional[Path] = None) -> int:
    path = (config_dir or CONFIG_DIR) / "deployment.json"
    try:
        deployment = load_json(path)
    except (OSError, json.JSONDecodeError) as exc:
        print("Invariant check failed:")
        print(f"- cannot read {path}: {exc}")
        return 1
    errors: list[str] = []

    # --- Token category ---
    category = deployment.get("category", "")
    if not HEX64.match(str(category)):
        errors.append(f"category must be 64 lowercase hex chars, got {category!r}")

    # --- Admin multisig keys ---
    pubkeys = deployment.get("admin_pubkeys", [])
    if len(pubkeys) != ADMIN_KEY_COUNT:
        errors.append(f"admin_pubkeys must list exactly {ADMIN_KEY_COUNT} keys")
    for index, key in enumerate(pubkeys):
        if not COMPRESSED_PUBKEY.match(str(key)):
            errors.append(f"admin_pubkeys[{index}] is not a compressed public key")

    # --- Endpoints ---
    check_url(deployment.get("cauldron_indexer"), "cauldron_indexer", errors)
    indexers = deployment.get("bcmr_indexers", {})
    for network in ("mainnet", "chipnet"):
        check_url(indexers.get(network), f"bcmr_indexers.{network}", errors)

    # --- Supply and cache durations ---
    supply = deployment.get("initial_supply", 0)
    if not isinstance(supply, int) or supply <= 0:
        errors.append(f"initial_supply must be a positive integer, got {supply!r}")
    quote_ms = deployment.get("quote_cache_duration_ms", 0)
    if not isinstance(quote_ms, int) or quote_ms <= 0:
        errors.append("quote_cache_duration_ms must be a positive integer")
    metadata_ms = deployment.get("metadata_cache_duration_ms", -1)
    if not isinstance(metadata_ms, int) or (metadata_ms <= 0 and metadata_ms != -1):
        errors.append("metadata_cache_duration_ms must be -1 (forever) or positive")

    if errors:
        print("Invariant check failed:")
        for err in errors:
            print(f"- {err}")
        return 1

    print("Deployment config invariant checks passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(check())
