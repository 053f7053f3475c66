"""Protocol parameters and deployment configuration.

Two kinds of values live here:

1. Consensus constants. These mirror the arithmetic enforced by the
   on-chain issuance contract. They are code, not configuration: a
   mismatch silently desynchronises the computed cap from the cap the
   chain enforces, so nothing at call time may override them.

2. Deployment configuration. Token category, indexer endpoints
   and cache durations differ between networks and deployments. They
   are loaded from config/deployment.json into an
   immutable DeploymentConfig and passed explicitly to whatever needs
   them. There are no module-level mutable defaults. The admin multisig
   keys in the same file are checked by tools/check_invariants.py only.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from olando.errors import ConfigError


# --- Consensus constants (shared with the issuance contract) ---

# Rate at which the emission cap approaches the initial supply.
# Contract: denominator = SCALE + EMISSION_RATE_K * t
EMISSION_RATE_K = 3

# Haircut applied to forward AMM quotes (fee and slippage budget).
TRADE_HAIRCUT_NUM = 95
TRADE_HAIRCUT_DEN = 100

# Share of notionally bought tokens that is newly issued.
ISSUANCE_RATIO_NUM = 9
ISSUANCE_RATIO_DEN = 10

# The contract evaluates the cap at the transaction locktime, which
# trails wall-clock time. Clients evaluate at now minus this offset.
EMISSION_TIME_OFFSET_SECONDS = 2 * 60 * 60

# Commitment layout: two big-endian uint64 values.
COMMITMENT_FIELD_BYTES = 8
COMMITMENT_MIN_BYTES = 2 * COMMITMENT_FIELD_BYTES

# Token id used by the Cauldron indexer and quoters for native BCH.
NATIVE_BCH = "BCH"

__all__ = [
    "EMISSION_RATE_K",
    "TRADE_HAIRCUT_NUM",
    "TRADE_HAIRCUT_DEN",
    "ISSUANCE_RATIO_NUM",
    "ISSUANCE_RATIO_DEN",
    "EMISSION_TIME_OFFSET_SECONDS",
    "COMMITMENT_FIELD_BYTES",
    "COMMITMENT_MIN_BYTES",
    "NATIVE_BCH",
    "DeploymentConfig",
]

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[3] / "config"
DEPLOYMENT_FILE = "deployment.json"

_HEX64 = re.compile(r"^[0-9a-f]{64}$")


@dataclass(frozen=True)
class DeploymentConfig:
    """Immutable per-deployment settings.

    Loaded from config/deployment.json. Environment overrides:
    OLANDO_CATEGORY and OLANDO_CAULDRON_INDEXER.
    """
    category: str
    initial_supply: int
    cauldron_indexer: str
    bcmr_indexer_mainnet: str
    bcmr_indexer_chipnet: str
    quote_cache_duration_ms: int = 300_000
    metadata_cache_duration_ms: int = -1

    @classmethod
    def from_config_dir(
        cls,
        config_dir: Path = DEFAULT_CONFIG_DIR,
        environ: Optional[Mapping[str, str]] = None,
    ) -> DeploymentConfig:
        """Load deployment.json from a config directory."""
        path = config_dir / DEPLOYMENT_FILE
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ConfigError(f"Deployment config not found: {path}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Deployment config is not valid JSON: {path}") from exc

        config = cls.from_dict(raw)
        return config.with_overrides(os.environ if environ is None else environ)

    @classmethod
    def from_dict(cls, raw: Mapping[str, object]) -> DeploymentConfig:
        try:
            indexers = raw["bcmr_indexers"]
            config = cls(
                category=str(raw["category"]),
                initial_supply=int(raw["initial_supply"]),
                cauldron_indexer=str(raw["cauldron_indexer"]).rstrip("/"),
                bcmr_indexer_mainnet=str(indexers["mainnet"]).rstrip("/"),
                bcmr_indexer_chipnet=str(indexers["chipnet"]).rstrip("/"),
                quote_cache_duration_ms=int(raw.get("quote_cache_duration_ms", 300_000)),
                metadata_cache_duration_ms=int(raw.get("metadata_cache_duration_ms", -1)),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid deployment config: {exc}") from exc
        config.validate()
        return config

    def with_overrides(self, environ: Mapping[str, str]) -> DeploymentConfig:
        """Return a copy with environment overrides applied."""
        changes: dict[str, str] = {}
        if environ.get("OLANDO_CATEGORY"):
            changes["category"] = environ["OLANDO_CATEGORY"]
        if environ.get("OLANDO_CAULDRON_INDEXER"):
            changes["cauldron_indexer"] = environ["OLANDO_CAULDRON_INDEXER"].rstrip("/")
        if not changes:
            return self
        updated = replace(self, **changes)
        updated.validate()
        return updated

    def validate(self) -> None:
        if not _HEX64.match(self.category):
            raise ConfigError(f"category must be a 64-char hex token id, got {self.category!r}")
        if self.initial_supply <= 0:
            raise ConfigError("initial_supply must be positive")
        if self.quote_cache_duration_ms <= 0:
            raise ConfigError("quote_cache_duration_ms must be positive")

    def bcmr_indexer(self, network: str) -> str:
        """BCMR indexer base URL for "mainnet" or "chipnet"."""
        if network == "mainnet":
            return self.bcmr_indexer_mainnet
        if network == "chipnet":
            return self.bcmr_indexer_chipnet
        raise ConfigError(f"Unknown network {network!r}")
