"""Tests for deployment configuration loading and validation."""

import json
from pathlib import Path

import pytest

from olando.errors import ConfigError
from olando.policy.params import (
    EMISSION_TIME_OFFSET_SECONDS,
    ISSUANCE_RATIO_DEN,
    ISSUANCE_RATIO_NUM,
    TRADE_HAIRCUT_DEN,
    TRADE_HAIRCUT_NUM,
    DeploymentConfig,
)


CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"
OTHER_CATEGORY = "dd" * 32


def _raw() -> dict:
    return json.loads((CONFIG_DIR / "deployment.json").read_text(encoding="utf-8"))


def _write(tmp_path: Path, raw: dict) -> Path:
    (tmp_path / "deployment.json").write_text(json.dumps(raw), encoding="utf-8")
    return tmp_path


class TestConsensusConstants:
    def test_values(self) -> None:
        assert (TRADE_HAIRCUT_NUM, TRADE_HAIRCUT_DEN) == (95, 100)
        assert (ISSUANCE_RATIO_NUM, ISSUANCE_RATIO_DEN) == (9, 10)
        assert EMISSION_TIME_OFFSET_SECONDS == 7200


class TestDeploymentConfig:
    def test_loads_shipped_config(self) -> None:
        config = DeploymentConfig.from_config_dir(CONFIG_DIR, environ={})
        assert config.category == _raw()["category"]
        assert config.initial_supply == 2_100_000_000
        assert config.quote_cache_duration_ms == 300_000
        assert config.metadata_cache_duration_ms == -1

    def test_bcmr_indexer_by_network(self) -> None:
        config = DeploymentConfig.from_config_dir(CONFIG_DIR, environ={})
        assert config.bcmr_indexer("mainnet") == "https://bcmr.paytaca.com/api"
        assert config.bcmr_indexer("chipnet") == "https://bcmr-chipnet.paytaca.com/api"

    def test_unknown_network(self) -> None:
        config = DeploymentConfig.from_config_dir(CONFIG_DIR, environ={})
        with pytest.raises(ConfigError):
            config.bcmr_indexer("testnet4")

    def test_environment_overrides(self) -> None:
        config = DeploymentConfig.from_config_dir(CONFIG_DIR, environ={
            "OLANDO_CATEGORY": OTHER_CATEGORY,
            "OLANDO_CAULDRON_INDEXER": "https://indexer.example/",
        })
        assert config.category == OTHER_CATEGORY
        assert config.cauldron_indexer == "https://indexer.example"

    def test_invalid_override_rejected(self) -> None:
        with pytest.raises(ConfigError):
            DeploymentConfig.from_config_dir(CONFIG_DIR, environ={"OLANDO_CATEGORY": "BCH"})

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            DeploymentConfig.from_config_dir(tmp_path, environ={})

    def test_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "deployment.json").write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError):
            DeploymentConfig.from_config_dir(tmp_path, environ={})

    def test_missing_key(self, tmp_path: Path) -> None:
        raw = _raw()
        del raw["cauldron_indexer"]
        with pytest.raises(ConfigError):
            DeploymentConfig.from_config_dir(_write(tmp_path, raw), environ={})

    def test_non_positive_supply(self, tmp_path: Path) -> None:
        raw = _raw()
        raw["initial_supply"] = 0
        with pytest.raises(ConfigError):
            DeploymentConfig.from_config_dir(_write(tmp_path, raw), environ={})

    def test_config_is_immutable(self) -> None:
        config = DeploymentConfig.from_config_dir(CONFIG_DIR, environ={})
        with pytest.raises(AttributeError):
            config.initial_supply = 1  # type: ignore[misc]


class TestCheckInvariants:
    def test_shipped_config_passes(self, capsys: pytest.CaptureFixture[str]) -> None:
        from check_invariants import check
        assert check(CONFIG_DIR) == 0
        assert "passed" in capsys.readouterr().out

    def test_bad_admin_keys_fail(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        from check_invariants import check
        raw = _raw()
        raw["admin_pubkeys"] = raw["admin_pubkeys"][:2] + ["04" + "00" * 64]
        assert check(_write(tmp_path, raw)) == 1
        assert "admin_pubkeys[2]" in capsys.readouterr().out

    def test_missing_config_fails_cleanly(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        from check_invariants import check
        assert check(tmp_path) == 1
        assert "cannot read" in capsys.readouterr().out

    def test_invalid_json_fails_cleanly(self, tmp_path: Path) -> None:
        from check_invariants import check
        (tmp_path / "deployment.json").write_text("{", encoding="utf-8")
        assert check(tmp_path) == 1
