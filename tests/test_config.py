"""
Tests for configuration management.
"""

import pytest
from pydantic import ValidationError

from dinasty.config import Settings, get_settings
from dinasty.models import NetworkType


def test_default_settings() -> None:
    settings = Settings()
    assert settings.network == NetworkType.MAINNET
    assert settings.horizon == 1_000
    assert settings.log_level == "WARNING"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NETWORK", "regtest")
    monkeypatch.setenv("HORIZON", "50")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = get_settings()
    assert settings.network == NetworkType.REGTEST
    assert settings.horizon == 50
    assert settings.log_level == "DEBUG"


def test_case_insensitive_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("network", "signet")
    assert Settings().network == NetworkType.SIGNET


def test_horizon_bounds() -> None:
    with pytest.raises(ValidationError):
        Settings(horizon=0)
    with pytest.raises(ValidationError):
        Settings(horizon=100_001)


def test_unknown_network() -> None:
    with pytest.raises(ValidationError):
        Settings(network="litecoin")
