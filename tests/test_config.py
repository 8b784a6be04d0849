from __future__ import annotations

import pytest

from stalestate.config import DEFAULT_PROBE_COUNT, StaleConfig
from stalestate.exceptions import ConfigurationError


def test_defaults() -> None:
    config = StaleConfig()

    assert config.name is None
    assert config.probe_count == DEFAULT_PROBE_COUNT == 6
    assert config.interval == 0.0
    assert config.report_inconclusive is False


@pytest.mark.parametrize("probe_count", [0, -1])
def test_probe_count_must_be_positive(probe_count: int) -> None:
    with pytest.raises(ConfigurationError):
        StaleConfig(probe_count=probe_count)


def test_probe_count_must_be_integer() -> None:
    with pytest.raises(ConfigurationError):
        StaleConfig(probe_count=2.5)  # type: ignore[arg-type]


def test_negative_interval_rejected() -> None:
    with pytest.raises(ConfigurationError):
        StaleConfig(interval=-1.0)


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STALE_NAME", "orders")
    monkeypatch.setenv("STALE_PROBE_COUNT", "10")
    monkeypatch.setenv("STALE_INTERVAL", "2.5")
    monkeypatch.setenv("STALE_REPORT_INCONCLUSIVE", "yes")

    config = StaleConfig.from_env()

    assert config == StaleConfig(name="orders", probe_count=10, interval=2.5, report_inconclusive=True)


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STALE_PROBE_COUNT", "10")
    monkeypatch.setenv("STALE_REPORT_INCONCLUSIVE", "1")

    config = StaleConfig.from_env(probe_count=3, report_inconclusive=False)

    assert config.probe_count == 3
    assert config.report_inconclusive is False


def test_from_env_invalid_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STALE_PROBE_COUNT", "many")

    with pytest.raises(ConfigurationError, match="STALE_PROBE_COUNT"):
        StaleConfig.from_env()


def test_from_env_without_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("STALE_NAME", "STALE_PROBE_COUNT", "STALE_INTERVAL", "STALE_REPORT_INCONCLUSIVE"):
        monkeypatch.delenv(key, raising=False)

    assert StaleConfig.from_env() == StaleConfig()


def test_non_numeric_interval_rejected() -> None:
    with pytest.raises(ConfigurationError, match="interval"):
        StaleConfig(interval="soon")  # type: ignore[arg-type]


@pytest.mark.parametrize("compare_timeout", [0, -1.0, "30"])
def test_invalid_compare_timeout_rejected(compare_timeout: object) -> None:
    with pytest.raises(ConfigurationError, match="compare_timeout"):
        StaleConfig(compare_timeout=compare_timeout)  # type: ignore[arg-type]


def test_compare_timeout_can_be_disabled() -> None:
    assert StaleConfig(compare_timeout=None).compare_timeout is None
