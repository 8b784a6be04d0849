"""Policy configuration for stalestate."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from stalestate.exceptions import ConfigurationError

#: Probes used for a quorum decision when nothing else is configured.
DEFAULT_PROBE_COUNT: int = 6


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class StaleConfig:
    """Policy configuration.

    Parameters
    ----------
    name : str or None
        Diagnostic label. When set, the policy logs through a child logger
        named after it (``stalestate.stale.<name>``). No behavioural effect.
    probe_count : int
        Number of sequential probes made when a reading is declined. Also
        the base of the majority threshold ``ceil(probe_count / 2) + 1``.
        Must be at least 1.
    interval : float
        Default period in seconds used by
        :class:`~stalestate.scheduler.IntervalPoller`. ``0`` disables
        automatic polling.
    report_inconclusive : bool
        Hand a :class:`~stalestate.exceptions.ConsensusInconclusive` to the
        error callback when verification reaches no majority.
    compare_timeout : float or None
        Seconds a compare callback that has returned gets to signal its
        outcome before the comparison fails. ``None`` waits forever.
    """

    name: str | None = None
    probe_count: int = DEFAULT_PROBE_COUNT
    interval: float = 0.0
    report_inconclusive: bool = False
    compare_timeout: float | None = 30.0

    def __post_init__(self) -> None:
        if isinstance(self.probe_count, bool) or not isinstance(self.probe_count, int):
            raise ConfigurationError(f"probe_count must be an integer, got {self.probe_count!r}")
        if self.probe_count < 1:
            raise ConfigurationError(f"probe_count must be >= 1, got {self.probe_count}")
        if isinstance(self.interval, bool) or not isinstance(self.interval, (int, float)):
            raise ConfigurationError(f"interval must be a number, got {self.interval!r}")
        if self.interval < 0:
            raise ConfigurationError(f"interval must be >= 0, got {self.interval}")
        if self.compare_timeout is not None:
            if isinstance(self.compare_timeout, bool) or not isinstance(self.compare_timeout, (int, float)):
                raise ConfigurationError(f"compare_timeout must be a number or None, got {self.compare_timeout!r}")
            if self.compare_timeout <= 0:
                raise ConfigurationError(f"compare_timeout must be > 0, got {self.compare_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> StaleConfig:
        """Create configuration from environment variables.

        Reads ``STALE_NAME``, ``STALE_PROBE_COUNT``, ``STALE_INTERVAL`` and
        ``STALE_REPORT_INCONCLUSIVE``. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        StaleConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        name_env = env.get("STALE_NAME")
        if name_env:
            config_kwargs["name"] = name_env.strip()

        probes_env = env.get("STALE_PROBE_COUNT")
        if probes_env is not None and "probe_count" not in overrides:
            try:
                config_kwargs["probe_count"] = int(probes_env)
            except ValueError as exc:
                raise ConfigurationError(f"STALE_PROBE_COUNT is not an integer: {probes_env!r}") from exc

        interval_env = env.get("STALE_INTERVAL")
        if interval_env is not None and "interval" not in overrides:
            try:
                config_kwargs["interval"] = float(interval_env)
            except ValueError as exc:
                raise ConfigurationError(f"STALE_INTERVAL is not a number: {interval_env!r}") from exc

        if "report_inconclusive" not in overrides:
            config_kwargs["report_inconclusive"] = _env_bool(
                env.get("STALE_REPORT_INCONCLUSIVE"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
