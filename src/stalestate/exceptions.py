"""Custom exception hierarchy for stalestate."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stalestate.models import Tally


class StaleError(Exception):
    """Base exception for all stalestate errors."""


class ConfigurationError(StaleError):
    """Invalid configuration or a mandatory callback was never registered.

    This is a caller bug rather than a runtime condition, so it is always
    raised at the call site and never routed to the error callback.
    """


class RequestError(StaleError):
    """Fetching a reading failed (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class ConsensusInconclusive(StaleError):
    """Verification finished without any outcome reaching the majority.

    Never raised. Handed to the error callback when
    ``StaleConfig.report_inconclusive`` is enabled.
    """

    def __init__(self, tally: Tally) -> None:
        self.tally = tally
        super().__init__(
            f"no majority reached: {tally.accept} accept, {tally.decline} decline, {tally.same} same"
        )
