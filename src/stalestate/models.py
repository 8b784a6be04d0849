"""Value types shared by the policy, the outcome sink and the verify loop."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Outcome(StrEnum):
    """Result signalled by a compare callback."""

    ACCEPT = "accept"
    DECLINE = "decline"
    SAME = "same"


class Resolution(StrEnum):
    """What a single fetch/compare cycle ended up doing."""

    ACCEPTED = "accepted"
    SAME = "same"
    CONFIRMED = "confirmed"
    KEPT = "kept"
    REFETCH = "refetch"
    INCONCLUSIVE = "inconclusive"
    FAILED = "failed"

    @property
    def committed(self) -> bool:
        """Whether the cycle replaced the previously committed reading."""
        return self in (Resolution.ACCEPTED, Resolution.CONFIRMED)


class Tally(BaseModel):
    """Vote counts collected by one verification round.

    Failed probes are folded into ``decline``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    accept: int = Field(default=0, ge=0)
    decline: int = Field(default=0, ge=0)
    same: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.accept + self.decline + self.same

    def votes(self, outcome: Outcome) -> int:
        return {
            Outcome.ACCEPT: self.accept,
            Outcome.DECLINE: self.decline,
            Outcome.SAME: self.same,
        }[outcome]
