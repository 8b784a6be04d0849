"""Majority arithmetic and the post-verification decision.

Everything here is pure: the ``Stale`` instance owns the state and the
callbacks, this module only decides.
"""

from __future__ import annotations

import math

from stalestate.models import Resolution, Tally


def majority_threshold(probe_count: int) -> int:
    """Votes needed for a majority with *probe_count* probes.

    One more than a plain half, so the status quo wins unless the probes
    agree strongly. With ``probe_count == 1`` the threshold (2) can never be
    reached and every verification ends inconclusive.
    """
    return math.ceil(probe_count / 2) + 1


def has_majority(votes: int, probe_count: int) -> bool:
    return votes >= majority_threshold(probe_count)


def resolve_verification(tally: Tally, probe_count: int) -> Resolution:
    """Map a verification tally onto the action to take for a declined reading.

    Policy, checked in order:
    - majority(same): the decline was a transient mismatch, keep the state.
    - majority(decline): every replica now serves the "older" looking
      reading, so it is the new server state and gets committed.
    - majority(accept): the servers moved on again, fetch a fresh reading
      instead of committing a possibly outdated one.
    - otherwise no consensus: ignore the change.
    """
    if has_majority(tally.same, probe_count):
        return Resolution.KEPT
    if has_majority(tally.decline, probe_count):
        return Resolution.CONFIRMED
    if has_majority(tally.accept, probe_count):
        return Resolution.REFETCH
    return Resolution.INCONCLUSIVE
