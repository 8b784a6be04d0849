"""Ready-made compare callbacks for readings with a natural order.

Most replicated sources expose something monotonic per snapshot: a version
counter, an update timestamp, a sequence number. These helpers turn such a
key into a compare callback.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from stalestate.interfaces import CompareFn
from stalestate.outcome import OutcomeSink


def _identity(value: Any) -> Any:
    return value


def compare_by(key: Callable[[Any], Any] = _identity) -> CompareFn:
    """Build a compare callback ordering readings by ``key(reading)``.

    - no previous reading: accept
    - greater than previous: accept
    - lower than previous: decline
    - equal: same
    """

    def _compare(previous: Any, current: Any, outcome: OutcomeSink) -> None:
        if previous is None:
            outcome.accept()
            return

        old, new = key(previous), key(current)
        if new > old:
            outcome.accept()
        elif new < old:
            outcome.decline()
        else:
            outcome.same()

    return _compare


def compare_field(name: str) -> CompareFn:
    """Compare mapping readings by one field, e.g. ``"version"`` or ``"updated_at"``."""

    def _field(reading: Mapping[str, Any]) -> Any:
        return reading[name]

    return compare_by(_field)
