"""Collaborator interfaces and callback shapes.

Callbacks can be plain functions, coroutine functions, or objects that
implement one of the protocols below. Anything a callback returns that is
awaitable gets awaited by the policy.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

from stalestate.outcome import OutcomeSink

R = TypeVar("R")

RequestFn = Callable[[], Any]
CompareFn = Callable[[Any, Any, OutcomeSink], Any]
CommitFn = Callable[[Any], Any]
ErrorFn = Callable[[BaseException], Any]


@runtime_checkable
class DataSource(Protocol):
    """Produces one fresh reading per call; raises on failure."""

    def request(self) -> Any | Awaitable[Any]:
        ...


@runtime_checkable
class Comparator(Protocol):
    """Judges *current* against *previous* by signalling on *outcome*."""

    def compare(self, previous: Any, current: Any, outcome: OutcomeSink) -> Any:
        ...


@runtime_checkable
class Sink(Protocol):
    """Receives readings that passed the staleness check."""

    def commit(self, reading: Any) -> Any:
        ...


@runtime_checkable
class ErrorHandler(Protocol):
    def error(self, exc: BaseException) -> Any:
        ...


def bind_callback(value: Any, method: str) -> Callable[..., Any]:
    """Return the callable to store for *value*.

    Collaborator objects contribute their *method*; bare callables are
    stored as they are.
    """
    bound = getattr(value, method, None)
    if bound is not None and callable(bound) and not inspect.isroutine(value):
        return bound  # type: ignore[no-any-return]
    if callable(value):
        return value  # type: ignore[no-any-return]
    raise TypeError(f"{method} callback must be callable or provide .{method}(), got {type(value).__name__}")


async def maybe_await(value: R | Awaitable[R]) -> R:
    if inspect.isawaitable(value):
        return await value  # type: ignore[no-any-return]
    return value  # type: ignore[return-value]
