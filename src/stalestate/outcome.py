"""Single-assignment outcome cell handed to compare callbacks."""

from __future__ import annotations

import asyncio
import logging
import threading

from stalestate.models import Outcome

_logger = logging.getLogger(__name__)


class OutcomeSink:
    """Receives the verdict of one comparison.

    The compare callback calls exactly one of :meth:`accept`,
    :meth:`decline` or :meth:`same`, either before it returns or later
    (from a scheduled callback or another thread). Only the first signal
    counts; anything after it is a no-op.

    Must be created while an event loop is running.
    """

    def __init__(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._future: asyncio.Future[Outcome] = self._loop.create_future()
        self._lock = threading.Lock()
        self._outcome: Outcome | None = None

    def accept(self) -> None:
        self._signal(Outcome.ACCEPT)

    def decline(self) -> None:
        self._signal(Outcome.DECLINE)

    def same(self) -> None:
        self._signal(Outcome.SAME)

    @property
    def outcome(self) -> Outcome | None:
        """The first signalled outcome, or ``None`` if nothing was signalled yet."""
        return self._outcome

    @property
    def signalled(self) -> bool:
        return self._outcome is not None

    async def wait(self) -> Outcome:
        """Suspend until the compare callback has signalled."""
        return await self._future

    def _signal(self, outcome: Outcome) -> None:
        with self._lock:
            if self._outcome is not None:
                _logger.debug("Ignoring %s signal, outcome already set to %s", outcome, self._outcome)
                return
            self._outcome = outcome

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._resolve(outcome)
        else:
            self._loop.call_soon_threadsafe(self._resolve, outcome)

    def _resolve(self, outcome: Outcome) -> None:
        # The waiter may have been cancelled by a scheduler abandoning the cycle.
        if not self._future.done():
            self._future.set_result(outcome)
