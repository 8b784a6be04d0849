"""Timer that keeps a :class:`~stalestate.stale.Stale` policy polling.

The policy itself never schedules anything; this is the external
collaborator that calls it on an interval. Only one cycle runs at a time.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any

from stalestate.exceptions import ConfigurationError
from stalestate.stale import Stale

_logger = logging.getLogger(__name__)


class IntervalPoller:
    """Run ``stale.poll()`` every *interval* seconds.

    Usage::

        async with IntervalPoller(stale, interval=30):
            ...

    :meth:`trigger` runs a cycle as soon as the current one (if any) is done
    and restarts the interval from there.
    """

    def __init__(self, stale: Stale, interval: float | None = None) -> None:
        period = stale.config.interval if interval is None else interval
        if period <= 0:
            raise ConfigurationError(f"interval must be > 0 to poll, got {period}")
        self._stale = stale
        self._interval = period
        self._wake = asyncio.Event()
        self._runner: asyncio.Task[None] | None = None
        self._cycles = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._runner is not None and not self._runner.done()

    @property
    def cycles(self) -> int:
        """Number of completed poll cycles."""
        return self._cycles

    def start(self) -> None:
        if self.is_running:
            return
        self._wake.clear()
        self._runner = asyncio.get_running_loop().create_task(self._run())

    def trigger(self) -> None:
        """Poll now instead of waiting for the rest of the interval."""
        self._wake.set()

    async def stop(self) -> None:
        runner = self._runner
        self._runner = None
        if runner is None:
            return
        runner.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await runner

    async def __aenter__(self) -> IntervalPoller:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    async def _run(self) -> None:
        while True:
            self._wake.clear()
            try:
                resolution = await self._stale.poll()
            except ConfigurationError:
                _logger.error("Stopping poller, policy is not configured", exc_info=True)
                raise
            self._cycles += 1
            _logger.debug("Poll cycle %d finished: %s", self._cycles, resolution)

            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._wake.wait(), timeout=self._interval)
