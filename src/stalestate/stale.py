"""Quorum-verified staleness policy for polled, eventually consistent data."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from stalestate._redact import redact_reading
from stalestate.config import StaleConfig
from stalestate.exceptions import ConfigurationError, ConsensusInconclusive
from stalestate.interfaces import CommitFn, CompareFn, ErrorFn, RequestFn, bind_callback, maybe_await
from stalestate.models import Outcome, Resolution, Tally
from stalestate.outcome import OutcomeSink
from stalestate.policy import has_majority, majority_threshold, resolve_verification

_logger = logging.getLogger(__name__)


def _ignore_error(exc: BaseException) -> None:
    """Default error callback: runtime failures are swallowed."""


@dataclass(slots=True)
class Callbacks:
    """Callback slots of a :class:`Stale` instance.

    ``None`` marks a mandatory slot that was never registered.
    """

    request: RequestFn | None = None
    compare: CompareFn | None = None
    commit: CommitFn | None = None
    error: ErrorFn = _ignore_error


class Stale:
    """Decide whether a freshly fetched reading is real or comes from a stale replica.

    Usage::

        stale = (
            Stale(StaleConfig(name="orders"))
            .set_request(fetch_orders)
            .set_compare(compare_field("version"))
            .set_commit(render_orders)
        )
        stale.fetch()

    A reading the compare callback accepts is committed right away. A
    declined reading triggers ``probe_count`` extra sequential probes; the
    declined reading is only committed when a majority of them decline too.
    """

    def __init__(
        self,
        config: StaleConfig | None = None,
        *,
        previous: Any = None,
        source: Any = None,
        comparator: Any = None,
        sink: Any = None,
        on_error: Any = None,
    ) -> None:
        self._config = config or StaleConfig()
        self._previous = previous
        self._logger = _logger.getChild(self._config.name) if self._config.name else _logger
        self._cycle_lock = asyncio.Lock()
        self._tasks: set[asyncio.Task[Resolution]] = set()
        self.callbacks = Callbacks()

        if source is not None:
            self.set_request(source)
        if comparator is not None:
            self.set_compare(comparator)
        if sink is not None:
            self.set_commit(sink)
        if on_error is not None:
            self.set_error(on_error)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> StaleConfig:
        return self._config

    @property
    def name(self) -> str | None:
        return self._config.name

    @property
    def previous(self) -> Any:
        """The last committed reading (or the seed passed to the constructor)."""
        return self._previous

    @property
    def threshold(self) -> int:
        return majority_threshold(self._config.probe_count)

    def set_request(self, fn: Any) -> Stale:
        """Set the callback (or ``DataSource``) that fetches a reading."""
        self.callbacks.request = bind_callback(fn, "request")
        return self

    def set_compare(self, fn: Any) -> Stale:
        """Set the callback (or ``Comparator``) that judges two readings."""
        self.callbacks.compare = bind_callback(fn, "compare")
        return self

    def set_commit(self, fn: Any) -> Stale:
        """Set the callback (or ``Sink``) that receives validated readings."""
        self.callbacks.commit = bind_callback(fn, "commit")
        return self

    def set_error(self, fn: Any) -> Stale:
        """Set the callback that receives request and callback failures."""
        self.callbacks.error = bind_callback(fn, "error")
        return self

    def _require_configured(self) -> None:
        missing = [
            slot
            for slot in ("request", "compare", "commit")
            if getattr(self.callbacks, slot) is None
        ]
        if missing:
            raise ConfigurationError(f"Missing {', '.join(missing)} callback")

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def majority(self, votes: int) -> bool:
        """Whether *votes* reach the configured majority threshold."""
        return has_majority(votes, self._config.probe_count)

    def fetch(self) -> Stale:
        """Start one fetch/compare cycle in the background and return immediately.

        Must be called from a running event loop. Use :meth:`join` to wait
        for scheduled cycles, or :meth:`poll` to run one inline.
        """
        self._require_configured()
        task = asyncio.get_running_loop().create_task(self.poll())
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return self

    async def poll(self) -> Resolution:
        """Run one request -> compare -> (verify) -> (commit) cycle to completion."""
        self._require_configured()
        assert self.callbacks.request is not None  # noqa: S101

        try:
            reading = await maybe_await(self.callbacks.request())
        except ConfigurationError:
            raise
        except Exception as exc:
            self._logger.debug("Received an error while retrieving data: %s", exc)
            await self._report(exc)
            return Resolution.FAILED

        return await self.compare(reading)

    async def join(self) -> None:
        """Wait until every cycle started through :meth:`fetch` has finished.

        Includes cycles scheduled while waiting, such as re-fetches after an
        accept majority.
        """
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def compare(self, reading: Any) -> Resolution:
        """Judge *reading* against the last committed reading and act on it."""
        self._require_configured()

        async with self._cycle_lock:
            baseline = self._previous

            try:
                outcome = await self._judge(baseline, reading, report_late_failure=True)
            except ConfigurationError:
                raise
            except Exception as exc:
                self._logger.debug("Compare callback failed", exc_info=True)
                await self._report(exc)
                return Resolution.FAILED

            if outcome is Outcome.ACCEPT:
                self._logger.debug("Received data was accepted, committing data")
                await self._save(reading)
                return Resolution.ACCEPTED

            if outcome is Outcome.SAME:
                self._logger.debug("The received state was the same, ignoring change")
                return Resolution.SAME

            if self._logger.isEnabledFor(logging.DEBUG):
                self._logger.debug(
                    "Received data was declined, starting verification: %s",
                    redact_reading(reading),
                )
            tally = await self._verify(baseline)
            return await self._settle(reading, tally)

    async def verify(self, baseline: Any) -> Tally:
        """Probe the source ``probe_count`` times and compare each reading to *baseline*.

        Probes run strictly one after another: firing them in parallel tends
        to land on the same load-balanced backend and hides replica
        divergence. Request or compare failures count as ``decline``.
        """
        self._require_configured()
        return await self._verify(baseline)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _judge(self, previous: Any, current: Any, *, report_late_failure: bool) -> Outcome:
        """Run the compare callback and return the first outcome it signalled.

        A callback that raises after signalling keeps its outcome. A callback
        that returns without signalling gets ``compare_timeout`` seconds to
        do so before the comparison fails with ``TimeoutError``.
        """
        assert self.callbacks.compare is not None  # noqa: S101
        sink = OutcomeSink()
        try:
            await maybe_await(self.callbacks.compare(previous, current, sink))
        except ConfigurationError:
            raise
        except Exception as exc:
            if not sink.signalled:
                raise
            self._logger.debug("Compare callback failed after signalling %s", sink.outcome, exc_info=True)
            if report_late_failure:
                await self._report(exc)

        timeout = self._config.compare_timeout
        try:
            async with asyncio.timeout(timeout):
                return await sink.wait()
        except TimeoutError as exc:
            raise TimeoutError(f"compare callback did not signal an outcome within {timeout}s") from exc

    async def _verify(self, baseline: Any) -> Tally:
        assert self.callbacks.request is not None  # noqa: S101
        counts: dict[Outcome, int] = {Outcome.ACCEPT: 0, Outcome.DECLINE: 0, Outcome.SAME: 0}
        remaining = self._config.probe_count

        while remaining:
            self._logger.debug("Starting verification request %d", remaining)
            remaining -= 1

            try:
                reading = await maybe_await(self.callbacks.request())
            except ConfigurationError:
                raise
            except Exception as exc:
                self._logger.debug("Verification request failed, marking as declined: %s", exc)
                counts[Outcome.DECLINE] += 1
                continue

            try:
                outcome = await self._judge(baseline, reading, report_late_failure=False)
            except ConfigurationError:
                raise
            except Exception:
                self._logger.debug("Verification compare failed, marking as declined", exc_info=True)
                outcome = Outcome.DECLINE

            counts[outcome] += 1

        tally = Tally(
            accept=counts[Outcome.ACCEPT],
            decline=counts[Outcome.DECLINE],
            same=counts[Outcome.SAME],
        )
        self._logger.debug(
            "Verification step complete. %d accept, %d decline, %d same",
            tally.accept,
            tally.decline,
            tally.same,
        )
        return tally

    async def _settle(self, reading: Any, tally: Tally) -> Resolution:
        resolution = resolve_verification(tally, self._config.probe_count)

        if resolution is Resolution.KEPT:
            self._logger.debug("The results that we got back are the same")
        elif resolution is Resolution.CONFIRMED:
            self._logger.debug("Majority of the requests are also declining, so it must be the new server state")
            await self._save(reading)
        elif resolution is Resolution.REFETCH:
            self._logger.debug("Majority of the requests see newer data, fetching again")
            # Scheduled, not awaited: the new cycle needs the lock this one holds.
            self.fetch()
        else:
            self._logger.debug("Received inconsistent server responses, ignoring for now")
            if self._config.report_inconclusive:
                await self._report(ConsensusInconclusive(tally))

        return resolution

    async def _save(self, reading: Any) -> None:
        assert self.callbacks.commit is not None  # noqa: S101
        self._previous = reading
        try:
            await maybe_await(self.callbacks.commit(reading))
        except ConfigurationError:
            raise
        except Exception as exc:
            self._logger.debug("Commit callback failed", exc_info=True)
            await self._report(exc)

    async def _report(self, exc: BaseException) -> None:
        try:
            await maybe_await(self.callbacks.error(exc))
        except Exception:
            self._logger.debug("Error callback failed", exc_info=True)

    def _on_task_done(self, task: asyncio.Task[Resolution]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._logger.error("Background fetch cycle failed", exc_info=exc)
