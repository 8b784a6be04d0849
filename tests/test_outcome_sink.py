from __future__ import annotations

import asyncio
import threading

import pytest

from stalestate.models import Outcome
from stalestate.outcome import OutcomeSink


@pytest.mark.asyncio
async def test_first_signal_wins() -> None:
    sink = OutcomeSink()
    assert sink.signalled is False

    sink.same()
    sink.accept()
    sink.decline()

    assert sink.outcome is Outcome.SAME
    assert await sink.wait() is Outcome.SAME


@pytest.mark.asyncio
async def test_repeated_signal_is_noop() -> None:
    sink = OutcomeSink()
    sink.accept()
    sink.accept()

    assert await sink.wait() is Outcome.ACCEPT


@pytest.mark.asyncio
async def test_wait_suspends_until_signal_arrives_later() -> None:
    sink = OutcomeSink()
    asyncio.get_running_loop().call_later(0.01, sink.decline)

    assert await asyncio.wait_for(sink.wait(), timeout=1.0) is Outcome.DECLINE


@pytest.mark.asyncio
async def test_signal_from_other_thread() -> None:
    sink = OutcomeSink()
    worker = threading.Thread(target=sink.accept)
    worker.start()
    worker.join()

    assert await asyncio.wait_for(sink.wait(), timeout=1.0) is Outcome.ACCEPT


def test_requires_running_loop() -> None:
    with pytest.raises(RuntimeError):
        OutcomeSink()
