#!/usr/bin/env python3
"""Watch a JSON endpoint and print every reading that survives the staleness check.

The endpoint is expected to return an object with a monotonic field
(``version`` by default). Readings that look older than the last printed
one are only printed once a majority of follow-up probes agree.

Usage
-----
::

    python scripts/watch_json.py https://example.com/state.json --field version --interval 10

Options::

    --field NAME        Field used for ordering readings (default: version)
    --interval SECONDS  Poll period (default: STALE_INTERVAL or 10)
    --probes N          Verification probes (default: STALE_PROBE_COUNT or 6)
    --once              Run a single cycle and exit
    --verbose, -v       Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

import aiohttp

from stalestate import (
    ConfigurationError,
    ConsensusInconclusive,
    HttpJsonSource,
    IntervalPoller,
    Stale,
    StaleConfig,
    compare_field,
)


def _print_commit(reading: Any) -> None:
    stamp = datetime.now(UTC).isoformat(timespec="seconds")
    print(f"[{stamp}] {json.dumps(reading, ensure_ascii=False, default=str)}")


def _print_error(exc: BaseException) -> None:
    if isinstance(exc, ConsensusInconclusive):
        print(f"  inconclusive: {exc}", file=sys.stderr)
        return
    print(f"  error: {exc}", file=sys.stderr)


def _build_config(args: argparse.Namespace) -> StaleConfig:
    overrides: dict[str, Any] = {"name": "watch", "report_inconclusive": True}
    if args.probes is not None:
        overrides["probe_count"] = args.probes
    if args.interval is not None:
        overrides["interval"] = args.interval
    config = StaleConfig.from_env(**overrides)
    if not config.interval:
        config = dataclasses.replace(config, interval=10.0)
    return config


async def run(args: argparse.Namespace, config: StaleConfig) -> None:
    async with aiohttp.ClientSession() as http:
        stale = Stale(
            config,
            source=HttpJsonSource(args.url, http),
            comparator=compare_field(args.field),
            sink=_print_commit,
            on_error=_print_error,
        )

        if args.once:
            resolution = await stale.poll()
            await stale.join()
            print(f"  cycle finished: {resolution}", file=sys.stderr)
            return

        async with IntervalPoller(stale):
            await asyncio.Event().wait()


def main() -> None:
    parser = argparse.ArgumentParser(description="Poll a JSON endpoint with quorum-verified staleness checks.")
    parser.add_argument("url", help="Endpoint returning a JSON object")
    parser.add_argument("--field", default="version", help="Field used for ordering readings")
    parser.add_argument("--interval", type=float, help="Poll period in seconds")
    parser.add_argument("--probes", type=int, help="Verification probes per declined reading")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _build_config(args)
    except ConfigurationError as exc:
        parser.error(str(exc))

    try:
        asyncio.run(run(args, config))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
