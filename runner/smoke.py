#!/usr/bin/env python3
"""High-level smoke runner exercising a live faststatus server.

Steps:
- wait for server health
- create a handful of Free resources
- move each through Busy to Occupied
- fetch them back as JSON and as text and check both forms agree
- delete them (unless --keep) and emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import sys

import httpx

from faststatus.domain.status import Status
from faststatus.logging_conf import get_logger, setup_logging
from runner.cli import parse_args
from runner.client import create_resource, delete_resource, fetch, set_status, wait_for_health
from runner.types import Tracked
from runner.utils import check, summarize

setup_logging()
logger = get_logger("runner")

DEFAULT_NAMES = ("Meeting Room A", "Build Server", "Front Desk")


async def run_smoke(
    *, base_url: str, names: list[str], timeout_s: float = 20.0, keep: bool = False
) -> int:
    await wait_for_health(base_url, timeout_s)
    async with httpx.AsyncClient(base_url=base_url, timeout=10.0) as client:
        tracked: list[Tracked] = list(
            await asyncio.gather(*(create_resource(client, n) for n in names))
        )
        for status in (Status.BUSY, Status.OCCUPIED):
            await asyncio.gather(*(set_status(client, t, status) for t in tracked))

        ids = [t.id for t in tracked]
        as_json = await fetch(client, ids, as_json=True)
        as_text = await fetch(client, ids, as_json=False)
        check(tracked, as_json.content, as_text.text)

        deleted = 0
        if not keep:
            results = await asyncio.gather(*(delete_resource(client, i) for i in ids))
            deleted = sum(results)

    summary, exit_code = summarize(tracked, deleted)
    logger.info("runner.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv or sys.argv[1:])
    code = asyncio.run(
        run_smoke(
            base_url=args.base_url,
            names=args.names or list(DEFAULT_NAMES),
            timeout_s=args.timeout,
            keep=args.keep,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
