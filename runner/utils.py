from __future__ import annotations

import json

from faststatus.domain.errors import ResourceError
from faststatus.domain.resource import Resource
from runner.types import Tracked


def parse_json_listing(body: bytes) -> dict[str, Resource]:
    """Decode a JSON array response into resources keyed by wire id."""
    out: dict[str, Resource] = {}
    for item in json.loads(body):
        r = Resource.from_json(json.dumps(item))
        out[f"{r.id:X}"] = r
    return out


def parse_text_listing(body: str) -> dict[str, list[str]]:
    """Split line-text output into ``id -> [since, status, name]``.

    The id column is the 16-digit form; keys are stripped of leading zeros
    to match the wire form.
    """
    out: dict[str, list[str]] = {}
    for line in body.splitlines():
        if not line:
            continue
        since, status, rid, *name = line.split(" ", 3)
        out[rid.lstrip("0") or "0"] = [since, status, name[0] if name else ""]
    return out


def check(tracked: list[Tracked], json_body: bytes, text_body: str) -> None:
    """Record per-resource agreement between the JSON and text listings."""
    try:
        by_json = parse_json_listing(json_body)
    except (ValueError, ResourceError):
        by_json = {}
    by_text = parse_text_listing(text_body)
    for t in tracked:
        r = by_json.get(t.id)
        line = by_text.get(t.id)
        t.checks["json_present"] = r is not None
        t.checks["text_present"] = line is not None
        t.checks["status_matches"] = r is not None and int(r.status) == t.expected_status
        if r is not None and line is not None:
            since, status, _, name = str(r).split(" ", 3)
            t.checks["forms_agree"] = [since, status, name] == line
        else:
            t.checks["forms_agree"] = False


def summarize(tracked: list[Tracked], deleted: int) -> tuple[dict, int]:
    """Compute summary dict and an exit code from the checks."""
    failures = [
        {"id": t.id, "name": t.name, "failed": sorted(k for k, ok in t.checks.items() if not ok)}
        for t in tracked
        if not t.checks or not all(t.checks.values())
    ]
    summary = {
        "component": "runner",
        "event": "summary",
        "resources": len(tracked),
        "passed": len(tracked) - len(failures),
        "deleted": deleted,
        "failures": failures,
    }
    exit_code = 0 if (tracked and not failures) else 1
    return summary, exit_code
