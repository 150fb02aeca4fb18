"""Replay a JSONL action-event log through a fresh escalation session.

Usage:
    python scripts/replay_events.py --events session.jsonl --option failureThreshold=4
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Iterable

from handoff.core.config import EngineConfig
from handoff.core.exceptions import EventValidationError
from handoff.core.logging import configure_logging
from handoff.engine.session import EscalationSession
from handoff.models.escalation import EscalationRecord


def parse_options(pairs: Iterable[str]) -> dict[str, Any]:
    """Turn ``key=value`` pairs into engine options; values are parsed as JSON when possible."""
    options: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {pair!r}")
        try:
            options[key] = json.loads(raw)
        except json.JSONDecodeError:
            options[key] = raw
    return options


def replay(lines: Iterable[str], options: dict[str, Any] | None = None) -> list[EscalationRecord]:
    """Submit every non-blank line in order; rejected lines are reported and skipped."""
    session = EscalationSession(EngineConfig.from_options(options))
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            session.submit(json.loads(line))
        except json.JSONDecodeError as exc:
            print(f"  line {lineno}: not JSON ({exc.msg}), skipping", file=sys.stderr)
        except EventValidationError as exc:
            print(f"  line {lineno}: rejected ({exc}), skipping", file=sys.stderr)
    return list(session.escalations)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Replay action events through the escalation engine")
    parser.add_argument("--events", required=True, type=Path, help="JSONL file, one action event per line")
    parser.add_argument(
        "--option", action="append", default=[], metavar="KEY=VALUE",
        help="Engine option, e.g. failureThreshold=4 (repeatable)",
    )
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    with args.events.open(encoding="utf-8") as fh:
        records = replay(fh, parse_options(args.option))

    for record in records:
        print(record.model_dump_json(by_alias=True))
    print(f"Replayed {args.events}: {len(records)} escalation(s)", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
