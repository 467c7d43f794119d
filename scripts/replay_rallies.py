# scripts/replay_rallies.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from rally_engine.match_session import MatchSession
from rally_engine.models import MatchState


def format_score(state: MatchState) -> str:
    home, away = state.home_team, state.away_team
    line = f"[{home.sets}] {home.points} - {away.points} [{away.sets}]"
    if state.is_finished:
        line += "  MATCH FINISHED"
    return line


def format_error(rally: str, error_msg: str, location: int) -> str:
    return f"  {rally}\n  {' ' * location}^\n  {error_msg}"


def read_rallies(lines: Iterable[str]) -> Iterable[str]:
    for line in lines:
        rally = line.strip()
        if rally and not rally.startswith("#"):
            yield rally


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(
        description="Replay volleyball rally notation and print the running score."
    )
    p.add_argument("--file", type=str, default="", help="Rally file, one rally per line (default: stdin)")
    p.add_argument("--json", action="store_true", help="Print the final match state as JSON")
    p.add_argument(
        "--log-level",
        type=str.upper,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    args = p.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.file:
        lines = Path(args.file).read_text(encoding="utf-8").splitlines()
    else:
        lines = sys.stdin

    session = MatchSession()
    failures = 0

    for rally in read_rallies(lines):
        result = session.submit(rally)

        if result.is_ok:
            print(f"{rally:<30} {format_score(result.state)}")
        else:
            failures += 1
            print(format_error(rally, result.reason.error_msg, result.reason.location))

        if session.state.is_finished:
            break

    if args.json:
        print(json.dumps(session.state.to_dict(), indent=2))

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
