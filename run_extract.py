"""CLI entry point.

This script reads raw model output for one job posting, validates it, and emits
one JSON line (stdout by default) for appending to a dataset.

Examples:
    python run_extract.py response.txt >> data.jsonl
    python run_extract.py response.txt --out data.jsonl
    cat response.txt | python run_extract.py --log-level DEBUG

On failure nothing is written and the exit status is 1.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from rolescope.config import default_output_path
from rolescope.errors import RoleScopeError
from rolescope.log import get_logger, set_level
from rolescope.pipeline import process

log = get_logger("rolescope.cli")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Convert raw model output into one validated job posting record.")
    p.add_argument("input", nargs="?", default="-", help="File with the raw model output ('-' for stdin).")
    p.add_argument(
        "--out",
        type=str,
        default=None,
        help="JSONL file to append to (default: $ROLESCOPE_OUTPUT, else stdout).",
    )
    p.add_argument("--log-level", type=str, default=None, help="Override LOG_LEVEL (e.g. DEBUG).")
    return p.parse_args(argv)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).expanduser().read_text(encoding="utf-8")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    if args.log_level:
        set_level(args.log_level)

    try:
        raw_text = _read_input(args.input)
    except (OSError, UnicodeDecodeError) as exc:
        log.error("Cannot read input %s: %s", args.input, exc)
        return 1

    try:
        line = process(raw_text)
    except RoleScopeError as exc:
        log.error("Error extracting job data: %s", exc)
        return 1

    out_path = Path(args.out).expanduser() if args.out else default_output_path()
    if out_path is None:
        sys.stdout.write(line)
        sys.stdout.flush()
        return 0

    out_path = out_path.resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("a", encoding="utf-8") as f:
        f.write(line)
    log.info("Appended 1 record to: %s", out_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
