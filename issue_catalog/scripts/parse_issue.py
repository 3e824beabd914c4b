from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from issue_catalog.assembler import parse_issue_body

LOGGER = logging.getLogger("issue_catalog.parse_issue")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid issue number: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"issue number must be positive, got {number}")
    return number


def configure_logging(verbosity: int) -> None:
    level = logging.DEBUG if verbosity > 0 else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Parse one GitHub issue body (markdown) into a project JSON record.",
        epilog="Example: parse-issue issue.md --number 2 --created 2026-02-03T18:34:20Z --updated 2026-02-03T18:34:20Z",
    )
    parser.add_argument("issue_file", type=Path, help="Path to a file containing the issue body markdown")
    parser.add_argument("-n", "--number", type=positive_int, required=True, help="Issue number")
    parser.add_argument("-c", "--created", default=None, help="ISO timestamp of creation (default: now)")
    parser.add_argument("-u", "--updated", default=None, help="ISO timestamp of last update (default: now)")
    parser.add_argument("--compact", action="store_true", help="Print JSON on a single line")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase logging verbosity")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        body = args.issue_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: cannot read {args.issue_file}: {exc}", file=sys.stderr)
        return 1

    now = utc_now_iso()
    result = parse_issue_body(body, args.number, args.created or now, args.updated or now)
    if not result.ok:
        print(f"Error: Failed to parse issue body: {result.reason}", file=sys.stderr)
        return 1

    indent = None if args.compact else 2
    print(json.dumps(result.unwrap().to_json_dict(), indent=indent, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
