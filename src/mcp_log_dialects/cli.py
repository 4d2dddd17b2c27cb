from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from mcp_log_dialects.core.config import configure_logging
from mcp_log_dialects.core.log_service import classify_file
from mcp_log_dialects.core.registry import DIALECTS, default_registry


def _parse_names(s: str) -> list[str]:
    out = [part.strip().lower() for part in s.split(",") if part.strip()]
    if not out:
        raise argparse.ArgumentTypeError("At least one name must be provided")
    return out


def _parse_dialects(s: str) -> list[str]:
    names = _parse_names(s)
    unknown = [n for n in names if n not in DIALECTS]
    if unknown:
        allowed = ", ".join(DIALECTS)
        raise argparse.ArgumentTypeError(f"Invalid dialect {unknown[0]!r}. Allowed: {allowed}")
    return names


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Classify Rails/Sidekiq log lines into JSON records.")
    p.add_argument("log_path")
    p.add_argument(
        "--dialects",
        type=_parse_dialects,
        default=None,
        help="Comma-separated dialects to use and keep (e.g., rails,sidekiq). Default: all enabled",
    )
    p.add_argument(
        "--line-types",
        type=_parse_names,
        default=None,
        help="Comma-separated line types to keep (e.g., request,completed)",
    )
    p.add_argument("--contains", default=None, help="Only classify lines containing this substring")
    p.add_argument("--max", dest="max_results", type=int, default=None, help="Max results (default: no cap)")
    p.add_argument("--parsed-only", action="store_true", help="Drop lines no parser recognized")
    p.add_argument("--message", dest="include_message", action="store_true", help="Include the raw line")
    return p


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging()
    path = Path(args.log_path)

    try:
        lines = asyncio.run(
            classify_file(
                path,
                limit=args.max_results,
                registry=default_registry(args.dialects),
                contains=args.contains,
                dialects=args.dialects,
                line_types=args.line_types,
                include_unparsed=not args.parsed_only,
            )
        )
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    for line in lines:
        print(json.dumps(line.to_dict(include_message=args.include_message), default=str))


if __name__ == "__main__":
    main()
