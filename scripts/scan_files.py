#!/usr/bin/env python3
"""Scan files for copyright and license notices.

Writes one JSON line per file (name, overall party type, whether the file
is allowed, and every match) to stdout, or to the --output file, with logs on
stderr. Exits 1 when any file is not allowed and 2 when the rules are invalid.

Usage:
    python3 scripts/scan_files.py --rules rules.json src/foo.c src/bar.py
    python3 scripts/scan_files.py --rules rules.json --verbose NOTICE
    python3 scripts/scan_files.py --rules rules.json -o scan.jsonl src/*.c
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any

from copyright_scanner.classification import file_allowed
from copyright_scanner.config import ConfigError, ScanConfig, load_scan_config
from copyright_scanner.io_utils import dumps_jsonl_line, save_jsonl
from copyright_scanner.patterns import PatternError
from copyright_scanner.scanner import CopyrightScanner

log = logging.getLogger("scan_files")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Classify copyright and license notices in files."
    )
    parser.add_argument(
        "paths", nargs="+", type=Path, help="Files to scan",
    )
    parser.add_argument(
        "--rules",
        type=Path,
        default=None,
        help="JSON rules file (default: no known licenses or owners)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write JSON Lines records to this file instead of stdout",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Debug logging",
    )
    return parser


def scan_file(
    scanner: CopyrightScanner, path: Path, third_party_allowed: bool,
) -> dict[str, Any]:
    matches = scanner.scan_path(path)
    overall, allowed = file_allowed(matches, third_party_allowed)
    return {
        "name": str(path),
        "party_type": overall,
        "allowed": allowed,
        "matches": [m.to_dict() for m in matches],
    }


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    config = ScanConfig()
    if args.rules is not None:
        try:
            config = load_scan_config(args.rules)
        except ConfigError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(2)
        except OSError as exc:
            print(f"Error: cannot read rules file: {exc}", file=sys.stderr)
            sys.exit(2)

    t0 = time.perf_counter()
    try:
        scanner = CopyrightScanner(config.rules)
    except PatternError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    log.debug("Compiled scanner in %.3fs", time.perf_counter() - t0)

    records: list[dict[str, Any]] = []
    rejected = 0
    for path in args.paths:
        try:
            record = scan_file(scanner, path, config.third_party_allowed)
        except OSError as exc:
            log.error("Cannot scan %s: %s", path, exc)
            rejected += 1
            continue
        if not record["allowed"]:
            rejected += 1
        if args.output is not None:
            records.append(record)
            continue
        sys.stdout.buffer.write(dumps_jsonl_line(record))
        sys.stdout.buffer.flush()

    if args.output is not None:
        save_jsonl(records, args.output)
        log.info("Wrote %d records to %s", len(records), args.output)

    log.info("Scanned %d files, %d not allowed", len(args.paths), rejected)
    if rejected:
        sys.exit(1)


if __name__ == "__main__":
    main()
