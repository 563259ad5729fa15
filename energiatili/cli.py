"""
Command line wrapper around the normalizer.

    energiatili extract report.html > model.json
    energiatili normalize model.json --format lines
    energiatili normalize --html report.html --format csv

Fetching the report page is left to the caller; input is a file or stdin.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence, TextIO

from . import exceptions, formats, ingest, merge, preprocess
from .config import Settings

logger = logging.getLogger(__name__)


def _open(path: str) -> TextIO:
    if path == "-":
        return sys.stdin
    return open(path, encoding="utf-8")


def _read(path: str) -> str:
    fh = _open(path)
    try:
        return fh.read()
    finally:
        if fh is not sys.stdin:
            fh.close()


def _cmd_extract(args: argparse.Namespace, settings: Settings) -> int:
    raw = ingest.extract_model_json(_read(args.input), marker=settings.marker)
    repaired = preprocess.fix_new_date(raw, settings.tz)
    if args.raw:
        sys.stdout.write(repaired + "\n")
        return 0
    model = ingest.from_json(repaired)
    sys.stdout.write(ingest.dump_json(model) + "\n")
    return 0


def _cmd_normalize(args: argparse.Namespace, settings: Settings) -> int:
    text = _read(args.input)
    if args.html:
        model = ingest.from_report_html(text, tz=settings.tz, marker=settings.marker)
    else:
        model = ingest.from_json(text)

    measurements = merge.normalize(
        model, tz=settings.tz, max_workers=settings.max_workers
    )

    if args.format == "lines":
        for line in formats.to_line_protocol(
            measurements, measurement=settings.measurement_name
        ):
            sys.stdout.write(line + "\n")
    elif args.format == "json":
        json.dump(formats.to_records(measurements), sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        formats.to_frame(measurements).to_csv(sys.stdout)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="energiatili",
        description="Normalize Energiatili consumption reports into priced measurements",
    )
    parser.add_argument("--config", help="TOML file with an [energiatili] table")
    parser.add_argument("--tz", help="Civil timezone of report timestamps")
    parser.add_argument("--workers", type=int, help="Worker threads for the merge")
    parser.add_argument("--log-level", help="Logging level (default WARNING)")

    sub = parser.add_subparsers(dest="command", required=True)

    p_extract = sub.add_parser("extract", help="Report HTML -> model JSON")
    p_extract.add_argument("input", nargs="?", default="-")
    p_extract.add_argument(
        "--raw", action="store_true", help="Print repaired text without re-serializing"
    )
    p_extract.set_defaults(func=_cmd_extract)

    p_norm = sub.add_parser("normalize", help="Model JSON (or HTML) -> measurements")
    p_norm.add_argument("input", nargs="?", default="-")
    p_norm.add_argument("--html", action="store_true", help="Input is a report page")
    p_norm.add_argument(
        "--format", choices=("lines", "json", "csv"), default="lines"
    )
    p_norm.set_defaults(func=_cmd_normalize)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = (
            Settings.from_toml(args.config) if args.config else Settings.from_env()
        )
        settings = settings.merged(
            tz=args.tz, max_workers=args.workers, log_level=args.log_level
        )
    except exceptions.EnergiatiliError as err:
        print(f"energiatili: {err}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        return args.func(args, settings)
    except exceptions.EnergiatiliError as err:
        logger.debug("Normalization failed", exc_info=True)
        print(f"energiatili: {type(err).__name__}: {err}", file=sys.stderr)
        return 1
    except OSError as err:
        print(f"energiatili: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
