"""Command line entry point: parse a statement and print its transactions as JSON.

    python -m statement_engine statement.pdf
    python -m statement_engine statement.txt --lenient --decimal-separator ,
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from statement_engine.config import settings
from statement_engine.core.errors import get_suggestion, get_user_message
from statement_engine.core.exceptions import PDFExtractionError
from statement_engine.parsers.factory import StatementParser
from statement_engine.schemas.internal import ParseOutcome

logger = logging.getLogger("statement_engine.cli")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str, log_file: Path | None = None) -> None:
    """Route statement_engine logs to stderr and, optionally, a file.

    stdout is reserved for the JSON result. Handlers from an earlier call are
    replaced, so repeated runs in one process do not duplicate output.
    """
    package_logger = logging.getLogger("statement_engine")
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statement_engine",
        description="Extract transactions from a bank statement PDF (or its text)",
    )
    parser.add_argument("path", type=Path, help="Statement PDF, or a .txt with its text")
    filtering = parser.add_mutually_exclusive_group()
    filtering.add_argument(
        "--strict",
        dest="strict_filtering",
        action="store_true",
        default=None,
        help="Reject descriptions containing any header keyword",
    )
    filtering.add_argument(
        "--lenient",
        dest="strict_filtering",
        action="store_false",
        help="Only reject obvious balance/period rows",
    )
    parser.add_argument(
        "--decimal-separator",
        choices=[".", ","],
        help="Force the decimal separator instead of auto-detecting it",
    )
    parser.add_argument("--password", help="Password for encrypted PDFs")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")
    return parser


def run(args: argparse.Namespace) -> ParseOutcome:
    overrides = {}
    if args.strict_filtering is not None:
        overrides["strict_filtering"] = args.strict_filtering
    if args.decimal_separator:
        overrides["decimal_separator"] = args.decimal_separator
        if args.decimal_separator == ",":
            overrides["thousands_separator"] = None

    parser = StatementParser()
    if args.path.suffix.lower() == ".txt":
        config = parser.config.with_overrides(**overrides)
        return parser.orchestrator.run_detailed(args.path.read_text(encoding="utf-8"), config)

    return asyncio.run(
        parser.parse_detailed(
            args.path.read_bytes(), config_overrides=overrides, password=args.password
        )
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        outcome = run(args)
    except FileNotFoundError:
        logger.error("File not found", extra={"path": str(args.path)})
        return 1
    except PDFExtractionError as e:
        print(f"{get_user_message(e.error_code)} {get_suggestion(e.error_code)}", file=sys.stderr)
        return 1

    print(json.dumps(outcome.model_dump(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
