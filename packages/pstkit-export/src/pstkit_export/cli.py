"""Command line entry point: ``pstkit-export``."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from pstkit_core.errors import PstkitException

from pstkit_export.config import ExportContext
from pstkit_export.errors import ErrorCode
from pstkit_export.pipeline import run_export
from pstkit_export.strategies.registry import create_default_registry

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pstkit-export",
        description="Export every message of a PST/OST archive to standalone mail files.",
    )
    p.add_argument("--strategies", action="store_true", help="List all available export strategies and exit.")
    p.add_argument("--input", default=None, help="Input PST file to use (default: data/enron.pst).")
    p.add_argument("--output", default=None, help="Output directory root (default: data).")
    p.add_argument("--strategy", default=None, help="Export strategy to use (default: eml).")
    p.add_argument(
        "--plaintext",
        action="store_true",
        default=None,
        help="Only export the plain text body, never the HTML body.",
    )
    p.add_argument("--config", default=None, help="YAML or JSON file with default options.")
    p.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging threshold (default: INFO).",
    )
    return p


def build_context(args: argparse.Namespace) -> ExportContext:
    """Layer explicit command line flags over the config file (or defaults)."""
    context = ExportContext.from_file(args.config) if args.config else ExportContext()

    overrides = {
        "input_file": args.input,
        "output_directory": args.output,
        "strategy": args.strategy,
        "plaintext_only": args.plaintext,
        "log_level": args.log_level,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        context = ExportContext(**{**context.model_dump(), **overrides})
    return context


def main(argv: Optional[list[str]] = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    args = build_parser().parse_args(argv)

    try:
        context = build_context(args)
    except (OSError, ValueError, ImportError) as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(level=context.log_level, format=LOG_FORMAT)
    logger = logging.getLogger("pstkit_export")

    if args.strategies:
        logger.info("Export strategies:")
        for name in create_default_registry(logger=logger).names():
            logger.info("- %s", name)
        return 0

    try:
        run_export(context, logger=logger)
    except PstkitException as exc:
        if exc.code == ErrorCode.E_STRATEGY_NOT_FOUND:
            logger.error("pstkit_export | code=%s | detail=Failed to find export strategy: %s", exc.code, context.strategy)
        else:
            logger.error("pstkit_export | code=%s | detail=Failed to export: %s", exc.code, exc)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
