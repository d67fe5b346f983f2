"""Command-line entrypoint for the Pista training log."""

from __future__ import annotations

import argparse
from pathlib import Path

from loguru import logger

from pista.core.logger import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pista running-workout log (web UI)")
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host bind for the web UI",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8090,
        help="Port for the web UI",
    )
    parser.add_argument(
        "--data-file",
        type=Path,
        default=None,
        help="Training history JSON file (default: ~/.pista/trainings.json)",
    )
    parser.add_argument(
        "--export-dir",
        type=Path,
        default=None,
        help="Directory for CSV and report exports (default: ~/.pista/exports)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console/file log level",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional log file (rotated at 10 MB)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logger(level=args.log_level, log_file=args.log_file)

    from pista.ui.web_app import run_web_ui

    logger.info(f"Starting web UI on http://{args.host}:{args.port}")
    return run_web_ui(
        host=args.host,
        port=args.port,
        data_file=args.data_file,
        export_dir=args.export_dir,
    )


if __name__ == "__main__":
    raise SystemExit(main())
