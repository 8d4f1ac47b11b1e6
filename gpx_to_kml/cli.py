"""Command-line entry point: ``gpx-to-kml --input_dir DIR [--output_dir DIR]``.

All conversion logic lives in ``gpx_to_kml.orchestrators.batch``. This
module only parses flags, configures logging, maps fatal errors to exit
code 1 and prints the summary line.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import TYPE_CHECKING

from gpx_to_kml import __version__
from gpx_to_kml.core.config import (
    ConfigValidationError,
    ConverterConfig,
    configure_logging,
    validate,
)
from gpx_to_kml.core.exceptions import InvalidDirectoryError
from gpx_to_kml.orchestrators.batch import run_batch

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("gpx_to_kml.cli")

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gpx-to-kml",
        description="Convert every GPX track log in a directory into a KML file.",
    )
    parser.add_argument(
        "--input_dir",
        "--input-dir",
        dest="input_dir",
        help="Input directory containing GPX files.",
    )
    parser.add_argument(
        "--output_dir",
        "--output-dir",
        dest="output_dir",
        help="Output directory for KML results. Defaults to input_dir.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Number of worker threads. Defaults to GPX_TO_KML_WORKERS or the CPU count.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        help="Log level (DEBUG, INFO, WARNING, ERROR). Defaults to GPX_TO_KML_LOG_LEVEL or INFO.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the converter and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.input_dir:
        print("input_dir must be provided!")
        parser.print_help()
        return EXIT_FAILURE

    try:
        config = ConverterConfig.from_env()
        if args.workers is not None:
            config = dataclasses.replace(config, workers=args.workers)
        if args.log_level:
            config = dataclasses.replace(config, log_level=args.log_level)
        validate(config)
    except (ConfigValidationError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    configure_logging(config.log_level)

    try:
        summary = run_batch(
            args.input_dir,
            args.output_dir,
            workers=config.workers,
            queue_factor=config.queue_factor,
            extension=config.input_extension,
        )
    except (InvalidDirectoryError, OSError) as exc:
        logger.error("error: %s", exc)
        return EXIT_FAILURE

    print(summary.report_line())
    return EXIT_SUCCESS
