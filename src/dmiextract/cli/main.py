#!/usr/bin/env python3
"""
dmiextract: Export frames (PNG) and animations (GIF) from BYOND .dmi files.

Examples:
  dmiextract -p -g input.dmi                 all frames and animations
  dmiextract -g inputA.dmi inputB.dmi        only animations
  dmiextract -p -f input.dmi                 only frames, no still/animated folders
  dmiextract -g -d inputA.dmi inputB.dmi     bulk export without per-file folders
"""

from __future__ import annotations

import argparse
import functools
import sys
from collections.abc import Sequence
from pathlib import Path

from ..config import AppSettings, ExportConfig, app_settings
from ..core.constants import EXIT_EXPORT_FAILED, EXIT_OK
from ..core.errors import InputValidationError
from ..output.logger import SimpleLogger
from ..processing.container import read_container
from ..processing.export import Exporter, RunReport, prepare_output_root
from ..processing.image import ArtifactWriter
from ..utils.path import validate_inputs


def parse_args(argv: Sequence[str] | None = None, settings: AppSettings = app_settings) -> argparse.Namespace:
    """Parse CLI arguments."""
    p = argparse.ArgumentParser(
        prog="dmiextract",
        description="Extract frames and animations from BYOND .dmi sprite files.",
        epilog=__doc__.split("Examples:", 1)[1] if __doc__ else None,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument(
        "-o", "--output", type=Path, default=settings.output.default_root,
        help="Root directory to output files into (default: %(default)s)",
    )
    p.add_argument(
        "-p", "--png", "--still", dest="still", action="store_true",
        help="Export PNG files of every direction and frame",
    )
    p.add_argument(
        "-g", "--gif", "--animated", dest="animated", action="store_true",
        help="Export GIF animations of every direction of animated states",
    )
    p.add_argument(
        "-d", "--nodmi", "--no-container-folders", dest="container_folders", action="store_false",
        help="Do not export into one folder per input file; prefix filenames instead",
    )
    p.add_argument(
        "-f", "--noformat", "--no-format-folders", dest="format_folders", action="store_false",
        help="Do not split output into still/ and animated/ folders",
    )
    p.add_argument("--log-file", type=Path, help="Also append log lines to this file")
    p.add_argument("files", nargs="+", type=Path, metavar="FILE", help="File or files to export from")
    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> ExportConfig:
    """Create an ExportConfig from parsed args."""
    return ExportConfig(
        output_root=args.output,
        export_still=args.still,
        export_animated=args.animated,
        per_container_subfolder=args.container_folders,
        per_format_subfolder=args.format_folders,
    )


def print_run_header(logger: SimpleLogger, config: ExportConfig, files: Sequence[Path]) -> None:
    """Print the run configuration."""
    logger.section("Run Configuration")
    rows = [
        ["Inputs:", str(len(files))],
        ["Output:", str(config.output_root)],
        ["Stills:", "yes" if config.export_still else "no"],
        ["Animations:", "yes" if config.export_animated else "no"],
        ["Per-file:", "yes" if config.per_container_subfolder else "no"],
        ["Per-format:", "yes" if config.per_format_subfolder else "no"],
    ]
    for label, value in rows:
        logger.log(f"{label:<12} {value}")


def print_summary(logger: SimpleLogger, report: RunReport) -> None:
    logger.section("Summary")
    rows = [
        ["Containers:", str(len(report.containers))],
        ["Stills:", str(report.stills_written)],
        ["Animations:", str(report.animations_written)],
        ["Collisions:", str(report.collisions)],
        ["Failures:", str(report.failures)],
        ["Total Time:", f"{logger.elapsed():.1f}s"],
    ]
    for label, value in rows:
        logger.log(f"{label:<20} {value}")

    failed = [
        [str(c.source), c.parse_error or f"{len(c.failures)} artifact(s) failed"]
        for c in report.containers
        if not c.ok
    ]
    if failed:
        logger.table(["Container", "Problem"], failed)


def main(
    argv: Sequence[str] | None = None,
    logger: SimpleLogger | None = None,
    writer: ArtifactWriter | None = None,
    settings: AppSettings = app_settings,
) -> int:
    """CLI entry point."""
    args = parse_args(argv, settings)
    config = build_config(args)
    logger = logger or SimpleLogger(args.log_file)

    try:
        validate_inputs(args.files, settings.input.container_extension)
    except InputValidationError as ex:
        logger.error(f"{ex.reason}: {ex.path}")
        return ex.exit_code

    if not config.exports_anything:
        logger.warning("Nothing to export; enable --png and/or --gif.")
        return EXIT_OK

    # Fatal for the whole run: OutputRootError propagates.
    prepare_output_root(config, logger)

    print_run_header(logger, config, args.files)
    exporter = Exporter(
        config,
        logger,
        writer=writer,
        reader=functools.partial(read_container, settings=settings),
        loop=settings.output.animation_loop,
    )
    report = exporter.export_files(args.files)
    print_summary(logger, report)

    return EXIT_OK if report.ok else EXIT_EXPORT_FAILED


if __name__ == "__main__":
    sys.exit(main())
