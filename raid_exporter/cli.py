"""
RAID Exporter — CLI entry point.

A scan follows this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging (console + ``logs/raid_exporter.log``).
  3. Build the configured extractor (dump file or fixture).
  4. ``run_scan()``: extract → validate → map → write.
  5. Log the extraction summary and report the outcome on the console.

Exit codes: 0 on success (and for usage/version output), 1 when the scan
fails, 2 for command-line parse errors.

Install and run::

    pip install -e .
    raid-exporter --help
    raid-exporter --version
    raid-exporter --scan --output ./export
    raid-exporter --scan --dump data/raid_dump.json
    raid-exporter --scan --fixture --output ./sample-export
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from raid_exporter import __version__

logger = logging.getLogger("raid_exporter.cli")

app = typer.Typer(
    name="raid-exporter",
    help="Export a RAID: Shadow Legends account snapshot to JSON documents.",
    add_completion=False,
)

USAGE = """\
RaidExporter

Usage:
  raid-exporter --scan --output <path>
  raid-exporter --version
  raid-exporter --help

Options:
  --scan          Execute extraction scan
  --output <path> Output directory path (default: ./export)
  --dump <path>   Read the account dump from this file
  --fixture       Export built-in sample data instead of a dump
  --config <path> TOML config file (default: config/default.toml)
  --version       Display version information
  --help          Display this help screen"""


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from raid_exporter.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"ERROR: Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from raid_exporter.utils.logging import configure_logging
    configure_logging(config.logging)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"RaidExporter v{__version__}")
        raise typer.Exit()


def _failure_message(run) -> str:
    from raid_exporter.models.run import ErrorKind

    if run.error.kind == ErrorKind.EXTRACTION_UNAVAILABLE:
        return (
            "ERROR: RAID client not detected. "
            "Please ensure Raid: Shadow Legends is running."
        )
    return f"ERROR: Extraction failed - {run.error.one_line()}"


# ── Command ───────────────────────────────────────────────────────────────────

@app.command()
def main(
    scan: bool = typer.Option(
        False,
        "--scan",
        help="Run the extraction scan and export the account to JSON.",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        help="Destination output directory. Defaults to ./export or the export.output_dir setting.",
    ),
    dump: Optional[str] = typer.Option(
        None,
        "--dump",
        help="Path to the account dump written by the process inspector.",
    ),
    fixture: bool = typer.Option(
        False,
        "--fixture",
        help="Export built-in sample data; no game client required.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Display version information.",
    ),
) -> None:
    """Extract the account snapshot and write roster, artifacts, account and
    metadata JSON documents.

    On failure an error.json document describing the problem is written to
    the output directory instead, and the command exits with code 1.
    """
    from raid_exporter.export.coordinator import run_scan
    from raid_exporter.export.reporter import report_error
    from raid_exporter.ingestion.extractor import build_extractor, normalize_error_message
    from raid_exporter.reporting.summary import format_run_summary

    if not scan:
        typer.echo(USAGE)
        return

    if dump and fixture:
        typer.echo("ERROR: --dump and --fixture cannot be used together.", err=True)
        raise typer.Exit(code=2)

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    output_dir = output or config.export.output_dir
    settings = config.export.serializer
    if fixture:
        source = "fixture"
    elif dump:
        source = "dump"
    else:
        source = config.extractor.source
    extractor = build_extractor(source, dump or config.extractor.dump_path)

    logger.info("Starting RaidExporter v%s scan | source=%s", __version__, source)

    try:
        run = run_scan(extractor, output_dir, settings=settings, version=__version__)
    except Exception as exc:
        message = normalize_error_message(exc)
        logger.error("Fatal error during extraction - %s", message)
        logger.debug("Fatal error detail", exc_info=True)
        report_error(output_dir, message, settings)
        typer.echo(f"ERROR: Extraction failed - {message}", err=True)
        raise typer.Exit(code=1)

    for line in format_run_summary(run).splitlines():
        logger.info(line)

    if not run.succeeded:
        typer.echo(_failure_message(run), err=True)
        raise typer.Exit(code=1)

    typer.echo(f"SUCCESS: Extraction completed. Files exported to {output_dir}")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
