"""
Plain-text summary of an export run for the console and the log file.

Example (success)::

  Extraction Summary:
    Champions: 214
    Artifacts: 1532
    Status:    Success
    Files:     roster.json, artifacts.json, account.json, metadata.json

Example (failure)::

  Extraction Summary:
    Champions: 0
    Artifacts: 0
    Status:    Failure
    Error:     [validation] Validation failed: heroes missing
"""

from __future__ import annotations

from pathlib import Path

from raid_exporter.models.run import ExportRun


def format_status(run: ExportRun) -> str:
    return "Success" if run.succeeded else "Failure"


def format_run_summary(run: ExportRun) -> str:
    """Return the multi-line extraction summary for ``run``.

    Counts are only non-zero for successful runs; a failed run exported
    nothing a consumer should rely on.
    """
    lines = [
        "Extraction Summary:",
        f"  Champions: {run.heroes_exported}",
        f"  Artifacts: {run.artifacts_exported}",
        f"  Status:    {format_status(run)}",
    ]
    if run.files_written:
        names = ", ".join(Path(p).name for p in run.files_written)
        lines.append(f"  Files:     {names}")
    if run.error is not None:
        lines.append(f"  Error:     [{run.error.kind.value}] {run.error.one_line()}")
    return "\n".join(lines)
