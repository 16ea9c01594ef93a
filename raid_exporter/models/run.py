"""
Export run record and the error values it carries.

``ExportRun`` is the audit record of one export run. The coordinator creates
it in ``INIT`` state and moves it through::

    INIT → VALIDATING → MAPPING → WRITING → SUCCEEDED
                 ↘           ↘         ↘
                   FAILED      FAILED    FAILED

``SUCCEEDED`` and ``FAILED`` are terminal.

Expected failures (client not running, missing sections, unwritable output
directory) are recorded as an ``ExportError`` value on the run rather than
raised. ``ExportRun`` is the only model in the system that is NOT frozen —
its state, counts and error are updated as the run progresses.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorKind(str, Enum):
    """Failure categories an export run can end in."""

    EXTRACTION_UNAVAILABLE = "extraction_unavailable"
    VALIDATION = "validation"
    IO = "io"
    SERIALIZATION = "serialization"
    UNEXPECTED = "unexpected"


class ExportState(str, Enum):
    INIT = "init"
    VALIDATING = "validating"
    MAPPING = "mapping"
    WRITING = "writing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATES = frozenset({ExportState.SUCCEEDED, ExportState.FAILED})


class ExportError(BaseModel):
    """A failure, described as data.

    Attributes:
        kind: Failure category.
        message: Human-readable reason; this is what ``error.json`` records.
        path: File or directory involved, for IO and serialization failures.
        cause: ``str()`` of the underlying exception, if any.
        missing_sections: Section names, for validation failures.
    """

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str
    path: Optional[str] = None
    cause: Optional[str] = None
    missing_sections: list[str] = []

    def one_line(self) -> str:
        """Single-line form suitable for console output."""
        text = self.message
        if self.path and self.path not in text:
            text = f"{text} ({self.path})"
        return " ".join(text.split())


class ExportRun(BaseModel):
    """Audit record for one extraction-then-export run.

    Attributes:
        run_slug: UUID4 string identifying this run.
        output_dir: Resolved output directory for this run.
        state: Current state machine position.
        heroes_exported: Champions written to ``roster.json``.
        artifacts_exported: Artifacts written to ``artifacts.json``.
        files_written: Paths of documents successfully written, in order.
        error: Failure description when ``state == FAILED``.
        started_at: UTC datetime the run began.
        finished_at: UTC datetime the run reached a terminal state.
    """

    # Not frozen; state, counts and error are updated during execution
    model_config = ConfigDict(frozen=False)

    run_slug: str
    output_dir: str
    state: ExportState = ExportState.INIT
    heroes_exported: int = 0
    artifacts_exported: int = 0
    files_written: list[str] = []
    error: Optional[ExportError] = None
    started_at: datetime
    finished_at: Optional[datetime] = None

    @property
    def succeeded(self) -> bool:
        return self.state == ExportState.SUCCEEDED

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES
