"""
Export coordinator — one snapshot in, one document set (or ``error.json``) out.

Every run follows the same contract:
  1. ``run(snapshot)`` is the sole public entry point and returns an
     ``ExportRun`` in a terminal state.
  2. The snapshot is validated first; a failed validation writes
     ``error.json`` and touches nothing else.
  3. Mappers run in a fixed order (roster, artifacts, account, metadata),
     then each document is written in that same order.
  4. The first failed write stops the run. Documents already written stay
     on disk; ``error.json`` marks the export as incomplete.
  5. A successful run removes any ``error.json`` left by an earlier run.

Expected failures come back as ``ExportRun.error``. An unexpected exception
(a defect) marks the run FAILED and is re-raised for the caller's top-level
handler.

``run_scan()`` wraps the coordinator with output-directory creation and the
extractor call, so that "client not running" also ends in a recorded run.

Usage::

    coordinator = ExportCoordinator("./export", settings=config.export.serializer)
    run = coordinator.run(snapshot)
    if not run.succeeded:
        print(run.error.one_line())
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union
from uuid import uuid4

from raid_exporter import __version__
from raid_exporter.config import SerializerSettings
from raid_exporter.export.mappers import generate_metadata, map_account, map_artifacts, map_roster
from raid_exporter.export.reporter import ERROR_FILE, report_error
from raid_exporter.export.validator import validate_snapshot
from raid_exporter.export.writer import Document, write_document
from raid_exporter.ingestion.extractor import (
    CLIENT_NOT_DETECTED,
    DumpReadError,
    ExtractionUnavailableError,
    SnapshotExtractor,
    SnapshotFormatError,
    is_client_not_running,
    normalize_error_message,
)
from raid_exporter.models.run import ErrorKind, ExportError, ExportRun, ExportState
from raid_exporter.models.snapshot import Snapshot
from raid_exporter.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

ROSTER_FILE = "roster.json"
ARTIFACTS_FILE = "artifacts.json"
ACCOUNT_FILE = "account.json"
METADATA_FILE = "metadata.json"

# Write order; also the order mappers run in.
EXPORT_FILES: tuple[str, ...] = (ROSTER_FILE, ARTIFACTS_FILE, ACCOUNT_FILE, METADATA_FILE)


class ExportCoordinator:
    """Runs validation, mapping and writing for one snapshot.

    Holds no state between runs; each ``run()`` creates a fresh ``ExportRun``.

    Attributes:
        output_dir: Directory the documents are written to.
        settings:   Serializer settings passed to every write.
        version:    Exporter version recorded in ``metadata.json``.
    """

    def __init__(
        self,
        output_dir: Union[str, Path],
        settings: Optional[SerializerSettings] = None,
        version: str = __version__,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.settings = settings or SerializerSettings()
        self.version = version

    def run(self, snapshot: Snapshot) -> ExportRun:
        """Export ``snapshot`` to ``output_dir``.

        Returns:
            ``ExportRun`` in state ``SUCCEEDED`` or ``FAILED``.

        Raises:
            Exception: Re-raises any unexpected exception after recording
                the run as ``FAILED`` with kind ``UNEXPECTED``.
        """
        run = self._new_run()
        logger.info("Export [%s] starting | output=%s", run.run_slug, run.output_dir)

        try:
            self._execute(run, snapshot)
        except Exception as exc:
            run.state = ExportState.FAILED
            run.error = ExportError(
                kind=ErrorKind.UNEXPECTED,
                message=normalize_error_message(exc),
                cause=repr(exc),
            )
            run.finished_at = utcnow()
            logger.error("Export [%s] FAILED unexpectedly: %s", run.run_slug, exc)
            raise

        return run

    def abort(self, error: ExportError) -> ExportRun:
        """Record a run that failed before a snapshot could be exported.

        Writes ``error.json`` and returns the FAILED run.
        """
        run = self._new_run()
        self._fail(run, error)
        return run

    def map_documents(self, snapshot: Snapshot) -> list[tuple[str, Document]]:
        """Run every mapper, in write order. Pure; touches no files."""
        return [
            (ROSTER_FILE, map_roster(snapshot)),
            (ARTIFACTS_FILE, map_artifacts(snapshot)),
            (ACCOUNT_FILE, map_account(snapshot)),
            (METADATA_FILE, generate_metadata(self.output_dir, version=self.version)),
        ]

    # ── Internals ──────────────────────────────────────────────────────────────

    def _new_run(self) -> ExportRun:
        return ExportRun(
            run_slug=str(uuid4()),
            output_dir=str(self.output_dir.resolve()),
            started_at=utcnow(),
        )

    def _execute(self, run: ExportRun, snapshot: Snapshot) -> None:
        run.state = ExportState.VALIDATING
        validation = validate_snapshot(snapshot)
        if not validation.passed:
            self._fail(
                run,
                ExportError(
                    kind=ErrorKind.VALIDATION,
                    message=validation.message,
                    missing_sections=validation.missing_sections,
                ),
            )
            return

        run.state = ExportState.MAPPING
        documents = self.map_documents(snapshot)

        run.state = ExportState.WRITING
        for filename, document in documents:
            logger.info("Exporting %s", filename)
            result = write_document(self.output_dir / filename, document, self.settings)
            if not result.ok:
                self._fail(run, result.error)
                return
            run.files_written.append(result.path)

        stale_error = self.output_dir / ERROR_FILE
        try:
            stale_error.unlink(missing_ok=True)
        except OSError as exc:
            self._fail(
                run,
                ExportError(
                    kind=ErrorKind.IO,
                    message=f"Could not remove stale {ERROR_FILE}: {exc.strerror or exc}",
                    path=str(stale_error),
                    cause=str(exc),
                ),
            )
            return

        run.heroes_exported = len(snapshot.heroes)
        run.artifacts_exported = len(snapshot.artifacts)
        run.state = ExportState.SUCCEEDED
        run.finished_at = utcnow()
        logger.info(
            "Export [%s] complete | champions=%d | artifacts=%d",
            run.run_slug, run.heroes_exported, run.artifacts_exported,
        )

    def _fail(self, run: ExportRun, error: ExportError) -> None:
        run.state = ExportState.FAILED
        run.error = error
        run.finished_at = utcnow()
        logger.error("ERROR: %s", error.one_line())
        report_error(self.output_dir, error.message, self.settings)


def run_scan(
    extractor: SnapshotExtractor,
    output_dir: Union[str, Path],
    settings: Optional[SerializerSettings] = None,
    version: str = __version__,
) -> ExportRun:
    """Create the output directory, extract a snapshot, and export it.

    Failure mapping:
      - output directory cannot be created   → IO
      - extractor returns ``None``, raises ``ExtractionUnavailableError``, or
        raises anything whose message says the game is not running
                                              → EXTRACTION_UNAVAILABLE
      - dump present but unreadable           → IO
      - dump present but malformed            → VALIDATION
      - anything else from the extractor propagates (unexpected).

    Args:
        extractor:  Source of the snapshot.
        output_dir: Export directory (created if absent).
        settings:   Serializer settings.
        version:    Exporter version for ``metadata.json``.

    Returns:
        Terminal ``ExportRun``.
    """
    output_dir = Path(output_dir)
    coordinator = ExportCoordinator(output_dir, settings=settings, version=version)

    if not output_dir.exists():
        try:
            output_dir.mkdir(parents=True)
        except OSError as exc:
            return coordinator.abort(
                ExportError(
                    kind=ErrorKind.IO,
                    message=f"Could not create output directory {output_dir}: {exc.strerror or exc}",
                    path=str(output_dir),
                    cause=str(exc),
                )
            )
        logger.info("Created output directory: %s", output_dir)

    logger.info("Extracting account snapshot...")
    try:
        snapshot = extractor.get_dump()
    except ExtractionUnavailableError as exc:
        logger.debug("Extractor reported: %s", exc.detail)
        snapshot = None
    except DumpReadError as exc:
        return coordinator.abort(
            ExportError(
                kind=ErrorKind.IO,
                message=str(exc),
                path=exc.source,
                cause=str(exc.__cause__) if exc.__cause__ else None,
            )
        )
    except SnapshotFormatError as exc:
        return coordinator.abort(
            ExportError(
                kind=ErrorKind.VALIDATION,
                message=normalize_error_message(exc),
                path=exc.source,
                cause=str(exc.__cause__) if exc.__cause__ else None,
            )
        )
    except Exception as exc:
        if not is_client_not_running(str(exc)):
            raise
        logger.debug("Extractor reported: %s", exc)
        snapshot = None

    if snapshot is None:
        return coordinator.abort(
            ExportError(kind=ErrorKind.EXTRACTION_UNAVAILABLE, message=CLIENT_NOT_DETECTED)
        )

    logger.info("Extraction completed successfully.")
    return coordinator.run(snapshot)
