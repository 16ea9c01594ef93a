"""
Error reporter — writes ``error.json`` when an export run fails.

``report_error()`` runs inside failure-handling paths, so it must never raise:
a failure to write the diagnostic document must not mask the failure being
reported. This module is the one place where such failures are swallowed;
they are logged at WARNING instead.

Downstream consumers treat the presence of ``error.json`` as "this export is
incomplete".
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from raid_exporter.config import SerializerSettings
from raid_exporter.export.writer import write_document
from raid_exporter.models.records import ErrorDocument
from raid_exporter.utils.time_utils import isoformat_utc

logger = logging.getLogger(__name__)

ERROR_FILE = "error.json"


def report_error(
    output_dir: Union[str, Path],
    reason: str,
    settings: Optional[SerializerSettings] = None,
) -> None:
    """Best-effort write of ``{error, timestamp}`` to ``<output_dir>/error.json``.

    Creates ``output_dir`` if it is missing. Never raises.

    Args:
        output_dir: Export directory.
        reason:     One-line failure description.
        settings:   Serializer settings; defaults to ``SerializerSettings()``.
    """
    try:
        path = Path(output_dir) / ERROR_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        result = write_document(
            path,
            ErrorDocument(error=reason, timestamp=isoformat_utc()),
            settings,
        )
        if result.ok:
            logger.debug("Error document written: %s", path)
        else:
            logger.warning("Could not write %s: %s", ERROR_FILE, result.error.one_line())
    except Exception as exc:
        logger.warning("Could not write %s to %s: %s", ERROR_FILE, output_dir, exc)
