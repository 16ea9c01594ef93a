"""
Document writer — deterministic serialization and atomic persistence.

Serialization
-------------
``serialize_document()`` dumps a record model by alias, in declared field
order, then re-keys every object key AND every mapping key (shard types,
elements, stat kinds) to lower camel case::

    "CriticalChance"  → "criticalChance"
    "HP"              → "hp"
    "critical_chance" → "criticalChance"
    "championId"      → "championId"   (already camel case; unchanged)

Output is UTF-8 (no BOM), indented per ``SerializerSettings``, with non-ASCII
text kept as-is.

Writing
-------
``write_document()`` writes the full text to a temporary file next to the
target, fsyncs it, and ``os.replace``-s it over the target. Either the new
document is complete or the previous file is left untouched.

Failures are returned in ``WriteResult.error``; ``write_document()`` does not
raise for I/O or serialization problems.
"""

from __future__ import annotations

import json
import logging
import os
import re
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

from raid_exporter.config import SerializerSettings
from raid_exporter.models.run import ErrorKind, ExportError

logger = logging.getLogger(__name__)

_NEW_FILE_MODE = 0o644
_SEPARATED_KEY = re.compile(r"^[A-Za-z][A-Za-z0-9]*(?:[_\- ]+[A-Za-z0-9]+)+$")
_SEPARATORS = re.compile(r"[_\- ]+")

Document = Union[BaseModel, Mapping[str, Any]]


class SerializationError(ValueError):
    """Raised when a document cannot be turned into JSON text."""


@dataclass(frozen=True)
class WriteResult:
    """Outcome of one ``write_document()`` call.

    Attributes:
        path:          Target file path.
        bytes_written: Size of the written document (0 on failure).
        error:         ``ExportError`` of kind IO or SERIALIZATION, or ``None``.
    """

    path: str
    bytes_written: int = 0
    error: Optional[ExportError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ── Key casing ────────────────────────────────────────────────────────────────


def to_lower_camel(key: str) -> str:
    """Convert a key to lower camel case.

    PascalCase and leading acronyms are lowered the way .NET camel-case
    naming does it (``"URLValue"`` → ``"urlValue"``). Keys made of
    ``_``/``-``/space separated words are joined first. Keys that do not
    start with a letter (``"1"``, ``"-1"``) are returned unchanged.
    """
    if not key:
        return key
    if _SEPARATED_KEY.match(key):
        head, *rest = _SEPARATORS.split(key)
        key = head + "".join(word[:1].upper() + word[1:] for word in rest)
    if not key[0].isupper():
        return key

    chars = list(key)
    for i, ch in enumerate(chars):
        if i == 1 and not ch.isupper():
            break
        has_next = i + 1 < len(chars)
        if i > 0 and has_next and not chars[i + 1].isupper():
            break
        chars[i] = ch.lower()
    return "".join(chars)


def _camelize_keys(value: Any, where: str = "$") -> Any:
    if isinstance(value, dict):
        result: dict[str, Any] = {}
        for key, item in value.items():
            new_key = to_lower_camel(str(key))
            if new_key in result:
                raise SerializationError(
                    f"Keys collide at {where}: '{key}' and another key both "
                    f"become '{new_key}'."
                )
            result[new_key] = _camelize_keys(item, f"{where}.{new_key}")
        return result
    if isinstance(value, list):
        return [_camelize_keys(item, f"{where}[{i}]") for i, item in enumerate(value)]
    return value


# ── Serialization ─────────────────────────────────────────────────────────────


def serialize_document(
    document: Document,
    settings: Optional[SerializerSettings] = None,
) -> str:
    """Render ``document`` as JSON text.

    Args:
        document: A record model (dumped by alias) or a plain mapping.
        settings: Indentation; defaults to ``SerializerSettings()``.

    Returns:
        The JSON text, without a trailing newline.

    Raises:
        SerializationError: On key collisions after camel-casing, non-finite
            floats, or values ``json`` cannot encode.
    """
    settings = settings or SerializerSettings()

    if isinstance(document, BaseModel):
        payload: Any = document.model_dump(mode="json", by_alias=True)
    else:
        payload = document

    payload = _camelize_keys(payload)

    if settings.indent > 0:
        dump_kwargs: dict[str, Any] = {"indent": settings.indent}
    else:
        dump_kwargs = {"separators": (",", ":")}

    try:
        return json.dumps(payload, ensure_ascii=False, allow_nan=False, **dump_kwargs)
    except (TypeError, ValueError) as exc:
        raise SerializationError(str(exc)) from exc


# ── Writing ───────────────────────────────────────────────────────────────────


def _atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write ``data`` to a temp file in ``path``'s directory, then replace ``path``."""
    try:
        mode = stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        mode = _NEW_FILE_MODE

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            try:
                os.remove(tmp_name)
            except OSError:
                logger.debug("Could not remove temp file %s", tmp_name, exc_info=True)


def write_document(
    path: Union[str, Path],
    document: Document,
    settings: Optional[SerializerSettings] = None,
) -> WriteResult:
    """Serialize ``document`` and atomically write it to ``path``.

    The parent directory must already exist; the writer does not create it.

    Args:
        path:     Destination file. Overwritten if it exists.
        document: Record model or mapping to write.
        settings: Serializer settings for this call.

    Returns:
        ``WriteResult``; check ``result.ok``.
    """
    path = Path(path)

    try:
        text = serialize_document(document, settings)
    except SerializationError as exc:
        return WriteResult(
            path=str(path),
            error=ExportError(
                kind=ErrorKind.SERIALIZATION,
                message=f"Could not serialize {path.name}: {exc}",
                path=str(path),
                cause=str(exc),
            ),
        )

    data = text.encode("utf-8")
    try:
        _atomic_write_bytes(path, data)
    except OSError as exc:
        cause = exc.strerror or str(exc)
        return WriteResult(
            path=str(path),
            error=ExportError(
                kind=ErrorKind.IO,
                message=f"Could not write {path}: {cause}",
                path=str(path),
                cause=str(exc),
            ),
        )

    logger.debug("Document written: %s | bytes=%d", path.name, len(data))
    return WriteResult(path=str(path), bytes_written=len(data))
