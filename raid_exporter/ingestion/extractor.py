"""
Snapshot extractors — the boundary to the process inspector.

Reading RAID's process memory is not done here. The inspector runs on its own
and writes one JSON account dump; this module turns that dump into a
``Snapshot``. Every extractor exposes one synchronous call::

    snapshot = extractor.get_dump()   # Snapshot, or None if the client isn't running

Two implementations:

  DumpFileExtractor  — reads the inspector's dump file (the normal path).
  FixtureExtractor   — returns a small synthetic account for smoke-testing
                       downstream consumers without the game.

``None`` and ``ExtractionUnavailableError`` both mean "client not running";
the scan runner turns either into an ``EXTRACTION_UNAVAILABLE`` failure.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, ClassVar, Optional, Protocol, Union

from pydantic import ValidationError

from raid_exporter.models.snapshot import Snapshot

logger = logging.getLogger(__name__)

CLIENT_NOT_DETECTED = "RAID client not detected"

# Substrings inspector errors use when the game is not running.
_NOT_RUNNING_MARKERS = ("Raid needs to be running", "RAID client not detected")


# ── Exceptions ────────────────────────────────────────────────────────────────


class ExtractionUnavailableError(RuntimeError):
    """Raised by an extractor when the game client is not running."""

    def __init__(self, detail: str = CLIENT_NOT_DETECTED) -> None:
        self.detail = detail
        super().__init__(CLIENT_NOT_DETECTED)


class DumpReadError(RuntimeError):
    """Raised when a dump file exists but cannot be opened or read.

    Attributes:
        source: Dump file path.
        reason: OS error text (``strerror``) for the failed read.
    """

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Could not read snapshot dump {source}: {reason}")


class SnapshotFormatError(ValueError):
    """Raised when a dump exists but cannot be parsed into a ``Snapshot``.

    Attributes:
        source: Where the dump came from (file path).
        error_count: Number of field-level problems, 0 for invalid JSON.
    """

    def __init__(self, source: str, reason: str, error_count: int = 0) -> None:
        self.source = source
        self.error_count = error_count
        super().__init__(f"Snapshot dump {source} is malformed: {reason}")


# ── Message normalization ─────────────────────────────────────────────────────


def is_client_not_running(message: str) -> bool:
    return any(marker in message for marker in _NOT_RUNNING_MARKERS)


def normalize_error_message(error: Union[BaseException, str]) -> str:
    """Return a one-line, user-facing error message.

    Inspector errors meaning "the game is not running" collapse to
    ``"RAID client not detected"`` so their internal detail is never shown.
    Everything else is flattened onto a single line.
    """
    message = str(error)
    if is_client_not_running(message):
        return CLIENT_NOT_DETECTED
    first_line = " ".join(message.split())
    if not first_line and isinstance(error, BaseException):
        return type(error).__name__
    return first_line


# ── Extractor protocol ────────────────────────────────────────────────────────


class SnapshotExtractor(Protocol):
    """Anything that can produce one account snapshot."""

    def get_dump(self) -> Optional[Snapshot]:
        ...


def parse_snapshot(payload: Any, source: str = "<memory>") -> Snapshot:
    """Validate a decoded JSON payload as a ``Snapshot``.

    Raises:
        SnapshotFormatError: If the payload is not an object or fails validation.
    """
    if not isinstance(payload, dict):
        raise SnapshotFormatError(
            source, f"expected a JSON object, got {type(payload).__name__}"
        )
    try:
        return Snapshot.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise SnapshotFormatError(
            source,
            f"{exc.error_count()} invalid field(s), first at '{location}': {first['msg']}",
            error_count=exc.error_count(),
        ) from exc


class DumpFileExtractor:
    """Reads the account dump written by the process inspector.

    A missing dump file means the inspector found no running client, so
    ``get_dump()`` returns ``None`` rather than raising.

    Attributes:
        dump_path: Location of the inspector's JSON output.
    """

    def __init__(self, dump_path: Union[str, Path]) -> None:
        self.dump_path = Path(dump_path)

    def get_dump(self) -> Optional[Snapshot]:
        """Load and parse the dump file.

        Returns:
            The parsed ``Snapshot``, or ``None`` if no dump file exists.

        Raises:
            SnapshotFormatError: If the file is not UTF-8, not valid JSON, or
                does not match the snapshot shape.
            DumpReadError: If the file exists but cannot be opened or read.
            ExtractionUnavailableError: If the inspector recorded that the
                client was not running.
        """
        if not self.dump_path.exists():
            logger.info("No dump found at %s", self.dump_path)
            return None

        try:
            with open(self.dump_path, encoding="utf-8-sig") as f:
                payload = json.load(f)
        except UnicodeDecodeError as exc:
            raise SnapshotFormatError(
                str(self.dump_path), f"not valid UTF-8 at byte {exc.start}"
            ) from exc
        except json.JSONDecodeError as exc:
            raise SnapshotFormatError(str(self.dump_path), f"invalid JSON ({exc})") from exc
        except OSError as exc:
            raise DumpReadError(str(self.dump_path), exc.strerror or str(exc)) from exc

        # The inspector writes {"error": "..."} instead of a dump when it
        # could not attach to the game.
        if isinstance(payload, dict) and set(payload) == {"error"}:
            detail = str(payload["error"])
            if is_client_not_running(detail):
                raise ExtractionUnavailableError(detail)
            raise SnapshotFormatError(str(self.dump_path), f"inspector reported: {detail}")

        snapshot = parse_snapshot(payload, source=str(self.dump_path))
        logger.debug(
            "Dump loaded: %s | heroes=%s | artifacts=%s",
            self.dump_path.name,
            "missing" if snapshot.heroes is None else len(snapshot.heroes),
            "missing" if snapshot.artifacts is None else len(snapshot.artifacts),
        )
        return snapshot


class FixtureExtractor:
    """Returns a small, structurally complete sample account.

    Useful for checking that downstream viewers accept the export format
    without running the game.
    """

    FIXTURE_DUMP: ClassVar[dict[str, Any]] = {
        "heroes": [
            {
                "id": 101,
                "typeId": 5400,
                "name": "Kael",
                "rarity": "Rare",
                "role": "Attack",
                "fraction": "DarkElves",
                "element": "Magic",
                "grade": "Stars6",
                "level": 60,
                "experience": 0,
                "fullExperience": 0,
                "awakenLevel": 0,
                "locked": True,
                "inStorage": False,
                "marker": "None",
                "health": 16515.0,
                "attack": 1860.0,
                "defense": 1167.0,
                "speed": 171.0,
                "accuracy": 80.0,
                "resistance": 30.0,
                "criticalChance": 0.55,
                "criticalDamage": 1.2,
                "criticalHeal": 0.0,
                "skills": [
                    {"id": 54001, "typeId": 54001, "level": 4},
                    {"id": 54002, "typeId": 54002, "level": 4},
                    {"id": 54003, "typeId": 54003, "level": 4},
                ],
                "masteries": [500111, 500112, 500121],
                "artifacts": [9001],
            },
            {
                "id": 102,
                "typeId": 5510,
                "name": "Athel",
                "rarity": "Rare",
                "role": "Attack",
                "fraction": "HighElves",
                "element": "Magic",
                "grade": "Stars3",
                "level": 1,
                "locked": False,
                "inStorage": True,
                "marker": "None",
                "health": 11895.0,
                "attack": 1046.0,
                "defense": 837.0,
                "speed": 103.0,
                "criticalChance": 0.15,
                "criticalDamage": 0.5,
            },
        ],
        "artifacts": [
            {
                "id": 9001,
                "setKind": "Speed",
                "kind": "Weapon",
                "rank": "Star6",
                "rarity": "Legendary",
                "level": 16,
                "failedUpgrades": 1,
                "isActivated": True,
                "isSeen": True,
                "sellPrice": 33000,
                "price": 0,
                "primaryBonus": {"kind": "Attack", "isAbsolute": True, "value": 265.0},
                "secondaryBonuses": [
                    {"kind": "Speed", "isAbsolute": True, "value": 18.0,
                     "enhancement": 2.0, "level": 3},
                    {"kind": "CriticalChance", "isAbsolute": False, "value": 0.1,
                     "enhancement": 0.0, "level": 1},
                ],
            },
            {
                "id": 9002,
                "setKind": "None",
                "kind": "Ring",
                "rank": "Star5",
                "rarity": "Epic",
                "level": 0,
                "requiredFraction": "DarkElves",
                "sellPrice": 12000,
            },
        ],
        "arenaLeague": "Gold3",
        "shards": {
            "Mystery": {"count": 12},
            "Ancient": {
                "count": 3,
                "summonData": [{"rarity": "Legendary", "lastHeroId": 101, "pullCount": 42}],
            },
        },
        "greatHall": {
            "Magic": {"Health": 3, "Attack": 2},
            "Force": {"CriticalDamage": 1},
        },
        "stagePresets": {"1": [101, 102]},
    }

    def get_dump(self) -> Optional[Snapshot]:
        logger.info("Using fixture snapshot (no game client involved).")
        return parse_snapshot(self.FIXTURE_DUMP, source="fixture")


def build_extractor(source: str, dump_path: Union[str, Path]) -> SnapshotExtractor:
    """Return the extractor configured by ``[extractor] source``."""
    if source == "fixture":
        return FixtureExtractor()
    if source == "dump":
        return DumpFileExtractor(dump_path)
    raise ValueError(f"Unknown extractor source '{source}'.")
