"""
Shared pytest fixtures for the RAID exporter test suite.

Provides:
  - Raw dump dicts in the camelCase form the process inspector writes.
  - Parsed ``Snapshot`` / ``Hero`` / ``Artifact`` fixtures built from them.
  - ``read_json``: load a written document back for assertions.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from raid_exporter.models.snapshot import Artifact, Hero, Snapshot


# ── Raw dump payloads ─────────────────────────────────────────────────────────

def make_hero_dict(**overrides: Any) -> dict[str, Any]:
    hero: dict[str, Any] = {
        "id": 1001,
        "typeId": 4410,
        "name": "Kael",
        "rarity": "Rare",
        "role": "Attack",
        "fraction": "DarkElves",
        "element": "Magic",
        "grade": "Stars6",
        "level": 60,
        "experience": 120,
        "fullExperience": 98000,
        "awakenLevel": 2,
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
            {"id": 1, "typeId": 44101, "level": 4},
            {"id": 2, "typeId": 44102, "level": 3},
            {"id": 3, "typeId": 44103, "level": 1},
        ],
        "masteries": [500111, 500112],
        "artifacts": [7001, 7002, 7003, 7004],
    }
    hero.update(overrides)
    return hero


def make_artifact_dict(**overrides: Any) -> dict[str, Any]:
    artifact: dict[str, Any] = {
        "id": 7001,
        "setKind": "Speed",
        "kind": "Weapon",
        "rank": "Star6",
        "rarity": "Legendary",
        "level": 16,
        "failedUpgrades": 2,
        "isActivated": True,
        "isSeen": True,
        "requiredFraction": None,
        "sellPrice": 33000,
        "price": 0,
        "primaryBonus": {"kind": "Attack", "isAbsolute": True, "value": 265.0},
        "secondaryBonuses": [
            {"kind": "Speed", "isAbsolute": True, "value": 18.0, "enhancement": 2.0, "level": 3},
            {"kind": "CriticalChance", "isAbsolute": False, "value": 0.1,
             "enhancement": 0.0, "level": 1},
        ],
    }
    artifact.update(overrides)
    return artifact


def make_dump_dict(**overrides: Any) -> dict[str, Any]:
    dump: dict[str, Any] = {
        "heroes": [make_hero_dict()],
        "artifacts": [make_artifact_dict()],
        "arenaLeague": "Gold3",
        "shards": {
            "Mystery": {"count": 12},
            "Ancient": {
                "count": 3,
                "summonData": [{"rarity": "Legendary", "lastHeroId": 1001, "pullCount": 42}],
            },
        },
        "greatHall": {
            "Magic": {"Health": 3, "CriticalDamage": 1},
            "Force": {"Attack": 2},
        },
        "stagePresets": {"1": [1001, 1002], "12": [1001]},
    }
    dump.update(overrides)
    return dump


@pytest.fixture
def hero_factory() -> Callable[..., dict[str, Any]]:
    """Factory for raw hero dicts; keyword args override fields."""
    return make_hero_dict


@pytest.fixture
def artifact_factory() -> Callable[..., dict[str, Any]]:
    """Factory for raw artifact dicts; keyword args override fields."""
    return make_artifact_dict


@pytest.fixture
def dump_factory() -> Callable[..., dict[str, Any]]:
    """Factory for raw dump dicts; keyword args override sections."""
    return make_dump_dict


# ── Parsed model fixtures ─────────────────────────────────────────────────────

@pytest.fixture
def sample_hero() -> Hero:
    """A fully populated ``Hero`` (3 skills, 2 masteries, 4 artifact ids)."""
    return Hero.model_validate(make_hero_dict())


@pytest.fixture
def sample_artifact() -> Artifact:
    """A fully populated ``Artifact`` with a primary and two secondary bonuses."""
    return Artifact.model_validate(make_artifact_dict())


@pytest.fixture
def sample_dump() -> dict[str, Any]:
    """Raw camelCase dump dict, as the inspector writes it."""
    return make_dump_dict()


@pytest.fixture
def sample_snapshot(sample_dump: dict[str, Any]) -> Snapshot:
    """A valid ``Snapshot`` with every section present."""
    return Snapshot.model_validate(sample_dump)


@pytest.fixture
def empty_snapshot() -> Snapshot:
    """``{heroes: [], artifacts: []}`` — valid, nothing to export."""
    return Snapshot(heroes=[], artifacts=[])


@pytest.fixture
def read_json() -> Callable[[Path], Any]:
    """Return a loader for documents written by the exporter."""

    def _read(path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    return _read
