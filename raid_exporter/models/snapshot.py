"""
Account snapshot models — the exporter's input.

A ``Snapshot`` is one complete account dump produced by the external process
inspector. It is parsed once, treated as read-only, and discarded after the
export run.

Key conventions:
  - Incoming keys are camelCase (``fullExperience``, ``setKind``); snake_case
    field names are accepted too.
  - ``heroes`` / ``artifacts`` distinguish ``None`` (the section failed to
    extract) from ``[]`` (an empty but valid section). The validator relies on
    that distinction, so neither defaults to an empty list.
  - Nested optional collections (skills, masteries, bonuses) are ``None`` when
    absent; the mappers normalize them to ``[]``.
  - An explicit ``null`` on a scalar with a default (``level``, ``locked``,
    ``health``, ``sellPrice``) is read as absent and takes the default.

All models are frozen.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class _SnapshotModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def nulls_to_defaults(cls, data: Any) -> Any:
        """Drop explicit nulls on fields whose default is not ``None``.

        ``"level": null`` then parses the same as an absent ``level``.
        Required fields and ``Optional`` fields keep their nulls.
        """
        if not isinstance(data, dict):
            return data
        defaulted: set[str] = set()
        for name, field in cls.model_fields.items():
            if field.is_required() or field.default is None:
                continue
            defaulted.add(name)
            if field.alias:
                defaulted.add(field.alias)
        return {k: v for k, v in data.items() if v is not None or k not in defaulted}


class Skill(_SnapshotModel):
    """One hero skill slot."""

    id: int
    type_id: int = 0
    level: int = 0


class Hero(_SnapshotModel):
    """A champion as captured from the running client.

    Stats are the hero's total (base + gear + bonuses) values at capture time.
    """

    id: int
    type_id: Optional[int] = None
    name: Optional[str] = None
    rarity: Optional[str] = None
    role: Optional[str] = None
    fraction: Optional[str] = None
    element: Optional[str] = None
    grade: Optional[str] = None

    level: int = 0
    experience: int = 0
    full_experience: int = 0
    awaken_level: int = 0

    locked: bool = False
    in_storage: bool = False
    marker: Optional[str] = None

    health: float = 0.0
    attack: float = 0.0
    defense: float = 0.0
    speed: float = 0.0
    accuracy: float = 0.0
    resistance: float = 0.0
    critical_chance: float = 0.0
    critical_damage: float = 0.0
    critical_heal: float = 0.0

    skills: Optional[list[Skill]] = None
    masteries: Optional[list[int]] = None
    artifacts: Optional[list[int]] = None


class PrimaryBonus(_SnapshotModel):
    """Main stat of an artifact."""

    kind: Optional[str] = None
    is_absolute: bool = False
    value: float = 0.0


class SecondaryBonus(PrimaryBonus):
    """Substat of an artifact, including glyph enhancement and roll level."""

    enhancement: float = 0.0
    level: int = 0


class Artifact(_SnapshotModel):
    """A gear piece (artifact or accessory) owned by the account."""

    id: int
    set_kind: Optional[str] = None
    kind: Optional[str] = None
    rank: Optional[str] = None
    rarity: Optional[str] = None

    level: int = 0
    failed_upgrades: int = 0

    is_activated: bool = False
    is_seen: bool = False

    required_fraction: Optional[str] = None
    sell_price: int = 0
    price: int = 0

    primary_bonus: Optional[PrimaryBonus] = None
    secondary_bonuses: Optional[list[SecondaryBonus]] = None


class ShardSummonData(_SnapshotModel):
    """Mercy-counter state for one shard rarity."""

    rarity: Optional[str] = None
    last_hero_id: Optional[int] = None
    pull_count: int = 0


class ShardInfo(_SnapshotModel):
    """Inventory count and summon history for one shard type."""

    count: int = 0
    summon_data: Optional[list[ShardSummonData]] = None


class Snapshot(_SnapshotModel):
    """Complete captured account state for one export run.

    Attributes:
        heroes: Champions in extraction order, or ``None`` if the roster
            could not be extracted.
        artifacts: Gear in extraction order, or ``None`` if the inventory
            could not be extracted.
        arena_league: Classic arena league name, if known.
        shards: Shard type → ``ShardInfo``.
        great_hall: Element → (stat kind → bonus level).
        stage_presets: Preset id → ordered hero ids.
    """

    heroes: Optional[list[Hero]] = None
    artifacts: Optional[list[Artifact]] = None
    arena_league: Optional[str] = None
    shards: Optional[dict[str, ShardInfo]] = None
    great_hall: Optional[dict[str, dict[str, int]]] = None
    stage_presets: Optional[dict[int, list[int]]] = None
