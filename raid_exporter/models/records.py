"""
Output document schemas — one declared type per exported JSON file.

Field order here IS the key order in the written file, and each field's
serialized name (its camelCase alias) is the external key downstream tools
depend on. Renaming a field, or changing its alias, is a breaking change to
the export format.

  roster.json     → ``RosterDocument``
  artifacts.json  → ``ArtifactsDocument``
  account.json    → ``AccountDocument``
  metadata.json   → ``MetadataDocument``
  error.json      → ``ErrorDocument``

Optional nested collections default to ``[]`` and optional objects to an
explicit ``None`` so that no key is ever omitted from the output.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# ── roster.json ───────────────────────────────────────────────────────────────


class ChampionStats(_Record):
    health: float = 0.0
    attack: float = 0.0
    defense: float = 0.0
    speed: float = 0.0
    accuracy: float = 0.0
    resistance: float = 0.0
    critical_chance: float = 0.0
    critical_damage: float = 0.0
    critical_heal: float = 0.0


class SkillRecord(_Record):
    id: int
    type_id: int
    level: int


class ChampionRecord(_Record):
    """One champion in ``roster.json``. The hero ``id`` is exported as ``championId``."""

    champion_id: int
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
    stats: ChampionStats = ChampionStats()
    skills: list[SkillRecord] = []
    masteries: list[int] = []
    artifacts: list[int] = []


class RosterDocument(_Record):
    champions: list[ChampionRecord] = []


# ── artifacts.json ────────────────────────────────────────────────────────────


class BonusRecord(_Record):
    kind: Optional[str] = None
    is_absolute: bool = False
    value: float = 0.0


class SecondaryBonusRecord(BonusRecord):
    enhancement: float = 0.0
    level: int = 0


class ArtifactRecord(_Record):
    """One gear piece in ``artifacts.json``.

    ``id`` is exported as ``artifactId`` and ``setKind`` as ``set``.
    ``primaryBonus`` is always present, ``null`` when the artifact has none.
    """

    artifact_id: int
    set_kind: Optional[str] = Field(default=None, alias="set")
    kind: Optional[str] = None
    rank: Optional[str] = None
    rarity: Optional[str] = None
    level: int = 0
    is_activated: bool = False
    is_seen: bool = False
    required_fraction: Optional[str] = None
    sell_price: int = 0
    price: int = 0
    failed_upgrades: int = 0
    primary_bonus: Optional[BonusRecord] = None
    secondary_bonuses: list[SecondaryBonusRecord] = []


class ArtifactsDocument(_Record):
    artifacts: list[ArtifactRecord] = []


# ── account.json ──────────────────────────────────────────────────────────────


class ShardSummonRecord(_Record):
    rarity: Optional[str] = None
    last_hero_id: Optional[int] = None
    pull_count: int = 0


class ShardRecord(_Record):
    count: int = 0
    summon_data: list[ShardSummonRecord] = []


class AccountDocument(_Record):
    """Account-level scalars and mappings.

    Mapping keys (shard types, elements, stat kinds, preset ids) are data,
    not schema; the writer camel-cases them along with every other key.
    """

    arena_league: Optional[str] = None
    shards: dict[str, ShardRecord] = {}
    great_hall: dict[str, dict[str, int]] = {}
    stage_presets: dict[str, list[int]] = {}


# ── metadata.json / error.json ────────────────────────────────────────────────


class MetadataDocument(_Record):
    extraction_timestamp: str
    extractor_version: str
    export_path: str


class ErrorDocument(_Record):
    error: str
    timestamp: str
