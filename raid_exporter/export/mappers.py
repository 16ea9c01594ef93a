"""
Entity mappers — Snapshot → output documents.

Every mapper is a pure function: no I/O, no logging, no mutation of the
snapshot. Missing optional data degrades to empty/default values instead of
raising. Required-section presence is the validator's job; if a mapper is
handed a snapshot with ``heroes`` or ``artifacts`` set to ``None`` it simply
produces an empty document.

Renames performed here (part of the export format):
  Hero.id          → championId
  Artifact.id      → artifactId
  Artifact.setKind → set
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from raid_exporter import __version__
from raid_exporter.models.records import (
    AccountDocument,
    ArtifactRecord,
    ArtifactsDocument,
    BonusRecord,
    ChampionRecord,
    ChampionStats,
    MetadataDocument,
    RosterDocument,
    SecondaryBonusRecord,
    ShardRecord,
    ShardSummonRecord,
    SkillRecord,
)
from raid_exporter.models.snapshot import Artifact, Hero, PrimaryBonus, ShardInfo, Snapshot
from raid_exporter.utils.time_utils import isoformat_utc


# ── Roster ────────────────────────────────────────────────────────────────────


def map_champion(hero: Hero) -> ChampionRecord:
    return ChampionRecord(
        champion_id=hero.id,
        name=hero.name,
        rarity=hero.rarity,
        role=hero.role,
        fraction=hero.fraction,
        element=hero.element,
        grade=hero.grade,
        level=hero.level,
        experience=hero.experience,
        full_experience=hero.full_experience,
        awaken_level=hero.awaken_level,
        locked=hero.locked,
        in_storage=hero.in_storage,
        marker=hero.marker,
        stats=ChampionStats(
            health=hero.health,
            attack=hero.attack,
            defense=hero.defense,
            speed=hero.speed,
            accuracy=hero.accuracy,
            resistance=hero.resistance,
            critical_chance=hero.critical_chance,
            critical_damage=hero.critical_damage,
            critical_heal=hero.critical_heal,
        ),
        skills=[
            SkillRecord(id=skill.id, type_id=skill.type_id, level=skill.level)
            for skill in hero.skills or []
        ],
        masteries=list(hero.masteries or []),
        artifacts=list(hero.artifacts or []),
    )


def map_roster(snapshot: Snapshot) -> RosterDocument:
    """Build ``roster.json``: one ``ChampionRecord`` per hero, in extraction order."""
    return RosterDocument(champions=[map_champion(h) for h in snapshot.heroes or []])


# ── Artifacts ─────────────────────────────────────────────────────────────────


def _map_primary_bonus(bonus: Optional[PrimaryBonus]) -> Optional[BonusRecord]:
    if bonus is None:
        return None
    return BonusRecord(kind=bonus.kind, is_absolute=bonus.is_absolute, value=bonus.value)


def map_artifact(artifact: Artifact) -> ArtifactRecord:
    return ArtifactRecord(
        artifact_id=artifact.id,
        set_kind=artifact.set_kind,
        kind=artifact.kind,
        rank=artifact.rank,
        rarity=artifact.rarity,
        level=artifact.level,
        is_activated=artifact.is_activated,
        is_seen=artifact.is_seen,
        required_fraction=artifact.required_fraction,
        sell_price=artifact.sell_price,
        price=artifact.price,
        failed_upgrades=artifact.failed_upgrades,
        primary_bonus=_map_primary_bonus(artifact.primary_bonus),
        secondary_bonuses=[
            SecondaryBonusRecord(
                kind=bonus.kind,
                is_absolute=bonus.is_absolute,
                value=bonus.value,
                enhancement=bonus.enhancement,
                level=bonus.level,
            )
            for bonus in artifact.secondary_bonuses or []
        ],
    )


def map_artifacts(snapshot: Snapshot) -> ArtifactsDocument:
    """Build ``artifacts.json``: one ``ArtifactRecord`` per artifact, in extraction order."""
    return ArtifactsDocument(artifacts=[map_artifact(a) for a in snapshot.artifacts or []])


# ── Account ───────────────────────────────────────────────────────────────────


def _map_shard(info: ShardInfo) -> ShardRecord:
    return ShardRecord(
        count=info.count,
        summon_data=[
            ShardSummonRecord(
                rarity=entry.rarity,
                last_hero_id=entry.last_hero_id,
                pull_count=entry.pull_count,
            )
            for entry in info.summon_data or []
        ],
    )


def map_account(snapshot: Snapshot) -> AccountDocument:
    """Build ``account.json``.

    Absent sections become empty objects; an absent arena league stays
    ``null``. This mapper never fails the export.
    """
    shards = {key: _map_shard(info) for key, info in (snapshot.shards or {}).items()}
    great_hall = {
        element: dict(bonuses or {})
        for element, bonuses in (snapshot.great_hall or {}).items()
    }
    stage_presets = {
        str(preset_id): list(hero_ids or [])
        for preset_id, hero_ids in (snapshot.stage_presets or {}).items()
    }
    return AccountDocument(
        arena_league=snapshot.arena_league,
        shards=shards,
        great_hall=great_hall,
        stage_presets=stage_presets,
    )


# ── Metadata ──────────────────────────────────────────────────────────────────


def generate_metadata(
    output_dir: Union[str, Path],
    version: str = __version__,
) -> MetadataDocument:
    """Build ``metadata.json``.

    The timestamp is taken when this function is called, so it differs from
    run to run; exclude it from any byte-equality comparison.

    Args:
        output_dir: Export directory; recorded as a resolved absolute path.
        version:    Exporter version string.
    """
    return MetadataDocument(
        extraction_timestamp=isoformat_utc(),
        extractor_version=version,
        export_path=str(Path(output_dir).resolve()),
    )
