"""Tests for snapshot input models and output record schemas."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from raid_exporter.models.records import ArtifactRecord, ChampionRecord, RosterDocument
from raid_exporter.models.run import ErrorKind, ExportError, ExportRun, ExportState
from raid_exporter.models.snapshot import Artifact, Hero, Snapshot


class TestSnapshotParsing:
    def test_camel_case_dump_parses(self, sample_snapshot):
        assert len(sample_snapshot.heroes) == 1
        assert len(sample_snapshot.artifacts) == 1
        assert sample_snapshot.arena_league == "Gold3"
        assert sample_snapshot.shards["Ancient"].summon_data[0].pull_count == 42
        assert sample_snapshot.great_hall["Magic"]["Health"] == 3

    def test_stage_preset_keys_coerced_to_int(self, sample_snapshot):
        assert sample_snapshot.stage_presets == {1: [1001, 1002], 12: [1001]}

    def test_missing_sections_are_none_not_empty(self):
        snapshot = Snapshot.model_validate({})
        assert snapshot.heroes is None
        assert snapshot.artifacts is None
        assert snapshot.shards is None

    def test_empty_sections_stay_empty(self):
        snapshot = Snapshot.model_validate({"heroes": [], "artifacts": []})
        assert snapshot.heroes == []
        assert snapshot.artifacts == []

    def test_snake_case_names_accepted(self):
        hero = Hero(id=1, full_experience=10, in_storage=True)
        assert hero.full_experience == 10
        assert hero.in_storage is True

    def test_snapshot_is_frozen(self, sample_snapshot):
        with pytest.raises(ValidationError):
            sample_snapshot.arena_league = "Bronze1"

    def test_hero_requires_id(self, hero_factory):
        raw = hero_factory()
        del raw["id"]
        with pytest.raises(ValidationError, match="id"):
            Hero.model_validate(raw)

    def test_hero_wrong_type_raises(self, hero_factory):
        with pytest.raises(ValidationError):
            Hero.model_validate(hero_factory(level="sixty"))

    def test_hero_null_scalars_take_defaults(self, hero_factory):
        hero = Hero.model_validate(
            hero_factory(level=None, locked=None, health=None, awakenLevel=None)
        )
        assert hero.level == 0
        assert hero.locked is False
        assert hero.health == 0.0
        assert hero.awaken_level == 0
        assert hero.name == "Kael"

    def test_hero_null_id_still_rejected(self, hero_factory):
        with pytest.raises(ValidationError, match="id"):
            Hero.model_validate(hero_factory(id=None))

    def test_artifact_null_scalars_take_defaults(self, artifact_factory):
        artifact = Artifact.model_validate(
            artifact_factory(sellPrice=None, failedUpgrades=None, isSeen=None)
        )
        assert artifact.sell_price == 0
        assert artifact.failed_upgrades == 0
        assert artifact.is_seen is False
        assert artifact.secondary_bonuses[1].kind == "CriticalChance"

    def test_null_optional_fields_stay_null(self, hero_factory):
        hero = Hero.model_validate(hero_factory(name=None, skills=None))
        assert hero.name is None
        assert hero.skills is None

    def test_null_sections_stay_missing(self):
        snapshot = Snapshot.model_validate({"heroes": None, "artifacts": []})
        assert snapshot.heroes is None

    def test_hero_optional_collections_default_none(self):
        hero = Hero.model_validate({"id": 5})
        assert hero.skills is None
        assert hero.masteries is None
        assert hero.artifacts is None

    def test_artifact_set_kind_alias(self, sample_artifact):
        assert sample_artifact.set_kind == "Speed"
        assert sample_artifact.secondary_bonuses[0].enhancement == 2.0

    def test_artifact_without_primary_bonus(self, artifact_factory):
        raw = artifact_factory()
        del raw["primaryBonus"]
        assert Artifact.model_validate(raw).primary_bonus is None

    def test_unknown_fields_ignored(self, hero_factory):
        hero = Hero.model_validate(hero_factory(someNewField=True))
        assert hero.id == 1001


class TestRecordSchemas:
    def test_champion_record_aliases(self):
        record = ChampionRecord(champion_id=1)
        dumped = record.model_dump(by_alias=True)
        assert list(dumped)[0] == "championId"
        assert "fullExperience" in dumped
        assert dumped["skills"] == []
        assert dumped["masteries"] == []
        assert dumped["artifacts"] == []

    def test_champion_record_key_order(self):
        keys = list(ChampionRecord(champion_id=1).model_dump(by_alias=True))
        assert keys == [
            "championId", "name", "rarity", "role", "fraction", "element", "grade",
            "level", "experience", "fullExperience", "awakenLevel", "locked",
            "inStorage", "marker", "stats", "skills", "masteries", "artifacts",
        ]

    def test_artifact_record_set_alias_and_null_primary(self):
        dumped = ArtifactRecord(artifact_id=9, set_kind="Life").model_dump(by_alias=True)
        assert dumped["artifactId"] == 9
        assert dumped["set"] == "Life"
        assert "primaryBonus" in dumped
        assert dumped["primaryBonus"] is None
        assert dumped["secondaryBonuses"] == []

    def test_roster_document_default_is_empty(self):
        assert RosterDocument().model_dump(by_alias=True) == {"champions": []}


class TestExportRun:
    def test_new_run_defaults(self):
        from datetime import datetime, timezone

        run = ExportRun(
            run_slug="r-1",
            output_dir="/tmp/export",
            started_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        assert run.state == ExportState.INIT
        assert run.succeeded is False
        assert run.is_terminal is False
        assert run.files_written == []

    def test_export_error_one_line_appends_path(self):
        error = ExportError(kind=ErrorKind.IO, message="Could not write\nfile", path="/x/roster.json")
        assert error.one_line() == "Could not write file (/x/roster.json)"

    def test_export_error_one_line_no_duplicate_path(self):
        error = ExportError(kind=ErrorKind.IO, message="Could not write /x/a.json", path="/x/a.json")
        assert error.one_line() == "Could not write /x/a.json"
