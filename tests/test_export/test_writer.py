"""Tests for export/writer.py — key casing, serialization, atomic writes."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from raid_exporter.config import SerializerSettings
from raid_exporter.export import writer as writer_module
from raid_exporter.export.writer import (
    SerializationError,
    WriteResult,
    serialize_document,
    to_lower_camel,
    write_document,
)
from raid_exporter.models.records import AccountDocument, ArtifactsDocument, RosterDocument
from raid_exporter.models.run import ErrorKind


# ── to_lower_camel ────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "key, expected",
    [
        ("Magic", "magic"),
        ("CriticalChance", "criticalChance"),
        ("HP", "hp"),
        ("URLValue", "urlValue"),
        ("championId", "championId"),
        ("critical_chance", "criticalChance"),
        ("great-hall", "greatHall"),
        ("1", "1"),
        ("-1", "-1"),
        ("", ""),
        ("a", "a"),
        ("A", "a"),
    ],
)
def test_to_lower_camel(key: str, expected: str) -> None:
    assert to_lower_camel(key) == expected


# ── serialize_document ────────────────────────────────────────────────────────


class TestSerializeDocument:
    def test_mapping_keys_camel_cased(self):
        document = AccountDocument(
            great_hall={"Magic": {"CriticalDamage": 1, "Health": 3}},
            stage_presets={"7": [1, 2]},
        )
        loaded = json.loads(serialize_document(document))
        assert loaded["greatHall"] == {"magic": {"criticalDamage": 1, "health": 3}}
        assert loaded["stagePresets"] == {"7": [1, 2]}

    def test_mapping_keys_camel_cased_with_any_settings(self):
        document = AccountDocument(great_hall={"Magic": {"Health": 3}})
        text = serialize_document(document, SerializerSettings(indent=0))
        assert json.loads(text)["greatHall"] == {"magic": {"health": 3}}

    def test_mapping_key_order_preserved(self):
        document = AccountDocument(great_hall={"Void": {}, "Force": {}, "Magic": {}})
        loaded = json.loads(serialize_document(document))
        assert list(loaded["greatHall"]) == ["void", "force", "magic"]

    def test_indentation(self):
        text = serialize_document(RosterDocument(), SerializerSettings(indent=2))
        assert text == '{\n  "champions": []\n}'

    def test_zero_indent_is_compact(self):
        text = serialize_document(RosterDocument(), SerializerSettings(indent=0))
        assert text == '{"champions":[]}'

    def test_non_ascii_preserved(self):
        text = serialize_document({"name": "Kāel Ørn"})
        assert "Kāel" in text
        assert "\\u" not in text

    def test_plain_mapping_supported(self):
        assert json.loads(serialize_document({"SomeKey": 1})) == {"someKey": 1}

    def test_key_collision_raises(self):
        with pytest.raises(SerializationError, match="collide"):
            serialize_document({"Health": 1, "health": 2})

    def test_non_finite_float_raises(self):
        with pytest.raises(SerializationError):
            serialize_document({"value": float("nan")})

    def test_unserializable_value_raises(self):
        with pytest.raises(SerializationError):
            serialize_document({"value": object()})


# ── write_document ────────────────────────────────────────────────────────────


class TestWriteDocument:
    def test_writes_utf8_without_bom(self, tmp_path: Path):
        path = tmp_path / "roster.json"
        result = write_document(path, RosterDocument())

        assert isinstance(result, WriteResult)
        assert result.ok is True
        assert result.path == str(path)
        raw = path.read_bytes()
        assert not raw.startswith(b"\xef\xbb\xbf")
        assert json.loads(raw.decode("utf-8")) == {"champions": []}
        assert result.bytes_written == len(raw)

    def test_overwrites_existing_file(self, tmp_path: Path):
        path = tmp_path / "artifacts.json"
        path.write_text("old content that is longer than the new one" * 10, encoding="utf-8")
        write_document(path, ArtifactsDocument())
        assert json.loads(path.read_text(encoding="utf-8")) == {"artifacts": []}

    def test_no_temp_files_left_behind(self, tmp_path: Path):
        write_document(tmp_path / "roster.json", RosterDocument())
        assert sorted(p.name for p in tmp_path.iterdir()) == ["roster.json"]

    def test_missing_directory_returns_io_error(self, tmp_path: Path):
        path = tmp_path / "does-not-exist" / "roster.json"
        result = write_document(path, RosterDocument())
        assert result.ok is False
        assert result.error.kind == ErrorKind.IO
        assert result.error.path == str(path)
        assert str(path) in result.error.message
        assert result.bytes_written == 0

    def test_serialization_failure_returned_not_raised(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        result = write_document(path, {"A": 1, "a": 2})
        assert result.ok is False
        assert result.error.kind == ErrorKind.SERIALIZATION
        assert not path.exists()

    def test_failed_replace_leaves_previous_content(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "account.json"
        path.write_text('{"previous": true}', encoding="utf-8")

        def _boom(src, dst):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(writer_module.os, "replace", _boom)
        result = write_document(path, AccountDocument())

        assert result.ok is False
        assert result.error.kind == ErrorKind.IO
        assert "No space left on device" in result.error.message
        assert path.read_text(encoding="utf-8") == '{"previous": true}'
        assert sorted(p.name for p in tmp_path.iterdir()) == ["account.json"]

    def test_identical_documents_write_identical_bytes(self, tmp_path: Path, sample_snapshot):
        from raid_exporter.export.mappers import map_roster

        first = tmp_path / "a.json"
        second = tmp_path / "b.json"
        write_document(first, map_roster(sample_snapshot))
        write_document(second, map_roster(sample_snapshot))
        assert first.read_bytes() == second.read_bytes()

    @pytest.mark.skipif(os.name != "posix", reason="POSIX file modes only")
    def test_new_file_is_world_readable(self, tmp_path: Path):
        path = tmp_path / "metadata.json"
        write_document(path, {"k": 1})
        assert path.stat().st_mode & 0o044 == 0o044
