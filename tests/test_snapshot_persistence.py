"""Tests for snapshot persistence - save/load the latest standings as JSON."""

import json

import pytest

from src.standings.config import SNAPSHOT_FILENAME, WIRE_FIELDS
from src.standings.models import TeamRecord
from src.standings.snapshot_persistence import SnapshotPersistence
from src.standings.standings_builder import build


# ── Helpers ──────────────────────────────────────────────────────────


@pytest.fixture
def persistence(tmp_path):
    return SnapshotPersistence(storage_dir=tmp_path / "standings")


@pytest.fixture
def snapshot(sample_records, fixed_time):
    previous = build(sample_records, created_at=fixed_time)
    moved = [
        TeamRecord(id=r.id, name=r.name, points=r.points * (3 if r.id == "t3" else 1))
        for r in sample_records
    ]
    return build(moved, previous, created_at=fixed_time)


# ── Save ─────────────────────────────────────────────────────────────


class TestSaveSnapshot:
    def test_creates_storage_dir(self, tmp_path):
        storage = tmp_path / "nested" / "dir"
        SnapshotPersistence(storage_dir=storage)
        assert storage.is_dir()

    def test_writes_single_file(self, persistence, snapshot):
        path = persistence.save_snapshot(snapshot)
        assert path.name == SNAPSHOT_FILENAME
        assert [p.name for p in persistence.storage_dir.iterdir()] == [SNAPSHOT_FILENAME]

    def test_file_contains_wire_rows(self, persistence, snapshot):
        path = persistence.save_snapshot(snapshot)
        data = json.loads(path.read_text(encoding="utf-8"))

        assert data["standings"] == snapshot.to_wire()
        assert all(tuple(row) == WIRE_FIELDS for row in data["standings"])

    def test_overwrites_previous_generation(self, persistence, snapshot, sample_records):
        persistence.save_snapshot(build(sample_records))
        persistence.save_snapshot(snapshot)

        assert len(list(persistence.storage_dir.iterdir())) == 1
        assert persistence.load_snapshot() == snapshot


# ── Load ─────────────────────────────────────────────────────────────


class TestLoadSnapshot:
    def test_round_trip(self, persistence, snapshot):
        persistence.save_snapshot(snapshot)
        loaded = persistence.load_snapshot()

        assert loaded == snapshot
        assert loaded.get("t3").rank_delta == 2

    def test_empty_snapshot_round_trip(self, persistence, fixed_time):
        empty = build([], created_at=fixed_time)
        persistence.save_snapshot(empty)
        assert persistence.load_snapshot() == empty

    def test_missing_returns_none(self, persistence):
        assert persistence.load_snapshot() is None

    def test_corrupt_returns_none(self, persistence):
        persistence.filepath.write_text("{broken", encoding="utf-8")
        assert persistence.load_snapshot() is None

    def test_wrong_shape_returns_none(self, persistence):
        persistence.filepath.write_text(json.dumps({"standings": []}), encoding="utf-8")
        assert persistence.load_snapshot() is None


# ── Delete ───────────────────────────────────────────────────────────


class TestDeleteSnapshot:
    def test_delete_existing(self, persistence, snapshot):
        persistence.save_snapshot(snapshot)
        assert persistence.delete_snapshot() is True
        assert not persistence.filepath.exists()

    def test_delete_missing(self, persistence):
        assert persistence.delete_snapshot() is False
