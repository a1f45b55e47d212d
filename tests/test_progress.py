"""Tests for memorymaze.core.progress – progress persistence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from memorymaze.core.gates import Gate
from memorymaze.core.layouts import Position
from memorymaze.core.progress import ProgressRecord, ProgressStore


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def progress_file(tmp_path: Path) -> Path:
    return tmp_path / "progress.json"


@pytest.fixture()
def store(progress_file: Path) -> ProgressStore:
    """ProgressStore backed by a temp file so tests don't touch ~/.memorymaze."""
    return ProgressStore(progress_file)


def _gates(*entries: tuple[int, int, bool]) -> dict:
    return {Position(x, y): Gate(Position(x, y), 3, unlocked) for x, y, unlocked in entries}


def _write(path: Path, payload) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


# ---------------------------------------------------------------------------
# ProgressRecord dataclass
# ---------------------------------------------------------------------------

class TestProgressRecord:
    def test_defaults(self):
        record = ProgressRecord()
        assert record.level == 1
        assert record.score == 0
        assert record.lives == 3
        assert record.gates == {}
        assert record.gates_solved == 0

    def test_gates_solved_counts_unlocked(self):
        record = ProgressRecord(gates=_gates((5, 3, True), (9, 5, False), (5, 8, True)))
        assert record.gates_solved == 2

    def test_default_gates_not_shared(self):
        a = ProgressRecord()
        b = ProgressRecord()
        assert a.gates is not b.gates


# ---------------------------------------------------------------------------
# ProgressStore – fresh state
# ---------------------------------------------------------------------------

class TestProgressStoreFresh:
    def test_no_file_returns_defaults(self, store: ProgressStore):
        assert store.load() == ProgressRecord()

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        target = tmp_path / "elsewhere" / "save.json"
        monkeypatch.setenv("MEMORYMAZE_PROGRESS_FILE", str(target))
        assert ProgressStore().file_path == target


# ---------------------------------------------------------------------------
# ProgressStore – save / load
# ---------------------------------------------------------------------------

class TestSaveLoad:
    def test_round_trip(self, store: ProgressStore):
        record = ProgressRecord(level=4, score=230, lives=2, gates=_gates((5, 3, True), (9, 5, False)))
        store.save(record)
        loaded = store.load()
        assert loaded.level == 4
        assert loaded.score == 230
        assert loaded.lives == 2
        assert loaded.unlock_map() == {Position(5, 3): True, Position(9, 5): False}

    def test_sequence_length_survives(self, store: ProgressStore):
        store.save(ProgressRecord(level=5, gates={Position(1, 2): Gate(Position(1, 2), 4)}))
        assert store.load().gates[Position(1, 2)].sequence_length == 4

    def test_file_layout(self, store: ProgressStore, progress_file: Path):
        store.save(ProgressRecord(level=2, score=10, lives=3, gates=_gates((5, 3, True))))
        data = json.loads(progress_file.read_text(encoding="utf-8"))
        assert data["level"] == 2
        assert data["gates"] == [{"x": 5, "y": 3, "unlocked": True, "sequence_length": 3}]
        assert data["gates_solved"] == 1

    def test_creates_parent_directory(self, tmp_path: Path):
        store = ProgressStore(tmp_path / "nested" / "dir" / "progress.json")
        store.save(ProgressRecord(score=5))
        assert store.load().score == 5

    def test_clear(self, store: ProgressStore, progress_file: Path):
        store.save(ProgressRecord(level=3))
        store.clear()
        assert not progress_file.exists()
        assert store.load() == ProgressRecord()

    def test_clear_without_file(self, store: ProgressStore):
        store.clear()

    def test_save_failure_is_swallowed(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = ProgressStore(blocker / "progress.json")
        store.save(ProgressRecord(level=2))
        assert store.load() == ProgressRecord()


# ---------------------------------------------------------------------------
# ProgressStore – loading edge cases
# ---------------------------------------------------------------------------

class TestLoadEdgeCases:
    def test_corrupt_json(self, store: ProgressStore, progress_file: Path):
        progress_file.write_text("NOT VALID JSON", encoding="utf-8")
        assert store.load() == ProgressRecord()

    def test_not_an_object(self, store: ProgressStore, progress_file: Path):
        _write(progress_file, [1, 2, 3])
        assert store.load() == ProgressRecord()

    def test_malformed_gates_keep_other_fields(self, store: ProgressStore, progress_file: Path):
        _write(progress_file, {"level": 3, "score": 90, "lives": 2, "gates": "garbage"})
        record = store.load()
        assert (record.level, record.score, record.lives) == (3, 90, 2)
        assert record.gates == {}

    def test_gate_entry_missing_field(self, store: ProgressStore, progress_file: Path):
        _write(progress_file, {"level": 1, "gates": [{"x": 5, "y": 3, "unlocked": True}]})
        assert store.load().gates == {}

    def test_gate_entry_not_a_dict(self, store: ProgressStore, progress_file: Path):
        _write(progress_file, {"gates": [7]})
        assert store.load().gates == {}

    def test_gates_solved_recomputed(self, store: ProgressStore, progress_file: Path):
        _write(
            progress_file,
            {
                "level": 1,
                "gates": [{"x": 5, "y": 3, "unlocked": True, "sequence_length": 3}],
                "gates_solved": 3,
            },
        )
        assert store.load().gates_solved == 1

    def test_invalid_scalars_fall_back(self, store: ProgressStore, progress_file: Path):
        _write(progress_file, {"level": "abc", "score": -5, "lives": None})
        record = store.load()
        assert record.level == 1
        assert record.score == 0
        assert record.lives == 3

    def test_spent_lives_come_back_full(self, store: ProgressStore, progress_file: Path):
        _write(progress_file, {"level": 2, "score": 40, "lives": 0})
        record = store.load()
        assert record.lives == 3
        assert record.level == 2

    def test_lives_capped(self, store: ProgressStore, progress_file: Path):
        _write(progress_file, {"lives": 99})
        assert store.load().lives == 3

    @pytest.mark.parametrize("length", [0, -2])
    def test_non_positive_sequence_length_discards_gates(
        self, store: ProgressStore, progress_file: Path, length: int
    ):
        _write(
            progress_file,
            {"level": 2, "score": 40, "gates": [{"x": 5, "y": 3, "unlocked": False, "sequence_length": length}]},
        )
        record = store.load()
        assert record.gates == {}
        assert (record.level, record.score) == (2, 40)

    @pytest.mark.parametrize("flag", ["false", 1, None])
    def test_non_boolean_unlocked_discards_gates(self, store: ProgressStore, progress_file: Path, flag):
        _write(progress_file, {"gates": [{"x": 5, "y": 3, "unlocked": flag, "sequence_length": 3}]})
        assert store.load().gates == {}


# ---------------------------------------------------------------------------
# ProgressStore – atomic writes
# ---------------------------------------------------------------------------

class TestAtomicSave:
    def test_no_temp_file_left_behind(self, store: ProgressStore, progress_file: Path):
        store.save(ProgressRecord(level=2))
        assert [p.name for p in progress_file.parent.iterdir()] == ["progress.json"]

    def test_failed_swap_keeps_previous_save(
        self, store: ProgressStore, progress_file: Path, monkeypatch: pytest.MonkeyPatch
    ):
        store.save(ProgressRecord(level=3, score=120))

        def fail_replace(self, target):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "replace", fail_replace)
        store.save(ProgressRecord(level=9, score=999))
        monkeypatch.undo()

        record = store.load()
        assert (record.level, record.score) == (3, 120)
        assert not (progress_file.parent / "progress.json.tmp").exists()
