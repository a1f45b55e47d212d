"""Tests for memorymaze.core.layouts – YAML maze template catalog."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from memorymaze.core.layouts import (
    CellKind,
    LayoutRepository,
    MazeLayout,
    Position,
    parse_grid,
)


def _write_yaml(path: Path, data: dict) -> None:
    path.write_text(yaml.dump(data, allow_unicode=True, default_flow_style=False), encoding="utf-8")


@pytest.fixture()
def levels_dir(tmp_path: Path) -> Path:
    d = tmp_path / "data" / "levels"
    d.mkdir(parents=True)
    return d


# ---------------------------------------------------------------------------
# Position / MazeLayout
# ---------------------------------------------------------------------------

class TestPosition:
    def test_offset(self):
        assert Position(2, 3).offset(1, -1) == Position(3, 2)

    def test_hashable(self):
        assert {Position(1, 1): "a"}[Position(1, 1)] == "a"


class TestMazeLayout:
    @pytest.fixture()
    def layout(self) -> MazeLayout:
        return MazeLayout(key="t", title="T", grid=parse_grid(["#S.", "#GE"], "t"))

    def test_dimensions(self, layout: MazeLayout):
        assert layout.width == 3
        assert layout.height == 2

    def test_cell_lookup_is_x_then_y(self, layout: MazeLayout):
        assert layout.cell(Position(1, 0)) == CellKind.START
        assert layout.cell(Position(1, 1)) == CellKind.GATE

    def test_in_bounds(self, layout: MazeLayout):
        assert layout.in_bounds(Position(2, 1))
        assert not layout.in_bounds(Position(3, 0))
        assert not layout.in_bounds(Position(0, -1))

    def test_cell_out_of_bounds_raises(self, layout: MazeLayout):
        with pytest.raises(IndexError):
            layout.cell(Position(5, 5))

    def test_start_and_end(self, layout: MazeLayout):
        assert layout.start == Position(1, 0)
        assert layout.end == Position(2, 1)

    def test_copy_does_not_alias(self, layout: MazeLayout):
        clone = layout.copy()
        clone.grid[0][0] = CellKind.PATH
        assert layout.grid[0][0] == CellKind.WALL


# ---------------------------------------------------------------------------
# parse_grid validation
# ---------------------------------------------------------------------------

class TestParseGrid:
    def test_ragged_rows(self):
        with pytest.raises(ValueError, match="row 1"):
            parse_grid(["#SE", "##"], "bad.yaml")

    def test_unknown_glyph(self):
        with pytest.raises(ValueError, match="unknown glyph"):
            parse_grid(["#SX", "##E"], "bad.yaml")

    def test_missing_start(self):
        with pytest.raises(ValueError, match="START"):
            parse_grid(["#..", "##E"], "bad.yaml")

    def test_two_ends(self):
        with pytest.raises(ValueError, match="END"):
            parse_grid(["#SE", "##E"], "bad.yaml")

    def test_empty(self):
        with pytest.raises(ValueError):
            parse_grid([], "bad.yaml")


# ---------------------------------------------------------------------------
# Shipped catalog
# ---------------------------------------------------------------------------

class TestShippedCatalog:
    def test_three_templates(self):
        assert len(LayoutRepository()) == 3

    def test_level_one_matches_classic_layout(self):
        layout = LayoutRepository().select(1)
        assert layout.width == 11 and layout.height == 11
        assert layout.start == Position(1, 1)
        assert layout.end == Position(9, 9)
        assert list(layout.positions_of(CellKind.GATE)) == [
            Position(5, 3),
            Position(9, 5),
            Position(5, 8),
        ]

    def test_select_cycles(self):
        repo = LayoutRepository()
        assert repo.select(4).key == repo.select(1).key
        assert repo.select(5).key == repo.select(2).key
        assert repo.select(3).key == "level3"

    def test_select_returns_fresh_copy(self):
        repo = LayoutRepository()
        first = repo.select(1)
        first.grid[1][1] = CellKind.WALL
        assert repo.select(1).grid[1][1] == CellKind.START
        assert repo.select(1) is not repo.select(1)


# ---------------------------------------------------------------------------
# Loading from a directory
# ---------------------------------------------------------------------------

class TestLoading:
    def test_sorted_by_number(self, levels_dir: Path):
        for n in (10, 2, 1):
            _write_yaml(levels_dir / f"level{n}.yaml", {"title": f"L{n}", "grid": ["S.E"]})
        repo = LayoutRepository(levels_dir)
        assert [layout.key for layout in repo.all()] == ["level1", "level2", "level10"]

    def test_title_is_stripped(self, levels_dir: Path):
        _write_yaml(levels_dir / "level1.yaml", {"title": "  Spaced  ", "grid": ["S.E"]})
        assert LayoutRepository(levels_dir).select(1).title == "Spaced"

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            LayoutRepository(tmp_path / "nope")

    def test_no_files(self, levels_dir: Path):
        with pytest.raises(ValueError, match="No level files"):
            LayoutRepository(levels_dir)

    def test_missing_title(self, levels_dir: Path):
        _write_yaml(levels_dir / "level1.yaml", {"grid": ["S.E"]})
        with pytest.raises(ValueError, match="title"):
            LayoutRepository(levels_dir)

    def test_missing_grid(self, levels_dir: Path):
        _write_yaml(levels_dir / "level1.yaml", {"title": "x"})
        with pytest.raises(ValueError, match="grid"):
            LayoutRepository(levels_dir)

    def test_not_a_mapping(self, levels_dir: Path):
        (levels_dir / "level1.yaml").write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ValueError, match="level1.yaml"):
            LayoutRepository(levels_dir)
