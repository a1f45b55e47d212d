from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import yaml

from memorymaze.core.config import data_dir


class CellKind(IntEnum):
    PATH = 0
    WALL = 1
    GATE = 2
    START = 3
    END = 4


GLYPHS: Dict[str, CellKind] = {
    ".": CellKind.PATH,
    "#": CellKind.WALL,
    "G": CellKind.GATE,
    "S": CellKind.START,
    "E": CellKind.END,
}


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class MazeLayout:
    """One maze template: a rectangular grid of cell kinds indexed ``grid[y][x]``."""

    key: str
    title: str
    grid: List[List[CellKind]]

    @property
    def width(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def height(self) -> int:
        return len(self.grid)

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.y < self.height and 0 <= pos.x < self.width

    def cell(self, pos: Position) -> CellKind:
        if not self.in_bounds(pos):
            raise IndexError(f"Position out of bounds: ({pos.x}, {pos.y})")
        return self.grid[pos.y][pos.x]

    def positions_of(self, kind: CellKind) -> Iterator[Position]:
        """Yield positions holding ``kind`` in row-major order."""
        for y, row in enumerate(self.grid):
            for x, cell in enumerate(row):
                if cell == kind:
                    yield Position(x, y)

    @property
    def start(self) -> Position:
        return next(self.positions_of(CellKind.START))

    @property
    def end(self) -> Position:
        return next(self.positions_of(CellKind.END))

    def copy(self) -> "MazeLayout":
        return MazeLayout(key=self.key, title=self.title, grid=[list(row) for row in self.grid])


def parse_grid(rows: List[str], source: str) -> List[List[CellKind]]:
    """Turn glyph rows into a grid, checking shape and start/end markers."""
    if not rows:
        raise ValueError(f"{source}: 'grid' has no rows")
    width = len(rows[0])
    grid: List[List[CellKind]] = []
    for y, row in enumerate(rows):
        if len(row) != width:
            raise ValueError(f"{source}: row {y} has {len(row)} cells, expected {width}")
        cells = []
        for x, glyph in enumerate(row):
            if glyph not in GLYPHS:
                raise ValueError(f"{source}: unknown glyph {glyph!r} at ({x}, {y})")
            cells.append(GLYPHS[glyph])
        grid.append(cells)

    for kind in (CellKind.START, CellKind.END):
        count = sum(row.count(kind) for row in grid)
        if count != 1:
            raise ValueError(f"{source}: expected exactly one {kind.name} cell, found {count}")
    return grid


class LayoutRepository:
    """Catalog of maze templates loaded from ``data/levels/level*.yaml``."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = base_dir or data_dir() / "levels"
        self._layouts = self._load_layouts()

    def __len__(self) -> int:
        return len(self._layouts)

    def all(self) -> List[MazeLayout]:
        return [layout.copy() for layout in self._layouts]

    def select(self, level: int) -> MazeLayout:
        """Template for ``level``, cycling over the catalog. Always a fresh copy."""
        return self._layouts[(level - 1) % len(self._layouts)].copy()

    def _load_layouts(self) -> List[MazeLayout]:
        base_dir = self._base_dir
        if not base_dir.exists():
            raise FileNotFoundError(f"Levels directory not found: {base_dir}")

        def _sort_key(p: Path) -> tuple[int, str]:
            m = re.match(r"^level(\d+)$", p.stem)
            if m:
                return (int(m.group(1)), p.stem)
            return (10**9, p.stem)

        layouts: List[MazeLayout] = []
        for level_path in sorted(base_dir.glob("level*.yaml"), key=_sort_key):
            raw = yaml.safe_load(level_path.read_text(encoding="utf-8"))
            if not raw or not isinstance(raw, dict):
                raise ValueError(f"{level_path.name}: expected YAML with 'title' and 'grid'")
            title = raw.get("title")
            rows = raw.get("grid")
            if not title or not isinstance(title, str):
                raise ValueError(f"{level_path.name}: missing or invalid 'title'")
            if not isinstance(rows, list):
                raise ValueError(f"{level_path.name}: missing 'grid'")
            grid = parse_grid([str(row).strip() for row in rows], level_path.name)
            layouts.append(MazeLayout(key=level_path.stem, title=title.strip(), grid=grid))

        if not layouts:
            raise ValueError("No level files (level*.yaml) found in data/levels")
        return layouts
