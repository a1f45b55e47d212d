from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

COLORS: Tuple[str, ...] = ("red", "yellow", "green", "blue", "purple")


@dataclass(frozen=True)
class GameConfig:
    """Tunables for the maze game. Defaults match the shipped game."""

    max_lives: int = 3
    points_per_color: int = 10
    level_bonus: int = 100
    base_sequence_length: int = 3
    base_tempo_ms: int = 400
    tempo_step_ms: int = 30
    min_tempo_ms: int = 200
    settle_ms: int = 300
    palette: Tuple[str, ...] = COLORS

    def sequence_length(self, level: int) -> int:
        """Number of colors a gate created at ``level`` asks for."""
        return self.base_sequence_length + level // 2

    def tempo_ms(self, level: int) -> int:
        """Reveal time per color; faster at higher levels, never below the floor."""
        return max(self.base_tempo_ms - level * self.tempo_step_ms, self.min_tempo_ms)


def data_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "data"


def progress_file() -> Path:
    """Location of the progress file; ``MEMORYMAZE_PROGRESS_FILE`` overrides it."""
    override = os.environ.get("MEMORYMAZE_PROGRESS_FILE")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".memorymaze" / "progress.json"


def preferences_file() -> Path:
    """Display preferences live beside the progress file."""
    return progress_file().parent / "preferences.json"
