from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from memorymaze.core.gates import Gate, GateSet
from memorymaze.core.layouts import CellKind, MazeLayout, Position
from memorymaze.core.sequence import Challenge


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> tuple[int, int]:
        return self.value


class MoveEvent(Enum):
    IGNORED = "ignored"
    BLOCKED = "blocked"
    MOVED = "moved"
    CHALLENGE_STARTED = "challenge-started"
    GATES_LOCKED = "gates-still-locked"
    LEVEL_COMPLETE = "level-complete"


@dataclass
class PlayerState:
    position: Position
    current_challenge: Optional[Challenge] = None


@dataclass(frozen=True)
class MoveResult:
    position: Position
    event: MoveEvent
    gate: Optional[Gate] = None


def check_level_complete(gates: GateSet) -> bool:
    return gates.all_solved()


def move(player: PlayerState, dx: int, dy: int, layout: MazeLayout, gates: GateSet) -> MoveResult:
    """Try to step the player by one cell.

    Walls and the grid edge block. A locked gate never lets the player in;
    the caller gets CHALLENGE_STARTED with the gate instead. Unlocked gates
    behave like paths. Reaching the exit only completes the level once every
    gate is open.
    """
    if player.current_challenge is not None:
        return MoveResult(player.position, MoveEvent.IGNORED)

    target = player.position.offset(dx, dy)
    if not layout.in_bounds(target):
        return MoveResult(player.position, MoveEvent.BLOCKED)

    cell = layout.cell(target)
    if cell == CellKind.WALL:
        return MoveResult(player.position, MoveEvent.BLOCKED)

    if cell == CellKind.GATE:
        gate = gates.get(target)
        if gate is not None and not gate.unlocked:
            return MoveResult(player.position, MoveEvent.CHALLENGE_STARTED, gate)

    player.position = target

    if cell == CellKind.END:
        if check_level_complete(gates):
            return MoveResult(target, MoveEvent.LEVEL_COMPLETE)
        return MoveResult(target, MoveEvent.GATES_LOCKED)
    return MoveResult(target, MoveEvent.MOVED)
