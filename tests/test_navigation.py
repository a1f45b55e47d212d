"""Tests for memorymaze.core.navigation – grid movement and gate blocking."""

from __future__ import annotations

import pytest

from memorymaze.core.gates import GateSet, build_gates
from memorymaze.core.layouts import CellKind, LayoutRepository, MazeLayout, Position
from memorymaze.core.navigation import (
    Direction,
    MoveEvent,
    PlayerState,
    check_level_complete,
    move,
)
from memorymaze.core.sequence import Challenge


@pytest.fixture()
def layout() -> MazeLayout:
    return LayoutRepository().select(1)


@pytest.fixture()
def gates(layout: MazeLayout) -> GateSet:
    return build_gates(layout, 1)


def _step(player: PlayerState, direction: Direction, layout: MazeLayout, gates: GateSet):
    dx, dy = direction.delta
    return move(player, dx, dy, layout, gates)


class TestDirection:
    def test_deltas(self):
        assert Direction.UP.delta == (0, -1)
        assert Direction.DOWN.delta == (0, 1)
        assert Direction.LEFT.delta == (-1, 0)
        assert Direction.RIGHT.delta == (1, 0)


class TestMove:
    def test_moves_onto_path(self, layout: MazeLayout, gates: GateSet):
        player = PlayerState(Position(1, 1))
        result = _step(player, Direction.RIGHT, layout, gates)
        assert result.event is MoveEvent.MOVED
        assert player.position == Position(2, 1)
        assert result.position == Position(2, 1)

    def test_wall_blocks(self, layout: MazeLayout, gates: GateSet):
        player = PlayerState(Position(1, 1))
        result = _step(player, Direction.UP, layout, gates)
        assert result.event is MoveEvent.BLOCKED
        assert player.position == Position(1, 1)

    def test_grid_edge_blocks(self):
        layout = MazeLayout("edge", "Edge", [[CellKind.START, CellKind.END]])
        player = PlayerState(Position(0, 0))
        result = move(player, -1, 0, layout, GateSet({}))
        assert result.event is MoveEvent.BLOCKED
        assert player.position == Position(0, 0)

    def test_ignored_during_challenge(self, layout: MazeLayout, gates: GateSet):
        challenge = Challenge(gates.get(Position(5, 3)), ["red"])
        player = PlayerState(Position(1, 1), current_challenge=challenge)
        result = _step(player, Direction.RIGHT, layout, gates)
        assert result.event is MoveEvent.IGNORED
        assert player.position == Position(1, 1)

    @pytest.mark.parametrize(
        "start, direction",
        [
            (Position(4, 3), Direction.RIGHT),
            (Position(6, 3), Direction.LEFT),
            (Position(9, 4), Direction.DOWN),
            (Position(9, 6), Direction.UP),
            (Position(5, 7), Direction.DOWN),
            (Position(5, 9), Direction.UP),
        ],
    )
    def test_locked_gate_never_entered(self, layout: MazeLayout, gates: GateSet, start: Position, direction: Direction):
        player = PlayerState(start)
        result = _step(player, direction, layout, gates)
        assert result.event is MoveEvent.CHALLENGE_STARTED
        assert result.gate is not None and not result.gate.unlocked
        assert player.position == start

    def test_unlocked_gate_is_a_path(self, layout: MazeLayout, gates: GateSet):
        gates.mark_solved(Position(5, 3))
        player = PlayerState(Position(4, 3))
        result = _step(player, Direction.RIGHT, layout, gates)
        assert result.event is MoveEvent.MOVED
        assert player.position == Position(5, 3)

    def test_end_with_locked_gates(self, layout: MazeLayout, gates: GateSet):
        player = PlayerState(Position(9, 8))
        result = _step(player, Direction.DOWN, layout, gates)
        assert result.event is MoveEvent.GATES_LOCKED
        assert player.position == Position(9, 9)

    def test_end_with_all_gates_open(self, layout: MazeLayout, gates: GateSet):
        for gate in list(gates):
            gates.mark_solved(gate.position)
        player = PlayerState(Position(9, 8))
        result = _step(player, Direction.DOWN, layout, gates)
        assert result.event is MoveEvent.LEVEL_COMPLETE


class TestCheckLevelComplete:
    def test_locked(self, gates: GateSet):
        assert not check_level_complete(gates)

    def test_all_open(self, gates: GateSet):
        for gate in list(gates):
            gates.mark_solved(gate.position)
        assert check_level_complete(gates)
