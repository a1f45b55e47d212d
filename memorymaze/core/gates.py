from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Collection, Dict, Iterator, Mapping, Optional

from memorymaze.core.config import GameConfig
from memorymaze.core.layouts import CellKind, MazeLayout, Position

logger = logging.getLogger(__name__)


@dataclass
class Gate:
    position: Position
    sequence_length: int
    unlocked: bool = False


class GateSet:
    """Gates of one layout, keyed by position in row-major order."""

    def __init__(self, gates: Mapping[Position, Gate]) -> None:
        self._gates: Dict[Position, Gate] = dict(gates)

    def __iter__(self) -> Iterator[Gate]:
        return iter(self._gates.values())

    def __len__(self) -> int:
        return len(self._gates)

    def __contains__(self, position: object) -> bool:
        return position in self._gates

    @property
    def total_gates(self) -> int:
        return len(self._gates)

    @property
    def gates_solved(self) -> int:
        return sum(1 for gate in self._gates.values() if gate.unlocked)

    def get(self, position: Position) -> Optional[Gate]:
        return self._gates.get(position)

    def is_locked(self, position: Position) -> bool:
        gate = self._gates.get(position)
        return gate is not None and not gate.unlocked

    def mark_solved(self, position: Position) -> bool:
        """Unlock the gate at ``position``. Returns False when nothing changed."""
        gate = self._gates.get(position)
        if gate is None:
            logger.debug("No gate at (%d, %d); ignoring unlock", position.x, position.y)
            return False
        if gate.unlocked:
            return False
        gate.unlocked = True
        return True

    def all_solved(self) -> bool:
        return self.gates_solved == self.total_gates

    def unlock_map(self) -> Dict[Position, bool]:
        return {pos: gate.unlocked for pos, gate in self._gates.items()}


def build_gates(
    layout: MazeLayout,
    level: int,
    prior_solved: Collection[Position] = (),
    prior_lengths: Optional[Mapping[Position, int]] = None,
    config: Optional[GameConfig] = None,
) -> GateSet:
    """Create the gate set for ``layout``.

    New gates ask for ``3 + level // 2`` colors. A gate restored from saved
    progress keeps the length it was created with, as long as that length is
    between 1 and the current level's length.
    """
    config = config or GameConfig()
    prior_lengths = prior_lengths or {}
    default_length = config.sequence_length(level)
    gates: Dict[Position, Gate] = {}
    for pos in layout.positions_of(CellKind.GATE):
        length = prior_lengths.get(pos, default_length)
        if not 1 <= length <= default_length:
            logger.warning("Ignoring stored sequence length %r for gate (%d, %d)", length, pos.x, pos.y)
            length = default_length
        gates[pos] = Gate(position=pos, sequence_length=length, unlocked=pos in prior_solved)
    return GateSet(gates)
