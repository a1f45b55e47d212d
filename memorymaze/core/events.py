"""Payloads and ports the game exchanges with its host (input, render, notices, sound)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

from memorymaze.core.layouts import MazeLayout, Position
from memorymaze.core.sequence import ChallengePhase, MarkerState


InputHandler = Callable[[str], None]


class NoticeKind(Enum):
    CHALLENGE_STARTED = "challenge-started"
    GATE_UNLOCKED = "gate-unlocked"
    SEQUENCE_WRONG = "sequence-wrong"
    GATES_LOCKED = "gates-locked"
    LEVEL_COMPLETE = "level-complete"
    GAME_OVER = "game-over"
    GAME_RESET = "game-reset"
    NEW_MAZE = "new-maze"


class SoundCue(Enum):
    MOVE = "move"
    BLOCKED = "blocked"
    COLOR_TONE = "color-tone"
    UNLOCK = "unlock"
    FAIL = "fail"
    WIN = "win"
    LOSE = "lose"


@dataclass(frozen=True)
class Notice:
    kind: NoticeKind
    points: int = 0
    lives: int = 0
    level: int = 0
    score: int = 0
    sequence_length: int = 0


@dataclass(frozen=True)
class ChallengeView:
    gate: Position
    phase: ChallengePhase
    markers: List[MarkerState]
    lit_color: Optional[str]
    input_enabled: bool
    status: str


@dataclass(frozen=True)
class MazeSnapshot:
    """Everything a renderer needs to draw the current state."""

    layout: MazeLayout
    gates: Dict[Position, bool]
    player: Position
    level: int
    score: int
    lives: int
    gates_solved: int
    total_gates: int
    game_active: bool
    challenge: Optional[ChallengeView] = None
    paused: bool = False


class InputPort:
    """Fan-out of logical input intents (``"up"``, ``"red"``, ``"start-sequence"``...).

    Input devices call :meth:`emit`; games :meth:`subscribe` and keep the
    returned callable to unsubscribe later.
    """

    def __init__(self) -> None:
        self._handlers: List[InputHandler] = []

    def subscribe(self, handler: InputHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return _unsubscribe

    def emit(self, intent: str) -> None:
        for handler in list(self._handlers):
            handler(intent)

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)


@dataclass
class Sinks:
    """Output callbacks. Defaults drop everything so the core runs headless."""

    render: Callable[[MazeSnapshot], None] = field(default=lambda snapshot: None)
    notify: Callable[[Notice], None] = field(default=lambda notice: None)
    sound: Callable[[SoundCue, Optional[str]], None] = field(default=lambda cue, color: None)
