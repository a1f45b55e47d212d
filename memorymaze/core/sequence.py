"""Color-sequence gate challenge: generation, timed playback and input judging."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

from memorymaze.core.config import COLORS, GameConfig
from memorymaze.core.gates import Gate

logger = logging.getLogger(__name__)


class ChallengePhase(Enum):
    IDLE = "idle"
    AWAITING_START = "awaiting_start"
    PLAYING_BACK = "playing_back"
    AWAITING_INPUT = "awaiting_input"
    RESOLVED_SUCCESS = "resolved_success"
    RESOLVED_FAIL = "resolved_fail"
    GAME_OVER = "game_over"


class PlaybackEventKind(Enum):
    LIGHT_ON = "light_on"
    LIGHT_OFF = "light_off"
    FINISHED = "finished"


class InputStatus(Enum):
    CORRECT = "correct"
    WRONG = "wrong"


class MarkerState(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    WRONG = "wrong"


@dataclass(frozen=True)
class PlaybackEvent:
    kind: PlaybackEventKind
    index: int = -1
    color: Optional[str] = None


@dataclass(frozen=True)
class InputResult:
    status: InputStatus
    index: int
    complete: bool = False


def playback_tempo(level: int, config: Optional[GameConfig] = None) -> int:
    """Milliseconds each color stays dark and then lit during playback."""
    return (config or GameConfig()).tempo_ms(level)


class Playback:
    """Timer-driven reveal of a color sequence.

    Each color is preceded by ``tempo_ms`` of darkness and then lit for
    ``tempo_ms``. After the last color a ``settle_ms`` pause runs before
    FINISHED is reported. The host advances the clock with :meth:`advance`;
    nothing happens between calls.
    """

    def __init__(self, sequence: Sequence[str], tempo_ms: int, settle_ms: int = 300) -> None:
        self._sequence = list(sequence)
        self._tempo_ms = tempo_ms
        self._elapsed_ms = 0.0
        self._cursor = 0
        self._cancelled = False
        self._schedule: List[Tuple[int, PlaybackEvent]] = []
        at = 0
        for index, color in enumerate(self._sequence):
            at += tempo_ms
            self._schedule.append((at, PlaybackEvent(PlaybackEventKind.LIGHT_ON, index, color)))
            at += tempo_ms
            self._schedule.append((at, PlaybackEvent(PlaybackEventKind.LIGHT_OFF, index, color)))
        at += settle_ms
        self._schedule.append((at, PlaybackEvent(PlaybackEventKind.FINISHED)))

    @property
    def tempo_ms(self) -> int:
        return self._tempo_ms

    @property
    def duration_ms(self) -> int:
        return self._schedule[-1][0]

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def finished(self) -> bool:
        return self._cursor >= len(self._schedule)

    def cancel(self) -> None:
        self._cancelled = True

    def advance(self, elapsed_ms: float) -> List[PlaybackEvent]:
        """Move the clock forward and return the events that became due, in order."""
        if self._cancelled or self.finished:
            return []
        self._elapsed_ms += max(0.0, elapsed_ms)
        due: List[PlaybackEvent] = []
        while self._cursor < len(self._schedule) and self._schedule[self._cursor][0] <= self._elapsed_ms:
            due.append(self._schedule[self._cursor][1])
            self._cursor += 1
        return due

    def steps(self) -> Iterator[Tuple[str, int]]:
        """Lazily yield ``(color, highlight_ms)`` pairs; stops once cancelled."""
        for color in self._sequence:
            if self._cancelled:
                return
            yield color, self._tempo_ms


class Challenge:
    """One confrontation with a locked gate."""

    def __init__(self, gate: Gate, sequence: Sequence[str]) -> None:
        self.gate = gate
        self.sequence: List[str] = list(sequence)
        self.player_input: List[str] = []
        self.phase = ChallengePhase.AWAITING_START
        self.failed_index: Optional[int] = None
        self.lit_color: Optional[str] = None
        self._playback: Optional[Playback] = None

    @property
    def is_playing(self) -> bool:
        return self.phase is ChallengePhase.PLAYING_BACK

    @property
    def input_enabled(self) -> bool:
        return self.phase is ChallengePhase.AWAITING_INPUT

    @property
    def playback(self) -> Optional[Playback]:
        return self._playback

    def begin_playback(self, level: int, config: Optional[GameConfig] = None) -> Optional[Playback]:
        """Start revealing the sequence. Also serves as a replay while awaiting input."""
        if self.phase not in (ChallengePhase.AWAITING_START, ChallengePhase.AWAITING_INPUT):
            logger.debug("Playback requested in phase %s; ignoring", self.phase.value)
            return None
        config = config or GameConfig()
        if self._playback is not None:
            self._playback.cancel()
        self.player_input = []
        self.failed_index = None
        self.lit_color = None
        self.phase = ChallengePhase.PLAYING_BACK
        self._playback = Playback(self.sequence, config.tempo_ms(level), config.settle_ms)
        return self._playback

    def tick(self, elapsed_ms: float) -> List[PlaybackEvent]:
        if self.phase is not ChallengePhase.PLAYING_BACK or self._playback is None:
            return []
        events = self._playback.advance(elapsed_ms)
        for event in events:
            if event.kind is PlaybackEventKind.LIGHT_ON:
                self.lit_color = event.color
            elif event.kind is PlaybackEventKind.LIGHT_OFF:
                self.lit_color = None
            else:
                self.lit_color = None
                self.player_input = []
                self.phase = ChallengePhase.AWAITING_INPUT
        return events

    def submit(self, color: str) -> Optional[InputResult]:
        """Judge one color. Returns None while input is disabled."""
        if not self.input_enabled:
            logger.debug("Color %r submitted while input disabled; ignoring", color)
            return None
        if len(self.player_input) >= len(self.sequence):
            logger.debug("Color %r submitted past the end of the sequence; ignoring", color)
            return None
        self.player_input.append(color)
        index = len(self.player_input) - 1
        if self.sequence[index] != color:
            self.failed_index = index
            self.phase = ChallengePhase.RESOLVED_FAIL
            return InputResult(InputStatus.WRONG, index)
        complete = len(self.player_input) == len(self.sequence)
        if complete:
            self.phase = ChallengePhase.RESOLVED_SUCCESS
        return InputResult(InputStatus.CORRECT, index, complete)

    def retry(self) -> bool:
        """After a wrong answer, go back to the start with the same sequence."""
        if self.phase is not ChallengePhase.RESOLVED_FAIL:
            return False
        self.player_input = []
        self.failed_index = None
        self.phase = ChallengePhase.AWAITING_START
        return True

    def cancel(self) -> None:
        if self._playback is not None:
            self._playback.cancel()
        self.lit_color = None
        self.phase = ChallengePhase.IDLE

    def finish_game(self) -> None:
        if self._playback is not None:
            self._playback.cancel()
        self.lit_color = None
        self.phase = ChallengePhase.GAME_OVER

    def markers(self) -> List[MarkerState]:
        states = [MarkerState.PENDING] * len(self.sequence)
        for index in range(len(self.player_input)):
            states[index] = MarkerState.WRONG if index == self.failed_index else MarkerState.COMPLETED
        return states


def start_challenge(
    gate: Gate,
    rng: Optional[random.Random] = None,
    palette: Sequence[str] = COLORS,
) -> Challenge:
    """Open a challenge for ``gate`` with a fresh random sequence (repeats allowed)."""
    chooser = rng or random
    sequence = [chooser.choice(palette) for _ in range(gate.sequence_length)]
    return Challenge(gate, sequence)
