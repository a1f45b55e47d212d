from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

from memorymaze.core.config import GameConfig
from memorymaze.core.events import (
    ChallengeView,
    InputPort,
    MazeSnapshot,
    Notice,
    NoticeKind,
    Sinks,
    SoundCue,
)
from memorymaze.core.gates import GateSet, build_gates
from memorymaze.core.layouts import LayoutRepository, MazeLayout
from memorymaze.core.navigation import Direction, MoveEvent, MoveResult, PlayerState, move
from memorymaze.core.progress import ProgressRecord, ProgressStore
from memorymaze.core.sequence import (
    Challenge,
    InputResult,
    InputStatus,
    PlaybackEventKind,
    start_challenge,
)

logger = logging.getLogger(__name__)

DIRECTION_INTENTS = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


class MazeGame:
    """Memory maze: walk the grid, open color gates, reach the exit.

    Owns the live layout, gate set, player and progress record for one
    session. All mutation happens through the public methods below, which the
    host calls from a single thread; the only time-dependent part is gate
    playback, advanced by :meth:`tick`.
    """

    def __init__(
        self,
        layouts: LayoutRepository,
        progress_store: ProgressStore,
        sinks: Optional[Sinks] = None,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._layouts = layouts
        self._progress_store = progress_store
        self._sinks = sinks or Sinks()
        self._config = config or GameConfig()
        self._rng = rng or random.Random()

        self._record = ProgressRecord(lives=self._config.max_lives)
        self._layout: Optional[MazeLayout] = None
        self._gates = GateSet({})
        self._player: Optional[PlayerState] = None
        self._game_active = True
        self._awaiting_next_level = False
        self._paused = False
        self._status = ""

        self._input_port: Optional[InputPort] = None
        self._subscriptions: List[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def level(self) -> int:
        return self._record.level

    @property
    def score(self) -> int:
        return self._record.score

    @property
    def lives(self) -> int:
        return self._record.lives

    @property
    def layout(self) -> MazeLayout:
        if self._layout is None:
            raise RuntimeError("init() has not been called")
        return self._layout

    @property
    def gates(self) -> GateSet:
        return self._gates

    @property
    def player(self) -> PlayerState:
        if self._player is None:
            raise RuntimeError("init() has not been called")
        return self._player

    @property
    def challenge(self) -> Optional[Challenge]:
        return self._player.current_challenge if self._player is not None else None

    @property
    def game_active(self) -> bool:
        return self._game_active

    @property
    def awaiting_next_level(self) -> bool:
        return self._awaiting_next_level

    @property
    def paused(self) -> bool:
        return self._paused

    # ------------------------------------------------------------------
    # Lifecycle hooks used by the hub
    # ------------------------------------------------------------------

    def init(self) -> None:
        """Load saved progress, build the current level and place the player at the start."""
        self._record = self._progress_store.load()
        self._game_active = True
        self._awaiting_next_level = False
        self._paused = False
        self._status = ""
        self._setup_maze(restore=True)
        logger.info(
            "Maze ready: level %d, score %d, lives %d, gates %d/%d",
            self.level,
            self.score,
            self.lives,
            self._gates.gates_solved,
            self._gates.total_gates,
        )
        self._render()

    def bind_input(self, port: InputPort) -> None:
        self._input_port = port
        if not self._subscriptions:
            self._subscriptions.append(port.subscribe(self.handle))

    def activate(self) -> None:
        """Bring the game to the foreground without touching game state."""
        self._paused = False
        if self._input_port is not None and not self._subscriptions:
            self._subscriptions.append(self._input_port.subscribe(self.handle))
        self._render()

    def pause(self) -> None:
        self._paused = True

    def cleanup(self) -> None:
        """Drop every input subscription."""
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions = []

    def redraw(self) -> None:
        self._render()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle(self, intent: str) -> None:
        """Dispatch one logical input intent."""
        if intent in DIRECTION_INTENTS:
            self.move(DIRECTION_INTENTS[intent])
        elif intent in self._config.palette:
            self.submit_color(intent)
        elif intent == "start-sequence":
            self.start_sequence()
        elif intent == "reset":
            self.reset_game()
        elif intent == "new-maze":
            self.generate_new_maze()
        elif intent == "next-level":
            self.start_next_level()
        else:
            logger.debug("Unknown input intent %r; ignoring", intent)

    def move(self, direction: Direction) -> MoveResult:
        player = self.player
        if not self._game_active:
            return MoveResult(player.position, MoveEvent.IGNORED)

        dx, dy = direction.delta
        result = move(player, dx, dy, self.layout, self._gates)

        if result.event is MoveEvent.BLOCKED:
            self._sound(SoundCue.BLOCKED)
        elif result.event is MoveEvent.CHALLENGE_STARTED:
            self._open_challenge(result)
        elif result.event is MoveEvent.MOVED:
            self._sound(SoundCue.MOVE)
            self._render()
        elif result.event is MoveEvent.GATES_LOCKED:
            self._sound(SoundCue.MOVE)
            self._notify(NoticeKind.GATES_LOCKED)
            self._render()
        elif result.event is MoveEvent.LEVEL_COMPLETE:
            self._sound(SoundCue.MOVE)
            self._complete_level()
        return result

    def start_sequence(self) -> bool:
        """Play the current gate's sequence (first showing, retry, or replay)."""
        challenge = self.challenge
        if not self._game_active or challenge is None:
            return False
        if challenge.begin_playback(self.level, self._config) is None:
            return False
        self._status = "Watch carefully..."
        self._render()
        return True

    def tick(self, elapsed_ms: float) -> None:
        """Advance gate playback by ``elapsed_ms``."""
        challenge = self.challenge
        if self._paused or challenge is None:
            return
        events = challenge.tick(elapsed_ms)
        for event in events:
            if self.challenge is not challenge:
                return
            if event.kind is PlaybackEventKind.LIGHT_ON:
                self._sound(SoundCue.COLOR_TONE, event.color)
            elif event.kind is PlaybackEventKind.FINISHED:
                self._status = "Your turn! Repeat the sequence"
        if events:
            self._render()

    def submit_color(self, color: str) -> Optional[InputResult]:
        challenge = self.challenge
        if not self._game_active or challenge is None:
            return None
        if color not in self._config.palette:
            logger.debug("Unknown color %r; ignoring", color)
            return None
        result = challenge.submit(color)
        if result is None:
            return None

        self._sound(SoundCue.COLOR_TONE, color)
        if result.status is InputStatus.WRONG:
            self._fail_challenge(challenge)
        elif result.complete:
            self._unlock_gate(challenge)
        else:
            self._render()
        return result

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def reset_game(self) -> None:
        """Wipe saved progress and start again from level 1."""
        self._cancel_challenge()
        self._progress_store.clear()
        self._record = ProgressRecord(lives=self._config.max_lives)
        self._game_active = True
        self._awaiting_next_level = False
        self._status = ""
        self._setup_maze(restore=False)
        logger.info("Game reset")
        self._notify(NoticeKind.GAME_RESET)
        self._render()

    def generate_new_maze(self) -> None:
        """Rebuild the current level's maze with every gate locked again.

        Level, score and lives are kept. The layout is chosen by level, so the
        same template comes back.
        """
        self._cancel_challenge()
        self._status = ""
        self._setup_maze(restore=False)
        self._save()
        self._notify(NoticeKind.NEW_MAZE)
        self._render()

    def start_next_level(self) -> bool:
        """Continue after a level-complete notice."""
        if not self._awaiting_next_level:
            return False
        self._awaiting_next_level = False
        self._game_active = True
        self._status = ""
        self._setup_maze(restore=False)
        self._save()
        self._render()
        return True

    def snapshot(self) -> MazeSnapshot:
        challenge = self.challenge
        view = None
        if challenge is not None:
            view = ChallengeView(
                gate=challenge.gate.position,
                phase=challenge.phase,
                markers=challenge.markers(),
                lit_color=challenge.lit_color,
                input_enabled=challenge.input_enabled,
                status=self._status,
            )
        return MazeSnapshot(
            layout=self.layout,
            gates=self._gates.unlock_map(),
            player=self.player.position,
            level=self.level,
            score=self.score,
            lives=self.lives,
            gates_solved=self._gates.gates_solved,
            total_gates=self._gates.total_gates,
            game_active=self._game_active,
            challenge=view,
            paused=self._paused,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _setup_maze(self, restore: bool) -> None:
        self._layout = self._layouts.select(self.level)
        if restore:
            saved = self._record.gates
            self._gates = build_gates(
                self._layout,
                self.level,
                prior_solved={pos for pos, gate in saved.items() if gate.unlocked},
                prior_lengths={pos: gate.sequence_length for pos, gate in saved.items()},
                config=self._config,
            )
        else:
            self._gates = build_gates(self._layout, self.level, config=self._config)
        self._record.gates = {gate.position: gate for gate in self._gates}
        self._player = PlayerState(position=self._layout.start)

    def _open_challenge(self, result: MoveResult) -> None:
        gate = result.gate
        challenge = start_challenge(gate, self._rng, self._config.palette)
        self.player.current_challenge = challenge
        self._status = "Watch the sequence carefully!"
        logger.debug("Gate challenge at (%d, %d): %s", gate.position.x, gate.position.y, challenge.sequence)
        self._notify(NoticeKind.CHALLENGE_STARTED, sequence_length=len(challenge.sequence))
        self._render()

    def _unlock_gate(self, challenge: Challenge) -> None:
        points = len(challenge.sequence) * self._config.points_per_color
        self._gates.mark_solved(challenge.gate.position)
        self._record.score += points
        self.player.current_challenge = None
        self._status = "Gate unlocked! Continue exploring."
        self._save()
        self._sound(SoundCue.UNLOCK)
        self._notify(NoticeKind.GATE_UNLOCKED, points=points)
        self._render()

    def _fail_challenge(self, challenge: Challenge) -> None:
        self._record.lives = max(0, self._record.lives - 1)
        self._save()
        self._sound(SoundCue.FAIL)
        if self._record.lives <= 0:
            self._game_over(challenge)
            return
        challenge.retry()
        self._status = f"Wrong! {self.lives} lives left. Try again."
        self._notify(NoticeKind.SEQUENCE_WRONG)
        self._render()

    def _game_over(self, challenge: Challenge) -> None:
        challenge.finish_game()
        self.player.current_challenge = None
        self._game_active = False
        self._status = ""
        logger.info("Game over at level %d with score %d", self.level, self.score)
        self._sound(SoundCue.LOSE)
        self._notify(NoticeKind.GAME_OVER)
        self._render()

    def _complete_level(self) -> None:
        self._game_active = False
        self._awaiting_next_level = True
        self._record.level += 1
        self._record.score += self._config.level_bonus
        # the next level starts with its own gates
        self._record.gates = {}
        self._progress_store.save(self._record)
        logger.info("Level complete; next level %d, score %d", self.level, self.score)
        self._sound(SoundCue.WIN)
        self._notify(NoticeKind.LEVEL_COMPLETE, points=self._config.level_bonus)
        self._render()

    def _cancel_challenge(self) -> None:
        challenge = self.challenge
        if challenge is not None:
            challenge.cancel()
            self.player.current_challenge = None

    def _save(self) -> None:
        self._record.gates = {gate.position: gate for gate in self._gates}
        self._progress_store.save(self._record)

    def _render(self) -> None:
        if self._layout is None or self._player is None:
            return
        self._sinks.render(self.snapshot())

    def _notify(self, kind: NoticeKind, points: int = 0, sequence_length: int = 0) -> None:
        self._sinks.notify(
            Notice(
                kind=kind,
                points=points,
                lives=self.lives,
                level=self.level,
                score=self.score,
                sequence_length=sequence_length,
            )
        )

    def _sound(self, cue: SoundCue, color: Optional[str] = None) -> None:
        self._sinks.sound(cue, color)
