from __future__ import annotations

import time
from typing import Dict, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent, QKeyEvent
from PySide6.QtWidgets import (
    QCheckBox,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from memorymaze.core.config import COLORS
from memorymaze.core.events import InputPort, MazeSnapshot, Notice, NoticeKind, Sinks
from memorymaze.core.game import MazeGame
from memorymaze.core.hub import GameRegistry
from memorymaze.core.layouts import LayoutRepository
from memorymaze.core.preferences import PreferencesStore
from memorymaze.core.progress import ProgressStore
from memorymaze.core.sequence import ChallengePhase
from memorymaze.ui.colors import DARK_THEME, LIGHT_THEME, SEQUENCE_COLORS, Theme, lit_color
from memorymaze.ui.custom_overlay import ConfirmOverlay, ResultOverlay, Toast
from memorymaze.ui.maze_widgets import MazeBoard, SequenceDots
from memorymaze.ui.sounds import SoundBoard

TICK_INTERVAL_MS = 16

KEY_INTENTS = {
    Qt.Key_Up: "up",
    Qt.Key_W: "up",
    Qt.Key_Down: "down",
    Qt.Key_S: "down",
    Qt.Key_Left: "left",
    Qt.Key_A: "left",
    Qt.Key_Right: "right",
    Qt.Key_D: "right",
    Qt.Key_Space: "start-sequence",
    Qt.Key_1: "red",
    Qt.Key_2: "yellow",
    Qt.Key_3: "green",
    Qt.Key_4: "blue",
    Qt.Key_5: "purple",
}

# icon, title, toast kind for notices shown as toasts
TOASTS = {
    NoticeKind.CHALLENGE_STARTED: ("🔐", "Gate Challenge!", "info"),
    NoticeKind.GATE_UNLOCKED: ("🔓", "Gate Unlocked!", "success"),
    NoticeKind.SEQUENCE_WRONG: ("❌", "Wrong Sequence!", "error"),
    NoticeKind.GATES_LOCKED: ("🔒", "Gates Locked!", "warning"),
    NoticeKind.GAME_RESET: ("🔄", "Game Reset", "info"),
    NoticeKind.NEW_MAZE: ("🗺️", "New Maze", "info"),
}


class MainWindow(QMainWindow):
    """Hub window hosting the memory maze.

    Keyboard and button presses become input intents on an :class:`InputPort`;
    the game pushes snapshots, notices and sound cues back through its sinks.
    """

    def __init__(
        self,
        layouts: LayoutRepository,
        progress_store: ProgressStore,
        preferences_store: PreferencesStore,
    ) -> None:
        super().__init__()
        self._preferences_store = preferences_store
        self._preferences = preferences_store.load()
        self._theme: Theme = DARK_THEME if self._preferences.dark_mode else LIGHT_THEME
        self._input = InputPort()
        self._sounds = SoundBoard(self)
        self._sounds.set_enabled(self._preferences.sound_enabled)
        self._game = MazeGame(
            layouts,
            progress_store,
            sinks=Sinks(render=self._render, notify=self._notify, sound=self._sounds.play),
        )
        self._registry = GameRegistry()
        self._registry.register("maze", self._game)
        self._game.bind_input(self._input)

        self._color_buttons: Dict[str, QPushButton] = {}
        self._pending_confirm: Optional[str] = None
        self._result_intent: Optional[str] = None
        self._last_tick = time.monotonic()

        self._build_ui()
        self._apply_theme()

        self._registry.init_all()
        self._registry.switch_to("maze")

        self._tick_timer = QTimer(self)
        self._tick_timer.setInterval(TICK_INTERVAL_MS)
        self._tick_timer.timeout.connect(self._on_tick)
        self._tick_timer.start()

    def _build_ui(self) -> None:
        self.setWindowTitle("Memory Maze")
        root = QWidget()
        self.setCentralWidget(root)
        outer = QHBoxLayout(root)
        outer.setContentsMargins(24, 24, 24, 24)
        outer.setSpacing(24)

        self._board = MazeBoard()
        outer.addWidget(self._board, 3)

        side = QFrame()
        side.setObjectName("sidePanel")
        side_layout = QVBoxLayout(side)
        side_layout.setSpacing(14)

        stats = QGridLayout()
        self._level_label = QLabel()
        self._score_label = QLabel()
        self._lives_label = QLabel()
        self._gates_label = QLabel()
        for row, (caption, label) in enumerate(
            (
                ("Level", self._level_label),
                ("Score", self._score_label),
                ("Lives", self._lives_label),
                ("Gates", self._gates_label),
            )
        ):
            stats.addWidget(QLabel(caption), row, 0)
            stats.addWidget(label, row, 1, Qt.AlignRight)
        side_layout.addLayout(stats)

        self._panel = QFrame()
        panel_layout = QVBoxLayout(self._panel)
        self._status_label = QLabel()
        self._status_label.setWordWrap(True)
        self._status_label.setAlignment(Qt.AlignCenter)
        panel_layout.addWidget(self._status_label)
        self._dots = SequenceDots()
        panel_layout.addWidget(self._dots)
        self._start_btn = QPushButton("Start Sequence")
        self._start_btn.clicked.connect(lambda: self._input.emit("start-sequence"))
        self._start_btn.setFocusPolicy(Qt.NoFocus)
        panel_layout.addWidget(self._start_btn)
        color_row = QHBoxLayout()
        for color in COLORS:
            btn = QPushButton()
            btn.setFixedSize(44, 44)
            btn.setToolTip(color.title())
            btn.setFocusPolicy(Qt.NoFocus)
            btn.clicked.connect(lambda checked=False, c=color: self._input.emit(c))
            color_row.addWidget(btn)
            self._color_buttons[color] = btn
        panel_layout.addLayout(color_row)
        self._panel.hide()
        side_layout.addWidget(self._panel)
        side_layout.addStretch(1)

        controls = QHBoxLayout()
        reset_btn = QPushButton("Reset")
        reset_btn.clicked.connect(self._confirm_reset)
        new_maze_btn = QPushButton("New Maze")
        new_maze_btn.clicked.connect(self._confirm_new_maze)
        theme_btn = QPushButton("Theme")
        theme_btn.clicked.connect(self._toggle_theme)
        for btn in (reset_btn, new_maze_btn, theme_btn):
            btn.setFocusPolicy(Qt.NoFocus)
            controls.addWidget(btn)
        side_layout.addLayout(controls)

        self._sound_toggle = QCheckBox("Sound")
        self._sound_toggle.setChecked(self._sounds.is_enabled())
        self._sound_toggle.toggled.connect(self._set_sound_enabled)
        self._sound_toggle.setFocusPolicy(Qt.NoFocus)
        side_layout.addWidget(self._sound_toggle)

        outer.addWidget(side, 2)

        self._toast = Toast(root)
        self._confirm_overlay = ConfirmOverlay(root)
        self._confirm_overlay.closed.connect(self._on_confirm_closed)
        self._result_overlay = ResultOverlay(root)
        self._result_overlay.closed.connect(self._on_result_closed)

        self.setFocusPolicy(Qt.StrongFocus)

    def _apply_theme(self) -> None:
        t = self._theme
        self.setStyleSheet(
            f"""
            QMainWindow, QWidget {{ background: {t.background}; color: {t.text_primary}; font-size: 14px; }}
            QFrame#sidePanel {{ background: {t.panel}; border-radius: 16px; }}
            QPushButton {{ padding: 8px 12px; border-radius: 10px; border: 1px solid {t.primary}; }}
            QPushButton:disabled {{ color: {t.text_muted}; border-color: {t.text_muted}; }}
            """
        )
        self._board.set_theme(t)

    def _toggle_theme(self) -> None:
        self._theme = DARK_THEME if self._theme is LIGHT_THEME else LIGHT_THEME
        self._apply_theme()
        self._registry.redraw_all()
        self._preferences.dark_mode = self._theme is DARK_THEME
        self._preferences_store.save(self._preferences)

    def _set_sound_enabled(self, enabled: bool) -> None:
        self._sounds.set_enabled(enabled)
        self._preferences.sound_enabled = self._sounds.is_enabled()
        self._preferences_store.save(self._preferences)

    # ------------------------------------------------------------------
    # Game sinks
    # ------------------------------------------------------------------

    def _render(self, snapshot: MazeSnapshot) -> None:
        self._board.set_snapshot(snapshot)
        self._level_label.setText(str(snapshot.level))
        self._score_label.setText(str(snapshot.score))
        self._lives_label.setText("❤️" * snapshot.lives or "💔")
        self._gates_label.setText(f"{snapshot.gates_solved}/{snapshot.total_gates}")

        challenge = snapshot.challenge
        if challenge is None:
            self._panel.hide()
            return
        self._panel.show()
        self._status_label.setText(challenge.status)
        self._dots.set_markers(challenge.markers)
        if challenge.phase is ChallengePhase.PLAYING_BACK:
            self._start_btn.setText("Watch...")
            self._start_btn.setEnabled(False)
        elif challenge.phase is ChallengePhase.AWAITING_INPUT:
            self._start_btn.setText("Replay")
            self._start_btn.setEnabled(True)
        else:
            self._start_btn.setText("Start Sequence")
            self._start_btn.setEnabled(True)
        for color, btn in self._color_buttons.items():
            fill = lit_color(color) if challenge.lit_color == color else SEQUENCE_COLORS[color]
            btn.setStyleSheet(f"QPushButton {{ background: {fill}; border-radius: 22px; border: 2px solid white; }}")
            btn.setEnabled(challenge.input_enabled)

    def _notify(self, notice: Notice) -> None:
        if notice.kind is NoticeKind.LEVEL_COMPLETE:
            self._result_intent = "next-level"
            self._result_overlay.present(
                "🏆",
                "Level Complete!",
                f"You've escaped the maze!\nScore: {notice.score} | Next: Level {notice.level}",
                "Next Level",
            )
            return
        if notice.kind is NoticeKind.GAME_OVER:
            self._result_intent = "reset"
            self._result_overlay.present(
                "💀",
                "Game Over!",
                f"You ran out of lives!\nFinal Score: {notice.score}",
                "Play Again",
            )
            return

        icon, title, kind = TOASTS[notice.kind]
        messages = {
            NoticeKind.CHALLENGE_STARTED: f"Memorize {notice.sequence_length} colors",
            NoticeKind.GATE_UNLOCKED: f"+{notice.points} points",
            NoticeKind.SEQUENCE_WRONG: f"{notice.lives} lives remaining",
            NoticeKind.GATES_LOCKED: "Unlock all gates to complete the level",
            NoticeKind.GAME_RESET: "Ready to explore!",
            NoticeKind.NEW_MAZE: "Explore the new layout!",
        }
        self._toast.show_message(icon, title, messages[notice.kind], kind)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def keyPressEvent(self, event: QKeyEvent) -> None:
        intent = KEY_INTENTS.get(event.key())
        if intent is None or self._confirm_overlay.isVisible() or self._result_overlay.isVisible():
            super().keyPressEvent(event)
            return
        self._input.emit(intent)
        event.accept()

    def _confirm_reset(self) -> None:
        self._pending_confirm = "reset"
        self._confirm_overlay.ask("🔄", "Reset Game?", "This will reset all progress. Continue?", "Reset")

    def _confirm_new_maze(self) -> None:
        self._pending_confirm = "new-maze"
        self._confirm_overlay.ask("🗺️", "New Maze?", "Generate a new maze layout?", "New Maze")

    def _on_confirm_closed(self, ok: bool) -> None:
        intent, self._pending_confirm = self._pending_confirm, None
        if ok and intent is not None:
            self._input.emit(intent)
        self.setFocus()

    def _on_result_closed(self) -> None:
        intent, self._result_intent = self._result_intent, None
        if intent is not None:
            self._input.emit(intent)
        self.setFocus()

    def _on_tick(self) -> None:
        now = time.monotonic()
        elapsed_ms = (now - self._last_tick) * 1000.0
        self._last_tick = now
        self._game.tick(elapsed_ms)

    def closeEvent(self, event: QCloseEvent) -> None:
        """Release input subscriptions and temporary sound files on exit."""
        self._tick_timer.stop()
        self._registry.shutdown()
        self._sounds.close()
        super().closeEvent(event)
