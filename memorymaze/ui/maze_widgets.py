"""Maze board and sequence-progress widgets."""

from __future__ import annotations

from typing import List, Optional

from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QWidget

from memorymaze.core.events import MazeSnapshot
from memorymaze.core.layouts import CellKind, Position
from memorymaze.core.sequence import MarkerState
from memorymaze.ui.colors import LIGHT_THEME, Theme


class MazeBoard(QWidget):
    """Square grid of cells with the player drawn as a circle."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._snapshot: Optional[MazeSnapshot] = None
        self._theme: Theme = LIGHT_THEME
        self.setMinimumSize(330, 330)

    def set_theme(self, theme: Theme) -> None:
        self._theme = theme
        self.update()

    def set_snapshot(self, snapshot: MazeSnapshot) -> None:
        self._snapshot = snapshot
        self.update()

    def paintEvent(self, event) -> None:
        super().paintEvent(event)
        snapshot = self._snapshot
        if snapshot is None:
            return
        layout = snapshot.layout
        theme = self._theme
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)

        gap = 2
        cell = min(
            (self.width() - gap * (layout.width - 1)) / layout.width,
            (self.height() - gap * (layout.height - 1)) / layout.height,
        )
        total_w = layout.width * cell + gap * (layout.width - 1)
        total_h = layout.height * cell + gap * (layout.height - 1)
        ox = (self.width() - total_w) / 2
        oy = (self.height() - total_h) / 2
        active_gate = snapshot.challenge.gate if snapshot.challenge is not None else None

        def rect_at(pos: Position) -> QRectF:
            return QRectF(ox + pos.x * (cell + gap), oy + pos.y * (cell + gap), cell, cell)

        painter.setPen(Qt.NoPen)
        for y, row in enumerate(layout.grid):
            for x, kind in enumerate(row):
                pos = Position(x, y)
                fill = {
                    CellKind.WALL: theme.wall,
                    CellKind.START: theme.start,
                    CellKind.END: theme.end,
                }.get(kind, theme.path)
                if kind == CellKind.GATE:
                    fill = theme.gate_unlocked if snapshot.gates.get(pos) else theme.gate_locked
                painter.setBrush(QColor(fill))
                painter.drawRoundedRect(rect_at(pos), 4, 4)
                if pos == active_gate:
                    painter.setBrush(Qt.NoBrush)
                    painter.setPen(QPen(QColor(theme.primary), 3))
                    painter.drawRoundedRect(rect_at(pos).adjusted(1, 1, -1, -1), 4, 4)
                    painter.setPen(Qt.NoPen)
                if kind == CellKind.GATE and not snapshot.gates.get(pos):
                    painter.setPen(QColor(theme.text_primary))
                    painter.drawText(rect_at(pos), Qt.AlignCenter, "🔒")
                    painter.setPen(Qt.NoPen)

        player_rect = rect_at(snapshot.player).adjusted(cell * 0.18, cell * 0.18, -cell * 0.18, -cell * 0.18)
        painter.setBrush(QColor(theme.player))
        painter.setPen(QPen(QColor("#ffffff"), 2))
        painter.drawEllipse(player_rect)


class SequenceDots(QWidget):
    """Row of dots: completed (green), wrong (red), pending (gray)."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._markers: List[MarkerState] = []
        self.setFixedHeight(28)
        self.setMinimumWidth(120)

    def set_markers(self, markers: List[MarkerState]) -> None:
        self._markers = list(markers)
        self.update()

    def paintEvent(self, event) -> None:
        super().paintEvent(event)
        if not self._markers:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        size = 14
        spacing = 8
        total_width = len(self._markers) * (size + spacing) - spacing
        start_x = max(0, (self.width() - total_width) // 2)
        y = (self.height() - size) // 2
        for i, marker in enumerate(self._markers):
            if marker is MarkerState.COMPLETED:
                painter.setBrush(QColor("#43A047"))
            elif marker is MarkerState.WRONG:
                painter.setBrush(QColor("#E53935"))
            else:
                painter.setBrush(QColor("#b0bec5"))
            painter.setPen(Qt.NoPen)
            painter.drawEllipse(start_x + i * (size + spacing), y, size, size)
