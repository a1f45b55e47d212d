"""Custom in-window overlays (confirmation, game result) and toasts."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QEvent, Qt, QTimer, Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

_PRIMARY = "#00838f"
_PRIMARY_LIGHT = "#4fb3bf"

TOAST_COLORS = {
    "info": "#00838f",
    "success": "#2e7d32",
    "warning": "#ef6c00",
    "error": "#c62828",
}


def _themed_card_container(radius: int = 20, object_name: str = "overlayContainer") -> QFrame:
    container = QFrame()
    container.setObjectName(object_name)
    container.setMinimumWidth(360)
    container.setMaximumWidth(440)
    container.setStyleSheet(
        f"""
        QFrame#{object_name} {{
            background: #ffffff;
            border: 1px solid rgba(0, 131, 143, 0.12);
            border-radius: {radius}px;
        }}
        """
    )
    shadow = QGraphicsDropShadowEffect(container)
    shadow.setBlurRadius(20)
    shadow.setOffset(0, 6)
    shadow.setColor(QColor(0, 80, 100, 25))
    container.setGraphicsEffect(shadow)
    return container


def _overlay_background(parent: QWidget, on_click: Callable[[], None]) -> QWidget:
    overlay_bg = QWidget(parent)
    overlay_bg.setStyleSheet("background: rgba(0, 0, 0, 0.2);")
    overlay_bg.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
    overlay_bg.setMinimumSize(1, 1)
    overlay_bg.mousePressEvent = lambda e: on_click()
    return overlay_bg


def _secondary_button_style() -> str:
    return """
        QPushButton {
            background: #fafafa;
            color: #1a3a3a;
            padding: 10px 16px;
            border: 1px solid #e0e0e0;
            border-radius: 12px;
            font-weight: 600;
            font-size: 13px;
        }
        QPushButton:hover {
            border-color: #00838f;
            color: #00838f;
        }
    """


def _primary_button_style() -> str:
    return f"""
        QPushButton {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                stop:0 {_PRIMARY_LIGHT}, stop:1 {_PRIMARY});
            color: white;
            padding: 10px 16px;
            border: none;
            border-radius: 12px;
            font-weight: 600;
            font-size: 13px;
        }}
        QPushButton:hover {{ background: {_PRIMARY}; }}
    """


def _button(text: str, style: str, on_click: Callable[[], None]) -> QPushButton:
    btn = QPushButton(text)
    btn.setStyleSheet(style)
    btn.setCursor(Qt.CursorShape.PointingHandCursor)
    btn.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
    btn.clicked.connect(on_click)
    return btn


class _CardOverlay(QWidget):
    """Dimmed full-parent overlay with a centered card: icon, title, message, buttons."""

    def __init__(self, parent: Optional[QWidget], object_name: str) -> None:
        super().__init__(parent)
        main_layout = QGridLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)
        main_layout.setRowStretch(0, 1)
        main_layout.setColumnStretch(0, 1)
        main_layout.addWidget(_overlay_background(self, self._dismiss), 0, 0)

        container = _themed_card_container(object_name=object_name)
        self._content = QVBoxLayout(container)
        self._content.setContentsMargins(28, 24, 28, 24)
        self._content.setSpacing(18)

        header = QHBoxLayout()
        header.setSpacing(12)
        self._icon_label = QLabel()
        self._icon_label.setFixedSize(44, 44)
        self._icon_label.setAlignment(Qt.AlignCenter)
        self._icon_label.setStyleSheet(
            """
            QLabel {
                background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                    stop:0 #e0f7fa, stop:1 #b2ebf2);
                border-radius: 12px;
                font-size: 22px;
            }
            """
        )
        header.addWidget(self._icon_label, 0)
        self._title_label = QLabel()
        self._title_label.setStyleSheet(f"color: {_PRIMARY}; font-size: 18px; font-weight: 800;")
        header.addWidget(self._title_label, 0)
        header.addStretch(1)
        self._content.addLayout(header)

        self._message_label = QLabel()
        self._message_label.setStyleSheet("color: #1a3a3a; font-size: 14px; font-weight: 500;")
        self._message_label.setWordWrap(True)
        self._content.addWidget(self._message_label, 0)

        main_layout.addWidget(container, 0, 0, 1, 1, Qt.AlignCenter)
        self.hide()

    def set_content(self, icon: str, title: str, message: str) -> None:
        self._icon_label.setText(icon)
        self._title_label.setText(title)
        self._message_label.setText(message)

    def _dismiss(self) -> None:
        raise NotImplementedError

    def _update_geometry(self) -> None:
        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())

    def eventFilter(self, obj: QWidget, event: QEvent) -> bool:
        if obj is self.parentWidget() and event.type() == QEvent.Type.Resize:
            self._update_geometry()
        return super().eventFilter(obj, event)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self._update_geometry()
        self.raise_()
        parent = self.parentWidget()
        if parent is not None:
            parent.installEventFilter(self)

    def hideEvent(self, event) -> None:
        parent = self.parentWidget()
        if parent is not None:
            parent.removeEventFilter(self)
        super().hideEvent(event)


class ConfirmOverlay(_CardOverlay):
    """In-window yes/no confirmation."""

    closed = Signal(bool)  # True if user confirmed

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent, "confirmContainer")
        btn_row = QHBoxLayout()
        btn_row.setSpacing(10)
        btn_row.addWidget(_button("Cancel", _secondary_button_style(), lambda: self._finish(False)), 1)
        self._confirm_btn = _button("Confirm", _primary_button_style(), lambda: self._finish(True))
        btn_row.addWidget(self._confirm_btn, 1)
        self._content.addLayout(btn_row)

    def ask(self, icon: str, title: str, message: str, confirm_text: str = "Confirm") -> None:
        self.set_content(icon, title, message)
        self._confirm_btn.setText(confirm_text)
        self.show()

    def _dismiss(self) -> None:
        self._finish(False)

    def _finish(self, ok: bool) -> None:
        self.hide()
        self.closed.emit(ok)


class ResultOverlay(_CardOverlay):
    """In-window overlay for level-complete and game-over results."""

    closed = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent, "resultContainer")
        self._ok_btn = _button("Play Again", _primary_button_style(), self._dismiss)
        self._content.addWidget(self._ok_btn, 0)

    def present(self, icon: str, title: str, message: str, button_text: str) -> None:
        self.set_content(icon, title, message)
        self._ok_btn.setText(button_text)
        self.show()

    def _dismiss(self) -> None:
        self.hide()
        self.closed.emit()


class Toast(QLabel):
    """Transient message pinned to the top of its parent."""

    def __init__(self, parent: QWidget) -> None:
        super().__init__(parent)
        self.setAlignment(Qt.AlignCenter)
        self.setWordWrap(True)
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self.hide)
        self.hide()

    def show_message(self, icon: str, title: str, message: str, kind: str = "info", duration_ms: int = 2500) -> None:
        color = TOAST_COLORS.get(kind, _PRIMARY)
        self.setStyleSheet(
            f"""
            QLabel {{
                background: {color};
                color: white;
                padding: 10px 18px;
                border-radius: 12px;
                font-size: 13px;
                font-weight: 600;
            }}
            """
        )
        self.setText(f"{icon}  {title}\n{message}")
        self.adjustSize()
        parent = self.parentWidget()
        if parent is not None:
            self.move((parent.width() - self.width()) // 2, 16)
        self.raise_()
        self.show()
        self._timer.start(duration_ms)
