"""Application entry point and setup for the Memory Maze game."""

import logging
import os
import sys

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from memorymaze.core.layouts import LayoutRepository
from memorymaze.core.preferences import PreferencesStore
from memorymaze.core.progress import ProgressStore
from memorymaze.ui.main_window import MainWindow


def configure_logging() -> None:
    """Configure application-wide logging; ``MEMORYMAZE_LOG_LEVEL`` picks the level."""
    level_name = os.environ.get("MEMORYMAZE_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Load the maze catalog and saved progress, then start the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Memory Maze")
    app.setApplicationDisplayName("Memory Maze")

    layouts = LayoutRepository()
    progress_store = ProgressStore()
    preferences_store = PreferencesStore()
    logging.info("Loaded %d maze templates; progress file %s", len(layouts), progress_store.file_path)

    window = MainWindow(layouts=layouts, progress_store=progress_store, preferences_store=preferences_store)
    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        geometry = screen.availableGeometry()
        window.resize(min(960, geometry.width()), min(640, geometry.height()))
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
