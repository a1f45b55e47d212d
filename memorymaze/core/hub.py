from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol


logger = logging.getLogger(__name__)


class HostedGame(Protocol):
    def init(self) -> None: ...

    def activate(self) -> None: ...

    def pause(self) -> None: ...

    def cleanup(self) -> None: ...

    def redraw(self) -> None: ...


class GameRegistry:
    """Games hosted by the hub, with at most one in the foreground."""

    def __init__(self) -> None:
        self._games: Dict[str, HostedGame] = {}
        self._current: Optional[str] = None

    def register(self, name: str, game: HostedGame) -> None:
        if name in self._games:
            raise ValueError(f"Game already registered: {name}")
        self._games[name] = game

    def get(self, name: str) -> HostedGame:
        return self._games[name]

    def names(self) -> List[str]:
        return list(self._games)

    @property
    def current(self) -> Optional[str]:
        return self._current

    def init_all(self) -> None:
        for game in self._games.values():
            game.init()

    def switch_to(self, name: str) -> None:
        """Send the current game to the background and bring ``name`` forward."""
        if name not in self._games:
            raise KeyError(f"Unknown game: {name}")
        if name == self._current:
            return
        if self._current is not None:
            previous = self._games[self._current]
            previous.cleanup()
            previous.pause()
        logger.info("Switching from %s to %s", self._current, name)
        self._current = name
        self._games[name].activate()

    def redraw_all(self) -> None:
        """Repaint every game, e.g. after a theme change."""
        for game in self._games.values():
            game.redraw()

    def shutdown(self) -> None:
        for game in self._games.values():
            game.cleanup()
