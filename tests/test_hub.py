"""Tests for memorymaze.core.hub and the InputPort fan-out."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from memorymaze.core.events import InputPort
from memorymaze.core.game import MazeGame
from memorymaze.core.hub import GameRegistry
from memorymaze.core.layouts import LayoutRepository, Position
from memorymaze.core.progress import ProgressStore


class FakeGame:
    """Records lifecycle calls in order."""

    def __init__(self, log: List[str], name: str) -> None:
        self._log = log
        self._name = name

    def init(self) -> None:
        self._log.append(f"{self._name}.init")

    def activate(self) -> None:
        self._log.append(f"{self._name}.activate")

    def pause(self) -> None:
        self._log.append(f"{self._name}.pause")

    def cleanup(self) -> None:
        self._log.append(f"{self._name}.cleanup")

    def redraw(self) -> None:
        self._log.append(f"{self._name}.redraw")


@pytest.fixture()
def log() -> List[str]:
    return []


@pytest.fixture()
def registry(log: List[str]) -> GameRegistry:
    hub = GameRegistry()
    hub.register("maze", FakeGame(log, "maze"))
    hub.register("other", FakeGame(log, "other"))
    return hub


# ---------------------------------------------------------------------------
# GameRegistry
# ---------------------------------------------------------------------------

class TestGameRegistry:
    def test_names_in_registration_order(self, registry: GameRegistry):
        assert registry.names() == ["maze", "other"]
        assert registry.current is None

    def test_duplicate_name_rejected(self, registry: GameRegistry, log: List[str]):
        with pytest.raises(ValueError, match="maze"):
            registry.register("maze", FakeGame(log, "again"))

    def test_init_all(self, registry: GameRegistry, log: List[str]):
        registry.init_all()
        assert log == ["maze.init", "other.init"]

    def test_first_switch_only_activates(self, registry: GameRegistry, log: List[str]):
        registry.switch_to("maze")
        assert log == ["maze.activate"]
        assert registry.current == "maze"

    def test_switch_order(self, registry: GameRegistry, log: List[str]):
        registry.switch_to("maze")
        log.clear()
        registry.switch_to("other")
        assert log == ["maze.cleanup", "maze.pause", "other.activate"]
        assert registry.current == "other"

    def test_switch_to_current_is_noop(self, registry: GameRegistry, log: List[str]):
        registry.switch_to("maze")
        log.clear()
        registry.switch_to("maze")
        assert log == []

    def test_unknown_game(self, registry: GameRegistry):
        with pytest.raises(KeyError):
            registry.switch_to("snake")
        assert registry.current is None

    def test_redraw_all(self, registry: GameRegistry, log: List[str]):
        registry.redraw_all()
        assert log == ["maze.redraw", "other.redraw"]

    def test_shutdown_cleans_up_everything(self, registry: GameRegistry, log: List[str]):
        registry.shutdown()
        assert log == ["maze.cleanup", "other.cleanup"]


# ---------------------------------------------------------------------------
# InputPort
# ---------------------------------------------------------------------------

class TestInputPort:
    def test_fan_out(self):
        port = InputPort()
        seen_a: List[str] = []
        seen_b: List[str] = []
        port.subscribe(seen_a.append)
        port.subscribe(seen_b.append)
        port.emit("up")
        assert seen_a == ["up"]
        assert seen_b == ["up"]

    def test_unsubscribe(self):
        port = InputPort()
        seen: List[str] = []
        unsubscribe = port.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        port.emit("red")
        assert seen == []
        assert port.subscriber_count == 0

    def test_handler_may_unsubscribe_while_emitting(self):
        port = InputPort()
        seen: List[str] = []
        unsubscribe = None

        def once(intent: str) -> None:
            seen.append(intent)
            unsubscribe()

        unsubscribe = port.subscribe(once)
        port.emit("left")
        port.emit("left")
        assert seen == ["left"]


# ---------------------------------------------------------------------------
# Maze game hosted in the hub
# ---------------------------------------------------------------------------

class TestHostedMaze:
    def test_background_game_ignores_input(self, tmp_path: Path, log: List[str]):
        port = InputPort()
        maze = MazeGame(LayoutRepository(), ProgressStore(tmp_path / "progress.json"))
        maze.bind_input(port)

        hub = GameRegistry()
        hub.register("maze", maze)
        hub.register("other", FakeGame(log, "other"))
        hub.init_all()
        hub.switch_to("maze")

        port.emit("right")
        assert maze.player.position == Position(2, 1)

        hub.switch_to("other")
        assert maze.paused
        port.emit("right")
        assert maze.player.position == Position(2, 1)

        hub.switch_to("maze")
        assert not maze.paused
        port.emit("right")
        assert maze.player.position == Position(3, 1)
