from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from memorymaze.core.config import GameConfig, progress_file
from memorymaze.core.gates import Gate
from memorymaze.core.layouts import Position

logger = logging.getLogger(__name__)


@dataclass
class ProgressRecord:
    level: int = 1
    score: int = 0
    lives: int = 3
    gates: Dict[Position, Gate] = field(default_factory=dict)

    @property
    def gates_solved(self) -> int:
        return sum(1 for gate in self.gates.values() if gate.unlocked)

    def unlock_map(self) -> Dict[Position, bool]:
        return {pos: gate.unlocked for pos, gate in self.gates.items()}


def write_json_atomic(path: Path, payload: Any) -> None:
    """Write ``payload`` next to ``path`` and swap it in, so readers never see half a file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp_path.replace(path)
    finally:
        tmp_path.unlink(missing_ok=True)


def _int_field(payload: Dict[str, Any], key: str, default: int, minimum: int) -> int:
    value = payload.get(key, default)
    if isinstance(value, bool):
        return default
    try:
        value = int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid %r in saved progress: %r", key, payload.get(key))
        return default
    return value if value >= minimum else default


def _parse_gates(raw: Any) -> Dict[Position, Gate]:
    """Rebuild the gate map. Any malformed entry discards the whole map."""
    if raw is None:
        return {}
    gates: Dict[Position, Gate] = {}
    try:
        if not isinstance(raw, list):
            raise TypeError(f"expected a list, got {type(raw).__name__}")
        for entry in raw:
            pos = Position(int(entry["x"]), int(entry["y"]))
            length = int(entry["sequence_length"])
            if length < 1:
                raise ValueError(f"gate ({pos.x}, {pos.y}) has sequence_length {length}")
            unlocked = entry.get("unlocked", False)
            if not isinstance(unlocked, bool):
                raise TypeError(f"gate ({pos.x}, {pos.y}) has non-boolean unlocked {unlocked!r}")
            gates[pos] = Gate(position=pos, sequence_length=length, unlocked=unlocked)
    except (TypeError, ValueError, KeyError, AttributeError) as e:
        logger.warning("Discarding malformed gate data in saved progress: %s", e)
        return {}
    return gates


class ProgressStore:
    """Persists maze progress (level, score, lives, gate unlocks) as JSON.

    File: ~/.memorymaze/progress.json unless configured otherwise. Writes are
    best-effort; a failing disk only costs durability for this session.
    """

    def __init__(self, file_path: Optional[Path] = None, config: Optional[GameConfig] = None) -> None:
        self._file_path = file_path or progress_file()
        self._config = config or GameConfig()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> ProgressRecord:
        record = ProgressRecord(lives=self._config.max_lives)
        if not self._file_path.exists():
            return record
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return record
        if not isinstance(payload, dict):
            logger.warning("Could not load progress from %s: not a JSON object", self._file_path)
            return record

        record.level = _int_field(payload, "level", 1, 1)
        record.score = _int_field(payload, "score", 0, 0)
        # a spent life counter (after game over) comes back as a full set
        record.lives = min(_int_field(payload, "lives", self._config.max_lives, 1), self._config.max_lives)
        record.gates = _parse_gates(payload.get("gates"))

        stored_solved = payload.get("gates_solved")
        if stored_solved is not None and stored_solved != record.gates_solved:
            logger.info(
                "Stored gates_solved=%r disagrees with gate map (%d); using gate map",
                stored_solved,
                record.gates_solved,
            )
        return record

    def save(self, record: ProgressRecord) -> None:
        payload = {
            "level": record.level,
            "score": record.score,
            "lives": record.lives,
            "gates": _serialize_gates(record.gates.values()),
            "gates_solved": record.gates_solved,
        }
        try:
            write_json_atomic(self._file_path, payload)
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)

    def clear(self) -> None:
        """Remove all saved progress. Only used by an explicit reset."""
        try:
            self._file_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not clear progress at %s: %s", self._file_path, e)


def _serialize_gates(gates) -> List[Dict[str, Any]]:
    return [
        {
            "x": gate.position.x,
            "y": gate.position.y,
            "unlocked": gate.unlocked,
            "sequence_length": gate.sequence_length,
        }
        for gate in gates
    ]
