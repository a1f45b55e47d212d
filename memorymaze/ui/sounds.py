"""Short synthesized tones for the game's sound cues."""

from __future__ import annotations

import logging
import math
import shutil
import struct
import tempfile
import wave
from pathlib import Path
from typing import Dict, List, Optional

from PySide6.QtCore import QObject, QUrl
from PySide6.QtMultimedia import QSoundEffect

from memorymaze.core.events import SoundCue

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050

# C4 E4 G4 C5 E5, one note per gate color
COLOR_FREQUENCIES = {
    "red": 261.63,
    "yellow": 329.63,
    "green": 392.00,
    "blue": 523.25,
    "purple": 659.25,
}

# (frequency, seconds) notes per cue
CUE_NOTES = {
    SoundCue.MOVE: [(300.0, 0.04)],
    SoundCue.BLOCKED: [(200.0, 0.2)],
    SoundCue.UNLOCK: [(523.0, 0.1), (659.0, 0.1), (784.0, 0.15)],
    SoundCue.FAIL: [(200.0, 0.2)],
    SoundCue.WIN: [(440.0, 0.1), (554.0, 0.1), (659.0, 0.1), (880.0, 0.2)],
    SoundCue.LOSE: [(200.0, 0.2), (150.0, 0.2), (100.0, 0.2)],
}


def _sine(freq: float, duration: float, volume: float = 0.25) -> List[float]:
    n = int(SAMPLE_RATE * duration)
    samples = []
    for i in range(n):
        env = min(1.0, i / (SAMPLE_RATE * 0.003)) * max(0.0, 1.0 - i / n)
        samples.append(math.sin(2 * math.pi * freq * i / SAMPLE_RATE) * volume * env)
    return samples


def _write_wav(path: Path, samples: List[float]) -> None:
    with wave.open(str(path), "w") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(SAMPLE_RATE)
        w.writeframes(b"".join(struct.pack("<h", int(max(-0.95, min(0.95, s)) * 32767)) for s in samples))


class SoundBoard(QObject):
    """Plays cue tones. Owns the mute flag; the game never sees it."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._enabled = True
        self._dir = Path(tempfile.mkdtemp(prefix="memorymaze-sfx-"))
        self._effects: Dict[str, QSoundEffect] = {}
        try:
            self._generate()
        except OSError as e:
            logger.warning("Could not prepare sound effects: %s", e)

    def is_enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)

    def play(self, cue: SoundCue, color: Optional[str] = None) -> None:
        if not self._enabled:
            return
        key = f"color-{color}" if cue is SoundCue.COLOR_TONE else cue.value
        effect = self._effects.get(key)
        if effect is not None:
            effect.play()

    def close(self) -> None:
        shutil.rmtree(self._dir, ignore_errors=True)

    def _generate(self) -> None:
        for color, freq in COLOR_FREQUENCIES.items():
            self._add(f"color-{color}", _sine(freq, 0.3))
        for cue, notes in CUE_NOTES.items():
            samples: List[float] = []
            for freq, duration in notes:
                samples.extend(_sine(freq, duration))
            self._add(cue.value, samples)

    def _add(self, key: str, samples: List[float]) -> None:
        path = self._dir / f"{key}.wav"
        _write_wav(path, samples)
        effect = QSoundEffect(self)
        effect.setSource(QUrl.fromLocalFile(str(path)))
        self._effects[key] = effect
