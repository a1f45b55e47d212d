"""Theme colors and color utilities for the UI."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    name: str
    background: str
    panel: str
    text_primary: str
    text_muted: str
    primary: str
    wall: str
    path: str
    gate_locked: str
    gate_unlocked: str
    start: str
    end: str
    player: str


LIGHT_THEME = Theme(
    name="light",
    background="#e0f7fa",
    panel="#ffffff",
    text_primary="#1a3a3a",
    text_muted="#78909c",
    primary="#00838f",
    wall="#37474f",
    path="#f8fcfd",
    gate_locked="#ff8a65",
    gate_unlocked="#69f0ae",
    start="#b2ebf2",
    end="#ffb74d",
    player="#00838f",
)

DARK_THEME = Theme(
    name="dark",
    background="#102027",
    panel="#1c313a",
    text_primary="#e0f2f1",
    text_muted="#90a4ae",
    primary="#4fb3bf",
    wall="#0b1418",
    path="#2c3e46",
    gate_locked="#e64a19",
    gate_unlocked="#00c853",
    start="#005662",
    end="#f57c00",
    player="#80deea",
)

# Fill of each sequence color at rest; lit buttons blend toward white.
SEQUENCE_COLORS = {
    "red": "#E53935",
    "yellow": "#FDD835",
    "green": "#43A047",
    "blue": "#1E88E5",
    "purple": "#8E24AA",
}


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    a = a.strip()
    b = b.strip()
    if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
        return a
    try:
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
    except ValueError:
        return a
    t = max(0.0, min(1.0, float(t)))
    r = int(ar + (br - ar) * t)
    g = int(ag + (bg - ag) * t)
    bl = int(ab + (bb - ab) * t)
    return f"#{r:02X}{g:02X}{bl:02X}"


def lit_color(color: str) -> str:
    """Highlighted variant of a sequence color."""
    return blend_hex(SEQUENCE_COLORS.get(color, "#9E9E9E"), "#FFFFFF", 0.55)
