"""
palette.py — Seeded six-token palette generation.

Usage:
    from aesthetic.palette import generate_palette

    palette = generate_palette("abc123", Mode.LIGHT, Mood.MINIMAL)

Draw order is part of the output contract: changing the order of draws
changes every palette a given seed produces.
"""

from __future__ import annotations

from typing import Mapping, Optional

from .color_math import NEAR_BLACK, hsl_to_rgb, mix_hex, rgb_to_hex
from .models import DEFAULT_PALETTE, TOKENS, Palette
from .moods import Mode, Mood, mood_rules
from .rng import SeededRandom

DARK_MODE_TEXT = "#eaf0ff"
LIGHT_MODE_TEXT = NEAR_BLACK


def palette_rng(seed: str, mode: Mode, mood: Mood) -> SeededRandom:
    return SeededRandom.from_seed(f"{seed}|palette|{Mode.parse(mode).value}|{Mood.parse(mood).value}")


def _hsl_hex(h: float, s: float, l: float) -> str:
    return rgb_to_hex(hsl_to_rgb(h, s, l))


def generate_palette(
    seed: str,
    mode: Mode,
    mood: Mood,
    previous: Optional[Palette] = None,
    token_locks: Optional[Mapping[str, bool]] = None,
) -> Palette:
    """
    Generate a complete palette for (seed, mode, mood).

    Tokens flagged in `token_locks` keep their value from `previous`. The
    palette group lock is not handled here: when it is set the caller reuses
    the previous palette and never calls this function.
    """
    mode = Mode.parse(mode)
    rng = palette_rng(seed, mode, mood)
    rules = mood_rules(mood, mode)

    neutral_hue = rules.neutral_hue(rng)
    neutral_sat = rng.randint(*rules.neutral_sat)

    bg = _hsl_hex(neutral_hue, neutral_sat, rng.randint(*rules.bg_l))
    surface = _hsl_hex(
        neutral_hue,
        neutral_sat + rng.randint(0, 8),
        rng.randint(*rules.surface_l),
    )

    base_hue = rng.randint(*rules.color_hue)
    accent_hue = (base_hue + rng.randint(*rules.accent_hue_offset)) % 360

    primary = _hsl_hex(base_hue, rng.randint(*rules.color_sat), rng.randint(*rules.color_l))
    accent = _hsl_hex(accent_hue, rng.randint(*rules.accent_sat), rng.randint(*rules.accent_l))

    # Fixed text keeps the default contrast high; only bg/surface vary
    text = DARK_MODE_TEXT if mode is Mode.DARK else LIGHT_MODE_TEXT
    muted = mix_hex(text, bg, rules.muted_mix)

    generated = {
        "bg": bg,
        "surface": surface,
        "text": text,
        "muted": muted,
        "primary": primary,
        "accent": accent,
    }

    if token_locks:
        base = previous or DEFAULT_PALETTE
        for token in TOKENS:
            if token_locks.get(token):
                generated[token] = base[token]

    return Palette(**generated)
