"""
moods.py — Mode / Mood enums and the mood rule table.

Each mood maps to sampling ranges (all closed, integer) for the palette
generator. Light and dark modes use different lightness bands so that text
always sits at the opposite extreme from the background.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .rng import SeededRandom

Range = Tuple[int, int]


class Mode(str, Enum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def parse(cls, value: object, default: Optional["Mode"] = None) -> "Mode":
        """Lenient boundary parse: anything that isn't 'dark' is light."""
        if isinstance(value, Mode):
            return value
        if value == "dark":
            return cls.DARK
        return default or cls.LIGHT


class Mood(str, Enum):
    MINIMAL = "Minimal"
    BOLD = "Bold"
    PASTEL = "Pastel"
    NEON = "Neon"
    EARTHY = "Earthy"

    @classmethod
    def parse(cls, value: object, default: Optional["Mood"] = None) -> "Mood":
        """Lenient boundary parse: unknown / legacy mood names fall back to Minimal."""
        if isinstance(value, Mood):
            return value
        try:
            return cls(value)
        except ValueError:
            return default or cls.MINIMAL


MOODS: Tuple[Mood, ...] = tuple(Mood)

# Display moods that only draw sans-serif display faces
SANS_DISPLAY_MOODS = frozenset({Mood.MINIMAL, Mood.BOLD, Mood.NEON})
# Moods that swap the condensed display face for a serif one
SERIF_DISPLAY_MOODS = frozenset({Mood.PASTEL, Mood.EARTHY})


@dataclass(frozen=True)
class MoodRules:
    """Sampling ranges for one (mood, mode) combination."""
    neutral_sat: Range
    bg_l: Range
    surface_l: Range
    text_l: Range
    muted_mix: float
    color_sat: Range
    color_l: Range
    accent_sat: Range
    accent_l: Range
    color_hue: Range
    accent_hue_offset: Range
    neutral_hue_fixed: Optional[int] = None
    neutral_hue_range: Optional[Range] = None

    def neutral_hue(self, rng: SeededRandom) -> int:
        """Fixed for Minimal; drawn from `rng` for every other mood."""
        if self.neutral_hue_fixed is not None:
            return self.neutral_hue_fixed
        if self.neutral_hue_range is not None:
            return rng.randint(*self.neutral_hue_range)
        return 210


def _pick(mode: Mode, dark: Range, light: Range) -> Range:
    return dark if mode is Mode.DARK else light


def mood_rules(mood: Mood, mode: Mode) -> MoodRules:
    """Return the rule set for `mood` in `mode`. Unknown moods use Minimal."""
    mood = Mood.parse(mood)
    mode = Mode.parse(mode)

    if mood is Mood.BOLD:
        return MoodRules(
            neutral_hue_range=(190, 230),
            neutral_sat=(6, 18),
            bg_l=_pick(mode, (6, 10), (92, 96)),
            surface_l=_pick(mode, (12, 18), (84, 90)),
            text_l=_pick(mode, (92, 97), (10, 14)),
            muted_mix=0.58,
            color_sat=(45, 75),
            color_l=_pick(mode, (52, 62), (42, 52)),
            accent_sat=(55, 85),
            accent_l=_pick(mode, (56, 66), (40, 52)),
            color_hue=(0, 359),
            accent_hue_offset=(120, 200),
        )

    if mood is Mood.PASTEL:
        return MoodRules(
            neutral_hue_range=(200, 240),
            neutral_sat=(6, 14),
            bg_l=_pick(mode, (8, 14), (94, 98)),
            surface_l=_pick(mode, (14, 20), (88, 94)),
            text_l=_pick(mode, (92, 97), (10, 14)),
            muted_mix=0.62,
            color_sat=(35, 55),
            color_l=_pick(mode, (60, 72), (58, 72)),
            accent_sat=(40, 60),
            accent_l=_pick(mode, (64, 76), (60, 76)),
            color_hue=(0, 359),
            accent_hue_offset=(40, 110),
        )

    if mood is Mood.NEON:
        return MoodRules(
            neutral_hue_range=(200, 250),
            neutral_sat=(8, 22),
            bg_l=_pick(mode, (5, 10), (92, 96)),
            surface_l=_pick(mode, (11, 17), (84, 90)),
            text_l=_pick(mode, (92, 98), (10, 14)),
            muted_mix=0.58,
            color_sat=(80, 100),
            color_l=_pick(mode, (52, 62), (48, 58)),
            accent_sat=(85, 100),
            accent_l=_pick(mode, (58, 68), (46, 56)),
            color_hue=(0, 359),
            accent_hue_offset=(150, 210),
        )

    if mood is Mood.EARTHY:
        return MoodRules(
            neutral_hue_range=(20, 55),
            neutral_sat=(8, 20),
            bg_l=_pick(mode, (7, 12), (91, 96)),
            surface_l=_pick(mode, (12, 18), (84, 90)),
            text_l=_pick(mode, (92, 97), (10, 14)),
            muted_mix=0.6,
            color_sat=(35, 65),
            color_l=_pick(mode, (50, 60), (40, 52)),
            accent_sat=(30, 55),
            accent_l=_pick(mode, (54, 64), (38, 50)),
            color_hue=(20, 140),
            accent_hue_offset=(40, 120),
        )

    return MoodRules(
        neutral_hue_fixed=210,
        neutral_sat=(2, 10),
        bg_l=_pick(mode, (6, 12), (92, 97)),
        surface_l=_pick(mode, (10, 18), (86, 93)),
        text_l=_pick(mode, (92, 97), (10, 14)),
        muted_mix=0.55,
        color_sat=(20, 45),
        color_l=_pick(mode, (52, 64), (44, 56)),
        accent_sat=(30, 55),
        accent_l=_pick(mode, (56, 70), (44, 58)),
        color_hue=(195, 255),
        accent_hue_offset=(30, 80),
    )
