from __future__ import annotations

import re

import pytest

from aesthetic.color_math import contrast_ratio, mix_hex, rgb_to_hsl, hex_to_rgb
from aesthetic.models import DEFAULT_PALETTE, TOKENS
from aesthetic.moods import MOODS, Mode, Mood, mood_rules
from aesthetic.palette import DARK_MODE_TEXT, LIGHT_MODE_TEXT, generate_palette

HEX = re.compile(r"^#[0-9a-f]{6}$")


@pytest.mark.parametrize("mood", MOODS)
@pytest.mark.parametrize("mode", [Mode.LIGHT, Mode.DARK])
def test_generation_is_deterministic_and_well_formed(mood, mode) -> None:
    a = generate_palette("abc123", mode, mood)
    b = generate_palette("abc123", mode, mood)
    assert a == b
    for _, hex_val in a.items():
        assert HEX.match(hex_val)


def test_mode_and_mood_change_the_stream() -> None:
    base = generate_palette("abc123", Mode.LIGHT, Mood.BOLD)
    assert base != generate_palette("abc123", Mode.DARK, Mood.BOLD)
    assert base != generate_palette("abc123", Mode.LIGHT, Mood.NEON)


def test_text_is_fixed_per_mode() -> None:
    for seed in ("a", "b", "c"):
        assert generate_palette(seed, Mode.DARK, Mood.PASTEL).text == DARK_MODE_TEXT
        assert generate_palette(seed, Mode.LIGHT, Mood.PASTEL).text == LIGHT_MODE_TEXT


def test_muted_is_mix_of_text_and_bg() -> None:
    p = generate_palette("muted", Mode.LIGHT, Mood.EARTHY)
    rules = mood_rules(Mood.EARTHY, Mode.LIGHT)
    assert p.muted == mix_hex(p.text, p.bg, rules.muted_mix)


@pytest.mark.parametrize("mode", [Mode.LIGHT, Mode.DARK])
def test_minimal_background_stays_in_lightness_band(mode) -> None:
    low, high = mood_rules(Mood.MINIMAL, mode).bg_l
    for n in range(40):
        p = generate_palette(f"seed-{n}", mode, Mood.MINIMAL)
        _, _, lightness = rgb_to_hsl(hex_to_rgb(p.bg))
        assert low - 1 <= lightness <= high + 1


def test_locked_tokens_keep_previous_values() -> None:
    previous = generate_palette("first", Mode.DARK, Mood.NEON)
    fresh = generate_palette("second", Mode.DARK, Mood.NEON, previous, {"primary": True, "bg": True})
    unlocked = generate_palette("second", Mode.DARK, Mood.NEON)
    assert fresh.primary == previous.primary
    assert fresh.bg == previous.bg
    assert fresh.accent == unlocked.accent
    assert fresh.surface == unlocked.surface


def test_locked_token_without_previous_uses_default() -> None:
    p = generate_palette("x", Mode.LIGHT, Mood.MINIMAL, None, {t: True for t in TOKENS})
    assert p == DEFAULT_PALETTE


def test_string_mode_and_mood_are_accepted() -> None:
    assert generate_palette("s", "dark", "Bold") == generate_palette("s", Mode.DARK, Mood.BOLD)
    assert generate_palette("s", "dark", "Grunge") == generate_palette("s", Mode.DARK, Mood.MINIMAL)


def test_default_light_text_reads_on_generated_bg() -> None:
    p = generate_palette("abc123", Mode.LIGHT, Mood.MINIMAL)
    assert contrast_ratio(p.text, p.bg) >= 4.5
