"""
color_math.py — Pure color conversions and WCAG contrast helpers.

All hex strings produced here are lowercase '#rrggbb'. Parsing accepts an
optional leading '#' and any case, but exactly six hex digits.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

RGB = Tuple[int, int, int]

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")
_STRICT_HEX_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

NEAR_WHITE = "#ffffff"
NEAR_BLACK = "#0b0f1a"


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    # Browser-style rounding: .5 always goes up, unlike Python's banker's round()
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


# ── Conversions ───────────────────────────────────────────────────────────────

def hsl_to_rgb(h: float, s: float, l: float) -> RGB:
    """HSL (h in degrees, wrapped; s/l in 0–100, clamped) → RGB 0–255."""
    hue = h % 360
    sat = clamp(s, 0, 100) / 100
    lum = clamp(l, 0, 100) / 100

    c = (1 - abs(2 * lum - 1)) * sat
    hp = hue / 60
    x = c * (1 - abs(hp % 2 - 1))

    if   hp < 1: r, g, b = c, x, 0.0
    elif hp < 2: r, g, b = x, c, 0.0
    elif hp < 3: r, g, b = 0.0, c, x
    elif hp < 4: r, g, b = 0.0, x, c
    elif hp < 5: r, g, b = x, 0.0, c
    else:        r, g, b = c, 0.0, x

    m = lum - c / 2
    return (
        _round_half_up((r + m) * 255),
        _round_half_up((g + m) * 255),
        _round_half_up((b + m) * 255),
    )


def rgb_to_hex(rgb: RGB) -> str:
    r, g, b = (int(clamp(v, 0, 255)) for v in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(hex_str: str) -> Optional[RGB]:
    """Parse '#rrggbb' (or 'rrggbb'). Returns None on malformed input."""
    if not isinstance(hex_str, str):
        return None
    m = _HEX_RE.match(hex_str.strip())
    if not m:
        return None
    n = int(m.group(1), 16)
    return (n >> 16) & 255, (n >> 8) & 255, n & 255


def is_valid_hex(hex_str: str) -> bool:
    """True for '#rrggbb' with the leading '#' present (any case)."""
    return isinstance(hex_str, str) and bool(_STRICT_HEX_RE.match(hex_str.strip()))


def normalize_hex(hex_str: str) -> Optional[str]:
    if not is_valid_hex(hex_str):
        return None
    return hex_str.strip().lower()


def rgb_to_hsl(rgb: RGB) -> Tuple[int, int, int]:
    """RGB → (H 0–360, S 0–100, L 0–100), rounded for display."""
    r, g, b = (v / 255 for v in rgb)
    mx, mn = max(r, g, b), min(r, g, b)
    delta = mx - mn
    lum = (mx + mn) / 2
    sat = 0.0 if delta == 0 else delta / (1 - abs(2 * lum - 1))
    if delta == 0:
        hue = 0.0
    elif mx == r:
        hue = 60 * (((g - b) / delta) % 6)
    elif mx == g:
        hue = 60 * (((b - r) / delta) + 2)
    else:
        hue = 60 * (((r - g) / delta) + 4)
    return round(hue) % 360, round(sat * 100), round(lum * 100)


def rgb_to_cmyk(rgb: RGB) -> Tuple[int, int, int, int]:
    """Convert RGB (0-255) → CMYK (0-100 percent)."""
    r, g, b = rgb
    if r == g == b == 0:
        return 0, 0, 0, 100
    rf, gf, bf = r / 255, g / 255, b / 255
    k = 1 - max(rf, gf, bf)
    c = (1 - rf - k) / (1 - k)
    m = (1 - gf - k) / (1 - k)
    y = (1 - bf - k) / (1 - k)
    return round(c * 100), round(m * 100), round(y * 100), round(k * 100)


# ── Luminance & contrast ──────────────────────────────────────────────────────

def _channel_to_linear(value: int) -> float:
    c = value / 255
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(hex_str: str) -> float:
    """WCAG relative luminance. Malformed hex counts as black (0.0)."""
    rgb = hex_to_rgb(hex_str)
    if rgb is None:
        return 0.0
    r, g, b = (_channel_to_linear(v) for v in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(fg_hex: str, bg_hex: str) -> float:
    """(L_lighter + 0.05) / (L_darker + 0.05), between 1.0 and 21.0."""
    l1 = relative_luminance(fg_hex)
    l2 = relative_luminance(bg_hex)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def mix_hex(a: str, b: str, t: float) -> str:
    """Linear RGB mix: t=0 → a, t=1 → b. Returns `a` unchanged if either is malformed."""
    ca = hex_to_rgb(a)
    cb = hex_to_rgb(b)
    if ca is None or cb is None:
        return a
    return rgb_to_hex(tuple(_round_half_up(x + (y - x) * t) for x, y in zip(ca, cb)))


def best_bw_for(bg_hex: str) -> str:
    """Near-white or near-black, whichever reads better on `bg_hex` (white wins ties)."""
    on_white = contrast_ratio(NEAR_WHITE, bg_hex)
    on_black = contrast_ratio(NEAR_BLACK, bg_hex)
    return NEAR_WHITE if on_white >= on_black else NEAR_BLACK
