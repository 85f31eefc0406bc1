"""
fonts.py — Curated Google Fonts catalog and seeded font pairing.

The catalog is a fixed table of families that load reliably from Google
Fonts. Pairing rules:
  - Minimal / Bold / Neon only draw sans-serif display faces
  - Pastel / Earthy swap Bebas Neue for Playfair Display
  - a serif display always gets a sans body
  - Bebas Neue always gets Inter as body
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple
from urllib.parse import quote

from .models import DEFAULT_FONTS, Fonts
from .moods import SANS_DISPLAY_MOODS, SERIF_DISPLAY_MOODS, Mood
from .rng import SeededRandom

GOOGLE_FONTS_CSS = "https://fonts.googleapis.com/css2"


class FontCategory(str, Enum):
    SANS = "sans"
    SERIF = "serif"


@dataclass(frozen=True)
class FontEntry:
    name: str
    category: FontCategory
    weights: str   # Google Fonts axis list, e.g. "500;600;700"

    @property
    def is_serif(self) -> bool:
        return self.category is FontCategory.SERIF


SANS, SERIF = FontCategory.SANS, FontCategory.SERIF

DISPLAY_FONTS: Tuple[FontEntry, ...] = (
    FontEntry("Space Grotesk", SANS, "500;600;700"),
    FontEntry("Plus Jakarta Sans", SANS, "500;600;700"),
    FontEntry("DM Sans", SANS, "500;700"),
    FontEntry("Sora", SANS, "500;600;700"),
    FontEntry("Poppins", SANS, "500;600;700"),
    FontEntry("Raleway", SANS, "500;600;700"),
    FontEntry("Oswald", SANS, "500;600;700"),
    FontEntry("Bebas Neue", SANS, "400"),
    FontEntry("Playfair Display", SERIF, "500;600;700"),
    FontEntry("Fraunces", SERIF, "500;600;700"),
    FontEntry("Cormorant Garamond", SERIF, "500;600;700"),
)

BODY_FONTS: Tuple[FontEntry, ...] = (
    FontEntry("Inter", SANS, "400;500;600;700"),
    FontEntry("Source Sans 3", SANS, "400;600;700"),
    FontEntry("Work Sans", SANS, "400;500;600;700"),
    FontEntry("Manrope", SANS, "400;500;600;700"),
    FontEntry("IBM Plex Sans", SANS, "400;500;600;700"),
    FontEntry("Noto Sans", SANS, "400;600;700"),
    FontEntry("Nunito Sans", SANS, "400;600;700"),
    FontEntry("Merriweather", SERIF, "400;700"),
    FontEntry("Source Serif 4", SERIF, "400;600;700"),
)

CONDENSED_DISPLAY = "Bebas Neue"
SERIF_DISPLAY_SUBSTITUTE = "Playfair Display"
SAFE_BODY = "Inter"

FALLBACKS = {
    FontCategory.SANS: (
        "ui-sans-serif, system-ui, -apple-system, 'Segoe UI', Roboto, Helvetica, Arial, "
        "'Apple Color Emoji', 'Segoe UI Emoji'"
    ),
    FontCategory.SERIF: "ui-serif, Georgia, Cambria, 'Times New Roman', Times, serif",
}


# ── Catalog lookups ───────────────────────────────────────────────────────────

def _find(entries: Tuple[FontEntry, ...], name: str) -> Optional[FontEntry]:
    for entry in entries:
        if entry.name == name:
            return entry
    return None


def font_meta(name: str) -> FontEntry:
    """Catalog entry for `name`; unknown names render as a generic sans."""
    return _find(DISPLAY_FONTS + BODY_FONTS, name) or FontEntry(name, SANS, "400;600;700")


def in_catalog(name: str) -> bool:
    return _find(DISPLAY_FONTS + BODY_FONTS, name) is not None


def font_stack(name: str) -> str:
    """CSS font-family value: the family plus its category's generic fallbacks."""
    entry = font_meta(name)
    return f"'{entry.name}', {FALLBACKS.get(entry.category, FALLBACKS[SANS])}"


def google_fonts_href(fonts: Fonts) -> str:
    """Google Fonts CSS2 URL loading display then body, in that order."""
    def family(entry: FontEntry) -> str:
        return f"family={quote(entry.name).replace('%20', '+')}:wght@{entry.weights}"

    families = "&".join(family(font_meta(n)) for n in (fonts.display, fonts.body))
    return f"{GOOGLE_FONTS_CSS}?{families}&display=swap"


# ── Generation ────────────────────────────────────────────────────────────────

def fonts_rng(seed: str, mood: Mood) -> SeededRandom:
    return SeededRandom.from_seed(f"{seed}|fonts|{Mood.parse(mood).value}")


def generate_fonts(seed: str, mood: Mood, previous: Optional[Fonts] = None) -> Fonts:
    """Pick a display/body pairing for (seed, mood). Both names are catalog entries."""
    mood = Mood.parse(mood)
    previous = previous or DEFAULT_FONTS
    rng = fonts_rng(seed, mood)

    if mood in SANS_DISPLAY_MOODS:
        display_pool: List[FontEntry] = [f for f in DISPLAY_FONTS if f.category is SANS]
    else:
        display_pool = list(DISPLAY_FONTS)

    body_pool = [f for f in BODY_FONTS if f.name != previous.display]

    display = rng.choice(display_pool)
    if display.name == CONDENSED_DISPLAY and mood in SERIF_DISPLAY_MOODS:
        display = _find(DISPLAY_FONTS, SERIF_DISPLAY_SUBSTITUTE) or display

    body = rng.choice(body_pool)

    # No serif-on-serif pairings
    if display.is_serif:
        body = rng.choice([f for f in BODY_FONTS if f.category is SANS])

    if display.name == CONDENSED_DISPLAY:
        body = _find(BODY_FONTS, SAFE_BODY) or body

    return Fonts(display=display.name, body=body.name)
