"""
contrast.py — WCAG contrast report and deterministic auto-fix.

Three pairs are checked against a 4.5:1 target:
  text_bg       text on background
  text_surface  text on surface
  on_primary    best black-or-white on the primary button color

Auto-fix only ever rewrites `text` and `muted`. Background, surface, primary
and accent are left alone so the palette keeps its hues; a failing
on_primary pair is reported but not repaired.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .color_math import best_bw_for, contrast_ratio, mix_hex
from .models import Palette

CONTRAST_TARGET = 4.5
MUTED_FLOOR = 3.0

MUTED_MIX = 0.62
MUTED_MIX_SOFT = 0.45

# Two near-black, two near-white
TEXT_CANDIDATES = ("#0b0f1a", "#111827", "#f8fafc", "#ffffff")


@dataclass(frozen=True)
class ContrastPair:
    key: str
    label: str
    fg: str
    bg: str
    ratio: float
    target: float = CONTRAST_TARGET

    @property
    def passes(self) -> bool:
        return self.ratio >= self.target


@dataclass(frozen=True)
class ContrastReport:
    pairs: List[ContrastPair] = field(default_factory=list)
    on_primary: str = "#ffffff"

    @property
    def any_failing(self) -> bool:
        return any(not p.passes for p in self.pairs)

    def pair(self, key: str) -> ContrastPair:
        for p in self.pairs:
            if p.key == key:
                return p
        raise KeyError(key)


def _pair(key: str, label: str, fg: str, bg: str) -> ContrastPair:
    return ContrastPair(key=key, label=label, fg=fg, bg=bg, ratio=contrast_ratio(fg, bg))


def evaluate(palette: Palette) -> ContrastReport:
    on_primary = best_bw_for(palette.primary)
    return ContrastReport(
        pairs=[
            _pair("text_bg", "Text on Background", palette.text, palette.bg),
            _pair("text_surface", "Text on Surface", palette.text, palette.surface),
            _pair("on_primary", "Text on Primary Button", on_primary, palette.primary),
        ],
        on_primary=on_primary,
    )


def worst_text_contrast(palette: Palette, text_hex: str = "") -> float:
    """Lower of text-on-bg and text-on-surface."""
    text_hex = text_hex or palette.text
    return min(contrast_ratio(text_hex, palette.bg), contrast_ratio(text_hex, palette.surface))


def auto_fix(palette: Palette) -> Palette:
    """
    Single-pass repair of `text` and `muted`.

    The new text is whichever candidate maximizes its worst-case contrast
    against bg and surface. Muted is rebuilt from the new text; if that mix
    drops under 3:1 on bg it is pulled closer to the text color.
    """
    best = TEXT_CANDIDATES[0]
    best_score = -1.0
    for candidate in TEXT_CANDIDATES:
        score = worst_text_contrast(palette, candidate)
        if score > best_score:
            best, best_score = candidate, score

    # Keep the current text if it already reads better than every candidate
    text = best if best_score >= worst_text_contrast(palette) else palette.text

    muted = mix_hex(text, palette.bg, MUTED_MIX)
    if contrast_ratio(muted, palette.bg) < MUTED_FLOOR:
        muted = mix_hex(text, palette.bg, MUTED_MIX_SOFT)

    return palette.with_token("text", text).with_token("muted", muted)
