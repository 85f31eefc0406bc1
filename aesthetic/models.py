"""
models.py — Typed structures for palettes, font pairings, locks and snapshots.

Every model is frozen: history and favorites hold the same objects as the
live state without any risk of a later edit leaking into a stored entry.
Validation happens once, when data crosses a boundary (share decode,
persistence load); internal code constructs models directly.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterator, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .color_math import normalize_hex
from .errors import InvalidHexError, UnknownTokenError
from .moods import Mode, Mood

TOKENS: Tuple[str, ...] = ("bg", "surface", "text", "muted", "primary", "accent")

TOKEN_LABELS: Dict[str, str] = {
    "bg": "background",
    "surface": "surface",
    "text": "text",
    "muted": "muted",
    "primary": "primary",
    "accent": "accent",
}

SNAPSHOT_VERSION = 1

# 9999-12-31T23:59:59.999Z, the last instant datetime can represent
MAX_TIMESTAMP_MS = 253_402_300_799_999


def is_snapshot_version(value: object) -> bool:
    """True only for the integer 1; JSON `true` compares equal to 1 in Python."""
    return not isinstance(value, bool) and value == SNAPSHOT_VERSION


def token_label(token: str) -> str:
    return TOKEN_LABELS.get(token, token)


def check_token(token: str) -> str:
    if token not in TOKENS:
        raise UnknownTokenError(token)
    return token


# ── Palette ───────────────────────────────────────────────────────────────────

class Palette(BaseModel):
    """Six named color tokens, each a lowercase '#rrggbb'."""
    model_config = ConfigDict(frozen=True)

    bg: str = Field(description="Page background")
    surface: str = Field(description="Cards, panels and raised areas")
    text: str = Field(description="Body text, near-black or near-white")
    muted: str = Field(description="Secondary text, a mix of text and bg")
    primary: str = Field(description="Main brand / button color")
    accent: str = Field(description="Highlight color, hue-offset from primary")

    @field_validator(*TOKENS)
    @classmethod
    def _normalize(cls, value: str) -> str:
        hex_val = normalize_hex(value)
        if hex_val is None:
            raise InvalidHexError(value)
        return hex_val

    def __getitem__(self, token: str) -> str:
        return getattr(self, check_token(token))

    def items(self) -> Iterator[Tuple[str, str]]:
        for token in TOKENS:
            yield token, getattr(self, token)

    def as_dict(self) -> Dict[str, str]:
        return dict(self.items())

    def with_token(self, token: str, hex_val: str) -> "Palette":
        """Return a copy with one token replaced (validated)."""
        check_token(token)
        return Palette(**{**self.as_dict(), token: hex_val})


DEFAULT_PALETTE = Palette(
    bg="#0b1020",
    surface="#101a33",
    text="#e8efff",
    muted="#b8c2dd",
    primary="#3b82f6",
    accent="#22d3ee",
)


# ── Fonts ─────────────────────────────────────────────────────────────────────

class Fonts(BaseModel):
    """Display / body font family pairing."""
    model_config = ConfigDict(frozen=True)

    display: str = Field(description="Headline font family name")
    body: str = Field(description="Body copy font family name")

    def swapped(self) -> "Fonts":
        return Fonts(display=self.body, body=self.display)


DEFAULT_FONTS = Fonts(display="Space Grotesk", body="Inter")


# ── Locks ─────────────────────────────────────────────────────────────────────

class Locks(BaseModel):
    """Group locks freeze palette/fonts; token locks pin single colors."""
    model_config = ConfigDict(frozen=True)

    palette: bool = False
    fonts: bool = False
    tokens: FrozenSet[str] = Field(default_factory=frozenset, description="Names of the locked tokens")

    @field_validator("tokens", mode="before")
    @classmethod
    def _locked_names(cls, value: object) -> object:
        # Older lock files store {token: bool}
        if isinstance(value, Mapping):
            value = [t for t, locked in value.items() if locked]
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(t for t in value if t in TOKENS)
        return value

    def is_token_locked(self, token: str) -> bool:
        return check_token(token) in self.tokens

    def token_map(self) -> Dict[str, bool]:
        """Fresh {token: locked} dict for every token."""
        return {t: t in self.tokens for t in TOKENS}

    def toggled_token(self, token: str) -> "Locks":
        return Locks(palette=self.palette, fonts=self.fonts, tokens=self.tokens ^ {check_token(token)})

    def toggled_palette(self) -> "Locks":
        return Locks(palette=not self.palette, fonts=self.fonts, tokens=self.tokens)

    def toggled_fonts(self) -> "Locks":
        return Locks(palette=self.palette, fonts=not self.fonts, tokens=self.tokens)


# ── Snapshots ─────────────────────────────────────────────────────────────────

Signature = Tuple[str, str, Tuple[str, ...], str, str]


class Snapshot(BaseModel):
    """The unit of sharing, history and favorites."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: int = Field(default=SNAPSHOT_VERSION, alias="v")
    seed: str
    mode: Mode
    mood: Mood
    palette: Palette
    fonts: Fonts

    @field_validator("version", mode="before")
    @classmethod
    def _known_version(cls, value: object) -> object:
        if not is_snapshot_version(value):
            raise ValueError(f"unsupported snapshot version {value!r}")
        return value

    @property
    def signature(self) -> Signature:
        """Equality key: mode + mood + palette + fonts. Seed and timestamps are ignored."""
        return (
            self.mode.value,
            self.mood.value,
            tuple(hex_val for _, hex_val in self.palette.items()),
            self.fonts.display,
            self.fonts.body,
        )

    def same_look(self, other: "Snapshot") -> bool:
        return self.signature == other.signature

    def to_payload(self) -> dict:
        """JSON-ready dict using the wire field names ('v' for the version)."""
        return self.model_dump(mode="json", by_alias=True)

    def snapshot(self) -> "Snapshot":
        return Snapshot(
            seed=self.seed,
            mode=self.mode,
            mood=self.mood,
            palette=self.palette,
            fonts=self.fonts,
        )


class HistoryEntry(Snapshot):
    """A snapshot stored in history or favorites."""

    id: str
    created_at: int = Field(alias="at", ge=0, le=MAX_TIMESTAMP_MS, description="Milliseconds since the epoch")

    def search_text(self) -> str:
        return f"{self.seed} {self.mode.value} {self.mood.value} {self.fonts.display} {self.fonts.body}".lower()
