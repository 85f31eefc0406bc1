"""
studio.py — The live aesthetic and every rule that changes it.

`Studio` owns one `AestheticState`. Every mutation funnels through
`Studio.apply()`, which:
  1. applies the patch (whole palettes / font pairs only)
  2. optionally records the new snapshot in history
  3. re-derives the contrast report and the share token
  4. schedules the debounced URL write and persists favorites / history / last
  5. announces a status message through the notifier

Usage:
    studio = Studio(store=JsonFileStore("~/.aesthetic"), url=MemoryUrl())
    studio.boot()
    studio.generate()
    studio.toggle_token_lock("primary")
    studio.set_mood(Mood.NEON)
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Tuple

from pydantic import ValidationError

from . import share
from .color_math import is_valid_hex
from .contrast import ContrastReport, auto_fix, evaluate
from .fonts import generate_fonts, in_catalog
from .models import (
    DEFAULT_FONTS,
    DEFAULT_PALETTE,
    Fonts,
    HistoryEntry,
    Locks,
    Palette,
    Snapshot,
    check_token,
    is_snapshot_version,
    token_label,
)
from .moods import Mode, Mood
from .palette import generate_palette
from .rng import hash_string, random_seed, to_base36
from .storage import FAVORITES_KEY, HISTORY_KEY, LAST_KEY, KeyValueStore, MemoryStore
from .url_state import DEFAULT_DEBOUNCE_MS, Debouncer, MemoryUrl, UrlState, read_token, write_token

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 12

Notifier = Callable[[str, str], None]   # (message, title)


def _silent(message: str, title: str) -> None:
    logger.debug(f"{title}: {message}")


def signature_text(snapshot: Snapshot) -> str:
    return json.dumps(snapshot.signature, separators=(",", ":"))


# ── State ─────────────────────────────────────────────────────────────────────

@dataclass
class AestheticState:
    """Everything the studio holds. Replaced wholesale by `Studio.apply()`."""
    seed: str = ""
    mode: Mode = Mode.LIGHT
    mood: Mood = Mood.MINIMAL
    palette: Palette = DEFAULT_PALETTE
    fonts: Fonts = DEFAULT_FONTS
    locks: Locks = field(default_factory=Locks)
    history: List[HistoryEntry] = field(default_factory=list)
    favorites: List[HistoryEntry] = field(default_factory=list)
    history_query: str = ""

    def snapshot(self) -> Snapshot:
        return Snapshot(
            seed=self.seed,
            mode=self.mode,
            mood=self.mood,
            palette=self.palette,
            fonts=self.fonts,
        )


def push_history(
    history: List[HistoryEntry],
    entry: HistoryEntry,
    limit: int = HISTORY_LIMIT,
) -> List[HistoryEntry]:
    """Newest first, capped. An entry that looks like the current head is dropped."""
    if history and history[0].same_look(entry):
        return history
    return [entry, *history][:limit]


def toggle_in_favorites(
    favorites: List[HistoryEntry],
    snapshot: Snapshot,
    entry_factory: Callable[[Snapshot], HistoryEntry],
) -> Tuple[List[HistoryEntry], bool]:
    """Add or remove `snapshot` by signature. Returns (new favorites, now_favorite)."""
    sig = snapshot.signature
    if any(f.signature == sig for f in favorites):
        return [f for f in favorites if f.signature != sig], False
    return [entry_factory(snapshot), *favorites], True


def matches_query(entry: HistoryEntry, query: str) -> bool:
    q = (query or "").strip().lower()
    return not q or q in entry.search_text()


# ── Controller ────────────────────────────────────────────────────────────────

class Studio:
    """Single owner and single writer of the live aesthetic."""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        url: Optional[UrlState] = None,
        notify: Optional[Notifier] = None,
        clock: Callable[[], float] = time.time,
        seed_factory: Callable[[], str] = random_seed,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ):
        self.store = store if store is not None else MemoryStore()
        self.url = url if url is not None else MemoryUrl()
        self._notify = notify or _silent
        self._clock = clock
        self._seed_factory = seed_factory
        self._lock = threading.RLock()
        self._url_writer = Debouncer(self._write_url, debounce_ms)

        self.state = AestheticState()
        self.report: ContrastReport = evaluate(self.state.palette)
        self.share_token: str = share.encode(self.state.snapshot())

    # ── Core mutation entry point ─────────────────────────────────────────────

    def apply(
        self,
        *,
        seed: Optional[str] = None,
        mode: Optional[Mode] = None,
        mood: Optional[Mood] = None,
        palette: Optional[Palette] = None,
        fonts: Optional[Fonts] = None,
        locks: Optional[Locks] = None,
        history: Optional[List[HistoryEntry]] = None,
        favorites: Optional[List[HistoryEntry]] = None,
        history_query: Optional[str] = None,
        record_history: bool = False,
        announce: str = "",
        title: str = "Aesthetic",
    ) -> AestheticState:
        with self._lock:
            changes = {
                "seed": seed,
                "mode": Mode.parse(mode) if mode is not None else None,
                "mood": Mood.parse(mood) if mood is not None else None,
                "palette": palette,
                "fonts": fonts,
                "locks": locks,
                "history": list(history) if history is not None else None,
                "favorites": list(favorites) if favorites is not None else None,
                "history_query": history_query,
            }
            state = replace(self.state, **{k: v for k, v in changes.items() if v is not None})

            if record_history:
                state = replace(state, history=push_history(state.history, self._history_entry(state.snapshot())))

            self.state = state
            self.report = evaluate(state.palette)
            self.share_token = share.encode(state.snapshot())

            self._url_writer.schedule()
            self._persist()
            if announce:
                self._notify(announce, title)
            return self.state

    def current(self) -> Snapshot:
        with self._lock:
            return self.state.snapshot()

    # ── Side effects ──────────────────────────────────────────────────────────

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _history_entry(self, snapshot: Snapshot) -> HistoryEntry:
        now = self._now_ms()
        return HistoryEntry(
            id=f"{to_base36(now)}_{hash_string(snapshot.seed):x}",
            created_at=now,
            **snapshot.snapshot().model_dump(exclude={"version"}),
        )

    def _favorite_entry(self, snapshot: Snapshot) -> HistoryEntry:
        now = self._now_ms()
        entry_id = getattr(snapshot, "id", None) or f"{to_base36(now)}_fav_{hash_string(signature_text(snapshot)):x}"
        created_at = getattr(snapshot, "created_at", None) or now
        return HistoryEntry(
            id=entry_id,
            created_at=created_at,
            **snapshot.snapshot().model_dump(exclude={"version"}),
        )

    def _persist(self) -> None:
        state = self.state
        self.store.save(FAVORITES_KEY, [f.to_payload() for f in state.favorites])
        self.store.save(HISTORY_KEY, [h.to_payload() for h in state.history])
        self.store.save(LAST_KEY, state.snapshot().to_payload())

    def _write_url(self) -> None:
        with self._lock:
            token = self.share_token
        write_token(self.url, token)

    def flush(self) -> None:
        """Push any pending URL write out immediately."""
        self._url_writer.flush()

    def close(self) -> None:
        self.flush()

    # ── Generation ────────────────────────────────────────────────────────────

    def _seed_or_new(self) -> str:
        return self.state.seed or self._seed_factory()

    def generate(self, new_seed: bool = True, seed: Optional[str] = None) -> AestheticState:
        """Regenerate unlocked groups. A fresh seed unless `new_seed` is False or `seed` is given."""
        with self._lock:
            state = self.state
            if seed is None:
                seed = self._seed_factory() if new_seed else self._seed_or_new()

            palette = state.palette
            if not state.locks.palette:
                palette = generate_palette(seed, state.mode, state.mood, state.palette, state.locks.token_map())

            fonts = state.fonts
            if not state.locks.fonts:
                fonts = generate_fonts(seed, state.mood, state.fonts)

            return self.apply(seed=seed, palette=palette, fonts=fonts, record_history=True)

    def set_mode(self, mode: Mode) -> AestheticState:
        """Switch light/dark. An unlocked palette is regenerated from the same seed."""
        with self._lock:
            mode = Mode.parse(mode)
            state = self.state
            palette = None
            if not state.locks.palette:
                palette = generate_palette(self._seed_or_new(), mode, state.mood, state.palette, state.locks.token_map())
            return self.apply(
                mode=mode,
                seed=self._seed_or_new() if palette is not None else None,
                palette=palette,
                record_history=palette is not None,
                announce=f"Mode: {mode.value}.",
            )

    def toggle_mode(self) -> AestheticState:
        return self.set_mode(Mode.LIGHT if self.state.mode is Mode.DARK else Mode.DARK)

    def set_mood(self, mood: Mood) -> AestheticState:
        """Switch mood. Unlocked palette and fonts are regenerated from the same seed."""
        with self._lock:
            mood = Mood.parse(mood)
            state = self.state
            seed = self._seed_or_new()
            palette = fonts = None
            if not state.locks.palette:
                palette = generate_palette(seed, state.mode, mood, state.palette, state.locks.token_map())
            if not state.locks.fonts:
                fonts = generate_fonts(seed, mood, state.fonts)
            regenerated = palette is not None or fonts is not None
            return self.apply(
                mood=mood,
                seed=seed if regenerated else None,
                palette=palette,
                fonts=fonts,
                record_history=regenerated,
                announce=f"Mood: {mood.value}.",
            )

    # ── Locks ─────────────────────────────────────────────────────────────────

    def toggle_palette_lock(self) -> bool:
        with self._lock:
            locks = self.state.locks.toggled_palette()
            self.apply(locks=locks, announce=f"Palette {'locked' if locks.palette else 'unlocked'}.")
            return locks.palette

    def toggle_fonts_lock(self) -> bool:
        with self._lock:
            locks = self.state.locks.toggled_fonts()
            self.apply(locks=locks, announce=f"Fonts {'locked' if locks.fonts else 'unlocked'}.")
            return locks.fonts

    def toggle_token_lock(self, token: str) -> bool:
        with self._lock:
            locks = self.state.locks.toggled_token(token)
            locked = locks.is_token_locked(token)
            self.apply(locks=locks, announce=f"{'Locked' if locked else 'Unlocked'} {token_label(token)}.")
            return locked

    # ── Manual edits ──────────────────────────────────────────────────────────

    def update_token_hex(self, token: str, hex_val: str) -> bool:
        """Set one token. Invalid hex is rejected and the palette stays as it was."""
        with self._lock:
            check_token(token)
            if not is_valid_hex(hex_val):
                logger.debug(f"Rejected hex {hex_val!r} for {token}")
                self._notify("Invalid hex. Use #rrggbb.", "Validation")
                return False
            self.apply(palette=self.state.palette.with_token(token, hex_val))
            return True

    def _set_font(self, role: str, name: str) -> bool:
        with self._lock:
            if not in_catalog(name):
                self._notify(f"Unknown font {name!r}.", "Validation")
                return False
            fonts = Fonts(**{**self.state.fonts.model_dump(), role: name})
            self.apply(fonts=fonts, record_history=True, announce=f"Updated {role} font.")
            return True

    def set_display_font(self, name: str) -> bool:
        return self._set_font("display", name)

    def set_body_font(self, name: str) -> bool:
        return self._set_font("body", name)

    def swap_fonts(self) -> AestheticState:
        with self._lock:
            return self.apply(fonts=self.state.fonts.swapped(), record_history=True, announce="Swapped fonts.")

    def auto_fix(self) -> AestheticState:
        with self._lock:
            return self.apply(
                palette=auto_fix(self.state.palette),
                record_history=True,
                announce="Contrast auto-fixed.",
            )

    # ── History & favorites ───────────────────────────────────────────────────

    def restore(self, snapshot: Snapshot) -> AestheticState:
        return self.apply(
            seed=snapshot.seed,
            mode=snapshot.mode,
            mood=snapshot.mood,
            palette=snapshot.palette,
            fonts=snapshot.fonts,
            announce="Restored aesthetic.",
        )

    def find_entry(self, entry_id: str) -> Optional[HistoryEntry]:
        with self._lock:
            for entry in [*self.state.history, *self.state.favorites]:
                if entry.id == entry_id:
                    return entry
        return None

    def is_favorite(self, snapshot: Optional[Snapshot] = None) -> bool:
        with self._lock:
            sig = (snapshot or self.state.snapshot()).signature
            return any(f.signature == sig for f in self.state.favorites)

    def toggle_favorite(self, snapshot: Optional[Snapshot] = None) -> bool:
        """Star / unstar `snapshot` (default: the current look). Returns the new starred state."""
        with self._lock:
            if snapshot is None:
                current = self.state.snapshot()
                now = self._now_ms()
                snapshot = HistoryEntry(
                    id=f"{to_base36(now)}_cur_{hash_string(signature_text(current)):x}",
                    created_at=now,
                    **current.model_dump(exclude={"version"}),
                )
            favorites, starred = toggle_in_favorites(self.state.favorites, snapshot, self._favorite_entry)
            self.apply(
                favorites=favorites,
                announce="Saved to favorites." if starred else "Removed from favorites.",
            )
            return starred

    def clear_history(self) -> None:
        self.apply(history=[], announce="History cleared.")

    def clear_favorites(self) -> None:
        self.apply(favorites=[], announce="Favorites cleared.")

    def search(self, query: str) -> Tuple[List[HistoryEntry], List[HistoryEntry]]:
        """Filter history and favorites by seed, mode, mood or font names."""
        with self._lock:
            self.apply(history_query=query)
            q = self.state.history_query
            return (
                [h for h in self.state.history if matches_query(h, q)],
                [f for f in self.state.favorites if matches_query(f, q)],
            )

    # ── Boot ──────────────────────────────────────────────────────────────────

    def _load_entries(self, key: str) -> List[HistoryEntry]:
        raw = self.store.load(key, [])
        if not isinstance(raw, list):
            return []
        entries = []
        for item in raw:
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError:
                logger.debug(f"Dropping invalid {key} entry")
        return entries

    def _restore_last(self) -> bool:
        last = self.store.load(LAST_KEY, None)
        if not isinstance(last, dict) or not is_snapshot_version(last.get("v")):
            return False

        state = self.state
        try:
            palette = Palette.model_validate(last.get("palette"))
        except ValidationError:
            palette = state.palette
        try:
            fonts = Fonts.model_validate(last.get("fonts"))
        except ValidationError:
            fonts = state.fonts

        seed = last.get("seed")
        self.apply(
            seed=seed if isinstance(seed, str) else self._seed_factory(),
            mode=Mode.parse(last.get("mode")),
            mood=Mood.parse(last.get("mood")),
            palette=palette,
            fonts=fonts,
        )
        return True

    def boot(self, announce: bool = True) -> str:
        """
        Load persisted collections, then pick the starting look.

        Returns where it came from: "url", "last" or "fresh".
        """
        with self._lock:
            self.state = replace(
                self.state,
                favorites=self._load_entries(FAVORITES_KEY),
                history=self._load_entries(HISTORY_KEY),
            )

            token = read_token(self.url)
            if token:
                snapshot = share.decode(token)
                if snapshot is not None:
                    self.restore_from_share(snapshot, announce=announce)
                    return "url"

            if self._restore_last():
                return "last"

            seed = self._seed_factory()
            mode, mood = Mode.LIGHT, Mood.MINIMAL
            self.apply(
                seed=seed,
                mode=mode,
                mood=mood,
                palette=generate_palette(seed, mode, mood, self.state.palette, self.state.locks.token_map()),
                fonts=generate_fonts(seed, mood, self.state.fonts),
                record_history=True,
            )
            return "fresh"

    def restore_from_share(self, snapshot: Snapshot, announce: bool = True) -> AestheticState:
        return self.apply(
            seed=snapshot.seed,
            mode=snapshot.mode,
            mood=snapshot.mood,
            palette=snapshot.palette,
            fonts=snapshot.fonts,
            announce="Loaded from share link." if announce else "",
        )

    def open_token(self, token: str) -> bool:
        """Load a share token into the studio. False (state untouched) if it is invalid."""
        snapshot = share.decode(token)
        if snapshot is None:
            self._notify("That share link could not be read.", "Validation")
            return False
        self.restore_from_share(snapshot)
        return True
