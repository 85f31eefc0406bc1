from __future__ import annotations

import pytest

from aesthetic import share
from aesthetic.errors import UnknownTokenError
from aesthetic.models import DEFAULT_FONTS, DEFAULT_PALETTE, Snapshot
from aesthetic.moods import Mode, Mood
from aesthetic.palette import DARK_MODE_TEXT, generate_palette
from aesthetic.storage import FAVORITES_KEY, HISTORY_KEY, LAST_KEY, JsonFileStore, MemoryStore
from aesthetic.studio import HISTORY_LIMIT, push_history
from aesthetic.url_state import MemoryUrl, read_token


@pytest.fixture
def studio(make_studio):
    s = make_studio()
    assert s.boot() == "fresh"
    return s


# ── Boot ──────────────────────────────────────────────────────────────────────

def test_fresh_boot_generates_and_records(studio) -> None:
    state = studio.state
    assert state.seed == "seed1"
    assert state.mode is Mode.LIGHT and state.mood is Mood.MINIMAL
    assert state.palette == generate_palette("seed1", Mode.LIGHT, Mood.MINIMAL)
    assert len(state.history) == 1


def test_boot_prefers_share_token(make_studio, notes) -> None:
    snap = Snapshot(seed="shared", mode=Mode.DARK, mood=Mood.PASTEL, palette=DEFAULT_PALETTE, fonts=DEFAULT_FONTS)
    url = MemoryUrl(share.share_url("https://aesthetic.local/", snap))
    store = MemoryStore({LAST_KEY: {**snap.to_payload(), "seed": "last"}})
    s = make_studio(store=store, url=url)
    assert s.boot() == "url"
    assert s.current() == snap
    assert "Loaded from share link." in [m for _, m in notes.messages]


def test_boot_falls_back_to_last_snapshot(make_studio) -> None:
    snap = Snapshot(seed="last", mode=Mode.DARK, mood=Mood.BOLD, palette=DEFAULT_PALETTE, fonts=DEFAULT_FONTS)
    url = MemoryUrl("https://aesthetic.local/?a=garbage")
    s = make_studio(store=MemoryStore({LAST_KEY: snap.to_payload()}), url=url)
    assert s.boot() == "last"
    assert s.current() == snap
    assert s.state.history == []


def test_boot_ignores_wrong_version_last(make_studio) -> None:
    s = make_studio(store=MemoryStore({LAST_KEY: {"v": 9, "seed": "x"}}))
    assert s.boot() == "fresh"


def test_state_survives_restart(make_studio) -> None:
    store = MemoryStore()
    first = make_studio(store=store)
    first.boot()
    first.generate()
    first.toggle_favorite()
    first.flush()

    second = make_studio(store=store, url=MemoryUrl(first.url.current()))
    assert second.boot() == "url"
    assert second.current() == first.current()
    assert [h.id for h in second.state.history] == [h.id for h in first.state.history]
    assert second.is_favorite()


def test_invalid_stored_entries_are_dropped(make_studio) -> None:
    store = MemoryStore({HISTORY_KEY: [{"id": "broken"}], FAVORITES_KEY: "nope"})
    s = make_studio(store=store)
    s.boot()
    assert len(s.state.history) == 1
    assert s.state.favorites == []


# ── Generation, mode, mood ───────────────────────────────────────────────────

def test_generate_uses_new_seed(studio) -> None:
    studio.generate()
    assert studio.state.seed == "seed2"
    studio.generate(seed="chosen")
    assert studio.state.seed == "chosen"
    assert studio.state.palette == generate_palette("chosen", Mode.LIGHT, Mood.MINIMAL)
    studio.generate(new_seed=False)
    assert studio.state.seed == "chosen"


def test_set_mode_keeps_seed(studio) -> None:
    seed = studio.state.seed
    studio.set_mode(Mode.DARK)
    assert studio.state.seed == seed
    assert studio.state.mode is Mode.DARK
    assert studio.state.palette.text == DARK_MODE_TEXT
    assert studio.state.palette == generate_palette(seed, Mode.DARK, Mood.MINIMAL)
    studio.toggle_mode()
    assert studio.state.mode is Mode.LIGHT


def test_set_mood_keeps_seed(studio) -> None:
    seed = studio.state.seed
    studio.set_mood(Mood.EARTHY)
    assert studio.state.seed == seed
    assert studio.state.mood is Mood.EARTHY
    assert studio.state.palette == generate_palette(seed, Mode.LIGHT, Mood.EARTHY)


def test_mood_accepts_names(studio) -> None:
    studio.set_mood("Neon")
    assert studio.state.mood is Mood.NEON


# ── Locks ─────────────────────────────────────────────────────────────────────

def test_palette_lock_freezes_palette(studio) -> None:
    before = studio.state.palette
    assert studio.toggle_palette_lock() is True
    studio.generate()
    studio.set_mode(Mode.DARK)
    assert studio.state.palette == before
    assert studio.toggle_palette_lock() is False


def test_fonts_lock_freezes_fonts(studio) -> None:
    before = studio.state.fonts
    studio.toggle_fonts_lock()
    for _ in range(5):
        studio.generate()
    studio.set_mood(Mood.PASTEL)
    assert studio.state.fonts == before


def test_token_lock_keeps_one_color(studio) -> None:
    primary = studio.state.palette.primary
    assert studio.toggle_token_lock("primary") is True
    for _ in range(5):
        studio.generate()
    assert studio.state.palette.primary == primary
    assert studio.state.palette.accent == generate_palette(studio.state.seed, Mode.LIGHT, Mood.MINIMAL).accent


def test_unknown_token_lock_raises(studio) -> None:
    with pytest.raises(UnknownTokenError):
        studio.toggle_token_lock("border")


# ── Manual edits ──────────────────────────────────────────────────────────────

def test_update_token_hex(studio, notes) -> None:
    assert studio.update_token_hex("accent", "#FF8800")
    assert studio.state.palette.accent == "#ff8800"
    before = studio.state.palette
    assert not studio.update_token_hex("accent", "#f80")
    assert studio.state.palette == before
    assert "Validation" in notes.titles()


def test_edits_do_not_leak_into_history(studio) -> None:
    recorded = studio.state.history[0]
    accent = recorded.palette.accent
    studio.update_token_hex("accent", "#123456")
    assert studio.state.history[0].palette.accent == accent


def test_font_setters_and_swap(studio, notes) -> None:
    assert studio.set_display_font("Fraunces")
    assert studio.set_body_font("Manrope")
    assert not studio.set_body_font("Comic Sans MS")
    assert studio.state.fonts.body == "Manrope"
    studio.swap_fonts()
    assert (studio.state.fonts.display, studio.state.fonts.body) == ("Manrope", "Fraunces")


def test_auto_fix_records_history(studio) -> None:
    studio.update_token_hex("text", studio.state.palette.bg)
    assert studio.report.any_failing
    studio.auto_fix()
    assert studio.report.pair("text_bg").passes
    assert studio.state.history[0].palette == studio.state.palette


# ── History ───────────────────────────────────────────────────────────────────

def test_history_is_capped_newest_first(studio) -> None:
    for n in range(HISTORY_LIMIT + 5):
        studio.generate(seed=f"cap{n}")
    history = studio.state.history
    assert len(history) == HISTORY_LIMIT
    assert history[0].seed == f"cap{HISTORY_LIMIT + 4}"


def test_history_skips_consecutive_duplicates(studio) -> None:
    studio.apply(record_history=True)
    studio.apply(record_history=True)
    assert len(studio.state.history) == 1


def test_push_history_allows_non_consecutive_repeat(studio) -> None:
    a = studio.state.history[0]
    studio.generate()
    b = studio.state.history[0]
    assert [e.id for e in push_history([b, a], a)][:1] == [a.id]


def test_restore_and_find_entry(studio) -> None:
    first = studio.state.history[0]
    studio.generate()
    studio.restore(studio.find_entry(first.id))
    assert studio.current().same_look(first)
    assert studio.find_entry("missing") is None


def test_clear_history(studio) -> None:
    studio.clear_history()
    assert studio.state.history == []
    assert studio.store.load(HISTORY_KEY) == []


def test_search_filters_by_seed_and_font(studio) -> None:
    studio.generate(seed="alpha")
    studio.generate(seed="beta")
    history, _ = studio.search("ALPHA")
    assert [h.seed for h in history] == ["alpha"]
    history, _ = studio.search(" ")
    assert len(history) == 3
    history, _ = studio.search("minimal")
    assert len(history) == 3


# ── Favorites ─────────────────────────────────────────────────────────────────

def test_favorite_toggle_twice(studio) -> None:
    assert studio.toggle_favorite() is True
    assert studio.is_favorite()
    assert "_cur_" in studio.state.favorites[0].id
    assert studio.toggle_favorite() is False
    assert studio.state.favorites == []


def test_favorites_keyed_by_look(studio) -> None:
    entry = studio.state.history[0]
    studio.toggle_favorite(entry)
    assert studio.state.favorites[0].id == entry.id
    assert studio.is_favorite()
    studio.generate()
    assert not studio.is_favorite()
    assert studio.is_favorite(entry)
    assert studio.toggle_favorite(entry) is False


def test_clear_favorites(studio) -> None:
    studio.toggle_favorite()
    studio.clear_favorites()
    assert not studio.is_favorite()


# ── Share & URL ───────────────────────────────────────────────────────────────

def test_url_writes_are_debounced(studio) -> None:
    writes = studio.url.writes
    studio.generate()
    studio.set_mood(Mood.BOLD)
    studio.update_token_hex("accent", "#abcdef")
    assert studio.url.writes == writes
    studio.flush()
    assert studio.url.writes == writes + 1
    assert read_token(studio.url) == studio.share_token
    assert share.decode(studio.share_token) == studio.current()


def test_open_token(studio, notes) -> None:
    snap = Snapshot(seed="opened", mode=Mode.DARK, mood=Mood.NEON, palette=DEFAULT_PALETTE, fonts=DEFAULT_FONTS)
    assert studio.open_token(share.encode(snap))
    assert studio.current() == snap
    before = studio.current()
    assert not studio.open_token("not-a-token")
    assert studio.current() == before
    assert "Validation" in notes.titles()


def test_every_change_persists_last(studio) -> None:
    studio.set_mode(Mode.DARK)
    assert studio.store.load(LAST_KEY) == studio.current().to_payload()


@pytest.mark.parametrize("token", [share.b64url_encode("[" * 100_000), share.b64url_encode('{"v":' + "1" * 5000 + "}")])
def test_boot_survives_hostile_share_link(make_studio, token) -> None:
    s = make_studio(url=MemoryUrl(f"https://aesthetic.local/?a={token}"))
    assert s.boot() == "fresh"


def test_boot_ignores_boolean_version_last(make_studio) -> None:
    snap = Snapshot(seed="last", mode=Mode.DARK, mood=Mood.BOLD, palette=DEFAULT_PALETTE, fonts=DEFAULT_FONTS)
    s = make_studio(store=MemoryStore({LAST_KEY: {**snap.to_payload(), "v": True}}))
    assert s.boot() == "fresh"


def test_boot_survives_corrupt_history_file(make_studio, tmp_path) -> None:
    (tmp_path / f"{HISTORY_KEY}.json").write_text("[" * 100_000, encoding="utf-8")
    s = make_studio(store=JsonFileStore(tmp_path))
    assert s.boot() == "fresh"
    assert len(s.state.history) == 1


def test_locks_passed_to_generator_are_copies(studio) -> None:
    studio.toggle_token_lock("primary")
    primary = studio.state.palette.primary
    studio.generate()
    assert studio.state.locks.tokens == frozenset({"primary"})
    assert studio.state.palette.primary == primary
