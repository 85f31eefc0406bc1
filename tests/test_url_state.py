from __future__ import annotations

import threading

from aesthetic.storage import MemoryStore
from aesthetic.url_state import URL_KEY, Debouncer, MemoryUrl, StoredUrl, read_token, write_token


def test_write_and_read_token() -> None:
    url = MemoryUrl("https://aesthetic.local/?x=1")
    assert read_token(url) is None
    write_token(url, "abc")
    assert read_token(url) == "abc"
    assert "x=1" in url.current()
    assert url.writes == 1


def test_stored_url_persists() -> None:
    store = MemoryStore()
    url = StoredUrl(store, "https://aesthetic.local/")
    write_token(url, "tok")
    again = StoredUrl(store, "https://other.local/")
    assert read_token(again) == "tok"
    assert store.load(URL_KEY).startswith("https://aesthetic.local/")


def test_flush_runs_pending_call_once() -> None:
    calls = []
    d = Debouncer(lambda: calls.append(1), delay_ms=60_000)
    assert not d.flush()
    d.schedule()
    d.schedule()
    assert d.pending
    assert d.flush()
    assert calls == [1]
    assert not d.pending
    assert not d.flush()


def test_cancel_drops_pending_call() -> None:
    calls = []
    d = Debouncer(lambda: calls.append(1), delay_ms=60_000)
    d.schedule()
    d.cancel()
    assert not d.pending
    assert not d.flush()
    assert calls == []


def test_burst_coalesces_into_one_call() -> None:
    fired = threading.Event()
    calls = []

    def fn():
        calls.append(1)
        fired.set()

    d = Debouncer(fn, delay_ms=50)
    for _ in range(5):
        d.schedule()
    assert fired.wait(5)
    d.cancel()
    assert calls == [1]


def test_failing_callback_is_logged_not_raised(caplog) -> None:
    def boom():
        raise RuntimeError("nope")

    d = Debouncer(boom, delay_ms=60_000)
    d.schedule()
    assert d.flush()
    assert "Debounced write failed" in caplog.text
