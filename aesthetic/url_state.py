"""
url_state.py — The "address bar": one query parameter carrying the share token.

Writes are debounced. A burst of edits schedules one write after a short
quiet period, and a newer edit cancels the pending one, so only the final
state ever reaches the URL.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Protocol

from .share import token_from_url, with_token
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

URL_KEY = "rag_url_v1"
DEFAULT_DEBOUNCE_MS = 120


class UrlState(Protocol):
    def current(self) -> str: ...

    def replace(self, url: str) -> None: ...


class MemoryUrl:
    """A URL held in memory; `replace` never adds history entries."""

    def __init__(self, url: str = "https://aesthetic.local/"):
        self.url = url
        self.writes = 0

    def current(self) -> str:
        return self.url

    def replace(self, url: str) -> None:
        self.url = url
        self.writes += 1


class StoredUrl(MemoryUrl):
    """MemoryUrl that survives between CLI runs through a key-value store."""

    def __init__(self, store: KeyValueStore, base_url: str):
        super().__init__(store.load(URL_KEY, None) or base_url)
        self._store = store

    def replace(self, url: str) -> None:
        super().replace(url)
        self._store.save(URL_KEY, url)


def read_token(url_state: UrlState) -> Optional[str]:
    return token_from_url(url_state.current())


def write_token(url_state: UrlState, token: str) -> None:
    url_state.replace(with_token(url_state.current(), token))


# ── Debounce ──────────────────────────────────────────────────────────────────

class Debouncer:
    """
    Run `fn` once, `delay_ms` after the most recent `schedule()` call.

    `fn` is called with no arguments and should read whatever state it needs
    at fire time.
    """

    def __init__(self, fn: Callable[[], Any], delay_ms: int = DEFAULT_DEBOUNCE_MS):
        self._fn = fn
        self.delay = max(0, delay_ms) / 1000
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def schedule(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            if self._timer is None or threading.current_thread() is not self._timer:
                return
            self._timer = None
        self._run()

    def _run(self) -> None:
        try:
            self._fn()
        except Exception as e:
            logger.warning(f"Debounced write failed: {e}")

    def flush(self) -> bool:
        """Run the pending call now. Returns False if nothing was pending."""
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is None:
            return False
        timer.cancel()
        self._run()
        return True

    def cancel(self) -> None:
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
