from __future__ import annotations

import itertools

import pytest

from aesthetic.storage import MemoryStore
from aesthetic.studio import Studio
from aesthetic.url_state import MemoryUrl


class Recorder:
    def __init__(self):
        self.messages = []

    def __call__(self, message: str, title: str) -> None:
        self.messages.append((title, message))

    def titles(self):
        return [t for t, _ in self.messages]


@pytest.fixture
def notes() -> Recorder:
    return Recorder()


@pytest.fixture
def make_studio(notes):
    """Studio with in-memory collaborators, a fixed clock and predictable seeds."""
    studios = []

    def factory(store=None, url=None, seeds=None):
        counter = itertools.count(1)
        seed_iter = iter(seeds) if seeds is not None else (f"seed{n}" for n in counter)
        ticks = itertools.count(1_700_000_000_000, 1000)
        studio = Studio(
            store=store if store is not None else MemoryStore(),
            url=url if url is not None else MemoryUrl("https://aesthetic.local/app?x=1"),
            notify=notes,
            clock=lambda: next(ticks) / 1000,
            seed_factory=lambda: next(seed_iter),
            debounce_ms=60_000,
        )
        studios.append(studio)
        return studio

    yield factory
    for s in studios:
        s._url_writer.cancel()
