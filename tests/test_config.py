from __future__ import annotations

import os
from pathlib import Path

import pytest

from aesthetic.config import DEFAULT_DEBOUNCE_MS, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("AESTHETIC_STORE_DIR", "AESTHETIC_SHARE_BASE_URL", "AESTHETIC_URL_DEBOUNCE_MS", "AESTHETIC_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = load_settings(dotenv=False)
    assert settings.store_dir == Path("~/.aesthetic").expanduser()
    assert settings.share_base_url == "https://aesthetic.local/"
    assert settings.url_debounce_ms == DEFAULT_DEBOUNCE_MS
    assert settings.log_level == "WARNING"


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("AESTHETIC_STORE_DIR", str(tmp_path))
    monkeypatch.setenv("AESTHETIC_SHARE_BASE_URL", "https://example.com/a")
    monkeypatch.setenv("AESTHETIC_URL_DEBOUNCE_MS", "300")
    monkeypatch.setenv("AESTHETIC_LOG_LEVEL", "debug")
    settings = load_settings(dotenv=False)
    assert settings.store_dir == tmp_path
    assert settings.share_base_url == "https://example.com/a"
    assert settings.url_debounce_ms == 300
    assert settings.log_level == "DEBUG"


def test_bad_values_fall_back(monkeypatch) -> None:
    monkeypatch.setenv("AESTHETIC_URL_DEBOUNCE_MS", "soon")
    monkeypatch.setenv("AESTHETIC_LOG_LEVEL", "chatty")
    settings = load_settings(dotenv=False)
    assert settings.url_debounce_ms == DEFAULT_DEBOUNCE_MS
    assert settings.log_level == "WARNING"


def test_dotenv_file_is_read(monkeypatch, tmp_path) -> None:
    (tmp_path / ".env").write_text("AESTHETIC_URL_DEBOUNCE_MS=75\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    try:
        assert load_settings().url_debounce_ms == 75
    finally:
        monkeypatch.delenv("AESTHETIC_URL_DEBOUNCE_MS", raising=False)


def test_explicit_env_file(tmp_path) -> None:
    env = tmp_path / "custom.env"
    env.write_text("AESTHETIC_SHARE_BASE_URL=https://share.example/\n", encoding="utf-8")
    try:
        assert load_settings(env_file=env).share_base_url == "https://share.example/"
    finally:
        os.environ.pop("AESTHETIC_SHARE_BASE_URL", None)
