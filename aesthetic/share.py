"""
share.py — Reversible, URL-safe share tokens for snapshots.

Token format: base64url (no padding) of the compact JSON
  {"v":1,"seed":...,"mode":...,"mood":...,"palette":{...},"fonts":{...}}

Usage:
    from aesthetic.share import encode, decode

    token = encode(snapshot)
    restored = decode(token)      # None when the token is not usable
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Optional
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from pydantic import ValidationError

from .errors import ShareTokenError
from .models import Fonts, Palette, Snapshot, is_snapshot_version
from .moods import Mode, Mood
from .rng import random_seed

logger = logging.getLogger(__name__)

SHARE_PARAM = "a"


# ── base64url ─────────────────────────────────────────────────────────────────

def b64url_encode(text: str) -> str:
    raw = base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")
    return raw.rstrip("=")


def b64url_decode(token: str) -> str:
    pad = "=" * (-len(token) % 4)
    try:
        raw = base64.b64decode(token + pad, altchars=b"-_", validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise ShareTokenError(f"not base64url text: {e}") from e


# ── Codec ─────────────────────────────────────────────────────────────────────

def encode(snapshot: Snapshot) -> str:
    payload = snapshot.snapshot().to_payload()
    return b64url_encode(json.dumps(payload, separators=(",", ":"), ensure_ascii=False))


def parse_payload(data: object) -> Snapshot:
    """
    Validate a decoded payload dict into a Snapshot.

    Mode and mood fall back to light / Minimal and a missing seed gets a fresh
    one; a bad palette or font pair rejects the whole payload.
    """
    if not isinstance(data, dict):
        raise ShareTokenError("payload is not an object")
    if not is_snapshot_version(data.get("v")):
        raise ShareTokenError(f"unsupported version {data.get('v')!r}")

    fonts = data.get("fonts")
    if not isinstance(fonts, dict) or not all(isinstance(fonts.get(k), str) for k in ("display", "body")):
        raise ShareTokenError("fonts must hold display and body names")

    try:
        palette = Palette.model_validate(data.get("palette"))
    except ValidationError as e:
        raise ShareTokenError(f"invalid palette: {e.error_count()} error(s)") from e

    seed = data.get("seed")
    return Snapshot(
        seed=seed if isinstance(seed, str) else random_seed(),
        mode=Mode.parse(data.get("mode")),
        mood=Mood.parse(data.get("mood")),
        palette=palette,
        fonts=Fonts(display=fonts["display"], body=fonts["body"]),
    )


def decode_or_raise(token: str) -> Snapshot:
    if not isinstance(token, str) or not token.strip():
        raise ShareTokenError("empty token")
    text = b64url_decode(token.strip())
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ShareTokenError(f"not JSON: {e.msg}") from e
    except (ValueError, RecursionError) as e:
        # Oversized integer literals or nesting too deep for the parser
        raise ShareTokenError(f"unparseable JSON: {type(e).__name__}") from e
    return parse_payload(data)


def decode(token: str) -> Optional[Snapshot]:
    """Inverse of encode(). Returns None instead of raising on any bad token."""
    try:
        return decode_or_raise(token)
    except ShareTokenError as e:
        logger.debug(f"Share token rejected: {e.reason}")
        return None


# ── URLs ──────────────────────────────────────────────────────────────────────

def token_from_url(url: str) -> Optional[str]:
    values = parse_qs(urlsplit(url).query).get(SHARE_PARAM)
    return values[0] if values else None


def with_token(url: str, token: str) -> str:
    """Return `url` with the share parameter set to `token`, other params kept."""
    parts = urlsplit(url)
    params = {k: v[-1] for k, v in parse_qs(parts.query, keep_blank_values=True).items()}
    params[SHARE_PARAM] = token
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(params), parts.fragment))


def share_url(base_url: str, snapshot: Snapshot) -> str:
    return with_token(base_url, encode(snapshot))
