"""Exceptions raised inside the aesthetic core. None of them are fatal to a session."""

from __future__ import annotations


class AestheticError(Exception):
    """Base class for aesthetic errors."""


class InvalidHexError(AestheticError, ValueError):
    """Raised when a color is not a '#rrggbb' hex string."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid hex color {value!r}; use #rrggbb")


class UnknownTokenError(AestheticError, KeyError):
    """Raised for a palette token name outside bg/surface/text/muted/primary/accent."""

    def __init__(self, token: object):
        self.token = token
        super().__init__(f"Unknown palette token {token!r}")

    def __str__(self) -> str:
        return self.args[0]


class ShareTokenError(AestheticError, ValueError):
    """Raised when a share token cannot be turned back into a snapshot."""

    def __init__(self, reason: str):
        self.reason = str(reason).strip() or "Invalid share token"
        super().__init__(self.reason)
