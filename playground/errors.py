from __future__ import annotations

from typing import Optional


class PlaygroundError(Exception):
    """Base error for every failure surfaced by the snippet manager."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ResourceUnavailable(PlaygroundError):
    """The snippet template or the catalog could not be fetched."""


class NotFound(PlaygroundError):
    def __init__(self, snippet_id: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"Cannot retrieve snippet '{snippet_id}' from storage. Make sure the ID is correct")
        self.snippet_id = snippet_id


class ValidationError(PlaygroundError):
    """Raised before any store mutation when a snippet is rejected.

    `reason` is one of ``empty-entity``, ``empty-name`` or ``duplicate-name``.
    """

    def __init__(self, reason: str, message: Optional[str] = None) -> None:
        super().__init__(message or reason)
        self.reason = reason


class StorageError(PlaygroundError):
    """The snippet store could not be written; its contents are unchanged."""
