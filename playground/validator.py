from __future__ import annotations

from typing import Any

from playground.errors import ValidationError


def validate_snippet(snippet: Any) -> None:
    """Reject a snippet that must never reach the store."""
    if not snippet:
        raise ValidationError("empty-entity", "Snippet cannot be empty")
    name = snippet.get("name") if isinstance(snippet, dict) else getattr(snippet, "name", None)
    if name is None or not str(name).strip():
        raise ValidationError("empty-name", "Snippet name cannot be empty")
