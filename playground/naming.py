from __future__ import annotations

import re
from typing import Iterable, Optional

DEFAULT_NAME = "New Snippet"

_TRAILING_NUMBER = re.compile(r"\(?(\d+)?\)?$")


def resolve_unique_name(existing_names: Iterable[str], base_name: Optional[str], suffix: Optional[str] = None) -> str:
    """Derive a display name that does not collide with `existing_names`.

    A free base name comes back unchanged (plus the suffix, if any). Once the
    base name is taken, every existing name that starts with it contributes
    its trailing number (0 if it has none) and the result is tagged with one
    more than the highest of them: ``{"Foo"}`` gives ``"Foo - 1"``,
    ``{"Foo", "Foo - 1"}`` gives ``"Foo - 2"`` and ``{"Foo"}`` with suffix
    ``"draft"`` gives ``"Foo - draft - 1"``.
    """
    name = (base_name or "").strip() or DEFAULT_NAME
    candidate = f"{name} - {suffix}" if suffix else name
    taken = {(item or "").strip() for item in existing_names}
    if name not in taken:
        return candidate

    counter = 0
    for existing in taken:
        if not existing.startswith(name):
            continue
        match = _TRAILING_NUMBER.search(existing)
        number = int(match.group(1)) if match and match.group(1) else 0
        if counter <= number:
            counter = number + 1

    return f"{candidate} - {counter}"
