from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from playground.errors import StorageError
from playground.models import Snippet

logger = logging.getLogger(__name__)


class SnippetStorage:
    """Key-value map of snippet id to snippet, one per host namespace.

    With no `root` the map lives in memory only. Otherwise it is loaded from
    and written back to ``<root>/<namespace>.yml`` after every mutation.
    Values are copied in and out so callers never hold the stored object.
    """

    def __init__(self, namespace: str, root: Optional[Path] = None) -> None:
        self.namespace = namespace
        self.root = Path(root) if root is not None else None
        self._items: Dict[str, Snippet] = {}
        self._load_errors: List[Dict[str, Any]] = []
        self._load()

    @property
    def path(self) -> Optional[Path]:
        if self.root is None:
            return None
        return self.root / f"{self.namespace}.yml"

    @property
    def load_errors(self) -> List[Dict[str, Any]]:
        return list(self._load_errors)

    def get(self, snippet_id: str) -> Optional[Snippet]:
        item = self._items.get(snippet_id)
        return item.copy() if item is not None else None

    def keys(self) -> List[str]:
        return list(self._items)

    def values(self) -> List[Snippet]:
        return [item.copy() for item in self._items.values()]

    def insert(self, snippet_id: str, snippet: Snippet) -> Snippet:
        items = dict(self._items)
        items[snippet_id] = snippet.copy()
        self._commit(items)
        return snippet.copy()

    def remove(self, snippet_id: str) -> Optional[Snippet]:
        if snippet_id not in self._items:
            return None
        items = dict(self._items)
        removed = items.pop(snippet_id)
        self._commit(items)
        return removed

    def clear(self) -> None:
        self._commit({})

    def __contains__(self, snippet_id: object) -> bool:
        return snippet_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    # -------------------------
    # Persistence
    # -------------------------
    def _load(self) -> None:
        path = self.path
        if path is None or not path.exists():
            return
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except Exception as exc:
            logger.warning("Failed to load %s: %s", path, exc)
            self._load_errors.append({"file": str(path), "error": str(exc)})
            return

        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a mapping of snippet ids", path)
            self._load_errors.append({"file": str(path), "error": "expected a mapping"})
            return

        for key, raw in data.items():
            if not isinstance(raw, dict):
                self._load_errors.append({"file": str(path), "error": f"entry {key!r} is not a mapping"})
                continue
            raw = dict(raw)
            raw.setdefault("id", str(key))
            self._items[str(key)] = Snippet.from_dict(raw)
        logger.debug("Loaded %d snippets from %s", len(self._items), path)

    def _commit(self, items: Dict[str, Snippet]) -> None:
        # The file is written before memory changes, so a failed write leaves both as they were.
        path = self.path
        if path is not None:
            data = {key: item.to_dict() for key, item in items.items()}
            try:
                text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(text, encoding="utf-8")
            except (OSError, yaml.YAMLError) as exc:
                logger.error("Failed to write %s: %s", path, exc)
                raise StorageError(f"Cannot save snippets to {path}: {exc}") from exc
        self._items = items
