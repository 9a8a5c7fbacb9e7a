from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class HostType(str, Enum):
    EXCEL = "Excel"
    WORD = "Word"
    POWERPOINT = "PowerPoint"
    ONENOTE = "OneNote"
    PROJECT = "Project"
    OUTLOOK = "Outlook"
    WEB = "Web"

    @classmethod
    def parse(cls, value: Any) -> "HostType":
        if isinstance(value, HostType):
            return value
        text = str(value or "").strip().lower()
        for host in cls:
            if host.value.lower() == text or host.name.lower() == text:
                return host
        raise ValueError(f"Unknown host context: {value!r}")

    @property
    def namespace(self) -> str:
        """Store namespace, one per host (e.g. ``ExcelSnippets``)."""
        return f"{self.value}Snippets"

    @property
    def resource_dir(self) -> str:
        return f"snippets/{self.value.lower()}"


def new_snippet_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Snippet:
    """A named code unit. Everything except `id` and `name` rides in `payload` untouched."""

    id: str
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Snippet":
        raw = dict(data or {})
        snippet_id = raw.pop("id", None) or new_snippet_id()
        name = raw.pop("name", None)
        return cls(id=str(snippet_id), name="" if name is None else str(name), payload=copy.deepcopy(raw))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "name": self.name}
        data.update(copy.deepcopy(self.payload))
        return data

    def copy(self, **changes: Any) -> "Snippet":
        clone = Snippet(id=self.id, name=self.name, payload=copy.deepcopy(self.payload))
        for key, value in changes.items():
            setattr(clone, key, value)
        return clone


@dataclass
class PlaylistItem:
    id: str
    name: str
    group: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlaylistItem":
        raw = dict(data)
        return cls(
            id=str(raw.pop("id", "") or ""),
            name=str(raw.pop("name", "") or ""),
            group=str(raw.pop("group", "") or ""),
            extra=raw,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"id": self.id, "name": self.name, "group": self.group}
        data.update(self.extra)
        return data


@dataclass
class PlaylistGroup:
    key: str
    items: List[PlaylistItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.key, "items": [item.to_dict() for item in self.items]}


@dataclass
class Playlist:
    """Catalog of example snippets as published: a name and a flat item list."""

    name: str
    items: List[PlaylistItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Playlist":
        if not isinstance(data, Mapping):
            raise ValueError("Playlist must be a mapping")
        raw_items = data.get("snippets")
        if raw_items is None:
            raw_items = data.get("items") or []
        if not isinstance(raw_items, list):
            raise ValueError("Playlist snippets must be a list")
        items = [PlaylistItem.from_dict(item) for item in raw_items if isinstance(item, Mapping)]
        return cls(name=str(data.get("name") or ""), items=items)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "snippets": [item.to_dict() for item in self.items]}


DEFAULT_GROUP = "Other"


def group_playlist(playlist: Playlist, default_group: Optional[str] = None) -> List[PlaylistGroup]:
    """Nest the flat playlist into groups, keeping first-seen key order."""
    fallback = default_group or DEFAULT_GROUP
    groups: Dict[str, PlaylistGroup] = {}
    for item in playlist.items:
        key = item.group.strip() or fallback
        if key not in groups:
            groups[key] = PlaylistGroup(key=key)
        groups[key].items.append(item)
    return list(groups.values())
