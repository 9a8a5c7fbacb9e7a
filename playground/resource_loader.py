from __future__ import annotations

import json
import logging
import urllib.request
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from playground.models import HostType, Playlist, Snippet

logger = logging.getLogger(__name__)

BUNDLED_RESOURCES = Path(__file__).with_name("resources")


class ResponseType(str, Enum):
    YAML = "yaml"
    JSON = "json"


def is_url(location: str) -> bool:
    return location.startswith("http://") or location.startswith("https://")


class ResourceLoader:
    """Read-only access to the static snippet resources.

    `base` is either a local directory or an http(s) URL. Every failure is
    logged and reported as ``None`` so callers decide how fatal it is.
    """

    def __init__(self, base: Union[str, Path, None] = None, timeout: float = 10.0) -> None:
        self.base = str(base) if base is not None else str(BUNDLED_RESOURCES)
        self.timeout = timeout

    def resolve(self, path: str) -> str:
        if is_url(path) or Path(path).is_absolute():
            return path
        if is_url(self.base):
            return f"{self.base.rstrip('/')}/{path.lstrip('/')}"
        return str(Path(self.base) / path)

    def fetch(self, path: str, response_type: ResponseType) -> Optional[Any]:
        location = self.resolve(path)
        try:
            text = self._read(location)
        except Exception as exc:
            logger.warning("Cannot fetch %s: %s", location, exc)
            return None
        try:
            if response_type == ResponseType.JSON:
                return json.loads(text)
            return yaml.safe_load(text)
        except Exception as exc:
            logger.warning("Cannot parse %s as %s: %s", location, response_type.value, exc)
            return None

    def load_default_template(self, host: HostType) -> Optional[Snippet]:
        data = self.fetch(f"{host.resource_dir}/default.yml", ResponseType.YAML)
        if not isinstance(data, dict):
            if data is not None:
                logger.warning("Default template for %s is not a mapping", host.value)
            return None
        return Snippet.from_dict(data)

    def load_catalog(self, host: HostType, url: Optional[str] = None) -> Optional[Playlist]:
        data = self.fetch(url or f"{host.resource_dir}/playlist.json", ResponseType.JSON)
        if data is None:
            return None
        try:
            return Playlist.from_dict(data)
        except ValueError as exc:
            logger.warning("Invalid catalog for %s: %s", host.value, exc)
            return None

    def _read(self, location: str) -> str:
        if is_url(location):
            with urllib.request.urlopen(location, timeout=self.timeout) as response:
                return response.read().decode("utf-8")
        return Path(location).read_text(encoding="utf-8")
