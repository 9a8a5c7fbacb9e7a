from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from playground.models import HostType
from playground.runner import RUNNER_URL

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_DIR = Path.home() / ".snippet_playground"

DEFAULTS: Dict[str, Any] = {
    "hostContext": HostType.EXCEL.value,
    "runnerUrl": RUNNER_URL,
    "resourceRoot": None,
    "storageRoot": None,
    "fetchTimeout": 10.0,
    "enforceUniqueNames": False,
}


class ConfigManager:
    """Playground preferences kept in ``<profile>/preferences.json``.

    The profile directory also hosts the snippet stores unless
    ``storageRoot`` points elsewhere. Keys missing from the file read as
    their `DEFAULTS` value.
    """

    PREFERENCES_FILE = "preferences.json"

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self.profile_dir = Path(base_dir) if base_dir is not None else DEFAULT_PROFILE_DIR
        self.profile_dir.mkdir(parents=True, exist_ok=True)
        self.preferences_file = self.profile_dir / self.PREFERENCES_FILE
        self._values = self._read_preferences_file()

    def _read_preferences_file(self) -> Dict[str, Any]:
        try:
            raw = self.preferences_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            logger.warning("Cannot read %s: %s", self.preferences_file, exc)
            return {}
        try:
            values = json.loads(raw)
        except ValueError as exc:
            logger.warning("Ignoring malformed %s: %s", self.preferences_file, exc)
            return {}
        if not isinstance(values, dict):
            logger.warning("Ignoring %s: expected a JSON object", self.preferences_file)
            return {}
        return values

    def _write_preferences_file(self) -> None:
        text = json.dumps(self._values, indent=2, sort_keys=True)
        try:
            self.preferences_file.write_text(text, encoding="utf-8")
        except OSError as exc:
            logger.error("Preference change kept in memory only, %s not writable: %s", self.preferences_file, exc)

    def get_preferences(self) -> Dict[str, Any]:
        return dict(self._values)

    def set_preference(self, key: str, value: Any) -> None:
        self._values[key] = value
        self._write_preferences_file()

    def get(self, key: str) -> Any:
        value = self._values.get(key)
        return DEFAULTS.get(key) if value is None else value

    def get_host(self) -> HostType:
        try:
            return HostType.parse(self.get("hostContext"))
        except ValueError as exc:
            logger.warning("%s; falling back to %s", exc, DEFAULTS["hostContext"])
            return HostType.parse(DEFAULTS["hostContext"])

    def storage_root(self) -> Path:
        """Directory holding the ``<Host>Snippets.yml`` stores."""
        configured = self._values.get("storageRoot")
        if not configured:
            return self.profile_dir
        root = Path(configured).expanduser()
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Storage root %s unusable (%s); snippets stay in %s", root, exc, self.profile_dir)
            return self.profile_dir
        return root

    def get_fetch_timeout(self) -> float:
        try:
            return float(self.get("fetchTimeout"))
        except (TypeError, ValueError):
            return float(DEFAULTS["fetchTimeout"])

    def enforce_unique_names(self) -> bool:
        return bool(self.get("enforceUniqueNames"))
