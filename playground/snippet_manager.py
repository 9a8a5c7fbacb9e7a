from __future__ import annotations

import json
import logging
import urllib.parse
from pathlib import Path
from typing import Iterable, List, Optional

import yaml

from playground.errors import NotFound, PlaygroundError, ResourceUnavailable, ValidationError
from playground.events import EventChannel, StorageEvent
from playground.models import HostType, Playlist, Snippet, new_snippet_id
from playground.naming import resolve_unique_name
from playground.resource_loader import ResourceLoader, ResponseType, is_url
from playground.runner import RemoteRunner
from playground.storage import SnippetStorage
from playground.validator import validate_snippet

logger = logging.getLogger(__name__)


class SnippetManager:
    """Create, save, delete, list and run snippets for one host.

    Every operation touching the loader, the runner or the store is a
    coroutine so validation, lookup and resource failures all reach the
    caller the same way: raised from the awaited call.
    """

    def __init__(
        self,
        storage: SnippetStorage,
        loader: ResourceLoader,
        runner: RemoteRunner,
        channel: EventChannel,
        host: HostType = HostType.EXCEL,
        enforce_unique_names: bool = False,
    ) -> None:
        self._store = storage
        self._loader = loader
        self._runner = runner
        self._channel = channel
        self.host = host
        self.enforce_unique_names = enforce_unique_names

    async def create(self, snippet_id: Optional[str] = None, suffix: Optional[str] = None) -> Snippet:
        """Open a stored snippet by id, or start a new one from the host template."""
        if snippet_id is not None:
            found = self._store.get(snippet_id)
            if found is None:
                raise NotFound(snippet_id)
            return found.copy()

        template = self._loader.load_default_template(self.host)
        if template is None:
            raise ResourceUnavailable(
                "Cannot retrieve snippet template. Make sure you have an active internet connection."
            )
        result = template.copy(id=new_snippet_id())
        if self._exists(result.name):
            result.name = resolve_unique_name(self._names(), result.name, suffix)
        logger.debug("Created snippet %s named %r", result.id, result.name)
        return result

    async def duplicate(self, snippet_id: str, suffix: str = "copy") -> Snippet:
        """Copy a stored snippet under a fresh id and a free name. Not saved."""
        source = await self.create(snippet_id)
        return source.copy(id=new_snippet_id(), name=resolve_unique_name(self._names(), source.name, suffix))

    async def save(self, snippet: Snippet) -> Snippet:
        validate_snippet(snippet)
        if self.enforce_unique_names:
            self._check_unique(snippet)
        result = self._store.insert(snippet.id, snippet)
        self._channel.publish(StorageEvent(snippet.copy()))
        return result

    async def delete(self, snippet: Snippet) -> Optional[Snippet]:
        validate_snippet(snippet)
        result = self._store.remove(snippet.id)
        if result is None:
            logger.debug("Delete of %s found nothing to remove", snippet.id)
        self._channel.publish(StorageEvent(snippet.copy()))
        return result

    async def clear(self) -> bool:
        self._store.clear()
        self._channel.publish(StorageEvent(None))
        return True

    def local(self) -> List[Snippet]:
        return self._store.values()

    async def templates(self, url: Optional[str] = None) -> Playlist:
        playlist = self._loader.load_catalog(self.host, url)
        if playlist is None:
            raise ResourceUnavailable("Cannot retrieve the snippet gallery. Make sure you have an active internet connection.")
        return playlist

    async def run(self, snippet: Snippet) -> bool:
        self._runner.submit(snippet)
        return True

    # -------------------------
    # Snippet packs
    # -------------------------
    async def import_pack(self, location: str) -> List[Snippet]:
        """Save every snippet of a YAML/JSON pack under a fresh id and a free name.

        `location` is a local file or an http(s) link.
        """
        if not is_url(location):
            location = str(Path(location).expanduser().resolve())
        path_part = urllib.parse.urlparse(location).path if is_url(location) else location
        response_type = ResponseType.JSON if path_part.lower().endswith(".json") else ResponseType.YAML
        pack = self._loader.fetch(location, response_type)
        if pack is None:
            raise ResourceUnavailable(f"Cannot retrieve snippet pack from {location}")

        if isinstance(pack, dict):
            pack = pack.get("snippets", [])
        if not isinstance(pack, list):
            raise PlaygroundError("Invalid pack format")

        imported: List[Snippet] = []
        for raw in pack:
            if not isinstance(raw, dict):
                continue
            snippet = Snippet.from_dict(raw)
            snippet.id = new_snippet_id()
            snippet.name = resolve_unique_name(self._names(), snippet.name)
            imported.append(await self.save(snippet))
        logger.info("Imported %d snippets from %s", len(imported), location)
        return imported

    async def export_pack(self, snippet_ids: Iterable[str], file_path: str) -> int:
        snippets = [found.to_dict() for found in (self._store.get(sid) for sid in snippet_ids) if found is not None]
        path = Path(file_path)
        if path.suffix.lower() == ".json":
            text = json.dumps(snippets, indent=2, ensure_ascii=False)
        else:
            text = yaml.safe_dump(snippets, sort_keys=False, allow_unicode=True)
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise PlaygroundError(f"Cannot write snippet pack {file_path}: {exc}") from exc
        return len(snippets)

    def _names(self) -> List[str]:
        return [item.name for item in self._store.values()]

    def _exists(self, name: str) -> bool:
        wanted = (name or "").strip()
        return any((item.name or "").strip() == wanted for item in self._store.values())

    def _check_unique(self, snippet: Snippet) -> None:
        wanted = snippet.name.strip()
        for item in self._store.values():
            if item.id != snippet.id and (item.name or "").strip() == wanted:
                raise ValidationError("duplicate-name", f"A snippet named '{wanted}' already exists")
