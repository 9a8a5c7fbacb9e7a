"""Snippet playground facade: the surface the add-in UI and the CLI talk to."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import threading
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from playground.config_manager import ConfigManager
from playground.errors import PlaygroundError
from playground.events import DialogEvent, EventChannel, StorageEvent
from playground.models import HostType, Snippet, group_playlist
from playground.notification import Notification
from playground.resource_loader import ResourceLoader
from playground.runner import RemoteRunner
from playground.snippet_manager import SnippetManager
from playground.storage import SnippetStorage

logger = logging.getLogger(__name__)


class PlaygroundAPI:
    """Synchronous, status-dict API over `SnippetManager`.

    Collaborators default to what `ConfigManager` describes; tests inject
    their own. Domain errors never escape: they come back as
    ``{"status": "error", "detail": ...}`` and are logged through
    `Notification.error`.
    """

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        storage: Optional[SnippetStorage] = None,
        loader: Optional[ResourceLoader] = None,
        runner: Optional[RemoteRunner] = None,
        channel: Optional[EventChannel] = None,
        host: Optional[HostType] = None,
    ) -> None:
        self.config_manager = config or ConfigManager()
        self.host = host or self.config_manager.get_host()
        self.channel = channel or EventChannel()
        self.notification = Notification(self.channel)
        self.storage = storage or SnippetStorage(self.host.namespace, self.config_manager.storage_root())
        self.loader = loader or ResourceLoader(
            self.config_manager.get("resourceRoot"),
            timeout=self.config_manager.get_fetch_timeout(),
        )
        self.runner = runner or RemoteRunner(self.config_manager.get("runnerUrl"))
        self.manager = SnippetManager(
            self.storage,
            self.loader,
            self.runner,
            self.channel,
            host=self.host,
            enforce_unique_names=self.config_manager.enforce_unique_names(),
        )
        self._events: deque[Dict[str, Any]] = deque(maxlen=60)
        self._event_lock = threading.Lock()
        self.channel.subscribe(StorageEvent, self._capture_event)
        self._ready = True
        logger.info("Snippet playground ready for %s with %d snippets", self.host.value, len(self.storage))

    def _capture_event(self, event: StorageEvent) -> None:
        entry = {
            "type": "clear" if event.is_clear else "change",
            "id": event.snippet.id if event.snippet is not None else None,
            "name": event.snippet.name if event.snippet is not None else None,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        with self._event_lock:
            self._events.appendleft(entry)

    def _call(self, action: Callable[[], Awaitable[Any]], render: Callable[[Any], Dict[str, Any]]) -> Dict[str, Any]:
        try:
            result = asyncio.run(action())
        except PlaygroundError as exc:
            self.notification.error(exc.message)
            response: Dict[str, Any] = {"status": "error", "detail": exc.message}
            reason = getattr(exc, "reason", None)
            if reason:
                response["reason"] = reason
            return response
        response = {"status": "success"}
        response.update(render(result))
        return response

    def ping(self) -> Dict[str, Any]:
        """Lightweight readiness probe for the frontend bootstrap loop."""
        return {
            "status": "ok",
            "ready": self._ready,
            "host": self.host.value,
            "snippetCount": len(self.storage),
            "storagePath": str(self.storage.path) if self.storage.path else "",
        }

    def get_events(self) -> List[Dict[str, Any]]:
        with self._event_lock:
            return list(self._events)

    def subscribe_dialogs(self, handler: Callable[[DialogEvent], None]) -> Callable[[], None]:
        return self.channel.subscribe(DialogEvent, handler)

    def list_snippets(self) -> List[Dict[str, Any]]:
        return [snippet.to_dict() for snippet in self.manager.local()]

    def get_snippet(self, snippet_id: str) -> Dict[str, Any]:
        return self._call(lambda: self.manager.create(snippet_id), lambda s: {"snippet": s.to_dict()})

    def create_snippet(self, suffix: Optional[str] = None, save: bool = False) -> Dict[str, Any]:
        async def action() -> Snippet:
            snippet = await self.manager.create(suffix=suffix)
            return await self.manager.save(snippet) if save else snippet

        return self._call(action, lambda s: {"snippet": s.to_dict(), "saved": save})

    def duplicate_snippet(self, snippet_id: str, suffix: str = "copy") -> Dict[str, Any]:
        async def action() -> Snippet:
            return await self.manager.save(await self.manager.duplicate(snippet_id, suffix))

        return self._call(action, lambda s: {"snippet": s.to_dict()})

    def save_snippet(self, snippet_data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        async def action() -> Snippet:
            snippet = Snippet.from_dict(snippet_data) if snippet_data else None
            return await self.manager.save(snippet)

        return self._call(action, lambda s: {"snippet": s.to_dict(), "detail": f"Saved snippet '{s.name}'"})

    def delete_snippet(self, snippet_data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        async def action() -> Optional[Snippet]:
            snippet = Snippet.from_dict(snippet_data) if snippet_data else None
            return await self.manager.delete(snippet)

        return self._call(action, lambda removed: {"deleted": removed is not None})

    def delete_snippet_by_id(self, snippet_id: str) -> Dict[str, Any]:
        async def action() -> Optional[Snippet]:
            return await self.manager.delete(await self.manager.create(snippet_id))

        return self._call(action, lambda removed: {"deleted": removed is not None})

    def clear_snippets(self) -> Dict[str, Any]:
        return self._call(self.manager.clear, lambda _ok: {"detail": "Cleared all snippets"})

    def get_gallery(self, url: Optional[str] = None) -> Dict[str, Any]:
        def render(playlist: Any) -> Dict[str, Any]:
            return {"name": playlist.name, "groups": [group.to_dict() for group in group_playlist(playlist)]}

        return self._call(lambda: self.manager.templates(url), render)

    def run_snippet(self, snippet_id: str) -> Dict[str, Any]:
        async def action() -> Snippet:
            snippet = await self.manager.create(snippet_id)
            await self.manager.run(snippet)
            return snippet

        return self._call(action, lambda s: {"detail": f"Submitted '{s.name}' to {self.runner.endpoint}"})

    def import_snippet_pack(self, location: str) -> Dict[str, Any]:
        """Import a pack from a local file or an http(s) link."""
        return self._call(
            lambda: self.manager.import_pack(location),
            lambda items: {"detail": f"Imported {len(items)} snippets", "snippets": [s.to_dict() for s in items]},
        )

    def export_snippet_pack(self, snippet_ids: Sequence[str], file_path: str) -> Dict[str, Any]:
        return self._call(
            lambda: self.manager.export_pack(snippet_ids, file_path),
            lambda count: {"detail": f"Exported {count} snippets", "path": file_path},
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="snippet-playground", description="Manage add-in code snippets.")
    parser.add_argument("--config-dir", type=Path, default=None, help="Preferences directory")
    parser.add_argument("--host", default=None, help="Host context, e.g. Excel or Word")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List stored snippets")
    new = sub.add_parser("new", help="Start a snippet from the host template")
    new.add_argument("--suffix", default=None)
    new.add_argument("--save", action="store_true", help="Store the new snippet")
    copy_cmd = sub.add_parser("copy", help="Duplicate a stored snippet")
    copy_cmd.add_argument("id")
    copy_cmd.add_argument("--suffix", default="copy")
    delete = sub.add_parser("delete", help="Delete a stored snippet")
    delete.add_argument("id")
    sub.add_parser("clear", help="Delete every stored snippet")
    gallery = sub.add_parser("gallery", help="Show the example catalog")
    gallery.add_argument("--url", default=None)
    run = sub.add_parser("run", help="Send a stored snippet to the runner")
    run.add_argument("id")
    import_cmd = sub.add_parser("import", help="Import a YAML/JSON snippet pack from a file or link")
    import_cmd.add_argument("location")
    export = sub.add_parser("export", help="Export snippets to a YAML/JSON pack")
    export.add_argument("path")
    export.add_argument("ids", nargs="+")
    return parser


def _dispatch(api: PlaygroundAPI, args: argparse.Namespace) -> Any:
    if args.command == "list":
        return api.list_snippets()
    if args.command == "new":
        return api.create_snippet(suffix=args.suffix, save=args.save)
    if args.command == "copy":
        return api.duplicate_snippet(args.id, args.suffix)
    if args.command == "delete":
        return api.delete_snippet_by_id(args.id)
    if args.command == "clear":
        return api.clear_snippets()
    if args.command == "gallery":
        return api.get_gallery(args.url)
    if args.command == "run":
        return api.run_snippet(args.id)
    if args.command == "import":
        return api.import_snippet_pack(args.location)
    if args.command == "export":
        return api.export_snippet_pack(args.ids, args.path)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="[%(levelname)s] %(message)s")

    config = ConfigManager(base_dir=args.config_dir)
    host = None
    if args.host:
        try:
            host = HostType.parse(args.host)
        except ValueError as exc:
            print(f"[ERROR] {exc}", file=sys.stderr)
            return 2

    api = PlaygroundAPI(config=config, host=host)
    result = _dispatch(api, args)
    print(json.dumps(result, indent=2, ensure_ascii=False))
    if isinstance(result, dict) and result.get("status") == "error":
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
