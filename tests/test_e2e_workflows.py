"""
E2E Integration Tests for Critical Workflows
Tests complete user journeys end-to-end
"""
import asyncio
import tempfile
from pathlib import Path

import pytest
import yaml

from playground.errors import NotFound
from playground.events import EventChannel, StorageEvent
from playground.models import HostType, Snippet, group_playlist
from playground.resource_loader import ResourceLoader
from playground.runner import RemoteRunner
from playground.snippet_manager import SnippetManager
from playground.storage import SnippetStorage


class RecordingTransport:
    def __init__(self):
        self.posts = []

    def post(self, url, fields):
        self.posts.append((url, dict(fields)))


def _build(root: Path):
    channel = EventChannel()
    transport = RecordingTransport()
    manager = SnippetManager(
        SnippetStorage(HostType.EXCEL.namespace, root=root),
        ResourceLoader(),
        RemoteRunner("https://runner.test", transport=transport),
        channel,
        host=HostType.EXCEL,
    )
    return manager, channel, transport


def test_e2e_create_edit_run_delete_workflow():
    """
    E2E: User starts from the template -> saves -> edits -> runs -> deletes
    Verifies complete lifecycle against the bundled Excel resources
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        manager, channel, transport = _build(root)
        events = []
        channel.subscribe(StorageEvent, events.append)

        # Step 1: Start from the default template
        snippet = asyncio.run(manager.create())
        assert snippet.name == "Original Code"

        # Step 2: Save it, a second one gets a numbered name
        asyncio.run(manager.save(snippet))
        second = asyncio.run(manager.create())
        assert second.name == "Original Code - 1"

        # Step 3: Edit and save
        edited = asyncio.run(manager.create(snippet.id))
        edited.name = "Highlight selection"
        asyncio.run(manager.save(edited))

        # Step 4: Data survives a restart
        reopened, _, _ = _build(root)
        assert [s.name for s in reopened.local()] == ["Highlight selection"]

        # Step 5: Run it
        asyncio.run(manager.run(edited))
        url, fields = transport.posts[0]
        assert url == "https://runner.test"
        assert yaml.safe_load(fields["snippet"])["name"] == "Highlight selection"

        # Step 6: Delete it
        asyncio.run(manager.delete(edited))
        assert manager.local() == []
        assert [ev.snippet.name for ev in events] == ["Original Code", "Highlight selection", "Highlight selection"]


def test_e2e_template_name_collision():
    with tempfile.TemporaryDirectory() as tmpdir:
        manager, _, _ = _build(Path(tmpdir))
        asyncio.run(manager.save(Snippet(id="existing", name="Original Code")))
        created = asyncio.run(manager.create())
        assert created.name == "Original Code - 1"


def test_e2e_unknown_id():
    with tempfile.TemporaryDirectory() as tmpdir:
        manager, _, _ = _build(Path(tmpdir))
        with pytest.raises(NotFound):
            asyncio.run(manager.create("x"))


def test_e2e_gallery_grouping():
    with tempfile.TemporaryDirectory() as tmpdir:
        manager, _, _ = _build(Path(tmpdir))
        playlist = asyncio.run(manager.templates())
        groups = group_playlist(playlist)
        assert [group.key for group in groups] == ["Range Manipulation", "Tables"]
        assert [item.name for item in groups[0].items][:2] == ["Set range values", "Set cell ranges"]
        assert sum(len(group.items) for group in groups) == len(playlist.items)
