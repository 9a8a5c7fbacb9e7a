import io
import json
from pathlib import Path
import tempfile
from unittest.mock import patch

from playground.models import HostType
from playground.resource_loader import BUNDLED_RESOURCES, ResourceLoader, ResponseType


def test_bundled_template_and_catalog():
    loader = ResourceLoader()
    assert Path(loader.base) == BUNDLED_RESOURCES

    template = loader.load_default_template(HostType.EXCEL)
    assert template is not None
    assert template.name == "Original Code"
    assert "Excel.run" in template.payload["script"]

    playlist = loader.load_catalog(HostType.EXCEL)
    assert playlist is not None
    assert playlist.name == "Microsoft"
    assert {item.group for item in playlist.items} == {"Range Manipulation", "Tables"}


def test_missing_resources_return_none():
    with tempfile.TemporaryDirectory() as td:
        loader = ResourceLoader(td)
        assert loader.load_default_template(HostType.WORD) is None
        assert loader.load_catalog(HostType.WORD) is None
        assert loader.fetch("nothing.json", ResponseType.JSON) is None


def test_unparseable_or_wrong_shape_returns_none():
    with tempfile.TemporaryDirectory() as td:
        root = Path(td) / "snippets" / "excel"
        root.mkdir(parents=True)
        (root / "default.yml").write_text("- just\n- a list\n", encoding="utf-8")
        (root / "playlist.json").write_text("{not json", encoding="utf-8")
        loader = ResourceLoader(td)
        assert loader.load_default_template(HostType.EXCEL) is None
        assert loader.load_catalog(HostType.EXCEL) is None


def test_catalog_from_explicit_path():
    with tempfile.TemporaryDirectory() as td:
        custom = Path(td) / "custom.json"
        custom.write_text(json.dumps({"name": "Team", "items": [{"id": "1", "name": "One", "group": "G"}]}), encoding="utf-8")
        playlist = ResourceLoader(td).load_catalog(HostType.EXCEL, str(custom))
        assert playlist.name == "Team"
        assert playlist.items[0].name == "One"


class _FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def test_remote_base_uses_urlopen():
    calls = []

    def fake_urlopen(url, timeout=None):
        calls.append((url, timeout))
        return _FakeResponse(b"name: Remote Template\nscript: x\n")

    loader = ResourceLoader("https://example.test/assets/", timeout=3)
    with patch("playground.resource_loader.urllib.request.urlopen", fake_urlopen):
        template = loader.load_default_template(HostType.WORD)

    assert template is not None and template.name == "Remote Template"
    assert calls == [("https://example.test/assets/snippets/word/default.yml", 3)]


def test_remote_failure_returns_none():
    def broken_urlopen(url, timeout=None):
        raise OSError("offline")

    loader = ResourceLoader("https://example.test")
    with patch("playground.resource_loader.urllib.request.urlopen", broken_urlopen):
        assert loader.load_catalog(HostType.EXCEL) is None
