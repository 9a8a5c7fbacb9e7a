from __future__ import annotations

import logging
import threading
import urllib.parse
import urllib.request
from typing import Any, Dict, Mapping, Optional

import yaml

from playground.models import Snippet

logger = logging.getLogger(__name__)

RUNNER_URL = "https://addin-playground-runner.azurewebsites.net"


def dump_snippet(snippet: Snippet) -> str:
    return yaml.safe_dump(snippet.to_dict(), sort_keys=False, allow_unicode=True)


class FormPostTransport:
    """Posts url-encoded form fields on a daemon thread and ignores the response."""

    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = timeout

    def post(self, url: str, fields: Mapping[str, str]) -> threading.Thread:
        body = urllib.parse.urlencode(dict(fields)).encode("utf-8")
        request = urllib.request.Request(
            url,
            data=body,
            method="POST",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        worker = threading.Thread(target=self._send, args=(request,), daemon=True)
        worker.start()
        return worker

    def _send(self, request: urllib.request.Request) -> None:
        try:
            with urllib.request.urlopen(request, timeout=self.timeout):
                pass
        except Exception as exc:
            logger.warning("Form post to %s failed: %s", request.full_url, exc)


class RemoteRunner:
    """Hands snippets to the remote execution endpoint.

    Fire and forget: no retry, and nothing is read back from the endpoint.
    """

    def __init__(self, endpoint: str = RUNNER_URL, transport: Optional[Any] = None) -> None:
        self.endpoint = endpoint
        self._transport = transport or FormPostTransport()

    def build_fields(self, snippet: Snippet) -> Dict[str, str]:
        return {"snippet": dump_snippet(snippet)}

    def submit(self, snippet: Snippet) -> None:
        fields = self.build_fields(snippet)
        logger.info("Submitting snippet %s to %s", snippet.id, self.endpoint)
        self._transport.post(self.endpoint, fields)
