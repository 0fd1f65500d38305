import json

import httpx
import pytest

from notify_cascade.channels import RunContext
from notify_cascade.transport import Transport


class RecordingServer:
    """Stands in for a webhook endpoint, remembering every request it gets."""

    def __init__(self, status_code: int = 200, text: str = "ok"):
        self.status_code = status_code
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text)

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)

    def transport(self) -> Transport:
        return Transport(http_transport=httpx.MockTransport(self))


@pytest.fixture()
def run_context() -> RunContext:
    return RunContext(
        repository="test-owner/test-repo",
        run_id="12345",
        run_number="42",
        server_url="https://github.com",
        actor="test-actor",
        event_name="push",
        ref="refs/heads/main",
        sha="abc123def456",
        workflow="CI",
    )


@pytest.fixture()
def server() -> RecordingServer:
    return RecordingServer()
