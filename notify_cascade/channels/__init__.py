"""Base types for notification channel dispatchers."""

from dataclasses import dataclass, field, fields
from typing import Any, Optional

SKIPPED = "skipped"
SENT = "sent"
FAILED = "failed"


@dataclass(frozen=True)
class NotificationRequest:
    """A single notification to deliver to one target."""
    target_url: Optional[str]
    message: str
    title: str
    method: Optional[str] = None
    body_template: Optional[str] = None
    headers_json: Optional[str] = None
    username: Optional[str] = None
    icon_emoji: Optional[str] = None
    channel: Optional[str] = None


@dataclass(frozen=True)
class RunContext:
    """Read-only metadata about the CI run that triggered the notification."""
    repository: str = ""
    run_id: str = ""
    run_number: str = ""
    server_url: str = "https://github.com"
    actor: str = ""
    event_name: str = ""
    ref: str = ""
    sha: str = ""
    workflow: str = ""

    @property
    def repository_url(self) -> str:
        return f"{self.server_url}/{self.repository}"

    @property
    def run_url(self) -> str:
        return f"{self.repository_url}/actions/runs/{self.run_id}"

    def as_dict(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ChannelPayload:
    """Represents the HTTP request a dispatcher is about to send."""
    method: str
    url: str
    body: Any  # JSON-serializable, serialized by the transport
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DispatchResult:
    """
    Outcome of one dispatcher call.

    Exactly one of ``skipped``, ``sent`` or ``failed``. Only ``failed``
    carries an error, and it is never empty.
    """
    status: str
    error: Optional[str] = None

    def __post_init__(self):
        if self.status not in (SKIPPED, SENT, FAILED):
            raise ValueError(f"Unknown dispatch status: {self.status}")
        if self.status == FAILED and not self.error:
            raise ValueError("A failed dispatch must carry an error description")
        if self.status != FAILED and self.error is not None:
            raise ValueError(f"A {self.status} dispatch cannot carry an error")

    @classmethod
    def skipped(cls) -> "DispatchResult":
        return cls(SKIPPED)

    @classmethod
    def sent(cls) -> "DispatchResult":
        return cls(SENT)

    @classmethod
    def failed(cls, error: str) -> "DispatchResult":
        return cls(FAILED, error or "Unknown error")

    @property
    def ok(self) -> bool:
        return self.status != FAILED

    def to_dict(self) -> dict:
        if self.status == FAILED:
            return {"status": self.status, "error": self.error}
        return {"status": self.status}


def classify_response(status_code: int, text: str) -> DispatchResult:
    """Map a raw HTTP status and body to a dispatch result."""
    if 200 <= status_code < 300:
        return DispatchResult.sent()
    return DispatchResult.failed(f"HTTP {status_code}: {text}")
