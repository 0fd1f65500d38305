"""Settings loaded from the GitHub Actions environment."""

from typing import Literal, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

from notify_cascade.channels import NotificationRequest, RunContext
from notify_cascade.transport import DEFAULT_TIMEOUT


def _input(name: str) -> AliasChoices:
    # GitHub keeps hyphens from the input name: `slack-webhook-url` -> INPUT_SLACK-WEBHOOK-URL
    return AliasChoices(f"INPUT_{name.upper()}", f"INPUT_{name.upper().replace('_', '-')}")


class Settings(BaseSettings):
    http_timeout: float = DEFAULT_TIMEOUT
    block_private_networks: bool = False
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"

    model_config = {"env_prefix": "NOTIFY_", "env_file": ".env", "extra": "ignore"}

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class GitHubSettings(BaseSettings):
    """Run metadata GitHub exports to every step."""

    repository: str = ""
    run_id: str = ""
    run_number: str = ""
    server_url: str = "https://github.com"
    actor: str = ""
    event_name: str = ""
    ref: str = ""
    sha: str = ""
    workflow: str = ""
    output: Optional[str] = None  # path of the step output file

    model_config = {"env_prefix": "GITHUB_", "env_file": ".env", "extra": "ignore"}

    def run_context(self) -> RunContext:
        return RunContext(
            repository=self.repository,
            run_id=self.run_id,
            run_number=self.run_number,
            server_url=self.server_url.rstrip("/"),
            actor=self.actor,
            event_name=self.event_name,
            ref=self.ref,
            sha=self.sha,
            workflow=self.workflow,
        )


class ActionInputs(BaseSettings):
    """Action inputs, as passed by the runner in INPUT_* variables."""

    webhook_url: Optional[str] = Field(None, validation_alias=_input("webhook_url"))
    slack_webhook_url: Optional[str] = Field(None, validation_alias=_input("slack_webhook_url"))
    method: str = Field("POST", validation_alias=_input("method"))
    body_template: Optional[str] = Field(None, validation_alias=_input("body_template"))
    headers: Optional[str] = Field(None, validation_alias=_input("headers"))
    message: str = Field(..., min_length=1, validation_alias=_input("message"))
    title: str = Field("CI Notification", validation_alias=_input("title"))
    username: Optional[str] = Field(None, validation_alias=_input("username"))
    icon_emoji: Optional[str] = Field(None, validation_alias=_input("icon_emoji"))
    channel: Optional[str] = Field(None, validation_alias=_input("channel"))
    fail_on_error: bool = Field(False, validation_alias=_input("fail_on_error"))

    model_config = {"env_file": ".env", "extra": "ignore", "populate_by_name": True}

    @field_validator("method", "title", "fail_on_error", mode="before")
    @classmethod
    def _empty_means_default(cls, v, info):
        # The runner exports every declared input, unset ones as ""
        if v == "":
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("method")
    @classmethod
    def _upper_method(cls, v: str) -> str:
        return v.upper()

    def webhook_request(self) -> NotificationRequest:
        return NotificationRequest(
            target_url=self.webhook_url,
            message=self.message,
            title=self.title,
            method=self.method,
            body_template=self.body_template,
            headers_json=self.headers,
        )

    def slack_request(self) -> NotificationRequest:
        return NotificationRequest(
            target_url=self.slack_webhook_url,
            message=self.message,
            title=self.title,
            username=self.username,
            icon_emoji=self.icon_emoji,
            channel=self.channel,
        )
