import asyncio

import pytest

from notify_cascade.channels import NotificationRequest
from notify_cascade.channels.slack import format_slack, send_slack

from conftest import RecordingServer

SLACK_URL = "https://hooks.slack.com/services/T000/B000/XXXX"


def _request(url=SLACK_URL, **kwargs) -> NotificationRequest:
    kwargs.setdefault("message", "x")
    kwargs.setdefault("title", "X")
    return NotificationRequest(target_url=url, **kwargs)


@pytest.mark.parametrize("url", [None, ""])
def test_skips_without_url(url, run_context, server: RecordingServer) -> None:
    result = asyncio.run(send_slack(_request(url), run_context, server.transport()))

    assert result.to_dict() == {"status": "skipped"}
    assert server.requests == []


def test_sends_block_kit_payload(run_context, server: RecordingServer) -> None:
    request = _request(message="*Build passed*", title="CI", username="Bot", icon_emoji=":rocket:")

    result = asyncio.run(send_slack(request, run_context, server.transport()))

    assert result.status == "sent"
    assert server.requests[0].method == "POST"
    body = server.last_json
    assert body["text"] == "CI: *Build passed*"
    header, section, context = body["blocks"]
    assert header == {"type": "header", "text": {"type": "plain_text", "text": "CI", "emoji": True}}
    assert section == {"type": "section", "text": {"type": "mrkdwn", "text": "*Build passed*"}}
    assert context["type"] == "context"
    assert "test-owner/test-repo" in context["elements"][0]["text"]
    assert body["username"] == "Bot"
    assert body["icon_emoji"] == ":rocket:"


def test_context_block_links_repo_and_run(run_context) -> None:
    payload = format_slack(_request(), run_context)

    text = payload.body["blocks"][2]["elements"][0]["text"]
    assert text == (
        "*Repo:* <https://github.com/test-owner/test-repo|test-owner/test-repo>"
        " · *Run:* <https://github.com/test-owner/test-repo/actions/runs/12345|#42>"
    )


def test_overrides_channel_when_provided(run_context, server: RecordingServer) -> None:
    asyncio.run(send_slack(_request(channel="#alerts"), run_context, server.transport()))

    assert server.last_json["channel"] == "#alerts"


def test_omits_channel_key_when_not_provided(run_context, server: RecordingServer) -> None:
    asyncio.run(send_slack(_request(), run_context, server.transport()))

    assert "channel" not in server.last_json


def test_empty_overrides_are_omitted(run_context) -> None:
    payload = format_slack(_request(username="", icon_emoji="", channel=""), run_context)

    assert set(payload.body) == {"text", "blocks"}


def test_returns_failed_on_client_error(run_context) -> None:
    server = RecordingServer(status_code=400, text="invalid_payload")

    result = asyncio.run(send_slack(_request(), run_context, server.transport()))

    assert result.status == "failed"
    assert result.error == "HTTP 400: invalid_payload"
