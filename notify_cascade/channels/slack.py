"""Slack incoming-webhook channel dispatcher."""

import logging
from typing import Optional

from notify_cascade.channels import (
    ChannelPayload,
    DispatchResult,
    NotificationRequest,
    RunContext,
    classify_response,
)
from notify_cascade.transport import Transport, TransportError

logger = logging.getLogger(__name__)


def build_blocks(title: str, message: str, run: RunContext) -> list[dict]:
    """Header, section and context blocks, always in that order."""
    context_text = (
        f"*Repo:* <{run.repository_url}|{run.repository}>"
        f" · *Run:* <{run.run_url}|#{run.run_number}>"
    )
    return [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": title, "emoji": True},
        },
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": message},
        },
        {
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": context_text}],
        },
    ]


def format_slack(request: NotificationRequest, run: RunContext) -> ChannelPayload:
    """
    Format a notification for a Slack incoming webhook.

    ``username``, ``icon_emoji`` and ``channel`` are only set when given a
    truthy value, since Slack treats a present key as an override.
    """
    slack_body = {
        # Fallback for clients that cannot render blocks
        "text": f"{request.title}: {request.message}",
        "blocks": build_blocks(request.title, request.message, run),
    }
    if request.username:
        slack_body["username"] = request.username
    if request.icon_emoji:
        slack_body["icon_emoji"] = request.icon_emoji
    if request.channel:
        slack_body["channel"] = request.channel

    return ChannelPayload(method="POST", url=request.target_url or "", body=slack_body)


async def send_slack(
    request: NotificationRequest,
    run: RunContext,
    transport: Optional[Transport] = None,
) -> DispatchResult:
    if not request.target_url:
        return DispatchResult.skipped()

    transport = transport or Transport()
    payload = format_slack(request, run)
    try:
        response = await transport.post(payload.url, payload.body, method=payload.method)
    except TransportError as e:
        logger.warning(f"Slack error: {e}")
        return DispatchResult.failed(str(e))

    result = classify_response(response.status_code, response.text)
    if not result.ok:
        logger.warning(f"Slack error: {result.error}")
    return result
