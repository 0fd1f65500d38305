"""Notification fan-out across all configured channels."""

import asyncio
import logging
from typing import Optional

from notify_cascade.channels import FAILED, DispatchResult, NotificationRequest, RunContext
from notify_cascade.channels.slack import send_slack
from notify_cascade.channels.webhook import send_webhook
from notify_cascade.transport import Transport

logger = logging.getLogger(__name__)


async def dispatch_notifications(
    webhook: NotificationRequest,
    slack: NotificationRequest,
    run: RunContext,
    transport: Optional[Transport] = None,
) -> dict[str, DispatchResult]:
    """
    Send the webhook and Slack notifications concurrently.

    Args:
        webhook: Request for the generic webhook channel
        slack: Request for the Slack channel
        run: Run metadata shared by both channels
        transport: Optional transport; a default one is used otherwise

    Returns:
        Mapping of channel name to its result. Dispatchers never raise, so
        every channel always has an entry.
    """
    transport = transport or Transport()
    webhook_result, slack_result = await asyncio.gather(
        send_webhook(webhook, run, transport),
        send_slack(slack, run, transport),
    )
    results = {"webhook": webhook_result, "slack": slack_result}

    for name, result in results.items():
        if result.status == FAILED:
            logger.warning("Channel %s failed: %s", name, result.error)
        else:
            logger.info("Channel %s: %s", name, result.status)

    return results
