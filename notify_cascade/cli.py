"""Action entrypoint: read the environment, notify, report."""

import asyncio
import logging

from pydantic import ValidationError

from notify_cascade.channels import FAILED, DispatchResult
from notify_cascade.channels.dispatcher import dispatch_notifications
from notify_cascade.config import ActionInputs, GitHubSettings, Settings
from notify_cascade.transport import Transport

logger = logging.getLogger(__name__)

LOG_FORMAT = "[notify-cascade] %(levelname)s %(name)s: %(message)s"


def write_outputs(path: str, results: dict[str, DispatchResult]) -> None:
    """Append step outputs (`<channel>-status`, `<channel>-error`) to GITHUB_OUTPUT."""
    lines = []
    for name, result in results.items():
        lines.append(f"{name}-status={result.status}")
        if result.status == FAILED:
            # Outputs are line-based; keep the error on one line
            error = " ".join(result.error.splitlines())
            lines.append(f"{name}-error={error}")
    with open(path, "a", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")


async def run(inputs: ActionInputs, github: GitHubSettings, settings: Settings) -> dict[str, DispatchResult]:
    transport = Transport(
        timeout=settings.http_timeout,
        block_private_networks=settings.block_private_networks,
    )
    return await dispatch_notifications(
        inputs.webhook_request(),
        inputs.slack_request(),
        github.run_context(),
        transport,
    )


def main() -> int:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    try:
        settings = Settings()
        inputs = ActionInputs()
        github = GitHubSettings()
    except ValidationError as e:
        logger.error("Invalid configuration: %s", e)
        return 2
    logging.getLogger().setLevel(settings.log_level)

    if not inputs.webhook_url and not inputs.slack_webhook_url:
        logger.warning("No webhook-url or slack-webhook-url configured; nothing to send")

    results = asyncio.run(run(inputs, github, settings))

    if github.output:
        write_outputs(github.output, results)

    failed = [name for name, result in results.items() if result.status == FAILED]
    if failed and inputs.fail_on_error:
        logger.error("Notification failed for: %s", ", ".join(failed))
        return 1
    return 0
