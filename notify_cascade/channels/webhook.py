"""Generic webhook channel dispatcher."""

import json
import logging
import re
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

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def template_values(request: NotificationRequest, run: RunContext) -> dict[str, str]:
    """Values available to ``{{name}}`` placeholders in a body template."""
    values = run.as_dict()
    values.update(
        title=request.title,
        message=request.message,
        repository=run.repository,
        run_url=run.run_url,
    )
    return {k: str(v) for k, v in values.items()}


def render_template(template: str, values: dict[str, str]):
    """
    Substitute placeholders into a JSON template, then parse it.

    Substitution is plain text replacement done in a single pass, so a value
    that itself contains ``{{name}}`` is inserted as-is. The result must still
    be valid JSON. Unknown placeholders are left as they are.

    Raises:
        ValueError: if the substituted template is not valid JSON.
    """
    rendered = _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template)
    try:
        return json.loads(rendered, parse_constant=_reject_constant)
    except ValueError as e:
        raise ValueError(f"Invalid body template: {e}") from e


def _reject_constant(name: str):
    # NaN / Infinity / -Infinity are accepted by json.loads but are not JSON
    raise ValueError(f"{name} is not valid JSON")


def parse_headers(headers_json: Optional[str]) -> dict[str, str]:
    """Parse optional extra headers; anything malformed is dropped."""
    if not headers_json:
        return {}
    try:
        parsed = json.loads(headers_json)
    except json.JSONDecodeError:
        logger.debug("Ignoring malformed headers JSON")
        return {}
    if not isinstance(parsed, dict):
        logger.debug("Ignoring headers JSON that is not an object")
        return {}
    return {str(k): str(v) for k, v in parsed.items()}


def format_webhook(request: NotificationRequest, run: RunContext) -> ChannelPayload:
    """
    Build the webhook request.

    Without a template the body is ``{message, title, repository, run_url}``.
    """
    if request.body_template:
        body = render_template(request.body_template, template_values(request, run))
    else:
        body = {
            "message": request.message,
            "title": request.title,
            "repository": run.repository,
            "run_url": run.run_url,
        }

    return ChannelPayload(
        method=(request.method or "POST").upper(),
        url=request.target_url or "",
        body=body,
        headers=parse_headers(request.headers_json),
    )


async def send_webhook(
    request: NotificationRequest,
    run: RunContext,
    transport: Optional[Transport] = None,
) -> DispatchResult:
    if not request.target_url:
        return DispatchResult.skipped()

    transport = transport or Transport()
    try:
        payload = format_webhook(request, run)
        response = await transport.post(
            payload.url,
            payload.body,
            method=payload.method,
            headers=payload.headers,
        )
    except (ValueError, TransportError) as e:
        logger.warning(f"Webhook error: {e}")
        return DispatchResult.failed(str(e))

    result = classify_response(response.status_code, response.text)
    if not result.ok:
        logger.warning(f"Webhook error: {result.error}")
    return result
