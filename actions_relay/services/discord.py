"""Yet another discord services"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from actions_relay.schemas import NotificationMessage

logger = logging.getLogger("actions_relay.discord")

HTTP_TIMEOUT_SECONDS = 15

# Discord component types/styles for a link button row.
ACTION_ROW = 1
BUTTON = 2
BUTTON_STYLE_LINK = 5

JSONDict = dict[str, Any]


def build_payload(
    message: NotificationMessage,
    *,
    run_url: Optional[str] = None,
    include_button: bool = True,
) -> JSONDict:
    """Single-embed webhook body, with a "View Build" link button when possible."""
    payload: JSONDict = {"embeds": [message.to_embed()]}
    if include_button and run_url:
        payload["components"] = [
            {
                "type": ACTION_ROW,
                "components": [
                    {
                        "type": BUTTON,
                        "label": "View Build",
                        "style": BUTTON_STYLE_LINK,
                        "url": run_url,
                    }
                ],
            }
        ]
    return payload


async def send_notification(
    http: httpx.AsyncClient,
    webhook_url: str | None,
    payload: JSONDict,
) -> bool:
    """
    POST ``payload`` to the Discord incoming webhook.

    Returns True when Discord accepted it. Missing configuration, transport
    errors and non-2xx responses are logged and reported as False.
    """
    if not webhook_url:
        logger.error("DISCORD_WEBHOOK_URL not configured; notification skipped")
        return False
    try:
        resp = await http.post(webhook_url, json=payload, timeout=HTTP_TIMEOUT_SECONDS)
    except httpx.HTTPError as exc:
        logger.error("Discord webhook request failed: %s", exc)
        return False
    if resp.status_code < 200 or resp.status_code >= 300:
        logger.error(
            "Discord webhook rejected notification (status %s): %s",
            resp.status_code,
            resp.text[:200],
        )
        return False
    logger.info("Discord notification sent")
    return True
