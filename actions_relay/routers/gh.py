"""Ruter GH?"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from pydantic import ValidationError

from actions_relay.config import Settings, get_settings
from actions_relay.schemas import WorkflowRunEvent
from actions_relay.services.pipeline import (
    WORKFLOW_RUN_EVENT,
    process_workflow_run,
    should_notify,
)

logger = logging.getLogger("actions_relay.webhook")

router = APIRouter(tags=["github"])


def get_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Outbound transport for GitHub/Discord calls; ``None`` means the network."""
    return None


async def _read_payload(request: Request) -> dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError as exc:
        logger.error("Malformed webhook body: %s", exc)
        raise HTTPException(500, "Malformed request body") from exc
    if not isinstance(payload, dict):
        logger.error("Webhook body is not a JSON object")
        raise HTTPException(500, "Malformed request body")
    return payload


@router.post("/webhook")
async def github_webhook(
    request: Request,
    x_github_event: str | None = Header(None),
    settings: Settings = Depends(get_settings),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_transport),
):
    """
    GitHub webhook endpoint.

    Only finished ``workflow_run`` deliveries are enriched and forwarded to
    Discord. Everything else is acknowledged with 200 so GitHub does not mark
    the delivery as failed; a Discord failure is never reported back either.
    """
    payload = await _read_payload(request)
    event = x_github_event or "unknown"
    logger.info("Received event: %s", event)

    if event != WORKFLOW_RUN_EVENT:
        return {"message": "Event ignored"}

    if not isinstance(payload.get("workflow_run"), dict):
        logger.error("workflow_run delivery without a workflow_run object")
        raise HTTPException(500, "Malformed request body")
    try:
        run = WorkflowRunEvent.from_payload(payload)
    except ValidationError as exc:
        logger.error("Unreadable workflow_run payload: %s", exc)
        raise HTTPException(500, "Malformed request body") from exc

    if not should_notify(event, run):
        logger.info("Workflow %s #%s still in progress, ignored", run.name, run.run_number)
        return {"message": "Workflow run in progress, ignored"}

    logger.info("[Build] %s #%s - Status: %s", run.name, run.run_number, run.conclusion)
    try:
        async with httpx.AsyncClient(
            timeout=settings.http_timeout_seconds, transport=transport
        ) as http:
            outcome = await process_workflow_run(run, settings=settings, http=http)
    except Exception as exc:
        logger.exception("Processing workflow_run failed")
        raise HTTPException(500, "Processing failed") from exc

    if not outcome.delivered:
        logger.warning("Notification for %s #%s was not delivered", run.name, run.run_number)
    return {"message": "Webhook processed"}
