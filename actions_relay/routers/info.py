"""Ruter Ingfo?"""

from __future__ import annotations

from textwrap import dedent

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from actions_relay.config import settings

router = APIRouter()


def render_help_text() -> str:
    """Plain-text overview of endpoints and configuration."""
    destination = "configured" if settings.discord_webhook_url else "NOT configured"
    return dedent(
        f"""
    GitHub Actions → Discord relay

    Endpoints
    ---------
    - GET  /         : Health check
    - GET  /help     : This text
    - POST /webhook  : GitHub webhook (workflow_run events only)

    GitHub webhook
    --------------
    Content type: application/json
    Events: Workflow runs

    Status
    ------
    - Discord webhook: {destination}
    - Branch totals: {"on" if settings.branch_totals else "off"}
    """
    ).strip()


@router.get("/")
def root():
    """Health check."""
    return {"message": "GitHub Actions relay is running"}


@router.get("/help", response_class=PlainTextResponse)
def help_text():
    return render_help_text()
