"""Enrich a finished workflow run and forward it to Discord."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from actions_relay.config import Settings
from actions_relay.schemas import NotificationMessage, WorkflowRunEvent
from actions_relay.services.checks import CheckSummary, fetch_check_summary
from actions_relay.services.discord import build_payload, send_notification
from actions_relay.services.formatter import build_message
from actions_relay.services.github import FetchResult, GitHubClient
from actions_relay.services.stats import (
    BranchTotals,
    CommitStats,
    fetch_branch_totals,
    fetch_commit_stats,
)

logger = logging.getLogger("actions_relay.pipeline")

WORKFLOW_RUN_EVENT = "workflow_run"


@dataclass
class PipelineOutcome:
    message: NotificationMessage
    delivered: bool
    checks_available: bool
    commit_available: bool
    branch_available: Optional[bool]


def should_notify(event_type: str | None, event: WorkflowRunEvent | None) -> bool:
    """Only finished ``workflow_run`` deliveries produce a notification."""
    if (event_type or "").lower() != WORKFLOW_RUN_EVENT:
        return False
    return event is not None and not event.in_progress


async def _unavailable(reason: str, default) -> FetchResult:
    return FetchResult.unavailable(reason, default)


async def enrich(
    event: WorkflowRunEvent,
    client: GitHubClient,
    *,
    branch_totals: bool = True,
    batch_size: int = 10,
) -> tuple[FetchResult[CheckSummary], FetchResult[CommitStats], Optional[FetchResult[BranchTotals]]]:
    """Fetch checks, commit stats and (optionally) branch totals concurrently."""
    repo_api = client.repo_api_url(event)
    can_lookup = bool(repo_api and event.head_sha)

    checks_task = fetch_check_summary(client, event.jobs_url)
    if can_lookup:
        commit_task = fetch_commit_stats(client, repo_api, event.head_sha)
    else:
        commit_task = _unavailable("no repository or sha", CommitStats())

    if not branch_totals:
        checks, commit = await asyncio.gather(checks_task, commit_task)
        return checks, commit, None

    if can_lookup:
        branch_task = fetch_branch_totals(client, repo_api, event.head_sha, batch_size=batch_size)
    else:
        branch_task = _unavailable("no repository or sha", BranchTotals())
    checks, commit, branch = await asyncio.gather(checks_task, commit_task, branch_task)
    return checks, commit, branch


async def process_workflow_run(
    event: WorkflowRunEvent,
    *,
    settings: Settings,
    http: httpx.AsyncClient,
) -> PipelineOutcome:
    """Enrich, format and send one notification. Upstream failures degrade, never raise."""
    client = GitHubClient(
        http,
        api_base=settings.github_api_base,
        token=settings.github_token or None,
        user_agent=settings.user_agent,
    )
    checks, commit, branch = await enrich(
        event,
        client,
        branch_totals=settings.branch_totals,
        batch_size=settings.blob_batch_size,
    )
    for label, result in (("checks", checks), ("commit", commit), ("branch totals", branch)):
        if result is not None and not result.available:
            logger.info("%s unavailable for run #%s: %s", label, event.run_number, result.reason)

    message = build_message(
        event,
        checks=checks,
        commit=commit,
        branch=branch,
        title_style=settings.title_style,
        footer_text=settings.footer_text,
        footer_timestamp=settings.footer_timestamp,
        tz_name=settings.timezone,
    )
    payload = build_payload(message, run_url=event.html_url, include_button=settings.run_button)
    delivered = await send_notification(http, settings.discord_webhook_url, payload)

    return PipelineOutcome(
        message=message,
        delivered=delivered,
        checks_available=checks.available,
        commit_available=commit.available,
        branch_available=None if branch is None else branch.available,
    )
