"""Render an enriched workflow run as a Discord embed."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from actions_relay.schemas import EmbedField, EmbedFooter, NotificationMessage, WorkflowRunEvent
from actions_relay.services.checks import CheckSummary
from actions_relay.services.github import FetchResult
from actions_relay.services.stats import BranchTotals, CommitStats, FileChange
from actions_relay.timezone import format_local, parse_github_timestamp
from actions_relay.utils import truncate

logger = logging.getLogger("actions_relay.formatter")

# Discord embed limits.
MAX_FIELDS = 25
MAX_FIELD_VALUE = 1024
MAX_FIELD_NAME = 256
MAX_TITLE = 256
MAX_FOOTER = 2048
FIELD_SAFETY_MARGIN = 2

COLOR_SUCCESS = 0x2ECC71
COLOR_FAILURE = 0xE74C3C
COLOR_NEUTRAL = 0x95A5A6


@dataclass(frozen=True)
class StatusStyle:
    color: int
    emoji: str
    label: str
    banner: str


STATUS_STYLES: dict[str, StatusStyle] = {
    "success": StatusStyle(COLOR_SUCCESS, "✅", "BUILD SUCCESSFUL", "Build Passed"),
    "failure": StatusStyle(COLOR_FAILURE, "❌", "BUILD FAILED", "Build Failed"),
    "cancelled": StatusStyle(COLOR_NEUTRAL, "⏹️", "BUILD CANCELLED", "Build Cancelled"),
}


def status_style(conclusion: Optional[str]) -> StatusStyle:
    """Fixed styling for the three known conclusions, gray ⚠️ for the rest."""
    key = (conclusion or "").lower()
    style = STATUS_STYLES.get(key)
    if style:
        return style
    label = (conclusion or "unknown").upper()
    return StatusStyle(COLOR_NEUTRAL, "⚠️", label, label.title())


def _field(name: str, value: str, inline: bool = False) -> EmbedField:
    return EmbedField(
        name=truncate(name, MAX_FIELD_NAME),
        value=truncate(value or "-", MAX_FIELD_VALUE),
        inline=inline,
    )


def chunk_lines(lines: Iterable[str], limit: int = MAX_FIELD_VALUE) -> list[str]:
    """
    Greedily pack newline-joined ``lines`` into chunks of at most ``limit`` chars.

    A single line longer than ``limit`` is truncated to fit on its own.
    """
    chunks: list[str] = []
    current = ""
    for line in lines:
        line = truncate(line, limit)
        if not current:
            current = line
        elif len(current) + 1 + len(line) <= limit:
            current = f"{current}\n{line}"
        else:
            chunks.append(current)
            current = line
    if current:
        chunks.append(current)
    return chunks


def _workflow_field(event: WorkflowRunEvent) -> EmbedField:
    lines = [f"**{event.name}**"]
    if event.repository_full_name:
        lines.append(f"Repository: `{event.repository_full_name}`")
    if event.head_branch:
        lines.append(f"Branch: `{event.head_branch}`")
    if event.head_sha:
        lines.append(f"Commit: `{event.head_sha[:7]}`")
    lines.append(f"Triggered by: {event.actor}")
    return _field("Workflow", "\n".join(lines))


def _failed_lines(checks: CheckSummary) -> list[str]:
    lines: list[str] = []
    for job in checks.jobs:
        failed = job.failed_steps
        if failed:
            lines.extend(f"❌ {job.name} › {step.name}" for step in failed)
        elif job.conclusion == "failure":
            lines.append(f"❌ {job.name}")
    return lines


def _file_line(change: FileChange) -> str:
    return f"`{change.filename}` +{change.additions} -{change.deletions} ({change.status})"


def _files_summary(commit: CommitStats) -> str:
    parts = [f"📄 {len(commit.files)} files"]
    if commit.files_added:
        parts.append(f"🆕 {commit.files_added} added")
    if commit.files_modified:
        parts.append(f"✏️ {commit.files_modified} modified")
    if commit.files_deleted:
        parts.append(f"🗑️ {commit.files_deleted} deleted")
    if commit.files_renamed:
        parts.append(f"🔀 {commit.files_renamed} renamed")
    return "\n".join(parts)


def _footer(event: WorkflowRunEvent, footer_text: str, with_timestamp: bool, tz_name: str) -> EmbedFooter:
    parts = [footer_text] if footer_text else []
    parts.append(f"Run #{event.run_number}" if event.run_number is not None else "Run #?")
    if with_timestamp:
        completed = parse_github_timestamp(event.completed_at)
        if completed:
            parts.append(format_local(completed, tz_name))
    return EmbedFooter(text=truncate(" • ".join(parts), MAX_FOOTER))


def _available(result: Optional[FetchResult]) -> bool:
    return result is not None and result.available


def build_message(
    event: WorkflowRunEvent,
    *,
    checks: Optional[FetchResult[CheckSummary]] = None,
    commit: Optional[FetchResult[CommitStats]] = None,
    branch: Optional[FetchResult[BranchTotals]] = None,
    title_style: str = "workflow",
    footer_text: str = "GitHub Actions",
    footer_timestamp: bool = True,
    tz_name: str = "UTC",
) -> NotificationMessage:
    """
    Deterministically map a finished run and its enrichments to one embed.

    Unavailable enrichments leave their fields out. The result never has
    more than ``MAX_FIELDS`` fields nor a field value over ``MAX_FIELD_VALUE``
    characters; file breakdown chunks that do not fit are dropped.
    """
    style = status_style(event.conclusion)
    if title_style == "banner":
        title = f"{style.emoji} {style.banner}"
    else:
        title = f"{style.emoji} {event.name}"

    fields = [
        _workflow_field(event),
        _field("Status", f"**{style.label}**", inline=True),
    ]

    if _available(checks):
        summary = checks.value
        if summary.total > 0:
            fields.append(_field("Checks", f"✅ {summary.passed} / {summary.total} checks passed"))
        failed = _failed_lines(summary)
        if failed:
            fields.append(_field("Failed Steps", "\n".join(failed)))

    if _available(commit):
        stats = commit.value
        fields.append(
            _field("Lines Changed", f"➕ +{stats.additions} additions\n➖ -{stats.deletions} deletions")
        )
        fields.append(_field("Files Changed", _files_summary(stats)))

        chunks = chunk_lines(_file_line(f) for f in stats.files)
        budget = max(0, MAX_FIELDS - len(fields) - FIELD_SAFETY_MARGIN)
        if len(chunks) > budget:
            logger.debug("Dropping %d file breakdown chunk(s)", len(chunks) - budget)
        for index, chunk in enumerate(chunks[:budget]):
            name = "File Breakdown" if index == 0 else f"continued ({index + 1})"
            fields.append(_field(name, chunk))

    if _available(branch) and len(fields) < MAX_FIELDS:
        totals = branch.value
        text = f"📁 {totals.total_file_count} files\n📏 {totals.total_line_count} lines"
        if totals.truncated:
            text += "\n(tree listing truncated)"
        fields.append(_field("Branch Totals", text))

    return NotificationMessage(
        title=truncate(title, MAX_TITLE),
        color=style.color,
        fields=fields[:MAX_FIELDS],
        footer=_footer(event, footer_text, footer_timestamp, tz_name),
    )
