"""Inbound webhook and outbound embed schemas."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field


def _ensure_mapping(payload: Any) -> Mapping[str, Any]:
    return payload if isinstance(payload, Mapping) else {}


class WorkflowRunEvent(BaseModel):
    """
    The subset of a ``workflow_run`` webhook delivery the relay uses.

    A ``None`` conclusion means the run has not finished yet.
    """

    name: str = "workflow"
    run_number: Optional[int] = None
    head_sha: str = ""
    head_branch: str = ""
    status: str = ""
    conclusion: Optional[str] = None
    html_url: Optional[str] = None
    jobs_url: Optional[str] = None
    repository_url: Optional[str] = None
    repository_full_name: Optional[str] = None
    completed_at: Optional[str] = None
    actor: str = "unknown"

    class Config:
        extra = "ignore"

    @property
    def in_progress(self) -> bool:
        return self.conclusion is None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "WorkflowRunEvent":
        payload = _ensure_mapping(payload)
        run = _ensure_mapping(payload.get("workflow_run"))
        run_repo = _ensure_mapping(run.get("repository"))
        top_repo = _ensure_mapping(payload.get("repository"))
        actor = _ensure_mapping(run.get("actor")) or _ensure_mapping(payload.get("sender"))

        return cls(
            name=run.get("name") or "workflow",
            run_number=run.get("run_number"),
            head_sha=run.get("head_sha") or "",
            head_branch=run.get("head_branch") or "",
            status=run.get("status") or "",
            conclusion=run.get("conclusion"),
            html_url=run.get("html_url"),
            jobs_url=run.get("jobs_url"),
            repository_url=run_repo.get("url") or top_repo.get("url"),
            repository_full_name=run_repo.get("full_name") or top_repo.get("full_name"),
            completed_at=run.get("completed_at") or run.get("updated_at"),
            actor=actor.get("login") or actor.get("name") or "unknown",
        )


class EmbedField(BaseModel):
    name: str
    value: str
    inline: bool = False


class EmbedFooter(BaseModel):
    text: str


class NotificationMessage(BaseModel):
    """A single Discord embed."""

    title: str
    color: int
    fields: list[EmbedField] = Field(default_factory=list)
    footer: EmbedFooter

    def to_embed(self) -> dict[str, Any]:
        return self.model_dump()
