"""Job and step outcomes for a workflow run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from actions_relay.services.github import FetchResult, GitHubClient

JOBS_PER_PAGE = 100


@dataclass(frozen=True)
class StepResult:
    name: str
    conclusion: Optional[str] = None


@dataclass(frozen=True)
class JobSummary:
    name: str
    conclusion: Optional[str] = None
    steps: list[StepResult] = field(default_factory=list)

    @property
    def failed_steps(self) -> list[StepResult]:
        return [s for s in self.steps if s.conclusion == "failure"]


@dataclass(frozen=True)
class CheckSummary:
    passed: int = 0
    failed: int = 0
    failed_steps: list[str] = field(default_factory=list)
    jobs: list[JobSummary] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.passed + self.failed

    @property
    def failed_jobs(self) -> list[JobSummary]:
        return [j for j in self.jobs if j.conclusion == "failure"]


def _job(raw: Mapping[str, Any]) -> JobSummary:
    steps = [
        StepResult(name=str(s.get("name") or "step"), conclusion=s.get("conclusion"))
        for s in raw.get("steps") or []
        if isinstance(s, Mapping)
    ]
    return JobSummary(
        name=str(raw.get("name") or "job"),
        conclusion=raw.get("conclusion"),
        steps=steps,
    )


def summarize_jobs(payload: Any) -> CheckSummary:
    """
    Count step outcomes across every job in a ``/jobs`` listing.

    Only ``success`` and ``failure`` are counted; skipped, neutral and
    cancelled steps fall in neither bucket.
    """
    raw_jobs = payload.get("jobs") if isinstance(payload, Mapping) else None
    jobs = [_job(j) for j in raw_jobs or [] if isinstance(j, Mapping)]

    passed = 0
    failed_steps: list[str] = []
    for job in jobs:
        for step in job.steps:
            if step.conclusion == "success":
                passed += 1
            elif step.conclusion == "failure":
                failed_steps.append(step.name)
    return CheckSummary(
        passed=passed,
        failed=len(failed_steps),
        failed_steps=failed_steps,
        jobs=jobs,
    )


async def fetch_check_summary(
    client: GitHubClient, jobs_url: str | None
) -> FetchResult[CheckSummary]:
    """First page (up to 100) of the run's jobs, summarized."""
    if not jobs_url:
        return FetchResult.unavailable("no jobs url", CheckSummary())
    result = await client.get_json(jobs_url, params={"per_page": JOBS_PER_PAGE})
    if not result.available:
        return FetchResult.unavailable(result.reason, CheckSummary())
    if not isinstance(result.value, Mapping):
        return FetchResult.unavailable("unexpected jobs payload", CheckSummary())
    return FetchResult.ok(summarize_jobs(result.value))
