"""Best-effort client for the GitHub REST API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, TypeVar

import httpx

from actions_relay.schemas import WorkflowRunEvent

logger = logging.getLogger("actions_relay.github")

GITHUB_ACCEPT = "application/vnd.github+json"
GITHUB_API_VERSION = "2022-11-28"

T = TypeVar("T")


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    Outcome of one upstream lookup.

    ``available`` is False when the data could not be fetched; ``value`` then
    holds the default the caller asked for, so rendering code can tell
    "missing" apart from "genuinely zero".
    """

    available: bool
    value: T
    reason: str = ""

    @classmethod
    def ok(cls, value: T) -> "FetchResult[T]":
        return cls(True, value)

    @classmethod
    def unavailable(cls, reason: str, default: Any = None) -> "FetchResult[Any]":
        return cls(False, default, reason)

    def value_or(self, default: T) -> T:
        return self.value if self.available else default


class GitHubClient:
    """Thin GET-only wrapper around a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        api_base: str = "https://api.github.com",
        token: Optional[str] = None,
        user_agent: str = "actions-relay",
    ) -> None:
        self.http = http
        self.api_base = api_base.rstrip("/")
        self.headers = {
            "Accept": GITHUB_ACCEPT,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": user_agent,
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    async def get_json(
        self, url: str, params: Optional[Mapping[str, Any]] = None
    ) -> FetchResult[Any]:
        """GET ``url`` and decode JSON. Never raises; failures become unavailable."""
        try:
            resp = await self.http.get(url, params=params, headers=self.headers)
        except httpx.HTTPError as exc:
            logger.warning("GitHub request to %s failed: %s", url, exc)
            return FetchResult.unavailable(f"transport error: {exc}")

        if resp.status_code < 200 or resp.status_code >= 300:
            logger.warning("GitHub request to %s returned %s", url, resp.status_code)
            return FetchResult.unavailable(f"status {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            logger.warning("GitHub response from %s is not JSON: %s", url, exc)
            return FetchResult.unavailable("malformed json")
        return FetchResult.ok(data)

    def repo_api_url(self, event: WorkflowRunEvent) -> str | None:
        """API base for the run's repository (``.../repos/{owner}/{repo}``)."""
        if event.repository_url:
            return event.repository_url.rstrip("/")
        if event.repository_full_name:
            return f"{self.api_base}/repos/{event.repository_full_name}"
        return None


def commit_url(repo_api: str, sha: str) -> str:
    return f"{repo_api}/commits/{sha}"


def tree_url(repo_api: str, sha: str) -> str:
    return f"{repo_api}/git/trees/{sha}"


def blob_url(repo_api: str, sha: str) -> str:
    return f"{repo_api}/git/blobs/{sha}"
