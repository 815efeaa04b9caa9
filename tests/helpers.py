"""Test doubles for the GitHub and Discord upstreams, plus payload builders."""

from __future__ import annotations

import base64
import copy
from typing import Any, Callable, Union

import httpx


API = "https://api.github.com"
REPO_API = f"{API}/repos/octo/demo"
SHA = "0123456789abcdef0123456789abcdef01234567"
DISCORD_URL = "https://discord.test/api/webhooks/1/token"

Responder = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class FakeUpstream:
    """Routes requests by URL path to canned responses and records every call."""

    def __init__(self) -> None:
        self.routes: dict[str, Responder] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, responder: Responder) -> None:
        self.routes[path] = responder

    def add_json(self, path: str, body: Any, status: int = 200) -> None:
        self.routes[path] = httpx.Response(status, json=body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get(request.url.path)
        if responder is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if isinstance(responder, Exception):
            raise responder
        if callable(responder):
            return responder(request)
        return responder

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    @property
    def discord_calls(self) -> list[httpx.Request]:
        return self.calls_to("discord.test")


BASE_PAYLOAD: dict[str, Any] = {
    "action": "completed",
    "workflow_run": {
        "name": "Build APK",
        "run_number": 7,
        "head_sha": SHA,
        "head_branch": "main",
        "status": "completed",
        "conclusion": "success",
        "html_url": "https://github.com/octo/demo/actions/runs/99",
        "jobs_url": f"{REPO_API}/actions/runs/99/jobs",
        "completed_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-05-01T10:00:05Z",
        "actor": {"login": "octocat"},
        "repository": {"full_name": "octo/demo", "url": REPO_API},
    },
    "repository": {"full_name": "octo/demo", "url": REPO_API},
    "sender": {"login": "octocat"},
}


def make_payload(**run_overrides: Any) -> dict[str, Any]:
    payload = copy.deepcopy(BASE_PAYLOAD)
    payload["workflow_run"].update(run_overrides)
    return payload


def blob_body(text: str) -> dict[str, Any]:
    return {
        "encoding": "base64",
        "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
    }


def commit_body(additions: int, deletions: int, files: list[dict[str, Any]]) -> dict[str, Any]:
    return {"sha": SHA, "stats": {"additions": additions, "deletions": deletions}, "files": files}


def jobs_body(*jobs: dict[str, Any]) -> dict[str, Any]:
    return {"total_count": len(jobs), "jobs": list(jobs)}
