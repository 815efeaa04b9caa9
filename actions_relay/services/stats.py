"""Commit and branch statistics gathered from the GitHub API."""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from actions_relay.services.github import (
    FetchResult,
    GitHubClient,
    blob_url,
    commit_url,
    tree_url,
)
from actions_relay.utils import as_int, basename, dig, gather_in_batches

logger = logging.getLogger("actions_relay.stats")

BLOB_BATCH_SIZE = 10


@dataclass(frozen=True)
class FileChange:
    filename: str
    path: str
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    status: str = "modified"


@dataclass(frozen=True)
class CommitStats:
    additions: int = 0
    deletions: int = 0
    files: list[FileChange] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.additions + self.deletions

    def _count_status(self, status: str) -> int:
        return sum(1 for f in self.files if f.status == status)

    @property
    def files_added(self) -> int:
        return self._count_status("added")

    @property
    def files_modified(self) -> int:
        return self._count_status("modified")

    @property
    def files_deleted(self) -> int:
        return self._count_status("removed") + self._count_status("deleted")

    @property
    def files_renamed(self) -> int:
        return self._count_status("renamed")


@dataclass(frozen=True)
class BranchTotals:
    total_file_count: int = 0
    total_line_count: int = 0
    skipped_blobs: int = 0
    truncated: bool = False


def _file_change(raw: Mapping[str, Any]) -> FileChange:
    path = str(raw.get("filename") or "")
    additions = as_int(raw.get("additions"))
    deletions = as_int(raw.get("deletions"))
    changes = raw.get("changes")
    return FileChange(
        filename=basename(path),
        path=path,
        additions=additions,
        deletions=deletions,
        changes=as_int(changes) if changes is not None else additions + deletions,
        status=str(raw.get("status") or "modified"),
    )


def parse_commit(data: Any) -> CommitStats:
    """Build :class:`CommitStats` from a ``GET /commits/{sha}`` body."""
    if not isinstance(data, Mapping):
        return CommitStats()
    files = data.get("files") or []
    return CommitStats(
        additions=as_int(dig(data, ("stats", "additions"))),
        deletions=as_int(dig(data, ("stats", "deletions"))),
        files=[_file_change(f) for f in files if isinstance(f, Mapping)],
    )


async def fetch_commit_stats(
    client: GitHubClient, repo_api: str, sha: str
) -> FetchResult[CommitStats]:
    """Line and file deltas for one commit; unavailable carries zeroed stats."""
    result = await client.get_json(commit_url(repo_api, sha))
    if not result.available:
        return FetchResult.unavailable(result.reason, CommitStats())
    if not isinstance(result.value, Mapping):
        return FetchResult.unavailable("unexpected commit payload", CommitStats())
    return FetchResult.ok(parse_commit(result.value))


def count_lines(blob: Any) -> int | None:
    """
    Newline-split line count of a ``GET /git/blobs/{sha}`` body.

    Returns ``None`` for content that is not base64 text or not UTF-8.
    """
    if not isinstance(blob, Mapping):
        return None
    content = blob.get("content")
    if not isinstance(content, str):
        return None
    encoding = blob.get("encoding") or "base64"
    if encoding == "base64":
        try:
            raw = base64.b64decode(content)
        except (binascii.Error, ValueError):
            return None
    elif encoding in ("utf-8", "utf8"):
        raw = content.encode("utf-8")
    else:
        return None
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return None
    return len(text.split("\n"))


async def fetch_branch_totals(
    client: GitHubClient,
    repo_api: str,
    sha: str,
    *,
    batch_size: int = BLOB_BATCH_SIZE,
) -> FetchResult[BranchTotals]:
    """
    File and line totals for the whole tree at ``sha``.

    Blobs are fetched ``batch_size`` at a time; one that fails to load or
    decode is skipped and does not affect its siblings.
    """
    tree = await client.get_json(tree_url(repo_api, sha), params={"recursive": "1"})
    if not tree.available:
        return FetchResult.unavailable(tree.reason, BranchTotals())
    entries = dig(tree.value, ("tree",))
    if not isinstance(entries, list):
        return FetchResult.unavailable("unexpected tree payload", BranchTotals())

    blobs = [
        e for e in entries
        if isinstance(e, Mapping) and e.get("type") == "blob" and e.get("sha")
    ]

    async def _lines(entry: Mapping[str, Any]) -> int | None:
        fetched = await client.get_json(blob_url(repo_api, str(entry["sha"])))
        if not fetched.available:
            return None
        lines = count_lines(fetched.value)
        if lines is None:
            logger.debug("Skipping undecodable blob %s", entry.get("path"))
        return lines

    counts = await gather_in_batches(blobs, _lines, batch_size=batch_size)
    skipped = sum(1 for c in counts if c is None)
    totals = BranchTotals(
        total_file_count=len(blobs),
        total_line_count=sum(c for c in counts if c is not None),
        skipped_blobs=skipped,
        truncated=bool(dig(tree.value, ("truncated",))),
    )
    if skipped:
        logger.info("Branch walk at %s skipped %d of %d blobs", sha, skipped, len(blobs))
    return FetchResult.ok(totals)
