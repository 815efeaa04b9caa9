"""Tests for embed rendering and Discord limits."""

import json

from actions_relay.schemas import WorkflowRunEvent
from actions_relay.services.checks import summarize_jobs
from actions_relay.services.discord import build_payload
from actions_relay.services.formatter import (
    COLOR_FAILURE,
    COLOR_NEUTRAL,
    COLOR_SUCCESS,
    MAX_FIELD_VALUE,
    MAX_FIELDS,
    build_message,
    chunk_lines,
    status_style,
)
from actions_relay.services.github import FetchResult
from actions_relay.services.stats import BranchTotals, CommitStats, FileChange
from helpers import jobs_body, make_payload


def _event(**overrides) -> WorkflowRunEvent:
    return WorkflowRunEvent.from_payload(make_payload(**overrides))


def _files(count: int, name_len: int = 12) -> list[FileChange]:
    return [
        FileChange(
            filename=f"{'f' * name_len}{i:04d}.py",
            path=f"src/pkg/{'f' * name_len}{i:04d}.py",
            additions=i,
            deletions=1,
            changes=i + 1,
            status="modified",
        )
        for i in range(count)
    ]


def _commit(additions=0, deletions=0, files=()) -> FetchResult:
    return FetchResult.ok(CommitStats(additions=additions, deletions=deletions, files=list(files)))


def _by_name(message):
    return {f.name: f for f in message.fields}


class TestStatusStyle:
    def test_known_conclusions(self):
        assert status_style("success").color == COLOR_SUCCESS
        assert status_style("failure").emoji == "❌"
        assert status_style("cancelled").label == "BUILD CANCELLED"

    def test_other_conclusion_is_uppercased(self):
        style = status_style("timed_out")
        assert style.color == COLOR_NEUTRAL
        assert style.emoji == "⚠️"
        assert style.label == "TIMED_OUT"


def test_success_message_basics():
    message = build_message(_event(), footer_timestamp=True, tz_name="UTC")

    assert message.color == COLOR_SUCCESS
    assert message.title == "✅ Build APK"
    fields = _by_name(message)
    assert fields["Status"].value == "**BUILD SUCCESSFUL**"
    assert fields["Status"].inline is True
    assert "`main`" in fields["Workflow"].value
    assert "octocat" in fields["Workflow"].value
    assert message.footer.text == "GitHub Actions • Run #7 • 2024-05-01 10:00 UTC"


def test_banner_title_and_no_timestamp():
    message = build_message(
        _event(conclusion="failure"), title_style="banner", footer_timestamp=False
    )
    assert message.title == "❌ Build Failed"
    assert message.color == COLOR_FAILURE
    assert message.footer.text == "GitHub Actions • Run #7"


def test_commit_additions_and_two_file_breakdown():
    files = _files(2)
    message = build_message(_event(), commit=_commit(42, 3, files))
    fields = _by_name(message)

    assert "+42" in fields["Lines Changed"].value
    assert "-3" in fields["Lines Changed"].value
    assert "2 files" in fields["Files Changed"].value
    breakdown = fields["File Breakdown"].value.split("\n")
    assert len(breakdown) == 2
    assert breakdown[0].startswith(f"`{files[0].filename}`")
    assert "continued (2)" not in fields


def test_unavailable_commit_leaves_fields_out():
    unavailable = FetchResult.unavailable("status 500", CommitStats())
    fields = _by_name(build_message(_event(), commit=unavailable))
    assert "Lines Changed" not in fields
    assert "File Breakdown" not in fields


def test_large_breakdown_is_chunked():
    message = build_message(_event(), commit=_commit(10, 10, _files(80)))
    names = [f.name for f in message.fields]

    breakdown = [f for f in message.fields if f.name == "File Breakdown" or f.name.startswith("continued")]
    assert len(breakdown) >= 2
    assert names.index("File Breakdown") + 1 == names.index("continued (2)")
    assert all(len(f.value) <= MAX_FIELD_VALUE for f in message.fields)
    assert len(message.fields) <= MAX_FIELDS
    listed = sum(len(f.value.split("\n")) for f in breakdown)
    assert listed == 80


def test_field_cap_drops_extra_chunks():
    checks = FetchResult.ok(summarize_jobs(jobs_body(
        {"name": "build", "conclusion": "failure",
         "steps": [{"name": "Compile", "conclusion": "failure"}]},
    )))
    branch = FetchResult.ok(BranchTotals(total_file_count=3000, total_line_count=123456))
    message = build_message(
        _event(conclusion="failure"),
        checks=checks,
        commit=_commit(1, 1, _files(3000, name_len=60)),
        branch=branch,
    )

    assert len(message.fields) <= MAX_FIELDS
    assert all(len(f.value) <= MAX_FIELD_VALUE for f in message.fields)
    names = [f.name for f in message.fields]
    # Workflow, Status, Checks, Failed Steps, Lines, Files = 6 used, minus margin 2.
    assert sum(1 for n in names if n == "File Breakdown" or n.startswith("continued")) == MAX_FIELDS - 6 - 2
    assert names[-1] == "Branch Totals"


def test_failed_steps_are_listed_and_truncated():
    steps = [{"name": f"step {'x' * 40} {i}", "conclusion": "failure"} for i in range(60)]
    checks = FetchResult.ok(summarize_jobs(jobs_body(
        {"name": "test", "conclusion": "failure", "steps": steps},
        {"name": "deploy", "conclusion": "failure", "steps": []},
    )))
    fields = _by_name(build_message(_event(conclusion="failure"), checks=checks))

    assert fields["Checks"].value == "✅ 0 / 60 checks passed"
    failed = fields["Failed Steps"].value
    assert failed.startswith("❌ test › step")
    assert len(failed) == MAX_FIELD_VALUE
    assert failed.endswith("…")


def test_no_failed_steps_field_when_green():
    checks = FetchResult.ok(summarize_jobs(jobs_body(
        {"name": "build", "conclusion": "success", "steps": [{"name": "a", "conclusion": "success"}]},
    )))
    fields = _by_name(build_message(_event(), checks=checks))
    assert fields["Checks"].value == "✅ 1 / 1 checks passed"
    assert "Failed Steps" not in fields


def test_branch_totals_field():
    branch = FetchResult.ok(BranchTotals(total_file_count=12, total_line_count=3456))
    fields = _by_name(build_message(_event(), branch=branch))
    assert fields["Branch Totals"].value == "📁 12 files\n📏 3456 lines"


def test_field_order_is_fixed():
    checks = FetchResult.ok(summarize_jobs(jobs_body(
        {"name": "t", "conclusion": "failure", "steps": [{"name": "s", "conclusion": "failure"}]},
    )))
    branch = FetchResult.ok(BranchTotals(1, 1))
    message = build_message(
        _event(conclusion="failure"), checks=checks, commit=_commit(1, 0, _files(1)), branch=branch
    )
    assert [f.name for f in message.fields] == [
        "Workflow",
        "Status",
        "Checks",
        "Failed Steps",
        "Lines Changed",
        "Files Changed",
        "File Breakdown",
        "Branch Totals",
    ]


def test_rendering_is_idempotent():
    kwargs = dict(
        commit=_commit(5, 2, _files(120)),
        branch=FetchResult.ok(BranchTotals(4, 40)),
    )
    first = json.dumps(build_payload(build_message(_event(), **kwargs), run_url="https://x"), sort_keys=False)
    second = json.dumps(build_payload(build_message(_event(), **kwargs), run_url="https://x"), sort_keys=False)
    assert first == second


def test_chunk_lines_packs_greedily_and_truncates_long_lines():
    assert chunk_lines(["aaa", "bbb", "ccc"], limit=7) == ["aaa\nbbb", "ccc"]
    assert chunk_lines(["x" * 20], limit=10) == ["x" * 9 + "…"]
    assert chunk_lines([]) == []
