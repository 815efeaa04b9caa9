"""Shared fixtures."""

from __future__ import annotations

import pytest

from actions_relay.config import Settings
from helpers import API, DISCORD_URL, FakeUpstream


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        discord_webhook_url=DISCORD_URL,
        github_api_base=API,
        github_token="",
        branch_totals=True,
        blob_batch_size=10,
        title_style="workflow",
        footer_text="GitHub Actions",
        footer_timestamp=True,
        run_button=True,
        timezone="UTC",
    )
