"""the beautiful world start from here."""

from __future__ import annotations

from fastapi import FastAPI

from actions_relay.config import settings
from actions_relay.logging_config import configure_logging
from actions_relay.routers import gh, info

configure_logging(settings.log_level)

app = FastAPI(title="GitHub Actions → Discord relay")

app.include_router(info.router)
app.include_router(gh.router)
