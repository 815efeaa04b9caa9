"""the beautiful world start from here."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """App Settings"""

    discord_webhook_url: str = os.getenv("DISCORD_WEBHOOK_URL", "")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))
    github_api_base: str = os.getenv("GITHUB_API_BASE", "https://api.github.com")
    github_token: str = os.getenv("GITHUB_TOKEN", "")
    user_agent: str = os.getenv("USER_AGENT", "actions-relay")
    http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))
    branch_totals: bool = _env_flag("BRANCH_TOTALS", True)
    blob_batch_size: int = int(os.getenv("BLOB_BATCH_SIZE", "10"))
    title_style: str = os.getenv("TITLE_STYLE", "workflow")
    footer_text: str = os.getenv("FOOTER_TEXT", "GitHub Actions")
    footer_timestamp: bool = _env_flag("FOOTER_TIMESTAMP", True)
    run_button: bool = _env_flag("RUN_BUTTON", True)
    timezone: str = os.getenv("TIMEZONE", "UTC")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings
