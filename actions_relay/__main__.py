"""Run the relay with uvicorn: ``python -m actions_relay``."""

from __future__ import annotations

import uvicorn

from actions_relay.config import settings
from actions_relay.logging_config import configure_logging


def main() -> None:
    logger = configure_logging(settings.log_level)
    logger.info("Webhook server running on port %s", settings.port)
    logger.info("Webhook URL: http://localhost:%s/webhook", settings.port)
    uvicorn.run("actions_relay.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
