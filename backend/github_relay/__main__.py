"""Run the relay: ``python -m github_relay`` or the ``github-relay`` script."""

import structlog
import uvicorn

from github_relay.config.config import Settings

logger = structlog.get_logger(__name__)


def main() -> None:
    # Only host/port/log level are read here; the served app is github_relay.main:app.
    settings = Settings()
    logger.info("relay_starting", url=f"http://localhost:{settings.port}")
    uvicorn.run("github_relay.main:app", host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
