import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from github_relay.adapters.github_client import GitHubClient
from github_relay.config.config import Settings
from github_relay.routers import github, health

logger = structlog.get_logger(__name__)


def configure_logging(level: str) -> None:
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
    )


def build_github_client(settings: Settings) -> GitHubClient:
    return GitHubClient(
        base_url=settings.github_api_url,
        token=settings.github_token,
        api_version=settings.github_api_version,
        user_agent=f"github-relay/{settings.app_version}",
        timeout=settings.github_timeout_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if not settings.github_username:
        logger.error("github_username_missing", hint="set GITHUB_USERNAME")
        raise RuntimeError("GITHUB_USERNAME must be set")
    if not settings.github_token:
        logger.warning("github_token_missing", username=settings.github_username)

    github_client = build_github_client(settings)
    app.state.github_client = github_client
    logger.info("relay_ready", username=settings.github_username, upstream=settings.github_api_url)

    yield

    await github_client.close()
    logger.info("shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the relay application around one explicit Settings instance."""
    settings = settings or Settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title="github-relay",
        description="Relay exposing a GitHub profile, its repositories and issue creation",
        version=settings.app_version,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.github_client = None

    application.include_router(health.router)
    application.include_router(github.router)
    return application


app = create_app()
