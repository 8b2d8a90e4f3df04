from typing import Annotated

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from github_relay.adapters.github_client import GitHubClient
from github_relay.config.config import Settings
from github_relay.routers.github import get_github_client, get_settings

router = APIRouter()
logger = structlog.get_logger(__name__)


class HealthResponse(BaseModel):
    status: str
    version: str


class UpstreamStatusResponse(BaseModel):
    available: bool


@router.get("/health", response_model=HealthResponse)
async def health(settings: Annotated[Settings, Depends(get_settings)]) -> HealthResponse:
    return HealthResponse(status="ok", version=settings.app_version)


@router.get("/health/upstream", response_model=UpstreamStatusResponse)
async def upstream_status(client: Annotated[GitHubClient, Depends(get_github_client)]) -> UpstreamStatusResponse:
    available = await client.health_check()
    if not available:
        logger.warning("github_upstream_unavailable")
    return UpstreamStatusResponse(available=available)
