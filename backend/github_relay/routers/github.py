"""REST API router relaying profile, repository and issue calls to GitHub."""

import asyncio
from typing import Annotated

import pydantic
import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from github_relay.adapters.github_client import GitHubClient
from github_relay.adapters.github_models import UpstreamFailure
from github_relay.config.config import Settings
from github_relay.schemas.github import (
    ErrorResponse,
    IssueCreationRequest,
    IssueCreationResult,
    ProfileSummary,
    RepoDetail,
    RepoSummary,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/github", tags=["github"])

PROFILE_FALLBACK = "Error fetching data"
REPO_FALLBACK = "Repository not found"
ISSUE_FALLBACK = "Error creating issue"
ISSUE_FIELDS_REQUIRED = "Title and body are required"
ISSUE_CREATED = "Issue created successfully"

_ERROR_RESPONSES: dict[int | str, dict] = {status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}}


def get_github_client(request: Request) -> GitHubClient:
    """FastAPI dependency: reads from app.state.github_client."""
    return request.app.state.github_client


def get_settings(request: Request) -> Settings:
    """FastAPI dependency: reads from app.state.settings."""
    return request.app.state.settings


# Error payloads treated as absent, so the endpoint fallback is used instead.
_EMPTY_PAYLOADS = (None, "", False, 0)


def _upstream_error(failure: UpstreamFailure, fallback: str) -> JSONResponse:
    """Build the 500 envelope, preferring GitHub's own error payload over the fallback."""
    error = fallback if failure.body in _EMPTY_PAYLOADS else failure.body
    return JSONResponse(
        ErrorResponse(error=error).model_dump(),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@router.get("", response_model=ProfileSummary, responses=_ERROR_RESPONSES)
async def get_profile(
    client: Annotated[GitHubClient, Depends(get_github_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ProfileSummary | JSONResponse:
    """Return follower counts and public repositories of the configured account."""
    username = settings.github_username
    user_result, repos_result = await asyncio.gather(
        client.get_user(username),
        client.list_user_repos(username),
    )
    if isinstance(user_result, UpstreamFailure):
        logger.warning("github_profile_failed", username=username, status_code=user_result.status_code)
        return _upstream_error(user_result, PROFILE_FALLBACK)
    if isinstance(repos_result, UpstreamFailure):
        logger.warning("github_repos_failed", username=username, status_code=repos_result.status_code)
        return _upstream_error(repos_result, PROFILE_FALLBACK)

    user = user_result.data
    return ProfileSummary(
        username=user.login,
        followers=user.followers,
        following=user.following,
        public_repos=[
            RepoSummary(name=repo.name, url=repo.html_url, description=repo.description)
            for repo in repos_result.data
        ],
    )


@router.get("/{repo}", response_model=RepoDetail, responses=_ERROR_RESPONSES)
async def get_repository(
    repo: str,
    client: Annotated[GitHubClient, Depends(get_github_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RepoDetail | JSONResponse:
    result = await client.get_repo(settings.github_username, repo)
    if isinstance(result, UpstreamFailure):
        logger.warning("github_repo_failed", repo=repo, status_code=result.status_code)
        return _upstream_error(result, REPO_FALLBACK)

    data = result.data
    return RepoDetail(
        name=data.name,
        description=data.description,
        stars=data.stargazers_count,
        forks=data.forks_count,
        issues=data.open_issues_count,
        url=data.html_url,
    )


async def _read_issue_request(request: Request) -> IssueCreationRequest | None:
    """Parse the issue body, or None when it is not a JSON object with non-empty title and body."""
    try:
        data = await request.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        payload = IssueCreationRequest.model_validate(data)
    except pydantic.ValidationError:
        return None
    if not payload.title or not payload.body:
        return None
    return payload


@router.post(
    "/{repo}/issues",
    response_model=IssueCreationResult,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}, **_ERROR_RESPONSES},
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": IssueCreationRequest.model_json_schema()}},
        }
    },
)
async def create_issue(
    repo: str,
    request: Request,
    client: Annotated[GitHubClient, Depends(get_github_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> IssueCreationResult | JSONResponse:
    """Open an issue on one of the configured account's repositories.

    Anything other than a JSON object with non-empty ``title`` and ``body`` is
    rejected with 400 before GitHub is contacted.
    """
    payload = await _read_issue_request(request)
    if payload is None:
        return JSONResponse(
            ErrorResponse(error=ISSUE_FIELDS_REQUIRED).model_dump(),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    result = await client.create_issue(settings.github_username, repo, payload.title, payload.body)
    if isinstance(result, UpstreamFailure):
        logger.warning("github_issue_failed", repo=repo, status_code=result.status_code)
        return _upstream_error(result, ISSUE_FALLBACK)

    logger.info("github_issue_created", repo=repo, issue_url=result.data.html_url)
    return IssueCreationResult(message=ISSUE_CREATED, issue_url=result.data.html_url)
