"""Pydantic schemas for the GitHub relay REST API."""

from typing import Any

from pydantic import BaseModel, Field


class RepoSummary(BaseModel):
    name: str
    url: str
    description: str | None


class ProfileSummary(BaseModel):
    """Profile of the configured account together with its public repositories."""

    username: str
    followers: int
    following: int
    public_repos: list[RepoSummary]


class RepoDetail(BaseModel):
    name: str
    description: str | None
    stars: int
    forks: int
    issues: int
    url: str


class IssueCreationRequest(BaseModel):
    """Request body for opening an issue.

    Both fields are optional at the schema level so that a missing field is
    reported by the relay's own 400 envelope instead of a 422.
    """

    title: str | None = Field(default=None, description="Issue title. Required, must be non-empty.")
    body: str | None = Field(default=None, description="Issue body. Required, must be non-empty.")


class IssueCreationResult(BaseModel):
    message: str
    issue_url: str


class ErrorResponse(BaseModel):
    """Error envelope. ``error`` is GitHub's error payload when it sent one, else a fixed message."""

    error: Any
