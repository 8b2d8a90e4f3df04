"""Pydantic models for the GitHub API adapter."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

_T = TypeVar("_T")


class _Base(BaseModel):
    """Shared config: silently ignore unknown fields from the GitHub API."""

    model_config = ConfigDict(extra="ignore")


class GitHubUser(_Base):
    login: str
    followers: int
    following: int


class GitHubRepo(_Base):
    name: str
    html_url: str
    description: str | None = None
    # The repo list endpoint may omit counts on some records.
    stargazers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0


class GitHubCreatedIssue(_Base):
    html_url: str
    number: int | None = None


@dataclass(frozen=True)
class UpstreamOk(Generic[_T]):
    """A 2xx upstream response whose body validated against the expected model."""

    data: _T
    status_code: int


@dataclass(frozen=True)
class UpstreamFailure:
    """Any upstream call that did not produce a usable record.

    ``status_code`` is None for transport failures. ``body`` holds the upstream
    error payload (parsed JSON or raw text) when the upstream sent one.
    """

    message: str
    status_code: int | None = None
    body: Any = None


UpstreamResult = UpstreamOk[_T] | UpstreamFailure
