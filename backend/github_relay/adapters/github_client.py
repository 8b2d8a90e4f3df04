"""HTTP adapter for the GitHub REST API v3."""

from typing import Any, TypeVar

import httpx
import pydantic
import structlog

from github_relay.adapters.github_models import (
    GitHubCreatedIssue,
    GitHubRepo,
    GitHubUser,
    UpstreamFailure,
    UpstreamOk,
    UpstreamResult,
)

logger = structlog.get_logger(__name__)

_T = TypeVar("_T", bound=pydantic.BaseModel)


class GitHubClient:
    """Async client for the handful of GitHub endpoints the relay proxies.

    Data methods never raise for upstream problems. They return an
    ``UpstreamOk`` carrying the validated record, or an ``UpstreamFailure``
    describing what went wrong (transport error, non-2xx status or a body that
    does not look like the expected record).
    """

    DEFAULT_BASE_URL = "https://api.github.com"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: str | None = None,
        api_version: str = "2022-11-28",
        user_agent: str = "github-relay",
        timeout: float | None = None,
    ) -> None:
        headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "X-GitHub-Api-Version": api_version,
            "User-Agent": user_agent,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        client_kwargs: dict[str, Any] = {}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self._http = httpx.AsyncClient(base_url=base_url.rstrip("/"), headers=headers, **client_kwargs)

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._http.is_closed:
            await self._http.aclose()

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    async def health_check(self) -> bool:
        try:
            resp = await self._http.get("/")
            return resp.status_code == 200
        except httpx.HTTPError:
            return False

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_user(self, username: str) -> UpstreamResult[GitHubUser]:
        """Fetch the public profile record of ``username``."""
        resp = await self._request("GET", f"/users/{username}")
        if isinstance(resp, UpstreamFailure):
            return resp
        return self._parse(resp, GitHubUser)

    async def list_user_repos(self, username: str) -> UpstreamResult[list[GitHubRepo]]:
        """Fetch the first page of ``username``'s public repositories, in upstream order."""
        resp = await self._request("GET", f"/users/{username}/repos")
        if isinstance(resp, UpstreamFailure):
            return resp
        return self._parse_list(resp, GitHubRepo)

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    async def get_repo(self, owner: str, repo: str) -> UpstreamResult[GitHubRepo]:
        resp = await self._request("GET", f"/repos/{owner}/{repo}")
        if isinstance(resp, UpstreamFailure):
            return resp
        return self._parse(resp, GitHubRepo)

    async def create_issue(self, owner: str, repo: str, title: str, body: str) -> UpstreamResult[GitHubCreatedIssue]:
        """Open a new issue on ``owner/repo``.

        Args:
            owner: Account that owns the repository.
            repo: Repository name, used verbatim in the URL.
            title: Issue title.
            body: Issue body (Markdown).

        Returns:
            ``UpstreamOk`` with the created issue's ``html_url``, or an
            ``UpstreamFailure`` carrying GitHub's error payload.
        """
        resp = await self._request("POST", f"/repos/{owner}/{repo}/issues", json={"title": title, "body": body})
        if isinstance(resp, UpstreamFailure):
            return resp
        return self._parse(resp, GitHubCreatedIssue)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, json: Any = None) -> httpx.Response | UpstreamFailure:
        try:
            resp = await self._http.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning("github_request_failed", method=method, path=path, error=str(exc))
            return UpstreamFailure(message=f"GitHub request failed: {exc}")
        if not resp.is_success:
            logger.warning("github_upstream_error", method=method, path=path, status_code=resp.status_code)
            return UpstreamFailure(
                message=f"GitHub API error {resp.status_code}",
                status_code=resp.status_code,
                body=self._error_body(resp),
            )
        return resp

    @staticmethod
    def _error_body(resp: httpx.Response) -> Any:
        """Return the upstream error payload: parsed JSON, else raw text, else None."""
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text or None

    def _decode(self, resp: httpx.Response) -> Any | UpstreamFailure:
        try:
            return resp.json()
        except ValueError as exc:
            logger.warning("github_non_json_body", url=str(resp.request.url), status_code=resp.status_code)
            return UpstreamFailure(
                message=f"GitHub returned non-JSON body (status {resp.status_code}): {exc}",
                status_code=resp.status_code,
            )

    def _parse(self, resp: httpx.Response, model: type[_T]) -> UpstreamResult[_T]:
        """Decode the response body and validate it against a Pydantic model."""
        data = self._decode(resp)
        if isinstance(data, UpstreamFailure):
            return data
        try:
            return UpstreamOk(data=model.model_validate(data), status_code=resp.status_code)
        except pydantic.ValidationError as exc:
            logger.warning("github_schema_mismatch", model=model.__name__, status_code=resp.status_code)
            return UpstreamFailure(message=f"GitHub response schema mismatch: {exc}", status_code=resp.status_code)

    def _parse_list(self, resp: httpx.Response, model: type[_T]) -> UpstreamResult[list[_T]]:
        """Decode the response body as a JSON array, validating each element in order."""
        items = self._decode(resp)
        if isinstance(items, UpstreamFailure):
            return items
        if not isinstance(items, list):
            return UpstreamFailure(
                message=f"GitHub returned unexpected shape, expected array, got {type(items).__name__}",
                status_code=resp.status_code,
            )
        try:
            parsed = [model.model_validate(item) for item in items]
        except pydantic.ValidationError as exc:
            logger.warning("github_schema_mismatch", model=model.__name__, status_code=resp.status_code)
            return UpstreamFailure(message=f"GitHub response schema mismatch: {exc}", status_code=resp.status_code)
        return UpstreamOk(data=parsed, status_code=resp.status_code)
