"""GitHub REST API client for commit sync."""
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Optional

import httpx

from archledger.core.config import get_settings


class GitHubError(Exception):
    """GitHub answered with an error status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubRateLimitError(GitHubError):
    """GitHub API rate limit reached; the next scheduled sync retries."""


@dataclass(frozen=True)
class GitHubCommit:
    sha: str
    message: str
    author: str
    author_email: Optional[str]
    committed_at: datetime
    url: Optional[str]


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_commit(item: dict[str, Any]) -> GitHubCommit:
    commit = item.get("commit") or {}
    author = commit.get("author") or {}
    return GitHubCommit(
        sha=item["sha"],
        message=commit.get("message") or "",
        author=author.get("name") or "",
        author_email=author.get("email"),
        committed_at=_parse_timestamp(author["date"]),
        url=item.get("html_url"),
    )


class GitHubClient:
    """Thin async wrapper over the GitHub commits endpoint.

    Usage:
        async with GitHubClient(token) as client:
            commits = await client.get_commits("octo", "repo", since=since)
    """

    def __init__(
        self,
        access_token: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.github_api_url,
            timeout=timeout or settings.github_request_timeout_seconds,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_commits(
        self,
        owner: str,
        repo: str,
        since: Optional[datetime] = None,
        per_page: int = 100,
    ) -> list[GitHubCommit]:
        """Fetch one page of commits, newest first.

        Raises:
            GitHubRateLimitError: rate limit exhausted
            GitHubError: any other error status
        """
        params: dict[str, Any] = {"per_page": per_page}
        if since is not None:
            params["since"] = since.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")

        response = await self._client.get(f"/repos/{owner}/{repo}/commits", params=params)

        if response.status_code in (403, 429) and response.headers.get("x-ratelimit-remaining") == "0":
            raise GitHubRateLimitError("GitHub API rate limit exceeded", response.status_code)
        if response.status_code >= 400:
            raise GitHubError(
                f"GitHub API error {response.status_code} for {owner}/{repo}",
                response.status_code,
            )

        return [_parse_commit(item) for item in response.json()]
