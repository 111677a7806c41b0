"""
GitHub REST client.

Supplies repository metadata before an exchange and file content during a
tool round. ``fetch_content`` follows the fetcher contract of the tool
layer: it returns the text, or None for anything it cannot or will not
return.
"""

import asyncio
import base64
import logging
import os
from typing import Any
from urllib.parse import quote

import httpx

from codesense.config.schema import GitHubConfig
from codesense.repository import Contributor, LanguageShare, RepositoryEntry, RepositoryMetadata

logger = logging.getLogger(__name__)

LANGUAGE_COLORS: dict[str, str] = {
    "JavaScript": "#f1e05a",
    "TypeScript": "#3178c6",
    "HTML": "#e34c26",
    "CSS": "#563d7c",
    "Python": "#3572A5",
    "Java": "#b07219",
    "C++": "#f34b7d",
    "C": "#555555",
    "C#": "#178600",
    "Ruby": "#701516",
    "PHP": "#4F5D95",
    "Swift": "#ffac45",
    "Go": "#00ADD8",
    "Rust": "#dea584",
    "Kotlin": "#A97BFF",
    "Dart": "#00B4AB",
    "Shell": "#89e051",
    "Lua": "#000080",
    "Objective-C": "#438eff",
    "Other": "#8B8B8B",
}

JSON_MEDIA_TYPE = "application/vnd.github.v3+json"
RAW_MEDIA_TYPE = "application/vnd.github.v3.raw"
TEXT_CONTENT_TYPES = ("text", "json", "javascript")


class GitHubError(Exception):
    """Raised when a GitHub metadata request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    """Async client for the GitHub REST API."""

    def __init__(self, config: GitHubConfig | None = None):
        """
        Initialize the client.

        Args:
            config: GitHub configuration. Uses defaults if not provided.
        """
        self.config = config or GitHubConfig()
        if not self._token():
            logger.warning(
                "GitHub token is not set. API calls might be rate-limited or fail for private repos."
            )

    def _token(self) -> str | None:
        return self.config.token or os.environ.get(self.config.token_env) or None

    def _headers(self, accept: str = JSON_MEDIA_TYPE) -> dict[str, str]:
        headers = {"Accept": accept}
        token = self._token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _url(self, path: str) -> str:
        return f"{self.config.api_url.rstrip('/')}/{path.lstrip('/')}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.config.timeout, follow_redirects=True)

    async def _get_json(self, path: str, error_prefix: str) -> Any:
        """
        GET a JSON resource.

        Raises:
            GitHubError: On transport failure or a non-success status.
        """
        try:
            async with self._client() as client:
                response = await client.get(self._url(path), headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"{error_prefix}: {e}")
            raise GitHubError(f"{error_prefix}: {e}") from e

        if response.status_code >= 400:
            logger.error(f"{error_prefix}: {response.status_code} {response.reason_phrase} {response.text}")
            raise GitHubError(f"{error_prefix}: {response.reason_phrase}", response.status_code)

        return response.json()

    async def fetch_repository(self, owner: str, repo: str) -> dict[str, Any]:
        """Fetch the repository resource."""
        return await self._get_json(f"repos/{owner}/{repo}", "Failed to fetch repository")

    async def fetch_contents(self, owner: str, repo: str, path: str = "") -> list[dict[str, Any]]:
        """Fetch the directory listing at ``path`` (root by default)."""
        data = await self._get_json(
            f"repos/{owner}/{repo}/contents/{quote(path)}",
            f'Failed to fetch repository contents for path "{path}"',
        )
        return data if isinstance(data, list) else [data]

    async def fetch_contributors(self, owner: str, repo: str) -> list[Contributor]:
        """Fetch the top contributors."""
        data = await self._get_json(
            f"repos/{owner}/{repo}/contributors?per_page={self.config.contributors_per_page}",
            "Failed to fetch contributors",
        )
        return [
            Contributor(login=item.get("login", ""), contributions=item.get("contributions", 0))
            for item in data or []
        ]

    async def fetch_languages(self, owner: str, repo: str) -> list[LanguageShare]:
        """
        Fetch detected languages as rounded percentages.

        Returns:
            Languages sorted by share, descending; zero-percent entries are
            dropped. A single "N/A" entry when nothing was detected.
        """
        data: dict[str, int] = await self._get_json(
            f"repos/{owner}/{repo}/languages", "Failed to fetch languages"
        )
        total = sum(data.values()) if data else 0
        if total == 0:
            return [LanguageShare(name="N/A", percentage=100, color=LANGUAGE_COLORS["Other"])]

        shares = [
            LanguageShare(
                name=name,
                percentage=int(size * 100 / total + 0.5),
                color=LANGUAGE_COLORS.get(name, LANGUAGE_COLORS["Other"]),
            )
            for name, size in data.items()
        ]
        shares.sort(key=lambda share: share.percentage, reverse=True)
        return [share for share in shares if share.percentage > 0]

    async def fetch_metadata(self, owner: str, repo: str) -> RepositoryMetadata:
        """
        Fetch everything an exchange needs to know about a repository.

        The four requests run concurrently.

        Raises:
            GitHubError: If any request fails.
        """
        repository, contents, languages, contributors = await asyncio.gather(
            self.fetch_repository(owner, repo),
            self.fetch_contents(owner, repo),
            self.fetch_languages(owner, repo),
            self.fetch_contributors(owner, repo),
        )

        return RepositoryMetadata(
            full_name=repository.get("full_name") or f"{owner}/{repo}",
            description=repository.get("description"),
            language=repository.get("language"),
            stars=repository.get("stargazers_count") or 0,
            forks=repository.get("forks_count") or 0,
            open_issues=repository.get("open_issues_count"),
            topics=repository.get("topics") or [],
            entries=[
                RepositoryEntry(
                    path=item.get("path", ""),
                    type=item.get("type", "file"),
                    size=item.get("size") or 0,
                )
                for item in contents
            ],
            languages=languages,
            contributors=contributors,
        )

    async def fetch_content(self, owner: str, repo: str, path: str) -> str | None:
        """
        Fetch the text of one file.

        Tries the raw media type first, then the contents metadata (inline
        base64 or ``download_url``). Directories, files above
        ``max_file_size`` and failed requests yield None.
        """
        url = self._url(f"repos/{owner}/{repo}/contents/{quote(path)}")

        try:
            async with self._client() as client:
                response = await client.get(url, headers=self._headers(RAW_MEDIA_TYPE))
                content_type = response.headers.get("content-type", "")
                if response.status_code == 200 and any(
                    kind in content_type for kind in TEXT_CONTENT_TYPES
                ):
                    if len(response.content) > self.config.max_file_size:
                        logger.warning(f"File {path} is too large ({len(response.content)} bytes).")
                        return None
                    return response.text

                response = await client.get(url, headers=self._headers())
                if response.status_code != 200:
                    logger.error(
                        f"Failed to fetch file metadata for {path}: "
                        f"{response.status_code} {response.reason_phrase}"
                    )
                    return None

                file_data = response.json()
                if not isinstance(file_data, dict) or file_data.get("type") != "file":
                    kind = file_data.get("type") if isinstance(file_data, dict) else "listing"
                    logger.warning(f"{path} is not a file, it's a {kind}.")
                    return None

                size = file_data.get("size") or 0
                if size == 0:
                    return ""
                if size > self.config.max_file_size:
                    logger.warning(f"File {path} is too large ({size} bytes).")
                    return None

                if file_data.get("encoding") == "base64" and file_data.get("content"):
                    return base64.b64decode(file_data["content"]).decode("utf-8", errors="replace")

                download_url = file_data.get("download_url")
                if download_url:
                    download = await client.get(download_url, headers=self._headers("*/*"))
                    if download.status_code != 200:
                        logger.error(
                            f"Failed to download file content for {path}: {download.status_code}"
                        )
                        return None
                    return download.text

                return None

        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Error fetching file content for {path}: {e}")
            return None
