"""Tests for the GitHub data source."""

import base64
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from codesense.config.schema import GitHubConfig
from codesense.github import GitHubClient, GitHubError


def _response(status_code=200, json_data=None, text="", headers=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason_phrase = reason
    response.headers = headers or {"content-type": "application/json"}
    response.json.return_value = json_data
    response.text = text
    response.content = text.encode()
    return response


def _patched_client(*responses):
    """Patch httpx.AsyncClient so successive GETs return ``responses``."""
    patcher = patch("httpx.AsyncClient")
    mock_client_class = patcher.start()
    mock_client = AsyncMock()
    mock_client.get = AsyncMock(side_effect=list(responses))
    mock_client_class.return_value.__aenter__.return_value = mock_client
    return patcher, mock_client


@pytest.fixture
def client() -> GitHubClient:
    return GitHubClient(GitHubConfig(token="gh-token", max_file_size=100))


class TestGitHubClient:
    """Tests for metadata requests."""

    def test_auth_header(self, client):
        """Test that the token is sent as a bearer credential."""
        headers = client._headers()
        assert headers["Authorization"] == "Bearer gh-token"
        assert headers["Accept"] == "application/vnd.github.v3+json"

    def test_token_from_env(self, monkeypatch):
        """Test reading the token from the environment."""
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        assert GitHubClient()._headers()["Authorization"] == "Bearer env-token"

    def test_no_token(self):
        """Test that requests are anonymous without a token."""
        assert "Authorization" not in GitHubClient()._headers()

    @pytest.mark.asyncio
    async def test_fetch_languages(self, client):
        """Test percentage conversion and ordering."""
        patcher, _ = _patched_client(
            _response(json_data={"CSS": 100, "TypeScript": 850, "Makefile": 2, "Zig": 48})
        )
        try:
            languages = await client.fetch_languages("acme", "widget")
        finally:
            patcher.stop()

        assert [(l.name, l.percentage) for l in languages] == [
            ("TypeScript", 85), ("CSS", 10), ("Zig", 5),
        ]
        assert languages[0].color == "#3178c6"
        assert languages[2].color == "#8B8B8B"

    @pytest.mark.asyncio
    async def test_fetch_languages_empty(self, client):
        """Test the placeholder when nothing was detected."""
        patcher, _ = _patched_client(_response(json_data={}))
        try:
            languages = await client.fetch_languages("acme", "widget")
        finally:
            patcher.stop()

        assert [(l.name, l.percentage) for l in languages] == [("N/A", 100)]

    @pytest.mark.asyncio
    async def test_error_status_raises(self, client):
        """Test that a non-success status raises GitHubError."""
        patcher, _ = _patched_client(_response(status_code=404, reason="Not Found"))
        try:
            with pytest.raises(GitHubError) as exc_info:
                await client.fetch_repository("acme", "missing")
        finally:
            patcher.stop()

        assert exc_info.value.status_code == 404
        assert "Not Found" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, client):
        """Test that transport failures raise GitHubError."""
        patcher, _ = _patched_client(httpx.ConnectError("refused"))
        try:
            with pytest.raises(GitHubError):
                await client.fetch_contributors("acme", "widget")
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_fetch_metadata(self, client):
        """Test assembling repository metadata."""
        client.fetch_repository = AsyncMock(return_value={
            "full_name": "acme/widget",
            "description": "A widget",
            "language": "TypeScript",
            "stargazers_count": 10,
            "forks_count": 2,
            "open_issues_count": 1,
            "topics": ["ui"],
        })
        client.fetch_contents = AsyncMock(return_value=[
            {"path": "README.md", "type": "file", "size": 12},
            {"path": "src", "type": "dir", "size": 0},
        ])
        client.fetch_languages = AsyncMock(return_value=[])
        client.fetch_contributors = AsyncMock(return_value=[])

        metadata = await client.fetch_metadata("acme", "widget")

        assert metadata.full_name == "acme/widget"
        assert metadata.stars == 10
        assert metadata.open_issues == 1
        assert [entry.path for entry in metadata.entries] == ["README.md", "src"]
        assert metadata.entries[1].type == "dir"


class TestFetchFileContent:
    """Tests for fetch_content()."""

    @pytest.mark.asyncio
    async def test_raw_content(self, client):
        """Test the raw media type fast path."""
        patcher, mock_client = _patched_client(
            _response(text="# Widget", headers={"content-type": "text/plain; charset=utf-8"})
        )
        try:
            content = await client.fetch_content("acme", "widget", "README.md")
        finally:
            patcher.stop()

        assert content == "# Widget"
        assert mock_client.get.call_count == 1
        headers = mock_client.get.call_args.kwargs["headers"]
        assert headers["Accept"] == "application/vnd.github.v3.raw"

    @pytest.mark.asyncio
    async def test_base64_fallback(self, client):
        """Test decoding inline base64 content from metadata."""
        encoded = base64.b64encode(b"print('hi')").decode()
        patcher, _ = _patched_client(
            _response(headers={"content-type": "application/octet-stream"}),
            _response(json_data={"type": "file", "size": 11, "encoding": "base64", "content": encoded}),
        )
        try:
            content = await client.fetch_content("acme", "widget", "main.py")
        finally:
            patcher.stop()

        assert content == "print('hi')"

    @pytest.mark.asyncio
    async def test_download_url_fallback(self, client):
        """Test following download_url when there is no inline content."""
        patcher, mock_client = _patched_client(
            _response(status_code=415, headers={}),
            _response(json_data={"type": "file", "size": 5, "download_url": "https://raw.example/x"}),
            _response(text="hello"),
        )
        try:
            content = await client.fetch_content("acme", "widget", "x")
        finally:
            patcher.stop()

        assert content == "hello"
        assert mock_client.get.call_args.args[0] == "https://raw.example/x"

    @pytest.mark.asyncio
    async def test_directory_returns_none(self, client):
        """Test that directories are not returned."""
        patcher, _ = _patched_client(
            _response(status_code=404, headers={}),
            _response(json_data=[{"path": "src/a.ts"}]),
        )
        try:
            assert await client.fetch_content("acme", "widget", "src") is None
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_too_large_returns_none(self, client):
        """Test that files above the size ceiling are refused."""
        patcher, _ = _patched_client(
            _response(status_code=404, headers={}),
            _response(json_data={"type": "file", "size": 5000}),
        )
        try:
            assert await client.fetch_content("acme", "widget", "big.bin") is None
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_empty_file(self, client):
        """Test that an empty file is empty content, not a failure."""
        patcher, _ = _patched_client(
            _response(status_code=404, headers={}),
            _response(json_data={"type": "file", "size": 0}),
        )
        try:
            assert await client.fetch_content("acme", "widget", "empty.txt") == ""
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_not_found_returns_none(self, client):
        """Test that a missing path yields None."""
        patcher, _ = _patched_client(
            _response(status_code=404, headers={}),
            _response(status_code=404, reason="Not Found"),
        )
        try:
            assert await client.fetch_content("acme", "widget", "nope") is None
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_transport_error_returns_none(self, client):
        """Test that transport failures never raise."""
        patcher, _ = _patched_client(httpx.ReadTimeout("slow"))
        try:
            assert await client.fetch_content("acme", "widget", "a") is None
        finally:
            patcher.stop()
