"""
Pytest configuration and fixtures for codesense tests.
"""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from codesense.config import Config, clear_config_cache
from codesense.providers import Message, Part, Role
from codesense.repository import (
    Contributor,
    LanguageShare,
    RepositoryEntry,
    RepositoryMetadata,
)


class FakeBackend:
    """Model backend replaying scripted replies.

    Each scripted item is a Message to return or an exception to raise.
    Every call is recorded as ``(messages, tools_enabled)``.
    """

    def __init__(self, replies: list, configured: bool = True):
        self.replies = list(replies)
        self.configured = configured
        self.calls: list[tuple[list[Message], bool]] = []

    def is_configured(self) -> bool:
        return self.configured

    async def send(self, messages: list[Message], tools_enabled: bool) -> Message:
        self.calls.append((list(messages), tools_enabled))
        if not self.replies:
            raise AssertionError("FakeBackend ran out of scripted replies")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


class RecordingFetcher:
    """Content fetcher returning canned file bodies and recording paths."""

    def __init__(self, files: dict[str, str | None] | None = None):
        self.files = files or {}
        self.requested: list[str] = []

    async def __call__(self, owner: str, repo: str, path: str) -> str | None:
        self.requested.append(path)
        return self.files.get(path)


def tool_call_reply(*paths: str, call_id: str = "call_1") -> Message:
    """Model message asking for the given files."""
    return Message(
        role=Role.MODEL,
        parts=(Part.from_tool_call("get_file_content", {"filePaths": list(paths)}, call_id),),
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_codesense_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Provide an isolated ~/.codesense directory."""
    home = temp_dir / ".codesense"
    home.mkdir()
    monkeypatch.setenv("CODESENSE_HOME", str(home))
    return home


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep real credentials and cached config out of tests."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def config() -> Config:
    """Default configuration with a model credential set."""
    return Config.model_validate({"providers": {"api_key": "test-key"}})


@pytest.fixture
def metadata() -> RepositoryMetadata:
    """Provide sample repository metadata."""
    return RepositoryMetadata(
        full_name="acme/widget",
        description="A widget",
        language="TypeScript",
        stars=10,
        forks=2,
        open_issues=1,
        topics=["widgets", "ui"],
        entries=[
            RepositoryEntry(path="README.md", type="file", size=1200),
            RepositoryEntry(path="package.json", type="file", size=800),
            RepositoryEntry(path="src", type="dir", size=0),
        ],
        languages=[
            LanguageShare(name="TypeScript", percentage=90, color="#3178c6"),
            LanguageShare(name="CSS", percentage=10, color="#563d7c"),
        ],
        contributors=[Contributor(login="wile", contributions=42)],
    )


@pytest.fixture
def make_backend() -> type[FakeBackend]:
    """Provide the scripted backend class."""
    return FakeBackend


@pytest.fixture
def make_fetcher() -> type[RecordingFetcher]:
    """Provide the recording fetcher class."""
    return RecordingFetcher


@pytest.fixture
def tool_call():
    """Provide a builder for model messages requesting files."""
    return tool_call_reply
