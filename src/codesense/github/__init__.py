"""GitHub REST data source for repository metadata and file content."""

from codesense.github.client import LANGUAGE_COLORS, GitHubClient, GitHubError

__all__ = [
    "GitHubClient",
    "GitHubError",
    "LANGUAGE_COLORS",
]
