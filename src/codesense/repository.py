"""Repository metadata consumed by prompts and fallbacks."""

from typing import Optional

from pydantic import BaseModel, Field


class RepositoryEntry(BaseModel):
    """A top-level file or directory of the repository."""

    path: str
    type: str = "file"  # "file", "dir", "symlink", "submodule"
    size: int = 0


class LanguageShare(BaseModel):
    """A detected language and its share of the code base."""

    name: str
    percentage: int = 0
    color: Optional[str] = None


class Contributor(BaseModel):
    """A repository contributor."""

    login: str
    contributions: int = 0


class RepositoryMetadata(BaseModel):
    """Metadata known about a repository before any exchange starts."""

    full_name: str  # "owner/repo"
    description: Optional[str] = None
    language: Optional[str] = None  # Primary language
    stars: int = 0
    forks: int = 0
    open_issues: Optional[int] = None
    topics: list[str] = Field(default_factory=list)
    entries: list[RepositoryEntry] = Field(default_factory=list)
    languages: list[LanguageShare] = Field(default_factory=list)
    contributors: list[Contributor] = Field(default_factory=list)

    @property
    def owner(self) -> str:
        """Repository owner login."""
        return self.full_name.split("/", 1)[0]

    @property
    def repo(self) -> str:
        """Short repository name."""
        owner, _, repo = self.full_name.partition("/")
        return repo or owner

    def __str__(self) -> str:
        """String representation."""
        return self.full_name
