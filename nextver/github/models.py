"""GitHub data returned by the client."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Tag:
    """Most recent tag of a repository."""
    name: str
    commit_sha: str = ""


@dataclass(frozen=True)
class Commit:
    """A commit in the compared range."""
    sha: str
    message: str


@dataclass
class CommitPage:
    """One page of a commit comparison."""
    commits: list[Commit] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
