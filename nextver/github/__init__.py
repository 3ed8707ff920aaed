"""GitHub Operations Package"""

from nextver.github.models import Commit, CommitPage, Tag
from nextver.github.pagination import collect_commits, iter_pages
from nextver.github.client import GitHubClient, GitHubError, graphql_url_for

__all__ = [
    "Commit",
    "CommitPage",
    "Tag",
    "GitHubClient",
    "GitHubError",
    "graphql_url_for",
    "collect_commits",
    "iter_pages",
]
