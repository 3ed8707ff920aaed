"""GitHub API Client - Resolve the latest tag and compare commit ranges."""

import json
import urllib.error
import urllib.parse
import urllib.request
from functools import partial

from nextver import __version__
from nextver.github.models import Commit, CommitPage, Tag
from nextver.github.pagination import collect_commits

LATEST_TAG_QUERY = """
query lastTags ($owner: String!, $repo: String!) {
  repository (owner: $owner, name: $repo) {
    refs(first: 1, refPrefix: "refs/tags/", orderBy: { field: TAG_COMMIT_DATE, direction: DESC }) {
      nodes {
        name
        target {
          oid
        }
      }
    }
  }
}
"""


class GitHubError(Exception):
    """Raised when GitHub API calls fail."""
    pass


def graphql_url_for(api_url: str) -> str:
    """Derive the GraphQL endpoint from a REST base URL.

    https://api.github.com -> https://api.github.com/graphql
    https://ghe.example.com/api/v3 -> https://ghe.example.com/api/graphql
    """
    base = api_url.rstrip('/')
    if base.endswith('/v3'):
        return base[:-len('/v3')] + '/graphql'
    return base + '/graphql'


class GitHubClient:
    """GitHub REST + GraphQL client. Requires a token with read access to the repository."""

    DEFAULT_API_URL = "https://api.github.com"
    DEFAULT_PER_PAGE = 100
    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        token: str | None,
        api_url: str | None = None,
        graphql_url: str | None = None,
        per_page: int | None = None,
        timeout: int | None = None,
    ):
        if not token:
            raise GitHubError(
                "No GitHub token found. Pass --token or set GITHUB_TOKEN:\n"
                "  export GITHUB_TOKEN='your-token-here'"
            )
        self.token = token
        self.api_url = (api_url or self.DEFAULT_API_URL).rstrip('/')
        self.graphql_url = graphql_url or graphql_url_for(self.api_url)
        self.per_page = per_page or self.DEFAULT_PER_PAGE
        self.timeout = timeout or self.DEFAULT_TIMEOUT

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
            "User-Agent": f"nextver/{__version__}",
        }

    def _request(self, url: str, payload: dict | None = None) -> dict:
        """Make a single API call and decode the JSON response."""
        data = json.dumps(payload).encode('utf-8') if payload is not None else None
        req = urllib.request.Request(
            url,
            data=data,
            headers=self._headers(),
            method='POST' if data is not None else 'GET',
        )

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                body = response.read().decode('utf-8')
        except urllib.error.HTTPError as e:
            raise GitHubError(f"GitHub API error {e.code} for {url}: {_error_detail(e)}")
        except urllib.error.URLError as e:
            raise GitHubError(f"Could not reach GitHub at {url}: {e.reason}")

        try:
            return json.loads(body)
        except json.JSONDecodeError:
            raise GitHubError(f"Invalid JSON response from {url}")

    def fetch_latest_tag(self, owner: str, repo: str) -> Tag | None:
        """Return the most recent tag by commit date, or None if the repository has no tags."""
        result = self._request(self.graphql_url, {
            "query": LATEST_TAG_QUERY,
            "variables": {"owner": owner, "repo": repo},
        })

        errors = result.get('errors')
        if errors:
            messages = '; '.join(err.get('message', 'unknown error') for err in errors)
            raise GitHubError(f"GitHub GraphQL error: {messages}")

        repository = (result.get('data') or {}).get('repository') or {}
        nodes = (repository.get('refs') or {}).get('nodes') or []
        if not nodes:
            return None

        node = nodes[0]
        return Tag(name=node['name'], commit_sha=(node.get('target') or {}).get('oid', ''))

    def fetch_commits(self, owner: str, repo: str, base: str, head: str, page: int = 1) -> CommitPage:
        """Fetch one page of commits between base and head."""
        basehead = f"{urllib.parse.quote(base, safe='')}...{urllib.parse.quote(head, safe='')}"
        query = urllib.parse.urlencode({'page': page, 'per_page': self.per_page})
        url = (
            f"{self.api_url}/repos/{urllib.parse.quote(owner)}/{urllib.parse.quote(repo)}"
            f"/compare/{basehead}?{query}"
        )
        result = self._request(url)

        commits = [
            Commit(sha=item.get('sha', ''), message=(item.get('commit') or {}).get('message', ''))
            for item in result.get('commits') or []
        ]
        return CommitPage(commits=commits, total_count=result.get('total_commits', 0), page=page)

    def fetch_commit_range(self, owner: str, repo: str, base: str, head: str, on_page=None) -> list[Commit]:
        """Fetch every commit between base and head, page by page."""
        return collect_commits(partial(self.fetch_commits, owner, repo, base, head), on_page=on_page)


def _error_detail(error: urllib.error.HTTPError) -> str:
    """Pull GitHub's error message out of an HTTP error body."""
    try:
        data = json.loads(error.read().decode('utf-8'))
        return data.get('message') or error.reason
    except (json.JSONDecodeError, UnicodeDecodeError, AttributeError, OSError):
        return str(error.reason)
