"""Pagination - Lazily walk a paginated commit comparison."""

from typing import Callable, Iterator

from nextver.github.models import Commit, CommitPage


def iter_pages(fetch_page: Callable[[int], CommitPage]) -> Iterator[CommitPage]:
    """Yield pages starting at 1 until the cumulative commit count reaches the reported total.

    An empty page also ends the walk, so a total that never gets reached
    cannot loop forever.
    """
    page_number = 1
    fetched = 0
    while True:
        page = fetch_page(page_number)
        yield page
        fetched += len(page.commits)
        if not page.commits or fetched >= page.total_count:
            return
        page_number += 1


def collect_commits(
    fetch_page: Callable[[int], CommitPage],
    on_page: Callable[[CommitPage], None] | None = None,
) -> list[Commit]:
    """Fetch every page and return the commits in order. on_page sees each page as it arrives."""
    commits = []
    for page in iter_pages(fetch_page):
        if on_page:
            on_page(page)
        commits.extend(page.commits)
    return commits
