"""
Search pagination - Fetches every page of a JQL search in order.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from ...core.ports.issue_tracker import AphroditeError, TransientError
from .client import JiraApiClient


@dataclass
class SearchResultPage:
    """One page of search results as returned by the tracker."""

    issues: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0

    @classmethod
    def from_response(cls, data: Any) -> "SearchResultPage":
        """
        Read a search response body.

        Raises:
            ValueError: If the body is not a search result
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        issues = data.get("issues") or []
        if not isinstance(issues, list):
            raise ValueError(f"Expected a list of issues, got {type(issues).__name__}")
        return cls(issues=list(issues), total=int(data.get("total") or 0))


class SearchPaginator:
    """
    Drives repeated searches until the whole result set is read.

    The total reported by the first page is pinned for the rest of the run:
    Jira recomputes it on every call, and a total that shrinks or grows as
    issues change must not re-read pages or loop forever.
    """

    DEFAULT_PAGE_SIZE = 100

    def __init__(self, client: JiraApiClient, page_size: int = DEFAULT_PAGE_SIZE):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._client = client
        self.page_size = page_size
        self.logger = logging.getLogger("SearchPaginator")

    def fetch_all(
        self,
        jql: str,
        fields: list[str],
        max_results: int | None = None,
        page_size: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch every issue matching a query, page by page.

        Args:
            jql: Query to run
            fields: Fields to return for each issue
            max_results: Optional cap on the number of issues requested
            page_size: Page length for this run; defaults to the paginator's

        Returns:
            Raw issues in arrival order

        Raises:
            TransientError: If any page fails; no partial result is returned
        """
        size = page_size or self.page_size
        issues: list[dict[str, Any]] = []
        start_at = 0
        total: int | None = None
        self.logger.debug(f"Paginating '{jql}' with page size {size}, cap {max_results}")

        while True:
            length = size if max_results is None else min(size, max_results - start_at)
            if length <= 0:
                break

            self.logger.debug(f"Fetching page at {start_at} (length {length})")
            page = self._fetch_page(jql, fields, length, start_at)

            if total is None:
                total = page.total
                self.logger.debug(f"Total issues in result: {total}")

            issues.extend(page.issues)
            start_at += length
            if start_at >= total:
                break

        self.logger.debug(f"Fetched {len(issues)} issues")
        return issues

    def _fetch_page(
        self,
        jql: str,
        fields: list[str],
        length: int,
        start_at: int,
    ) -> SearchResultPage:
        try:
            data = self._client.search_jql(jql, fields, max_results=length, start_at=start_at)
        except TransientError:
            raise
        except (AphroditeError, ValueError) as e:
            raise TransientError(
                f"Search failed at position {start_at}: {e}",
                cause=e,
            ) from e

        try:
            return SearchResultPage.from_response(data)
        except (TypeError, ValueError) as e:
            raise TransientError(
                f"Malformed search page at position {start_at}: {e}",
                cause=e,
            ) from e
