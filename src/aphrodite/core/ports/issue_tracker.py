"""
Issue Tracker Port - Abstract interface for issue tracking systems.

Implementations:
- JiraIssueTracker: Atlassian Jira (REST API v2)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from ..domain.entities import Comment, Issue
from ..domain.value_objects import IssueCreationDetails, SearchCriteria


class AphroditeError(Exception):
    """Base exception for issue tracker errors."""

    def __init__(
        self,
        message: str,
        issue_key: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.issue_key = issue_key
        self.cause = cause


class AuthenticationError(AphroditeError):
    """Authentication failed."""
    pass


class NotFoundError(AphroditeError):
    """Issue, filter or URL could not be resolved."""
    pass


class PermissionError(AphroditeError):
    """Insufficient permissions."""
    pass


class TransientError(AphroditeError):
    """A remote call was interrupted or failed and may succeed if repeated."""
    pass


class RateLimitError(TransientError):
    """Rate limit exceeded (HTTP 429)."""

    def __init__(
        self,
        message: str,
        retry_after: int | None = None,
        issue_key: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, issue_key, cause)
        self.retry_after = retry_after


class ReconciliationError(AphroditeError):
    """A field update or status transition was rejected by the tracker."""
    pass


class ConfigError(AphroditeError):
    """Configuration is missing or malformed."""
    pass


@dataclass
class ReconcileResult:
    """
    Record of the remote operations performed while updating an issue.

    skipped_transition holds the name of a transition the workflow did not
    offer; the update still counts as applied.
    """

    issue_key: str
    updated_fields: list[str] = field(default_factory=list)
    transition: str | None = None
    skipped_transition: str | None = None

    @property
    def changed(self) -> bool:
        return bool(self.updated_fields) or self.transition is not None


class IssueTrackerPort(ABC):
    """
    Abstract interface for issue tracking systems.

    All issue tracker adapters must implement this interface.
    """

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the tracker name (e.g., 'Jira')."""
        ...

    @abstractmethod
    def url_exists(self, url: str) -> bool:
        """Check whether a URL points at this tracker's host."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the connection to the tracker."""
        ...

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_issue(self, url: str) -> Issue:
        """
        Fetch a single issue by URL.

        Raises:
            NotFoundError: If the URL is not an issue URL or the issue doesn't exist
        """
        ...

    @abstractmethod
    def get_issues(self, urls: Iterable[str]) -> list[Issue]:
        """
        Fetch several issues in one search.

        URLs that belong to another host or cannot be resolved are skipped.
        """
        ...

    @abstractmethod
    def search_issues(self, criteria: SearchCriteria) -> list[Issue]:
        """Search for issues matching abstract criteria."""
        ...

    @abstractmethod
    def search_issues_by_filter(self, filter_url: str) -> list[Issue]:
        """Run a saved tracker filter and return every matching issue."""
        ...

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    @abstractmethod
    def update_issue(self, issue: Issue) -> ReconcileResult:
        """
        Bring the remote issue in line with the given one.

        Raises:
            NotFoundError: If the issue doesn't exist
            ReconciliationError: If the tracker rejected the update
        """
        ...

    @abstractmethod
    def create_issue(self, details: IssueCreationDetails) -> Issue:
        """Create an issue and return it as freshly fetched from the tracker."""
        ...

    @abstractmethod
    def add_comment(self, issue: Issue, comment: Comment) -> None:
        """Add a comment to an issue."""
        ...

    @abstractmethod
    def add_comments(
        self,
        targets: Mapping[Issue, Comment] | Iterable[tuple[Issue, Comment]],
    ) -> bool:
        """
        Add comments to many issues concurrently.

        Returns:
            True only if every comment was posted
        """
        ...

    @abstractmethod
    def add_comment_to_issues(self, issues: Iterable[Issue], comment: Comment) -> bool:
        """Add the same comment to many issues concurrently."""
        ...

    @abstractmethod
    def link_issues(self, from_issue: Issue, to_issue: Issue, link_type: str) -> None:
        """Link two issues with a named link type."""
        ...
