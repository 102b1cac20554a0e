"""
aphrodite - Jira adapter for a generic issue tracking abstraction.

Translates search criteria into JQL, paginates searches, reconciles
desired issue state with Jira's workflow and posts comments in bulk.

Example:
    >>> from aphrodite import EnvironmentConfigProvider, JiraIssueTracker
    >>> config = EnvironmentConfigProvider().load()
    >>> with JiraIssueTracker(config.tracker) as tracker:
    ...     issue = tracker.get_issue("https://issues.example.com/browse/EAP-1")
"""

from .adapters import EnvironmentConfigProvider, JiraApiClient, JiraIssueTracker
from .core.domain import (
    Comment,
    Flag,
    FlagStatus,
    Issue,
    IssueCreationDetails,
    IssueStatus,
    IssueType,
    Release,
    SearchCriteria,
)
from .core.ports import (
    AphroditeError,
    AuthenticationError,
    ConfigError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    ReconcileResult,
    ReconciliationError,
    TrackerConfig,
    TransientError,
)
from .logs import setup_logging

__version__ = "0.3.0"

__all__ = [
    "JiraIssueTracker",
    "JiraApiClient",
    "EnvironmentConfigProvider",
    "TrackerConfig",
    "Issue",
    "Comment",
    "Release",
    "SearchCriteria",
    "IssueCreationDetails",
    "IssueStatus",
    "IssueType",
    "Flag",
    "FlagStatus",
    "ReconcileResult",
    "AphroditeError",
    "AuthenticationError",
    "ConfigError",
    "NotFoundError",
    "PermissionError",
    "RateLimitError",
    "ReconciliationError",
    "TransientError",
    "setup_logging",
]
