"""
Jira Adapter - Implementation of IssueTrackerPort for Atlassian Jira.

Components:
- JiraIssueTracker: Main adapter implementing IssueTrackerPort
- JiraApiClient: Synchronous HTTP client for the REST API
- JiraQueryBuilder: SearchCriteria to JQL compilation
- SearchPaginator: Exhaustive paginated search
- JiraStateReconciler: Field update and workflow transition of one issue
- CommentDispatcher: Concurrent comment posting
"""

from .adapter import JiraIssueTracker
from .batch import CommentDispatcher
from .client import JiraApiClient
from .identifiers import browse_url, resolve_key
from .mapper import JiraIssueMapper
from .paginator import SearchPaginator, SearchResultPage
from .query_builder import MATCH_NOTHING, JiraQueryBuilder
from .reconciler import JiraStateReconciler, TransitionCandidate, classify_update_error

__all__ = [
    # Adapter
    "JiraIssueTracker",
    # HTTP Client
    "JiraApiClient",
    # Core components
    "JiraQueryBuilder",
    "SearchPaginator",
    "SearchResultPage",
    "JiraStateReconciler",
    "TransitionCandidate",
    "CommentDispatcher",
    "JiraIssueMapper",
    # Utilities
    "MATCH_NOTHING",
    "resolve_key",
    "browse_url",
    "classify_update_error",
]
