"""
Adapters - Concrete implementations of the core ports.
"""

from .config import EnvironmentConfigProvider
from .jira import JiraApiClient, JiraIssueTracker

__all__ = [
    "EnvironmentConfigProvider",
    "JiraIssueTracker",
    "JiraApiClient",
]
