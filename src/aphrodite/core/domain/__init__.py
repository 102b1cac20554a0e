"""
Domain layer - Entities, value objects and enums shared by all trackers.
"""

from .entities import Comment, Issue, Release
from .enums import Flag, FlagStatus, IssueStatus, IssueType
from .value_objects import IssueCreationDetails, SearchCriteria

__all__ = [
    # Entities
    "Issue",
    "Comment",
    "Release",
    # Value objects
    "SearchCriteria",
    "IssueCreationDetails",
    # Enums
    "IssueStatus",
    "IssueType",
    "Flag",
    "FlagStatus",
]
