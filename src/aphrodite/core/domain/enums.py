"""
Domain enums - Issue status, issue type, flags and flag states.
"""

from __future__ import annotations

from enum import Enum


class IssueStatus(Enum):
    """Lifecycle status of an issue, independent of any tracker workflow."""

    NEW = "NEW"
    ASSIGNED = "ASSIGNED"
    POST = "POST"
    MODIFIED = "MODIFIED"
    ON_QA = "ON_QA"
    VERIFIED = "VERIFIED"
    CLOSED = "CLOSED"
    REOPENED = "REOPENED"
    UNDEFINED = "UNDEFINED"

    @classmethod
    def from_string(cls, value: str | None) -> IssueStatus:
        """
        Parse status from a loose string.

        Accepts enum names in any case and with spaces or dashes.
        Unknown values map to UNDEFINED.
        """
        if not value:
            return cls.UNDEFINED
        normalized = value.strip().upper().replace(" ", "_").replace("-", "_")
        try:
            return cls[normalized]
        except KeyError:
            return cls.UNDEFINED

    def is_complete(self) -> bool:
        """Check if this represents a finished state."""
        return self in (IssueStatus.VERIFIED, IssueStatus.CLOSED)


class IssueType(Enum):
    """Type of issue in the tracker."""

    BUG = "Bug"
    FEATURE_REQUEST = "Feature Request"
    TASK = "Task"
    SUB_TASK = "Sub-task"
    ENHANCEMENT = "Enhancement"
    STORY = "Story"
    EPIC = "Epic"
    UNDEFINED = "Undefined"

    @classmethod
    def from_string(cls, value: str | None) -> IssueType:
        """Parse issue type from the tracker's display name."""
        if not value:
            return cls.UNDEFINED
        normalized = value.strip().lower().replace("-", "").replace(" ", "")
        for member in cls:
            if member.value.lower().replace("-", "").replace(" ", "") == normalized:
                return member
        return cls.UNDEFINED


class Flag(Enum):
    """Acknowledgement flags that make up an issue's stage."""

    PM = "PM"
    DEV = "DEV"
    QE = "QE"


class FlagStatus(Enum):
    """State of a single flag, expressed with the tracker's symbols."""

    ACCEPTED = "+"
    REJECTED = "-"
    SET = "?"
    NO_SET = " "

    @classmethod
    def from_symbol(cls, symbol: str | None) -> FlagStatus:
        """Parse a flag state from its symbol; anything unknown is NO_SET."""
        if symbol is None:
            return cls.NO_SET
        for member in cls:
            if member.value == symbol.strip():
                return member
        return cls.NO_SET
