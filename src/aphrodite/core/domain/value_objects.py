"""
Value Objects - Immutable inputs to tracker operations.

Value objects have no identity; two instances with equal fields are
interchangeable, which is what keeps query building deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .entities import Release
from .enums import IssueStatus, IssueType


@dataclass(frozen=True)
class SearchCriteria:
    """
    Abstract search filters.

    At least product or release should be given; a criteria with no
    filters at all describes an unbounded search.
    """

    product: str | None = None
    release: Release | None = None
    status: IssueStatus | None = None
    assignee: str | None = None
    component: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    max_results: int | None = None

    def __post_init__(self) -> None:
        if self.max_results is not None and self.max_results <= 0:
            raise ValueError(f"max_results must be positive, got {self.max_results}")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )

    def is_empty(self) -> bool:
        """Check whether no filter at all is set."""
        return not any(
            (
                self.product,
                self.release and self.release.version,
                self.status,
                self.assignee,
                self.component,
                self.start_date,
                self.end_date,
            )
        )


@dataclass(frozen=True)
class IssueCreationDetails:
    """Everything needed to open a new issue in a tracker project."""

    tracker_url: str
    project_key: str
    summary: str
    description: str = ""
    issue_type: IssueType = IssueType.BUG
    security_sensitive: bool = False
    security_level: str | None = None
