"""
Domain Entities - Objects with identity that persist over time.

An Issue is identified by its URL; everything else about it is mutable
and may be reconciled against the tracker.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .enums import Flag, FlagStatus, IssueStatus, IssueType


@dataclass(frozen=True)
class Release:
    """A product release an issue is scheduled for."""

    version: str | None = None
    milestone: str | None = None

    def __str__(self) -> str:
        if self.milestone:
            return f"{self.version or ''} ({self.milestone})"
        return self.version or ""


@dataclass
class Comment:
    """A comment on an issue."""

    body: str = ""
    id: str | None = None
    author: str | None = None
    created_at: datetime | None = None
    is_private: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "body": self.body,
            "author": self.author,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "is_private": self.is_private,
        }


@dataclass
class Issue:
    """
    An issue in a remote tracker.

    The URL is the identity: two snapshots of the same issue (one desired,
    one fetched) share a URL and hash the same, so issues can key a
    comment mapping.

    On a desired issue, None in summary, description, assignee, components
    or releases means "leave as is". An empty string assignee unassigns;
    empty lists clear components or releases.
    """

    url: str
    tracker_id: str | None = None
    product: str | None = None
    summary: str | None = None
    description: str | None = None
    assignee: str | None = None
    reporter: str | None = None
    components: list[str] | None = None
    type: IssueType = IssueType.UNDEFINED
    status: IssueStatus = IssueStatus.UNDEFINED
    stage: dict[Flag, FlagStatus] = field(default_factory=dict)
    releases: list[Release] | None = None
    comments: list[Comment] = field(default_factory=list)
    created: datetime | None = None
    last_updated: datetime | None = None

    def __hash__(self) -> int:
        return hash(self.url)

    def get_flag(self, flag: Flag) -> FlagStatus:
        """Get the state of a flag, NO_SET when absent."""
        return self.stage.get(flag, FlagStatus.NO_SET)

    def set_flag(self, flag: Flag, status: FlagStatus) -> None:
        self.stage[flag] = status

    @property
    def fix_versions(self) -> list[str]:
        """Release versions in declaration order, without duplicates."""
        versions: list[str] = []
        for release in self.releases or []:
            if release.version and release.version not in versions:
                versions.append(release.version)
        return versions

    @property
    def target_milestone(self) -> str | None:
        """The first milestone declared on any release."""
        for release in self.releases or []:
            if release.milestone:
                return release.milestone
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "url": self.url,
            "tracker_id": self.tracker_id,
            "product": self.product,
            "summary": self.summary,
            "description": self.description,
            "assignee": self.assignee,
            "reporter": self.reporter,
            "components": list(self.components) if self.components is not None else None,
            "type": self.type.value,
            "status": self.status.value,
            "stage": {flag.name: state.value for flag, state in self.stage.items()},
            "releases": (
                [{"version": r.version, "milestone": r.milestone} for r in self.releases]
                if self.releases is not None
                else None
            ),
            "comments": [c.to_dict() for c in self.comments],
            "created": self.created.isoformat() if self.created else None,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }
