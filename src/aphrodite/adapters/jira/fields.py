"""
Jira field names, URL shapes and workflow tables.

Everything here is built at import time and never mutated. Adapters look
tracker-specific names up in these tables instead of computing them.
"""

import re
from types import MappingProxyType

from ...core.domain.enums import Flag, IssueStatus


API_ISSUE_PATH = "/rest/api/2/issue/"
BROWSE_ISSUE_PATH = "/browse/"
PROJECTS_ISSUE_PATTERN = re.compile(r"/projects/[A-Za-z][A-Za-z0-9_]*/issues/")


class JiraField:
    """Standard Jira field keys."""

    FIELDS = "fields"
    KEY = "key"
    NAME = "name"
    VALUE = "value"
    ID = "id"

    SUMMARY = "summary"
    DESCRIPTION = "description"
    ASSIGNEE = "assignee"
    REPORTER = "reporter"
    COMPONENTS = "components"
    FIX_VERSIONS = "fixVersions"
    ISSUETYPE = "issuetype"
    PROJECT = "project"
    STATUS = "status"
    PRIORITY = "priority"
    CREATED = "created"
    UPDATED = "updated"
    COMMENT = "comment"
    SECURITY = "security"

    ALL = "*all"

    # Minimal set used when scanning large version histories
    NEW_ISSUE_FIELDS = (
        SUMMARY,
        ISSUETYPE,
        CREATED,
        UPDATED,
        PROJECT,
        STATUS,
        PRIORITY,
        COMPONENTS,
    )


CUSTOM_FIELD_PREFIX = "customfield_"

TARGET_RELEASE = "customfield_12311240"
SECURITY_SENSITIVE = "12311640"
SECURITY_SENSITIVE_VALUE_TRUE = "14655"

FLAG_MAP = MappingProxyType(
    {
        Flag.PM: "customfield_12311242",
        Flag.DEV: "customfield_12311243",
        Flag.QE: "customfield_12311244",
    }
)

SECURITY_LEVELS = MappingProxyType(
    {
        "Red Hat Internal": "11697",
        "Red Hat Partner": "11694",
        "Red Hat Engineering Authorized": "11696",
        "Security Issue": "11698",
    }
)

# Domain status <-> Jira workflow status name
STATUS_NAMES = MappingProxyType(
    {
        IssueStatus.NEW: "New",
        IssueStatus.ASSIGNED: "Coding In Progress",
        IssueStatus.POST: "Pull Request Sent",
        IssueStatus.MODIFIED: "Resolved",
        IssueStatus.ON_QA: "Ready for QA",
        IssueStatus.VERIFIED: "Verified",
        IssueStatus.CLOSED: "Closed",
        IssueStatus.REOPENED: "Reopened",
    }
)

JIRA_STATUSES = MappingProxyType(
    {name.lower(): status for status, name in STATUS_NAMES.items()}
    | {"open": IssueStatus.NEW, "to do": IssueStatus.NEW, "in progress": IssueStatus.ASSIGNED}
)

# Transitions whose name depends on where the issue comes from
_PAIR_TRANSITIONS = {
    (IssueStatus.NEW, IssueStatus.ASSIGNED): "Start Progress",
    (IssueStatus.REOPENED, IssueStatus.ASSIGNED): "Start Progress",
    (IssueStatus.ASSIGNED, IssueStatus.NEW): "Stop Progress",
    (IssueStatus.POST, IssueStatus.ASSIGNED): "Back to Coding In Progress",
    (IssueStatus.ON_QA, IssueStatus.ASSIGNED): "Back to Coding In Progress",
    (IssueStatus.MODIFIED, IssueStatus.REOPENED): "Reopen Issue",
    (IssueStatus.VERIFIED, IssueStatus.REOPENED): "Reopen Issue",
    (IssueStatus.CLOSED, IssueStatus.REOPENED): "Reopen Issue",
}

# Fallback transition names keyed by target status
_TARGET_TRANSITIONS = {
    IssueStatus.NEW: "Reset to New",
    IssueStatus.ASSIGNED: "Start Progress",
    IssueStatus.POST: "Link Pull Request",
    IssueStatus.MODIFIED: "Resolve Issue",
    IssueStatus.ON_QA: "Ready for QA",
    IssueStatus.VERIFIED: "Verify Issue",
    IssueStatus.CLOSED: "Close Issue",
    IssueStatus.REOPENED: "Reopen Issue",
}

TRANSITIONS = MappingProxyType(
    {
        (source, target): _PAIR_TRANSITIONS.get((source, target), _TARGET_TRANSITIONS[target])
        for source in IssueStatus
        for target in _TARGET_TRANSITIONS
        if source is not target
    }
)


def status_from_jira(name: str | None) -> IssueStatus:
    """Map a Jira workflow status name to the domain status."""
    if not name:
        return IssueStatus.UNDEFINED
    return JIRA_STATUSES.get(name.strip().lower(), IssueStatus.UNDEFINED)


def get_transition_name(current: IssueStatus, desired: IssueStatus) -> str | None:
    """Name of the transition leading from current to desired, if one is known."""
    return TRANSITIONS.get((current, desired))


def get_security_level_id(level: str) -> str:
    """
    Look up the id of a named security level.

    Raises:
        KeyError: If the level is not known
    """
    return SECURITY_LEVELS[level]
