"""
Jira Issue Mapper - Converts between Jira JSON and domain entities.
"""

import logging
from datetime import datetime
from typing import Any

from ...core.domain.entities import Comment, Issue, Release
from ...core.domain.enums import FlagStatus, IssueType
from ...core.domain.value_objects import IssueCreationDetails
from .fields import (
    CUSTOM_FIELD_PREFIX,
    FLAG_MAP,
    SECURITY_SENSITIVE,
    SECURITY_SENSITIVE_VALUE_TRUE,
    TARGET_RELEASE,
    JiraField,
    get_security_level_id,
    status_from_jira,
)
from .identifiers import browse_url


JIRA_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.strptime(value, JIRA_DATETIME_FORMAT)
    except ValueError:
        return None


def _name(value: Any) -> str | None:
    """Read the display value of a Jira object field (name, value or key)."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        for attr in (JiraField.NAME, JiraField.VALUE, JiraField.KEY):
            if value.get(attr):
                return value[attr]
    return None


class JiraIssueMapper:
    """
    Translates Jira issue JSON to domain Issues and builds write payloads.
    """

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.logger = logging.getLogger("JiraIssueMapper")

    # -------------------------------------------------------------------------
    # Jira -> Domain
    # -------------------------------------------------------------------------

    def to_issue(self, data: dict[str, Any], url: str | None = None) -> Issue:
        """
        Build a domain Issue from a Jira issue or search result entry.

        Args:
            data: Issue JSON with 'key' and 'fields'
            url: URL the issue was requested with; defaults to its browse URL
        """
        key = data[JiraField.KEY]
        fields = data.get(JiraField.FIELDS) or {}

        stage = {}
        for flag, field_id in FLAG_MAP.items():
            if field_id in fields:
                stage[flag] = FlagStatus.from_symbol(_name(fields[field_id]))

        versions = [_name(v) for v in fields.get(JiraField.FIX_VERSIONS) or []]
        milestone = _name(fields.get(TARGET_RELEASE))
        releases = [Release(version=v, milestone=milestone) for v in versions if v]
        if not releases and milestone:
            releases = [Release(milestone=milestone)]

        comments = [
            Comment(
                id=c.get(JiraField.ID),
                body=c.get("body", ""),
                author=_name(c.get("author")),
                created_at=_parse_datetime(c.get(JiraField.CREATED)),
            )
            for c in (fields.get(JiraField.COMMENT) or {}).get("comments", [])
        ]

        return Issue(
            url=url or browse_url(self.base_url, key),
            tracker_id=key,
            product=(fields.get(JiraField.PROJECT) or {}).get(JiraField.KEY),
            summary=fields.get(JiraField.SUMMARY) or "",
            description=fields.get(JiraField.DESCRIPTION) or "",
            assignee=_name(fields.get(JiraField.ASSIGNEE)),
            reporter=_name(fields.get(JiraField.REPORTER)),
            components=[
                name for name in (_name(c) for c in fields.get(JiraField.COMPONENTS) or []) if name
            ],
            type=IssueType.from_string(_name(fields.get(JiraField.ISSUETYPE))),
            status=status_from_jira(_name(fields.get(JiraField.STATUS))),
            stage=stage,
            releases=releases,
            comments=comments,
            created=_parse_datetime(fields.get(JiraField.CREATED)),
            last_updated=_parse_datetime(fields.get(JiraField.UPDATED)),
        )

    # -------------------------------------------------------------------------
    # Domain -> Jira
    # -------------------------------------------------------------------------

    def build_update_fields(self, desired: Issue, current: Issue) -> dict[str, Any]:
        """
        Compute the writable fields whose desired value differs from current.

        Issue type and project cannot be changed once an issue exists;
        differences there are dropped, not reported. Fields left as None on
        the desired issue are not touched.
        """
        fields: dict[str, Any] = {}

        if desired.type is not current.type and desired.type is not IssueType.UNDEFINED:
            self.logger.debug(f"Ignoring issue type change on {current.tracker_id}")
        if desired.product and desired.product != current.product:
            self.logger.debug(f"Ignoring project change on {current.tracker_id}")

        if desired.summary is not None and desired.summary != current.summary:
            fields[JiraField.SUMMARY] = desired.summary
        if desired.description is not None and desired.description != current.description:
            fields[JiraField.DESCRIPTION] = desired.description
        if desired.assignee is not None and (desired.assignee or None) != current.assignee:
            fields[JiraField.ASSIGNEE] = (
                {JiraField.NAME: desired.assignee} if desired.assignee else None
            )
        if desired.components is not None and sorted(desired.components) != sorted(
            current.components or []
        ):
            fields[JiraField.COMPONENTS] = [
                {JiraField.NAME: name} for name in sorted(set(desired.components))
            ]

        for flag, state in desired.stage.items():
            if state is current.get_flag(flag):
                continue
            fields[FLAG_MAP[flag]] = (
                None if state is FlagStatus.NO_SET else {JiraField.VALUE: state.value}
            )

        if desired.releases is not None:
            if sorted(desired.fix_versions) != sorted(current.fix_versions):
                fields[JiraField.FIX_VERSIONS] = [
                    {JiraField.NAME: version} for version in desired.fix_versions
                ]
            if desired.target_milestone != current.target_milestone:
                fields[TARGET_RELEASE] = (
                    {JiraField.NAME: desired.target_milestone}
                    if desired.target_milestone
                    else None
                )

        return fields

    def build_create_fields(self, details: IssueCreationDetails) -> dict[str, Any]:
        """
        Build the fields of a new issue.

        Raises:
            KeyError: If the security level is not known
        """
        fields: dict[str, Any] = {
            JiraField.PROJECT: {JiraField.KEY: details.project_key},
            JiraField.ISSUETYPE: {JiraField.NAME: details.issue_type.value},
            JiraField.SUMMARY: details.summary[:255],
            JiraField.DESCRIPTION: details.description,
        }
        if details.security_sensitive:
            fields[CUSTOM_FIELD_PREFIX + SECURITY_SENSITIVE] = [
                {JiraField.ID: SECURITY_SENSITIVE_VALUE_TRUE}
            ]
        if details.security_level is not None:
            fields[JiraField.SECURITY] = {
                JiraField.ID: get_security_level_id(details.security_level)
            }
        return fields
