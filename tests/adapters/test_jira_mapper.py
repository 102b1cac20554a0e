"""
Tests for JiraIssueMapper.
"""

from datetime import datetime, timezone

import pytest

from aphrodite.adapters.jira.fields import FLAG_MAP, SECURITY_SENSITIVE, TARGET_RELEASE
from aphrodite.adapters.jira.mapper import JiraIssueMapper
from aphrodite.core.domain import (
    Flag,
    FlagStatus,
    Issue,
    IssueCreationDetails,
    IssueStatus,
    IssueType,
    Release,
)


@pytest.fixture
def mapper():
    return JiraIssueMapper("https://issues.example.com/")


class TestToIssue:
    """Tests for Jira JSON to domain conversion."""

    def test_basic_fields(self, mapper, issue_data):
        issue = mapper.to_issue(issue_data)

        assert issue.url == "https://issues.example.com/browse/EAP-123"
        assert issue.tracker_id == "EAP-123"
        assert issue.product == "EAP"
        assert issue.summary == "NPE on deployment"
        assert issue.description == "Stack trace attached"
        assert issue.assignee == "jdoe"
        assert issue.reporter == "asmith"
        assert issue.components == ["Clustering", "EJB"]
        assert issue.type is IssueType.BUG
        assert issue.status is IssueStatus.NEW

    def test_requested_url_kept(self, mapper, issue_data):
        url = "https://issues.example.com/rest/api/2/issue/EAP-123"

        assert mapper.to_issue(issue_data, url=url).url == url

    def test_stage(self, mapper, issue_data):
        issue = mapper.to_issue(issue_data)

        assert issue.stage == {
            Flag.PM: FlagStatus.ACCEPTED,
            Flag.DEV: FlagStatus.SET,
            Flag.QE: FlagStatus.NO_SET,
        }

    def test_releases(self, mapper, issue_data):
        issue = mapper.to_issue(issue_data)

        assert issue.releases == [Release("7.4.0.GA", "GA")]

    def test_milestone_without_versions(self, mapper, issue_data):
        issue_data["fields"]["fixVersions"] = []

        assert mapper.to_issue(issue_data).releases == [Release(milestone="GA")]

    def test_comments_and_dates(self, mapper, issue_data):
        issue = mapper.to_issue(issue_data)

        assert len(issue.comments) == 1
        assert issue.comments[0].body == "Reproduced on 7.4"
        assert issue.comments[0].author == "qe-bot"
        assert issue.created == datetime(2021, 3, 1, 10, 15, 30, tzinfo=timezone.utc)

    def test_minimal_search_entry(self, mapper):
        issue = mapper.to_issue({"key": "EAP-9", "fields": {"summary": "x"}})

        assert issue.tracker_id == "EAP-9"
        assert issue.status is IssueStatus.UNDEFINED
        assert issue.stage == {}
        assert issue.created is None

    def test_unparseable_date(self, mapper):
        issue = mapper.to_issue({"key": "EAP-9", "fields": {"created": "yesterday"}})

        assert issue.created is None


class TestBuildUpdateFields:
    """Tests for update payload construction."""

    def test_identical_issues(self, mapper, issue_data):
        current = mapper.to_issue(issue_data)
        desired = mapper.to_issue(issue_data)

        assert mapper.build_update_fields(desired, current) == {}

    def test_component_order_is_irrelevant(self, mapper, issue_data):
        current = mapper.to_issue(issue_data)
        desired = mapper.to_issue(issue_data)
        desired.components = ["EJB", "Clustering"]

        assert mapper.build_update_fields(desired, current) == {}

    def test_components_and_versions(self, mapper, issue_data):
        current = mapper.to_issue(issue_data)
        desired = mapper.to_issue(issue_data)
        desired.components = ["Web"]
        desired.releases = [Release("7.4.1.GA", "GA")]

        fields = mapper.build_update_fields(desired, current)

        assert fields == {
            "components": [{"name": "Web"}],
            "fixVersions": [{"name": "7.4.1.GA"}],
        }

    def test_unassign(self, mapper, issue_data):
        current = mapper.to_issue(issue_data)
        desired = mapper.to_issue(issue_data)
        desired.assignee = ""

        assert mapper.build_update_fields(desired, current) == {"assignee": None}

    def test_clear_flag_and_milestone(self, mapper, issue_data):
        current = mapper.to_issue(issue_data)
        desired = mapper.to_issue(issue_data)
        desired.set_flag(Flag.DEV, FlagStatus.NO_SET)
        desired.releases = [Release("7.4.0.GA")]

        fields = mapper.build_update_fields(desired, current)

        assert fields == {FLAG_MAP[Flag.DEV]: None, TARGET_RELEASE: None}

    def test_status_not_in_payload(self, mapper, issue_data):
        current = mapper.to_issue(issue_data)
        desired = mapper.to_issue(issue_data)
        desired.status = IssueStatus.CLOSED

        assert mapper.build_update_fields(desired, current) == {}

    def test_flags_absent_from_desired_are_left_alone(self, mapper, issue_data):
        current = mapper.to_issue(issue_data)
        desired = Issue(
            url=current.url,
            summary=current.summary,
            description=current.description,
            assignee=current.assignee,
            components=list(current.components),
            releases=list(current.releases),
        )

        assert mapper.build_update_fields(desired, current) == {}

    def test_unset_fields_are_left_alone(self, mapper, issue_data):
        current = mapper.to_issue(issue_data)
        desired = Issue(url=current.url, status=IssueStatus.ASSIGNED)

        assert mapper.build_update_fields(desired, current) == {}

    def test_empty_lists_clear(self, mapper, issue_data):
        current = mapper.to_issue(issue_data)
        desired = Issue(url=current.url, components=[], releases=[])

        fields = mapper.build_update_fields(desired, current)

        assert fields == {"components": [], "fixVersions": [], TARGET_RELEASE: None}

    def test_empty_summary_is_written(self, mapper, issue_data):
        current = mapper.to_issue(issue_data)
        desired = Issue(url=current.url, summary="")

        assert mapper.build_update_fields(desired, current) == {"summary": ""}

    def test_unassigning_unassigned_issue_is_noop(self, mapper):
        current = mapper.to_issue({"key": "EAP-9", "fields": {}})
        desired = Issue(url=current.url, assignee="")

        assert mapper.build_update_fields(desired, current) == {}


class TestBuildCreateFields:
    """Tests for new issue payloads."""

    def test_basic(self, mapper):
        details = IssueCreationDetails(
            tracker_url="https://issues.example.com",
            project_key="EAP",
            summary="New bug",
            description="Details",
        )

        assert mapper.build_create_fields(details) == {
            "project": {"key": "EAP"},
            "issuetype": {"name": "Bug"},
            "summary": "New bug",
            "description": "Details",
        }

    def test_security(self, mapper):
        details = IssueCreationDetails(
            tracker_url="https://issues.example.com",
            project_key="EAP",
            summary="CVE",
            security_sensitive=True,
            security_level="Security Issue",
        )

        fields = mapper.build_create_fields(details)

        assert fields["customfield_" + SECURITY_SENSITIVE] == [{"id": "14655"}]
        assert fields["security"] == {"id": "11698"}

    def test_unknown_security_level(self, mapper):
        details = IssueCreationDetails(
            tracker_url="https://issues.example.com",
            project_key="EAP",
            summary="CVE",
            security_level="Top Secret",
        )

        with pytest.raises(KeyError):
            mapper.build_create_fields(details)
