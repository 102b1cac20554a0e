"""
Tests for domain entities, enums and value objects.
"""

from datetime import date, datetime, timezone

import pytest

from aphrodite.core.domain import (
    Comment,
    Flag,
    FlagStatus,
    Issue,
    IssueStatus,
    IssueType,
    Release,
    SearchCriteria,
)


URL = "https://issues.example.com/browse/EAP-1"


class TestIssueStatus:
    """Tests for IssueStatus enum."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("NEW", IssueStatus.NEW),
            ("on qa", IssueStatus.ON_QA),
            ("On-QA", IssueStatus.ON_QA),
            (" closed ", IssueStatus.CLOSED),
            ("resolved", IssueStatus.UNDEFINED),
            ("", IssueStatus.UNDEFINED),
            (None, IssueStatus.UNDEFINED),
        ],
    )
    def test_from_string(self, value, expected):
        assert IssueStatus.from_string(value) is expected

    def test_is_complete(self):
        assert IssueStatus.VERIFIED.is_complete()
        assert IssueStatus.CLOSED.is_complete()
        assert not IssueStatus.ON_QA.is_complete()


class TestIssueType:
    """Tests for IssueType enum."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Bug", IssueType.BUG),
            ("feature request", IssueType.FEATURE_REQUEST),
            ("Sub-task", IssueType.SUB_TASK),
            ("subtask", IssueType.SUB_TASK),
            ("Initiative", IssueType.UNDEFINED),
            (None, IssueType.UNDEFINED),
        ],
    )
    def test_from_string(self, value, expected):
        assert IssueType.from_string(value) is expected


class TestFlagStatus:
    """Tests for FlagStatus enum."""

    @pytest.mark.parametrize(
        "symbol,expected",
        [
            ("+", FlagStatus.ACCEPTED),
            ("-", FlagStatus.REJECTED),
            ("?", FlagStatus.SET),
            (" ", FlagStatus.NO_SET),
            ("", FlagStatus.NO_SET),
            ("x", FlagStatus.NO_SET),
            (None, FlagStatus.NO_SET),
        ],
    )
    def test_from_symbol(self, symbol, expected):
        assert FlagStatus.from_symbol(symbol) is expected


class TestIssue:
    """Tests for Issue entity."""

    def test_defaults(self):
        issue = Issue(url=URL)

        assert issue.status is IssueStatus.UNDEFINED
        assert issue.type is IssueType.UNDEFINED
        assert issue.summary is None
        assert issue.components is None
        assert issue.releases is None
        assert issue.fix_versions == []
        assert issue.target_milestone is None
        assert issue.stage == {}

    def test_hash_follows_url(self):
        desired = Issue(url=URL, summary="desired")
        fetched = Issue(url=URL, summary="fetched")

        assert hash(desired) == hash(fetched)
        assert desired != fetched

    def test_usable_as_mapping_key(self):
        comments = {Issue(url=URL): Comment("a")}

        assert comments[Issue(url=URL)].body == "a"

    def test_flags(self):
        issue = Issue(url=URL)

        assert issue.get_flag(Flag.PM) is FlagStatus.NO_SET
        issue.set_flag(Flag.PM, FlagStatus.ACCEPTED)
        assert issue.get_flag(Flag.PM) is FlagStatus.ACCEPTED

    def test_fix_versions(self):
        issue = Issue(
            url=URL,
            releases=[Release("7.4.0.GA"), Release(milestone="GA"), Release("7.4.0.GA", "CR1")],
        )

        assert issue.fix_versions == ["7.4.0.GA"]
        assert issue.target_milestone == "GA"

    def test_no_milestone(self):
        assert Issue(url=URL, releases=[Release("7.4.0.GA")]).target_milestone is None

    def test_to_dict(self):
        created = datetime(2021, 3, 1, tzinfo=timezone.utc)
        issue = Issue(
            url=URL,
            tracker_id="EAP-1",
            status=IssueStatus.POST,
            stage={Flag.DEV: FlagStatus.SET},
            releases=[Release("7.4.0.GA", "GA")],
            comments=[Comment("hi", id="1")],
            created=created,
        )

        data = issue.to_dict()

        assert data["status"] == "POST"
        assert data["stage"] == {"DEV": "?"}
        assert data["releases"] == [{"version": "7.4.0.GA", "milestone": "GA"}]
        assert data["components"] is None
        assert data["comments"][0]["body"] == "hi"
        assert data["created"] == created.isoformat()
        assert data["last_updated"] is None


class TestRelease:
    """Tests for Release value."""

    def test_str(self):
        assert str(Release("7.4.0.GA", "GA")) == "7.4.0.GA (GA)"
        assert str(Release("7.4.0.GA")) == "7.4.0.GA"
        assert str(Release()) == ""

    def test_frozen(self):
        release = Release("1.0")

        with pytest.raises(AttributeError):
            release.version = "2.0"


class TestSearchCriteria:
    """Tests for SearchCriteria value object."""

    def test_empty(self):
        assert SearchCriteria().is_empty()
        assert SearchCriteria(release=Release(milestone="GA")).is_empty()

    def test_not_empty(self):
        assert not SearchCriteria(product="EAP").is_empty()
        assert not SearchCriteria(status=IssueStatus.NEW).is_empty()

    def test_non_positive_max_results(self):
        with pytest.raises(ValueError, match="max_results"):
            SearchCriteria(product="EAP", max_results=0)

    def test_inverted_dates(self):
        with pytest.raises(ValueError, match="after end_date"):
            SearchCriteria(start_date=date(2021, 2, 1), end_date=date(2021, 1, 1))

    def test_equal_criteria_are_equal(self):
        first = SearchCriteria(product="EAP", release=Release("7.4.0.GA"))
        second = SearchCriteria(product="EAP", release=Release("7.4.0.GA"))

        assert first == second
        assert hash(first) == hash(second)
