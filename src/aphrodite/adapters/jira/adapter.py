"""
Jira Adapter - Implements IssueTrackerPort for Atlassian Jira.

This is the main entry point for Jira integration.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any
from urllib.parse import urlparse

from ...core.domain.entities import Comment, Issue, Release
from ...core.domain.value_objects import IssueCreationDetails, SearchCriteria
from ...core.ports.config_provider import TrackerConfig
from ...core.ports.issue_tracker import (
    AphroditeError,
    IssueTrackerPort,
    NotFoundError,
    ReconcileResult,
)
from .batch import CommentDispatcher, CommentTargets, as_public
from .client import JiraApiClient
from .fields import JiraField
from .identifiers import browse_url, resolve_key
from .mapper import JiraIssueMapper
from .paginator import SearchPaginator
from .query_builder import MATCH_NOTHING, JiraQueryBuilder
from .reconciler import JiraStateReconciler


# Only GA cumulative patch versions count as released, e.g. 7.1.2.GA
CP_VERSION_PATTERN = re.compile(r"(\d\.)(\d\.)(\d+)\.GA")

NEW_ISSUES_PAGE_SIZE = 20


class JiraIssueTracker(IssueTrackerPort):
    """
    Jira implementation of the IssueTrackerPort.

    The client is owned by whoever created the tracker; all collaborators
    share it and only the owner closes it.
    """

    def __init__(
        self,
        config: TrackerConfig,
        client: JiraApiClient | None = None,
    ):
        """
        Initialize the Jira tracker.

        Args:
            config: Tracker configuration
            client: Optional preconfigured client; built from config when omitted
        """
        self.config = config
        self.logger = logging.getLogger("JiraAdapter")

        self._client = client or JiraApiClient.from_config(config)
        self._host = urlparse(config.url).netloc.lower()

        self.mapper = JiraIssueMapper(config.url)
        self.query_builder = JiraQueryBuilder()
        self.paginator = SearchPaginator(self._client, page_size=config.page_size)
        self.reconciler = JiraStateReconciler(self._client, self.mapper)
        self.dispatcher = CommentDispatcher(self.post_comment, max_workers=config.max_workers)

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Properties
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "Jira"

    def url_exists(self, url: str) -> bool:
        return urlparse(url).netloc.lower() == self._host

    def test_connection(self) -> bool:
        return self._client.test_connection()

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "JiraIssueTracker":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Read Operations
    # -------------------------------------------------------------------------

    def get_issue(self, url: str) -> Issue:
        key = resolve_key(url)
        self._check_host(url)
        data = self._client.get_issue(key, expand=["changelog"])
        return self.mapper.to_issue(data, url=url)

    def get_issues(self, urls: Iterable[str]) -> list[Issue]:
        keys = []
        for url in self._filter_urls_by_host(urls):
            try:
                keys.append(resolve_key(url))
            except NotFoundError:
                self.logger.warning(f"Unable to extract issue key from: {url}")

        jql = self.query_builder.build_multi_issue_query(keys)
        if jql == MATCH_NOTHING:
            return []
        return self._search(jql, max_results=len(set(keys)))

    def search_issues(self, criteria: SearchCriteria) -> list[Issue]:
        jql = self.query_builder.build_search_query(criteria)
        return self._search(jql, max_results=criteria.max_results)

    def search_issues_by_filter(self, filter_url: str) -> list[Issue]:
        try:
            jql = self._client.get_filter(filter_url)
        except NotFoundError:
            raise
        except AphroditeError as e:
            raise NotFoundError(f"Unable to retrieve filter with url: {filter_url}", cause=e) from e
        return self._search(jql)

    def get_issues_for_version(self, project: str, version: str) -> list[Issue]:
        """All issues of a project scheduled for a version."""
        return self.search_issues(
            SearchCriteria(
                product=project,
                release=Release(version=version.strip()),
            )
        )

    def get_issues_added_to_version(
        self,
        project: str,
        version: str,
        start: date | None = None,
        end: date | None = None,
    ) -> list[Issue]:
        """
        Issues whose fix version was set to version within a date window.

        Only a minimal set of fields is fetched for each issue.
        """
        criteria = SearchCriteria(
            product=project,
            release=Release(version=version.strip()),
            start_date=start,
            end_date=end,
        )
        jql = self.query_builder.build_date_range_query(criteria)
        issues = self.paginator.fetch_all(
            jql, list(JiraField.NEW_ISSUE_FIELDS), page_size=NEW_ISSUES_PAGE_SIZE
        )
        return [self.mapper.to_issue(data) for data in issues]

    def get_versions_by_project(self, project: str) -> list[dict[str, Any]]:
        return self._client.get_project(project).get("versions", [])

    def is_cp_released(self, cp_version: str) -> bool:
        """
        Check whether a cumulative patch version has been released.

        Only versions of the form x.y.z.GA are considered; CR builds and
        other formats are never released.
        """
        if not CP_VERSION_PATTERN.fullmatch(cp_version):
            return False
        for version in self.get_versions_by_project(self.config.cp_project):
            if version.get(JiraField.NAME) == cp_version:
                return bool(version.get("released"))
        return False

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Write Operations
    # -------------------------------------------------------------------------

    def update_issue(self, issue: Issue) -> ReconcileResult:
        """
        Bring the Jira issue in line with the given one.

        Known limitations:
        - Jira does not allow the issue type to be updated
        - Jira does not allow the project to be changed
        - A status the workflow cannot reach from the current one is left as is
        """
        self._check_host(issue.url)
        key = issue.tracker_id or resolve_key(issue.url)
        current = self.mapper.to_issue(self._client.get_issue(key), url=issue.url)
        return self.reconciler.reconcile(issue, current)

    def create_issue(self, details: IssueCreationDetails) -> Issue:
        try:
            fields = self.mapper.build_create_fields(details)
        except KeyError as e:
            raise AphroditeError(f"Unknown security level: {details.security_level}", cause=e) from e

        key = self._client.create_issue(fields)
        self.logger.info(f"Created issue {key} in {details.project_key}")
        return self.get_issue(browse_url(details.tracker_url, key))

    def add_comment(self, issue: Issue, comment: Comment) -> None:
        self._check_host(issue.url)
        self.post_comment(issue, as_public(comment))
        issue.comments.append(comment)

    def add_comments(self, targets: CommentTargets) -> bool:
        if isinstance(targets, Mapping):
            targets = targets.items()
        pairs = [(issue, comment) for issue, comment in targets if self._on_host(issue)]
        return self.dispatcher.post_all(pairs)

    def add_comment_to_issues(self, issues: Iterable[Issue], comment: Comment) -> bool:
        return self.add_comments((issue, comment) for issue in issues)

    def post_comment(self, issue: Issue, comment: Comment) -> None:
        """Post one comment to one issue."""
        key = issue.tracker_id or resolve_key(issue.url)
        self._client.add_comment(key, comment.body)
        self.logger.info(f"Added comment to {key}")

    def link_issues(self, from_issue: Issue, to_issue: Issue, link_type: str) -> None:
        from_key = from_issue.tracker_id or resolve_key(from_issue.url)
        to_key = to_issue.tracker_id or resolve_key(to_issue.url)
        self._client.link_issues(from_key, to_key, link_type)
        self.logger.info(f"Linked {from_key} {link_type} {to_key}")

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _search(self, jql: str, max_results: int | None = None) -> list[Issue]:
        issues = self.paginator.fetch_all(jql, [JiraField.ALL], max_results=max_results)
        return [self.mapper.to_issue(data) for data in issues]

    def _check_host(self, url: str) -> None:
        if not self.url_exists(url):
            raise NotFoundError(f"The URL {url} does not belong to the tracker at {self.config.url}")

    def _on_host(self, issue: Issue) -> bool:
        if self.url_exists(issue.url):
            return True
        self.logger.debug(f"Skipping {issue.url}, not hosted by {self.config.url}")
        return False

    def _filter_urls_by_host(self, urls: Iterable[str]) -> list[str]:
        kept = []
        for url in urls:
            if self.url_exists(url):
                kept.append(url)
            else:
                self.logger.debug(f"Skipping {url}, not hosted by {self.config.url}")
        return kept
