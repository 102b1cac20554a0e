"""
JQL Query Builder - Compiles SearchCriteria into Jira Query Language.

All methods are pure: equal inputs produce byte-identical JQL, so callers
may compare or cache queries by their text.
"""

import logging
from collections.abc import Iterable
from datetime import date

from ...core.domain.value_objects import SearchCriteria
from .fields import STATUS_NAMES, JiraField


logger = logging.getLogger("JiraQueryBuilder")

# JQL that is syntactically valid and matches no issue
MATCH_NOTHING = "issuekey is EMPTY"

ORDER_BY_KEY = f"ORDER BY {JiraField.KEY} ASC"


def quote(value: str) -> str:
    """Quote a JQL value, escaping backslashes and double quotes."""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


class JiraQueryBuilder:
    """
    Builds JQL strings for the searches the tracker adapter performs.

    Example:
        >>> builder = JiraQueryBuilder()
        >>> builder.build_search_query(SearchCriteria(product="EAP"))
        'project = "EAP" ORDER BY key ASC'
    """

    def build_search_query(self, criteria: SearchCriteria) -> str:
        """
        Build the JQL for a general issue search.

        Clauses are always emitted in the same order.
        """
        if criteria.is_empty():
            logger.warning("Building a search query without any filter")

        clauses = self._project_clauses(criteria)

        if criteria.status is not None and criteria.status in STATUS_NAMES:
            clauses.append(f"{JiraField.STATUS} = {quote(STATUS_NAMES[criteria.status])}")
        if criteria.assignee:
            clauses.append(f"{JiraField.ASSIGNEE} = {quote(criteria.assignee)}")
        if criteria.component:
            clauses.append(f"component = {quote(criteria.component)}")
        if criteria.start_date:
            clauses.append(f"{JiraField.UPDATED} >= {quote(_format_date(criteria.start_date))}")
        if criteria.end_date:
            clauses.append(f"{JiraField.UPDATED} <= {quote(_format_date(criteria.end_date))}")

        return self._join(clauses)

    def build_date_range_query(self, criteria: SearchCriteria) -> str:
        """
        Build the JQL for issues added to a release within a date window.

        The release clause tracks when fixVersion changed to the release,
        not when the issue was created or updated.
        """
        clauses = []
        if criteria.product:
            clauses.append(f"{JiraField.PROJECT} = {quote(criteria.product)}")

        version = criteria.release.version if criteria.release else None
        if version:
            changed = f"fixVersion CHANGED TO {quote(version)}"
            start, end = criteria.start_date, criteria.end_date
            if start and end:
                changed += f" DURING ({quote(_format_date(start))}, {quote(_format_date(end))})"
            elif start:
                changed += f" AFTER {quote(_format_date(start))}"
            elif end:
                changed += f" BEFORE {quote(_format_date(end))}"
            clauses.append(changed)
        else:
            logger.warning("Date range query built without a release; dates are ignored")

        return self._join(clauses)

    def build_multi_issue_query(self, keys: Iterable[str]) -> str:
        """
        Build the JQL matching exactly the given issue keys.

        Keys are deduplicated and sorted, so input order does not matter.
        An empty collection yields MATCH_NOTHING.
        """
        unique = sorted({key.strip() for key in keys if key and key.strip()})
        if not unique:
            return MATCH_NOTHING
        return f"{JiraField.KEY} in ({', '.join(quote(key) for key in unique)})"

    def _project_clauses(self, criteria: SearchCriteria) -> list[str]:
        clauses = []
        if criteria.product:
            clauses.append(f"{JiraField.PROJECT} = {quote(criteria.product)}")
        if criteria.release and criteria.release.version:
            clauses.append(f"fixVersion = {quote(criteria.release.version)}")
        return clauses

    @staticmethod
    def _join(clauses: list[str]) -> str:
        if not clauses:
            return ORDER_BY_KEY
        return f"{' AND '.join(clauses)} {ORDER_BY_KEY}"
