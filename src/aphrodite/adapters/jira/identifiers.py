"""
Issue key extraction from Jira URLs.

Jira exposes the same issue under several paths:

    https://issues.example.com/rest/api/2/issue/EAP-123
    https://issues.example.com/browse/EAP-123
    https://issues.example.com/projects/EAP/issues/EAP-123

The last form is rewritten to the browse form before matching.
"""

from urllib.parse import urljoin, urlparse

from ...core.ports.issue_tracker import NotFoundError
from .fields import API_ISSUE_PATH, BROWSE_ISSUE_PATH, PROJECTS_ISSUE_PATTERN


def correct_path(path: str) -> str:
    """Rewrite a projects/issues path to the equivalent browse path."""
    return PROJECTS_ISSUE_PATTERN.sub(BROWSE_ISSUE_PATH, path, count=1)


def resolve_key(url: str) -> str:
    """
    Extract the issue key from an issue URL.

    Args:
        url: An API-style or browse-style issue URL

    Returns:
        Everything in the path after the matched prefix

    Raises:
        NotFoundError: If the URL matches neither shape or carries no key
    """
    path = correct_path(urlparse(url).path)

    for prefix in (API_ISSUE_PATH, BROWSE_ISSUE_PATH):
        index = path.find(prefix)
        if index >= 0:
            key = path[index + len(prefix):]
            if key:
                return key
            break

    raise NotFoundError(
        f"The URL path must be of the form '{API_ISSUE_PATH}' OR '{BROWSE_ISSUE_PATH}': {url}"
    )


def browse_url(base_url: str, key: str) -> str:
    """Build the canonical browse URL of an issue."""
    base = base_url.rstrip("/")
    if base.endswith(BROWSE_ISSUE_PATH.rstrip("/")):
        return f"{base}/{key}"
    return urljoin(f"{base}/", f"{BROWSE_ISSUE_PATH.lstrip('/')}{key}")
