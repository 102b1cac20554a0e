"""
Jira API Client - Low-level HTTP client for the Jira REST API v2.

This handles the raw HTTP communication with Jira.
The JiraIssueTracker and its collaborators use this to talk to the tracker.
"""

import logging
import random
import time
from typing import Any

import requests

from ...core.ports.config_provider import TrackerConfig
from ...core.ports.issue_tracker import (
    AphroditeError,
    AuthenticationError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    TransientError,
)


# HTTP status codes that should trigger retry
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class JiraApiClient:
    """
    Low-level Jira REST API client.

    Handles authentication, request/response, retries and error handling.

    Features:
    - Basic authentication, or bearer personal access tokens when no
      username is configured
    - Automatic retry with exponential backoff for transient failures
    - Typed exceptions for every failure class
    """

    API_VERSION = "2"

    # Default retry configuration
    DEFAULT_MAX_RETRIES = 3
    DEFAULT_INITIAL_DELAY = 1.0  # seconds
    DEFAULT_MAX_DELAY = 60.0  # seconds
    DEFAULT_BACKOFF_FACTOR = 2.0
    DEFAULT_JITTER = 0.1  # 10% jitter

    def __init__(
        self,
        base_url: str,
        username: str | None,
        password: str,
        timeout: float = 30.0,
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
        jitter: float = DEFAULT_JITTER,
    ):
        """
        Initialize the Jira client.

        Args:
            base_url: Jira instance URL (e.g., https://issues.example.com)
            username: User name for basic authentication; None for token auth
            password: Password, or personal access token when username is None
            timeout: Per-request timeout in seconds
            max_retries: Maximum number of retry attempts for transient failures
            initial_delay: Initial delay between retries in seconds
            max_delay: Maximum delay between retries in seconds
            backoff_factor: Multiplier for exponential backoff
            jitter: Random jitter factor (0.1 = 10% variation)
        """
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/rest/api/{self.API_VERSION}"
        self.timeout = timeout
        self.logger = logging.getLogger("JiraApiClient")

        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter = jitter

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )
        if username:
            self._session.auth = (username, password)
        else:
            self._session.headers["Authorization"] = f"Bearer {password}"

        self._current_user: dict[str, Any] | None = None

    @classmethod
    def from_config(cls, config: TrackerConfig) -> "JiraApiClient":
        """Create a client from tracker configuration."""
        return cls(
            base_url=config.url,
            username=config.username,
            password=config.password,
            timeout=config.request_timeout,
        )

    # -------------------------------------------------------------------------
    # Core Request Methods
    # -------------------------------------------------------------------------

    def request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """
        Make an authenticated request to the Jira API with retry logic.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint (e.g., 'issue/PROJ-123') or an absolute URL
            **kwargs: Additional arguments for requests

        Returns:
            Decoded JSON response (empty dict for empty bodies)

        Raises:
            AuthenticationError: On 401 (not retried)
            PermissionError: On 403 (not retried)
            NotFoundError: On 404 (not retried)
            RateLimitError: On 429 after all retries exhausted
            TransientError: On 5xx, connection errors or timeouts after all retries,
                or a successful response whose body is not JSON
            AphroditeError: On other API errors
        """
        url = endpoint if endpoint.startswith(("http://", "https://")) else f"{self.api_url}/{endpoint}"
        kwargs.setdefault("timeout", self.timeout)
        attempts = self.max_retries + 1

        for attempt in range(attempts):
            try:
                response = self._session.request(method, url, **kwargs)
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                if attempt < self.max_retries:
                    delay = self._calculate_delay(attempt)
                    self.logger.warning(
                        f"{type(e).__name__} on {method} {endpoint}, "
                        f"attempt {attempt + 1}/{attempts}, retrying in {delay:.2f}s: {e}"
                    )
                    time.sleep(delay)
                    continue
                raise TransientError(
                    f"Request to {endpoint} failed after {attempts} attempts: {e}",
                    cause=e,
                ) from e

            if response.status_code in RETRYABLE_STATUS_CODES:
                retry_after = self._get_retry_after(response)
                if attempt < self.max_retries:
                    delay = self._calculate_delay(attempt, retry_after)
                    self.logger.warning(
                        f"Retryable error {response.status_code} on {method} {endpoint}, "
                        f"attempt {attempt + 1}/{attempts}, retrying in {delay:.2f}s"
                    )
                    time.sleep(delay)
                    continue

                if response.status_code == 429:
                    raise RateLimitError(
                        f"Rate limit exceeded for {endpoint} after {attempts} attempts",
                        retry_after=retry_after,
                        issue_key=endpoint,
                    )
                raise TransientError(
                    f"Server error {response.status_code} for {endpoint} "
                    f"after {attempts} attempts",
                    issue_key=endpoint,
                )

            return self._handle_response(response, endpoint)

        raise TransientError(f"Request to {endpoint} failed after {attempts} attempts")

    def _calculate_delay(self, attempt: int, retry_after: int | None = None) -> float:
        """
        Calculate delay before next retry using exponential backoff with jitter.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Optional Retry-After header value in seconds
        """
        if retry_after is not None:
            base_delay = min(retry_after, self.max_delay)
        else:
            base_delay = min(self.initial_delay * (self.backoff_factor ** attempt), self.max_delay)

        jitter_range = base_delay * self.jitter
        return max(0.0, base_delay + random.uniform(-jitter_range, jitter_range))

    @staticmethod
    def _get_retry_after(response: requests.Response) -> int | None:
        retry_after = response.headers.get("Retry-After")
        if retry_after is None:
            return None
        try:
            return int(retry_after)
        except ValueError:
            # HTTP-date form is not supported
            return None

    def get(self, endpoint: str, **kwargs: Any) -> Any:
        return self.request("GET", endpoint, **kwargs)

    def post(self, endpoint: str, json: Any = None, **kwargs: Any) -> Any:
        return self.request("POST", endpoint, json=json, **kwargs)

    def put(self, endpoint: str, json: Any = None, **kwargs: Any) -> Any:
        return self.request("PUT", endpoint, json=json, **kwargs)

    # -------------------------------------------------------------------------
    # Response Handling
    # -------------------------------------------------------------------------

    def _handle_response(self, response: requests.Response, endpoint: str) -> Any:
        """
        Convert an HTTP response to JSON, or to a typed exception.

        Jira reports field errors in 'errorMessages' and 'errors'; both end up
        in the exception message so callers can classify them. A successful
        status with a body that is not JSON, such as a proxy login page, is
        treated as transient.
        """
        if response.ok:
            if not response.text:
                return {}
            try:
                return response.json()
            except ValueError as e:
                raise TransientError(
                    f"Invalid JSON in response from {endpoint}: {response.text[:200]}",
                    issue_key=endpoint,
                    cause=e,
                ) from e

        status = response.status_code
        detail = self._error_detail(response)

        if status == 401:
            raise AuthenticationError(
                "Authentication failed. Check JIRA_USERNAME and JIRA_API_TOKEN."
            )
        if status == 403:
            raise PermissionError(f"Permission denied for {endpoint}: {detail}", issue_key=endpoint)
        if status == 404:
            raise NotFoundError(f"Not found: {endpoint}", issue_key=endpoint)

        raise AphroditeError(f"API error {status}: {detail}", issue_key=endpoint)

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:500] if response.text else ""

        if not isinstance(body, dict):
            return str(body)[:500]
        messages = list(body.get("errorMessages") or [])
        for field_name, message in (body.get("errors") or {}).items():
            messages.append(f"{field_name}: {message}")
        return "; ".join(messages) if messages else response.text[:500]

    # -------------------------------------------------------------------------
    # Convenience Methods
    # -------------------------------------------------------------------------

    def get_myself(self) -> dict[str, Any]:
        """
        Get the current authenticated user's information.

        Results are cached after the first call.
        """
        if self._current_user is None:
            self._current_user = self.get("myself")
        return self._current_user

    def test_connection(self) -> bool:
        """
        Test if the API connection and credentials are valid.

        Returns:
            True if connection successful, False otherwise.
        """
        try:
            self.get_myself()
            return True
        except AphroditeError as e:
            self.logger.debug(f"Connection test failed: {e}")
            return False

    @property
    def is_connected(self) -> bool:
        return self._current_user is not None

    def search_jql(
        self,
        jql: str,
        fields: list[str],
        max_results: int = 50,
        start_at: int = 0,
    ) -> dict[str, Any]:
        """
        Execute one page of a JQL search.

        Returns:
            Dictionary with 'issues', 'total', 'startAt' and 'maxResults'.
        """
        return self.post(
            "search",
            json={
                "jql": jql,
                "startAt": start_at,
                "maxResults": max_results,
                "fields": fields,
            },
        )

    def get_issue(
        self,
        issue_key: str,
        fields: list[str] | None = None,
        expand: list[str] | None = None,
    ) -> dict[str, Any]:
        params = {}
        if fields:
            params["fields"] = ",".join(fields)
        if expand:
            params["expand"] = ",".join(expand)
        return self.get(f"issue/{issue_key}", params=params or None)

    def update_issue(self, issue_key: str, fields: dict[str, Any]) -> None:
        self.put(f"issue/{issue_key}", json={"fields": fields})

    def get_transitions(self, issue_key: str) -> list[dict[str, Any]]:
        data = self.get(f"issue/{issue_key}/transitions")
        return data.get("transitions", [])

    def transition_issue(self, issue_key: str, transition_id: str) -> None:
        self.post(f"issue/{issue_key}/transitions", json={"transition": {"id": transition_id}})

    def add_comment(self, issue_key: str, body: str) -> dict[str, Any]:
        return self.post(f"issue/{issue_key}/comment", json={"body": body})

    def create_issue(self, fields: dict[str, Any]) -> str:
        """Create an issue and return its key."""
        result = self.post("issue", json={"fields": fields})
        key = result.get("key")
        if not key:
            raise AphroditeError(f"Issue creation returned no key: {result}")
        return key

    def get_filter(self, filter_url: str) -> str:
        """Fetch a saved filter by its REST URL and return its JQL."""
        data = self.get(filter_url)
        jql = data.get("jql")
        if not jql:
            raise NotFoundError(f"Filter has no JQL: {filter_url}")
        return jql

    def link_issues(self, inward_key: str, outward_key: str, link_type: str) -> None:
        self.post(
            "issueLink",
            json={
                "type": {"name": link_type},
                "inwardIssue": {"key": inward_key},
                "outwardIssue": {"key": outward_key},
            },
        )

    def get_project(self, project_key: str) -> dict[str, Any]:
        """Fetch a project, including its versions."""
        return self.get(f"project/{project_key}")

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "JiraApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
