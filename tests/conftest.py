"""
Shared pytest fixtures for the aphrodite test suite.

Fixture Categories:
- Configuration: TrackerConfig
- Mocks: Mock JiraApiClient
- Data: Jira issue JSON
"""

from __future__ import annotations

import copy
from typing import Any
from unittest.mock import MagicMock

import pytest

from aphrodite.adapters.jira.client import JiraApiClient
from aphrodite.adapters.jira.fields import FLAG_MAP, TARGET_RELEASE
from aphrodite.core.domain import Flag
from aphrodite.core.ports.config_provider import TrackerConfig


BASE_URL = "https://issues.example.com"


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def tracker_config() -> TrackerConfig:
    """Create a TrackerConfig for testing."""
    return TrackerConfig(
        url=BASE_URL,
        username="tester",
        password="secret",
        page_size=20,
        max_workers=3,
    )


# =============================================================================
# Mocks
# =============================================================================


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock JiraApiClient."""
    client = MagicMock(spec=JiraApiClient)
    client.get_transitions.return_value = []
    return client


# =============================================================================
# Data
# =============================================================================


ISSUE_DATA: dict[str, Any] = {
    "key": "EAP-123",
    "fields": {
        "summary": "NPE on deployment",
        "description": "Stack trace attached",
        "project": {"key": "EAP", "name": "Enterprise Application Platform"},
        "issuetype": {"name": "Bug"},
        "status": {"name": "New"},
        "assignee": {"name": "jdoe", "displayName": "John Doe"},
        "reporter": {"name": "asmith"},
        "components": [{"name": "Clustering"}, {"name": "EJB"}],
        "fixVersions": [{"name": "7.4.0.GA"}],
        TARGET_RELEASE: {"name": "GA"},
        FLAG_MAP[Flag.PM]: {"value": "+"},
        FLAG_MAP[Flag.DEV]: {"value": "?"},
        FLAG_MAP[Flag.QE]: None,
        "created": "2021-03-01T10:15:30.000+0000",
        "updated": "2021-03-02T08:00:00.000+0000",
        "comment": {
            "comments": [
                {
                    "id": "1001",
                    "body": "Reproduced on 7.4",
                    "author": {"name": "qe-bot"},
                    "created": "2021-03-01T11:00:00.000+0000",
                }
            ]
        },
    },
}


@pytest.fixture
def issue_data() -> dict[str, Any]:
    """Jira issue JSON, freshly copied for each test."""
    return copy.deepcopy(ISSUE_DATA)

