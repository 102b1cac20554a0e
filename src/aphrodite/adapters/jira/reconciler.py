"""
State Reconciler - Converges a Jira issue onto a desired domain Issue.

Jira does not accept field changes and workflow transitions in one call,
so reconciliation is two ordered phases:

1. One field update carrying every writable field that differs.
2. A status transition, when the status differs and the workflow offers it.

Each phase is its own remote call, so a failed transition still shows
whether the field update had already been applied.
"""

import logging
from dataclasses import dataclass

from ...core.domain.entities import Issue
from ...core.domain.enums import IssueStatus
from ...core.ports.issue_tracker import (
    AphroditeError,
    NotFoundError,
    ReconcileResult,
    ReconciliationError,
)
from .client import JiraApiClient
from .fields import FLAG_MAP, TARGET_RELEASE, get_transition_name
from .mapper import JiraIssueMapper


READ_ONLY_SIGNATURE = "does not exist or read-only"


@dataclass(frozen=True)
class TransitionCandidate:
    """A transition Jira currently offers for an issue."""

    name: str
    id: str


def _scope(issue: Issue) -> str:
    if issue.product:
        return f"issues in project '{issue.product}'"
    return f"issue at '{issue.url}'"


def classify_update_error(issue: Issue, message: str) -> str:
    """
    Turn a Jira update error into an actionable message.

    Only read-only field rejections on flags or the target release are
    recognized; any other message is returned unchanged.
    """
    if READ_ONLY_SIGNATURE in message:
        for flag, field_id in FLAG_MAP.items():
            if field_id in message:
                return f"Flag '{flag.name}' set in Issue.stage cannot be set for {_scope(issue)}"
        if TARGET_RELEASE in message:
            return f"Release.milestone cannot be set for {_scope(issue)}"
    return message


class JiraStateReconciler:
    """
    Applies the minimal field update and transition to reach a desired state.
    """

    def __init__(self, client: JiraApiClient, mapper: JiraIssueMapper):
        self._client = client
        self._mapper = mapper
        self.logger = logging.getLogger("JiraStateReconciler")

    def reconcile(self, desired: Issue, current: Issue) -> ReconcileResult:
        """
        Update the remote issue so it matches desired.

        Fields left as None on desired are not touched. A desired status
        of UNDEFINED skips the transition phase entirely.

        Args:
            desired: The state the caller wants
            current: The state freshly fetched from Jira

        Returns:
            ReconcileResult listing updated fields and the applied transition

        Raises:
            NotFoundError: If the issue disappeared
            ReconciliationError: If Jira rejected the update or the transition
        """
        key = current.tracker_id
        if not key:
            raise ValueError("Current issue has no tracker key")

        result = ReconcileResult(issue_key=key)

        fields = self._mapper.build_update_fields(desired, current)
        if fields:
            self._apply_fields(desired, key, fields)
            result.updated_fields = sorted(fields)
            self.logger.info(f"Updated {', '.join(result.updated_fields)} on {key}")

        if desired.status is IssueStatus.UNDEFINED or desired.status is current.status:
            return result

        name = get_transition_name(current.status, desired.status)
        if name is None:
            self.logger.warning(
                f"No transition known from {current.status.value} to {desired.status.value} for {key}"
            )
            return result

        candidate = self._find_transition(key, name)
        if candidate is None:
            # The workflow does not allow this move from the current state
            self.logger.warning(f"Transition '{name}' is not available for {key}, status unchanged")
            result.skipped_transition = name
            return result

        self._apply_transition(key, candidate)
        result.transition = candidate.name
        self.logger.info(f"Transitioned {key} with '{candidate.name}'")
        return result

    def list_transitions(self, key: str) -> list[TransitionCandidate]:
        """List the transitions Jira offers for an issue right now."""
        return [
            TransitionCandidate(name=t.get("name", ""), id=str(t.get("id", "")))
            for t in self._client.get_transitions(key)
        ]

    def _apply_fields(self, desired: Issue, key: str, fields: dict) -> None:
        try:
            self._client.update_issue(key, fields)
        except NotFoundError:
            raise
        except AphroditeError as e:
            raise ReconciliationError(
                classify_update_error(desired, str(e)),
                issue_key=key,
                cause=e,
            ) from e

    def _find_transition(self, key: str, name: str) -> TransitionCandidate | None:
        try:
            candidates = self.list_transitions(key)
        except NotFoundError:
            raise
        except AphroditeError as e:
            raise ReconciliationError(
                f"Unable to list transitions for {key}: {e}",
                issue_key=key,
                cause=e,
            ) from e
        return next((c for c in candidates if c.name == name), None)

    def _apply_transition(self, key: str, candidate: TransitionCandidate) -> None:
        try:
            self._client.transition_issue(key, candidate.id)
        except NotFoundError:
            raise
        except AphroditeError as e:
            raise ReconciliationError(
                f"Transition '{candidate.name}' failed for {key}: {e}",
                issue_key=key,
                cause=e,
            ) from e
