"""
Batch comment posting across many issues.

Each (issue, comment) pair runs as its own task on a bounded thread pool.
Tasks report a success flag; the caller gets the AND of all flags once
every task has finished.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

from ...core.domain.entities import Comment, Issue


logger = logging.getLogger("CommentDispatcher")

CommentTargets = Mapping[Issue, Comment] | Iterable[tuple[Issue, Comment]]


def as_public(comment: Comment) -> Comment:
    """
    Return a comment Jira can post.

    Jira has no private comments; a private comment is posted publicly
    and a warning is logged.
    """
    if not comment.is_private:
        return comment
    logger.warning("Private comments are not supported by Jira, posting as a public comment")
    return replace(comment, is_private=False)


class CommentDispatcher:
    """
    Posts comments to many issues concurrently.

    Example:
        >>> dispatcher = CommentDispatcher(tracker.post_comment, max_workers=5)
        >>> dispatcher.post_all({issue_a: Comment("a"), issue_b: Comment("b")})
        True
    """

    DEFAULT_MAX_WORKERS = 10

    def __init__(
        self,
        post: Callable[[Issue, Comment], None],
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        """
        Args:
            post: Posts one comment to one issue, raising on failure
            max_workers: Upper bound on concurrent posts
        """
        self._post = post
        self.max_workers = max(1, max_workers)

    def post_all(self, targets: CommentTargets) -> bool:
        """
        Post every comment and wait for all of them.

        A failure is logged and counted; it never cancels other posts.

        Returns:
            True only if every comment was posted
        """
        pairs = list(targets.items()) if isinstance(targets, Mapping) else list(targets)
        if not pairs:
            return True

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(pairs))) as executor:
            futures = [executor.submit(self._dispatch, issue, comment) for issue, comment in pairs]
            outcomes = [future.result() for future in futures]

        failed = outcomes.count(False)
        if failed:
            logger.warning(f"{failed}/{len(outcomes)} comments could not be posted")
        return all(outcomes)

    def _dispatch(self, issue: Issue, comment: Comment) -> bool:
        try:
            self._post(issue, as_public(comment))
        except Exception as e:
            logger.error(f"Failed to post comment to {issue.url}: {e}")
            return False
        return True
