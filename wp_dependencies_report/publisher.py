#!/usr/bin/env python3
"""
Comment Publisher

Creates or updates the single report comment on a pull request.

The report comment is the first issue comment whose body starts with HEADING.
Lookup errors propagate; any create/update error (API or network) is
returned as a FAILED PublishResult so the caller can log it without failing
the run. Pull requests from forks usually hand out read-only tokens, which
makes those calls fail with 403.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from github import Auth, Github
from github.IssueComment import IssueComment
from github.PullRequest import PullRequest

from .models import DEFAULT_API_URL, HEADING


PERMISSION_HINT = "This can happen on PR's originating from a fork without write permissions."


class PublishAction(Enum):
    """What the publisher did."""
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class PublishResult:
    """Outcome of a publish call."""
    action: PublishAction
    comment_id: Optional[int] = None
    message: str = ""
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.action is not PublishAction.FAILED


def connect(token: str, repository: str, pull_number: int, api_url: str = DEFAULT_API_URL) -> PullRequest:
    """
    Open a pull request through the GitHub API.

    Args:
        token: Access token.
        repository: "owner/repo".
        pull_number: Pull request number.
        api_url: REST API root (GitHub Enterprise uses its own).
    """
    client = Github(auth=Auth.Token(token), base_url=api_url)
    repo = client.get_repo(repository)
    return repo.get_pull(pull_number)


class CommentPublisher:
    """Finds, creates and updates the report comment of one pull request."""

    def __init__(self, pull_request: PullRequest, logger: logging.Logger = None):
        """
        Initialize the publisher.

        Args:
            pull_request: PyGithub pull request (or anything with the same
                get_issue_comments / create_issue_comment methods).
            logger: Logger instance (creates one if not provided).
        """
        self.pull_request = pull_request
        self.logger = logger or logging.getLogger("CommentPublisher")

    def find_previous_comment(self) -> Optional[IssueComment]:
        """Return the first comment starting with HEADING, walking every page."""
        for comment in self.pull_request.get_issue_comments():
            if (comment.body or "").startswith(HEADING):
                return comment
        return None

    def publish(self, content: str, only_update: bool = False) -> PublishResult:
        """
        Publish the report.

        Args:
            content: Comment content without the HEADING.
            only_update: Only edit an existing comment, never create one.

        Returns:
            PublishResult; FAILED results carry the create or edit error.
        """
        body = HEADING + content
        previous = self.find_previous_comment()

        if previous is None:
            if only_update:
                self.logger.info("No previous report comment and nothing changed - not publishing")
                return PublishResult(PublishAction.SKIPPED)
            try:
                comment = self.pull_request.create_issue_comment(body)
            except Exception as e:
                return PublishResult(
                    PublishAction.FAILED,
                    message=f"Error creating comment. {PERMISSION_HINT}",
                    error=e,
                )
            self.logger.info(f"Created report comment {comment.id}")
            return PublishResult(PublishAction.CREATED, comment_id=comment.id)

        try:
            previous.edit(body=body)
        except Exception as e:
            return PublishResult(
                PublishAction.FAILED,
                comment_id=previous.id,
                message=f"Error updating comment. {PERMISSION_HINT}",
                error=e,
            )
        self.logger.info(f"Updated report comment {previous.id}")
        return PublishResult(PublishAction.UPDATED, comment_id=previous.id)
