#!/usr/bin/env python3
"""
WordPress Dependencies Report Action

Drives one run of the report:

    load manifests -> diff assets -> build report -> publish comment

Run Outcomes:
    - New manifest missing, unparseable or empty: nothing to report, no comment
    - Publishing rejected by GitHub: logged, run still succeeds
    - Anything else raising: propagates to the caller, run fails
"""

import json
import logging
import traceback
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .assets import SizeMeasurer
from .diff import DiffEngine
from .manifest import load_manifest
from .models import HEADING, ConfigError, ReportConfig
from .publisher import CommentPublisher, PublishResult, connect
from .report import Report, build_report


@dataclass
class PullRequestContext:
    """The pull request a run reports on."""
    repository: str  # "owner/repo"
    pull_number: int
    commit: str  # Head SHA

    @classmethod
    def from_event(cls, payload: Dict[str, Any]) -> "PullRequestContext":
        """
        Build from a GitHub `pull_request` event payload.

        Raises:
            ConfigError: If the payload is not a pull request event.
        """
        pull_request = payload.get("pull_request")
        if not isinstance(pull_request, dict):
            raise ConfigError("Event payload has no pull_request; run this on pull_request events")

        try:
            return cls(
                repository=payload["repository"]["full_name"],
                pull_number=int(pull_request["number"]),
                commit=pull_request["head"]["sha"],
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Malformed pull_request event payload: {e}") from e

    @classmethod
    def from_config(cls, config: ReportConfig) -> "PullRequestContext":
        """
        Resolve the context from the event file, with config values taking
        precedence over the payload.
        """
        payload: Dict[str, Any] = {}
        if config.event_path:
            with open(config.event_path, "r", encoding="utf-8") as f:
                payload = json.load(f)

        if payload:
            context = cls.from_event(payload)
        elif config.repository and config.pull_number and config.commit:
            return cls(config.repository, int(config.pull_number), config.commit)
        else:
            raise ConfigError(
                "No pull request context: set GITHUB_EVENT_PATH or pass "
                "--repository, --pull-number and --commit"
            )

        return cls(
            repository=config.repository or context.repository,
            pull_number=int(config.pull_number or context.pull_number),
            commit=config.commit or context.commit,
        )


class ReportAction:
    """
    One run of the dependencies report.

    The publisher is built lazily so dry runs and runs without a new manifest
    never touch the GitHub API.
    """

    def __init__(
        self,
        config: ReportConfig,
        measurer: Optional[SizeMeasurer] = None,
        publisher_factory: Optional[Callable[[PullRequestContext], CommentPublisher]] = None,
        logger: logging.Logger = None,
    ):
        """
        Initialize the action.

        Args:
            config: Validated run configuration.
            measurer: Size measurer override (file sizes by default).
            publisher_factory: Builds the comment publisher for a pull request.
            logger: Logger instance (creates one if not provided).
        """
        self.config = config
        self.logger = logger or logging.getLogger("ReportAction")
        self.engine = DiffEngine(
            config.old_assets_folder,
            config.new_assets_folder,
            measurer=measurer,
            max_workers=config.max_workers,
            timeout=config.measure_timeout,
            logger=self.logger,
        )
        self._publisher_factory = publisher_factory or self._default_publisher

    def _default_publisher(self, context: PullRequestContext) -> CommentPublisher:
        pull_request = connect(
            self.config.github_token,
            context.repository,
            context.pull_number,
            api_url=self.config.api_url,
        )
        return CommentPublisher(pull_request)

    def build(self, commit: str) -> Optional[Report]:
        """
        Diff the two asset folders and render the report.

        Returns:
            The report, or None when there is no new manifest to report on.
        """
        old_manifest = load_manifest(self.config.old_assets_folder, {})
        new_manifest = load_manifest(self.config.new_assets_folder, None)

        if not new_manifest:
            self.logger.info(
                f"No assets manifest in {self.config.new_assets_folder} - nothing to report"
            )
            return None

        self.logger.info(
            f"Comparing {len(new_manifest)} assets against {len(old_manifest)} "
            f"from {self.config.old_assets_branch}"
        )
        rows = self.engine.diff(old_manifest, new_manifest)
        return build_report(rows, commit, self.config.old_assets_branch)

    def run(self, context: Optional[PullRequestContext] = None) -> Optional[PublishResult]:
        """
        Execute the run.

        Args:
            context: Pull request to report on (resolved from config if not given).

        Returns:
            The publish result, or None if nothing was published (no new
            manifest, or dry run).
        """
        if self.config.dry_run:
            commit = context.commit if context else (self.config.commit or "HEAD")
            report = self.build(commit)
            if report is not None:
                print(HEADING + report.content)
            return None

        if context is None:
            context = PullRequestContext.from_config(self.config)

        report = self.build(context.commit)
        if report is None:
            return None

        publisher = self._publisher_factory(context)
        result = publisher.publish(report.content, only_update=report.only_update)
        if not result.ok:
            self._log_publish_failure(result)
        return result

    def _log_publish_failure(self, result: PublishResult):
        """Publishing is best effort: log everything, raise nothing."""
        self.logger.warning(result.message)
        if result.error is not None:
            self.logger.warning(str(result.error))
            self.logger.warning(
                "".join(traceback.format_exception(type(result.error), result.error, result.error.__traceback__))
            )
