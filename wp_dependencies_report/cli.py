#!/usr/bin/env python3
"""
Command-Line Interface for the WordPress Dependencies Report

Usage:
    python -m wp_dependencies_report                     # Inputs from the Actions environment
    python -m wp_dependencies_report -c report.yaml      # Inputs from a config file
    python -m wp_dependencies_report --dry-run ...       # Print the report, publish nothing

Exit codes:
    0 = report published, skipped, or nothing to report
    1 = run failed (configuration error or unexpected exception)
"""

import argparse
import logging
import sys
from typing import List, Optional

from .action import ReportAction
from .models import ReportConfig


def _setup_logging(config: ReportConfig):
    """Configure logging."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def _non_default(config: ReportConfig) -> dict:
    """Fields of `config` that differ from a default ReportConfig."""
    defaults = ReportConfig().to_dict()
    return {
        key: value
        for key, value in config.to_dict().items()
        if value != defaults[key]
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wp-dependencies-report",
        description="Report WordPress script dependency and size changes on a pull request",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  wp-dependencies-report                                   # Inside a GitHub Actions step
  wp-dependencies-report -c report.yaml                    # Inputs from a config file
  wp-dependencies-report --old-assets-folder old --old-assets-branch trunk \\
      --new-assets-folder build --dry-run                  # Preview locally
        """
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to YAML config file (optional)",
    )
    parser.add_argument("--github-token", default=None, help="GitHub access token")
    parser.add_argument(
        "--old-assets-folder",
        default=None,
        help="Folder holding the previous assets.json and built assets",
    )
    parser.add_argument(
        "--old-assets-branch",
        default=None,
        help="Label of the baseline branch, shown in the report",
    )
    parser.add_argument(
        "--new-assets-folder",
        default=None,
        help="Folder holding the current assets.json and built assets",
    )
    parser.add_argument("--repository", default=None, help="owner/repo (default: from the event)")
    parser.add_argument("--pull-number", type=int, default=None, help="Pull request number (default: from the event)")
    parser.add_argument("--commit", default=None, help="Head commit SHA (default: from the event)")
    parser.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Threads used to measure asset sizes (default: 4)",
    )
    parser.add_argument(
        "--measure-timeout",
        type=float,
        default=None,
        help="Seconds to wait for a single size measurement (default: no limit)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Print the report to stdout instead of publishing it",
    )
    return parser


def load_config(args: argparse.Namespace, environ=None) -> ReportConfig:
    """
    Layer the configuration sources.

    Precedence: command line > environment > config file > defaults.
    """
    config = ReportConfig.from_yaml(args.config) if args.config else ReportConfig()
    config = config.merged(**_non_default(ReportConfig.from_env(environ)))
    return config.merged(
        github_token=args.github_token,
        old_assets_folder=args.old_assets_folder,
        old_assets_branch=args.old_assets_branch,
        new_assets_folder=args.new_assets_folder,
        repository=args.repository,
        pull_number=args.pull_number,
        commit=args.commit,
        max_workers=args.max_workers,
        measure_timeout=args.measure_timeout,
        log_level=args.log_level,
        dry_run=args.dry_run,
    )


def main(argv: Optional[List[str]] = None, environ=None) -> int:
    """Command-line entry point."""
    args = build_parser().parse_args(argv)
    logger = logging.getLogger("wp_dependencies_report")

    try:
        config = load_config(args, environ)
        _setup_logging(config)
        config.validate(require_token=not config.dry_run)

        ReportAction(config).run()
    except Exception as e:
        logger.exception(f"Run failed: {e}")
        # Marks the step as failed in GitHub Actions
        print(f"::error::{e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
