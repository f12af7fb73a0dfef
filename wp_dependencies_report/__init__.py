"""
WordPress Dependencies Report

Reports script dependency and size changes of a WordPress build on the pull
request that introduced them.

Architecture:
    old build folder         new build folder
    (assets.json + files)    (assets.json + files)
            │                        │
            └──────────┬─────────────┘
                       ▼
                 ManifestLoader          assets.json -> {name: AssetRecord}
                       │
                       ▼
                   DiffEngine  ──────►  resolve_asset_path + SizeMeasurer
                       │
                       ▼
                 build_report           Markdown table or "no changes"
                       │
                       ▼
                CommentPublisher        create / update / skip the PR comment

Comment Lifecycle:
    1. The report comment is the first PR comment starting with HEADING
    2. Changes found, no comment yet: a comment is created
    3. Changes found, comment exists: it is edited in place
    4. No changes, comment exists: it is edited to say nothing changed
    5. No changes, no comment: nothing is posted

Usage:
    from wp_dependencies_report import ReportAction, ReportConfig

    config = ReportConfig.from_env()
    config.validate()
    ReportAction(config).run()
"""

from .action import PullRequestContext, ReportAction
from .assets import FileSizeMeasurer, SizeMeasurer, resolve_asset_path
from .diff import DiffEngine, compute_percentage_diff, compute_size_diff
from .manifest import load_manifest
from .models import (
    HEADING,
    AssetRecord,
    ConfigError,
    DiffRow,
    Manifest,
    ReportConfig,
    SizeDiff,
)
from .publisher import CommentPublisher, PublishAction, PublishResult
from .report import Report, build_report, format_bytes

__version__ = "1.0.0"
__all__ = [
    # Run
    "ReportAction",
    "ReportConfig",
    "PullRequestContext",
    "ConfigError",
    # Manifests
    "HEADING",
    "AssetRecord",
    "Manifest",
    "load_manifest",
    # Assets
    "resolve_asset_path",
    "SizeMeasurer",
    "FileSizeMeasurer",
    # Diff
    "DiffEngine",
    "DiffRow",
    "SizeDiff",
    "compute_percentage_diff",
    "compute_size_diff",
    # Report
    "Report",
    "build_report",
    "format_bytes",
    # Publishing
    "CommentPublisher",
    "PublishAction",
    "PublishResult",
]
