#!/usr/bin/env python3
"""
Data Models for the WordPress Dependencies Report

This module contains the constants, records and configuration shared by the
manifest loader, diff engine, report formatter and comment publisher.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict


# =============================================================================
# Constants
# =============================================================================

# Identity marker of the report comment. Changing it orphans every comment
# posted by earlier versions.
HEADING = "# WordPress Dependencies Report\n\n"

# Name used in the report prose and footer
ACTION_NAME = "github-action-wordpress-dependencies-report"

# Manifest file inside each assets folder
MANIFEST_FILENAME = "assets.json"

# Style-only bundles ship an empty script shim next to the real stylesheet
STYLE_SHIM_SUFFIX = "-style.js"
STYLE_SHEET_SUFFIX = "-style.css"

# Default worker count for size measurements
DEFAULT_MAX_WORKERS = 4

# GitHub REST API root
DEFAULT_API_URL = "https://api.github.com"


class ConfigError(ValueError):
    """Raised when required inputs are missing or malformed."""


# =============================================================================
# Manifest Records
# =============================================================================

class AssetRecord(BaseModel):
    """One entry of an assets.json manifest."""
    model_config = ConfigDict(extra="ignore")

    dependencies: List[str]
    version: Optional[str] = None


# Artifact name -> record, in manifest order
Manifest = Dict[str, AssetRecord]


# =============================================================================
# Diff Results
# =============================================================================

@dataclass(frozen=True)
class SizeDiff:
    """Size change of one artifact between the old and new snapshot."""
    old_size: int
    new_size: int
    delta: int  # new - old, in bytes
    percentage: str  # e.g. "+100% 🔼", "0%", "-3.5% ⬇️"


@dataclass(frozen=True)
class DiffRow:
    """A reportable change for a single artifact."""
    name: str
    added: List[str]
    removed: List[str]
    new_size: int
    size_diff: SizeDiff


# =============================================================================
# Configuration
# =============================================================================

def _input(environ: Mapping[str, str], name: str) -> str:
    """
    Read a GitHub Actions input from the environment.

    The runner exports inputs as INPUT_<NAME> with the name upper-cased and
    dashes kept; some wrappers replace the dashes with underscores.
    """
    key = f"INPUT_{name.upper()}"
    value = environ.get(key)
    if value is None:
        value = environ.get(key.replace("-", "_"), "")
    return value.strip()


@dataclass
class ReportConfig:
    """Run-scoped configuration, built once at startup."""
    # Inputs
    github_token: str = ""
    old_assets_folder: str = ""
    old_assets_branch: str = ""
    new_assets_folder: str = ""

    # Pull request context (from the event payload when empty)
    repository: str = ""
    pull_number: Optional[int] = None
    commit: str = ""
    event_path: str = ""

    # GitHub
    api_url: str = DEFAULT_API_URL

    # Size measurement
    max_workers: int = DEFAULT_MAX_WORKERS
    measure_timeout: Optional[float] = None

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    # Print the report instead of publishing it
    dry_run: bool = False

    @classmethod
    def from_yaml(cls, path: str) -> "ReportConfig":
        """Load configuration from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        inputs = data.get("inputs") or {}
        github = data.get("github") or {}
        measure = data.get("measure") or {}
        logging_data = data.get("logging") or {}

        return cls(
            github_token=inputs.get("github-token", ""),
            old_assets_folder=inputs.get("old-assets-folder", ""),
            old_assets_branch=inputs.get("old-assets-branch", ""),
            new_assets_folder=inputs.get("new-assets-folder", ""),
            repository=github.get("repository", ""),
            pull_number=github.get("pull_number"),
            commit=github.get("commit", ""),
            api_url=github.get("api_url", DEFAULT_API_URL),
            max_workers=measure.get("max_workers", DEFAULT_MAX_WORKERS),
            measure_timeout=measure.get("timeout"),
            log_level=logging_data.get("level", "INFO"),
            log_file=logging_data.get("file", ""),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ReportConfig":
        """Load configuration from GitHub Actions environment variables."""
        if environ is None:
            environ = os.environ

        return cls(
            github_token=_input(environ, "github-token") or environ.get("GITHUB_TOKEN", ""),
            old_assets_folder=_input(environ, "old-assets-folder"),
            old_assets_branch=_input(environ, "old-assets-branch"),
            new_assets_folder=_input(environ, "new-assets-folder"),
            repository=environ.get("GITHUB_REPOSITORY", ""),
            event_path=environ.get("GITHUB_EVENT_PATH", ""),
            api_url=environ.get("GITHUB_API_URL", DEFAULT_API_URL),
        )

    def merged(self, **overrides) -> "ReportConfig":
        """
        Return a copy with every non-empty override applied.

        Empty strings and None never replace a value that is already set, so
        layers can be stacked from lowest to highest precedence.
        """
        values = self.to_dict()
        for key, value in overrides.items():
            if key not in values:
                raise ConfigError(f"Unknown configuration key: {key}")
            if value is None or value == "":
                continue
            values[key] = value
        return ReportConfig(**values)

    def validate(self, require_token: bool = True):
        """
        Check that every required input is present.

        Raises:
            ConfigError: Naming all missing or invalid inputs.
        """
        missing = []
        if require_token and not self.github_token:
            missing.append("github-token")
        if not self.old_assets_folder:
            missing.append("old-assets-folder")
        if not self.old_assets_branch:
            missing.append("old-assets-branch")
        if not self.new_assets_folder:
            missing.append("new-assets-folder")
        if missing:
            raise ConfigError(f"Input required and not supplied: {', '.join(missing)}")

        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.measure_timeout is not None and self.measure_timeout <= 0:
            raise ConfigError(f"measure timeout must be positive, got {self.measure_timeout}")

    def to_dict(self) -> Dict:
        """Convert config to a flat dictionary."""
        return {
            "github_token": self.github_token,
            "old_assets_folder": self.old_assets_folder,
            "old_assets_branch": self.old_assets_branch,
            "new_assets_folder": self.new_assets_folder,
            "repository": self.repository,
            "pull_number": self.pull_number,
            "commit": self.commit,
            "event_path": self.event_path,
            "api_url": self.api_url,
            "max_workers": self.max_workers,
            "measure_timeout": self.measure_timeout,
            "log_level": self.log_level,
            "log_file": self.log_file,
            "dry_run": self.dry_run,
        }
