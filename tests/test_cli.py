import json

import pytest

from wp_dependencies_report import cli
from wp_dependencies_report.models import DEFAULT_API_URL, DEFAULT_MAX_WORKERS, ConfigError, ReportConfig

from conftest import write_build


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    # Keep basicConfig from replacing pytest's capture handlers between tests
    monkeypatch.setattr(cli, "_setup_logging", lambda config: None)


def _env(builds, **extra):
    old, new = builds
    env = {
        "INPUT_GITHUB-TOKEN": "token",
        "INPUT_OLD-ASSETS-FOLDER": str(old),
        "INPUT_OLD-ASSETS-BRANCH": "trunk",
        "INPUT_NEW-ASSETS-FOLDER": str(new),
    }
    env.update(extra)
    return env


# =============================================================================
# Configuration
# =============================================================================

def test_from_env_reads_action_inputs(builds):
    config = ReportConfig.from_env(_env(builds, GITHUB_REPOSITORY="acme/site"))

    assert config.github_token == "token"
    assert config.old_assets_branch == "trunk"
    assert config.repository == "acme/site"


def test_from_env_accepts_underscored_inputs():
    config = ReportConfig.from_env({"INPUT_OLD_ASSETS_BRANCH": " trunk "})
    assert config.old_assets_branch == "trunk"


def test_from_yaml(tmp_path):
    path = tmp_path / "report.yaml"
    path.write_text(
        "inputs:\n"
        "  old-assets-folder: old\n"
        "  old-assets-branch: trunk\n"
        "  new-assets-folder: build\n"
        "measure:\n"
        "  max_workers: 2\n"
        "  timeout: 30\n"
        "logging:\n"
        "  level: DEBUG\n",
        encoding="utf-8",
    )

    config = ReportConfig.from_yaml(str(path))

    assert config.new_assets_folder == "build"
    assert config.max_workers == 2
    assert config.measure_timeout == 30
    assert config.log_level == "DEBUG"


def test_from_yaml_with_empty_sections(tmp_path):
    path = tmp_path / "report.yaml"
    path.write_text(
        "inputs:\n"
        "  old-assets-branch: trunk\n"
        "github:\n"
        "measure:\n"
        "logging:\n",
        encoding="utf-8",
    )

    config = ReportConfig.from_yaml(str(path))

    assert config.old_assets_branch == "trunk"
    assert config.api_url == DEFAULT_API_URL
    assert config.max_workers == DEFAULT_MAX_WORKERS
    assert config.measure_timeout is None
    assert config.log_level == "INFO"


def test_validate_lists_missing_inputs():
    with pytest.raises(ConfigError, match="github-token, old-assets-branch"):
        ReportConfig(old_assets_folder="old", new_assets_folder="new").validate()


def test_validate_without_token_for_dry_runs():
    ReportConfig(
        old_assets_folder="old", old_assets_branch="trunk", new_assets_folder="new"
    ).validate(require_token=False)


def test_merged_ignores_empty_overrides():
    config = ReportConfig(commit="abc").merged(commit="", repository=None, max_workers=2)
    assert config.commit == "abc"
    assert config.max_workers == 2


def test_command_line_beats_environment_beats_file(tmp_path, builds):
    path = tmp_path / "report.yaml"
    path.write_text(
        "inputs:\n  old-assets-branch: from-file\n  new-assets-folder: from-file\n"
        "github:\n  api_url: https://github.example.com/api/v3\n",
        encoding="utf-8",
    )
    args = cli.build_parser().parse_args(["-c", str(path), "--old-assets-branch", "from-cli"])
    env = _env(builds)
    del env["INPUT_NEW-ASSETS-FOLDER"]
    env["INPUT_OLD-ASSETS-BRANCH"] = "from-env"

    config = cli.load_config(args, env)

    assert config.old_assets_branch == "from-cli"
    assert config.new_assets_folder == "from-file"
    assert config.github_token == "token"
    assert config.api_url == "https://github.example.com/api/v3"


# =============================================================================
# Exit codes
# =============================================================================

def test_missing_inputs_fail_the_run(capsys):
    assert cli.main([], environ={}) == 1
    assert "::error::Input required and not supplied" in capsys.readouterr().out


def test_missing_new_manifest_exits_cleanly(tmp_path, builds):
    event = tmp_path / "event.json"
    event.write_text(
        json.dumps(
            {
                "repository": {"full_name": "acme/site"},
                "pull_request": {"number": 1, "head": {"sha": "abc"}},
            }
        ),
        encoding="utf-8",
    )

    assert cli.main([], environ=_env(builds, GITHUB_EVENT_PATH=str(event))) == 0


def test_non_pull_request_event_fails(tmp_path, builds, capsys):
    event = tmp_path / "event.json"
    event.write_text(json.dumps({"repository": {"full_name": "acme/site"}}), encoding="utf-8")

    assert cli.main([], environ=_env(builds, GITHUB_EVENT_PATH=str(event))) == 1
    assert "::error::" in capsys.readouterr().out


def test_dry_run_prints_report(builds, capsys):
    _, new = builds
    write_build(new, {"a.js": {"dependencies": ["react"]}}, {"a.js": "abc"})
    env = _env(builds)
    del env["INPUT_GITHUB-TOKEN"]

    assert cli.main(["--dry-run", "--commit", "abc123"], environ=env) == 0

    out = capsys.readouterr().out
    assert "# WordPress Dependencies Report" in out
    assert "| `a.js` | `react` |  | 3 B | +3 B ( +100% 🔼 ) |" in out
