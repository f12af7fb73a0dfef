import pytest

from wp_dependencies_report.diff import compute_size_diff
from wp_dependencies_report.models import DiffRow
from wp_dependencies_report.report import (
    NO_CHANGES_MESSAGE,
    TABLE_HEADER,
    build_report,
    format_bytes,
    format_dependencies,
    render_row,
)


@pytest.mark.parametrize(
    "size, signed, expected",
    [
        (0, False, "0 B"),
        (0, True, " 0 B"),
        (999, False, "999 B"),
        (120, True, "+120 B"),
        (-500, True, "-500 B"),
        (1000, False, "1 kB"),
        (1234, False, "1.23 kB"),
        (1125, False, "1.13 kB"),
        (-1234, True, "-1.23 kB"),
        (1500000, False, "1.5 MB"),
        (2 * 10 ** 9, False, "2 GB"),
    ],
)
def test_format_bytes(size, signed, expected):
    assert format_bytes(size, signed=signed) == expected


def test_format_dependencies():
    assert format_dependencies([]) == ""
    assert format_dependencies(["wp-i18n"]) == "`wp-i18n`"
    assert format_dependencies(["react", "wp-element"]) == "`react`, `wp-element`"


def _row(name="editor.js", added=("react",), removed=(), old=1000, new=1250):
    return DiffRow(
        name=name,
        added=list(added),
        removed=list(removed),
        new_size=new,
        size_diff=compute_size_diff(old, new),
    )


def test_render_row():
    row = _row(added=["react", "wp-i18n"], removed=["lodash"])
    assert render_row(row) == (
        "| `editor.js` | `react`, `wp-i18n` | `lodash` | 1.25 kB | +250 B ( +25% 🔼 ) |\n"
    )


def test_render_row_for_new_asset():
    row = _row(name="new.js", added=[], old=0, new=2048)
    assert render_row(row) == "| `new.js` |  |  | 2.05 kB | +2.05 kB ( +100% 🔼 ) |\n"


def test_build_report_with_changes():
    report = build_report([_row()], "abc123", "trunk")

    assert not report.only_update
    assert report.has_changes
    assert report.content.startswith(
        "The `github-action-wordpress-dependencies-report` action has detected some script "
        "changes between the commit abc123 and trunk. Please review and confirm the following "
        "are correct before merging.\n\n"
    )
    assert TABLE_HEADER + render_row(_row()) in report.content
    assert report.content.endswith(
        "\n\n__This comment was automatically generated by the "
        "`github-action-wordpress-dependencies-report` action.__"
    )


def test_build_report_without_changes_is_update_only():
    report = build_report([], "abc123", "trunk")

    assert report.only_update
    assert not report.has_changes
    assert "| Script Handle |" not in report.content
    assert f"\n\n{NO_CHANGES_MESSAGE}\n\n" in report.content
