#!/usr/bin/env python3
"""
Report Formatter

Renders diff rows into the Markdown body of the report comment.

Comment Layout:
    # WordPress Dependencies Report          <- HEADING, added by the publisher

    The `...` action has detected some script changes between
    the commit <sha> and <old branch>. Please review ...

    | Script Handle | Added Dependencies |  Removed Dependencies | Total Size | Size Diff |
    | ------------- | ------- |  ------- | ------- | ------- |
    | `a.js` | `wp-i18n` |  | 1.23 kB | +120 B ( +10.82% 🔼 ) |

    __This comment was automatically generated by the `...` action.__

When no row qualifies, the table is replaced by NO_CHANGES_MESSAGE and the
report is flagged `only_update`: it may correct an existing comment but must
never create one.
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Sequence

from .diff import format_number
from .models import ACTION_NAME, DiffRow, SizeDiff


# =============================================================================
# Constants
# =============================================================================

BYTE_UNITS = ["B", "kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"]

TABLE_HEADER = (
    "| Script Handle | Added Dependencies |  Removed Dependencies | Total Size | Size Diff |"
    "\n"
    "| ------------- | ------- |  ------- | ------- | ------- | "
    "\n"
)

NO_CHANGES_MESSAGE = (
    "No changes detected in the current commit. "
    "But the comment was left so it is possible to check for the edit history."
)

FOOTER = f"__This comment was automatically generated by the `{ACTION_NAME}` action.__"


# =============================================================================
# Cell Formatting
# =============================================================================

def _three_significant(value: float) -> float:
    """Round to three significant digits, ties away from zero."""
    exact = Decimal(value)
    quantum = Decimal(1).scaleb(exact.adjusted() - 2)
    return float(exact.quantize(quantum, rounding=ROUND_HALF_UP))


def format_bytes(size: int, signed: bool = False) -> str:
    """
    Human readable byte count using decimal (SI) units.

    Examples:
        1234 -> "1.23 kB", -500 -> "-500 B", 0 (signed) -> " 0 B"
    """
    if signed and size == 0:
        return f" 0 {BYTE_UNITS[0]}"

    negative = size < 0
    prefix = "-" if negative else ("+" if signed else "")
    number = float(abs(size))

    if number < 1:
        return f"{prefix}{format_number(number)} {BYTE_UNITS[0]}"

    exponent = min(int(math.floor(math.log10(number) / 3)), len(BYTE_UNITS) - 1)
    number = _three_significant(number / 1000 ** exponent)
    return f"{prefix}{format_number(number)} {BYTE_UNITS[exponent]}"


def format_dependencies(dependencies: Sequence[str]) -> str:
    """Backtick-quoted, comma separated list, or "" when empty."""
    if not dependencies:
        return ""
    return "`" + "`, `".join(dependencies) + "`"


def format_size_diff(size_diff: SizeDiff) -> str:
    """Size Diff cell, e.g. "+1.2 kB ( +5% 🔼 )"."""
    return f"{format_bytes(size_diff.delta, signed=True)} ( {size_diff.percentage} )"


def render_row(row: DiffRow) -> str:
    return (
        f"| `{row.name}` | {format_dependencies(row.added)} | "
        f"{format_dependencies(row.removed)} | {format_bytes(row.new_size)} | "
        f"{format_size_diff(row.size_diff)} |\n"
    )


def render_table(rows: Sequence[DiffRow]) -> str:
    """Full Markdown table; rows keep the order given."""
    return TABLE_HEADER + "".join(render_row(row) for row in rows)


# =============================================================================
# Report
# =============================================================================

@dataclass
class Report:
    """Rendered report, ready to publish."""
    rows: List[DiffRow]
    content: str  # Body without the HEADING
    only_update: bool = False

    @property
    def has_changes(self) -> bool:
        return bool(self.rows)


def build_report(rows: Sequence[DiffRow], commit: str, old_branch: str) -> Report:
    """
    Build the comment content for a set of diff rows.

    Args:
        rows: Reportable rows from the diff engine.
        commit: Head commit SHA of the pull request.
        old_branch: Label of the baseline branch (display only).

    Returns:
        Report whose `only_update` flag is set when nothing changed.
    """
    only_update = False
    if rows:
        table = render_table(rows)
    else:
        table = NO_CHANGES_MESSAGE
        only_update = True

    content = (
        f"The `{ACTION_NAME}` action has detected some script changes between the commit "
        f"{commit} and {old_branch}. Please review and confirm the following are correct "
        "before merging."
        "\n\n"
        f"{table}"
        "\n\n"
        f"{FOOTER}"
    )
    return Report(rows=list(rows), content=content, only_update=only_update)
