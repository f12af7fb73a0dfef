#!/usr/bin/env python3
"""
Asset Path Resolution and Size Measurement

Maps an artifact name to the file that should be measured, and measures it.

Style-only bundles are emitted as an empty `<name>-style.js` shim with the
real payload in `<name>-style.css`; the resolver measures the stylesheet in
that case.
"""

import os
import stat
from pathlib import Path
from typing import Protocol, Union

from .manifest import read_text
from .models import STYLE_SHEET_SUFFIX, STYLE_SHIM_SUFFIX


PathLike = Union[str, Path]


def resolve_asset_path(folder: PathLike, name: str) -> Path:
    """
    Determine which file represents an artifact inside an assets folder.

    Args:
        folder: Assets folder of one snapshot.
        name: Artifact name from the manifest (a script file name).

    Returns:
        The sibling stylesheet when `name` is an empty or missing style shim
        and the stylesheet is non-empty; otherwise the script path, whether
        or not it exists.
    """
    script_path = Path(folder) / name
    if name.endswith(STYLE_SHIM_SUFFIX) and len(read_text(script_path, "")) == 0:
        style_name = name[: -len(STYLE_SHIM_SUFFIX)] + STYLE_SHEET_SUFFIX
        style_path = Path(folder) / style_name
        if len(read_text(style_path, "")) > 0:
            return style_path
    return script_path


class SizeMeasurer(Protocol):
    """Anything that can report the byte size of a path."""

    def measure(self, path: PathLike) -> int:
        ...


class FileSizeMeasurer:
    """Measures the size of a file on disk. Missing files measure 0."""

    def measure(self, path: PathLike) -> int:
        try:
            st = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return 0
        if not stat.S_ISREG(st.st_mode):
            return 0
        return st.st_size
