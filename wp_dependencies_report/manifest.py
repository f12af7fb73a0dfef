#!/usr/bin/env python3
"""
Manifest Loader

Reads the assets.json manifest of a build folder. Read and parse failures are
never raised: the caller chooses the value returned instead, which is how a
missing old snapshot becomes "no prior artifacts" and a missing new snapshot
becomes "nothing to report".
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from .models import MANIFEST_FILENAME, AssetRecord, Manifest


logger = logging.getLogger("ManifestLoader")

PathLike = Union[str, Path]


def read_text(path: PathLike, default: str = "") -> str:
    """Read a UTF-8 file, returning `default` if it cannot be read."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return default


def read_json(path: PathLike, default: Any = None) -> Any:
    """Read and parse a JSON file, returning `default` on any failure."""
    content = read_text(path, "")
    try:
        return json.loads(content)
    except ValueError:
        return default


def parse_manifest(data: Any) -> Manifest:
    """
    Validate a decoded manifest document.

    Args:
        data: Decoded JSON, expected to map artifact names to records.

    Returns:
        Manifest in document order. Entries that are not valid records are
        dropped with a warning.

    Raises:
        ValueError: If the document is not a JSON object.
    """
    if not isinstance(data, dict):
        raise ValueError(f"manifest must be a JSON object, got {type(data).__name__}")

    manifest: Manifest = {}
    for name, entry in data.items():
        try:
            manifest[name] = AssetRecord.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Skipping malformed manifest entry {name!r}: {e.error_count()} error(s)")
    return manifest


def load_manifest(folder: PathLike, default: Any = None) -> Any:
    """
    Load `<folder>/assets.json`.

    Args:
        folder: Assets folder of one snapshot.
        default: Value returned when the manifest is missing or unparseable.

    Returns:
        The parsed Manifest, or `default`.
    """
    path = Path(folder) / MANIFEST_FILENAME
    data = read_json(path, None)
    if data is None:
        logger.debug(f"No manifest at {path}")
        return default

    try:
        return parse_manifest(data)
    except ValueError as e:
        logger.warning(f"Ignoring manifest {path}: {e}")
        return default
