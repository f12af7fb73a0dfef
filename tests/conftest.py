import itertools
import json
from pathlib import Path
from typing import Dict, List, Optional

import pytest


def write_build(folder: Path, manifest: Optional[dict], files: Optional[Dict[str, str]] = None) -> Path:
    """Create an assets folder with an assets.json and the given files."""
    folder.mkdir(parents=True, exist_ok=True)
    if manifest is not None:
        (folder / "assets.json").write_text(json.dumps(manifest), encoding="utf-8")
    for name, content in (files or {}).items():
        (folder / name).write_text(content, encoding="utf-8")
    return folder


class FakeComment:
    _ids = itertools.count(1000)

    def __init__(self, body: str, error: Exception = None):
        self.id = next(self._ids)
        self.body = body
        self.error = error
        self.edits: List[str] = []

    def edit(self, body: str):
        if self.error is not None:
            raise self.error
        self.edits.append(body)
        self.body = body


class FakePullRequest:
    """Stands in for github.PullRequest.PullRequest."""

    def __init__(self, comments: Optional[List[FakeComment]] = None, create_error: Exception = None):
        self.comments = list(comments or [])
        self.create_error = create_error
        self.created: List[FakeComment] = []
        self.listings = 0

    def get_issue_comments(self):
        self.listings += 1
        return iter(list(self.comments))

    def create_issue_comment(self, body: str) -> FakeComment:
        if self.create_error is not None:
            raise self.create_error
        comment = FakeComment(body)
        self.comments.append(comment)
        self.created.append(comment)
        return comment


class RecordingMeasurer:
    """Measures files on disk and remembers what was asked."""

    def __init__(self):
        self.calls: List[Path] = []

    def measure(self, path) -> int:
        self.calls.append(Path(path))
        path = Path(path)
        return path.stat().st_size if path.is_file() else 0


@pytest.fixture
def builds(tmp_path):
    """Empty old/new assets folders."""
    old = tmp_path / "old"
    new = tmp_path / "new"
    old.mkdir()
    new.mkdir()
    return old, new


@pytest.fixture
def measurer():
    return RecordingMeasurer()
