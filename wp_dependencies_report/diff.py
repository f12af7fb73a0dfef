#!/usr/bin/env python3
"""
Diff Engine

Compares the new manifest against the old one, artifact by artifact.

For every artifact in the NEW manifest:
    1. Resolve the old-side and new-side file paths
    2. Diff the dependency lists (added keeps new order, removed keeps old)
    3. Measure the new size, and the old size only if the artifact existed
    4. Keep the row if the size or the dependencies changed

Artifacts that only exist in the old manifest are never reported.
"""

import logging
import math
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .assets import FileSizeMeasurer, SizeMeasurer, resolve_asset_path
from .models import DEFAULT_MAX_WORKERS, AssetRecord, DiffRow, Manifest, SizeDiff


PathLike = Union[str, Path]

# Percentage shown for artifacts without a previous size
NEW_ASSET_PERCENTAGE = "+100% 🔼"
UP_MARKER = "🔼"
DOWN_MARKER = "⬇️"


# =============================================================================
# Size Arithmetic
# =============================================================================

def format_number(value: float) -> str:
    """Render a float the way a JS number prints: no trailing `.0`."""
    if value == int(value):
        return str(int(value))
    return repr(value)


def compute_percentage_diff(old_size: int, new_size: int) -> str:
    """
    Percentage change from `old_size` to `new_size`.

    The magnitude is rounded UP to two decimals and the sign reapplied.
    An old size of zero always yields "+100% 🔼".
    """
    if old_size == 0:
        return NEW_ASSET_PERCENTAGE

    value = ((new_size - old_size) / old_size) * 100
    formatted = math.copysign(math.ceil(abs(value) * 100), value) / 100

    if value > 0:
        return f"+{format_number(formatted)}% {UP_MARKER}"
    if value == 0:
        return f"{format_number(abs(formatted))}%"
    return f"{format_number(formatted)}% {DOWN_MARKER}"


def compute_size_diff(old_size: int, new_size: int) -> SizeDiff:
    """Byte delta and percentage between two sizes."""
    return SizeDiff(
        old_size=old_size,
        new_size=new_size,
        delta=new_size - old_size,
        percentage=compute_percentage_diff(old_size, new_size),
    )


def diff_dependencies(old: Sequence[str], new: Sequence[str]):
    """
    Literal set difference of two dependency lists.

    Returns:
        (added, removed): added in order of `new`, removed in order of `old`.
    """
    added = [dep for dep in new if dep not in old]
    removed = [dep for dep in old if dep not in new]
    return added, removed


# =============================================================================
# Diff Engine
# =============================================================================

class DiffEngine:
    """
    Computes the reportable rows between two snapshots.

    Size measurements run on a thread pool; the old and new measurement of an
    artifact are independent, and rows are always returned in the new
    manifest's order.
    """

    def __init__(
        self,
        old_folder: PathLike,
        new_folder: PathLike,
        measurer: Optional[SizeMeasurer] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        timeout: Optional[float] = None,
        logger: logging.Logger = None,
    ):
        """
        Initialize the diff engine.

        Args:
            old_folder: Assets folder of the previous snapshot.
            new_folder: Assets folder of the current snapshot.
            measurer: Size measurer (file sizes on disk if not provided).
            max_workers: Threads used for measurements; 1 measures inline.
            timeout: Seconds to wait for a single measurement, None to wait forever.
            logger: Logger instance (creates one if not provided).
        """
        self.old_folder = Path(old_folder)
        self.new_folder = Path(new_folder)
        self.measurer = measurer or FileSizeMeasurer()
        self.max_workers = max_workers
        self.timeout = timeout
        self.logger = logger or logging.getLogger("DiffEngine")

    def diff_asset(
        self,
        name: str,
        new_record: AssetRecord,
        old_record: Optional[AssetRecord],
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> Optional[DiffRow]:
        """
        Diff a single artifact.

        Returns:
            The row to report, or None if neither size nor dependencies changed.
        """
        new_path = resolve_asset_path(self.new_folder, name)
        old_path = resolve_asset_path(self.old_folder, name)
        old_dependencies = old_record.dependencies if old_record is not None else []
        added, removed = diff_dependencies(old_dependencies, new_record.dependencies)

        new_future = self._submit(executor, new_path)
        old_future = self._submit(executor, old_path) if old_record is not None else None

        new_size = self._result(new_future)
        old_size = self._result(old_future) if old_future is not None else 0

        if new_size == old_size and not added and not removed:
            self.logger.debug(f"{name}: unchanged")
            return None

        size_diff = compute_size_diff(old_size, new_size)
        self.logger.debug(
            f"{name}: +{len(added)} -{len(removed)} deps, "
            f"{old_size} -> {new_size} bytes"
        )
        return DiffRow(
            name=name,
            added=added,
            removed=removed,
            new_size=new_size,
            size_diff=size_diff,
        )

    def diff(self, old_manifest: Manifest, new_manifest: Manifest) -> List[DiffRow]:
        """
        Diff every artifact of the new manifest.

        Args:
            old_manifest: Previous snapshot (may be empty).
            new_manifest: Current snapshot.

        Returns:
            Reportable rows in new manifest order.
        """
        names = list(new_manifest)
        if self.max_workers <= 1:
            results = [
                self.diff_asset(name, new_manifest[name], old_manifest.get(name))
                for name in names
            ]
        else:
            # Artifacts run on an outer pool, their measurements on an inner
            # one, so an artifact never waits on a slot held by another artifact.
            # On failure the pools are abandoned without waiting, so a hung
            # measurement cannot outlive its timeout.
            measure_pool = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="measure")
            diff_pool = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="diff")
            failed = True
            try:
                futures = [
                    diff_pool.submit(
                        self.diff_asset, name, new_manifest[name], old_manifest.get(name), measure_pool
                    )
                    for name in names
                ]
                results = [future.result() for future in futures]
                failed = False
            finally:
                diff_pool.shutdown(wait=not failed, cancel_futures=failed)
                measure_pool.shutdown(wait=not failed, cancel_futures=failed)

        rows = [row for row in results if row is not None]
        self.logger.info(f"{len(rows)} of {len(names)} assets changed")
        return rows

    def _submit(self, executor: Optional[ThreadPoolExecutor], path: Path):
        if executor is None:
            return self.measurer.measure(path)
        return executor.submit(self.measurer.measure, path)

    def _result(self, pending) -> int:
        if isinstance(pending, Future):
            return pending.result(timeout=self.timeout)
        return pending
