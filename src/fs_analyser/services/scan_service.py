from __future__ import annotations

import logging
import os
import re
import threading
import time
from datetime import datetime
from typing import Callable

from fs_analyser.collectors.disk_collector import DiskCollector
from fs_analyser.collectors.traversal_collector import TraversalCollector, compile_filter
from fs_analyser.errors import InvalidInputError, PathNotFoundError, TraversalError
from fs_analyser.models.common import ScanResult
from fs_analyser.models.filesystem import DiskSnapshot, SpaceReportData, TraversalState, VolumeReportData
from fs_analyser.services.config_service import AnalyserConfig
from fs_analyser.services.report_service import ReportService

logger = logging.getLogger(__name__)


def verify_path(path: str) -> bool:
    """True if ``path`` exists. Does not care whether it is a file or a directory."""
    return os.path.exists(path)


class ScanService:
    """Runs the ``space`` and ``volume scan`` commands end to end.

    Bad input is raised before any work starts. A walk that aborts midway
    does not raise: the result comes back with status ``PARTIAL``, rows
    built from the partial aggregates and the error attached.
    """

    def __init__(
        self,
        config: AnalyserConfig | None = None,
        reports: ReportService | None = None,
        disk_probe: Callable[[str], DiskSnapshot] | None = None,
    ) -> None:
        self.config = config or AnalyserConfig()
        self.reports = reports or ReportService()
        self.disk_probe = disk_probe or (lambda mount: DiskCollector(mount).collect())

    def space(
        self,
        path: str | None,
        pattern: str | None = None,
        root_path: str | None = None,
        cancel: threading.Event | None = None,
    ) -> ScanResult[SpaceReportData]:
        root = self._checked_path(path)
        if pattern is None:
            pattern = self.config.default_filter
        file_filter = compile_filter(pattern)
        disk_root = root_path or self.config.disk_root or root

        ts = datetime.now()
        start = time.perf_counter()
        state, error = self._walk(root, file_filter, cancel)
        disk = self.disk_probe(disk_root)
        elapsed = time.perf_counter() - start

        warnings: list[str] = []
        if not disk.known:
            warnings.append(f"Disk usage unavailable for {disk_root}")
        if error is not None:
            warnings.append(f"Walk incomplete: {error}")

        rows = self.reports.space_rows(state, disk, elapsed)
        data = SpaceReportData(path=root, disk_root=disk_root, state=state, disk=disk, rows=rows)
        return ScanResult(
            ts=ts,
            status="PARTIAL" if error is not None else "OK",
            elapsed_s=elapsed,
            data=data,
            warnings=warnings,
            error=error,
        )

    def volume_scan(
        self,
        path: str | None,
        pattern: str | None = None,
        cancel: threading.Event | None = None,
    ) -> ScanResult[VolumeReportData]:
        root = self._checked_path(path)
        file_filter = compile_filter(pattern)

        ts = datetime.now()
        start = time.perf_counter()
        state, error = self._walk(root, file_filter, cancel)
        elapsed = time.perf_counter() - start

        rows = self.reports.volume_rows(state)
        return ScanResult(
            ts=ts,
            status="PARTIAL" if error is not None else "OK",
            elapsed_s=elapsed,
            data=VolumeReportData(path=root, state=state, rows=rows),
            warnings=[f"Walk incomplete: {error}"] if error is not None else [],
            error=error,
        )

    def _checked_path(self, path: str | None) -> str:
        if not path:
            raise InvalidInputError("Path is not defined")
        if not verify_path(path):
            raise PathNotFoundError(path)
        return os.path.abspath(path)

    def _walk(
        self,
        root: str,
        file_filter: re.Pattern[str] | None,
        cancel: threading.Event | None,
    ) -> tuple[TraversalState, TraversalError | None]:
        collector = TraversalCollector(root, file_filter=file_filter, cancel=cancel)
        try:
            return collector.collect(), None
        except TraversalError as e:
            logger.info("walk of %s aborted: %s", root, e)
            return e.state or TraversalState(filter=file_filter), e
