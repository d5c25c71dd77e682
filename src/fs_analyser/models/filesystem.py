from __future__ import annotations

import re
from dataclasses import dataclass, field


@dataclass
class DirStats:
    path: str
    total_size: int = 0


@dataclass
class TraversalState:
    """Running aggregates for a single walk.

    One instance belongs to one walk and is discarded afterwards. Sizes are
    plain byte counts; ``largest_*`` fields keep the first entry that reached
    the maximum.
    """

    filter: re.Pattern[str] | None = None
    largest_file_path: str = ""
    largest_file_size: int = 0
    total_size: int = 0
    per_directory: dict[str, DirStats] = field(default_factory=dict)
    largest_dir_path: str = ""
    largest_dir_size: int = 0
    dirs_seen: int = 0
    files_seen: int = 0
    files_matched: int = 0


@dataclass(frozen=True)
class DiskSnapshot:
    total_bytes: int
    free_bytes: int
    used_bytes: int
    used_percent: float
    available: bool = True

    @classmethod
    def unavailable(cls) -> DiskSnapshot:
        return cls(total_bytes=0, free_bytes=0, used_bytes=0, used_percent=0.0, available=False)

    @property
    def known(self) -> bool:
        return self.available and self.total_bytes > 0


@dataclass(frozen=True)
class ReportRow:
    metric: str
    value: str
    percentage: str

    def as_list(self) -> list[str]:
        return [self.metric, self.value, self.percentage]


@dataclass(frozen=True)
class SpaceReportData:
    path: str
    disk_root: str
    state: TraversalState
    disk: DiskSnapshot
    rows: list[ReportRow]


@dataclass(frozen=True)
class VolumeReportData:
    path: str
    state: TraversalState
    rows: list[ReportRow]
