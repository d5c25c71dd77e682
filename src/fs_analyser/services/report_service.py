from __future__ import annotations

from fs_analyser.models.filesystem import DiskSnapshot, ReportRow, TraversalState

NOT_AVAILABLE = "NA"
NO_VALUE = "--"

_UNITS = (
    ("E", 1 << 60),
    ("P", 1 << 50),
    ("T", 1 << 40),
    ("G", 1 << 30),
    ("M", 1 << 20),
    ("K", 1 << 10),
)


def human_bytes(n: int) -> str:
    """Short binary-unit size: ``0B``, ``45B``, ``1K``, ``1.5M``."""
    n = int(n)
    if n <= 0:
        return "0B"
    value, unit = float(n), "B"
    for name, size in _UNITS:
        if n >= size:
            value, unit = n / size, name
            break
    text = f"{value:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return text + unit


def format_percent(value: float | None) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.6f}"


def percent_of(part: int, whole: int) -> float | None:
    if whole <= 0:
        return None
    return float(part) / float(whole) * 100.0


class ReportService:
    def space_rows(self, state: TraversalState, disk: DiskSnapshot, elapsed_s: float) -> list[ReportRow]:
        # Largest file is measured against the disk when it is known, else against what was walked.
        denominator = disk.total_bytes if disk.known else state.total_size
        large_pct = percent_of(state.largest_file_size, denominator)

        return [
            ReportRow("LARGE_FILE_NAME", state.largest_file_path, NOT_AVAILABLE),
            ReportRow("LARGE_FILE_SIZE", human_bytes(state.largest_file_size), format_percent(large_pct)),
            ReportRow(
                "DISK_TOTAL_SIZE",
                human_bytes(disk.total_bytes) if disk.available else NOT_AVAILABLE,
                NOT_AVAILABLE,
            ),
            ReportRow(
                "DISK_USED_PERCENTAGE",
                NO_VALUE,
                format_percent(disk.used_percent if disk.known else None),
            ),
            ReportRow("PROCESSING_TIME", f"{max(elapsed_s, 0.0) / 60.0:.6f} min(s)", NOT_AVAILABLE),
        ]

    def volume_rows(self, state: TraversalState) -> list[ReportRow]:
        return [
            ReportRow("TOTAL_SIZE", human_bytes(state.total_size), ""),
            ReportRow("LARGEST_DIR", state.largest_dir_path, ""),
            ReportRow("LARGEST_DIR_SIZE", human_bytes(state.largest_dir_size), ""),
        ]
