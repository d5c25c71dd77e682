from __future__ import annotations

import logging

import psutil

from fs_analyser.models.filesystem import DiskSnapshot

logger = logging.getLogger(__name__)


class DiskCollector:
    def __init__(self, mount_path: str = "/") -> None:
        self.mount_path = mount_path

    def collect(self) -> DiskSnapshot:
        try:
            u = psutil.disk_usage(self.mount_path)
        except (OSError, psutil.Error) as e:
            logger.warning("disk usage unavailable for %s: %s", self.mount_path, e)
            return DiskSnapshot.unavailable()

        total = int(u.total)
        # psutil reports used as total minus all free blocks, reserved ones included.
        used = min(max(int(u.used), 0), total)
        free = total - used
        used_percent = float(used) / float(total) * 100.0 if total > 0 else 0.0
        return DiskSnapshot(
            total_bytes=total,
            free_bytes=free,
            used_bytes=used,
            used_percent=min(max(used_percent, 0.0), 100.0),
        )
