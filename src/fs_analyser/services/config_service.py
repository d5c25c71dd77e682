from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_ENV = "FS_ANALYSER_CONFIG"
LOG_LEVEL_ENV = "FS_ANALYSER_LOG_LEVEL"


@dataclass(frozen=True)
class AnalyserConfig:
    log_level: str = "WARNING"
    disk_root: str | None = None
    default_filter: str | None = None

    @classmethod
    def from_dict(cls, obj: dict[str, Any]) -> AnalyserConfig:
        def _opt_str(key: str) -> str | None:
            v = obj.get(key)
            return str(v) if isinstance(v, str) and v else None

        level = obj.get("log_level")
        return cls(
            log_level=str(level).upper() if isinstance(level, str) and level else cls.log_level,
            disk_root=_opt_str("disk_root"),
            default_filter=_opt_str("default_filter"),
        )


class ConfigService:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path or self.default_path()

    @staticmethod
    def default_path() -> Path:
        explicit = os.environ.get(CONFIG_ENV)
        if explicit:
            return Path(explicit).expanduser()
        xdg = os.environ.get("XDG_CONFIG_HOME")
        if xdg:
            base = Path(xdg)
        else:
            base = Path.home() / ".config"
        return base / "fs_analyser" / "config.json"

    def load(self) -> AnalyserConfig:
        cfg = AnalyserConfig.from_dict(self._read())
        env_level = os.environ.get(LOG_LEVEL_ENV)
        if env_level:
            cfg = AnalyserConfig(
                log_level=env_level.upper(),
                disk_root=cfg.disk_root,
                default_filter=cfg.default_filter,
            )
        return cfg

    def _read(self) -> dict[str, Any]:
        p = self.path
        if not p.exists():
            return {}
        try:
            with open(p, "r", encoding="utf-8") as f:
                obj = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("ignoring unreadable config %s: %s", p, e)
            return {}
        if not isinstance(obj, dict):
            logger.warning("ignoring config %s: expected a JSON object", p)
            return {}
        return obj
