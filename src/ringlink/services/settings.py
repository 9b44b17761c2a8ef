from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _default_config_dir() -> Path:
    return Path.home() / ".ringlink"


def _to_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _to_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class AppSettings:
    config_dir: Path = field(default_factory=_default_config_dir)
    backup_keep: int = 20
    poll_interval: float = 0.5
    log_level: str = "INFO"

    @property
    def config_path(self) -> Path:
        return self.config_dir / "config.json"

    @property
    def backup_dir(self) -> Path:
        return self.config_dir / "backups"

    @classmethod
    def from_env(cls, *, env_path: Optional[Path] = None) -> "AppSettings":
        # real environment variables win over the .env file
        load_dotenv(dotenv_path=env_path, override=False)

        config_dir_raw = os.getenv("RINGLINK_CONFIG_DIR")
        config_dir = Path(config_dir_raw).expanduser() if config_dir_raw else _default_config_dir()

        return cls(
            config_dir=config_dir,
            backup_keep=_to_int("RINGLINK_BACKUP_KEEP", cls.backup_keep),
            poll_interval=_to_float("RINGLINK_POLL_INTERVAL", cls.poll_interval),
            log_level=os.getenv("RINGLINK_LOG_LEVEL", cls.log_level).upper(),
        )
