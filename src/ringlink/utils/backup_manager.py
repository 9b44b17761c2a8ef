import datetime
import logging
import shutil
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "config-"
BACKUP_SUFFIX = ".json"
DEFAULT_MAX_KEEP = 20


def backup_timestamp(now: Optional[datetime.datetime] = None) -> str:
    """Second-precision UTC stamp that is safe in file names: 2026-10-19T08-15-02."""
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat().replace(":", "-").replace(".", "-")[:19]


class BackupManager:

    def __init__(self, backup_dir: Path, max_keep: int = DEFAULT_MAX_KEEP):
        self.backup_dir = backup_dir
        self.max_keep = max_keep

    def ensure_dir(self) -> None:
        self.backup_dir.mkdir(parents=True, exist_ok=True)

    def backup_path(self, reason: str, now: Optional[datetime.datetime] = None) -> Path:
        return self.backup_dir / f"{BACKUP_PREFIX}{reason}-{backup_timestamp(now)}{BACKUP_SUFFIX}"

    def copy_to_backup(self, source: Path, reason: str) -> Path:
        """Copy ``source`` into the backup directory. Errors propagate."""
        self.ensure_dir()
        target = self.backup_path(reason)
        shutil.copyfile(source, target)
        return target

    def create_backup(self, source: Path, reason: str = "auto") -> Optional[Path]:
        if not source.exists():
            return None

        try:
            target = self.copy_to_backup(source, reason)
        except OSError as e:
            logger.error(f"Backup failed: {e}")
            return None

        logger.info(f"Backup created: {target.name}")
        self.clean_old_backups(self.max_keep)
        return target

    def list_backups(self) -> List[Path]:
        """Backup files, most recently modified first."""
        if not self.backup_dir.is_dir():
            return []

        entries = []
        for file_path in self.backup_dir.iterdir():
            if not (file_path.name.startswith(BACKUP_PREFIX) and file_path.name.endswith(BACKUP_SUFFIX)):
                continue
            try:
                entries.append((file_path.stat().st_mtime, file_path))
            except OSError as e:
                logger.warning(f"Cannot stat backup {file_path.name}: {e}")

        entries.sort(key=lambda entry: entry[0], reverse=True)
        return [file_path for _, file_path in entries]

    def clean_old_backups(self, max_keep: Optional[int] = None) -> int:
        if max_keep is None:
            max_keep = self.max_keep

        try:
            backups = self.list_backups()
        except OSError as e:
            logger.error(f"Cleanup failed: {e}")
            return 0

        removed = 0
        for file_path in backups[max(max_keep, 0):]:
            try:
                file_path.unlink()
                removed += 1
                logger.info(f"Removed old backup: {file_path.name}")
            except OSError as e:
                logger.error(f"Failed to remove backup {file_path.name}: {e}")
        return removed
