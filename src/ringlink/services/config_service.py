"""Persistent, versioned configuration store.

The document lives in ``<config_dir>/config.json`` with timestamped copies
under ``<config_dir>/backups``. Every public operation degrades to a safe
result instead of raising: a broken file is backed up and replaced by the
defaults, and failed exports/imports report ``False``.
"""

from __future__ import annotations

import copy
import dataclasses
import datetime
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ringlink import __version__
from ringlink.models.config_document import ConfigDocumentShape, default_config
from ringlink.services.migrations import needs_migration, run_migrations
from ringlink.services.settings import AppSettings
from ringlink.utils import dotpath
from ringlink.utils.backup_manager import BackupManager

logger = logging.getLogger(__name__)

EXPORT_FIELDS = ("_exportedAt", "_appVersion")


class ConfigError(Exception):
    """Raised internally when a config file cannot be turned into a document."""


def _export_timestamp() -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_document(raw: str) -> Dict[str, Any]:
    try:
        data = json.loads(raw)
        ConfigDocumentShape.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(str(e)) from e
    return data


class ConfigStore:

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        *,
        settings: Optional[AppSettings] = None,
        app_version: str = __version__,
    ) -> None:
        settings = settings or AppSettings()
        if config_dir is not None:
            settings = dataclasses.replace(settings, config_dir=Path(config_dir))
        self.settings = settings
        self.config_dir = settings.config_dir
        self.config_path = settings.config_path
        self.backups = BackupManager(settings.backup_dir, max_keep=settings.backup_keep)
        self.app_version = app_version
        self.data: Dict[str, Any] = default_config()

    @property
    def backup_dir(self) -> Path:
        return self.backups.backup_dir

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def load(self) -> None:
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.backups.ensure_dir()

            if self.config_path.exists():
                self.data = parse_document(self.config_path.read_text(encoding="utf-8"))
                self.migrate()
                logger.info(f"Config loaded from: {self.config_path}")
            else:
                self.data = default_config()
                self.save()
                logger.info("Config created with defaults")
        except Exception as e:
            logger.error(f"Failed to load config: {e}")
            self.recover_from_error()

    def save(self) -> bool:
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(self.data, ensure_ascii=False, indent=2)
            fd, tmp_name = tempfile.mkstemp(prefix=".config-", suffix=".tmp", dir=self.config_dir)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self.config_path)
            except BaseException:
                try:
                    os.remove(tmp_name)
                except OSError:
                    pass
                raise
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save config: {e}")
            return False

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get(self, path: Optional[str] = None) -> Any:
        if not path:
            return copy.deepcopy(self.data)
        return copy.deepcopy(dotpath.resolve(self.data, path))

    def set(self, path: str, value: Any) -> bool:
        previous = copy.deepcopy(self.data)
        dotpath.assign(self.data, path, copy.deepcopy(value))
        try:
            ConfigDocumentShape.model_validate(self.data)
        except ValidationError as e:
            logger.error(f"Rejected config value for {path}: {e}")
            self.data = previous
            return False
        if not self.save():
            self.data = previous
            return False
        return True

    def get_all(self) -> Dict[str, Any]:
        return copy.deepcopy(self.data)

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export_to(self, file_path: Path) -> bool:
        try:
            export_data = dict(self.data)
            export_data["_exportedAt"] = _export_timestamp()
            export_data["_appVersion"] = self.app_version
            Path(file_path).write_text(
                json.dumps(export_data, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            logger.info(f"Config exported to: {file_path}")
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Export failed: {e}")
            return False

    def import_from(self, file_path: Path) -> bool:
        self.create_backup("pre-import")
        try:
            imported = parse_document(Path(file_path).read_text(encoding="utf-8"))
            for key in EXPORT_FIELDS:
                imported.pop(key, None)
            candidate = run_migrations(imported)
        except Exception as e:
            logger.error(f"Import failed: {e}")
            return False

        if needs_migration(imported):
            self.create_backup("pre-migrate")

        previous = self.data
        self.data = candidate
        if not self.save():
            self.data = previous
            logger.error(f"Import failed: could not persist {file_path}")
            return False

        logger.info(f"Config imported from: {file_path}")
        return True

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------

    def create_backup(self, reason: str = "auto") -> Optional[Path]:
        return self.backups.create_backup(self.config_path, reason)

    def clean_old_backups(self, max_keep: Optional[int] = None) -> int:
        return self.backups.clean_old_backups(max_keep)

    def list_backups(self) -> List[Path]:
        return self.backups.list_backups()

    def restore_backup(self, backup_path: Path) -> bool:
        logger.info(f"Restoring config from backup: {Path(backup_path).name}")
        return self.import_from(backup_path)

    # ------------------------------------------------------------------
    # Migration / recovery
    # ------------------------------------------------------------------

    def migrate(self) -> None:
        if not needs_migration(self.data):
            return

        self.create_backup("pre-migrate")
        logger.info(f"Migrating config from v{self.data.get('version') or 0}")
        self.data = run_migrations(self.data)
        self.save()
        logger.info(f"Migration complete: v{self.data['version']}")

    def recover_from_error(self) -> None:
        logger.warning("Recovering from config error...")

        if self.config_path.exists():
            try:
                target = self.backups.copy_to_backup(self.config_path, "corrupt")
                logger.info(f"Corrupt config preserved as {target.name}")
            except OSError as e:
                logger.warning(f"Could not preserve corrupt config: {e}")

        self.data = default_config()
        self.save()
        logger.info("Config reset to defaults")
