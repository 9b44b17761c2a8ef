from ringlink.utils.backup_manager import BackupManager
from ringlink.utils.dotpath import MISSING

__all__ = ["BackupManager", "MISSING"]
