"""Service layer for ringlink."""

from .clipboard_service import ClipboardService
from .config_service import ConfigStore
from .settings import AppSettings

__all__ = ["AppSettings", "ClipboardService", "ConfigStore"]
