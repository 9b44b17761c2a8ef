from ringlink.models.clipboard_entry import ClipboardEntry, HistoryEntryView
from ringlink.models.config_document import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_CONFIG,
    DEFAULT_TEMPLATES,
    ConfigDocumentShape,
    default_config,
)

__all__ = [
    "ClipboardEntry",
    "HistoryEntryView",
    "CURRENT_CONFIG_VERSION",
    "DEFAULT_CONFIG",
    "DEFAULT_TEMPLATES",
    "ConfigDocumentShape",
    "default_config",
]
