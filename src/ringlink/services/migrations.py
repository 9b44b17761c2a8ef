"""Config schema migrations.

Each step upgrades a document from its source version to the next one and
must accept any default-shaped document, filling gaps from the defaults
instead of failing. Steps run in ascending order starting from the version
recorded in the document itself, so re-running the pipeline is harmless.
"""

import copy
import logging
from typing import Any, Callable, Dict, List

from ringlink.models.config_document import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_TEMPLATES,
    default_config,
)

logger = logging.getLogger(__name__)

Document = Dict[str, Any]

OPEN_SETTINGS_HOTKEY = "Ctrl+Shift+,"


def deep_merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``overrides`` onto ``defaults`` without mutating either.

    Only dict/dict pairs recurse. Lists, ``None`` and scalars on the
    override side replace the default wholesale.
    """
    result = dict(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict):
            base = defaults.get(key)
            result[key] = deep_merge(base if isinstance(base, dict) else {}, value)
        else:
            result[key] = value
    return result


def document_version(document: Document) -> int:
    version = document.get("version")
    if isinstance(version, int) and not isinstance(version, bool):
        return version
    return 0


def fill_defaults(document: Document) -> Document:
    return deep_merge(default_config(), document)


def hoist_tab_templates(document: Document) -> Document:
    collected: List[Any] = []
    for tab in document.get("tabs") or []:
        if not isinstance(tab, dict):
            continue
        templates = tab.pop("templates", None)
        if not isinstance(templates, list):
            continue
        for template in templates:
            if template not in collected:
                collected.append(template)

    document["templates"] = collected if collected else list(DEFAULT_TEMPLATES)

    hotkeys = document.get("hotkeys")
    if isinstance(hotkeys, dict) and not hotkeys.get("openSettings"):
        hotkeys["openSettings"] = OPEN_SETTINGS_HOTKEY
    return document


# keyed by the version a step upgrades *from*
MIGRATIONS: Dict[int, Callable[[Document], Document]] = {
    0: fill_defaults,
    1: hoist_tab_templates,
}


def needs_migration(document: Document, target: int = CURRENT_CONFIG_VERSION) -> bool:
    return document_version(document) < target


def run_migrations(document: Document, target: int = CURRENT_CONFIG_VERSION) -> Document:
    """Return an upgraded deep copy of ``document``; the input is left alone."""
    current = document_version(document)
    migrated = copy.deepcopy(document)
    if current >= target:
        return migrated

    for source in sorted(MIGRATIONS):
        if source < current or source >= target:
            continue
        logger.debug(f"Applying config migration v{source} -> v{source + 1}")
        migrated = MIGRATIONS[source](migrated)
        migrated["version"] = source + 1
    return migrated
