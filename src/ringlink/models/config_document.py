import copy
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

# Bump whenever the persisted layout changes and add a step to services.migrations.
CURRENT_CONFIG_VERSION = 2

DEFAULT_TEMPLATES = [
    "お世話になっております。",
    "ご確認よろしくお願いいたします。",
]

DEFAULT_CONFIG: Dict[str, Any] = {
    "version": CURRENT_CONFIG_VERSION,
    "currentTab": 0,
    "tabs": [
        {
            "id": "tab-default",
            "name": "共通",
            "icon": "⚙️",
            "items": [
                {"icon": "📧", "label": "メール", "type": "launch", "target": ""},
                {"icon": "💬", "label": "チャット", "type": "launch", "target": ""},
                {"icon": "📅", "label": "カレンダー", "type": "launch", "target": ""},
                {"icon": "📋", "label": "クリップボード", "type": "clipboard", "target": ""},
                {"icon": "🔍", "label": "検索", "type": "launch", "target": ""},
                {"icon": "📑", "label": "定型文", "type": "templates", "target": ""},
                {"icon": "✂️", "label": "キャプチャ→CLP", "type": "screenshot_clip", "target": ""},
                {"icon": "⚙️", "label": "設定", "type": "launch", "target": "settings"},
            ],
            "registered": [],
        }
    ],
    "templates": list(DEFAULT_TEMPLATES),
    "hotkeys": {
        "toggleMenu": "Ctrl+Space",
        "clipboardHistory": "Ctrl+Shift+V",
        "templateList": "Ctrl+Shift+T",
        "screenshotClip": "Ctrl+Shift+S",
        "screenshotSave": "Ctrl+Shift+A",
        "openSettings": "Ctrl+Shift+,",
        "nextTab": "Ctrl+Tab",
        "prevTab": "Ctrl+Shift+Tab",
    },
    "clipboard": {
        "enabled": True,
        "maxHistory": 100,
        "saveImages": True,
        "excludePasswords": True,
    },
    # empty saveDir means the host picks its pictures folder
    "screenshot": {
        "saveDir": "",
    },
    "appearance": {
        "menuSize": 380,
        "opacity": 95,
        "animation": True,
        "darkMode": True,
    },
    "general": {
        "autoStart": True,
        "language": "ja",
    },
}


def default_config() -> Dict[str, Any]:
    return copy.deepcopy(DEFAULT_CONFIG)


class ConfigDocumentShape(BaseModel):
    """Structural check for a parsed config file.

    Only the container types the migrations walk through are pinned down;
    everything else is accepted as-is so newer files still load.
    """
    model_config = ConfigDict(extra="allow")

    version: Optional[StrictInt] = Field(default=None, ge=0)
    tabs: Optional[List[Dict[str, Any]]] = None
    templates: Optional[List[Any]] = None
    hotkeys: Optional[Dict[str, Any]] = None
    clipboard: Optional[Dict[str, Any]] = None
    screenshot: Optional[Dict[str, Any]] = None
    appearance: Optional[Dict[str, Any]] = None
    general: Optional[Dict[str, Any]] = None
