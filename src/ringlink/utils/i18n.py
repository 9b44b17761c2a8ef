from typing import Dict

DEFAULT_LANGUAGE = "ja"

_TIME_AGO: Dict[str, Dict[str, str]] = {
    "ja": {
        "seconds": "{n}秒前",
        "minutes": "{n}分前",
        "hours": "{n}時間前",
        "days": "{n}日前",
    },
    "en": {
        "seconds": "{n}s ago",
        "minutes": "{n}m ago",
        "hours": "{n}h ago",
        "days": "{n}d ago",
    },
}

_IMAGE_PREVIEW: Dict[str, str] = {
    "ja": "画像 ({width}×{height})",
    "en": "Image ({width}×{height})",
}


def _language(language: object) -> str:
    if isinstance(language, str) and language in _TIME_AGO:
        return language
    return DEFAULT_LANGUAGE


def format_time_ago(elapsed_seconds: float, language: object = DEFAULT_LANGUAGE) -> str:
    words = _TIME_AGO[_language(language)]
    seconds = max(int(elapsed_seconds), 0)
    if seconds < 60:
        return words["seconds"].format(n=seconds)
    minutes = seconds // 60
    if minutes < 60:
        return words["minutes"].format(n=minutes)
    hours = minutes // 60
    if hours < 24:
        return words["hours"].format(n=hours)
    return words["days"].format(n=hours // 24)


def format_image_preview(width: int, height: int, language: object = DEFAULT_LANGUAGE) -> str:
    return _IMAGE_PREVIEW[_language(language)].format(width=width, height=height)
