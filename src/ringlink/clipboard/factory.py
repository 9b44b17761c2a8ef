import platform
from typing import Type

from ringlink.clipboard.base import ClipboardSource


def get_clipboard_class() -> Type[ClipboardSource]:
    system = platform.system()

    if system in ("Windows", "Darwin"):
        from ringlink.clipboard.system import SystemClipboard
        return SystemClipboard
    elif system == "Linux":
        from ringlink.clipboard.system import LinuxClipboard
        return LinuxClipboard
    else:
        raise NotImplementedError(f"Platform '{system}' is not supported")


def get_clipboard_source() -> ClipboardSource:
    clipboard_class = get_clipboard_class()
    return clipboard_class()
