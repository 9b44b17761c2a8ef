import os
import shutil
from typing import Optional

import pyperclip
from PIL import Image, ImageGrab

from ringlink.clipboard.base import ClipboardSource


class SystemClipboard(ClipboardSource):
    """Desktop clipboard through pyperclip (text) and Pillow (images)."""

    def read_text(self) -> str:
        text = pyperclip.paste()
        return text if isinstance(text, str) else ""

    def read_image(self) -> Optional[Image.Image]:
        clipboard_data = ImageGrab.grabclipboard()
        # copied files come back as a list of paths, which are not images
        if isinstance(clipboard_data, Image.Image):
            return clipboard_data
        return None

    def write_text(self, text: str) -> None:
        pyperclip.copy(text)


class LinuxClipboard(SystemClipboard):
    """Pillow needs wl-paste (Wayland) or xclip (X11) to read images."""

    def __init__(self) -> None:
        if os.environ.get("WAYLAND_DISPLAY"):
            self._image_tool = shutil.which("wl-paste")
        else:
            self._image_tool = shutil.which("xclip")

    def read_image(self) -> Optional[Image.Image]:
        if not self._image_tool:
            return None
        return super().read_image()
