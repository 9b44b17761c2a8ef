from abc import ABC, abstractmethod
from typing import Optional

from PIL import Image


class ClipboardSource(ABC):
    """Read/write access to a clipboard that other processes also own.

    Reads may fail at any time (another application holding the clipboard,
    no display, missing helper binaries); callers treat failures as
    "nothing new" for that poll.
    """

    @abstractmethod
    def read_text(self) -> str:
        pass

    @abstractmethod
    def read_image(self) -> Optional[Image.Image]:
        pass

    @abstractmethod
    def write_text(self, text: str) -> None:
        pass
