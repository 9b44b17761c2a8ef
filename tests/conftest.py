import sys
from pathlib import Path
from typing import List, Optional

import pytest
from PIL import Image

# Make src importable
REPO_ROOT = Path(__file__).resolve().parent.parent
SRC = REPO_ROOT / "src"
sys.path.insert(0, str(SRC))

from ringlink.clipboard import ClipboardSource  # noqa: E402
from ringlink.services.config_service import ConfigStore  # noqa: E402
from ringlink.services.settings import AppSettings  # noqa: E402


class FakeClipboard(ClipboardSource):
    """In-memory clipboard; set ``fail`` to simulate a locked clipboard."""

    def __init__(self, text: str = "", image: Optional[Image.Image] = None):
        self.text = text
        self.image = image
        self.fail = False
        self.image_reads = 0
        self.written: List[str] = []

    def read_text(self) -> str:
        if self.fail:
            raise OSError("clipboard locked")
        return self.text

    def read_image(self) -> Optional[Image.Image]:
        self.image_reads += 1
        if self.fail:
            raise OSError("clipboard locked")
        return self.image

    def write_text(self, text: str) -> None:
        if self.fail:
            raise OSError("clipboard locked")
        self.written.append(text)
        self.text = text


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(config_dir=tmp_path / "config", backup_keep=20, poll_interval=60.0)


@pytest.fixture
def store(settings: AppSettings) -> ConfigStore:
    config = ConfigStore(settings=settings)
    config.load()
    return config


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()
