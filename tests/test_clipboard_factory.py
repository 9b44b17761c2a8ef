import platform
import shutil

import pytest

from ringlink.clipboard import get_clipboard_class
from ringlink.clipboard.system import LinuxClipboard, SystemClipboard


@pytest.mark.parametrize("system, expected", [
    ("Windows", SystemClipboard),
    ("Darwin", SystemClipboard),
    ("Linux", LinuxClipboard),
])
def test_factory_picks_platform_class(monkeypatch, system, expected):
    monkeypatch.setattr(platform, "system", lambda: system)
    assert get_clipboard_class() is expected


def test_factory_rejects_unknown_platform(monkeypatch):
    monkeypatch.setattr(platform, "system", lambda: "Plan9")
    with pytest.raises(NotImplementedError):
        get_clipboard_class()


def test_linux_without_image_tool_reads_no_image(monkeypatch):
    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    monkeypatch.setattr(shutil, "which", lambda name: None)
    assert LinuxClipboard().read_image() is None
