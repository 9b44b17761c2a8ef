"""ClipboardService against an in-memory clipboard; ticks are driven by hand."""

import threading
from datetime import timedelta

import pytest
from PIL import Image

from conftest import FakeClipboard
from ringlink.models.clipboard_entry import ClipboardEntry
from ringlink.services.clipboard_service import DEFAULT_MAX_HISTORY, ClipboardService


@pytest.fixture
def service(store, clipboard):
    svc = ClipboardService(store, source=clipboard, poll_interval=60.0)
    yield svc
    svc.stop()


def _texts(service):
    return [entry.content for entry in service.history]


def test_start_takes_baseline(service, clipboard):
    clipboard.text = "already there"
    service.start()

    assert service.check() == []
    assert service.history == []

    clipboard.text = "fresh"
    added = service.check()
    assert [entry.content for entry in added] == ["fresh"]


def test_start_and_stop_are_idempotent(service):
    service.start()
    thread = service._poll_thread
    service.start()
    assert service._poll_thread is thread
    assert service.is_running

    service.stop()
    service.stop()
    assert not service.is_running
    assert not thread.is_alive()


def test_start_survives_unreadable_clipboard(service, clipboard):
    clipboard.fail = True
    service.start()
    assert service.last_text == ""


def test_text_change_creates_entry(service, clipboard):
    clipboard.text = "x" * 150
    [entry] = service.check()

    assert entry.kind == "text"
    assert entry.content == "x" * 150
    assert entry.preview == "x" * 100
    assert entry.entry_id.startswith("c_")
    assert service.check() == []


def test_empty_text_is_ignored(service, clipboard):
    clipboard.text = ""
    assert service.check() == []


def test_read_failure_is_a_no_change_tick(service, clipboard):
    clipboard.text = "one"
    service.check()

    clipboard.text = "two"
    clipboard.fail = True
    assert service.check() == []
    assert _texts(service) == ["one"]

    clipboard.fail = False
    assert [entry.content for entry in service.check()] == ["two"]


def test_overlapping_tick_is_skipped(service, clipboard):
    clipboard.text = "busy"
    service._tick_lock.acquire()
    try:
        assert service.check() == []
    finally:
        service._tick_lock.release()
    assert len(service.check()) == 1


def test_image_change_creates_entry(service, clipboard):
    clipboard.image = Image.new("RGB", (4, 3), "red")
    [entry] = service.check()

    assert entry.kind == "image"
    assert entry.size == (4, 3)
    assert entry.preview == "画像 (4×3)"
    assert entry.content.startswith("data:image/png;base64,")

    # same dimensions count as the same image
    clipboard.image = Image.new("RGB", (4, 3), "blue")
    assert service.check() == []

    clipboard.image = Image.new("RGB", (5, 3), "blue")
    assert len(service.check()) == 1


def test_image_preview_follows_language(service, store, clipboard):
    store.set("general.language", "en")
    clipboard.image = Image.new("RGB", (2, 2))
    [entry] = service.check()
    assert entry.preview == "Image (2×2)"


def test_image_tracking_is_read_live(service, store, clipboard):
    clipboard.image = Image.new("RGB", (2, 2))
    store.set("clipboard.saveImages", False)

    assert service.check() == []
    assert clipboard.image_reads == 0

    store.set("clipboard.saveImages", True)
    assert len(service.check()) == 1
    assert clipboard.image_reads == 1


def test_text_and_image_in_one_tick(service, clipboard):
    clipboard.text = "caption"
    clipboard.image = Image.new("RGB", (8, 8))
    added = service.check()
    assert [entry.kind for entry in added] == ["text", "image"]
    assert service.history[0].kind == "image"


def test_head_dedup(service):
    assert service.add_to_history(ClipboardEntry(kind="text", content="a", preview="a"))
    assert not service.add_to_history(ClipboardEntry(kind="text", content="a", preview="a"))
    assert len(service.history) == 1


def test_non_adjacent_duplicates_are_kept(service):
    for value in ("a", "b", "a"):
        service.add_to_history(ClipboardEntry(kind="text", content=value, preview=value))
    assert _texts(service) == ["a", "b", "a"]


def test_history_is_bounded_by_config(service, store):
    store.set("clipboard.maxHistory", 3)
    for i in range(10):
        service.add_to_history(ClipboardEntry(kind="text", content=str(i), preview=str(i)))
        assert len(service.history) <= 3
    assert _texts(service) == ["9", "8", "7"]


@pytest.mark.parametrize("bad_value", [0, -5, "ten", None, True])
def test_invalid_max_history_uses_default(service, store, bad_value):
    store.set("clipboard.maxHistory", bad_value)
    for i in range(DEFAULT_MAX_HISTORY + 5):
        service.add_to_history(ClipboardEntry(kind="text", content=str(i), preview=str(i)))
    assert len(service.history) == DEFAULT_MAX_HISTORY


def test_get_history_projection(service, clipboard):
    clipboard.text = "hello"
    service.check()
    clipboard.image = Image.new("RGB", (3, 3))
    service.check()

    now = service.history[0].timestamp + timedelta(seconds=90)
    image_view, text_view = service.get_history(now=now)

    assert image_view.type == "image"
    assert image_view.content is None
    assert image_view.preview == "画像 (3×3)"
    assert text_view.type == "text"
    assert text_view.content == "hello"
    assert text_view.id == service.history[1].entry_id
    assert image_view.time_ago == "1分前"


def test_get_history_uses_language(service, store):
    entry = ClipboardEntry(kind="text", content="a", preview="a")
    service.add_to_history(entry)
    store.set("general.language", "en")

    [view] = service.get_history(now=entry.timestamp + timedelta(hours=50))
    assert view.time_ago == "2d ago"


def test_clear_history(service):
    service.add_to_history(ClipboardEntry(kind="text", content="a", preview="a"))
    service.clear_history()
    assert service.get_history() == []


def test_write_text(service, clipboard):
    assert service.write_text("pasted")
    assert clipboard.written == ["pasted"]

    clipboard.fail = True
    assert service.write_text("again") is False


def test_context_manager(store):
    clipboard = FakeClipboard(text="start")
    with ClipboardService(store, source=clipboard, poll_interval=60.0) as svc:
        assert svc.is_running
        assert svc.last_text == "start"
    assert not svc.is_running


def test_poll_thread_records_changes(store):
    clipboard = FakeClipboard()
    svc = ClipboardService(store, source=clipboard, poll_interval=0.01)
    svc.start()
    try:
        clipboard.text = "from thread"
        for _ in range(500):
            if svc.history:
                break
            svc._stop_event.wait(0.01)
    finally:
        svc.stop()
    assert _texts(svc) == ["from thread"]


def test_restart_after_timed_out_stop_retires_old_thread(store, monkeypatch):
    svc = ClipboardService(store, source=FakeClipboard(), poll_interval=0.01)
    svc.start()
    old_thread = svc._poll_thread
    old_event = svc._stop_event
    # join gives up before the poll thread has noticed the stop
    monkeypatch.setattr(old_thread, "join", lambda timeout=None: None)
    svc.stop()
    svc.start()
    try:
        assert svc._stop_event is not old_event
        assert old_event.is_set()
        assert not svc._stop_event.is_set()
        threading.Thread.join(old_thread, 5.0)
        assert not old_thread.is_alive()
        assert svc._poll_thread.is_alive()
    finally:
        svc.stop()
