import logging
import threading
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, NamedTuple, Optional

from PIL import Image

from ringlink.clipboard import ClipboardSource, get_clipboard_source
from ringlink.models.clipboard_entry import ClipboardEntry, HistoryEntryView
from ringlink.utils.i18n import format_image_preview, format_time_ago
from ringlink.utils.image_codec import image_signature, image_to_data_url

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ringlink.services.config_service import ConfigStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY = 100
DEFAULT_POLL_INTERVAL = 0.5
TEXT_PREVIEW_LENGTH = 100


class ClipboardSnapshot(NamedTuple):
    text: str
    image: Optional[Image.Image]


class ClipboardService:
    """Polls the clipboard and keeps a bounded, newest-first history.

    Only the head of the history is used for de-duplication, so copying a
    value again after something else brings it back to the top.
    """

    def __init__(
        self,
        config: "ConfigStore",
        source: Optional[ClipboardSource] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.config = config
        self.source = source if source is not None else get_clipboard_source()
        self.poll_interval = poll_interval
        self.history: List[ClipboardEntry] = []
        self.last_text = ""
        self.last_image_signature = ""

        self._lock = threading.RLock()
        self._tick_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._poll_thread: Optional[threading.Thread] = None
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    def start(self) -> None:
        with self._lock:
            if self._is_running:
                return

            try:
                self.last_text = self.source.read_text() or ""
            except Exception as e:
                logger.debug(f"Clipboard baseline unavailable: {e}")
                self.last_text = ""

            # a thread left over from a timed-out stop keeps its own, already set, event
            self._stop_event = threading.Event()
            self._is_running = True
            self._poll_thread = threading.Thread(
                target=self._poll_loop, args=(self._stop_event,),
                name="ringlink-clipboard", daemon=True)
            self._poll_thread.start()

        logger.info("Clipboard watcher started")

    def stop(self) -> None:
        with self._lock:
            if not self._is_running:
                return

            self._is_running = False
            self._stop_event.set()
            thread = self._poll_thread
            self._poll_thread = None

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(self.poll_interval * 2, 1.0))
        logger.info("Clipboard watcher stopped")

    def run_forever(self) -> None:
        try:
            if not self._is_running:
                self.start()

            while not self._stop_event.wait(timeout=self.poll_interval):
                continue
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()

    def _poll_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.poll_interval):
            self.check()

    def check(self) -> List[ClipboardEntry]:
        """Run one poll and return the entries it added."""
        if not self._tick_lock.acquire(blocking=False):
            return []
        try:
            snapshot = self._read_snapshot()
            if snapshot is None:
                return []
            return self._record(snapshot)
        finally:
            self._tick_lock.release()

    def _read_snapshot(self) -> Optional[ClipboardSnapshot]:
        try:
            text = self.source.read_text() or ""
            image = self.source.read_image() if self._track_images() else None
        except Exception as e:
            # the clipboard is often locked by another application for a moment
            logger.debug(f"Clipboard read skipped: {e}")
            return None
        return ClipboardSnapshot(text=text, image=image)

    def _record(self, snapshot: ClipboardSnapshot) -> List[ClipboardEntry]:
        added: List[ClipboardEntry] = []

        text = snapshot.text
        if text and text != self.last_text:
            self.last_text = text
            entry = ClipboardEntry(
                kind="text",
                content=text,
                preview=text[:TEXT_PREVIEW_LENGTH],
            )
            if self.add_to_history(entry):
                added.append(entry)

        image = snapshot.image
        if image is not None and image.width > 0 and image.height > 0:
            signature = image_signature(image)
            if signature != self.last_image_signature:
                try:
                    content = image_to_data_url(image)
                except (OSError, ValueError) as e:
                    logger.debug(f"Clipboard image could not be encoded: {e}")
                    return added

                self.last_image_signature = signature
                entry = ClipboardEntry(
                    kind="image",
                    content=content,
                    preview=format_image_preview(image.width, image.height, self._language()),
                    size=(image.width, image.height),
                )
                if self.add_to_history(entry):
                    added.append(entry)

        return added

    def add_to_history(self, entry: ClipboardEntry) -> bool:
        with self._lock:
            if self.history and self.history[0].content == entry.content:
                return False

            self.history.insert(0, entry)
            max_history = self._max_history()
            if len(self.history) > max_history:
                del self.history[max_history:]

        logger.debug(f"Clipboard history += {entry.kind} ({len(self.history)} items)")
        return True

    def get_history(self, now: Optional[datetime] = None) -> List[HistoryEntryView]:
        if now is None:
            now = datetime.now(timezone.utc)
        language = self._language()

        with self._lock:
            entries = list(self.history)

        return [
            HistoryEntryView(
                id=entry.entry_id,
                type=entry.kind,
                preview=entry.preview,
                content=entry.content if entry.kind == "text" else None,
                timestamp=entry.timestamp,
                time_ago=format_time_ago((now - entry.timestamp).total_seconds(), language),
            )
            for entry in entries
        ]

    def clear_history(self) -> None:
        with self._lock:
            self.history.clear()

    def write_text(self, text: str) -> bool:
        try:
            self.source.write_text(text)
            return True
        except Exception as e:
            logger.error(f"Clipboard write failed: {e}")
            return False

    def _track_images(self) -> bool:
        return bool(self.config.get("clipboard.saveImages"))

    def _max_history(self) -> int:
        value = self.config.get("clipboard.maxHistory")
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return value
        return DEFAULT_MAX_HISTORY

    def _language(self) -> object:
        return self.config.get("general.language")

    def __enter__(self) -> "ClipboardService":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
