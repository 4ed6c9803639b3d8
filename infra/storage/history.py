"""
Append-only history of tutor results.

Each record is one JSON file under {storage_root}/history/, named by its id.
Ids start with a zero-padded creation time in milliseconds, so sorting file
names sorts records by creation time. Queries run newest first.

Subscribers receive the current first page on subscribe and again after
every append or delete. Snapshots go through a single dispatcher thread so
writers never block on slow callbacks.
"""

import json
import re
import queue
import threading
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel

from infra.logger import TutorLogger, null_logger


MIN_PAGE_SIZE = 15
MAX_PAGE_SIZE = 20

ENTRY_ID_RE = re.compile(r"^\d{13}-[0-9a-f]{8}$")


class HistoryWriteError(Exception):
    """A history record could not be written or removed."""


@dataclass
class HistoryPage:
    entries: List[Dict[str, Any]] = field(default_factory=list)
    has_more: bool = False
    cursor: Optional[str] = None


class Subscription:
    def __init__(self, store: "HistoryStore", callback: Callable[[HistoryPage], None], limit: int):
        self.store = store
        self.callback = callback
        self.limit = limit
        self.active = True

    def cancel(self):
        self.active = False
        self.store._remove_subscription(self)


def clamp_page_size(limit: int) -> int:
    return max(MIN_PAGE_SIZE, min(MAX_PAGE_SIZE, int(limit)))


class HistoryStore:
    def __init__(self, root: Path, logger: Optional[TutorLogger] = None):
        self.root = Path(root)
        self.logger = logger or null_logger("history")
        self._lock = threading.RLock()
        self._last_ms = 0
        self._subscriptions: List[Subscription] = []
        self._queue: "queue.Queue" = queue.Queue()
        self._dispatcher: Optional[threading.Thread] = None

    @property
    def history_dir(self) -> Path:
        return self.root / "history"

    def _record_path(self, entry_id: str) -> Path:
        return self.history_dir / f"{entry_id}.json"

    def _next_id(self) -> str:
        now_ms = int(time.time() * 1000)
        self._last_ms = max(now_ms, self._last_ms + 1)
        return f"{self._last_ms:013d}-{uuid.uuid4().hex[:8]}"

    def append(self, entry) -> Dict[str, Any]:
        """Write a new record and return it with its assigned id."""
        if isinstance(entry, BaseModel):
            data = entry.model_dump(mode="json")
        else:
            data = dict(entry)

        with self._lock:
            entry_id = self._next_id()
            data["id"] = entry_id
            output_file = self._record_path(entry_id)
            temp_file = output_file.with_suffix('.tmp')

            try:
                self.history_dir.mkdir(parents=True, exist_ok=True)
                with open(temp_file, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)

                temp_file.replace(output_file)

            except (OSError, TypeError, ValueError) as e:
                if temp_file.exists():
                    temp_file.unlink()
                self.logger.error("History write failed", entry_id=entry_id, error=str(e))
                raise HistoryWriteError(f"Could not write history entry {entry_id}: {e}") from e

        self.logger.info("History entry saved", entry_id=entry_id, mode=data.get("kind"))
        self._publish()
        return data

    def get(self, entry_id: str) -> Dict[str, Any]:
        path = self._record_path(entry_id)
        if not ENTRY_ID_RE.match(entry_id) or not path.exists():
            raise KeyError(entry_id)

        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def delete(self, entry_id: str) -> bool:
        """Remove a record. Returns False when no such record exists."""
        with self._lock:
            path = self._record_path(entry_id)
            if not ENTRY_ID_RE.match(entry_id) or not path.exists():
                return False
            try:
                path.unlink()
            except OSError as e:
                self.logger.error("History delete failed", entry_id=entry_id, error=str(e))
                raise HistoryWriteError(f"Could not delete history entry {entry_id}: {e}") from e

        self.logger.info("History entry deleted", entry_id=entry_id)
        self._publish()
        return True

    def _ids_newest_first(self) -> List[str]:
        if not self.history_dir.exists():
            return []
        ids = (p.stem for p in self.history_dir.glob("*.json"))
        return sorted((i for i in ids if ENTRY_ID_RE.match(i)), reverse=True)

    def query(
        self,
        limit: int = MAX_PAGE_SIZE,
        before: Optional[str] = None,
        language: Optional[str] = None,
    ) -> HistoryPage:
        """Newest-first page of records older than the `before` cursor."""
        limit = clamp_page_size(limit)
        if language == "all":
            language = None

        entries = []
        has_more = False

        with self._lock:
            for entry_id in self._ids_newest_first():
                if before is not None and entry_id >= before:
                    continue
                try:
                    record = self.get(entry_id)
                except (KeyError, OSError, json.JSONDecodeError) as e:
                    self.logger.warning("Skipping unreadable history entry", entry_id=entry_id, error=str(e))
                    continue
                if language is not None and record.get("language") != language:
                    continue
                if len(entries) == limit:
                    has_more = True
                    break
                entries.append(record)

        cursor = entries[-1]["id"] if entries else None
        return HistoryPage(entries=entries, has_more=has_more, cursor=cursor)

    def subscribe(self, callback: Callable[[HistoryPage], None], limit: int = MAX_PAGE_SIZE) -> Subscription:
        subscription = Subscription(self, callback, clamp_page_size(limit))
        with self._lock:
            self._subscriptions.append(subscription)
            self._ensure_dispatcher()
            self._queue.put((subscription, self.query(subscription.limit)))
        return subscription

    def _remove_subscription(self, subscription: Subscription):
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def _publish(self):
        with self._lock:
            for subscription in self._subscriptions:
                self._queue.put((subscription, self.query(subscription.limit)))

    def _ensure_dispatcher(self):
        if self._dispatcher is None or not self._dispatcher.is_alive():
            self._dispatcher = threading.Thread(
                target=self._dispatch_loop,
                name="history-dispatcher",
                daemon=True,
            )
            self._dispatcher.start()

    def _dispatch_loop(self):
        while True:
            subscription, page = self._queue.get()
            try:
                if subscription.active:
                    subscription.callback(page)
            except Exception as e:
                self.logger.error("History subscriber failed", error=f"{type(e).__name__}: {e}")
            finally:
                self._queue.task_done()

    def drain(self):
        """Block until every queued snapshot has been delivered."""
        self._queue.join()
