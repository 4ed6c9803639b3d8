"""Live, paginated view of saved results."""

import threading
from typing import Any, Callable, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from infra.logger import TutorLogger, null_logger
from infra.storage import HistoryPage, HistoryStore, Subscription
from tutor.schemas import CorrectionEntry, ExplanationEntry, HistoryEntry


LANGUAGE_FILTERS = ("all", "en", "de")

_entry_adapter = TypeAdapter(HistoryEntry)


def parse_entry(data: Dict[str, Any]) -> HistoryEntry:
    """Build a typed entry from a stored record.

    Records written before the `kind` field existed are treated as
    explanations when they carry sentences, corrections otherwise.
    """
    if "kind" not in data:
        data = {**data, "kind": "explanation" if "sentences" in data else "correction"}
    if data["kind"] == "explanation":
        return ExplanationEntry.model_validate(data)
    if data["kind"] == "correction":
        return CorrectionEntry.model_validate(data)
    return _entry_adapter.validate_python(data)


def parse_entries(records: List[Dict[str, Any]], logger: Optional[TutorLogger] = None) -> List[HistoryEntry]:
    """Typed entries for stored records. Records that fail validation are
    skipped with a warning."""
    logger = logger or null_logger("history")
    entries = []
    for record in records:
        try:
            entries.append(parse_entry(record))
        except (ValidationError, ValueError, KeyError) as e:
            logger.warning("Skipping malformed history entry", entry_id=record.get("id"), error=str(e))
    return entries


class HistoryFeed:
    """Newest-first entries: the live first page plus any older pages
    fetched with load_more()."""

    def __init__(
        self,
        store: HistoryStore,
        page_size: int = 20,
        logger: Optional[TutorLogger] = None,
        on_change: Optional[Callable[["HistoryFeed"], None]] = None,
    ):
        self.store = store
        self.page_size = page_size
        self.logger = logger or null_logger("history")
        self.on_change = on_change
        self.language = "all"

        self._lock = threading.RLock()
        self._live: List[HistoryEntry] = []
        self._older: List[HistoryEntry] = []
        self._live_has_more = False
        self._older_has_more: Optional[bool] = None
        self._subscription: Optional[Subscription] = None

    def start(self) -> "HistoryFeed":
        self._subscription = self.store.subscribe(self._on_snapshot, limit=self.page_size)
        return self

    def stop(self):
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def _parse_all(self, records: List[Dict[str, Any]]) -> List[HistoryEntry]:
        return parse_entries(records, self.logger)

    def _on_snapshot(self, page: HistoryPage):
        with self._lock:
            previous = self._live
            self._live = self._parse_all(page.entries)
            self._live_has_more = page.has_more
            live_ids = {e.id for e in self._live}
            older = [e for e in self._older if e.id not in live_ids]
            if self._older_has_more is not None and self._live:
                # entries pushed off the live page by newer ones stay visible
                boundary = self._live[-1].id
                older = [e for e in previous if e.id not in live_ids and e.id < boundary] + older
            self._older = older
        if self.on_change is not None:
            self.on_change(self)

    @property
    def entries(self) -> List[HistoryEntry]:
        with self._lock:
            return self._live + self._older

    @property
    def has_more(self) -> bool:
        with self._lock:
            if self._older_has_more is not None:
                return self._older_has_more
            return self._live_has_more

    @property
    def cursor(self) -> Optional[str]:
        entries = self.entries
        return entries[-1].id if entries else None

    def load_more(self) -> int:
        """Fetch the next older page. Returns how many entries were added."""
        if not self.has_more:
            return 0

        page = self.store.query(self.page_size, before=self.cursor)
        new_entries = self._parse_all(page.entries)
        with self._lock:
            known = {e.id for e in self._live + self._older}
            self._older.extend(e for e in new_entries if e.id not in known)
            self._older_has_more = page.has_more

        self.logger.debug("Loaded older history page", kept=len(new_entries))
        return len(new_entries)

    def set_language(self, language: str):
        if language not in LANGUAGE_FILTERS:
            raise ValueError(f"Unknown language filter '{language}'. Expected one of: {', '.join(LANGUAGE_FILTERS)}")
        self.language = language

    def visible(self) -> List[HistoryEntry]:
        """Entries matching the current language filter."""
        if self.language == "all":
            return self.entries
        return [e for e in self.entries if e.language == self.language]

    def find(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def delete(self, entry_id: str) -> bool:
        with self._lock:
            self._older = [e for e in self._older if e.id != entry_id]
        return self.store.delete(entry_id)
