"""
In-memory stores.

Process-local dicts. Suitable for tests and for hosts that manage
persistence themselves and only need the engine's logic.
"""

import threading
from collections.abc import Callable

from wordbox.domain.progress.models import ProgressLedger
from wordbox.domain.progress.ports import LedgerStore
from wordbox.domain.srs.models import SrsEntry
from wordbox.domain.srs.ports import SrsStore


class InMemorySrsStore(SrsStore):
    def __init__(self, entries: dict[str, SrsEntry] | None = None):
        self._entries: dict[str, SrsEntry] = dict(entries or {})
        self._lock = threading.Lock()

    def get(self, item_ref: str) -> SrsEntry | None:
        return self._entries.get(item_ref)

    def put(self, item_ref: str, entry: SrsEntry) -> None:
        with self._lock:
            self._entries[item_ref] = entry

    def update(
        self, item_ref: str, change: Callable[[SrsEntry | None], SrsEntry]
    ) -> SrsEntry:
        with self._lock:
            updated = change(self._entries.get(item_ref))
            self._entries[item_ref] = updated
        return updated

    def list_all(self) -> dict[str, SrsEntry]:
        return dict(self._entries)

    def delete(self, item_ref: str) -> None:
        with self._lock:
            self._entries.pop(item_ref, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class InMemoryLedgerStore(LedgerStore):
    def __init__(self):
        self._ledgers: dict[str, ProgressLedger] = {}
        self._lock = threading.Lock()

    def get(self, learner_id: str) -> ProgressLedger:
        return self._ledgers.get(learner_id, ProgressLedger())

    def put(self, learner_id: str, ledger: ProgressLedger) -> None:
        with self._lock:
            self._ledgers[learner_id] = ledger

    def update(
        self, learner_id: str, change: Callable[[ProgressLedger], ProgressLedger]
    ) -> ProgressLedger:
        with self._lock:
            current = self._ledgers.get(learner_id, ProgressLedger())
            updated = change(current)
            if updated != current:
                self._ledgers[learner_id] = updated
        return updated
