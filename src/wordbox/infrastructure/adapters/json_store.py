"""
JSON file stores: reference adapters for local use.

Each store keeps one JSON document on disk. Writes go through a temp file
and ``os.replace`` so a crash never leaves a half-written document. Every
write is a read-modify-write cycle held under two locks: a thread lock
shared by all documents on the same path, and an exclusive ``flock`` on a
sidecar ``<name>.lock`` file for other processes. Readers need no lock
since the document is only ever swapped in whole.
"""

import fcntl
import json
import logging
import os
import tempfile
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from wordbox.domain.errors import StorageError
from wordbox.domain.progress.models import ProgressLedger
from wordbox.domain.progress.ports import LedgerStore
from wordbox.domain.srs.models import SrsEntry
from wordbox.domain.srs.ports import SrsStore

from .serialization import (
    entry_from_record,
    entry_to_record,
    ledger_from_record,
    ledger_to_record,
)

logger = logging.getLogger(__name__)

_path_locks: dict[Path, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _path_locks_guard:
        return _path_locks.setdefault(key, threading.Lock())


class JsonDocument:
    """A JSON object persisted in a single file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self._thread_lock = _lock_for(self.path)

    @contextmanager
    def locked(self) -> Iterator[None]:
        """
        Hold the document exclusively for one read-modify-write cycle.

        Not reentrant: do not nest ``locked()`` blocks for the same path.
        """
        with self._thread_lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                lock_file = open(self.lock_path, "a")
            except OSError as e:
                raise StorageError(f"Could not lock {self.path}: {e}") from e
            with lock_file:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
                try:
                    yield
                finally:
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Expected a JSON object in {self.path}")
        return data

    def save(self, data: dict[str, Any]) -> None:
        """Replace the document. Call only inside ``locked()``."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, sort_keys=True)
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
        logger.debug(f"Wrote {self.path}")


class JsonSrsStore(SrsStore):
    """All SRS entries in one file, keyed by item reference."""

    def __init__(self, path: Path):
        self._doc = JsonDocument(path)

    def get(self, item_ref: str) -> SrsEntry | None:
        record = self._doc.load().get(item_ref)
        return self._decode(item_ref, record) if record is not None else None

    def put(self, item_ref: str, entry: SrsEntry) -> None:
        with self._doc.locked():
            data = self._doc.load()
            data[item_ref] = entry_to_record(entry)
            self._doc.save(data)

    def update(
        self, item_ref: str, change: Callable[[SrsEntry | None], SrsEntry]
    ) -> SrsEntry:
        with self._doc.locked():
            data = self._doc.load()
            record = data.get(item_ref)
            current = self._decode(item_ref, record) if record is not None else None
            updated = change(current)
            if updated != current:
                data[item_ref] = entry_to_record(updated)
                self._doc.save(data)
        return updated

    def list_all(self) -> dict[str, SrsEntry]:
        return {ref: self._decode(ref, rec) for ref, rec in self._doc.load().items()}

    def delete(self, item_ref: str) -> None:
        with self._doc.locked():
            data = self._doc.load()
            if data.pop(item_ref, None) is not None:
                self._doc.save(data)

    def clear(self) -> None:
        with self._doc.locked():
            self._doc.save({})

    @staticmethod
    def _decode(item_ref: str, record: Any) -> SrsEntry:
        try:
            return entry_from_record(record)
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Unreadable SRS record for {item_ref!r}: {e}") from e


class JsonLedgerStore(LedgerStore):
    """Ledgers for all learners in one file, keyed by learner id."""

    def __init__(self, path: Path):
        self._doc = JsonDocument(path)

    def get(self, learner_id: str) -> ProgressLedger:
        return self._decode(learner_id, self._doc.load().get(learner_id))

    def put(self, learner_id: str, ledger: ProgressLedger) -> None:
        with self._doc.locked():
            data = self._doc.load()
            data[learner_id] = ledger_to_record(ledger)
            self._doc.save(data)

    def update(
        self, learner_id: str, change: Callable[[ProgressLedger], ProgressLedger]
    ) -> ProgressLedger:
        with self._doc.locked():
            data = self._doc.load()
            current = self._decode(learner_id, data.get(learner_id))
            updated = change(current)
            if updated != current:
                data[learner_id] = ledger_to_record(updated)
                self._doc.save(data)
        return updated

    @staticmethod
    def _decode(learner_id: str, record: Any) -> ProgressLedger:
        if record is None:
            return ProgressLedger()
        try:
            return ledger_from_record(record)
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Unreadable ledger for {learner_id!r}: {e}") from e
