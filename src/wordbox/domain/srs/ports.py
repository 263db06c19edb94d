"""
Ports (interfaces) for SRS persistence.

These define the contract that infrastructure adapters must implement.
The scheduler depends on this abstraction, not on concrete stores.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from .models import SrsEntry


class SrsStore(ABC):
    """
    Key-value store mapping an item reference to its SrsEntry.

    Implementations:
        - InMemorySrsStore: Process-local dict, for tests and embedding.
        - JsonSrsStore: Single JSON file on disk.

    Implementations make ``update`` atomic: no other writer on the same
    store can run between its read and its write. For file-backed stores
    this holds across processes too.
    """

    @abstractmethod
    def get(self, item_ref: str) -> SrsEntry | None:
        """Return the entry for ``item_ref`` or None if it was never reviewed."""
        pass

    @abstractmethod
    def put(self, item_ref: str, entry: SrsEntry) -> None:
        """Persist ``entry`` under ``item_ref``. Raises StorageError on failure."""
        pass

    @abstractmethod
    def update(
        self, item_ref: str, change: Callable[[SrsEntry | None], SrsEntry]
    ) -> SrsEntry:
        """
        Atomically replace the entry for ``item_ref`` with ``change(current)``.

        ``current`` is None for an item never reviewed. Returns the new entry.
        """
        pass

    @abstractmethod
    def list_all(self) -> dict[str, SrsEntry]:
        pass

    @abstractmethod
    def delete(self, item_ref: str) -> None:
        """Remove one entry. Missing keys are ignored."""
        pass

    @abstractmethod
    def clear(self) -> None:
        pass
