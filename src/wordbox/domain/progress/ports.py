"""Port for ledger persistence."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from .models import ProgressLedger


class LedgerStore(ABC):
    """
    Store for one ProgressLedger per learner.

    Callers apply every change for one event to a single ledger value and
    write it once through ``update``, so a badge id is never recorded without
    its XP and concurrent events for one learner never overwrite each other.
    """

    @abstractmethod
    def get(self, learner_id: str) -> ProgressLedger:
        """Return the learner's ledger, or a fresh empty one if none exists."""
        pass

    @abstractmethod
    def put(self, learner_id: str, ledger: ProgressLedger) -> None:
        pass

    @abstractmethod
    def update(
        self, learner_id: str, change: Callable[[ProgressLedger], ProgressLedger]
    ) -> ProgressLedger:
        """
        Atomically replace the learner's ledger with ``change(current)``.

        Nothing is written when ``change`` returns an equal ledger. Returns
        the resulting ledger.
        """
        pass
