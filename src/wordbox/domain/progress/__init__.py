# Domain Progress Package
from .models import MetricsSnapshot, ProgressLedger, SessionAccumulator, heal_ledger
from .ports import LedgerStore

__all__ = [
    "ProgressLedger",
    "MetricsSnapshot",
    "SessionAccumulator",
    "heal_ledger",
    "LedgerStore",
]
