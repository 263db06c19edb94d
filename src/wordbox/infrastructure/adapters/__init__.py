# Infrastructure Adapters Package
from .json_store import JsonLedgerStore, JsonSrsStore
from .memory_store import InMemoryLedgerStore, InMemorySrsStore

__all__ = ["JsonSrsStore", "JsonLedgerStore", "InMemorySrsStore", "InMemoryLedgerStore"]
