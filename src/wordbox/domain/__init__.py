# Domain Package
from .clock import EPOCH, Clock, FixedClock, SystemClock, date_key, parse_date_key
from .errors import StorageError, ValidationError, WordboxError

__all__ = [
    "EPOCH",
    "Clock",
    "FixedClock",
    "SystemClock",
    "date_key",
    "parse_date_key",
    "WordboxError",
    "ValidationError",
    "StorageError",
]
