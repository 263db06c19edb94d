# Domain SRS Package
from .models import ItemSrsInfo, SrsEntry, SrsStats, heal_entry
from .ports import SrsStore

__all__ = ["SrsEntry", "SrsStats", "ItemSrsInfo", "heal_entry", "SrsStore"]
