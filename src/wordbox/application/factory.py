"""
Service Factory
Centralizes wiring of stores, clock and catalog from configuration.
"""

from wordbox.application.badges import BadgeCatalog, default_catalog, load_catalog
from wordbox.application.config import EngineConfig
from wordbox.application.leveling import LevelingTable
from wordbox.application.progress_service import ProgressService
from wordbox.domain.clock import Clock, SystemClock
from wordbox.domain.progress.ports import LedgerStore
from wordbox.domain.srs.ports import SrsStore
from wordbox.infrastructure.adapters.json_store import JsonLedgerStore, JsonSrsStore

SRS_FILE = "srs.json"
LEDGER_FILE = "ledgers.json"


def get_srs_store(config: EngineConfig) -> SrsStore:
    return JsonSrsStore(config.data_dir / SRS_FILE)


def get_ledger_store(config: EngineConfig) -> LedgerStore:
    return JsonLedgerStore(config.data_dir / LEDGER_FILE)


def get_clock(config: EngineConfig) -> Clock:
    return SystemClock(config.timezone)


def get_catalog(config: EngineConfig) -> BadgeCatalog:
    """Custom catalog file if configured, else the packaged default."""
    if config.badge_catalog_path is not None:
        return load_catalog(config.badge_catalog_path)
    return default_catalog()


def get_leveling_table(config: EngineConfig) -> LevelingTable:
    return LevelingTable(config.level_thresholds)


def get_progress_service(config: EngineConfig) -> ProgressService:
    return ProgressService(
        srs_store=get_srs_store(config),
        ledger_store=get_ledger_store(config),
        clock=get_clock(config),
        catalog=get_catalog(config),
        rewards=config.rewards,
    )
