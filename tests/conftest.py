import os
from datetime import date

import pytest

from wordbox.application.badges import BadgeCatalog
from wordbox.domain.badges.models import BadgeDefinition, Rarity, Requirement, RequirementKind
from wordbox.infrastructure.adapters.memory_store import InMemoryLedgerStore, InMemorySrsStore


@pytest.fixture
def day():
    return date(2024, 3, 10)


@pytest.fixture
def srs_store():
    return InMemorySrsStore()


@pytest.fixture
def ledger_store():
    return InMemoryLedgerStore()


@pytest.fixture
def small_catalog():
    """Three badges: one session, 100 XP, and the A1 tier."""
    return BadgeCatalog(
        [
            BadgeDefinition(
                id="first",
                requirement=Requirement(RequirementKind.PRACTICE_SESSIONS, 1),
                xp_reward=10,
            ),
            BadgeDefinition(
                id="xp100",
                requirement=Requirement(RequirementKind.TOTAL_XP, 100),
                xp_reward=0,
                rarity=Rarity.UNCOMMON,
            ),
            BadgeDefinition(
                id="a1",
                requirement=Requirement(RequirementKind.LEVEL_COMPLETED, "A1"),
                xp_reward=100,
            ),
        ]
    )


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/data
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("WORDBOX_"):
            monkeypatch.delenv(key)
    return home
