from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from wordbox.application.config import EngineConfig, resolve_config
from wordbox.application.factory import get_catalog, get_leveling_table, get_progress_service
from wordbox.domain.constants import DEFAULT_LEVEL_THRESHOLDS
from wordbox.domain.errors import ValidationError


def test_defaults(mock_home):
    config = resolve_config()

    assert config.timezone == "UTC"
    assert config.data_dir == mock_home / ".local/share/wordbox"
    assert config.learner_id == "default"
    assert config.queue_limit == 20
    assert config.daily_goal == 20
    assert tuple(config.level_thresholds) == DEFAULT_LEVEL_THRESHOLDS
    assert config.rewards.correct_reward == 10


def test_toml_file(mock_home):
    cfg_dir = mock_home / ".config/wordbox"
    cfg_dir.mkdir(parents=True)
    (cfg_dir / "config.toml").write_text(
        'timezone = "Europe/Madrid"\n'
        'queue_limit = 5\n'
        '\n'
        '[rewards]\n'
        'correct_reward = 7\n'
    )

    config = resolve_config()

    assert config.timezone == "Europe/Madrid"
    assert config.queue_limit == 5
    assert config.rewards.correct_reward == 7
    assert config.rewards.perfect_bonus == 25


def test_fallback_toml_in_home(mock_home):
    (mock_home / ".wordbox.toml").write_text("daily_goal = 50\n")
    assert resolve_config().daily_goal == 50


def test_env_beats_file(mock_home, monkeypatch):
    (mock_home / ".wordbox.toml").write_text("queue_limit = 5\n")
    monkeypatch.setenv("WORDBOX_QUEUE_LIMIT", "8")
    monkeypatch.setenv("WORDBOX_REWARDS__HINT_COST", "4")

    config = resolve_config()

    assert config.queue_limit == 8
    assert config.rewards.hint_cost == 4


def test_cli_overrides_beat_env(mock_home, monkeypatch):
    monkeypatch.setenv("WORDBOX_LEARNER_ID", "env-learner")

    config = resolve_config({"learner_id": "cli-learner", "queue_limit": None})

    assert config.learner_id == "cli-learner"
    assert config.queue_limit == 20


def test_paths_are_expanded(mock_home):
    config = EngineConfig(data_dir="~/words", badge_catalog_path="~/badges.yaml")
    assert config.data_dir == mock_home / "words"
    assert config.badge_catalog_path == mock_home / "badges.yaml"


@pytest.mark.parametrize(
    "overrides",
    [
        {"timezone": "Mars/Olympus"},
        {"level_thresholds": [0, 50, 40]},
        {"level_thresholds": [10, 50]},
        {"queue_limit": -1},
        {"rewards": {"combo_tier_size": 0}},
    ],
)
def test_invalid_values_rejected(mock_home, overrides):
    with pytest.raises(PydanticValidationError):
        EngineConfig(**overrides)


def test_factory_wiring(mock_home, tmp_path):
    catalog_file = tmp_path / "badges.yaml"
    catalog_file.write_text("badges:\n  - {id: only, requirement: {kind: total_xp, value: 1}}\n")
    config = resolve_config(
        {
            "data_dir": tmp_path / "data",
            "badge_catalog_path": catalog_file,
            "level_thresholds": [0, 10],
        }
    )

    assert get_catalog(config).ids == frozenset({"only"})
    assert get_leveling_table(config).max_level == 2

    service = get_progress_service(config)
    service.record_word_learned("default")
    assert Path(tmp_path / "data" / "ledgers.json").exists()


@pytest.mark.parametrize(
    "env",
    [
        {"WORDBOX_TIMEZONE": "Mars/Base"},
        {"WORDBOX_REWARDS__COMBO_TIER_SIZE": "0"},
    ],
)
def test_resolve_config_reports_engine_validation_error(mock_home, monkeypatch, env):
    for key, value in env.items():
        monkeypatch.setenv(key, value)

    with pytest.raises(ValidationError, match="Invalid configuration"):
        resolve_config()


def test_verbosity_is_not_a_config_field(mock_home):
    assert "verbose" not in resolve_config().model_dump()
