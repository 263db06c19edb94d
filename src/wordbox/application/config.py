from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from wordbox.domain.constants import (
    DEFAULT_DAILY_GOAL,
    DEFAULT_LEVEL_THRESHOLDS,
    DEFAULT_QUEUE_LIMIT,
    DEFAULT_TIMEZONE,
)
from wordbox.domain.errors import ValidationError

from .leveling import validate_thresholds
from .session_xp import XpRewards


class EngineConfig(BaseSettings):
    """
    Configuration for the wordbox engine and CLI.
    Supports loading from:
    1. Environment variables (WORDBOX_*, nested with WORDBOX_REWARDS__*)
    2. Config file (~/.config/wordbox/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="WORDBOX_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Clock
    timezone: str = DEFAULT_TIMEZONE

    # Storage (reference JSON stores)
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/wordbox")
    learner_id: str = "default"

    # Catalog / tables
    badge_catalog_path: Path | None = None
    level_thresholds: list[int] = Field(default_factory=lambda: list(DEFAULT_LEVEL_THRESHOLDS))
    rewards: XpRewards = Field(default_factory=XpRewards)

    # Study
    queue_limit: int = Field(default=DEFAULT_QUEUE_LIMIT, ge=0)
    daily_goal: int = Field(default=DEFAULT_DAILY_GOAL, ge=0)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Init (CLI) beats env, env beats the file
        toml_file = next((f for f in config_files() if f.exists()), None)
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown time zone {v!r}") from e
        return v

    @field_validator("level_thresholds")
    @classmethod
    def increasing_thresholds(cls, v: list[int]) -> list[int]:
        validate_thresholds(v)
        return v

    @field_validator("data_dir", "badge_catalog_path", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser()


def config_files() -> list[Path]:
    # Resolved at call time so a patched HOME is honoured
    return [
        Path.home() / ".config/wordbox/config.toml",
        Path.home() / ".wordbox.toml",
    ]


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> EngineConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in EngineConfig
    2. ~/.config/wordbox/config.toml (if exists)
    3. Environment variables (WORDBOX_*)
    4. cli_overrides (passed from Typer); None values are ignored

    Raises:
        ValidationError: A layer holds an invalid value.
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    try:
        return EngineConfig(**overrides)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid configuration: {e}") from e
