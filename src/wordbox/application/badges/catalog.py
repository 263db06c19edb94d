"""
Badge catalog loading.

The catalog is a static, ordered list of BadgeDefinition read once from YAML
and treated as immutable for the life of the process.
"""

import logging
from collections.abc import Iterable, Iterator
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from wordbox.domain.badges.models import (
    BadgeDefinition,
    CatalogProgress,
    Rarity,
    Requirement,
    RequirementKind,
)
from wordbox.domain.errors import StorageError, ValidationError
from wordbox.domain.ratios import percent

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_RESOURCE = "badges.yaml"


class RequirementRecord(BaseModel):
    kind: str
    value: int | str


class BadgeRecord(BaseModel):
    """One catalog entry as written in the YAML file."""

    id: str
    requirement: RequirementRecord
    xp_reward: int = Field(default=0, ge=0)
    rarity: str = "common"
    name: str = ""
    description: str = ""
    category: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        return str(v)

    @field_validator("rarity")
    @classmethod
    def known_rarity(cls, v: str) -> str:
        if v.upper() not in Rarity.__members__:
            raise ValueError(f"unknown rarity {v!r}")
        return v.lower()

    @model_validator(mode="after")
    def threshold_matches_kind(self) -> "BadgeRecord":
        kind = RequirementKind(self.requirement.kind)
        value = self.requirement.value
        if kind is RequirementKind.LEVEL_COMPLETED:
            if not isinstance(value, str):
                raise ValueError(f"badge {self.id}: level_completed needs a level tag")
        elif kind is not RequirementKind.UNKNOWN:
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"badge {self.id}: {kind.value} needs a non-negative integer")
        return self

    def to_definition(self) -> BadgeDefinition:
        kind = RequirementKind(self.requirement.kind)
        if kind is RequirementKind.UNKNOWN:
            logger.warning(
                f"Badge {self.id} has unknown requirement kind "
                f"{self.requirement.kind!r}; it can never be earned"
            )
        return BadgeDefinition(
            id=self.id,
            requirement=Requirement(kind=kind, threshold=self.requirement.value),
            xp_reward=self.xp_reward,
            rarity=Rarity[self.rarity.upper()],
            name=self.name,
            description=self.description,
            category=self.category,
        )


class CatalogFile(BaseModel):
    version: int = 1
    badges: list[BadgeRecord] = Field(default_factory=list)


class BadgeCatalog:
    """Ordered, read-only collection of badge definitions."""

    def __init__(self, definitions: Iterable[BadgeDefinition], version: int = 1):
        self.definitions: tuple[BadgeDefinition, ...] = tuple(definitions)
        self.version = version
        self._by_id = {}
        for badge in self.definitions:
            if badge.id in self._by_id:
                raise ValidationError(f"Duplicate badge id in catalog: {badge.id!r}")
            self._by_id[badge.id] = badge

    def __iter__(self) -> Iterator[BadgeDefinition]:
        return iter(self.definitions)

    def __len__(self) -> int:
        return len(self.definitions)

    def __contains__(self, badge_id: object) -> bool:
        return badge_id in self._by_id

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._by_id)

    def get(self, badge_id: str) -> BadgeDefinition | None:
        return self._by_id.get(str(badge_id))

    def by_category(self, category: str) -> list[BadgeDefinition]:
        return [b for b in self.definitions if b.category == category]

    def progress(self, earned_ids: Iterable[str]) -> CatalogProgress:
        earned = len(self.ids & set(earned_ids))
        total = len(self.definitions)
        return CatalogProgress(
            earned=earned,
            total=total,
            percentage=percent(earned, total),
            remaining=total - earned,
        )


def parse_catalog(text: str) -> BadgeCatalog:
    """Parse catalog YAML text into a BadgeCatalog."""
    try:
        data = yaml.safe_load(text) or {}
        parsed = CatalogFile.model_validate(data)
    except yaml.YAMLError as e:
        raise ValidationError(f"Badge catalog is not valid YAML: {e}") from e
    except PydanticValidationError as e:
        raise ValidationError(f"Badge catalog failed validation: {e}") from e

    return BadgeCatalog(
        (record.to_definition() for record in parsed.badges),
        version=parsed.version,
    )


def load_catalog(path: Path | None = None) -> BadgeCatalog:
    """
    Load a catalog from ``path``, or the packaged default when None.

    Raises:
        StorageError: The file could not be read.
        ValidationError: The file is malformed.
    """
    try:
        if path is None:
            text = (
                resources.files(__package__)
                .joinpath(DEFAULT_CATALOG_RESOURCE)
                .read_text(encoding="utf-8")
            )
        else:
            text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise StorageError(f"Could not read badge catalog {path}: {e}") from e

    catalog = parse_catalog(text)
    logger.debug(f"Loaded {len(catalog)} badges (catalog v{catalog.version})")
    return catalog


@lru_cache(maxsize=1)
def default_catalog() -> BadgeCatalog:
    return load_catalog()
