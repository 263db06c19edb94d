# Domain Badges Package
from .models import BadgeDefinition, CatalogProgress, Rarity, Requirement, RequirementKind

__all__ = ["BadgeDefinition", "CatalogProgress", "Rarity", "Requirement", "RequirementKind"]
