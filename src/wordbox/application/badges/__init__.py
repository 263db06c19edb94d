# Application Badges Package
from .catalog import BadgeCatalog, default_catalog, load_catalog, parse_catalog
from .evaluator import evaluate_badges, requirement_met

__all__ = [
    "BadgeCatalog",
    "default_catalog",
    "load_catalog",
    "parse_catalog",
    "evaluate_badges",
    "requirement_met",
]
