"""Models package."""

from subfilter.models.category import FILTERABLE_CATEGORIES, Category
from subfilter.models.navigation import NavigationEvent
from subfilter.models.rule import ALWAYS_MATCH, NEVER_MATCH, Rule, RuleSet

__all__ = [
    "Category",
    "FILTERABLE_CATEGORIES",
    "Rule",
    "RuleSet",
    "NEVER_MATCH",
    "ALWAYS_MATCH",
    "NavigationEvent",
]
