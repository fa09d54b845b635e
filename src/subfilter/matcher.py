"""Rule matcher.

Decides whether a classified item is hidden by a rule. A rule hides an item
when the channel name matches the rule's source pattern and the title matches
both the rule's title pattern and the pattern configured for the item's
category. Rules are additive: any one of them is enough to hide.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from subfilter.classifier import classify
from subfilter.config.settings import settings
from subfilter.models.category import Category
from subfilter.models.rule import CATEGORY_FIELDS, Rule
from subfilter.views.base import FeedItemView


@dataclass(frozen=True)
class CompiledRule:
    """A rule with every pattern compiled once."""

    rule: Rule
    source: re.Pattern[str]
    title: re.Pattern[str]
    categories: dict[Category, re.Pattern[str]]

    @classmethod
    def compile(cls, rule: Rule, flags: int | None = None) -> "CompiledRule":
        """Compile a rule's patterns.

        Args:
            rule: Validated rule.
            flags: ``re`` flags; defaults to the configured ones.
        """
        if flags is None:
            flags = settings.regex_flags
        return cls(
            rule=rule,
            source=re.compile(rule.source, flags),
            title=re.compile(rule.title, flags),
            categories={
                category: re.compile(getattr(rule, field_name), flags)
                for category, field_name in CATEGORY_FIELDS.items()
            },
        )

    @property
    def enabled(self) -> bool:
        return self.rule.enabled


def compile_rules(rules: Iterable[Rule], flags: int | None = None) -> list[CompiledRule]:
    """Compile rules, keeping their order."""
    return [CompiledRule.compile(rule, flags) for rule in rules]


def rule_hides(item: FeedItemView, category: Category, rule: CompiledRule) -> bool:
    """Check a single rule against an already classified item."""
    if not rule.enabled:
        return False

    pattern = rule.categories.get(category)
    if pattern is None:
        # Uncategorized items are never filtered
        return False

    return (
        rule.source.search(item.source_name) is not None
        and rule.title.search(item.title) is not None
        and pattern.search(item.title) is not None
    )


def should_hide(
    item: FeedItemView,
    rules: Sequence[Rule | CompiledRule],
    category: Category | None = None,
) -> bool:
    """Decide whether any enabled rule hides the item.

    Args:
        item: The item to check.
        rules: Rules in evaluation order, raw or compiled.
        category: Precomputed category; classified here when omitted.

    Returns:
        True if at least one rule hides the item.
    """
    if category is None:
        category = classify(item)
    if category is Category.UNCATEGORIZED:
        return False

    for rule in rules:
        compiled = rule if isinstance(rule, CompiledRule) else CompiledRule.compile(rule)
        if rule_hides(item, category, compiled):
            return True
    return False
