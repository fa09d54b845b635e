"""Section reconciler.

Splits each section's items into a hide set and a keep set under the active
rules and writes the outcome back to the views. Visibility is recomputed on
every pass and never read back as state.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import structlog

from subfilter.classifier import classify
from subfilter.matcher import CompiledRule, rule_hides
from subfilter.models.category import Category
from subfilter.models.rule import Rule
from subfilter.views.base import FeedItemView, NodeKind, SectionView

logger = structlog.get_logger()


@dataclass
class ReconcileResult:
    """Outcome of reconciling one section."""

    hidden: int = 0
    kept: int = 0
    collapsed: bool = False


class SectionSplitter:
    """Accumulates hideable items of one section across rules.

    Items start in ``keep``. Each ``split`` moves the items a rule hides from
    ``keep`` to ``hide``; nothing moves back within a pass.
    """

    def __init__(self, section: SectionView):
        self.keep: list[FeedItemView] = [
            node for node in section.children() if node.node_kind == NodeKind.ITEM
        ]
        self.hide: list[FeedItemView] = []
        self._categories: dict[int, Category] = {id(item): classify(item) for item in self.keep}

    def category_of(self, item: FeedItemView) -> Category:
        return self._categories[id(item)]

    def split(self, rule: CompiledRule) -> int:
        """Move the items hidden by ``rule`` into the hide set.

        Returns:
            Number of items moved.
        """
        if not rule.enabled:
            return 0

        still_kept = []
        for item in self.keep:
            if rule_hides(item, self.category_of(item), rule):
                self.hide.append(item)
            else:
                still_kept.append(item)

        moved = len(self.keep) - len(still_kept)
        self.keep = still_kept
        return moved


def _compiled(rules: Sequence[Rule | CompiledRule]) -> list[CompiledRule]:
    return [
        rule if isinstance(rule, CompiledRule) else CompiledRule.compile(rule) for rule in rules
    ]


def reconcile(section: SectionView, rules: Sequence[Rule | CompiledRule]) -> ReconcileResult:
    """Recompute and apply visibility for one section.

    When every item ends up hidden the section collapses as a unit; the
    primary section also hides its heading so no stray border remains.
    Otherwise the section is shown, hidden items are hidden and kept items
    are explicitly shown again. Placeholders are never touched.

    Reason: a section is collapsed only when something was hidden. A section
    holding nothing but a loading placeholder has no items to keep, and
    collapsing it would hide the spinner that pages in more content.

    Args:
        section: Section to reconcile.
        rules: Rules in evaluation order.

    Returns:
        Counts of hidden and kept items and whether the section collapsed.
    """
    splitter = SectionSplitter(section)
    for rule in _compiled(rules):
        splitter.split(rule)

    result = ReconcileResult(hidden=len(splitter.hide), kept=len(splitter.keep))

    if not splitter.keep and splitter.hide:
        section.set_hidden(True)
        if section.is_primary:
            section.set_heading_hidden(True)
        result.collapsed = True
    else:
        section.set_hidden(False)
        section.set_heading_hidden(False)
        for item in splitter.hide:
            item.set_hidden(True)
        for item in splitter.keep:
            item.set_hidden(False)

    return result


def reconcile_all(
    sections: Iterable[SectionView],
    rules: Sequence[Rule | CompiledRule],
) -> list[ReconcileResult]:
    """Reconcile sections in order, compiling the rules once."""
    compiled = _compiled(rules)
    results = [reconcile(section, compiled) for section in sections]

    logger.debug(
        "Sections reconciled",
        sections=len(results),
        rules=len(compiled),
        hidden=sum(r.hidden for r in results),
        collapsed=sum(1 for r in results if r.collapsed),
    )
    return results


def reset_all(sections: Iterable[SectionView]) -> int:
    """Make every section, heading and item visible again.

    Returns:
        Number of sections reset.
    """
    count = 0
    for section in sections:
        section.set_hidden(False)
        section.set_heading_hidden(False)
        for node in section.children():
            if node.node_kind == NodeKind.ITEM:
                node.set_hidden(False)
        count += 1
    return count
