"""Item classifier.

Infers whether a feed item is a scheduled/live/finished stream, a
scheduled/live premiere or a regular upload from the text cues the feed
renders: the metadata line under the title and the live badge.
"""

import re
from collections.abc import Callable

from subfilter.models.category import FILTERABLE_CATEGORIES, Category
from subfilter.views.base import FeedItemView

Predicate = Callable[[FeedItemView], bool]

# e.g. "3 days ago", "1 hour ago"
RELATIVE_TIME_PATTERN = re.compile(r"^\d+ .+ ago$")


def first_word(text: str) -> str:
    """Return the text before the first space."""
    return text.split(" ")[0]


def _fragment(item: FeedItemView, index: int) -> str | None:
    fragments = item.metadata_fragments
    if len(fragments) > index:
        return fragments[index]
    return None


def _fragment_starts_with(item: FeedItemView, index: int, word: str) -> bool:
    text = _fragment(item, index)
    return text is not None and first_word(text) == word


def _marker_starts_with(item: FeedItemView, word: str) -> bool:
    marker = item.in_progress_marker
    return marker is not None and first_word(marker) == word


def is_scheduled_stream(item: FeedItemView) -> bool:
    return _fragment_starts_with(item, 0, "Scheduled")


def is_live_stream(item: FeedItemView) -> bool:
    return _marker_starts_with(item, "LIVE")


def is_finished_stream(item: FeedItemView) -> bool:
    return _fragment_starts_with(item, 1, "Streamed")


def is_scheduled_premiere(item: FeedItemView) -> bool:
    return _fragment_starts_with(item, 0, "Premieres")


def is_live_premiere(item: FeedItemView) -> bool:
    return _marker_starts_with(item, "PREMIERING")


def is_other(item: FeedItemView) -> bool:
    text = _fragment(item, 1)
    return text is not None and RELATIVE_TIME_PATTERN.match(text) is not None


PREDICATES: dict[Category, Predicate] = {
    Category.SCHEDULED_STREAM: is_scheduled_stream,
    Category.LIVE_STREAM: is_live_stream,
    Category.FINISHED_STREAM: is_finished_stream,
    Category.SCHEDULED_PREMIERE: is_scheduled_premiere,
    Category.LIVE_PREMIERE: is_live_premiere,
    Category.OTHER: is_other,
}


def predicate_for(category: Category) -> Predicate:
    """Return the structural predicate of a filterable category.

    Raises:
        KeyError: For ``Category.UNCATEGORIZED``, which has no predicate.
    """
    return PREDICATES[category]


def classify(item: FeedItemView) -> Category:
    """Classify a feed item.

    Predicates are tried in ``FILTERABLE_CATEGORIES`` order and the first
    match wins. Missing metadata or badge counts as "no match", so this
    never raises for incomplete items.

    Args:
        item: The item to classify.

    Returns:
        Exactly one category; ``Category.UNCATEGORIZED`` when nothing matched.
    """
    for category in FILTERABLE_CATEGORIES:
        if PREDICATES[category](item):
            return category
    return Category.UNCATEGORIZED
