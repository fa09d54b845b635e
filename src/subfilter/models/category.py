"""Feed item categories."""

from enum import Enum


class Category(str, Enum):
    """Semantic status bucket of a feed item.

    An item belongs to exactly one category. ``UNCATEGORIZED`` is the
    fallback when no structural cue matches and is never filtered.
    """

    SCHEDULED_STREAM = "scheduled_stream"
    LIVE_STREAM = "live_stream"
    FINISHED_STREAM = "finished_stream"
    SCHEDULED_PREMIERE = "scheduled_premiere"
    LIVE_PREMIERE = "live_premiere"
    OTHER = "other"
    UNCATEGORIZED = "uncategorized"


# Priority order used by the classifier; first match wins
FILTERABLE_CATEGORIES: tuple[Category, ...] = (
    Category.SCHEDULED_STREAM,
    Category.LIVE_STREAM,
    Category.FINISHED_STREAM,
    Category.SCHEDULED_PREMIERE,
    Category.LIVE_PREMIERE,
    Category.OTHER,
)
