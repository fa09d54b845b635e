"""Feed view package."""

from subfilter.views.base import (
    FeedDocument,
    FeedItemView,
    FeedNode,
    MutationCallback,
    NodeKind,
    Observation,
    SectionView,
)
from subfilter.views.memory import (
    FeedSnapshot,
    MemoryDocument,
    MemoryItem,
    MemoryPlaceholder,
    MemorySection,
)

__all__ = [
    "NodeKind",
    "FeedNode",
    "FeedItemView",
    "SectionView",
    "FeedDocument",
    "Observation",
    "MutationCallback",
    "MemoryItem",
    "MemoryPlaceholder",
    "MemorySection",
    "MemoryDocument",
    "FeedSnapshot",
]
