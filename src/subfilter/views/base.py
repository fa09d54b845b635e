"""Feed view interfaces using Protocol.

The engine never touches a document tree directly. Hosts expose feed items
and sections through these narrow accessors, which keeps classification and
reconciliation testable without a browser.
"""

from collections.abc import Callable, Sequence
from enum import Enum
from typing import Protocol


class NodeKind(str, Enum):
    """Kind of a node found in the feed tree."""

    SECTION = "section"
    ITEM = "item"
    # Pagination spinners and other non-content nodes
    PLACEHOLDER = "placeholder"


class FeedNode(Protocol):
    """Any node the feed tree can hand out."""

    @property
    def node_kind(self) -> NodeKind:
        """What this node is."""
        ...


class FeedItemView(Protocol):
    """Read access to one feed item plus its visibility flag."""

    @property
    def node_kind(self) -> NodeKind:
        ...

    @property
    def source_name(self) -> str:
        """Channel or author name."""
        ...

    @property
    def title(self) -> str:
        """Item title."""
        ...

    @property
    def metadata_fragments(self) -> Sequence[str]:
        """Texts of the metadata line, in display order (may be empty)."""
        ...

    @property
    def in_progress_marker(self) -> str | None:
        """Label text of the live/premiering badge, None when absent."""
        ...

    @property
    def hidden(self) -> bool:
        ...

    def set_hidden(self, hidden: bool) -> None:
        ...


class SectionView(Protocol):
    """A time bucket of feed items ("Today", "This week", ...)."""

    @property
    def node_kind(self) -> NodeKind:
        ...

    @property
    def is_primary(self) -> bool:
        """True for the first section, which carries the shared heading."""
        ...

    @property
    def hidden(self) -> bool:
        ...

    @property
    def heading_hidden(self) -> bool:
        ...

    def children(self) -> Sequence[FeedNode]:
        """Member nodes in display order, placeholders included."""
        ...

    def set_hidden(self, hidden: bool) -> None:
        ...

    def set_heading_hidden(self, hidden: bool) -> None:
        ...


MutationCallback = Callable[[list[FeedNode]], None]


class Observation(Protocol):
    """Handle of an active mutation subscription."""

    def disconnect(self) -> None:
        """Stop delivering notifications. Safe to call twice."""
        ...


class FeedDocument(Protocol):
    """The feed root as exposed by the host renderer."""

    def sections(self) -> Sequence[SectionView]:
        """All currently rendered sections, in display order."""
        ...

    def observe(self, callback: MutationCallback) -> Observation:
        """Subscribe to batches of nodes inserted directly under the feed root.

        Args:
            callback: Called once per batch, with nodes in insertion order.

        Returns:
            Handle used to stop the subscription.
        """
        ...
