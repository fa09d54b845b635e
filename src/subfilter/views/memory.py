"""In-memory feed tree.

Used by the CLI to replay feed snapshots and by the test-suite. Mirrors how a
rendered feed behaves: sections are appended under the root and every
append is reported to observers as one batch.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from subfilter.views.base import FeedNode, MutationCallback, NodeKind


@dataclass
class MemoryItem:
    """Feed item held in memory."""

    source_name: str
    title: str
    metadata_fragments: list[str] = field(default_factory=list)
    in_progress_marker: str | None = None
    hidden: bool = False
    node_kind: NodeKind = field(default=NodeKind.ITEM, init=False)

    def set_hidden(self, hidden: bool) -> None:
        self.hidden = hidden


@dataclass
class MemoryPlaceholder:
    """Non-content node such as a pagination spinner."""

    hidden: bool = False
    node_kind: NodeKind = field(default=NodeKind.PLACEHOLDER, init=False)


@dataclass
class MemorySection:
    """Section holding items and placeholders."""

    nodes: list[MemoryItem | MemoryPlaceholder] = field(default_factory=list)
    is_primary: bool = False
    hidden: bool = False
    heading_hidden: bool = False
    node_kind: NodeKind = field(default=NodeKind.SECTION, init=False)

    def children(self) -> Sequence[FeedNode]:
        return list(self.nodes)

    def items(self) -> list[MemoryItem]:
        """Content items only."""
        return [n for n in self.nodes if isinstance(n, MemoryItem)]

    def set_hidden(self, hidden: bool) -> None:
        self.hidden = hidden

    def set_heading_hidden(self, hidden: bool) -> None:
        self.heading_hidden = hidden


class MemoryObservation:
    """Subscription handle returned by ``MemoryDocument.observe``."""

    def __init__(self, document: "MemoryDocument", callback: MutationCallback):
        self._document = document
        self._callback = callback

    @property
    def connected(self) -> bool:
        return self._callback in self._document._observers

    def disconnect(self) -> None:
        if self.connected:
            self._document._observers.remove(self._callback)


class MemoryDocument:
    """Feed root holding sections in display order."""

    def __init__(self, sections: list[MemorySection] | None = None):
        self._sections: list[MemorySection] = list(sections or [])
        self._observers: list[MutationCallback] = []

    def sections(self) -> list[MemorySection]:
        return list(self._sections)

    def observe(self, callback: MutationCallback) -> MemoryObservation:
        self._observers.append(callback)
        return MemoryObservation(self, callback)

    def insert(self, *nodes: FeedNode) -> None:
        """Append nodes under the root and notify observers with one batch.

        Only section nodes become part of ``sections()``; other nodes are
        still reported, as a real renderer would.
        """
        batch = list(nodes)
        for node in batch:
            if node.node_kind == NodeKind.SECTION:
                self._sections.append(node)

        # Copy: callbacks may disconnect themselves while being notified
        for callback in list(self._observers):
            callback(batch)

    @property
    def observer_count(self) -> int:
        return len(self._observers)


class SnapshotItem(BaseModel):
    """One entry of a feed snapshot file."""

    placeholder: bool = Field(default=False, description="Pagination spinner entry")
    source: str = ""
    title: str = ""
    metadata: list[str] = Field(default_factory=list)
    badge: str | None = Field(default=None, description="Live/premiering badge label")

    def to_node(self) -> MemoryItem | MemoryPlaceholder:
        if self.placeholder:
            return MemoryPlaceholder()
        return MemoryItem(
            source_name=self.source,
            title=self.title,
            metadata_fragments=list(self.metadata),
            in_progress_marker=self.badge,
        )


class SnapshotSection(BaseModel):
    """One section of a feed snapshot file."""

    label: str = ""
    items: list[SnapshotItem] = Field(default_factory=list)


class FeedSnapshot(BaseModel):
    """Feed description loaded from JSON.

    Example:
        {"sections": [{"label": "Today", "items": [
            {"source": "Alice", "title": "Q&A", "metadata": ["Scheduled for 1/1/30"]}
        ]}]}
    """

    sections: list[SnapshotSection] = Field(default_factory=list)

    def to_sections(self) -> list[MemorySection]:
        """Build memory sections; the first one is primary."""
        return [
            MemorySection(
                nodes=[item.to_node() for item in section.items],
                is_primary=index == 0,
            )
            for index, section in enumerate(self.sections)
        ]

    def to_document(self) -> MemoryDocument:
        return MemoryDocument(self.to_sections())
