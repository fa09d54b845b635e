"""Test configuration and fixtures."""

import pytest

from factories import finished, live, premiere, premiering, scheduled, upload
from subfilter.models.rule import Rule
from subfilter.storage.memory import MemoryRuleStore
from subfilter.views.memory import MemoryDocument, MemoryItem, MemoryPlaceholder, MemorySection


@pytest.fixture
def sample_items():
    """One item per category, uncategorized last."""
    return {
        "scheduled": scheduled(),
        "live": live(),
        "finished": finished(),
        "premiere": premiere(),
        "premiering": premiering(),
        "upload": upload(),
        "unknown": MemoryItem("Erin", "Mystery", []),
    }


@pytest.fixture
def sample_document():
    """Two sections: a mixed primary section and a Bob-only section."""
    today = MemorySection(
        nodes=[scheduled(), live(), upload(), MemoryPlaceholder()],
        is_primary=True,
    )
    this_week = MemorySection(nodes=[live(title="Morning stream"), finished()])
    return MemoryDocument([today, this_week])


@pytest.fixture
def hide_bob_live():
    """Rule hiding every live stream of Bob."""
    return Rule(source="^Bob$", stream_live="^")


@pytest.fixture
def store():
    return MemoryRuleStore()
