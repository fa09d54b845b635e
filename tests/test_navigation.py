"""Tests for page identity checks."""

import pytest

from subfilter.models.navigation import NavigationEvent
from subfilter.navigation import is_feed_view


@pytest.mark.parametrize(
    "url",
    [
        "https://www.youtube.com/feed/subscriptions",
        "https://youtube.com/feed/subscriptions",
        "https://www.youtube.com/feed/subscriptions?flow=1",
        "https://www.youtube.com/feed/subscriptions?pbjreload=102",
    ],
)
def test_feed_urls(url):
    assert is_feed_view(NavigationEvent(url=url)) is True


@pytest.mark.parametrize(
    "url",
    [
        "https://www.youtube.com/",
        "https://www.youtube.com/feed/subscriptions?flow=2",
        "https://www.youtube.com/feed/history",
        "https://www.youtube.com/watch?v=abc",
    ],
)
def test_other_urls(url):
    assert is_feed_view(NavigationEvent(url=url)) is False


def test_payload_takes_precedence_over_url():
    event = NavigationEvent(url="https://www.youtube.com/", page_subtype="subscriptions")
    assert is_feed_view(event) is True

    event = NavigationEvent(
        url="https://www.youtube.com/feed/subscriptions",
        page_subtype="home",
    )
    assert is_feed_view(event) is False


def test_browse_id_identifies_feed():
    event = NavigationEvent(url="https://www.youtube.com/", browse_id="FEsubscriptions")

    assert is_feed_view(event) is True


def test_list_layout_is_not_filtered():
    event = NavigationEvent(
        url="https://www.youtube.com/feed/subscriptions",
        page_subtype="subscriptions",
        grid_view=False,
    )

    assert is_feed_view(event) is False
