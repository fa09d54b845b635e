"""Page identity checks.

The engine only runs on the subscriptions feed in grid layout. Hosts report
navigations with a structured payload; the URL is the fallback when the
payload carries no page type.
"""

import re

from subfilter.models.navigation import NavigationEvent

FEED_URL_PATTERN = re.compile(r"^.*youtube.com/feed/subscriptions(\?flow=1|\?pbjreload=\d+)?$")
FEED_PAGE_SUBTYPE = "subscriptions"
FEED_BROWSE_ID = "FEsubscriptions"


def is_feed_view(event: NavigationEvent) -> bool:
    """Return True if the navigation targets the filterable feed view."""
    if not event.grid_view:
        return False
    if event.page_subtype is not None or event.browse_id is not None:
        return event.page_subtype == FEED_PAGE_SUBTYPE or event.browse_id == FEED_BROWSE_ID
    return FEED_URL_PATTERN.match(event.url) is not None
