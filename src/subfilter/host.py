"""Deferred actions for containers that render late.

Bootstrap code often runs before the host has rendered the element it
needs (the button dock, the content root). Such actions raise
``MissingHostError``; they are retried on every mutation batch until one
attempt succeeds, then the observation is dropped.
"""

from collections.abc import Callable

import structlog

from subfilter.exceptions import MissingHostError
from subfilter.views.base import FeedDocument, FeedNode, Observation

logger = structlog.get_logger()


class DeferredAction:
    """An action retried on document mutations until it succeeds."""

    def __init__(self, document: FeedDocument, action: Callable[[], None]):
        self._document = document
        self._action = action
        self._observation: Observation | None = None
        self.done = False
        self.attempts = 0

    @property
    def pending(self) -> bool:
        return self._observation is not None

    def run(self) -> "DeferredAction":
        """Try once now; start watching mutations if the host is missing."""
        if self._attempt():
            return self

        self._observation = self._document.observe(self._retry)
        return self

    def cancel(self) -> None:
        if self._observation is not None:
            self._observation.disconnect()
            self._observation = None

    def _attempt(self) -> bool:
        self.attempts += 1
        try:
            self._action()
        except MissingHostError as e:
            logger.debug("Host missing, action deferred", host=e.host, attempts=self.attempts)
            return False

        self.done = True
        return True

    def _retry(self, nodes: list[FeedNode]) -> None:
        # Several notifications can already be queued when the first retry wins
        if self.done:
            return
        if self._attempt():
            self.cancel()
            logger.info("Deferred action completed", attempts=self.attempts)


def defer_until_available(document: FeedDocument, action: Callable[[], None]) -> DeferredAction:
    """Run ``action`` now, or on the first mutation batch where it succeeds.

    Args:
        document: Document whose mutations trigger retries.
        action: Callable raising ``MissingHostError`` while its host is absent.

    Returns:
        The deferred action; ``done`` tells whether it has run.
    """
    return DeferredAction(document, action).run()
