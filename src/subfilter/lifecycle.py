"""Lifecycle controller.

Owns the Stopped/Observing state of the engine. The engine observes only
while it is enabled and the current page is the feed view; leaving the view
stops it regardless of the enabled flag.
"""

from collections.abc import Sequence
from enum import Enum

import structlog

from subfilter.config.settings import settings
from subfilter.exceptions import SubFilterError
from subfilter.models.navigation import NavigationEvent
from subfilter.models.rule import Rule
from subfilter.navigation import is_feed_view
from subfilter.reconciler import ReconcileResult, reconcile_all, reset_all
from subfilter.storage.base import RuleStore
from subfilter.updater import MutationUpdater, RulesProvider
from subfilter.views.base import FeedDocument

logger = structlog.get_logger()


class LifecycleState(str, Enum):
    STOPPED = "stopped"
    OBSERVING = "observing"


class LifecycleController:
    """Starts and stops observation in response to on/off and navigation."""

    def __init__(
        self,
        document: FeedDocument,
        rules_provider: RulesProvider,
        store: RuleStore,
        enabled_key: str | None = None,
    ):
        """Initialize the controller in the Stopped state.

        Args:
            document: Feed root.
            rules_provider: Async callable returning the current rules.
            store: Store persisting the enabled flag.
            enabled_key: Store key of the enabled flag.
        """
        self._document = document
        self._rules_provider = rules_provider
        self._store = store
        self._enabled_key = enabled_key or settings.enabled_key
        self._state = LifecycleState.STOPPED
        # Bumped on every transition; stale fetch continuations compare against it
        self._generation = 0
        self._enabled = True
        self._on_feed_view = False
        self._updater = MutationUpdater(document, rules_provider, is_active=self.is_observing)

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def on_feed_view(self) -> bool:
        return self._on_feed_view

    @property
    def updater(self) -> MutationUpdater:
        return self._updater

    def is_observing(self) -> bool:
        return self._state is LifecycleState.OBSERVING

    async def restore(self) -> None:
        """Load the persisted enabled flag and settle the state."""
        try:
            self._enabled = bool(await self._store.get(self._enabled_key, True))
        except SubFilterError as e:
            logger.warning("Could not read enabled flag, assuming enabled", error=str(e))
            self._enabled = True
        await self._sync()

    async def set_enabled(self, enabled: bool) -> None:
        """Switch the engine on or off and persist the choice."""
        self._enabled = enabled
        try:
            await self._store.set(self._enabled_key, enabled)
        except SubFilterError as e:
            logger.warning("Could not persist enabled flag", enabled=enabled, error=str(e))
        await self._sync()

    async def toggle_enabled(self) -> bool:
        """Flip the enabled flag.

        Returns:
            The new flag value.
        """
        await self.set_enabled(not self._enabled)
        return self._enabled

    async def on_navigation(self, event: NavigationEvent) -> None:
        """Track page identity changes."""
        self._on_feed_view = is_feed_view(event)
        logger.debug("Navigation", url=event.url, feed_view=self._on_feed_view)
        await self._sync()

    async def apply_rules(self, rules: Sequence[Rule]) -> list[ReconcileResult]:
        """Re-filter the whole feed with new rules while observing."""
        if not self.is_observing():
            return []
        return self._updater.reconfigure(rules)

    async def shutdown(self) -> None:
        """Stop observing and wait for the consumer task to exit."""
        await self._updater.aclose()
        if self.is_observing():
            self._stop()

    async def _sync(self) -> None:
        wanted = self._enabled and self._on_feed_view
        if wanted and self._state is LifecycleState.STOPPED:
            await self._start()
        elif not wanted and self._state is LifecycleState.OBSERVING:
            self._stop()

    async def _start(self) -> None:
        """Enter Observing: fetch rules, reconcile, then start the updater.

        Reason: the rules fetch yields to the loop, so a stop (or a stop and
        restart) can land before it returns. Each transition bumps the
        generation; a start that finds a newer generation leaves the page to
        the transition that superseded it.
        """
        self._state = LifecycleState.OBSERVING
        self._generation += 1
        generation = self._generation
        rules_generation = self._updater.rules_generation

        try:
            rules = await self._rules_provider()
        except SubFilterError as e:
            logger.warning("Rules unavailable, filtering inactive", error=str(e))
            if generation == self._generation:
                self._state = LifecycleState.STOPPED
            return

        # Stopped (or stopped and restarted) while the rules were loading
        if generation != self._generation or not self.is_observing():
            logger.debug("Stale start discarded", generation=generation)
            return

        if self._updater.rules_generation == rules_generation:
            results = reconcile_all(self._document.sections(), rules)
        else:
            # Newer rules were applied while these loaded
            results = []
        self._updater.start()
        logger.info(
            "Filtering started",
            rules=len(rules),
            sections=len(results),
            hidden=sum(r.hidden for r in results),
        )

    def _stop(self) -> None:
        self._state = LifecycleState.STOPPED
        self._generation += 1
        self._updater.stop()
        count = reset_all(self._document.sections())
        logger.info("Filtering stopped", sections_reset=count)
