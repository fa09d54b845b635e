"""Mutation-driven updater.

The feed renders sections lazily as the user scrolls. Every insertion batch
reported by the document is queued as a ``SectionBatch`` and a single
consumer task reconciles the newly inserted sections only, in arrival order.
Sections reconciled earlier are left alone; rule changes go through
``reconfigure`` instead.
"""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

import structlog

from subfilter.exceptions import SubFilterError
from subfilter.models.rule import Rule
from subfilter.reconciler import ReconcileResult, reconcile_all, reset_all
from subfilter.views.base import FeedDocument, FeedNode, NodeKind, Observation

logger = structlog.get_logger()

RulesProvider = Callable[[], Awaitable[Sequence[Rule]]]


@dataclass(frozen=True)
class SectionBatch:
    """Nodes inserted under the feed root by one mutation notification."""

    nodes: tuple[FeedNode, ...]

    def sections(self) -> list[FeedNode]:
        """Inserted nodes that are sections, in insertion order."""
        return [node for node in self.nodes if node.node_kind == NodeKind.SECTION]


class MutationUpdater:
    """Reconciles sections as they are inserted into the feed."""

    def __init__(
        self,
        document: FeedDocument,
        rules_provider: RulesProvider,
        is_active: Callable[[], bool] = lambda: True,
    ):
        """Initialize the updater.

        Args:
            document: Feed root to observe.
            rules_provider: Async callable returning the current rules.
            is_active: Checked after every rules fetch; batches are dropped
                when it returns False.
        """
        self._document = document
        self._rules_provider = rules_provider
        self._is_active = is_active
        self._queue: asyncio.Queue[SectionBatch] | None = None
        self._observation: Observation | None = None
        self._task: asyncio.Task | None = None
        self._rules_generation = 0

    @property
    def running(self) -> bool:
        return self._observation is not None

    @property
    def rules_generation(self) -> int:
        """Bumped by every ``reconfigure``."""
        return self._rules_generation

    def start(self) -> None:
        """Subscribe to the document and start the consumer task.

        Must be called from a running event loop.
        """
        if self.running:
            return

        self._queue = asyncio.Queue()
        self._observation = self._document.observe(self._on_mutation)
        self._task = asyncio.get_running_loop().create_task(self._consume(self._queue))
        logger.debug("Updater started")

    def stop(self) -> None:
        """Disconnect from the document and cancel the consumer task."""
        if self._observation is not None:
            self._observation.disconnect()
            self._observation = None
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._queue = None
        logger.debug("Updater stopped")

    async def drain(self) -> None:
        """Wait until every queued batch has been processed."""
        if self._queue is not None:
            await self._queue.join()

    def _on_mutation(self, nodes: list[FeedNode]) -> None:
        if self._queue is not None:
            self._queue.put_nowait(SectionBatch(nodes=tuple(nodes)))

    async def _consume(self, queue: asyncio.Queue[SectionBatch]) -> None:
        while True:
            batch = await queue.get()
            try:
                await self.process(batch)
            except SubFilterError as e:
                logger.warning("Batch skipped", error=str(e), nodes=len(batch.nodes))
            finally:
                queue.task_done()

    async def process(self, batch: SectionBatch) -> list[ReconcileResult]:
        """Reconcile the sections of one batch.

        The rules fetch is asynchronous; the engine may have been switched off
        meanwhile, in which case nothing is applied.

        Reason: a ``reconfigure`` that lands during the fetch has already
        reconciled these sections with newer rules. Applying the fetched ones
        would re-hide items the new rules show, so the batch is dropped.

        Returns:
            One result per reconciled section.
        """
        generation = self._rules_generation
        rules = await self._rules_provider()

        if not self._is_active():
            logger.debug("Batch dropped, engine inactive", nodes=len(batch.nodes))
            return []
        if generation != self._rules_generation:
            logger.debug("Batch dropped, rules changed", nodes=len(batch.nodes))
            return []

        return reconcile_all(batch.sections(), rules)

    def reconfigure(self, rules: Sequence[Rule]) -> list[ReconcileResult]:
        """Show everything, then reconcile every section with new rules.

        A full reset is needed because hides are monotonic within a pass
        while the rule list itself may have shrunk.
        """
        self._rules_generation += 1
        sections = self._document.sections()
        reset_all(sections)
        results = reconcile_all(sections, rules)
        logger.info(
            "Rules reapplied",
            rules=len(rules),
            sections=len(results),
            hidden=sum(r.hidden for r in results),
        )
        return results

    async def aclose(self) -> None:
        """Stop and wait for the consumer task to finish."""
        task = self._task
        self.stop()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
