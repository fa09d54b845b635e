"""Tests for the lifecycle controller."""

import asyncio

import pytest

from factories import live
from subfilter.exceptions import StorageError
from subfilter.lifecycle import LifecycleController, LifecycleState
from subfilter.models.navigation import NavigationEvent
from subfilter.models.rule import Rule
from subfilter.views.memory import MemorySection

FEED = NavigationEvent(url="https://www.youtube.com/feed/subscriptions")
ELSEWHERE = NavigationEvent(url="https://www.youtube.com/watch?v=abc123")
RULES = [Rule(source="^Bob$", stream_live="^", stream_finished="^")]


@pytest.fixture
def rules_provider():
    async def provide():
        return RULES

    return provide


@pytest.fixture
def controller(sample_document, rules_provider, store):
    return LifecycleController(sample_document, rules_provider, store, enabled_key="enabled")


def _hidden_count(document):
    return sum(
        1 for section in document.sections() for item in section.items() if item.hidden
    ) + sum(1 for section in document.sections() if section.hidden)


async def test_starts_stopped_until_feed_view(controller, sample_document):
    await controller.restore()
    assert controller.state is LifecycleState.STOPPED
    assert _hidden_count(sample_document) == 0

    await controller.on_navigation(FEED)

    assert controller.state is LifecycleState.OBSERVING
    assert controller.updater.running is True
    assert _hidden_count(sample_document) > 0
    await controller.shutdown()


async def test_observes_insertions_after_start(controller, sample_document):
    await controller.on_navigation(FEED)

    section = MemorySection(nodes=[live()])
    sample_document.insert(section)
    await controller.updater.drain()

    assert section.hidden is True
    await controller.shutdown()


async def test_leaving_feed_view_stops_and_resets(controller, sample_document):
    await controller.on_navigation(FEED)

    await controller.on_navigation(ELSEWHERE)

    assert controller.state is LifecycleState.STOPPED
    assert controller.updater.running is False
    assert _hidden_count(sample_document) == 0
    assert controller.enabled is True


async def test_reentering_restores_only_when_enabled(controller):
    await controller.on_navigation(FEED)
    await controller.set_enabled(False)
    await controller.on_navigation(ELSEWHERE)

    await controller.on_navigation(FEED)
    assert controller.state is LifecycleState.STOPPED

    await controller.set_enabled(True)
    assert controller.state is LifecycleState.OBSERVING
    await controller.shutdown()


async def test_disable_resets_everything(controller, sample_document):
    await controller.on_navigation(FEED)

    await controller.set_enabled(False)

    assert controller.state is LifecycleState.STOPPED
    assert _hidden_count(sample_document) == 0


async def test_enabled_flag_is_persisted(sample_document, rules_provider, store):
    first = LifecycleController(sample_document, rules_provider, store, enabled_key="enabled")
    await first.toggle_enabled()
    assert await store.get("enabled") is False

    second = LifecycleController(sample_document, rules_provider, store, enabled_key="enabled")
    await second.restore()
    await second.on_navigation(FEED)

    assert second.enabled is False
    assert second.state is LifecycleState.STOPPED


async def test_disable_during_rules_fetch_keeps_items_visible(sample_document, store):
    release = asyncio.Event()

    async def slow_provider():
        await release.wait()
        return RULES

    controller = LifecycleController(sample_document, slow_provider, store)
    starting = asyncio.create_task(controller.on_navigation(FEED))
    await asyncio.sleep(0)

    await controller.set_enabled(False)
    release.set()
    await starting

    assert controller.state is LifecycleState.STOPPED
    assert controller.updater.running is False
    assert _hidden_count(sample_document) == 0


async def test_apply_rules_only_while_observing(controller, sample_document):
    assert await controller.apply_rules(RULES) == []
    assert _hidden_count(sample_document) == 0

    await controller.on_navigation(FEED)
    results = await controller.apply_rules([])

    assert [r.hidden for r in results] == [0, 0]
    assert _hidden_count(sample_document) == 0
    await controller.shutdown()


async def test_rules_failure_leaves_engine_stopped(sample_document, store):
    async def broken():
        raise StorageError("unreadable")

    controller = LifecycleController(sample_document, broken, store)

    await controller.on_navigation(FEED)

    assert controller.state is LifecycleState.STOPPED
    assert controller.updater.running is False


async def test_rules_applied_during_start_are_not_overridden(sample_document, store):
    release = asyncio.Event()

    async def slow_provider():
        await release.wait()
        return RULES

    controller = LifecycleController(sample_document, slow_provider, store)
    starting = asyncio.create_task(controller.on_navigation(FEED))
    await asyncio.sleep(0)

    await controller.apply_rules([])
    release.set()
    await starting

    assert controller.state is LifecycleState.OBSERVING
    assert controller.updater.running is True
    assert _hidden_count(sample_document) == 0
    await controller.shutdown()
