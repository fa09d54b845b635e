"""Tests for the press disambiguator."""

import asyncio

from subfilter.gesture import PressDisambiguator

THRESHOLD = 0.05


def _recorder():
    outcomes: list[str] = []
    gesture = PressDisambiguator(
        on_short=lambda: outcomes.append("short"),
        on_long=lambda: outcomes.append("long"),
        long_press_seconds=THRESHOLD,
    )
    return gesture, outcomes


async def test_quick_release_is_short():
    gesture, outcomes = _recorder()

    gesture.press()
    gesture.release()
    await asyncio.sleep(THRESHOLD * 3)

    assert outcomes == ["short"]
    assert gesture.pending is False


async def test_hold_is_long_and_release_adds_nothing():
    gesture, outcomes = _recorder()

    gesture.press()
    await asyncio.sleep(THRESHOLD * 3)
    gesture.release()
    await asyncio.sleep(THRESHOLD)

    assert outcomes == ["long"]


async def test_release_without_press_is_ignored():
    gesture, outcomes = _recorder()

    gesture.release()
    await asyncio.sleep(THRESHOLD * 2)

    assert outcomes == []


async def test_new_press_drops_previous_pending_outcome():
    gesture, outcomes = _recorder()

    gesture.press()
    gesture.press()
    gesture.release()
    await asyncio.sleep(THRESHOLD * 3)

    assert outcomes == ["short"]


async def test_cancel_drops_everything():
    gesture, outcomes = _recorder()

    gesture.press()
    gesture.cancel()
    await asyncio.sleep(THRESHOLD * 3)

    assert outcomes == []
    assert gesture.pending is False


async def test_coroutine_callbacks_run_as_tasks():
    done = asyncio.Event()

    async def on_short():
        done.set()

    async def on_long():
        raise AssertionError("long outcome must not fire")

    gesture = PressDisambiguator(on_short, on_long, long_press_seconds=THRESHOLD)
    gesture.press()
    gesture.release()
    await asyncio.sleep(0.01)
    await gesture.wait_idle()

    assert done.is_set()


async def test_failing_callback_does_not_break_gesture():
    async def boom():
        raise RuntimeError("editor crashed")

    outcomes: list[str] = []
    gesture = PressDisambiguator(boom, lambda: outcomes.append("long"), THRESHOLD)

    gesture.press()
    gesture.release()
    await asyncio.sleep(0.01)
    await gesture.wait_idle()

    gesture.press()
    await asyncio.sleep(THRESHOLD * 3)

    assert outcomes == ["long"]
