"""Tests for deferred host actions."""

from subfilter.exceptions import MissingHostError
from subfilter.host import defer_until_available
from subfilter.views.memory import MemoryDocument, MemorySection


class FakeDock:
    """Dock that renders after a number of mutation batches."""

    def __init__(self, ready_after: int):
        self.ready_after = ready_after
        self.calls = 0
        self.installed = 0

    def install(self):
        self.calls += 1
        if self.calls <= self.ready_after:
            raise MissingHostError("button-dock")
        self.installed += 1


def test_runs_immediately_when_host_present():
    document = MemoryDocument()
    dock = FakeDock(ready_after=0)

    deferred = defer_until_available(document, dock.install)

    assert deferred.done is True
    assert deferred.pending is False
    assert document.observer_count == 0
    assert dock.installed == 1


def test_retries_on_mutations_until_host_appears():
    document = MemoryDocument()
    dock = FakeDock(ready_after=2)

    deferred = defer_until_available(document, dock.install)
    assert deferred.done is False
    assert deferred.pending is True

    document.insert(MemorySection())
    assert deferred.done is False

    document.insert(MemorySection())
    assert deferred.done is True
    assert deferred.attempts == 3


def test_disconnects_once_satisfied():
    document = MemoryDocument()
    dock = FakeDock(ready_after=1)

    defer_until_available(document, dock.install)
    document.insert(MemorySection())
    document.insert(MemorySection())
    document.insert(MemorySection())

    assert dock.installed == 1
    assert dock.calls == 2
    assert document.observer_count == 0


def test_cancel_stops_retrying():
    document = MemoryDocument()
    dock = FakeDock(ready_after=10)

    deferred = defer_until_available(document, dock.install)
    deferred.cancel()
    document.insert(MemorySection())

    assert dock.calls == 1
    assert deferred.pending is False
