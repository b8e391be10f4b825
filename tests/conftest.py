"""Shared fixtures: fake timers and a controller wired to temp dirs."""

from datetime import datetime, timezone

import pytest

from jsonpad.clipboard import Clipboard
from jsonpad.controller import EditorController
from jsonpad.debounce import DeferredTask
from jsonpad.download import DownloadDirectory
from jsonpad.errors import HostOperationFailure
from jsonpad.storage import StateStore

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 5, 123000, tzinfo=timezone.utc)


class FakeTimer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.stopped = False

    def stop(self):
        self.stopped = True


class FakeScheduler:
    """Stands in for ``App.set_timer``; timers fire only when told to."""

    def __init__(self):
        self.timers = []

    def __call__(self, delay, callback):
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    def live(self):
        return [t for t in self.timers if not t.stopped]

    def fire(self):
        for timer in self.live():
            timer.stopped = True
            timer.callback()


class RecordingCopy:
    def __init__(self, fail=False):
        self.fail = fail
        self.copied = []

    def __call__(self, text):
        if self.fail:
            raise HostOperationFailure("refused")
        self.copied.append(text)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def primary_copy():
    return RecordingCopy()


@pytest.fixture
def fallback_copy():
    return RecordingCopy()


@pytest.fixture
def store(tmp_path):
    return StateStore(tmp_path / "state.json")


@pytest.fixture
def controller(tmp_path, store, scheduler, primary_copy, fallback_copy):
    ctrl = EditorController(
        store=store,
        clipboard=Clipboard(primary_copy, fallback_copy),
        downloads=DownloadDirectory(tmp_path / "downloads"),
        deferred=DeferredTask(scheduler, 1.0),
        clock=lambda: FIXED_NOW,
    )
    ctrl.start()
    return ctrl
