"""Tests for host collaborators: debounce, storage, clipboard, download."""

from datetime import datetime, timedelta, timezone

import pyperclip
import pytest

from jsonpad import clipboard as clipboard_mod
from jsonpad.clipboard import Clipboard, system_copy
from jsonpad.debounce import DeferredTask
from jsonpad.download import DownloadDirectory, build_download, download_filename
from jsonpad.errors import HostOperationFailure
from jsonpad.storage import StateStore

from conftest import FakeScheduler, RecordingCopy


class TestDeferredTask:
    def test_schedule_uses_delay(self):
        scheduler = FakeScheduler()
        task = DeferredTask(scheduler, 0.25)
        task.schedule(lambda: None)
        assert scheduler.timers[0].delay == 0.25
        assert task.pending

    def test_reschedule_replaces_pending(self):
        scheduler = FakeScheduler()
        task = DeferredTask(scheduler)
        calls = []
        task.schedule(lambda: calls.append(1))
        task.schedule(lambda: calls.append(2))
        assert scheduler.timers[0].stopped
        scheduler.fire()
        assert calls == [2]
        assert not task.pending

    def test_cancel(self):
        scheduler = FakeScheduler()
        task = DeferredTask(scheduler)
        calls = []
        task.schedule(lambda: calls.append(1))
        task.cancel()
        scheduler.fire()
        assert calls == []
        assert not task.pending

    def test_flush_runs_once(self):
        scheduler = FakeScheduler()
        task = DeferredTask(scheduler)
        calls = []
        task.schedule(lambda: calls.append(1))
        task.flush()
        task.flush()
        scheduler.fire()
        assert calls == [1]

    def test_flush_without_pending(self):
        task = DeferredTask(FakeScheduler())
        task.flush()
        assert not task.pending


class TestStateStore:
    def test_missing_file_is_empty(self, tmp_path):
        store = StateStore(tmp_path / "none" / "state.json")
        assert store.get("content") is None
        assert store.get("content", "") == ""

    def test_set_get_persist(self, tmp_path):
        path = tmp_path / "nested" / "state.json"
        StateStore(path).set("content", '{"é": 1}')
        assert StateStore(path).get("content") == '{"é": 1}'
        assert list(path.parent.iterdir()) == [path]

    def test_remove(self, tmp_path):
        path = tmp_path / "state.json"
        store = StateStore(path)
        store.set("content", "x")
        store.set("theme", "dark")
        store.remove("content")
        reloaded = StateStore(path)
        assert reloaded.get("content") is None
        assert reloaded.get("theme") == "dark"

    def test_remove_missing_key_is_noop(self, tmp_path):
        path = tmp_path / "state.json"
        StateStore(path).remove("content")
        assert not path.exists()

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '"text"'])
    def test_corrupt_file_treated_as_empty(self, tmp_path, raw):
        path = tmp_path / "state.json"
        path.write_text(raw, encoding="utf-8")
        store = StateStore(path)
        assert store.get("content") is None
        store.set("theme", "dark")
        assert StateStore(path).get("theme") == "dark"

    def test_write_failure(self, tmp_path):
        blocked = tmp_path / "dir"
        blocked.mkdir()
        with pytest.raises(HostOperationFailure):
            StateStore(blocked).set("theme", "dark")
        assert [p.name for p in tmp_path.iterdir()] == ["dir"]

    def test_lone_surrogate_round_trips(self, tmp_path):
        path = tmp_path / "state.json"
        StateStore(path).set("content", "\ud800")
        assert StateStore(path).get("content") == "\ud800"


class TestClipboard:
    def test_primary_success(self):
        primary, fallback = RecordingCopy(), RecordingCopy()
        Clipboard(primary, fallback).copy("x")
        assert primary.copied == ["x"]
        assert fallback.copied == []

    def test_fallback_after_failure(self):
        primary, fallback = RecordingCopy(fail=True), RecordingCopy()
        Clipboard(primary, fallback).copy("x")
        assert fallback.copied == ["x"]

    def test_both_fail(self):
        with pytest.raises(HostOperationFailure):
            Clipboard(RecordingCopy(fail=True), RecordingCopy(fail=True)).copy("x")

    def test_no_fallback(self):
        with pytest.raises(HostOperationFailure):
            Clipboard(RecordingCopy(fail=True)).copy("x")

    def test_fallback_os_error_wrapped(self):
        def broken(text):
            raise OSError("terminal closed")

        with pytest.raises(HostOperationFailure):
            Clipboard(RecordingCopy(fail=True), broken).copy("x")

    def test_system_copy_uses_pyperclip(self, monkeypatch):
        copied = []
        monkeypatch.setattr(clipboard_mod.pyperclip, "copy", copied.append)
        system_copy("[1]")
        assert copied == ["[1]"]

    def test_system_copy_without_mechanism(self, monkeypatch):
        def unavailable(text):
            raise pyperclip.PyperclipException("could not find a copy/paste mechanism")

        monkeypatch.setattr(clipboard_mod.pyperclip, "copy", unavailable)
        with pytest.raises(HostOperationFailure):
            system_copy("[1]")

    def test_system_copy_failure_falls_back(self, monkeypatch):
        def unavailable(text):
            raise pyperclip.PyperclipException("no clipboard")

        monkeypatch.setattr(clipboard_mod.pyperclip, "copy", unavailable)
        fallback = RecordingCopy()
        Clipboard(system_copy, fallback).copy("[1]")
        assert fallback.copied == ["[1]"]


class TestDownload:
    def test_filename_from_utc(self):
        now = datetime(2024, 5, 1, 12, 30, 5, 999999, tzinfo=timezone.utc)
        assert download_filename(now) == "json-data-2024-05-01T12-30-05.json"

    def test_filename_converts_to_utc(self):
        tz = timezone(timedelta(hours=9))
        now = datetime(2024, 5, 1, 9, 0, 0, tzinfo=tz)
        assert download_filename(now) == "json-data-2024-05-01T00-00-00.json"

    def test_filename_has_no_colons_or_dots(self):
        name = download_filename(datetime(2030, 1, 2, 3, 4, 5, 600000))
        stem = name[: -len(".json")]
        assert ":" not in stem
        assert "." not in stem

    def test_artifact(self):
        artifact = build_download("  [1]\n", datetime(2024, 1, 1))
        assert artifact.content == "  [1]\n"
        assert artifact.mime_type == "application/json"
        assert artifact.filename == "json-data-2024-01-01T00-00-00.json"

    def test_save_creates_directory(self, tmp_path):
        target_dir = tmp_path / "out" / "json"
        artifact = build_download('{"a": "한글"}', datetime(2024, 1, 1))
        path = DownloadDirectory(target_dir).save(artifact)
        assert path == target_dir / artifact.filename
        assert path.read_text(encoding="utf-8") == '{"a": "한글"}'

    def test_unencodable_content_fails_cleanly(self, tmp_path):
        artifact = build_download('"\ud800"', datetime(2024, 1, 1))
        with pytest.raises(HostOperationFailure):
            DownloadDirectory(tmp_path).save(artifact)
        assert list(tmp_path.iterdir()) == []
