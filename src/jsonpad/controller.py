"""Command handling for the editor.

Every user action is a :class:`Command`. The controller applies it to the
:class:`EditorState` it owns and answers with a :class:`CommandResult`
describing what the UI should show; it never touches widgets itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable

from .analyzer import ValidationOutcome, format_file_size, parse_json
from .clipboard import Clipboard
from .debounce import DeferredTask
from .download import DownloadDirectory, build_download
from .errors import EmptyInput, HostOperationFailure, PreconditionNotMet
from .formatter import compress_text, format_json, minify_json
from .state import EditorState, Theme
from .storage import CONTENT_KEY, THEME_KEY, StateStore

log = logging.getLogger(__name__)

# Bundled sample.json
_DATA_DIR = Path(__file__).parent / "data"

CLEAR_PROMPT = "Are you sure you want to clear the editor? This action cannot be undone."


def load_sample() -> str:
    """Return the built-in sample document, pretty-printed."""
    raw = (_DATA_DIR / "sample.json").read_text(encoding="utf-8")
    return format_json(parse_json(raw))


class Command(Enum):
    FORMAT = "format"
    MINIFY = "minify"
    COMPRESS = "compress"
    COPY = "copy"
    DOWNLOAD = "download"
    CLEAR = "clear"
    LOAD_SAMPLE = "load_sample"
    VALIDATE_DETAILS = "validate_details"
    TOGGLE_THEME = "toggle_theme"


@dataclass(frozen=True)
class Notification:
    message: str
    severity: str = "information"  # or "error"

    @property
    def is_error(self) -> bool:
        return self.severity == "error"


def _ok(message: str) -> Notification:
    return Notification(message)


def _error(message: str) -> Notification:
    return Notification(message, severity="error")


@dataclass
class CommandResult:
    notification: Notification | None = None
    report: str | None = None  # detail text for a popup
    confirm: str | None = None  # question to ask before re-dispatching
    document_changed: bool = False


class EditorController:
    """Owns the editor state and applies commands to it."""

    def __init__(
        self,
        store: StateStore,
        clipboard: Clipboard,
        downloads: DownloadDirectory,
        deferred: DeferredTask,
        *,
        sample: str | None = None,
        clock: Callable[[], datetime] | None = None,
        on_host_error: Callable[[Notification], None] | None = None,
    ) -> None:
        self.state = EditorState()
        self.store = store
        self.clipboard = clipboard
        self.downloads = downloads
        self.deferred = deferred
        self._sample = sample
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.on_host_error = on_host_error

    # -- Lifecycle ---------------------------------------------------------

    def start(self, initial_text: str | None = None) -> ValidationOutcome:
        """Restore the stored theme and document (or *initial_text*)."""
        self.state.theme = Theme.parse(self.store.get(THEME_KEY))
        if initial_text is None:
            stored = self.store.get(CONTENT_KEY, "")
            initial_text = stored if isinstance(stored, str) else ""
        log.debug("starting with %d chars, theme %s", len(initial_text), self.state.theme.value)
        return self.state.set_document(initial_text)

    def shutdown(self) -> None:
        self.deferred.flush()

    # -- Editing -----------------------------------------------------------

    def edit(self, text: str) -> ValidationOutcome:
        """The user changed the document; the save is debounced."""
        outcome = self.state.set_document(text)
        self.deferred.schedule(self._save_pending)
        return outcome

    def _save_pending(self) -> None:
        try:
            self.store.set(CONTENT_KEY, self.state.document)
        except HostOperationFailure as exc:
            log.warning("debounced save failed: %s", exc)
            if self.on_host_error is not None:
                self.on_host_error(_error(f"Could not save document: {exc}"))

    def _save_now(self) -> str | None:
        """Write the document immediately; return an error text on failure."""
        self.deferred.cancel()
        try:
            self.store.set(CONTENT_KEY, self.state.document)
        except HostOperationFailure as exc:
            log.warning("save failed: %s", exc)
            return str(exc)
        return None

    def _replace(self, text: str, success: str) -> CommandResult:
        self.state.set_document(text)
        failure = self._save_now()
        if failure:
            note = _error(f"{success} Could not save document: {failure}")
        else:
            note = _ok(success)
        return CommandResult(notification=note, document_changed=True)

    # -- Commands ----------------------------------------------------------

    def dispatch(self, command: Command, *, confirmed: bool = False) -> CommandResult:
        log.debug("command %s", command.value)
        try:
            return self._run(command, confirmed)
        except (EmptyInput, PreconditionNotMet) as exc:
            return CommandResult(notification=_error(str(exc)))

    def _run(self, command: Command, confirmed: bool) -> CommandResult:
        if command is Command.FORMAT:
            return self._serialize(format_json, "JSON formatted successfully!")
        if command is Command.MINIFY:
            return self._serialize(minify_json, "JSON minified successfully!")
        if command is Command.COMPRESS:
            return self._compress()
        if command is Command.COPY:
            return self._copy()
        if command is Command.DOWNLOAD:
            return self._download()
        if command is Command.CLEAR:
            return self._clear(confirmed)
        if command is Command.LOAD_SAMPLE:
            return self._load_sample()
        if command is Command.VALIDATE_DETAILS:
            return self._validate_details()
        if command is Command.TOGGLE_THEME:
            return self._toggle_theme()
        raise ValueError(f"unknown command: {command!r}")

    def _require_text(self, message: str) -> None:
        if not self.state.document.strip():
            raise EmptyInput(message)

    def _serialize(self, serializer: Callable[[object], str], success: str) -> CommandResult:
        if not self.state.is_valid:
            raise PreconditionNotMet("Please enter valid JSON first!")
        return self._replace(serializer(self.state.value), success)

    def _compress(self) -> CommandResult:
        self._require_text("Please enter some JSON first!")
        return self._replace(
            compress_text(self.state.document), "Whitespace removed successfully!"
        )

    def _copy(self) -> CommandResult:
        self._require_text("No JSON to copy!")
        try:
            self.clipboard.copy(self.state.document)
        except HostOperationFailure as exc:
            log.warning("copy failed: %s", exc)
            return CommandResult(notification=_error("Failed to copy. Please try manually."))
        return CommandResult(notification=_ok("JSON copied to clipboard!"))

    def _download(self) -> CommandResult:
        self._require_text("No JSON to download!")
        artifact = build_download(self.state.document, self._clock())
        try:
            target = self.downloads.save(artifact)
        except HostOperationFailure as exc:
            log.warning("download failed: %s", exc)
            return CommandResult(notification=_error(f"Download failed: {exc}"))
        return CommandResult(notification=_ok(f"JSON file downloaded successfully! ({target})"))

    def _clear(self, confirmed: bool) -> CommandResult:
        self._require_text("Editor is already empty!")
        if not confirmed:
            return CommandResult(confirm=CLEAR_PROMPT)
        self.deferred.cancel()
        self.state.set_document("")
        try:
            self.store.remove(CONTENT_KEY)
        except HostOperationFailure as exc:
            log.warning("cannot remove stored document: %s", exc)
            note = _error(f"Editor cleared! Could not update saved state: {exc}")
        else:
            note = _ok("Editor cleared!")
        return CommandResult(notification=note, document_changed=True)

    def _load_sample(self) -> CommandResult:
        if self._sample is None:
            self._sample = load_sample()
        return self._replace(self._sample, "Sample JSON loaded!")

    def _validate_details(self) -> CommandResult:
        outcome = self.state.set_document(self.state.document)
        if not outcome.is_valid:
            return CommandResult(notification=_error("Please fix JSON errors first!"))
        stats = outcome.stats
        report = (
            "✅ JSON is valid!\n\n"
            "Details:\n"
            f"• Objects: {stats.object_count}\n"
            f"• Arrays: {stats.array_count}\n"
            f"• Size: {format_file_size(stats.byte_size)}"
        )
        return CommandResult(report=report)

    def _toggle_theme(self) -> CommandResult:
        theme = self.state.theme.toggled()
        self.state.theme = theme
        message = f"Switched to {theme.value} mode!"
        try:
            self.store.set(THEME_KEY, theme.value)
        except HostOperationFailure as exc:
            log.warning("cannot store theme: %s", exc)
            return CommandResult(notification=_error(f"{message} Could not save preference: {exc}"))
        return CommandResult(notification=_ok(message))
