"""Terminal JSON validator and formatter."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, Footer, Header, TextArea

from .clipboard import Clipboard, system_copy
from .config import Settings, configure_logging
from .controller import Command, EditorController, Notification
from .debounce import DeferredTask
from .download import DownloadDirectory
from .screens import ConfirmScreen, ReportScreen
from .status import StatusBar
from .storage import StateStore

# (command, button label)
_BUTTONS = [
    (Command.FORMAT, "Format"),
    (Command.MINIFY, "Minify"),
    (Command.COMPRESS, "Compress"),
    (Command.VALIDATE_DETAILS, "Validate"),
    (Command.COPY, "Copy"),
    (Command.DOWNLOAD, "Download"),
    (Command.LOAD_SAMPLE, "Sample"),
    (Command.CLEAR, "Clear"),
    (Command.TOGGLE_THEME, "Theme"),
]


class JsonPadApp(App):
    """TUI app: a JSON text area with validation status and commands."""

    CSS_PATH = "app.tcss"
    TITLE = "jsonpad"
    ENABLE_COMMAND_PALETTE = False
    BINDINGS = [
        Binding("f2", "command('format')", "Format", priority=True),
        Binding("f3", "command('minify')", "Minify", priority=True),
        Binding("f4", "command('compress')", "Compress", priority=True),
        Binding("f5", "command('validate_details')", "Validate", priority=True),
        Binding("f6", "command('copy')", "Copy", priority=True),
        Binding("ctrl+s", "command('download')", "Download", priority=True),
        Binding("f7", "command('load_sample')", "Sample", priority=True),
        Binding("f8", "command('clear')", "Clear", priority=True),
        Binding("ctrl+t", "command('toggle_theme')", "Theme", priority=True),
    ]

    def __init__(
        self,
        settings: Settings,
        initial_text: str | None = None,
        file_path: str = "",
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.settings = settings
        self.initial_text = initial_text
        self.file_path = file_path
        self.controller = EditorController(
            store=StateStore(settings.state_file),
            clipboard=Clipboard(system_copy, self.copy_to_clipboard),
            downloads=DownloadDirectory(settings.download_dir),
            deferred=DeferredTask(self.set_timer, settings.debounce_delay),
            on_host_error=self.show_notification,
        )

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield TextArea(language="json", show_line_numbers=True, id="editor")
        yield StatusBar(id="status")
        with Horizontal(id="commands"):
            for command, label in _BUTTONS:
                yield Button(label, id=f"cmd-{command.value}")
        yield Footer()

    def on_mount(self) -> None:
        self.controller.start(self.initial_text)
        self.sub_title = self.file_path or str(self.settings.state_file)
        self._apply_theme()
        self._sync_editor()
        self._refresh_status()
        self.query_one("#editor").focus()

    # -- State -> widgets --------------------------------------------------

    def _sync_editor(self) -> None:
        editor = self.query_one("#editor", TextArea)
        if editor.text != self.controller.state.document:
            editor.load_text(self.controller.state.document)

    def _refresh_status(self) -> None:
        self.query_one("#status", StatusBar).outcome = self.controller.state.outcome

    def _apply_theme(self) -> None:
        self.theme = self.controller.state.theme.textual_name

    def show_notification(self, notification: Notification) -> None:
        """Show *notification*, replacing whatever is currently shown."""
        self.clear_notifications()
        self.notify(
            escape(notification.message),
            severity=notification.severity,
            timeout=self.settings.notify_timeout,
        )

    # -- Commands ----------------------------------------------------------

    def apply_command(self, command: Command, *, confirmed: bool = False) -> None:
        result = self.controller.dispatch(command, confirmed=confirmed)
        if result.confirm:
            def on_answer(answer: bool | None) -> None:
                if answer:
                    self.apply_command(command, confirmed=True)

            self.push_screen(ConfirmScreen(result.confirm), on_answer)
            return
        if result.document_changed:
            self._sync_editor()
        if command is Command.TOGGLE_THEME:
            self._apply_theme()
        self._refresh_status()
        if result.report:
            self.push_screen(ReportScreen(result.report))
        if result.notification:
            self.show_notification(result.notification)
        if command is Command.CLEAR and result.document_changed:
            self.query_one("#editor").focus()

    def action_command(self, name: str) -> None:
        self.apply_command(Command(name))

    # -- Event handlers ----------------------------------------------------

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        text = event.text_area.text
        if text != self.controller.state.document:
            self.controller.edit(text)
        self._refresh_status()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("cmd-"):
            self.apply_command(Command(button_id[4:]))


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="jsonpad",
        description="Validate, format and minify JSON in the terminal",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="",
        help="JSON file to open instead of the saved document",
    )
    parser.add_argument("--state-file", type=Path, help="where the document and theme are kept")
    parser.add_argument("--download-dir", type=Path, help="directory for downloaded files")
    parser.add_argument(
        "--debounce",
        type=float,
        dest="debounce_delay",
        help="seconds of inactivity before an edit is saved (default 1.0)",
    )
    parser.add_argument("--log-file", type=Path, help="write log records to this file")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=None,
        help="log debug records",
    )
    args = parser.parse_args()

    settings = Settings.from_env(
        state_file=args.state_file,
        download_dir=args.download_dir,
        debounce_delay=args.debounce_delay,
        log_file=args.log_file,
        verbose=args.verbose,
    )
    configure_logging(settings)

    file_path: str = args.file
    initial_text: str | None = None
    if file_path:
        try:
            initial_text = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            print(f"jsonpad: {exc}", file=sys.stderr)
            sys.exit(1)

    app = JsonPadApp(settings, initial_text=initial_text, file_path=file_path)
    app.run()
    app.controller.shutdown()


if __name__ == "__main__":
    main()
