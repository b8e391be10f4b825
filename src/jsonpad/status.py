"""Status line showing validity and document statistics."""

from __future__ import annotations

from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget

from .analyzer import Empty, Invalid, Stats, ValidationOutcome, format_file_size


def status_text(outcome: ValidationOutcome) -> Text:
    """Render *outcome* as one styled line (wrapping for long errors)."""
    stats = outcome.stats
    result = Text()
    if isinstance(outcome, Invalid):
        result.append(f"❌ {outcome.label}", style="bold red")
    elif outcome.is_valid:
        result.append("✅ Valid JSON", style="bold green")
    else:
        result.append("Ready", style="dim")
    result.append("  │  ", style="dim")
    result.append(f"Status: {outcome.status}  ")
    result.append(f"Size: {format_file_size(stats.byte_size)}  ")
    result.append(f"Lines: {stats.line_count:,}  ")
    if outcome.is_valid:
        result.append(f"Objects: {stats.object_count:,}  ")
        result.append(f"Arrays: {stats.array_count:,}")
    else:
        result.append("Objects: -  Arrays: -", style="dim")
    return result


class StatusBar(Widget):
    """Displays the most recent validation outcome."""

    DEFAULT_CSS = """
    StatusBar {
        height: auto;
        max-height: 4;
        padding: 0 1;
        background: $panel;
    }
    """

    outcome: reactive[ValidationOutcome] = reactive(Empty(Stats()))

    def render(self) -> Text:
        return status_text(self.outcome)
