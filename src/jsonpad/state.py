"""Editor state shared between the controller and the UI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .analyzer import Empty, Stats, ValidationOutcome, Valid, validate


class _Missing:
    """Placeholder for "no validated value"; ``None`` is valid JSON."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class Theme(Enum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def parse(cls, raw: object) -> Theme:
        try:
            return cls(raw)
        except ValueError:
            return cls.LIGHT

    def toggled(self) -> Theme:
        return Theme.DARK if self is Theme.LIGHT else Theme.LIGHT

    @property
    def textual_name(self) -> str:
        return f"textual-{self.value}"


@dataclass
class EditorState:
    """The document, its latest validation outcome and the theme."""

    document: str = ""
    outcome: ValidationOutcome = field(default_factory=lambda: Empty(Stats()))
    theme: Theme = Theme.LIGHT

    def set_document(self, text: str) -> ValidationOutcome:
        """Replace the document and revalidate it in the same step."""
        outcome = validate(text)
        self.document = text
        self.outcome = outcome
        return outcome

    @property
    def is_valid(self) -> bool:
        return self.outcome.is_valid

    @property
    def value(self) -> Any:
        if isinstance(self.outcome, Valid):
            return self.outcome.value
        return MISSING

    @property
    def stats(self) -> Stats:
        return self.outcome.stats
