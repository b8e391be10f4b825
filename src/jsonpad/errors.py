"""Exceptions raised by jsonpad components."""

from __future__ import annotations


class JsonPadError(Exception):
    """Base exception for jsonpad."""


class EmptyInput(JsonPadError):
    """The document holds nothing but whitespace."""


class ParseFailure(JsonPadError):
    """The document is not valid JSON."""

    def __init__(
        self, message: str, lineno: int | None = None, colno: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.lineno = lineno
        self.colno = colno

    @property
    def has_position(self) -> bool:
        return self.lineno is not None


class PreconditionNotMet(JsonPadError):
    """An operation needs a validated document and there is none."""


class HostOperationFailure(JsonPadError):
    """Clipboard, storage or file access was refused by the environment."""
