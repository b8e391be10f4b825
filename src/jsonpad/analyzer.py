"""JSON validation and structural statistics."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import ParseFailure

log = logging.getLogger(__name__)

_SIZE_UNITS = ("bytes", "KB", "MB", "GB")


class ErrorCategory(Enum):
    SYNTAX = "Syntax Error"  # parser reported a line/column
    INVALID = "Invalid JSON"


@dataclass(frozen=True)
class Stats:
    object_count: int = 0
    array_count: int = 0
    byte_size: int = 0
    line_count: int = 0


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of one validation pass over the document."""

    stats: Stats

    status = "Ready"
    is_valid = False


@dataclass(frozen=True)
class Empty(ValidationOutcome):
    pass


@dataclass(frozen=True)
class Valid(ValidationOutcome):
    value: Any = None

    status = "Valid"
    is_valid = True


@dataclass(frozen=True)
class Invalid(ValidationOutcome):
    category: ErrorCategory = ErrorCategory.INVALID
    message: str = ""

    status = "Invalid"

    @property
    def label(self) -> str:
        return f"{self.category.value}: {self.message}"


class _NonStandardConstant(ValueError):
    pass


def _reject_constant(name: str) -> Any:
    raise _NonStandardConstant(f"{name} is not a valid JSON value")


def parse_json(text: str) -> Any:
    """Parse *text* strictly, raising ParseFailure on any rejection.

    ``NaN`` and ``Infinity`` are refused even though ``json`` accepts them
    by default.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ParseFailure(str(e), lineno=e.lineno, colno=e.colno) from e
    except RecursionError as e:
        raise ParseFailure("document is nested too deeply") from e
    except ValueError as e:
        raise ParseFailure(str(e)) from e


def text_stats(text: str) -> tuple[int, int]:
    """Return (UTF-8 byte size, line count) of *text*."""
    if not text:
        return 0, 0
    # surrogatepass: pasted text may hold lone surrogates
    return len(text.encode("utf-8", "surrogatepass")), len(text.split("\n"))


def analyze(value: Any) -> Stats:
    """Count the objects and arrays in a parsed JSON value."""
    objects = 0
    arrays = 0
    stack = [value]
    while stack:
        node = stack.pop()
        if isinstance(node, list):
            arrays += 1
            stack.extend(node)
        elif isinstance(node, dict):
            objects += 1
            stack.extend(node.values())
    return Stats(object_count=objects, array_count=arrays)


def classify(failure: ParseFailure) -> ErrorCategory:
    return ErrorCategory.SYNTAX if failure.has_position else ErrorCategory.INVALID


def validate(text: str) -> ValidationOutcome:
    """Validate *text* as a JSON document.

    Surrounding whitespace is ignored: a blank document is ``Empty``
    rather than ``Invalid``, and the byte and line counts describe the
    trimmed text.
    """
    trimmed = text.strip()
    size, lines = text_stats(trimmed)
    if not trimmed:
        return Empty(Stats())
    try:
        value = parse_json(trimmed)
    except ParseFailure as e:
        log.debug("parse failed: %s", e.message)
        return Invalid(
            Stats(byte_size=size, line_count=lines),
            category=classify(e),
            message=e.message,
        )
    counts = analyze(value)
    stats = Stats(counts.object_count, counts.array_count, size, lines)
    return Valid(stats, value=value)


def format_file_size(size: int) -> str:
    """Human readable size, e.g. ``0 bytes``, ``1.5 KB``."""
    if size <= 0:
        return "0 bytes"
    i = 0
    scaled = float(size)
    while scaled >= 1024 and i < len(_SIZE_UNITS) - 1:
        scaled /= 1024
        i += 1
    text = f"{scaled:.1f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[i]}"
