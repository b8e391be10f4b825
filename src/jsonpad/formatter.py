"""Re-serialization and whitespace cleanup of JSON documents."""

from __future__ import annotations

import json
import re
from typing import Any

from .errors import PreconditionNotMet
from .state import MISSING

_WHITESPACE = re.compile(r"\s+")
_STRUCTURAL_PADDING = re.compile(r"\s*([{}\[\],:])\s*")
_LONE_SURROGATE = re.compile(r"[\ud800-\udfff]")


def _require_value(value: Any) -> None:
    if value is MISSING:
        raise PreconditionNotMet("no valid JSON document to serialize")


def _escape_surrogates(text: str) -> str:
    # json.loads keeps unpaired \uXXXX escapes as lone surrogates, which
    # cannot be encoded as UTF-8; they only occur inside string literals.
    return _LONE_SURROGATE.sub(lambda m: f"\\u{ord(m.group()):04x}", text)


def format_json(value: Any) -> str:
    """Pretty-print with a 2-space indent, keeping key order."""
    _require_value(value)
    return _escape_surrogates(json.dumps(value, indent=2, ensure_ascii=False))


def minify_json(value: Any) -> str:
    """Serialize without any insignificant whitespace."""
    _require_value(value)
    return _escape_surrogates(json.dumps(value, separators=(",", ":"), ensure_ascii=False))


def compress_text(text: str) -> str:
    """Strip cosmetic whitespace from raw text without parsing it.

    Whitespace runs become one space, then spaces touching ``{ } [ ] , :``
    are dropped. Whitespace inside string literals is affected too, so the
    result is only as valid as the input.
    """
    collapsed = _WHITESPACE.sub(" ", text)
    return _STRUCTURAL_PADDING.sub(r"\1", collapsed).strip()
