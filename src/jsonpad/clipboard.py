"""Copying text to the clipboard with one fallback strategy."""

from __future__ import annotations

import logging
from typing import Callable

import pyperclip

from .errors import HostOperationFailure

log = logging.getLogger(__name__)

CopyStrategy = Callable[[str], None]


def system_copy(text: str) -> None:
    """Put *text* on the desktop clipboard through pyperclip."""
    try:
        pyperclip.copy(text)
    except (pyperclip.PyperclipException, OSError, UnicodeError) as exc:
        raise HostOperationFailure(f"system clipboard unavailable: {exc}") from exc


class Clipboard:
    """Tries *primary*, then *fallback* once before giving up."""

    def __init__(self, primary: CopyStrategy, fallback: CopyStrategy | None = None) -> None:
        self.primary = primary
        self.fallback = fallback

    def copy(self, text: str) -> None:
        try:
            self.primary(text)
            return
        except HostOperationFailure as exc:
            if self.fallback is None:
                raise
            log.debug("primary clipboard failed, falling back: %s", exc)
        try:
            self.fallback(text)
        except OSError as exc:
            raise HostOperationFailure(f"clipboard fallback failed: {exc}") from exc
