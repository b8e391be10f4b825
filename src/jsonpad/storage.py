"""Durable key-value storage for the document and theme."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from .errors import HostOperationFailure

log = logging.getLogger(__name__)

CONTENT_KEY = "content"
THEME_KEY = "theme"


class StateStore:
    """A small JSON file holding string entries.

    The file is read on first access and rewritten whole on every change.
    A missing, unreadable or corrupt file is treated as empty so a bad
    state file never keeps the editor from starting.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data
        data: dict[str, Any] = {}
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raw = ""
        except OSError as exc:
            log.warning("cannot read state file %s: %s", self.path, exc)
            raw = ""
        if raw:
            try:
                loaded = json.loads(raw)
            except json.JSONDecodeError as exc:
                log.warning("ignoring corrupt state file %s: %s", self.path, exc)
            else:
                if isinstance(loaded, dict):
                    data = loaded
        self._data = data
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._write(data)

    def _write(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(
                prefix=".state-", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f)
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except (OSError, UnicodeError) as exc:
            raise HostOperationFailure(f"cannot write {self.path}: {exc}") from exc
        log.debug("state saved to %s", self.path)
