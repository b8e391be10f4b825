"""Runtime settings and logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from textual.logging import TextualHandler

STATE_FILENAME = "state.json"


def default_state_file(env: Mapping[str, str] | None = None) -> Path:
    """``$JSONPAD_HOME``, then ``$XDG_CONFIG_HOME/jsonpad``, then ``~/.config/jsonpad``."""
    env = os.environ if env is None else env
    if env.get("JSONPAD_HOME"):
        base = Path(env["JSONPAD_HOME"])
    elif env.get("XDG_CONFIG_HOME"):
        base = Path(env["XDG_CONFIG_HOME"]) / "jsonpad"
    else:
        base = Path.home() / ".config" / "jsonpad"
    return base / STATE_FILENAME


def default_download_dir(env: Mapping[str, str] | None = None) -> Path:
    env = os.environ if env is None else env
    return Path(env.get("JSONPAD_DOWNLOAD_DIR") or Path.cwd())


@dataclass
class Settings:
    state_file: Path
    download_dir: Path
    debounce_delay: float = 1.0
    notify_timeout: float = 3.0
    log_file: Path | None = None
    verbose: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None, **overrides) -> Settings:
        """Build settings from the environment; non-None *overrides* win."""
        settings = cls(
            state_file=default_state_file(env),
            download_dir=default_download_dir(env),
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(settings, key, value)
        return settings


def configure_logging(settings: Settings) -> None:
    """Send log records somewhere that does not draw over the TUI."""
    level = logging.DEBUG if settings.verbose else logging.INFO
    if settings.log_file is not None:
        handler: logging.Handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    else:
        handler = TextualHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    root = logging.getLogger("jsonpad")
    root.setLevel(level)
    root.addHandler(handler)
