"""Saving the document as a timestamped .json file."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from .errors import HostOperationFailure

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DownloadArtifact:
    filename: str
    content: str
    mime_type: str = "application/json"


def download_filename(now: datetime) -> str:
    """``json-data-2024-05-01T12-30-05.json`` for a UTC timestamp."""
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    stamp = now.replace(microsecond=0, tzinfo=None).isoformat()
    stamp = stamp.replace(":", "-").replace(".", "-")
    return f"json-data-{stamp}.json"


def build_download(text: str, now: datetime) -> DownloadArtifact:
    return DownloadArtifact(filename=download_filename(now), content=text)


class DownloadDirectory:
    """Target directory for downloaded documents."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def save(self, artifact: DownloadArtifact) -> Path:
        target = self.path / artifact.filename
        try:
            self.path.mkdir(parents=True, exist_ok=True)
            target.write_bytes(artifact.content.encode("utf-8"))
        except (OSError, UnicodeError) as exc:
            raise HostOperationFailure(f"cannot write {target}: {exc}") from exc
        log.debug("wrote %s (%s)", target, artifact.mime_type)
        return target
