"""Temporary download lifecycle."""

from __future__ import annotations

import os
import tempfile
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from ..logging import DebugLog
from ..media.media_store import sanitize_filename

logger = structlog.get_logger(__name__)

TEMP_SUFFIX = ".tmp"


@dataclass(slots=True)
class CleanupGuard:
    """Hand out unique scratch files and delete them on every exit path."""

    temp_dir: Path
    debug_log: DebugLog
    log: structlog.stdlib.BoundLogger = field(default_factory=lambda: logger)

    @contextmanager
    def scratch_file(self, filename: str) -> Iterator[Path]:
        path = self.allocate(filename)
        try:
            yield path
        finally:
            self.discard(path)

    def allocate(self, filename: str) -> Path:
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        stem = sanitize_filename(Path(filename).stem)[:40]
        fd, name = tempfile.mkstemp(prefix=f"{stem}-", suffix=TEMP_SUFFIX, dir=self.temp_dir)
        os.close(fd)
        return Path(name)

    def discard(self, path: Path) -> bool:
        """Remove ``path``; failures are logged and reported as ``False``."""
        try:
            path.unlink()
        except FileNotFoundError:
            self.log.warning("upload.temp.already_removed", path=str(path))
            self.debug_log.failure(
                "upload.temp.already_removed", f"Temporary file already removed: {path}"
            )
            return False
        except OSError as exc:
            self.log.warning("upload.temp.remove_failed", path=str(path), error=str(exc))
            self.debug_log.failure(
                "upload.temp.remove_failed", f"Could not delete temporary file {path}: {exc}"
            )
            return False
        self.log.debug("upload.temp.removed", path=str(path))
        return True

    def list_stale(self, max_age_seconds: float, *, now: float | None = None) -> list[Path]:
        """Scratch files older than ``max_age_seconds`` (left by crashed workers)."""
        if not self.temp_dir.exists():
            return []
        reference = now if now is not None else time.time()
        stale: list[Path] = []
        for path in self.temp_dir.glob(f"*{TEMP_SUFFIX}"):
            try:
                modified = path.stat().st_mtime
            except FileNotFoundError:
                continue
            if reference - modified >= max_age_seconds:
                stale.append(path)
        return sorted(stale)

    def sweep_stale(self, max_age_seconds: float, *, now: float | None = None) -> int:
        removed = 0
        for path in self.list_stale(max_age_seconds, now=now):
            if self.discard(path):
                removed += 1
                self.log.info("upload.temp.cleanup.removed", path=str(path))
        return removed
