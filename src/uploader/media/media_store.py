"""Permanent upload storage on disk."""

from __future__ import annotations

import os
import re
import shutil
import unicodedata
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from ..config import MediaPaths

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_REPEATED_DASHES = re.compile(r"-{2,}")
MAX_UNIQUE_ATTEMPTS = 10_000


def sanitize_filename(filename: str) -> str:
    """Reduce a remote filename to a safe ASCII basename."""
    normalized = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    cleaned = _WHITESPACE.sub("-", normalized.strip())
    cleaned = _UNSAFE_CHARS.sub("", cleaned)
    cleaned = _REPEATED_DASHES.sub("-", cleaned)
    cleaned = cleaned.strip(".-_")
    return cleaned or "unnamed-file"


@dataclass(slots=True)
class MediaStore:
    """Lay out uploads as ``YYYY/MM/<name>`` and expose their public URLs."""

    paths: MediaPaths
    uploads_url: str

    def subdir_for(self, moment: datetime | None = None) -> str:
        current = moment or datetime.now(timezone.utc)
        return f"{current:%Y}/{current:%m}"

    def ensure_structure(self, subdir: str) -> Path:
        directory = self.paths.uploads / subdir
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def reserve_unique_path(self, subdir: str, filename: str) -> Path:
        """Atomically create an empty placeholder with a free name."""
        directory = self.ensure_structure(subdir)
        stem = Path(filename).stem
        suffix = Path(filename).suffix
        for attempt in range(MAX_UNIQUE_ATTEMPTS):
            candidate = filename if attempt == 0 else f"{stem}-{attempt}{suffix}"
            target = directory / candidate
            try:
                fd = os.open(target, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
            except FileExistsError:
                continue
            os.close(fd)
            return target
        raise FileExistsError(f"Could not find a free name for '{filename}' in {directory}")

    def store_file(self, source: Path, filename: str, *, moment: datetime | None = None) -> Path:
        """Copy ``source`` into the uploads tree and return the stored path."""
        subdir = self.subdir_for(moment)
        target = self.reserve_unique_path(subdir, filename)
        try:
            shutil.copyfile(source, target)
        except OSError:
            target.unlink(missing_ok=True)
            raise
        return target

    def relative_path(self, path: Path) -> str:
        return path.relative_to(self.paths.uploads).as_posix()

    def absolute_path(self, relative_path: str) -> Path:
        return self.paths.uploads / relative_path

    def url_for(self, relative_path: str) -> str:
        return f"{self.uploads_url}/{relative_path}"
