"""Cron entry point for removing scratch downloads left behind by crashed workers."""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from src.uploader.logging import DebugLog, configure_logging
from src.uploader.upload.cleanup import CleanupGuard

DEFAULT_MAX_AGE_SECONDS = 6 * 60 * 60


@dataclass(slots=True)
class CleanupSummary:
    stale: int
    removed: int
    dry_run: bool


def perform_cleanup(
    *,
    temp_dir: Path,
    max_age_seconds: float,
    dry_run: bool,
    now: float | None = None,
) -> CleanupSummary:
    """Execute cleanup logic and return summary counters."""
    guard = CleanupGuard(temp_dir=temp_dir, debug_log=DebugLog(enabled=True))
    stale = guard.list_stale(max_age_seconds, now=now)
    if dry_run:
        return CleanupSummary(stale=len(stale), removed=0, dry_run=True)
    removed = guard.sweep_stale(max_age_seconds, now=now)
    return CleanupSummary(stale=len(stale), removed=removed, dry_run=False)


def default_temp_dir() -> Path:
    root = Path(os.getenv("MEDIA_ROOT", "media"))
    return Path(os.getenv("UPLOAD_TEMP_DIR", str(root / "tmp")))


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cleanup stale temporary downloads.")
    parser.add_argument("--dry-run", action="store_true", help="Only report counts without deleting files.")
    parser.add_argument(
        "--max-age-seconds",
        type=float,
        default=DEFAULT_MAX_AGE_SECONDS,
        help="Minimum age of a scratch file before it is removed.",
    )
    parser.add_argument("--temp-dir", type=Path, default=None, help="Override UPLOAD_TEMP_DIR.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = parse_args(argv or [])
    summary = perform_cleanup(
        temp_dir=args.temp_dir or default_temp_dir(),
        max_age_seconds=args.max_age_seconds,
        dry_run=args.dry_run,
    )

    if summary.dry_run:
        print(f"cleanup dry-run, temp_stale={summary.stale}", file=sys.stdout)
    else:
        print(f"cleanup done, temp_stale={summary.stale}, temp_removed={summary.removed}", file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
