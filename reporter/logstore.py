"""
Report directory management and retention.

The LogStore owns one directory.  The directory listing itself is the
retention index: nothing is cached between calls, every count re-reads
the filesystem.

Retention policy
----------------
Before a new report is written, if the directory holds >= max_count
matching reports, the oldest (count - max_count + 1) are removed so the
total after the write is at most max_count.  Age is modification time;
ties break on path so the order is deterministic.

Only synthesized names (prefix + timestamp + extension) match the
retention pattern.  Reports saved under a user-chosen name are kept.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable

from reporter.config import Config

logger = logging.getLogger("reporter.logstore")

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


@dataclass(frozen=True)
class LogFile:
    path: Path
    mtime: float


class LogStore:
    def __init__(
        self,
        directory: Path | str | None = None,
        prefix: str | None = None,
        extension: str | None = None,
        max_logs: int | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.directory = Path(directory if directory is not None else Config.REPORT_DIR)
        self.prefix = prefix if prefix is not None else Config.REPORT_PREFIX
        self.extension = extension if extension is not None else Config.REPORT_EXTENSION
        self.max_logs = max_logs if max_logs is not None else Config.MAX_LOGS
        self._clock = clock

    @property
    def pattern(self) -> str:
        return f"{self.prefix}*{self.extension}"

    # ── Paths ───────────────────────────────────────────────────
    def resolve_path(self, requested_name: str | None = None) -> Path:
        """
        Return the destination for a new report.

        Without a name, one is synthesized from the prefix and the current
        time (second resolution); a counter suffix keeps two runs in the
        same second apart.  A requested name is reduced to its base name,
        whatever separators it carries, so the result always lies in the
        managed directory.  The extension is appended once.
        """
        name = _base_name(requested_name) if requested_name else ""
        if name:
            if not name.endswith(self.extension):
                name += self.extension
            return self.directory / name

        if requested_name:
            logger.warning("Ignoring unusable report name %r.", requested_name)
        stem = f"{self.prefix}{self._clock().strftime(TIMESTAMP_FORMAT)}"
        path = self.directory / f"{stem}{self.extension}"
        suffix = 0
        while path.exists():
            suffix += 1
            path = self.directory / f"{stem}_{suffix}{self.extension}"
        return path

    def ensure_directory(self) -> None:
        """
        Create the managed directory if needed.

        Raises SystemExit(1) when it cannot be created: without it no
        report can be persisted.
        """
        if self.directory.is_dir():
            return
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Cannot create report directory %s: %s", self.directory, exc)
            raise SystemExit(1)
        logger.info("Created report directory: %s", self.directory)

    # ── Retention ───────────────────────────────────────────────
    def list_reports(self) -> list[LogFile]:
        """Matching report files, oldest first."""
        if not self.directory.is_dir():
            return []
        reports: list[LogFile] = []
        for path in self.directory.glob(self.pattern):
            try:
                if not path.is_file():
                    continue
                reports.append(LogFile(path, path.stat().st_mtime))
            except OSError:
                # Vanished between glob and stat
                continue
        reports.sort(key=lambda f: (f.mtime, str(f.path)))
        return reports

    def count(self) -> int:
        return len(self.list_reports())

    def enforce_retention(self, max_count: int | None = None) -> list[Path]:
        """
        Delete the oldest reports so a new write keeps the total <= max_count.

        Returns the paths actually removed.  Deletion failures are logged
        and skipped.
        """
        if max_count is None:
            max_count = self.max_logs
        if max_count < 1:
            raise ValueError(f"max_count must be >= 1, got {max_count}")

        reports = self.list_reports()
        if len(reports) < max_count:
            return []

        excess = len(reports) - max_count + 1
        logger.info(
            "Found %d report files. Cleaning up %d oldest files...",
            len(reports), excess,
        )
        removed: list[Path] = []
        for report in reports[:excess]:
            try:
                report.path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                logger.warning("Could not remove %s: %s", report.path.name, exc)
                continue
            logger.info("Removed: %s", report.path.name)
            removed.append(report.path)
        return removed

    # ── Persistence ─────────────────────────────────────────────
    def write(self, path: Path, body: str) -> Path:
        """
        Write *body* to *path* atomically.

        The text goes to a hidden temp file in the same directory and is
        renamed over the destination once flushed, so an interrupted run
        never leaves a half-written report under a matching name.
        """
        fd, tmp_name = tempfile.mkstemp(
            dir=str(path.parent), prefix=f".{path.name}.", suffix=".partial",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(body)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
        return path


def _base_name(name: str) -> str:
    # Path.name only splits on the host separator; strip both kinds
    base = name.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1].strip()
    if base in ("", ".", ".."):
        return ""
    return base
