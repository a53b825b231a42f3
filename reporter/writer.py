"""
Report writer — orchestrates one report run.

    detect platform → ensure directory → enforce retention
        → collect → persist → report occupancy

Only the directory step can end the run (SystemExit).  Everything after
it is best-effort: collection problems are embedded in the report text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from reporter.config import ReportConfig
from reporter.logstore import LogStore
from reporter.pipeline import CollectorPipeline
from reporter.platform.base import Platform
from reporter.platform.factory import detect_platform

logger = logging.getLogger("reporter.writer")


@dataclass(frozen=True)
class ReportResult:
    path: Path
    occupancy: int
    platform: Platform
    body: str
    removed: tuple[Path, ...] = ()


class ReportWriter:
    def __init__(
        self,
        store: LogStore | None = None,
        pipeline: CollectorPipeline | None = None,
        detector: Callable[[], Platform] = detect_platform,
    ) -> None:
        self.store = store or LogStore()
        self.pipeline = pipeline or CollectorPipeline()
        self._detect = detector

    def run(
        self,
        config: ReportConfig,
        announce: Callable[[Platform, Path, list[Path]], None] | None = None,
    ) -> ReportResult:
        """
        Produce one report.  *announce*, if given, is called with the
        platform, destination and removed reports before collection starts.
        """
        platform = self._detect()

        self.store.ensure_directory()
        removed = self.store.enforce_retention()
        path = self.store.resolve_path(config.output_name)
        logger.info("Report will be saved to: %s", path)
        if announce is not None:
            announce(platform, path, removed)

        body = self.pipeline.run(platform, config)
        self.store.write(path, body)

        occupancy = self.store.count()
        logger.info(
            "Report saved to %s (%d/%d logs retained).",
            path, occupancy, self.store.max_logs,
        )
        return ReportResult(path, occupancy, platform, body, tuple(removed))
