"""
Collector pipeline — sequences the report sections.

Sections run strictly in declaration order on one thread.  Disabling a
section (via its ReportConfig toggle) drops it from the sequence without
reordering the rest; disabled sections leave no header behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol, Sequence

from reporter import collectors
from reporter.config import ReportConfig
from reporter.platform.base import Platform

logger = logging.getLogger("reporter.pipeline")

REPORT_TITLE = "Cross-Platform System Monitor Report"
RULE = "=" * 46


class SupportsCollect(Protocol):
    def collect(self, platform: Platform, config: ReportConfig) -> str: ...


@dataclass(frozen=True)
class Section:
    """One labelled block of the report."""

    name: str
    collector: SupportsCollect
    toggle: str | None = None  # ReportConfig attribute; None = always on

    def enabled(self, config: ReportConfig) -> bool:
        return self.toggle is None or bool(getattr(config, self.toggle))


DEFAULT_SECTIONS: tuple[Section, ...] = (
    Section("SYSTEM OVERVIEW", collectors.system_overview),
    Section("CPU INFORMATION", collectors.cpu),
    Section("MEMORY INFORMATION", collectors.memory),
    Section("DISK USAGE", collectors.disk),
    Section("NETWORK INTERFACES", collectors.network),
    Section("TOP PROCESSES (CPU)", collectors.processes),
    Section("DOCKER INFORMATION", collectors.containers, toggle="include_docker"),
    Section("MOUNTED FILESYSTEMS", collectors.mounts),
    Section("AUDIO SYSTEM", collectors.audio, toggle="include_audio"),
    Section("SYSTEM SERVICES", collectors.services),
    Section("SYSTEM TEMPERATURES", collectors.temperature, toggle="include_temperature"),
)


def section_header(name: str) -> str:
    return f"=== {name} ==="


class CollectorPipeline:
    def __init__(
        self,
        sections: Sequence[Section] = DEFAULT_SECTIONS,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.sections = tuple(sections)
        self._clock = clock

    def enabled_sections(self, config: ReportConfig) -> list[Section]:
        return [s for s in self.sections if s.enabled(config)]

    def banner(self, platform: Platform) -> str:
        return "\n".join([
            REPORT_TITLE,
            f"Generated on: {self._clock().strftime('%a %b %d %H:%M:%S %Y')}",
            f"Operating System: {platform}",
            RULE,
        ])

    def run(self, platform: Platform, config: ReportConfig) -> str:
        """Run every enabled section and return the assembled report body."""
        parts = [self.banner(platform)]
        for section in self.enabled_sections(config):
            logger.debug("Collecting %s", section.name)
            try:
                content = section.collector.collect(platform, config)
            except Exception as exc:
                # Collectors promise not to raise; contain the ones that do
                logger.exception("Section %s raised", section.name)
                content = f"({section.name} collection failed: {exc})"
            parts.append("\n" + section_header(section.name) + "\n" + content.rstrip())
        return "\n".join(parts) + "\n"
