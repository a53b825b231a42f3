"""
Section collectors.

A Collector produces the text of one report section for a given platform.
It dispatches to the platform's probe (see reporter.platform.factory) and
guarantees a string back: a probe that raises is logged and rendered as
an inline diagnostic, so one broken tool never aborts the report.
"""

from __future__ import annotations

import logging
from typing import Callable

from reporter.config import ReportConfig
from reporter.platform.base import Platform, PlatformProbe
from reporter.platform.factory import get_probe

logger = logging.getLogger("reporter.collectors")


class Collector:
    """Collects one section by calling a named PlatformProbe method."""

    def __init__(
        self,
        name: str,
        method: str,
        probe_factory: Callable[[Platform], PlatformProbe] = get_probe,
    ) -> None:
        self.name = name
        self.method = method
        self._probe_factory = probe_factory

    def collect(self, platform: Platform, config: ReportConfig) -> str:
        try:
            probe = self._probe_factory(platform)
            text = getattr(probe, self.method)()
        except Exception as exc:
            logger.warning("%s collection failed on %s: %s", self.name, platform, exc)
            return f"({self.name} collection failed: {exc})"

        if not text:
            return f"{self.name} info not available"
        return text

    def __repr__(self) -> str:
        return f"Collector({self.name!r}, {self.method!r})"


system_overview = Collector("System overview", "system_overview")
cpu = Collector("CPU", "cpu")
memory = Collector("Memory", "memory")
disk = Collector("Disk", "disk")
network = Collector("Network", "network")
processes = Collector("Process", "processes")
containers = Collector("Docker", "containers")
mounts = Collector("Mount", "mounts")
audio = Collector("Audio", "audio")
services = Collector("Service", "services")
temperature = Collector("Temperature", "temperature")
