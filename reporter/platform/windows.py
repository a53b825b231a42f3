"""
Windows platform probe.

Covers native Windows as well as Cygwin / MSYS / Git Bash environments.

Tools used:
  - wmic                 CPU, memory, disks, sound devices
  - ipconfig / tasklist  network and processes
  - sc                   running services

wmic is deprecated on recent Windows builds, so every wmic query falls
back to psutil.
"""

from __future__ import annotations

import datetime
import logging
import os

import psutil

from reporter.platform.base import PlatformProbe
from reporter.sources import command, first_available

logger = logging.getLogger("reporter.windows")


class WindowsProbe(PlatformProbe):
    def cpu_cores(self) -> str:
        return os.environ.get("NUMBER_OF_PROCESSORS") or super().cpu_cores()

    def load_average(self) -> str:
        # No load average on Windows; report instantaneous CPU usage instead
        def from_wmic() -> str | None:
            out = command("wmic", "cpu", "get", "loadpercentage", "/value")()
            if not out or "=" not in out:
                return None
            return f"CPU Usage: {out.split('=', 1)[1].strip() or 'N/A'}%"

        return first_available(
            from_wmic,
            lambda: f"CPU Usage: {psutil.cpu_percent(interval=0.5):.0f}%",
            default="Load info not available on Windows",
        )

    def uptime(self) -> str:
        return first_available(
            command("systeminfo", grep="System Boot Time"),
            lambda: f"System Boot Time: {datetime.datetime.fromtimestamp(psutil.boot_time()):%Y-%m-%d %H:%M:%S}",
            default="Uptime: Not available",
        )

    def cpu(self) -> str:
        return first_available(
            command("wmic", "cpu", "get",
                    "Name,NumberOfCores,NumberOfLogicalProcessors,MaxClockSpeed",
                    "/format:list"),
            self.psutil_cpu,
            default="CPU info not available",
        )

    def memory(self) -> str:
        def from_wmic() -> str | None:
            chips = command("wmic", "memorychip", "get", "Capacity,Speed,MemoryType", "/format:list")()
            usage = command("wmic", "OS", "get", "TotalVisibleMemorySize,FreePhysicalMemory", "/format:list")()
            if not chips and not usage:
                logger.debug("wmic memory queries returned nothing — using psutil.")
                return None
            return (
                "=== Physical Memory ===\n" + (chips or "not available")
                + "\n=== Memory Usage ===\n" + (usage or "not available")
            )

        return first_available(
            from_wmic,
            self.psutil_memory,
            default="Memory info not available",
        )

    def disk(self) -> str:
        return first_available(
            command("wmic", "logicaldisk", "get", "Size,FreeSpace,Caption", "/format:list"),
            command("df", "-h"),
            self.psutil_disks,
            default="Disk info not available",
        )

    def network(self) -> str:
        return first_available(
            command("ipconfig", "/all", max_lines=30),
            self.psutil_network,
            default="Network info not available",
        )

    def processes(self) -> str:
        return first_available(
            command("tasklist", "/fo", "table", max_lines=15),
            self.psutil_processes,
            default="Process info not available",
        )

    def mounts(self) -> str:
        return first_available(
            self.psutil_mounts,
            default="Mount info not available",
        )

    def audio(self) -> str:
        return "=== Audio Devices ===\n" + first_available(
            command("wmic", "sounddev", "get", "Name,Status", "/format:list"),
            default="Audio info not available",
        )

    def services(self) -> str:
        return "=== Running Services ===\n" + first_available(
            command("sc", "query", "state=", "running", max_lines=20),
            default="Service info not available",
        )

    def temperature(self) -> str:
        return "Temperature monitoring requires third-party tools on Windows"
