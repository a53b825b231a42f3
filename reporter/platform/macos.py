"""
macOS platform probe.

Uses:
  • sysctl / vm_stat for CPU and memory
  • system_profiler for hardware and audio devices
  • launchctl for services
  • iStats (optional, third-party) for temperatures
"""

from __future__ import annotations

import logging

from reporter.platform.base import PlatformProbe
from reporter.sources import command, command_exists, first_available, run_cmd

logger = logging.getLogger("reporter.macos")


class MacOSProbe(PlatformProbe):
    def load_average(self) -> str:
        return first_available(
            command("uptime", grep="load average"),
            default=super().load_average(),
        )

    def uptime(self) -> str:
        out = run_cmd(["uptime"])
        return f"Uptime: {out}" if out else super().uptime()

    def cpu_cores(self) -> str:
        return first_available(
            command("sysctl", "-n", "hw.ncpu"),
            default=super().cpu_cores(),
        )

    def cpu(self) -> str:
        model = first_available(command("sysctl", "-n", "machdep.cpu.brand_string"), default="Unknown")
        lines = [
            f"CPU Model: {model}",
            f"CPU Cores: {self.cpu_cores()}",
            f"CPU Frequency: {self._frequency()}",
        ]
        if command_exists("system_profiler"):
            hardware = first_available(
                command("system_profiler", "SPHardwareDataType", grep=r"Processor|Memory|Cores"),
                default="",
            )
            if hardware:
                lines.append(hardware)
        return "\n".join(lines)

    @staticmethod
    def _frequency() -> str:
        # hw.cpufrequency is absent on Apple Silicon
        raw = run_cmd(["sysctl", "-n", "hw.cpufrequency"])
        try:
            return f"{int(raw) / 1_000_000:.0f} MHz"
        except (TypeError, ValueError):
            logger.debug("hw.cpufrequency unavailable: %r", raw)
            return "Unknown"

    def memory(self) -> str:
        raw = run_cmd(["sysctl", "-n", "hw.memsize"])
        try:
            total = f"Total Memory: {int(raw) / 1024 ** 3:.1f} GB"
        except (TypeError, ValueError):
            return first_available(self.psutil_memory, default="Memory info not available")
        vm_stat = first_available(command("vm_stat"), default="")
        return total + ("\n" + vm_stat if vm_stat else "")

    def disk(self) -> str:
        return first_available(
            command("df", "-h"),
            command("df"),
            self.psutil_disks,
            default="Disk info not available",
        )

    def network(self) -> str:
        return first_available(
            command("ifconfig", grep=r"inet |ether", max_lines=20),
            self.psutil_network,
            default="Network info not available",
        )

    def processes(self) -> str:
        return first_available(
            command("ps", "aux", "-r", max_lines=15),
            self.psutil_processes,
            default="Process info not available",
        )

    def mounts(self) -> str:
        return first_available(
            command("mount", max_lines=30),
            self.psutil_mounts,
            default="Mount info not available",
        )

    def audio(self) -> str:
        return "=== Audio Devices ===\n" + first_available(
            command("system_profiler", "SPAudioDataType", grep=r"Name|Sample Rate"),
            default="Audio info not available",
        )

    def services(self) -> str:
        return "=== Running Services ===\n" + first_available(
            command("launchctl", "list", grep=r"^\d", max_lines=15),
            default="Service info not available",
        )

    def temperature(self) -> str:
        return first_available(
            command("istats"),
            default=(
                "Temperature monitoring requires third-party tools on macOS\n"
                "Install iStats for temperature monitoring: gem install iStats"
            ),
        )
