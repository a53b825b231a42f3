"""
FreeBSD platform probe.

Uses sysctl for hardware, ifconfig for addresses, service(8) for
enabled services and ACPI thermal zones for temperatures.
"""

from __future__ import annotations

from reporter.platform.base import PlatformProbe
from reporter.sources import command, first_available, run_cmd


class FreeBSDProbe(PlatformProbe):
    def uptime(self) -> str:
        out = run_cmd(["uptime"])
        return f"Uptime: {out}" if out else super().uptime()

    def cpu_cores(self) -> str:
        return first_available(
            command("sysctl", "-n", "hw.ncpu"),
            default=super().cpu_cores(),
        )

    def cpu(self) -> str:
        model = first_available(command("sysctl", "-n", "hw.model"), default="Unknown")
        clock = first_available(command("sysctl", "-n", "hw.clockrate"), default="")
        return "\n".join([
            f"CPU Model: {model}",
            f"CPU Cores: {self.cpu_cores()}",
            f"CPU Frequency: {clock + ' MHz' if clock else 'Unknown'}",
        ])

    def memory(self) -> str:
        return first_available(
            command("free", "-h"),
            self.psutil_memory,
            default="Memory info not available",
        )

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
            command("ps", "aux", max_lines=15),
            self.psutil_processes,
            default="Process info not available",
        )

    def mounts(self) -> str:
        return first_available(
            command("mount"),
            self.psutil_mounts,
            default="Mount info not available",
        )

    def services(self) -> str:
        return "=== Running Services ===\n" + first_available(
            command("service", "-e"),
            default="Service info not available",
        )

    def temperature(self) -> str:
        return first_available(
            command("sysctl", "hw.acpi.thermal"),
            default="Temperature info not available",
        )
