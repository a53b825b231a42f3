"""
Platform model and the base class for platform-specific probes.

Each platform module (Linux, macOS, Windows, FreeBSD) subclasses
PlatformProbe and overrides the sections it knows how to collect.
"""

from __future__ import annotations

import datetime
import enum
import os
import platform as _platform
import socket
import time
from dataclasses import dataclass

import psutil

from reporter.sources import command, command_exists, first_available, run_cmd


class PlatformKind(str, enum.Enum):
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    FREEBSD = "freebsd"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Platform:
    """Detected host platform.  Set once at start-up, read by every collector."""

    kind: PlatformKind
    distro: str = ""

    def __str__(self) -> str:
        return f"{self.kind.value} ({self.distro or self.kind.value})"


def not_available(section: str) -> str:
    return f"{section} not available on this platform"


def _gib(n: float) -> str:
    return f"{n / 1024 ** 3:.1f} GB"


class PlatformProbe:
    """
    Contract that every OS-specific probe fulfils.

    One method per report section, each returning plain text.  The base
    implementation reports the section as unavailable, so a probe only
    overrides what its platform supports.  Docker is queried through its
    CLI on every platform and lives here.

    Methods may raise; the Collector boundary turns exceptions into
    inline diagnostics.
    """

    def __init__(self, platform: Platform) -> None:
        self.platform = platform

    # ── Overview ────────────────────────────────────────────────
    def system_overview(self) -> str:
        lines = [
            f"Operating System: {self.platform}",
            f"Hostname: {self.hostname()}",
            f"Date/Time: {datetime.datetime.now().strftime('%a %b %d %H:%M:%S %Y')}",
            f"CPU Cores: {self.cpu_cores()}",
            self.load_average(),
        ]
        uptime = self.uptime()
        if uptime:
            lines.append(uptime)
        return "\n".join(lines)

    def hostname(self) -> str:
        return socket.gethostname() or _platform.node() or "Unknown"

    def cpu_cores(self) -> str:
        count = psutil.cpu_count(logical=True) or os.cpu_count()
        return str(count) if count else "Unknown"

    def load_average(self) -> str:
        try:
            load1, load5, load15 = psutil.getloadavg()
        except (AttributeError, OSError):
            return "Load info not available"
        return f"Load Average: {load1:.2f} (1m), {load5:.2f} (5m), {load15:.2f} (15m)"

    def uptime(self) -> str:
        boot = datetime.datetime.fromtimestamp(psutil.boot_time())
        return f"Uptime: since {boot:%Y-%m-%d %H:%M:%S}"

    # ── Sections overridden per platform ────────────────────────
    def cpu(self) -> str:
        return not_available("CPU info")

    def memory(self) -> str:
        return not_available("Memory info")

    def disk(self) -> str:
        return not_available("Disk info")

    def network(self) -> str:
        return not_available("Network info")

    def processes(self) -> str:
        return not_available("Process info")

    def mounts(self) -> str:
        return not_available("Mount info")

    def audio(self) -> str:
        return not_available("Audio info")

    def services(self) -> str:
        return not_available("Service info")

    def temperature(self) -> str:
        return not_available("Temperature monitoring")

    # ── Containers (docker CLI, any platform) ───────────────────
    def containers(self) -> str:
        if not command_exists("docker"):
            return "Docker is not installed"
        if run_cmd(["docker", "ps", "-q"]) is None:
            return "Docker is installed but not running or permission denied"

        lines = ["=== Running Containers ==="]
        lines.append(first_available(
            command("docker", "ps", "--format",
                    "table {{.Names}}\t{{.Image}}\t{{.Status}}\t{{.Ports}}"),
            default="No running containers",
        ))
        lines.append("\n=== Container Resource Usage ===")
        lines.append(first_available(
            command("docker", "stats", "--no-stream", "--format",
                    "table {{.Name}}\t{{.CPUPerc}}\t{{.MemUsage}}\t{{.NetIO}}\t{{.BlockIO}}"),
            default="Container stats not available",
        ))
        lines.append("\n=== Docker System Info ===")
        lines.append(first_available(
            command("docker", "system", "df"),
            default="Docker system info not available",
        ))
        return "\n".join(lines)

    # ── psutil fallbacks shared by the platform probes ──────────
    @staticmethod
    def psutil_cpu() -> str:
        freq = psutil.cpu_freq()
        lines = [
            f"CPU Model: {_platform.processor() or 'Unknown'}",
            f"Physical Cores: {psutil.cpu_count(logical=False) or 'Unknown'}",
            f"Logical Cores: {psutil.cpu_count(logical=True) or 'Unknown'}",
        ]
        if freq:
            lines.append(f"CPU Frequency: {freq.current:.0f} MHz")
        return "\n".join(lines)

    @staticmethod
    def psutil_memory() -> str:
        vm = psutil.virtual_memory()
        swap = psutil.swap_memory()
        return "\n".join([
            f"Total Memory: {_gib(vm.total)}",
            f"Available: {_gib(vm.available)} ({100 - vm.percent:.1f}% free)",
            f"Used: {_gib(vm.used)}",
            f"Swap: {_gib(swap.used)} used of {_gib(swap.total)}",
        ])

    @staticmethod
    def psutil_disks() -> str:
        lines = [f"{'Filesystem':<24} {'Size':>10} {'Used':>10} {'Avail':>10} {'Use%':>5}  Mounted on"]
        for part in psutil.disk_partitions(all=False):
            try:
                usage = psutil.disk_usage(part.mountpoint)
            except (PermissionError, OSError):
                continue
            lines.append(
                f"{part.device:<24} {_gib(usage.total):>10} {_gib(usage.used):>10} "
                f"{_gib(usage.free):>10} {usage.percent:>4.0f}%  {part.mountpoint}"
            )
        return "\n".join(lines) if len(lines) > 1 else ""

    @staticmethod
    def psutil_mounts() -> str:
        return "\n".join(
            f"{p.device} on {p.mountpoint} type {p.fstype} ({p.opts})"
            for p in psutil.disk_partitions(all=False)
        )

    @staticmethod
    def psutil_network(max_lines: int = 20) -> str:
        lines: list[str] = []
        for name, addrs in psutil.net_if_addrs().items():
            for addr in addrs:
                if addr.address:
                    # AF_LINK is a bare int on some platforms
                    family = getattr(addr.family, "name", str(addr.family))
                    lines.append(f"{name}: {family} {addr.address}")
        return "\n".join(lines[:max_lines])

    @staticmethod
    def psutil_processes(limit: int = 14, interval: float = 0.2) -> str:
        """
        Top processes by CPU over a short sampling window.

        psutil's first cpu_percent() reading per process is always 0.0, so
        every process is primed, then read again after *interval* seconds.
        """
        procs = list(psutil.process_iter(attrs=["pid", "name", "username"]))
        for proc in procs:
            try:
                proc.cpu_percent(None)
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                pass
        time.sleep(interval)

        rows: list[tuple[float, float, dict]] = []
        for proc in procs:
            try:
                cpu = proc.cpu_percent(None)
                mem = proc.memory_percent()
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
            rows.append((cpu or 0.0, mem or 0.0, proc.info))
        rows.sort(key=lambda row: row[0], reverse=True)

        lines = [f"{'PID':>7} {'%CPU':>6} {'%MEM':>6}  {'USER':<16} COMMAND"]
        for cpu, mem, info in rows[:limit]:
            lines.append(
                f"{info['pid']:>7} {cpu:>6.1f} {mem:>6.1f}  "
                f"{(info.get('username') or '-')[:16]:<16} {info.get('name') or '?'}"
            )
        return "\n".join(lines)

    @staticmethod
    def psutil_temperatures() -> str:
        sensors = getattr(psutil, "sensors_temperatures", None)
        if sensors is None:
            return ""
        lines: list[str] = []
        for chip, entries in (sensors() or {}).items():
            for entry in entries:
                label = entry.label or chip
                lines.append(f"{chip}/{label}: {entry.current:.0f}°C")
        return "\n".join(lines)
