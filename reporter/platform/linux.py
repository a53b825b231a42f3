"""
Linux platform probe.

Uses:
  • util-linux / procps tools (lscpu, free, findmnt, ps)
  • /proc and /sys as fallbacks when the tools are missing
  • ALSA / PulseAudio / JACK for audio, systemd for services
  • psutil as the last structured fallback
"""

from __future__ import annotations

import logging
from pathlib import Path

from reporter.platform.base import PlatformProbe
from reporter.sources import command, command_exists, first_available, read_file, run_cmd

logger = logging.getLogger("reporter.linux")

THERMAL_ROOT = Path("/sys/class/thermal")

_MEDIA_SERVICES = r"audio|sound|pulse|pipewire|jack|docker|media|plex|container"


class LinuxProbe(PlatformProbe):
    # ── Overview ────────────────────────────────────────────────
    def load_average(self) -> str:
        def from_proc() -> str | None:
            fields = Path("/proc/loadavg").read_text().split()
            return f"Load Average: {fields[0]} (1m), {fields[1]} (5m), {fields[2]} (15m)"

        return first_available(
            from_proc,
            command("uptime", grep="load average"),
            default="Load info not available",
        )

    def uptime(self) -> str:
        pretty = run_cmd(["uptime", "-p"]) or run_cmd(["uptime"])
        if pretty:
            return f"Uptime: {pretty}"
        return super().uptime()

    def cpu_cores(self) -> str:
        def from_cpuinfo() -> str | None:
            text = Path("/proc/cpuinfo").read_text()
            count = sum(1 for ln in text.splitlines() if ln.startswith("processor"))
            return str(count) if count else None

        return first_available(
            command("nproc"),
            from_cpuinfo,
            default=super().cpu_cores(),
        )

    # ── Hardware ────────────────────────────────────────────────
    def cpu(self) -> str:
        return first_available(
            command("lscpu"),
            read_file("/proc/cpuinfo", max_lines=20),
            self.psutil_cpu,
            default="CPU info not available",
        )

    def memory(self) -> str:
        return first_available(
            command("free", "-h"),
            read_file("/proc/meminfo", max_lines=10),
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
            command("ip", "addr", "show", grep=r"inet |link/", max_lines=20),
            command("ifconfig", max_lines=30),
            self.psutil_network,
            default="Network info not available",
        )

    def processes(self) -> str:
        return first_available(
            command("ps", "aux", "--sort=-%cpu", max_lines=15),
            command("ps", "aux", max_lines=15),
            self.psutil_processes,
            default="Process info not available",
        )

    def mounts(self) -> str:
        return first_available(
            command("findmnt", "-D", "--real"),
            command("mount", grep=r"^/dev/", max_lines=30),
            self.psutil_mounts,
            default="Mount info not available",
        )

    # ── Audio ───────────────────────────────────────────────────
    def audio(self) -> str:
        """
        Report every audio stack that is installed.

        ALSA, PulseAudio and JACK can coexist, so each present tool gets
        its own block rather than a single fallback chain.
        """
        blocks: list[str] = []

        if command_exists("aplay"):
            blocks.append("=== ALSA Devices ===\n" + first_available(
                command("aplay", "-l"),
                default="No ALSA devices found",
            ))

        if command_exists("pactl"):
            blocks.append("=== PulseAudio Sinks ===\n" + first_available(
                command("pactl", "list", "short", "sinks"),
                default="PulseAudio not running",
            ))
            blocks.append("=== PulseAudio Sources ===\n" + first_available(
                command("pactl", "list", "short", "sources"),
                default="PulseAudio not running",
            ))

        if command_exists("jack_lsp"):
            blocks.append("=== JACK Ports ===\n" + first_available(
                command("jack_lsp"),
                default="JACK not running",
            ))

        if not blocks:
            return "No audio tools found (aplay, pactl, jack_lsp)"
        return "\n\n".join(blocks)

    # ── Services ────────────────────────────────────────────────
    def services(self) -> str:
        if not command_exists("systemctl"):
            return first_available(
                command("service", "--status-all", max_lines=20),
                default="Service info not available",
            )

        related = first_available(
            command("systemctl", "list-units", "--type=service", "--state=running",
                    "--no-pager", grep=_MEDIA_SERVICES),
            default="No matching services found",
        )
        running = first_available(
            command("systemctl", "list-units", "--type=service", "--state=running",
                    "--no-pager", max_lines=15),
            default="Service info not available",
        )
        return (
            "=== Active Services (Audio/Media/Docker Related) ===\n" + related
            + "\n\n=== All Running Services ===\n" + running
        )

    # ── Temperature ─────────────────────────────────────────────
    def temperature(self) -> str:
        return first_available(
            command("sensors"),
            self._thermal_zones,
            self.psutil_temperatures,
            default="Temperature monitoring not available",
        )

    @staticmethod
    def _thermal_zones(root: Path = THERMAL_ROOT) -> str | None:
        """Read millidegree values from /sys/class/thermal/thermal_zone*/temp."""
        lines: list[str] = []
        for temp_file in sorted(root.glob("thermal_zone*/temp")):
            try:
                millis = int(temp_file.read_text().strip())
            except (OSError, ValueError):
                logger.debug("Unreadable thermal zone %s", temp_file)
                continue
            lines.append(f"{temp_file.parent.name}: {millis // 1000}°C")
        return "\n".join(lines) or None
