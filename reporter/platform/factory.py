"""
Platform detection and the probe registry.

detect_platform() runs once per report; get_probe() maps the detected
platform to its PlatformProbe subclass.  Supporting a new platform means
adding a PlatformKind, a probe module, and one PROBES entry.
"""

from __future__ import annotations

import logging
import platform as _platform
from pathlib import Path

from reporter.platform.base import Platform, PlatformKind, PlatformProbe
from reporter.platform.freebsd import FreeBSDProbe
from reporter.platform.linux import LinuxProbe
from reporter.platform.macos import MacOSProbe
from reporter.platform.windows import WindowsProbe

logger = logging.getLogger("reporter.platform")

OS_RELEASE = Path("/etc/os-release")

PROBES: dict[PlatformKind, type[PlatformProbe]] = {
    PlatformKind.LINUX: LinuxProbe,
    PlatformKind.MACOS: MacOSProbe,
    PlatformKind.WINDOWS: WindowsProbe,
    PlatformKind.FREEBSD: FreeBSDProbe,
}


def _kind_for(system: str) -> PlatformKind:
    system = system.strip().lower()
    if system.startswith("linux"):
        return PlatformKind.LINUX
    if system.startswith("darwin"):
        return PlatformKind.MACOS
    if system.startswith(("windows", "cygwin", "msys", "mingw", "win32")):
        return PlatformKind.WINDOWS
    if system.startswith("freebsd"):
        return PlatformKind.FREEBSD
    return PlatformKind.UNKNOWN


def read_distro_id(os_release: Path = OS_RELEASE) -> str:
    """Return the ID= value from os-release, or "unknown"."""
    try:
        text = os_release.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return "unknown"
    for line in text.splitlines():
        line = line.strip()
        if line.startswith("ID="):
            return line.split("=", 1)[1].strip().strip('"').strip("'") or "unknown"
    return "unknown"


def detect_platform(
    system: str | None = None,
    os_release: Path = OS_RELEASE,
) -> Platform:
    """
    Detect the host OS family (and the distro on Linux).

    Never raises: unrecognised kernels map to PlatformKind.UNKNOWN.
    """
    if system is None:
        try:
            system = _platform.system()
        except Exception as exc:
            logger.debug("platform.system() failed: %s", exc)
            system = ""

    kind = _kind_for(system or "")
    if kind is PlatformKind.LINUX:
        detected = Platform(kind, read_distro_id(os_release))
    else:
        detected = Platform(kind, kind.value)

    if kind is PlatformKind.UNKNOWN:
        logger.warning("Unrecognised platform %r — sections will report as unavailable.", system)
    else:
        logger.info("Detected %s.", detected)
    return detected


def get_probe(platform: Platform) -> PlatformProbe:
    """Return the probe for *platform*, or the base probe when unsupported."""
    probe_cls = PROBES.get(platform.kind, PlatformProbe)
    return probe_cls(platform)
