"""
Data sources and fallback chains.

A *source* is a zero-argument callable returning text, or None/"" when it
has nothing to offer (tool missing, command failed, file unreadable).
Probes string sources together with first_available(): sources are tried
lazily in order and the first one producing output wins.

    first_available(
        command("lscpu"),
        read_file("/proc/cpuinfo", max_lines=20),
        default="CPU info not available",
    )
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Optional

from reporter.config import Config

logger = logging.getLogger("reporter.sources")

Source = Callable[[], Optional[str]]


def command_exists(name: str) -> bool:
    return shutil.which(name) is not None


def run_cmd(args: list[str], timeout: float | None = None) -> str | None:
    """
    Run a command and return its stripped stdout.

    Returns None if the tool is missing, times out, or exits non-zero
    with no output.  Never raises.
    """
    if timeout is None:
        timeout = Config.COMMAND_TIMEOUT_SEC
    try:
        result = subprocess.run(
            args,
            capture_output=True, text=True, timeout=timeout,
        )
    except FileNotFoundError:
        logger.debug("%s not found.", args[0])
        return None
    except subprocess.TimeoutExpired:
        logger.warning("%s timed out after %.0f s.", " ".join(args), timeout)
        return None
    except OSError as exc:
        logger.debug("%s failed: %s", " ".join(args), exc)
        return None

    out = result.stdout.strip()
    if result.returncode != 0 and not out:
        logger.debug("%s exited with %d.", " ".join(args), result.returncode)
        return None
    return out


def command(
    *args: str,
    max_lines: int | None = None,
    grep: str | None = None,
) -> Source:
    """Source that runs a command, optionally filtering and truncating lines."""

    def _source() -> str | None:
        out = run_cmd(list(args))
        if not out:
            return None
        return trim(out, max_lines=max_lines, grep=grep)

    return _source


def read_file(path: str | Path, max_lines: int | None = None) -> Source:
    """Source that reads a text file such as /proc/meminfo."""

    def _source() -> str | None:
        try:
            text = Path(path).read_text(encoding="utf-8", errors="ignore")
        except OSError:
            return None
        return trim(text, max_lines=max_lines)

    return _source


def trim(text: str, max_lines: int | None = None, grep: str | None = None) -> str:
    lines = text.strip().splitlines()
    if grep:
        pattern = re.compile(grep, re.IGNORECASE)
        lines = [ln for ln in lines if pattern.search(ln)]
    if max_lines is not None:
        lines = lines[:max_lines]
    return "\n".join(lines)


def first_available(*sources: Source, default: str) -> str:
    """
    Evaluate sources in order and return the first non-empty result.

    A source that raises is treated as absent.  Later sources are not
    evaluated once one succeeds.
    """
    for source in sources:
        try:
            out = source()
        except Exception as exc:
            logger.debug("Source %r failed: %s", source, exc)
            continue
        if out and out.strip():
            return out.rstrip()
    return default
