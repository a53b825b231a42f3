"""
Reporter configuration — loaded from environment / .env file.

Config holds the process-wide settings (where reports live, how many are
kept).  ReportConfig holds the per-run choices made on the command line and
is threaded explicitly through the pipeline and writer.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the directory the reporter is launched from
load_dotenv(Path.cwd() / ".env")


class Config:
    """Reporter configuration."""

    # ── Report storage ──────────────────────────────────────────
    REPORT_DIR: Path = Path(os.getenv("REPORT_DIR", str(Path.cwd() / "logs")))
    REPORT_PREFIX: str = os.getenv("REPORT_PREFIX", "system_report_")
    REPORT_EXTENSION: str = os.getenv("REPORT_EXTENSION", ".log")

    # ── Retention ───────────────────────────────────────────────
    # Maximum number of synthesized reports kept in REPORT_DIR.
    # Oldest reports are removed before a new one is written.
    MAX_LOGS: int = int(os.getenv("MAX_LOGS", "50"))

    # ── External tools ──────────────────────────────────────────
    # Seconds before a hung command is abandoned
    COMMAND_TIMEOUT_SEC: float = float(os.getenv("COMMAND_TIMEOUT_SEC", "10"))

    # ── Diagnostics ─────────────────────────────────────────────
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class ReportConfig:
    """Choices for a single report run, built once from CLI input."""

    output_name: str | None = None
    include_docker: bool = True
    include_audio: bool = True
    include_temperature: bool = True
    verbose: bool = False
