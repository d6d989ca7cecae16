"""Working directory, timestamps, path helpers for pclock."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

TIMESHEET_SUFFIX = ".pclock.json"


def working_dir(cwd: Path | None = None) -> Path:
    """Directory where timesheets are looked for (the process cwd by default)."""
    if cwd is None:
        cwd = Path.cwd()
    return Path(cwd).expanduser().resolve()


def is_timesheet_name(name: str) -> bool:
    return name.endswith(TIMESHEET_SUFFIX)


def timesheet_file_name(project_name: str) -> str:
    return f"{project_name}{TIMESHEET_SUFFIX}"


def timesheet_path(project_name: str, cwd: Path | None = None) -> Path:
    return working_dir(cwd) / timesheet_file_name(project_name)


def config_path() -> Path:
    """Location of the user configuration file.

    PCLOCK_CONFIG wins, then $XDG_CONFIG_HOME/pclock/config.yaml,
    then ~/.config/pclock/config.yaml.
    """
    explicit = os.environ.get("PCLOCK_CONFIG")
    if explicit:
        return Path(explicit).expanduser().resolve()
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base).expanduser().resolve() / "pclock" / "config.yaml"


# ── Timestamps ────────────────────────────────────────────────


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a Z suffix: 2024-01-01T00:00:00.000Z"""
    utc = dt.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_timestamp() -> str:
    return format_timestamp(now_utc())


def parse_timestamp(value: str) -> datetime:
    """Parse a timezone-aware ISO-8601 timestamp. Raises ValueError otherwise."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        raise ValueError(f"timestamp has no timezone: {value!r}")
    return dt
