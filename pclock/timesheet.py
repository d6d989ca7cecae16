"""Timesheet file resolution, loading, saving and creation."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pclock.errors import ProjectClockError, TimesheetExistsError, TimesheetNotFoundError
from pclock.fileio import create_json_exclusive, read_text, write_json_atomic
from pclock.models import TimesheetData
from pclock.schema import parse_timesheet
from pclock.workspace import is_timesheet_name, timesheet_path, working_dir

logger = logging.getLogger(__name__)


# ── Resolution ────────────────────────────────────────────────


def resolve_timesheet_path(file: str | Path | None = None, cwd: Path | None = None) -> Path:
    """Return the absolute path of the timesheet to operate on.

    An explicit path (absolute, or relative to ``cwd``) must exist. Without
    one, the directory must contain exactly one ``*.pclock.json`` file.
    """
    directory = working_dir(cwd)

    if file is not None:
        path = Path(file).expanduser()
        if not path.is_absolute():
            path = directory / path
        path = path.resolve()
        if not path.exists():
            raise TimesheetNotFoundError(f"time sheet file '{path}' does not exist")
        logger.debug("using timesheet %s", path)
        return path

    candidates = [p for p in directory.iterdir() if is_timesheet_name(p.name) and p.is_file()]
    if not candidates:
        raise TimesheetNotFoundError("no time sheet file in the directory")
    if len(candidates) > 1:
        raise TimesheetNotFoundError("more than one time sheet file in the directory")

    logger.debug("found timesheet %s in %s", candidates[0].name, directory)
    return candidates[0]


# ── Read / write ──────────────────────────────────────────────


def _reject_constant(name: str) -> float:
    raise ValueError(f"{name} is not a JSON number")


def load_timesheet(file: str | Path | None = None, cwd: Path | None = None) -> TimesheetData:
    """Load and validate a timesheet. Write access is required up front."""
    path = resolve_timesheet_path(file, cwd)

    if not os.access(path, os.R_OK):
        raise ProjectClockError(f"reading of file '{path}' denied (no permission)")
    if not os.access(path, os.W_OK):
        raise ProjectClockError(f"no write permission to file '{path}'")

    # ValueError covers JSONDecodeError, UnicodeDecodeError and NaN/Infinity
    try:
        raw = json.loads(read_text(path), parse_constant=_reject_constant)
    except ValueError as e:
        raise ProjectClockError(f"{path} is not a valid JSON file ({e})") from e

    data = parse_timesheet(raw)
    logger.debug("loaded %s (%d tasks)", path, len(data.tasks))
    return data


def save_timesheet(data: TimesheetData, file: str | Path | None = None, cwd: Path | None = None) -> Path:
    """Rewrite an existing timesheet file in full. Never creates a file."""
    path = resolve_timesheet_path(file, cwd)
    write_json_atomic(path, data.to_dict())
    logger.debug("saved %s (%d tasks)", path, len(data.tasks))
    return path


def create_timesheet(project_name: str, cwd: Path | None = None) -> Path:
    """Create ``<project_name>.pclock.json`` with no tasks. Never overwrites."""
    path = timesheet_path(project_name, cwd)
    data = TimesheetData(project_name=project_name)
    try:
        create_json_exclusive(path, data.to_dict())
    except FileExistsError as e:
        raise TimesheetExistsError(f"timesheet file already exists ('{path}')") from e
    logger.info("created timesheet %s", path)
    return path
