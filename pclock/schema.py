"""Structural validation of timesheet documents.

Validators return a list of error strings (empty if valid). Nothing is
coerced: a numeric string is not a number and a bool is not a number.
"""

from __future__ import annotations

import math
from typing import Any

from pclock.errors import InvalidTimesheetError
from pclock.models import TimesheetData
from pclock.workspace import parse_timestamp


TIME_PARAM_KEYS = ("day", "week", "month", "year")


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _is_timestamp(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parse_timestamp(value)
    except ValueError:
        return False
    return True


# ── Settings ──────────────────────────────────────────────────


def validate_time_params(params: Any, where: str = "timeParams") -> list[str]:
    """Validate a timeParams object. All four factors are required."""
    if not isinstance(params, dict):
        return [f"{where} must be an object"]
    errors = []
    for key in TIME_PARAM_KEYS:
        if key not in params:
            errors.append(f"{where} is missing '{key}'")
        elif not _is_number(params[key]):
            errors.append(f"{where}.{key} must be a number")
        elif params[key] <= 0:
            errors.append(f"{where}.{key} must be greater than zero")
    return errors


def validate_project_settings(settings: Any) -> list[str]:
    if not isinstance(settings, dict):
        return ["projectSettings must be an object"]
    if "timeParams" in settings:
        return validate_time_params(settings["timeParams"], "projectSettings.timeParams")
    return []


# ── Tasks ─────────────────────────────────────────────────────


def validate_task(task: Any, index: int | None = None) -> list[str]:
    """Validate a task record and return list of errors (empty if valid)."""
    where = "task" if index is None else f"tasks[{index}]"
    if not isinstance(task, dict):
        return [f"{where} must be an object"]

    errors = []
    subject = task.get("subject")
    if "subject" not in task:
        errors.append(f"{where} is missing 'subject'")
    elif not isinstance(subject, str) or not subject:
        errors.append(f"{where}.subject must be a non-empty string")

    for key in ("description", "notes"):
        if key in task and not isinstance(task[key], str):
            errors.append(f"{where}.{key} must be a string")

    for key in ("begin", "end"):
        if key in task and not _is_timestamp(task[key]):
            errors.append(f"{where}.{key} must be a timestamp")

    for key in ("suspend", "resume"):
        if key not in task:
            continue
        values = task[key]
        if not isinstance(values, list):
            errors.append(f"{where}.{key} must be a list of timestamps")
        elif not all(_is_timestamp(v) for v in values):
            errors.append(f"{where}.{key} must contain only timestamps")

    return errors


# ── Timesheet ─────────────────────────────────────────────────


def validate_timesheet(raw: Any) -> list[str]:
    """Validate a whole timesheet document."""
    if not isinstance(raw, dict):
        return ["the document must be a JSON object"]

    errors = []
    name = raw.get("projectName")
    if "projectName" not in raw:
        errors.append("missing 'projectName'")
    elif not isinstance(name, str) or not name:
        errors.append("projectName must be a non-empty string")

    if "projectSettings" in raw:
        errors.extend(validate_project_settings(raw["projectSettings"]))

    if "tasks" not in raw:
        errors.append("missing 'tasks'")
    elif not isinstance(raw["tasks"], list):
        errors.append("tasks must be a list")
    else:
        for i, task in enumerate(raw["tasks"]):
            errors.extend(validate_task(task, i))

    return errors


def parse_timesheet(raw: Any) -> TimesheetData:
    """Validate raw JSON data and build the typed model."""
    errors = validate_timesheet(raw)
    if errors:
        raise InvalidTimesheetError(f"not a ProjectClockData object ({'; '.join(errors)})")
    return TimesheetData.from_dict(raw)
