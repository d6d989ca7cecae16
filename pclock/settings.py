"""User configuration (config.yaml) and effective time parameters."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from pclock.errors import ProjectClockError
from pclock.fileio import read_yaml
from pclock.models import TimeParams, TimesheetData
from pclock.schema import validate_time_params
from pclock.time_period import CALENDAR
from pclock.workspace import config_path

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class UserSettings:
    time_params: TimeParams | None = None
    log_level: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> UserSettings:
        tp = d.get("timeParams")
        level = d.get("logLevel")
        return cls(
            time_params=TimeParams.from_dict(tp) if tp is not None else None,
            log_level=level.upper() if level is not None else None,
        )


def validate_user_settings(data: Any) -> list[str]:
    if not isinstance(data, dict):
        return ["the configuration must be a mapping"]
    errors = []
    if "timeParams" in data:
        errors.extend(validate_time_params(data["timeParams"]))
    if "logLevel" in data:
        level = data["logLevel"]
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            errors.append(f"logLevel must be one of {', '.join(LOG_LEVELS)}")
    return errors


def load_user_settings(path: Path | None = None) -> UserSettings:
    """Load the user configuration. A missing or empty file gives defaults."""
    if path is None:
        path = config_path()
    try:
        data = read_yaml(path)
    except yaml.YAMLError as e:
        raise ProjectClockError(f"invalid configuration file '{path}' ({e})") from e
    if data is None:
        logger.debug("no user configuration at %s", path)
        return UserSettings()

    errors = validate_user_settings(data)
    if errors:
        raise ProjectClockError(f"invalid configuration file '{path}' ({'; '.join(errors)})")
    logger.debug("loaded user configuration from %s", path)
    return UserSettings.from_dict(data)


def effective_time_params(data: TimesheetData | None, user: UserSettings | None = None) -> TimeParams:
    """Timesheet settings win over the user configuration, which wins over calendar time."""
    if data is not None and data.time_params is not None:
        return data.time_params
    if user is not None and user.time_params is not None:
        return user.time_params
    return CALENDAR
