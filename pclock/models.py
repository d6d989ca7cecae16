"""Typed dataclasses for the pclock timesheet document.

All models use from_dict/to_dict for JSON serialization.
camelCase in JSON is mapped to snake_case in Python.
from_dict expects input that already passed pclock.schema validation;
unknown keys are kept in ``extra`` so a load/save cycle never drops data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _extra(d: dict[str, Any], known: tuple[str, ...]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if k not in known}


# ── Settings ──────────────────────────────────────────────────


@dataclass
class TimeParams:
    """Unit conversion factors used when presenting time spent."""

    day: float  # hours per day
    week: float  # days per week
    month: float  # days per month
    year: float  # days per year

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TimeParams:
        return cls(day=d["day"], week=d["week"], month=d["month"], year=d["year"])

    def to_dict(self) -> dict[str, Any]:
        return {"day": self.day, "week": self.week, "month": self.month, "year": self.year}


@dataclass
class ProjectSettings:
    time_params: TimeParams | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    _KEYS = ("timeParams",)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ProjectSettings:
        tp = d.get("timeParams")
        return cls(
            time_params=TimeParams.from_dict(tp) if tp is not None else None,
            extra=_extra(d, cls._KEYS),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        if self.time_params is not None:
            d["timeParams"] = self.time_params.to_dict()
        d.update(self.extra)
        return d


# ── Tasks ─────────────────────────────────────────────────────


@dataclass
class Task:
    subject: str
    description: str | None = None
    notes: str | None = None
    begin: str | None = None
    suspend: list[str] | None = None
    resume: list[str] | None = None
    end: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    _KEYS = ("subject", "description", "notes", "begin", "suspend", "resume", "end")

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Task:
        suspend = d.get("suspend")
        resume = d.get("resume")
        return cls(
            subject=d["subject"],
            description=d.get("description"),
            notes=d.get("notes"),
            begin=d.get("begin"),
            suspend=list(suspend) if suspend is not None else None,
            resume=list(resume) if resume is not None else None,
            end=d.get("end"),
            extra=_extra(d, cls._KEYS),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"subject": self.subject}
        for key in self._KEYS[1:]:
            value = getattr(self, key)
            if value is not None:
                d[key] = list(value) if isinstance(value, list) else value
        d.update(self.extra)
        return d


# ── Timesheet ─────────────────────────────────────────────────


@dataclass
class TimesheetData:
    project_name: str
    tasks: list[Task] = field(default_factory=list)
    project_settings: ProjectSettings | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    _KEYS = ("projectName", "projectSettings", "tasks")

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TimesheetData:
        settings = d.get("projectSettings")
        return cls(
            project_name=d["projectName"],
            tasks=[Task.from_dict(t) for t in d["tasks"]],
            project_settings=ProjectSettings.from_dict(settings) if settings is not None else None,
            extra=_extra(d, cls._KEYS),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"projectName": self.project_name}
        if self.project_settings is not None:
            d["projectSettings"] = self.project_settings.to_dict()
        d["tasks"] = [t.to_dict() for t in self.tasks]
        d.update(self.extra)
        return d

    @property
    def time_params(self) -> TimeParams | None:
        if self.project_settings is None:
            return None
        return self.project_settings.time_params

    def find_by_subject(self, subject: str) -> Task | None:
        for task in self.tasks:
            if task.subject == subject:
                return task
        return None
