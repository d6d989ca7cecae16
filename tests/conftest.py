"""Shared test fixtures for pclock tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest


WORK_PARAMS = {"day": 8, "week": 5, "month": 20, "year": 260}


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty working directory with an isolated (missing) user config."""
    root = (tmp_path / "project").resolve()
    root.mkdir()
    monkeypatch.chdir(root)
    monkeypatch.setenv("PCLOCK_CONFIG", str(tmp_path / "config" / "config.yaml"))
    return root


@pytest.fixture
def sample_data() -> dict[str, Any]:
    return {
        "projectName": "test project",
        "projectSettings": {"timeParams": dict(WORK_PARAMS)},
        "tasks": [
            {
                "subject": "First completed task",
                "description": "the first one",
                "begin": "2024-01-01T08:00:00.000Z",
                "end": "2024-01-01T09:00:00.000Z",
            },
            {
                "subject": "Second active task",
                "begin": "2024-01-01T10:00:00.000Z",
                "suspend": ["2024-01-01T10:30:00.000Z", "2024-01-01T12:00:00.000Z"],
                "resume": ["2024-01-01T11:00:00.000Z"],
            },
            {
                "subject": "Third task",
            },
        ],
    }


@pytest.fixture
def write_timesheet(project_dir: Path) -> Callable[..., Path]:
    """Write a timesheet document into the project directory."""

    def _write(data: dict[str, Any], name: str = "test-project") -> Path:
        path = project_dir / f"{name}.pclock.json"
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_timesheet(write_timesheet: Callable[..., Path], sample_data: dict[str, Any]) -> Path:
    return write_timesheet(sample_data)
