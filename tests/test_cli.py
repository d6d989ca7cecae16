"""Tests for cli/pclock.py: commands run in-process through click's CliRunner."""

import json
import os

import click
import pytest
from click.testing import CliRunner

from cli.pclock import cli
from pclock import __version__

BANNER = f"pclock (Project Clock) v{__version__}"


@pytest.fixture
def runner():
    return CliRunner()


def load(path):
    return json.loads(path.read_text(encoding="utf-8"))


def task_named(path, subject):
    return next(t for t in load(path)["tasks"] if t["subject"] == subject)


# ── Global options ────────────────────────────────────────────


def test_no_arguments_prints_banner(runner, project_dir):
    result = runner.invoke(cli, [])
    assert result.exit_code != 0
    assert BANNER in result.output


@pytest.mark.parametrize("flag", ["--version", "-v"])
def test_version(runner, project_dir, flag):
    result = runner.invoke(cli, [flag])
    assert result.exit_code == 0
    assert BANNER in result.output


def test_invalid_user_config(runner, project_dir, tmp_path, sample_timesheet):
    config = tmp_path / "config" / "config.yaml"
    config.parent.mkdir()
    config.write_text("timeParams: 8\n", encoding="utf-8")
    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 1
    assert "invalid configuration file" in result.output


# ── new ───────────────────────────────────────────────────────


def test_new_twice(runner, project_dir):
    result = runner.invoke(cli, ["new", "Acme"])
    assert result.exit_code == 0
    path = project_dir / "Acme.pclock.json"
    assert "created a new timesheet" in result.output
    assert load(path) == {"projectName": "Acme", "tasks": []}

    path.write_text('{"projectName": "Acme", "tasks": [{"subject": "keep"}]}', encoding="utf-8")
    before = path.read_bytes()
    result = runner.invoke(cli, ["new", "Acme"])
    assert result.exit_code == 1
    assert "timesheet file already exists" in result.output
    assert path.read_bytes() == before


def test_new_prompts_with_directory_name(runner, project_dir):
    result = runner.invoke(cli, ["new"], input="\n")
    assert result.exit_code == 0
    assert load(project_dir / "project.pclock.json")["projectName"] == "project"


def test_new_without_name(runner, project_dir):
    (project_dir / "project.pclock.json").write_text("{}", encoding="utf-8")
    result = runner.invoke(cli, ["new"], input="\n")
    assert result.exit_code == 1
    assert "exiting; no project name" in result.output


# ── Reading errors ────────────────────────────────────────────


def test_no_timesheet(runner, project_dir):
    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 1
    assert "An error occurred while reading the timesheet file (no time sheet file in the directory)." in result.output
    assert "Traceback" not in result.output


def test_two_timesheets(runner, project_dir, write_timesheet, sample_data):
    write_timesheet(sample_data, "first")
    write_timesheet(sample_data, "second")
    result = runner.invoke(cli, ["status"])
    assert result.exit_code == 1
    assert "more than one time sheet file in the directory" in result.output


def test_file_option_picks_one_of_many(runner, project_dir, write_timesheet, sample_data):
    write_timesheet(sample_data, "first")
    write_timesheet({"projectName": "other", "tasks": []}, "second")
    result = runner.invoke(cli, ["--file", "second.pclock.json", "status"])
    assert result.exit_code == 0
    assert "Project: 'other'" in result.output


def test_invalid_json(runner, project_dir):
    (project_dir / "x.pclock.json").write_text("{", encoding="utf-8")
    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 1
    assert "is not a valid JSON file" in result.output


def test_invalid_document(runner, project_dir, write_timesheet):
    write_timesheet({"projectName": "x", "projectSettings": {"timeParams": {"day": 8, "week": 5, "month": 20}}, "tasks": []})
    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 1
    assert "not a ProjectClockData object" in result.output


@pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores file permissions")
def test_no_write_permission(runner, project_dir, sample_timesheet):
    os.chmod(sample_timesheet, 0o444)
    try:
        result = runner.invoke(cli, ["list"])
    finally:
        os.chmod(sample_timesheet, 0o644)
    assert result.exit_code == 1
    assert "no write permission" in result.output


def test_missing_write_access_is_reported(runner, project_dir, sample_timesheet, monkeypatch):
    real_access = os.access
    monkeypatch.setattr(os, "access", lambda p, mode: False if mode == os.W_OK else real_access(p, mode))
    before = sample_timesheet.read_bytes()
    result = runner.invoke(cli, ["add", "Fourth task"])
    assert result.exit_code == 1
    assert "An error occurred while reading the timesheet file (no write permission to file" in result.output
    assert sample_timesheet.read_bytes() == before


def test_nan_time_params_are_reported(runner, project_dir):
    (project_dir / "x.pclock.json").write_text(
        '{"projectName": "x", "projectSettings": {"timeParams": '
        '{"day": NaN, "week": 5, "month": 20, "year": 260}}, "tasks": []}',
        encoding="utf-8",
    )
    result = runner.invoke(cli, ["status"])
    assert result.exit_code == 1
    assert "is not a valid JSON file" in result.output
    assert "Traceback" not in result.output


def test_invalid_utf8_is_reported(runner, project_dir):
    (project_dir / "x.pclock.json").write_bytes(b'{"projectName": "\xff", "tasks": []}')
    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 1
    assert "An error occurred while reading the timesheet file (" in result.output
    assert "is not a valid JSON file" in result.output


def test_inconsistent_task(runner, project_dir, write_timesheet):
    write_timesheet({"projectName": "x", "tasks": [{"subject": "bad", "end": "2024-01-01T00:00:00.000Z"}]})
    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 1
    assert "An error occurred while inspecting the timesheet file (invalid task 'bad'; end date without begin date)." in result.output


# ── Reports ───────────────────────────────────────────────────


def test_list(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 0
    assert "Project: 'test project'" in result.output
    assert "First completed task" in result.output
    assert "1h 30min" in result.output
    assert "not started" in result.output
    assert "3 tasks, total time spent: 2h 30min" in result.output


def test_list_not_started(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["list", "--not-started"])
    assert result.exit_code == 0
    assert "Third task" in result.output
    assert "First completed task" not in result.output
    assert "1 task, total time spent: -" in result.output


def test_list_complete(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["list", "--complete"])
    assert "1 task, total time spent: 1h" in result.output
    assert "Second active task" not in result.output


def test_list_empty(runner, project_dir, write_timesheet):
    write_timesheet({"projectName": "empty", "tasks": []})
    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 0
    assert "no tasks to list" in result.output


def test_list_days_breakdown(runner, project_dir, write_timesheet):
    write_timesheet({
        "projectName": "long",
        "projectSettings": {"timeParams": {"day": 8, "week": 5, "month": 20, "year": 260}},
        "tasks": [{"subject": "a", "begin": "2024-01-01T00:00:00.000Z", "end": "2024-01-01T10:00:00.000Z"}],
    })
    result = runner.invoke(cli, ["list"])
    assert "1 task, total time spent: 10h (1d 2h, d=8h)" in result.output


def test_status(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["status"])
    assert result.exit_code == 0
    assert "Tasks (complete/incomplete/total): 1/2/3" in result.output
    assert "1 active task:" in result.output
    assert "Second active task" in result.output
    assert "total time spent: 2h 30min" in result.output


def test_show_with_descriptor(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["show", "First"])
    assert result.exit_code == 0
    assert "First completed task" in result.output
    assert "the first one" in result.output
    assert "completed" in result.output


def test_show_select(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["show"], input="3\n")
    assert result.exit_code == 0
    assert "select the task to show" in result.output
    assert "not started" in result.output


def test_show_no_match(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["show", "nothing like this"])
    assert result.exit_code == 1
    assert "No task(s) matching 'nothing like this' found." in result.output


# ── add / start ───────────────────────────────────────────────


def test_add(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["add", "Fourth task"])
    assert result.exit_code == 0
    assert "created a new task 'Fourth task'" in result.output
    assert load(sample_timesheet)["tasks"][-1] == {"subject": "Fourth task"}


def test_subject_emoji_codes_are_printed_verbatim(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["add", "fix :bug: crash"])
    assert result.exit_code == 0
    assert "created a new task 'fix :bug: crash'" in result.output

    result = runner.invoke(cli, ["remove"], input="4\ny\n")
    assert "  4) fix :bug: crash" in result.output
    assert "\U0001f41b" not in result.output


def test_add_duplicate(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["add", "Third task"])
    assert result.exit_code == 1
    assert "cannot create task 'Third task'; task already exists" in result.output


def test_add_prompt(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["add"], input="Prompted task\n")
    assert result.exit_code == 0
    assert load(sample_timesheet)["tasks"][-1] == {"subject": "Prompted task"}


def test_add_empty_subject(runner, project_dir, sample_timesheet):
    before = sample_timesheet.read_bytes()
    result = runner.invoke(cli, ["add"], input="\n")
    assert result.exit_code == 0
    assert "exiting; no task to create" in result.output
    assert sample_timesheet.read_bytes() == before


def test_start(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["start", "Third"], input="y\n")
    assert result.exit_code == 0
    assert "started task 'Third task'" in result.output
    assert task_named(sample_timesheet, "Third task")["begin"].endswith("Z")


def test_start_declined(runner, project_dir, sample_timesheet):
    before = sample_timesheet.read_bytes()
    result = runner.invoke(cli, ["start", "Third"], input="n\n")
    assert result.exit_code == 0
    assert "Nothing to start." in result.output
    assert sample_timesheet.read_bytes() == before


def test_start_cancelled_prompt(runner, project_dir, sample_timesheet):
    before = sample_timesheet.read_bytes()
    result = runner.invoke(cli, ["start", "Third"], input="")
    assert result.exit_code == 0
    assert "exiting; user force closed the process" in result.output
    assert sample_timesheet.read_bytes() == before


def test_start_already_started(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["start", "First completed task"])
    assert result.exit_code == 1
    assert "task 'First completed task' has already been started" in result.output


def test_start_new_task(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["start", "Brand new"], input="y\n\n")
    assert result.exit_code == 0
    task = task_named(sample_timesheet, "Brand new")
    assert "begin" in task


# ── stop / suspend / resume ───────────────────────────────────


def test_stop_suspended_task(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["stop", "Second"], input="y\n")
    assert result.exit_code == 0
    assert "Stopped task 'Second active task'." in result.output
    task = task_named(sample_timesheet, "Second active task")
    assert len(task["resume"]) == 2
    assert task["end"] == task["resume"][-1]


def test_stop_unstarted(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["stop", "Third task"])
    assert result.exit_code == 1
    assert "has not been started" in result.output


def test_stop_nothing_active(runner, project_dir, write_timesheet):
    write_timesheet({"projectName": "x", "tasks": [{"subject": "idle"}]})
    result = runner.invoke(cli, ["stop"])
    assert result.exit_code == 1
    assert "no active tasks found; nothing to stop" in result.output


def test_stop_empty_timesheet(runner, project_dir, write_timesheet):
    write_timesheet({"projectName": "x", "tasks": []})
    result = runner.invoke(cli, ["stop"])
    assert result.exit_code == 1
    assert "Timesheet is empty, nothing to stop." in result.output


def test_suspend_completed_task(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["suspend", "First"], input="y\n")
    assert result.exit_code == 0
    task = task_named(sample_timesheet, "First completed task")
    assert "end" not in task
    assert task["suspend"][0] == "2024-01-01T09:00:00.000Z"
    assert len(task["suspend"]) == 2
    assert task["resume"] == [task["suspend"][1]]


def test_suspend_without_descriptor_skips_completed(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["suspend"])
    assert result.exit_code == 1
    assert "no suspendable tasks found; nothing to suspend" in result.output


def test_suspend_include_stopped(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["suspend", "--include-stopped"], input="y\n")
    assert result.exit_code == 0
    assert "Suspended task 'First completed task'." in result.output


def test_suspend_already_suspended(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["suspend", "Second active task"])
    assert result.exit_code == 1
    assert "the task has already been suspended" in result.output


def test_resume(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["resume", "Second"], input="y\n")
    assert result.exit_code == 0
    task = task_named(sample_timesheet, "Second active task")
    assert len(task["resume"]) == 2


def test_resume_select_none(runner, project_dir, sample_timesheet):
    before = sample_timesheet.read_bytes()
    result = runner.invoke(cli, ["resume"], input="3\n")
    assert result.exit_code == 0
    assert "Nothing to resume." in result.output
    assert sample_timesheet.read_bytes() == before


def test_resume_unstarted(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["resume", "Third task"])
    assert result.exit_code == 1
    assert "the task hasn't even been started yet" in result.output


# ── edit ──────────────────────────────────────────────────────


def test_edit_add_notes(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["edit", "First", "--notes", "  some notes "], input="y\n")
    assert result.exit_code == 0
    assert "Adding a notes field to task 'First completed task'." in result.output
    assert task_named(sample_timesheet, "First completed task")["notes"] == "some notes"


def test_edit_replace_subject(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["edit", "Third", "--subject", "Renamed task"], input="y\ny\n")
    assert result.exit_code == 0
    assert "Replacing the subject of task 'Third task'." in result.output
    assert load(sample_timesheet)["tasks"][2]["subject"] == "Renamed task"


def test_edit_replace_declined(runner, project_dir, sample_timesheet):
    before = sample_timesheet.read_bytes()
    result = runner.invoke(cli, ["edit", "First", "--description", "other"], input="y\nn\n")
    assert result.exit_code == 0
    assert "Nothing to edit." in result.output
    assert sample_timesheet.read_bytes() == before


def test_edit_subject_conflict(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["edit", "Third", "--subject", "First completed task"], input="y\ny\n")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_edit_with_editor(runner, project_dir, sample_timesheet, monkeypatch):
    calls = []

    def fake_edit(text=None, **kwargs):
        calls.append(text)
        return "Edited description\n"

    monkeypatch.setattr(click, "edit", fake_edit)
    result = runner.invoke(cli, ["edit", "First"], input="y\nn\ny\nn\n")
    assert result.exit_code == 0
    assert calls == ["the first one"]
    assert task_named(sample_timesheet, "First completed task")["description"] == "Edited description"


def test_edit_subject_with_editor_removes_newlines(runner, project_dir, sample_timesheet, monkeypatch):
    monkeypatch.setattr(click, "edit", lambda text=None, **kwargs: "  New subject\n")
    result = runner.invoke(cli, ["edit", "Third"], input="y\ny\nn\nn\n")
    assert result.exit_code == 0
    assert load(sample_timesheet)["tasks"][2]["subject"] == "New subject"


# ── remove / reorder ──────────────────────────────────────────


def test_remove_matching(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["remove", "Third"], input="y\n")
    assert result.exit_code == 0
    assert "Removed 1 task." in result.output
    assert [t["subject"] for t in load(sample_timesheet)["tasks"]] == ["First completed task", "Second active task"]


def test_remove_declined(runner, project_dir, sample_timesheet):
    before = sample_timesheet.read_bytes()
    result = runner.invoke(cli, ["remove", "Third"], input="n\n")
    assert result.exit_code == 0
    assert "Nothing to remove." in result.output
    assert sample_timesheet.read_bytes() == before


def test_remove_no_match(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["remove", "nothing like this"])
    assert result.exit_code == 1
    assert "Nothing to remove." in result.output


def test_remove_selection(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["remove"], input="1, 3\ny\n")
    assert result.exit_code == 0
    assert "Removed 2 tasks." in result.output
    assert [t["subject"] for t in load(sample_timesheet)["tasks"]] == ["Second active task"]


def test_remove_only_task(runner, project_dir, write_timesheet):
    path = write_timesheet({"projectName": "x", "tasks": [{"subject": "only"}]})
    result = runner.invoke(cli, ["remove"], input="y\n")
    assert result.exit_code == 0
    assert "There is only one task on the timesheet" in result.output
    assert load(path)["tasks"] == []


def test_reorder(runner, project_dir, sample_timesheet):
    result = runner.invoke(cli, ["reorder"], input="1 1 2\n3 1 2\n")
    assert result.exit_code == 0
    assert "given more than once" in result.output
    assert [t["subject"] for t in load(sample_timesheet)["tasks"]] == [
        "Third task",
        "First completed task",
        "Second active task",
    ]


def test_reorder_keep_order(runner, project_dir, sample_timesheet):
    before = sample_timesheet.read_bytes()
    result = runner.invoke(cli, ["reorder"], input="\n")
    assert result.exit_code == 0
    assert "Nothing to reorder." in result.output
    assert sample_timesheet.read_bytes() == before


def test_reorder_not_enough_tasks(runner, project_dir, write_timesheet):
    write_timesheet({"projectName": "x", "tasks": [{"subject": "only"}]})
    result = runner.invoke(cli, ["reorder"])
    assert result.exit_code == 1
    assert "There are not enough tasks to reorder." in result.output
