#!/usr/bin/env python3
"""pclock (Project Clock): clock the time spent on a project's tasks.

Commands read the ``*.pclock.json`` timesheet of the current directory (or
the one given with --file), change it and write it back in full.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable

import click
from rich.logging import RichHandler

from cli import prompts, render
from pclock import __version__
from pclock.errors import InvalidTaskError, NothingToDo, ProjectClockError, PromptCancelled
from pclock.models import Task, TimeParams, TimesheetData
from pclock.settings import UserSettings, effective_time_params, load_user_settings
from pclock.task_state import (
    TaskStateType,
    filter_tasks,
    find_by_descriptor,
    is_active,
    is_completed,
    is_unstarted,
    resume_task,
    start_task,
    stop_task,
    suspend_task,
)
from pclock.timesheet import create_timesheet, load_timesheet, save_timesheet
from pclock.times import TaskTimes, calculate_times
from pclock.workspace import now_timestamp, timesheet_path, working_dir

logger = logging.getLogger(__name__)

BANNER = f"pclock (Project Clock) v{__version__}"


# ── Plumbing ──────────────────────────────────────────────────


@dataclass
class AppState:
    file: str | None = None
    settings: UserSettings | None = None


def configure_logging(level: str | int) -> None:
    """Send library log records to stderr through rich."""
    handler = RichHandler(console=render.err_console, show_time=False, show_path=False)
    for name in ("pclock", "cli"):
        log = logging.getLogger(name)
        log.handlers.clear()
        log.addHandler(handler)
        log.setLevel(level)


def command_boundary(func: Callable[..., Any]) -> Callable[..., Any]:
    """Map expected failures and cancellations to messages and exit codes."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        ctx = click.get_current_context()
        try:
            return func(*args, **kwargs)
        except PromptCancelled:
            render.out("exiting; user force closed the process")
            ctx.exit(0)
        except NothingToDo as e:
            if e.error:
                render.error(str(e))
                ctx.exit(1)
            render.success(str(e))
            ctx.exit(0)
        except ProjectClockError as e:
            logger.debug("command failed", exc_info=True)
            render.error(e.message)
            ctx.exit(1)

    return wrapper


def read_timesheet_or_exit(state: AppState) -> TimesheetData:
    try:
        return load_timesheet(state.file)
    except ProjectClockError as e:
        render.error(f"An error occurred while reading the timesheet file ({e.message}).")
        click.get_current_context().exit(1)


def write_timesheet(state: AppState, data: TimesheetData) -> None:
    save_timesheet(data, state.file)


def times_or_exit(tasks: list[Task]) -> list[TaskTimes]:
    try:
        return calculate_times(tasks)
    except InvalidTaskError as e:
        render.error(f"An error occurred while inspecting the timesheet file ({e.message}).")
        click.get_current_context().exit(1)


def time_params(state: AppState, data: TimesheetData) -> TimeParams:
    return effective_time_params(data, state.settings)


def require_tasks(data: TimesheetData, verb: str) -> None:
    if not data.tasks:
        raise ProjectClockError(f"Timesheet is empty, nothing to {verb}.")


def output_status(state: AppState, data: TimesheetData, include_seconds: bool = False) -> None:
    active = [t for t in data.tasks if is_active(t)]
    render.print_status(
        data.project_name,
        data.tasks,
        times_or_exit(active),
        times_or_exit(data.tasks),
        time_params(state, data),
        include_seconds,
    )


pass_state = click.make_pass_decorator(AppState)


# ── Command group ─────────────────────────────────────────────


@click.group(invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-v", "--version", prog_name="pclock", message="%(prog)s (Project Clock) v%(version)s")
@click.option("-f", "--file", "file", default=None, metavar="PATH", help="Timesheet file to use instead of the one in the current directory.")
@click.option("--debug", is_flag=True, help="Log debug information to stderr.")
@click.pass_context
@command_boundary
def cli(ctx: click.Context, file: str | None, debug: bool) -> None:
    """CLI app to clock time spent on a project."""
    settings = load_user_settings()
    configure_logging("DEBUG" if debug else settings.log_level or "WARNING")
    ctx.obj = AppState(file=file, settings=settings)

    if ctx.invoked_subcommand is None:
        render.out(BANNER)
        render.out()
        click.echo(ctx.get_help())
        ctx.exit(1)


# ── Timesheet ─────────────────────────────────────────────────


@cli.command()
@click.argument("project_name", required=False)
@command_boundary
def new(project_name: str | None) -> None:
    """Create a new project timesheet."""
    if project_name is None:
        default = working_dir().name
        if timesheet_path(default).exists():
            default = None
        project_name = prompts.text("enter name for the project:", default=default)
    if not project_name:
        raise ProjectClockError("exiting; no project name")

    path = create_timesheet(project_name)
    render.success(f"created a new timesheet '{path}'")


@cli.command()
@click.argument("subject", required=False)
@pass_state
@command_boundary
def add(state: AppState, subject: str | None) -> None:
    """Add a new task to the timesheet."""
    data = read_timesheet_or_exit(state)
    if not subject:
        subject = prompts.text("enter subject for the new task (empty to exit without creating a task):")
    if not subject:
        render.out("exiting; no task to create")
        return
    if data.find_by_subject(subject):
        raise ProjectClockError(f"cannot create task '{subject}'; task already exists")

    data.tasks.append(Task(subject=subject))
    write_timesheet(state, data)
    render.success(f"created a new task '{subject}'")


# ── Clock ─────────────────────────────────────────────────────


@cli.command()
@click.argument("descriptor", required=False)
@pass_state
@command_boundary
def start(state: AppState, descriptor: str | None) -> None:
    """Start an unstarted task, or create and start a new one."""
    data = read_timesheet_or_exit(state)
    existing = data.find_by_subject(descriptor) if descriptor else None
    if existing and not is_unstarted(existing):
        raise ProjectClockError(f"task '{existing.subject}' has already been started")

    found, adjective = filter_tasks(data.tasks, TaskStateType.UNSTARTED, descriptor)
    if found:
        task = prompts.confirm_or_select_task(found, adjective, "start")
    else:
        render.out(f"no {adjective} tasks found")
        if not prompts.confirm("do you want to create a new task?"):
            raise NothingToDo("start")
        subject = prompts.text("enter subject for the task:", default=descriptor or now_timestamp())
        if not subject:
            raise NothingToDo("start")
        if data.find_by_subject(subject):
            raise ProjectClockError(f"cannot create task '{subject}'; task already exists")
        task = Task(subject=subject)
        data.tasks.append(task)
        render.success(f"created a new task '{subject}'")

    start_task(task)
    write_timesheet(state, data)
    render.success(f"started task '{task.subject}'")


@cli.command()
@click.argument("descriptor", required=False)
@pass_state
@command_boundary
def stop(state: AppState, descriptor: str | None) -> None:
    """Stop an active task."""
    data = read_timesheet_or_exit(state)
    require_tasks(data, "stop")
    existing = data.find_by_subject(descriptor) if descriptor else None

    task = prompts.task_of_type(data.tasks, TaskStateType.STOPPABLE, descriptor, "stop", existing is not None)
    # a named task that is not stoppable makes stop_task report why
    task = task or existing
    stop_task(task)
    write_timesheet(state, data)
    render.success(f"Stopped task '{task.subject}'.")
    output_status(state, data)


@cli.command()
@click.argument("descriptor", required=False)
@click.option("--include-stopped", is_flag=True, help="Offer also stopped tasks for suspending.")
@pass_state
@command_boundary
def suspend(state: AppState, descriptor: str | None, include_stopped: bool) -> None:
    """Suspend an active (or stopped) task."""
    data = read_timesheet_or_exit(state)
    require_tasks(data, "suspend")
    existing = data.find_by_subject(descriptor) if descriptor else None

    state_type = TaskStateType.SUSPENDABLE if descriptor or include_stopped else TaskStateType.ACTIVE_SUSPENDABLE
    task = prompts.task_of_type(data.tasks, state_type, descriptor, "suspend", existing is not None)
    task = task or existing
    suspend_task(task)
    write_timesheet(state, data)
    render.success(f"Suspended task '{task.subject}'.")
    output_status(state, data)


@cli.command()
@click.argument("descriptor", required=False)
@pass_state
@command_boundary
def resume(state: AppState, descriptor: str | None) -> None:
    """Resume a suspended or stopped task."""
    data = read_timesheet_or_exit(state)
    require_tasks(data, "resume")
    existing = data.find_by_subject(descriptor) if descriptor else None

    task = prompts.task_of_type(data.tasks, TaskStateType.RESUMABLE, descriptor, "resume", existing is not None)
    task = task or existing
    resume_task(task)
    write_timesheet(state, data)
    render.success(f"Resumed task '{task.subject}'.")


# ── Reports ───────────────────────────────────────────────────


@cli.command()
@click.option("-v", "--verbose", is_flag=True, help="Include seconds.")
@pass_state
@command_boundary
def status(state: AppState, verbose: bool) -> None:
    """Show the project status and the active tasks."""
    data = read_timesheet_or_exit(state)
    output_status(state, data, include_seconds=verbose)


@cli.command(name="list")
@click.option("-v", "--verbose", is_flag=True, help="Include seconds.")
@click.option("--active", is_flag=True, help="List active tasks.")
@click.option("--complete", is_flag=True, help="List complete tasks.")
@click.option("--incomplete", is_flag=True, help="List incomplete tasks.")
@click.option("--not-started", is_flag=True, help="List tasks that have not been started.")
@pass_state
@command_boundary
def list_(
    state: AppState,
    verbose: bool,
    active: bool,
    complete: bool,
    incomplete: bool,
    not_started: bool,
) -> None:
    """List the tasks with time spent and status."""
    data = read_timesheet_or_exit(state)
    if not (active or complete or incomplete or not_started):
        active = complete = incomplete = not_started = True

    def wanted(task: Task) -> bool:
        return (
            (active and is_active(task))
            or (complete and is_completed(task))
            or (incomplete and not is_completed(task))
            or (not_started and is_unstarted(task))
        )

    times = times_or_exit([t for t in data.tasks if wanted(t)])
    render.print_task_list(data.project_name, times, time_params(state, data), include_seconds=verbose)


@cli.command()
@click.argument("descriptor", required=False)
@pass_state
@command_boundary
def show(state: AppState, descriptor: str | None) -> None:
    """Show the full data of a task."""
    data = read_timesheet_or_exit(state)
    require_tasks(data, "show")

    if descriptor:
        tasks = find_by_descriptor(data.tasks, descriptor)
        if not tasks:
            raise ProjectClockError(f"No task(s) matching '{descriptor}' found.")
    else:
        tasks = [prompts.confirm_or_select_task(data.tasks, "", "show")]

    params = time_params(state, data)
    for i, times in enumerate(times_or_exit(tasks)):
        if i:
            render.separator()
        render.print_task_details(times, params)


# ── Editing ───────────────────────────────────────────────────


def _prepare_subject(value: str) -> str:
    return value.replace("\n", "").strip()


def _prepare_text(value: str) -> str:
    return value.strip()


_PREPARE = {
    "subject": _prepare_subject,
    "description": _prepare_text,
    "notes": _prepare_text,
}


def _write_field(state: AppState, data: TimesheetData, task: Task, field: str, value: str) -> None:
    if field == "subject":
        if not value:
            raise ProjectClockError("the subject of a task cannot be empty")
        other = data.find_by_subject(value)
        if other is not None and other is not task:
            raise ProjectClockError(f"cannot rename task '{task.subject}'; task '{value}' already exists")

    if getattr(task, field):
        render.success(f"Replacing the {field} of task '{task.subject}'.")
    else:
        render.success(f"Adding a {field} field to task '{task.subject}'.")
    setattr(task, field, value)
    write_timesheet(state, data)


@cli.command()
@click.argument("descriptor", required=False)
@click.option("--subject", default=None, help="New subject for the task.")
@click.option("--description", default=None, help="New description for the task.")
@click.option("--notes", default=None, help="New notes for the task.")
@pass_state
@command_boundary
def edit(
    state: AppState,
    descriptor: str | None,
    subject: str | None,
    description: str | None,
    notes: str | None,
) -> None:
    """Edit the subject, description or notes of a task."""
    data = read_timesheet_or_exit(state)
    require_tasks(data, "edit")

    candidates = find_by_descriptor(data.tasks, descriptor) if descriptor else data.tasks
    if not candidates:
        raise ProjectClockError(f"No task(s) matching '{descriptor}' found.")
    task = prompts.confirm_or_select_task(candidates, "matching" if descriptor else "", "edit")

    given = {"subject": subject, "description": description, "notes": notes}
    replacements = {field: _PREPARE[field](value) for field, value in given.items() if value}
    if replacements:
        for field, value in replacements.items():
            current = getattr(task, field)
            if current:
                render.notice(f"Current {field}: {current}")
                render.notice(f"New {field}: {value}")
                if not prompts.confirm(f"Are you sure you want to replace the {field}?"):
                    raise NothingToDo("edit")
            _write_field(state, data, task, field, value)
    else:
        edited = False
        for field in ("subject", "description", "notes"):
            if prompts.confirm(f"Do you want to edit the {field}?"):
                value = _PREPARE[field](prompts.edit(getattr(task, field)))
                _write_field(state, data, task, field, value)
                edited = True
        if not edited:
            raise NothingToDo("edit")

    render.print_task_details(times_or_exit([task])[0], time_params(state, data))


def _confirm_removal(tasks: list[Task], descriptor: str | None, only_task: bool) -> list[Task]:
    """Show what is about to be removed and ask for confirmation."""
    count = len(tasks)
    these = "this task" if count == 1 else f"these {count} tasks"

    if only_task:
        render.warning("There is only one task on the timesheet and it is about to be removed:")
        render.print_subjects(tasks)
        return tasks if prompts.confirm("Are you sure you want to continue?") else []

    if descriptor:
        verbs = ("matches", "it is") if count == 1 else ("match", "they are")
        render.warning(f"{these.capitalize()} {verbs[0]} the task descriptor and {verbs[1]} about to be removed:")
        render.print_subjects(tasks)
        if count > 1 and prompts.confirm("Do you want to modify the selection?"):
            selection = prompts.select_tasks(tasks, "Select the tasks to remove:")
            if not selection:
                raise NothingToDo("remove")
            return _confirm_removal(selection, None, False)
        return tasks if prompts.confirm(f"Are you sure you want to remove {these}?") else []

    render.warning(f"You are about to remove {these}:")
    render.print_subjects(tasks)
    return tasks if prompts.confirm("Are you sure you want to continue?") else []


@cli.command()
@click.argument("descriptor", required=False)
@pass_state
@command_boundary
def remove(state: AppState, descriptor: str | None) -> None:
    """Remove tasks from the timesheet."""
    data = read_timesheet_or_exit(state)
    require_tasks(data, "remove")

    if descriptor:
        selected = find_by_descriptor(data.tasks, descriptor)
        if not selected:
            raise NothingToDo("remove", error=True)
    elif len(data.tasks) == 1:
        selected = list(data.tasks)
    else:
        selected = prompts.select_tasks(data.tasks, "Select the tasks to remove:")
        if not selected:
            raise NothingToDo("remove")

    confirmed = _confirm_removal(selected, descriptor, only_task=not descriptor and len(data.tasks) == 1)
    if not confirmed:
        raise NothingToDo("remove")

    data.tasks = [t for t in data.tasks if not any(t is c for c in confirmed)]
    write_timesheet(state, data)
    render.success(f"Removed {render.plural('task', len(confirmed))}.")
    output_status(state, data)


@cli.command()
@pass_state
@command_boundary
def reorder(state: AppState) -> None:
    """Rearrange the order of the tasks."""
    data = read_timesheet_or_exit(state)
    if len(data.tasks) < 2:
        raise ProjectClockError("There are not enough tasks to reorder.")

    times = times_or_exit(data.tasks)
    render.out(f"Arrange items of the {data.project_name} project.")
    render.console.print(render.task_table(times, time_params(state, data), numbered=True))
    order = prompts.numbers(
        "enter the new order of the row numbers (empty to keep the current order)",
        len(data.tasks),
        permutation=True,
    )
    if not order or order == list(range(1, len(data.tasks) + 1)):
        raise NothingToDo("reorder")

    data.tasks = [data.tasks[i - 1] for i in order]
    write_timesheet(state, data)
    render.success(f"Reordered the tasks of project '{data.project_name}'.")


# ── Entry point ───────────────────────────────────────────────


def main() -> None:
    cli(prog_name="pclock")


if __name__ == "__main__":
    main()
