"""Console output for the pclock command (rich)."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from pclock.models import Task, TimeParams
from pclock.time_period import TimePeriod
from pclock.times import TaskTimes, calculate_total_time

# soft_wrap keeps long paths and messages on one line
console = Console(soft_wrap=True, highlight=False, emoji=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False, emoji=False)


# ── Messages ──────────────────────────────────────────────────


def out(message: str = "") -> None:
    console.print(message, markup=False)


def success(message: str) -> None:
    console.print(message, style="green", markup=False)


def notice(message: str) -> None:
    console.print(message, style="cyan", markup=False)


def warning(message: str) -> None:
    console.print(message, style="yellow", markup=False)


def error(message: str) -> None:
    err_console.print(message, style="red", markup=False)


def plural(term: str, count: int) -> str:
    return f"{count} {term}" if count == 1 else f"{count} {term}s"


# ── Time strings ──────────────────────────────────────────────


def time_spent_str(ms: int, params: TimeParams, include_seconds: bool = False) -> str:
    """'7h 30min', with a days breakdown when the period spans whole days."""
    period = TimePeriod(ms, params)
    hours = period.hours_and_minutes_str(include_seconds)
    if not hours:
        return "-"
    if period.days_total > 0:
        days = period.days_hours_and_minutes_str(include_seconds)
        return f"{hours} ({days}, {period.conversion_rate_day_str()})"
    return hours


def total_time_str(times: list[TaskTimes], params: TimeParams, include_seconds: bool = False) -> str:
    if not times:
        return "no tasks to list"
    total = time_spent_str(calculate_total_time(times), params, include_seconds)
    noun = "task" if len(times) == 1 else "tasks"
    return f"{len(times)} {noun}, total time spent: {total}"


# ── Tables ────────────────────────────────────────────────────


def task_table(
    times: list[TaskTimes],
    params: TimeParams,
    include_seconds: bool = False,
    numbered: bool = False,
) -> Table:
    table = Table(box=None, pad_edge=False, show_edge=False, header_style="bold")
    if numbered:
        table.add_column("#", justify="right")
    table.add_column("Task", overflow="fold")
    table.add_column("Time", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    for i, t in enumerate(times, start=1):
        period = TimePeriod(t.time_spent, params).narrow_str(include_seconds) or "-"
        row = [Text(t.task.subject), period, t.status.label]
        if numbered:
            row.insert(0, str(i))
        table.add_row(*row)
    return table


def print_task_list(
    project_name: str,
    times: list[TaskTimes],
    params: TimeParams,
    include_seconds: bool = False,
) -> None:
    out(f"Project: '{project_name}'")
    out()
    if times:
        console.print(task_table(times, params, include_seconds))
    else:
        out("no tasks to list")
    out()
    out(total_time_str(times, params, include_seconds))


def print_status(
    project_name: str,
    tasks: list[Task],
    active: list[TaskTimes],
    all_times: list[TaskTimes],
    params: TimeParams,
    include_seconds: bool = False,
) -> None:
    complete = sum(1 for t in tasks if t.end)
    out(f"Project: '{project_name}'")
    out()
    out(f"Tasks (complete/incomplete/total): {complete}/{len(tasks) - complete}/{len(tasks)}")
    out()
    if active:
        out(f"{plural('active task', len(active))}:")
        out()
        console.print(task_table(active, params, include_seconds))
        out()
    else:
        out("no active tasks")
        out()
    period = TimePeriod(calculate_total_time(all_times), params)
    hours = period.hours_and_minutes_str(include_seconds) or "-"
    narrow = period.narrow_str(include_seconds) or "-"
    out(f"total time spent: {hours} ({narrow}; {period.conversion_rates_str()})")


def print_task_details(times: TaskTimes, params: TimeParams) -> None:
    task = times.task
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold", no_wrap=True)
    grid.add_column(overflow="fold")
    grid.add_row("subject:", Text(task.subject))
    if task.description:
        grid.add_row("description:", Text(task.description))
    if task.notes:
        grid.add_row("notes:", Text(task.notes))
    grid.add_row("status:", times.status.label)
    grid.add_row("time spent:", time_spent_str(times.time_spent, params))
    console.print(grid)


def separator() -> None:
    console.rule(style="dim")


def print_subjects(tasks: list[Task], numbered: bool = False) -> None:
    for i, task in enumerate(tasks, start=1):
        out(f"  {i}) {task.subject}" if numbered else f"  {task.subject}")
