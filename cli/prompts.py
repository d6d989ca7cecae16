"""Interactive prompts (click) that turn a force-closed prompt into PromptCancelled."""

from __future__ import annotations

import functools
import re
from typing import Any, Callable, TypeVar

import click

from cli import render
from pclock.errors import NothingToDo, ProjectClockError, PromptCancelled
from pclock.models import Task
from pclock.task_state import TaskStateType, filter_tasks

F = TypeVar("F", bound=Callable[..., Any])


def cancellable(func: F) -> F:
    """Ctrl+C or end of input inside a prompt raises PromptCancelled."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except click.Abort as e:
            raise PromptCancelled() from e

    return wrapper  # type: ignore[return-value]


class NumberList(click.ParamType):
    """Row numbers between 1 and ``size`` separated by spaces or commas."""

    name = "numbers"

    def __init__(self, size: int, permutation: bool = False) -> None:
        self.size = size
        self.permutation = permutation

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> list[int]:
        if isinstance(value, list):
            return value
        numbers = []
        for token in re.split(r"[\s,]+", str(value).strip()):
            if not token:
                continue
            if not token.isdigit() or not 1 <= int(token) <= self.size:
                self.fail(f"'{token}' is not a number between 1 and {self.size}", param, ctx)
            if int(token) in numbers:
                self.fail(f"{token} is given more than once", param, ctx)
            numbers.append(int(token))
        if self.permutation and numbers and len(numbers) != self.size:
            self.fail(f"give every number from 1 to {self.size} exactly once", param, ctx)
        return numbers


# ── Primitives ────────────────────────────────────────────────


@cancellable
def confirm(message: str, default: bool = False) -> bool:
    return click.confirm(message, default=default)


@cancellable
def text(message: str, default: str | None = None) -> str:
    value = click.prompt(message, default=default or "", show_default=bool(default))
    return value.strip()


@cancellable
def numbers(message: str, size: int, permutation: bool = False) -> list[int]:
    return click.prompt(message, default="", show_default=False, type=NumberList(size, permutation))


@cancellable
def choose(message: str, size: int) -> int:
    return click.prompt(message, type=click.IntRange(1, size))


def edit(value: str | None) -> str:
    """Open $EDITOR on the current value and return the edited text."""
    edited = click.edit(text=value or "", require_save=False)
    if edited is None:
        return value or ""
    return edited


# ── Task selection ────────────────────────────────────────────


def select_task(tasks: list[Task], message: str) -> Task | None:
    """Numbered list with a final 'none' option. Returns None for 'none'."""
    render.out(message)
    render.print_subjects(tasks, numbered=True)
    render.out(f"  {len(tasks) + 1}) none")
    choice = choose("enter a number", len(tasks) + 1)
    return tasks[choice - 1] if choice <= len(tasks) else None


def select_tasks(tasks: list[Task], message: str) -> list[Task]:
    render.out(message)
    render.print_subjects(tasks, numbered=True)
    chosen = numbers("enter the numbers separated by spaces (empty for none)", len(tasks))
    return [tasks[i - 1] for i in chosen]


def confirm_or_select_task(tasks: list[Task], adjective: str, verb: str) -> Task:
    """Confirm the only task, or select one of many. Declining raises NothingToDo."""
    if not tasks:
        raise ProjectClockError("internal error: no tasks to confirm or select from")
    adj = f"{adjective} " if adjective else ""
    if len(tasks) == 1:
        if confirm(f"there is one {adj}task on the timesheet ({tasks[0].subject}); {verb} this task?"):
            return tasks[0]
        raise NothingToDo(verb)
    selected = select_task(
        tasks, f"there are more than one {adj}task on the timesheet; select the task to {verb}:"
    )
    if selected is None:
        raise NothingToDo(verb)
    return selected


def task_of_type(
    tasks: list[Task],
    state_type: TaskStateType,
    descriptor: str | None,
    verb: str,
    task_exists: bool,
) -> Task | None:
    """Filter by state and let the user confirm or select.

    Returns None when nothing is found but a task named exactly by the
    descriptor exists, so the caller can explain why it does not qualify.
    """
    found, adjective = filter_tasks(tasks, state_type, descriptor)
    if found:
        return confirm_or_select_task(found, adjective, verb)
    if task_exists:
        return None
    raise ProjectClockError(f"no {adjective} tasks found; nothing to {verb}")
