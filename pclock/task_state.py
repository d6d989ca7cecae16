r"""Task state machine: predicates, filtering and transitions.

A task's state is derived from its time fields only:

    unstarted   no begin
    started     begin
    suspended   begin, suspend*n, resume*(n-1)
    resumed     begin, suspend*n, resume*n (n >= 1)
    completed   begin, suspend*a, resume*a, end

    unstarted -> started -> suspended <-> resumed
                        \            \       \
                         `-----------`-------`--> completed

A suspended task is stopped by adding matching ``resume`` and ``end`` stamps,
and a completed task is suspended or resumed by first moving ``end`` into
``suspend``, so the stored history always passes through the resumed state.
"""

from __future__ import annotations

import enum
import logging
import re

from pclock.errors import ProjectClockError
from pclock.models import Task
from pclock.workspace import now_timestamp

logger = logging.getLogger(__name__)


class TaskStatus(str, enum.Enum):
    UNSTARTED = "unstarted"
    STARTED = "started"
    SUSPENDED = "suspended"
    RESUMED = "resumed"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        """Status as shown to the user."""
        return "not started" if self is TaskStatus.UNSTARTED else self.value


class TaskStateType(str, enum.Enum):
    """Groups of states a command can act on."""

    ACTIVE = "active"
    ACTIVE_SUSPENDABLE = "active suspendable"
    SUSPENDABLE = "suspendable"
    RESUMABLE = "resumable"
    STOPPABLE = "stoppable"
    UNSTARTED = "unstarted"
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    ANY = ""


# ── Predicates ────────────────────────────────────────────────


def _count(values: list[str] | None) -> int:
    return len(values) if values else 0


def is_unstarted(task: Task | None) -> bool:
    return task is not None and not task.begin


def is_started(task: Task | None) -> bool:
    return task is not None and bool(task.begin) and not task.suspend and not task.end


def is_suspended(task: Task | None) -> bool:
    if task is None or not task.suspend or task.end:
        return False
    return _count(task.suspend) > _count(task.resume)


def is_resumed(task: Task | None) -> bool:
    if task is None or not task.suspend or not task.resume or task.end:
        return False
    return len(task.suspend) == len(task.resume)


def is_completed(task: Task | None) -> bool:
    return task is not None and bool(task.end)


def is_active(task: Task | None) -> bool:
    return task is not None and bool(task.begin) and not task.end


def is_suspendable(task: Task | None) -> bool:
    return is_started(task) or is_resumed(task) or is_completed(task)


def is_resumable(task: Task | None) -> bool:
    return is_suspended(task) or is_completed(task)


def task_status(task: Task) -> TaskStatus:
    if is_unstarted(task):
        return TaskStatus.UNSTARTED
    if is_completed(task):
        return TaskStatus.COMPLETED
    if is_suspended(task):
        return TaskStatus.SUSPENDED
    if is_resumed(task):
        return TaskStatus.RESUMED
    return TaskStatus.STARTED


_PREDICATES = {
    TaskStateType.ACTIVE: is_active,
    TaskStateType.STOPPABLE: is_active,
    TaskStateType.ACTIVE_SUSPENDABLE: lambda t: is_started(t) or is_resumed(t),
    TaskStateType.SUSPENDABLE: is_suspendable,
    TaskStateType.RESUMABLE: is_resumable,
    TaskStateType.UNSTARTED: is_unstarted,
    TaskStateType.COMPLETE: is_completed,
    TaskStateType.INCOMPLETE: lambda t: not is_completed(t),
    TaskStateType.ANY: lambda t: True,
}

# stoppable tasks are presented to the user as active ones
_ADJECTIVES = {
    TaskStateType.STOPPABLE: "active",
    TaskStateType.ACTIVE_SUSPENDABLE: "suspendable",
}


# ── Filtering ─────────────────────────────────────────────────


def matches_descriptor(task: Task, descriptor: str) -> bool:
    """True when the regular expression ``descriptor`` is found in the subject."""
    try:
        return re.search(descriptor, task.subject) is not None
    except re.error as e:
        raise ProjectClockError(f"invalid task descriptor '{descriptor}' ({e})") from e


def filter_tasks(
    tasks: list[Task], state_type: TaskStateType, descriptor: str | None = None
) -> tuple[list[Task], str]:
    """Return the tasks in the given state group and an adjective describing them.

    With a descriptor only matching tasks are kept and the adjective gets a
    ``matching`` prefix, e.g. ``matching resumable``.
    """
    predicate = _PREDICATES[state_type]
    adjective = _ADJECTIVES.get(state_type, state_type.value)
    found = [t for t in tasks if predicate(t)]
    if descriptor:
        found = [t for t in found if matches_descriptor(t, descriptor)]
        adjective = f"matching {adjective}".strip()
    return found, adjective


def find_by_descriptor(tasks: list[Task], descriptor: str) -> list[Task]:
    return [t for t in tasks if matches_descriptor(t, descriptor)]


# ── Transitions ───────────────────────────────────────────────


def start_task(task: Task, now: str | None = None) -> None:
    if not is_unstarted(task):
        raise ProjectClockError(f"task '{task.subject}' has already been started")
    task.begin = now or now_timestamp()
    logger.debug("started %r at %s", task.subject, task.begin)


def suspend_task(task: Task, now: str | None = None) -> None:
    """Suspend a started, resumed or completed task."""
    stamp = now or now_timestamp()
    if is_started(task) or is_resumed(task):
        task.suspend = [*(task.suspend or []), stamp]
    elif is_completed(task):
        task.suspend = [*(task.suspend or []), task.end, stamp]
        task.resume = [*(task.resume or []), stamp]
        task.end = None
    elif is_suspended(task):
        raise ProjectClockError(f"Cannot suspend task '{task.subject}'; the task has already been suspended.")
    else:
        raise ProjectClockError(f"Cannot suspend task '{task.subject}'; the task hasn't been started yet.")
    logger.debug("suspended %r at %s", task.subject, stamp)


def resume_task(task: Task, now: str | None = None) -> None:
    """Resume a suspended or completed task."""
    stamp = now or now_timestamp()
    if is_suspended(task):
        task.resume = [*(task.resume or []), stamp]
    elif is_completed(task):
        task.suspend = [*(task.suspend or []), task.end]
        task.resume = [*(task.resume or []), stamp]
        task.end = None
    elif is_unstarted(task):
        raise ProjectClockError(f"can't resume task '{task.subject}'; the task hasn't even been started yet")
    elif is_started(task):
        raise ProjectClockError(f"can't resume task '{task.subject}'; the task has been started but not suspended")
    else:
        raise ProjectClockError(f"can't resume task '{task.subject}'; the task has already been resumed")
    logger.debug("resumed %r at %s", task.subject, stamp)


def stop_task(task: Task, now: str | None = None) -> None:
    """Complete an active task. A suspended task gets a matching resume first."""
    stamp = now or now_timestamp()
    if is_unstarted(task):
        raise ProjectClockError(f"cannot stop task '{task.subject}'; the task has not been started")
    if is_completed(task):
        raise ProjectClockError(f"cannot stop task '{task.subject}'; the task has already been stopped")
    if is_suspended(task):
        task.resume = [*(task.resume or []), stamp]
    task.end = stamp
    logger.debug("stopped %r at %s", task.subject, stamp)
