"""Time spent per task, computed from begin/suspend/resume/end stamps."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from pclock.errors import InvalidTaskError
from pclock.models import Task
from pclock.task_state import TaskStatus, task_status
from pclock.workspace import format_timestamp, now_utc, parse_timestamp

_MS = timedelta(milliseconds=1)


@dataclass
class TaskTimes:
    task: Task
    status: TaskStatus
    time_spent: int  # milliseconds


def short_subject(subject: str, width: int = 25) -> str:
    return subject if len(subject) <= width else f"{subject[: width - 3]}..."


def _invalid(task: Task, reason: str) -> InvalidTaskError:
    return InvalidTaskError(f"invalid task '{short_subject(task.subject)}'; {reason}")


def check_task(task: Task) -> None:
    """Raise InvalidTaskError if the task's time fields cannot describe a valid history."""
    suspends = len(task.suspend) if task.suspend is not None else 0
    resumes = len(task.resume) if task.resume is not None else 0

    if task.end and not task.begin:
        raise _invalid(task, "end date without begin date")
    if task.suspend and not task.begin:
        raise _invalid(task, "suspend date(s) without begin date")
    if task.suspend and task.end and resumes != suspends:
        raise _invalid(task, "suspend and end without enough resumes")
    if task.resume and not task.begin:
        raise _invalid(task, "resume date(s) without begin date")
    if task.resume and not task.suspend:
        raise _invalid(task, "resume without suspend")
    if resumes > suspends:
        raise _invalid(task, "resumed more times than suspended")
    for suspended, resumed in zip(task.suspend or [], task.resume or []):
        if parse_timestamp(suspended) > parse_timestamp(resumed):
            raise _invalid(
                task, f"suspend date ({suspended}) is later than resume date ({resumed})"
            )


def _difference(start: datetime, end: datetime, task: Task) -> int:
    if start > end:
        raise InvalidTaskError(
            f"invalid time period '{format_timestamp(start)}' => '{format_timestamp(end)}' "
            f"({short_subject(task.subject)}); start date is later than end date"
        )
    return (end - start) // _MS


def time_spent(task: Task, now: datetime | None = None) -> int:
    """Milliseconds spent on a task. Open intervals run until ``now``."""
    check_task(task)
    if not task.begin:
        return 0
    if now is None:
        now = now_utc()

    # working intervals: begin -> suspend[0], resume[i] -> suspend[i+1], last -> end/now
    starts = [task.begin, *(task.resume or [])]
    ends = [parse_timestamp(s) for s in (task.suspend or [])]
    ends.append(parse_timestamp(task.end) if task.end else now)
    return sum(
        _difference(parse_timestamp(start), end, task) for start, end in zip(starts, ends)
    )


def calculate_times(tasks: list[Task], now: datetime | None = None) -> list[TaskTimes]:
    if now is None:
        now = now_utc()
    return [TaskTimes(task=t, status=task_status(t), time_spent=time_spent(t, now)) for t in tasks]


def calculate_total_time(times: list[TaskTimes]) -> int:
    return sum(t.time_spent for t in times)
