"""Exception types for pclock.

ProjectClockError and its subclasses are expected failures: the command
layer prints their message and exits with status 1. PromptCancelled and
NothingToDo are control-flow signals handled once at the command boundary.
"""

from __future__ import annotations


class ProjectClockError(Exception):
    """An expected, reportable failure with a user-facing message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TimesheetNotFoundError(ProjectClockError):
    """No timesheet file could be located (or the choice is ambiguous)."""


class InvalidTimesheetError(ProjectClockError):
    """The timesheet document does not match the expected shape."""


class TimesheetExistsError(ProjectClockError):
    """Exclusive create refused because the file already exists."""


class InvalidTaskError(ProjectClockError):
    """A task's time data is internally inconsistent."""


class PromptCancelled(Exception):
    """The user force-closed an interactive prompt (Ctrl+C / EOF)."""


class NothingToDo(Exception):
    """The command has nothing to act on, or the user declined."""

    def __init__(self, verb: str, error: bool = False) -> None:
        super().__init__(f"Nothing to {verb}.")
        self.verb = verb
        self.error = error
