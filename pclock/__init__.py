"""pclock core library: timesheet model, file handling and time accounting.

Public API re-exports for convenient imports:
    from pclock import load_timesheet, save_timesheet, calculate_times, ...
"""

__version__ = "1.0.0"

# Errors
from pclock.errors import (
    ProjectClockError,
    TimesheetNotFoundError,
    InvalidTimesheetError,
    TimesheetExistsError,
    InvalidTaskError,
    PromptCancelled,
    NothingToDo,
)

# Workspace & paths
from pclock.workspace import (
    TIMESHEET_SUFFIX,
    working_dir,
    timesheet_path,
    config_path,
    now_timestamp,
    format_timestamp,
    parse_timestamp,
)

# Models
from pclock.models import (
    TimeParams,
    ProjectSettings,
    Task,
    TimesheetData,
)

# Validation
from pclock.schema import (
    validate_time_params,
    validate_task,
    validate_timesheet,
    parse_timesheet,
)

# Timesheet files
from pclock.timesheet import (
    resolve_timesheet_path,
    load_timesheet,
    save_timesheet,
    create_timesheet,
)

# Task state
from pclock.task_state import (
    TaskStatus,
    TaskStateType,
    task_status,
    filter_tasks,
    find_by_descriptor,
    start_task,
    suspend_task,
    resume_task,
    stop_task,
)

# Time accounting
from pclock.times import (
    TaskTimes,
    check_task,
    calculate_times,
    calculate_total_time,
)
from pclock.time_period import TimePeriod

# Settings
from pclock.settings import (
    UserSettings,
    load_user_settings,
    effective_time_params,
)
