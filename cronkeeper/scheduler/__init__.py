"""
Scheduler Module

Periodic task scheduling: frequency normalization, the task registry and the
dispatcher that runs tasks on recurring timers.

Author: Cronkeeper Project
License: MIT
"""

from .exceptions import (
    SchedulerError,
    InvalidTaskError,
    InvalidFrequencyError,
    SchedulerClosedError
)
from .frequency import Frequency, normalize_frequency
from .models import Executable, Task, TaskStatus, TaskSummary
from .registry import TaskRegistry
from .task_scheduler import TaskScheduler

__all__ = [
    'SchedulerError',
    'InvalidTaskError',
    'InvalidFrequencyError',
    'SchedulerClosedError',
    'Frequency',
    'normalize_frequency',
    'Executable',
    'Task',
    'TaskStatus',
    'TaskSummary',
    'TaskRegistry',
    'TaskScheduler',
]
