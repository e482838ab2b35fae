"""
Cronkeeper

In-process periodic task scheduler with per-task statistics, cancellation
and graceful shutdown.

Author: Cronkeeper Project
License: MIT
"""

from .scheduler import (
    TaskScheduler,
    Task,
    TaskStatus,
    TaskSummary,
    normalize_frequency,
    InvalidTaskError,
    InvalidFrequencyError,
    SchedulerClosedError
)

__version__ = "0.1.0"
__all__ = [
    'TaskScheduler',
    'Task',
    'TaskStatus',
    'TaskSummary',
    'normalize_frequency',
    'InvalidTaskError',
    'InvalidFrequencyError',
    'SchedulerClosedError',
]
