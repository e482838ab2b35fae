"""
Scheduler Exceptions

Errors raised synchronously by the scheduler's public operations. Failures
inside task bodies are never raised to callers; they are recorded on the task.

Author: Cronkeeper Project
License: MIT
"""


class SchedulerError(Exception):
    """Base class for scheduler errors."""


class InvalidTaskError(SchedulerError, TypeError):
    """Task descriptor has no callable ``execute`` body."""


class InvalidFrequencyError(SchedulerError, ValueError):
    """Frequency is not a mapping or does not add up to a positive interval."""


class SchedulerClosedError(SchedulerError, RuntimeError):
    """Scheduler has been shut down and no longer accepts tasks."""
