"""
Task Models

Task descriptors supplied by callers, the per-task record kept by the
registry, and the read-only summary returned by ``list_tasks``.

Author: Cronkeeper Project
License: MIT
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from .frequency import Frequency


class TaskStatus(str, Enum):
    """Lifecycle state of a registered task."""
    SCHEDULED = "scheduled"
    RUNNING = "running"
    IDLE = "idle"
    ERROR = "error"


@runtime_checkable
class Executable(Protocol):
    """
    Unit of work the scheduler can run.

    ``execute`` may return normally, raise, or return an awaitable that the
    scheduler drives to completion. An optional ``name`` attribute labels the
    task in logs and summaries.
    """

    def execute(self) -> Any:
        ...


@dataclass
class Task:
    """Convenience task descriptor wrapping a plain callable."""
    execute: Callable[[], Any]
    name: Optional[str] = None


@dataclass
class TaskRecord:
    """Mutable state of one scheduled task. Guarded by the registry lock."""
    id: int
    name: str
    body: Callable[[], Any]
    frequency: Frequency
    job_id: str
    status: TaskStatus = TaskStatus.SCHEDULED
    last_run: Optional[datetime] = None
    next_run: Optional[datetime] = None
    run_count: int = 0
    error_count: int = 0
    last_error: Optional[str] = None
    run_lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def summary(self) -> 'TaskSummary':
        """Snapshot the record as a read-only summary."""
        return TaskSummary(
            id=self.id,
            name=self.name,
            status=self.status,
            frequency=self.frequency.description,
            last_run=self.last_run,
            next_run=self.next_run,
            run_count=self.run_count,
            error_count=self.error_count,
            last_error=self.last_error
        )


@dataclass(frozen=True)
class TaskSummary:
    """Read-only view of a task as returned by ``list_tasks``."""
    id: int
    name: str
    status: TaskStatus
    frequency: str
    last_run: Optional[datetime]
    next_run: Optional[datetime]
    run_count: int
    error_count: int
    last_error: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'id': self.id,
            'name': self.name,
            'status': self.status.value,
            'frequency': self.frequency,
            'last_run': self.last_run.isoformat() if self.last_run else None,
            'next_run': self.next_run.isoformat() if self.next_run else None,
            'run_count': self.run_count,
            'error_count': self.error_count,
            'last_error': self.last_error
        }
