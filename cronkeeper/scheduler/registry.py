"""
Task Registry

In-memory mapping of task id to task record. Every mutation of the mapping
or of a record's state happens while holding ``TaskRegistry.lock``; callers
that need a compound check-then-update take the lock themselves.

Author: Cronkeeper Project
License: MIT
"""

import threading
from collections.abc import Hashable
from typing import Dict, Iterator, List, Optional

from .models import TaskRecord, TaskSummary


class TaskRegistry:
    """
    Thread-safe store of scheduled tasks, kept in insertion order.

    Also hands out task ids, which start at 1 and are never reused.
    """

    def __init__(self):
        self._records: Dict[int, TaskRecord] = {}
        self._last_id = 0
        self.lock = threading.RLock()

    def next_id(self) -> int:
        """Reserve the next task id."""
        with self.lock:
            self._last_id += 1
            return self._last_id

    def add(self, record: TaskRecord) -> None:
        """
        Insert a record.

        Raises:
            KeyError: If a record with the same id is already registered
        """
        with self.lock:
            if record.id in self._records:
                raise KeyError(f"Task {record.id} already registered")
            self._records[record.id] = record

    def get(self, task_id: int) -> Optional[TaskRecord]:
        if not isinstance(task_id, Hashable):
            return None
        with self.lock:
            return self._records.get(task_id)

    def remove(self, task_id: int) -> Optional[TaskRecord]:
        """Remove and return a record, or None if it is not registered."""
        if not isinstance(task_id, Hashable):
            return None
        with self.lock:
            return self._records.pop(task_id, None)

    def drain(self) -> List[TaskRecord]:
        """Remove and return every record."""
        with self.lock:
            records = list(self._records.values())
            self._records.clear()
            return records

    def summaries(self) -> List[TaskSummary]:
        """Snapshot all records as summaries."""
        with self.lock:
            return [record.summary() for record in self._records.values()]

    def __contains__(self, task_id) -> bool:
        with self.lock:
            return task_id in self._records

    def __len__(self) -> int:
        with self.lock:
            return len(self._records)

    def __iter__(self) -> Iterator[TaskRecord]:
        with self.lock:
            return iter(list(self._records.values()))
