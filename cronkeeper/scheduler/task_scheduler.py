"""
Task Scheduler

Runs registered tasks on independent recurring timers backed by an
APScheduler ``BackgroundScheduler``. Each task gets one interval job and its
own single-thread executor; every tick runs the task body on that thread,
updates the task's status and counters, and leaves the job armed for the next
tick. A hung body therefore only stalls its own task.

Concurrency rules:
- A task never runs concurrently with itself. A tick that arrives while the
  previous run is still in progress is skipped.
- The move to ``running`` happens under the registry lock and only while the
  task is still registered, so once ``cancel`` or ``shutdown`` returns no new
  run of the affected task can start. A run already in progress finishes.

Author: Cronkeeper Project
License: MIT
"""

import asyncio
import inspect
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from ..config.schema import SchedulingConfig
from ..utils.logger import get_logger
from .exceptions import InvalidTaskError, SchedulerClosedError
from .frequency import normalize_frequency
from .models import Executable, TaskRecord, TaskStatus, TaskSummary
from .registry import TaskRegistry

logger = get_logger(__name__)

IMMEDIATE_SUFFIX = "-immediate"


async def _await(awaitable):
    return await awaitable


def _resolve_task(task: Any) -> Tuple[Callable[[], Any], Optional[str]]:
    """
    Extract the body and optional name from a task descriptor.

    Accepts any object with a callable ``execute`` attribute, or a mapping
    with an ``"execute"`` key.
    """
    if isinstance(task, Mapping):
        body = task.get("execute")
        name = task.get("name")
    else:
        body = getattr(task, "execute", None)
        name = getattr(task, "name", None)

    if not callable(body):
        raise InvalidTaskError("Task must have an execute method")

    if name is not None and not isinstance(name, str):
        name = str(name)
    return body, name or None


class TaskScheduler:
    """
    Periodic task dispatcher.

    Features:
    - One interval timer per task
    - Optional extra run right after scheduling
    - Per-task run/error statistics
    - Cancellation and graceful shutdown
    """

    def __init__(self, config: Optional[SchedulingConfig] = None):
        """
        Initialize and start the task scheduler.

        Args:
            config: Scheduling configuration (defaults if None)
        """
        self.config = config or SchedulingConfig()
        self.registry = TaskRegistry()
        self._closed = False
        self._executors: Dict[str, ThreadPoolExecutor] = {}

        self.scheduler = BackgroundScheduler(
            job_defaults={
                'coalesce': True,  # Combine missed executions
                'max_instances': 1,  # Only one instance per job
                'misfire_grace_time': self.config.misfire_grace_time
            },
            timezone=self.config.timezone
        )
        self.scheduler.start()

        logger.info("TaskScheduler initialized")

    @property
    def closed(self) -> bool:
        """Whether shutdown has been called."""
        return self._closed

    def schedule(
        self,
        task: Union[Executable, Mapping[str, Any]],
        frequency: Mapping[str, Any],
        run_immediately: bool = False
    ) -> int:
        """
        Schedule a task to run every ``frequency``.

        Args:
            task: Object with an ``execute`` method and optional ``name``
            frequency: Mapping with optional minutes/hours/days
            run_immediately: Also run once right away, independently of the
                first interval tick

        Returns:
            Task ID that can be used to cancel the task

        Raises:
            InvalidTaskError: If the task has no callable ``execute``
            InvalidFrequencyError: If the frequency is malformed, zero or too large
            SchedulerClosedError: If the scheduler has been shut down
        """
        body, name = _resolve_task(task)
        frequency = normalize_frequency(frequency)
        next_run = datetime.now() + frequency.interval

        with self.registry.lock:
            if self._closed:
                raise SchedulerClosedError("Scheduler has been shut down")

            task_id = self.registry.next_id()
            task_name = name or f"task-{task_id}"
            job_id = f"task-{task_id}"

            logger.info(f"Scheduling task: {task_name} to run every {frequency.description}")

            record = TaskRecord(
                id=task_id,
                name=task_name,
                body=body,
                frequency=frequency,
                job_id=job_id,
                next_run=next_run
            )

            executor = ThreadPoolExecutor(1)
            self.scheduler.add_executor(executor, alias=job_id)
            self._executors[job_id] = executor
            self.scheduler.add_job(
                func=self._execute_task,
                trigger=IntervalTrigger(
                    seconds=frequency.seconds,
                    timezone=self.scheduler.timezone
                ),
                args=[task_id],
                id=job_id,
                name=task_name,
                executor=job_id
            )
            self.registry.add(record)

            if run_immediately:
                self.scheduler.add_job(
                    func=self._execute_task,
                    trigger=DateTrigger(timezone=self.scheduler.timezone),
                    args=[task_id],
                    id=f"{job_id}{IMMEDIATE_SUFFIX}",
                    name=f"{task_name} (immediate)",
                    executor=job_id
                )

        return task_id

    def cancel(self, task_id: int) -> bool:
        """
        Cancel a scheduled task.

        Args:
            task_id: The ID returned by ``schedule``

        Returns:
            True if the task was registered and is now cancelled
        """
        with self.registry.lock:
            record = self.registry.remove(task_id)
            if record is None:
                logger.warning(f"Attempted to cancel non-existent task ID: {task_id}")
                return False
            self._remove_jobs(record)

        logger.info(f"Task cancelled: {record.name}")
        return True

    def list_tasks(self) -> List[TaskSummary]:
        """
        List all scheduled tasks.

        Returns:
            Task summaries in scheduling order
        """
        return self.registry.summaries()

    def shutdown(self):
        """Cancel every task and stop the timer thread. Safe to call twice."""
        with self.registry.lock:
            if self._closed:
                return
            self._closed = True

            logger.info("Shutting down scheduler")

            for record in self.registry.drain():
                self._remove_jobs(record)
                logger.info(f"Cancelled task: {record.name}")

        # In-flight bodies are left to finish on their worker threads
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

        logger.info("All tasks cancelled, shutdown complete")

    def _remove_jobs(self, record: TaskRecord):
        """Remove a task's jobs and its executor, leaving a running body to finish."""
        for job_id in (record.job_id, f"{record.job_id}{IMMEDIATE_SUFFIX}"):
            try:
                self.scheduler.remove_job(job_id)
            except JobLookupError:
                pass

        executor = self._executors.pop(record.job_id, None)
        if executor is None:
            return
        self.scheduler.remove_executor(record.job_id, shutdown=False)
        executor.shutdown(wait=False)

    def _execute_task(self, task_id: int):
        """Run one tick of a task: invoke the body and record the outcome."""
        record = self.registry.get(task_id)
        if record is None:
            return

        if not record.run_lock.acquire(blocking=False):
            logger.debug(f"Skipping tick for task {record.name}: previous run still in progress")
            return

        try:
            with self.registry.lock:
                if task_id not in self.registry:
                    return
                record.status = TaskStatus.RUNNING
                record.last_run = datetime.now()
                logger.info(f"Running task: {record.name}")

            try:
                self._invoke(record.body)
            except Exception as e:
                with self.registry.lock:
                    record.error_count += 1
                    record.status = TaskStatus.ERROR
                    record.last_error = f"{type(e).__name__}: {e}"
                    record.next_run = datetime.now() + record.frequency.interval

                logger.error(f"Error in task {record.name}: {e}", exc_info=True)
            else:
                with self.registry.lock:
                    record.run_count += 1
                    record.status = TaskStatus.IDLE
                    record.next_run = datetime.now() + record.frequency.interval
                    next_run = record.next_run

                logger.info(
                    f"Task {record.name} completed successfully. "
                    f"Next run at: {next_run.isoformat(timespec='seconds')}"
                )
        finally:
            record.run_lock.release()

    @staticmethod
    def _invoke(body: Callable[[], Any]):
        """Call the body, driving a returned awaitable to completion."""
        result = body()
        if inspect.isawaitable(result):
            asyncio.run(_await(result))
