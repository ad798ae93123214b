"""Background tasks with an observable status log."""

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Union

from cephprov.core.exceptions import TaskCreationError, TaskNotFoundError
from cephprov.models.task import TaskInfo, TaskStatusEntry, TaskSummary

logger = logging.getLogger(__name__)

DEFAULT_TASK_RETENTION = 1000


class Task:
    """A unit of work whose progress is reported through an append-only log."""

    def __init__(self, name: str) -> None:
        self.id = str(uuid.uuid4())
        self.name = name
        self.created = datetime.now(timezone.utc)
        self.started: Union[datetime, None] = None
        self.completed: Union[datetime, None] = None
        self._status: List[TaskStatusEntry] = []
        self._failed = False
        self._lock = threading.Lock()
        self._finished = threading.Event()

    def mark_started(self) -> None:
        """Record the moment the work begins executing."""
        with self._lock:
            if self.started is None:
                self.started = datetime.now(timezone.utc)

    def update_status(self, message: str) -> None:
        """Append a progress message."""
        entry = TaskStatusEntry(timestamp=datetime.now(timezone.utc), message=message)
        with self._lock:
            self._status.append(entry)
        logger.info(f"[{self.name} {self.id}] {message}")

    def mark_done(self, failed: bool = False) -> None:
        """Mark the task finished. Later calls are ignored."""
        with self._lock:
            if self._finished.is_set():
                return
            self._failed = failed
            self.completed = datetime.now(timezone.utc)
            self._finished.set()

    @property
    def done(self) -> bool:
        return self._finished.is_set()

    @property
    def failed(self) -> bool:
        with self._lock:
            return self._failed

    @property
    def status_list(self) -> List[TaskStatusEntry]:
        with self._lock:
            return list(self._status)

    def wait(self, timeout: Union[float, None] = None) -> bool:
        """Block until the task is done; returns False on timeout."""
        return self._finished.wait(timeout)

    def summary(self) -> TaskSummary:
        with self._lock:
            return TaskSummary(
                id=self.id,
                name=self.name,
                created=self.created,
                started=self.started,
                completed=self.completed,
                done=self._finished.is_set(),
                failed=self._failed,
            )

    def info(self) -> TaskInfo:
        summary = self.summary()
        return TaskInfo(**summary.model_dump(), status_list=self.status_list)


class TaskManager:
    """Runs each task on its own daemon thread and keeps tasks addressable by id.

    A provisioning task can spend most of its life waiting on the cluster,
    so tasks never queue behind one another. Once more than ``retention``
    tasks are known, the oldest finished ones are forgotten.
    """

    def __init__(self, retention: int = DEFAULT_TASK_RETENTION) -> None:
        self.retention = retention
        self._tasks: Dict[str, Task] = {}
        self._threads: Dict[str, threading.Thread] = {}
        self._closed = False
        self._lock = threading.Lock()

    def run(self, name: str, func: Callable[[Task], None]) -> str:
        """Start ``func`` in the background and return the new task id.

        ``func`` receives the ``Task`` and is expected to call
        ``mark_done``. An exception escaping ``func`` marks the task failed.

        Raises:
            TaskCreationError: If the manager is shut down or no thread can be started
        """
        task = Task(name)
        thread = threading.Thread(
            target=self._execute,
            args=(task, func),
            name=f"cephprov-task-{task.id[:8]}",
            daemon=True,
        )

        with self._lock:
            if self._closed:
                logger.error(f"Task creation failed for {name}: manager is shut down")
                raise TaskCreationError(name, "task manager is shut down")
            self._tasks[task.id] = task
            self._threads[task.id] = thread

        try:
            thread.start()
        except RuntimeError as e:
            with self._lock:
                del self._tasks[task.id]
                del self._threads[task.id]
            logger.error(f"Task creation failed for {name}: {e}")
            raise TaskCreationError(name, str(e)) from e

        logger.info(f"Started task {name} ({task.id})")
        self._prune()
        return task.id

    def _execute(self, task: Task, func: Callable[[Task], None]) -> None:
        task.mark_started()
        try:
            func(task)
        except Exception as e:
            logger.exception(f"Task {task.name} ({task.id}) crashed")
            task.update_status(f"Failed. error: {e}")
            task.mark_done(failed=True)
        else:
            if not task.done:
                task.mark_done()
        finally:
            with self._lock:
                self._threads.pop(task.id, None)

    def _prune(self) -> None:
        with self._lock:
            excess = len(self._tasks) - self.retention
            if excess <= 0:
                return
            finished = sorted(
                (t for t in self._tasks.values() if t.done),
                key=lambda t: t.created,
            )
            for task in finished[:excess]:
                del self._tasks[task.id]
        logger.debug(f"Forgot {min(excess, len(finished))} finished tasks")

    def get(self, task_id: str) -> Task:
        """Look up a task.

        Raises:
            TaskNotFoundError: If the id is unknown
        """
        with self._lock:
            task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def list(self) -> List[Task]:
        with self._lock:
            return sorted(self._tasks.values(), key=lambda t: t.created)

    def shutdown(self, wait: bool = True, timeout: Union[float, None] = None) -> None:
        """Refuse new tasks; with ``wait`` join the ones still running."""
        with self._lock:
            self._closed = True
            running = list(self._threads.values())
        if wait:
            for thread in running:
                thread.join(timeout)
