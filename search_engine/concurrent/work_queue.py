"""
Fixed-size worker pool pulling tasks from one shared FIFO queue.

The queue tracks pending work itself: every submitted task counts as pending
until a worker has finished running it, and drain() blocks until that count
returns to zero.
"""

import threading
import traceback
from collections import deque
from datetime import datetime
from typing import Any, Callable, Deque, Dict, List, Optional, Union

from search_engine.utils.logging import get_logger
from search_engine.utils.errors import WorkQueueError
from .models import WorkQueueConfig, WorkerState
from .thread_safe import ThreadSafeCounter


logger = get_logger(__name__)

Task = Callable[[], Any]


class PoolWorker(threading.Thread):
    """Long-lived worker thread that runs tasks until the queue shuts down."""

    def __init__(self, worker_id: str, work_queue: "WorkQueue"):
        """
        Initialize worker thread.

        Args:
            worker_id: Unique identifier for this worker
            work_queue: Queue to take tasks from
        """
        super().__init__(name=f"{work_queue.name}-{worker_id}", daemon=True)

        self.worker_id = worker_id
        self.work_queue = work_queue
        self.state = WorkerState.STARTING
        self.tasks_completed = 0
        self.tasks_failed = 0
        self.logger = get_logger(f"{__name__}.{worker_id}")

    def run(self) -> None:
        """Main worker loop: take a task, run it, repeat until shutdown."""
        self.logger.debug(f"Worker {self.worker_id} starting")

        try:
            while True:
                self.state = WorkerState.IDLE
                task = self.work_queue._next_task()
                if task is None:
                    break

                self.state = WorkerState.WORKING
                self._run_task(task)
        finally:
            self.state = WorkerState.STOPPED
            self.logger.debug(f"Worker {self.worker_id} stopped")

    def _run_task(self, task: Task) -> None:
        """Run one task; errors are logged and never escape the worker."""
        start_time = datetime.now()

        try:
            task()
            self.tasks_completed += 1
        except Exception as e:
            self.tasks_failed += 1
            self.work_queue._failed_tasks.increment()
            self.logger.error(f"Worker {self.worker_id} task failed: {e}")
            self.logger.debug(f"Worker {self.worker_id} task traceback: {traceback.format_exc()}")
        finally:
            execution_time = (datetime.now() - start_time).total_seconds()
            self.logger.debug(f"Worker {self.worker_id} finished task in {execution_time:.3f}s")
            self.work_queue._decrement_pending()


class WorkQueue:
    """A simple work queue backed by a fixed pool of worker threads."""

    def __init__(self, config: Union[WorkQueueConfig, int, None] = None):
        """
        Start a work queue.

        Args:
            config: Work queue configuration or a plain thread count
                (defaults to DEFAULT_THREADS workers)

        Raises:
            WorkQueueError: If a worker thread cannot be started
        """
        if config is None:
            config = WorkQueueConfig()
        elif isinstance(config, int):
            config = WorkQueueConfig(threads=config)

        self.config = config
        self.name = config.name

        # Task queue, guarded by its own condition
        self._tasks: Deque[Task] = deque()
        self._queue_condition = threading.Condition()
        self._shutdown = False

        # Pending work, guarded separately from the task queue
        self._pending = 0
        self._pending_condition = threading.Condition()

        # Statistics
        self._submitted_tasks = ThreadSafeCounter()
        self._failed_tasks = ThreadSafeCounter()

        self._workers: List[PoolWorker] = []
        self._start_workers(config.threads)

    def _start_workers(self, count: int) -> None:
        logger.info(f"Starting {count} worker threads for {self.name}")

        for i in range(count):
            worker = PoolWorker(f"worker_{i}", self)
            try:
                worker.start()
            except RuntimeError as e:
                logger.error(f"Failed to start worker {worker.worker_id}: {e}")
                self.shutdown()
                raise WorkQueueError(
                    f"Failed to start worker {worker.worker_id}",
                    {"started_workers": len(self._workers), "error": str(e)}
                )
            self._workers.append(worker)

    def submit(self, task: Task) -> None:
        """
        Add a task to the queue. A worker will run it when available.

        Args:
            task: Callable taking no arguments

        Raises:
            WorkQueueError: If the queue has been shut down
        """
        with self._queue_condition:
            if self._shutdown:
                raise WorkQueueError("Cannot submit work to a queue that has been shut down")

            # Counted as pending before any worker can pick it up
            self._increment_pending()
            self._tasks.append(task)
            self._queue_condition.notify()

        self._submitted_tasks.increment()

    def drain(self) -> None:
        """
        Block until all pending work has finished.

        Tasks submitted while waiting (for example by running tasks)
        extend the wait.
        """
        with self._pending_condition:
            while self._pending > 0:
                self._pending_condition.wait()

    def shutdown(self) -> None:
        """
        Ask the queue to shut down.

        Workers finish the task they are running; queued tasks that have not
        started are abandoned. The queue cannot be reused afterwards.
        """
        with self._queue_condition:
            if self._shutdown:
                return
            self._shutdown = True
            abandoned = len(self._tasks)
            self._queue_condition.notify_all()

        if abandoned:
            logger.warning(f"{self.name} shut down with {abandoned} queued tasks abandoned")
        logger.info(f"{self.name} shutdown requested")

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the worker threads to exit after shutdown().

        Returns:
            True if every worker exited within the timeout
        """
        for worker in self._workers:
            worker.join(timeout=timeout)
        return not any(worker.is_alive() for worker in self._workers)

    def size(self) -> int:
        """Returns the number of worker threads."""
        return len(self._workers)

    @property
    def pending(self) -> int:
        """Number of submitted tasks that have not finished yet."""
        with self._pending_condition:
            return self._pending

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def get_stats(self) -> Dict[str, Any]:
        """
        Get queue statistics.

        Returns:
            Dictionary with queue and worker stats
        """
        with self._queue_condition:
            queued = len(self._tasks)

        return {
            "name": self.name,
            "workers": self.size(),
            "alive_workers": sum(1 for w in self._workers if w.is_alive()),
            "queued_tasks": queued,
            "pending_tasks": self.pending,
            "submitted_tasks": self._submitted_tasks.get_value(),
            "failed_tasks": self._failed_tasks.get_value(),
            "tasks_completed": sum(w.tasks_completed for w in self._workers),
            "shutdown": self._shutdown
        }

    def _next_task(self) -> Optional[Task]:
        """Wait for a task; None means the worker should exit."""
        with self._queue_condition:
            while not self._tasks and not self._shutdown:
                self._queue_condition.wait()

            if self._shutdown:
                return None
            return self._tasks.popleft()

    def _increment_pending(self) -> None:
        with self._pending_condition:
            self._pending += 1

    def _decrement_pending(self) -> None:
        with self._pending_condition:
            self._pending -= 1
            if self._pending == 0:
                self._pending_condition.notify_all()

    def __enter__(self) -> "WorkQueue":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        return f"WorkQueue(name={self.name!r}, workers={self.size()}, pending={self.pending})"
