# slotsim/infrastructure/concurrency/task_executor.py
import logging
from enum import Enum, auto
from typing import Any, Callable, List, Optional, TypeVar

from slotsim.infrastructure.concurrency.thread_pool import ThreadPool

T = TypeVar("T")


class ExecutionMode(Enum):
    SEQUENTIAL = auto()
    MULTITHREAD = auto()


class TaskExecutor:
    """
    Runs a list of independent tasks sequentially or on a thread pool.
    Results always come back in task order.
    """
    def __init__(self, mode: ExecutionMode = ExecutionMode.SEQUENTIAL, max_workers: int = None):
        self.mode = mode
        self.max_workers = max_workers
        self.logger = logging.getLogger("infrastructure.task_executor")
        self.pool = ThreadPool(max_workers) if mode == ExecutionMode.MULTITHREAD else None

    def execute(self, tasks: List[Callable[[], T]]) -> List[T]:
        return self.execute_with_progress(tasks)

    def execute_with_progress(self, tasks: List[Callable[[], T]],
                              progress_callback: Optional[Callable[[int, int], Any]] = None) -> List[T]:
        task_count = len(tasks)
        self.logger.info(f"Executing {task_count} tasks in {self.mode.name} mode")

        if self.mode == ExecutionMode.MULTITHREAD:
            return self.pool.execute_tasks(tasks, progress_callback)

        results = []
        for i, task in enumerate(tasks):
            results.append(task())
            if progress_callback:
                progress_callback(i + 1, task_count)
        return results

    def change_mode(self, new_mode: ExecutionMode, max_workers: int = None):
        """
        Change execution mode.

        Args:
            new_mode: New ExecutionMode
            max_workers: Optional new max_workers value
        """
        self.logger.info(f"Changing execution mode from {self.mode.name} to {new_mode.name}")
        self.mode = new_mode

        if max_workers is not None:
            self.max_workers = max_workers

        self.pool = ThreadPool(self.max_workers) if self.mode == ExecutionMode.MULTITHREAD else None
