# slotsim/infrastructure/concurrency/thread_pool.py
import concurrent.futures
import logging
from typing import Any, Callable, List, Optional, TypeVar

T = TypeVar("T")


class ThreadPool:
    """Runs independent tasks on a ThreadPoolExecutor."""
    def __init__(self, max_workers: int = None):
        self.max_workers = max_workers
        self.logger = logging.getLogger("infrastructure.thread_pool")

    def execute_tasks(self, tasks: List[Callable[[], T]],
                      progress_callback: Optional[Callable[[int, int], Any]] = None) -> List[T]:
        """
        Run all tasks and return their results in submission order.

        The first task exception is re-raised once every task has finished.

        Args:
            tasks: Zero-argument callables
            progress_callback: Optional callback(completed, total), called as tasks finish
        """
        self.logger.info(f"Executing {len(tasks)} tasks with {self.max_workers} workers")
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(task) for task in tasks]

            if progress_callback:
                for completed, _ in enumerate(concurrent.futures.as_completed(futures), start=1):
                    progress_callback(completed, len(futures))

            return [future.result() for future in futures]
