# slotsim/application/simulation/coordinator.py
import logging
import time
from typing import Any, Dict, List, Optional

from slotsim.application.analysis.simulation_report import SimulationReport, return_to_player
from slotsim.application.simulation.simulation_runner import SimulationRunner
from slotsim.domain.events.event_dispatcher import EventDispatcher
from slotsim.domain.machine.entities.machine_config import MachineConfig
from slotsim.infrastructure.concurrency.task_executor import TaskExecutor


class SimulationCoordinator:
    """
    Runs independent simulation batches against one machine configuration.

    Each batch gets its own random source (seeded base_seed + batch index)
    and its own runner; batches share nothing but the immutable config.
    """
    def __init__(self, machine_config: MachineConfig, rng_provider,
                 task_executor: Optional[TaskExecutor] = None,
                 event_dispatcher: Optional[EventDispatcher] = None):
        """
        Initialize the simulation coordinator.

        Args:
            machine_config: Configuration shared by all batches
            rng_provider: RNGProvider creating one random source per batch
            task_executor: Optional executor for concurrent batches
            event_dispatcher: Optional dispatcher passed to every runner
        """
        self.logger = logging.getLogger("application.simulation.coordinator")
        self.machine_config = machine_config
        self.rng_provider = rng_provider
        self.task_executor = task_executor
        self.event_dispatcher = event_dispatcher

    def run_simulation(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run every batch described by a simulation configuration.

        Args:
            config: Simulation settings: batches, rng {strategy, seed},
                starting_credits, bet_per_line, max_turns, active_lines,
                record_turn_detail, use_concurrency

        Returns:
            Dictionary with "reports" (in batch order), "summary" and timing
        """
        batches = config.get("batches", 1)
        rng_config = config.get("rng", {}) or {}
        strategy = rng_config.get("strategy", "mersenne")
        base_seed = rng_config.get("seed")
        use_concurrency = config.get("use_concurrency", True)

        run_args = {
            "starting_credits": config.get("starting_credits", self.machine_config.starting_credits),
            "bet_per_line": config.get("bet_per_line", self.machine_config.default_bet_per_line),
            "max_turns": config.get("max_turns", 1000),
            "record_turn_detail": config.get("record_turn_detail", True),
            "active_lines": config.get("active_lines"),
        }

        self.logger.info(
            f"Starting {batches} simulation batches on {self.machine_config.name} "
            f"(rng={strategy}, base_seed={base_seed})"
        )
        start_time = time.time()

        tasks = [self._create_task(i, strategy, base_seed, run_args) for i in range(batches)]

        if use_concurrency and self.task_executor:
            def progress_callback(completed, total):
                if completed % 10 == 0 or completed == total:
                    self.logger.info(f"Progress: {completed}/{total} batches")

            reports = self.task_executor.execute_with_progress(tasks, progress_callback)
        else:
            reports = [task() for task in tasks]

        end_time = time.time()
        summary = self.summarize(reports)
        self.logger.info(
            f"Completed {batches} batches in {end_time - start_time:.2f} seconds - "
            f"RTP {summary['rtp']:.2f}%, hit frequency {summary['hit_frequency']:.2f}%"
        )

        return {
            "reports": reports,
            "summary": summary,
            "start_time": start_time,
            "end_time": end_time
        }

    def _create_task(self, batch_index: int, strategy: str, base_seed: Optional[int], run_args: Dict[str, Any]):
        seed = base_seed + batch_index if base_seed is not None else None

        def task() -> SimulationReport:
            return self.run_batch(batch_index, strategy, seed, run_args)
        return task

    def run_batch(self, batch_index: int, strategy: str, seed: Optional[int],
                  run_args: Dict[str, Any]) -> SimulationReport:
        """Run one batch with a freshly created random source."""
        self.logger.debug(f"Running batch {batch_index} with seed {seed}")
        random_source = self.rng_provider.get_rng(strategy, seed)
        runner = SimulationRunner(self.machine_config, random_source, self.event_dispatcher)
        return runner.run_simulation(**run_args)

    @staticmethod
    def summarize(reports: List[SimulationReport]) -> Dict[str, Any]:
        """
        Aggregate headline numbers over batch reports.

        Args:
            reports: Batch reports

        Returns:
            Totals, RTP and hit frequency across all batches
        """
        total_turns = sum(r.total_turns for r in reports)
        total_bet = sum(r.total_bet for r in reports)
        total_won = sum(r.total_won for r in reports)
        total_wins = sum(r.statistics.total_wins for r in reports)

        return {
            "batches": len(reports),
            "completed_batches": sum(1 for r in reports if r.is_complete),
            "aborted_batches": sum(1 for r in reports if r.is_aborted),
            "total_turns": total_turns,
            "total_bet": total_bet,
            "total_won": total_won,
            "rtp": return_to_player(total_won, total_bet),
            "hit_frequency": total_wins / total_turns * 100 if total_turns > 0 else 0.0,
            "biggest_win": max((r.statistics.biggest_win for r in reports), default=0),
        }
