# tests/test_coordinator.py
import unittest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from slotsim.application.simulation.coordinator import SimulationCoordinator
from slotsim.application.simulation.simulation_runner import SimulationRunner
from slotsim.domain.machine.factories.machine_factory import MachineFactory
from slotsim.infrastructure.concurrency.task_executor import TaskExecutor, ExecutionMode
from slotsim.infrastructure.config.loaders.yaml_loader import YamlConfigLoader
from slotsim.infrastructure.config.validators.schema_validator import SchemaValidator
from slotsim.infrastructure.rng.rng_provider import RNGProvider

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SWEET_SPIN = os.path.join(ROOT, 'slotsim', 'application', 'config', 'machines', 'sweet_spin.yaml')


class TestSimulationCoordinator(unittest.TestCase):
    """Independent batches over one machine configuration."""

    @classmethod
    def setUpClass(cls):
        cls.machine_config = MachineFactory().load_config(YamlConfigLoader(SchemaValidator()), SWEET_SPIN)

    def setUp(self):
        self.provider = RNGProvider()
        self.run_config = {
            "batches": 4,
            "rng": {"strategy": "mersenne", "seed": 100},
            "starting_credits": 50000,
            "bet_per_line": 1,
            "max_turns": 200,
            "record_turn_detail": True,
            "use_concurrency": False,
        }

    def _run(self, task_executor=None, **overrides):
        config = dict(self.run_config, **overrides)
        coordinator = SimulationCoordinator(self.machine_config, self.provider, task_executor)
        return coordinator.run_simulation(config)

    def test_batch_seeds(self):
        reports = self._run()["reports"]

        self.assertEqual([r.seed for r in reports], [100, 101, 102, 103])

    def test_batches_match_standalone_runs(self):
        reports = self._run()["reports"]

        for i, report in enumerate(reports):
            runner = SimulationRunner(self.machine_config, self.provider.get_rng("mersenne", 100 + i))
            expected = runner.run_simulation(50000, 1, 200, record_turn_detail=True)
            self.assertEqual(report.to_json(), expected.to_json(), f"batch {i}")

    def test_threaded_matches_sequential(self):
        sequential = self._run()["reports"]
        executor = TaskExecutor(ExecutionMode.MULTITHREAD, max_workers=4)
        threaded = self._run(executor, use_concurrency=True)["reports"]

        self.assertEqual([r.to_json() for r in threaded], [r.to_json() for r in sequential])

    def test_sequential_executor(self):
        executor = TaskExecutor(ExecutionMode.SEQUENTIAL)
        reports = self._run(executor, use_concurrency=True)["reports"]

        self.assertEqual([r.seed for r in reports], [100, 101, 102, 103])

    def test_unseeded_batches(self):
        reports = self._run(rng={"strategy": "numpy", "seed": None}, batches=2, max_turns=20)["reports"]

        self.assertEqual([r.seed for r in reports], [None, None])
        self.assertTrue(all(r.rng_strategy == "numpy" for r in reports))
        self.assertTrue(all(r.total_turns == 20 for r in reports))

    def test_summary(self):
        results = self._run()
        reports = results["reports"]
        summary = results["summary"]

        total_bet = sum(r.total_bet for r in reports)
        total_won = sum(r.total_won for r in reports)

        self.assertEqual(summary["batches"], 4)
        self.assertEqual(summary["completed_batches"], 4)
        self.assertEqual(summary["aborted_batches"], 0)
        self.assertEqual(summary["total_turns"], 800)
        self.assertEqual(summary["total_bet"], total_bet)
        self.assertEqual(summary["total_won"], total_won)
        self.assertAlmostEqual(summary["rtp"], total_won / total_bet * 100)
        self.assertEqual(summary["biggest_win"], max(r.statistics.biggest_win for r in reports))
        self.assertLessEqual(results["start_time"], results["end_time"])

    def test_empty_summary(self):
        summary = SimulationCoordinator.summarize([])

        self.assertEqual(summary["batches"], 0)
        self.assertEqual(summary["rtp"], 0.0)
        self.assertEqual(summary["hit_frequency"], 0.0)
        self.assertEqual(summary["biggest_win"], 0)


class TestTaskExecutor(unittest.TestCase):
    """Results come back in task order."""

    def test_threaded_results_in_order(self):
        executor = TaskExecutor(ExecutionMode.MULTITHREAD, max_workers=3)
        tasks = [(lambda i=i: i * i) for i in range(20)]
        progress = []

        results = executor.execute_with_progress(tasks, lambda done, total: progress.append((done, total)))

        self.assertEqual(results, [i * i for i in range(20)])
        self.assertEqual(progress[-1], (20, 20))

    def test_change_mode(self):
        executor = TaskExecutor()
        self.assertIsNone(executor.pool)

        executor.change_mode(ExecutionMode.MULTITHREAD, max_workers=2)

        self.assertIsNotNone(executor.pool)
        self.assertEqual(executor.execute([lambda: "a", lambda: "b"]), ["a", "b"])

    def test_task_error_propagates(self):
        def failing():
            raise RuntimeError("boom")

        executor = TaskExecutor(ExecutionMode.MULTITHREAD, max_workers=2)
        with self.assertRaises(RuntimeError):
            executor.execute([lambda: 1, failing])


if __name__ == '__main__':
    unittest.main()
