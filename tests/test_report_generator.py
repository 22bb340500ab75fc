# tests/test_report_generator.py
import dataclasses
import json
import os
import shutil
import sys
import tempfile
import unittest

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from slotsim.application.analysis.report_generator import ReportGenerator
from slotsim.application.analysis.simulation_report import SimulationReport, return_to_player
from slotsim.application.simulation.simulation_runner import SimulationRunner
from slotsim.domain.exceptions import DataIntegrityError
from slotsim.domain.machine.entities.machine_config import MachineConfig
from slotsim.infrastructure.rng.rng_provider import RNGProvider

MACHINE = {
    "machine_id": "three_reel",
    "reel_count": 3,
    "row_count": 3,
    "paylines": [
        {"name": "Top", "positions": [0, 0, 0]},
        {"name": "Middle", "positions": [1, 1, 1]},
        {"name": "Bottom", "positions": [2, 2, 2]},
        {"name": "Diagonal", "positions": [0, 1, 2]},
    ],
}


class TamperingReportGenerator(ReportGenerator):
    """Reads back a report that differs from the one written."""

    def load_report(self, filepath):
        report = super().load_report(filepath)
        return dataclasses.replace(report, total_won=report.total_won + 1)


class TestReportGenerator(unittest.TestCase):
    """Saving, loading and pruning reports."""

    @classmethod
    def setUpClass(cls):
        # No symbol table, so the built-in payouts apply
        config = MachineConfig.from_dict(MACHINE)
        runner = SimulationRunner(config, RNGProvider().get_rng("mersenne", 5))
        cls.report = runner.run_simulation(10000, 1, 60, record_turn_detail=True)

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.output_dir = os.path.join(self.temp_dir, "reports")
        self.generator = ReportGenerator(self.output_dir)

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_output_dir_created(self):
        self.assertTrue(os.path.isdir(self.output_dir))

    def test_save_and_load(self):
        path = self.generator.save_report(self.report)

        self.assertTrue(path.endswith(".json"))
        loaded = self.generator.load_report(path)
        self.assertEqual(loaded.to_dict(), self.report.to_dict())
        self.assertEqual(len(loaded.turns), 60)

    def test_saved_json_is_sorted_and_timeless(self):
        path = self.generator.save_report(self.report, "fixed.json")

        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()

        self.assertEqual(text, self.report.to_json())
        data = json.loads(text)
        self.assertEqual(list(data), sorted(data))
        self.assertNotIn("timestamp", data)

    def test_names_never_collide(self):
        first = self.generator.save_report(self.report)
        second = self.generator.save_report(self.report)

        self.assertNotEqual(first, second)
        self.assertEqual(len(self.generator.list_reports()), 2)

    def test_list_newest_first(self):
        paths = [self.generator.save_report(self.report, f"report_{i}.json") for i in range(3)]
        for age, path in enumerate(reversed(paths)):
            os.utime(path, (1000000 - age * 10, 1000000 - age * 10))

        self.assertEqual(self.generator.list_reports(), list(reversed(paths)))

    def test_cleanup_keeps_newest(self):
        paths = [self.generator.save_report(self.report, f"report_{i}.json") for i in range(4)]
        for i, path in enumerate(paths):
            os.utime(path, (1000000 + i * 10, 1000000 + i * 10))

        removed = self.generator.cleanup_old_reports(keep=2)

        self.assertEqual(removed, 2)
        self.assertEqual(self.generator.list_reports(), [paths[3], paths[2]])

    def test_round_trip_failure(self):
        generator = TamperingReportGenerator(self.output_dir)

        with self.assertRaises(DataIntegrityError) as context:
            generator.save_report(self.report, "tampered.json")

        self.assertTrue(context.exception.path.endswith("tampered.json"))

    def test_unreadable_report(self):
        class BrokenReader(ReportGenerator):
            def load_report(self, filepath):
                raise ValueError("truncated")

        with self.assertRaises(DataIntegrityError):
            BrokenReader(self.output_dir).save_report(self.report, "broken.json")


class TestSimulationReport(unittest.TestCase):
    """Report serialization."""

    def test_return_to_player(self):
        self.assertEqual(return_to_player(0, 0), 0.0)
        self.assertAlmostEqual(return_to_player(96, 100), 96.0)

    def test_json_round_trip(self):
        config = MachineConfig.from_dict(MACHINE)
        report = SimulationRunner(config, RNGProvider().get_rng("numpy", 1)).run_simulation(500, 1, 30)

        self.assertEqual(SimulationReport.from_json(report.to_json()).to_dict(), report.to_dict())
        self.assertEqual(report.configuration_name, "three_reel")


if __name__ == '__main__':
    unittest.main()
