# slotsim/application/analysis/report_generator.py
import logging
import json
import os
import time
from typing import List, Optional

from slotsim.domain.exceptions import DataIntegrityError
from .simulation_report import SimulationReport

DEFAULT_KEEP = 50
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


class ReportGenerator:
    """
    Writes simulation reports to disk as JSON and reads them back.
    """
    def __init__(self, output_dir: str = "reports"):
        """
        Initialize the report generator.

        Args:
            output_dir: Directory for storing reports
        """
        self.logger = logging.getLogger("application.analysis.report")
        self.output_dir = output_dir

        os.makedirs(output_dir, exist_ok=True)

    def save_report(self, report: SimulationReport, filename: Optional[str] = None) -> str:
        """
        Save a report and verify that it reads back unchanged.

        Args:
            report: Report to save
            filename: Optional file name; defaults to <YYYYmmdd_HHMMSS>.json

        Returns:
            Path to the written file

        Raises:
            DataIntegrityError: If the written file does not round-trip
        """
        if filename is None:
            filename = self._unique_filename(time.strftime(TIMESTAMP_FORMAT))
        filepath = os.path.join(self.output_dir, filename)

        expected = report.to_dict()
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(report.to_json())

        try:
            reloaded = self.load_report(filepath)
        except (ValueError, KeyError, TypeError) as e:
            self.logger.error(f"Report {filepath} could not be read back: {e}")
            raise DataIntegrityError(filepath, f"Report could not be read back from {filepath}: {e}") from e

        if reloaded.to_dict() != expected:
            self.logger.error(f"Report {filepath} does not match the report that was saved")
            raise DataIntegrityError(filepath)

        self.logger.info(f"Simulation report saved to {filepath}")
        return filepath

    def load_report(self, filepath: str) -> SimulationReport:
        """
        Load a report saved by save_report().

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not a valid report
        """
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return SimulationReport.from_dict(data)

    def list_reports(self) -> List[str]:
        """Report file paths, newest first."""
        if not os.path.isdir(self.output_dir):
            return []

        paths = [os.path.join(self.output_dir, name) for name in os.listdir(self.output_dir)
                 if name.endswith(".json")]
        # Names are timestamps, so they break ties between equal mtimes
        return sorted(paths, key=lambda p: (os.path.getmtime(p), os.path.basename(p)), reverse=True)

    def cleanup_old_reports(self, keep: int = DEFAULT_KEEP) -> int:
        """
        Delete all but the newest reports.

        Args:
            keep: Number of reports to keep

        Returns:
            Number of files deleted
        """
        stale = self.list_reports()[keep:]
        for path in stale:
            os.remove(path)
            self.logger.debug(f"Deleted old report {path}")

        if stale:
            self.logger.info(f"Removed {len(stale)} old reports from {self.output_dir}")
        return len(stale)

    def _unique_filename(self, stem: str) -> str:
        # Several reports in the same second get a numeric suffix
        filename = f"{stem}.json"
        counter = 1
        while os.path.exists(os.path.join(self.output_dir, filename)):
            filename = f"{stem}_{counter}.json"
            counter += 1
        return filename
