# slotsim/infrastructure/persistence/save_service.py
import json
import logging
import os
from typing import Any, Dict, Protocol

from slotsim.domain.session.entities.session_stats import GameStatistics

DEFAULT_CREDITS = 1000
CREDITS_KEY = "credits"
STATS_KEY = "statistics"


class SaveService(Protocol):
    """Persistence collaborator for live play: credits and lifetime statistics."""

    def load_credits(self) -> float:
        ...

    def save_credits(self, credits: float) -> None:
        ...

    def load_statistics(self) -> GameStatistics:
        ...

    def save_statistics(self, stats: GameStatistics) -> None:
        ...


class JsonSaveService:
    """
    Stores credits and statistics together in a single JSON file.
    A missing file reads as a fresh player.
    """
    def __init__(self, file_path: str, default_credits: int = DEFAULT_CREDITS):
        """
        Initialize the save service.

        Args:
            file_path: Path of the save file; parent directories are created on first save
            default_credits: Credits reported when nothing has been saved yet
        """
        self.logger = logging.getLogger("infrastructure.persistence.save")
        self.file_path = file_path
        self.default_credits = default_credits

    def load_credits(self) -> float:
        # Fractional payouts make fractional balances; stored as-is
        return self._read().get(CREDITS_KEY, self.default_credits)

    def save_credits(self, credits: float) -> None:
        data = self._read()
        data[CREDITS_KEY] = credits
        self._write(data)

    def load_statistics(self) -> GameStatistics:
        return GameStatistics.from_dict(self._read().get(STATS_KEY, {}))

    def save_statistics(self, stats: GameStatistics) -> None:
        data = self._read()
        data[STATS_KEY] = stats.to_dict()
        self._write(data)

    def _read(self) -> Dict[str, Any]:
        if not os.path.isfile(self.file_path):
            return {}

        with open(self.file_path, 'r', encoding='utf-8') as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                self.logger.error(f"Save file {self.file_path} is corrupt, starting fresh: {e}")
                return {}

    def _write(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        tmp_path = self.file_path + ".tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, sort_keys=True)
        os.replace(tmp_path, self.file_path)
        self.logger.debug(f"Saved player data to {self.file_path}")
