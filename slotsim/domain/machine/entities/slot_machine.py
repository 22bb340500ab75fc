# slotsim/domain/machine/entities/slot_machine.py
import logging
from typing import Any, Dict, List, Optional

from slotsim.domain.exceptions import ConfigurationError, RangeError
from .machine_config import MachineConfig
from .symbol_grid import SymbolGrid
from ..services.grid_generator import generate_grid
from ..services.win_evaluation import PaylineEvaluator, PaylineWin


class SlotMachine:
    """
    Live-play facade over a machine configuration.
    Produces grids with its own random source and evaluates them leniently.
    """
    def __init__(self, config: MachineConfig, random_source=None):
        """
        Initialize the slot machine.

        Args:
            config: Immutable machine configuration
            random_source: RandomSource owned by this machine (optional)
        """
        self.id = config.name
        self.logger = logging.getLogger(f"domain.machine.{self.id}")
        self.logger.info(f"Initializing slot machine: {self.id}")

        self.config = config
        self.rng = random_source

        # Spins must never crash a session, so evaluation is lenient here
        self._evaluator = PaylineEvaluator(config.paylines, config.payout_table, strict=False)

        if config.payout_table.is_fallback:
            self.logger.warning(f"Slot machine {self.id} is using the fallback payout table")

        self.logger.info(f"Slot machine {self.id} initialized with {config.payline_count} paylines")

    @property
    def evaluator(self) -> PaylineEvaluator:
        return self._evaluator

    @property
    def payline_count(self) -> int:
        return self.config.payline_count

    def set_rng(self, random_source):
        """
        Set or replace the random source.

        Args:
            random_source: RandomSource instance
        """
        self.rng = random_source
        if random_source is None:
            self.logger.warning("Random source removed, spins are disabled")
        else:
            self.logger.debug(f"Updated random source: {random_source.strategy_name}")

    def spin(self) -> SymbolGrid:
        """
        Generate a fresh grid.

        Returns:
            Newly sampled SymbolGrid

        Raises:
            ConfigurationError: If no random source is set
        """
        if self.rng is None:
            self.logger.error("No random source set, cannot spin")
            raise ConfigurationError("No random source set for slot machine")

        table = self.config.payout_table
        grid = generate_grid(
            self.config.reel_count,
            self.config.row_count,
            table.weights(),
            self.rng,
            table.symbols()
        )
        self.logger.debug(f"Spin result: {grid.to_list()}")
        return grid

    def evaluate_spin(self, grid: SymbolGrid, bet_per_line: float, active_lines: Optional[int] = None) -> List[PaylineWin]:
        """
        Evaluate a grid obtained from spin().

        Never raises for configuration or range problems; they are logged
        and the spin pays nothing.
        """
        try:
            return self._evaluator.evaluate(grid, bet_per_line, active_lines)
        except (ConfigurationError, RangeError) as e:
            self.logger.error(f"Evaluation failed, no wins awarded: {e}")
            return []

    def get_info(self) -> Dict[str, Any]:
        """
        Get information about this machine.

        Returns:
            Dictionary with machine information
        """
        info = self.config.get_info()
        info['id'] = self.id
        info['rng'] = self.rng.strategy_name if self.rng else None
        return info
