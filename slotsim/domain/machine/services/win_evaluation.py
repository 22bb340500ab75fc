# slotsim/domain/machine/services/win_evaluation.py
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from slotsim.domain.exceptions import ConfigurationError, RangeError
from ..entities.payline_pattern import PaylinePattern, PaylinePatternSet
from ..entities.payout_table import PayoutTable
from ..entities.symbol_grid import SymbolGrid
from ..entities.symbols import SymbolType

MIN_MATCH = 3


@dataclass(frozen=True)
class PaylineWin:
    """A winning run on one payline."""
    payline_index: int
    symbol: SymbolType
    match_count: int
    win_amount: float
    positions: Tuple[int, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "payline_index": self.payline_index,
            "symbol": self.symbol.display_name,
            "match_count": self.match_count,
            "win_amount": self.win_amount,
            "positions": list(self.positions),
        }


class PaylineEvaluator:
    """
    Service for evaluating payline wins on a symbol grid.

    Stateless once constructed: the same grid always yields the same wins.
    In lenient mode (live play) a line that cannot be priced or read is
    logged and skipped; in strict mode (simulation) it raises.
    """

    def __init__(self, paylines: PaylinePatternSet, pay_table: PayoutTable, strict: bool = False):
        """
        Initialize the evaluator.

        Args:
            paylines: Patterns to evaluate, in order
            pay_table: Payout multipliers per symbol
            strict: Raise instead of skipping unpriceable or unreadable lines
        """
        self._paylines = paylines
        self._pay_table = pay_table
        self.strict = strict

        self.logger = logging.getLogger("domain.machine.evaluator")

    @property
    def paylines(self) -> PaylinePatternSet:
        return self._paylines

    @property
    def pay_table(self) -> PayoutTable:
        return self._pay_table

    def evaluate(self, grid: SymbolGrid, bet_per_line: float, active_lines: Optional[int] = None) -> List[PaylineWin]:
        """
        Evaluate every active payline against the grid.

        Args:
            grid: Symbols after the spin
            bet_per_line: Credits staked on each line
            active_lines: Number of leading patterns to evaluate, all when None

        Returns:
            Wins in pattern order, possibly empty

        Raises:
            ConfigurationError: Strict mode only, symbol missing from pay table
            RangeError: Strict mode only, pattern reads outside the grid
        """
        if grid is None:
            error_msg = "Cannot evaluate an empty grid"
            self.logger.error(error_msg)
            raise ValueError(error_msg)

        if active_lines is not None:
            _lines = max(1, min(active_lines, len(self._paylines)))
            if _lines != active_lines:
                self.logger.warning(f"Payline count adjusted: {active_lines} → {_lines}")
                active_lines = _lines

        wins = []
        for pattern in self._paylines.active(active_lines):
            win = self._evaluate_line(grid, pattern, bet_per_line)
            if win is not None:
                wins.append(win)

        return wins

    def _evaluate_line(self, grid: SymbolGrid, pattern: PaylinePattern, bet_per_line: float) -> Optional[PaylineWin]:
        try:
            line = grid.line(pattern.positions)
        except RangeError as e:
            if self.strict:
                raise
            self.logger.warning(f"Payline {pattern.index} skipped: {e.message}")
            return None

        if len(line) < MIN_MATCH:
            return None

        anchor = self.find_anchor(line)
        match_count = self.count_run(line, anchor)

        if match_count < MIN_MATCH:
            return None

        if anchor not in self._pay_table:
            error_msg = f"Symbol {anchor.display_name} on payline {pattern.index} has no payout entry"
            if self.strict:
                raise ConfigurationError(error_msg)
            self.logger.warning(f"{error_msg}, no win awarded")
            return None

        win_amount = self._pay_table.payout(anchor, match_count) * bet_per_line

        return PaylineWin(
            payline_index=pattern.index,
            symbol=anchor,
            match_count=match_count,
            win_amount=win_amount,
            positions=tuple(pattern.positions[:match_count])
        )

    @staticmethod
    def find_anchor(line: List[SymbolType]) -> SymbolType:
        """Leftmost non-wild symbol of the line, or WILD if the line is all wild."""
        for symbol in line:
            if not symbol.is_wild:
                return symbol
        return SymbolType.WILD

    @staticmethod
    def count_run(line: List[SymbolType], anchor: SymbolType) -> int:
        """Length of the contiguous run from reel 0 matching anchor or wild."""
        count = 1
        for symbol in line[1:]:
            if symbol == anchor or symbol.is_wild:
                count += 1
            else:
                break
        return count
