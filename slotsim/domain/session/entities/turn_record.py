# slotsim/domain/session/entities/turn_record.py
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from slotsim.domain.machine.entities.symbols import SymbolType
from .spin_outcome import SpinOutcome


@dataclass(frozen=True)
class LineWinRecord:
    """One winning payline inside a simulated turn."""
    payline_index: int
    symbol: SymbolType
    match_count: int
    win_amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "payline_index": self.payline_index,
            "symbol": self.symbol.display_name,
            "match_count": self.match_count,
            "win_amount": self.win_amount,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LineWinRecord":
        return cls(
            payline_index=data["payline_index"],
            symbol=SymbolType.parse(data["symbol"]),
            match_count=data["match_count"],
            win_amount=data["win_amount"],
        )


@dataclass(frozen=True)
class SimulationTurnRecord:
    """
    Immutable record of a single simulated turn.

    winning_symbol and match_count describe the first winning line in
    payline order; both are None/0 for a losing turn.
    """
    turn_index: int
    starting_credit: float
    bet_amount: float
    is_win: bool
    prize_amount: float
    winning_line_indices: Tuple[int, ...] = field(default_factory=tuple)
    winning_symbol: Optional[SymbolType] = None
    match_count: int = 0
    line_wins: Tuple[LineWinRecord, ...] = field(default_factory=tuple)

    @classmethod
    def from_outcome(cls, turn_index: int, starting_credit: float, outcome: SpinOutcome) -> "SimulationTurnRecord":
        """
        Record an evaluated spin.

        Args:
            turn_index: Zero-based turn number
            starting_credit: Credits before the bet was debited
            outcome: The spin's aggregated outcome

        Returns:
            Frozen turn record
        """
        first = outcome.wins[0] if outcome.wins else None

        return cls(
            turn_index=turn_index,
            starting_credit=starting_credit,
            bet_amount=outcome.bet_amount,
            is_win=outcome.is_win,
            prize_amount=outcome.total_win,
            winning_line_indices=tuple(win.payline_index for win in outcome.wins),
            winning_symbol=first.symbol if first else None,
            match_count=first.match_count if first else 0,
            line_wins=tuple(
                LineWinRecord(win.payline_index, win.symbol, win.match_count, win.win_amount)
                for win in outcome.wins
            )
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "turn_index": self.turn_index,
            "starting_credit": self.starting_credit,
            "bet_amount": self.bet_amount,
            "is_win": self.is_win,
            "prize_amount": self.prize_amount,
            "winning_line_indices": list(self.winning_line_indices),
            "winning_symbol": self.winning_symbol.display_name if self.winning_symbol is not None else None,
            "match_count": self.match_count,
            "line_wins": [line.to_dict() for line in self.line_wins],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationTurnRecord":
        symbol = data.get("winning_symbol")
        return cls(
            turn_index=data["turn_index"],
            starting_credit=data["starting_credit"],
            bet_amount=data["bet_amount"],
            is_win=data["is_win"],
            prize_amount=data["prize_amount"],
            winning_line_indices=tuple(data.get("winning_line_indices", [])),
            winning_symbol=SymbolType.parse(symbol) if symbol is not None else None,
            match_count=data.get("match_count", 0),
            line_wins=tuple(LineWinRecord.from_dict(line) for line in data.get("line_wins", [])),
        )
