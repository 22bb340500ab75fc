# slotsim/application/analysis/statistics.py
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from slotsim.domain.machine.entities.symbols import SymbolType
from slotsim.domain.session.entities.incremental_stats import IncrementalStats
from slotsim.domain.session.entities.spin_outcome import WinTier, classify_tier, win_multiplier
from slotsim.domain.session.entities.turn_record import SimulationTurnRecord

TOP_LINES = 5


@dataclass(frozen=True)
class LineFrequency:
    """How often one payline paid out."""
    line_index: int
    line_name: str
    hit_count: int
    hit_percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line_index": self.line_index,
            "line_name": self.line_name,
            "hit_count": self.hit_count,
            "hit_percentage": self.hit_percentage,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LineFrequency":
        return cls(data["line_index"], data["line_name"], data["hit_count"], data["hit_percentage"])


@dataclass(frozen=True)
class SymbolWinFrequency:
    """How often, and for how much, one symbol formed a winning line."""
    symbol: SymbolType
    win_count: int
    win_percentage: float
    total_prize_amount: float
    average_prize: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol.display_name,
            "win_count": self.win_count,
            "win_percentage": self.win_percentage,
            "total_prize_amount": self.total_prize_amount,
            "average_prize": self.average_prize,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SymbolWinFrequency":
        return cls(
            symbol=SymbolType.parse(data["symbol"]),
            win_count=data["win_count"],
            win_percentage=data["win_percentage"],
            total_prize_amount=data["total_prize_amount"],
            average_prize=data["average_prize"],
        )


@dataclass(frozen=True)
class SimulationStatistics:
    """Aggregate view over the turns of one simulation run."""
    total_wins: int = 0
    total_losses: int = 0
    hit_frequency: float = 0.0
    average_win_amount: float = 0.0
    prize_std_dev: float = 0.0
    biggest_win: float = 0
    biggest_win_turn: int = 0

    most_common_winning_lines: List[LineFrequency] = field(default_factory=list)
    total_line_hits: int = 0
    symbol_win_frequency: List[SymbolWinFrequency] = field(default_factory=list)

    # Win size per winning turn
    small_wins: int = 0
    medium_wins: int = 0
    big_wins: int = 0
    mega_wins: int = 0
    jackpot_wins: int = 0

    # Match length per winning line
    three_of_kind_wins: int = 0
    four_of_kind_wins: int = 0
    five_of_kind_wins: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = {k: getattr(self, k) for k in self.__dataclass_fields__}
        data["most_common_winning_lines"] = [line.to_dict() for line in self.most_common_winning_lines]
        data["symbol_win_frequency"] = [symbol.to_dict() for symbol in self.symbol_win_frequency]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationStatistics":
        values = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        values["most_common_winning_lines"] = [
            LineFrequency.from_dict(line) for line in data.get("most_common_winning_lines", [])
        ]
        values["symbol_win_frequency"] = [
            SymbolWinFrequency.from_dict(symbol) for symbol in data.get("symbol_win_frequency", [])
        ]
        return cls(**values)


_TIER_FIELDS = {
    WinTier.SMALL: "small_wins",
    WinTier.MEDIUM: "medium_wins",
    WinTier.BIG: "big_wins",
    WinTier.MEGA: "mega_wins",
    WinTier.JACKPOT: "jackpot_wins",
}

_MATCH_FIELDS = {
    3: "three_of_kind_wins",
    4: "four_of_kind_wins",
    5: "five_of_kind_wins",
}


def compute_statistics(turns: Sequence[SimulationTurnRecord],
                       line_names: Optional[Mapping[int, str]] = None) -> SimulationStatistics:
    """
    Roll a sequence of turn records up into run statistics.

    Pure: the result depends only on the records, so a report can be
    rebuilt at any point of a run, or from a saved report's turns.

    Args:
        turns: Turn records in execution order
        line_names: Optional payline index to display name mapping;
            lines default to "Line <index + 1>"

    Returns:
        SimulationStatistics for the given turns
    """
    winning_turns = [turn for turn in turns if turn.is_win]
    total_wins = len(winning_turns)

    prizes = IncrementalStats()
    biggest_win = 0
    biggest_win_turn = 0
    for turn in winning_turns:
        prizes.update(turn.prize_amount)
        # Strictly greater keeps the first occurrence
        if turn.prize_amount > biggest_win:
            biggest_win = turn.prize_amount
            biggest_win_turn = turn.turn_index

    line_hits = Counter()
    symbol_counts = Counter()
    symbol_prizes = {}
    match_counts = Counter()
    for turn in winning_turns:
        for line in turn.line_wins:
            line_hits[line.payline_index] += 1
            symbol_counts[line.symbol] += 1
            symbol_prizes[line.symbol] = symbol_prizes.get(line.symbol, 0) + line.win_amount
            match_counts[line.match_count] += 1

    def percentage_of_wins(count: int) -> float:
        return count / total_wins * 100 if total_wins > 0 else 0.0

    line_names = line_names or {}
    top_lines = sorted(line_hits.items(), key=lambda item: (-item[1], item[0]))[:TOP_LINES]
    most_common_winning_lines = [
        LineFrequency(
            line_index=index,
            line_name=line_names.get(index, f"Line {index + 1}"),
            hit_count=count,
            hit_percentage=percentage_of_wins(count)
        )
        for index, count in top_lines
    ]

    symbol_win_frequency = [
        SymbolWinFrequency(
            symbol=symbol,
            win_count=count,
            win_percentage=percentage_of_wins(count),
            total_prize_amount=symbol_prizes[symbol],
            average_prize=symbol_prizes[symbol] / count
        )
        for symbol, count in sorted(symbol_counts.items(), key=lambda item: (-item[1], item[0]))
    ]

    distribution = Counter(
        classify_tier(win_multiplier(turn.prize_amount, turn.bet_amount)) for turn in winning_turns
    )

    values = {
        "total_wins": total_wins,
        "total_losses": len(turns) - total_wins,
        "hit_frequency": total_wins / len(turns) * 100 if turns else 0.0,
        "average_win_amount": prizes.sum_values / total_wins if total_wins > 0 else 0.0,
        "prize_std_dev": prizes.get_std_dev(),
        "biggest_win": biggest_win,
        "biggest_win_turn": biggest_win_turn,
        "most_common_winning_lines": most_common_winning_lines,
        "total_line_hits": sum(line_hits.values()),
        "symbol_win_frequency": symbol_win_frequency,
    }
    for tier, name in _TIER_FIELDS.items():
        values[name] = distribution.get(tier, 0)
    for match_count, name in _MATCH_FIELDS.items():
        values[name] = match_counts.get(match_count, 0)

    return SimulationStatistics(**values)
