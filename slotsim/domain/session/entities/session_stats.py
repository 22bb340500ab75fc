# slotsim/domain/session/entities/session_stats.py
from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class GameStatistics:
    """Lifetime play statistics for one player, persisted between sessions."""
    total_spins: int = 0
    total_wins: int = 0
    biggest_win: float = 0.0
    total_wagered: float = 0.0
    total_won: float = 0.0

    def update_spin(self, outcome) -> None:
        """
        Fold one spin into the totals.

        Args:
            outcome: SpinOutcome of the spin
        """
        self.total_spins += 1
        self.total_wagered += outcome.bet_amount
        self.total_won += outcome.total_win

        if outcome.is_win:
            self.total_wins += 1
            self.biggest_win = max(self.biggest_win, outcome.total_win)

    @property
    def win_rate(self) -> float:
        """Percentage of spins that paid anything."""
        if self.total_spins == 0:
            return 0.0
        return self.total_wins / self.total_spins * 100

    @property
    def return_to_player(self) -> float:
        """Total won as a percentage of total wagered."""
        if self.total_wagered == 0:
            return 0.0
        return self.total_won / self.total_wagered * 100

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameStatistics":
        known = {k: v for k, v in (data or {}).items() if k in cls.__dataclass_fields__}
        return cls(**known)
