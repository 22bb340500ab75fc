# slotsim/domain/session/entities/spin_outcome.py
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple

from slotsim.domain.machine.entities.symbol_grid import SymbolGrid
from slotsim.domain.machine.entities.symbols import SymbolType
from slotsim.domain.machine.services.win_evaluation import PaylineWin

# Win multiplier thresholds (total win / total bet)
SMALL_WIN_THRESHOLD = 0.0
MEDIUM_WIN_THRESHOLD = 5.0
BIG_WIN_THRESHOLD = 10.0
MEGA_WIN_THRESHOLD = 25.0
JACKPOT_THRESHOLD = 50.0


class WinTier(IntEnum):
    """Size class of a spin's total win relative to its bet."""
    NONE = 0
    SMALL = 1
    MEDIUM = 2
    BIG = 3
    MEGA = 4
    JACKPOT = 5


_TIER_LABELS = {
    WinTier.JACKPOT: "JACKPOT!",
    WinTier.MEGA: "MEGA WIN!",
    WinTier.BIG: "BIG WIN!",
    WinTier.MEDIUM: "WIN!",
    WinTier.SMALL: "WIN!",
    WinTier.NONE: "",
}


def win_multiplier(total_win: float, bet_amount: float) -> float:
    """Total win as a multiple of the bet, 0 for a non-positive bet."""
    if bet_amount <= 0:
        return 0.0
    return total_win / bet_amount


def classify_tier(multiplier: float) -> WinTier:
    """
    Map a win multiplier onto its tier.

    Args:
        multiplier: Total win divided by total bet

    Returns:
        The highest tier whose threshold the multiplier reaches
    """
    if multiplier >= JACKPOT_THRESHOLD:
        return WinTier.JACKPOT
    if multiplier >= MEGA_WIN_THRESHOLD:
        return WinTier.MEGA
    if multiplier >= BIG_WIN_THRESHOLD:
        return WinTier.BIG
    if multiplier >= MEDIUM_WIN_THRESHOLD:
        return WinTier.MEDIUM
    if multiplier > SMALL_WIN_THRESHOLD:
        return WinTier.SMALL
    return WinTier.NONE


@dataclass(frozen=True)
class SpinOutcome:
    """
    Everything known about one evaluated spin.

    Built with from_wins(); all derived fields are computed there so an
    outcome never disagrees with its own wins.
    """
    grid: SymbolGrid
    bet_amount: float
    wins: Tuple[PaylineWin, ...] = field(default_factory=tuple)
    total_win: float = 0.0
    wild_count: int = 0
    total_winning_lines: int = 0
    highest_paying_symbol: Optional[SymbolType] = None
    longest_match: int = 0
    tier: WinTier = WinTier.NONE

    @classmethod
    def from_wins(cls, grid: SymbolGrid, wins: List[PaylineWin], bet_amount: float) -> "SpinOutcome":
        """
        Aggregate payline wins into a spin outcome.

        Args:
            grid: The evaluated grid
            wins: Wins in payline order
            bet_amount: Total credits staked on the spin

        Returns:
            Frozen SpinOutcome
        """
        wins = tuple(wins)
        total_win = sum(win.win_amount for win in wins)

        highest_paying_symbol = None
        highest_amount = None
        for win in wins:
            # Strictly greater, so the first of equal wins is kept
            if highest_amount is None or win.win_amount > highest_amount:
                highest_amount = win.win_amount
                highest_paying_symbol = win.symbol

        longest_match = max((win.match_count for win in wins), default=0)

        return cls(
            grid=grid,
            bet_amount=bet_amount,
            wins=wins,
            total_win=total_win,
            wild_count=grid.wild_count,
            total_winning_lines=len(wins),
            highest_paying_symbol=highest_paying_symbol,
            longest_match=longest_match,
            tier=classify_tier(win_multiplier(total_win, bet_amount))
        )

    @property
    def has_wilds(self) -> bool:
        return self.wild_count > 0

    @property
    def is_win(self) -> bool:
        return self.total_win > 0

    @property
    def win_multiplier(self) -> float:
        return win_multiplier(self.total_win, self.bet_amount)

    @property
    def is_big_win(self) -> bool:
        return self.win_multiplier >= BIG_WIN_THRESHOLD

    @property
    def is_mega_win(self) -> bool:
        return self.win_multiplier >= MEGA_WIN_THRESHOLD

    @property
    def is_jackpot(self) -> bool:
        return self.win_multiplier >= JACKPOT_THRESHOLD

    def describe_tier(self) -> str:
        """Display label for the outcome's tier, empty when nothing was won."""
        return _TIER_LABELS[self.tier]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grid": self.grid.to_list(),
            "bet_amount": self.bet_amount,
            "wins": [win.to_dict() for win in self.wins],
            "total_win": self.total_win,
            "wild_count": self.wild_count,
            "total_winning_lines": self.total_winning_lines,
            "highest_paying_symbol": (
                self.highest_paying_symbol.display_name if self.highest_paying_symbol is not None else None
            ),
            "longest_match": self.longest_match,
            "tier": self.tier.name,
        }
