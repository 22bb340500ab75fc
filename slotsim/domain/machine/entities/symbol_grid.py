# slotsim/domain/machine/entities/symbol_grid.py
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from slotsim.domain.exceptions import ConfigurationError, RangeError
from .symbols import SymbolType


@dataclass(frozen=True)
class SymbolGrid:
    """
    Visible symbols after a spin, addressed grid[reel][row].
    Produced fresh for each spin and never mutated.
    """
    reels: Tuple[Tuple[SymbolType, ...], ...]

    def __post_init__(self):
        if not self.reels or not self.reels[0]:
            raise ConfigurationError("Symbol grid must have at least one reel and one row")
        if any(len(reel) != len(self.reels[0]) for reel in self.reels):
            raise ConfigurationError("All reels in a symbol grid must have the same number of rows")

    @classmethod
    def from_reels(cls, reels: Sequence[Sequence[Union[SymbolType, int, str]]]) -> "SymbolGrid":
        """
        Build a grid from per-reel symbol lists (top row first).

        Symbols may be given as SymbolType, int codes or names.
        """
        return cls(tuple(tuple(SymbolType.parse(s) for s in reel) for reel in reels))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Union[SymbolType, int, str]]]) -> "SymbolGrid":
        """Build a grid from rows as they appear on screen."""
        return cls.from_reels(list(zip(*rows)))

    @property
    def reel_count(self) -> int:
        return len(self.reels)

    @property
    def row_count(self) -> int:
        return len(self.reels[0])

    def get(self, reel: int, row: int) -> SymbolType:
        """
        Symbol at (reel, row).

        Raises:
            RangeError: If the coordinate is outside the grid
        """
        if not (0 <= reel < self.reel_count and 0 <= row < self.row_count):
            raise RangeError(reel, row, self.reel_count, self.row_count)
        return self.reels[reel][row]

    def __getitem__(self, reel: int) -> Tuple[SymbolType, ...]:
        return self.reels[reel]

    def line(self, positions: Sequence[int]) -> List[SymbolType]:
        """Symbols along a payline, one per reel."""
        return [self.get(reel, row) for reel, row in enumerate(positions)]

    def count(self, symbol: SymbolType) -> int:
        return sum(reel.count(symbol) for reel in self.reels)

    @property
    def wild_count(self) -> int:
        return self.count(SymbolType.WILD)

    def rows(self) -> List[List[SymbolType]]:
        return [[self.reels[reel][row] for reel in range(self.reel_count)] for row in range(self.row_count)]

    def to_list(self) -> List[List[str]]:
        """Per-reel symbol names, for logs and reports."""
        return [[s.display_name for s in reel] for reel in self.reels]

    def __str__(self) -> str:
        return "\n".join(" | ".join(f"{s.display_name:<6}" for s in row) for row in self.rows())
