# slotsim/domain/machine/services/grid_generator.py
from typing import Optional, Sequence

from slotsim.domain.exceptions import ConfigurationError
from ..entities.symbol_grid import SymbolGrid
from ..entities.symbols import SymbolType


def generate_grid(reel_count: int, row_count: int, weights: Sequence[float], random_source,
                  symbols: Optional[Sequence[SymbolType]] = None) -> SymbolGrid:
    """
    Fill a reel_count x row_count grid by independent weighted sampling.

    Cells are drawn reel by reel, top row first. There is no reel strip and
    no correlation between cells.

    Args:
        reel_count: Number of reels
        row_count: Number of visible rows
        weights: Sampling weight per symbol
        random_source: RandomSource providing weighted_sample()
        symbols: Symbol for each weight index; defaults to SymbolType order

    Returns:
        A new SymbolGrid

    Raises:
        ConfigurationError: If geometry or weights are invalid
    """
    if reel_count < 1 or row_count < 1:
        raise ConfigurationError(f"Invalid grid geometry: {reel_count}x{row_count}")

    if symbols is None:
        symbols = list(SymbolType)
    if len(symbols) != len(weights):
        raise ConfigurationError(
            f"Got {len(weights)} weights for {len(symbols)} symbols"
        )

    reels = []
    for _ in range(reel_count):
        reels.append(tuple(symbols[random_source.weighted_sample(weights)] for _ in range(row_count)))
    return SymbolGrid(tuple(reels))
