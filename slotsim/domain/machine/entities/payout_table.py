# slotsim/domain/machine/entities/payout_table.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from slotsim.domain.exceptions import ConfigurationError
from .symbols import SymbolType

PAYOUT_TIERS = 3  # payouts for 3, 4 and 5 of a kind

# Used only when no symbol database is supplied
FALLBACK_PAYOUTS = {
    SymbolType.CHERRY: (5, 10, 20),
    SymbolType.LEMON: (10, 20, 40),
    SymbolType.ORANGE: (15, 30, 60),
    SymbolType.PLUM: (20, 40, 80),
    SymbolType.BELL: (25, 50, 100),
    SymbolType.BAR: (30, 60, 150),
    SymbolType.SEVEN: (50, 100, 250),
    SymbolType.WILD: (100, 200, 500),
}

FALLBACK_WEIGHTS = {
    SymbolType.CHERRY: 30,
    SymbolType.LEMON: 25,
    SymbolType.ORANGE: 20,
    SymbolType.PLUM: 15,
    SymbolType.BELL: 10,
    SymbolType.BAR: 8,
    SymbolType.SEVEN: 5,
    SymbolType.WILD: 3,
}

logger = logging.getLogger("domain.machine.payout_table")


@dataclass(frozen=True)
class SymbolPayout:
    """Payout multipliers and sampling weight for one symbol."""
    symbol: SymbolType
    weight: float
    payouts: Tuple[float, float, float]
    name: str = ""

    def payout_for(self, match_count: int) -> float:
        """Multiplier for a run of match_count symbols (3, 4 or 5)."""
        return self.payouts[match_count - 3]


class PayoutTable:
    """
    Immutable mapping from symbol to payouts and weight.

    Entry order is the order used for weighted sampling.
    """
    def __init__(self, entries: Sequence[SymbolPayout], is_fallback: bool = False):
        """
        Initialize the payout table.

        Args:
            entries: One SymbolPayout per symbol, in sampling order
            is_fallback: True when built from the built-in fallback table

        Raises:
            ConfigurationError: If entries are empty, duplicated or malformed
        """
        if not entries:
            raise ConfigurationError("Payout table has no symbols")

        table: Dict[SymbolType, SymbolPayout] = {}
        for entry in entries:
            if entry.symbol in table:
                raise ConfigurationError(f"Duplicate payout entry for {entry.symbol.display_name}")
            if len(entry.payouts) != PAYOUT_TIERS:
                raise ConfigurationError(
                    f"Symbol {entry.symbol.display_name} needs exactly {PAYOUT_TIERS} payouts, "
                    f"got {len(entry.payouts)}"
                )
            if any(p < 0 for p in entry.payouts):
                raise ConfigurationError(f"Symbol {entry.symbol.display_name} has a negative payout")
            if entry.weight < 0:
                raise ConfigurationError(f"Symbol {entry.symbol.display_name} has a negative weight")
            table[entry.symbol] = entry

        if sum(e.weight for e in entries) <= 0:
            raise ConfigurationError("Symbol weights sum to zero")

        self._entries: Tuple[SymbolPayout, ...] = tuple(entries)
        self._table = table
        self.is_fallback = is_fallback

    @classmethod
    def fallback(cls) -> "PayoutTable":
        """Built-in table for setups that supply no symbol database."""
        entries = [
            SymbolPayout(symbol, FALLBACK_WEIGHTS[symbol], FALLBACK_PAYOUTS[symbol], symbol.display_name)
            for symbol in SymbolType
        ]
        return cls(entries, is_fallback=True)

    @classmethod
    def from_config(cls, symbols_config: Optional[List[Dict[str, Any]]]) -> "PayoutTable":
        """
        Build a table from symbol database entries.

        Each entry holds 'type' (name or int code), 'weight', 'payouts' and
        an optional 'name'. A missing or empty database selects the fallback
        table, which is logged.

        Raises:
            ConfigurationError: If any entry is invalid
        """
        if not symbols_config:
            logger.warning("No symbol database supplied, using fallback payout table")
            return cls.fallback()

        entries = []
        for i, entry in enumerate(symbols_config):
            if not isinstance(entry, Mapping) or 'type' not in entry or 'payouts' not in entry:
                raise ConfigurationError(f"Invalid symbol entry at index {i}: {entry}")
            try:
                symbol = SymbolType.parse(entry['type'])
            except ValueError as e:
                raise ConfigurationError(f"Invalid symbol entry at index {i}: {e}") from e

            payouts = entry.get('payouts')
            if not isinstance(payouts, (list, tuple)):
                raise ConfigurationError(f"Invalid payouts for symbol {symbol.display_name}: {payouts}")

            entries.append(SymbolPayout(
                symbol=symbol,
                weight=entry.get('weight', 0),
                payouts=tuple(payouts),
                name=entry.get('name', symbol.display_name)
            ))

        return cls(entries)

    def __contains__(self, symbol: SymbolType) -> bool:
        return symbol in self._table

    def __iter__(self) -> Iterator[SymbolPayout]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, symbol: SymbolType) -> Optional[SymbolPayout]:
        return self._table.get(symbol)

    def payout(self, symbol: SymbolType, match_count: int) -> float:
        """
        Multiplier for a run of match_count of symbol.

        Raises:
            KeyError: If the symbol has no entry
        """
        return self._table[symbol].payout_for(match_count)

    def symbols(self) -> List[SymbolType]:
        return [e.symbol for e in self._entries]

    def weights(self) -> List[float]:
        return [e.weight for e in self._entries]

    def to_dict(self) -> List[Dict[str, Any]]:
        return [
            {"type": e.symbol.display_name, "name": e.name, "weight": e.weight, "payouts": list(e.payouts)}
            for e in self._entries
        ]
