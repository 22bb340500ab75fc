# slotsim/domain/machine/entities/symbols.py
from enum import IntEnum
from typing import Union


class SymbolType(IntEnum):
    """
    All symbols that can land on the reels, lowest value first.
    Order matches the default weight and payout tables.
    """
    CHERRY = 0
    LEMON = 1
    ORANGE = 2
    PLUM = 3
    BELL = 4
    BAR = 5
    SEVEN = 6
    WILD = 7

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @property
    def is_wild(self) -> bool:
        return self is SymbolType.WILD

    @classmethod
    def parse(cls, value: Union[int, str, "SymbolType"]) -> "SymbolType":
        """
        Resolve a symbol from its enum value, int code or name.

        Raises:
            ValueError: If the value names no known symbol
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, str):
            key = value.strip().upper()
            if key.isdigit():
                return cls(int(key))
            if key in cls.__members__:
                return cls[key]
        raise ValueError(f"Unknown symbol: {value!r}")
