# slotsim/domain/machine/entities/payline_pattern.py
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from slotsim.domain.exceptions import ConfigurationError


@dataclass(frozen=True)
class PaylinePattern:
    """
    A single payline: one row index per reel, read left to right.
    """
    index: int
    name: str
    positions: Tuple[int, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "name": self.name, "positions": list(self.positions)}


class PaylinePatternSet:
    """
    Ordered, immutable collection of payline patterns for one grid geometry.
    """
    def __init__(self, patterns: Sequence[PaylinePattern], reel_count: int, row_count: int):
        """
        Initialize and validate the pattern set.

        Args:
            patterns: Patterns in evaluation order
            reel_count: Number of reels every pattern must span
            row_count: Number of visible rows per reel

        Raises:
            ConfigurationError: If the set is empty or any pattern is malformed
        """
        if not patterns:
            raise ConfigurationError("Payline pattern set is empty")

        seen = set()
        for pattern in patterns:
            if pattern.index in seen:
                raise ConfigurationError(f"Duplicate payline index {pattern.index}")
            seen.add(pattern.index)

            if len(pattern.positions) != reel_count:
                raise ConfigurationError(
                    f"Payline {pattern.index} has {len(pattern.positions)} positions, expected {reel_count}"
                )
            for reel, row in enumerate(pattern.positions):
                if not 0 <= row < row_count:
                    raise ConfigurationError(
                        f"Payline {pattern.index} has invalid row {row} at reel {reel}, "
                        f"must be between 0 and {row_count - 1}"
                    )

        self._patterns: Tuple[PaylinePattern, ...] = tuple(patterns)
        self.reel_count = reel_count
        self.row_count = row_count

    @classmethod
    def from_config(cls, paylines_config: Optional[List[Dict[str, Any]]],
                    reel_count: int, row_count: int) -> "PaylinePatternSet":
        """
        Build a pattern set from payline definitions.

        Each entry holds 'positions' and optional 'index' (defaults to the
        list position) and 'name' (defaults to "Line N").

        Raises:
            ConfigurationError: If the definitions are missing or invalid
        """
        if not paylines_config:
            raise ConfigurationError("No payline patterns configured")

        patterns = []
        for i, entry in enumerate(paylines_config):
            if not isinstance(entry, Mapping) or 'positions' not in entry:
                raise ConfigurationError(f"Invalid payline entry at index {i}: missing 'positions'")

            positions = entry['positions']
            if not isinstance(positions, (list, tuple)) or not all(
                    isinstance(p, int) and not isinstance(p, bool) for p in positions):
                raise ConfigurationError(f"Invalid payline positions at index {i}: {positions}")

            index = entry.get('index', i)
            patterns.append(PaylinePattern(
                index=index,
                name=entry.get('name') or f"Line {index + 1}",
                positions=tuple(positions)
            ))

        return cls(patterns, reel_count, row_count)

    def active(self, active_lines: Optional[int] = None) -> Tuple[PaylinePattern, ...]:
        """First active_lines patterns; all of them when None."""
        if active_lines is None:
            return self._patterns
        return self._patterns[:active_lines]

    def by_index(self, index: int) -> Optional[PaylinePattern]:
        for pattern in self._patterns:
            if pattern.index == index:
                return pattern
        return None

    def __iter__(self) -> Iterator[PaylinePattern]:
        return iter(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __getitem__(self, item: int) -> PaylinePattern:
        return self._patterns[item]

    def to_dict(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self._patterns]
