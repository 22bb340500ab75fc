# slotsim/infrastructure/rng/strategies/rng_strategy.py
from typing import Any, Protocol


class RNGStrategy(Protocol):
    """Protocol defining the interface for random number generators."""

    name: str

    def next_int(self, min_val: int, max_val: int) -> int:
        """
        Get a random integer in the range [min_val, max_val).

        Args:
            min_val: Minimum value (inclusive)
            max_val: Maximum value (exclusive)

        Returns:
            Random integer in the specified range
        """
        ...

    def next_float(self, min_val: float, max_val: float) -> float:
        """
        Get a random float in the range [min_val, max_val).

        Args:
            min_val: Minimum value (inclusive)
            max_val: Maximum value (exclusive)

        Returns:
            Random float in the specified range
        """
        ...

    def seed(self, seed_value: int) -> None:
        """
        Reinitialize the generator from a seed.

        Args:
            seed_value: Seed value to use
        """
        ...

    def get_state(self) -> Any:
        """Return an opaque snapshot of the generator state."""
        ...

    def set_state(self, state: Any) -> None:
        """Restore a snapshot previously returned by get_state()."""
        ...
