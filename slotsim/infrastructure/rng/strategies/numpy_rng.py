# slotsim/infrastructure/rng/strategies/numpy_rng.py
import numpy as np
from typing import Any, Optional


class NumpyRNG:
    """
    Random number generator using NumPy's legacy RandomState, whose stream is
    frozen across NumPy releases and therefore safe for audit replays.
    """
    name = "numpy"

    def __init__(self, seed_value: Optional[int] = None):
        """
        Initialize the RNG with an optional seed.

        Args:
            seed_value: Optional seed value for reproducible random numbers
        """
        # Dedicated RandomState, never the global numpy generator
        self.rng = np.random.RandomState(seed_value)

    def next_int(self, min_val: int, max_val: int) -> int:
        """
        Get a random integer in the range [min_val, max_val).

        Args:
            min_val: Minimum value (inclusive)
            max_val: Maximum value (exclusive)

        Returns:
            Random integer in the specified range
        """
        # NumPy's randint is already half-open
        return int(self.rng.randint(min_val, max_val))

    def next_float(self, min_val: float, max_val: float) -> float:
        """
        Get a random float in the range [min_val, max_val).

        Args:
            min_val: Minimum value (inclusive)
            max_val: Maximum value (exclusive)

        Returns:
            Random float in the specified range
        """
        return float(self.rng.uniform(min_val, max_val))

    def seed(self, seed_value: int) -> None:
        """
        Set the seed for the RNG.

        Args:
            seed_value: Seed value to use
        """
        self.rng = np.random.RandomState(seed_value)

    def get_state(self) -> Any:
        return self.rng.get_state()

    def set_state(self, state: Any) -> None:
        self.rng.set_state(state)
