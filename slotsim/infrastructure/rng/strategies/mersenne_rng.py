# slotsim/infrastructure/rng/strategies/mersenne_rng.py
import random
from typing import Any, Optional


class MersenneTwisterRNG:
    """
    Random number generator using the Mersenne Twister algorithm (Python's default).
    """
    name = "mersenne"

    def __init__(self, seed_value: Optional[int] = None):
        """
        Initialize the RNG with an optional seed.

        Args:
            seed_value: Optional seed value for reproducible random numbers
        """
        # Dedicated instance, never the module-level generator
        self._random = random.Random()

        if seed_value is not None:
            self.seed(seed_value)

    def next_int(self, min_val: int, max_val: int) -> int:
        """
        Get a random integer in the range [min_val, max_val).

        Args:
            min_val: Minimum value (inclusive)
            max_val: Maximum value (exclusive)

        Returns:
            Random integer in the specified range
        """
        return self._random.randrange(min_val, max_val)

    def next_float(self, min_val: float, max_val: float) -> float:
        """
        Get a random float in the range [min_val, max_val).

        Args:
            min_val: Minimum value (inclusive)
            max_val: Maximum value (exclusive)

        Returns:
            Random float in the specified range
        """
        return min_val + self._random.random() * (max_val - min_val)

    def seed(self, seed_value: int) -> None:
        """
        Set the seed for the RNG.

        Args:
            seed_value: Seed value to use
        """
        self._random.seed(seed_value)

    def get_state(self) -> Any:
        return self._random.getstate()

    def set_state(self, state: Any) -> None:
        self._random.setstate(state)
