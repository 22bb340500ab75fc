# slotsim/infrastructure/rng/random_source.py
import logging
import numbers
from typing import Any, Optional, Sequence

from slotsim.domain.exceptions import ConfigurationError
from .strategies.rng_strategy import RNGStrategy


class RandomSource:
    """
    Seedable random source backing exactly one logical run.

    Wraps an RNG strategy and adds weighted categorical sampling. Instances
    must not be shared between concurrent runs.
    """
    def __init__(self, strategy: RNGStrategy, seed: Optional[int] = None):
        """
        Initialize the random source.

        Args:
            strategy: Underlying RNG strategy instance
            seed: Optional seed applied immediately
        """
        self.logger = logging.getLogger("infrastructure.rng.source")
        self._strategy = strategy
        self._seed = None

        if seed is not None:
            self.set_seed(seed)

    @property
    def seed(self) -> Optional[int]:
        """Seed last applied through set_seed(), or None."""
        return self._seed

    @property
    def strategy_name(self) -> str:
        return getattr(self._strategy, "name", type(self._strategy).__name__)

    def set_seed(self, seed: int) -> None:
        """
        Reinitialize the stream deterministically.

        Args:
            seed: Seed value; identical seeds reproduce identical sequences
        """
        self._strategy.seed(seed)
        self._seed = seed
        self.logger.debug(f"Seeded {self.strategy_name} RNG with {seed}")

    def next_int(self, min_val: int, max_val: int) -> int:
        """Uniform integer in [min_val, max_val)."""
        return self._strategy.next_int(min_val, max_val)

    def next_float(self, min_val: float, max_val: float) -> float:
        """Uniform float in [min_val, max_val)."""
        return self._strategy.next_float(min_val, max_val)

    def weighted_sample(self, weights: Sequence[float]) -> int:
        """
        Pick an index with probability weights[i] / sum(weights).

        Draws d uniformly from [0, total) and returns the first index whose
        cumulative weight exceeds d. Integer weights use an integer draw so
        that sampling stays exact.

        Args:
            weights: Non-negative sampling weights

        Returns:
            Selected index

        Raises:
            ConfigurationError: If weights are empty, negative or all zero
        """
        total = validate_weights(weights)

        if all(isinstance(w, numbers.Integral) for w in weights):
            draw = self.next_int(0, int(total))
        else:
            draw = self.next_float(0.0, float(total))

        cumulative = 0
        for index, weight in enumerate(weights):
            cumulative += weight
            if draw < cumulative:
                return index

        # Only reachable through float rounding at the top of the range
        return max(i for i, w in enumerate(weights) if w > 0)

    def get_state(self) -> Any:
        """Snapshot the generator for checkpointing."""
        return self._strategy.get_state()

    def set_state(self, state: Any) -> None:
        """Restore a snapshot taken with get_state()."""
        self._strategy.set_state(state)


def validate_weights(weights: Sequence[float]) -> float:
    """
    Check a weight vector and return its sum.

    Raises:
        ConfigurationError: If weights are empty, negative or sum to zero
    """
    if weights is None or len(weights) == 0:
        raise ConfigurationError("Sampling weights are empty")

    for index, weight in enumerate(weights):
        if isinstance(weight, bool) or not isinstance(weight, numbers.Real):
            raise ConfigurationError(f"Sampling weight at index {index} is not a number: {weight!r}")
        if weight < 0:
            raise ConfigurationError(f"Sampling weight at index {index} is negative: {weight}")

    total = sum(weights)
    if total <= 0:
        raise ConfigurationError("Sampling weights sum to zero")
    return total
