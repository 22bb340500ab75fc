# slotsim/infrastructure/rng/rng_provider.py
import logging
from typing import Optional, Dict, Any

from .random_source import RandomSource
from .strategies.mersenne_rng import MersenneTwisterRNG
from .strategies.numpy_rng import NumpyRNG


class RNGProvider:
    """
    Factory for random sources.

    Every call returns a new, independently owned RandomSource; nothing is
    cached, so two runs can never end up sharing one stream.
    """
    def __init__(self, default_strategy: str = "mersenne"):
        """
        Initialize the RNG provider.

        Args:
            default_strategy: Strategy used when none is requested
        """
        self.logger = logging.getLogger("infrastructure.rng.provider")
        self.default_strategy = default_strategy

    def get_rng(self, strategy_name: Optional[str] = None, seed: Optional[int] = None) -> RandomSource:
        """
        Create a random source by strategy name.

        Args:
            strategy_name: Name of the RNG strategy ("mersenne", "numpy")
            seed: Optional seed value for the RNG

        Returns:
            A fresh RandomSource

        Raises:
            ValueError: If the strategy name is unknown
        """
        strategy_name = (strategy_name or self.default_strategy).lower()

        if strategy_name == "mersenne":
            self.logger.debug(f"Creating MersenneTwister RNG with seed: {seed}")
            strategy = MersenneTwisterRNG()
        elif strategy_name == "numpy":
            self.logger.debug(f"Creating NumPy RNG with seed: {seed}")
            strategy = NumpyRNG()
        else:
            self.logger.error(f"Unknown RNG strategy: {strategy_name}")
            raise ValueError(f"Unknown RNG strategy: {strategy_name}")

        return RandomSource(strategy, seed)

    def create_from_config(self, config: Dict[str, Any]) -> RandomSource:
        """
        Create a random source from a configuration dictionary.

        Args:
            config: Dictionary with 'strategy' and optional 'seed' keys

        Returns:
            A fresh RandomSource

        Example config:
            {"strategy": "numpy", "seed": 12345}
        """
        strategy_name = config.get('strategy', self.default_strategy)
        seed = config.get('seed', None)

        return self.get_rng(strategy_name, seed)

    @staticmethod
    def get_available_strategies() -> Dict[str, str]:
        """
        Get a dictionary of available RNG strategies with descriptions.

        Returns:
            Dictionary mapping strategy names to descriptions
        """
        return {
            "mersenne": "Mersenne Twister (Python's default random generator)",
            "numpy": "NumPy RandomState generator"
        }
