# slotsim/domain/session/entities/incremental_stats.py
from dataclasses import dataclass
import math


@dataclass
class IncrementalStats:
    """
    Running mean and variance of a stream of prizes (Welford's algorithm).
    """
    count: int = 0
    mean: float = 0.0
    M2: float = 0.0  # sum of squared deviations from the mean
    sum_values: float = 0.0

    def update(self, new_value: float) -> None:
        self.sum_values += new_value
        self.count += 1

        delta = new_value - self.mean
        self.mean += delta / self.count
        self.M2 += delta * (new_value - self.mean)

    def get_variance(self, population: bool = False) -> float:
        """
        Variance of the values seen so far.

        Args:
            population: Divide by n instead of n - 1

        Returns:
            Variance, 0.0 with fewer than two values
        """
        if self.count < 2:
            return 0.0
        if population:
            return self.M2 / self.count
        return self.M2 / (self.count - 1)

    def get_std_dev(self, population: bool = False) -> float:
        return math.sqrt(self.get_variance(population))

