# slotsim/domain/machine/entities/machine_config.py
import logging
from dataclasses import dataclass
from typing import Any, Dict

from slotsim.domain.exceptions import ConfigurationError
from .payline_pattern import PaylinePatternSet
from .payout_table import PayoutTable

MIN_REELS = 3
MAX_REELS = 5  # payouts cover 3, 4 and 5 of a kind

logger = logging.getLogger("domain.machine.config")


@dataclass(frozen=True)
class MachineConfig:
    """
    Immutable machine configuration, loaded once and shared by reference
    between the evaluator, live sessions and simulation runs.
    """
    name: str
    reel_count: int
    row_count: int
    payout_table: PayoutTable
    paylines: PaylinePatternSet
    starting_credits: int = 1000
    min_bet_per_line: int = 1
    max_bet_per_line: int = 10
    default_bet_per_line: int = 1

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Check the configuration invariants.

        Raises:
            ConfigurationError: If any invariant is violated
        """
        if not MIN_REELS <= self.reel_count <= MAX_REELS:
            raise ConfigurationError(
                f"reel_count must be between {MIN_REELS} and {MAX_REELS}, got {self.reel_count}"
            )
        if self.row_count < 1:
            raise ConfigurationError(f"row_count must be positive, got {self.row_count}")
        if self.paylines.reel_count != self.reel_count or self.paylines.row_count != self.row_count:
            raise ConfigurationError(
                f"Payline geometry {self.paylines.reel_count}x{self.paylines.row_count} does not match "
                f"machine geometry {self.reel_count}x{self.row_count}"
            )
        if self.min_bet_per_line < 1 or self.max_bet_per_line < self.min_bet_per_line:
            raise ConfigurationError(
                f"Invalid bet bounds: min={self.min_bet_per_line}, max={self.max_bet_per_line}"
            )
        if not self.min_bet_per_line <= self.default_bet_per_line <= self.max_bet_per_line:
            raise ConfigurationError(
                f"default_bet_per_line {self.default_bet_per_line} outside "
                f"[{self.min_bet_per_line}, {self.max_bet_per_line}]"
            )
        if self.starting_credits < 0:
            raise ConfigurationError(f"starting_credits must not be negative, got {self.starting_credits}")

    @property
    def payline_count(self) -> int:
        return len(self.paylines)

    def clamp_bet_per_line(self, bet_per_line: int) -> int:
        """Clamp a requested bet into the configured bounds, logging adjustments."""
        clamped = max(self.min_bet_per_line, min(bet_per_line, self.max_bet_per_line))
        if clamped != bet_per_line:
            logger.warning(f"Bet per line adjusted: {bet_per_line} → {clamped}")
        return clamped

    def clamp_active_lines(self, active_lines) -> int:
        """Resolve the number of evaluated lines, as the evaluator does."""
        if active_lines is None:
            return self.payline_count
        clamped = max(1, min(active_lines, self.payline_count))
        if clamped != active_lines:
            logger.warning(f"Payline count adjusted: {active_lines} → {clamped}")
        return clamped

    @classmethod
    def from_dict(cls, config: Dict[str, Any], name: str = None) -> "MachineConfig":
        """
        Build a configuration from a loaded machine YAML document.

        Raises:
            ConfigurationError: If any section is missing or invalid
        """
        if not isinstance(config, dict):
            raise ConfigurationError(f"Machine configuration must be a mapping, got {type(config).__name__}")

        reel_count = config.get("reel_count", 5)
        row_count = config.get("row_count", 3)
        betting = config.get("betting", {}) or {}

        return cls(
            name=name or config.get("machine_id", "default"),
            reel_count=reel_count,
            row_count=row_count,
            payout_table=PayoutTable.from_config(config.get("symbols")),
            paylines=PaylinePatternSet.from_config(config.get("paylines"), reel_count, row_count),
            starting_credits=betting.get("starting_credits", 1000),
            min_bet_per_line=betting.get("min_bet_per_line", 1),
            max_bet_per_line=betting.get("max_bet_per_line", 10),
            default_bet_per_line=betting.get("default_bet_per_line", 1),
        )

    def get_info(self) -> Dict[str, Any]:
        """
        Get information about this configuration.

        Returns:
            Dictionary with configuration details
        """
        return {
            "name": self.name,
            "reel_count": self.reel_count,
            "row_count": self.row_count,
            "num_paylines": self.payline_count,
            "fallback_payouts": self.payout_table.is_fallback,
            "symbols": self.payout_table.to_dict(),
            "bet_per_line": [self.min_bet_per_line, self.max_bet_per_line],
            "starting_credits": self.starting_credits,
        }
