# slotsim/application/analysis/simulation_report.py
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from slotsim.domain.session.entities.turn_record import SimulationTurnRecord
from .statistics import SimulationStatistics

STATUS_COMPLETE = "COMPLETE"
STATUS_ABORTED = "ABORTED"
STATUS_RUNNING = "RUNNING"
STATUS_IDLE = "IDLE"


def return_to_player(total_won: float, total_bet: float) -> float:
    """RTP as a percentage, 0 when nothing was bet."""
    if total_bet == 0:
        return 0.0
    return total_won / total_bet * 100


@dataclass(frozen=True)
class SimulationReport:
    """
    Result of one simulation run.

    Holds no wall-clock values, so two runs with the same seed and inputs
    serialize to identical JSON.
    """
    configuration_name: str
    seed: Optional[int]
    rng_strategy: str
    initial_credits: float
    final_credits: float
    total_turns: int
    bet_per_line: int
    total_lines: int
    total_bet: float
    total_won: float
    rtp: float
    status: str
    statistics: SimulationStatistics
    abort_turn: Optional[int] = None
    abort_reason: Optional[str] = None
    turns: List[SimulationTurnRecord] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.status == STATUS_COMPLETE

    @property
    def is_aborted(self) -> bool:
        return self.status == STATUS_ABORTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "configuration_name": self.configuration_name,
            "seed": self.seed,
            "rng_strategy": self.rng_strategy,
            "initial_credits": self.initial_credits,
            "final_credits": self.final_credits,
            "total_turns": self.total_turns,
            "bet_per_line": self.bet_per_line,
            "total_lines": self.total_lines,
            "total_bet": self.total_bet,
            "total_won": self.total_won,
            "rtp": self.rtp,
            "status": self.status,
            "abort_turn": self.abort_turn,
            "abort_reason": self.abort_reason,
            "statistics": self.statistics.to_dict(),
            "turns": [turn.to_dict() for turn in self.turns],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationReport":
        return cls(
            configuration_name=data["configuration_name"],
            seed=data.get("seed"),
            rng_strategy=data.get("rng_strategy", ""),
            initial_credits=data["initial_credits"],
            final_credits=data["final_credits"],
            total_turns=data["total_turns"],
            bet_per_line=data["bet_per_line"],
            total_lines=data["total_lines"],
            total_bet=data["total_bet"],
            total_won=data["total_won"],
            rtp=data["rtp"],
            status=data["status"],
            statistics=SimulationStatistics.from_dict(data.get("statistics", {})),
            abort_turn=data.get("abort_turn"),
            abort_reason=data.get("abort_reason"),
            turns=[SimulationTurnRecord.from_dict(turn) for turn in data.get("turns", [])],
        )

    @classmethod
    def from_json(cls, text: str) -> "SimulationReport":
        return cls.from_dict(json.loads(text))

    def summary(self) -> Dict[str, Any]:
        """Headline numbers, for logs and the CLI."""
        return {
            "configuration_name": self.configuration_name,
            "status": self.status,
            "total_turns": self.total_turns,
            "total_bet": self.total_bet,
            "total_won": self.total_won,
            "rtp": round(self.rtp, 4),
            "hit_frequency": round(self.statistics.hit_frequency, 4),
            "biggest_win": self.statistics.biggest_win,
            "final_credits": self.final_credits,
        }
