# slotsim/application/simulation/simulation_runner.py
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple

from slotsim.application.analysis.simulation_report import SimulationReport, return_to_player
from slotsim.application.analysis.statistics import compute_statistics
from slotsim.domain.events.event_dispatcher import EventDispatcher
from slotsim.domain.events.simulation_events import SimulationEventType, SimulationEvent
from slotsim.domain.exceptions import ConfigurationError, RangeError
from slotsim.domain.machine.entities.machine_config import MachineConfig
from slotsim.domain.machine.services.grid_generator import generate_grid
from slotsim.domain.machine.services.win_evaluation import PaylineEvaluator
from slotsim.domain.session.entities.spin_outcome import SpinOutcome
from slotsim.domain.session.entities.turn_record import SimulationTurnRecord
from slotsim.infrastructure.rng.random_source import RandomSource, validate_weights

CANCELLED = "cancelled"
STEP_CHUNK = 1000


class SimulationState(Enum):
    IDLE = auto()
    RUNNING = auto()
    COMPLETE = auto()
    ABORTED = auto()


@dataclass(frozen=True)
class SimulationCheckpoint:
    """Everything needed to continue a run exactly where it stopped."""
    state: str
    seed: Optional[int]
    starting_credits: float
    bet_per_line: int
    active_lines: int
    max_turns: int
    record_turn_detail: bool
    credits: float
    turn: int
    records: Tuple[SimulationTurnRecord, ...]
    rng_state: Any
    abort_turn: Optional[int] = None
    abort_reason: Optional[str] = None


class SimulationRunner:
    """
    Runs a batch of spins on one machine configuration and reports on them.

    State machine IDLE → RUNNING → COMPLETE | ABORTED. A run can be driven
    in one call (run_simulation) or incrementally (start, then step), can be
    cancelled between turns and checkpointed for a later resume. The
    runner owns its random source; it must not be shared with another run.
    """
    def __init__(self, config: MachineConfig, random_source: RandomSource,
                 event_dispatcher: Optional[EventDispatcher] = None):
        """
        Initialize the simulation runner.

        Args:
            config: Machine configuration to simulate
            random_source: Random source owned by this run
            event_dispatcher: Optional dispatcher for progress events
        """
        self.logger = logging.getLogger("application.simulation.runner")
        self.config = config
        self.random_source = random_source
        self.event_dispatcher = event_dispatcher

        # Simulation audits the configuration, so bad lines raise instead of paying nothing
        self.evaluator = PaylineEvaluator(config.paylines, config.payout_table, strict=True)

        self.state = SimulationState.IDLE
        self.seed = random_source.seed

        self.starting_credits = 0
        self.bet_per_line = 0
        self.active_lines = config.payline_count
        self.max_turns = 0
        self.record_turn_detail = True

        self.credits = 0
        self.turn = 0
        self.records: List[SimulationTurnRecord] = []

        self.abort_turn: Optional[int] = None
        self.abort_reason: Optional[str] = None

    @property
    def bet(self) -> int:
        """Total stake of every turn."""
        return self.bet_per_line * self.active_lines

    @property
    def is_finished(self) -> bool:
        return self.state in (SimulationState.COMPLETE, SimulationState.ABORTED)

    def start(self, starting_credits: float, bet_per_line: int, max_turns: int,
              record_turn_detail: bool = True, active_lines: Optional[int] = None):
        """
        Validate the configuration and enter RUNNING. No turns are executed.

        Args:
            starting_credits: Credits available before the first turn
            bet_per_line: Requested bet per line, clamped to the machine bounds
            max_turns: Upper bound on executed turns
            record_turn_detail: Include per-turn records in the report
            active_lines: Number of leading paylines to play, all when None

        Raises:
            ConfigurationError: If the run cannot start; the state becomes ABORTED
        """
        if self.state != SimulationState.IDLE:
            self.logger.warning(f"Simulation already started (state {self.state.name})")
            return

        try:
            self._validate(starting_credits, max_turns)
        except ConfigurationError as e:
            self.logger.error(f"Simulation for {self.config.name} failed validation: {e}")
            self._abort(0, str(e))
            raise

        self.starting_credits = starting_credits
        self.bet_per_line = self.config.clamp_bet_per_line(bet_per_line)
        self.active_lines = self.config.clamp_active_lines(active_lines)
        self.max_turns = max_turns
        self.record_turn_detail = record_turn_detail
        self.credits = starting_credits
        self.state = SimulationState.RUNNING

        self.logger.info(
            f"Starting simulation {self.config.name}: credits={starting_credits}, "
            f"bet={self.bet_per_line}x{self.active_lines}, max_turns={max_turns}, "
            f"rng={self.random_source.strategy_name}, seed={self.seed}"
        )
        self._dispatch(SimulationEventType.SIMULATION_STARTED, {
            "starting_credits": starting_credits,
            "bet": self.bet,
            "max_turns": max_turns
        })

    def _validate(self, starting_credits: float, max_turns: int):
        self.config.validate()
        validate_weights(self.config.payout_table.weights())

        if starting_credits < 0:
            raise ConfigurationError(f"starting_credits must not be negative, got {starting_credits}")
        if max_turns < 0:
            raise ConfigurationError(f"max_turns must not be negative, got {max_turns}")

    def step(self, max_steps: int = 1) -> int:
        """
        Execute up to max_steps turns.

        Args:
            max_steps: Turn budget for this call

        Returns:
            Number of turns actually executed
        """
        if self.state != SimulationState.RUNNING:
            return 0

        executed = 0
        while executed < max_steps and not self._check_completion():
            try:
                self._execute_turn()
            except (ConfigurationError, RangeError) as e:
                self.logger.error(f"Simulation aborted at turn {self.turn}: {e}")
                self._abort(self.turn, str(e))
                break
            executed += 1

        if self.state == SimulationState.RUNNING:
            self._check_completion()

        return executed

    def _check_completion(self) -> bool:
        if self.credits >= self.bet and self.turn < self.max_turns:
            return False

        reason = "max turns reached" if self.turn >= self.max_turns else "insufficient credits"
        self.state = SimulationState.COMPLETE
        self.logger.info(f"Simulation {self.config.name} complete after {self.turn} turns ({reason})")
        self._dispatch(SimulationEventType.SIMULATION_COMPLETED, {"reason": reason})
        return True

    def _execute_turn(self):
        bet = self.bet
        table = self.config.payout_table

        grid = generate_grid(self.config.reel_count, self.config.row_count,
                             table.weights(), self.random_source, table.symbols())
        wins = self.evaluator.evaluate(grid, self.bet_per_line, self.active_lines)
        outcome = SpinOutcome.from_wins(grid, wins, bet)

        record = SimulationTurnRecord.from_outcome(self.turn, self.credits, outcome)
        self.credits = self.credits - bet + outcome.total_win
        self.records.append(record)
        self.turn += 1

        if self.event_dispatcher:
            self._dispatch(SimulationEventType.TURN_COMPLETED, {
                "prize": outcome.total_win,
                "credits": self.credits,
                "tier": outcome.tier.name
            })

    def cancel(self):
        """Stop the run between turns; the partial report stays valid."""
        if self.is_finished:
            self.logger.warning(f"Cannot cancel simulation in state {self.state.name}")
            return

        self.logger.info(f"Simulation {self.config.name} cancelled after {self.turn} turns")
        self._abort(self.turn, CANCELLED)

    def _abort(self, turn: int, reason: str):
        self.state = SimulationState.ABORTED
        self.abort_turn = turn
        self.abort_reason = reason
        self._dispatch(SimulationEventType.SIMULATION_ABORTED, {"reason": reason})

    def build_report(self) -> SimulationReport:
        """
        Report over the turns executed so far. Valid in any state.
        """
        total_bet = sum(record.bet_amount for record in self.records)
        total_won = sum(record.prize_amount for record in self.records)
        line_names = {pattern.index: pattern.name for pattern in self.config.paylines}

        return SimulationReport(
            configuration_name=self.config.name,
            seed=self.seed,
            rng_strategy=self.random_source.strategy_name,
            initial_credits=self.starting_credits,
            final_credits=self.credits,
            total_turns=len(self.records),
            bet_per_line=self.bet_per_line,
            total_lines=self.active_lines,
            total_bet=total_bet,
            total_won=total_won,
            rtp=return_to_player(total_won, total_bet),
            status=self.state.name,
            statistics=compute_statistics(self.records, line_names),
            abort_turn=self.abort_turn,
            abort_reason=self.abort_reason,
            turns=list(self.records) if self.record_turn_detail else []
        )

    def checkpoint(self) -> SimulationCheckpoint:
        """Snapshot the run, including the random source's state."""
        return SimulationCheckpoint(
            state=self.state.name,
            seed=self.seed,
            starting_credits=self.starting_credits,
            bet_per_line=self.bet_per_line,
            active_lines=self.active_lines,
            max_turns=self.max_turns,
            record_turn_detail=self.record_turn_detail,
            credits=self.credits,
            turn=self.turn,
            records=tuple(self.records),
            rng_state=self.random_source.get_state(),
            abort_turn=self.abort_turn,
            abort_reason=self.abort_reason
        )

    @classmethod
    def resume(cls, config: MachineConfig, random_source: RandomSource, checkpoint: SimulationCheckpoint,
               event_dispatcher: Optional[EventDispatcher] = None) -> "SimulationRunner":
        """
        Rebuild a runner from a checkpoint.

        The random source is rewound to the checkpointed state, so the
        resumed run continues the original stream turn for turn.
        """
        runner = cls(config, random_source, event_dispatcher)
        random_source.set_state(checkpoint.rng_state)

        runner.state = SimulationState[checkpoint.state]
        runner.seed = checkpoint.seed
        runner.starting_credits = checkpoint.starting_credits
        runner.bet_per_line = checkpoint.bet_per_line
        runner.active_lines = checkpoint.active_lines
        runner.max_turns = checkpoint.max_turns
        runner.record_turn_detail = checkpoint.record_turn_detail
        runner.credits = checkpoint.credits
        runner.turn = checkpoint.turn
        runner.records = list(checkpoint.records)
        runner.abort_turn = checkpoint.abort_turn
        runner.abort_reason = checkpoint.abort_reason

        runner.logger.info(f"Resumed simulation {config.name} at turn {runner.turn}")
        return runner

    def run_to_completion(self, chunk: int = STEP_CHUNK) -> SimulationReport:
        """Step until the run finishes, then build its report."""
        while self.state == SimulationState.RUNNING:
            self.step(chunk)
        return self.build_report()

    def run_simulation(self, starting_credits: float, bet_per_line: int, max_turns: int,
                       record_turn_detail: bool = True, active_lines: Optional[int] = None) -> SimulationReport:
        """
        Run a whole simulation and return its report.

        Raises:
            ConfigurationError: If the configuration fails validation
        """
        self.start(starting_credits, bet_per_line, max_turns, record_turn_detail, active_lines)
        report = self.run_to_completion()

        self.logger.info(f"Simulation summary: {report.summary()}")
        return report

    def _dispatch(self, event_type: SimulationEventType, data: Dict[str, Any]):
        if self.event_dispatcher:
            self.event_dispatcher.dispatch(SimulationEvent(
                type=event_type,
                configuration_name=self.config.name,
                turn=self.turn,
                data=dict(data)
            ))
