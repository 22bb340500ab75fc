# slotsim/domain/session/entities/gaming_session.py
import logging
from typing import Any, Callable, Dict, List, Optional

from slotsim.domain.events.event_dispatcher import EventDispatcher
from slotsim.domain.events.session_events import AutoPlayStopReason, SessionEventType, SessionEvent
from slotsim.domain.exceptions import ConfigurationError, InsufficientCreditsError
from .session_stats import GameStatistics
from .spin_outcome import SpinOutcome


class GamingSession:
    """
    Live play on one slot machine: credits, bet per line and lifetime
    statistics, with every change optionally persisted.
    """
    def __init__(self, session_id: str, machine, event_dispatcher: Optional[EventDispatcher] = None,
                 save_service=None):
        """
        Initialize a gaming session.

        Args:
            session_id: Unique identifier for this session
            machine: SlotMachine with its own random source
            event_dispatcher: Optional event dispatcher for session events
            save_service: Optional persistence collaborator; credits and
                statistics are loaded from it now and saved after every spin
        """
        self.id = session_id
        self.machine = machine
        self.event_dispatcher = event_dispatcher
        self.save_service = save_service

        self.logger = logging.getLogger(f"domain.session.{session_id}")

        if machine.rng is None:
            raise ConfigurationError(f"Machine {machine.id} has no random source")

        config = machine.config
        if save_service is not None:
            self.credits = save_service.load_credits()
            self.stats = save_service.load_statistics()
        else:
            self.credits = config.starting_credits
            self.stats = GameStatistics()

        self.bet_per_line = config.default_bet_per_line
        self.history: List[SpinOutcome] = []

        self.auto_play_active = False
        self.auto_play_remaining = 0
        self._stop_requested = False

        self.logger.info(
            f"Session initialized on machine {machine.id} - Credits: {self.credits}, "
            f"Bet per line: {self.bet_per_line}"
        )

    @property
    def line_count(self) -> int:
        return self.machine.payline_count

    @property
    def current_bet(self) -> int:
        """Total stake of the next spin."""
        return self.bet_per_line * self.line_count

    def can_spin(self) -> bool:
        return self.credits >= self.current_bet

    def change_bet_per_line(self, direction: int) -> int:
        """
        Step the bet per line up or down, staying within the machine bounds.

        Args:
            direction: Signed step, usually +1 or -1

        Returns:
            The new bet per line
        """
        config = self.machine.config
        previous = self.bet_per_line
        self.bet_per_line = max(config.min_bet_per_line,
                                min(self.bet_per_line + direction, config.max_bet_per_line))

        if self.bet_per_line != previous:
            self.logger.debug(f"Bet per line changed: {previous} → {self.bet_per_line}")
            self._dispatch(SessionEventType.BET_CHANGED, {
                "bet_per_line": self.bet_per_line,
                "current_bet": self.current_bet
            })

        return self.bet_per_line

    def set_bet_per_line(self, bet_per_line: int) -> int:
        """Set the bet per line directly; out-of-range values are clamped."""
        return self.change_bet_per_line(bet_per_line - self.bet_per_line)

    def add_credits(self, amount: int):
        self.credits += amount
        self._save_credits()

    def set_credits(self, credits: int):
        self.credits = max(0, credits)
        self._save_credits()

    def execute_spin(self) -> SpinOutcome:
        """
        Play one spin at the current bet.

        Returns:
            The evaluated SpinOutcome

        Raises:
            InsufficientCreditsError: If credits do not cover the current bet
        """
        bet = self.current_bet
        if not self.can_spin():
            self.logger.warning(f"Insufficient credits: {self.credits} < {bet}")
            raise InsufficientCreditsError(self.credits, bet)

        # The stake is only taken once a grid exists
        grid = self.machine.spin()
        self.credits -= bet

        wins = self.machine.evaluate_spin(grid, self.bet_per_line)
        outcome = SpinOutcome.from_wins(grid, wins, bet)

        self.credits += outcome.total_win
        self.stats.update_spin(outcome)
        self.history.append(outcome)

        if outcome.is_win:
            self.logger.debug(
                f"Spin won: {outcome.total_win} (x{outcome.win_multiplier:.1f}) on "
                f"{outcome.total_winning_lines} lines"
            )

        self._save_credits()
        if self.save_service is not None:
            self.save_service.save_statistics(self.stats)

        self._dispatch_spin_events(outcome)
        return outcome

    def auto_play(self, spin_count: int,
                  stop_on: Optional[Callable[[SpinOutcome], bool]] = None) -> List[SpinOutcome]:
        """
        Play up to spin_count spins at the current bet.

        The run ends when the count is used up, when request_stop() is called
        (for example from an event handler), when stop_on returns True for an
        outcome, or when credits no longer cover the bet. A stop always takes
        effect after the spin in progress.

        Args:
            spin_count: Number of spins to play, at least 1
            stop_on: Optional predicate checked after every spin

        Returns:
            Outcomes of the spins played, in order

        Raises:
            ValueError: If spin_count is less than 1
        """
        if spin_count < 1:
            raise ValueError(f"Auto-play needs at least one spin, got {spin_count}")
        if self.auto_play_active:
            self.logger.warning("Auto-play already active, ignoring start request")
            return []

        self.auto_play_active = True
        self.auto_play_remaining = spin_count
        self._stop_requested = False
        self.logger.info(f"Auto-play started with {spin_count} spins")
        self._dispatch(SessionEventType.AUTO_PLAY_STARTED, {"spin_count": spin_count})

        outcomes = []
        reason = None
        try:
            while reason is None:
                if not self.can_spin():
                    reason = AutoPlayStopReason.INSUFFICIENT_CREDITS
                    break

                outcome = self.execute_spin()
                outcomes.append(outcome)

                self.auto_play_remaining -= 1
                self._dispatch(SessionEventType.AUTO_PLAY_REMAINING_CHANGED,
                               {"remaining": self.auto_play_remaining})

                if stop_on is not None and stop_on(outcome):
                    self._stop_requested = True

                if self._stop_requested:
                    reason = AutoPlayStopReason.USER_STOPPED
                elif self.auto_play_remaining <= 0:
                    reason = AutoPlayStopReason.COMPLETED
        except Exception:
            self._stop_auto_play(AutoPlayStopReason.ERROR, len(outcomes))
            raise

        self._stop_auto_play(reason, len(outcomes))
        return outcomes

    def request_stop(self):
        """Ask a running auto-play to stop after the current spin."""
        if not self.auto_play_active:
            self.logger.debug("Stop requested but auto-play is not active")
            return
        self._stop_requested = True

    def _stop_auto_play(self, reason: AutoPlayStopReason, spins_played: int):
        self.auto_play_active = False
        self.auto_play_remaining = 0
        self._stop_requested = False

        self.logger.info(f"Auto-play stopped after {spins_played} spins: {reason.name}")
        self._dispatch(SessionEventType.AUTO_PLAY_STOPPED, {
            "reason": reason.name,
            "spins_played": spins_played
        })

    def _dispatch_spin_events(self, outcome: SpinOutcome):
        data = {
            "bet": outcome.bet_amount,
            "total_win": outcome.total_win,
            "tier": outcome.tier.name,
            "winning_lines": outcome.total_winning_lines
        }
        self._dispatch(SessionEventType.SPIN_COMPLETED, data)

        if outcome.is_jackpot:
            self._dispatch(SessionEventType.JACKPOT_WIN, data)
        elif outcome.is_mega_win:
            self._dispatch(SessionEventType.MEGA_WIN, data)
        elif outcome.is_big_win:
            self._dispatch(SessionEventType.BIG_WIN, data)

        if not self.can_spin():
            self._dispatch(SessionEventType.CREDITS_DEPLETED, {"current_bet": self.current_bet})

    def _dispatch(self, event_type: SessionEventType, data: Dict[str, Any]):
        if self.event_dispatcher:
            self.event_dispatcher.dispatch(SessionEvent(
                type=event_type,
                session_id=self.id,
                machine_id=self.machine.id,
                credits=self.credits,
                data=dict(data)
            ))

    def _save_credits(self):
        if self.save_service is not None:
            self.save_service.save_credits(self.credits)

    def get_session_summary(self) -> Dict[str, Any]:
        summary = self.stats.to_dict()
        summary.update({
            "session_id": self.id,
            "machine_id": self.machine.id,
            "credits": self.credits,
            "bet_per_line": self.bet_per_line,
            "current_bet": self.current_bet,
            "win_rate": self.stats.win_rate,
            "return_to_player": self.stats.return_to_player,
        })
        return summary
