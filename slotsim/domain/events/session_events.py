# slotsim/domain/events/session_events.py
from enum import Enum, auto
from dataclasses import dataclass

from .event_types import DomainEvent


class SessionEventType(Enum):
    """Event types raised by a live gaming session."""
    BET_CHANGED = auto()
    SPIN_COMPLETED = auto()
    BIG_WIN = auto()
    MEGA_WIN = auto()
    JACKPOT_WIN = auto()
    CREDITS_DEPLETED = auto()
    AUTO_PLAY_STARTED = auto()
    AUTO_PLAY_REMAINING_CHANGED = auto()
    AUTO_PLAY_STOPPED = auto()


class AutoPlayStopReason(Enum):
    """Why an auto-play run ended."""
    COMPLETED = auto()
    USER_STOPPED = auto()
    INSUFFICIENT_CREDITS = auto()
    ERROR = auto()


@dataclass
class SessionEvent(DomainEvent):
    """Something that happened during live play."""
    session_id: str = ""
    machine_id: str = ""
    credits: float = 0.0

    def __post_init__(self):
        super().__post_init__()

        self.data["session_id"] = self.session_id
        self.data["machine_id"] = self.machine_id
        self.data["credits"] = self.credits
