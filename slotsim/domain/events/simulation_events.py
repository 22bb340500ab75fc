# slotsim/domain/events/simulation_events.py
from enum import Enum, auto
from dataclasses import dataclass

from .event_types import DomainEvent


class SimulationEventType(Enum):
    """Event types raised by a simulation run."""
    SIMULATION_STARTED = auto()
    TURN_COMPLETED = auto()
    SIMULATION_COMPLETED = auto()
    SIMULATION_ABORTED = auto()


@dataclass
class SimulationEvent(DomainEvent):
    """Progress of a simulation run."""
    configuration_name: str = ""
    turn: int = 0

    def __post_init__(self):
        super().__post_init__()

        self.data["configuration_name"] = self.configuration_name
        self.data["turn"] = self.turn
