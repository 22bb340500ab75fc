# slotsim/domain/events/event_types.py
from enum import Enum
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Any, Optional


@dataclass
class DomainEvent:
    """
    Base class for session and simulation events.

    `type` is a member of SessionEventType or SimulationEventType; handlers
    are registered against it. Timestamps are for logs only and never
    enter a simulation report.
    """
    type: Enum
    timestamp: Optional[datetime] = None
    data: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now()
        if self.data is None:
            self.data = {}

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.type.name})"
