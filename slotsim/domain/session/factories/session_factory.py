# slotsim/domain/session/factories/session_factory.py
import logging
import uuid
from typing import Optional

from ..entities.gaming_session import GamingSession


class SessionFactory:
    """
    Factory for creating live GamingSession instances.
    """
    def __init__(self, event_dispatcher=None, save_service=None):
        """
        Initialize the session factory.

        Args:
            event_dispatcher: Optional event dispatcher for session events
            save_service: Optional persistence collaborator shared by created sessions
        """
        self.logger = logging.getLogger("domain.session.factory")
        self.event_dispatcher = event_dispatcher
        self.save_service = save_service

    def create_session(self, machine, session_id: Optional[str] = None) -> GamingSession:
        """
        Create a new gaming session on a machine.

        Args:
            machine: SlotMachine with its random source set
            session_id: Optional session ID (generated if not provided)

        Returns:
            Initialized GamingSession
        """
        if not session_id:
            session_id = f"{machine.id}_{uuid.uuid4().hex[:8]}"

        self.logger.info(f"Creating session {session_id} on machine {machine.id}")

        session = GamingSession(
            session_id=session_id,
            machine=machine,
            event_dispatcher=self.event_dispatcher,
            save_service=self.save_service
        )

        self.logger.debug(f"Created session {session_id} with {session.credits} credits")
        return session
