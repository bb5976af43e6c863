from typing import Dict, Optional

from logger.backend_logger import backend_logger
from registration_wizard import FiducialRegistrationWizard


class SessionManager:
    """Keeps one registration wizard per session id for the lifetime of the server."""

    def __init__(self):
        self.sessions: Dict[str, FiducialRegistrationWizard] = {}

    def get(self, session_id: str) -> Optional[FiducialRegistrationWizard]:
        return self.sessions.get(session_id)

    def get_or_create(self, session_id: str) -> FiducialRegistrationWizard:
        wizard = self.sessions.get(session_id)
        if wizard is None:
            wizard = FiducialRegistrationWizard(session_id)
            self.sessions[session_id] = wizard
            backend_logger.info(f"Started registration session {session_id}")
        return wizard

    def cleanup_session(self, session_id: str) -> bool:
        """Drop a session and its log file. Returns False when the session was unknown."""
        wizard = self.sessions.pop(session_id, None)
        if wizard is None:
            backend_logger.warning(f"Session {session_id} not found for cleanup.")
            return False
        wizard.log_buffer.delete()
        backend_logger.info(f"Cleaned up session {session_id}")
        return True

    def cleanup_all_sessions(self):
        """Drops every session. Called on shutdown."""
        for session_id in list(self.sessions):
            try:
                self.cleanup_session(session_id)
            except OSError as e:
                backend_logger.error(f"Error cleaning up session {session_id}: {e}")
        backend_logger.info("All registration sessions cleaned up.")


# Shared by the routes and the application lifespan
session_manager = SessionManager()
