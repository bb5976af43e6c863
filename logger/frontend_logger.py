import json
from datetime import datetime
from typing import Dict, List

from config import LOGS_DIR
from logger.backend_logger import backend_logger


class SessionLogBuffer:
    """
    Collects user-facing status messages for one registration session and
    mirrors them to a JSON file so they survive between requests.
    """

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.log_file = LOGS_DIR / f"session_{session_id}.json"
        self.logs: List[Dict] = self._load_from_file()

    def add_log(self, message: str, level: str = "info"):
        """Add a log entry"""
        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "message": message
        }
        self.logs.append(entry)
        self._save_to_file()

    def get_logs(self) -> List[Dict]:
        """Get all logs for the session"""
        return list(self.logs)

    def delete(self):
        """Forget the buffered entries and remove the backing file."""
        self.logs = []
        if self.log_file.exists():
            self.log_file.unlink()

    def _load_from_file(self) -> List[Dict]:
        if not self.log_file.exists():
            return []
        try:
            with open(self.log_file, 'r') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            backend_logger.warning(f"Could not read session log {self.log_file}: {e}. Starting with an empty log.")
            return []

    def _save_to_file(self):
        """Save logs to JSON file"""
        try:
            with open(self.log_file, 'w') as f:
                json.dump(self.logs, f, indent=2)
        except OSError as e:
            backend_logger.error(f"Error saving session logs for {self.session_id}: {e}")
