import threading
import time
import uuid
from typing import List, Optional

from models import EvaluationResult, LeadRecord


class LeadStore:
    """In-memory store of forwarded leads for the dashboard API."""

    def __init__(self):
        self._leads: List[LeadRecord] = []
        self._lock = threading.Lock()

    def add(self, evaluation: EvaluationResult) -> LeadRecord:
        lead_id = f"lead-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"
        record = LeadRecord(id=lead_id, evaluation=evaluation)
        with self._lock:
            self._leads.append(record)
        return record

    def mark_notified(self, lead_id: str) -> None:
        with self._lock:
            for record in self._leads:
                if record.id == lead_id:
                    record.notified = True
                    return

    def get(self, lead_id: str) -> Optional[LeadRecord]:
        with self._lock:
            for record in self._leads:
                if record.id == lead_id:
                    return record
        return None

    def all(self) -> List[LeadRecord]:
        """Newest first."""
        with self._lock:
            return list(reversed(self._leads))
