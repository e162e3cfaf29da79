import threading
from collections import OrderedDict


class ProcessedMessageCache:
    """
    Remembers recently processed message ids so retried webhook deliveries
    are not scored twice. Oldest ids are evicted above `capacity`.
    """

    def __init__(self, capacity: int = 1000):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._ids: "OrderedDict[str, None]" = OrderedDict()
        self._lock = threading.Lock()

    def check_and_add(self, message_id: str) -> bool:
        """Returns True if the id was already seen, otherwise records it."""
        with self._lock:
            if message_id in self._ids:
                return True
            self._ids[message_id] = None
            while len(self._ids) > self.capacity:
                self._ids.popitem(last=False)
            return False

    def __contains__(self, message_id: str) -> bool:
        with self._lock:
            return message_id in self._ids

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids)
