"""
In-process relay broadcasting document changes to connected listeners.
"""

import sys
import threading
import uuid
from typing import Any, Callable, Dict

DOCUMENT_CREATED = "DocumentCreated"
DOCUMENT_UPDATED = "DocumentUpdated"
DOCUMENT_DELETED = "DocumentDeleted"

Listener = Callable[[str, Any], None]


class DataUpdateHub:
    """Fan-out of (event, payload) messages to every connected listener."""

    def __init__(self):
        self._lock = threading.Lock()
        self._connections: Dict[str, Listener] = {}

    @property
    def connection_count(self) -> int:
        with self._lock:
            return len(self._connections)

    def connect(self, listener: Listener) -> str:
        connection_id = uuid.uuid4().hex
        with self._lock:
            self._connections[connection_id] = listener
        print(f"[hub] Client connected: {connection_id}")
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        with self._lock:
            removed = self._connections.pop(connection_id, None)
        if removed is not None:
            print(f"[hub] Client disconnected: {connection_id}")

    def send_all(self, event: str, payload: Any = None) -> int:
        """Deliver to every listener; returns how many received it."""
        with self._lock:
            targets = list(self._connections.items())

        delivered = 0
        for connection_id, listener in targets:
            try:
                listener(event, payload)
                delivered += 1
            except Exception as e:
                print(f"[WARN] Listener {connection_id} failed on {event}: {e}", file=sys.stderr)
        return delivered
