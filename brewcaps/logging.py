"""
Structured in-memory logging for controller runs.

Events are kept as dicts (``event``, ``logger``, ``level``, ``ts``,
``details``) in a bounded ring so callers can inspect what an ``operate`` call
did without configuring any output.
"""
import logging
import threading
from collections import deque
from typing import Deque, Dict, List, Optional

REDACTED_KEYS = frozenset({"account_id"})


class RingBufferHandler(logging.Handler):
    def __init__(self, max_entries: int = 200):
        super().__init__()
        self.max_entries = max_entries
        self._events: Deque[Dict] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        entry = {
            "event": record.getMessage(),
            "logger": record.name,
            "level": record.levelname,
            "ts": record.created,
            "details": redact(getattr(record, "details", None)),
        }
        with self._lock:
            self._events.append(entry)

    def get_events(self, event: Optional[str] = None) -> List[Dict]:
        with self._lock:
            entries = list(self._events)
        if event is None:
            return entries
        return [entry for entry in entries if entry["event"] == event]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


def create_logger(name: str, ring_size: int) -> logging.Logger:
    """
    Return the logger ``name`` with a ring buffer attached.

    The ring is attached once; later calls for the same name return the
    existing logger and ignore ``ring_size``.
    """
    logger = logging.getLogger(name)
    if ring_buffer(logger) is not None:
        return logger
    logger.setLevel(logging.INFO)
    handler = RingBufferHandler(max_entries=ring_size)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def ring_buffer(logger: logging.Logger) -> Optional[RingBufferHandler]:
    for handler in logger.handlers:
        if isinstance(handler, RingBufferHandler):
            return handler
    return None


def redact(details: Optional[dict]) -> dict:
    if not details:
        return {}
    return {
        key: "***" if key in REDACTED_KEYS and value is not None else value
        for key, value in details.items()
    }
