"""
Per-window accumulator state, kept as serialized snapshots keyed by window id
"""
import json
import threading
from typing import Dict, List, Optional

from webcalc.core.accumulator import AccumulatorState
from webcalc.core.config import get_settings
from webcalc.core.logging_config import LoggingConfig
from webcalc.core.metrics import calculator_open_windows

logger = LoggingConfig.get_logger(__name__)


class WindowStateStore:
    """
    Key-value map from window id to an opaque JSON snapshot of its state.

    State is read before each input event and written after it. Windows
    never share an entry, so the lock only protects the dict itself.
    """

    def __init__(self, key_prefix: Optional[str] = None):
        self.key_prefix = key_prefix if key_prefix is not None else get_settings().window_key_prefix
        self._snapshots: Dict[str, str] = {}
        self._lock = threading.Lock()

    def _key(self, window_id: str) -> str:
        return f"{self.key_prefix}{window_id}"

    def load(self, window_id: str) -> AccumulatorState:
        """Get the state for a window, creating a default one on first use"""
        with self._lock:
            snapshot = self._snapshots.get(self._key(window_id))

        if snapshot is None:
            state = AccumulatorState()
            self.save(window_id, state)
            logger.info("Opened calculator window", extra={"window_id": window_id})
            return state

        return AccumulatorState.from_dict(json.loads(snapshot))

    def save(self, window_id: str, state: AccumulatorState) -> None:
        snapshot = json.dumps(state.to_dict())
        with self._lock:
            self._snapshots[self._key(window_id)] = snapshot
            calculator_open_windows.set(len(self._snapshots))

    def exists(self, window_id: str) -> bool:
        with self._lock:
            return self._key(window_id) in self._snapshots

    def discard(self, window_id: str) -> bool:
        """Drop a window's state; returns False if there was none"""
        with self._lock:
            removed = self._snapshots.pop(self._key(window_id), None) is not None
            calculator_open_windows.set(len(self._snapshots))
        if removed:
            logger.info("Closed calculator window", extra={"window_id": window_id})
        return removed

    def window_ids(self) -> List[str]:
        with self._lock:
            keys = list(self._snapshots)
        return [key[len(self.key_prefix):] for key in keys]

    def reset(self) -> None:
        """Forget every window"""
        with self._lock:
            self._snapshots.clear()
            calculator_open_windows.set(0)


# Global window store instance
_window_store: Optional[WindowStateStore] = None


def get_window_store() -> WindowStateStore:
    """Get global window store instance"""
    global _window_store
    if _window_store is None:
        _window_store = WindowStateStore()
    return _window_store
