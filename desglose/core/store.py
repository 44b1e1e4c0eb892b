# desglose/core/store.py
"""
Process-local holder of the tracker state.

Routes read the current TrackerState, apply a mutation from
desglose.core.tracker and store the result back.
"""

import logging
import threading
from pathlib import Path

from desglose.core.storage import DATA_DIR, load_breakdowns, load_hours_config, load_positions
from desglose.core.tracker import TrackerState

logger = logging.getLogger(__name__)


def default_state(data_dir: Path = DATA_DIR) -> TrackerState:
    """Fresh state with the default catalogs and no period selected."""
    return TrackerState(
        positions=load_positions(data_dir),
        breakdowns=load_breakdowns(data_dir),
        hours_config=load_hours_config(data_dir),
    )


class StateStore:
    """Holds one TrackerState and swaps it atomically."""

    def __init__(self, state: TrackerState | None = None, data_dir: Path = DATA_DIR):
        self._data_dir = data_dir
        self._lock = threading.Lock()
        self._state = state

    def get(self) -> TrackerState:
        with self._lock:
            if self._state is None:
                self._state = default_state(self._data_dir)
                logger.info("Tracker state initialised from %s", self._data_dir)
            return self._state

    def replace(self, state: TrackerState) -> TrackerState:
        with self._lock:
            self._state = state
        return state

    def reset(self) -> None:
        with self._lock:
            self._state = None


_store = StateStore()


def get_store() -> StateStore:
    """FastAPI dependency returning the application store."""
    return _store
