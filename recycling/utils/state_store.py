"""
State persistence
Saves the whole session state under one key of a local key-value store and
recovers an empty state when the stored snapshot cannot be used
"""

import json
import logging
import os
import threading
from dataclasses import replace
from pathlib import Path
from typing import Dict, Optional

from ..models.state import (
    HISTORY_CAPACITY, RecyclingState, StateFormatError,
    state_from_dict, state_to_dict,
)
from .impact import DEFAULT_ITEM_WEIGHT_KG, compute_waste_diverted

STORAGE_KEY = "recycling-wise-storage"
STATE_VERSION = 0


class MemoryStore:
    """In-process key-value store"""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str):
        self._items[key] = value

    def remove_item(self, key: str):
        self._items.pop(key, None)


class JsonFileStore:
    """
    Key-value store keeping one JSON file per key in a directory.
    Writes go through a temp file and os.replace so readers never see a
    half-written snapshot.
    """

    def __init__(self, directory: str = "data"):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def set_item(self, key: str, value: str):
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_name(path.name + ".tmp")
        with open(tmp_path, 'w', encoding='utf-8') as f:
            f.write(value)
        os.replace(tmp_path, path)

    def remove_item(self, key: str):
        path = self._path(key)
        if path.exists():
            path.unlink()


class StatePersistence:
    """
    Write-through persistence for RecyclingState

    Every mutating session call is followed by save(). Several processes
    sharing one store and key are not coordinated: the last save wins.
    """

    def __init__(self, store, key: str = STORAGE_KEY,
                 capacity: int = HISTORY_CAPACITY,
                 default_weight_kg: float = DEFAULT_ITEM_WEIGHT_KG):
        """
        Initialize state persistence

        Args:
            store: Object with get_item(key) and set_item(key, value)
            key: Namespace key the snapshot is stored under
            capacity: History capacity a loaded snapshot must respect
            default_weight_kg: Mass used when recomputing waste diverted
        """
        self.store = store
        self.key = key
        self.capacity = capacity
        self.default_weight_kg = default_weight_kg
        self.lock = threading.Lock()
        self.setup_logging()

    def setup_logging(self):
        """Setup logging"""
        self.logger = logging.getLogger(__name__)

    def save(self, state: RecyclingState) -> bool:
        """
        Overwrite the stored snapshot with state

        Returns:
            True if written, False if the store could not be written
            (the in-memory state stays valid either way)
        """
        document = {"state": state_to_dict(state), "version": STATE_VERSION}
        with self.lock:
            try:
                self.store.set_item(self.key, json.dumps(document))
            except (OSError, TypeError, ValueError) as e:
                self.logger.warning(f"Failed to save state to '{self.key}': {e}")
                return False

        self.logger.debug(f"Saved state to '{self.key}'")
        return True

    def load(self) -> RecyclingState:
        """
        Load the stored snapshot

        Returns:
            The stored state, or an empty state when there is none or it is
            unreadable, corrupt or of an incompatible shape
        """
        with self.lock:
            try:
                raw = self.store.get_item(self.key)
            except (OSError, UnicodeDecodeError) as e:
                self.logger.warning(f"Failed to read state '{self.key}': {e}")
                return RecyclingState()

        if raw is None:
            self.logger.info(f"No saved state under '{self.key}', starting empty")
            return RecyclingState()

        try:
            document = json.loads(raw)
            if not isinstance(document, dict):
                raise StateFormatError("Snapshot must be an object")
            if document.get("version") != STATE_VERSION:
                raise StateFormatError(f"Unsupported version {document.get('version')!r}")
            state = state_from_dict(document.get("state"), capacity=self.capacity)
        except (json.JSONDecodeError, StateFormatError) as e:
            self.logger.warning(f"Discarding saved state '{self.key}': {e}")
            return RecyclingState()

        state = replace(
            state,
            waste_diverted_kg=compute_waste_diverted(state.history, self.default_weight_kg),
        )
        self.logger.info(
            f"Loaded state: {len(state.history)} records, {state.items_sorted} items sorted"
        )
        return state
