"""
Recycling session
Single owner of the session state: applies each user event as one
transition and saves the result
"""

import logging
import threading
from typing import Dict, Optional, Tuple

from .models.classification import ClassificationResult, resolve_classification
from .models.rules import DEFAULT_RULES, RuleCatalog
from .models.scan_record import ScanRecord, create_scan_record
from .models.state import HISTORY_CAPACITY, Feedback, RecyclingState
from .utils import active_item as handoff
from .utils import feedback_tracker, history_ledger
from .utils.impact import DEFAULT_ITEM_WEIGHT_KG, impact_summary
from .utils.state_store import StatePersistence


class RecyclingSession:
    """
    Holds the current RecyclingState and is the only place it changes.

    Every mutating call replaces the state under a lock, then saves it
    explicitly. A failed save leaves last_save_ok False; the in-memory
    state is still used.
    """

    def __init__(self, persistence: StatePersistence,
                 catalog: RuleCatalog = DEFAULT_RULES,
                 capacity: int = HISTORY_CAPACITY,
                 default_weight_kg: float = DEFAULT_ITEM_WEIGHT_KG):
        """
        Initialize the session and load any saved state

        Args:
            persistence: Where the state is saved after every change
            catalog: Rule catalog used to resolve classifications
            capacity: Maximum number of records kept in history
            default_weight_kg: Mass assumed for records without a weight
        """
        self.persistence = persistence
        self.catalog = catalog
        self.capacity = capacity
        self.default_weight_kg = default_weight_kg
        self.lock = threading.Lock()
        self.last_save_ok = True

        self.setup_logging()
        self._state = persistence.load()

        self.logger.info(
            f"Session started: {len(self._state.history)} records in history"
        )

    def setup_logging(self):
        """Setup logging"""
        self.logger = logging.getLogger(__name__)

    def _commit(self, transition, *args) -> RecyclingState:
        with self.lock:
            state = transition(self._state, *args)
            self._state = state
            self.last_save_ok = self.persistence.save(state)
        if not self.last_save_ok:
            self.logger.warning("State kept in memory only, changes are not persisted")
        return state

    # Mutations

    def add_record(self, record: ScanRecord) -> RecyclingState:
        """Append a record to history"""
        state = self._commit(
            lambda s, r: history_ledger.append(s, r, self.capacity, self.default_weight_kg),
            record,
        )
        self.logger.info(f"Added {record.category} ({record.id}) to history")
        return state

    def add_classification(self, result: ClassificationResult, image_ref: str,
                           timestamp: Optional[float] = None) -> Optional[ScanRecord]:
        """
        Turn a classifier result into a history entry

        Starting a new classification closes any record open in the detail
        view. Labels missing from the catalog are declined.

        Args:
            result: Successful classifier response
            image_ref: Reference to the classified image
            timestamp: Creation time, defaults to now

        Returns:
            The new record, or None if the category has no rule
        """
        rule = resolve_classification(result, self.catalog)
        if rule is None:
            self.reset_view()
            self.logger.warning(f"Declined classification '{result.category}': not in catalog")
            return None

        record = create_scan_record(result.category, rule, image_ref, timestamp)
        self._commit(
            lambda s, r: history_ledger.append(
                handoff.reset_view(s), r, self.capacity, self.default_weight_kg
            ),
            record,
        )
        self.logger.info(f"Added {record.category} ({record.id}) to history")
        return record

    def update_weight(self, record_id: str, weight_kg: float) -> RecyclingState:
        """Set a record's weight; unknown ids are ignored"""
        state = self._commit(
            lambda s, i, w: history_ledger.update_weight(s, i, w, self.default_weight_kg),
            record_id, weight_kg,
        )
        if history_ledger.find_record(state, record_id) is not None:
            self.logger.info(f"Weight of {record_id} set to {weight_kg:.3f}kg")
        return state

    def record_correct(self) -> RecyclingState:
        return self._commit(feedback_tracker.record_correct)

    def record_incorrect(self) -> RecyclingState:
        return self._commit(feedback_tracker.record_incorrect)

    def clear_history(self) -> RecyclingState:
        """Reset history, counters, feedback and active item"""
        state = self._commit(history_ledger.clear_history)
        self.logger.info("History cleared")
        return state

    def set_active(self, record: Optional[ScanRecord]) -> RecyclingState:
        return self._commit(handoff.set_active, record)

    def select_from_history(self, record_id: str) -> Optional[ScanRecord]:
        """
        Open a past record in the detail view

        Returns:
            The now-active record, or None if the id is not in history
        """
        state = self._commit(handoff.select_from_history, record_id)
        if state.active_item is None or state.active_item.id != record_id:
            return None
        return state.active_item

    def reset_view(self) -> RecyclingState:
        return self._commit(handoff.reset_view)

    # Reads

    @property
    def state(self) -> RecyclingState:
        return self._state

    @property
    def history(self) -> Tuple[ScanRecord, ...]:
        return self._state.history

    @property
    def items_sorted(self) -> int:
        return self._state.items_sorted

    @property
    def waste_diverted_kg(self) -> float:
        return self._state.waste_diverted_kg

    @property
    def feedback(self) -> Feedback:
        return self._state.feedback

    @property
    def accuracy(self) -> float:
        return feedback_tracker.accuracy(self._state.feedback)

    @property
    def active_item(self) -> Optional[ScanRecord]:
        return handoff.get_active(self._state)

    def find(self, record_id: str) -> Optional[ScanRecord]:
        return history_ledger.find_record(self._state, record_id)

    def get_statistics(self) -> Dict:
        """Get overall session statistics"""
        stats = impact_summary(self._state)
        stats.update({
            "history_length": len(self._state.history),
            "history_capacity": self.capacity,
            "active_item": self._state.active_item.id if self._state.active_item else None,
            "last_save_ok": self.last_save_ok,
        })
        return stats
