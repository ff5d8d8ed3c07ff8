"""
Active item handoff
The one record open in the detail view, kept outside history accounting
"""

from dataclasses import replace
from typing import Optional

from ..models.scan_record import ScanRecord
from ..models.state import RecyclingState
from .history_ledger import find_record


def set_active(state: RecyclingState, record: Optional[ScanRecord]) -> RecyclingState:
    """
    Replace the active record unconditionally.

    Records are immutable, so the active item is a snapshot: a later weight
    update in history does not reach it.
    """
    return replace(state, active_item=record)


def get_active(state: RecyclingState) -> Optional[ScanRecord]:
    return state.active_item


def select_from_history(state: RecyclingState, record_id: str) -> RecyclingState:
    """Open a past record; unknown ids leave the state as it is"""
    record = find_record(state, record_id)
    if record is None:
        return state
    return set_active(state, record)


def reset_view(state: RecyclingState) -> RecyclingState:
    return set_active(state, None)
