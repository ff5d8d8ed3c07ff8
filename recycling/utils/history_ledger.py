"""
History ledger
Bounded, newest-first scan history and the transitions that change it
"""

import logging
from dataclasses import replace
from typing import Optional

from ..models.scan_record import ScanRecord
from ..models.state import HISTORY_CAPACITY, RecyclingState
from .impact import DEFAULT_ITEM_WEIGHT_KG, compute_waste_diverted

logger = logging.getLogger(__name__)


def append(state: RecyclingState, record: ScanRecord,
           capacity: int = HISTORY_CAPACITY,
           default_weight_kg: float = DEFAULT_ITEM_WEIGHT_KG) -> RecyclingState:
    """
    Add a record to the front of the history

    items_sorted is incremented before the oldest entries beyond capacity
    are dropped, so eviction never lowers the lifetime count.

    Args:
        state: Current state
        record: Newly created record
        capacity: Maximum number of records kept
        default_weight_kg: Mass assumed for records without a weight

    Returns:
        New state with the record first and waste_diverted_kg recomputed
    """
    items_sorted = state.items_sorted + 1
    history = (record,) + state.history

    if len(history) > capacity:
        evicted = history[capacity:]
        history = history[:capacity]
        logger.debug(f"Evicted {len(evicted)} record(s): {[r.id for r in evicted]}")

    return replace(
        state,
        history=history,
        items_sorted=items_sorted,
        waste_diverted_kg=compute_waste_diverted(history, default_weight_kg),
    )


def update_weight(state: RecyclingState, record_id: str, weight_kg: float,
                  default_weight_kg: float = DEFAULT_ITEM_WEIGHT_KG) -> RecyclingState:
    """
    Set the user-entered weight of a record, keeping its position.

    weight_kg must already be validated as a positive number. An id that is
    no longer in the history (e.g. evicted) leaves the state untouched.
    """
    if find_record(state, record_id) is None:
        logger.debug(f"Weight update for unknown record {record_id} ignored")
        return state

    history = tuple(
        record.with_weight(weight_kg) if record.id == record_id else record
        for record in state.history
    )
    return replace(
        state,
        history=history,
        waste_diverted_kg=compute_waste_diverted(history, default_weight_kg),
    )


def clear_history(state: RecyclingState) -> RecyclingState:
    """Reset history, counters, feedback and active item in one step"""
    return RecyclingState()


def find_record(state: RecyclingState, record_id: str) -> Optional[ScanRecord]:
    for record in state.history:
        if record.id == record_id:
            return record
    return None
