"""
Recycling state document
Everything a session owns: scan history, running counters, feedback and
the record currently open in the detail view
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .scan_record import ScanRecord, is_number

HISTORY_CAPACITY = 50


class StateFormatError(ValueError):
    """A persisted state document does not have the expected shape"""


@dataclass(frozen=True)
class Feedback:
    """Confirmed-correct and confirmed-incorrect classification counts"""
    correct: int = 0
    incorrect: int = 0

    @property
    def total(self) -> int:
        return self.correct + self.incorrect


@dataclass(frozen=True)
class RecyclingState:
    """
    Immutable snapshot of a session.

    history is newest first. items_sorted is a lifetime counter and is not
    tied to len(history); waste_diverted_kg is always derived from history.
    """
    history: Tuple[ScanRecord, ...] = ()
    items_sorted: int = 0
    waste_diverted_kg: float = 0.0
    feedback: Feedback = field(default_factory=Feedback)
    active_item: Optional[ScanRecord] = None


def state_to_dict(state: RecyclingState) -> Dict:
    """Convert to the persisted document layout"""
    return {
        "history": [record.to_dict() for record in state.history],
        "itemsSorted": state.items_sorted,
        "wasteDivertedKg": state.waste_diverted_kg,
        "feedback": {
            "correct": state.feedback.correct,
            "incorrect": state.feedback.incorrect,
        },
        "activeItem": state.active_item.to_dict() if state.active_item else None,
    }


def _count(data: Dict, key: str) -> int:
    value = data.get(key)
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise StateFormatError(f"'{key}' must be a non-negative integer")
    return value


def _record(data, where: str) -> ScanRecord:
    try:
        return ScanRecord.from_dict(data)
    except ValueError as e:
        raise StateFormatError(f"Invalid scan record in {where}: {e}") from e


def state_from_dict(data: Dict, capacity: int = HISTORY_CAPACITY) -> RecyclingState:
    """
    Rebuild a state from its persisted layout.

    The document is adopted whole or not at all: any field with the wrong
    shape raises StateFormatError.

    Args:
        data: Dictionary produced by state_to_dict()
        capacity: Maximum history length a valid document may hold

    Returns:
        RecyclingState with the stored wasteDivertedKg (callers recompute it)
    """
    if not isinstance(data, dict):
        raise StateFormatError("State must be an object")

    history = data.get("history")
    if not isinstance(history, list):
        raise StateFormatError("'history' must be a list")
    if len(history) > capacity:
        raise StateFormatError(
            f"'history' holds {len(history)} entries, capacity is {capacity}"
        )
    records = tuple(_record(item, "history") for item in history)

    items_sorted = _count(data, "itemsSorted")
    if items_sorted < len(records):
        raise StateFormatError("'itemsSorted' is smaller than the history length")

    waste = data.get("wasteDivertedKg")
    if not is_number(waste) or waste < 0:
        raise StateFormatError("'wasteDivertedKg' must be a non-negative number")

    feedback = data.get("feedback")
    if not isinstance(feedback, dict):
        raise StateFormatError("'feedback' must be an object")

    if "activeItem" not in data:
        raise StateFormatError("'activeItem' is missing")
    active = data["activeItem"]
    active_item = _record(active, "activeItem") if active is not None else None

    return RecyclingState(
        history=records,
        items_sorted=items_sorted,
        waste_diverted_kg=float(waste),
        feedback=Feedback(
            correct=_count(feedback, "correct"),
            incorrect=_count(feedback, "incorrect"),
        ),
        active_item=active_item,
    )
