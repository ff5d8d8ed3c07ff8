"""
Impact accounting
Derives waste-diverted totals and dashboard breakdowns from scan history
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

import numpy as np

from ..models.rules import DisposalAction
from ..models.scan_record import ScanRecord
from ..models.state import RecyclingState
from .feedback_tracker import accuracy

DEFAULT_ITEM_WEIGHT_KG = 0.1  # 100g per item when the user gave no weight

DIVERTING_ACTIONS = frozenset({DisposalAction.RECYCLE, DisposalAction.COMPOST})
LANDFILL_ACTIONS = frozenset({DisposalAction.LANDFILL, DisposalAction.SPECIAL_DROP_OFF})


def compute_waste_diverted(history: Iterable[ScanRecord],
                           default_weight_kg: float = DEFAULT_ITEM_WEIGHT_KG) -> float:
    """
    Mass kept out of landfill by the records currently in history

    Only Recycle and Compost records count. A record contributes its
    user-entered weight, or default_weight_kg when it has none.

    The total is rounded to two decimals with numpy.round, which rounds
    half to even on the scaled value (0.125 -> 0.12, 0.375 -> 0.38).

    Args:
        history: Records to sum over
        default_weight_kg: Mass assumed for records without a weight

    Returns:
        Kilograms, rounded to 2 decimal places
    """
    weights = [
        record.weight_kg if record.weight_kg is not None else default_weight_kg
        for record in history
        if record.rule.action in DIVERTING_ACTIONS
    ]
    if not weights:
        return 0.0
    return float(np.round(np.sum(weights), 2))


def count_by_action(history: Iterable[ScanRecord]) -> Dict[str, int]:
    """Number of records per disposal action, every action present"""
    counts = {action.value: 0 for action in DisposalAction}
    for record in history:
        counts[record.rule.action.value] += 1
    return counts


def landfill_count(history: Iterable[ScanRecord]) -> int:
    """Records that were not diverted (Landfill and Special Drop-off)"""
    return sum(1 for record in history if record.rule.action in LANDFILL_ACTIONS)


def _shift_month(year: int, month: int, offset: int):
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def monthly_breakdown(history: Iterable[ScanRecord], months: int = 6,
                      now: Optional[datetime] = None) -> List[Dict]:
    """
    Recycled and composted item counts per calendar month

    Args:
        history: Records to bucket by their local-time timestamp
        months: Number of months to report, ending with the current one
        now: Reference time, defaults to datetime.now()

    Returns:
        One dict per month, oldest first, with month name, YYYY-MM key
        and recycled/composted counts
    """
    if now is None:
        now = datetime.now()

    monthly_data: Dict[str, Dict[str, int]] = {}
    for record in history:
        key = datetime.fromtimestamp(record.timestamp).strftime("%Y-%m")
        bucket = monthly_data.setdefault(key, {"recycled": 0, "composted": 0})
        if record.rule.action == DisposalAction.RECYCLE:
            bucket["recycled"] += 1
        elif record.rule.action == DisposalAction.COMPOST:
            bucket["composted"] += 1

    breakdown = []
    for offset in range(-(months - 1), 1):
        year, month = _shift_month(now.year, now.month, offset)
        key = f"{year:04d}-{month:02d}"
        bucket = monthly_data.get(key, {})
        breakdown.append({
            "month": datetime(year, month, 1).strftime("%B"),
            "key": key,
            "recycled": bucket.get("recycled", 0),
            "composted": bucket.get("composted", 0),
        })

    return breakdown


def impact_summary(state: RecyclingState) -> Dict:
    """Dashboard numbers for a state"""
    return {
        "items_sorted": state.items_sorted,
        "waste_diverted_kg": state.waste_diverted_kg,
        "landfill_items": landfill_count(state.history),
        "accuracy": accuracy(state.feedback),
        "feedback_count": state.feedback.total,
        "by_action": count_by_action(state.history),
    }
