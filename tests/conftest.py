"""
Shared fixtures for the recycling tests
"""

import pytest

from recycling.models.rules import DEFAULT_RULES, DisposalAction, Rule
from recycling.models.scan_record import create_scan_record
from recycling.utils.state_store import MemoryStore, StatePersistence

LANDFILL_RULE = Rule(
    action=DisposalAction.LANDFILL,
    preparation="Bag loose items.",
    notes="Goes in the black bin.",
    source="https://example.org/landfill",
)


@pytest.fixture
def make_record():
    """Factory for records with distinct, increasing timestamps"""
    clock = {"now": 1_700_000_000.0}

    def _make(category="PET Bottle", rule=None, weight_kg=None, timestamp=None):
        if timestamp is None:
            clock["now"] += 1.0
            timestamp = clock["now"]
        if rule is None:
            rule = DEFAULT_RULES.lookup(category)
        record = create_scan_record(category, rule, f"data:image/jpeg;base64,{category}", timestamp)
        if weight_kg is not None:
            record = record.with_weight(weight_kg)
        return record

    return _make


@pytest.fixture
def memory_persistence():
    return StatePersistence(MemoryStore())
