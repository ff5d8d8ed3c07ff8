"""
Tests for state persistence and load-time recovery
"""

import copy
import json

import pytest

from recycling.models.state import Feedback, RecyclingState, state_to_dict
from recycling.utils.active_item import select_from_history
from recycling.utils.feedback_tracker import record_correct, record_incorrect
from recycling.utils.history_ledger import append, update_weight
from recycling.utils.state_store import (
    STATE_VERSION, STORAGE_KEY, JsonFileStore, MemoryStore, StatePersistence,
)


class FailingStore(MemoryStore):
    def set_item(self, key, value):
        raise OSError("disk full")


class UnreadableStore(MemoryStore):
    def get_item(self, key):
        raise OSError("permission denied")


@pytest.fixture
def reachable_state(make_record):
    pet = make_record("PET Bottle")
    cup = make_record("Paper Cup")
    state = RecyclingState()
    for record in (pet, cup, make_record("Battery")):
        state = append(state, record)
    state = update_weight(state, pet.id, 0.25)
    state = select_from_history(state, cup.id)
    state = record_incorrect(record_correct(record_correct(state)))
    return state


def valid_document(state):
    return {"state": state_to_dict(state), "version": STATE_VERSION}


def test_round_trip_memory(reachable_state):
    persistence = StatePersistence(MemoryStore())
    assert persistence.save(reachable_state) is True
    assert persistence.load() == reachable_state


def test_round_trip_json_file(tmp_path, reachable_state):
    persistence = StatePersistence(JsonFileStore(str(tmp_path)))
    assert persistence.save(reachable_state)

    assert (tmp_path / f"{STORAGE_KEY}.json").exists()
    assert not (tmp_path / f"{STORAGE_KEY}.json.tmp").exists()
    assert StatePersistence(JsonFileStore(str(tmp_path))).load() == reachable_state


def test_round_trip_empty_state():
    persistence = StatePersistence(MemoryStore())
    persistence.save(RecyclingState())
    assert persistence.load() == RecyclingState()


def test_save_overwrites_previous_snapshot(make_record):
    persistence = StatePersistence(MemoryStore())
    persistence.save(append(RecyclingState(), make_record()))
    persistence.save(RecyclingState())
    assert persistence.load() == RecyclingState()


def test_document_layout(reachable_state):
    store = MemoryStore()
    StatePersistence(store, key="custom-key").save(reachable_state)
    document = json.loads(store.get_item("custom-key"))

    assert document["version"] == STATE_VERSION
    assert set(document["state"]) == {
        "history", "itemsSorted", "wasteDivertedKg", "feedback", "activeItem",
    }
    assert document["state"]["itemsSorted"] == 3
    assert document["state"]["wasteDivertedKg"] == 0.35
    assert document["state"]["feedback"] == {"correct": 2, "incorrect": 1}
    assert document["state"]["history"][0]["rule"]["action"] == "Special Drop-off"
    assert "weightKg" not in document["state"]["history"][0]
    assert document["state"]["history"][2]["weightKg"] == 0.25
    assert document["state"]["activeItem"]["category"] == "Paper Cup"


def test_load_missing_snapshot_is_empty():
    assert StatePersistence(MemoryStore()).load() == RecyclingState()


def test_load_missing_file_is_empty(tmp_path):
    assert StatePersistence(JsonFileStore(str(tmp_path / "nowhere"))).load() == RecyclingState()


@pytest.mark.parametrize("raw", [
    "{not json",
    "",
    "[]",
    "null",
    '"text"',
])
def test_load_corrupt_snapshot_is_empty(raw):
    store = MemoryStore()
    store.set_item(STORAGE_KEY, raw)
    assert StatePersistence(store).load() == RecyclingState()


def test_load_undecodable_file_is_empty(tmp_path):
    (tmp_path / f"{STORAGE_KEY}.json").write_bytes(b"\xff\xfe\x00garbage")
    assert StatePersistence(JsonFileStore(str(tmp_path))).load() == RecyclingState()


def test_load_read_failure_is_empty():
    assert StatePersistence(UnreadableStore()).load() == RecyclingState()


def _break_version(doc):
    doc["version"] = 1


def _drop_state(doc):
    del doc["state"]


def _history_not_list(doc):
    doc["state"]["history"] = {"0": doc["state"]["history"][0]}


def _history_too_long(doc):
    doc["state"]["history"] = doc["state"]["history"] * 17
    doc["state"]["itemsSorted"] = 51


def _unknown_action(doc):
    doc["state"]["history"][0]["rule"]["action"] = "Incinerate"


def _missing_rule_text(doc):
    del doc["state"]["history"][0]["rule"]["notes"]


def _timestamp_text(doc):
    doc["state"]["history"][0]["timestamp"] = "yesterday"


def _nan_timestamp(doc):
    doc["state"]["history"][0]["timestamp"] = float("nan")


def _inf_weight(doc):
    doc["state"]["history"][0]["weightKg"] = float("inf")


def _nan_waste(doc):
    doc["state"]["wasteDivertedKg"] = float("nan")


def _zero_weight(doc):
    doc["state"]["history"][0]["weightKg"] = 0


def _bool_weight(doc):
    doc["state"]["history"][0]["weightKg"] = True


def _negative_items_sorted(doc):
    doc["state"]["itemsSorted"] = -1


def _bool_items_sorted(doc):
    doc["state"]["itemsSorted"] = True


def _float_items_sorted(doc):
    doc["state"]["itemsSorted"] = 3.0


def _items_sorted_below_history(doc):
    doc["state"]["itemsSorted"] = 2


def _waste_text(doc):
    doc["state"]["wasteDivertedKg"] = "0.35"


def _feedback_missing(doc):
    del doc["state"]["feedback"]


def _feedback_text(doc):
    doc["state"]["feedback"]["correct"] = "2"


def _active_missing(doc):
    del doc["state"]["activeItem"]


def _active_malformed(doc):
    doc["state"]["activeItem"] = {"id": "x"}


def _id_not_string(doc):
    doc["state"]["history"][1]["id"] = 7


@pytest.mark.parametrize("corrupt", [
    _break_version, _drop_state, _history_not_list, _history_too_long,
    _unknown_action, _missing_rule_text, _timestamp_text, _nan_timestamp,
    _inf_weight, _nan_waste, _zero_weight,
    _bool_weight, _negative_items_sorted, _bool_items_sorted,
    _float_items_sorted, _items_sorted_below_history, _waste_text,
    _feedback_missing, _feedback_text, _active_missing, _active_malformed,
    _id_not_string,
])
def test_shape_mismatch_falls_back_to_empty(reachable_state, corrupt):
    document = copy.deepcopy(valid_document(reachable_state))
    corrupt(document)
    store = MemoryStore()
    store.set_item(STORAGE_KEY, json.dumps(document))

    assert StatePersistence(store).load() == RecyclingState()


def test_capacity_applies_on_load(reachable_state):
    store = MemoryStore()
    StatePersistence(store).save(reachable_state)
    assert StatePersistence(store, capacity=2).load() == RecyclingState()
    assert StatePersistence(store, capacity=3).load() == reachable_state


def test_waste_diverted_recomputed_on_load(reachable_state):
    document = valid_document(reachable_state)
    document["state"]["wasteDivertedKg"] = 99.0
    store = MemoryStore()
    store.set_item(STORAGE_KEY, json.dumps(document))

    loaded = StatePersistence(store).load()
    assert loaded.waste_diverted_kg == 0.35
    assert loaded.history == reachable_state.history


def test_null_active_item_and_missing_weight_load():
    document = {"state": state_to_dict(RecyclingState(feedback=Feedback(1, 0))),
                "version": STATE_VERSION}
    store = MemoryStore()
    store.set_item(STORAGE_KEY, json.dumps(document))
    assert StatePersistence(store).load() == RecyclingState(feedback=Feedback(1, 0))


def test_write_failure_is_reported_not_raised(reachable_state):
    assert StatePersistence(FailingStore()).save(reachable_state) is False


def test_json_file_store_write_failure(tmp_path, reachable_state):
    blocker = tmp_path / "blocked"
    blocker.write_text("a file where the directory should be")
    persistence = StatePersistence(JsonFileStore(str(blocker / "data")))
    assert persistence.save(reachable_state) is False


def test_json_file_store_remove(tmp_path):
    store = JsonFileStore(str(tmp_path))
    store.set_item("k", "v")
    assert store.get_item("k") == "v"
    store.remove_item("k")
    assert store.get_item("k") is None
