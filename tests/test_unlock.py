"""Tests for unlock module."""
import pytest

from flightthepower.catalog import PowerCatalog
from flightthepower.events import PowerUnlocked
from flightthepower.power import Power
from flightthepower.unlock import UnlockEngine, UnlockFlags


def _make_catalog() -> PowerCatalog:
    return PowerCatalog([
        Power(id=0, unlock_threshold=0),
        Power(id=1, unlock_threshold=50),
        Power(id=2, unlock_threshold=1000),
    ])


def test_defaults_all_locked():
    flags = UnlockFlags.defaults()
    assert len(flags) == 10
    assert flags.unlocked_ids() == []


def test_unlock_transition_once():
    flags = UnlockFlags.for_ids([0, 1])
    assert flags.unlock(1)
    assert not flags.unlock(1)
    assert flags.is_unlocked(1)


def test_evaluate_threshold_inclusive():
    catalog = _make_catalog()
    engine = UnlockEngine(UnlockFlags.for_ids(catalog.ids()))

    assert engine.evaluate(49, catalog) == [PowerUnlocked(0)]
    assert engine.evaluate(50, catalog) == [PowerUnlocked(1)]
    assert engine.flags.unlocked_ids() == [0, 1]


def test_evaluate_is_idempotent():
    catalog = _make_catalog()
    engine = UnlockEngine(UnlockFlags.for_ids(catalog.ids()))
    engine.evaluate(5000, catalog)
    assert engine.evaluate(5000, catalog) == []


def test_flags_never_revert():
    catalog = _make_catalog()
    engine = UnlockEngine(UnlockFlags.for_ids(catalog.ids()))
    engine.evaluate(1000, catalog)
    engine.evaluate(0, catalog)
    engine.evaluate(-500, catalog)
    assert engine.flags.unlocked_ids() == [0, 1, 2]


def test_ids_without_flag_entry_stay_locked():
    catalog = _make_catalog()
    engine = UnlockEngine(UnlockFlags.for_ids([0, 1]))
    assert PowerUnlocked(2) not in engine.evaluate(10_000, catalog)
    assert not engine.flags.is_unlocked(2)


def test_merged_with_keeps_existing_flags():
    flags = UnlockFlags({1: True})
    merged = flags.merged_with([0, 1, 2])
    assert merged.as_dict() == {0: False, 1: True, 2: False}
    # source flags untouched
    assert flags.as_dict() == {1: True}


def test_mapping_round_trip():
    flags = UnlockFlags({0: False, 1: True, 10: True})
    data = flags.to_mapping()
    assert data == {"0": False, "1": True, "10": True}
    assert UnlockFlags.from_mapping(data) == flags


@pytest.mark.parametrize(
    "data",
    [
        [True, False],
        {"0": "yes"},
        {"zero": True},
        {"-1": True},
    ],
)
def test_from_mapping_rejects_bad_content(data):
    with pytest.raises((TypeError, ValueError)):
        UnlockFlags.from_mapping(data)
