"""Tests for power module."""
import pytest

from flightthepower.power import I64_MAX, Power


def _make_power(**overrides) -> Power:
    fields = dict(
        id=2,
        title="Hamster on a Wheel",
        cost=1000,
        production_amount=25,
        production_rate=1.0,
        max_owned=30_000_000,
        unlock_threshold=1000,
        current_owned=3,
    )
    fields.update(overrides)
    return Power(**fields)


def test_default_title():
    assert Power(id=4).title == "Power 4"


def test_credit_per_period():
    assert _make_power().credit_per_period == 75
    assert _make_power(current_owned=0).credit_per_period == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"cost": -1},
        {"production_amount": -5},
        {"unlock_threshold": -1},
        {"production_rate": 0.0},
        {"production_rate": float("inf")},
        {"current_owned": -1},
        {"current_owned": 2, "max_owned": 1},
        {"id": -1},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValueError):
        _make_power(**overrides)


def test_record_shape():
    record = _make_power().to_record()
    assert set(record) == {
        "power",
        "title",
        "id",
        "cost",
        "production_amount",
        "production_rate",
        "max_owned",
        "current_owned",
        "unlock_bound",
    }
    assert record["unlock_bound"] == 1000
    assert record["power"] is None


def test_record_round_trip():
    power = _make_power(max_owned=I64_MAX)
    assert Power.from_record(power.to_record()) == power


def test_from_record_ignores_marker_value():
    record = _make_power().to_record()
    record["power"] = []
    assert Power.from_record(record).id == 2


def test_from_record_missing_field():
    record = _make_power().to_record()
    del record["cost"]
    with pytest.raises(KeyError):
        Power.from_record(record)


def test_from_record_wrong_types():
    record = _make_power().to_record()
    record["cost"] = "1000"
    with pytest.raises(TypeError):
        Power.from_record(record)

    record = _make_power().to_record()
    record["current_owned"] = True
    with pytest.raises(TypeError):
        Power.from_record(record)


def test_copy_is_independent():
    power = _make_power()
    clone = power.copy()
    clone.current_owned += 1
    assert power.current_owned == 3
