"""Tests for session module."""
import pytest

from flightthepower.catalog import PowerCatalog
from flightthepower.errors import PurchaseError, SessionClosedError
from flightthepower.events import (
    AutoClickToggled,
    GameSaved,
    ManualClick,
    PowerUnlocked,
    PurchaseCompleted,
    PurchaseRejected,
    RequestExit,
    RequestPurchase,
    RequestSave,
    SessionExited,
    ToggleAutoClick,
)
from flightthepower.ledger import Ledger
from flightthepower.persistence import PersistenceGateway
from flightthepower.power import Power
from flightthepower.session import GameSession
from flightthepower.settings import Settings
from flightthepower.unlock import UnlockFlags


def _make_session(ledger: int = 0, gateway=None) -> GameSession:
    """A producer that is already unlocked and a second power gated at 50."""
    catalog = PowerCatalog([
        Power(
            id=0,
            title="Producer",
            cost=10,
            production_amount=1,
            production_rate=1.0,
            max_owned=10,
            current_owned=1,
        ),
        Power(
            id=1,
            title="Gated",
            cost=50,
            production_amount=5,
            production_rate=5.0,
            max_owned=3,
            unlock_threshold=50,
        ),
    ])
    return GameSession(
        ledger=Ledger(ledger),
        catalog=catalog,
        unlock_flags=UnlockFlags({0: True}),
        settings=Settings(),
        gateway=gateway,
    )


def test_new_session_defaults():
    session = GameSession.new()
    assert session.ledger_value == 0
    assert len(session.catalog) == 10
    assert session.live_powers == {}
    assert not any(session.is_unlocked(i) for i in range(10))


def test_flags_merged_with_catalog_ids():
    session = _make_session()
    assert session.flags.as_dict() == {0: True, 1: False}


def test_unlocked_powers_are_live_at_start():
    session = _make_session()
    assert list(session.live_powers) == [0]


def test_production_credit_unlocks_in_same_tick():
    session = _make_session(ledger=49)

    signals = session.tick(1.0)

    assert session.ledger_value == 50
    assert PowerUnlocked(1) in signals
    assert session.is_unlocked(1)
    assert 1 in session.live_powers


def test_purchase_sees_same_tick_unlock_and_credit():
    session = _make_session(ledger=49)
    session.submit(RequestPurchase(1))

    signals = session.tick(1.0)

    assert signals == [PowerUnlocked(1), PurchaseCompleted(1, 1, 0)]
    assert session.owned(1) == 1


def test_click_applies_after_unlock_check():
    session = _make_session(ledger=49)
    session.submit(ManualClick())

    assert session.tick(0.0) == []
    assert session.ledger_value == 50
    assert not session.is_unlocked(1)

    assert session.tick(0.0) == [PowerUnlocked(1)]


def test_commands_apply_in_input_order():
    session = _make_session(ledger=9)
    session.submit(RequestPurchase(0))
    session.submit(ManualClick())
    session.submit(RequestPurchase(0))

    signals = session.tick(0.0)

    assert isinstance(signals[0], PurchaseRejected)
    assert signals[0].error is PurchaseError.INSUFFICIENT_FUNDS
    assert signals[1] == PurchaseCompleted(0, 2, 0)


def test_purchase_of_locked_power_not_found():
    session = _make_session(ledger=40)
    session.submit(RequestPurchase(1))
    signals = session.tick(0.0)
    assert signals == [PurchaseRejected(1, PurchaseError.NOT_FOUND)]


def test_owned_from_live_instance():
    session = _make_session(ledger=100)
    session.submit(RequestPurchase(0))
    session.tick(0.0)
    assert session.owned(0) == 2
    # catalog is untouched until a save syncs it
    assert session.catalog.find(0).current_owned == 1


def test_toggle_auto_click():
    session = _make_session()
    session.submit(ToggleAutoClick())
    assert session.tick(0.0) == [AutoClickToggled(True)]

    for _ in range(8):
        session.tick(0.125)
    # 8 auto-clicks plus one production period
    assert session.ledger_value == 9


def test_negative_delta_rejected():
    with pytest.raises(ValueError):
        _make_session().tick(-1.0)


def test_save_syncs_owned_count(tmp_path):
    gateway = PersistenceGateway(tmp_path)
    session = _make_session(ledger=100, gateway=gateway)
    session.submit(RequestPurchase(0))
    session.submit(RequestSave())

    signals = session.tick(0.0)

    saved = [s for s in signals if isinstance(s, GameSaved)]
    assert saved and saved[0].ok
    assert session.catalog.find(0).current_owned == 2
    assert gateway.load_catalog().find(0).current_owned == 2
    assert gateway.load_ledger().value == 90


def test_save_without_gateway():
    session = _make_session()
    session.submit(RequestSave())
    signals = session.tick(0.0)
    assert signals == [GameSaved({})]
    assert not signals[0].ok


def test_exit_saves_and_closes(tmp_path):
    gateway = PersistenceGateway(tmp_path)
    session = _make_session(ledger=123, gateway=gateway)
    session.submit(ManualClick())
    session.submit(RequestExit())
    session.submit(ManualClick())

    signals = session.tick(0.0)

    assert isinstance(signals[0], GameSaved)
    assert signals[0].ok
    assert signals[1] == SessionExited()
    assert session.exited
    # the click after exit was dropped
    assert gateway.load_ledger().value == 124

    with pytest.raises(SessionClosedError):
        session.tick(1.0)
    with pytest.raises(SessionClosedError):
        session.submit(ManualClick())


def test_start_with_no_files_uses_defaults(tmp_path):
    session = GameSession.start(PersistenceGateway(tmp_path))
    assert session.ledger_value == 0
    assert session.catalog == PowerCatalog.defaults()
    assert session.settings == Settings()
    assert session.live_powers == {}


def test_state_survives_restart(tmp_path):
    gateway = PersistenceGateway(tmp_path)
    session = GameSession.start(gateway)
    session.ledger.add(60)
    session.tick(0.0)
    session.submit(RequestPurchase(1))
    session.submit(ToggleAutoClick())
    session.submit(RequestExit())
    session.tick(0.0)

    restored = GameSession.start(gateway)

    assert restored.ledger_value == 10
    assert restored.is_unlocked(1)
    assert list(restored.live_powers) == [1]
    assert restored.owned(1) == 1
    assert restored.settings.auto_click


def test_unlocks_monotonic_across_restart(tmp_path):
    gateway = PersistenceGateway(tmp_path)
    session = GameSession.start(gateway)
    session.ledger.add(1000)
    session.tick(0.0)
    unlocked = session.flags.unlocked_ids()
    assert unlocked == [1, 2]
    # spend everything; flags stay set
    session.ledger.add(-1000)
    session.tick(0.0)
    session.save()

    restored = GameSession.start(gateway)
    restored.tick(0.0)
    assert restored.flags.unlocked_ids() == unlocked


def test_corrupt_file_falls_back_for_that_aggregate_only(tmp_path):
    gateway = PersistenceGateway(tmp_path)
    gateway.save_ledger(Ledger(777))
    gateway.save_dir.joinpath("powers.json").write_text("][")

    session = GameSession.start(gateway)

    assert session.ledger_value == 777
    assert session.catalog == PowerCatalog.defaults()


def test_undecodable_files_fall_back_to_defaults(tmp_path):
    gateway = PersistenceGateway(tmp_path)
    gateway.save_dir.mkdir(parents=True)
    gateway.save_dir.joinpath("powers.json").write_bytes(b"\xff\xfe[garbage")
    gateway.save_dir.joinpath("total_power.json").write_bytes(b"[" * 100_000)

    session = GameSession.start(gateway)

    assert session.ledger_value == 0
    assert session.catalog == PowerCatalog.defaults()


def test_snapshot_and_statuses():
    session = _make_session(ledger=20)
    snap = session.snapshot()
    assert snap["total_power"] == 20
    assert snap["powers"][0] == {"id": 0, "title": "Producer", "owned": 1, "unlocked": True}
    assert snap["powers"][1]["unlocked"] is False

    statuses = session.power_statuses()
    assert statuses[0].affordable
    assert statuses[0].next_credit_in == pytest.approx(1.0)
    assert not statuses[1].affordable
    assert statuses[1].next_credit_in is None
