"""Tests for MCP server tool functions."""
import pytest

from flightthepower.persistence import PersistenceGateway
from flightthepower.session import GameSession

from flightthepower.mcp.server import (
    _SessionHolder,
    _tool_click,
    _tool_get_powers,
    _tool_get_state,
    _tool_purchase,
    _tool_save,
    _tool_toggle_auto_click,
    _tool_wait,
    create_server,
    shutdown,
)


def _holder(gateway=None) -> _SessionHolder:
    return _SessionHolder(session=GameSession.new(gateway=gateway))


def test_get_state():
    state = _tool_get_state(_holder())
    assert state["total_power"] == 0
    assert len(state["powers"]) == 10


def test_click():
    holder = _holder()
    result = _tool_click(holder, 5)
    assert result["clicks"] == 5
    assert result["total_earned"] == 5
    assert result["total_power"] == 5


def test_click_limits():
    holder = _holder()
    assert "error" in _tool_click(holder, 0)
    assert "error" in _tool_click(holder, 1001)


def test_purchase_after_reaching_threshold():
    holder = _holder()
    _tool_click(holder, 50)
    # the unlock check runs before the purchase in the same tick
    result = _tool_purchase(holder, 1)
    assert result == {"success": True, "power_id": 1, "new_owned": 1, "total_power": 0}


def test_purchase_rejections():
    holder = _holder()
    assert _tool_purchase(holder, 1)["reason"] == "NOT_FOUND"
    _tool_click(holder, 50)
    _tool_purchase(holder, 1)
    assert _tool_purchase(holder, 1)["reason"] == "INSUFFICIENT_FUNDS"


def test_get_powers_lists_unlocked():
    holder = _holder()
    assert _tool_get_powers(holder) == {"powers": []}
    _tool_click(holder, 50)
    _tool_purchase(holder, 1)
    powers = _tool_get_powers(holder)["powers"]
    assert [p["id"] for p in powers] == [1]
    assert powers[0]["owned"] == 1
    assert powers[0]["next_credit_in"] == pytest.approx(5.0)


def test_wait_produces():
    holder = _holder()
    _tool_click(holder, 50)
    _tool_purchase(holder, 1)
    result = _tool_wait(holder, 6)
    assert result["total_earned"] == 5
    assert result["total_power"] == 5


def test_wait_reports_unlocks():
    holder = _holder()
    holder.session.ledger.add(1000)
    result = _tool_wait(holder, 1)
    assert result["unlocked"] == [1, 2]


def test_wait_limits():
    holder = _holder()
    assert "error" in _tool_wait(holder, 0)
    assert "error" in _tool_wait(holder, 86401)


def test_toggle_auto_click():
    holder = _holder()
    assert _tool_toggle_auto_click(holder) == {"auto_click": True}
    assert _tool_toggle_auto_click(holder) == {"auto_click": False}


def test_save(tmp_path):
    gateway = PersistenceGateway(tmp_path)
    holder = _holder(gateway)
    _tool_click(holder, 7)
    result = _tool_save(holder)
    assert result["success"]
    assert gateway.load_ledger().value == 7


def test_shutdown_saves(tmp_path):
    gateway = PersistenceGateway(tmp_path)
    holder = _holder(gateway)
    _tool_click(holder, 3)
    shutdown(holder)
    assert holder.session.exited
    assert gateway.load_ledger().value == 3
    # idempotent
    shutdown(holder)


def test_create_server():
    server, holder = create_server(GameSession.new())
    assert server.name == "Flight the Power"
    assert holder.session.ledger_value == 0
