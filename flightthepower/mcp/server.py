"""MCP server wrapping a GameSession for interactive AI playtesting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mcp.server.fastmcp import FastMCP

from flightthepower.events import (
    GameSaved,
    ManualClick,
    PowerUnlocked,
    PurchaseCompleted,
    PurchaseRejected,
    RequestExit,
    RequestPurchase,
    RequestSave,
    Signal,
    ToggleAutoClick,
)
from flightthepower.session import GameSession

# Maximum seconds per wait() call (24 hours)
_MAX_WAIT = 86400
# Maximum clicks per click() call
_MAX_CLICKS = 1000
# Seconds per simulated frame inside wait()
_FRAME = 0.1


@dataclass
class _SessionHolder:
    """Holds the active game session."""

    session: GameSession


def _unlocked_ids(signals: list[Signal]) -> list[int]:
    return [s.power_id for s in signals if isinstance(s, PowerUnlocked)]


# ── Tool logic functions (testable without MCP protocol) ────────────


def _tool_get_state(holder: _SessionHolder) -> dict[str, Any]:
    return holder.session.snapshot()


def _tool_get_powers(holder: _SessionHolder) -> dict[str, Any]:
    powers = []
    for s in holder.session.power_statuses():
        if not s.unlocked:
            continue
        powers.append({
            "id": s.id,
            "title": s.title,
            "cost": s.cost,
            "production_amount": s.production_amount,
            "production_rate": s.production_rate,
            "owned": s.current_owned,
            "max_owned": s.max_owned,
            "affordable": s.affordable,
            "next_credit_in": (
                round(s.next_credit_in, 3) if s.next_credit_in is not None else None
            ),
        })
    return {"powers": powers}


def _tool_click(holder: _SessionHolder, count: int = 1) -> dict[str, Any]:
    if count < 1:
        return {"error": "Count must be at least 1"}
    if count > _MAX_CLICKS:
        return {"error": f"Count cannot exceed {_MAX_CLICKS}"}

    session = holder.session
    before = session.ledger_value
    for _ in range(count):
        session.submit(ManualClick())
    signals = session.tick(0.0)
    result: dict[str, Any] = {
        "clicks": count,
        "total_earned": session.ledger_value - before,
        "total_power": session.ledger_value,
    }
    unlocked = _unlocked_ids(signals)
    if unlocked:
        result["unlocked"] = unlocked
    return result


def _tool_purchase(holder: _SessionHolder, power_id: int) -> dict[str, Any]:
    session = holder.session
    session.submit(RequestPurchase(power_id))
    for signal in session.tick(0.0):
        if isinstance(signal, PurchaseCompleted) and signal.power_id == power_id:
            return {
                "success": True,
                "power_id": power_id,
                "new_owned": signal.new_owned,
                "total_power": signal.ledger_after,
            }
        if isinstance(signal, PurchaseRejected) and signal.power_id == power_id:
            return {
                "success": False,
                "power_id": power_id,
                "reason": signal.error.name,
            }
    return {"error": f"Purchase of power {power_id} produced no result"}


def _tool_wait(holder: _SessionHolder, seconds: float) -> dict[str, Any]:
    if seconds <= 0:
        return {"error": "Seconds must be positive"}
    if seconds > _MAX_WAIT:
        return {"error": f"Cannot wait more than {_MAX_WAIT} seconds (24h) per call"}

    session = holder.session
    before = session.ledger_value
    unlocked: list[int] = []
    remaining = seconds
    while remaining > 0:
        dt = min(_FRAME, remaining)
        unlocked.extend(_unlocked_ids(session.tick(dt)))
        remaining -= dt

    result: dict[str, Any] = {
        "waited": seconds,
        "time_elapsed": round(session.time_elapsed, 2),
        "total_earned": session.ledger_value - before,
        "total_power": session.ledger_value,
    }
    if unlocked:
        result["unlocked"] = unlocked
    return result


def _tool_toggle_auto_click(holder: _SessionHolder) -> dict[str, Any]:
    holder.session.submit(ToggleAutoClick())
    holder.session.tick(0.0)
    return {"auto_click": holder.session.settings.auto_click}


def _tool_save(holder: _SessionHolder) -> dict[str, Any]:
    holder.session.submit(RequestSave())
    for signal in holder.session.tick(0.0):
        if isinstance(signal, GameSaved):
            return {"success": signal.ok, "files": signal.results}
    return {"success": False, "files": {}}


def shutdown(holder: _SessionHolder) -> None:
    """Exit the session, which always saves first."""
    if not holder.session.exited:
        holder.session.submit(RequestExit())
        holder.session.tick(0.0)


# ── Server factory ──────────────────────────────────────────────────


def create_server(session: GameSession) -> tuple[FastMCP, _SessionHolder]:
    """Create an MCP server exposing the session's commands as tools."""
    holder = _SessionHolder(session=session)

    mcp = FastMCP(name="Flight the Power")

    @mcp.tool()
    def get_state() -> dict[str, Any]:
        """Get total power, auto-click setting and every power's owned count and unlock flag."""
        return _tool_get_state(holder)

    @mcp.tool()
    def get_powers() -> dict[str, Any]:
        """Get unlocked powers with cost, production, owned count and affordability."""
        return _tool_get_powers(holder)

    @mcp.tool()
    def click(count: int = 1) -> dict[str, Any]:
        """Click the screen N times (max 1000). Each click adds 1 power."""
        return _tool_click(holder, count)

    @mcp.tool()
    def purchase(power_id: int) -> dict[str, Any]:
        """Buy one unit of a power. Returns success or the rejection reason."""
        return _tool_purchase(holder, power_id)

    @mcp.tool()
    def wait(seconds: float) -> dict[str, Any]:
        """Advance game time by the given seconds (max 86400)."""
        return _tool_wait(holder, seconds)

    @mcp.tool()
    def toggle_auto_click() -> dict[str, Any]:
        """Turn auto-click on or off."""
        return _tool_toggle_auto_click(holder)

    @mcp.tool()
    def save() -> dict[str, Any]:
        """Save the game to disk."""
        return _tool_save(holder)

    return mcp, holder
