from __future__ import annotations

from flightthepower.catalog import PowerCatalog
from flightthepower.report import SimulationReport


def format_text_report(
    report: SimulationReport,
    catalog: PowerCatalog | None = None,
) -> str:
    """Format a simulation report for console output."""
    lines: list[str] = []

    def title(power_id: int) -> str:
        power = catalog.find(power_id) if catalog is not None else None
        return power.title if power else f"Power {power_id}"

    lines.append("=" * 30 + " Flight the Power Simulation Report " + "=" * 30)
    lines.append(f"Strategy: {report.strategy_description}")
    lines.append(f"Result: {report.outcome} at {report.total_time:.1f}s")
    lines.append(f"Total power: {report.final_total_power:,}")
    lines.append("")

    if report.unlocks:
        lines.append("UNLOCKS:")
        for u in report.unlocks:
            lines.append(f"  * {title(u.power_id):.<40s} {u.time:.1f}s")
        lines.append("")

    lines.append("PURCHASES:")
    lines.append(f"  Total: {len(report.purchases)}")
    lines.append(f"  Rate: {report.purchases_per_minute:.1f}/min")
    lines.append(f"  Max gap: {report.max_purchase_gap:.1f}s")
    lines.append(f"  Mean gap: {report.mean_purchase_gap:.1f}s")
    lines.append("")

    owned = {pid: n for pid, n in report.final_owned.items() if n > 0}
    if owned:
        lines.append("OWNED:")
        for pid, n in sorted(owned.items()):
            lines.append(f"  {title(pid):.<40s} {n:,}")

    return "\n".join(lines)


def format_status(snapshot: dict) -> str:
    """Render a session snapshot as a short status table."""
    lines = [f"POWER: {snapshot['total_power']:,}"]
    if snapshot.get("auto_click"):
        lines[0] += "  [auto-click]"
    for p in snapshot["powers"]:
        if not p["unlocked"]:
            continue
        lines.append(f"  [{p['id']}] {p['title']:<32s} x{p['owned']:,}")
    return "\n".join(lines)
