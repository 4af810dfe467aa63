from __future__ import annotations

import csv
import json
from pathlib import Path

from flightthepower.report import SimulationReport


def export_csv(report: SimulationReport, path: str | Path) -> None:
    """Export simulation data as CSV files.

    Creates three files:
      - {path}_total_power.csv
      - {path}_purchases.csv
      - {path}_unlocks.csv
    """
    base = str(path)

    with open(f"{base}_total_power.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["time", "total_power", "owned_json"])
        for s in report.snapshots:
            writer.writerow([s.time, s.total_power, json.dumps(s.owned)])

    with open(f"{base}_purchases.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["time", "power_id", "cost_paid", "total_power_after"])
        for p in report.purchases:
            writer.writerow([p.time, p.power_id, p.cost_paid, p.total_power_after])

    with open(f"{base}_unlocks.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["time", "power_id"])
        for u in report.unlocks:
            writer.writerow([u.time, u.power_id])


def export_json(report: SimulationReport, path: str | Path) -> None:
    """Export the simulation summary as JSON."""
    data = {
        "strategy": report.strategy_description,
        "outcome": report.outcome,
        "total_time": report.total_time,
        "final_total_power": report.final_total_power,
        "final_owned": {str(k): v for k, v in report.final_owned.items()},
        "unlock_times": {str(k): v for k, v in report.unlock_times.items()},
        "purchase_count": len(report.purchases),
        "purchases_per_minute": report.purchases_per_minute,
        "max_purchase_gap": report.max_purchase_gap,
        "mean_purchase_gap": report.mean_purchase_gap,
        "purchases": [
            {"time": p.time, "power_id": p.power_id, "cost_paid": p.cost_paid}
            for p in report.purchases
        ],
    }
    with open(str(path), "w") as f:
        json.dump(data, f, indent=2)
