from __future__ import annotations

from flightthepower.report import SimulationReport


def plot_simulation(
    report: SimulationReport,
    output_path: str | None = None,
) -> None:
    """Plot total power over time and the purchase timeline.

    Requires matplotlib (optional dependency).
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError(
            "matplotlib is required for visualization. "
            "Install with: pip install flightthepower[viz]"
        )

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 9), sharex=True)
    fig.suptitle(f"Flight the Power Simulation: {report.strategy_description}", fontsize=14)

    # 1. Total power over time (log scale), unlocks as vertical markers
    series = report.total_power_series()
    if series:
        times, values = zip(*series)
        ax1.plot(times, [max(v, 1) for v in values], label="total power")
    for u in report.unlocks:
        ax1.axvline(u.time, color="green", linestyle=":", alpha=0.6)
    ax1.set_yscale("log")
    ax1.set_ylabel("Total power")
    ax1.set_title("Total Power (dotted: unlocks)")
    ax1.grid(True, alpha=0.3)

    # 2. Purchase timeline
    if report.purchases:
        power_ids = sorted({p.power_id for p in report.purchases})
        y_map = {pid: i for i, pid in enumerate(power_ids)}
        ax2.scatter(
            [p.time for p in report.purchases],
            [y_map[p.power_id] for p in report.purchases],
            s=10,
            alpha=0.6,
        )
        ax2.set_yticks(range(len(power_ids)))
        ax2.set_yticklabels([str(pid) for pid in power_ids], fontsize=7)
    ax2.set_xlabel("Time (s)")
    ax2.set_ylabel("Power id")
    ax2.set_title("Purchase Timeline")
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        plt.savefig(output_path, dpi=150)
    else:
        plt.show()
