from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import TextIO

from flightthepower.errors import ConfigurationError, StorageError
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
from flightthepower.formatting import format_status, format_text_report
from flightthepower.persistence import PersistenceGateway, resolve_data_dir
from flightthepower.session import GameSession
from flightthepower.simulation import Simulation
from flightthepower.strategy import ClickProfile, GreedyCheapest, SaveForBest, Strategy

# Seconds per simulation frame when replaying elapsed wall time
FRAME = 0.05

PLAY_HELP = """commands:
  click [n]     click n times (default 1)
  buy <id>      buy one unit of a power
  wait <secs>   let time pass
  auto          toggle auto-click
  status        show total power and owned powers
  save          save the game
  quit          save and exit"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flightthepower",
        description="Flight the Power: idle game core",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Save directory (default: platform user data directory)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status", help="Show the saved game")

    play = sub.add_parser("play", help="Play in the terminal")
    play.add_argument(
        "--no-realtime",
        action="store_true",
        help="Only advance time with 'wait', not while typing",
    )

    sim = sub.add_parser("simulate", help="Run a headless balance simulation")
    sim.add_argument(
        "--strategy",
        default="greedy_cheapest",
        choices=["greedy_cheapest", "save_for_best"],
        help="Strategy to use (default: greedy_cheapest)",
    )
    sim.add_argument("--cps", type=float, default=0.0, help="Clicks per second")
    sim.add_argument("--duration", type=float, default=3600, help="Simulated seconds")
    sim.add_argument(
        "--tick-resolution", type=float, default=1.0, help="Seconds per tick"
    )
    sim.add_argument(
        "--stop-on-unlock", type=int, default=None, help="Stop when this power unlocks"
    )
    sim.add_argument(
        "--from-save",
        action="store_true",
        help="Start from the saved game instead of a new one (nothing is written)",
    )
    sim.add_argument("--export-csv", default=None, help="CSV export path prefix")
    sim.add_argument("--export-json", default=None, help="JSON export path")
    sim.add_argument("--plot", default=None, help="Plot output path (PNG)")

    reset = sub.add_parser("reset", help="Delete the saved game")
    reset.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    return parser


def build_strategy(name: str, cps: float) -> Strategy:
    click_profile = ClickProfile(clicks_per_second=cps) if cps > 0 else None
    if name == "save_for_best":
        return SaveForBest(click_profile=click_profile)
    return GreedyCheapest(click_profile=click_profile)


def open_gateway(data_dir: str | None) -> PersistenceGateway:
    if data_dir:
        return PersistenceGateway(Path(data_dir))
    return PersistenceGateway(resolve_data_dir())


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        gateway = open_gateway(args.data_dir)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    if args.command == "status":
        session = GameSession.start(gateway)
        print(f"Save directory: {gateway.save_dir}")
        print(format_status(session.snapshot()))

    elif args.command == "play":
        session = GameSession.start(gateway)
        play(session, sys.stdin, sys.stdout, realtime=not args.no_realtime)

    elif args.command == "simulate":
        _run_simulation(args, gateway)

    elif args.command == "reset":
        if not args.yes:
            answer = input(f"Delete saved game in {gateway.save_dir}? [y/N] ")
            if answer.strip().lower() not in ("y", "yes"):
                print("Aborted")
                return
        try:
            removed = gateway.delete_all()
        except StorageError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Removed {len(removed)} file(s)")


def play(
    session: GameSession,
    stdin: TextIO,
    stdout: TextIO,
    realtime: bool = True,
    clock=time.monotonic,
) -> None:
    """Line-oriented terminal host: maps typed commands to session commands."""
    print(PLAY_HELP, file=stdout)
    print(format_status(session.snapshot()), file=stdout)
    last = clock()

    while not session.exited:
        print("> ", end="", file=stdout, flush=True)
        try:
            line = stdin.readline()
        except KeyboardInterrupt:
            line = ""
        if realtime:
            now = clock()
            _report(_advance(session, now - last), stdout)
            last = now
        if not line:
            line = "quit"

        parts = line.split()
        if not parts:
            continue
        cmd, rest = parts[0].lower(), parts[1:]

        if cmd == "click":
            count = _parse_int(rest, default=1)
            if count is None or count < 1:
                print("usage: click [n]", file=stdout)
                continue
            for _ in range(count):
                session.submit(ManualClick())
        elif cmd == "buy":
            power_id = _parse_int(rest)
            if power_id is None:
                print("usage: buy <id>", file=stdout)
                continue
            session.submit(RequestPurchase(power_id))
        elif cmd == "wait":
            try:
                seconds = float(rest[0])
            except (IndexError, ValueError):
                print("usage: wait <secs>", file=stdout)
                continue
            if seconds < 0:
                print("usage: wait <secs>", file=stdout)
                continue
            _report(_advance(session, seconds), stdout)
        elif cmd == "auto":
            session.submit(ToggleAutoClick())
        elif cmd == "save":
            session.submit(RequestSave())
        elif cmd in ("quit", "exit"):
            session.submit(RequestExit())
        elif cmd == "status":
            print(format_status(session.snapshot()), file=stdout)
            continue
        else:
            print(PLAY_HELP, file=stdout)
            continue

        _report(session.tick(0.0), stdout)
        if not session.exited:
            print(f"POWER: {session.ledger_value:,}", file=stdout)


def _advance(session: GameSession, seconds: float) -> list[Signal]:
    signals: list[Signal] = []
    remaining = seconds
    while remaining > 0 and not session.exited:
        dt = min(FRAME, remaining)
        signals.extend(session.tick(dt))
        remaining -= dt
    return signals


def _report(signals: list[Signal], stdout: TextIO) -> None:
    for signal in signals:
        if isinstance(signal, PowerUnlocked):
            print(f"Unlocked power {signal.power_id}!", file=stdout)
        elif isinstance(signal, PurchaseCompleted):
            print(f"Bought power {signal.power_id} (own {signal.new_owned:,})", file=stdout)
        elif isinstance(signal, PurchaseRejected):
            reason = signal.error.name.replace("_", " ").lower()
            print(f"Cannot buy power {signal.power_id}: {reason}", file=stdout)
        elif isinstance(signal, GameSaved):
            print("Saved" if signal.ok else "Save failed (see log)", file=stdout)


def _parse_int(rest: list[str], default: int | None = None) -> int | None:
    if not rest:
        return default
    try:
        return int(rest[0])
    except ValueError:
        return None


def _run_simulation(args, gateway: PersistenceGateway) -> None:
    if args.from_save:
        session = GameSession.start(gateway)
        # Never write a simulated game over the real save
        session.gateway = None
    else:
        session = GameSession.new()

    strategy = build_strategy(args.strategy, args.cps)
    sim = Simulation(
        strategy=strategy,
        duration=args.duration,
        tick_resolution=args.tick_resolution,
        session=session,
        stop_on_unlock=args.stop_on_unlock,
    )
    report = sim.run()
    print(format_text_report(report, session.catalog))

    if args.export_csv:
        from flightthepower.export import export_csv
        export_csv(report, args.export_csv)
        print(f"\nCSV exported to {args.export_csv}_*.csv")

    if args.export_json:
        from flightthepower.export import export_json
        export_json(report, args.export_json)
        print(f"\nJSON exported to {args.export_json}")

    if args.plot:
        from flightthepower.visualization import plot_simulation
        plot_simulation(report, args.plot)
        print(f"\nPlot saved to {args.plot}")
