"""A minimal presentation host driving the core at a fixed frame rate.

Replays a script of (time, command) input events, renders the total power
whenever it changes and reacts to unlock signals the way a UI would spawn a
new purchase button.
"""
from __future__ import annotations

import tempfile
from pathlib import Path

from flightthepower.events import (
    Command,
    ManualClick,
    PowerUnlocked,
    RequestExit,
    RequestPurchase,
    SessionExited,
)
from flightthepower.persistence import PersistenceGateway
from flightthepower.session import GameSession

FPS = 60


def build_script() -> list[tuple[float, Command]]:
    """Click 60 times in the first second, buy the first power, then leave."""
    script: list[tuple[float, Command]] = [(i / 60, ManualClick()) for i in range(60)]
    script.append((1.5, RequestPurchase(1)))
    script.append((12.0, RequestExit()))
    return script


def run(data_dir: Path, script: list[tuple[float, Command]]) -> tuple[GameSession, list[str]]:
    session = GameSession.start(PersistenceGateway(data_dir))
    frames: list[str] = []
    pending = sorted(script, key=lambda item: item[0])
    last_rendered = None

    while not session.exited:
        while pending and pending[0][0] <= session.time_elapsed:
            session.submit(pending.pop(0)[1])
        for signal in session.tick(1 / FPS):
            if isinstance(signal, PowerUnlocked):
                frames.append(f"spawn button {signal.power_id}")
            elif isinstance(signal, SessionExited):
                frames.append("exit")
        if session.ledger_value != last_rendered:
            last_rendered = session.ledger_value
            frames.append(f"POWER: {last_rendered}")
    return session, frames


if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        _, frames = run(Path(tmp), build_script())
        print("\n".join(frames))
