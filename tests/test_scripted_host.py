"""Integration test with the scripted example host."""
import sys
import os

# Ensure examples can be imported
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from examples.scripted_host import build_script, run
from flightthepower.persistence import PersistenceGateway


def test_scripted_session(tmp_path):
    session, frames = run(tmp_path, build_script())

    assert session.exited
    assert "spawn button 1" in frames
    assert frames[-1] == "exit"
    assert session.owned(1) == 1

    # 60 clicks, minus the purchase, plus two production periods of power 1
    gateway = PersistenceGateway(tmp_path)
    assert gateway.load_ledger().value == 60 - 50 + 10
    assert gateway.load_unlock_flags().is_unlocked(1)


def test_resume_from_previous_run(tmp_path):
    run(tmp_path, build_script())
    session, frames = run(tmp_path, build_script())
    # already unlocked, so no new button is spawned for power 1
    assert "spawn button 1" not in frames
    assert session.owned(1) == 2
