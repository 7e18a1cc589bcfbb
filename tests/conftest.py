from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for upload batches, sessions and snapshot stores.
"""

import os
import sys
from typing import List, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from vexplorer.core.services.persistence import SnapshotStore  # noqa: E402
from vexplorer.core.session.state import SessionState  # noqa: E402


class FakeClock:
    """Manually advanced time source for TTL tests."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_entries() -> List[Tuple[str, str]]:
    """
    Return the upload batch used across the suite.

    Structure:
      src/
        a.txt  -> "hi"
        b.txt  -> "bye"
      readme.md -> "x"
    """
    return [
        ("src/a.txt", "hi"),
        ("src/b.txt", "bye"),
        ("readme.md", "x"),
    ]


@pytest.fixture
def session(sample_entries) -> SessionState:
    """A session freshly loaded with the sample upload."""
    state = SessionState()
    state.load_upload(sample_entries)
    return state


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def snapshot_store(tmp_path, clock) -> SnapshotStore:
    """SnapshotStore backed by a temporary database and a fake clock."""
    return SnapshotStore(str(tmp_path / "session.db"), ttl_seconds=3600, clock=clock)
