"""Shared fixtures for commitchain tests."""

import pytest

from commitchain.models.ids import default_id_generator


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: int = 1_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1) -> int:
        self.now += ms
        return self.now


@pytest.fixture(autouse=True)
def reset_commit_ids():
    """Every test starts numbering commits from 0."""
    default_id_generator.reset()
    yield
    default_id_generator.reset()


@pytest.fixture
def clock():
    """A deterministic clock for commits."""
    return ManualClock()
