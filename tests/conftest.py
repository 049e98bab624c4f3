import os

import pytest

# Settings require both keys; tests never reach the real services.
os.environ.setdefault("TMDB_API_KEY", "test-tmdb-key")
os.environ.setdefault("OMDB_API_KEY", "test-omdb-key")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
