from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from noxlobby.game import DEFAULT_GAME_PORT, Game, GameInfo, GameMode, PlayersInfo
from noxlobby.observer import LobbyObserver
from noxlobby.registry import Lister


class FakeClock:
    """Manually advanced UTC clock for deterministic expiry tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeMonotonic:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StaticLister(Lister):
    """Lister returning fixed games, or raising a fixed error."""

    def __init__(self, games=None, error: Exception | None = None):
        self.games = list(games or [])
        self.error = error
        self.calls = 0

    def list_games(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return [g.clone() for g in self.games]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def observer():
    return MagicMock(spec=LobbyObserver)


# ── Record factories ──


@pytest.fixture
def make_game():
    """Factory for a valid Game with sensible defaults. Override any field via kwargs."""
    def _make(**overrides):
        defaults = dict(
            name="test", address="1.1.1.1", port=DEFAULT_GAME_PORT,
            map="testmap", mode=GameMode.ARENA.value, vers="v0.0.0",
            players=PlayersInfo(cur=0, max=32),
        )
        defaults.update(overrides)
        return Game(**defaults)
    return _make


@pytest.fixture
def make_game_info(make_game):
    """Factory for a GameInfo entry as a listing source would return it."""
    def _make(seen_at=None, **overrides):
        if seen_at is None:
            seen_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        return GameInfo(game=make_game(**overrides), seen_at=seen_at)
    return _make


def games_of(infos):
    return [info.game for info in infos]
