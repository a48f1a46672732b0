"""Observability sink for lobby events.

The registry reports what it sees to a LobbyObserver instead of updating
global counters. Production wiring may forward these events to any
metrics backend; LoggingObserver writes them to the log.
"""

from .game import Game
from .logger import get_logger


SOURCE_OPENNOX = "opennox"
SOURCE_REMOTE = "remote"


def game_labels(source: str, game: Game) -> dict[str, str]:
    """Labels identifying a game in metrics and log lines."""
    return {
        "src": source,
        "addr": game.address,
        "port": str(game.port),
        "name": game.name,
        "vers": game.vers,
        "mode": str(getattr(game.mode, "value", game.mode)),
        "map": game.map,
    }


class LobbyObserver:
    """Receives events from lobby implementations. All methods are no-ops."""

    def game_seen(self, source: str, game: Game) -> None:
        pass

    def game_expired(self, source: str, game: Game) -> None:
        pass

    def players_sampled(self, source: str, game: Game, count: int) -> None:
        pass


class NullObserver(LobbyObserver):
    """Observer that discards every event."""


class LoggingObserver(LobbyObserver):
    """Observer that logs every event at debug level."""

    def __init__(self, name: str = "noxlobby.events"):
        self._log = get_logger(name)

    def game_seen(self, source: str, game: Game) -> None:
        self._log.debug("game seen: %s", game_labels(source, game))

    def game_expired(self, source: str, game: Game) -> None:
        self._log.debug("game expired: %s", game_labels(source, game))

    def players_sampled(self, source: str, game: Game, count: int) -> None:
        self._log.debug("players=%d: %s %s:%d", count, source, game.address, game.port)
