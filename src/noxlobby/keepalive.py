"""Keep a game registered on a lobby so that it doesn't expire."""

import threading
from typing import Optional

from .game import Game
from .logger import get_logger
from .registry import DEFAULT_TIMEOUT, GameHost, Registerer

log = get_logger(__name__)

# Consecutive registration failures tolerated before giving up.
MAX_FAILURES = 3


class StaticGameHost(GameHost):
    """GameHost that always describes the same game."""

    def __init__(self, game: Game):
        self._game = game

    def game_info(self) -> Game:
        return self._game.clone()


def keep_registered(
    registerer: Registerer,
    host: GameHost,
    interval: Optional[float] = None,
    stop: Optional[threading.Event] = None,
) -> None:
    """Register the game described by *host* every *interval* seconds.

    *interval* defaults to a third of DEFAULT_TIMEOUT. Each cycle fetches
    fresh info from ``host.game_info()`` and registers it.

    Returns when *stop* is set. Raises the error from ``host.game_info()``
    as soon as it fails, or the registration error once more than
    MAX_FAILURES registrations in a row have failed.
    """
    if interval is None:
        interval = DEFAULT_TIMEOUT / 3
    if stop is None:
        stop = threading.Event()

    failures = 0
    while True:
        game = host.game_info()
        try:
            registerer.register_game(game)
        except Exception as exc:
            failures += 1
            log.warning("registration failed (%d/%d): %s", failures, MAX_FAILURES, exc)
            if failures > MAX_FAILURES:
                raise
        else:
            if failures:
                log.info("registration recovered after %d failure(s)", failures)
            failures = 0

        if stop.wait(interval):
            return
