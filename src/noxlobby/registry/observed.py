"""Report games listed by an external source to a LobbyObserver."""

import threading
from typing import Dict, List

from ..game import Game, GameInfo
from ..observer import LobbyObserver
from .base import Lister


class ObservedLister(Lister):
    """Wraps a Lister and reports every game it lists under ``source``.

    Games that disappear from the listing get a final player sample of 0.
    """

    def __init__(self, lister: Lister, source: str, observer: LobbyObserver):
        self._lister = lister
        self._source = source
        self._observer = observer
        self._lock = threading.Lock()
        self._prev: Dict[tuple[str, int], Game] = {}

    def list_games(self) -> List[GameInfo]:
        games = self._lister.list_games()
        with self._lock:
            seen = {}
            for info in games:
                seen[info.key] = info.game
                self._observer.game_seen(self._source, info.game)
                self._observer.players_sampled(self._source, info.game, info.game.players.cur)
            for key, game in self._prev.items():
                if key not in seen:
                    self._observer.players_sampled(self._source, game, 0)
            self._prev = seen
        return games
