"""Read-through cache over any Lister."""

import threading
import time
from typing import Callable, List, Optional

from ..game import GameInfo
from .base import DEFAULT_TIMEOUT, Lister


class ListCache(Lister):
    """Serves a memoized listing of ``lister`` for ``expire`` seconds.

    An expire of 0 (or None) selects half of DEFAULT_TIMEOUT. Errors from
    the wrapped lister propagate and are never cached; callers always get
    their own copies of the cached games.
    """

    def __init__(self, lister: Lister, expire: Optional[float] = None,
                 clock: Callable[[], float] = time.monotonic):
        if not expire:
            expire = DEFAULT_TIMEOUT / 2
        self._lister = lister
        self._expire = expire
        self._clock = clock

        self._lock = threading.Lock()
        self._refresh_lock = threading.Lock()
        self._last: Optional[float] = None
        self._list: List[GameInfo] = []

    @property
    def expire(self) -> float:
        return self._expire

    def _is_fresh(self, now: float) -> bool:
        return self._last is not None and self._last + self._expire > now

    def _refresh(self) -> List[GameInfo]:
        # Concurrent callers queue here; all but the first find the new snapshot.
        with self._refresh_lock:
            now = self._clock()
            with self._lock:
                if self._is_fresh(now):
                    return self._list
            games = self._lister.list_games()
            with self._lock:
                self._list, self._last = games, now
            return games

    def list_games(self) -> List[GameInfo]:
        with self._lock:
            fresh = self._is_fresh(self._clock())
            games = self._list
        if not fresh:
            games = self._refresh()
        return [g.clone() for g in games]


def cache(lister: Lister, expire: Optional[float] = None) -> Lister:
    """Wrap ``lister`` so it is queried at most once per ``expire`` seconds."""
    return ListCache(lister, expire)
