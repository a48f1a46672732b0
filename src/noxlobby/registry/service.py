"""
In-memory Lobby

LobbyService keeps the authoritative set of registered games. Entries
expire ``timeout`` seconds after their last registration; expired
entries are hidden from listings immediately and deleted by an
amortized sweep:

- a listing that notices an expired entry requests a sweep, which it
  runs itself once it has finished reading;
- a registration sweeps when a sweep was requested, or when the last
  sweep is older than the timeout.
"""

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from ..game import DEFAULT_GAME_PORT, Game, GameInfo
from ..logger import get_logger
from ..observer import SOURCE_OPENNOX, LobbyObserver, NullObserver
from .base import DEFAULT_TIMEOUT, Lobby, ValidationError, sort_game_infos

log = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_game(game: Game) -> None:
    """Raise ValidationError if the game cannot be registered."""
    if game.players.cur < 0:
        raise ValidationError("players number should be positive")
    if game.players.max <= 0:
        raise ValidationError("max players number should be set")
    if not game.address:
        raise ValidationError("address must be set")
    if not game.vers:
        raise ValidationError("version should be set")
    if not game.map:
        raise ValidationError("map should be set")
    if not game.mode:
        raise ValidationError("mode should be set")
    if not game.name or game.name != game.name.strip():
        raise ValidationError("invalid server name")


class LobbyService(Lobby):
    """Thread-safe, dict-backed lobby with expiring registrations."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT,
                 observer: Optional[LobbyObserver] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self._lock = threading.Lock()
        self._by_addr: Dict[tuple[str, int], GameInfo] = {}
        self._timeout = timeout
        self._gc_requested = False
        self._last_gc: Optional[datetime] = None
        self._observer = observer or NullObserver()
        self._clock = clock or _utcnow

    @property
    def timeout(self) -> float:
        with self._lock:
            return self._timeout

    def set_timeout(self, timeout: float) -> None:
        """Set the expiration time (seconds) for all registrations, old and new."""
        with self._lock:
            self._timeout = timeout

    def register_game(self, game: Game) -> None:
        validate_game(game)
        game = game.clone()
        if game.port <= 0:
            game.port = DEFAULT_GAME_PORT
        game.map = game.map.lower()

        self._observer.game_seen(SOURCE_OPENNOX, game)
        self._observer.players_sampled(SOURCE_OPENNOX, game, game.players.cur)

        info = GameInfo(game=game)
        with self._lock:
            info.seen_at = self._clock()
            self._by_addr[game.key] = info
            expired = self._maybe_gc(info.seen_at)
        self._report_expired(expired)

    def list_games(self) -> List[GameInfo]:
        games, gc = self._list_games()
        if gc:
            self._do_gc()
        return sort_game_infos(games)

    def _list_games(self) -> tuple[List[GameInfo], bool]:
        now = self._clock()
        out: List[GameInfo] = []
        gc = False
        with self._lock:
            for info in self._by_addr.values():
                if self._is_valid(info, now):
                    out.append(info.clone())
                elif not self._gc_requested:
                    # only the reader that raised the flag runs the sweep
                    self._gc_requested = True
                    gc = True
        return out, gc

    def _do_gc(self) -> None:
        with self._lock:
            expired = self._maybe_gc(self._clock())
        self._report_expired(expired)

    def _maybe_gc(self, now: datetime) -> List[Game]:
        # Caller must hold self._lock.
        requested, self._gc_requested = self._gc_requested, False
        if (not requested and self._last_gc is not None
                and self._last_gc + timedelta(seconds=self._timeout) > now):
            return []
        self._last_gc = now
        expired = []
        for key, info in list(self._by_addr.items()):
            if not self._is_valid(info, now):
                del self._by_addr[key]
                expired.append(info.game)
        return expired

    def _is_valid(self, info: GameInfo, now: datetime) -> bool:
        return info.seen_at + timedelta(seconds=self._timeout) > now

    def _report_expired(self, expired: List[Game]) -> None:
        for game in expired:
            log.debug("registration expired: %s:%d %r", game.address, game.port, game.name)
            self._observer.game_expired(SOURCE_OPENNOX, game)
            self._observer.players_sampled(SOURCE_OPENNOX, game, 0)
