"""Overlay a lobby with a second, read-only game list."""

from typing import Dict, List, Optional

from ..game import Game, GameInfo
from ..logger import get_logger
from .base import Lister, Lobby, sort_game_infos

log = get_logger(__name__)


class Overlay(Lobby):
    """Merges games from ``primary`` and ``secondary`` into a single listing.

    Registrations go to ``primary`` only. When both sources report the same
    (address, port), the entry from ``secondary`` wins. Errors are hidden
    as long as either source returned games.
    """

    def __init__(self, primary: Lobby, secondary: Lister):
        self._primary = primary
        self._secondary = secondary

    def register_game(self, game: Game) -> None:
        self._primary.register_game(game)

    def list_games(self) -> List[GameInfo]:
        primary, primary_err = _try_list(self._primary)
        secondary, secondary_err = _try_list(self._secondary)

        if not primary and not secondary:
            # secondary error takes priority
            if secondary_err is not None:
                raise secondary_err
            if primary_err is not None:
                raise primary_err
            return []

        for err in (primary_err, secondary_err):
            if err is not None:
                log.warning("partial game listing: %s", err)

        by_addr: Dict[tuple[str, int], GameInfo] = {}
        for g in primary:
            by_addr[g.key] = g
        for g in secondary:
            by_addr[g.key] = g
        return sort_game_infos(list(by_addr.values()))


def _try_list(lister: Lister) -> tuple[List[GameInfo], Optional[Exception]]:
    try:
        return lister.list_games(), None
    except Exception as exc:
        return [], exc


def overlay(primary: Lobby, secondary: Lister) -> Lobby:
    """Overlay ``primary`` with ``secondary``. See Overlay."""
    return Overlay(primary, secondary)
