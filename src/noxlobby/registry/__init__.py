"""
Game Registry

This package provides:
1. LobbyService: in-memory lobby with expiring registrations
2. ListCache: read-through cache over any Lister
3. Overlay: merges a lobby with a second, read-only game list
4. ObservedLister: reports games from an external source to an observer
"""

from .base import (
    DEFAULT_TIMEOUT,
    GameHost,
    Lister,
    Lobby,
    LobbyError,
    Registerer,
    ValidationError,
    sort_game_infos,
)
from .cache import ListCache, cache
from .observed import ObservedLister
from .overlay import Overlay, overlay
from .service import LobbyService, validate_game

__all__ = [
    'DEFAULT_TIMEOUT',
    'GameHost',
    'Lister',
    'Lobby',
    'LobbyError',
    'Registerer',
    'ValidationError',
    'sort_game_infos',
    'ListCache',
    'cache',
    'ObservedLister',
    'Overlay',
    'overlay',
    'LobbyService',
    'validate_game',
]
