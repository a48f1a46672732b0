"""Discovery lobby for Nox multiplayer games."""

from .game import (
    DEFAULT_GAME_PORT,
    Game,
    GameAccess,
    GameInfo,
    GameMode,
    PlayersInfo,
    QuestInfo,
    Resolution,
)
from .keepalive import keep_registered
from .registry import (
    DEFAULT_TIMEOUT,
    GameHost,
    ListCache,
    Lister,
    Lobby,
    LobbyError,
    LobbyService,
    Overlay,
    Registerer,
    ValidationError,
    cache,
    overlay,
)
from .server import LobbyClient, RemoteError, start_lobby_server

__version__ = '0.1.0'
__all__ = [
    'DEFAULT_GAME_PORT',
    'DEFAULT_TIMEOUT',
    'Game',
    'GameAccess',
    'GameHost',
    'GameInfo',
    'GameMode',
    'ListCache',
    'Lister',
    'Lobby',
    'LobbyClient',
    'LobbyError',
    'LobbyService',
    'Overlay',
    'PlayersInfo',
    'QuestInfo',
    'Registerer',
    'RemoteError',
    'Resolution',
    'ValidationError',
    'cache',
    'keep_registered',
    'overlay',
    'start_lobby_server',
]
