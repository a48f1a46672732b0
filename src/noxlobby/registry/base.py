"""Capabilities shared by every lobby implementation."""

from abc import ABC, abstractmethod
from typing import List

from ..game import Game, GameInfo


# Default expiration time for game registrations, in seconds.
DEFAULT_TIMEOUT = 60.0


class LobbyError(Exception):
    """Base class for errors raised by lobby implementations."""


class ValidationError(LobbyError, ValueError):
    """Raised when a game registration is malformed. Nothing is stored."""


class Lister(ABC):
    """Anything that can list games registered on a lobby."""

    @abstractmethod
    def list_games(self) -> List[GameInfo]:
        """Return a list of games sorted by (address, port)."""


class Registerer(ABC):
    """Anything that accepts game registrations."""

    @abstractmethod
    def register_game(self, game: Game) -> None:
        """Register a new game or update the registration of an existing one.

        Hosts must call this periodically so the registration does not
        expire; an interval shorter than DEFAULT_TIMEOUT is advised.
        """


class Lobby(Registerer, Lister):
    """A lobby both lists and registers games."""


class GameHost(ABC):
    """A game server able to describe the game it is currently hosting."""

    @abstractmethod
    def game_info(self) -> Game:
        """Return current information about the active game."""


def sort_game_infos(games: List[GameInfo]) -> List[GameInfo]:
    """Sort games in place by (address, port) and return the list."""
    games.sort(key=lambda g: (g.game.address, g.game.port))
    return games
