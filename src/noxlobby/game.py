"""Game records exchanged between game hosts, the lobby and its clients."""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


# Default UDP port for Nox games.
DEFAULT_GAME_PORT = 18590


class GameMode(str, Enum):
    """Nox game mode"""
    KOTR = "kotr"
    CTF = "ctf"
    FLAG_BALL = "flagball"
    CHAT = "chat"
    ARENA = "arena"
    ELIMINATION = "elimination"
    QUEST = "quest"
    COOP = "coop"
    CUSTOM = "custom"


class GameAccess(str, Enum):
    """Access level of the game (open, password-protected, etc)"""
    OPEN = "open"
    PASSWORD = "pass"
    CLOSED = "closed"


@dataclass
class Resolution:
    """Max resolution used for the game. HD-aware servers set high_res."""
    high_res: bool = False
    width: int = 0
    height: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.high_res:
            data["high_res"] = True
        if self.width:
            data["width"] = self.width
        if self.height:
            data["height"] = self.height
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Resolution':
        data = data or {}
        high_res = data.get("high_res")
        if high_res is None:
            high_res = False
        if not isinstance(high_res, bool):
            raise ValueError("res.high_res must be a boolean")
        return cls(
            high_res=high_res,
            width=_int_field(data, "width"),
            height=_int_field(data, "height"),
        )


@dataclass
class PlayersInfo:
    cur: int = 0
    max: int = 0


@dataclass
class QuestInfo:
    """Additional information for the quest game mode."""
    stage: int = 0


@dataclass
class Game:
    """Information about a game, as provided by the server hosting it.

    See GameInfo for the entry returned by the lobby.
    """
    name: str = ""
    address: str = ""
    port: int = 0
    map: str = ""
    mode: str = ""
    access: str = ""
    vers: str = ""
    res: Resolution = field(default_factory=Resolution)
    players: PlayersInfo = field(default_factory=PlayersInfo)
    quest: Optional[QuestInfo] = None

    @property
    def key(self) -> tuple[str, int]:
        """Session key: games sharing an address and port are the same game."""
        return (self.address, self.port)

    def clone(self) -> 'Game':
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serialisable dictionary, omitting empty optional fields."""
        data: Dict[str, Any] = {"name": self.name}
        if self.address:
            data["addr"] = self.address
        if self.port:
            data["port"] = self.port
        data["map"] = self.map
        data["mode"] = _str_value(self.mode)
        if self.access:
            data["access"] = _str_value(self.access)
        if self.vers:
            data["vers"] = self.vers
        res = self.res.to_dict()
        if res:
            data["res"] = res
        data["players"] = {"cur": self.players.cur, "max": self.players.max}
        if self.quest is not None:
            data["quest"] = {"stage": self.quest.stage}
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Game':
        """Create from dictionary. Absent fields take their zero values."""
        if not isinstance(data, dict):
            raise ValueError("game must be a JSON object")
        players = data.get("players") or {}
        quest = data.get("quest")
        return cls(
            name=_str_field(data, "name"),
            address=_str_field(data, "addr"),
            port=_int_field(data, "port"),
            map=_str_field(data, "map"),
            mode=_str_field(data, "mode"),
            access=_str_field(data, "access"),
            vers=_str_field(data, "vers"),
            res=Resolution.from_dict(data.get("res")),
            players=PlayersInfo(
                cur=_int_field(players, "cur"),
                max=_int_field(players, "max"),
            ),
            quest=QuestInfo(stage=_int_field(quest, "stage")) if quest is not None else None,
        )


@dataclass
class GameInfo:
    """A game entry as returned by the lobby: the game plus the time it was last seen."""
    game: Game
    seen_at: Optional[datetime] = None

    @property
    def key(self) -> tuple[str, int]:
        return self.game.key

    def clone(self) -> 'GameInfo':
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        data = self.game.to_dict()
        if self.seen_at is not None:
            data["seen_at"] = self.seen_at.astimezone(timezone.utc).isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameInfo':
        seen_at = data.get("seen_at")
        return cls(
            game=Game.from_dict(data),
            seen_at=datetime.fromisoformat(seen_at) if seen_at else None,
        )


def _str_value(v) -> str:
    return v.value if isinstance(v, Enum) else str(v)


def _str_field(data: Dict[str, Any], key: str) -> str:
    # JSON null decodes to the zero value, like an absent field.
    value = data.get(key)
    return "" if value is None else str(value)


def _int_field(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    return 0 if value is None else int(value)
