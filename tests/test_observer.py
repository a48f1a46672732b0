import logging
from unittest.mock import MagicMock

from noxlobby.game import PlayersInfo
from noxlobby.observer import (
    SOURCE_REMOTE,
    LobbyObserver,
    LoggingObserver,
    NullObserver,
    game_labels,
)
from noxlobby.registry import ObservedLister

from conftest import StaticLister


def test_game_labels(make_game):
    labels = game_labels("opennox", make_game())
    assert labels == {
        "src": "opennox", "addr": "1.1.1.1", "port": "18590", "name": "test",
        "vers": "v0.0.0", "mode": "arena", "map": "testmap",
    }


def test_null_observer_accepts_events(make_game):
    obs = NullObserver()
    obs.game_seen("opennox", make_game())
    obs.game_expired("opennox", make_game())
    obs.players_sampled("opennox", make_game(), 1)


def test_logging_observer_logs_at_debug(make_game, caplog):
    obs = LoggingObserver("lobby-test-events")
    with caplog.at_level(logging.DEBUG, logger="lobby-test-events"):
        obs.game_seen("opennox", make_game())
        obs.game_expired("opennox", make_game())
    assert "game seen" in caplog.text
    assert "game expired" in caplog.text


def test_observed_lister_reports_games(make_game_info):
    observer = MagicMock(spec=LobbyObserver)
    a = make_game_info(name="a", address="1.1.1.1")
    b = make_game_info(name="b", address="2.2.2.2", players=PlayersInfo(cur=4, max=8))
    source = StaticLister([a])
    lister = ObservedLister(source, SOURCE_REMOTE, observer)

    assert lister.list_games() == [a]
    observer.game_seen.assert_called_once_with(SOURCE_REMOTE, a.game)
    observer.players_sampled.assert_called_once_with(SOURCE_REMOTE, a.game, 0)

    observer.reset_mock()
    source.games = [b]
    lister.list_games()
    observer.game_seen.assert_called_once_with(SOURCE_REMOTE, b.game)
    observer.players_sampled.assert_any_call(SOURCE_REMOTE, b.game, 4)
    observer.players_sampled.assert_any_call(SOURCE_REMOTE, a.game, 0)
