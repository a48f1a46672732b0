from types import SimpleNamespace

import yaml

from noxlobby.config import LobbyConfig, config_to_yaml, load_config, merge_cli_args
from noxlobby.registry import DEFAULT_TIMEOUT


def test_defaults():
    config = LobbyConfig()
    assert config.port == 8080
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.upstream_cache == DEFAULT_TIMEOUT / 2
    assert config.poll_interval == DEFAULT_TIMEOUT / 2
    assert config.upstream is None
    assert config.trust_addr is False


def test_load_config_ignores_unknown_keys(tmp_path):
    path = tmp_path / "lobby.yaml"
    path.write_text(
        "port: 9090\n"
        "timeout: 30\n"
        "upstream: http://lobby.example:8080\n"
        "upstream-cache: 5\n"
        "xwis_login: someone\n"
    )
    config = load_config(path)
    assert config.port == 9090
    assert config.timeout == 30
    assert config.upstream == "http://lobby.example:8080"
    assert config.upstream_cache == 5
    assert not hasattr(config, "xwis_login")


def test_load_empty_config(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(str(path)) == LobbyConfig()


def test_cli_args_take_precedence():
    config = LobbyConfig(port=9090, host="127.0.0.1")
    args = SimpleNamespace(port=7000, host=None, trust_addr=True, config="ignored.yaml")
    merge_cli_args(config, args)
    assert config.port == 7000
    assert config.host == "127.0.0.1"
    assert config.trust_addr is True


def test_config_to_yaml_round_trips(tmp_path):
    config = LobbyConfig(port=9000, upstream="http://other:8080", poll=True)
    text = config_to_yaml(config)

    data = yaml.safe_load(text)
    assert data["port"] == 9000
    assert data["poll"] is True

    path = tmp_path / "out.yaml"
    path.write_text(text)
    assert load_config(path) == config


def test_config_to_yaml_skips_unset_upstream():
    assert "upstream:" not in config_to_yaml(LobbyConfig())
