"""CLI entry point for the Nox game lobby."""

import argparse
import json
import sys
import threading

from .config import LobbyConfig, config_to_yaml, load_config, merge_cli_args
from .game import DEFAULT_GAME_PORT, Game, GameMode, PlayersInfo
from .keepalive import StaticGameHost, keep_registered
from .logger import get_logger, setup_logging
from .observer import SOURCE_REMOTE, LoggingObserver, LobbyObserver
from .registry import (
    DEFAULT_TIMEOUT,
    Lister,
    Lobby,
    LobbyError,
    LobbyService,
    ObservedLister,
    cache,
    overlay,
)
from .server import LobbyClient, start_lobby_server

log = get_logger("noxlobby.cli")


def _build_config(args) -> LobbyConfig:
    """Build a LobbyConfig from a config file + CLI overrides."""
    if args.config:
        config = load_config(args.config)
    else:
        config = LobbyConfig()
    merge_cli_args(config, args)
    return config


def build_lobby(config: LobbyConfig, observer: LobbyObserver) -> Lobby:
    """Create the in-memory lobby, overlaid with the upstream lobby if configured."""
    lobby: Lobby = LobbyService(timeout=config.timeout, observer=observer)
    if config.upstream:
        upstream: Lister = LobbyClient(config.upstream, user_agent=config.user_agent)
        upstream = ObservedLister(upstream, SOURCE_REMOTE, observer)
        if config.upstream_cache > 0:
            upstream = cache(upstream, config.upstream_cache)
        lobby = overlay(lobby, upstream)
    return lobby


def poll_games(lobby: Lister, interval: float, stop: threading.Event) -> None:
    """List all games every *interval* seconds until *stop* is set.

    Upstream games are only fetched when someone lists them, so a lobby
    that monitors other servers has to keep asking.
    """
    while not stop.wait(interval):
        try:
            games = lobby.list_games()
        except LobbyError as exc:
            log.warning("polling games failed: %s", exc)
            continue
        log.debug("polled %d game(s)", len(games))


def cmd_serve(args) -> None:
    """Run the lobby HTTP server until interrupted."""
    config = _build_config(args)
    setup_logging(config.log_level)

    lobby = build_lobby(config, LoggingObserver())
    if config.upstream:
        log.info("listing games from %s as well", config.upstream)

    server = start_lobby_server(
        lobby, host=config.host, port=config.port, trust_addr=config.trust_addr,
    )
    log.info("serving lobby on %s:%d", config.host, config.port)

    stop = threading.Event()
    try:
        if config.poll:
            poll_games(lobby, config.poll_interval, stop)
        else:
            stop.wait()
    except KeyboardInterrupt:
        print("Shutting down", file=sys.stderr)
    finally:
        server.shutdown()
        server.server_close()


# ---------------------------------------------------------------------------
# client subcommands
# ---------------------------------------------------------------------------

def _format_games(games, fmt: str) -> str:
    """Format a list of GameInfo objects for output."""
    if fmt == "json":
        return json.dumps([g.to_dict() for g in games], indent=2)
    lines = []
    for info in games:
        g = info.game
        lines.append(
            f"{g.address}:{g.port}  {g.name}  {g.map}  {g.mode}"
            f"  {g.players.cur}/{g.players.max}"
        )
    return "\n".join(lines) if lines else "(no games)"


def _client(args) -> LobbyClient:
    return LobbyClient(args.server, user_agent=args.user_agent)


def cmd_list(args) -> None:
    try:
        games = _client(args).list_games()
    except LobbyError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    print(_format_games(games, args.format))


def cmd_address(args) -> None:
    try:
        ip = _client(args).address()
    except LobbyError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    print(ip)


def cmd_announce(args) -> None:
    """Keep a game registered on the lobby until interrupted."""
    setup_logging(args.log_level)
    game = Game(
        name=args.name,
        address=args.address or "",
        port=args.port,
        map=args.map,
        mode=args.mode,
        access=args.access or "",
        vers=args.vers,
        players=PlayersInfo(cur=args.players, max=args.max_players),
    )
    print(f"Announcing '{game.name}' on {args.server}", file=sys.stderr)
    try:
        keep_registered(_client(args), StaticGameHost(game), interval=args.interval)
    except KeyboardInterrupt:
        print("Stopped", file=sys.stderr)
    except LobbyError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


def cmd_config(args) -> None:
    """Print the effective configuration as YAML."""
    print(config_to_yaml(_build_config(args)), end="")


# ---------------------------------------------------------------------------
# argument parsing
# ---------------------------------------------------------------------------

def _add_server_args(parser: argparse.ArgumentParser) -> None:
    """Add config flags shared by serve and config."""
    parser.add_argument("--config", type=str, help="Path to YAML config file")
    parser.add_argument("--host", type=str, help="Address the HTTP API listens on (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port of the HTTP API (default: 8080)")
    parser.add_argument(
        "--timeout", type=float,
        help=f"Seconds before a game registration expires (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "--trust-addr", action="store_true", dest="trust_addr", default=None,
        help="Keep the address sent by game hosts instead of the request's remote IP",
    )
    parser.add_argument(
        "--upstream", type=str,
        help="URL of another lobby whose games are listed as well",
    )
    parser.add_argument(
        "--upstream-cache", type=float, dest="upstream_cache",
        help="Seconds to cache the upstream listing, 0 to disable",
    )
    parser.add_argument(
        "--poll", action="store_true", default=None,
        help="Periodically list all games (monitor other servers)",
    )
    parser.add_argument("--log-level", type=str, dest="log_level", help="Logging level (default: INFO)")


def _add_client_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--server", type=str, default="http://localhost:8080",
        help="Lobby server URL (default: http://localhost:8080)",
    )
    parser.add_argument(
        "--user-agent", type=str, dest="user_agent", default="nox-lobby",
        help="User-Agent sent to the lobby server",
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="nox-lobby",
        description="Nox game lobby server",
    )
    subparsers = parser.add_subparsers(dest="command")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the lobby web server")
    _add_server_args(serve_parser)
    serve_parser.set_defaults(func=cmd_serve)

    # config
    config_parser = subparsers.add_parser("config", help="Print the effective server configuration")
    _add_server_args(config_parser)
    config_parser.set_defaults(func=cmd_config)

    # list
    list_parser = subparsers.add_parser("list", help="List games registered on a lobby")
    _add_client_args(list_parser)
    list_parser.add_argument(
        "--format", choices=["text", "json"], default="text",
        help="Output format (default: text)",
    )
    list_parser.set_defaults(func=cmd_list)

    # address
    address_parser = subparsers.add_parser("address", help="Print this host's IP as seen by the lobby")
    _add_client_args(address_parser)
    address_parser.set_defaults(func=cmd_address)

    # announce
    announce_parser = subparsers.add_parser("announce", help="Keep a game registered on a lobby")
    _add_client_args(announce_parser)
    announce_parser.add_argument("--name", type=str, required=True, help="Game name")
    announce_parser.add_argument("--map", type=str, required=True, help="Map name")
    announce_parser.add_argument(
        "--mode", type=str, default=GameMode.ARENA.value,
        choices=[m.value for m in GameMode], help="Game mode (default: arena)",
    )
    announce_parser.add_argument("--vers", type=str, required=True, help="Game version")
    announce_parser.add_argument(
        "--address", type=str, default=None,
        help="Game address (only kept by lobbies running with --trust-addr)",
    )
    announce_parser.add_argument(
        "--port", type=int, default=DEFAULT_GAME_PORT,
        help=f"Game port (default: {DEFAULT_GAME_PORT})",
    )
    announce_parser.add_argument("--access", type=str, default=None, help="Access level: open, pass, closed")
    announce_parser.add_argument("--players", type=int, default=0, help="Current number of players")
    announce_parser.add_argument(
        "--max-players", type=int, default=32, dest="max_players",
        help="Max number of players (default: 32)",
    )
    announce_parser.add_argument(
        "--interval", type=float, default=DEFAULT_TIMEOUT / 3,
        help=f"Seconds between registrations (default: {DEFAULT_TIMEOUT / 3:g})",
    )
    announce_parser.add_argument("--log-level", type=str, default="INFO", dest="log_level")
    announce_parser.set_defaults(func=cmd_announce)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)
