#!/usr/bin/env python3
"""
HTTP transport for the lobby

This module provides:
- LobbyHTTPHandler: HTTP request handler exposing the lobby API
- start_lobby_server: launches a ThreadingHTTPServer in a daemon thread
- LobbyClient: HTTP client implementing Lobby over the same API

Every response is a JSON envelope: ``{"data": ...}`` on success,
``{"error": "..."}`` on failure.
"""

import json
import threading
import urllib.error
import urllib.request
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, List, Optional

from .game import Game, GameInfo
from .logger import get_logger
from .registry import Lobby, LobbyError

log = get_logger(__name__)

PATH_ADDRESS = "/api/v0/address"
PATH_LIST = "/api/v0/games/list"
PATH_REGISTER = "/api/v0/games/register"

# Limit to avoid giant registration requests.
MAX_BODY_SIZE = 1024 * 1024


class RemoteError(LobbyError):
    """Raised by LobbyClient when the lobby server cannot be reached or reports an error."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


# ---------------------------------------------------------------------------
# HTTP handler
# ---------------------------------------------------------------------------

def _make_handler(lobby: Lobby, trust_addr: bool = False):
    """Create a handler class bound to the given lobby instance."""

    class LobbyHTTPHandler(BaseHTTPRequestHandler):

        def log_message(self, format, *args):
            log.info("%s %s", self.address_string(), format % args)

        def _send_json(self, payload: dict, status: int):
            body = (json.dumps(payload) + "\n").encode()
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            if self.command != "HEAD":
                self.wfile.write(body)

        def _json_response(self, data: Any, status: int = HTTPStatus.OK):
            self._send_json({"data": data}, status)

        def _json_error(self, status: int, message: Optional[str] = None):
            if not message:
                message = HTTPStatus(status).phrase
            self._send_json({"error": message}, status)

        def _remote_ip(self) -> Optional[str]:
            if not self.client_address:
                return None
            return self.client_address[0] or None

        def _route(self) -> str:
            return self.path.split("?", 1)[0].rstrip("/")

        def do_GET(self):
            path = self._route()

            if path == PATH_ADDRESS:
                ip = self._remote_ip()
                if ip is None:
                    self._json_error(HTTPStatus.BAD_REQUEST, "cannot detect IP address")
                    return
                self._json_response({"ip": ip})

            elif path == PATH_LIST:
                try:
                    games = lobby.list_games()
                except Exception as exc:
                    log.error("listing games failed: %s", exc)
                    self._json_error(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
                    return
                self._json_response([g.to_dict() for g in games])

            elif path == PATH_REGISTER:
                self._json_error(HTTPStatus.METHOD_NOT_ALLOWED)

            else:
                self._json_error(HTTPStatus.NOT_FOUND)

        do_HEAD = do_GET

        def _content_length(self) -> Optional[int]:
            try:
                return int(self.headers.get("Content-Length", 0))
            except ValueError:
                return None

        def _discard_body(self):
            length = self._content_length()
            if length and length <= MAX_BODY_SIZE:
                self.rfile.read(length)

        def do_POST(self):
            path = self._route()

            if path != PATH_REGISTER:
                self._discard_body()
                if path in (PATH_ADDRESS, PATH_LIST):
                    self._json_error(HTTPStatus.METHOD_NOT_ALLOWED)
                else:
                    self._json_error(HTTPStatus.NOT_FOUND)
                return

            length = self._content_length()
            if length is None:
                self._json_error(HTTPStatus.BAD_REQUEST, "invalid Content-Length")
                return
            if length > MAX_BODY_SIZE:
                self.close_connection = True
                self._json_error(HTTPStatus.REQUEST_ENTITY_TOO_LARGE, "request body too large")
                return

            try:
                game = Game.from_dict(json.loads(self.rfile.read(length) or b"null"))
            except (ValueError, TypeError, AttributeError) as exc:
                self._json_error(HTTPStatus.BAD_REQUEST, f"invalid request: {exc}")
                return

            if not trust_addr:
                ip = self._remote_ip()
                if ip is None:
                    self._json_error(HTTPStatus.BAD_REQUEST, "cannot detect IP address")
                    return
                game.address = ip

            try:
                lobby.register_game(game)
            except LobbyError as exc:
                self._json_error(HTTPStatus.BAD_REQUEST, str(exc))
                return
            except Exception as exc:
                log.error("registering game failed: %s", exc)
                self._json_error(HTTPStatus.BAD_REQUEST, str(exc))
                return
            self._json_response(None)

        def _not_allowed(self):
            self._discard_body()
            self._json_error(HTTPStatus.METHOD_NOT_ALLOWED)

        do_PUT = do_DELETE = do_PATCH = _not_allowed

    return LobbyHTTPHandler


def start_lobby_server(
    lobby: Lobby,
    host: str = "0.0.0.0",
    port: int = 8080,
    trust_addr: bool = False,
) -> ThreadingHTTPServer:
    """Start a ThreadingHTTPServer in a daemon thread and return the server.

    With *trust_addr* the address sent by the game host is kept; otherwise
    it is replaced with the IP the request came from.
    """
    handler = _make_handler(lobby, trust_addr=trust_addr)
    server = ThreadingHTTPServer((host, port), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

class LobbyClient(Lobby):
    """HTTP client for a remote lobby server."""

    def __init__(self, server_url: str, timeout: float = 10,
                 user_agent: Optional[str] = None):
        self._base = server_url.rstrip("/")
        self._timeout = timeout
        self._opener = urllib.request.build_opener(urllib.request.ProxyHandler({}))
        self.user_agent = user_agent

    def _request(self, method: str, path: str, body: Any = None) -> Any:
        data = None
        headers = {}
        if body is not None:
            data = json.dumps(body).encode()
            headers["Content-Type"] = "application/json"
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        req = urllib.request.Request(
            f"{self._base}{path}", data=data, headers=headers, method=method,
        )

        try:
            with self._opener.open(req, timeout=self._timeout) as resp:
                status, raw = resp.status, resp.read()
        except urllib.error.HTTPError as exc:
            status, raw = exc.code, exc.read()
            exc.close()
        except (urllib.error.URLError, OSError) as exc:
            raise RemoteError(f"{method} {path}: {exc}") from exc

        try:
            out = json.loads(raw.decode())
        except ValueError as exc:
            raise RemoteError(f"{method} {path}: invalid response (status {status})", status) from exc
        if not isinstance(out, dict):
            raise RemoteError(f"{method} {path}: unexpected response (status {status})", status)
        if out.get("error"):
            raise RemoteError(out["error"], status)
        if status // 100 != 2:
            raise RemoteError(f"status: {status}", status)
        return out.get("data")

    def address(self) -> str:
        """Return this host's IP address, as seen by the lobby server."""
        data = self._request("GET", PATH_ADDRESS)
        try:
            return str(data["ip"])
        except (TypeError, KeyError) as exc:
            raise RemoteError(f"GET {PATH_ADDRESS}: malformed response") from exc

    def list_games(self) -> List[GameInfo]:
        data = self._request("GET", PATH_LIST) or []
        try:
            return [GameInfo.from_dict(d) for d in data]
        except (ValueError, TypeError, AttributeError) as exc:
            raise RemoteError(f"GET {PATH_LIST}: malformed game list: {exc}") from exc

    def register_game(self, game: Game) -> None:
        self._request("POST", PATH_REGISTER, game.to_dict())
