"""Read-only dashboard HTTP server exposing roadmap rendering plans as JSON.

The ``?path=`` query on the roadmap routes is resolved like the CLI PATH argument
and is not confined to the project: any file readable by the server process can
be parsed and returned. The server binds to 127.0.0.1 by default; keep it on a
loopback address.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import parse_qs, urlparse

from seslog.app.api import api_health, api_roadmap, api_validate
from seslog.config.logging import logger
from seslog.config.settings import get_config, get_config_sources

READ_ONLY_MESSAGE = "Dashboard is read-only. Use CLI commands for write actions."


def _query_value(query: dict[str, list[str]], key: str) -> str | None:
    """Return the first non-empty value of one query parameter."""
    value = (query.get(key) or [""])[0].strip()
    return value or None


class DashboardHandler(BaseHTTPRequestHandler):
    """HTTP handler for read-only roadmap APIs."""

    server_version = "SeslogDashboard/0.1"

    def log_message(self, fmt: str, *args: object) -> None:  # noqa: A003
        """Route request logs through project logger."""
        logger.debug("dashboard | {}", fmt % args)

    def _json(self, payload: dict | list, status: int = HTTPStatus.OK) -> None:
        """Write JSON response with status code."""
        body = json.dumps(payload, ensure_ascii=True, default=str).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _error(self, status: int, message: str) -> None:
        """Write standard JSON error payload."""
        self._json({"error": message}, status=status)

    def _api_roadmap(self, query: dict[str, list[str]]) -> None:
        """Return the rendering plan for the requested or default roadmap."""
        try:
            payload = api_roadmap(_query_value(query, "path"))
        except FileNotFoundError as exc:
            self._error(HTTPStatus.NOT_FOUND, str(exc))
            return
        except ValueError as exc:
            self._error(HTTPStatus.UNPROCESSABLE_ENTITY, str(exc))
            return
        self._json(payload)

    def _api_validate(self, query: dict[str, list[str]]) -> None:
        """Return dependency warnings for the requested or default roadmap."""
        try:
            payload = api_validate(_query_value(query, "path"))
        except FileNotFoundError as exc:
            self._error(HTTPStatus.NOT_FOUND, str(exc))
            return
        except ValueError as exc:
            self._error(HTTPStatus.UNPROCESSABLE_ENTITY, str(exc))
            return
        self._json(payload)

    def _api_config(self) -> None:
        """Return effective config and the layers it came from."""
        self._json(
            {"effective": get_config().public_dict(), "sources": get_config_sources()}
        )

    def _handle_api_get(self, path: str, query: dict[str, list[str]]) -> None:
        """Dispatch GET API routes to the matching handler."""
        query_handlers = {
            "/api/roadmap": self._api_roadmap,
            "/api/roadmap/validate": self._api_validate,
        }
        no_query_handlers: dict[str, Any] = {
            "/api/health": lambda: self._json(api_health()),
            "/api/config": self._api_config,
        }
        if path in query_handlers:
            query_handlers[path](query)
            return
        if path in no_query_handlers:
            no_query_handlers[path]()
            return
        self._error(HTTPStatus.NOT_FOUND, "Not found")

    def do_GET(self) -> None:  # noqa: N802
        """Serve API routes for GET requests."""
        parsed = urlparse(self.path)
        path = parsed.path or "/"
        query = parse_qs(parsed.query or "", keep_blank_values=True)
        if path.startswith("/api/"):
            self._handle_api_get(path, query)
            return
        self._error(HTTPStatus.NOT_FOUND, "Not found")

    def do_POST(self) -> None:  # noqa: N802
        """Reject mutating POST requests in read-only dashboard mode."""
        self._error(HTTPStatus.FORBIDDEN, READ_ONLY_MESSAGE)

    def do_PUT(self) -> None:  # noqa: N802
        """Reject mutating PUT requests in read-only dashboard mode."""
        self._error(HTTPStatus.FORBIDDEN, READ_ONLY_MESSAGE)

    def do_PATCH(self) -> None:  # noqa: N802
        """Reject mutating PATCH requests in read-only dashboard mode."""
        self._error(HTTPStatus.FORBIDDEN, READ_ONLY_MESSAGE)

    def do_DELETE(self) -> None:  # noqa: N802
        """Reject mutating DELETE requests in read-only dashboard mode."""
        self._error(HTTPStatus.FORBIDDEN, READ_ONLY_MESSAGE)


def run_dashboard_server(host: str | None = None, port: int | None = None) -> int:
    """Run read-only dashboard HTTP server."""
    config = get_config()
    bind_host = host or config.server_host or "127.0.0.1"
    bind_port = int(port or config.server_port or 8766)
    httpd = ThreadingHTTPServer((bind_host, bind_port), DashboardHandler)
    logger.info("Seslog dashboard running at http://{}:{}/", bind_host, bind_port)
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down dashboard server")
        httpd.shutdown()
    return 0
