"""ASGI middleware that applies the ApiKeyHeader scheme to HTTP requests."""

from __future__ import annotations

import json
import logging
from contextvars import ContextVar
from typing import Any

from starlette.middleware import Middleware

from apikey_header_auth.errors import ConfigurationError
from apikey_header_auth.handler import ApiKeyHeaderAuthenticator
from apikey_header_auth.options import ApiKeyHeaderOptions
from apikey_header_auth.protocol import Authenticator, ServiceResolver
from apikey_header_auth.results import AuthenticationTicket

logger = logging.getLogger(__name__)

# Ticket of the request being handled, for code below the middleware
auth_ticket_var: ContextVar[AuthenticationTicket | None] = ContextVar("auth_ticket", default=None)


def extract_headers(scope: dict[str, Any]) -> dict[str, str]:
    """Extract headers from ASGI scope as a lowercase-key dict.

    Repeated headers keep their first value.
    """
    result: dict[str, str] = {}
    for key_bytes, value_bytes in scope.get("headers", []):
        result.setdefault(key_bytes.decode("latin-1").lower(), value_bytes.decode("latin-1"))
    return result


class AuthMiddleware:
    """ASGI middleware that authenticates requests and sets ``auth_ticket_var``.

    On success the ticket is also stored in ``scope["auth_ticket"]``.
    ``no_result`` and ``fail`` outcomes get a 401 with a
    ``WWW-Authenticate`` challenge naming the scheme. Configuration errors
    raised by the authenticator are not turned into 401s.

    Args:
        app: The ASGI application to wrap.
        authenticator: An ``Authenticator`` implementation.
        services: Service lookup handed to the authenticator on every
            request.
        exempt_paths: Exact paths that bypass authentication.
        exempt_prefixes: Path prefixes that bypass authentication.
        require_auth: If True, unauthenticated requests receive 401.
            If False, requests proceed without a ticket (permissive mode).
        challenge: Scheme advertised in ``WWW-Authenticate``. Defaults to
            the authenticator's ``scheme``.
    """

    def __init__(
        self,
        app: Any,
        authenticator: Authenticator,
        *,
        services: ServiceResolver | None = None,
        exempt_paths: set[str] | None = None,
        exempt_prefixes: set[str] | None = None,
        require_auth: bool = True,
        challenge: str | None = None,
    ) -> None:
        self._app = app
        self._authenticator = authenticator
        self._services = services
        self._exempt_paths = exempt_paths if exempt_paths is not None else {"/health", "/metrics"}
        self._exempt_prefixes = exempt_prefixes or set()
        self._require_auth = require_auth
        self._challenge = challenge or getattr(authenticator, "scheme", None) or "ApiKeyHeader"

    def _is_exempt(self, path: str) -> bool:
        """Check if a path is exempt from authentication."""
        if path in self._exempt_paths:
            return True
        return any(path.startswith(prefix) for prefix in self._exempt_prefixes)

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self._app(scope, receive, send)
            return

        path = scope.get("path", "")
        if self._is_exempt(path):
            logger.debug("Skipping authentication for exempt path %s", path)
            await self._app(scope, receive, send)
            return

        headers = extract_headers(scope)
        try:
            result = self._authenticator.authenticate(headers, self._services)
        except ConfigurationError:
            logger.error("%s authentication is misconfigured", self._challenge, exc_info=True)
            raise

        if result.failed:
            logger.debug("Authentication failed for %s: %s", path, result.failure)
        elif result.is_none:
            logger.debug("No %s credential accepted for %s", self._challenge, path)

        ticket = result.ticket
        if ticket is None and self._require_auth:
            await self._send_401(send, self._challenge)
            return

        if ticket is not None:
            scope["auth_ticket"] = ticket
        token = auth_ticket_var.set(ticket)
        try:
            await self._app(scope, receive, send)
        finally:
            auth_ticket_var.reset(token)

    @staticmethod
    async def _send_401(send: Any, challenge: str) -> None:
        """Send a 401 Unauthorized JSON response."""
        body = json.dumps({"error": "Unauthorized", "detail": "Missing or invalid API key"}).encode()
        await send(
            {
                "type": "http.response.start",
                "status": 401,
                "headers": [
                    [b"content-type", b"application/json"],
                    [b"www-authenticate", challenge.encode("latin-1")],
                    [b"content-length", str(len(body)).encode()],
                ],
            }
        )
        await send({"type": "http.response.body", "body": body})


def api_key_header_middleware(
    options: ApiKeyHeaderOptions | None = None,
    *,
    services: ServiceResolver | None = None,
    **middleware_kwargs: Any,
) -> Middleware:
    """Build a Starlette ``Middleware`` entry protecting an app with the scheme.

    Example::

        app = Starlette(
            routes=routes,
            middleware=[api_key_header_middleware(ApiKeyHeaderOptions(api_key="secret"))],
        )

    Args:
        options: Scheme settings. Defaults to ``ApiKeyHeaderOptions()``.
        services: Service registry for registered-service mode.
        **middleware_kwargs: Passed on to ``AuthMiddleware`` (``exempt_paths``,
            ``exempt_prefixes``, ``require_auth``).
    """
    authenticator = ApiKeyHeaderAuthenticator(options, services=services)
    return Middleware(AuthMiddleware, authenticator=authenticator, **middleware_kwargs)
