"""Starlette ``AuthenticationBackend`` adapter for the ApiKeyHeader scheme."""

from __future__ import annotations

import logging

from starlette.authentication import AuthCredentials, AuthenticationBackend, AuthenticationError, SimpleUser
from starlette.requests import HTTPConnection

from apikey_header_auth.protocol import Authenticator, ServiceResolver
from apikey_header_auth.results import AuthenticationTicket

logger = logging.getLogger(__name__)


class ApiKeyUser(SimpleUser):
    """Starlette user carrying the ticket it was built from."""

    def __init__(self, ticket: AuthenticationTicket) -> None:
        super().__init__(ticket.name or "")
        self.ticket = ticket

    @property
    def identity(self) -> str:
        """Scheme-qualified principal name, e.g. ``ApiKeyHeader:alice``."""
        return f"{self.ticket.scheme}:{self.username}"


class ApiKeyHeaderBackend(AuthenticationBackend):
    """Lets ``starlette.middleware.authentication.AuthenticationMiddleware``
    use an ``Authenticator``.

    ``no_result`` leaves the connection anonymous, so Starlette's own
    ``requires`` decorator decides what to do. ``fail`` raises
    ``AuthenticationError``, which Starlette turns into its ``on_error``
    response.
    """

    def __init__(self, authenticator: Authenticator, services: ServiceResolver | None = None) -> None:
        self._authenticator = authenticator
        self._services = services

    async def authenticate(self, conn: HTTPConnection) -> tuple[AuthCredentials, ApiKeyUser] | None:
        result = self._authenticator.authenticate(conn.headers, self._services)
        if result.failed:
            logger.debug("Rejecting %s: %s", conn.url.path, result.failure)
            raise AuthenticationError(result.failure or "Invalid API key")
        if result.ticket is None:
            return None
        ticket = result.ticket
        return AuthCredentials(["authenticated", *ticket.roles]), ApiKeyUser(ticket)
