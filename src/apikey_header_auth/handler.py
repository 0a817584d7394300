"""The ApiKeyHeader authenticator: selects a verification strategy per request."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from apikey_header_auth.errors import ConfigurationError, InvalidAuthenticatorTypeError
from apikey_header_auth.options import ApiKeyHeaderOptions
from apikey_header_auth.protocol import (
    Authenticator,
    FullTicketStrategy,
    FullTicketVerifier,
    ServiceResolver,
    SimpleVerifier,
    VerificationStrategy,
    as_strategy,
)
from apikey_header_auth.results import AuthenticationResult, build_ticket


class ApiKeyHeaderAuthenticator:
    """Authenticates requests by the API key found in a single header.

    Strategies are consulted in a fixed order and the first one that
    applies decides the outcome:

    1. no header: ``no_result``
    2. registered service (``use_registered_authentication_handler`` or
       ``custom_authenticator_type``): delegate to the service resolved
       from ``services``
    3. inline ``custom_authentication_handler``
    4. static ``api_key``: exact, case-sensitive comparison
    5. otherwise ``no_result``

    Instances hold no per-request state and may be shared across
    concurrent requests. Verifiers must be safe to call concurrently.

    Args:
        options: Scheme settings. Defaults to ``ApiKeyHeaderOptions()``.
        services: Service lookup used in registered-service mode when a
            call does not pass its own.
    """

    def __init__(
        self,
        options: ApiKeyHeaderOptions | None = None,
        *,
        services: ServiceResolver | None = None,
    ) -> None:
        self._options = options if options is not None else ApiKeyHeaderOptions()
        self._services = services

    @property
    def options(self) -> ApiKeyHeaderOptions:
        return self._options

    @property
    def scheme(self) -> str:
        return self._options.scheme

    @property
    def header(self) -> str:
        return self._options.header

    def authenticate(
        self,
        headers: Mapping[str, str],
        services: ServiceResolver | None = None,
    ) -> AuthenticationResult:
        """Find the configured header in ``headers`` and authenticate its value."""
        return self.authenticate_key(_lookup_header(headers, self._options.header), services)

    def authenticate_key(
        self,
        api_key: str | None,
        services: ServiceResolver | None = None,
    ) -> AuthenticationResult:
        """Authenticate a raw header value.

        Args:
            api_key: The header value, or ``None`` when the header is absent.
                An empty string is a presented credential.
            services: Per-request service lookup; falls back to the one
                given at construction time.

        Raises:
            InvalidAuthenticatorTypeError: The registered service cannot be
                used as a verifier.
            MissingPrincipalError: A verifier accepted the key without
                naming the principal.
        """
        if api_key is None:
            return AuthenticationResult.no_result()

        options = self._options
        if options.uses_registered_service:
            strategy = self._resolve_strategy(services if services is not None else self._services)
            if strategy is None:
                return AuthenticationResult.no_result()
            return self._run(strategy, api_key)

        if options.custom_authentication_handler is not None:
            return self._accept(options.custom_authentication_handler(api_key))

        if options.api_key and api_key == options.api_key:
            return AuthenticationResult.success(build_ticket(options.claim_name, options.scheme))

        return AuthenticationResult.no_result()

    def _resolve_strategy(self, services: ServiceResolver | None) -> VerificationStrategy | None:
        options = self._options
        explicit_type = options.custom_authenticator_type

        # A registered FullTicketVerifier decides before any simple verifier
        if options.use_registered_authentication_handler:
            strategy = self._capability_strategy(services, FullTicketVerifier)
            if strategy is not None:
                return strategy

        if explicit_type is not None:
            service = services.get(explicit_type) if services is not None else None
            strategy = as_strategy(service) if service is not None else None
            if strategy is None:
                raise InvalidAuthenticatorTypeError(explicit_type, service)
            return strategy

        return self._capability_strategy(services, SimpleVerifier)

    @staticmethod
    def _capability_strategy(services: ServiceResolver | None, capability: type) -> VerificationStrategy | None:
        service = services.get(capability) if services is not None else None
        if service is None:
            return None
        strategy = as_strategy(service)
        if strategy is None:
            raise InvalidAuthenticatorTypeError(capability, service)
        return strategy

    def _run(self, strategy: VerificationStrategy, api_key: str) -> AuthenticationResult:
        if isinstance(strategy, FullTicketStrategy):
            result = strategy.verify(api_key)
            if not isinstance(result, AuthenticationResult):
                raise ConfigurationError(
                    f"FullTicketVerifier returned {type(result).__qualname__}, expected AuthenticationResult"
                )
            return result
        return self._accept(strategy.verify(api_key))

    def _accept(self, outcome: Any) -> AuthenticationResult:
        # Inline handlers may hand back a complete result instead of a pair
        if isinstance(outcome, AuthenticationResult):
            return outcome
        if not (isinstance(outcome, tuple) and len(outcome) == 2 and isinstance(outcome[0], bool)):
            raise ConfigurationError(f"Verifier must return (accepted, principal_name), got {outcome!r}")
        accepted, principal_name = outcome
        if not accepted:
            return AuthenticationResult.no_result()
        return AuthenticationResult.success(build_ticket(principal_name, self._options.scheme))


def _lookup_header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    value = headers.get(lowered)
    if value is not None:
        return value
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


# Verify protocol compliance at import time
assert isinstance(ApiKeyHeaderAuthenticator.__new__(ApiKeyHeaderAuthenticator), Authenticator)
