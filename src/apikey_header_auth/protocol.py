"""Capability protocols for pluggable API key verification.

A service placed in the registry can implement one of two capabilities:

* ``SimpleVerifier`` answers ``(accepted, principal_name)`` and leaves
  ticket construction to the authenticator.
* ``FullTicketVerifier`` returns a complete ``AuthenticationResult``
  (custom roles, properties or an explicit ``fail``) which is passed on
  untouched.

Both are structural ``Protocol`` types, so verifiers do not need to
inherit from anything.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, Union, runtime_checkable

from apikey_header_auth.results import AuthenticationResult

# (accepted, principal_name)
VerifierOutcome = tuple[bool, Union[str, None]]


@runtime_checkable
class SimpleVerifier(Protocol):
    """Verifies a key and names the principal it belongs to."""

    def verify(self, api_key: str) -> VerifierOutcome:
        """Check ``api_key``.

        Returns:
            ``(True, name)`` when the key is accepted, ``(False, _)``
            otherwise. ``name`` must be non-empty on acceptance.
        """
        ...


@runtime_checkable
class FullTicketVerifier(Protocol):
    """Verifies a key and builds the whole authentication result itself."""

    def verify_full_ticket(self, api_key: str) -> AuthenticationResult:
        ...


@runtime_checkable
class ServiceResolver(Protocol):
    """Lookup of registered services by key.

    Any mapping (a plain ``dict`` included) satisfies this protocol.
    """

    def get(self, key: Any, default: Any = None) -> Any:
        ...


@runtime_checkable
class Authenticator(Protocol):
    """Protocol consumed by the ASGI middleware and the Starlette backend."""

    def authenticate(
        self,
        headers: Mapping[str, str],
        services: ServiceResolver | None = None,
    ) -> AuthenticationResult:
        """Authenticate a request from its headers.

        Args:
            headers: Header names mapped to their values.
            services: Per-request service lookup, overriding the one
                given at construction time.
        """
        ...


@dataclass(frozen=True)
class SimpleStrategy:
    verify: Callable[[str], Any]


@dataclass(frozen=True)
class FullTicketStrategy:
    verify: Callable[[str], AuthenticationResult]


VerificationStrategy = Union[SimpleStrategy, FullTicketStrategy]


def as_strategy(service: object) -> VerificationStrategy | None:
    """Classify ``service`` by the capability it implements.

    ``FullTicketVerifier`` wins when an object implements both.
    Returns ``None`` if it implements neither.
    """
    if isinstance(service, FullTicketVerifier):
        return FullTicketStrategy(service.verify_full_ticket)
    if isinstance(service, SimpleVerifier):
        return SimpleStrategy(service.verify)
    return None
