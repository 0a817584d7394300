"""Exception hierarchy for apikey-header-auth.

Authentication rejections are never raised; they are returned as
``AuthenticationResult`` values. The exceptions below signal programmer
mistakes that must stay visible instead of looking like "access denied".
"""

from __future__ import annotations

from typing import Any


class ApiKeyHeaderError(Exception):
    """Base class for all apikey-header-auth errors."""


class ConfigurationError(ApiKeyHeaderError):
    """The scheme or one of its collaborators is misconfigured."""


class InvalidAuthenticatorTypeError(ConfigurationError, TypeError):
    """An explicitly configured service type cannot be used as a verifier.

    Raised when the service registry has nothing registered under the
    configured key, or when the registered object implements neither
    ``SimpleVerifier`` nor ``FullTicketVerifier``.
    """

    def __init__(self, service_type: Any, service: Any = None) -> None:
        self.service_type = service_type
        self.service = service
        name = getattr(service_type, "__qualname__", repr(service_type))
        if service is None:
            message = f"No service registered for custom authenticator type {name}"
        else:
            message = (
                f"Failed to use {type(service).__qualname__} registered for {name} "
                "as SimpleVerifier or FullTicketVerifier"
            )
        super().__init__(message)


class MissingPrincipalError(ConfigurationError, ValueError):
    """A successful verification produced no usable principal name."""

    def __init__(self, principal_name: str | None = None) -> None:
        self.principal_name = principal_name
        super().__init__(
            f"Verifier accepted the key but returned an empty principal name ({principal_name!r})"
        )
