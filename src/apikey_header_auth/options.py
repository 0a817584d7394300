"""Configuration for the ApiKeyHeader scheme."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from apikey_header_auth.constants import (
    AUTHENTICATION_CLAIM_NAME,
    AUTHENTICATION_HEADER,
    AUTHENTICATION_SCHEME,
)
from apikey_header_auth.errors import ConfigurationError

ENV_PREFIX = "APIKEY_HEADER_"

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"", "0", "false", "no", "off"})


@dataclass(frozen=True)
class ApiKeyHeaderOptions:
    """Immutable settings for one ``ApiKeyHeaderAuthenticator``.

    Attributes:
        header: Request header holding the key (matched case-insensitively).
        api_key: Static key compared byte-for-byte with the header value.
        custom_authentication_handler: Inline verifier ``(key) -> (accepted, name)``
            or ``(key) -> AuthenticationResult``. Takes precedence over ``api_key``.
        use_registered_authentication_handler: Resolve a ``FullTicketVerifier`` or
            ``SimpleVerifier`` from the service registry. Takes precedence over
            the inline verifier.
        custom_authenticator_type: Registry key of a specific verifier service.
            Setting it implies ``use_registered_authentication_handler``.
        scheme: Scheme name stamped on issued tickets and sent in challenges.
        claim_name: Principal name issued when the static key matches.
    """

    header: str = AUTHENTICATION_HEADER
    api_key: str | None = None
    custom_authentication_handler: Callable[[str], Any] | None = None
    use_registered_authentication_handler: bool = False
    custom_authenticator_type: Any = None
    scheme: str = AUTHENTICATION_SCHEME
    claim_name: str = AUTHENTICATION_CLAIM_NAME

    def __post_init__(self) -> None:
        if not self.header or not self.header.strip():
            raise ConfigurationError("header must be a non-empty header name")
        if not self.scheme:
            raise ConfigurationError("scheme must be a non-empty name")
        if not self.claim_name:
            raise ConfigurationError("claim_name must be a non-empty principal name")
        if self.custom_authentication_handler is not None and not callable(self.custom_authentication_handler):
            raise ConfigurationError("custom_authentication_handler must be callable")

    @property
    def uses_registered_service(self) -> bool:
        return self.use_registered_authentication_handler or self.custom_authenticator_type is not None

    def replace(self, **changes: Any) -> ApiKeyHeaderOptions:
        """Return a copy with ``changes`` applied (validation re-runs)."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        prefix: str = ENV_PREFIX,
        **overrides: Any,
    ) -> ApiKeyHeaderOptions:
        """Build options from environment variables.

        Reads ``<prefix>NAME``, ``<prefix>KEY``, ``<prefix>SCHEME`` and
        ``<prefix>USE_REGISTERED``. Unset variables keep their defaults;
        keyword ``overrides`` win over the environment.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {}

        header = env.get(f"{prefix}NAME")
        if header:
            kwargs["header"] = header
        api_key = env.get(f"{prefix}KEY")
        if api_key:
            kwargs["api_key"] = api_key
        scheme = env.get(f"{prefix}SCHEME")
        if scheme:
            kwargs["scheme"] = scheme
        use_registered = env.get(f"{prefix}USE_REGISTERED")
        if use_registered is not None:
            kwargs["use_registered_authentication_handler"] = _parse_bool(
                f"{prefix}USE_REGISTERED", use_registered
            )

        kwargs.update(overrides)
        return cls(**kwargs)


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {value!r}")
