"""apikey-header-auth: pluggable API key header authentication for ASGI apps."""

from __future__ import annotations

from apikey_header_auth.backend import ApiKeyHeaderBackend, ApiKeyUser
from apikey_header_auth.constants import (
    AUTHENTICATION_CLAIM_NAME,
    AUTHENTICATION_HEADER,
    AUTHENTICATION_SCHEME,
    NAME_CLAIM_TYPE,
    REDIRECT_URI_PROPERTY,
    ROLE_CLAIM_TYPE,
)
from apikey_header_auth.errors import (
    ApiKeyHeaderError,
    ConfigurationError,
    InvalidAuthenticatorTypeError,
    MissingPrincipalError,
)
from apikey_header_auth.handler import ApiKeyHeaderAuthenticator
from apikey_header_auth.middleware import AuthMiddleware, api_key_header_middleware, auth_ticket_var, extract_headers
from apikey_header_auth.options import ApiKeyHeaderOptions
from apikey_header_auth.protocol import Authenticator, FullTicketVerifier, ServiceResolver, SimpleVerifier
from apikey_header_auth.registry import ServiceRegistry
from apikey_header_auth.results import (
    AuthenticationResult,
    AuthenticationTicket,
    Claim,
    Outcome,
    Principal,
    build_ticket,
)

__all__ = [
    # Core
    "ApiKeyHeaderAuthenticator",
    "ApiKeyHeaderOptions",
    "build_ticket",
    # Results
    "AuthenticationResult",
    "AuthenticationTicket",
    "Claim",
    "Outcome",
    "Principal",
    # Extension points
    "Authenticator",
    "FullTicketVerifier",
    "SimpleVerifier",
    "ServiceResolver",
    "ServiceRegistry",
    # ASGI / Starlette integration
    "AuthMiddleware",
    "ApiKeyHeaderBackend",
    "ApiKeyUser",
    "api_key_header_middleware",
    "auth_ticket_var",
    "extract_headers",
    # Errors
    "ApiKeyHeaderError",
    "ConfigurationError",
    "InvalidAuthenticatorTypeError",
    "MissingPrincipalError",
    # Constants
    "AUTHENTICATION_SCHEME",
    "AUTHENTICATION_HEADER",
    "AUTHENTICATION_CLAIM_NAME",
    "NAME_CLAIM_TYPE",
    "ROLE_CLAIM_TYPE",
    "REDIRECT_URI_PROPERTY",
]

__version__ = "0.1.0"
