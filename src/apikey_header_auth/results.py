"""Authentication outcomes: identities, tickets and the tri-state result."""

from __future__ import annotations

import enum
import types
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from apikey_header_auth.constants import (
    AUTHENTICATION_SCHEME,
    NAME_CLAIM_TYPE,
    REDIRECT_URI_PROPERTY,
    ROLE_CLAIM_TYPE,
)
from apikey_header_auth.errors import MissingPrincipalError


@dataclass(frozen=True)
class Claim:
    """A single ``type``/``value`` statement about a principal."""

    type: str
    value: str


@dataclass(frozen=True)
class Principal:
    """An identity made of claims, authenticated under ``authentication_type``.

    Attributes:
        claims: Claims in the order they were issued.
        authentication_type: Scheme that authenticated the identity, or
            ``None`` for an anonymous identity.
    """

    claims: tuple[Claim, ...] = ()
    authentication_type: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.authentication_type)

    @property
    def name(self) -> str | None:
        """Value of the first name claim."""
        return self.find_first(NAME_CLAIM_TYPE)

    @property
    def roles(self) -> tuple[str, ...]:
        return tuple(c.value for c in self.claims if c.type == ROLE_CLAIM_TYPE)

    def find_first(self, claim_type: str) -> str | None:
        for claim in self.claims:
            if claim.type == claim_type:
                return claim.value
        return None

    def has_claim(self, claim_type: str, value: str) -> bool:
        return any(c.type == claim_type and c.value == value for c in self.claims)

    def is_in_role(self, role: str) -> bool:
        return self.has_claim(ROLE_CLAIM_TYPE, role)


@dataclass(frozen=True)
class AuthenticationTicket:
    """An authenticated principal together with the scheme that produced it.

    Tickets are created per request and never cached. ``properties`` holds
    arbitrary string values such as a post-login redirect target; it is
    stored read-only and left out of the hash.
    """

    principal: Principal
    scheme: str
    properties: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", types.MappingProxyType(dict(self.properties)))

    @property
    def name(self) -> str | None:
        return self.principal.name

    @property
    def roles(self) -> tuple[str, ...]:
        return self.principal.roles

    @property
    def redirect_uri(self) -> str | None:
        return self.properties.get(REDIRECT_URI_PROPERTY)


class Outcome(enum.Enum):
    SUCCESS = "success"
    FAIL = "fail"
    NO_RESULT = "no_result"


@dataclass(frozen=True)
class AuthenticationResult:
    """Tri-state outcome of one authentication attempt.

    ``NO_RESULT`` means the scheme does not apply and the host may try
    another one. ``FAIL`` is an explicit rejection carrying a reason.
    Use the ``success``/``fail``/``no_result`` constructors rather than
    instantiating directly.
    """

    outcome: Outcome
    ticket: AuthenticationTicket | None = None
    failure: str | None = None

    def __post_init__(self) -> None:
        if self.outcome is Outcome.SUCCESS and self.ticket is None:
            raise ValueError("A successful result requires a ticket")
        if self.outcome is not Outcome.SUCCESS and self.ticket is not None:
            raise ValueError(f"A {self.outcome.value} result cannot carry a ticket")

    @classmethod
    def success(cls, ticket: AuthenticationTicket) -> AuthenticationResult:
        return cls(Outcome.SUCCESS, ticket=ticket)

    @classmethod
    def fail(cls, reason: str) -> AuthenticationResult:
        return cls(Outcome.FAIL, failure=reason)

    @classmethod
    def no_result(cls) -> AuthenticationResult:
        return _NO_RESULT

    @property
    def succeeded(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def failed(self) -> bool:
        return self.outcome is Outcome.FAIL

    @property
    def is_none(self) -> bool:
        return self.outcome is Outcome.NO_RESULT

    @property
    def principal(self) -> Principal | None:
        return self.ticket.principal if self.ticket is not None else None


_NO_RESULT = AuthenticationResult(Outcome.NO_RESULT)


def build_ticket(
    principal_name: str | None,
    scheme: str = AUTHENTICATION_SCHEME,
    *,
    roles: Iterable[str] = (),
    properties: Mapping[str, Any] | None = None,
) -> AuthenticationTicket:
    """Wrap ``principal_name`` into a ticket issued by ``scheme``.

    The identity gets a single name claim followed by one role claim per
    entry in ``roles``.

    Raises:
        MissingPrincipalError: If ``principal_name`` is ``None`` or empty.
            The name is never replaced by a default.
        TypeError: If ``roles`` is a single string rather than an iterable of names.
    """
    if not principal_name:
        raise MissingPrincipalError(principal_name)
    if isinstance(roles, str):
        raise TypeError("roles must be an iterable of role names, not a single string")

    claims = [Claim(NAME_CLAIM_TYPE, principal_name)]
    claims.extend(Claim(ROLE_CLAIM_TYPE, str(role)) for role in roles)
    props = {str(k): str(v) for k, v in (properties or {}).items()}
    return AuthenticationTicket(
        principal=Principal(claims=tuple(claims), authentication_type=scheme),
        scheme=scheme,
        properties=props,
    )
