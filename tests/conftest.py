"""Shared test fixtures for apikey-header-auth tests."""

from __future__ import annotations

from typing import Any

import pytest

from apikey_header_auth import (
    REDIRECT_URI_PROPERTY,
    AuthenticationResult,
    ServiceRegistry,
    build_ticket,
)

# ---------------------------------------------------------------------------
# Verifier stubs implementing the two capabilities
# ---------------------------------------------------------------------------


class PrefixVerifier:
    """SimpleVerifier accepting keys that start with ``good``."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def verify(self, api_key: str) -> tuple[bool, str | None]:
        self.calls.append(api_key)
        return api_key.startswith("good"), api_key


class RoleTicketVerifier:
    """FullTicketVerifier issuing a ``testrole`` ticket with a redirect."""

    def __init__(self, valid_key: str = "testapi") -> None:
        self.valid_key = valid_key

    def verify_full_ticket(self, api_key: str) -> AuthenticationResult:
        if api_key == "explicit-fail":
            return AuthenticationResult.fail("Key revoked")
        if api_key != self.valid_key:
            return AuthenticationResult.no_result()
        ticket = build_ticket(
            "ticket-user",
            "ApiKeyHeader",
            roles=["testrole"],
            properties={REDIRECT_URI_PROPERTY: "http://localhost"},
        )
        return AuthenticationResult.success(ticket)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def prefix_verifier() -> PrefixVerifier:
    return PrefixVerifier()


@pytest.fixture
def ticket_verifier() -> RoleTicketVerifier:
    return RoleTicketVerifier()


@pytest.fixture
def simple_registry(prefix_verifier: PrefixVerifier) -> ServiceRegistry:
    return ServiceRegistry().add(prefix_verifier)


@pytest.fixture
def ticket_registry(ticket_verifier: RoleTicketVerifier) -> ServiceRegistry:
    return ServiceRegistry().add(ticket_verifier)


@pytest.fixture
def http_scope() -> Any:
    def _build(
        path: str = "/",
        headers: list[tuple[bytes, bytes]] | None = None,
        scope_type: str = "http",
    ) -> dict[str, Any]:
        return {"type": scope_type, "path": path, "headers": headers or []}

    return _build
