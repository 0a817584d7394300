"""Tests for the Starlette AuthenticationBackend adapter."""

from __future__ import annotations

import pytest
from starlette.applications import Starlette
from starlette.authentication import requires
from starlette.middleware import Middleware
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from apikey_header_auth import ApiKeyHeaderAuthenticator, ApiKeyHeaderBackend, ApiKeyHeaderOptions, ApiKeyUser


@requires("authenticated")
async def _me(request: Request) -> JSONResponse:
    user = request.user
    return JSONResponse(
        {
            "name": user.display_name,
            "scopes": request.auth.scopes,
            "redirect": user.ticket.redirect_uri,
        }
    )


@requires("testrole")
async def _role_only(request: Request) -> JSONResponse:
    return JSONResponse({"ok": True})


async def _anonymous(request: Request) -> JSONResponse:
    return JSONResponse({"authenticated": request.user.is_authenticated})


def _client(authenticator: ApiKeyHeaderAuthenticator) -> TestClient:
    app = Starlette(
        routes=[
            Route("/me", _me),
            Route("/role", _role_only),
            Route("/anonymous", _anonymous),
        ],
        middleware=[Middleware(AuthenticationMiddleware, backend=ApiKeyHeaderBackend(authenticator))],
    )
    return TestClient(app)


@pytest.fixture
def ticket_client(ticket_registry) -> TestClient:
    return _client(
        ApiKeyHeaderAuthenticator(
            ApiKeyHeaderOptions(use_registered_authentication_handler=True),
            services=ticket_registry,
        )
    )


class TestApiKeyHeaderBackend:
    def test_success_populates_user(self, ticket_client):
        response = ticket_client.get("/me", headers={"X-APIKEY": "testapi"})
        assert response.status_code == 200
        assert response.json() == {
            "name": "ticket-user",
            "scopes": ["authenticated", "testrole"],
            "redirect": "http://localhost",
        }

    def test_roles_become_scopes(self, ticket_client):
        assert ticket_client.get("/role", headers={"X-APIKEY": "testapi"}).status_code == 200

    def test_no_result_is_anonymous(self, ticket_client):
        response = ticket_client.get("/anonymous", headers={"X-APIKEY": "unknown"})
        assert response.json() == {"authenticated": False}

    def test_no_result_denied_by_requires(self, ticket_client):
        assert ticket_client.get("/me").status_code == 403

    def test_fail_raises_authentication_error(self, ticket_client):
        response = ticket_client.get("/anonymous", headers={"X-APIKEY": "explicit-fail"})
        assert response.status_code == 400
        assert response.text == "Key revoked"

    def test_static_key(self):
        client = _client(ApiKeyHeaderAuthenticator(ApiKeyHeaderOptions(api_key="testapi")))
        response = client.get("/me", headers={"X-APIKEY": "testapi"})
        assert response.json()["name"] == "ApiKeyHeader User"
        assert response.json()["redirect"] is None


class TestApiKeyUser:
    def test_wraps_ticket(self, ticket_verifier):
        ticket = ticket_verifier.verify_full_ticket("testapi").ticket
        user = ApiKeyUser(ticket)
        assert user.is_authenticated
        assert user.display_name == "ticket-user"
        assert user.identity == "ApiKeyHeader:ticket-user"
        assert user.ticket is ticket
