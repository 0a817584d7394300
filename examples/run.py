"""Launch a demo Starlette app protected by the ApiKeyHeader scheme.

Usage (from the project root):
    python examples/run.py

Keys are checked by a registered verifier. Set APIKEY_HEADER_NAME to
read the key from another header.

Then test with curl:
    curl http://localhost:8000/health                          # 200 (exempt)
    curl http://localhost:8000/                                # 401 (no key)
    curl -H "X-APIKEY: alice-key" http://localhost:8000/       # 200, alice
    curl -H "X-APIKEY: ops-key" http://localhost:8000/ticket   # 200, admin ticket
"""

import logging

import uvicorn
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route

from apikey_header_auth import (
    REDIRECT_URI_PROPERTY,
    ApiKeyHeaderOptions,
    AuthenticationResult,
    ServiceRegistry,
    api_key_header_middleware,
    auth_ticket_var,
    build_ticket,
)


class KeyTableVerifier:
    """FullTicketVerifier backed by an in-memory key table."""

    def __init__(self, keys: dict[str, tuple[str, list[str]]]) -> None:
        self._keys = keys

    def verify_full_ticket(self, api_key: str) -> AuthenticationResult:
        entry = self._keys.get(api_key)
        if entry is None:
            return AuthenticationResult.no_result()
        name, roles = entry
        if "disabled" in roles:
            return AuthenticationResult.fail(f"Key for {name} is disabled")
        ticket = build_ticket(name, roles=roles, properties={REDIRECT_URI_PROPERTY: "/"})
        return AuthenticationResult.success(ticket)


async def whoami(request):
    return JSONResponse({"user": auth_ticket_var.get().name})


async def ticket(request):
    current = auth_ticket_var.get()
    return JSONResponse(
        {
            "user": current.name,
            "scheme": current.scheme,
            "roles": list(current.roles),
            "properties": dict(current.properties),
        }
    )


async def health(request):
    return JSONResponse({"status": "ok"})


logging.basicConfig(level=logging.DEBUG, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

# 1. Register the verifier
services = ServiceRegistry().add(
    KeyTableVerifier(
        {
            "alice-key": ("alice", ["reader"]),
            "ops-key": ("ops", ["admin", "reader"]),
            "old-key": ("bob", ["disabled"]),
        }
    )
)

# 2. Configure the scheme from the environment, preferring the registered verifier
options = ApiKeyHeaderOptions.from_env(use_registered_authentication_handler=True)
print(f"Header:              {options.header}")

# 3. Launch
app = Starlette(
    routes=[Route("/", whoami), Route("/ticket", ticket), Route("/health", health)],
    middleware=[api_key_header_middleware(options, services=services)],
)

uvicorn.run(app, host="127.0.0.1", port=8000)
