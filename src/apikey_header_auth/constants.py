"""Defaults for the ApiKeyHeader authentication scheme."""

from __future__ import annotations

# Name the scheme is registered under and advertised in challenges
AUTHENTICATION_SCHEME = "ApiKeyHeader"

# Header inspected for the key
AUTHENTICATION_HEADER = "X-APIKEY"

# Principal name used when a static key matches
AUTHENTICATION_CLAIM_NAME = "ApiKeyHeader User"

NAME_CLAIM_TYPE = "name"
ROLE_CLAIM_TYPE = "role"

# Ticket property holding a post-login redirect target
REDIRECT_URI_PROPERTY = ".redirect"
