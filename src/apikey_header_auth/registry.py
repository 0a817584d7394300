"""A minimal service registry for verifier lookup."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from apikey_header_auth.protocol import FullTicketVerifier, SimpleVerifier

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """Maps keys (usually types) to service instances.

    Satisfies ``ServiceResolver``. Any other object with a
    ``get(key, default=None)`` method, such as a plain ``dict``, can be
    used instead.
    """

    def __init__(self) -> None:
        self._services: dict[Any, Any] = {}

    def add(self, service: Any, *keys: Any) -> ServiceRegistry:
        """Register ``service`` under ``keys``.

        Without explicit keys the service is registered under its own
        class and under each verifier capability it implements. A later
        registration under the same key replaces the earlier one.
        """
        if not keys:
            keys = (type(service), *_capabilities_of(service))
        for key in keys:
            if key in self._services:
                logger.debug("Replacing service registered for %s", _key_name(key))
            self._services[key] = service
            logger.debug("Registered %s for %s", type(service).__qualname__, _key_name(key))
        return self

    def get(self, key: Any, default: Any = None) -> Any:
        return self._services.get(key, default)

    def remove(self, key: Any) -> None:
        self._services.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._services

    def __len__(self) -> int:
        return len(self._services)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._services)


def _capabilities_of(service: Any) -> tuple[type, ...]:
    capabilities: list[type] = []
    if isinstance(service, FullTicketVerifier):
        capabilities.append(FullTicketVerifier)
    if isinstance(service, SimpleVerifier):
        capabilities.append(SimpleVerifier)
    return tuple(capabilities)


def _key_name(key: Any) -> str:
    return getattr(key, "__qualname__", repr(key))
