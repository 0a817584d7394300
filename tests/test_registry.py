"""Tests for ServiceRegistry."""

from __future__ import annotations

from apikey_header_auth import FullTicketVerifier, ServiceRegistry, ServiceResolver, SimpleVerifier


class TestServiceRegistry:
    def test_satisfies_resolver_protocol(self):
        assert isinstance(ServiceRegistry(), ServiceResolver)

    def test_dict_satisfies_resolver_protocol(self):
        assert isinstance({}, ServiceResolver)

    def test_add_registers_type_and_capability(self, prefix_verifier):
        registry = ServiceRegistry().add(prefix_verifier)
        assert registry.get(type(prefix_verifier)) is prefix_verifier
        assert registry.get(SimpleVerifier) is prefix_verifier
        assert FullTicketVerifier not in registry
        assert len(registry) == 2

    def test_add_full_ticket_verifier(self, ticket_verifier):
        registry = ServiceRegistry().add(ticket_verifier)
        assert registry.get(FullTicketVerifier) is ticket_verifier
        assert SimpleVerifier not in registry

    def test_explicit_keys(self, prefix_verifier):
        registry = ServiceRegistry().add(prefix_verifier, "partner-keys")
        assert registry.get("partner-keys") is prefix_verifier
        assert list(registry) == ["partner-keys"]

    def test_later_registration_replaces(self, prefix_verifier):
        other = type(prefix_verifier)()
        registry = ServiceRegistry().add(prefix_verifier).add(other)
        assert registry.get(SimpleVerifier) is other

    def test_get_default(self):
        sentinel = object()
        assert ServiceRegistry().get("missing") is None
        assert ServiceRegistry().get("missing", sentinel) is sentinel

    def test_remove(self, prefix_verifier):
        registry = ServiceRegistry().add(prefix_verifier)
        registry.remove(SimpleVerifier)
        registry.remove("never-registered")
        assert SimpleVerifier not in registry

    def test_plain_object_registered_under_type_only(self):
        service = object()
        registry = ServiceRegistry().add(service)
        assert list(registry) == [object]
