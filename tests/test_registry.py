import pytest

from admintool.commands import build_default_registry
from admintool.commands.functions import SinksCommand, SourcesCommand
from admintool.commands.resources import TenantsCommand
from admintool.errors import CommandRegistrationError
from admintool.registry import CommandRegistry


def _factory(admin: object) -> object:
    return admin


class TestCommandRegistry:
    """Tests for registering and resolving command tokens."""

    def test_resolve_canonical_and_alias(self) -> None:
        registry = CommandRegistry()
        entry = registry.register('sources', _factory, aliases=('source',))

        assert registry.resolve('sources') is entry
        assert registry.resolve('source') is entry
        assert registry.resolve('sink') is None
        assert 'source' in registry
        assert 'sources' in registry

    def test_alias_colliding_with_canonical_name_fails(self) -> None:
        registry = CommandRegistry()
        registry.register('tenants', _factory)

        with pytest.raises(CommandRegistrationError, match='"tenants" is already registered'):
            registry.register('properties', _factory, aliases=('tenants',))

    def test_alias_colliding_with_alias_fails(self) -> None:
        registry = CommandRegistry()
        registry.register('sources', _factory, aliases=('source',))

        with pytest.raises(CommandRegistrationError):
            registry.register('connectors', _factory, aliases=('source',))

    def test_canonical_name_colliding_with_alias_fails(self) -> None:
        registry = CommandRegistry()
        registry.register('sources', _factory, aliases=('source',))

        with pytest.raises(CommandRegistrationError):
            registry.register('source', _factory)

    def test_name_listed_as_own_alias_fails(self) -> None:
        with pytest.raises(CommandRegistrationError, match='lists itself'):
            CommandRegistry().register('sinks', _factory, aliases=('sinks',))

    def test_frozen_registry_rejects_registration(self) -> None:
        registry = CommandRegistry().freeze()

        assert registry.frozen
        with pytest.raises(CommandRegistrationError, match='frozen'):
            registry.register('tenants', _factory)

    def test_visible_entries_keep_insertion_order_and_skip_hidden(self) -> None:
        registry = CommandRegistry()
        registry.register('zeta', _factory)
        registry.register('alpha', _factory, hidden=True)
        registry.register('mid', _factory)

        assert [entry.name for entry in registry.visible_entries()] == ['zeta', 'mid']
        assert [entry.name for entry in registry.entries()] == ['zeta', 'alpha', 'mid']
        assert len(registry) == 3


class TestDefaultRegistry:
    """Tests for the built-in command table."""

    def test_singular_aliases_route_to_plural_handlers(self) -> None:
        registry = build_default_registry()

        source = registry.resolve('source')
        sink = registry.resolve('sink')

        assert source is registry.resolve('sources')
        assert sink is registry.resolve('sinks')
        assert isinstance(source.factory(None), SourcesCommand)
        assert isinstance(sink.factory(None), SinksCommand)

    def test_aliases_are_not_listed_in_help(self) -> None:
        names = [entry.name for entry in build_default_registry().visible_entries()]

        assert 'sources' in names
        assert 'sinks' in names
        assert 'source' not in names
        assert 'sink' not in names

    def test_deprecated_commands_are_hidden_but_dispatchable(self) -> None:
        registry = build_default_registry()
        names = [entry.name for entry in registry.visible_entries()]

        for hidden in ('properties', 'persistent', 'non-persistent'):
            assert hidden not in names
            assert registry.resolve(hidden) is not None

        handler = registry.resolve('properties').factory(None)
        assert isinstance(handler, TenantsCommand)
        assert handler.command_name == 'properties'

    def test_only_function_and_connector_commands_run_locally(self) -> None:
        registry = build_default_registry()

        assert sorted(entry.name for entry in registry if entry.local_run) == ['functions', 'sinks', 'sources']

    def test_default_registry_is_frozen(self) -> None:
        assert build_default_registry().frozen
