"""Top-level commands and the registry that exposes them."""

from functools import partial

from admintool.commands.base import CommandHandler, RestCommand, RestVerb
from admintool.commands.functions import FunctionsCommand, SinksCommand, SourcesCommand
from admintool.commands.resources import (
    BookiesCommand,
    BrokersCommand,
    BrokerStatsCommand,
    ClustersCommand,
    FunctionsWorkerCommand,
    NamespaceIsolationPolicyCommand,
    NamespacesCommand,
    NonPersistentTopicsCommand,
    PersistentTopicsCommand,
    ProxyStatsCommand,
    ResourceQuotasCommand,
    SchemasCommand,
    TenantsCommand,
    TopicsCommand,
)
from admintool.registry import CommandRegistry


def build_default_registry() -> CommandRegistry:
    """Register every command in help order and freeze the result."""
    registry = CommandRegistry()
    registry.register('clusters', ClustersCommand)
    registry.register('ns-isolation-policy', NamespaceIsolationPolicyCommand)
    registry.register('brokers', BrokersCommand)
    registry.register('broker-stats', BrokerStatsCommand)
    registry.register('tenants', TenantsCommand)
    # Deprecated name for tenants, still accepted.
    registry.register('properties', partial(TenantsCommand, name='properties'), hidden=True)
    registry.register('namespaces', NamespacesCommand)
    registry.register('topics', TopicsCommand)
    registry.register('schemas', SchemasCommand)
    registry.register('bookies', BookiesCommand)
    registry.register('persistent', PersistentTopicsCommand, hidden=True)
    registry.register('non-persistent', NonPersistentTopicsCommand, hidden=True)
    registry.register('resource-quotas', ResourceQuotasCommand)
    registry.register('proxy-stats', ProxyStatsCommand)
    registry.register('functions', FunctionsCommand, local_run=True)
    registry.register('functions-worker', FunctionsWorkerCommand)
    # Singular forms are kept for backward compatibility.
    registry.register('sources', SourcesCommand, aliases=('source',), local_run=True)
    registry.register('sinks', SinksCommand, aliases=('sink',), local_run=True)
    return registry.freeze()


__all__ = [
    'CommandHandler',
    'RestCommand',
    'RestVerb',
    'build_default_registry',
]
