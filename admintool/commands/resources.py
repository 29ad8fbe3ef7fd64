"""Cluster resource commands backed by the admin REST API."""

import argparse

from admintool.commands.base import Option, RestCommand, RestVerb, topic_path


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


def _cluster_body(namespace: argparse.Namespace) -> dict[str, str]:
    body = {'serviceUrl': namespace.url}
    if namespace.broker_url:
        body['brokerServiceUrl'] = namespace.broker_url
    return body


def _tenant_body(namespace: argparse.Namespace) -> dict[str, list[str]]:
    return {
        'adminRoles': _split_csv(namespace.admin_roles),
        'allowedClusters': _split_csv(namespace.allowed_clusters),
    }


_ADMIN_ROLES = Option('--admin-roles', 'admin_roles', 'Comma separated admin roles')
_ALLOWED_CLUSTERS = Option(
    '--allowed-clusters',
    'allowed_clusters',
    'Comma separated allowed clusters',
    required=True,
)


class ClustersCommand(RestCommand):
    name = 'clusters'
    description = 'Operations about clusters'
    rest_verbs = (
        RestVerb('list', 'GET', '/admin/v2/clusters', 'List the existing clusters'),
        RestVerb('get', 'GET', '/admin/v2/clusters/{cluster}', 'Get the configuration of a cluster', ('cluster',)),
        RestVerb(
            'create',
            'PUT',
            '/admin/v2/clusters/{cluster}',
            'Provision a new cluster',
            ('cluster',),
            (
                Option('--url', 'url', 'Admin service URL of the cluster', required=True),
                Option('--broker-url', 'broker_url', 'Broker service URL of the cluster'),
            ),
            body=_cluster_body,
        ),
        RestVerb('delete', 'DELETE', '/admin/v2/clusters/{cluster}', 'Delete an existing cluster', ('cluster',)),
    )


class NamespaceIsolationPolicyCommand(RestCommand):
    name = 'ns-isolation-policy'
    description = 'Operations about namespace isolation policy'
    rest_verbs = (
        RestVerb(
            'list',
            'GET',
            '/admin/v2/clusters/{cluster}/namespaceIsolationPolicies',
            'List all namespace isolation policies of a cluster',
            ('cluster',),
        ),
        RestVerb(
            'get',
            'GET',
            '/admin/v2/clusters/{cluster}/namespaceIsolationPolicies/{policy}',
            'Get a namespace isolation policy of a cluster',
            ('cluster', 'policy'),
        ),
        RestVerb(
            'delete',
            'DELETE',
            '/admin/v2/clusters/{cluster}/namespaceIsolationPolicies/{policy}',
            'Delete a namespace isolation policy of a cluster',
            ('cluster', 'policy'),
        ),
    )


class BrokersCommand(RestCommand):
    name = 'brokers'
    description = 'Operations about brokers'
    rest_verbs = (
        RestVerb('list', 'GET', '/admin/v2/brokers/{cluster}', 'List active brokers of the cluster', ('cluster',)),
        RestVerb('leader-broker', 'GET', '/admin/v2/brokers/leaderBroker', 'Get the information of the leader broker'),
        RestVerb('healthcheck', 'GET', '/admin/v2/brokers/health', 'Run a health check against the broker'),
        RestVerb(
            'get-runtime-config',
            'GET',
            '/admin/v2/brokers/configuration/runtime',
            'Get runtime configuration values',
        ),
    )


class BrokerStatsCommand(RestCommand):
    name = 'broker-stats'
    description = 'Operations to collect broker statistics'
    rest_verbs = (
        RestVerb('monitoring-metrics', 'GET', '/admin/v2/broker-stats/metrics', 'Dump metrics for monitoring'),
        RestVerb('topics', 'GET', '/admin/v2/broker-stats/topics', 'Dump topic stats'),
        RestVerb('load-report', 'GET', '/admin/v2/broker-stats/load-report', 'Dump the broker load report'),
    )


class TenantsCommand(RestCommand):
    name = 'tenants'
    description = 'Operations about tenants'
    rest_verbs = (
        RestVerb('list', 'GET', '/admin/v2/tenants', 'List the existing tenants'),
        RestVerb('get', 'GET', '/admin/v2/tenants/{tenant}', 'Get the configuration of a tenant', ('tenant',)),
        RestVerb(
            'create',
            'PUT',
            '/admin/v2/tenants/{tenant}',
            'Create a new tenant',
            ('tenant',),
            (_ADMIN_ROLES, _ALLOWED_CLUSTERS),
            body=_tenant_body,
        ),
        RestVerb(
            'update',
            'POST',
            '/admin/v2/tenants/{tenant}',
            'Update the configuration for a tenant',
            ('tenant',),
            (_ADMIN_ROLES, _ALLOWED_CLUSTERS),
            body=_tenant_body,
        ),
        RestVerb('delete', 'DELETE', '/admin/v2/tenants/{tenant}', 'Delete an existing tenant', ('tenant',)),
    )


class NamespacesCommand(RestCommand):
    name = 'namespaces'
    description = 'Operations about namespaces'
    rest_verbs = (
        RestVerb('list', 'GET', '/admin/v2/namespaces/{tenant}', 'Get the namespaces for a tenant', ('tenant',)),
        RestVerb(
            'policies',
            'GET',
            '/admin/v2/namespaces/{namespace}',
            'Get the configuration policies of a namespace',
            ('namespace',),
        ),
        RestVerb('create', 'PUT', '/admin/v2/namespaces/{namespace}', 'Create a new namespace', ('namespace',)),
        RestVerb('delete', 'DELETE', '/admin/v2/namespaces/{namespace}', 'Delete a namespace', ('namespace',)),
        RestVerb(
            'topics',
            'GET',
            '/admin/v2/namespaces/{namespace}/topics',
            'Get the list of topics for a namespace',
            ('namespace',),
        ),
    )


class TopicsCommand(RestCommand):
    name = 'topics'
    description = 'Operations on persistent topics'
    rest_verbs = (
        RestVerb(
            'list',
            'GET',
            '/admin/v2/persistent/{namespace}',
            'Get the list of topics under a namespace',
            ('namespace',),
        ),
        RestVerb('stats', 'GET', '/admin/v2/{topic}/stats', 'Get the stats for the topic', ('topic',)),
        RestVerb(
            'subscriptions',
            'GET',
            '/admin/v2/{topic}/subscriptions',
            'Get the list of subscriptions on the topic',
            ('topic',),
        ),
        RestVerb('create', 'PUT', '/admin/v2/{topic}', 'Create a non-partitioned topic', ('topic',)),
        RestVerb('delete', 'DELETE', '/admin/v2/{topic}', 'Delete a topic', ('topic',)),
    )


class PersistentTopicsCommand(RestCommand):
    name = 'persistent'
    description = 'Operations on persistent topics (deprecated, use topics)'
    rest_verbs = (
        RestVerb(
            'list',
            'GET',
            '/admin/v2/persistent/{namespace}',
            'Get the list of persistent topics under a namespace',
            ('namespace',),
        ),
        RestVerb('stats', 'GET', '/admin/v2/{topic}/stats', 'Get the stats for the topic', ('topic',)),
    )


class NonPersistentTopicsCommand(RestCommand):
    name = 'non-persistent'
    description = 'Operations on non-persistent topics (deprecated, use topics)'
    rest_verbs = (
        RestVerb(
            'list',
            'GET',
            '/admin/v2/non-persistent/{namespace}',
            'Get the list of non-persistent topics under a namespace',
            ('namespace',),
        ),
        RestVerb('stats', 'GET', '/admin/v2/{topic}/stats', 'Get the stats for the topic', ('topic',)),
    )


class SchemasCommand(RestCommand):
    name = 'schemas'
    description = 'Operations about schemas'
    rest_verbs = (
        RestVerb(
            'get',
            'GET',
            '/admin/v2/schemas/{topic}/schema',
            'Get the schema for a topic',
            ('topic',),
        ),
        RestVerb(
            'delete',
            'DELETE',
            '/admin/v2/schemas/{topic}/schema',
            'Delete the latest schema for a topic',
            ('topic',),
        ),
    )

    def convert_topic(self, topic: str) -> str:
        # Schema paths carry no domain segment.
        return topic_path(topic).partition('/')[2]


class BookiesCommand(RestCommand):
    name = 'bookies'
    description = 'Operations about bookies rack placement'
    rest_verbs = (
        RestVerb('racks-placement', 'GET', '/admin/v2/bookies/racks-info', 'Get the bookies rack placement'),
        RestVerb(
            'get-bookie-rack',
            'GET',
            '/admin/v2/bookies/racks-info/{bookie}',
            'Get the rack placement of a bookie',
            ('bookie',),
        ),
    )


class ResourceQuotasCommand(RestCommand):
    name = 'resource-quotas'
    description = 'Operations about resource quotas'
    rest_verbs = (
        RestVerb('get', 'GET', '/admin/v2/resource-quotas', 'Get the default resource quota'),
        RestVerb(
            'get-bundle',
            'GET',
            '/admin/v2/resource-quotas/{namespace}/{bundle}',
            'Get the resource quota of a namespace bundle',
            ('namespace', 'bundle'),
        ),
    )


class ProxyStatsCommand(RestCommand):
    name = 'proxy-stats'
    description = 'Operations to collect proxy statistics'
    rest_verbs = (
        RestVerb('connections', 'GET', '/proxy-stats/connections', 'Get connection stats of the proxy'),
        RestVerb('topics', 'GET', '/proxy-stats/topics', 'Get topic stats of the proxy'),
    )


class FunctionsWorkerCommand(RestCommand):
    name = 'functions-worker'
    description = 'Operations to collect function-worker statistics'
    rest_verbs = (
        RestVerb('function-stats', 'GET', '/admin/v2/worker-stats/functionsmetrics', 'Dump all functions stats'),
        RestVerb('monitoring-metrics', 'GET', '/admin/v2/worker-stats/metrics', 'Dump metrics for monitoring'),
        RestVerb('get-cluster', 'GET', '/admin/v2/worker/cluster', 'Get the workers of the cluster'),
        RestVerb(
            'get-cluster-leader',
            'GET',
            '/admin/v2/worker/cluster/leader',
            'Get the leader of the worker cluster',
        ),
    )
