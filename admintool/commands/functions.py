"""Function and connector commands, which can also run in-process."""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import ClassVar

from admintool.commands.base import Option, RestCommand, RestVerb
from admintool.localrun import ComponentKind, LocalRunner, load_function_config
from admintool.parsing import LOCAL_RUN_KEYWORD

_TENANT = Option('--tenant', 'tenant', 'The tenant', kwargs={'default': 'public'})
_NAMESPACE = Option('--namespace', 'namespace', 'The namespace', kwargs={'default': 'default'})


def _named(noun: str) -> Option:
    return Option('--name', 'name', f'The name of the {noun}', required=True)


class LocalRunCommand(RestCommand):
    """REST verbs plus a ``localrun`` verb that works without a client."""

    kind: ClassVar[ComponentKind] = 'function'

    def run(self, args: Sequence[str]) -> bool:
        args = list(args)
        # The keyword is matched in any case, like the client bypass check.
        if args and args[0].lower() == LOCAL_RUN_KEYWORD:
            args[0] = LOCAL_RUN_KEYWORD
        return super().run(args)

    def register_verbs(self, subparsers: argparse._SubParsersAction) -> None:
        super().register_verbs(subparsers)
        parser = self.add_verb(
            subparsers,
            LOCAL_RUN_KEYWORD,
            self.local_run,
            f'Run a {self.kind} locally, reading records from stdin',
        )
        parser.add_argument('--function-config-file', '--config-file', dest='config_file', type=Path)
        parser.add_argument('--tenant', help='The tenant')
        parser.add_argument('--namespace', help='The namespace')
        parser.add_argument('--name', help=f'The name of the {self.kind}')
        parser.add_argument('--classname', dest='class_name', help='Callable to run, as module:attr')
        parser.add_argument('--inputs', help='Comma separated input topics')
        parser.add_argument('--output', help='Output topic')

    def local_run(self, namespace: argparse.Namespace) -> bool:
        config = load_function_config(
            namespace.config_file,
            overrides={
                'tenant': namespace.tenant,
                'namespace': namespace.namespace,
                'name': namespace.name,
                'className': namespace.class_name,
                'inputs': namespace.inputs,
                'output': namespace.output,
            },
        )
        LocalRunner(config, self.kind).run(sys.stdin, sys.stdout)
        return True


class FunctionsCommand(LocalRunCommand):
    name = 'functions'
    description = 'Interface for managing Pulsar Functions'
    kind = 'function'
    rest_verbs = (
        RestVerb(
            'list',
            'GET',
            '/admin/v3/functions/{tenant}/{namespace}',
            'List all functions in a namespace',
            options=(_TENANT, _NAMESPACE),
        ),
        RestVerb(
            'get',
            'GET',
            '/admin/v3/functions/{tenant}/{namespace}/{name}',
            'Fetch information about a function',
            options=(_TENANT, _NAMESPACE, _named('function')),
        ),
        RestVerb(
            'status',
            'GET',
            '/admin/v3/functions/{tenant}/{namespace}/{name}/status',
            'Check the current status of a function',
            options=(_TENANT, _NAMESPACE, _named('function')),
        ),
        RestVerb(
            'delete',
            'DELETE',
            '/admin/v3/functions/{tenant}/{namespace}/{name}',
            'Delete a function',
            options=(_TENANT, _NAMESPACE, _named('function')),
        ),
    )


class SourcesCommand(LocalRunCommand):
    name = 'sources'
    description = 'Interface for managing Pulsar IO Sources (ingress data into Pulsar)'
    kind = 'source'
    rest_verbs = (
        RestVerb(
            'list',
            'GET',
            '/admin/v3/sources/{tenant}/{namespace}',
            'List all running sources in a namespace',
            options=(_TENANT, _NAMESPACE),
        ),
        RestVerb(
            'get',
            'GET',
            '/admin/v3/sources/{tenant}/{namespace}/{name}',
            'Get the information about a source',
            options=(_TENANT, _NAMESPACE, _named('source')),
        ),
        RestVerb(
            'delete',
            'DELETE',
            '/admin/v3/sources/{tenant}/{namespace}/{name}',
            'Stop and remove a source',
            options=(_TENANT, _NAMESPACE, _named('source')),
        ),
        RestVerb('available-sources', 'GET', '/admin/v3/sources/builtinsources', 'List the built-in sources'),
    )


class SinksCommand(LocalRunCommand):
    name = 'sinks'
    description = 'Interface for managing Pulsar IO Sinks (egress data from Pulsar)'
    kind = 'sink'
    rest_verbs = (
        RestVerb(
            'list',
            'GET',
            '/admin/v3/sinks/{tenant}/{namespace}',
            'List all running sinks in a namespace',
            options=(_TENANT, _NAMESPACE),
        ),
        RestVerb(
            'get',
            'GET',
            '/admin/v3/sinks/{tenant}/{namespace}/{name}',
            'Get the information about a sink',
            options=(_TENANT, _NAMESPACE, _named('sink')),
        ),
        RestVerb(
            'delete',
            'DELETE',
            '/admin/v3/sinks/{tenant}/{namespace}/{name}',
            'Stop and remove a sink',
            options=(_TENANT, _NAMESPACE, _named('sink')),
        ),
        RestVerb('available-sinks', 'GET', '/admin/v3/sinks/builtinsinks', 'List the built-in sinks'),
    )
