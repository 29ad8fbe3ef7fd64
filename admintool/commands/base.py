"""Base classes for top-level command handlers."""

import argparse
import json
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar

from admintool.client import NO_CLIENT, AdminClient
from admintool.errors import AdminApiError, ArgumentParsingError, LocalRunError
from admintool.logging import get_logger
from admintool.parsing import PROG, ParserExit, StrictArgumentParser

logger = get_logger(__name__)

VerbHandler = Callable[[argparse.Namespace], bool]


class CommandHandler:
    """A top-level command with its own verb parser.

    Constructing a handler must not touch the admin client: handlers are
    built for every registered command, including when only help is shown.
    """

    name: ClassVar[str] = ''
    description: ClassVar[str] = ''

    def __init__(self, admin: Any, *, name: str | None = None) -> None:
        self.admin = admin
        self.command_name = name or self.name
        self.parser = StrictArgumentParser(
            prog=f'{PROG} {self.command_name}',
            description=self.description,
            allow_abbrev=False,
        )
        self._subparsers = self.parser.add_subparsers(dest='verb', metavar='<verb>')
        self.register_verbs(self._subparsers)

    def register_verbs(self, subparsers: argparse._SubParsersAction) -> None:
        raise NotImplementedError

    def add_verb(
        self,
        subparsers: argparse._SubParsersAction,
        verb: str,
        handler: VerbHandler,
        help_text: str,
    ) -> argparse.ArgumentParser:
        parser = subparsers.add_parser(verb, help=help_text, description=help_text)
        parser.set_defaults(handler=handler)
        return parser

    @property
    def verbs(self) -> list[str]:
        return list(self._subparsers.choices)

    def require_client(self) -> AdminClient:
        if self.admin is None or self.admin is NO_CLIENT:
            msg = f'"{self.command_name}" needs a connection to the cluster'
            raise AdminApiError(msg)
        return self.admin

    def run(self, args: Sequence[str]) -> bool:
        """Parse ``args`` against the verb tree and execute the chosen verb."""
        try:
            namespace = self.parser.parse_args(list(args))
        except ParserExit as exc:
            if exc.message:
                sys.stderr.write(exc.message)
            return exc.status == 0
        except ArgumentParsingError as exc:
            sys.stderr.write(f'{self.parser.prog}: error: {exc.message}\n')
            self.parser.print_usage(sys.stderr)
            return False

        handler = getattr(namespace, 'handler', None)
        if handler is None:
            self.parser.print_help(sys.stdout)
            return False

        logger.debug('running_verb', command=self.command_name, verb=namespace.verb)
        try:
            return handler(namespace)
        except (AdminApiError, LocalRunError) as exc:
            logger.debug('verb_failed', command=self.command_name, _debug_error=repr(exc))
            sys.stderr.write(f'{exc.describe()}\n')
            return False


def print_result(result: Any) -> None:
    """Write an API result to stdout as indented JSON."""
    if result is None:
        return
    if isinstance(result, str):
        sys.stdout.write(f'{result}\n')
        return
    sys.stdout.write(json.dumps(result, indent=2, sort_keys=True) + '\n')


def topic_path(topic: str) -> str:
    """``persistent://t/ns/name`` -> ``persistent/t/ns/name``; bare names default to persistent."""
    domain, sep, rest = topic.partition('://')
    if not sep:
        domain, rest = 'persistent', topic
    parts = rest.split('/')
    if len(parts) == 1:
        parts = ['public', 'default', *parts]
    return '/'.join([domain, *parts])


@dataclass(frozen=True)
class Option:
    """An extra ``--flag`` on a REST verb."""

    flag: str
    dest: str
    help: str
    required: bool = False
    kwargs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RestVerb:
    """A verb that maps straight onto one admin REST call.

    ``path`` is formatted with the parsed arguments; a ``topic`` argument is
    converted with :func:`topic_path` first. ``body`` builds the JSON payload.
    """

    name: str
    method: str
    path: str
    help: str
    positionals: tuple[str, ...] = ()
    options: tuple[Option, ...] = ()
    body: Callable[[argparse.Namespace], Any] | None = None


class RestCommand(CommandHandler):
    """Handler whose verbs are declared as :class:`RestVerb` entries."""

    rest_verbs: ClassVar[tuple[RestVerb, ...]] = ()

    def register_verbs(self, subparsers: argparse._SubParsersAction) -> None:
        for verb in self.rest_verbs:
            parser = self.add_verb(subparsers, verb.name, self._make_handler(verb), verb.help)
            for positional in verb.positionals:
                parser.add_argument(positional, help=positional.replace('_', ' '))
            for option in verb.options:
                parser.add_argument(
                    option.flag,
                    dest=option.dest,
                    required=option.required,
                    help=option.help,
                    **option.kwargs,
                )

    def _make_handler(self, verb: RestVerb) -> VerbHandler:
        def _handle(namespace: argparse.Namespace) -> bool:
            return self.call_rest(verb, namespace)

        return _handle

    def convert_topic(self, topic: str) -> str:
        return topic_path(topic)

    def call_rest(self, verb: RestVerb, namespace: argparse.Namespace) -> bool:
        client = self.require_client()
        values = dict(vars(namespace))
        if values.get('topic'):
            values['topic'] = self.convert_topic(values['topic'])
        path = verb.path.format(**values)
        payload = verb.body(namespace) if verb.body else None
        print_result(client.request(verb.method, path, payload=payload))
        return True
