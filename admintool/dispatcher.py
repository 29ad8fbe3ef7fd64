"""Top-level dispatch: global flags, configuration, client and handler."""

import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from admintool.client import NO_CLIENT, AdminClientBuilder, HttpAdminClientBuilder
from admintool.commands import CommandHandler, build_default_registry
from admintool.config import RawConfiguration, resolve_config
from admintool.errors import (
    ClientConstructionError,
    GlobalFlagsError,
    HandlerConstructionError,
    NoCommandError,
    innermost_cause,
)
from admintool.logging import configure_logging, get_logger
from admintool.models import ResolvedConfig
from admintool.parsing import create_global_parser, is_local_run, parse_global_flags, split_arguments
from admintool.registry import CommandRegistry

logger = get_logger(__name__)


class Dispatcher:
    """Runs one command per call to :meth:`run`.

    Client and handler construction failures raise
    ``ClientConstructionError`` / ``HandlerConstructionError`` for the
    process boundary to report; everything else comes back as a bool.
    """

    def __init__(
        self,
        properties: RawConfiguration,
        *,
        registry: CommandRegistry | None = None,
        client_builder: AdminClientBuilder | None = None,
        configure_logs: bool = False,
    ) -> None:
        self.properties = properties
        self.registry = (registry or build_default_registry()).freeze()
        self.client_builder = client_builder or HttpAdminClientBuilder()
        self.global_parser = create_global_parser()
        self.configure_logs = configure_logs

    def run(self, args: Sequence[str]) -> bool:
        invocation = split_arguments(args, self.registry)

        try:
            flags = parse_global_flags(invocation.global_args, self.global_parser)
        except GlobalFlagsError as exc:
            sys.stderr.write(f'{exc.describe()}\n\n')
            self.print_usage()
            return False

        if self.configure_logs:
            configure_logging(verbose=flags.verbose)

        if flags.help:
            self.print_usage()
            return True

        entry = self.registry.resolve(invocation.command_name) if invocation.command_name else None
        if entry is None:
            error = NoCommandError('no command given')
            sys.stderr.write(f'{error.describe()}\n\n')
            self.print_usage()
            return False

        config = resolve_config(self.properties, flags.overrides)
        local_run = entry.local_run and is_local_run(invocation)
        logger.info(
            'command_selected',
            command=entry.name,
            token=invocation.command_name,
            local_run=local_run,
        )

        with self.open_admin_client(config, bypass=local_run) as admin:
            handlers = self.instantiate_handlers(admin, local_run_only=local_run)
            return handlers[entry.name].run(invocation.command_args)

    @contextmanager
    def open_admin_client(self, config: ResolvedConfig, *, bypass: bool = False) -> Iterator[Any]:
        """Yield a live client (closed afterwards), or ``NO_CLIENT`` when bypassed."""
        if bypass:
            logger.info('admin_client_bypassed')
            yield NO_CLIENT
            return

        try:
            client = self.client_builder.build(config)
        except ClientConstructionError:
            raise
        except Exception as exc:  # noqa: BLE001 - any builder failure is fatal
            msg = f'{type(exc).__name__}: {exc}'
            raise ClientConstructionError(msg) from exc

        try:
            yield client
        finally:
            close = getattr(client, 'close', None)
            if callable(close):
                close()

    def instantiate_handlers(self, admin: Any, *, local_run_only: bool = False) -> dict[str, CommandHandler]:
        """Build a handler for every registered command sharing ``admin``."""
        handlers: dict[str, CommandHandler] = {}
        for entry in self.registry:
            if local_run_only and not entry.local_run:
                continue
            try:
                handlers[entry.name] = entry.factory(admin)
            except Exception as exc:  # noqa: BLE001 - reported as a construction error
                raise HandlerConstructionError(entry.name, innermost_cause(exc)) from exc
        return handlers

    def format_usage(self) -> str:
        handlers = self.instantiate_handlers(NO_CLIENT)
        entries = self.registry.visible_entries()
        width = max((len(entry.name) for entry in entries), default=0)

        lines = [self.global_parser.format_help().rstrip(), '', 'commands:']
        for entry in entries:
            line = f'  {entry.name:<{width}}  {handlers[entry.name].description}'
            if entry.aliases:
                line += f' (alias: {", ".join(sorted(entry.aliases))})'
            lines.append(line)
        return '\n'.join(lines) + '\n'

    def print_usage(self) -> None:
        sys.stdout.write(self.format_usage())
