"""Main CLI entry point for pulsar-admin."""

import sys
from collections.abc import Sequence
from pathlib import Path

from admintool.client import AdminClientBuilder
from admintool.config import load_properties
from admintool.dispatcher import Dispatcher
from admintool.errors import AdminToolError, ConfigError
from admintool.logging import configure_logging, get_logger
from admintool.parsing import PROG

logger = get_logger(__name__)

USAGE = f'usage: {PROG} <config-file> [options] <command> [command options]\n'


def run(
    argv: Sequence[str],
    *,
    client_builder: AdminClientBuilder | None = None,
) -> int:
    """Run one invocation and return the process exit status."""
    configure_logging(verbose=False)
    if not argv:
        sys.stderr.write(f'{ConfigError.category}: missing properties file argument\n')
        sys.stderr.write(USAGE)
        return 1

    config_file, *args = argv
    try:
        properties = load_properties(Path(config_file))
        dispatcher = Dispatcher(
            properties,
            client_builder=client_builder,
            configure_logs=True,
        )
        succeeded = dispatcher.run(args)
    except AdminToolError as exc:
        logger.debug('fatal_error', _debug_error=repr(exc))
        sys.stderr.write(f'{exc.describe()}\n')
        return 1
    except Exception as exc:  # noqa: BLE001 - top-level CLI guard
        logger.exception('cli_operation_failed')
        sys.stderr.write(f'{type(exc).__name__}: {exc}\n')
        return 1
    return 0 if succeeded else 1


def main(argv: Sequence[str] | None = None) -> int:
    """Console script entry point."""
    return run(sys.argv[1:] if argv is None else argv)


if __name__ == '__main__':
    sys.exit(main())
