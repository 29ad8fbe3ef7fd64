"""Splitting the argument vector and parsing the global flags."""

import argparse
from collections.abc import Collection, Sequence

from admintool.errors import ArgumentParsingError, GlobalFlagsError
from admintool.logging import get_logger
from admintool.models import ConfigOverrides, GlobalFlags, ParsedInvocation
from admintool.registry import CommandRegistry

logger = get_logger(__name__)

PROG = 'pulsar-admin'

# Running a function, source or sink in-process needs no cluster connection.
LOCAL_RUN_KEYWORD = 'localrun'

# Global flags that always consume the following token.
VALUE_FLAGS = frozenset(
    {
        '--admin-url',
        '--auth-plugin',
        '--auth-params',
        '--tls-trust-cert-path',
    },
)

_TRUE_VALUES = frozenset({'true', 'yes', '1'})
_FALSE_VALUES = frozenset({'false', 'no', '0'})


class ParserExit(Exception):  # noqa: N818
    """Raised instead of exiting the process when argparse wants to stop."""

    def __init__(self, status: int = 0, message: str | None = None) -> None:
        super().__init__(message or '')
        self.status = status
        self.message = message


class StrictArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of calling ``sys.exit``."""

    error_class: type[ArgumentParsingError] = ArgumentParsingError

    def error(self, message: str):  # type: ignore[override]
        raise self.error_class(message)

    def exit(self, status: int = 0, message: str | None = None):  # type: ignore[override]
        raise ParserExit(status, message)


class GlobalFlagsParser(StrictArgumentParser):
    error_class = GlobalFlagsError


def argparse_bool(value: str) -> bool:
    """Argparse type for optional boolean flag values."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    msg = f'invalid boolean value: {value}'
    raise argparse.ArgumentTypeError(msg)


def create_global_parser() -> GlobalFlagsParser:
    """Create the parser for flags accepted before the command name."""
    parser = GlobalFlagsParser(
        prog=PROG,
        usage=f'{PROG} <config-file> [options] <command> [command options]',
        description='Administer a Pulsar cluster through its admin REST API',
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        '--admin-url',
        dest='service_url',
        metavar='URL',
        help='Admin Service URL to which to connect',
    )
    parser.add_argument(
        '--auth-plugin',
        dest='auth_plugin_class_name',
        metavar='CLASS',
        help='Authentication plugin class name',
    )
    parser.add_argument(
        '--auth-params',
        dest='auth_params',
        metavar='PARAMS',
        help=(
            'Authentication parameters, e.g. "key1:val1,key2:val2" '
            'or \'{"key1":"val1","key2":"val2"}\''
        ),
    )
    parser.add_argument(
        '--tls-allow-insecure',
        dest='tls_allow_insecure_connection',
        nargs='?',
        const=True,
        default=None,
        type=argparse_bool,
        metavar='BOOL',
        help='Allow TLS insecure connection',
    )
    parser.add_argument(
        '--tls-trust-cert-path',
        dest='tls_trust_certs_file_path',
        metavar='PATH',
        help='TLS trust cert file path',
    )
    parser.add_argument(
        '--tls-enable-hostname-verification',
        dest='tls_enable_hostname_verification',
        nargs='?',
        const=True,
        default=None,
        type=argparse_bool,
        metavar='BOOL',
        help='Enable TLS hostname verification',
    )
    parser.add_argument(
        '-v',
        '--verbose',
        action='store_true',
        help='Enable verbose logging',
    )
    parser.add_argument(
        '-h',
        '--help',
        action='store_true',
        help='Show this help',
    )
    return parser


def parse_global_flags(
    global_args: Sequence[str],
    parser: argparse.ArgumentParser | None = None,
) -> GlobalFlags:
    """Parse the global slice; raises ``GlobalFlagsError`` on bad input."""
    parser = parser or create_global_parser()
    namespace = parser.parse_args(list(global_args))
    overrides = ConfigOverrides(
        service_url=namespace.service_url,
        auth_plugin_class_name=namespace.auth_plugin_class_name,
        auth_params=namespace.auth_params,
        tls_allow_insecure_connection=namespace.tls_allow_insecure_connection,
        tls_enable_hostname_verification=namespace.tls_enable_hostname_verification,
        tls_trust_certs_file_path=namespace.tls_trust_certs_file_path,
    )
    return GlobalFlags(overrides=overrides, help=namespace.help, verbose=namespace.verbose)


def split_arguments(
    args: Sequence[str],
    registry: CommandRegistry,
    *,
    value_flags: Collection[str] = VALUE_FLAGS,
) -> ParsedInvocation:
    """Split ``args`` at the first token naming a registered command.

    The token right after a flag listed in ``value_flags`` is that flag's
    value and is never taken as the command, so ``--admin-url tenants``
    still sets the URL. ``--flag=value`` forms consume nothing extra.
    """
    position = 0
    while position < len(args):
        token = args[position]
        if token in value_flags:
            position += 2
            continue
        if token in registry:
            invocation = ParsedInvocation(
                global_args=tuple(args[:position]),
                command_name=token,
                command_args=tuple(args[position + 1 :]),
            )
            logger.debug('split_arguments', command=token, _debug_position=position)
            return invocation
        position += 1
    return ParsedInvocation(global_args=tuple(args))


def is_local_run(invocation: ParsedInvocation) -> bool:
    """True when the token after the command is the local-run keyword."""
    if not invocation.has_command or not invocation.command_args:
        return False
    return invocation.command_args[0].lower() == LOCAL_RUN_KEYWORD


__all__ = [
    'LOCAL_RUN_KEYWORD',
    'PROG',
    'VALUE_FLAGS',
    'GlobalFlagsParser',
    'ParserExit',
    'StrictArgumentParser',
    'argparse_bool',
    'create_global_parser',
    'is_local_run',
    'parse_global_flags',
    'split_arguments',
]
