import logging

import structlog
import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from structlog.types import FilteringBoundLogger
from structlog.typing import EventDict

# Logs go to stderr; stdout carries usage text and command results.
console = Console(stderr=True)

# Type alias for our logger
Logger = FilteringBoundLogger

CONTEXT_PREFIXES = ('_verbose_', '_debug_', '_perf_')


def format_context_yaml(event_dict: EventDict, indent: int = 2) -> str:
    """Format the context dictionary as YAML.

    Args:
        event_dict: The context dictionary to format.
        indent: The number of spaces to use for indentation.

    Returns:
        The formatted YAML string.
    """
    if not event_dict:
        return ''
    context_yaml = yaml.safe_dump(
        event_dict,
        sort_keys=True,
        default_flow_style=False,
    )
    pad = ' ' * indent
    return '\n'.join(f'{pad}{line}' for line in context_yaml.splitlines())


def filter_context_by_prefix(event_dict: EventDict) -> EventDict:
    """Drop verbose-only context keys for non-verbose output."""
    return {key: value for key, value in event_dict.items() if not key.startswith(CONTEXT_PREFIXES)}


def strip_prefixes_from_keys(event_dict: EventDict) -> EventDict:
    """Remove the verbose-only prefixes so keys read naturally."""
    stripped: EventDict = {}
    for key, value in event_dict.items():
        for prefix in CONTEXT_PREFIXES:
            if key.startswith(prefix):
                key = key[len(prefix) :]  # noqa: PLW2901
                break
        stripped[key] = value
    return stripped


def cli_renderer(
    _logger: Logger,
    method_name: str,
    event_dict: EventDict,
) -> str:
    """Render log messages for CLI output using rich formatting.

    Args:
        logger: The logger instance.
        method_name: The logging method name (e.g., 'info', 'error').
        event_dict: The event dictionary containing log data.

    Returns:
        str: An empty string, as structlog expects a string return but output is printed.
    """
    level = method_name.upper()
    event_msg = event_dict.pop('event', '')
    for key in ('timestamp', 'level', 'log_level'):
        event_dict.pop(key, None)
    exc_info = event_dict.pop('exc_info', None)

    verbose_mode = logging.getLogger().level <= logging.DEBUG
    if verbose_mode:
        event_dict = strip_prefixes_from_keys(event_dict)
    else:
        event_dict = filter_context_by_prefix(event_dict)

    context_yaml = format_context_yaml(event_dict)

    level_styles = {
        'INFO': 'blue',
        'WARNING': 'yellow',
        'ERROR': 'red',
        'DEBUG': 'magenta',
        'CRITICAL': 'white on red',
    }
    style = level_styles.get(level, 'bold cyan')
    log_msg = f'[bold {style}]\\[{level}][/bold {style}] [{style}]{escape(str(event_msg))}[/{style}]'
    console.print(log_msg)

    if context_yaml:
        syntax = Syntax(
            context_yaml,
            'yaml',
            theme='github-dark',
            background_color='default',
            line_numbers=False,
        )
        console.print(syntax)
    if exc_info and verbose_mode:
        console.print_exception()
    return ''  # structlog expects a string return, but we already printed


def configure_logging(*, verbose: bool = False) -> None:
    """Configure structlog for pulsar-admin.

    Args:
        verbose: Enable verbose/debug output
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt='ISO', utc=False),
            structlog.stdlib.add_log_level,
            cli_renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    level = logging.DEBUG if verbose else logging.WARNING
    # Rendering happens in cli_renderer; the null handler keeps stdlib from
    # falling back to its last-resort stderr handler.
    logging.basicConfig(level=level, handlers=[logging.NullHandler()])
    logging.getLogger().setLevel(level)


def get_logger(name: str) -> Logger:
    """Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
