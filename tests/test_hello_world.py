"""Basic smoke tests for pulsar-admin."""

from admintool import __version__
from admintool.parsing import create_global_parser


def test_version_import() -> None:
    """Test that we can import the version."""
    assert __version__ == '0.0.0.dev0'


def test_cli_parser_creation() -> None:
    """Test that the CLI parser can be created."""
    parser = create_global_parser()
    assert parser.prog == 'pulsar-admin'


def test_cli_help() -> None:
    """Test that CLI help can be generated without errors."""
    help_text = create_global_parser().format_help()
    assert 'pulsar-admin <config-file>' in help_text
    assert '--admin-url' in help_text
