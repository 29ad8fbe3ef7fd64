"""Command-line administration tool for a Pulsar messaging cluster."""

__version__ = '0.0.0.dev0'
