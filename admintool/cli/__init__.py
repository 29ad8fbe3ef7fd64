"""Process entry point for pulsar-admin."""
