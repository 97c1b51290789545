"""Inbound adapters - Entry points driving the application (CLI)."""
