"""Webhook inspector: capture inbound webhooks and stream them to live viewers."""

__version__ = "0.1.0"
