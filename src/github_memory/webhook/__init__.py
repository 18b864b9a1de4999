"""Webhook ingestion: signature gate, payload translation and the HTTP app."""

from github_memory.webhook.app import create_app, router
from github_memory.webhook.signature import WebhookGate, verify_signature
from github_memory.webhook.translator import EventTranslator

__all__ = [
    "create_app",
    "router",
    "WebhookGate",
    "verify_signature",
    "EventTranslator",
]
