"""GitHub webhook signature verification."""

from __future__ import annotations

import hashlib
import hmac

from github_memory.errors import Unauthorized

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="


def compute_signature(payload: bytes, secret: str) -> str:
    """Return the ``sha256=<hex>`` signature GitHub sends for ``payload``."""
    digest = hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(payload: bytes, signature: str, secret: str) -> bool:
    """
    Verify GitHub webhook signature.

    Args:
        payload: Raw request body, exactly as received
        signature: X-Hub-Signature-256 header value
        secret: Webhook secret

    Returns:
        True if signature is valid
    """
    # Header values are latin-1 decoded; a non-ASCII value cannot be a hex digest
    if not signature.isascii() or not signature.startswith(SIGNATURE_PREFIX):
        return False

    return hmac.compare_digest(compute_signature(payload, secret).encode(), signature.encode())


class WebhookGate:
    """Authenticates webhook deliveries against a shared secret.

    With no secret configured every request is accepted.
    """

    def __init__(self, secret: str | None = None) -> None:
        self._secret = secret or None

    @property
    def enabled(self) -> bool:
        return self._secret is not None

    def check(self, body: bytes, signature: str | None) -> None:
        """Raise Unauthorized unless ``signature`` matches ``body``.

        Args:
            body: Raw request body bytes, never a re-serialized payload
            signature: X-Hub-Signature-256 header value, if sent

        Raises:
            Unauthorized: Missing or mismatched signature
        """
        if self._secret is None:
            return

        if not signature:
            raise Unauthorized("Missing signature")

        if not verify_signature(body, signature, self._secret):
            raise Unauthorized("Invalid signature")
