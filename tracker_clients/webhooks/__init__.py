"""Webhook verification and receiving."""

from .signatures import verify_github_signature, verify_github_request
from .receiver import WebhookReceiver, WebhookEvent

__all__ = [
    'verify_github_signature',
    'verify_github_request',
    'WebhookReceiver',
    'WebhookEvent'
]
