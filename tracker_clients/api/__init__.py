"""API clients for Aha, GitHub and ZenHub."""

from .base import BaseAPIClient
from .aha_client import AhaAPIClient, AhaResponse
from .aha_fields import FieldAction, FieldOutcome, resolve_custom_field
from .github_client import GitHubAPIClient, GitResponse
from .zenhub_client import ZenHubAPIClient
from .factory import APIClientFactory

__all__ = [
    'BaseAPIClient',
    'AhaAPIClient',
    'AhaResponse',
    'FieldAction',
    'FieldOutcome',
    'resolve_custom_field',
    'GitHubAPIClient',
    'GitResponse',
    'ZenHubAPIClient',
    'APIClientFactory'
]
