"""API client factory for creating configured clients."""

import logging
from typing import Any, Dict, Optional

from ..config.settings import SystemConfig
from ..webhooks.receiver import WebhookReceiver
from .aha_client import AhaAPIClient
from .github_client import GitHubAPIClient
from .zenhub_client import ZenHubAPIClient


class APIClientFactory:
    """Factory for creating configured API clients.

    A client whose token is not configured comes back as None. With
    ``check_connection`` a client that fails its connection test does too.
    """

    def __init__(self, config: SystemConfig, check_connection: bool = False):
        """Initialize factory with system configuration."""
        self.config = config
        self.check_connection = check_connection
        self.logger = logging.getLogger(__name__)

    def _checked(self, name: str, client: Any) -> Optional[Any]:
        if self.check_connection and not client.test_connection():
            self.logger.error(f"{name} API client connection test failed")
            return None
        self.logger.info(f"{name} API client created successfully")
        return client

    def create_aha_client(self) -> Optional[AhaAPIClient]:
        """Create Aha API client."""
        if not self.config.aha.token or not self.config.aha.url:
            self.logger.warning("Aha URL or token not configured, Aha client unavailable")
            return None

        client = AhaAPIClient(
            url=self.config.aha.url,
            token=self.config.aha.token,
            timeout=self.config.http.timeout,
            verify_ssl=self.config.http.verify_ssl
        )
        return self._checked("Aha", client)

    def create_github_client(self) -> Optional[GitHubAPIClient]:
        """Create GitHub API client."""
        if not self.config.github.token:
            self.logger.warning("GitHub token not configured, GitHub client unavailable")
            return None

        client = GitHubAPIClient(
            host=self.config.github.host,
            token=self.config.github.token,
            timeout=self.config.http.timeout,
            verify_ssl=self.config.http.verify_ssl
        )
        return self._checked("GitHub", client)

    def create_zenhub_client(self) -> Optional[ZenHubAPIClient]:
        """Create ZenHub API client."""
        if not self.config.zenhub.token:
            self.logger.warning("ZenHub token not configured, ZenHub client unavailable")
            return None

        client = ZenHubAPIClient(
            token=self.config.zenhub.token,
            url=self.config.zenhub.url,
            timeout=self.config.http.timeout,
            verify_ssl=self.config.http.verify_ssl
        )
        return self._checked("ZenHub", client)

    def create_webhook_receiver(self) -> WebhookReceiver:
        """Create webhook receiver."""
        webhooks = self.config.webhooks
        receiver = WebhookReceiver(
            github_secret=webhooks.github_secret or None,
            port=webhooks.port,
            host=webhooks.host
        )

        self.logger.info(f"Webhook receiver created for {webhooks.host}:{webhooks.port}")
        return receiver

    def create_all_clients(self) -> Dict[str, Any]:
        """Create all available API clients."""
        clients = {}

        aha_client = self.create_aha_client()
        if aha_client:
            clients['aha'] = aha_client

        github_client = self.create_github_client()
        if github_client:
            clients['github'] = github_client

        zenhub_client = self.create_zenhub_client()
        if zenhub_client:
            clients['zenhub'] = zenhub_client

        self.logger.info(f"Created {len(clients)} API clients: {list(clients.keys())}")
        return clients
