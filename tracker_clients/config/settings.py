"""Configuration settings and environment management."""

import os
from typing import Any, Dict, Optional
from dataclasses import dataclass, field, fields
import json
import logging


TOKEN_FILES = {
    "aha": ".ahaToken",
    "github": ".gitToken",
    "zenhub": ".zenToken",
}


def read_token_file(name: str, directory: Optional[str] = None) -> str:
    """Read a token file such as ``.gitToken``; missing files give ``""``."""
    path = os.path.join(directory or os.getcwd(), name)
    try:
        with open(path, 'r') as f:
            return f.read().strip()
    except FileNotFoundError:
        return ""


@dataclass
class AhaConfig:
    """Aha account configuration."""
    url: str = ""
    token: str = ""


@dataclass
class GitHubConfig:
    """GitHub configuration; host is github.com or a GitHub Enterprise host."""
    host: str = "github.com"
    token: str = ""


@dataclass
class ZenHubConfig:
    """ZenHub configuration."""
    url: str = "https://api.zenhub.com"
    token: str = ""


@dataclass
class HTTPConfig:
    """Settings shared by every client."""
    timeout: int = 30  # seconds
    verify_ssl: bool = True


@dataclass
class WebhookConfig:
    """Webhook receiver configuration."""
    host: str = "0.0.0.0"
    port: int = 8080
    github_secret: str = ""


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10485760  # 10MB
    backup_count: int = 5


def _update(section: Any, values: Dict[str, Any]) -> None:
    names = {item.name for item in fields(section)}
    for key, value in values.items():
        if key in names:
            setattr(section, key, value)


@dataclass
class SystemConfig:
    """Main system configuration."""
    aha: AhaConfig = field(default_factory=AhaConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    zenhub: ZenHubConfig = field(default_factory=ZenHubConfig)
    http: HTTPConfig = field(default_factory=HTTPConfig)
    webhooks: WebhookConfig = field(default_factory=WebhookConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> 'SystemConfig':
        """Create configuration from environment variables and token files."""
        config = cls()

        # Aha configuration
        config.aha.url = os.getenv('AHA_URL', config.aha.url)
        config.aha.token = os.getenv('AHA_TOKEN', config.aha.token)

        # GitHub configuration
        config.github.host = os.getenv('GITHUB_HOST', config.github.host)
        config.github.token = os.getenv('GITHUB_TOKEN', config.github.token)

        # ZenHub configuration
        config.zenhub.url = os.getenv('ZENHUB_URL', config.zenhub.url)
        config.zenhub.token = os.getenv('ZENHUB_TOKEN', config.zenhub.token)

        # HTTP configuration
        config.http.timeout = int(os.getenv('HTTP_TIMEOUT', str(config.http.timeout)))
        config.http.verify_ssl = os.getenv('HTTP_VERIFY_SSL', 'true').lower() == 'true'

        # Webhook configuration
        config.webhooks.host = os.getenv('WEBHOOK_HOST', config.webhooks.host)
        config.webhooks.port = int(os.getenv('WEBHOOK_PORT', str(config.webhooks.port)))
        config.webhooks.github_secret = os.getenv('GITHUB_WEBHOOK_SECRET', config.webhooks.github_secret)

        # Logging configuration
        config.logging.level = os.getenv('LOG_LEVEL', config.logging.level)
        config.logging.file_path = os.getenv('LOG_FILE_PATH', config.logging.file_path)

        config.load_token_files()
        return config

    @classmethod
    def from_file(cls, config_path: str) -> 'SystemConfig':
        """Load configuration from JSON file."""
        try:
            with open(config_path, 'r') as f:
                config_data = json.load(f)

            config = cls()

            for section in fields(config):
                values = config_data.get(section.name)
                if isinstance(values, dict):
                    _update(getattr(config, section.name), values)

            config.load_token_files()
            return config

        except FileNotFoundError:
            logging.warning(f"Configuration file {config_path} not found, using defaults")
            return cls.from_env()
        except json.JSONDecodeError as e:
            logging.error(f"Invalid JSON in configuration file {config_path}: {e}")
            return cls.from_env()

    def load_token_files(self, directory: Optional[str] = None) -> None:
        """Fill tokens that are still empty from the token files."""
        if not self.aha.token:
            self.aha.token = read_token_file(TOKEN_FILES["aha"], directory)
        if not self.github.token:
            self.github.token = read_token_file(TOKEN_FILES["github"], directory)
        if not self.zenhub.token:
            self.zenhub.token = read_token_file(TOKEN_FILES["zenhub"], directory)

    def validate(self) -> bool:
        """Validate configuration settings."""
        errors = []

        if self.aha.token and not self.aha.url:
            errors.append("Aha URL is required when an Aha token is set")

        if not self.github.host:
            errors.append("GitHub host is required")

        if self.http.timeout <= 0:
            errors.append("HTTP timeout must be positive")

        if not 0 < self.webhooks.port < 65536:
            errors.append(f"Invalid webhook port: {self.webhooks.port}")

        if self.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            for error in errors:
                logging.error(f"Configuration validation error: {error}")
            return False

        return True


class Settings:
    """Main settings class for the application."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize settings.

        Args:
            config_path: Optional path to configuration file
        """
        if config_path and os.path.exists(config_path):
            self.config = SystemConfig.from_file(config_path)
        else:
            self.config = SystemConfig.from_env()

    @property
    def aha_config(self) -> AhaConfig:
        return self.config.aha

    @property
    def github_config(self) -> GitHubConfig:
        return self.config.github

    @property
    def zenhub_config(self) -> ZenHubConfig:
        return self.config.zenhub

    @property
    def http_config(self) -> HTTPConfig:
        return self.config.http

    @property
    def webhook_config(self) -> WebhookConfig:
        return self.config.webhooks

    @property
    def logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return self.config.logging

    def validate(self) -> bool:
        """Validate all configuration settings."""
        return self.config.validate()
