"""Validate configuration loading from the environment, files and token files."""

import json

import pytest

from tracker_clients.config.settings import Settings, SystemConfig, read_token_file


ENV_VARS = [
    "AHA_URL", "AHA_TOKEN", "GITHUB_HOST", "GITHUB_TOKEN", "ZENHUB_URL", "ZENHUB_TOKEN",
    "HTTP_TIMEOUT", "HTTP_VERIFY_SSL", "WEBHOOK_HOST", "WEBHOOK_PORT",
    "GITHUB_WEBHOOK_SECRET", "LOG_LEVEL", "LOG_FILE_PATH",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run every test in an empty directory with no tracker variables set."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestFromEnv:

    def test_defaults(self):
        config = SystemConfig.from_env()

        assert config.github.host == "github.com"
        assert config.github.token == ""
        assert config.zenhub.url == "https://api.zenhub.com"
        assert config.http.timeout == 30
        assert config.http.verify_ssl is True
        assert config.webhooks.port == 8080
        assert config.validate()

    def test_reads_variables(self, monkeypatch):
        monkeypatch.setenv("AHA_URL", "https://company.aha.io")
        monkeypatch.setenv("AHA_TOKEN", "aha-env")
        monkeypatch.setenv("GITHUB_HOST", "github.example.com")
        monkeypatch.setenv("GITHUB_TOKEN", "gh-env")
        monkeypatch.setenv("HTTP_TIMEOUT", "5")
        monkeypatch.setenv("HTTP_VERIFY_SSL", "False")
        monkeypatch.setenv("WEBHOOK_PORT", "9000")
        monkeypatch.setenv("GITHUB_WEBHOOK_SECRET", "s3cret")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        config = SystemConfig.from_env()

        assert config.aha.url == "https://company.aha.io"
        assert config.aha.token == "aha-env"
        assert config.github.host == "github.example.com"
        assert config.github.token == "gh-env"
        assert config.http.timeout == 5
        assert config.http.verify_ssl is False
        assert config.webhooks.port == 9000
        assert config.webhooks.github_secret == "s3cret"
        assert config.logging.level == "DEBUG"

    def test_token_files_fill_missing_tokens(self, monkeypatch, clean_env):
        (clean_env / ".gitToken").write_text("gh-file\n")
        (clean_env / ".zenToken").write_text("  zen-file  ")
        (clean_env / ".ahaToken").write_text("aha-file")
        monkeypatch.setenv("AHA_TOKEN", "aha-env")

        config = SystemConfig.from_env()

        assert config.github.token == "gh-file"
        assert config.zenhub.token == "zen-file"
        assert config.aha.token == "aha-env"

    def test_read_token_file_from_directory(self, tmp_path):
        other = tmp_path / "secrets"
        other.mkdir()
        (other / ".gitToken").write_text("abc")

        assert read_token_file(".gitToken", str(other)) == "abc"
        assert read_token_file(".gitToken") == ""


class TestFromFile:

    def test_sections(self, clean_env):
        path = clean_env / "config.json"
        path.write_text(json.dumps({
            "aha": {"url": "https://company.aha.io", "token": "aha-file"},
            "github": {"host": "ghe.example.com"},
            "webhooks": {"port": 9100, "unknown": "ignored"},
            "logging": "not a section",
        }))

        config = SystemConfig.from_file(str(path))

        assert config.aha.url == "https://company.aha.io"
        assert config.github.host == "ghe.example.com"
        assert config.webhooks.port == 9100
        assert not hasattr(config.webhooks, "unknown")
        assert config.logging.level == "INFO"

    def test_missing_file_falls_back_to_env(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "gh-env")

        config = SystemConfig.from_file("does-not-exist.json")

        assert config.github.token == "gh-env"

    def test_invalid_json_falls_back_to_env(self, monkeypatch, clean_env):
        path = clean_env / "config.json"
        path.write_text("{not json")
        monkeypatch.setenv("ZENHUB_TOKEN", "zen-env")

        config = SystemConfig.from_file(str(path))

        assert config.zenhub.token == "zen-env"

    def test_settings_uses_file_when_present(self, clean_env):
        path = clean_env / "config.json"
        path.write_text(json.dumps({"github": {"token": "gh-file"}}))

        settings = Settings(str(path))

        assert settings.github_config.token == "gh-file"
        assert Settings().github_config.token == ""


class TestValidate:

    def test_aha_token_needs_url(self):
        config = SystemConfig()
        config.aha.token = "aha"

        assert not config.validate()

        config.aha.url = "https://company.aha.io"
        assert config.validate()

    @pytest.mark.parametrize("section, name, value", [
        ("github", "host", ""),
        ("http", "timeout", 0),
        ("webhooks", "port", 70000),
        ("logging", "level", "LOUD"),
    ])
    def test_invalid_values(self, section, name, value):
        config = SystemConfig()
        setattr(getattr(config, section), name, value)

        assert not config.validate()
