"""Tests for Settings.from_env."""

import pytest
from dotenv import load_dotenv

from shared.config import DEFAULT_API_URL, Settings
from shared.errors import ConfigurationError

TDX_VARS = [
    "TDX_KEY", "TDX_API_URL", "TDX_APP_ID", "TDX_TOKEN_CAPACITY", "TDX_REFILL_WINDOW",
    "TDX_HTTP_TIMEOUT", "TDX_ATTR_NUM_STUDENTS", "TDX_ATTR_NUM_STAFF", "TDX_ATTR_NUM_PUBLIC",
    "TDX_ATTR_NUM_OTHERS", "TDX_ATTR_TECH_COORDINATOR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in TDX_VARS:
        monkeypatch.delenv(name, raising=False)


class TestFromEnv:
    def test_defaults(self):
        settings = Settings.from_env(load_env_file=False)
        assert settings.api_key is None
        assert settings.api_url == DEFAULT_API_URL
        assert settings.app_id == "641"
        assert settings.token_capacity == 50
        assert settings.refill_window == 60.0
        assert settings.attribute_ids.num_students is None

    def test_reads_variables(self, monkeypatch):
        monkeypatch.setenv("TDX_KEY", "abc123")
        monkeypatch.setenv("TDX_APP_ID", "77")
        monkeypatch.setenv("TDX_TOKEN_CAPACITY", "10")
        monkeypatch.setenv("TDX_ATTR_NUM_STAFF", "4521")
        monkeypatch.setenv("TDX_ATTR_TECH_COORDINATOR", "4600")

        settings = Settings.from_env(load_env_file=False)

        assert settings.api_key == "abc123"
        assert settings.app_id == "77"
        assert settings.token_capacity == 10
        assert settings.attribute_ids.num_staff == 4521
        assert settings.attribute_ids.tech_coordinator == 4600

    def test_empty_key_is_unset(self, monkeypatch):
        monkeypatch.setenv("TDX_KEY", "")
        assert Settings.from_env(load_env_file=False).api_key is None

    def test_bad_number(self, monkeypatch):
        monkeypatch.setenv("TDX_TOKEN_CAPACITY", "fifty")
        with pytest.raises(ConfigurationError, match="TDX_TOKEN_CAPACITY"):
            Settings.from_env(load_env_file=False)

    def test_loads_dotenv_file(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("TDX_KEY=from-dotenv\n", encoding="utf-8")
        # register TDX_KEY with monkeypatch so the loaded value is removed afterwards
        monkeypatch.setenv("TDX_KEY", "placeholder")
        monkeypatch.delenv("TDX_KEY")
        monkeypatch.setattr("shared.config.load_dotenv", lambda: load_dotenv(env_file))

        assert Settings.from_env().api_key == "from-dotenv"

    def test_key_not_in_repr(self, monkeypatch):
        monkeypatch.setenv("TDX_KEY", "very-secret")
        assert "very-secret" not in repr(Settings.from_env(load_env_file=False))
