"""Tests for settings and the credential file."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from huelink.config import load_settings
from huelink.repo.credential_store import CredentialStore

ENV_VARS = ("HUE_BRIDGE_IP", "HUE_USERNAME", "APP_KEY", "HUE_LIGHT_BLOCK_MS", "HUE_GROUP_BLOCK_MS",
            "HUE_OTHER_BLOCK_MS", "HUE_REQUEST_TIMEOUT_MS", "HUELINK_HOME")


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings()

    assert settings.bridge_ip == ""
    assert settings.username == ""
    assert (settings.light_block_ms, settings.group_block_ms, settings.other_block_ms) == (50, 100, 200)
    assert settings.request_timeout_ms == 200
    assert settings.home == Path.home() / ".huelink"


def test_environment(clean_env, tmp_path):
    clean_env.setenv("HUE_BRIDGE_IP", "192.168.1.20")
    clean_env.setenv("APP_KEY", "old-key")
    clean_env.setenv("HUE_GROUP_BLOCK_MS", "250")
    clean_env.setenv("HUE_REQUEST_TIMEOUT_MS", "1000")
    clean_env.setenv("HUELINK_HOME", str(tmp_path))

    settings = load_settings()

    assert settings.bridge_ip == "192.168.1.20"
    assert settings.username == "old-key"
    assert settings.group_block_ms == 250
    assert settings.request_timeout_ms == 1000
    assert settings.home == tmp_path


def test_overrides_win(clean_env):
    clean_env.setenv("HUE_BRIDGE_IP", "192.168.1.20")
    clean_env.setenv("HUE_USERNAME", "new")
    clean_env.setenv("APP_KEY", "old")

    settings = load_settings(bridge_ip="10.0.0.9", username=None)

    assert settings.bridge_ip == "10.0.0.9"
    assert settings.username == "new"


def test_invalid_values(clean_env):
    clean_env.setenv("HUE_REQUEST_TIMEOUT_MS", "0")

    with pytest.raises(ValidationError):
        load_settings()


def test_credential_store(tmp_path):
    store = CredentialStore(tmp_path / "nested" / ".huelink")

    assert store.read() == ""
    store.write("abc123")
    assert store.path.read_text() == "abc123\n"
    assert store.read() == "abc123"
    assert store.clear() is True
    assert store.clear() is False
    assert store.read() == ""


def test_credential_store_reads_first_line_only(tmp_path):
    (tmp_path / "username").write_text("  first  \nsecond\n")

    assert CredentialStore(tmp_path).read() == "first"
