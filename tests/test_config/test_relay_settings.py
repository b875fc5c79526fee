"""
Settings and environment loading tests.
"""

import pytest

from conftest import SPONSOR_ADDRESS, SPONSOR_KEY
from gelato_relay.config import (
    DEFAULT_POLLING_INTERVAL,
    DEFAULT_RELAY_URL,
    DEFAULT_RETRIES,
    DEFAULT_REQUEST_TIMEOUT,
    get_settings,
)
from gelato_relay.engine.exceptions import ConfigurationError, SignerError
from gelato_relay.evm.signatures import LocalSigner


def test_defaults():
    settings = get_settings()
    assert settings.base_url == DEFAULT_RELAY_URL
    assert settings.polling_interval == DEFAULT_POLLING_INTERVAL
    assert settings.retries == DEFAULT_RETRIES
    assert settings.request_timeout == DEFAULT_REQUEST_TIMEOUT


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GELATO_RELAY_URL", "http://localhost:3000/")
    monkeypatch.setenv("GELATO_POLLING_INTERVAL", "0.5")
    monkeypatch.setenv("GELATO_TASK_RETRIES", "12")
    monkeypatch.setenv("GELATO_REQUEST_TIMEOUT", "3")

    settings = get_settings()
    assert settings.base_url == "http://localhost:3000/"
    assert settings.polling_interval == 0.5
    assert settings.retries == 12
    assert settings.request_timeout == 3.0


def test_blank_values_fall_back(monkeypatch):
    monkeypatch.setenv("GELATO_TASK_RETRIES", "  ")
    assert get_settings().retries == DEFAULT_RETRIES


@pytest.mark.parametrize("name,value", [
    ("GELATO_POLLING_INTERVAL", "soon"),
    ("GELATO_TASK_RETRIES", "2.5"),
    ("GELATO_TASK_RETRIES", "-1"),
    ("GELATO_REQUEST_TIMEOUT", "0"),
])
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError):
        get_settings()


def test_signer_from_env(monkeypatch):
    monkeypatch.setenv("GELATO_SPONSOR_KEY", SPONSOR_KEY)
    signer = LocalSigner.from_env(chain_id=5)
    assert signer.address == SPONSOR_ADDRESS
    assert signer.chain_id == 5


def test_signer_from_env_missing():
    with pytest.raises(ConfigurationError):
        LocalSigner.from_env()


def test_invalid_private_key():
    with pytest.raises(SignerError):
        LocalSigner("not-a-key")
