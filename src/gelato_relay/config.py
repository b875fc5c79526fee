"""
Relay SDK Configuration

Environment-aware defaults for the relay client and task poller. Values are
read from the process environment (a ``.env`` file in the working directory is
loaded on import) and can always be overridden by explicit constructor
arguments.

Environment Variables:
    - GELATO_RELAY_URL: Relay base URL (default ``https://relay.gelato.digital/``)
    - GELATO_POLLING_INTERVAL: Seconds between task status checks (default 15)
    - GELATO_TASK_RETRIES: Undefined-status responses tolerated per task (default 5)
    - GELATO_REQUEST_TIMEOUT: HTTP timeout in seconds (default 30)
    - GELATO_SPONSOR_KEY: Private key used by ``LocalSigner.from_env()``
"""

import os
from typing import Optional

import dotenv
from pydantic import BaseModel, Field

from .engine.exceptions import ConfigurationError

dotenv.load_dotenv()

DEFAULT_RELAY_URL = "https://relay.gelato.digital/"
DEFAULT_POLLING_INTERVAL = 15.0
DEFAULT_RETRIES = 5
DEFAULT_REQUEST_TIMEOUT = 30.0


class RelaySettings(BaseModel):
    """Resolved runtime settings for the relay SDK."""
    base_url: str = Field(default=DEFAULT_RELAY_URL, description="Relay base URL")
    polling_interval: float = Field(default=DEFAULT_POLLING_INTERVAL, ge=0, description="Seconds between status checks")
    retries: int = Field(default=DEFAULT_RETRIES, ge=0, description="Undefined-status responses tolerated")
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0, description="HTTP timeout (seconds)")


def _read_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"Environment variable {name} must be numeric, got {raw!r}")


def get_settings() -> RelaySettings:
    """
    Build ``RelaySettings`` from the environment.

    Returns:
        RelaySettings: Settings with environment overrides applied.

    Raises:
        ConfigurationError: If a numeric variable cannot be parsed or is out of range.
    """
    try:
        return RelaySettings(
            base_url=os.getenv("GELATO_RELAY_URL") or DEFAULT_RELAY_URL,
            polling_interval=_read_number("GELATO_POLLING_INTERVAL", DEFAULT_POLLING_INTERVAL, float),
            retries=_read_number("GELATO_TASK_RETRIES", DEFAULT_RETRIES, int),
            request_timeout=_read_number("GELATO_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float),
        )
    except ValueError as e:
        # pydantic.ValidationError subclasses ValueError
        raise ConfigurationError(f"Invalid relay settings: {e}") from e


def get_private_key_from_env() -> Optional[str]:
    """
    Load the sponsor private key from environment variables.

    Returns:
        str: Private key from ``GELATO_SPONSOR_KEY``, or None if not configured
    """
    return os.getenv("GELATO_SPONSOR_KEY")
