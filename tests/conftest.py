"""
Shared fixtures and mock data for the relay SDK test suite.

Key Components:
    - Fixed sponsor/user keys and the Kovan forward request used for
      regression vectors
    - A MetaBox registration fixture (the MetaBox table ships empty)
    - Helpers building task status payloads for poller and client tests
"""

from typing import Any, Dict, Optional

import pytest
from eth_account import Account
from web3 import Web3

from gelato_relay.evm import constants
from gelato_relay.evm.forward import ForwardRequest
from gelato_relay.evm.signatures import LocalSigner
from gelato_relay.schemas.bases import FeeToken, PaymentType
from gelato_relay.schemas.status import TransactionStatus


# ========================================================================
# Keys and addresses
# ========================================================================

SPONSOR_KEY = "9cb3a530d61728e337290409d967db069f5219279f89e5ddb5ae4af76a8da5f4"
SPONSOR_ADDRESS = Web3.to_checksum_address("0x4e4f0d95bc1a4275b748a63221796080b1aa5c10")

USER_KEY = "0x" + "11" * 32
USER_ADDRESS = Account.from_key(USER_KEY).address

OTHER_KEY = "0x" + "22" * 32

TARGET = Web3.to_checksum_address("0x61bbe925a5d646ce074369a6335e5095ea7abb7a")
CALL_DATA = "0x4b327067000000000000000000000000eeeeeeeeeeeeeeeeeeeeeeeeaeeeeeeeeeeeeeeeee"

KOVAN_CHAIN_ID = 42
KOVAN_DOMAIN_SEPARATOR = "0x1b927f522830945610cf8f0521ef8b3f69352936e1b0920968dcad9cf1e30762"
KOVAN_SPONSOR_SIGNATURE = (
    "0x23c272c0cba2b897de0fd8fe87d419f0f273c82ef10917520b733da889688b1c"
    "6fec89412c6f121fccbc30ce89b20a3de2f405018f1ac1249b9ff705fdb62a521b"
)

META_BOX_ADDRESS = "0x1234567890123456789012345678901234567890"


# ========================================================================
# Fixtures
# ========================================================================

@pytest.fixture
def sponsor_signer() -> LocalSigner:
    return LocalSigner(SPONSOR_KEY, chain_id=KOVAN_CHAIN_ID)


@pytest.fixture
def user_signer() -> LocalSigner:
    return LocalSigner(USER_KEY)


@pytest.fixture
def other_signer() -> LocalSigner:
    return LocalSigner(OTHER_KEY, chain_id=137)


@pytest.fixture
def kovan_request() -> ForwardRequest:
    return ForwardRequest(
        chain_id=KOVAN_CHAIN_ID,
        target=TARGET,
        data=CALL_DATA,
        fee_token=FeeToken.native(),
        payment_type=PaymentType.ASYNC_GAS_TANK,
        max_fee=10000000000000000000,
        gas=200000,
        sponsor=SPONSOR_ADDRESS,
        sponsor_chain_id=KOVAN_CHAIN_ID,
        nonce=0,
        enforce_sponsor_nonce=False,
        enforce_sponsor_nonce_ordering=False,
    )


@pytest.fixture
def meta_box(monkeypatch) -> str:
    """Register a MetaBox on Kovan for the duration of a test."""
    monkeypatch.setitem(constants.META_BOXES, KOVAN_CHAIN_ID, META_BOX_ADDRESS)
    return META_BOX_ADDRESS


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for name in (
        "GELATO_RELAY_URL",
        "GELATO_POLLING_INTERVAL",
        "GELATO_TASK_RETRIES",
        "GELATO_REQUEST_TIMEOUT",
        "GELATO_SPONSOR_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


# ========================================================================
# Status payload helpers
# ========================================================================

def status_payload(
    task_state: str = "CheckPending",
    last_check: Any = None,
    execution: Optional[Dict[str, Any]] = None,
    task_id: str = "0xabc",
) -> Dict[str, Any]:
    payload = {
        "service": "GelatoMetaBox",
        "chain": "kovan",
        "taskId": task_id,
        "taskState": task_state,
        "created_at": "2022-05-01T10:00:00.000Z",
        "lastExecution": "2022-05-01T10:00:05.000Z",
    }
    if last_check is not None:
        payload["lastCheck"] = last_check
    if execution is not None:
        payload["execution"] = execution
    return payload


def check_payload(task_state: str, message: Optional[str] = None, reason: Optional[str] = None) -> Dict[str, Any]:
    check = {"taskState": task_state, "created_at": "2022-05-01T10:00:04.000Z"}
    if message is not None:
        check["message"] = message
    if reason is not None:
        check["reason"] = reason
    return check


EXECUTION_PAYLOAD = {
    "status": "success",
    "transactionHash": "0x" + "ab" * 32,
    "blockNumber": 31337,
    "created_at": "2022-05-01T10:00:05.000Z",
}


def make_status(task_state: str = "CheckPending", **kwargs) -> TransactionStatus:
    return TransactionStatus.model_validate(status_payload(task_state, **kwargs))
