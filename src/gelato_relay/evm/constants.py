"""
EVM Relay Constants

Verifying contract registry and EIP-712 type definitions for relay requests.

The forwarder table ships with the relay's deployed forwarder proxies. The
MetaBox table ships empty: register deployments with ``register_meta_box()``
before signing MetaTx requests.
"""

from typing import Dict, List, Optional

from web3 import Web3

from ..schemas.bases import NATIVE_TOKEN_ADDRESS, ZERO_ADDRESS


FORWARDER_DOMAIN_NAME = "GelatoRelayForwarder"
META_BOX_DOMAIN_NAME = "GelatoMetaBox"
DOMAIN_VERSION = "V1"

EIP712_DOMAIN_FIELDS: List[Dict[str, str]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

FORWARD_REQUEST_FIELDS: List[Dict[str, str]] = [
    {"name": "chainId", "type": "uint256"},
    {"name": "target", "type": "address"},
    {"name": "data", "type": "bytes"},
    {"name": "feeToken", "type": "address"},
    {"name": "paymentType", "type": "uint256"},
    {"name": "maxFee", "type": "uint256"},
    {"name": "gas", "type": "uint256"},
    {"name": "sponsor", "type": "address"},
    {"name": "sponsorChainId", "type": "uint256"},
    {"name": "nonce", "type": "uint256"},
    {"name": "enforceSponsorNonce", "type": "bool"},
    {"name": "enforceSponsorNonceOrdering", "type": "bool"},
]

META_TX_REQUEST_FIELDS: List[Dict[str, str]] = [
    {"name": "chainId", "type": "uint256"},
    {"name": "target", "type": "address"},
    {"name": "data", "type": "bytes"},
    {"name": "feeToken", "type": "address"},
    {"name": "paymentType", "type": "uint256"},
    {"name": "maxFee", "type": "uint256"},
    {"name": "gas", "type": "uint256"},
    {"name": "user", "type": "address"},
    {"name": "sponsor", "type": "address"},
    {"name": "sponsorChainId", "type": "uint256"},
    {"name": "nonce", "type": "uint256"},
    {"name": "deadline", "type": "uint256"},
]

_DEPLOYED_FORWARDERS = {
    # Ethereum
    1: "0x5ca448e53e77499222741DcB6B3c959Fa829dAf2",
    # Kovan
    42: "0x4F36f93F58d36DcbC1E60b9bdBE213482285C482",
    # Goerli
    5: "0x61BF11e6641C289d4DA1D59dC3E03E15D2BA971c",
    # Rinkeby
    4: "0x9B79b798563e538cc326D03696B3Be38b971D282",
    # Evmos
    9001: "0x9561aCdf04C2B639dFfeCB357438e7B3eD979C5C",
    # BSC
    56: "0xeeea839E2435873adA11d5dD4CAE6032742C0445",
    # Polygon
    137: "0xc2336e796F77E4E57b6630b6dEdb01f5EE82383e",
}

FORWARDERS: Dict[int, str] = {
    chain_id: Web3.to_checksum_address(address) for chain_id, address in _DEPLOYED_FORWARDERS.items()
}

META_BOXES: Dict[int, str] = {}


def get_forwarder(chain_id: int) -> Optional[str]:
    """Forwarder proxy address for ``chain_id``, or None if not deployed there."""
    return FORWARDERS.get(chain_id)


def get_meta_box(chain_id: int) -> Optional[str]:
    """MetaBox address for ``chain_id``, or None if none is registered."""
    return META_BOXES.get(chain_id)


def register_forwarder(chain_id: int, address: str) -> None:
    """Add or override the forwarder address for a chain."""
    FORWARDERS[chain_id] = Web3.to_checksum_address(address)


def register_meta_box(chain_id: int, address: str) -> None:
    """Add or override the MetaBox address for a chain."""
    META_BOXES[chain_id] = Web3.to_checksum_address(address)


__all__ = [
    "NATIVE_TOKEN_ADDRESS",
    "ZERO_ADDRESS",
    "FORWARDER_DOMAIN_NAME",
    "META_BOX_DOMAIN_NAME",
    "DOMAIN_VERSION",
    "EIP712_DOMAIN_FIELDS",
    "FORWARD_REQUEST_FIELDS",
    "META_TX_REQUEST_FIELDS",
    "FORWARDERS",
    "META_BOXES",
    "get_forwarder",
    "get_meta_box",
    "register_forwarder",
    "register_meta_box",
]
