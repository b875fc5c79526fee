"""
Base Schema Models for the Gelato Relay SDK

This module defines the base model and the reusable annotated field types that
every request, response and status model is built from. It keeps the wire
format rules in one place:

    - camelCase JSON keys (``chain_id`` -> ``chainId``)
    - addresses in EIP-55 checksum form
    - byte strings as ``0x``-prefixed hex
    - fee and gas quantities as decimal strings

Core Types:
    - CanonicalModel: Pydantic base model with camelCase aliases and canonical JSON
    - Address: 20-byte account address, normalised to checksum form
    - HexData: Arbitrary bytes, accepted and serialised as 0x hex
    - DecimalInt: Integer quantity, serialised as a decimal string
    - FeeToken: Immutable wrapper around the fee asset address
    - PaymentType: Relay fee payment mode (numeric tags 0-3)

Dependencies:
    - pydantic: For data validation and serialization
    - web3 / eth-utils: For checksum formatting and hex decoding
"""

import json
from enum import IntEnum
from typing import Annotated, Any, Dict

from eth_utils import to_bytes
from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer, RootModel
from pydantic.alias_generators import to_camel
from web3 import Web3


NATIVE_TOKEN_ADDRESS = Web3.to_checksum_address("0x" + "ee" * 20)
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def _to_checksum(value: Any) -> str:
    if isinstance(value, FeeToken):
        value = value.root
    try:
        return Web3.to_checksum_address(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid address {value!r}: {e}")


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        if value in ("", "0x", "0X"):
            return b""
        digits = value[2:] if value[:2] in ("0x", "0X") else value
        if len(digits) % 2:
            raise ValueError(f"Hex data must have an even number of digits, got {value!r}")
        try:
            return to_bytes(hexstr=value)
        except ValueError as e:
            raise ValueError(f"Invalid hex data {value!r}: {e}")
    raise ValueError(f"Expected bytes or hex string, got {type(value).__name__}")


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("Boolean is not a valid quantity")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Quantity must be integral, got {value}")
        return int(value)
    if isinstance(value, dict) and "hex" in value:
        # ethers BigNumber encoding: {"type": "BigNumber", "hex": "0x..."}
        value = value["hex"]
    if isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            return int(text, 16)
        return int(text)
    raise ValueError(f"Expected integer quantity, got {type(value).__name__}")


def _to_int(value: Any) -> int:
    quantity = _parse_int(value)
    if quantity < 0:
        raise ValueError(f"Quantity must not be negative, got {quantity}")
    return quantity


Address = Annotated[str, BeforeValidator(_to_checksum)]

HexData = Annotated[
    bytes,
    BeforeValidator(_to_bytes),
    PlainSerializer(lambda b: "0x" + b.hex(), return_type=str, when_used="json"),
]

DecimalInt = Annotated[
    int,
    BeforeValidator(_to_int),
    PlainSerializer(lambda i: str(i), return_type=str, when_used="json"),
]


class CanonicalModel(BaseModel):
    """
    Pydantic base model with camelCase aliases and canonical JSON serialization.

    Field names are snake_case in Python and camelCase on the wire. Models can
    be populated with either form. ``to_canonical_json()`` produces a compact,
    key-sorted JSON string suitable for logging and comparisons.

    Example:
        class MyModel(CanonicalModel):
            chain_id: int

        model = MyModel(chainId=1)
        model.to_canonical_json()  # '{"chainId":1}'
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    def to_canonical_json(self) -> str:
        """
        Convert model to a compact, key-sorted JSON string using wire aliases.

        Returns:
            str: JSON string with sorted keys and no extra whitespace.
        """
        data = self.to_wire()
        return json.dumps(
            data,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )

    def to_wire(self) -> Dict[str, Any]:
        """
        Convert model to its JSON wire representation (camelCase keys, JSON types).

        Returns:
            Dict[str, Any]: JSON-compatible dictionary.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to dictionary representation.

        Returns:
            Dict[str, Any]: Dictionary with all model fields.
        """
        return self.model_dump()


class PaymentType(IntEnum):
    """
    Relay fee payment mode. Serialises as its numeric tag.

    Members:
        SYNCHRONOUS: The target contract pays the relay inline. No signature.
        ASYNC_GAS_TANK: Sponsor has a pre-funded balance, possibly on another chain.
        SYNC_GAS_TANK: Sponsor balance on the same chain, debited during execution.
        SYNC_PULL_FEE: Sponsor pre-approves a pull allowance.
    """
    SYNCHRONOUS = 0
    ASYNC_GAS_TANK = 1
    SYNC_GAS_TANK = 2
    SYNC_PULL_FEE = 3


class FeeToken(RootModel[Address]):
    """
    Asset used to pay relay fees.

    Wraps a checksummed address. The sentinel ``0xEeee...EEeE`` denotes the
    chain's native asset. Instances are immutable and compare structurally.

    Example:
        FeeToken.native().is_native  # True
        FeeToken("0x6b175474e89094c44da98b954eedeac495271d0f").address
    """

    model_config = ConfigDict(frozen=True)

    @classmethod
    def native(cls) -> "FeeToken":
        return cls(NATIVE_TOKEN_ADDRESS)

    @property
    def address(self) -> str:
        return self.root

    @property
    def is_native(self) -> bool:
        return self.root == NATIVE_TOKEN_ADDRESS

    def __str__(self) -> str:
        return self.root
