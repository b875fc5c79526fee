"""
HTTP Request/Response Schema Models for the Gelato Relay API

This module defines the Pydantic models exchanged with the relay over HTTP
that are not EIP-712 signed requests. Signed requests live in
``gelato_relay.evm``; task status records live in ``schemas.status``.

Endpoints covered:
1. POST ``metabox-relays/{chain_id}``: submit ForwardCall / signed requests
2. POST ``relays/{chain_id}``: submit a legacy relay transaction
3. GET ``relays/``: list supported chains
4. GET ``oracles/{chain_id}/estimate``: estimate the relay fee

All models inherit from CanonicalModel for camelCase wire names.
"""

from typing import List

from pydantic import Field

from .bases import Address, CanonicalModel, DecimalInt, FeeToken, HexData


# ============================================================================
# Requests
# ============================================================================

class ForwardCall(CanonicalModel):
    """Unsigned relay call paid synchronously by the target contract.

    Attributes:
        chain_id: Chain the call executes on.
        target: Contract receiving the call.
        data: Call payload.
        fee_token: Asset the target pays the relay in.
        gas: Gas limit for the call.
    """
    chain_id: int = Field(..., description="Chain id")
    target: Address = Field(..., description="Target contract address")
    data: HexData = Field(default=b"", description="Call payload")
    fee_token: FeeToken = Field(default_factory=FeeToken.native, description="Fee asset")
    gas: DecimalInt = Field(..., description="Gas limit")


class RelayRequest(CanonicalModel):
    """Legacy relay transaction body for POST ``relays/{chain_id}``.

    Attributes:
        dest: Contract receiving the call.
        data: Call payload.
        token: Asset the relayer is paid in.
        relayer_fee: Fee the relayer receives, in the token's smallest unit.
    """
    dest: Address = Field(..., description="Destination contract address")
    data: HexData = Field(default=b"", description="Call payload")
    token: Address = Field(..., description="Payment token address")
    relayer_fee: DecimalInt = Field(..., description="Relayer fee")


# ============================================================================
# Responses
# ============================================================================

class RelayResponse(CanonicalModel):
    """Response to any submission: the relay task id."""
    task_id: str = Field(..., description="Relay task id (opaque hash)")


class RelayChainsResponse(CanonicalModel):
    """Response listing supported chain ids as decimal strings."""
    relays: List[str]

    def chain_ids(self) -> List[int]:
        return [int(chain) for chain in self.relays]


class EstimatedFeeResponse(CanonicalModel):
    """Fee estimate in the payment token's smallest unit."""
    estimated_fee: DecimalInt = Field(..., description="Estimated relay fee")


class RelayErrorResponse(CanonicalModel):
    """Error shape returned by the relay: ``{"message": ...}``."""
    message: str


__all__ = [
    "ForwardCall",
    "RelayRequest",
    "RelayResponse",
    "RelayChainsResponse",
    "EstimatedFeeResponse",
    "RelayErrorResponse",
]
