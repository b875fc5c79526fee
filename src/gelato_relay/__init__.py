"""
Gelato Relay SDK

Build, sign (EIP-712), submit and track gas-sponsored relay requests.

Example:
    from gelato_relay import ForwardRequestBuilder, GelatoClient, LocalSigner

    signer = LocalSigner.from_env(chain_id=137)
    signed = await (
        ForwardRequestBuilder()
        .target(target)
        .data(calldata)
        .max_fee(max_fee)
        .gas(200_000)
        .nonce(0)
        .sponsored_by(signer)
        .build()
    )
    async with GelatoClient() as client:
        task = await client.submit_forward_request(signed)
        execution = await task
"""

from .builders import (
    ForwardRequestBuilder,
    MetaTxRequestBuilder,
    MetaTxRequestBuilderWithSponsor,
    MetaTxRequestBuilderWithUser,
    MetaTxRequestBuilderWithUserAndSponsor,
    SponsoredForwardRequestBuilder,
)
from .clients import GelatoClient
from .config import RelaySettings, get_settings
from .engine import *  # noqa: F401,F403
from .engine import __all__ as _exceptions_all
from .engine.task import GelatoTask, PollState
from .evm import (
    BaseSigner,
    ForwardRequest,
    LocalSigner,
    MetaTxRequest,
    RsvSignature,
    SignedForwardRequest,
    SignedMetaTxRequest,
    register_forwarder,
    register_meta_box,
)
from .schemas import (
    Check,
    Execution,
    FeeToken,
    ForwardCall,
    PaymentType,
    RelayRequest,
    TaskState,
    TransactionStatus,
)

__version__ = "0.1.0"

__all__ = [
    "ForwardRequestBuilder",
    "SponsoredForwardRequestBuilder",
    "MetaTxRequestBuilder",
    "MetaTxRequestBuilderWithUser",
    "MetaTxRequestBuilderWithSponsor",
    "MetaTxRequestBuilderWithUserAndSponsor",
    "GelatoClient",
    "GelatoTask",
    "PollState",
    "RelaySettings",
    "get_settings",
    "BaseSigner",
    "LocalSigner",
    "ForwardRequest",
    "SignedForwardRequest",
    "MetaTxRequest",
    "SignedMetaTxRequest",
    "RsvSignature",
    "register_forwarder",
    "register_meta_box",
    "Check",
    "Execution",
    "FeeToken",
    "ForwardCall",
    "PaymentType",
    "RelayRequest",
    "TaskState",
    "TransactionStatus",
] + list(_exceptions_all)
