"""
Forward Requests

A ``ForwardRequest`` asks the relay to call ``data`` on ``target``, paid by a
sponsor's Gas Tank (payment types 1-3). The sponsor signs it as EIP-712
typed data in the ``GelatoRelayForwarder`` domain. Replay protection beyond
the sponsor nonce is expected to live in the target contract.

Signing produces a ``SignedForwardRequest``. Both types are immutable; a new
sponsor signature always produces a new value.
"""

import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import ConfigDict, Field, field_serializer, model_serializer, model_validator
from web3 import Web3

from ..engine.exceptions import InappropriatePaymentTypeError, UnknownForwarderError, WrongSignerError
from ..schemas.bases import Address, CanonicalModel, DecimalInt, FeeToken, HexData, PaymentType
from .constants import DOMAIN_VERSION, FORWARD_REQUEST_FIELDS, FORWARDER_DOMAIN_NAME, get_forwarder
from .schemas import RsvSignature
from .signatures import BaseSigner, sign_request
from .standards import EIP712Domain, EIP712Struct

logger = logging.getLogger(__name__)


class ForwardRequest(CanonicalModel, EIP712Struct):
    """
    Unsigned relay forward request.

    Attributes:
        chain_id: Chain the call executes on
        target: dApp contract to call
        data: Call payload for ``target``
        fee_token: Asset the relay is paid in
        payment_type: Gas Tank payment mode; Synchronous is rejected at signing
        max_fee: Maximum fee the sponsor will pay
        gas: Gas limit
        sponsor: Account paying the relay
        sponsor_chain_id: Chain holding the sponsor's Gas Tank balance
        nonce: Sponsor nonce; may be 0 when ``enforce_sponsor_nonce`` is false
        enforce_sponsor_nonce: Enforce replay protection via the sponsor nonce
        enforce_sponsor_nonce_ordering: Enforce ordering among concurrent
            requests; None is signed as true
    """

    model_config = ConfigDict(frozen=True)

    chain_id: int = Field(..., description="Chain id")
    target: Address = Field(..., description="Target contract address")
    data: HexData = Field(default=b"", description="Call payload")
    fee_token: FeeToken = Field(default_factory=FeeToken.native, description="Fee asset")
    payment_type: PaymentType = Field(default=PaymentType.ASYNC_GAS_TANK, description="Payment type")
    max_fee: DecimalInt = Field(..., description="Maximum fee")
    gas: DecimalInt = Field(..., description="Gas limit")
    sponsor: Address = Field(..., description="Sponsor address")
    sponsor_chain_id: int = Field(..., description="Sponsor Gas Tank chain id")
    nonce: int = Field(..., description="Sponsor nonce")
    enforce_sponsor_nonce: bool = Field(..., description="Enforce sponsor nonce")
    enforce_sponsor_nonce_ordering: Optional[bool] = Field(default=True, description="Enforce nonce ordering")

    @classmethod
    def primary_type(cls) -> str:
        return "ForwardRequest"

    @classmethod
    def eip712_fields(cls) -> List[Dict[str, str]]:
        return FORWARD_REQUEST_FIELDS

    def domain(self) -> EIP712Domain:
        """
        ``GelatoRelayForwarder`` domain for this request's chain.

        Raises:
            UnknownForwarderError: If no forwarder is registered for ``chain_id``
        """
        verifying_contract = get_forwarder(self.chain_id)
        if verifying_contract is None:
            raise UnknownForwarderError(self.chain_id)
        return EIP712Domain(
            name=FORWARDER_DOMAIN_NAME,
            version=DOMAIN_VERSION,
            chainId=self.chain_id,
            verifyingContract=verifying_contract,
        )

    def eip712_message(self) -> Dict[str, Any]:
        ordering = self.enforce_sponsor_nonce_ordering
        return {
            "chainId": self.chain_id,
            "target": self.target,
            "data": self.data,
            "feeToken": self.fee_token.address,
            "paymentType": int(self.payment_type),
            "maxFee": self.max_fee,
            "gas": self.gas,
            "sponsor": self.sponsor,
            "sponsorChainId": self.sponsor_chain_id,
            "nonce": self.nonce,
            "enforceSponsorNonce": self.enforce_sponsor_nonce,
            "enforceSponsorNonceOrdering": True if ordering is None else ordering,
        }

    def add_signature(self, sponsor_signature: RsvSignature) -> "SignedForwardRequest":
        """Attach an existing sponsor signature without verifying it."""
        return SignedForwardRequest(request=self, sponsor_signature=sponsor_signature)

    async def sign(self, signer: BaseSigner) -> "SignedForwardRequest":
        """
        Sign the request as its sponsor.

        Args:
            signer: Signer whose address must equal ``sponsor``

        Returns:
            SignedForwardRequest: This request with the sponsor signature attached

        Raises:
            InappropriatePaymentTypeError: If ``payment_type`` is Synchronous
            WrongSignerError: If the signer is not the declared sponsor
            UnknownForwarderError: If no forwarder is registered for ``chain_id``
            SignerError: If the signer fails
        """
        if self.payment_type == PaymentType.SYNCHRONOUS:
            raise InappropriatePaymentTypeError()
        actual = Web3.to_checksum_address(signer.address)
        if actual != self.sponsor:
            raise WrongSignerError(expected=self.sponsor, actual=actual)

        signature = await sign_request(signer, self)
        logger.debug("Sponsor %s signed ForwardRequest on chain %s", self.sponsor, self.chain_id)
        return self.add_signature(signature)

    async def sponsor_with(self, signer: BaseSigner) -> "SignedForwardRequest":
        """
        Make ``signer`` the sponsor and sign.

        ``sponsor`` is overwritten with the signer's address; all other
        validation is the same as ``sign()``.
        """
        request = self.model_copy(update={"sponsor": Web3.to_checksum_address(signer.address)})
        return await request.sign(signer)


class SignedForwardRequest(CanonicalModel):
    """
    ForwardRequest with the sponsor's EIP-712 signature, ready for dispatch.

    Request fields are readable directly on the signed value
    (``signed.target``, ``signed.max_fee``). On the wire the request is
    flattened: ``typeId``, the request fields, then ``sponsorSignature``.
    """

    model_config = ConfigDict(frozen=True)

    type_id: Literal["ForwardRequest"] = Field(default="ForwardRequest", description="Request kind discriminator")
    request: ForwardRequest
    sponsor_signature: RsvSignature

    @model_validator(mode="before")
    @classmethod
    def _nest_request(cls, data: Any) -> Any:
        if isinstance(data, dict) and "request" not in data:
            data = dict(data)
            nested = {}
            for key in ("typeId", "type_id"):
                if key in data:
                    nested["type_id"] = data.pop(key)
            for key in ("sponsorSignature", "sponsor_signature"):
                if key in data:
                    nested["sponsor_signature"] = data.pop(key)
            nested["request"] = data
            return nested
        return data

    @model_serializer(mode="wrap")
    def _flatten_request(self, handler) -> Dict[str, Any]:
        flat = {}
        for key, value in handler(self).items():
            if key == "request":
                flat.update(value)
            else:
                flat[key] = value
        return flat

    @field_serializer("sponsor_signature", when_used="json")
    def _packed_signature(self, signature: RsvSignature) -> str:
        return signature.to_packed_hex()

    def __getattr__(self, item: str) -> Any:
        if not item.startswith("_"):
            request = self.__dict__.get("request")
            if request is not None and item in type(request).model_fields:
                return getattr(request, item)
        return super().__getattr__(item)

    async def responsor(self, signer: BaseSigner) -> "SignedForwardRequest":
        """
        Re-sign the inner request with a new sponsor.

        The existing signature is discarded; the result must be resubmitted.
        """
        return await self.request.sponsor_with(signer)
