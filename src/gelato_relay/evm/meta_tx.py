"""
Meta-Transaction Requests

A ``MetaTxRequest`` carries a user's intent to call ``data`` on ``target``.
The user always signs. An optional sponsor co-signs to take on the relay fee,
up to ``max_fee``; without a sponsor the user pays. Both sign EIP-712 typed
data in the ``GelatoMetaBox`` domain.

Requests are immutable. Sponsor fields must be final before the user signs:
``sign()`` therefore collects the sponsor signature first and the user
signature last, over the same request value.
"""

import logging
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import ConfigDict, Field, field_serializer, model_serializer, model_validator
from web3 import Web3

from ..engine.exceptions import InappropriatePaymentTypeError, UnknownMetaBoxError, WrongSignerError
from ..schemas.bases import Address, CanonicalModel, DecimalInt, FeeToken, HexData, PaymentType, ZERO_ADDRESS
from .constants import DOMAIN_VERSION, META_BOX_DOMAIN_NAME, META_TX_REQUEST_FIELDS, get_meta_box
from .schemas import RsvSignature
from .signatures import BaseSigner, sign_request
from .standards import EIP712Domain, EIP712Struct

logger = logging.getLogger(__name__)


class MetaTxRequest(CanonicalModel, EIP712Struct):
    """
    Unsigned meta-transaction request.

    Attributes:
        chain_id: Chain the call executes on
        target: dApp contract to call
        data: Call payload for ``target``
        fee_token: Asset the relay is paid in
        payment_type: Payment mode; Synchronous is rejected at signing
        max_fee: Maximum fee the payer will pay
        gas: Gas limit
        user: Account whose intent this request is
        sponsor: Optional account paying the relay instead of the user
        sponsor_chain_id: Chain holding the sponsor's Gas Tank balance
        nonce: User nonce in the MetaBox contract
        deadline: Unix timestamp after which the request is void; None or 0
            means no deadline
    """

    model_config = ConfigDict(frozen=True)

    chain_id: int = Field(..., description="Chain id")
    target: Address = Field(..., description="Target contract address")
    data: HexData = Field(default=b"", description="Call payload")
    fee_token: FeeToken = Field(default_factory=FeeToken.native, description="Fee asset")
    payment_type: PaymentType = Field(default=PaymentType.ASYNC_GAS_TANK, description="Payment type")
    max_fee: DecimalInt = Field(..., description="Maximum fee")
    gas: DecimalInt = Field(..., description="Gas limit")
    user: Address = Field(..., description="User address")
    sponsor: Optional[Address] = Field(default=None, description="Sponsor address")
    sponsor_chain_id: Optional[int] = Field(default=None, description="Sponsor Gas Tank chain id")
    nonce: int = Field(default=0, description="User nonce")
    deadline: Optional[int] = Field(default=None, description="Expiry timestamp")

    @model_validator(mode="after")
    def _sponsor_needs_chain_id(self) -> "MetaTxRequest":
        if self.sponsor is not None and self.sponsor_chain_id is None:
            raise ValueError("sponsor_chain_id is required when sponsor is set")
        return self

    @classmethod
    def primary_type(cls) -> str:
        return "MetaTxRequest"

    @classmethod
    def eip712_fields(cls) -> List[Dict[str, str]]:
        return META_TX_REQUEST_FIELDS

    def domain(self) -> EIP712Domain:
        """
        ``GelatoMetaBox`` domain for this request's chain.

        Raises:
            UnknownMetaBoxError: If no MetaBox is registered for ``chain_id``
        """
        verifying_contract = get_meta_box(self.chain_id)
        if verifying_contract is None:
            raise UnknownMetaBoxError(self.chain_id)
        return EIP712Domain(
            name=META_BOX_DOMAIN_NAME,
            version=DOMAIN_VERSION,
            chainId=self.chain_id,
            verifyingContract=verifying_contract,
        )

    def eip712_message(self) -> Dict[str, Any]:
        return {
            "chainId": self.chain_id,
            "target": self.target,
            "data": self.data,
            "feeToken": self.fee_token.address,
            "paymentType": int(self.payment_type),
            "maxFee": self.max_fee,
            "gas": self.gas,
            "user": self.user,
            "sponsor": self.sponsor or ZERO_ADDRESS,
            "sponsorChainId": self.sponsor_chain_id or 0,
            "nonce": self.nonce,
            "deadline": self.deadline or 0,
        }

    def _check_payment_type(self) -> None:
        if self.payment_type == PaymentType.SYNCHRONOUS:
            raise InappropriatePaymentTypeError()

    def add_signatures(
        self,
        user_signature: RsvSignature,
        sponsor_signature: Optional[RsvSignature] = None,
    ) -> "SignedMetaTxRequest":
        """Attach existing signatures without verifying them."""
        return SignedMetaTxRequest(
            request=self,
            user_signature=user_signature,
            sponsor_signature=sponsor_signature,
        )

    async def user_sign(self, signer: BaseSigner) -> RsvSignature:
        """
        Produce the user's signature over this request.

        Raises:
            InappropriatePaymentTypeError: If ``payment_type`` is Synchronous
            WrongSignerError: If the signer is not ``user``
            UnknownMetaBoxError: If no MetaBox is registered for ``chain_id``
            SignerError: If the signer fails
        """
        self._check_payment_type()
        actual = Web3.to_checksum_address(signer.address)
        if actual != self.user:
            raise WrongSignerError(expected=self.user, actual=actual)
        return await sign_request(signer, self)

    async def sponsor_sign(self, signer: BaseSigner) -> Tuple["MetaTxRequest", RsvSignature]:
        """
        Produce the sponsor's signature.

        If ``sponsor`` is unset it is taken from the signer (and
        ``sponsor_chain_id`` defaults to ``chain_id``). The returned request is
        the one actually signed; the user must sign that value.

        Returns:
            Tuple of the signed request and the sponsor signature

        Raises:
            InappropriatePaymentTypeError: If ``payment_type`` is Synchronous
            WrongSignerError: If ``sponsor`` is set to a different address
            UnknownMetaBoxError: If no MetaBox is registered for ``chain_id``
            SignerError: If the signer fails
        """
        self._check_payment_type()
        actual = Web3.to_checksum_address(signer.address)
        request = self
        if request.sponsor is None:
            request = request.model_copy(update={
                "sponsor": actual,
                "sponsor_chain_id": request.sponsor_chain_id or request.chain_id,
            })
        if actual != request.sponsor:
            raise WrongSignerError(expected=request.sponsor, actual=actual)
        signature = await sign_request(signer, request)
        return request, signature

    async def sign(self, user: BaseSigner, sponsor: Optional[BaseSigner] = None) -> "SignedMetaTxRequest":
        """
        Sign with the user and, optionally, a sponsor.

        The sponsor signs first so the user's signature covers the final
        sponsor fields.

        Args:
            user: Signer whose address must equal ``user``
            sponsor: Optional co-signing sponsor

        Returns:
            SignedMetaTxRequest: Request with both signatures attached
        """
        request = self
        sponsor_signature = None
        if sponsor is not None:
            request, sponsor_signature = await request.sponsor_sign(sponsor)
        user_signature = await request.user_sign(user)
        logger.debug(
            "Signed MetaTxRequest for user %s on chain %s (sponsored: %s)",
            request.user, request.chain_id, sponsor_signature is not None,
        )
        return request.add_signatures(user_signature, sponsor_signature)


class SignedMetaTxRequest(CanonicalModel):
    """
    MetaTxRequest with the user's and optional sponsor's signatures.

    Request fields are readable directly on the signed value. On the wire the
    request is flattened: ``typeId``, the request fields, ``userSignature``
    and, when present, ``sponsorSignature``.
    """

    model_config = ConfigDict(frozen=True)

    type_id: Literal["MetaTxRequest"] = Field(default="MetaTxRequest", description="Request kind discriminator")
    request: MetaTxRequest
    user_signature: RsvSignature
    sponsor_signature: Optional[RsvSignature] = None

    @model_validator(mode="before")
    @classmethod
    def _nest_request(cls, data: Any) -> Any:
        if isinstance(data, dict) and "request" not in data:
            data = dict(data)
            nested = {}
            for wire_key, name in (
                ("typeId", "type_id"),
                ("userSignature", "user_signature"),
                ("sponsorSignature", "sponsor_signature"),
            ):
                for key in (wire_key, name):
                    if key in data:
                        nested[name] = data.pop(key)
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

    @field_serializer("user_signature", "sponsor_signature", when_used="json")
    def _packed_signature(self, signature: Optional[RsvSignature]) -> Optional[str]:
        return signature.to_packed_hex() if signature is not None else None

    def __getattr__(self, item: str) -> Any:
        if not item.startswith("_"):
            request = self.__dict__.get("request")
            if request is not None and item in type(request).model_fields:
                return getattr(request, item)
        return super().__getattr__(item)

    @property
    def is_sponsored(self) -> bool:
        return self.sponsor_signature is not None
