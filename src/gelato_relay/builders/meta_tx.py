"""
MetaTxRequest Builders

Four builder variants, one per combination of bound signers:

    - MetaTxRequestBuilder: no signers; build() returns a MetaTxRequest.
    - MetaTxRequestBuilderWithUser: user signer; await build() returns a
      user-signed SignedMetaTxRequest.
    - MetaTxRequestBuilderWithSponsor: sponsor signer only; build() returns a
      MetaTxRequest with the sponsor fields filled in.
    - MetaTxRequestBuilderWithUserAndSponsor: both signers; await build()
      returns a co-signed SignedMetaTxRequest.

``with_user(signer)`` / ``sponsored_by(signer)`` bind a signer and move to the
matching variant. ``user_address()`` / ``sponsor_address()`` set the address
directly and drop the corresponding bound signer. The signer-bound variants
take their signers as constructor arguments; ``from_tx()`` is only offered on
the unsigned builder.
"""

from typing import Any, Mapping, Optional

from ..evm.meta_tx import MetaTxRequest, SignedMetaTxRequest
from ..evm.signatures import BaseSigner
from .bases import RequestBuilder, fields_from_tx
from .forward_req import sponsor_fields


class _MetaTxRequestFields(RequestBuilder):
    REQUIRED = ("target", "max_fee", "gas", "user", "nonce")

    _user_signer: Optional[BaseSigner] = None
    _sponsor_signer: Optional[BaseSigner] = None

    def deadline(self, value: int):
        return self._replace(deadline=value)

    def _rebind(
        self,
        user_signer: Optional[BaseSigner],
        sponsor_signer: Optional[BaseSigner],
        **updates: Any
    ):
        variant = _VARIANTS[(user_signer is not None, sponsor_signer is not None)]
        builder = self._become(variant, _user_signer=user_signer, _sponsor_signer=sponsor_signer)
        builder._fields.update(updates)
        return builder

    def user_address(self, address: str):
        """Set the user address directly. Any bound user signer is dropped."""
        return self._rebind(None, self._sponsor_signer, user=address)

    def with_user(self, signer: BaseSigner):
        """Bind ``signer`` as the user; ``user`` becomes its address."""
        return self._rebind(signer, self._sponsor_signer, user=signer.address)

    def sponsor_address(self, address: str):
        """Set the sponsor address directly. Any bound sponsor signer is dropped."""
        return self._rebind(self._user_signer, None, sponsor=address)

    def sponsored_by(self, signer: BaseSigner):
        """
        Bind ``signer`` as sponsor.

        ``sponsor`` becomes the signer's address and, when the signer declares
        one, ``chain_id`` becomes the signer's chain id.
        """
        return self._rebind(self._user_signer, signer, **sponsor_fields(signer))

    def _request(self) -> MetaTxRequest:
        self._ensure_complete()
        f = self._fields
        sponsor = f.get("sponsor")
        return MetaTxRequest(
            **self._common_values(),
            user=f["user"],
            sponsor=sponsor,
            sponsor_chain_id=f.get("sponsor_chain_id", 1) if sponsor is not None else None,
            nonce=f.get("nonce", 0),
            deadline=f.get("deadline"),
        )


class MetaTxRequestBuilder(_MetaTxRequestFields):
    """Builder for an unsigned ``MetaTxRequest``."""

    @classmethod
    def from_tx(cls, tx: Mapping[str, Any]) -> "MetaTxRequestBuilder":
        """Pre-populate a builder from web3 transaction params; ``from`` becomes the user."""
        return cls(**fields_from_tx(tx, "user"))

    def build(self) -> MetaTxRequest:
        """
        Build the request.

        Raises:
            MissingFieldsError: Listing every unset required field
        """
        return self._request()


class MetaTxRequestBuilderWithUser(_MetaTxRequestFields):
    """Builder with a bound user signer; ``build()`` collects the user signature."""

    def __init__(self, user_signer: BaseSigner, **fields: Any):
        super().__init__(**{**fields, "user": user_signer.address})
        self._user_signer = user_signer

    async def build(self) -> SignedMetaTxRequest:
        """
        Build the request and sign it as the user.

        Raises:
            MissingFieldsError: Listing every unset required field
            SigningError: If signing fails
        """
        return await self._request().sign(self._user_signer)


class MetaTxRequestBuilderWithSponsor(_MetaTxRequestFields):
    """
    Builder with a bound sponsor signer but no user signer.

    A signed MetaTx request always needs the user's signature, so ``build()``
    returns the unsigned request with the sponsor fields filled in. Bind a
    user with ``with_user()`` to get a co-signed request instead.
    """

    def __init__(self, sponsor_signer: BaseSigner, **fields: Any):
        super().__init__(**{**fields, **sponsor_fields(sponsor_signer)})
        self._sponsor_signer = sponsor_signer

    def build(self) -> MetaTxRequest:
        return self._request()


class MetaTxRequestBuilderWithUserAndSponsor(_MetaTxRequestFields):
    """Builder with both signers bound; ``build()`` collects both signatures."""

    def __init__(self, user_signer: BaseSigner, sponsor_signer: BaseSigner, **fields: Any):
        super().__init__(**{**fields, **sponsor_fields(sponsor_signer), "user": user_signer.address})
        self._user_signer = user_signer
        self._sponsor_signer = sponsor_signer

    async def build(self) -> SignedMetaTxRequest:
        """
        Build the request, sign it as sponsor, then as user.

        Raises:
            MissingFieldsError: Listing every unset required field
            SigningError: If either signature fails
        """
        return await self._request().sign(self._user_signer, self._sponsor_signer)


_VARIANTS = {
    (False, False): MetaTxRequestBuilder,
    (True, False): MetaTxRequestBuilderWithUser,
    (False, True): MetaTxRequestBuilderWithSponsor,
    (True, True): MetaTxRequestBuilderWithUserAndSponsor,
}
