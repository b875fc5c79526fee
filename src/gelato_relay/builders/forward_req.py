"""
ForwardRequest Builders

Two builder variants share the same setters:

    - ForwardRequestBuilder: no signer bound; ``build()`` returns an unsigned
      ``ForwardRequest``.
    - SponsoredForwardRequestBuilder: a sponsor signer is bound;
      ``await build()`` returns a ``SignedForwardRequest``.

``sponsored_by(signer)`` moves to the sponsored variant. ``sponsor_address()``
always returns the unsigned variant, dropping any bound signer.
``SponsoredForwardRequestBuilder(signer)`` starts directly in the sponsored
variant; ``from_tx()`` is only offered on the unsigned builder.

Example:
    signed = await (
        ForwardRequestBuilder()
        .target("0x61bBe925A5D646cE074369A6335e5095Ea7abB7A")
        .data("0x4b327067")
        .max_fee(10 ** 19)
        .gas(200_000)
        .nonce(0)
        .sponsored_by(signer)
        .build()
    )
"""

from typing import Any, Dict, Mapping

from ..evm.forward import ForwardRequest, SignedForwardRequest
from ..evm.signatures import BaseSigner
from .bases import RequestBuilder, fields_from_tx


def sponsor_fields(signer: BaseSigner) -> Dict[str, Any]:
    """Fields a bound sponsor signer sets: its address and, if declared, its chain id."""
    fields = {"sponsor": signer.address}
    if signer.chain_id is not None:
        fields["chain_id"] = signer.chain_id
    return fields


class _ForwardRequestFields(RequestBuilder):
    REQUIRED = ("target", "max_fee", "gas", "sponsor", "nonce")

    def enforce_sponsor_nonce(self, value: bool):
        return self._replace(enforce_sponsor_nonce=value)

    def enforce_sponsor_nonce_ordering(self, value: bool):
        return self._replace(enforce_sponsor_nonce_ordering=value)

    def sponsor_address(self, address: str) -> "ForwardRequestBuilder":
        """Set the sponsor address directly. Any bound sponsor signer is dropped."""
        builder = self._become(ForwardRequestBuilder)
        builder.__dict__.pop("_sponsor_signer", None)
        builder._fields["sponsor"] = address
        return builder

    def sponsored_by(self, signer: BaseSigner) -> "SponsoredForwardRequestBuilder":
        """
        Bind ``signer`` as sponsor.

        ``sponsor`` becomes the signer's address and, when the signer declares
        one, ``chain_id`` becomes the signer's chain id.
        """
        builder = self._become(SponsoredForwardRequestBuilder, _sponsor_signer=signer)
        builder._fields.update(sponsor_fields(signer))
        return builder

    def _request(self) -> ForwardRequest:
        self._ensure_complete()
        f = self._fields
        return ForwardRequest(
            **self._common_values(),
            sponsor=f["sponsor"],
            sponsor_chain_id=f.get("sponsor_chain_id", 1),
            nonce=f["nonce"],
            enforce_sponsor_nonce=f.get("enforce_sponsor_nonce", True),
            enforce_sponsor_nonce_ordering=f.get("enforce_sponsor_nonce_ordering", True),
        )


class ForwardRequestBuilder(_ForwardRequestFields):
    """Builder for an unsigned ``ForwardRequest``."""

    @classmethod
    def from_tx(cls, tx: Mapping[str, Any]) -> "ForwardRequestBuilder":
        """Pre-populate a builder from web3 transaction params; ``from`` becomes the sponsor."""
        return cls(**fields_from_tx(tx, "sponsor"))

    def build(self) -> ForwardRequest:
        """
        Build the request.

        Raises:
            MissingFieldsError: Listing every unset required field
        """
        return self._request()


class SponsoredForwardRequestBuilder(_ForwardRequestFields):
    """Builder with a bound sponsor signer; ``build()`` signs."""

    _sponsor_signer: BaseSigner

    def __init__(self, signer: BaseSigner, **fields: Any):
        super().__init__(**{**fields, **sponsor_fields(signer)})
        self._sponsor_signer = signer

    @property
    def signer(self) -> BaseSigner:
        return self._sponsor_signer

    async def build(self) -> SignedForwardRequest:
        """
        Build the request and sign it with the bound sponsor.

        Raises:
            MissingFieldsError: Listing every unset required field
            SigningError: If signing fails
        """
        return await self._request().sign(self._sponsor_signer)
