"""
Request Builder Test Suite

Covers required-field reporting, default values, signer binding transitions
between builder variants, and pre-population from transaction parameters.
"""

import pytest

from conftest import CALL_DATA, KOVAN_CHAIN_ID, SPONSOR_ADDRESS, TARGET, USER_ADDRESS
from gelato_relay.builders import (
    ForwardRequestBuilder,
    MetaTxRequestBuilder,
    MetaTxRequestBuilderWithSponsor,
    MetaTxRequestBuilderWithUser,
    MetaTxRequestBuilderWithUserAndSponsor,
    SponsoredForwardRequestBuilder,
)
from gelato_relay.engine.exceptions import MissingFieldsError
from gelato_relay.evm.forward import ForwardRequest, SignedForwardRequest
from gelato_relay.evm.meta_tx import MetaTxRequest, SignedMetaTxRequest
from gelato_relay.schemas.bases import FeeToken, PaymentType


def forward_builder() -> ForwardRequestBuilder:
    return (
        ForwardRequestBuilder()
        .target(TARGET)
        .data(CALL_DATA)
        .max_fee(10000000000000000000)
        .gas(200000)
        .nonce(0)
    )


def meta_builder() -> MetaTxRequestBuilder:
    return (
        MetaTxRequestBuilder()
        .target(TARGET)
        .data(CALL_DATA)
        .max_fee(10 ** 18)
        .gas(200000)
        .nonce(0)
    )


class TestForwardRequestBuilder:

    def test_empty_builder_reports_all_missing(self):
        with pytest.raises(MissingFieldsError) as exc_info:
            ForwardRequestBuilder().build()
        assert exc_info.value.missing == ["target", "max_fee", "gas", "sponsor", "nonce"]

    def test_reports_only_missing(self):
        builder = ForwardRequestBuilder().target(TARGET).gas(1)
        assert builder.missing_keys() == ["max_fee", "sponsor", "nonce"]
        with pytest.raises(MissingFieldsError) as exc_info:
            builder.build()
        assert "max_fee, sponsor, nonce" in str(exc_info.value)

    def test_defaults(self):
        request = forward_builder().sponsor_address(SPONSOR_ADDRESS).build()

        assert isinstance(request, ForwardRequest)
        assert request.chain_id == 1
        assert request.fee_token == FeeToken.native()
        assert request.payment_type == PaymentType.ASYNC_GAS_TANK
        assert request.sponsor_chain_id == 1
        assert request.enforce_sponsor_nonce is True
        assert request.enforce_sponsor_nonce_ordering is True

    def test_explicit_values_override_defaults(self):
        request = (
            forward_builder()
            .sponsor_address(SPONSOR_ADDRESS)
            .chain_id(137)
            .sponsor_chain_id(56)
            .payment_type(PaymentType.SYNC_GAS_TANK)
            .enforce_sponsor_nonce(False)
            .enforce_sponsor_nonce_ordering(False)
            .build()
        )
        assert request.chain_id == 137
        assert request.sponsor_chain_id == 56
        assert request.payment_type == PaymentType.SYNC_GAS_TANK
        assert request.enforce_sponsor_nonce is False
        assert request.enforce_sponsor_nonce_ordering is False

    def test_setters_do_not_mutate(self):
        base = ForwardRequestBuilder().target(TARGET)
        base.gas(5)
        assert base.get("gas") is None

    def test_sponsored_by_binds_address_and_chain(self, sponsor_signer):
        builder = forward_builder().chain_id(1).sponsored_by(sponsor_signer)

        assert isinstance(builder, SponsoredForwardRequestBuilder)
        assert builder.get("sponsor") == SPONSOR_ADDRESS
        assert builder.get("chain_id") == KOVAN_CHAIN_ID
        assert builder.signer is sponsor_signer

    def test_rebinding_overrides(self, sponsor_signer, other_signer):
        builder = forward_builder().sponsored_by(sponsor_signer).sponsored_by(other_signer)
        assert builder.get("sponsor") == other_signer.address
        assert builder.get("chain_id") == 137
        assert builder.signer is other_signer

    def test_sponsor_address_drops_signer(self, sponsor_signer):
        builder = forward_builder().sponsored_by(sponsor_signer).sponsor_address(USER_ADDRESS)
        assert type(builder) is ForwardRequestBuilder
        assert not hasattr(builder, "signer")
        assert builder.build().sponsor == USER_ADDRESS

    @pytest.mark.asyncio
    async def test_sponsored_build_signs(self, sponsor_signer):
        signed = await (
            forward_builder()
            .sponsor_chain_id(KOVAN_CHAIN_ID)
            .enforce_sponsor_nonce(False)
            .enforce_sponsor_nonce_ordering(False)
            .sponsored_by(sponsor_signer)
            .build()
        )
        assert isinstance(signed, SignedForwardRequest)
        assert signed.sponsor == SPONSOR_ADDRESS
        assert signed.chain_id == KOVAN_CHAIN_ID

    @pytest.mark.asyncio
    async def test_sponsored_build_reports_missing(self, sponsor_signer):
        with pytest.raises(MissingFieldsError) as exc_info:
            await ForwardRequestBuilder().sponsored_by(sponsor_signer).build()
        assert exc_info.value.missing == ["target", "max_fee", "gas", "nonce"]

    def test_from_tx(self):
        tx = {"to": TARGET, "gas": 21000, "data": "0xdeadbeef", "nonce": 7, "from": SPONSOR_ADDRESS}
        builder = ForwardRequestBuilder.from_tx(tx)

        assert builder.missing_keys() == ["max_fee"]
        request = builder.max_fee(1).build()
        assert request.target == TARGET
        assert request.gas == 21000
        assert request.data == bytes.fromhex("deadbeef")
        assert request.nonce == 7
        assert request.sponsor == SPONSOR_ADDRESS

    def test_from_tx_leaves_absent_fields_unset(self):
        builder = ForwardRequestBuilder.from_tx({"to": TARGET})
        assert builder.missing_keys() == ["max_fee", "gas", "sponsor", "nonce"]


class TestMetaTxRequestBuilder:

    def test_empty_builder_reports_all_missing(self):
        with pytest.raises(MissingFieldsError) as exc_info:
            MetaTxRequestBuilder().build()
        assert exc_info.value.missing == ["target", "max_fee", "gas", "user", "nonce"]

    def test_defaults_without_sponsor(self):
        request = meta_builder().user_address(USER_ADDRESS).build()

        assert isinstance(request, MetaTxRequest)
        assert request.chain_id == 1
        assert request.sponsor is None
        assert request.sponsor_chain_id is None
        assert request.deadline is None

    def test_sponsor_chain_id_defaults_when_sponsored(self):
        request = meta_builder().user_address(USER_ADDRESS).sponsor_address(SPONSOR_ADDRESS).build()
        assert request.sponsor == SPONSOR_ADDRESS
        assert request.sponsor_chain_id == 1

    def test_variant_transitions(self, user_signer, sponsor_signer):
        base = meta_builder()
        with_user = base.with_user(user_signer)
        with_sponsor = base.sponsored_by(sponsor_signer)
        both = with_user.sponsored_by(sponsor_signer)

        assert type(with_user) is MetaTxRequestBuilderWithUser
        assert type(with_sponsor) is MetaTxRequestBuilderWithSponsor
        assert type(both) is MetaTxRequestBuilderWithUserAndSponsor
        assert type(with_sponsor.with_user(user_signer)) is MetaTxRequestBuilderWithUserAndSponsor

        assert type(both.user_address(USER_ADDRESS)) is MetaTxRequestBuilderWithSponsor
        assert type(both.sponsor_address(SPONSOR_ADDRESS)) is MetaTxRequestBuilderWithUser
        assert type(with_user.user_address(USER_ADDRESS)) is MetaTxRequestBuilder
        assert type(with_sponsor.sponsor_address(SPONSOR_ADDRESS)) is MetaTxRequestBuilder

    def test_with_user_sets_user(self, user_signer):
        builder = meta_builder().with_user(user_signer)
        assert builder.get("user") == USER_ADDRESS
        assert builder.get("chain_id") is None

    def test_sponsor_only_builds_unsigned(self, sponsor_signer):
        request = meta_builder().user_address(USER_ADDRESS).sponsored_by(sponsor_signer).build()
        assert isinstance(request, MetaTxRequest)
        assert request.sponsor == SPONSOR_ADDRESS
        assert request.chain_id == KOVAN_CHAIN_ID

    @pytest.mark.asyncio
    async def test_user_build_signs(self, meta_box, user_signer):
        signed = await meta_builder().chain_id(KOVAN_CHAIN_ID).with_user(user_signer).build()
        assert isinstance(signed, SignedMetaTxRequest)
        assert signed.user == USER_ADDRESS
        assert not signed.is_sponsored

    @pytest.mark.asyncio
    async def test_user_and_sponsor_build_signs(self, meta_box, user_signer, sponsor_signer):
        signed = await meta_builder().with_user(user_signer).sponsored_by(sponsor_signer).build()
        assert signed.is_sponsored
        assert signed.sponsor == SPONSOR_ADDRESS
        assert signed.chain_id == KOVAN_CHAIN_ID

    def test_from_tx_populates_user(self):
        builder = MetaTxRequestBuilder.from_tx({"to": TARGET, "from": USER_ADDRESS, "gas": 50000, "nonce": 1})
        assert builder.missing_keys() == ["max_fee"]
        assert builder.max_fee(1).build().user == USER_ADDRESS

    def test_every_setter_on_every_variant(self, user_signer, sponsor_signer):
        fee_token = FeeToken(TARGET)
        variants = [
            meta_builder(),
            meta_builder().with_user(user_signer),
            meta_builder().sponsored_by(sponsor_signer),
            meta_builder().with_user(user_signer).sponsored_by(sponsor_signer),
        ]
        for builder in variants:
            updated = (
                builder
                .chain_id(5)
                .target(USER_ADDRESS)
                .data("0x01")
                .fee_token(fee_token)
                .payment_type(PaymentType.SYNC_GAS_TANK)
                .max_fee(7)
                .gas(8)
                .sponsor_chain_id(9)
                .nonce(10)
                .deadline(11)
            )
            assert type(updated) is type(builder)
            assert updated.get("chain_id") == 5
            assert updated.get("target") == USER_ADDRESS
            assert updated.get("data") == "0x01"
            assert updated.get("fee_token") == fee_token
            assert updated.get("payment_type") == PaymentType.SYNC_GAS_TANK
            assert updated.get("max_fee") == 7
            assert updated.get("gas") == 8
            assert updated.get("sponsor_chain_id") == 9
            assert updated.get("nonce") == 10
            assert updated.get("deadline") == 11
            assert builder.get("deadline") is None

            readdressed = updated.user_address(SPONSOR_ADDRESS).sponsor_address(USER_ADDRESS)
            assert type(readdressed) is MetaTxRequestBuilder
            request = readdressed.build()
            assert request.user == SPONSOR_ADDRESS
            assert request.sponsor == USER_ADDRESS
            assert request.sponsor_chain_id == 9
            assert request.deadline == 11

    def test_address_setters_keep_other_signer(self, user_signer, sponsor_signer):
        both = meta_builder().with_user(user_signer).sponsored_by(sponsor_signer)

        user_dropped = both.user_address(SPONSOR_ADDRESS)
        assert user_dropped.get("user") == SPONSOR_ADDRESS
        assert user_dropped._sponsor_signer is sponsor_signer
        assert user_dropped._user_signer is None

        sponsor_dropped = both.sponsor_address(USER_ADDRESS)
        assert sponsor_dropped.get("sponsor") == USER_ADDRESS
        assert sponsor_dropped._user_signer is user_signer
        assert sponsor_dropped._sponsor_signer is None

    @pytest.mark.asyncio
    async def test_deadline_is_signed(self, meta_box, user_signer):
        signed = await meta_builder().chain_id(KOVAN_CHAIN_ID).deadline(1700000000).with_user(user_signer).build()
        assert signed.deadline == 1700000000
        assert signed.to_wire()["deadline"] == 1700000000


class TestSignerBoundConstructors:

    def test_sponsored_forward_builder(self, sponsor_signer):
        builder = SponsoredForwardRequestBuilder(sponsor_signer, target=TARGET, gas=1)
        assert builder.signer is sponsor_signer
        assert builder.get("sponsor") == SPONSOR_ADDRESS
        assert builder.get("chain_id") == KOVAN_CHAIN_ID
        assert builder.missing_keys() == ["max_fee", "nonce"]

    def test_meta_builder_with_user(self, user_signer):
        builder = MetaTxRequestBuilderWithUser(user_signer, target=TARGET)
        assert builder.get("user") == USER_ADDRESS
        assert builder._user_signer is user_signer
        assert builder.missing_keys() == ["max_fee", "gas", "nonce"]

    def test_meta_builder_with_sponsor(self, sponsor_signer):
        builder = MetaTxRequestBuilderWithSponsor(sponsor_signer)
        assert builder.get("sponsor") == SPONSOR_ADDRESS
        assert builder.get("chain_id") == KOVAN_CHAIN_ID
        assert builder._sponsor_signer is sponsor_signer

    @pytest.mark.asyncio
    async def test_meta_builder_with_user_and_sponsor(self, meta_box, user_signer, sponsor_signer):
        builder = MetaTxRequestBuilderWithUserAndSponsor(
            user_signer, sponsor_signer, target=TARGET, max_fee=1, gas=1, nonce=0,
        )
        signed = await builder.build()
        assert signed.user == USER_ADDRESS
        assert signed.sponsor == SPONSOR_ADDRESS
        assert signed.is_sponsored

    @pytest.mark.parametrize("variant", [
        SponsoredForwardRequestBuilder,
        MetaTxRequestBuilderWithUser,
        MetaTxRequestBuilderWithSponsor,
        MetaTxRequestBuilderWithUserAndSponsor,
    ])
    def test_from_tx_only_on_unsigned_builders(self, variant):
        assert not hasattr(variant, "from_tx")

    @pytest.mark.asyncio
    async def test_forward_from_tx_then_sponsor(self, sponsor_signer):
        tx = {"to": TARGET, "gas": 21000, "nonce": 0, "from": USER_ADDRESS}
        signed = await ForwardRequestBuilder.from_tx(tx).max_fee(1).sponsored_by(sponsor_signer).build()
        assert signed.sponsor == SPONSOR_ADDRESS
        assert signed.chain_id == KOVAN_CHAIN_ID

    @pytest.mark.asyncio
    async def test_meta_from_tx_then_sign(self, meta_box, user_signer, sponsor_signer):
        tx = {"to": TARGET, "gas": 21000, "nonce": 2, "from": USER_ADDRESS, "data": "0x01"}
        signed = await (
            MetaTxRequestBuilder.from_tx(tx)
            .max_fee(1)
            .with_user(user_signer)
            .sponsored_by(sponsor_signer)
            .build()
        )
        assert signed.user == USER_ADDRESS
        assert signed.nonce == 2
        assert signed.data == b"\x01"
        assert signed.is_sponsored
