"""
EVM Signers

Signer capability used by requests and builders. A signer exposes its
address, optionally the chain id it is bound to, and signs EIP-712 typed
requests, returning an ``RsvSignature``.

``BaseSigner`` is the interface; wrap any key-management backend (hardware
wallet, KMS, remote signer) by implementing it. ``LocalSigner`` signs with an
in-process private key via ``eth_account``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from eth_account import Account

from ..config import get_private_key_from_env
from ..engine.exceptions import ConfigurationError, SignerError, SigningError
from .schemas import RsvSignature
from .standards import EIP712Struct

logger = logging.getLogger(__name__)


class BaseSigner(ABC):
    """Signing capability for relay requests."""

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksummed address of the signing key."""

    @property
    def chain_id(self) -> Optional[int]:
        """Chain id the signer is bound to, if any."""
        return None

    @abstractmethod
    async def sign_typed_data(self, payload: EIP712Struct) -> RsvSignature:
        """
        Sign ``payload`` as EIP-712 typed data.

        Raises:
            SignerError: If the underlying key-management operation fails.
        """


class LocalSigner(BaseSigner):
    """
    Signer backed by a private key held in process memory.

    Args:
        private_key: Hex private key (0x prefix optional)
        chain_id: Chain id to bind; builders copy it into ``chain_id`` when the
            signer is bound as sponsor

    Raises:
        SignerError: If ``private_key`` is not a valid secp256k1 key

    Example:
        signer = LocalSigner("0x...", chain_id=137)
        signed = await request.sign(signer)
    """

    def __init__(self, private_key: str, chain_id: Optional[int] = None):
        try:
            self._account = Account.from_key(private_key)
        except (TypeError, ValueError) as e:
            raise SignerError("Invalid private key") from e
        self._chain_id = chain_id

    @classmethod
    def from_env(cls, chain_id: Optional[int] = None) -> "LocalSigner":
        """
        Create a signer from ``GELATO_SPONSOR_KEY``.

        Raises:
            ConfigurationError: If the variable is not set
        """
        private_key = get_private_key_from_env()
        if not private_key:
            raise ConfigurationError("GELATO_SPONSOR_KEY is not set")
        return cls(private_key, chain_id=chain_id)

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def chain_id(self) -> Optional[int]:
        return self._chain_id

    def with_chain_id(self, chain_id: int) -> "LocalSigner":
        signer = LocalSigner.__new__(LocalSigner)
        signer._account = self._account
        signer._chain_id = chain_id
        return signer

    async def sign_typed_data(self, payload: EIP712Struct) -> RsvSignature:
        typed_data = payload.to_typed_data()
        try:
            signed = Account.sign_typed_data(self._account.key, full_message=typed_data)
        except Exception as e:
            raise SignerError(f"Failed to sign {payload.primary_type()}: {e}") from e

        logger.debug("Signed %s with %s", payload.primary_type(), self.address)
        return RsvSignature.from_vrs(signed.v, signed.r, signed.s)

    def __repr__(self) -> str:
        return f"LocalSigner(address={self.address!r}, chain_id={self._chain_id!r})"


async def sign_request(signer: BaseSigner, payload: EIP712Struct) -> RsvSignature:
    """
    Sign ``payload`` with ``signer``, normalising signer failures.

    The payload's domain is resolved first, so an unregistered verifying
    contract surfaces as its own error rather than as a signer failure.

    Raises:
        UnknownForwarderError / UnknownMetaBoxError: If the domain cannot be resolved
        SignerError: If the signer fails for any other reason
    """
    payload.domain()
    try:
        return await signer.sign_typed_data(payload)
    except SigningError:
        raise
    except Exception as e:
        raise SignerError(f"Signer {signer.address} failed: {e}") from e
