"""
EIP-712 Typed Data

Typed-data documents for the relay's two request kinds. Hashing is left to
``eth_account.messages.encode_typed_data``: the domain separator and struct
hash are the header and body of the ``SignableMessage`` it produces.

``EIP712Struct`` is the mixin request models implement. It derives the
typed-data document, domain separator, struct hash and signing digest from
four hooks: the primary type name, its member list, the domain and the
message values.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List

from eth_account.messages import SignableMessage, _hash_eip191_message, encode_typed_data

from .constants import EIP712_DOMAIN_FIELDS


# -----------------------------
# EIP-712 Domain
# -----------------------------

@dataclass(frozen=True)
class EIP712Domain:
    """
    EIP-712 domain separator.
    Used to prevent signature replay across domains.
    """
    name: str
    version: str
    chainId: int
    verifyingContract: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chainId,
            "verifyingContract": self.verifyingContract,
        }


# -----------------------------
# Typed struct mixin
# -----------------------------

class EIP712Struct(ABC):
    """
    Mixin for request models that are signed as EIP-712 typed data.

    Subclasses provide ``primary_type()``, ``eip712_fields()``, ``domain()``
    and ``eip712_message()``; everything else is derived.
    """

    @classmethod
    @abstractmethod
    def primary_type(cls) -> str:
        """Name of the signed struct."""

    @classmethod
    @abstractmethod
    def eip712_fields(cls) -> List[Dict[str, str]]:
        """Struct members as ``{"name": ..., "type": ...}`` in declaration order."""

    @abstractmethod
    def domain(self) -> EIP712Domain:
        """Signing domain for this request."""

    @abstractmethod
    def eip712_message(self) -> Dict[str, Any]:
        """Member values keyed by EIP-712 member name."""

    def to_typed_data(self) -> Dict[str, Any]:
        """
        Full typed-data document (``types``, ``primaryType``, ``domain``, ``message``).

        The result can be passed to ``eth_account.Account.sign_typed_data`` as
        ``full_message`` or handed to a wallet's ``eth_signTypedData_v4``.
        ``bytes`` members are raw bytes.
        """
        return {
            "types": {
                "EIP712Domain": list(EIP712_DOMAIN_FIELDS),
                self.primary_type(): list(self.eip712_fields()),
            },
            "primaryType": self.primary_type(),
            "domain": self.domain().to_dict(),
            "message": self.eip712_message(),
        }

    def signable_message(self) -> SignableMessage:
        return encode_typed_data(full_message=self.to_typed_data())

    def domain_separator(self) -> bytes:
        return self.signable_message().header

    def struct_hash(self) -> bytes:
        return self.signable_message().body

    def signing_digest(self) -> bytes:
        """The 32-byte digest a signer signs for this request."""
        return _hash_eip191_message(self.signable_message())
