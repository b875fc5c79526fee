"""
Request Builder Base

Shared machinery for the fluent request builders. A builder accumulates raw
field values; nothing is validated until ``build()``, which reports every
missing required field at once and hands the values to the request model.

Builders are values: every setter returns a new builder and leaves the
receiver untouched, so partially filled builders can be reused as templates.
"""

import copy
from typing import Any, Dict, List, Mapping, Tuple, Type, TypeVar

from ..engine.exceptions import MissingFieldsError
from ..schemas.bases import FeeToken, PaymentType

B = TypeVar("B", bound="RequestBuilder")


class RequestBuilder:
    """
    Base class for relay request builders.

    Subclasses declare ``REQUIRED``, the field names ``build()`` insists on.
    """

    REQUIRED: Tuple[str, ...] = ()

    def __init__(self, **fields: Any):
        self._fields: Dict[str, Any] = {k: v for k, v in fields.items() if v is not None}

    def _replace(self: B, **updates: Any) -> B:
        clone = copy.copy(self)
        clone._fields = {**self._fields, **updates}
        return clone

    def _become(self, cls: Type[B], **attrs: Any) -> B:
        builder = cls.__new__(cls)
        builder.__dict__.update(self.__dict__)
        builder._fields = dict(self._fields)
        builder.__dict__.update(attrs)
        return builder

    def get(self, name: str, default: Any = None) -> Any:
        """Current raw value of a field, or ``default`` if unset."""
        return self._fields.get(name, default)

    def missing_keys(self) -> List[str]:
        """Required fields that are still unset, in declaration order."""
        return [name for name in self.REQUIRED if name not in self._fields]

    def _ensure_complete(self) -> None:
        missing = self.missing_keys()
        if missing:
            raise MissingFieldsError(missing)

    def _common_values(self) -> Dict[str, Any]:
        f = self._fields
        return {
            "chain_id": f.get("chain_id", 1),
            "target": f["target"],
            "data": f.get("data", b""),
            "fee_token": f.get("fee_token", FeeToken.native()),
            "payment_type": f.get("payment_type", PaymentType.ASYNC_GAS_TANK),
            "max_fee": f["max_fee"],
            "gas": f["gas"],
        }

    def chain_id(self: B, value: int) -> B:
        return self._replace(chain_id=value)

    def target(self: B, value: str) -> B:
        return self._replace(target=value)

    def data(self: B, value) -> B:
        return self._replace(data=value)

    def fee_token(self: B, value) -> B:
        return self._replace(fee_token=value)

    def payment_type(self: B, value: PaymentType) -> B:
        return self._replace(payment_type=value)

    def max_fee(self: B, value: int) -> B:
        return self._replace(max_fee=value)

    def gas(self: B, value: int) -> B:
        return self._replace(gas=value)

    def sponsor_chain_id(self: B, value: int) -> B:
        return self._replace(sponsor_chain_id=value)

    def nonce(self: B, value: int) -> B:
        return self._replace(nonce=value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._fields!r})"


def fields_from_tx(tx: Mapping[str, Any], from_field: str) -> Dict[str, Any]:
    """
    Builder fields from a web3 ``TxParams``-style mapping.

    ``to`` becomes ``target``; ``gas``, ``data`` and ``nonce`` keep their
    names; ``from`` populates ``from_field``. Keys absent from ``tx`` map to
    None, which builders treat as unset.
    """
    return {
        "target": tx.get("to"),
        "gas": tx.get("gas"),
        "data": tx.get("data"),
        "nonce": tx.get("nonce"),
        from_field: tx.get("from"),
    }
