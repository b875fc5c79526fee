"""
EVM Signature Model

``RsvSignature`` holds an ECDSA signature as v/r/s components. On the wire it
is a ``0x``-prefixed 65-byte hex string laid out as ``r || s || v``.
"""

from typing import Any

from pydantic import ConfigDict, Field, model_validator

from ..schemas.bases import CanonicalModel


class RsvSignature(CanonicalModel):
    """
    EVM ECDSA signature (v, r, s).

    Attributes:
        v: ECDSA recovery ID (27 or 28). 0/1 inputs are normalised.
        r: r component, 0x-prefixed 64-char hex string.
        s: s component, 0x-prefixed 64-char hex string.

    Example::

        sig = RsvSignature.from_packed_hex("0x" + "aa" * 32 + "bb" * 32 + "1b")
        sig.v  # 27
        sig.to_packed_hex()
    """

    model_config = ConfigDict(frozen=True)

    v: int = Field(..., ge=27, le=28, description="ECDSA recovery ID (27 or 28)")
    r: str = Field(..., description="Signature r component (32 bytes, 0x-prefixed hex)")
    s: str = Field(..., description="Signature s component (32 bytes, 0x-prefixed hex)")

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if isinstance(data, (str, bytes, bytearray)):
            return cls._split_packed(data)
        if isinstance(data, dict):
            data = dict(data)
            if data.get("v") in (0, 1):
                data["v"] = data["v"] + 27
            for key in ("r", "s"):
                if isinstance(data.get(key), int):
                    data[key] = "0x" + format(data[key], "064x")
                elif isinstance(data.get(key), str):
                    hex_str = data[key].lower().replace("0x", "")
                    if len(hex_str) > 64:
                        raise ValueError(f"Invalid {key}: expected at most 64 hex chars, got {len(hex_str)}")
                    data[key] = "0x" + hex_str.zfill(64)
        return data

    @staticmethod
    def _split_packed(packed) -> dict:
        if isinstance(packed, str):
            hex_str = packed[2:] if packed.lower().startswith("0x") else packed
            try:
                raw = bytes.fromhex(hex_str)
            except ValueError:
                raise ValueError("Signature is not valid hexadecimal")
        else:
            raw = bytes(packed)
        if len(raw) != 65:
            raise ValueError(f"Invalid signature length: expected 65 bytes, got {len(raw)}")
        v = raw[64]
        return {
            "r": "0x" + raw[:32].hex(),
            "s": "0x" + raw[32:64].hex(),
            "v": v + 27 if v in (0, 1) else v,
        }

    @classmethod
    def from_packed_hex(cls, packed: str) -> "RsvSignature":
        return cls.model_validate(packed)

    @classmethod
    def from_vrs(cls, v: int, r: int, s: int) -> "RsvSignature":
        return cls(v=v, r="0x" + format(r, "064x"), s="0x" + format(s, "064x"))

    def to_bytes(self) -> bytes:
        return bytes.fromhex(self.r[2:]) + bytes.fromhex(self.s[2:]) + bytes([self.v])

    def to_packed_hex(self) -> str:
        """
        Encode v/r/s into a packed 65-byte hex string (``r || s || v``).

        Returns:
            0x-prefixed 132-character hex string.
        """
        return "0x" + self.to_bytes().hex()

    def __str__(self) -> str:
        return self.to_packed_hex()
