from .constants import (
    FORWARDERS,
    META_BOXES,
    get_forwarder,
    get_meta_box,
    register_forwarder,
    register_meta_box,
)
from .forward import ForwardRequest, SignedForwardRequest
from .meta_tx import MetaTxRequest, SignedMetaTxRequest
from .schemas import RsvSignature
from .signatures import BaseSigner, LocalSigner
from .standards import EIP712Domain, EIP712Struct

__all__ = [
    "FORWARDERS",
    "META_BOXES",
    "get_forwarder",
    "get_meta_box",
    "register_forwarder",
    "register_meta_box",
    "ForwardRequest",
    "SignedForwardRequest",
    "MetaTxRequest",
    "SignedMetaTxRequest",
    "RsvSignature",
    "BaseSigner",
    "LocalSigner",
    "EIP712Domain",
    "EIP712Struct",
]
