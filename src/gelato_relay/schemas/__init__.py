from .bases import (
    Address,
    CanonicalModel,
    DecimalInt,
    FeeToken,
    HexData,
    NATIVE_TOKEN_ADDRESS,
    PaymentType,
    ZERO_ADDRESS,
)
from .https import (
    EstimatedFeeResponse,
    ForwardCall,
    RelayChainsResponse,
    RelayErrorResponse,
    RelayRequest,
    RelayResponse,
)
from .status import (
    Check,
    Execution,
    FeeData,
    Payload,
    TaskState,
    TaskStatusResponse,
    TransactionStatus,
)

__all__ = [
    "Address",
    "CanonicalModel",
    "DecimalInt",
    "FeeToken",
    "HexData",
    "NATIVE_TOKEN_ADDRESS",
    "PaymentType",
    "ZERO_ADDRESS",
    "EstimatedFeeResponse",
    "ForwardCall",
    "RelayChainsResponse",
    "RelayErrorResponse",
    "RelayRequest",
    "RelayResponse",
    "Check",
    "Execution",
    "FeeData",
    "Payload",
    "TaskState",
    "TaskStatusResponse",
    "TransactionStatus",
]
