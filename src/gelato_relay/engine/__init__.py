from .exceptions import (
    RelayError,
    MissingFieldsError,
    SigningError,
    WrongSignerError,
    InappropriatePaymentTypeError,
    UnknownForwarderError,
    UnknownMetaBoxError,
    SignerError,
    ClientError,
    TransportError,
    ResponseDecodeError,
    ServerReportedError,
    TaskError,
    TaskTransportError,
    ExecutionReverted,
    TaskBlacklisted,
    TaskCancelled,
    TaskNotFound,
    TooManyRetries,
    ConfigurationError,
)

__all__ = [
    "RelayError",
    "MissingFieldsError",
    "SigningError",
    "WrongSignerError",
    "InappropriatePaymentTypeError",
    "UnknownForwarderError",
    "UnknownMetaBoxError",
    "SignerError",
    "ClientError",
    "TransportError",
    "ResponseDecodeError",
    "ServerReportedError",
    "TaskError",
    "TaskTransportError",
    "ExecutionReverted",
    "TaskBlacklisted",
    "TaskCancelled",
    "TaskNotFound",
    "TooManyRetries",
    "ConfigurationError",
]
