"""
Exception and Error Definitions Module

Defines the exception hierarchy for request construction, EIP-712 signing,
relay HTTP interaction and task polling. All exceptions inherit from
RelayError for unified exception handling.

Exception Hierarchy:
    RelayError (root)
    ├── MissingFieldsError
    ├── SigningError
    │   ├── WrongSignerError
    │   ├── InappropriatePaymentTypeError
    │   ├── UnknownForwarderError
    │   ├── UnknownMetaBoxError
    │   └── SignerError
    ├── ClientError
    │   ├── TransportError
    │   ├── ResponseDecodeError
    │   └── ServerReportedError
    ├── TaskError
    │   ├── TaskTransportError
    │   ├── ExecutionReverted
    │   ├── TaskBlacklisted
    │   ├── TaskCancelled
    │   ├── TaskNotFound
    │   └── TooManyRetries
    └── ConfigurationError
"""

from typing import List, Optional


class RelayError(Exception):
    """
    Root exception class for all SDK-specific exceptions.

    All custom exceptions inherit from this class to enable
    unified exception handling and centralized error processing.
    """
    pass


class MissingFieldsError(RelayError):
    """
    Raised when a builder is asked to build with required fields unset.

    Attributes:
        missing: Every required field name that is unset, in declaration order
    """

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required values in build: {', '.join(self.missing)}")


class SigningError(RelayError):
    """
    Base exception for EIP-712 signing failures.

    Parent class for all errors that occur while producing a sponsor or
    user signature over a relay request.
    """
    pass


class WrongSignerError(SigningError):
    """
    Raised when the signer's address does not match the address declared
    in the request (sponsor or user).

    Attributes:
        expected: Address declared in the request
        actual: Address belonging to the signer
    """

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Wrong signer. Expected {expected}. Attempted to sign with key belonging to: {actual}"
        )


class InappropriatePaymentTypeError(SigningError):
    """Raised when a request with payment type Synchronous is signed."""

    def __init__(self):
        super().__init__("Payment type Synchronous may not be used with this request")


class UnknownForwarderError(SigningError):
    """
    Raised when no forwarder contract is registered for a chain id.

    Attributes:
        chain_id: The chain id that was looked up
    """

    def __init__(self, chain_id: int):
        self.chain_id = chain_id
        super().__init__(f"Forwarder contract unknown for chain id: {chain_id}")


class UnknownMetaBoxError(SigningError):
    """
    Raised when no MetaBox contract is registered for a chain id.

    Attributes:
        chain_id: The chain id that was looked up
    """

    def __init__(self, chain_id: int):
        self.chain_id = chain_id
        super().__init__(f"MetaBox contract unknown for chain id: {chain_id}")


class SignerError(SigningError):
    """
    Raised when the underlying signer fails to produce a signature.

    The signer's own exception is available as ``__cause__``.
    """
    pass


class ClientError(RelayError):
    """
    Base exception for relay HTTP interaction failures.

    Parent class for network, decoding and server-reported errors.
    """
    pass


class TransportError(ClientError):
    """
    Raised when the HTTP request itself fails.

    This includes scenarios such as:
    - Connection refused or reset
    - Request timeout
    - TLS failures
    """
    pass


class ResponseDecodeError(ClientError):
    """
    Raised when a response body does not match the expected success shape
    nor the relay's error shape.

    Attributes:
        body: The raw response text
    """

    def __init__(self, message: str, body: str = ""):
        self.body = body
        super().__init__(message)


class ServerReportedError(ClientError):
    """
    Raised when the relay answers with an explicit ``{"message": ...}`` error.

    Attributes:
        message: Error message reported by the relay
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TaskError(RelayError):
    """
    Base exception for terminal task outcomes other than successful execution.

    Raised from awaiting a ``GelatoTask``.
    """
    pass


class TaskTransportError(TaskError):
    """
    Raised when a status request fails during polling.

    Transport and decoding failures are not retried. The originating
    ``ClientError`` is available as ``__cause__``.
    """
    pass


class ExecutionReverted(TaskError):
    """
    Raised when the relay executed the task but the transaction reverted.

    Attributes:
        execution: On-chain execution record
        last_check: The check that reported the revert
    """

    def __init__(self, execution, last_check):
        self.execution = execution
        self.last_check = last_check
        super().__init__("Execution Reverted")


class TaskBlacklisted(TaskError):
    """
    Raised when the relay blacklisted the task.

    Attributes:
        message: Message attached to the last check
        reason: Reason attached to the last check
    """

    def __init__(self, message: Optional[str] = None, reason: Optional[str] = None):
        self.message = message
        self.reason = reason
        super().__init__("BlackListed by backend")


class TaskCancelled(TaskError):
    """
    Raised when the relay cancelled the task.

    Attributes:
        message: Message attached to the last check
        reason: Reason attached to the last check
    """

    def __init__(self, message: Optional[str] = None, reason: Optional[str] = None):
        self.message = message
        self.reason = reason
        super().__init__("Cancelled by backend")


class TaskNotFound(TaskError):
    """Raised when the relay no longer knows the task."""

    def __init__(self):
        super().__init__("Dropped by backend")


class TooManyRetries(TaskError):
    """Raised when the retry budget for undefined status responses is exhausted."""

    def __init__(self):
        super().__init__("Backend returned too many error responses")


class ConfigurationError(RelayError):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - Non-numeric polling interval or retry count in the environment
    - Missing sponsor key when loading a signer from the environment
    """
    pass
