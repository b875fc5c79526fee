"""
Task Status Schema Models

Models for the relay's task status endpoint
(GET ``tasks/GelatoMetaBox/{task_id}/``). The endpoint answers either
``{"data": [TransactionStatus, ...]}`` or ``{"message": ...}``. An empty
``data`` list means the relay has no record of the task yet.

Note that ``created_at`` keeps its snake_case name on the wire.
"""

from enum import Enum
from typing import List, Optional, Union

from pydantic import Field

from .bases import Address, CanonicalModel, DecimalInt, HexData


class TaskState(str, Enum):
    """States a relay task moves through."""
    CHECK_PENDING = "CheckPending"
    EXEC_PENDING = "ExecPending"
    EXEC_SUCCESS = "ExecSuccess"
    EXEC_REVERTED = "ExecReverted"
    WAITING_FOR_CONFIRMATION = "WaitingForConfirmation"
    BLACKLISTED = "Blacklisted"
    CANCELLED = "Cancelled"
    NOT_FOUND = "NotFound"


class FeeData(CanonicalModel):
    """EIP-1559 fee data. Quantities may arrive as decimal, hex or ``{"hex": ...}``."""
    gas_price: Optional[DecimalInt] = None
    max_fee_per_gas: Optional[DecimalInt] = None
    max_priority_fee_per_gas: Optional[DecimalInt] = None


class Payload(CanonicalModel):
    """Transaction the relay built for the task."""
    to: Address
    data: HexData = b""
    fee_data: Optional[FeeData] = None


class Check(CanonicalModel):
    """
    Result of a relay-side check of the task.

    Attributes:
        task_state: Task state at this check
        message: Human readable message, if any
        reason: Machine readable reason, if any
        payload: Transaction payload the relay prepared
        created_at: Check timestamp
    """
    task_state: TaskState
    message: Optional[str] = None
    reason: Optional[str] = None
    payload: Optional[Payload] = None
    created_at: Optional[str] = Field(default=None, alias="created_at")


class Execution(CanonicalModel):
    """
    On-chain execution record.

    Attributes:
        status: Transaction status as reported by the relay
        transaction_hash: Hash of the executing transaction
        block_number: Block the transaction was included in
        created_at: Record timestamp
    """
    status: str
    transaction_hash: str
    block_number: int
    created_at: Optional[str] = Field(default=None, alias="created_at")


class TransactionStatus(CanonicalModel):
    """
    Status snapshot of one relay task.

    ``last_check`` is either a bare timestamp string, meaning no structured
    check has been recorded yet, or a ``Check``.
    """
    service: str
    chain: str
    task_id: str
    task_state: TaskState
    created_at: Optional[str] = Field(default=None, alias="created_at")
    last_check: Optional[Union[Check, str]] = None
    execution: Optional[Execution] = None
    last_execution: Optional[str] = None

    @property
    def check(self) -> Optional[Check]:
        """The structured last check, or None if there is none yet."""
        if isinstance(self.last_check, Check):
            return self.last_check
        return None


class TaskStatusResponse(CanonicalModel):
    """Success shape of the status endpoint."""
    data: List[TransactionStatus]

    def first(self) -> Optional[TransactionStatus]:
        return self.data[0] if self.data else None
