"""
Relay Task Poller

``GelatoTask`` turns a submitted relay task id into its outcome. Awaiting it
polls the relay until the task reaches a terminal state:

    await task  ->  Execution                 (ExecSuccess)
                    raises ExecutionReverted  (ExecReverted)
                    raises TaskBlacklisted    (Blacklisted)
                    raises TaskCancelled      (Cancelled)
                    raises TaskNotFound       (NotFound)
                    raises TooManyRetries     (retry budget exhausted)
                    raises TaskTransportError (status request failed)

Each poll cycle waits out the polling interval first, so the first status
request does not race the relay's own task registration. A status response
with no task record ("undefined") consumes one retry; any other non-terminal
response simply schedules the next poll.

Cancelling the awaiting coroutine abandons polling. It has no effect on the
relay-side task.
"""

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from ..config import get_settings
from ..schemas.status import Execution, TaskState
from .exceptions import (
    ClientError,
    ExecutionReverted,
    ResponseDecodeError,
    TaskBlacklisted,
    TaskCancelled,
    TaskNotFound,
    TaskTransportError,
    TooManyRetries,
)

if TYPE_CHECKING:
    from ..clients.http_client import GelatoClient

logger = logging.getLogger(__name__)


class PollState(str, Enum):
    """Where a poller is in its cycle."""
    DELAYING = "delaying"
    REQUESTING = "requesting"
    COMPLETE = "complete"


class GelatoTask:
    """
    Awaitable poller for one relay task.

    Args:
        task_id: Relay task id returned on submission
        client: Client used for status requests
        request: The submitted payload, kept for reference
        retries: Undefined-status responses tolerated (default from settings)
        polling_interval: Seconds between polls (default from settings)

    Example:
        task = client.track(task_id).retries(10).polling_interval(5)
        try:
            execution = await task
        except TaskCancelled as e:
            print(e.message, e.reason)
    """

    def __init__(
        self,
        task_id: str,
        client: "GelatoClient",
        request: Optional[Any] = None,
        retries: Optional[int] = None,
        polling_interval: Optional[float] = None,
    ):
        if retries is None or polling_interval is None:
            settings = get_settings()
            retries = settings.retries if retries is None else retries
            polling_interval = settings.polling_interval if polling_interval is None else polling_interval

        self._task_id = task_id
        self._client = client
        self._request = request
        self._retries = retries
        self._interval = polling_interval
        self._state = PollState.DELAYING
        self._started = False
        self._running = False
        self._interval_changed = asyncio.Event()

    def __repr__(self) -> str:
        return (
            f"GelatoTask(task_id={self._task_id!r}, state={self._state.value}, "
            f"retries_remaining={self._retries}, interval={self._interval})"
        )

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def task_id(self) -> str:
        return self._task_id

    @property
    def request(self) -> Optional[Any]:
        """The payload that created this task, if known."""
        return self._request

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def retries_remaining(self) -> int:
        return self._retries

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def done(self) -> bool:
        return self._state is PollState.COMPLETE

    # =========================================================================
    # Configuration
    # =========================================================================

    def retries(self, retries: int) -> "GelatoTask":
        """
        Set the retry budget.

        Raises:
            RuntimeError: If polling has already started
            ValueError: If ``retries`` is negative
        """
        if self._started:
            raise RuntimeError("Retry budget cannot change once polling has started")
        if retries < 0:
            raise ValueError("retries must be >= 0")
        self._retries = retries
        return self

    def polling_interval(self, seconds: float) -> "GelatoTask":
        """
        Set the polling interval.

        If the poller is currently waiting, the pending wait restarts with
        the new interval.

        Raises:
            RuntimeError: If the poller has completed
            ValueError: If ``seconds`` is negative
        """
        if self._state is PollState.COMPLETE:
            raise RuntimeError("GelatoTask already completed")
        if seconds < 0:
            raise ValueError("polling interval must be >= 0")
        self._interval = seconds
        if self._running and self._state is PollState.DELAYING:
            self._interval_changed.set()
        return self

    # =========================================================================
    # Polling
    # =========================================================================

    def __await__(self):
        return self.run().__await__()

    async def run(self) -> Execution:
        """
        Poll until the task reaches a terminal state.

        Returns:
            Execution: On-chain execution record of the successful task

        Raises:
            TaskError: On any terminal outcome other than ExecSuccess
            RuntimeError: If the poller already completed or is being awaited elsewhere
        """
        if self._state is PollState.COMPLETE:
            raise RuntimeError("GelatoTask already completed")
        if self._running:
            raise RuntimeError("GelatoTask is already being awaited")

        self._running = True
        self._started = True
        try:
            return await self._poll()
        finally:
            self._running = False

    async def _delay(self) -> None:
        self._state = PollState.DELAYING
        while True:
            self._interval_changed.clear()
            try:
                await asyncio.wait_for(self._interval_changed.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                return
            logger.debug("Polling interval for task %s changed to %s", self._task_id, self._interval)

    def _complete(self) -> None:
        self._state = PollState.COMPLETE

    async def _poll(self) -> Execution:
        while True:
            await self._delay()

            self._state = PollState.REQUESTING
            logger.debug("Requesting status of task %s", self._task_id)
            try:
                status = await self._client.get_task_status(self._task_id)
            except ClientError as e:
                self._complete()
                logger.error("Status request for task %s failed: %s", self._task_id, e)
                raise TaskTransportError(f"Status request for task {self._task_id} failed: {e}") from e

            if status is None:
                if self._retries == 0:
                    self._complete()
                    raise TooManyRetries()
                self._retries -= 1
                logger.warning(
                    "Undefined status while polling task %s. %d retries remaining",
                    self._task_id, self._retries,
                )
                continue

            check = status.check
            if check is None:
                logger.debug("Task %s has no check yet", self._task_id)
                continue

            state = check.task_state
            logger.debug("Task %s is %s", self._task_id, state.value)

            if state is TaskState.EXEC_SUCCESS:
                self._complete()
                if status.execution is None:
                    cause = ResponseDecodeError("ExecSuccess reported without an execution record")
                    raise TaskTransportError(str(cause)) from cause
                return status.execution
            if state is TaskState.EXEC_REVERTED:
                self._complete()
                raise ExecutionReverted(status.execution, check)
            if state is TaskState.BLACKLISTED:
                self._complete()
                raise TaskBlacklisted(check.message, check.reason)
            if state is TaskState.CANCELLED:
                self._complete()
                raise TaskCancelled(check.message, check.reason)
            if state is TaskState.NOT_FOUND:
                self._complete()
                raise TaskNotFound()
