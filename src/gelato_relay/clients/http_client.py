"""
Gelato Relay HTTP Client

Thin async client for the relay's REST API, built on ``httpx.AsyncClient``.
Every call returns a parsed model or raises a ``ClientError``:

    - TransportError: the HTTP exchange itself failed
    - ServerReportedError: the relay answered with ``{"message": ...}``
    - ResponseDecodeError: the body matched neither the expected shape nor
      the error shape
"""

import logging
from typing import List, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError

from ..config import RelaySettings, get_settings
from ..engine.exceptions import ResponseDecodeError, ServerReportedError, TransportError
from ..engine.task import GelatoTask
from ..evm.forward import SignedForwardRequest
from ..evm.meta_tx import SignedMetaTxRequest
from ..schemas.bases import FeeToken
from ..schemas.https import (
    EstimatedFeeResponse,
    ForwardCall,
    RelayChainsResponse,
    RelayErrorResponse,
    RelayRequest,
    RelayResponse,
)
from ..schemas.status import TaskStatusResponse, TransactionStatus

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

RelayPayload = Union[ForwardCall, SignedForwardRequest, SignedMetaTxRequest, RelayRequest]


class GelatoClient(httpx.AsyncClient):
    """
    Extended httpx.AsyncClient for the Gelato relay.

    Fully compatible with httpx.AsyncClient - supports all methods, properties,
    and can be used as an async context manager. Concurrent calls through one
    instance share its connection pool.

    Usage:
        ```python
        async with GelatoClient() as client:
            task = await client.submit_forward_request(signed)
            execution = await task
        ```
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        settings: Optional[RelaySettings] = None,
        **kwargs
    ):
        """
        Initialize the client.

        Args:
            base_url: Relay base URL; defaults to ``settings.base_url``
            settings: Runtime settings; defaults to ``get_settings()``
            **kwargs: All standard httpx.AsyncClient arguments (timeout, transport, headers, etc.)
        """
        self._settings = settings or get_settings()
        kwargs.setdefault("timeout", self._settings.request_timeout)
        super().__init__(base_url=base_url or self._settings.base_url, **kwargs)

    @property
    def settings(self) -> RelaySettings:
        return self._settings

    # =========================================================================
    # Submission
    # =========================================================================

    async def send_forward_call(self, call: ForwardCall) -> str:
        """
        Submit a ``ForwardCall`` (payment type Synchronous, no signature).

        The target contract must pay the relay itself.

        Returns:
            Relay task id
        """
        return await self._submit(f"metabox-relays/{call.chain_id}", call)

    async def send_forward_request(self, request: SignedForwardRequest) -> str:
        """
        Submit a sponsor-signed ``ForwardRequest``.

        Returns:
            Relay task id
        """
        return await self._submit(f"metabox-relays/{request.chain_id}", request)

    async def send_meta_tx_request(self, request: SignedMetaTxRequest) -> str:
        """
        Submit a signed ``MetaTxRequest``.

        Returns:
            Relay task id
        """
        return await self._submit(f"metabox-relays/{request.chain_id}", request)

    async def send_relay_transaction(self, request: RelayRequest, chain_id: int) -> str:
        """
        Submit a legacy relay transaction to ``relays/{chain_id}``.

        Returns:
            Relay task id
        """
        return await self._submit(f"relays/{chain_id}", request)

    async def _submit(self, path: str, payload: RelayPayload) -> str:
        logger.debug("Submitting %s to %s", type(payload).__name__, path)
        response = await self._call("POST", path, RelayResponse, json=payload.to_wire())
        logger.debug("Relay accepted %s as task %s", type(payload).__name__, response.task_id)
        return response.task_id

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_supported_chains(self) -> List[int]:
        """Chain ids the relay currently serves."""
        response = await self._call("GET", "relays/", RelayChainsResponse)
        return response.chain_ids()

    async def is_chain_supported(self, chain_id: int) -> bool:
        return chain_id in await self.get_supported_chains()

    async def get_estimated_fee(
        self,
        chain_id: int,
        payment_token: Union[FeeToken, str],
        gas_limit: int,
        is_high_priority: bool = False,
    ) -> int:
        """
        Estimate the relay fee for a call.

        Args:
            chain_id: Chain the call executes on
            payment_token: Asset the fee is paid in
            gas_limit: Gas limit of the call
            is_high_priority: Request a high-priority estimate

        Returns:
            Estimated fee in the payment token's smallest unit
        """
        token = payment_token if isinstance(payment_token, FeeToken) else FeeToken(payment_token)
        params = {
            "paymentToken": token.address,
            "gasLimit": str(gas_limit),
            "isHighPriority": "true" if is_high_priority else "false",
        }
        response = await self._call("GET", f"oracles/{chain_id}/estimate", EstimatedFeeResponse, params=params)
        return response.estimated_fee

    async def get_task_status(self, task_id: str) -> Optional[TransactionStatus]:
        """
        Fetch the status of a relay task.

        Returns:
            The task status, or None if the relay has no record of the task
            (yet). The relay registers tasks asynchronously, so None shortly
            after submission is normal.
        """
        response = await self._call("GET", f"tasks/GelatoMetaBox/{task_id}/", TaskStatusResponse)
        return response.first()

    # =========================================================================
    # Task tracking
    # =========================================================================

    def track(self, task_id: str, request: Optional[RelayPayload] = None) -> GelatoTask:
        """Create a poller for ``task_id`` using this client's polling settings."""
        return GelatoTask(
            task_id,
            self,
            request=request,
            retries=self._settings.retries,
            polling_interval=self._settings.polling_interval,
        )

    async def submit_forward_request(self, request: SignedForwardRequest) -> GelatoTask:
        """Submit ``request`` and return a poller for the resulting task."""
        task_id = await self.send_forward_request(request)
        return self.track(task_id, request)

    async def submit_meta_tx_request(self, request: SignedMetaTxRequest) -> GelatoTask:
        """Submit ``request`` and return a poller for the resulting task."""
        task_id = await self.send_meta_tx_request(request)
        return self.track(task_id, request)

    # =========================================================================
    # Utility Methods
    # =========================================================================

    async def _call(self, method: str, path: str, model: Type[M], **kwargs) -> M:
        try:
            response = await self.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e
        return self._decode(response, model)

    def _decode(self, response: httpx.Response, model: Type[M]) -> M:
        """
        Parse ``response`` as ``model``, falling back to the relay's error shape.

        Raises:
            ServerReportedError: If the body is ``{"message": ...}``
            ResponseDecodeError: If the body matches neither shape
        """
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if payload is not None:
            try:
                return model.model_validate(payload)
            except ValidationError:
                pass
            try:
                error = RelayErrorResponse.model_validate(payload)
            except ValidationError:
                error = None
            if error is not None:
                raise ServerReportedError(error.message)

        logger.warning(
            "Unexpected response from server. method=%s url=%s status=%s body=%s",
            response.request.method, response.request.url, response.status_code, response.text,
        )
        raise ResponseDecodeError(
            f"Unexpected response from server (HTTP {response.status_code})",
            body=response.text,
        )
