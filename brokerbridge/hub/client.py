"""
Hub Client

Outbound side of the broker <-> hub protocol over stateless HTTP:

  - register       POST {hub}/register     best-effort, logged
  - send_balances  POST {hub}/balance      best-effort, logged
  - send_trade     POST {blockchain}/trade errors logged and re-raised

A trade that does not reach the hub is an unsettled match, so it is the
only call whose failure reaches the caller.
"""

import json
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import httpx

from ..constants import (
    CALLBACK_PREFIX,
    LOG_INCLUDE_REQUEST_CONTENT,
    LOG_INCLUDE_RESPONSE_CONTENT,
    LOG_MAX_PATH_LENGTH,
)
from ..exceptions import (
    HubError,
    HubRejectedError,
    HubUnreachableError,
    PayloadError,
    UnsignedMessageError,
)
from ..logger import get_logger
from ..settlement.models import SettlementMessage
from .payloads import BalanceSnapshot, BrokerRegistration, RegistrationResponse
from .results import Logged, TradeAck

logger = get_logger(__name__)

OrderStatusHandler = Callable[[TradeAck], Awaitable[Any]]


class HubState(str, Enum):
    DISCONNECTED = "disconnected"
    REGISTERING = "registering"
    REGISTERED = "registered"


class HubClient:

    def __init__(self, settings, client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            settings: HubSectionConfig with ``url``, ``blockchain_url``,
                ``callback_url`` and ``timeout``
            client: shared HTTP client. A client passed in here is never
                closed by the hub client.
        """
        self.settings = settings
        self._client = client
        self._owns_client = client is None
        self.state = HubState.DISCONNECTED
        self.on_order_status_response: Optional[OrderStatusHandler] = None

    def set_order_status_handler(self, handler: OrderStatusHandler) -> None:
        self.on_order_status_response = handler

    # -----------------------------------------------------------------
    #  Lifecycle
    # -----------------------------------------------------------------

    async def connect(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.timeout)
            self._owns_client = True

    async def disconnect(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        self.state = HubState.DISCONNECTED

    @property
    def http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.timeout)
            self._owns_client = True
        return self._client

    # -----------------------------------------------------------------
    #  Transport
    # -----------------------------------------------------------------

    async def _post(self, url: str, payload: Any) -> Any:
        """
        POST a JSON body and return the parsed JSON response.

        Raises:
            HubUnreachableError: the request never got a response
            HubRejectedError: non-2xx status or a body that is not JSON
        """
        log_url = url if len(url) <= LOG_MAX_PATH_LENGTH else url[:LOG_MAX_PATH_LENGTH] + "...[TRUNCATED]"
        body = ""
        if LOG_INCLUDE_REQUEST_CONTENT:
            body = f"\n\nOutgoing Request:\n\"{json.dumps(payload, indent=2, default=str)}\"\n"
        logger.info(f"--> \"POST {log_url} HTTP/1.1\"{body}")

        start_time = time.time()
        try:
            response = await self.http.post(
                url,
                json=payload,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.RequestError as e:
            process_time = time.time() - start_time
            logger.warning(f"<-- \"POST {log_url} HTTP/1.1\" NETWORK_ERROR ({process_time:.3f}s)")
            raise HubUnreachableError(f"Hub unreachable at {url}: {e}", url=url) from e
        except httpx.HTTPStatusError as e:
            process_time = time.time() - start_time
            status_code = e.response.status_code
            logger.warning(f"<-- \"POST {log_url} HTTP/1.1\" {status_code} ERROR ({process_time:.3f}s)")
            raise HubRejectedError(
                f"Hub rejected request to {url} with status {status_code}", url=url, status_code=status_code
            ) from e
        except json.JSONDecodeError as e:
            process_time = time.time() - start_time
            logger.warning(f"<-- \"POST {log_url} HTTP/1.1\" {response.status_code} ERROR ({process_time:.3f}s): {e}")
            raise HubRejectedError(
                f"Hub returned a non-JSON body from {url}", url=url, status_code=response.status_code
            ) from e

        process_time = time.time() - start_time
        response_body = ""
        if LOG_INCLUDE_RESPONSE_CONTENT:
            response_body = f"\n\nIncoming Response:\n\"{json.dumps(data, indent=2, default=str)}\"\n"
        logger.info(f"<-- \"POST {log_url} HTTP/1.1\" {response.status_code} ({process_time:.3f}s){response_body}")
        return data

    # -----------------------------------------------------------------
    #  Protocol
    # -----------------------------------------------------------------

    async def register(self, registration: BrokerRegistration) -> Logged[RegistrationResponse]:
        """
        Registration handshake.

        Any status the hub reports counts as registered. A hub that cannot be
        reached leaves the broker running unregistered; nothing is raised.
        """
        registration = registration.with_callback_url(self.settings.callback_url.rstrip('/') + CALLBACK_PREFIX)
        self.state = HubState.REGISTERING
        try:
            data = await self._post(f"{self.settings.url}/register", registration.to_dict())
            result = RegistrationResponse.from_dict(data)
        except (HubError, PayloadError) as e:
            self.state = HubState.DISCONNECTED
            logger.error(f"Error on broker/register: {e}")
            return Logged.failure(e)

        self.state = HubState.REGISTERED
        if result.is_new_registration:
            logger.info(f"Broker has been registered with id: {result.broker}")
        else:
            logger.info(f"Broker connected: {json.dumps(result.raw, default=str)}")
        return Logged.success(result)

    async def send_balances(self, snapshot: BalanceSnapshot) -> Logged[Any]:
        """Push a balance snapshot. Failures are logged, never retried."""
        try:
            return Logged.success(await self._post(f"{self.settings.url}/balance", snapshot.to_dict()))
        except HubError as e:
            logger.error(f"Error on broker/balance: {e}")
            return Logged.failure(e)

    async def send_trade(self, order: Any, message: SettlementMessage) -> TradeAck:
        """
        Relay a signed settlement message and hand the hub's ack to the
        order-status handler.

        Raises:
            UnsignedMessageError: message has no id or no signature
            HubUnreachableError, HubRejectedError: the trade did not settle.
                The handler is not invoked.
        """
        if not message.is_signed:
            raise UnsignedMessageError(f"Refusing to send unsigned settlement message (nonce={message.nonce})")

        logger.info(f"Sending trade {message.id}")
        try:
            payload = await self._post(f"{self.settings.blockchain_url}/trade", message.to_dict())
        except HubError as e:
            logger.error(f"Sending trade {message.id} failed: {e}")
            raise

        ack = TradeAck(message_id=message.id, order=order, payload=payload)
        logger.info(f"Trade {message.id} acknowledged: {json.dumps(payload, default=str)}")

        if self.on_order_status_response is None:
            logger.warning(f"No order status handler registered, dropping ack for {message.id}")
        else:
            await self.on_order_status_response(ack)
        return ack
