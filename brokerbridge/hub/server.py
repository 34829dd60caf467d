"""
Hub Callback Surface

Inbound calls the hub makes on the broker:

  POST   {prefix}/order   create an order    -> on_create_order
  DELETE {prefix}/order   cancel an order    -> on_cancel_order

Each route returns the handler's order record. Any validation or handler
failure is logged and answered with a 400 ``ErrorEnvelope``; the callback
channel itself never fails.
"""

from dataclasses import asdict, is_dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional

from fastapi import APIRouter, FastAPI
from starlette.requests import Request
from starlette.responses import JSONResponse

from ..constants import CALLBACK_PREFIX
from ..exceptions import HandlerError, PayloadError
from ..logger import get_logger
from .payloads import CancelOrderRequest, CreateOrderRequest, ErrorEnvelope

logger = get_logger(__name__)

CreateOrderHandler = Callable[[CreateOrderRequest], Awaitable[Any]]
CancelOrderHandler = Callable[[CancelOrderRequest], Awaitable[Any]]


def _order_record(result: Any) -> Any:
    """Make a handler result JSON-serializable."""
    if hasattr(result, "to_dict"):
        return result.to_dict()
    if is_dataclass(result) and not isinstance(result, type):
        return asdict(result)
    return result


class HubServer:

    def __init__(self, app: Optional[FastAPI] = None, prefix: str = CALLBACK_PREFIX):
        self.on_create_order: Optional[CreateOrderHandler] = None
        self.on_cancel_order: Optional[CancelOrderHandler] = None

        self.router = APIRouter(prefix=prefix)
        self.router.add_api_route("/order", self.create_order, methods=["POST"])
        self.router.add_api_route("/order", self.cancel_order, methods=["DELETE"])

        if app is not None:
            app.include_router(self.router)

    def set_create_order_handler(self, handler: CreateOrderHandler) -> None:
        self.on_create_order = handler

    def set_cancel_order_handler(self, handler: CancelOrderHandler) -> None:
        self.on_cancel_order = handler

    async def create_order(self, request: Request):
        return await self._dispatch("create order", CreateOrderRequest.from_dict, self.on_create_order, request)

    async def cancel_order(self, request: Request):
        return await self._dispatch("cancel order", CancelOrderRequest.from_dict, self.on_cancel_order, request)

    async def _dispatch(
        self,
        name: str,
        parse: Callable[[Mapping[str, Any]], Any],
        handler: Optional[Callable[[Any], Awaitable[Any]]],
        request: Request,
    ):
        try:
            if handler is None:
                raise HandlerError(f"No {name} handler registered")
            try:
                body = await request.json()
            except ValueError:
                raise PayloadError("Body is not valid JSON") from None
            return _order_record(await handler(parse(body)))
        except Exception as e:
            logger.error(f"Hub {name} callback failed: {e}")
            return JSONResponse(status_code=400, content=ErrorEnvelope(message=str(e)).to_dict())
