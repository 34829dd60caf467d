"""
Broker HTTP application.

Mounts the hub callback routes and ties the broker lifecycle to the
server's startup and shutdown.
"""

from typing import Optional

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from .broker import Broker
from .config import BrokerConfig, load_config
from .constants import BROKER_VERSION
from .hub import ErrorEnvelope
from .logger import get_logger

logger = get_logger(__name__)


def create_app(config: Optional[BrokerConfig] = None, broker: Optional[Broker] = None) -> FastAPI:
    if broker is None:
        broker = Broker(config or load_config())

    app = FastAPI(
        title="Broker Bridge",
        description="Signs matched trades and relays them to the settlement hub.",
        version=BROKER_VERSION,
    )
    app.state.broker = broker

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    app.include_router(broker.server.router)

    @app.on_event("startup")
    async def startup():
        await broker.start()

    @app.on_event("shutdown")
    async def shutdown():
        await broker.stop()
        logger.info("Broker stopped.")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content=ErrorEnvelope(message="Internal Server Error").to_dict())

    @app.get("/")
    async def root():
        return {
            "broker_version": BROKER_VERSION,
            "address": broker.address,
            "hub_state": broker.hub.state.value,
        }

    return app
