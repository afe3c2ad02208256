"""
AgroConnect - Soko la mazao (Agricultural Marketplace)
Main FastAPI application that wires together the cart, checkout and order routers.

Run with:
    uvicorn server:app --reload --host 0.0.0.0 --port 8000

Services: Cart, Delivery Location, Checkout & Orders, Notifications
"""

import sys
import pathlib

# Ensure the backend directory is on sys.path so that imports work when
# running from any working directory.
_backend_dir = str(pathlib.Path(__file__).parent)
if _backend_dir not in sys.path:
    sys.path.insert(0, _backend_dir)

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
import logging

from config import APP_NAME, APP_VERSION, APP_DESCRIPTION, LOG_LEVEL, SIMULATOR_ENABLED

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("agroconnect")


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        if response.status_code >= 400:
            logger.warning(
                f"[{response.status_code}] {request.method} {request.url}"
            )
        return response

from routers.cart_service import router as cart_router
from routers.location_service import router as location_router
from routers.order_service import router as order_router
from routers.notification_service import router as notification_router
from services.session import MarketplaceSession


# ─── Application ──────────────────────────────────────────────────────────────


def create_app(session: MarketplaceSession = None, run_simulator: bool = SIMULATOR_ENABLED) -> FastAPI:
    session = session or MarketplaceSession()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if run_simulator:
            session.lifecycle.start()
            logger.info(f"Order lifecycle task started (every {session.lifecycle.interval}s)")
        yield
        await session.lifecycle.stop()
        await session.notifier.flush()

    app = FastAPI(
        title=APP_NAME,
        version=APP_VERSION,
        description=APP_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.marketplace = session

    # ─── Middleware ───────────────────────────────────────────────────────────

    app.add_middleware(RequestLoggerMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Include Routers ─────────────────────────────────────────────────────

    app.include_router(cart_router, tags=["Cart Service"])
    app.include_router(location_router, tags=["Delivery Location Service"])
    app.include_router(order_router, tags=["Order Service"])
    app.include_router(notification_router, tags=["Notification Service"])

    # ─── Root & Health ───────────────────────────────────────────────────────

    @app.get("/", tags=["Health"])
    def root():
        return {
            "name": APP_NAME,
            "name_sw": "AgroConnect - Soko la mazao",
            "version": APP_VERSION,
            "status": "running",
            "message": "Karibu AgroConnect! (Welcome to AgroConnect!)",
            "docs": "/docs",
            "services": [
                {"name": "Cart", "name_sw": "Kikapu", "prefix": "/api/cart"},
                {"name": "Delivery Location", "name_sw": "Mahali pa kupeleka", "prefix": "/api/delivery-location"},
                {"name": "Checkout & Orders", "name_sw": "Malipo na oda", "prefix": "/api/checkout, /api/orders"},
                {"name": "Notifications", "name_sw": "Taarifa", "prefix": "/api/notifications"},
            ],
        }

    @app.get("/health", tags=["Health"])
    def health_check():
        return {"status": "healthy", "version": APP_VERSION}

    return app


app = create_app()


# ─── Run directly ─────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server:app", host="0.0.0.0", port=8000, reload=True)
