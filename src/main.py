"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.sw_common.errors import AppError
from src.sw_common.logging_config import setup_logging
from src.sw_common.response import error_response
from src.sw_gateway.api.router import router as session_router
from src.sw_gateway.middleware.request_log import RequestLogMiddleware
from src.sw_gateway.session import WalletSession
from src.sw_payments.api.router import router as payments_router
from src.sw_wallet.api.router import router as wallet_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: configure logging, open the session. Shutdown: close it."""
    setup_logging(settings.LOG_LEVEL)
    app.state.session = WalletSession(settings)
    yield
    await app.state.session.aclose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, request)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(session_router, prefix="/api/v1")
app.include_router(wallet_router, prefix="/api/v1")
app.include_router(payments_router, prefix="/api/v1")


@app.get("/health")
async def health(request: Request) -> dict[str, str | bool]:
    session: WalletSession = request.app.state.session
    return {
        "status": "ok",
        "version": "0.1.0",
        "authenticated": await session.credentials.get_token() is not None,
    }
