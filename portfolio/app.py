"""
FastAPI application entry point for the portfolio backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio.config import Settings, get_settings
from portfolio.errors import PortfolioError
from portfolio.routes import router

logger = logging.getLogger(__name__)


async def handle_portfolio_error(request: Request, exc: PortfolioError) -> JSONResponse:
    if exc.status_code < 500:
        logger.warning("%s %s: %s", request.method, request.url.path, exc)
    else:
        logger.error("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.to_public_message()},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Portfolio Backend (FastAPI)", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PortfolioError, handle_portfolio_error)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
