"""FastAPI application for the rewards site backend.

Run with ``python -m voirewards.api.app``; interactive docs are served at
/docs.
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from voirewards.api import proposers, site
from voirewards.data.price.ticker import PriceService
from voirewards.helpers.cache import TimedValue
from voirewards.helpers.config import Settings, load_settings
from voirewards.helpers.constants import PRICE_CACHE_SECONDS
from voirewards.helpers.db import (
    create_engine_from_env,
    create_session_factory,
    create_tables,
)
from voirewards.helpers.http import (
    UpstreamError,
    create_http_client,
    log_and_suppress_errors,
)
from voirewards.helpers.logging import get_logger


logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    database_url: str | None = None,
    http_client: httpx.AsyncClient | None = None,
    *,
    create_schema: bool = False,
) -> FastAPI:
    """Build the API application.

    Args:
        settings: Runtime settings (default: read from the environment)
        database_url: Optional database URL overriding the environment
        http_client: Optional client for upstream calls; an injected client
            is not closed on shutdown
        create_schema: Create missing tables on startup (also enabled by the
            DB_CREATE_TABLES environment variable)

    Returns:
        FastAPI: The configured application
    """
    settings = settings or load_settings()
    create_schema = create_schema or bool(os.getenv("DB_CREATE_TABLES"))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        engine = create_engine_from_env(database_url)
        client = http_client or create_http_client()

        if create_schema:
            await create_tables(engine)

        app.state.session_factory = create_session_factory(engine)
        app.state.http_client = client
        app.state.price_service = PriceService(
            client, settings.price_ticker_url, TimedValue(PRICE_CACHE_SECONDS)
        )
        logger.info("API started, health snapshots in %s", settings.health_dir)

        try:
            yield
        finally:
            if http_client is None:
                async with log_and_suppress_errors("Closing HTTP client"):
                    await client.aclose()
            async with log_and_suppress_errors("Disposing database engine"):
                await engine.dispose()

    app = FastAPI(
        title="voirewards",
        description="Proposer statistics, node health and rewards data",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
        logger.warning("Upstream failure on %s: %s", request.url.path, exc)
        return JSONResponse({"success": False, "error": str(exc)}, status_code=502)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = ", ".join(
            str(error["loc"][-1]) for error in exc.errors() if error.get("loc")
        )
        return JSONResponse({"error": f"Invalid parameters: {fields}"}, status_code=400)

    app.include_router(proposers.router)
    app.include_router(site.router)

    return app


app = create_app()


if __name__ == "__main__":
    settings = load_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
