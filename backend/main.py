"""FastAPI application entry point."""

import logging
import sys
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Configure logging before importing other modules
# This ensures all loggers created with getLogger(__name__) use this configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout)
    ],
    force=True,  # Override any existing configuration
)

# Set specific loggers to appropriate levels
logging.getLogger("uvicorn").setLevel(logging.INFO)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)  # Reduce access log noise
logging.getLogger("httpx").setLevel(logging.WARNING)  # Reduce HTTP client noise

logger = logging.getLogger(__name__)

from api import api_router  # noqa: E402
from api.exceptions import EXCEPTION_HANDLERS  # noqa: E402
from config import get_settings  # noqa: E402
from data.adapters.nepse import NepseAdapter  # noqa: E402
from database import init_db, close_db  # noqa: E402
from services.auth import JWTAuthVerifier  # noqa: E402
from services.cache import TTLCache  # noqa: E402
from services.market_data import MarketDataService  # noqa: E402

settings = get_settings()

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown."""
    await init_db()

    cache = TTLCache()
    adapter = NepseAdapter(url=settings.NEPSE_API_URL, timeout=settings.NEPSE_API_TIMEOUT)
    app.state.cache = cache
    app.state.market_data = MarketDataService(
        adapter, cache, ttl_seconds=settings.QUOTE_CACHE_TTL_SECONDS
    )
    app.state.auth_verifier = JWTAuthVerifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)
    if settings.JWT_SECRET == "change-me":
        logger.warning("JWT_SECRET is the default value; set it in .env before deploying")
    logger.info("NEPSE Portfolio API %s started (quotes from %s)", VERSION, settings.NEPSE_API_URL)
    yield
    # Shutdown: Cleanup resources
    await adapter.close()
    await close_db()


app = FastAPI(
    title="NEPSE Portfolio API",
    description="Portfolio, watchlist and demo trading API for the Nepal Stock Exchange",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "An unexpected error occurred",
            "detail": str(exc) if settings.DEBUG else None,
        },
    )


# Include API router with version prefix
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    import uvicorn

    uvicorn.run(app, host=args.host, port=args.port)
