"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from courtscout.api.gateway import install_gateway
from courtscout.api.routes import auth, centers, health, proxy, search
from courtscout.config import settings
from courtscout.services.cache import AvailabilityCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: connect the result cache (a disabled cache if Redis is not configured)
    app.state.cache = AvailabilityCache.from_url(settings.redis_url, settings.cache_ttl)
    logger.info(
        f"CourtScout started: upstream {settings.target_base_url}, "
        f"cache {'enabled' if app.state.cache.enabled else 'disabled'}"
    )

    yield

    # Shutdown: release the Redis connection pool
    await app.state.cache.close()
    logger.info("Cache connection closed")


# Create FastAPI app
app = FastAPI(
    title="CourtScout API",
    description="Tennis court availability gateway for Israel Tennis Centers",
    version="0.1.0",
    lifespan=lifespan,
)

# Origin policy, CORS headers and error mapping
install_gateway(app, settings.allowed_origins)

# Include routers; the proxy fallback must stay last
app.include_router(health.router)
app.include_router(centers.router, prefix="/api", tags=["centers"])
app.include_router(auth.router, prefix="/api", tags=["auth"])
app.include_router(search.router, prefix="/api", tags=["search"])
app.include_router(proxy.router, tags=["proxy"])
app.include_router(proxy.fallback_router)


def run() -> None:
    """Run the API with uvicorn."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")
    uvicorn.run("courtscout.main:app", host=settings.api_host, port=settings.api_port)
