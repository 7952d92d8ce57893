"""Shared test fixtures."""

import pytest
from fastapi import FastAPI

from courtscout.api.gateway import install_gateway
from courtscout.api.routes import auth, centers, health, proxy, search
from courtscout.scrapers.models import Session

ALLOWED_ORIGIN = "https://adielbm.github.io"


class FakeRedis:
    """In-memory stand-in for the redis.asyncio client methods the cache uses."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.store[key] = value
        self.ttls[key] = ttl

    async def aclose(self) -> None:
        pass


@pytest.fixture
def test_app() -> FastAPI:
    """App with the gateway and all routers but no lifespan, for API tests."""
    app = FastAPI()
    install_gateway(app, [ALLOWED_ORIGIN])
    app.include_router(health.router)
    app.include_router(centers.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")
    app.include_router(search.router, prefix="/api")
    app.include_router(proxy.router)
    app.include_router(proxy.fallback_router)
    return app


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def session() -> Session:
    return Session(session_token="sess123", csrf_token="csrf-token")
