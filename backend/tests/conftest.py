"""Shared test fixtures."""

from typing import Any, Optional

import httpx
import pytest
import pytest_asyncio

from agrigeo.config import Settings
from agrigeo.main import create_app
from agrigeo.services import CacheService

SOILGRIDS_HOST = "rest.isric.org"
OVERPASS_HOST = "overpass-api.de"
OPENWEATHER_HOST = "api.openweathermap.org"


SOIL_PAYLOAD = {
    "type": "Feature",
    "properties": {
        "phh2o": {"depths": [{"label": "0-5cm", "values": {"mean": 65, "median": 64}}]},
        "clay": {"depths": [{"label": "0-5cm", "values": {"mean": 281}}]},
        "sand": {"depths": [{"label": "0-5cm", "values": {"median": 402}}]},
        "silt": {"depths": []},
    },
}

OVERPASS_PAYLOAD = {
    "elements": [
        {
            "type": "node",
            "id": 101,
            "lat": 12.971,
            "lon": 77.594,
            "tags": {"amenity": "marketplace", "name": "KR Market"},
        },
        {
            "type": "node",
            "id": 102,
            "lat": 12.975,
            "lon": 77.601,
            "tags": {"amenity": "fuel"},
        },
        {
            "type": "node",
            "id": 103,
            "lon": 77.610,
            "tags": {"shop": "agricultural", "name": "No Latitude Agro"},
        },
    ]
}

WEATHER_PAYLOAD = {
    "main": {"temp": 31.4, "humidity": 48},
    "weather": [{"description": "haze"}],
}


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UpstreamStub:
    """Stands in for every upstream provider via ``httpx.MockTransport``.

    Responses are registered per host as ``(status, payload)``. A payload
    that is an exception instance is raised instead; a ``bytes`` payload is
    sent as a raw body.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, tuple[int, Any]] = {
            SOILGRIDS_HOST: (200, SOIL_PAYLOAD),
            OVERPASS_HOST: (200, OVERPASS_PAYLOAD),
            OPENWEATHER_HOST: (200, WEATHER_PAYLOAD),
        }

    def respond(self, host: str, status: int, payload: Any = None) -> None:
        self.routes[host] = (status, payload)

    def calls_to(self, host: str) -> int:
        return sum(1 for r in self.requests if r.url.host == host)

    def last_request(self, host: str) -> Optional[httpx.Request]:
        matching = [r for r in self.requests if r.url.host == host]
        return matching[-1] if matching else None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, payload = self.routes[request.url.host]
        if isinstance(payload, Exception):
            raise payload
        if isinstance(payload, bytes):
            return httpx.Response(status, content=payload)
        return httpx.Response(status, json=payload if payload is not None else {})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class MemorySharedCache(CacheService):
    """In-memory stand-in for the Redis tier."""

    def __init__(self) -> None:
        self.store: dict[str, tuple[Any, float]] = {}
        self.closed = False

    async def get(self, key: str) -> Any | None:
        hit = self.store.get(key)
        return hit[0] if hit else None

    async def get_with_ttl(self, key: str) -> tuple[Any, float] | None:
        return self.store.get(key)

    async def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        self.store[key] = (value, ttl_seconds)

    async def close(self) -> None:
        self.closed = True


class BrokenSharedCache(CacheService):
    """Shared tier that is always down."""

    async def get(self, key: str) -> Any | None:
        raise ConnectionError("redis down")

    async def get_with_ttl(self, key: str) -> tuple[Any, float] | None:
        raise ConnectionError("redis down")

    async def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        raise ConnectionError("redis down")


SETTINGS_ENV_VARS = (
    "SOIL_CACHE_TTL_MS",
    "FACILITIES_CACHE_TTL_MS",
    "GEODATA_CACHE_MAX_ENTRIES",
    "REDIS_URL",
    "UPSTREAM_TIMEOUT_SECONDS",
    "OPENWEATHER_API_KEY",
    "LOG_LEVEL",
    "CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Settings built in tests see neither the host environment nor a .env file."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setitem(Settings.model_config, "env_file", None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def settings() -> Settings:
    return Settings(openweather_api_key="test-key")


@pytest.fixture
def app(settings, upstream):
    return create_app(settings, transport=upstream.transport)


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
