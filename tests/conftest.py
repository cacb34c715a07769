"""Pytest configuration and fixtures."""

import json
from typing import AsyncGenerator, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from httpx import ASGITransport, AsyncClient

from natours.config import Settings
from natours.main import create_app
from natours.services.repository import Repositories
from natours.utils.querystring import parse_query

ECHO_PATH = "/api/v1/echo"


def make_settings(**overrides) -> Settings:
    """Settings isolated from the environment and any .env file."""
    values = {
        "app_env": "development",
        "log_requests": False,
        "log_level": "WARNING",
        "static_dir": "does-not-exist",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


async def echo(request: Request) -> dict:
    """Report what a route sees after the middleware chain."""
    raw = await request.body()
    kind = getattr(request.state, "body_kind", None)
    if kind == "json" and raw:
        body = json.loads(raw)
    elif kind == "urlencoded" and raw:
        body = parse_query(raw.decode("utf-8"))
    else:
        body = None

    return {
        "body": body,
        "body_kind": kind,
        "query": parse_query(request.url.query),
        "cookies": getattr(request.state, "cookies", None),
        "request_time": getattr(request.state, "request_time", None),
        "request_id": getattr(request.state, "request_id", None),
        "query_polluted": getattr(request.state, "query_polluted", {}),
        "content_length": request.headers.get("content-length"),
    }


def add_echo_route(app: FastAPI) -> None:
    """Insert the echo route ahead of the catch-all."""
    app.router.routes.insert(0, APIRoute(ECHO_PATH, echo, methods=["GET", "POST"]))


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def repositories() -> Repositories:
    return Repositories()


@pytest.fixture
def app(settings: Settings, repositories: Repositories) -> FastAPI:
    application = create_app(settings, repositories)
    add_echo_route(application)
    return application


def client_for(app: FastAPI) -> AsyncClient:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    async with client_for(app) as ac:
        yield ac


@pytest.fixture
def make_client() -> Callable[..., AsyncClient]:
    """Build a client for an app with custom settings."""

    def factory(**overrides) -> AsyncClient:
        application = create_app(make_settings(**overrides), Repositories())
        add_echo_route(application)
        return client_for(application)

    return factory


@pytest.fixture
def mock_redis():
    """Create a mock Redis client."""
    mock = AsyncMock()
    mock.ping = AsyncMock(return_value=True)
    mock.delete = AsyncMock(return_value=1)
    mock.time = AsyncMock(return_value=(1704067200, 0))
    mock.zrange = AsyncMock(return_value=[])

    # Create a mock pipeline
    pipeline_mock = MagicMock()
    pipeline_mock.zremrangebyscore = MagicMock(return_value=pipeline_mock)
    pipeline_mock.zcard = MagicMock(return_value=pipeline_mock)
    pipeline_mock.zadd = MagicMock(return_value=pipeline_mock)
    pipeline_mock.expire = MagicMock(return_value=pipeline_mock)
    pipeline_mock.execute = AsyncMock(return_value=[0, 0, 1, True])
    mock.pipeline = MagicMock(return_value=pipeline_mock)

    return mock


@pytest.fixture
def tour_payload() -> dict:
    return {
        "name": "The Forest Hiker",
        "duration": 5,
        "maxGroupSize": 25,
        "difficulty": "easy",
        "price": 397,
        "summary": "Breathtaking hike through the Canadian Banff National Park",
        "imageCover": "tour-1-cover.jpg",
    }


@pytest.fixture
def user_payload() -> dict:
    return {
        "name": "Test User",
        "email": "test@example.com",
        "password": "TestPass123!",
        "passwordConfirm": "TestPass123!",
    }
