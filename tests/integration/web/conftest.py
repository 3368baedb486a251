"""
Web API 통합 테스트 fixture

임시 secrets.yaml → Settings → 스키마 초기화된 파일 DB → FastAPI 앱 → httpx 클라이언트
"""

from pathlib import Path
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import Settings, get_settings
from tests.integration.web.api_helpers import signup
from web.app import create_app


@pytest.fixture
def settings(temp_secrets_file: Path) -> Settings:
    return get_settings(temp_secrets_file)


@pytest_asyncio.fixture
async def app_db(settings: Settings) -> AsyncGenerator[SQLiteAdapter, None]:
    """앱과 같은 DB 파일에 연결 (테스트 동안 유지, 검증용)"""
    adapter = SQLiteAdapter(settings.db_path)
    await adapter.connect()
    await init_schema(adapter)
    yield adapter
    await adapter.close()


@pytest.fixture
def app(settings: Settings, app_db: SQLiteAdapter) -> FastAPI:
    return create_app()


def make_client(app: FastAPI) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    )


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """로그인하지 않은 클라이언트"""
    async with make_client(app) as c:
        yield c


@pytest_asyncio.fixture
async def user_client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """kim@example.com으로 가입한 클라이언트 (세션 쿠키 보유)"""
    async with make_client(app) as c:
        await signup(c, "kim", "kim@example.com")
        yield c


@pytest_asyncio.fixture
async def other_client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """다른 사용자(lee@example.com)로 가입한 클라이언트"""
    async with make_client(app) as c:
        await signup(c, "lee", "lee@example.com")
        yield c
