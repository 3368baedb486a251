"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config.loader import get_settings
from core.constants import Defaults
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from web.errors import register_exception_handlers
from web.routes import accounts, auth, health, transactions

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema

    settings = get_settings()

    # 시작 시 - DB 스키마 자동 초기화
    async with SQLiteAdapter(settings.db_path) as db:
        await init_schema(db)

    logger.info(
        f"Web 시작: mode={settings.mode.value}",
        extra={"db_path": str(settings.db_path)},
    )

    yield

    logger.info("Web 종료")


def create_app() -> FastAPI:
    """FastAPI 앱 생성"""
    settings = get_settings()

    app = FastAPI(
        title="Fino API",
        description="개인 가계부 API (계좌, 거래, 잔액 정합성)",
        version=Defaults.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS 설정 (세션 쿠키 전달을 위해 origin 명시)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # =========================================================================
    # API 라우터 등록
    # =========================================================================

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(accounts.router)
    app.include_router(transactions.router)

    @app.get("/", include_in_schema=False)
    async def home() -> dict[str, str]:
        """API 안내"""
        return {"message": "Fino API is running"}

    return app

