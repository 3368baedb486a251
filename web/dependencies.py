"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

from typing import AsyncGenerator

from fastapi import Depends, Request

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.google.oauth_client import GoogleOAuthClient
from core.auth.authenticator import Authenticator
from core.auth.errors import FederationDisabled
from core.config.loader import Settings, get_settings
from core.constants import Defaults
from core.domain.models import User


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


async def get_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (읽기 전용)

    조회 API와 세션 확인에 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=True) as db:
        yield db


async def get_db_write() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (쓰기 가능)

    거래/계좌 변경, 가입, 로그인 시 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=False) as db:
        yield db


def get_authenticator(
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> Authenticator:
    """쓰기 가능한 연결로 Authenticator 생성"""
    return Authenticator(
        db,
        secret_key=settings.session_secret_key,
        token_ttl_sec=settings.session_ttl_sec,
        bcrypt_rounds=settings.bcrypt_rounds,
    )


def extract_session_token(request: Request) -> str | None:
    """요청에서 세션 토큰 추출

    우선순위: JWT 쿠키 → Authorization: Bearer 헤더
    """
    token = request.cookies.get(Defaults.SESSION_COOKIE)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


async def get_current_user(
    request: Request,
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> User:
    """현재 로그인 사용자

    Raises:
        InvalidSession: 토큰 없음/무효/만료 (401)
    """
    authenticator = Authenticator(
        db,
        secret_key=settings.session_secret_key,
        token_ttl_sec=settings.session_ttl_sec,
        bcrypt_rounds=settings.bcrypt_rounds,
    )
    return await authenticator.resolve_session(extract_session_token(request))


async def get_google_client(
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[GoogleOAuthClient, None]:
    """Google OAuth 클라이언트 반환

    Raises:
        FederationDisabled: client_id/client_secret 미설정 (503)
    """
    google = settings.google
    if not google.enabled:
        raise FederationDisabled("Google 로그인이 설정되지 않았습니다")

    client = GoogleOAuthClient(
        client_id=google.client_id,
        client_secret=google.client_secret,
        redirect_uri=google.redirect_uri,
    )
    try:
        yield client
    finally:
        await client.close()
