"""
세션 토큰 (PyJWT, HS256)

payload: sub(사용자 ID), username, iat, exp
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from core.auth.errors import InvalidSession
from core.constants import Defaults


@dataclass(frozen=True)
class SessionClaims:
    """검증된 세션 토큰 내용"""

    user_id: str
    username: str
    issued_at: datetime
    expires_at: datetime


def issue_session_token(
    user_id: str,
    username: str,
    secret_key: str,
    ttl_sec: int = Defaults.SESSION_TTL_SEC,
    now: datetime | None = None,
) -> str:
    """세션 토큰 발급

    Args:
        user_id: 사용자 ID (sub)
        username: 사용자 이름
        secret_key: 서명 키
        ttl_sec: 유효 기간 (초)
        now: 발급 시각 (테스트용, 기본값 현재 UTC)

    Returns:
        JWT 문자열
    """
    issued_at = now or datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": user_id,
        "username": username,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=ttl_sec),
    }
    return jwt.encode(payload, secret_key, algorithm=Defaults.SESSION_ALGORITHM)


def decode_session_token(token: str, secret_key: str) -> SessionClaims:
    """세션 토큰 검증

    Raises:
        InvalidSession: 만료, 서명 불일치, 형식 오류
    """
    try:
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[Defaults.SESSION_ALGORITHM],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidSession("세션이 만료되었습니다") from e
    except jwt.InvalidTokenError as e:
        raise InvalidSession(f"유효하지 않은 세션 토큰입니다: {e}") from e

    return SessionClaims(
        user_id=payload["sub"],
        username=payload.get("username", ""),
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
