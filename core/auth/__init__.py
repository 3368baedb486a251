"""
인증 모듈

비밀번호 해시, 세션 토큰, 사용자 인증기 제공
"""

from core.auth.authenticator import Authenticator, Session
from core.auth.errors import (
    AuthError,
    EmailAlreadyRegistered,
    FederationDisabled,
    FederationRejected,
    FederationUnavailable,
    InvalidCredentials,
    InvalidLoginAttempt,
    InvalidSession,
)

__all__ = [
    "Authenticator",
    "Session",
    # 예외
    "AuthError",
    "EmailAlreadyRegistered",
    "FederationDisabled",
    "FederationRejected",
    "FederationUnavailable",
    "InvalidCredentials",
    "InvalidLoginAttempt",
    "InvalidSession",
]
