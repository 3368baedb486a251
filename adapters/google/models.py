"""
Google OAuth 응답 모델

토큰 엔드포인트 응답과 ID 토큰 claim을 데이터클래스로 변환.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any


@dataclass(frozen=True)
class GoogleTokens:
    """토큰 엔드포인트 응답

    Attributes:
        access_token: 액세스 토큰
        id_token: OpenID Connect ID 토큰 (JWT)
        expires_at: 액세스 토큰 만료 시각 (UTC)
        scope: 허용된 scope
    """

    access_token: str
    id_token: str
    expires_at: datetime | None
    scope: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "GoogleTokens":
        """API 응답에서 생성"""
        expires_in = data.get("expires_in")
        expires_at = (
            datetime.now(timezone.utc) + timedelta(seconds=int(expires_in))
            if expires_in is not None
            else None
        )
        return cls(
            access_token=data["access_token"],
            id_token=data["id_token"],
            expires_at=expires_at,
            scope=data.get("scope"),
        )


@dataclass(frozen=True)
class GoogleIdentity:
    """ID 토큰 claim

    Attributes:
        subject: Google 사용자 식별자 (sub)
        email: 이메일
        name: 표시 이름
        picture: 프로필 사진 URL
        email_verified: Google이 이메일 소유를 확인했는지
    """

    subject: str
    email: str
    name: str | None = None
    picture: str | None = None
    email_verified: bool = False

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "GoogleIdentity":
        """ID 토큰 claim에서 생성"""
        return cls(
            subject=str(claims["sub"]),
            email=claims["email"],
            name=claims.get("name"),
            picture=claims.get("picture"),
            email_verified=claims.get("email_verified") in (True, "true"),
        )

    def to_profile(self) -> dict[str, Any]:
        return {
            "sub": self.subject,
            "email": self.email,
            "name": self.name,
            "picture": self.picture,
        }
