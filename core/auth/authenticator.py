"""
Authenticator - 사용자 인증

이메일/비밀번호 가입·로그인, 세션 토큰 발급·검증, Google 계정 연동.
"""

import logging
import sqlite3
from dataclasses import dataclass, replace

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.google.models import GoogleIdentity
from adapters.google.oauth_client import (
    GoogleOAuthFetchError,
    GoogleOAuthRequestError,
    decode_id_token,
)
from adapters.interfaces import IIdentityProvider
from core.auth.errors import (
    EmailAlreadyRegistered,
    FederationRejected,
    FederationUnavailable,
    InvalidCredentials,
    InvalidSession,
)
from core.auth.passwords import hash_password, verify_password
from core.auth.tokens import decode_session_token, issue_session_token
from core.constants import Defaults
from core.domain.errors import ValidationError
from core.domain.models import User, utc_now
from core.storage.user_store import UserStore
from core.types import AuthProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """인증 결과 (사용자 + 세션 토큰)"""

    user: User
    token: str


class Authenticator:
    """사용자 인증기

    Args:
        db: 쓰기 가능한 SQLiteAdapter
        secret_key: 세션 토큰 서명 키
        token_ttl_sec: 세션 유효 기간 (초)
        bcrypt_rounds: 비밀번호 해시 cost

    사용 예시:
    ```python
    auth = Authenticator(db, secret_key="...")

    session = await auth.signup("kim", "kim@example.com", "pw")
    user = await auth.resolve_session(session.token)
    ```
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        secret_key: str,
        token_ttl_sec: int = Defaults.SESSION_TTL_SEC,
        bcrypt_rounds: int = Defaults.BCRYPT_ROUNDS,
    ):
        self.db = db
        self.users = UserStore(db)
        self.secret_key = secret_key
        self.token_ttl_sec = token_ttl_sec
        self.bcrypt_rounds = bcrypt_rounds

    def issue_token(self, user: User) -> str:
        """사용자 세션 토큰 발급"""
        return issue_session_token(
            user.user_id,
            user.username,
            self.secret_key,
            ttl_sec=self.token_ttl_sec,
        )

    # -------------------------------------------------------------------------
    # 이메일/비밀번호
    # -------------------------------------------------------------------------

    async def signup(self, username: str, email: str, password: str) -> Session:
        """이메일/비밀번호 가입

        Raises:
            ValidationError: 비밀번호 또는 사용자 정보 형식 오류
            EmailAlreadyRegistered: 이미 가입된 이메일
        """
        if not password:
            raise ValidationError("password는 비어 있을 수 없습니다")
        if len(password.encode("utf-8")) > Defaults.MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"password는 UTF-8 기준 {Defaults.MAX_PASSWORD_BYTES}바이트를 넘을 수 없습니다"
            )

        user = User.create(
            username=username,
            email=email,
            password_hash=hash_password(password, self.bcrypt_rounds),
        )

        try:
            async with self.db.transaction():
                if await self.users.get_by_email(user.email) is not None:
                    raise EmailAlreadyRegistered("User already exists with this email.")
                await self.users.insert(user)
        except sqlite3.IntegrityError as e:
            # 동시 가입으로 UNIQUE(email) 위반
            raise EmailAlreadyRegistered("User already exists with this email.") from e

        logger.info("사용자 가입", extra={"user_id": user.user_id})
        return Session(user=user, token=self.issue_token(user))

    async def signin(self, email: str, password: str) -> Session:
        """이메일/비밀번호 로그인

        Raises:
            InvalidCredentials: 이메일 없음 또는 비밀번호 불일치
        """
        user = await self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("로그인 실패", extra={"email": email})
            raise InvalidCredentials("Invalid email or password.")

        logger.info("로그인", extra={"user_id": user.user_id})
        return Session(user=user, token=self.issue_token(user))

    async def resolve_session(self, token: str | None) -> User:
        """세션 토큰으로 현재 사용자 조회

        Raises:
            InvalidSession: 토큰 없음/무효/만료, 또는 사용자 삭제됨
        """
        if not token:
            raise InvalidSession("로그인이 필요합니다")

        claims = decode_session_token(token, self.secret_key)
        user = await self.users.get(claims.user_id)
        if user is None:
            raise InvalidSession("User not found")
        return user

    # -------------------------------------------------------------------------
    # Google 로그인
    # -------------------------------------------------------------------------

    async def complete_google_login(
        self,
        client: IIdentityProvider,
        code: str,
        code_verifier: str,
    ) -> Session:
        """인가 코드 교환 후 Google 계정으로 로그인

        Raises:
            FederationRejected: 인가 코드 또는 ID 토큰 무효
            FederationUnavailable: Google 통신 실패
        """
        try:
            tokens = await client.validate_authorization_code(code, code_verifier)
            identity = decode_id_token(tokens.id_token)
        except GoogleOAuthRequestError as e:
            raise FederationRejected("Invalid authorization code or credentials") from e
        except GoogleOAuthFetchError as e:
            raise FederationUnavailable("Google service unavailable") from e

        return await self.federate(identity)

    async def federate(self, identity: GoogleIdentity) -> Session:
        """Google 계정을 사용자와 연결

        - 이미 연결된 계정: 연결된 사용자로 로그인
        - 같은 이메일의 기존 사용자: provider를 google로 표시, 프로필 사진 갱신
          (Google이 이메일을 확인한 경우에만)
        - 처음 보는 이메일: provider=google 사용자 생성

        Raises:
            FederationRejected: 확인되지 않은 이메일로 기존 사용자와 연결 시도
        """
        provider = AuthProvider.GOOGLE.value

        async with self.db.transaction():
            user: User | None = None
            linked_id = await self.users.get_linked_user_id(provider, identity.subject)
            if linked_id is not None:
                user = await self.users.get(linked_id)
            if user is None:
                user = await self.users.get_by_email(identity.email)
                if user is not None and not identity.email_verified:
                    logger.warning(
                        "확인되지 않은 Google 이메일로 기존 사용자 연결 시도",
                        extra={"user_id": user.user_id},
                    )
                    raise FederationRejected("Google account email is not verified")

            if user is None:
                user = User.create(
                    username=identity.name or identity.email.split("@")[0],
                    email=identity.email,
                    profile_picture=identity.picture,
                    provider=provider,
                )
                await self.users.insert(user)
                logger.info("Google 사용자 생성", extra={"user_id": user.user_id})
            else:
                user = replace(
                    user,
                    provider=provider,
                    profile_picture=identity.picture or user.profile_picture,
                    updated_at=utc_now(),
                )
                await self.users.update_fields(user.user_id, {
                    "provider": user.provider,
                    "profile_picture": user.profile_picture,
                    "updated_at": user.updated_at.isoformat(),
                })

            await self.users.link_oauth_account(
                user.user_id,
                provider,
                identity.subject,
                identity.to_profile(),
            )

        logger.info("Google 로그인", extra={"user_id": user.user_id})
        return Session(user=user, token=self.issue_token(user))
