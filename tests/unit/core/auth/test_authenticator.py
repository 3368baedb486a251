"""
core/auth/authenticator.py 테스트

가입, 로그인, 세션 확인, Google 계정 연동
"""

import httpx
import jwt
import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.google.models import GoogleIdentity
from adapters.google.oauth_client import GoogleOAuthClient
from core.auth.authenticator import Authenticator
from core.auth.errors import (
    EmailAlreadyRegistered,
    FederationRejected,
    FederationUnavailable,
    InvalidCredentials,
    InvalidSession,
)
from core.auth.tokens import issue_session_token
from core.domain.errors import ValidationError

SECRET = "authenticator-test-secret"


@pytest.fixture
def auth(db: SQLiteAdapter) -> Authenticator:
    return Authenticator(db, secret_key=SECRET, token_ttl_sec=600, bcrypt_rounds=4)


def google_client(status_code: int = 200, **claims) -> GoogleOAuthClient:
    """고정 응답을 돌려주는 Google 클라이언트"""
    payload = {"sub": "google-sub-1", "email": "kim@example.com", "name": "Kim", "picture": "http://pic"}
    payload.update(claims)
    id_token = jwt.encode(payload, "google-test-key", algorithm="HS256")

    def handler(request: httpx.Request) -> httpx.Response:
        if status_code >= 400:
            return httpx.Response(status_code, json={"error": "invalid_grant"})
        return httpx.Response(200, json={"access_token": "access", "id_token": id_token})

    return GoogleOAuthClient("cid", "secret", "http://localhost/cb", transport=httpx.MockTransport(handler))


class TestSignup:
    """가입 테스트"""

    async def test_signup(self, auth: Authenticator) -> None:
        """가입 후 세션 발급, 비밀번호는 해시로 저장"""
        session = await auth.signup("kim", "Kim@Example.com", "pw1234")

        stored = await auth.users.get_by_email("kim@example.com")
        assert session.user.email == "kim@example.com"
        assert stored is not None
        assert stored.password_hash != "pw1234"
        assert (await auth.resolve_session(session.token)).user_id == stored.user_id

    async def test_duplicate_email(self, auth: Authenticator) -> None:
        """이미 가입된 이메일"""
        await auth.signup("kim", "kim@example.com", "pw1234")

        with pytest.raises(EmailAlreadyRegistered):
            await auth.signup("kim2", "KIM@example.com", "other")

    async def test_empty_password(self, auth: Authenticator) -> None:
        """빈 비밀번호"""
        with pytest.raises(ValidationError):
            await auth.signup("kim", "kim@example.com", "")

    @pytest.mark.parametrize("password", ["x" * 73, "가" * 25])
    async def test_password_over_bcrypt_limit(self, auth: Authenticator, password: str) -> None:
        """UTF-8 72바이트를 넘는 비밀번호 → ValidationError, 사용자 생성 안 됨"""
        with pytest.raises(ValidationError, match="72"):
            await auth.signup("kim", "kim@example.com", password)

        assert await auth.users.get_by_email("kim@example.com") is None

    async def test_password_at_bcrypt_limit(self, auth: Authenticator) -> None:
        """정확히 72바이트는 허용"""
        password = "x" * 72

        await auth.signup("kim", "kim@example.com", password)

        assert (await auth.signin("kim@example.com", password)).user.email == "kim@example.com"

    async def test_invalid_email(self, auth: Authenticator) -> None:
        """잘못된 이메일"""
        with pytest.raises(ValidationError):
            await auth.signup("kim", "kim-at-example", "pw")


class TestSignin:
    """로그인 테스트"""

    async def test_signin(self, auth: Authenticator) -> None:
        """올바른 자격 증명"""
        signed_up = await auth.signup("kim", "kim@example.com", "pw1234")

        session = await auth.signin("KIM@example.com", "pw1234")

        assert session.user.user_id == signed_up.user.user_id
        assert session.token

    async def test_wrong_password(self, auth: Authenticator) -> None:
        """비밀번호 불일치"""
        await auth.signup("kim", "kim@example.com", "pw1234")

        with pytest.raises(InvalidCredentials, match="Invalid email or password"):
            await auth.signin("kim@example.com", "wrong")

    async def test_unknown_email(self, auth: Authenticator) -> None:
        """없는 이메일도 같은 오류"""
        with pytest.raises(InvalidCredentials, match="Invalid email or password"):
            await auth.signin("nobody@example.com", "pw")

    async def test_overlong_password(self, auth: Authenticator) -> None:
        """bcrypt 한도를 넘는 비밀번호로 로그인 → 같은 오류"""
        await auth.signup("kim", "kim@example.com", "pw1234")

        with pytest.raises(InvalidCredentials):
            await auth.signin("kim@example.com", "x" * 100)

    async def test_google_only_user_cannot_signin_with_password(self, auth: Authenticator) -> None:
        """비밀번호 없이 Google로 가입한 사용자"""
        await auth.federate(GoogleIdentity(subject="sub-1", email="kim@example.com"))

        with pytest.raises(InvalidCredentials):
            await auth.signin("kim@example.com", "")


class TestResolveSession:
    """세션 확인 테스트"""

    async def test_missing_token(self, auth: Authenticator) -> None:
        """토큰 없음"""
        with pytest.raises(InvalidSession):
            await auth.resolve_session(None)

    async def test_deleted_user(self, auth: Authenticator) -> None:
        """토큰은 유효하지만 사용자 없음"""
        token = issue_session_token("ghost", "ghost", SECRET)

        with pytest.raises(InvalidSession, match="User not found"):
            await auth.resolve_session(token)

    async def test_token_from_other_secret(self, auth: Authenticator) -> None:
        """다른 키로 서명된 토큰"""
        session = await auth.signup("kim", "kim@example.com", "pw1234")
        other = Authenticator(auth.db, secret_key="other-secret", bcrypt_rounds=4)

        with pytest.raises(InvalidSession):
            await other.resolve_session(session.token)


class TestGoogleLogin:
    """Google 로그인 테스트"""

    async def test_new_user(self, auth: Authenticator) -> None:
        """처음 보는 이메일은 사용자 생성"""
        client = google_client()
        try:
            session = await auth.complete_google_login(client, "code", "verifier")
        finally:
            await client.close()

        assert session.user.email == "kim@example.com"
        assert session.user.username == "Kim"
        assert session.user.provider == "google"
        assert session.user.password_hash is None
        assert await auth.users.get_linked_user_id("google", "google-sub-1") == session.user.user_id

    async def test_existing_email_is_linked(self, auth: Authenticator) -> None:
        """같은 이메일의 기존 사용자와 연결"""
        signed_up = await auth.signup("kim", "kim@example.com", "pw1234")

        session = await auth.federate(
            GoogleIdentity(
                subject="sub-9",
                email="kim@example.com",
                picture="http://new-pic",
                email_verified=True,
            )
        )

        stored = await auth.users.get(signed_up.user.user_id)
        assert session.user.user_id == signed_up.user.user_id
        assert stored.provider == "google"
        assert stored.profile_picture == "http://new-pic"
        # 비밀번호 로그인도 계속 가능
        assert (await auth.signin("kim@example.com", "pw1234")).user.user_id == stored.user_id

    async def test_unverified_email_not_linked(self, auth: Authenticator) -> None:
        """Google이 확인하지 않은 이메일로는 기존 사용자와 연결하지 않음"""
        signed_up = await auth.signup("kim", "kim@example.com", "pw1234")

        with pytest.raises(FederationRejected, match="not verified"):
            await auth.federate(GoogleIdentity(subject="sub-9", email="kim@example.com"))

        stored = await auth.users.get(signed_up.user.user_id)
        assert stored.provider is None
        assert await auth.users.get_linked_user_id("google", "sub-9") is None

    async def test_verified_claim_from_id_token(self, auth: Authenticator) -> None:
        """ID 토큰의 email_verified claim으로 기존 사용자와 연결"""
        signed_up = await auth.signup("kim", "kim@example.com", "pw1234")
        client = google_client(email_verified=True)
        try:
            session = await auth.complete_google_login(client, "code", "verifier")
        finally:
            await client.close()

        assert session.user.user_id == signed_up.user.user_id

    async def test_repeat_login_same_user(self, auth: Authenticator) -> None:
        """같은 Google 계정 재로그인"""
        identity = GoogleIdentity(subject="sub-1", email="kim@example.com", name="Kim")

        first = await auth.federate(identity)
        second = await auth.federate(identity)

        assert first.user.user_id == second.user.user_id
        row = await auth.db.fetchone("SELECT COUNT(*) FROM users")
        assert row[0] == 1

    async def test_username_from_email(self, auth: Authenticator) -> None:
        """이름 claim이 없으면 이메일 앞부분"""
        session = await auth.federate(GoogleIdentity(subject="sub-2", email="lee@example.com"))

        assert session.user.username == "lee"

    async def test_rejected_code(self, auth: Authenticator) -> None:
        """인가 코드 거부 → FederationRejected"""
        client = google_client(status_code=400)
        try:
            with pytest.raises(FederationRejected):
                await auth.complete_google_login(client, "bad", "verifier")
        finally:
            await client.close()

    async def test_google_unavailable(self, auth: Authenticator) -> None:
        """Google 5xx → FederationUnavailable"""
        client = google_client(status_code=502)
        try:
            with pytest.raises(FederationUnavailable):
                await auth.complete_google_login(client, "code", "verifier")
        finally:
            await client.close()

    async def test_id_token_without_email(self, auth: Authenticator) -> None:
        """email 없는 ID 토큰 → FederationRejected"""
        client = google_client(email="")
        try:
            with pytest.raises(FederationRejected):
                await auth.complete_google_login(client, "code", "verifier")
        finally:
            await client.close()
