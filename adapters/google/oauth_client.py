"""
Google OAuth 2.0 클라이언트

Authorization Code + PKCE(S256) 흐름.
1. create_authorization_url(): state, code_verifier로 로그인 페이지 URL 생성
2. validate_authorization_code(): 인가 코드를 토큰으로 교환
3. decode_id_token(): ID 토큰 claim 추출

주의: ID 토큰은 TLS로 토큰 엔드포인트에서 직접 받은 것만 사용하므로
서명 검증 없이 claim만 읽음.
"""

import base64
import hashlib
import logging
import secrets
from typing import Any
from urllib.parse import urlencode

import httpx
import jwt

from adapters.google.models import GoogleIdentity, GoogleTokens
from core.constants import GoogleEndpoints

logger = logging.getLogger(__name__)


class GoogleOAuthError(Exception):
    """Google OAuth 에러 기본 클래스"""

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


class GoogleOAuthRequestError(GoogleOAuthError):
    """토큰 엔드포인트가 요청을 거부 (인가 코드 무효, 클라이언트 인증 실패 등)"""


class GoogleOAuthFetchError(GoogleOAuthError):
    """토큰 엔드포인트 통신 실패 (네트워크 오류, 5xx)"""


def generate_state() -> str:
    """CSRF 방지용 state 생성"""
    return secrets.token_urlsafe(32)


def generate_code_verifier() -> str:
    """PKCE code_verifier 생성 (43자 이상)"""
    return secrets.token_urlsafe(48)


def create_code_challenge(code_verifier: str) -> str:
    """PKCE S256 code_challenge 계산"""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def decode_id_token(id_token: str) -> GoogleIdentity:
    """ID 토큰 claim 추출

    Raises:
        GoogleOAuthRequestError: 형식 오류 또는 필수 claim(sub, email) 누락
    """
    try:
        claims = jwt.decode(id_token, options={"verify_signature": False})
    except jwt.InvalidTokenError as e:
        raise GoogleOAuthRequestError(f"Invalid ID token: {e}") from e

    if not claims.get("sub") or not claims.get("email"):
        raise GoogleOAuthRequestError("ID token is missing 'sub' or 'email' claim")

    return GoogleIdentity.from_claims(claims)


class GoogleOAuthClient:
    """Google OAuth 2.0 클라이언트

    Args:
        client_id: OAuth 클라이언트 ID
        client_secret: OAuth 클라이언트 시크릿
        redirect_uri: 등록된 redirect URI
        timeout: HTTP 요청 타임아웃 (초)
        transport: httpx 전송 계층 (테스트에서 MockTransport 주입)

    사용 예시:
    ```python
    client = GoogleOAuthClient(client_id, client_secret, redirect_uri)

    state = generate_state()
    code_verifier = generate_code_verifier()
    url = client.create_authorization_url(state, code_verifier)

    # 콜백에서
    tokens = await client.validate_authorization_code(code, code_verifier)
    identity = decode_id_token(tokens.id_token)
    ```
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 반환 (lazy init)"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def create_authorization_url(
        self,
        state: str,
        code_verifier: str,
        scopes: tuple[str, ...] = GoogleEndpoints.SCOPES,
    ) -> str:
        """Google 로그인 페이지 URL 생성

        Args:
            state: CSRF 방지용 state (쿠키에 함께 저장)
            code_verifier: PKCE code_verifier (쿠키에 함께 저장)
            scopes: 요청 scope

        Returns:
            리다이렉트할 URL
        """
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(scopes),
            "state": state,
            "code_challenge": create_code_challenge(code_verifier),
            "code_challenge_method": "S256",
        }
        return f"{GoogleEndpoints.AUTHORIZATION_URL}?{urlencode(params)}"

    async def validate_authorization_code(self, code: str, code_verifier: str) -> GoogleTokens:
        """인가 코드를 토큰으로 교환

        Args:
            code: 콜백으로 받은 인가 코드
            code_verifier: 로그인 시작 시 생성한 PKCE code_verifier

        Returns:
            GoogleTokens

        Raises:
            GoogleOAuthRequestError: 4xx 응답 (인가 코드/자격 증명 무효)
            GoogleOAuthFetchError: 네트워크 오류 또는 5xx 응답
        """
        client = await self._ensure_client()
        body = {
            "grant_type": "authorization_code",
            "code": code,
            "code_verifier": code_verifier,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
        }

        try:
            response = await client.post(
                GoogleEndpoints.TOKEN_URL,
                data=body,
                headers={"Accept": "application/json"},
            )
        except httpx.RequestError as e:
            logger.error(f"Google token request error: {e}")
            raise GoogleOAuthFetchError(str(e)) from e

        if response.status_code >= 500:
            logger.error(f"Google token endpoint error: {response.status_code}")
            raise GoogleOAuthFetchError(
                f"Google token endpoint returned {response.status_code}"
            )

        data = self._parse_json(response)

        if response.status_code >= 400:
            error_code = data.get("error")
            error_msg = data.get("error_description") or error_code or response.text
            logger.warning(
                f"Google token request rejected: {response.status_code} - {error_msg}",
                extra={"error_code": error_code},
            )
            raise GoogleOAuthRequestError(error_msg, error_code)

        if "access_token" not in data or "id_token" not in data:
            raise GoogleOAuthRequestError("Token response is missing 'access_token' or 'id_token'")

        return GoogleTokens.from_api(data)

    @staticmethod
    def _parse_json(response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise GoogleOAuthFetchError(f"Invalid JSON from Google: {e}") from e
        return data if isinstance(data, dict) else {}
