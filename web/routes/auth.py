"""
인증 라우트

이메일/비밀번호 가입·로그인, 로그아웃, Google 로그인.
세션 토큰은 httpOnly 쿠키(JWT)로 발급.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from adapters.google.oauth_client import (
    GoogleOAuthClient,
    generate_code_verifier,
    generate_state,
)
from core.auth.authenticator import Authenticator
from core.auth.errors import InvalidLoginAttempt
from core.config.loader import Settings
from core.constants import Defaults
from core.domain.models import User
from web.dependencies import (
    get_app_settings,
    get_authenticator,
    get_current_user,
    get_google_client,
)
from web.models.requests import GoogleCallbackRequest, SigninRequest, SignupRequest
from web.models.responses import GoogleLoginResponse, SessionResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _set_cookie(response: Response, key: str, value: str, max_age: int, settings: Settings) -> None:
    response.set_cookie(
        key=key,
        value=value,
        max_age=max_age,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def _set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    _set_cookie(response, Defaults.SESSION_COOKIE, token, settings.session_ttl_sec, settings)


@router.get("")
async def auth_index() -> dict[str, str]:
    """인증 라우트 안내"""
    return {"message": "This is the auth routes"}


@router.post("/signup", response_model=SessionResponse)
async def signup(
    request: SignupRequest,
    response: Response,
    authenticator: Authenticator = Depends(get_authenticator),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """이메일/비밀번호 가입 (가입 후 바로 로그인)"""
    session = await authenticator.signup(request.username, request.email, request.password)

    _set_session_cookie(response, session.token, settings)

    return {"message": "Signed Up Successfully", "user": session.user.to_dict()}


@router.post("/signin", response_model=SessionResponse)
async def signin(
    request: SigninRequest,
    response: Response,
    authenticator: Authenticator = Depends(get_authenticator),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """이메일/비밀번호 로그인"""
    session = await authenticator.signin(request.email, request.password)

    _set_session_cookie(response, session.token, settings)

    return {"message": "Signed In Successfully", "user": session.user.to_dict()}


@router.post("/signout")
async def signout(response: Response) -> dict[str, str]:
    """로그아웃 (세션 쿠키 삭제)"""
    response.delete_cookie(Defaults.SESSION_COOKIE, path="/")
    return {"message": "Signed Out Successfully"}


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)) -> dict:
    """현재 로그인 사용자"""
    return user.to_dict()


# =========================================================================
# Google 로그인
# =========================================================================


@router.get("/google", response_model=GoogleLoginResponse)
async def google_login(
    response: Response,
    client: GoogleOAuthClient = Depends(get_google_client),
    settings: Settings = Depends(get_app_settings),
) -> GoogleLoginResponse:
    """Google 로그인 URL 발급

    state, code_verifier를 쿠키로 저장 (10분).
    """
    state = generate_state()
    code_verifier = generate_code_verifier()
    url = client.create_authorization_url(state, code_verifier)

    _set_cookie(response, Defaults.OAUTH_STATE_COOKIE, state, Defaults.OAUTH_EXCHANGE_TTL_SEC, settings)
    _set_cookie(response, Defaults.OAUTH_VERIFIER_COOKIE, code_verifier, Defaults.OAUTH_EXCHANGE_TTL_SEC, settings)

    return GoogleLoginResponse(authorization_url=url, message="Please redirect to this URL")


@router.post("/google/callback")
async def google_callback(
    body: GoogleCallbackRequest,
    request: Request,
    response: Response,
    client: GoogleOAuthClient = Depends(get_google_client),
    authenticator: Authenticator = Depends(get_authenticator),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """Google 로그인 콜백

    state를 쿠키와 비교한 뒤 인가 코드를 교환하고 사용자와 연결.
    """
    stored_state = request.cookies.get(Defaults.OAUTH_STATE_COOKIE)
    code_verifier = request.cookies.get(Defaults.OAUTH_VERIFIER_COOKIE)

    if not body.code or not body.state or not stored_state or not code_verifier:
        raise InvalidLoginAttempt("Invalid login attempt")
    if body.state != stored_state:
        logger.warning("Google 로그인 state 불일치")
        raise InvalidLoginAttempt("Invalid login attempt")

    session = await authenticator.complete_google_login(client, body.code, code_verifier)

    response.delete_cookie(Defaults.OAUTH_STATE_COOKIE, path="/")
    response.delete_cookie(Defaults.OAUTH_VERIFIER_COOKIE, path="/")
    _set_session_cookie(response, session.token, settings)

    return {
        "message": "Signed In Successfully",
        "user_id": session.user.user_id,
        "user": session.user.to_dict(),
    }
