"""
Google 어댑터 패키지

Google 로그인(OAuth 2.0 + PKCE) 클라이언트 제공.
"""

from adapters.google.oauth_client import (
    GoogleOAuthClient,
    GoogleOAuthError,
    GoogleOAuthFetchError,
    GoogleOAuthRequestError,
    decode_id_token,
    generate_code_verifier,
    generate_state,
)
from adapters.google.models import GoogleIdentity, GoogleTokens

__all__ = [
    "GoogleOAuthClient",
    "GoogleOAuthError",
    "GoogleOAuthFetchError",
    "GoogleOAuthRequestError",
    "GoogleIdentity",
    "GoogleTokens",
    "decode_id_token",
    "generate_code_verifier",
    "generate_state",
]
