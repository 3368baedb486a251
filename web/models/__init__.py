"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountCreateRequest,
    AccountUpdateRequest,
    GoogleCallbackRequest,
    SigninRequest,
    SignupRequest,
    TransactionCreateRequest,
    TransactionUpdateRequest,
)
from web.models.responses import (
    AccountCreatedResponse,
    AccountPageResponse,
    AccountResponse,
    DeletedResponse,
    ErrorResponse,
    GoogleLoginResponse,
    HealthResponse,
    SessionResponse,
    TransactionPageResponse,
    TransactionResponse,
    UserResponse,
)

__all__ = [
    # Requests
    "AccountCreateRequest",
    "AccountUpdateRequest",
    "GoogleCallbackRequest",
    "SigninRequest",
    "SignupRequest",
    "TransactionCreateRequest",
    "TransactionUpdateRequest",
    # Responses
    "AccountCreatedResponse",
    "AccountPageResponse",
    "AccountResponse",
    "DeletedResponse",
    "ErrorResponse",
    "GoogleLoginResponse",
    "HealthResponse",
    "SessionResponse",
    "TransactionPageResponse",
    "TransactionResponse",
    "UserResponse",
]
