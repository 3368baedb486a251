"""
예외 핸들러

도메인/인증 예외를 HTTP 상태 코드와 구조화된 응답으로 변환.

응답 형식: {"error": <종류>, "message": <설명>}
"""

import logging

import aiosqlite
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.auth.errors import AuthError
from core.domain.errors import LedgerError, StorageFailure, ValidationError

logger = logging.getLogger(__name__)

# 예외 code → HTTP 상태 코드
STATUS_BY_CODE: dict[str, int] = {
    # Ledger
    "ValidationError": 400,
    "InvalidReference": 400,
    "MissingDestination": 400,
    "BalanceOutOfRange": 400,
    "NotFound": 404,
    "AccountInUse": 409,
    "StorageFailure": 503,
    # Auth
    "InvalidLoginAttempt": 400,
    "InvalidCredentials": 401,
    "InvalidSession": 401,
    "FederationRejected": 401,
    "EmailAlreadyRegistered": 409,
    "FederationUnavailable": 502,
    "FederationDisabled": 503,
}


def error_response(code: str, message: str) -> JSONResponse:
    """구조화된 오류 응답 생성"""
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(code, 500),
        content={"error": code, "message": message},
    )


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    return error_response(exc.code, exc.message)


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    return error_response(exc.code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 본문/쿼리 검증 실패 → 400 ValidationError

    허용되지 않은 필드(balance 등)도 같은 종류로 보고.
    """
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return error_response(ValidationError.code, "; ".join(details) or "Invalid request")


async def storage_error_handler(request: Request, exc: aiosqlite.Error) -> JSONResponse:
    """작업 단위 밖에서 발생한 DB 오류"""
    logger.error(
        f"DB 오류: {exc}",
        extra={"path": request.url.path, "method": request.method},
    )
    return error_response(StorageFailure.code, "Storage is temporarily unavailable")


def register_exception_handlers(app: FastAPI) -> None:
    """앱에 예외 핸들러 등록"""
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(aiosqlite.Error, storage_error_handler)
