"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
모든 요청은 허용된 필드만 받음 (extra="forbid", balance 등 직접 수정 불가).
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from core.constants import Defaults
from core.types import AccountKind, TransactionKind


# =========================================================================
# 인증
# =========================================================================


class SignupRequest(BaseModel):
    """이메일/비밀번호 가입 요청"""

    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., min_length=1, description="사용자 이름")
    email: str = Field(..., min_length=3, description="이메일")
    password: str = Field(..., min_length=1, description="비밀번호")


class SigninRequest(BaseModel):
    """이메일/비밀번호 로그인 요청"""

    model_config = ConfigDict(extra="forbid")

    email: str = Field(..., description="이메일")
    password: str = Field(..., description="비밀번호")


class GoogleCallbackRequest(BaseModel):
    """Google 로그인 콜백 요청 (code, state 누락은 InvalidLoginAttempt로 처리)"""

    code: str | None = Field(default=None, description="인가 코드")
    state: str | None = Field(default=None, description="로그인 시작 시 발급한 state")


# =========================================================================
# 계좌
# =========================================================================


class AccountCreateRequest(BaseModel):
    """계좌 생성 요청"""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {"name": "Main Wallet", "kind": "Wallet", "opening_balance": 0},
            ]
        },
    )

    name: str = Field(..., min_length=1, description="계좌 이름")
    kind: AccountKind = Field(..., description="계좌 종류 (Bank/Wallet/Cash)")
    account_number: str | None = Field(default=None, description="계좌 번호")
    opening_balance: int = Field(
        default=0,
        ge=Defaults.MIN_MONEY,
        le=Defaults.MAX_MONEY,
        description="기초 잔액 (최소 화폐 단위)",
    )


class AccountUpdateRequest(BaseModel):
    """계좌 수정 요청 (보낸 필드만 적용, 잔액은 수정 불가)"""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, description="계좌 이름")
    kind: AccountKind | None = Field(default=None, description="계좌 종류")
    account_number: str | None = Field(default=None, description="계좌 번호")


# =========================================================================
# 거래
# =========================================================================


class TransactionCreateRequest(BaseModel):
    """거래 생성 요청

    destination_account_id는 transfer일 때만 (규칙 검증은 LedgerCoordinator에서).
    """

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "date": "2024-05-01T09:00:00Z",
                    "description": "Salary",
                    "amount": 1000,
                    "kind": "income",
                    "category_id": "salary",
                    "source_account_id": "<account id>",
                },
                {
                    "date": "2024-05-02T12:00:00Z",
                    "amount": 500,
                    "kind": "transfer",
                    "category_id": "transfer",
                    "source_account_id": "<account id>",
                    "destination_account_id": "<account id>",
                },
            ]
        },
    )

    date: datetime = Field(..., description="거래 일시")
    description: str | None = Field(default=None, description="설명")
    amount: int = Field(
        ..., gt=0, le=Defaults.MAX_MONEY, strict=True, description="금액 (양수, 최소 화폐 단위)"
    )
    kind: TransactionKind = Field(..., description="거래 종류 (income/expense/transfer)")
    category_id: str = Field(..., min_length=1, description="카테고리 ID")
    source_account_id: str = Field(..., min_length=1, description="출금(기준) 계좌 ID")
    destination_account_id: str | None = Field(default=None, description="입금 계좌 ID (transfer 전용)")
    status: str | None = Field(default=None, description="상태 (기본값 cleared)")


class TransactionUpdateRequest(BaseModel):
    """거래 수정 요청

    보낸 필드만 적용 (model_dump(exclude_unset=True)).
    destination_account_id: null을 명시하면 입금 계좌 제거.
    """

    model_config = ConfigDict(extra="forbid")

    date: datetime | None = Field(default=None, description="거래 일시")
    description: str | None = Field(default=None, description="설명")
    amount: int | None = Field(
        default=None, gt=0, le=Defaults.MAX_MONEY, strict=True, description="금액"
    )
    kind: TransactionKind | None = Field(default=None, description="거래 종류")
    category_id: str | None = Field(default=None, min_length=1, description="카테고리 ID")
    source_account_id: str | None = Field(default=None, min_length=1, description="출금 계좌 ID")
    destination_account_id: str | None = Field(default=None, description="입금 계좌 ID")
    status: str | None = Field(default=None, description="상태")
