"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    mode: str = Field(..., description="실행 모드 (development/production)")
    version: str = Field(..., description="API 버전")


class ErrorResponse(BaseModel):
    """오류 응답"""

    error: str = Field(..., description="오류 종류 (ValidationError, NotFound 등)")
    message: str = Field(..., description="오류 설명")


class UserResponse(BaseModel):
    """사용자 응답 (비밀번호 해시 제외)"""

    id: str = Field(..., description="사용자 ID")
    username: str = Field(..., description="사용자 이름")
    email: str = Field(..., description="이메일")
    profile_picture: str | None = Field(default=None, description="프로필 사진 URL")
    provider: str | None = Field(default=None, description="외부 인증 제공자")
    created_at: str = Field(..., description="가입 시간")
    updated_at: str = Field(..., description="수정 시간")


class SessionResponse(BaseModel):
    """가입/로그인 응답"""

    message: str = Field(..., description="결과 메시지")
    user: UserResponse = Field(..., description="로그인 사용자")


class GoogleLoginResponse(BaseModel):
    """Google 로그인 시작 응답"""

    authorization_url: str = Field(..., description="리다이렉트할 Google 로그인 URL")
    message: str = Field(..., description="안내 메시지")


class AccountResponse(BaseModel):
    """계좌 응답"""

    id: str = Field(..., description="계좌 ID")
    owner_id: str = Field(..., description="소유자 ID")
    name: str = Field(..., description="계좌 이름")
    kind: str = Field(..., description="계좌 종류")
    balance: int = Field(..., description="현재 잔액 (최소 화폐 단위)")
    opening_balance: int = Field(..., description="기초 잔액")
    account_number: str | None = Field(default=None, description="계좌 번호")
    created_at: str = Field(..., description="생성 시간")


class AccountCreatedResponse(BaseModel):
    """계좌 생성 응답"""

    data: AccountResponse
    message: str = Field(..., description="결과 메시지")


class AccountPageResponse(BaseModel):
    """계좌 목록 응답"""

    page: int
    page_size: int
    total: int
    total_pages: int
    data: list[AccountResponse]


class TransactionResponse(BaseModel):
    """거래 응답"""

    id: str = Field(..., description="거래 ID")
    owner_id: str = Field(..., description="소유자 ID")
    date: str = Field(..., description="거래 일시 (UTC)")
    description: str | None = Field(default=None, description="설명")
    amount: int = Field(..., description="금액 (양수, 최소 화폐 단위)")
    kind: str = Field(..., description="거래 종류")
    category_id: str = Field(..., description="카테고리 ID")
    source_account_id: str = Field(..., description="출금 계좌 ID")
    destination_account_id: str | None = Field(default=None, description="입금 계좌 ID")
    status: str = Field(..., description="상태")
    created_at: str = Field(..., description="생성 시간")
    updated_at: str = Field(..., description="수정 시간")


class TransactionPageResponse(BaseModel):
    """거래 목록 응답"""

    page: int
    page_size: int
    total: int
    total_pages: int
    data: list[TransactionResponse]


class DeletedResponse(BaseModel):
    """삭제 응답"""

    message: str = Field(..., description="결과 메시지")
    id: str = Field(..., description="삭제된 레코드 ID")
