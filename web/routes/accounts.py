"""
계좌 라우트

계좌 CRUD API.
잔액은 거래를 통해서만 변경됨 (수정 요청의 balance 필드는 거부).
"""

from fastapi import APIRouter, Depends, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.domain.models import User
from core.storage.queries import AccountQuery, PageRequest
from web.dependencies import get_current_user, get_db, get_db_write
from web.models.requests import AccountCreateRequest, AccountUpdateRequest
from web.models.responses import (
    AccountCreatedResponse,
    AccountPageResponse,
    AccountResponse,
    DeletedResponse,
)
from web.services.account_service import AccountService

router = APIRouter(prefix="/api", tags=["Accounts"])


@router.get("/accounts", response_model=AccountPageResponse)
async def list_accounts(
    page: int = Query(default=1, description="페이지 (1 미만은 1로 보정)"),
    page_size: int = Query(default=Defaults.PAGE_SIZE, description="페이지 크기 (최대 100)"),
    kind: str | None = Query(default=None, description="계좌 종류"),
    search_term: str | None = Query(default=None, description="이름 검색어 (대소문자 무시)"),
    min_balance: int | None = Query(default=None, description="최소 잔액"),
    max_balance: int | None = Query(default=None, description="최대 잔액"),
    user: User = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db),
) -> dict:
    """계좌 목록 조회 (생성순)"""
    service = AccountService(db)

    query = AccountQuery(
        owner_id=user.user_id,
        kind=kind,
        search_term=search_term,
        min_balance=min_balance,
        max_balance=max_balance,
    )
    result = await service.list_accounts(query, PageRequest(page=page, page_size=page_size))

    return result.to_dict()


@router.get("/accounts/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str = Path(..., description="계좌 ID"),
    user: User = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db),
) -> dict:
    """계좌 단건 조회"""
    service = AccountService(db)

    account = await service.get_account(user.user_id, account_id)

    return account.to_dict()


@router.post("/accounts", response_model=AccountCreatedResponse, status_code=201)
async def create_account(
    request: AccountCreateRequest,
    user: User = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict:
    """계좌 생성"""
    service = AccountService(db)

    account = await service.create_account(
        owner_id=user.user_id,
        name=request.name,
        kind=request.kind,
        account_number=request.account_number,
        opening_balance=request.opening_balance,
    )

    return {"data": account.to_dict(), "message": "Account created successfully."}


@router.put("/accounts/{account_id}", response_model=AccountResponse)
async def update_account(
    request: AccountUpdateRequest,
    account_id: str = Path(..., description="계좌 ID"),
    user: User = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict:
    """계좌 정보 수정 (name, kind, account_number)"""
    service = AccountService(db)

    account = await service.update_account(
        user.user_id,
        account_id,
        request.model_dump(exclude_unset=True),
    )

    return account.to_dict()


@router.delete("/accounts/{account_id}", response_model=DeletedResponse)
async def delete_account(
    account_id: str = Path(..., description="계좌 ID"),
    user: User = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
) -> DeletedResponse:
    """계좌 삭제

    거래가 참조 중이면 409 AccountInUse.
    """
    service = AccountService(db)

    await service.delete_account(user.user_id, account_id)

    return DeletedResponse(message="Account deleted", id=account_id)
