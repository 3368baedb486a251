"""
거래 라우트

거래 조회 및 생성/수정/삭제 API.
변경 요청은 모두 LedgerCoordinator를 거쳐 계좌 잔액과 함께 원자적으로 처리.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.domain.models import User
from core.storage.queries import PageRequest, TransactionQuery
from web.dependencies import get_current_user, get_db, get_db_write
from web.models.requests import TransactionCreateRequest, TransactionUpdateRequest
from web.models.responses import DeletedResponse, TransactionPageResponse, TransactionResponse
from web.services.transaction_service import TransactionService

router = APIRouter(prefix="/api", tags=["Transactions"])


@router.get("/transactions", response_model=TransactionPageResponse)
async def list_transactions(
    page: int = Query(default=1, description="페이지 (1 미만은 1로 보정)"),
    page_size: int = Query(default=Defaults.PAGE_SIZE, description="페이지 크기 (최대 100)"),
    kind: str | None = Query(default=None, description="거래 종류"),
    category_id: str | None = Query(default=None, description="카테고리 ID"),
    account_id: str | None = Query(default=None, description="출금 또는 입금 계좌 ID"),
    status: str | None = Query(default=None, description="상태"),
    min_amount: int | None = Query(default=None, description="최소 금액"),
    max_amount: int | None = Query(default=None, description="최대 금액"),
    start_date: datetime | None = Query(default=None, description="시작 일시"),
    end_date: datetime | None = Query(default=None, description="종료 일시"),
    search_term: str | None = Query(default=None, description="설명 검색어 (대소문자 무시)"),
    user: User = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db),
) -> dict:
    """거래 목록 조회 (날짜 내림차순)"""
    service = TransactionService(db)

    query = TransactionQuery(
        owner_id=user.user_id,
        kind=kind,
        category_id=category_id,
        account_id=account_id,
        status=status,
        min_amount=min_amount,
        max_amount=max_amount,
        start_date=start_date,
        end_date=end_date,
        search_term=search_term,
    )
    result = await service.list_transactions(query, PageRequest(page=page, page_size=page_size))

    return result.to_dict()


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: str = Path(..., description="거래 ID"),
    user: User = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db),
) -> dict:
    """거래 단건 조회"""
    service = TransactionService(db)

    transaction = await service.get_transaction(user.user_id, transaction_id)

    return transaction.to_dict()


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    request: TransactionCreateRequest,
    user: User = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict:
    """거래 생성

    출금/입금 계좌 잔액이 같은 작업 단위에서 갱신됨.
    """
    service = TransactionService(db)

    transaction = await service.create_transaction(user.user_id, request.model_dump())

    return transaction.to_dict()


@router.put("/transactions/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    request: TransactionUpdateRequest,
    transaction_id: str = Path(..., description="거래 ID"),
    user: User = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict:
    """거래 수정

    보낸 필드만 적용. 기존 효과를 취소하고 수정된 효과를 반영.
    """
    service = TransactionService(db)

    transaction = await service.update_transaction(
        user.user_id,
        transaction_id,
        request.model_dump(exclude_unset=True),
    )

    return transaction.to_dict()


@router.delete("/transactions/{transaction_id}", response_model=DeletedResponse)
async def delete_transaction(
    transaction_id: str = Path(..., description="거래 ID"),
    user: User = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
) -> DeletedResponse:
    """거래 삭제 (잔액 원복)"""
    service = TransactionService(db)

    await service.delete_transaction(user.user_id, transaction_id)

    return DeletedResponse(message="Transaction deleted", id=transaction_id)
