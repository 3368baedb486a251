"""
거래 서비스

거래 조회 및 LedgerCoordinator를 통한 생성/수정/삭제
"""

from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.errors import NotFound
from core.domain.models import Transaction
from core.ledger.coordinator import LedgerCoordinator
from core.storage.queries import Page, PageRequest, TransactionQuery
from core.storage.transaction_store import TransactionStore


class TransactionService:
    """거래 서비스

    조회는 TransactionStore를 직접 사용하고,
    변경은 모두 LedgerCoordinator에 위임 (잔액 동시 갱신).

    Args:
        db: SQLite 어댑터 (변경 연산은 쓰기 가능 연결 필요)
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = TransactionStore(db)
        self.ledger = LedgerCoordinator(db)

    async def list_transactions(self, query: TransactionQuery, page: PageRequest) -> Page:
        """거래 목록 조회 (날짜 내림차순)"""
        return await self.store.list_transactions(query, page)

    async def get_transaction(self, owner_id: str, transaction_id: str) -> Transaction:
        """거래 단건 조회

        Raises:
            NotFound: 없거나 다른 소유자의 거래
        """
        transaction = await self.store.get(transaction_id, owner_id=owner_id)
        if transaction is None:
            raise NotFound(f"Transaction not found: {transaction_id}")
        return transaction

    async def create_transaction(self, owner_id: str, fields: dict[str, Any]) -> Transaction:
        """거래 생성 (잔액 반영 포함)"""
        return await self.ledger.create_transaction(owner_id, **fields)

    async def update_transaction(
        self,
        owner_id: str,
        transaction_id: str,
        changes: dict[str, Any],
    ) -> Transaction:
        """거래 수정 (잔액 재계산 포함)"""
        return await self.ledger.update_transaction(owner_id, transaction_id, changes)

    async def delete_transaction(self, owner_id: str, transaction_id: str) -> Transaction:
        """거래 삭제 (잔액 원복 포함)"""
        return await self.ledger.delete_transaction(owner_id, transaction_id)
