"""
TransactionStore - 거래 저장소

transactions 테이블 CRUD 및 목록 조회.
쓰기 연산은 LedgerCoordinator의 작업 단위 안에서만 호출됨.
"""

import logging
from datetime import datetime
from typing import Any

from core.domain.models import Transaction
from core.storage.base import RecordStore
from core.storage.queries import Page, PageRequest, TransactionQuery

logger = logging.getLogger(__name__)


class TransactionStore(RecordStore):
    """거래 저장소"""

    TABLE = "transactions"
    KEY_COLUMN = "transaction_id"
    COLUMNS = (
        "transaction_id",
        "owner_id",
        "date",
        "description",
        "amount",
        "kind",
        "category_id",
        "source_account_id",
        "destination_account_id",
        "status",
        "created_at",
        "updated_at",
    )
    UPDATABLE_FIELDS = frozenset({
        "date",
        "description",
        "amount",
        "kind",
        "category_id",
        "source_account_id",
        "destination_account_id",
        "status",
        "updated_at",
    })

    def _to_record(self, row: tuple[Any, ...]) -> Transaction:
        return Transaction(
            transaction_id=row[0],
            owner_id=row[1],
            date=datetime.fromisoformat(row[2]),
            description=row[3],
            amount=row[4],
            kind=row[5],
            category_id=row[6],
            source_account_id=row[7],
            destination_account_id=row[8],
            status=row[9],
            created_at=datetime.fromisoformat(row[10]),
            updated_at=datetime.fromisoformat(row[11]),
        )

    def _to_row(self, record: Transaction) -> tuple[Any, ...]:
        return (
            record.transaction_id,
            record.owner_id,
            record.date.isoformat(),
            record.description,
            record.amount,
            record.kind,
            record.category_id,
            record.source_account_id,
            record.destination_account_id,
            record.status,
            record.created_at.isoformat(),
            record.updated_at.isoformat(),
        )

    def changed_columns(self, old: Transaction, new: Transaction) -> dict[str, Any]:
        """두 거래 상태의 차이를 컬럼 값 dict로 반환 (updated_at 포함)"""
        old_row = dict(zip(self.COLUMNS, self._to_row(old)))
        new_row = dict(zip(self.COLUMNS, self._to_row(new)))
        return {
            name: value
            for name, value in new_row.items()
            if name in self.UPDATABLE_FIELDS and old_row[name] != value
        }

    async def count_referencing(self, account_id: str) -> int:
        """계좌를 출금/입금 계좌로 참조하는 거래 수"""
        return await self._count(
            "source_account_id = ? OR destination_account_id = ?",
            (account_id, account_id),
        )

    async def list_transactions(self, query: TransactionQuery, page: PageRequest) -> Page:
        """거래 목록 조회 (날짜 내림차순)

        Args:
            query: 필터 조건
            page: 페이지 요청

        Returns:
            Page (items: list[Transaction])
        """
        where_sql, params = query.to_where()
        total = await self._count(where_sql, params)

        rows = await self.db.fetchall(
            f"""
            {self._select_sql}
            WHERE {where_sql}
            ORDER BY date DESC, created_at DESC
            LIMIT ? OFFSET ?
            """,
            (*params, page.page_size, page.offset),
        )

        return Page(
            page=page.page,
            page_size=page.page_size,
            total=total,
            items=[self._to_record(row) for row in rows],
        )
