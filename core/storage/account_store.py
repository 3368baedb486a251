"""
AccountStore - 계좌 저장소

accounts 테이블 CRUD.
balance는 increment_field로만 변경 (LedgerCoordinator 전용).
"""

import logging
from datetime import datetime
from typing import Any

from core.domain.models import Account
from core.storage.base import RecordStore
from core.storage.queries import AccountQuery, Page, PageRequest

logger = logging.getLogger(__name__)


class AccountStore(RecordStore):
    """계좌 저장소

    사용 예시:
    ```python
    store = AccountStore(db)

    async with db.transaction():
        await store.insert(Account.create(owner_id, "Main Wallet", "Wallet"))

    account = await store.get(account_id, owner_id=owner_id)
    ```
    """

    TABLE = "accounts"
    KEY_COLUMN = "account_id"
    COLUMNS = (
        "account_id",
        "owner_id",
        "name",
        "kind",
        "balance",
        "opening_balance",
        "account_number",
        "created_at",
    )
    # 클라이언트가 바꿀 수 있는 필드 (balance, opening_balance 제외)
    UPDATABLE_FIELDS = frozenset({"name", "kind", "account_number"})
    COUNTER_FIELDS = frozenset({"balance"})

    def _to_record(self, row: tuple[Any, ...]) -> Account:
        return Account(
            account_id=row[0],
            owner_id=row[1],
            name=row[2],
            kind=row[3],
            balance=row[4],
            opening_balance=row[5],
            account_number=row[6],
            created_at=datetime.fromisoformat(row[7]),
        )

    def _to_row(self, record: Account) -> tuple[Any, ...]:
        return (
            record.account_id,
            record.owner_id,
            record.name,
            record.kind,
            record.balance,
            record.opening_balance,
            record.account_number,
            record.created_at.isoformat(),
        )

    async def get_balance(self, account_id: str) -> int | None:
        """현재 잔액 조회 (없으면 None)"""
        row = await self.db.fetchone(
            "SELECT balance FROM accounts WHERE account_id = ?",
            (account_id,),
        )
        return row[0] if row else None

    async def list_accounts(self, query: AccountQuery, page: PageRequest) -> Page:
        """계좌 목록 조회 (생성순)

        Args:
            query: 필터 조건
            page: 페이지 요청

        Returns:
            Page (items: list[Account])
        """
        where_sql, params = query.to_where()
        total = await self._count(where_sql, params)

        rows = await self.db.fetchall(
            f"""
            {self._select_sql}
            WHERE {where_sql}
            ORDER BY created_at, account_id
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
