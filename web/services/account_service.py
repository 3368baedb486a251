"""
계좌 서비스

AccountStore CRUD.
잔액은 여기서 변경하지 않음 (LedgerCoordinator 전용).
"""

import logging
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.errors import AccountInUse, NotFound, ValidationError
from core.domain.models import Account
from core.storage.account_store import AccountStore
from core.storage.queries import AccountQuery, Page, PageRequest
from core.storage.transaction_store import TransactionStore
from core.types import AccountKind

logger = logging.getLogger(__name__)


class AccountService:
    """계좌 서비스

    Args:
        db: SQLite 어댑터 (변경 연산은 쓰기 가능 연결 필요)
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = AccountStore(db)
        self.transactions = TransactionStore(db)

    async def list_accounts(self, query: AccountQuery, page: PageRequest) -> Page:
        """계좌 목록 조회"""
        return await self.store.list_accounts(query, page)

    async def get_account(self, owner_id: str, account_id: str) -> Account:
        """계좌 단건 조회

        Raises:
            NotFound: 없거나 다른 소유자의 계좌
        """
        account = await self.store.get(account_id, owner_id=owner_id)
        if account is None:
            raise NotFound(f"Account not found: {account_id}")
        return account

    async def create_account(
        self,
        owner_id: str,
        name: str,
        kind: AccountKind | str,
        account_number: str | None = None,
        opening_balance: int = 0,
    ) -> Account:
        """계좌 생성 (잔액 = 기초 잔액)"""
        account = Account.create(
            owner_id=owner_id,
            name=name,
            kind=kind,
            opening_balance=opening_balance,
            account_number=account_number,
        )

        async with self.db.transaction():
            await self.store.insert(account)

        logger.info(
            f"계좌 생성: {account.name} ({account.kind})",
            extra={"account_id": account.account_id},
        )
        return account

    async def update_account(
        self,
        owner_id: str,
        account_id: str,
        changes: dict[str, Any],
    ) -> Account:
        """계좌 정보 수정 (name, kind, account_number만)

        Raises:
            NotFound: 계좌 없음
            ValidationError: 허용되지 않은 필드 또는 빈 값
        """
        fields = dict(changes)
        if "kind" in fields:
            if fields["kind"] is None:
                raise ValidationError("kind는 null일 수 없습니다")
            try:
                fields["kind"] = AccountKind(fields["kind"]).value
            except ValueError as e:
                raise ValidationError(f"지원하지 않는 계좌 종류입니다: '{fields['kind']}'") from e
        if "name" in fields:
            if not fields["name"] or not fields["name"].strip():
                raise ValidationError("계좌 이름은 비어 있을 수 없습니다")
            fields["name"] = fields["name"].strip()

        forbidden = set(fields) - AccountStore.UPDATABLE_FIELDS
        if forbidden:
            raise ValidationError(f"수정할 수 없는 필드입니다: {sorted(forbidden)}")

        async with self.db.transaction():
            if not await self.store.exists(account_id, owner_id=owner_id):
                raise NotFound(f"Account not found: {account_id}")
            await self.store.update_fields(account_id, fields)
            account = await self.store.get(account_id, owner_id=owner_id)

        return account

    async def delete_account(self, owner_id: str, account_id: str) -> None:
        """계좌 삭제

        거래가 참조 중이면 삭제하지 않음.

        Raises:
            NotFound: 계좌 없음
            AccountInUse: 출금/입금 계좌로 참조하는 거래가 있음
        """
        async with self.db.transaction():
            if not await self.store.exists(account_id, owner_id=owner_id):
                raise NotFound(f"Account not found: {account_id}")

            referencing = await self.transactions.count_referencing(account_id)
            if referencing:
                raise AccountInUse(
                    f"Account is referenced by {referencing} transaction(s): {account_id}"
                )

            await self.store.delete(account_id)

        logger.info("계좌 삭제", extra={"account_id": account_id})
