"""
Ledger Coordinator

거래 생성/수정/삭제와 계좌 잔액 갱신을 하나의 원자적 작업 단위로 처리.

처리 순서 (모두 같은 작업 단위 안에서):
1. 참조 계좌 존재 확인 (소유자 범위)
2. 기존 거래 효과 취소 (수정/삭제)
3. 거래 레코드 변경
4. 새 거래 효과 반영 (생성/수정)

어느 단계에서든 실패하면 작업 단위 전체가 롤백되어
거래 레코드와 잔액 모두 시작 전 상태로 남음.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator

import aiosqlite

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.errors import InvalidReference, LedgerError, NotFound, StorageFailure
from core.domain.models import Transaction
from core.ledger.deltas import compute_deltas, net_deltas
from core.ledger.types import BalanceDelta, Direction
from core.storage.account_store import AccountStore
from core.storage.transaction_store import TransactionStore

logger = logging.getLogger(__name__)


class LedgerCoordinator:
    """거래-잔액 정합성 조정자

    잔액을 변경하는 유일한 경로. 저장소는 커밋하지 않고,
    작업 단위(SQLiteAdapter.transaction())는 이 클래스가 소유.

    Args:
        db: 쓰기 가능한 SQLiteAdapter

    사용 예시:
    ```python
    ledger = LedgerCoordinator(db)

    txn = await ledger.create_transaction(
        owner_id,
        date=datetime.now(timezone.utc),
        amount=5000,
        kind="expense",
        category_id="food",
        source_account_id=wallet_id,
    )

    await ledger.update_transaction(owner_id, txn.transaction_id, {"amount": 7000})
    await ledger.delete_transaction(owner_id, txn.transaction_id)
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.accounts = AccountStore(db)
        self.transactions = TransactionStore(db)

    # -------------------------------------------------------------------------
    # 작업 단위
    # -------------------------------------------------------------------------

    @asynccontextmanager
    async def _unit_of_work(self, operation: str, transaction_id: str | None = None) -> AsyncIterator[None]:
        """작업 단위 실행 + 오류 분류

        LedgerError는 롤백 후 그대로 전파.
        DB 오류는 롤백 후 StorageFailure로 변환.
        """
        try:
            async with self.db.transaction():
                yield
        except LedgerError as e:
            logger.warning(
                f"Ledger {operation} 롤백: {e.code}",
                extra={"transaction_id": transaction_id, "reason": e.message},
            )
            raise
        except aiosqlite.Error as e:
            logger.error(
                f"Ledger {operation} 커밋 실패: {e}",
                extra={"transaction_id": transaction_id},
            )
            raise StorageFailure(f"저장소 오류로 {operation} 작업이 롤백되었습니다: {e}") from e

    async def _check_references(self, owner_id: str, transaction: Transaction) -> None:
        """참조 계좌 존재 확인

        Raises:
            InvalidReference: 계좌가 없거나 다른 소유자의 계좌
        """
        for account_id in transaction.account_ids:
            if not await self.accounts.exists(account_id, owner_id=owner_id):
                raise InvalidReference(
                    f"계좌를 찾을 수 없습니다: {account_id}",
                    account_id=account_id,
                )

    async def _apply_deltas(self, transaction: Transaction, direction: Direction) -> list[BalanceDelta]:
        """거래 효과를 계좌 잔액에 반영 (direction에 따라 반영/취소)"""
        deltas = compute_deltas(transaction, direction)
        for delta in deltas:
            updated = await self.accounts.increment_field(delta.account_id, "balance", delta.amount)
            if not updated:
                raise InvalidReference(
                    f"계좌를 찾을 수 없습니다: {delta.account_id}",
                    account_id=delta.account_id,
                )
        return deltas

    async def _load(self, owner_id: str, transaction_id: str) -> Transaction:
        transaction = await self.transactions.get(transaction_id, owner_id=owner_id)
        if transaction is None:
            raise NotFound(f"거래를 찾을 수 없습니다: {transaction_id}")
        return transaction

    # -------------------------------------------------------------------------
    # 거래 연산
    # -------------------------------------------------------------------------

    async def create_transaction(
        self,
        owner_id: str,
        date: datetime,
        amount: int,
        kind: str,
        category_id: str,
        source_account_id: str,
        destination_account_id: str | None = None,
        description: str | None = None,
        status: str | None = None,
    ) -> Transaction:
        """거래 생성 + 잔액 반영

        Returns:
            저장된 Transaction

        Raises:
            ValidationError: 형식 오류 (저장소 접근 전)
            MissingDestination: 입금 계좌 규칙 위반 (저장소 접근 전)
            InvalidReference: 참조 계좌 없음
            BalanceOutOfRange: 잔액이 64비트 정수 범위를 벗어남
            StorageFailure: 커밋 실패
        """
        transaction = Transaction.create(
            owner_id=owner_id,
            date=date,
            amount=amount,
            kind=kind,
            category_id=category_id,
            source_account_id=source_account_id,
            destination_account_id=destination_account_id,
            description=description,
            status=status,
        )

        async with self._unit_of_work("create", transaction.transaction_id):
            await self._check_references(owner_id, transaction)
            await self.transactions.insert(transaction)
            applied = await self._apply_deltas(transaction, Direction.APPLY)

        logger.info(
            f"거래 생성: {transaction.kind} {transaction.amount}",
            extra={
                "transaction_id": transaction.transaction_id,
                "deltas": net_deltas(applied),
            },
        )
        return transaction

    async def update_transaction(
        self,
        owner_id: str,
        transaction_id: str,
        changes: dict[str, Any],
    ) -> Transaction:
        """거래 수정 + 잔액 재계산

        기존 효과를 취소하고 수정된 효과를 반영.
        변경이 없으면 취소와 반영이 상쇄되어 잔액 변화 없음.

        Args:
            owner_id: 소유자 ID
            transaction_id: 거래 ID
            changes: 부분 변경 dict (AMENDABLE_FIELDS만 허용)

        Returns:
            수정된 Transaction

        Raises:
            NotFound: 거래 없음
            ValidationError, MissingDestination: 수정 후 불변식 위반
            InvalidReference: 참조 계좌 없음
            BalanceOutOfRange: 잔액이 64비트 정수 범위를 벗어남
            StorageFailure: 커밋 실패
        """
        async with self._unit_of_work("update", transaction_id):
            current = await self._load(owner_id, transaction_id)
            amended = current.amend(changes)
            await self._check_references(owner_id, amended)

            reversed_ = await self._apply_deltas(current, Direction.REVERSE)
            await self.transactions.update_fields(
                transaction_id,
                self.transactions.changed_columns(current, amended),
            )
            applied = await self._apply_deltas(amended, Direction.APPLY)

        logger.info(
            f"거래 수정: {amended.kind} {amended.amount}",
            extra={
                "transaction_id": transaction_id,
                "deltas": net_deltas(reversed_, applied),
            },
        )
        return amended

    async def delete_transaction(self, owner_id: str, transaction_id: str) -> Transaction:
        """거래 삭제 + 잔액 원복

        Returns:
            삭제된 Transaction

        Raises:
            NotFound: 거래 없음
            StorageFailure: 커밋 실패
        """
        async with self._unit_of_work("delete", transaction_id):
            current = await self._load(owner_id, transaction_id)
            await self.transactions.delete(transaction_id)
            reversed_ = await self._apply_deltas(current, Direction.REVERSE)

        logger.info(
            f"거래 삭제: {current.kind} {current.amount}",
            extra={
                "transaction_id": transaction_id,
                "deltas": net_deltas(reversed_),
            },
        )
        return current

    # -------------------------------------------------------------------------
    # 검증
    # -------------------------------------------------------------------------

    async def audit_balances(self, owner_id: str) -> dict[str, dict[str, int]]:
        """저장된 잔액과 거래 내역으로 다시 계산한 잔액 비교

        정상 운영에서는 잔액을 다시 계산하지 않음. 점검/테스트 용도.

        Returns:
            불일치 계좌만 {account_id: {"stored": 저장 잔액, "expected": 계산 잔액}}
        """
        rows = await self.db.fetchall(
            """
            SELECT a.account_id, a.balance, a.opening_balance
                + COALESCE((
                    SELECT SUM(CASE
                        WHEN t.kind = 'income' AND t.source_account_id = a.account_id THEN t.amount
                        WHEN t.kind = 'expense' AND t.source_account_id = a.account_id THEN -t.amount
                        WHEN t.kind = 'transfer' AND t.source_account_id = a.account_id THEN -t.amount
                        WHEN t.kind = 'transfer' AND t.destination_account_id = a.account_id THEN t.amount
                        ELSE 0
                    END)
                    FROM transactions t
                    WHERE t.source_account_id = a.account_id
                       OR t.destination_account_id = a.account_id
                ), 0)
            FROM accounts a
            WHERE a.owner_id = ?
            """,
            (owner_id,),
        )

        drift = {
            account_id: {"stored": stored, "expected": expected}
            for account_id, stored, expected in rows
            if stored != expected
        }
        if drift:
            logger.warning("잔액 불일치 감지", extra={"accounts": list(drift)})
        return drift
