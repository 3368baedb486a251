"""
레코드 저장소 기본 클래스

키 기반 레코드 저장소의 공통 연산 제공:
get / exists / insert / update_fields / delete / increment_field

주의: 저장소는 직접 커밋하지 않음. 작업 단위(SQLiteAdapter.transaction())는
호출자(LedgerCoordinator, Web 서비스)가 소유.
"""

import logging
from typing import Any, ClassVar

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.domain.errors import BalanceOutOfRange

logger = logging.getLogger(__name__)


class RecordStore:
    """키 기반 레코드 저장소

    하위 클래스는 TABLE, KEY_COLUMN, COLUMNS, UPDATABLE_FIELDS,
    COUNTER_FIELDS를 정의하고 _to_record / _to_row를 구현.

    Args:
        db: SQLiteAdapter 인스턴스
    """

    TABLE: ClassVar[str]
    KEY_COLUMN: ClassVar[str]
    COLUMNS: ClassVar[tuple[str, ...]]
    UPDATABLE_FIELDS: ClassVar[frozenset[str]] = frozenset()
    COUNTER_FIELDS: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # -------------------------------------------------------------------------
    # 하위 클래스 구현
    # -------------------------------------------------------------------------

    def _to_record(self, row: tuple[Any, ...]) -> Any:
        raise NotImplementedError

    def _to_row(self, record: Any) -> tuple[Any, ...]:
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # 공통 연산
    # -------------------------------------------------------------------------

    @property
    def _select_sql(self) -> str:
        return f"SELECT {', '.join(self.COLUMNS)} FROM {self.TABLE}"

    def _scope_clause(self, owner_id: str | None) -> tuple[str, tuple[Any, ...]]:
        """owner 범위 조건 (owner_id가 None이면 조건 없음)"""
        if owner_id is None:
            return "", ()
        return " AND owner_id = ?", (owner_id,)

    async def get(self, record_id: str, owner_id: str | None = None) -> Any | None:
        """ID로 레코드 조회

        Args:
            record_id: 레코드 ID
            owner_id: 지정 시 해당 소유자의 레코드만 조회

        Returns:
            레코드 또는 None
        """
        scope_sql, scope_params = self._scope_clause(owner_id)
        row = await self.db.fetchone(
            f"{self._select_sql} WHERE {self.KEY_COLUMN} = ?{scope_sql}",
            (record_id, *scope_params),
        )
        return self._to_record(row) if row else None

    async def exists(self, record_id: str, owner_id: str | None = None) -> bool:
        """레코드 존재 여부"""
        scope_sql, scope_params = self._scope_clause(owner_id)
        row = await self.db.fetchone(
            f"SELECT 1 FROM {self.TABLE} WHERE {self.KEY_COLUMN} = ?{scope_sql}",
            (record_id, *scope_params),
        )
        return row is not None

    async def insert(self, record: Any) -> None:
        """레코드 저장"""
        placeholders = ", ".join("?" for _ in self.COLUMNS)
        await self.db.execute(
            f"INSERT INTO {self.TABLE} ({', '.join(self.COLUMNS)}) VALUES ({placeholders})",
            self._to_row(record),
        )

    async def update_fields(self, record_id: str, fields: dict[str, Any]) -> bool:
        """허용된 필드만 부분 수정

        Args:
            record_id: 레코드 ID
            fields: {컬럼: 값} (UPDATABLE_FIELDS에 없는 컬럼은 거부)

        Returns:
            수정된 행이 있으면 True

        Raises:
            ValueError: 허용되지 않은 필드
        """
        if not fields:
            return await self.exists(record_id)

        forbidden = set(fields) - self.UPDATABLE_FIELDS
        if forbidden:
            raise ValueError(f"{self.TABLE}: 수정할 수 없는 필드입니다: {sorted(forbidden)}")

        assignments = ", ".join(f"{name} = ?" for name in fields)
        cursor = await self.db.execute(
            f"UPDATE {self.TABLE} SET {assignments} WHERE {self.KEY_COLUMN} = ?",
            (*fields.values(), record_id),
        )
        return cursor.rowcount > 0

    async def delete(self, record_id: str) -> bool:
        """레코드 삭제

        Returns:
            삭제된 행이 있으면 True
        """
        cursor = await self.db.execute(
            f"DELETE FROM {self.TABLE} WHERE {self.KEY_COLUMN} = ?",
            (record_id,),
        )
        return cursor.rowcount > 0

    async def increment_field(self, record_id: str, field_name: str, amount: int) -> bool:
        """숫자 필드 원자적 증감

        단일 UPDATE 문으로 처리 (애플리케이션에서 읽고-쓰지 않음).
        동시 증감이 있어도 갱신이 유실되지 않음.
        결과가 64비트 정수 범위를 벗어나면 갱신하지 않음
        (SQLite는 INTEGER 오버플로를 REAL로 바꿔 저장함).

        Args:
            record_id: 레코드 ID
            field_name: COUNTER_FIELDS 중 하나
            amount: 부호 있는 증감량

        Returns:
            증감된 행이 있으면 True, 레코드가 없으면 False

        Raises:
            ValueError: 허용되지 않은 필드
            BalanceOutOfRange: 증감 결과가 범위를 벗어남
        """
        if field_name not in self.COUNTER_FIELDS:
            raise ValueError(f"{self.TABLE}: 증감할 수 없는 필드입니다: {field_name}")
        if not Defaults.MIN_MONEY <= amount <= Defaults.MAX_MONEY:
            raise BalanceOutOfRange(f"증감량이 허용 범위를 벗어났습니다: {amount}", account_id=record_id)

        # 경계값은 Python에서 계산 (SQL 안에서 더하면 오버플로 가능)
        if amount >= 0:
            guard, limit = f"{field_name} <= ?", Defaults.MAX_MONEY - amount
        else:
            guard, limit = f"{field_name} >= ?", Defaults.MIN_MONEY - amount

        cursor = await self.db.execute(
            f"UPDATE {self.TABLE} SET {field_name} = {field_name} + ? "
            f"WHERE {self.KEY_COLUMN} = ? AND {guard}",
            (amount, record_id, limit),
        )
        if cursor.rowcount > 0:
            return True

        if await self.exists(record_id):
            raise BalanceOutOfRange(
                f"{field_name} 변경 결과가 허용 범위를 벗어납니다: {record_id} ({amount:+d})",
                account_id=record_id,
            )
        return False

    async def _count(self, where_sql: str, params: tuple[Any, ...]) -> int:
        row = await self.db.fetchone(
            f"SELECT COUNT(*) FROM {self.TABLE} WHERE {where_sql}",
            params,
        )
        return row[0] if row else 0
