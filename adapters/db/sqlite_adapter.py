"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
요청마다 별도 연결을 열어도 동시 접근 가능하도록 설정.

주의: SQLite alias로 time, count 사용 금지 (예약어)
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.constants import Paths
from core.types import RunMode

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


def get_db_path(mode: RunMode | str) -> Path:
    """모드에 따른 기본 DB 경로 반환

    Args:
        mode: 실행 모드 (PRODUCTION/DEVELOPMENT)

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if isinstance(mode, str):
        mode = RunMode(mode.lower())

    if mode == RunMode.PRODUCTION:
        return Paths.PROD_DB
    return Paths.DEV_DB


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드)

    Args:
        db_path: DB 파일 경로 (":memory:" 허용)
        readonly: 읽기 전용 여부

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)

    if db_path_str == MEMORY_DB:
        conn = await aiosqlite.connect(MEMORY_DB)
    else:
        # 디렉토리가 없으면 생성
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        if readonly:
            conn = await aiosqlite.connect(f"file:{db_path_str}?mode=ro", uri=True)
        else:
            conn = await aiosqlite.connect(db_path_str)
            # WAL 모드 설정 (DB 파일에 영구 저장됨)
            await conn.execute("PRAGMA journal_mode=WAL")

    # 동시 접근 설정
    await conn.execute("PRAGMA busy_timeout=30000")  # 30초 대기

    # 외래 키 제약 활성화
    await conn.execute("PRAGMA foreign_keys=ON")

    logger.debug(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str, "readonly": readonly},
    )

    return conn


class SQLiteAdapter:
    """SQLite 어댑터

    WAL 모드로 SQLite 연결 관리.
    트랜잭션(작업 단위) 컨텍스트 매니저 제공.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부 (조회 API용)

    사용 예시:
    ```python
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()

    async with adapter.transaction():
        await adapter.execute("INSERT INTO ...")
        await adapter.execute("UPDATE ...")

    await adapter.close()
    ```
    """

    def __init__(self, db_path: Path | str, readonly: bool = False):
        self.db_path = db_path if str(db_path) == MEMORY_DB else Path(db_path)
        self.readonly = readonly
        self._conn: aiosqlite.Connection | None = None
        self._in_unit = False

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    @property
    def in_transaction(self) -> bool:
        """작업 단위(transaction()) 진행 중 여부"""
        return self._in_unit

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path, self.readonly)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.debug("SQLite 연결 종료")

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if parameters:
            return await self._conn.execute(sql, parameters)
        return await self._conn.execute(sql)

    async def executemany(
        self,
        sql: str,
        parameters: list[tuple[Any, ...]],
    ) -> aiosqlite.Cursor:
        """SQL 다중 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        return await self._conn.executemany(sql, parameters)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return list(await cursor.fetchall())

    async def commit(self) -> None:
        """커밋"""
        if self._conn is not None:
            await self._conn.commit()

    async def rollback(self) -> None:
        """롤백"""
        if self._conn is not None:
            await self._conn.rollback()

    @asynccontextmanager
    async def transaction(self, immediate: bool = True) -> AsyncIterator["SQLiteAdapter"]:
        """작업 단위 컨텍스트 매니저

        성공 시 자동 커밋, 예외 시 자동 롤백.
        asyncio.CancelledError 등 BaseException도 롤백 (호출자 중단 시 흔적 없음).

        Args:
            immediate: True면 BEGIN IMMEDIATE로 시작 (쓰기 잠금을 먼저 획득,
                같은 DB에 대한 동시 작업 단위는 직렬화됨)

        사용 예시:
        ```python
        async with adapter.transaction():
            await adapter.execute("INSERT INTO ...")
            # 성공 시 자동 커밋
        ```
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")
        if self._in_unit:
            raise RuntimeError("Nested transaction is not supported")

        # 이전에 암묵적으로 열린 트랜잭션 정리 (조회만 했어도 열려 있을 수 있음)
        if self._conn.in_transaction:
            await self._conn.commit()

        self._in_unit = True
        try:
            await self._conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            yield self
            await self._conn.commit()
        except BaseException:
            await self._conn.rollback()
            raise
        finally:
            self._in_unit = False

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


async def init_schema(adapter: SQLiteAdapter) -> None:
    """스키마 초기화 (테이블 생성)

    Args:
        adapter: 연결된 SQLiteAdapter (쓰기 가능)

    앱 시작 시(lifespan) 호출. 이미 있으면 무시.
    """
    # users
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS users (
            user_id          TEXT PRIMARY KEY,
            username         TEXT NOT NULL,
            email            TEXT NOT NULL UNIQUE,
            password_hash    TEXT,
            profile_picture  TEXT,
            provider         TEXT,

            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL
        )
    """)

    # oauth_accounts (외부 인증 연결)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS oauth_accounts (
            id                   INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id              TEXT REFERENCES users(user_id) ON DELETE CASCADE,
            provider             TEXT NOT NULL,
            provider_account_id  TEXT NOT NULL,
            profile_json         TEXT,

            created_at           TEXT NOT NULL,
            updated_at           TEXT NOT NULL,

            UNIQUE(provider, provider_account_id)
        )
    """)

    # accounts (잔액은 최소 화폐 단위 정수)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS accounts (
            account_id       TEXT PRIMARY KEY,
            owner_id         TEXT NOT NULL,
            name             TEXT NOT NULL,
            kind             TEXT NOT NULL CHECK (kind IN ('Bank', 'Wallet', 'Cash')),
            balance          INTEGER NOT NULL DEFAULT 0,
            opening_balance  INTEGER NOT NULL DEFAULT 0,
            account_number   TEXT,

            created_at       TEXT NOT NULL
        )
    """)

    # transactions (금액은 양수, 부호는 kind에서 결정)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            transaction_id          TEXT PRIMARY KEY,
            owner_id                TEXT NOT NULL,
            date                    TEXT NOT NULL,
            description             TEXT,
            amount                  INTEGER NOT NULL CHECK (amount > 0),
            kind                    TEXT NOT NULL CHECK (kind IN ('income', 'expense', 'transfer')),
            category_id             TEXT NOT NULL,
            source_account_id       TEXT NOT NULL REFERENCES accounts(account_id),
            destination_account_id  TEXT REFERENCES accounts(account_id),
            status                  TEXT NOT NULL DEFAULT 'cleared',

            created_at              TEXT NOT NULL,
            updated_at              TEXT NOT NULL,

            CHECK ((kind = 'transfer') = (destination_account_id IS NOT NULL))
        )
    """)

    # 인덱스 생성
    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_accounts_owner
        ON accounts(owner_id)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_accounts_number
        ON accounts(account_number)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_owner_date
        ON transactions(owner_id, date DESC)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_source
        ON transactions(source_account_id)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_destination
        ON transactions(destination_account_id)
    """)

    await adapter.commit()

    logger.info("스키마 초기화 완료")
