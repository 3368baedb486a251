"""
UserStore - 사용자 저장소

users / oauth_accounts 테이블 관리.
"""

import json
import logging
from datetime import datetime
from typing import Any

from core.domain.models import User, normalize_email, utc_now
from core.storage.base import RecordStore

logger = logging.getLogger(__name__)


class UserStore(RecordStore):
    """사용자 저장소

    사용 예시:
    ```python
    store = UserStore(db)

    async with db.transaction():
        await store.insert(User.create("kim", "kim@example.com", password_hash))

    user = await store.get_by_email("kim@example.com")
    ```
    """

    TABLE = "users"
    KEY_COLUMN = "user_id"
    COLUMNS = (
        "user_id",
        "username",
        "email",
        "password_hash",
        "profile_picture",
        "provider",
        "created_at",
        "updated_at",
    )
    UPDATABLE_FIELDS = frozenset({
        "username",
        "password_hash",
        "profile_picture",
        "provider",
        "updated_at",
    })

    def _to_record(self, row: tuple[Any, ...]) -> User:
        return User(
            user_id=row[0],
            username=row[1],
            email=row[2],
            password_hash=row[3],
            profile_picture=row[4],
            provider=row[5],
            created_at=datetime.fromisoformat(row[6]),
            updated_at=datetime.fromisoformat(row[7]),
        )

    def _to_row(self, record: User) -> tuple[Any, ...]:
        return (
            record.user_id,
            record.username,
            record.email,
            record.password_hash,
            record.profile_picture,
            record.provider,
            record.created_at.isoformat(),
            record.updated_at.isoformat(),
        )

    async def get_by_email(self, email: str) -> User | None:
        """이메일로 사용자 조회 (대소문자 무시)"""
        row = await self.db.fetchone(
            f"{self._select_sql} WHERE email = ?",
            (normalize_email(email),),
        )
        return self._to_record(row) if row else None

    async def link_oauth_account(
        self,
        user_id: str,
        provider: str,
        provider_account_id: str,
        profile: dict[str, Any] | None = None,
    ) -> None:
        """외부 인증 계정 연결 (이미 있으면 사용자/프로필 갱신)

        Args:
            user_id: 연결할 사용자 ID
            provider: 인증 제공자 (예: google)
            provider_account_id: 제공자 측 사용자 식별자 (ID 토큰의 sub)
            profile: 제공자 프로필 (JSON 직렬화 가능)
        """
        now = utc_now().isoformat()
        profile_json = json.dumps(profile, ensure_ascii=False) if profile else None

        await self.db.execute(
            """
            INSERT INTO oauth_accounts (
                user_id, provider, provider_account_id, profile_json,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(provider, provider_account_id) DO UPDATE SET
                user_id = excluded.user_id,
                profile_json = excluded.profile_json,
                updated_at = excluded.updated_at
            """,
            (user_id, provider, provider_account_id, profile_json, now, now),
        )

        logger.debug(
            "외부 인증 계정 연결",
            extra={"user_id": user_id, "provider": provider},
        )

    async def get_linked_user_id(self, provider: str, provider_account_id: str) -> str | None:
        """외부 인증 계정에 연결된 사용자 ID"""
        row = await self.db.fetchone(
            """
            SELECT user_id FROM oauth_accounts
            WHERE provider = ? AND provider_account_id = ?
            """,
            (provider, provider_account_id),
        )
        return row[0] if row else None
