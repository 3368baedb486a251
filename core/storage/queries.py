"""
목록 조회 조건

쿼리 파라미터 → WHERE 절 변환.
모든 조건은 소유자(owner_id) 범위 안에서만 적용.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from core.constants import Defaults
from core.domain.models import normalize_ts


def _escape_like(term: str) -> str:
    """LIKE 패턴 특수문자 이스케이프 (ESCAPE '\\' 와 함께 사용)"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class PageRequest:
    """페이지 요청

    page는 1 미만이면 1로 보정, page_size는 1~MAX_PAGE_SIZE로 보정.
    """

    page: int = 1
    page_size: int = Defaults.PAGE_SIZE

    def __post_init__(self) -> None:
        object.__setattr__(self, "page", max(1, self.page))
        object.__setattr__(
            self, "page_size", min(max(1, self.page_size), Defaults.MAX_PAGE_SIZE)
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class Page:
    """페이지 결과"""

    page: int
    page_size: int
    total: int
    items: list[Any] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "page_size": self.page_size,
            "total": self.total,
            "total_pages": self.total_pages,
            "data": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class AccountQuery:
    """계좌 목록 조건"""

    owner_id: str
    kind: str | None = None
    search_term: str | None = None
    min_balance: int | None = None
    max_balance: int | None = None

    def to_where(self) -> tuple[str, tuple[Any, ...]]:
        clauses = ["owner_id = ?"]
        params: list[Any] = [self.owner_id]

        if self.kind:
            clauses.append("kind = ?")
            params.append(self.kind)
        if self.search_term:
            clauses.append("name LIKE ? ESCAPE '\\'")
            params.append(f"%{_escape_like(self.search_term)}%")
        if self.min_balance is not None:
            clauses.append("balance >= ?")
            params.append(self.min_balance)
        if self.max_balance is not None:
            clauses.append("balance <= ?")
            params.append(self.max_balance)

        return " AND ".join(clauses), tuple(params)


@dataclass(frozen=True)
class TransactionQuery:
    """거래 목록 조건

    account_id는 출금/입금 계좌 어느 쪽이든 일치하면 포함.
    """

    owner_id: str
    kind: str | None = None
    category_id: str | None = None
    account_id: str | None = None
    status: str | None = None
    min_amount: int | None = None
    max_amount: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    search_term: str | None = None

    def to_where(self) -> tuple[str, tuple[Any, ...]]:
        clauses = ["owner_id = ?"]
        params: list[Any] = [self.owner_id]

        if self.kind:
            clauses.append("kind = ?")
            params.append(self.kind)
        if self.category_id:
            clauses.append("category_id = ?")
            params.append(self.category_id)
        if self.account_id:
            clauses.append("(source_account_id = ? OR destination_account_id = ?)")
            params.extend([self.account_id, self.account_id])
        if self.status:
            clauses.append("status = ?")
            params.append(self.status)
        if self.min_amount is not None:
            clauses.append("amount >= ?")
            params.append(self.min_amount)
        if self.max_amount is not None:
            clauses.append("amount <= ?")
            params.append(self.max_amount)
        if self.start_date is not None:
            clauses.append("date >= ?")
            params.append(normalize_ts(self.start_date).isoformat())
        if self.end_date is not None:
            clauses.append("date <= ?")
            params.append(normalize_ts(self.end_date).isoformat())
        if self.search_term:
            clauses.append("description LIKE ? ESCAPE '\\'")
            params.append(f"%{_escape_like(self.search_term)}%")

        return " AND ".join(clauses), tuple(params)
