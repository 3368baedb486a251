"""
도메인 모델

Account, Transaction 레코드와 불변식 검증.
금액은 모두 최소 화폐 단위 정수 (예: 원, 센트).
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from core.constants import Defaults
from core.domain.errors import MissingDestination, ValidationError
from core.types import AccountKind, TransactionKind


def utc_now() -> datetime:
    """현재 UTC 시간"""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """레코드 ID 생성 (UUID4 hex)"""
    return uuid4().hex


def normalize_ts(value: datetime) -> datetime:
    """UTC로 정규화 (naive면 UTC로 간주)

    저장 문자열의 사전순 == 시간순이 되도록 모든 시각을 UTC로 맞춤.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class Account:
    """계좌

    balance는 opening_balance + (이 계좌를 참조하는 모든 활성 거래의 delta 합).
    LedgerCoordinator만 balance를 변경함.
    """

    account_id: str
    owner_id: str
    name: str
    kind: str
    balance: int
    opening_balance: int
    account_number: str | None
    created_at: datetime

    @staticmethod
    def create(
        owner_id: str,
        name: str,
        kind: AccountKind | str,
        opening_balance: int = 0,
        account_number: str | None = None,
    ) -> "Account":
        """새 계좌 생성 (잔액 = 기초 잔액)"""
        if not name or not name.strip():
            raise ValidationError("계좌 이름은 비어 있을 수 없습니다")
        try:
            kind = AccountKind(kind)
        except ValueError as e:
            valid = [k.value for k in AccountKind]
            raise ValidationError(
                f"지원하지 않는 계좌 종류입니다: '{kind}'. 유효한 값: {valid}"
            ) from e
        if (
            isinstance(opening_balance, bool)
            or not isinstance(opening_balance, int)
            or not Defaults.MIN_MONEY <= opening_balance <= Defaults.MAX_MONEY
        ):
            raise ValidationError(f"opening_balance가 허용 범위를 벗어났습니다: {opening_balance}")
        return Account(
            account_id=new_id(),
            owner_id=owner_id,
            name=name.strip(),
            kind=kind.value,
            balance=opening_balance,
            opening_balance=opening_balance,
            account_number=account_number,
            created_at=utc_now(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.account_id,
            "owner_id": self.owner_id,
            "name": self.name,
            "kind": self.kind,
            "balance": self.balance,
            "opening_balance": self.opening_balance,
            "account_number": self.account_number,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class Transaction:
    """거래

    불변식:
    - destination_account_id는 kind == transfer일 때만, 그리고 반드시 존재
    - amount는 양수 크기, 부호는 kind에서 결정
    """

    transaction_id: str
    owner_id: str
    date: datetime
    description: str | None
    amount: int
    kind: str
    category_id: str
    source_account_id: str
    destination_account_id: str | None
    status: str
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """불변식 검증

        Raises:
            ValidationError: 종류/금액/계좌 형식 오류
            MissingDestination: 입금 계좌 규칙 위반
        """
        try:
            kind = TransactionKind(self.kind)
        except ValueError as e:
            valid = [k.value for k in TransactionKind]
            raise ValidationError(
                f"지원하지 않는 거래 종류입니다: '{self.kind}'. 유효한 값: {valid}"
            ) from e

        if self.date is None:
            raise ValidationError("date는 필수입니다")
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError("amount는 최소 화폐 단위 정수여야 합니다")
        if self.amount <= 0:
            raise ValidationError(f"amount는 양수여야 합니다: {self.amount}")
        if self.amount > Defaults.MAX_MONEY:
            raise ValidationError(f"amount가 허용 범위를 벗어났습니다: {self.amount}")
        if not self.source_account_id:
            raise ValidationError("source_account_id는 필수입니다")
        if not self.category_id:
            raise ValidationError("category_id는 필수입니다")

        if kind == TransactionKind.TRANSFER:
            if not self.destination_account_id:
                raise MissingDestination("transfer 거래에는 입금 계좌가 필요합니다")
            if self.destination_account_id == self.source_account_id:
                raise ValidationError("출금 계좌와 입금 계좌가 같을 수 없습니다")
        elif self.destination_account_id is not None:
            raise MissingDestination(
                f"{kind.value} 거래에는 입금 계좌를 지정할 수 없습니다"
            )

    @property
    def account_ids(self) -> list[str]:
        """참조하는 계좌 ID 목록 (출금, 입금 순)"""
        if self.destination_account_id:
            return [self.source_account_id, self.destination_account_id]
        return [self.source_account_id]

    @staticmethod
    def create(
        owner_id: str,
        date: datetime,
        amount: int,
        kind: TransactionKind | str,
        category_id: str,
        source_account_id: str,
        destination_account_id: str | None = None,
        description: str | None = None,
        status: str | None = None,
    ) -> "Transaction":
        """새 거래 생성 (불변식 검증 포함)"""
        now = utc_now()
        return Transaction(
            transaction_id=new_id(),
            owner_id=owner_id,
            date=normalize_ts(date),
            description=description,
            amount=amount,
            kind=kind.value if isinstance(kind, TransactionKind) else kind,
            category_id=category_id,
            source_account_id=source_account_id,
            destination_account_id=destination_account_id,
            status=status or Defaults.TRANSACTION_STATUS,
            created_at=now,
            updated_at=now,
        )

    def amend(self, changes: dict[str, Any]) -> "Transaction":
        """변경 사항을 적용한 새 Transaction 반환

        Args:
            changes: 허용된 필드만 담은 부분 변경 dict

        Raises:
            ValidationError, MissingDestination: 변경 후 불변식 위반
        """
        unknown = set(changes) - AMENDABLE_FIELDS
        if unknown:
            raise ValidationError(f"변경할 수 없는 필드입니다: {sorted(unknown)}")

        values = dict(changes)
        if values.get("date") is not None:
            values["date"] = normalize_ts(values["date"])
        if "status" in values and not values["status"]:
            values["status"] = Defaults.TRANSACTION_STATUS
        if isinstance(values.get("kind"), TransactionKind):
            values["kind"] = values["kind"].value

        return replace(self, updated_at=utc_now(), **values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.transaction_id,
            "owner_id": self.owner_id,
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": self.amount,
            "kind": self.kind,
            "category_id": self.category_id,
            "source_account_id": self.source_account_id,
            "destination_account_id": self.destination_account_id,
            "status": self.status,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


# 수정 요청에서 변경 가능한 필드 (owner, 타임스탬프, 잔액 관련 필드는 제외)
AMENDABLE_FIELDS = frozenset({
    "date",
    "description",
    "amount",
    "kind",
    "category_id",
    "source_account_id",
    "destination_account_id",
    "status",
})


@dataclass(frozen=True)
class User:
    """사용자

    password_hash는 외부 인증(Google)만으로 가입한 경우 None.
    """

    user_id: str
    username: str
    email: str
    password_hash: str | None
    profile_picture: str | None
    provider: str | None
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def create(
        username: str,
        email: str,
        password_hash: str | None = None,
        profile_picture: str | None = None,
        provider: str | None = None,
    ) -> "User":
        """새 사용자 생성 (이메일은 소문자로 정규화)"""
        if not username or not username.strip():
            raise ValidationError("username은 비어 있을 수 없습니다")
        if not email or "@" not in email:
            raise ValidationError(f"유효하지 않은 이메일입니다: '{email}'")
        now = utc_now()
        return User(
            user_id=new_id(),
            username=username.strip(),
            email=normalize_email(email),
            password_hash=password_hash,
            profile_picture=profile_picture,
            provider=provider,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict[str, Any]:
        """응답용 dict (password_hash 제외)"""
        return {
            "id": self.user_id,
            "username": self.username,
            "email": self.email,
            "profile_picture": self.profile_picture,
            "provider": self.provider,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


def normalize_email(email: str) -> str:
    return email.strip().lower()
