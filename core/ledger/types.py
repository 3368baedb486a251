"""
Ledger 타입 정의

잔액 반영 방향(Direction)과 계좌별 증감(BalanceDelta) 정의
"""

from dataclasses import dataclass
from enum import Enum


class Direction(int, Enum):
    """잔액 반영 방향

    값 자체가 부호 승수로 쓰임 (APPLY=+1, REVERSE=-1).
    """

    APPLY = 1  # 거래 효과 반영
    REVERSE = -1  # 거래 효과 취소


@dataclass(frozen=True)
class BalanceDelta:
    """계좌 하나에 더할 부호 있는 금액 (영속화하지 않음)"""

    account_id: str
    amount: int

    def to_dict(self) -> dict[str, int | str]:
        return {"account_id": self.account_id, "amount": self.amount}
