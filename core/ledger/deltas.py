"""
잔액 증감 계산기

거래 하나와 방향(APPLY/REVERSE)으로부터 계좌별 부호 있는 증감 목록을 계산.
I/O 없는 순수 함수.

| kind     | APPLY                          | REVERSE      |
|----------|--------------------------------|--------------|
| income   | (출금계좌, +amount)              | 부호 반전     |
| expense  | (출금계좌, -amount)              | 부호 반전     |
| transfer | (출금계좌, -amount), (입금계좌, +amount) | 부호 반전 |
"""

from core.domain.models import Transaction
from core.ledger.types import BalanceDelta, Direction
from core.types import TransactionKind


# 종류별 출금 계좌 기준 부호 (APPLY 기준)
_SOURCE_SIGN: dict[str, int] = {
    TransactionKind.INCOME.value: 1,
    TransactionKind.EXPENSE.value: -1,
    TransactionKind.TRANSFER.value: -1,
}


def compute_deltas(transaction: Transaction, direction: Direction) -> list[BalanceDelta]:
    """거래의 계좌별 잔액 증감 계산

    Args:
        transaction: 대상 거래 (종류 검증은 Transaction 생성 시 완료)
        direction: APPLY(반영) 또는 REVERSE(취소)

    Returns:
        BalanceDelta 목록 (출금 계좌, 입금 계좌 순).
        입금 계좌가 없는 transfer는 출금 쪽 증감만 반환.
    """
    sign = _SOURCE_SIGN[transaction.kind] * direction.value
    deltas = [BalanceDelta(transaction.source_account_id, sign * transaction.amount)]

    if (
        transaction.kind == TransactionKind.TRANSFER.value
        and transaction.destination_account_id
    ):
        deltas.append(
            BalanceDelta(transaction.destination_account_id, -sign * transaction.amount)
        )

    return deltas


def net_deltas(*groups: list[BalanceDelta]) -> dict[str, int]:
    """여러 증감 목록을 계좌별 합계로 합산 (로그/검증용)"""
    totals: dict[str, int] = {}
    for group in groups:
        for delta in group:
            totals[delta.account_id] = totals.get(delta.account_id, 0) + delta.amount
    return totals
