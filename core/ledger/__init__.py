"""
잔액 정합성 엔진

거래 효과(잔액 증감) 계산과 원자적 반영.

사용 예시:
```python
from core.ledger import Direction, LedgerCoordinator, compute_deltas

ledger = LedgerCoordinator(db)
txn = await ledger.create_transaction(owner_id, **fields)

# 순수 계산 (I/O 없음)
deltas = compute_deltas(txn, Direction.REVERSE)
```
"""

from core.ledger.coordinator import LedgerCoordinator
from core.ledger.deltas import compute_deltas, net_deltas
from core.ledger.types import BalanceDelta, Direction

__all__ = [
    # 핵심 클래스
    "LedgerCoordinator",
    # 계산
    "compute_deltas",
    "net_deltas",
    # 타입
    "BalanceDelta",
    "Direction",
]
