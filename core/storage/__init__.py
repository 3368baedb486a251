"""
스토리지 모듈

계좌, 거래, 사용자 저장소 제공
"""

from core.storage.account_store import AccountStore
from core.storage.queries import AccountQuery, Page, PageRequest, TransactionQuery
from core.storage.transaction_store import TransactionStore
from core.storage.user_store import UserStore

__all__ = [
    "AccountStore",
    "TransactionStore",
    "UserStore",
    "AccountQuery",
    "TransactionQuery",
    "Page",
    "PageRequest",
]
