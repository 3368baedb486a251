"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class RunMode(str, Enum):
    """실행 모드 (운영 / 개발)"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


class AccountKind(str, Enum):
    """계좌 종류"""

    BANK = "Bank"
    WALLET = "Wallet"
    CASH = "Cash"


class TransactionKind(str, Enum):
    """거래 종류

    부호는 종류에서 결정됨 (금액은 항상 양수로 저장).
    """

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class AuthProvider(str, Enum):
    """외부 인증 제공자"""

    GOOGLE = "google"
    OTHER = "other"
