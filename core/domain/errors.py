"""
도메인 예외 정의

거래/잔액 정합성 엔진에서 발생하는 오류 분류.
Web 계층은 code로 응답 종류를 구분함.
"""


class LedgerError(Exception):
    """Ledger 예외 기본 클래스

    Args:
        message: 사용자에게 전달할 메시지
    """

    code: str = "LedgerError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """입력 형식 오류 (지원하지 않는 종류, 음수 금액 등)"""

    code = "ValidationError"


class InvalidReference(LedgerError):
    """참조한 계좌가 존재하지 않음 (출금/입금 계좌)"""

    code = "InvalidReference"

    def __init__(self, message: str, account_id: str | None = None):
        super().__init__(message)
        self.account_id = account_id


class MissingDestination(LedgerError):
    """이체 입금 계좌 규칙 위반

    - transfer인데 입금 계좌가 없음
    - transfer가 아닌데 입금 계좌가 있음
    """

    code = "MissingDestination"


class NotFound(LedgerError):
    """거래/계좌 ID를 찾을 수 없음"""

    code = "NotFound"


class AccountInUse(LedgerError):
    """거래가 참조 중인 계좌 삭제 시도"""

    code = "AccountInUse"


class BalanceOutOfRange(LedgerError):
    """잔액 변경 결과가 64비트 정수 범위를 벗어남"""

    code = "BalanceOutOfRange"

    def __init__(self, message: str, account_id: str | None = None):
        super().__init__(message)
        self.account_id = account_id


class StorageFailure(LedgerError):
    """원자적 커밋 실패 (경합, 연결 오류 등)

    작업 효과는 전부 롤백된 상태. 호출자가 전체 작업을 재시도해도 안전함.
    """

    code = "StorageFailure"
