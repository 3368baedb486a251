"""
인증 예외 정의

Web 계층은 code로 응답 종류를 구분함.
"""


class AuthError(Exception):
    """인증 예외 기본 클래스

    Args:
        message: 사용자에게 전달할 메시지
    """

    code: str = "AuthError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidCredentials(AuthError):
    """이메일 또는 비밀번호 불일치"""

    code = "InvalidCredentials"


class EmailAlreadyRegistered(AuthError):
    """이미 가입된 이메일"""

    code = "EmailAlreadyRegistered"


class InvalidSession(AuthError):
    """세션 토큰 없음, 만료, 위조, 또는 사용자 없음"""

    code = "InvalidSession"


class FederationDisabled(AuthError):
    """외부 인증(Google) 미설정"""

    code = "FederationDisabled"


class FederationRejected(AuthError):
    """외부 인증 요청 거부 (state 불일치, 인가 코드 무효 등)"""

    code = "FederationRejected"


class FederationUnavailable(AuthError):
    """외부 인증 서버 응답 없음 또는 5xx"""

    code = "FederationUnavailable"


class InvalidLoginAttempt(AuthError):
    """Google 콜백 요청 형식 오류 (code/state 누락, state 쿠키 불일치)"""

    code = "InvalidLoginAttempt"
