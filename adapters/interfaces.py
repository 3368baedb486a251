"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from typing import Protocol, runtime_checkable

from adapters.google.models import GoogleTokens


@runtime_checkable
class IIdentityProvider(Protocol):
    """외부 인증 제공자 인터페이스

    Authorization Code + PKCE 흐름을 구현하는 클라이언트.
    """

    def create_authorization_url(self, state: str, code_verifier: str) -> str:
        """로그인 페이지 URL 생성

        Args:
            state: CSRF 방지용 state
            code_verifier: PKCE code_verifier

        Returns:
            리다이렉트할 URL
        """
        ...

    async def validate_authorization_code(self, code: str, code_verifier: str) -> GoogleTokens:
        """인가 코드를 토큰으로 교환"""
        ...

    async def close(self) -> None:
        """연결 자원 정리"""
        ...


