"""
어댑터 레이어

외부 서비스(DB, Google 로그인)와의 연동을 담당.
Protocol 기반 인터페이스로 Mock 교체 가능.
"""

from adapters.interfaces import IIdentityProvider

__all__ = [
    # Interfaces
    "IIdentityProvider",
]
