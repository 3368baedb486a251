"""
비밀번호 해시 (bcrypt)
"""

import bcrypt

from core.constants import Defaults


def hash_password(password: str, rounds: int = Defaults.BCRYPT_ROUNDS) -> str:
    """비밀번호 해시 생성

    Args:
        password: 평문 비밀번호
        rounds: bcrypt cost (4~31)

    Returns:
        bcrypt 해시 문자열
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """비밀번호 검증 (해시가 없으면 False)"""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # 손상된 해시
        return False
