"""
설정 로더

secrets.yaml 로드 및 세션/Google 로그인/DB 설정 생성
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, Paths
from core.types import RunMode


@dataclass(frozen=True)
class GoogleConfig:
    """Google 로그인 설정

    client_id, client_secret이 모두 있어야 활성화
    """

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = Defaults.GOOGLE_REDIRECT_URI

    @property
    def enabled(self) -> bool:
        return bool(self.client_id and self.client_secret)


@dataclass(frozen=True)
class Secrets:
    """보안 설정 (secrets.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    mode: RunMode
    session_secret_key: str
    session_ttl_sec: int = Defaults.SESSION_TTL_SEC
    cookie_secure: bool = True
    bcrypt_rounds: int = Defaults.BCRYPT_ROUNDS
    google: GoogleConfig = field(default_factory=GoogleConfig)
    cors_origins: tuple[str, ...] = Defaults.CORS_ORIGINS
    db_path: Path | None = None


class SecretsLoadError(Exception):
    """Secrets 로드 실패 예외"""

    pass


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """선택 섹션 조회 (없으면 빈 dict)"""
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise SecretsLoadError(f"secrets.yaml의 '{name}' 섹션 형식이 잘못되었습니다")
    return value


def load_secrets(path: Path | None = None) -> Secrets:
    """secrets.yaml 파일 로드

    Args:
        path: secrets.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Secrets 인스턴스

    Raises:
        SecretsLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 mode인 경우
    """
    if path is None:
        path = Paths.SECRETS_FILE

    if not path.exists():
        raise SecretsLoadError(f"secrets.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SecretsLoadError(f"secrets.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SecretsLoadError("secrets.yaml이 비어 있습니다")

    # mode 검증
    mode_str = data.get("mode")
    if mode_str is None:
        raise SecretsLoadError("secrets.yaml에 'mode' 필드가 없습니다")

    try:
        mode = RunMode(mode_str)
    except ValueError as e:
        valid_modes = [m.value for m in RunMode]
        raise ValueError(
            f"유효하지 않은 mode입니다: '{mode_str}'. "
            f"유효한 값: {valid_modes}"
        ) from e

    # 세션 설정
    session_config = _section(data, "session")
    secret_key = session_config.get("secret_key")
    if not secret_key:
        raise SecretsLoadError(
            "secrets.yaml의 session 섹션에 'secret_key'가 없습니다"
        )

    auth_config = _section(data, "auth")
    bcrypt_rounds = int(auth_config.get("bcrypt_rounds", Defaults.BCRYPT_ROUNDS))
    if not 4 <= bcrypt_rounds <= 31:
        raise SecretsLoadError(
            f"auth.bcrypt_rounds는 4~31 범위여야 합니다: {bcrypt_rounds}"
        )

    google_config = _section(data, "google")
    google = GoogleConfig(
        client_id=google_config.get("client_id") or "",
        client_secret=google_config.get("client_secret") or "",
        redirect_uri=google_config.get("redirect_uri") or Defaults.GOOGLE_REDIRECT_URI,
    )

    web_config = _section(data, "web")
    cors_origins = tuple(web_config.get("cors_origins") or Defaults.CORS_ORIGINS)

    database_config = _section(data, "database")
    db_path = database_config.get("path")

    return Secrets(
        mode=mode,
        session_secret_key=secret_key,
        session_ttl_sec=int(session_config.get("token_ttl_sec", Defaults.SESSION_TTL_SEC)),
        cookie_secure=bool(session_config.get("cookie_secure", True)),
        bcrypt_rounds=bcrypt_rounds,
        google=google,
        cors_origins=cors_origins,
        db_path=Path(db_path) if db_path else None,
    )


def get_db_path(secrets: Secrets) -> Path:
    """DB 경로 반환

    database.path가 지정되면 그 경로, 아니면 모드별 기본 경로.

    Args:
        secrets: Secrets 인스턴스

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if secrets.db_path is not None:
        return secrets.db_path
    if secrets.mode == RunMode.PRODUCTION:
        return Paths.PROD_DB
    return Paths.DEV_DB


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    secrets.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _secrets: Secrets | None = None

    def __new__(cls, secrets_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, secrets_path: Path | None = None) -> None:
        if self._secrets is None:
            self._secrets = load_secrets(secrets_path)

    @property
    def mode(self) -> RunMode:
        """현재 실행 모드"""
        assert self._secrets is not None
        return self._secrets.mode

    @property
    def session_secret_key(self) -> str:
        """세션 JWT 서명 키"""
        assert self._secrets is not None
        return self._secrets.session_secret_key

    @property
    def session_ttl_sec(self) -> int:
        """세션 토큰 유효 시간 (초)"""
        assert self._secrets is not None
        return self._secrets.session_ttl_sec

    @property
    def cookie_secure(self) -> bool:
        """세션 쿠키 Secure 플래그"""
        assert self._secrets is not None
        return self._secrets.cookie_secure

    @property
    def bcrypt_rounds(self) -> int:
        """비밀번호 해시 cost"""
        assert self._secrets is not None
        return self._secrets.bcrypt_rounds

    @property
    def google(self) -> GoogleConfig:
        """Google 로그인 설정"""
        assert self._secrets is not None
        return self._secrets.google

    @property
    def cors_origins(self) -> list[str]:
        """CORS 허용 origin 목록"""
        assert self._secrets is not None
        return list(self._secrets.cors_origins)

    @property
    def db_path(self) -> Path:
        """현재 모드의 DB 경로"""
        assert self._secrets is not None
        return get_db_path(self._secrets)

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._secrets = None


def get_settings(secrets_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        secrets_path: secrets.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(secrets_path)
