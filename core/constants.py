"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class GoogleEndpoints:
    """Google OAuth 2.0 / OpenID Connect 엔드포인트 (고정값)

    공식 문서: https://developers.google.com/identity/protocols/oauth2/web-server
    """

    AUTHORIZATION_URL: str = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL: str = "https://oauth2.googleapis.com/token"
    SCOPES: tuple[str, ...] = ("openid", "profile", "email")


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000
    APP_VERSION: str = "1.0.0"

    # 목록 조회
    PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # 세션
    SESSION_COOKIE: str = "JWT"
    SESSION_TTL_SEC: int = 60 * 60  # 1시간
    SESSION_ALGORITHM: str = "HS256"
    BCRYPT_ROUNDS: int = 12
    MAX_PASSWORD_BYTES: int = 72  # bcrypt 입력 한도 (UTF-8)

    # Google 로그인 (state, code_verifier 쿠키 유지 시간)
    OAUTH_STATE_COOKIE: str = "google_oauth"
    OAUTH_VERIFIER_COOKIE: str = "google_code_verifier"
    OAUTH_EXCHANGE_TTL_SEC: int = 60 * 10  # 10분
    GOOGLE_REDIRECT_URI: str = "http://localhost:3000/google/callback"

    CORS_ORIGINS: tuple[str, ...] = ("http://localhost:3000",)

    # 거래 기본 상태
    TRANSACTION_STATUS: str = "cleared"

    # 금액/잔액 범위 (SQLite INTEGER = 64비트 부호 있는 정수)
    MIN_MONEY: int = -(2**63)
    MAX_MONEY: int = 2**63 - 1


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SECRETS_FILE: Path = CONFIG_DIR / "secrets.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "fino_prod.db"
    DEV_DB: Path = DATA_DIR / "fino_dev.db"
