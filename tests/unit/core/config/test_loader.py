"""
core/config/loader.py 테스트

secrets.yaml 로드, 검증, DB 경로 결정 테스트
"""

from pathlib import Path

import pytest

from core.config.loader import (
    GoogleConfig,
    Secrets,
    SecretsLoadError,
    load_secrets,
    get_db_path,
    Settings,
    get_settings,
)
from core.constants import Defaults, Paths
from core.types import RunMode


class TestSecrets:
    """Secrets 데이터클래스 테스트"""

    def test_creation(self) -> None:
        """기본 생성"""
        secrets = Secrets(mode=RunMode.DEVELOPMENT, session_secret_key="jwt_secret")

        assert secrets.mode == RunMode.DEVELOPMENT
        assert secrets.session_secret_key == "jwt_secret"
        assert secrets.session_ttl_sec == Defaults.SESSION_TTL_SEC
        assert secrets.cookie_secure is True
        assert secrets.google.enabled is False

    def test_frozen(self) -> None:
        """불변성 확인"""
        secrets = Secrets(mode=RunMode.DEVELOPMENT, session_secret_key="jwt")

        with pytest.raises(AttributeError):
            secrets.session_secret_key = "new_key"  # type: ignore


class TestGoogleConfig:
    """GoogleConfig 데이터클래스 테스트"""

    def test_enabled_requires_id_and_secret(self) -> None:
        """client_id와 client_secret이 모두 있어야 활성화"""
        assert GoogleConfig().enabled is False
        assert GoogleConfig(client_id="id").enabled is False
        assert GoogleConfig(client_id="id", client_secret="secret").enabled is True

    def test_default_redirect_uri(self) -> None:
        """기본 redirect URI"""
        assert GoogleConfig().redirect_uri == Defaults.GOOGLE_REDIRECT_URI


class TestLoadSecrets:
    """load_secrets 함수 테스트"""

    def test_load_development(self, temp_secrets_file: Path, temp_dir: Path) -> None:
        """Development 모드 로드"""
        secrets = load_secrets(temp_secrets_file)

        assert secrets.mode == RunMode.DEVELOPMENT
        assert secrets.session_secret_key == "test_session_secret_key_xyz"
        assert secrets.session_ttl_sec == 3600
        assert secrets.cookie_secure is False
        assert secrets.bcrypt_rounds == 4
        assert secrets.google.client_id == "test-client-id"
        assert secrets.google.enabled is True
        assert secrets.cors_origins == ("http://localhost:3000",)
        assert secrets.db_path == temp_dir / "fino_test.db"

    def test_load_production_defaults(self, temp_secrets_file_production: Path) -> None:
        """Production 모드 로드 (선택 섹션은 기본값)"""
        secrets = load_secrets(temp_secrets_file_production)

        assert secrets.mode == RunMode.PRODUCTION
        assert secrets.cookie_secure is True
        assert secrets.bcrypt_rounds == Defaults.BCRYPT_ROUNDS
        assert secrets.google.enabled is False
        assert secrets.db_path is None

    def test_file_not_found(self, temp_dir: Path) -> None:
        """파일 없음"""
        non_existent = temp_dir / "nonexistent.yaml"

        with pytest.raises(SecretsLoadError, match="찾을 수 없습니다"):
            load_secrets(non_existent)

    def test_invalid_mode(self, temp_secrets_file_invalid_mode: Path) -> None:
        """유효하지 않은 mode"""
        with pytest.raises(ValueError, match="유효하지 않은 mode"):
            load_secrets(temp_secrets_file_invalid_mode)

    def test_empty_file(self, temp_dir: Path) -> None:
        """빈 파일"""
        empty_file = temp_dir / "empty.yaml"
        empty_file.write_text("", encoding="utf-8")

        with pytest.raises(SecretsLoadError, match="비어 있습니다"):
            load_secrets(empty_file)

    def test_missing_mode(self, temp_dir: Path) -> None:
        """mode 필드 누락"""
        content = """
session:
  secret_key: "jwt"
"""
        file = temp_dir / "no_mode.yaml"
        file.write_text(content, encoding="utf-8")

        with pytest.raises(SecretsLoadError, match="'mode' 필드가 없습니다"):
            load_secrets(file)

    def test_missing_session_secret(self, temp_dir: Path) -> None:
        """session secret_key 누락"""
        content = """
mode: development
session:
  token_ttl_sec: 60
"""
        file = temp_dir / "no_session_secret.yaml"
        file.write_text(content, encoding="utf-8")

        with pytest.raises(SecretsLoadError, match="'secret_key'가 없습니다"):
            load_secrets(file)

    def test_bcrypt_rounds_out_of_range(self, temp_dir: Path) -> None:
        """bcrypt_rounds 범위 초과"""
        content = """
mode: development
session:
  secret_key: "jwt"
auth:
  bcrypt_rounds: 2
"""
        file = temp_dir / "bad_rounds.yaml"
        file.write_text(content, encoding="utf-8")

        with pytest.raises(SecretsLoadError, match="bcrypt_rounds"):
            load_secrets(file)

    def test_invalid_section_type(self, temp_dir: Path) -> None:
        """섹션이 dict가 아님"""
        content = """
mode: development
session: "not a mapping"
"""
        file = temp_dir / "bad_section.yaml"
        file.write_text(content, encoding="utf-8")

        with pytest.raises(SecretsLoadError, match="'session' 섹션"):
            load_secrets(file)

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        """잘못된 YAML 형식"""
        file = temp_dir / "invalid.yaml"
        file.write_text("invalid: yaml: content:", encoding="utf-8")

        with pytest.raises(SecretsLoadError, match="파싱 실패"):
            load_secrets(file)


class TestGetDbPath:
    """get_db_path 함수 테스트"""

    def test_development_db(self) -> None:
        """Development DB 경로"""
        secrets = Secrets(mode=RunMode.DEVELOPMENT, session_secret_key="jwt")

        db_path = get_db_path(secrets)

        assert db_path == Paths.DEV_DB
        assert isinstance(db_path, Path)

    def test_production_db(self) -> None:
        """Production DB 경로"""
        secrets = Secrets(mode=RunMode.PRODUCTION, session_secret_key="jwt")

        assert get_db_path(secrets) == Paths.PROD_DB

    def test_override(self, temp_dir: Path) -> None:
        """database.path 지정 시 우선"""
        secrets = Secrets(
            mode=RunMode.PRODUCTION,
            session_secret_key="jwt",
            db_path=temp_dir / "custom.db",
        )

        assert get_db_path(secrets) == temp_dir / "custom.db"


class TestSettings:
    """Settings 클래스 테스트"""

    def setup_method(self) -> None:
        """각 테스트 전에 싱글턴 초기화"""
        Settings.reset()

    def test_creation(self, temp_secrets_file: Path) -> None:
        """기본 생성"""
        settings = Settings(temp_secrets_file)

        assert settings.mode == RunMode.DEVELOPMENT
        assert settings.session_secret_key == "test_session_secret_key_xyz"

    def test_singleton(self, temp_secrets_file: Path) -> None:
        """싱글턴 확인"""
        settings1 = Settings(temp_secrets_file)
        settings2 = Settings()  # 경로 없이 호출

        assert settings1 is settings2

    def test_properties(self, temp_secrets_file: Path) -> None:
        """프로퍼티 확인"""
        settings = Settings(temp_secrets_file)

        assert isinstance(settings.mode, RunMode)
        assert isinstance(settings.session_secret_key, str)
        assert isinstance(settings.session_ttl_sec, int)
        assert isinstance(settings.cookie_secure, bool)
        assert isinstance(settings.bcrypt_rounds, int)
        assert isinstance(settings.google, GoogleConfig)
        assert isinstance(settings.cors_origins, list)
        assert isinstance(settings.db_path, Path)

    def test_reset(self, temp_secrets_file: Path) -> None:
        """reset 후 재생성"""
        settings1 = Settings(temp_secrets_file)
        Settings.reset()
        settings2 = Settings(temp_secrets_file)

        # reset 후에는 새 인스턴스
        assert settings1 is not settings2


class TestGetSettings:
    """get_settings 함수 테스트"""

    def setup_method(self) -> None:
        """각 테스트 전에 싱글턴 초기화"""
        Settings.reset()

    def test_returns_settings(self, temp_secrets_file: Path) -> None:
        """Settings 인스턴스 반환"""
        settings = get_settings(temp_secrets_file)

        assert isinstance(settings, Settings)
        assert settings.mode == RunMode.DEVELOPMENT

    def test_singleton_via_function(self, temp_secrets_file: Path) -> None:
        """함수를 통한 싱글턴 확인"""
        settings1 = get_settings(temp_secrets_file)
        settings2 = get_settings()

        assert settings1 is settings2
