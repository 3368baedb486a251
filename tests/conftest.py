"""
pytest 공통 fixture 정의

임시 디렉토리, secrets.yaml, 스키마가 초기화된 DB, 계좌/사용자 생성 헬퍼
"""

import tempfile
from pathlib import Path
from typing import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import Settings
from core.domain.models import Account
from core.storage.account_store import AccountStore

OWNER_ID = "owner-1"
OTHER_OWNER_ID = "owner-2"


@pytest.fixture(autouse=True)
def reset_settings() -> None:
    """각 테스트 전후 Settings 싱글턴 초기화"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_secrets_file(temp_dir: Path) -> Path:
    """테스트용 secrets.yaml 파일 생성"""
    secrets_content = f"""# 테스트용 secrets.yaml
mode: development

session:
  secret_key: "test_session_secret_key_xyz"
  token_ttl_sec: 3600
  cookie_secure: false

auth:
  bcrypt_rounds: 4

google:
  client_id: "test-client-id"
  client_secret: "test-client-secret"
  redirect_uri: "http://localhost:3000/google/callback"

web:
  cors_origins:
    - "http://localhost:3000"

database:
  path: "{(temp_dir / 'fino_test.db').as_posix()}"
"""
    secrets_path = temp_dir / "secrets.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path


@pytest.fixture
def temp_secrets_file_production(temp_dir: Path) -> Path:
    """테스트용 secrets.yaml 파일 생성 (production 모드, 최소 설정)"""
    secrets_content = """mode: production

session:
  secret_key: "prod_session_secret_key_xyz"
"""
    secrets_path = temp_dir / "secrets_prod.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path


@pytest.fixture
def temp_secrets_file_invalid_mode(temp_dir: Path) -> Path:
    """잘못된 모드의 secrets.yaml 파일 생성"""
    secrets_content = """mode: invalid_mode

session:
  secret_key: "session_secret"
"""
    secrets_path = temp_dir / "secrets_invalid.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path


# -------------------------------------------------------------------------
# DB
# -------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> AsyncGenerator[SQLiteAdapter, None]:
    """스키마가 초기화된 파일 DB (쓰기 가능)"""
    adapter = SQLiteAdapter(tmp_path / "ledger.db")
    await adapter.connect()
    await init_schema(adapter)
    yield adapter
    await adapter.close()


@pytest.fixture
def make_account(db: SQLiteAdapter) -> Callable[..., Awaitable[Account]]:
    """계좌 생성 헬퍼

    사용 예시:
    ```python
    account = await make_account("Wallet", opening_balance=1000)
    ```
    """

    async def _make(
        name: str = "Main Wallet",
        kind: str = "Wallet",
        opening_balance: int = 0,
        owner_id: str = OWNER_ID,
    ) -> Account:
        account = Account.create(owner_id, name, kind, opening_balance=opening_balance)
        async with db.transaction():
            await AccountStore(db).insert(account)
        return account

    return _make
