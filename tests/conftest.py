"""
Pytest fixtures for the cat chat tests.

테스트 구성:
- 페르소나 레코드는 tmp_path에 생성 (data/ 원본은 건드리지 않음)
- Gemini 호출은 FakeChatProvider로 대체
"""

from collections.abc import Generator
from pathlib import Path

import pytest
import yaml
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.providers.base import ProviderError
from src.core.personas import PersonaStore
from tests.helpers import FakeChatProvider, build_app

# =============================================================================
# Sample Records
# =============================================================================

PINO_RECORD = """id: pino
name: ピノ
profileImage: images/pino/profile.jpg
gender: オス
age: 3歳
birthplace: 北海道
---
あなたは「ピノ」という白い子猫です。語尾に「にゃ」をつけます。
---
写真を求められたら [IMAGE: images/pino/happy.jpg] と書いてください。
"""

TETO_RECORD = """id: teto
name: テト
profileImage: images/teto/profile.jpg
gender: メス
age: 7歳
birthplace: 京都
---
あなたは「テト」という落ち着いた三毛猫です。
---
写真を求められたら [IMAGE: images/teto/sunny.jpg] と書いてください。
"""

# 3번째 세그먼트 없음
MIKE_RECORD = """id: mike
name: ミケ
profileImage: images/mike/profile.jpg
gender: メス
age: 5歳
birthplace: 大阪
---
あなたは「ミケ」という関西弁の猫です。
"""

# 우선순위 목록에 없는 猫
ZORRO_RECORD = """name: ゾロ
gender: オス
---
あなたは「ゾロ」という謎の猫です。
"""


# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Persona Fixtures
# =============================================================================


@pytest.fixture
def persona_dir(tmp_path: Path) -> Path:
    """
    페르소나 레코드 디렉토리.

    포함: pino, teto, mike (3번째 세그먼트 없음), zorro (우선순위 밖)
    """
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "pino.txt").write_text(PINO_RECORD, encoding="utf-8")
    (data_dir / "teto.txt").write_text(TETO_RECORD, encoding="utf-8")
    (data_dir / "mike.txt").write_text(MIKE_RECORD, encoding="utf-8")
    (data_dir / "zorro.txt").write_text(ZORRO_RECORD, encoding="utf-8")
    # 레코드가 아닌 파일은 무시되어야 함
    (data_dir / "README.md").write_text("not a persona", encoding="utf-8")
    return data_dir


@pytest.fixture
def persona_store(persona_dir: Path) -> PersonaStore:
    return PersonaStore(persona_dir)


@pytest.fixture
def test_config() -> dict:
    """테스트용 설정."""
    return {
        "ai": {"model": "gemini-test", "max_output_tokens": 1000, "timeout": 5.0},
        "personas": {"priority": ["pino", "teto", "mike", "kuro"]},
        "chat": {"background_knowledge": True, "max_history_turns": None},
    }


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def fake_provider() -> FakeChatProvider:
    return FakeChatProvider()


@pytest.fixture
def failing_provider() -> FakeChatProvider:
    return FakeChatProvider(
        error=ProviderError("GEMINI_UNAVAILABLE", "service unavailable")
    )


@pytest.fixture
def app(
    persona_store: PersonaStore,
    fake_provider: FakeChatProvider,
    test_config: dict,
) -> FastAPI:
    """테스트용 FastAPI 앱."""
    return build_app(persona_store, fake_provider, test_config)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """테스트 클라이언트."""
    with TestClient(app) as client:
        yield client
