"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uvicorn src.app.main:app --reload --port 10000
- 프로덕션: python -m src.app.main  (PORT 환경변수, 기본 10000)

환경변수 (.env 지원):
- GEMINI_API_KEY: 필수. 없으면 서버가 시작되지 않는다.
- PORT: 리슨 포트
"""

import logging
import os
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.app.providers.base import ProviderError
from src.app.providers.gemini import GeminiChatProvider
from src.app.routes import cats, chat
from src.core.logging import setup_logging
from src.core.personas import PersonaStore
from src.domain.constants import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_PORT,
    PERSONA_DATA_DIR,
)

# .env 파일 로드 (이미 설정된 환경변수는 덮어쓰지 않음)
load_dotenv()

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def resolve_data_dir(config: dict) -> Path:
    """페르소나 디렉토리 (상대경로는 프로젝트 루트 기준)."""
    data_dir = Path((config.get("personas") or {}).get("data_dir") or PERSONA_DATA_DIR)
    if not data_dir.is_absolute():
        data_dir = PROJECT_ROOT / data_dir
    return data_dir


def create_provider(config: dict) -> GeminiChatProvider:
    """
    config 기반 Gemini Provider 생성.

    Raises:
        ProviderError: GEMINI_API_KEY 없음 (fail-fast)
    """
    ai_config = config.get("ai", {}) or {}
    return GeminiChatProvider(
        model=ai_config.get("model", DEFAULT_GEMINI_MODEL),
        max_output_tokens=ai_config.get("max_output_tokens", DEFAULT_MAX_OUTPUT_TOKENS),
        temperature=ai_config.get("temperature"),
    )


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 로깅, 페르소나 저장소, Gemini Provider
    API 키가 없으면 여기서 예외 → 서버가 연결을 받지 않는다.
    """
    # Startup
    config = load_config()
    setup_logging(config)

    app.state.config = config
    app.state.persona_store = PersonaStore(resolve_data_dir(config))
    app.state.provider = create_provider(config)

    logger.info(
        f"Cat chat ready: data_dir={app.state.persona_store.data_dir}, "
        f"model={app.state.provider.model}"
    )

    yield

    # Shutdown
    # (리소스 정리 필요 시 여기에 추가)


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Cat Persona Chat",
    description="猫ペルソナと話せる AI チャット (Gemini)",
    version="0.1.0",
    lifespan=lifespan,
)

# Static files (CSS, JS)
static_dir = Path(__file__).parent / "static"
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=static_dir), name="static")

# 猫 이미지 (프로필, [IMAGE: ...] 마커)
images_dir = PROJECT_ROOT / "images"
if images_dir.exists():
    app.mount("/images", StaticFiles(directory=images_dir), name="images")


# =============================================================================
# Routes
# =============================================================================

# 페이지 라우트 (HTML)
app.include_router(chat.router, prefix="", tags=["Chat"])

# API 라우트
app.include_router(cats.api_router, prefix="", tags=["Cats API"])
app.include_router(chat.api_router, prefix="", tags=["Chat API"])


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================


def main() -> None:
    """python -m src.app.main 진입점."""
    import uvicorn

    config = load_config()
    setup_logging(config)

    # Fail-fast: 키가 없으면 리슨 전에 종료
    try:
        create_provider(config)
    except ProviderError as e:
        logger.error(f"Startup aborted: {e.message}")
        sys.exit(1)

    port = int(os.environ.get("PORT") or DEFAULT_PORT)
    host = (config.get("server") or {}).get("host", "0.0.0.0")
    logger.info(f"Starting server on port {port}")

    uvicorn.run("src.app.main:app", host=host, port=port)


if __name__ == "__main__":
    main()
