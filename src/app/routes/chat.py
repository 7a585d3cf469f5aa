"""
Chat Routes: 猫とのチャット (메인 기능).

- GET /      → 채팅 화면 (Jinja2)
- POST /chat → {catId, question, history} → {reply}

응답 코드:
- 400: 필수 필드 누락 / 본문 형식 오류 (외부 호출 없음)
- 404: 페르소나 없음
- 500: 파일/외부 API 실패 (상세는 로그에만)
"""

import json
import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from src.app.providers.base import ProviderError
from src.app.services.chat import ChatService, parse_chat_request
from src.domain.errors import (
    ChatRequestError,
    ErrorCodes,
    PersonaNotFoundError,
    PersonaStoreError,
)

logger = logging.getLogger(__name__)

# Jinja2 템플릿 설정
_templates_dir = Path(__file__).parent.parent / "templates"
jinja_templates = (
    Jinja2Templates(directory=_templates_dir) if _templates_dir.exists() else None
)

# Routers
router = APIRouter()  # HTML pages
api_router = APIRouter()  # API endpoints

# 클라이언트용 에러 메시지 (내부 상세 미포함)
ERROR_REQUIRED_FIELDS = "猫のIDと質問は必須です。"
ERROR_INVALID_BODY = "リクエストの形式が正しくありません。"
ERROR_PERSONA_NOT_FOUND = "指定された猫が見つかりません。"
ERROR_INTERNAL = "AIとの通信中にエラーが発生しました。"


def error_response(status_code: int, message: str) -> JSONResponse:
    """{error} 응답."""
    return JSONResponse(status_code=status_code, content={"error": message})


def get_chat_service(request: Request) -> ChatService:
    """app.state 기반 ChatService 생성."""
    return ChatService(
        store=request.app.state.persona_store,
        provider=request.app.state.provider,
        config=request.app.state.config,
    )


# =============================================================================
# Page Routes (HTML)
# =============================================================================


@router.get("/", response_class=HTMLResponse)
async def chat_page(request: Request) -> HTMLResponse:
    """
    채팅 화면.

    猫 목록은 페이지 로드 후 JS가 GET /cats 로 가져온다.
    """
    if jinja_templates:
        return jinja_templates.TemplateResponse(request, "index.html", {})

    # Fallback: 템플릿이 없는 경우 최소 HTML
    return HTMLResponse(
        content="""
<!DOCTYPE html>
<html lang="ja">
<head>
    <meta charset="UTF-8">
    <title>猫AIチャット</title>
</head>
<body>
    <p>猫AIチャット: テンプレートが見つかりません。</p>
</body>
</html>
    """
    )


# =============================================================================
# API Routes
# =============================================================================


@api_router.post("/chat")
async def chat(request: Request) -> JSONResponse:
    """
    채팅 메시지 1건 처리.

    Body:
        {"catId": "pino", "question": "...", "history": [{"role": "user", "text": "..."}]}

    Returns:
        {"reply": "..."} 또는 {"error": "..."}
    """
    # 1) 본문 파싱
    try:
        body: Any = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return error_response(400, ERROR_INVALID_BODY)
    if not isinstance(body, dict):
        return error_response(400, ERROR_INVALID_BODY)

    # 2) 필수 필드 검증 (실패 시 외부 호출 없음)
    try:
        chat_request = parse_chat_request(
            body.get("catId"),
            body.get("question"),
            body.get("history"),
        )
    except ChatRequestError as e:
        logger.info(f"Rejected chat request: {e}")
        if e.code == ErrorCodes.MISSING_REQUIRED_FIELD:
            return error_response(400, ERROR_REQUIRED_FIELDS)
        return error_response(400, ERROR_INVALID_BODY)

    # 3) 생성
    service = get_chat_service(request)
    try:
        reply = await service.reply(chat_request)
    except PersonaNotFoundError as e:
        logger.warning(f"Persona not found: {e}")
        return error_response(404, ERROR_PERSONA_NOT_FOUND)
    except (PersonaStoreError, ProviderError) as e:
        logger.error(f"Chat failed: {e}", exc_info=True)
        return error_response(500, ERROR_INTERNAL)
    except Exception as e:
        # 보안: raw 에러는 로그에만
        logger.error(f"Unexpected chat failure: {e}", exc_info=True)
        return error_response(500, ERROR_INTERNAL)

    return JSONResponse(content={"reply": reply})
