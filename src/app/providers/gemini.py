"""
Google Gemini Chat Provider.

예외 매핑 (재시도 없음, 모두 ProviderError로 변환):
- Unauthenticated, PermissionDenied → GEMINI_AUTH_FAILED
- ResourceExhausted → GEMINI_QUOTA_EXCEEDED
- ServiceUnavailable, InternalServerError, DeadlineExceeded → GEMINI_UNAVAILABLE
- InvalidArgument, NotFound → GEMINI_INVALID_REQUEST
- 차단/빈 응답 → GEMINI_EMPTY_RESPONSE
"""

import logging
import os
from typing import Any

import google.generativeai as genai
from google.api_core.exceptions import (
    DeadlineExceeded,
    InternalServerError,
    InvalidArgument,
    NotFound,
    PermissionDenied,
    ResourceExhausted,
    ServiceUnavailable,
    Unauthenticated,
)

from src.domain.constants import DEFAULT_GEMINI_MODEL, DEFAULT_MAX_OUTPUT_TOKENS
from src.domain.errors import ErrorCodes
from src.domain.schemas import ConversationTurn

from .base import ChatProvider, GenerationParams, ProviderError, compute_hash

logger = logging.getLogger(__name__)

# =============================================================================
# Exception Mapping
# =============================================================================

ERROR_CODE_MAP: tuple[tuple[tuple[type[Exception], ...], str], ...] = (
    ((Unauthenticated, PermissionDenied), ErrorCodes.GEMINI_AUTH_FAILED),
    ((ResourceExhausted,), ErrorCodes.GEMINI_QUOTA_EXCEEDED),
    (
        (ServiceUnavailable, InternalServerError, DeadlineExceeded),
        ErrorCodes.GEMINI_UNAVAILABLE,
    ),
    ((InvalidArgument, NotFound), ErrorCodes.GEMINI_INVALID_REQUEST),
)

# 로그용 설명 (클라이언트에는 노출하지 않음)
ERROR_DESCRIPTIONS = {
    ErrorCodes.GEMINI_AUTH_FAILED: "Gemini 인증 실패. GEMINI_API_KEY를 확인하세요.",
    ErrorCodes.GEMINI_QUOTA_EXCEEDED: "Gemini 사용량 한도 초과.",
    ErrorCodes.GEMINI_UNAVAILABLE: "Gemini 서비스를 일시적으로 사용할 수 없음.",
    ErrorCodes.GEMINI_INVALID_REQUEST: "요청 형식 또는 모델명이 올바르지 않음.",
    ErrorCodes.GEMINI_EMPTY_RESPONSE: "응답이 비어 있거나 안전 필터로 차단됨.",
    ErrorCodes.GENERATION_FAILED: "생성 중 알 수 없는 오류.",
}


def classify_error(error: Exception) -> str:
    """Google API 예외 → 에러 코드."""
    for exc_types, code in ERROR_CODE_MAP:
        if isinstance(error, exc_types):
            return code
    return ErrorCodes.GENERATION_FAILED


class GeminiChatProvider(ChatProvider):
    """
    Gemini Chat Provider.

    Usage:
        provider = GeminiChatProvider(model="gemini-1.5-flash")
        reply = await provider.send_chat(history, "質問: こんにちは")
    """

    def __init__(
        self,
        model: str = DEFAULT_GEMINI_MODEL,
        api_key: str | None = None,
        max_output_tokens: int | None = DEFAULT_MAX_OUTPUT_TOKENS,
        temperature: float | None = None,
    ):
        """
        Args:
            model: 모델 ID (config에서 주입)
            api_key: API 키 (환경변수 GEMINI_API_KEY 또는 GOOGLE_API_KEY 사용 가능)
            max_output_tokens: 응답 최대 토큰 수
            temperature: 샘플링 온도 (None이면 API 기본값)

        Raises:
            ProviderError: API 키가 없을 때 (fail-fast)
        """
        self.model = model
        # API 키 결정: 인자 > GEMINI_API_KEY > GOOGLE_API_KEY
        self.api_key = (
            api_key
            or os.environ.get("GEMINI_API_KEY")
            or os.environ.get("GOOGLE_API_KEY")
        )

        if not self.api_key:
            raise ProviderError(
                ErrorCodes.GEMINI_KEY_MISSING,
                "Gemini API 키가 없습니다. GEMINI_API_KEY 환경변수를 설정하세요.",
            )

        self.params = GenerationParams(
            max_output_tokens=max_output_tokens,
            temperature=temperature,
        )
        self._model: Any = None

    def _get_model(self) -> Any:
        """GenerativeModel (lazy init)."""
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model)
        return self._model

    async def send_chat(
        self,
        history: list[ConversationTurn],
        message: str,
    ) -> str:
        """
        이력으로 채팅을 열고 메시지 전송.

        Raises:
            ProviderError: API 호출/응답 실패
        """
        prompt_hash = compute_hash(message)
        logger.debug(
            f"Gemini send_chat: model={self.model}, "
            f"history={len(history)}, prompt_hash={prompt_hash}"
        )

        try:
            chat = self._get_model().start_chat(
                history=[turn.to_gemini() for turn in history],
            )
            response = await chat.send_message_async(
                message,
                generation_config=self.params.to_dict(),
            )
        except Exception as e:
            code = classify_error(e)
            logger.error(
                f"Gemini call failed ({code}): {e} "
                f"[model={self.model}, prompt_hash={prompt_hash}]",
                exc_info=True,
            )
            raise ProviderError(
                code,
                ERROR_DESCRIPTIONS[code],
                model=self.model,
                prompt_hash=prompt_hash,
            ) from e

        return self._extract_text(response, prompt_hash)

    def _extract_text(self, response: Any, prompt_hash: str) -> str:
        """
        응답 텍스트 추출.

        안전 필터로 후보가 없으면 response.text가 ValueError를 던진다.
        """
        try:
            text = response.text
        except ValueError as e:
            logger.error(
                f"Gemini returned no text: {e} [prompt_hash={prompt_hash}]"
            )
            raise ProviderError(
                ErrorCodes.GEMINI_EMPTY_RESPONSE,
                ERROR_DESCRIPTIONS[ErrorCodes.GEMINI_EMPTY_RESPONSE],
                model=self.model,
                prompt_hash=prompt_hash,
            ) from e

        if not text:
            raise ProviderError(
                ErrorCodes.GEMINI_EMPTY_RESPONSE,
                ERROR_DESCRIPTIONS[ErrorCodes.GEMINI_EMPTY_RESPONSE],
                model=self.model,
                prompt_hash=prompt_hash,
            )
        return text
