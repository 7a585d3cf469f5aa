"""
Chat Service: (catId, question, history) → 응답 텍스트.

흐름:
1. 페르소나 로드 (없으면 PersonaNotFoundError)
2. 배경 지식 조립 (설정 시)
3. 지시문 + 질문 조립
4. 이력으로 Gemini 채팅 시드 → 전송
5. 응답 텍스트 그대로 반환

서버는 요청 간 상태를 갖지 않는다. 이력은 전부 클라이언트가 보낸다.
재시도 없음.
"""

import asyncio
import logging
from typing import Any

from src.app.providers.base import ChatProvider, ProviderError, compute_hash
from src.app.services.prompt import (
    build_background_knowledge,
    build_instruction,
    compose_message,
)
from src.core.personas import PersonaStore
from src.domain.constants import DEFAULT_GENERATION_TIMEOUT
from src.domain.errors import ChatRequestError, ErrorCodes, PersonaStoreError
from src.domain.schemas import ChatRequest, ConversationTurn

logger = logging.getLogger(__name__)


# =============================================================================
# Request Parsing
# =============================================================================


def parse_history(raw: Any) -> list[ConversationTurn]:
    """
    요청 history → ConversationTurn 목록.

    None은 빈 이력. 리스트가 아니거나 턴 형식이 틀리면 ChatRequestError.
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ChatRequestError(
            ErrorCodes.INVALID_HISTORY,
            "history must be a list",
        )

    turns = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ChatRequestError(
                ErrorCodes.INVALID_HISTORY,
                "history item must be an object",
                index=index,
            )
        try:
            turns.append(ConversationTurn.from_dict(item))
        except ValueError as e:
            raise ChatRequestError(
                ErrorCodes.INVALID_HISTORY,
                "invalid history turn",
                index=index,
                error=str(e),
            ) from e
    return turns


def parse_chat_request(
    cat_id: Any,
    question: Any,
    history: Any,
) -> ChatRequest:
    """
    요청 본문 검증.

    Raises:
        ChatRequestError: catId/question 누락(빈 문자열 포함) 또는 history 형식 오류
    """
    missing = [
        name
        for name, value in (("catId", cat_id), ("question", question))
        if not isinstance(value, str) or not value.strip()
    ]
    if missing:
        raise ChatRequestError(
            ErrorCodes.MISSING_REQUIRED_FIELD,
            "catId and question are required",
            missing=missing,
        )

    return ChatRequest(
        cat_id=cat_id.strip(),
        question=question,
        history=parse_history(history),
    )


# =============================================================================
# Service
# =============================================================================


class ChatService:
    """
    채팅 오케스트레이션 서비스.

    Usage:
        service = ChatService(store, provider, config)
        reply = await service.reply(ChatRequest("pino", "こんにちは"))
    """

    def __init__(
        self,
        store: PersonaStore,
        provider: ChatProvider,
        config: dict | None = None,
    ):
        """
        Args:
            store: 페르소나 저장소
            provider: 생성 Provider
            config: 전체 설정 (chat.*, ai.timeout 사용)
        """
        self.store = store
        self.provider = provider
        config = config or {}

        chat_config = config.get("chat", {}) or {}
        self.background_knowledge = bool(chat_config.get("background_knowledge", True))
        self.max_history_turns: int | None = chat_config.get("max_history_turns")

        ai_config = config.get("ai", {}) or {}
        self.timeout: float | None = ai_config.get("timeout", DEFAULT_GENERATION_TIMEOUT)

    def build_message(self, request: ChatRequest) -> str:
        """
        전송 메시지 조립.

        Raises:
            PersonaNotFoundError: 페르소나 없음
            PersonaStoreError: 레코드 읽기 실패
        """
        persona = self.store.get(request.cat_id)

        background = ""
        if self.background_knowledge:
            background = self._load_background(request.cat_id)

        instruction = build_instruction(persona, background)
        return compose_message(instruction, request.question)

    def _load_background(self, cat_id: str) -> str:
        """다른 페르소나 요약. 읽기 실패 시 배경 지식 없이 진행."""
        try:
            personas = self.store.load_all()
        except PersonaStoreError as e:
            logger.warning(f"Background knowledge skipped: {e}")
            return ""
        return build_background_knowledge(personas, exclude_id=cat_id)

    def trim_history(self, history: list[ConversationTurn]) -> list[ConversationTurn]:
        """최근 N턴만 유지 (max_history_turns 미설정이면 전체)."""
        if not self.max_history_turns or self.max_history_turns <= 0:
            return list(history)
        return list(history[-self.max_history_turns:])

    async def reply(self, request: ChatRequest) -> str:
        """
        채팅 1턴 처리.

        Returns:
            생성된 응답 텍스트 (가공 없음)

        Raises:
            PersonaNotFoundError, PersonaStoreError, ProviderError
        """
        message = self.build_message(request)
        history = self.trim_history(request.history)

        logger.info(
            f"Chat request: cat_id={request.cat_id}, "
            f"history={len(history)}/{len(request.history)}, "
            f"prompt_hash={compute_hash(message)}"
        )

        try:
            if self.timeout:
                return await asyncio.wait_for(
                    self.provider.send_chat(history, message),
                    timeout=self.timeout,
                )
            return await self.provider.send_chat(history, message)
        except TimeoutError as e:
            raise ProviderError(
                ErrorCodes.GENERATION_TIMEOUT,
                "외부 AI 서비스 응답 시간 초과",
                cat_id=request.cat_id,
                timeout=self.timeout,
            ) from e
