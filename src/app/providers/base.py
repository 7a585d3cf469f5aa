"""
AI Provider 추상 인터페이스.

- Provider 추상화로 모델 교체 가능
- 모델명은 config만 SSOT
- 대화 이력은 요청마다 클라이언트가 보낸 것을 그대로 시드로 사용
"""

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from src.domain.schemas import ConversationTurn


@dataclass
class GenerationParams:
    """
    생성 호출 파라미터 기록.

    응답 품질/길이에 영향을 주는 파라미터.
    """
    max_output_tokens: int | None = None
    temperature: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """None 제외 (API 기본값 사용)."""
        params = {
            "max_output_tokens": self.max_output_tokens,
            "temperature": self.temperature,
        }
        return {k: v for k, v in params.items() if v is not None}


def compute_hash(content: str) -> str:
    """SHA-256 해시 계산 (로그 상관관계용)."""
    return f"sha256:{hashlib.sha256(content.encode()).hexdigest()[:16]}"


# =============================================================================
# Provider Exceptions
# =============================================================================

class ProviderError(Exception):
    """Provider 관련 에러."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


# =============================================================================
# Abstract Provider
# =============================================================================

class ChatProvider(ABC):
    """
    대화형 생성 Provider 추상 인터페이스.

    역할: 이력 + 메시지 → 응답 텍스트 (상태 없음)
    """

    @abstractmethod
    async def send_chat(
        self,
        history: list[ConversationTurn],
        message: str,
    ) -> str:
        """
        이력으로 대화를 열고 메시지 1건 전송.

        Args:
            history: 이전 턴 (user/model 순서 그대로)
            message: 이번에 보낼 메시지 (지시문 + 질문)

        Returns:
            응답 텍스트 (가공 없음)

        Raises:
            ProviderError
        """
        ...
