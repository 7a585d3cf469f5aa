"""
Application Services.

역할:
- catalog: 페르소나 목록 → 표시용 엔트리 (우선순위 정렬)
- prompt: 페르소나 지시문 조립
- chat: 채팅 1턴 오케스트레이션 (Gemini 호출)
"""

from .catalog import CatalogService
from .chat import ChatService, parse_chat_request

__all__ = [
    "CatalogService",
    "ChatService",
    "parse_chat_request",
]
