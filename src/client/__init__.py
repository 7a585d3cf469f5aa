"""
Client layer: 猫チャット 클라이언트.

역할:
- api: 서버 호출 (httpx)
- session: 상태 머신 + 뷰 모델 (렌더링과 분리)
- controller: API + 세션 연결
- terminal: 터미널 front end
"""

from .api import CatChatAPI, ClientError
from .controller import ChatController
from .reply import RenderedReply, parse_reply
from .session import ChatSession, ChatState, PickerEntry, Sender, TranscriptEntry

__all__ = [
    "CatChatAPI",
    "ClientError",
    "ChatController",
    "RenderedReply",
    "parse_reply",
    "ChatSession",
    "ChatState",
    "PickerEntry",
    "Sender",
    "TranscriptEntry",
]
